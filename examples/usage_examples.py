#!/usr/bin/env python3
"""
Example script showing how to use minipm from Python.
"""

import json
import logging
from pathlib import Path

from minipm.installer import InstallerConfig, PackageInstaller
from minipm.manifest import Manifest, parse_package_argument
from minipm.reporting import export_install_report, print_summary


def example_add_dependency(project_dir: Path):
    """Example: Declare a dependency the way `minipm add` does."""
    print("="*60)
    print("Example 1: Add a dependency")
    print("="*60)

    manifest_path = project_dir / "package.json"
    if not manifest_path.exists():
        manifest_path.write_text(json.dumps({"name": "demo", "dependencies": {}}, indent=2))

    manifest = Manifest.load(manifest_path)
    manifest.add(parse_package_argument("left-pad@^1.0.0"))
    manifest.save()

    print(f"\nDependencies: {manifest.dependencies}")


def example_install(project_dir: Path):
    """Example: Install everything the manifest declares."""
    print("\n" + "="*60)
    print("Example 2: Install")
    print("="*60)

    manifest = Manifest.load(project_dir / "package.json")
    installer = PackageInstaller(InstallerConfig(
        install_root=project_dir / "node_modules",
        timeout=30,
    ))

    context = installer.install_all(manifest.dependencies)
    print_summary(context)

    for entry in context.installed:
        print(f"{entry.name}: requested {entry.requested}, installed {entry.version}")


def example_install_with_report(project_dir: Path):
    """Example: Keep going past download failures and write a CSV report."""
    print("\n" + "="*60)
    print("Example 3: Install with report")
    print("="*60)

    manifest = Manifest.load(project_dir / "package.json")
    installer = PackageInstaller(InstallerConfig(
        install_root=project_dir / "node_modules",
        continue_on_error=True,
    ))

    context = installer.install_all(manifest.dependencies)
    report = export_install_report(context, project_dir / "install_report.csv")

    print(f"\nReport saved to: {report}")
    print(f"Failed packages: {[e.name for e in context.failed]}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    project = Path("./output/demo-project")
    project.mkdir(parents=True, exist_ok=True)

    print("\n" + "="*60)
    print("MINIPM USAGE EXAMPLES")
    print("="*60)

    example_add_dependency(project)
    example_install(project)
    example_install_with_report(project)

    print("\n" + "="*60)
    print("Examples complete!")
    print("="*60)
