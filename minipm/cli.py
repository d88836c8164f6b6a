"""
Command-line interface for minipm.
"""

import argparse
import logging
import sys
from pathlib import Path

from .errors import MinipmError, ManifestError
from .installer import InstallerConfig, PackageInstaller
from .manifest import MANIFEST_NAME, Manifest, parse_package_argument
from .registry import DEFAULT_REGISTRY_URL
from .reporting import export_install_report, print_summary, save_installed_json


logger = logging.getLogger(__name__)

USAGE = """Usage:
  add <package_name>[@<range>] - Adds the dependency to the "dependencies" object in package.json
  install - Downloads all of the packages that are specified in package.json"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minipm",
        description="A minimal npm-style package installer",
        epilog=USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("command", nargs="?", help="add or install")
    parser.add_argument("package", nargs="?", help="Package for add, as name[@range]")

    parser.add_argument(
        "--prefix",
        default=".",
        help="Project directory containing package.json. Default: current directory"
    )

    parser.add_argument(
        "--registry",
        default=DEFAULT_REGISTRY_URL,
        help=f"Registry base URL. Default: {DEFAULT_REGISTRY_URL}"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Network timeout in seconds. Default: wait indefinitely"
    )

    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Log download and extraction failures and keep installing other packages"
    )

    parser.add_argument(
        "--report",
        default=None,
        help="Write a CSV report of every install decision to this path"
    )

    parser.add_argument(
        "--installed-json",
        default=None,
        help="Write the installed package map as JSON to this path"
    )

    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable download progress bars"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    return parser


def cmd_add(args) -> int:
    manifest_path = Path(args.prefix) / MANIFEST_NAME
    if not args.package:
        print("Error: add requires a package name.", file=sys.stderr)
        return 1
    try:
        spec = parse_package_argument(args.package)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    manifest = Manifest.load(manifest_path)
    manifest.add(spec)
    manifest.save()
    print(f"Added {args.package} to dependencies.")
    return 0


def cmd_install(args) -> int:
    project_dir = Path(args.prefix)
    manifest = Manifest.load(project_dir / MANIFEST_NAME)

    config = InstallerConfig(
        install_root=project_dir / "node_modules",
        registry_url=args.registry,
        timeout=args.timeout,
        continue_on_error=args.continue_on_error,
        show_progress=not args.no_progress,
    )
    installer = PackageInstaller(config)
    context = installer.install_all(manifest.dependencies)
    print_summary(context)

    if args.report:
        report_file = export_install_report(context, Path(args.report))
        print(f"Report saved to: {report_file}")
    if args.installed_json:
        json_file = save_installed_json(context, Path(args.installed_json))
        print(f"Installed packages saved to: {json_file}")

    if context.failed:
        print(f"{len(context.failed)} package(s) failed to install.", file=sys.stderr)
        return 1
    print("All packages installed.")
    return 0


COMMANDS = {
    "add": cmd_add,
    "install": cmd_install,
}


def main(argv=None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    command = COMMANDS.get(args.command)
    if command is None:
        print(USAGE)
        return 0

    try:
        return command(args)
    except ManifestError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except MinipmError as e:
        print(f"\nError during {args.command}: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
