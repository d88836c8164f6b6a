"""
Recursive package installer.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from .archive import TarballExtractor
from .errors import ExtractionError, RegistryError, ResolutionError
from .installed import InstalledSet
from .interfaces import ArchiveExtractor, RegistryClient
from .models import (
    LATEST,
    DependencySpec,
    InstallEvent,
    InstallOutcome,
    PackageMetadata,
)
from .registry import DEFAULT_REGISTRY_URL, NpmRegistryClient
from .versioning import compare_versions, resolve_version, satisfies


logger = logging.getLogger(__name__)

# Worklist actions.
_REQUEST = "request"
_DRAINED = "drained"


@dataclass
class InstallerConfig:
    """Settings for one installer."""

    install_root: Path = Path("node_modules")
    registry_url: str = DEFAULT_REGISTRY_URL
    timeout: Optional[float] = None
    continue_on_error: bool = False
    show_progress: bool = True


@dataclass
class InstallContext:
    """State of one install run, threaded through every request."""

    installed: InstalledSet = field(default_factory=InstalledSet)
    in_flight: List[str] = field(default_factory=list)
    events: List[InstallEvent] = field(default_factory=list)

    @property
    def failed(self) -> List[InstallEvent]:
        return [e for e in self.events if e.outcome is InstallOutcome.FAILED]

    def log_event(self, event: InstallEvent) -> None:
        self.events.append(event)


class PackageInstaller:
    """Resolve, download and extract packages and their dependencies.

    Requests are processed strictly one at a time. A package's dependency
    subtree is drained before its next sibling is looked at, which gives every
    installed-set decision a total order.
    """

    def __init__(
        self,
        config: Optional[InstallerConfig] = None,
        registry: Optional[RegistryClient] = None,
        extractor: Optional[ArchiveExtractor] = None,
    ) -> None:
        self.config = config or InstallerConfig()
        self.install_root = Path(self.config.install_root)
        self.registry = registry or NpmRegistryClient(
            self.config.registry_url,
            timeout=self.config.timeout,
            show_progress=self.config.show_progress,
        )
        self.extractor = extractor or TarballExtractor()

    def install_all(
        self,
        dependencies: Mapping[str, str],
        context: Optional[InstallContext] = None,
    ) -> InstallContext:
        """Install a dependency map and its transitive closure.

        Args:
            dependencies: Package name to version range
            context: Existing run state; a fresh one is created if omitted

        Returns:
            The run context holding the installed set and event log
        """
        if context is None:
            context = InstallContext()

        stack: List[Tuple[str, object]] = []
        self._push_dependencies(stack, dependencies)

        while stack:
            action, item = stack.pop()
            if action == _DRAINED:
                context.in_flight.remove(item)
                logger.debug("Finished dependencies of %s", item)
                continue

            deps = self._install_or_skip(item, context)
            if deps is None:
                continue
            context.in_flight.append(item.name)
            stack.append((_DRAINED, item.name))
            self._push_dependencies(stack, deps)

        return context

    def install_package(
        self, spec: DependencySpec, context: InstallContext
    ) -> Optional[Dict[str, str]]:
        """Process a single request.

        Returns:
            The installed version's dependency map, or None if the request
            was skipped.
        """
        metadata = self.registry.fetch_package_metadata(spec.name)
        version_range = self._effective_range(spec, metadata)
        resolved = resolve_version(metadata.versions.keys(), version_range, spec.name)

        existing = context.installed.get(spec.name)
        previous = None
        if existing is not None:
            if existing.requested == spec.version_range or satisfies(existing.version, version_range):
                logger.info("Already installed %s@%s.", spec.name, existing.version)
                context.log_event(InstallEvent(
                    spec.name, spec.version_range, resolved,
                    InstallOutcome.ALREADY_SATISFIED, previous=existing.version,
                ))
                return None
            if spec.name in context.in_flight:
                logger.warning(
                    "Warning: dependency cycle on %s; keeping %s@%s and skipping %s@%s.",
                    spec.name, spec.name, existing.version, spec.name, resolved,
                )
                context.log_event(InstallEvent(
                    spec.name, spec.version_range, resolved,
                    InstallOutcome.CYCLE, previous=existing.version,
                ))
                return None
            if compare_versions(resolved, existing.version) < 0:
                logger.warning(
                    "Warning: the more recent %s@%s is already installed; skipping %s@%s.",
                    spec.name, existing.version, spec.name, resolved,
                )
                context.log_event(InstallEvent(
                    spec.name, spec.version_range, resolved,
                    InstallOutcome.NEWER_INSTALLED, previous=existing.version,
                ))
                return None
            logger.warning(
                "Warning: overwriting %s@%s with %s@%s.",
                spec.name, existing.version, spec.name, resolved,
            )
            previous = existing.version

        record = metadata.versions[resolved]
        package_dir = self.package_dir(spec.name)
        self._download_and_extract(spec.name, resolved, record.tarball_url, package_dir)

        context.installed.record(spec.name, spec.version_range, resolved)
        logger.info("Installed %s@%s", spec.name, resolved)
        outcome = InstallOutcome.INSTALLED if previous is None else InstallOutcome.OVERWRITTEN
        context.log_event(InstallEvent(
            spec.name, spec.version_range, resolved, outcome, previous=previous,
        ))
        return dict(record.dependencies)

    def package_dir(self, name: str) -> Path:
        return self.install_root / name

    def _install_or_skip(
        self, spec: DependencySpec, context: InstallContext
    ) -> Optional[Dict[str, str]]:
        try:
            return self.install_package(spec, context)
        except ResolutionError:
            raise
        except (RegistryError, ExtractionError) as e:
            if not self.config.continue_on_error:
                raise
            logger.error("Failed to install %s: %s", spec, e)
            context.log_event(InstallEvent(
                spec.name, spec.version_range, None, InstallOutcome.FAILED, detail=str(e),
            ))
            return None

    def _effective_range(self, spec: DependencySpec, metadata: PackageMetadata) -> str:
        if spec.version_range.strip() != LATEST:
            return spec.version_range
        if not metadata.dist_tag_latest:
            raise ResolutionError(spec.name, spec.version_range, "registry has no latest tag")
        return metadata.dist_tag_latest

    def _download_and_extract(
        self, name: str, version: str, tarball_url: str, package_dir: Path
    ) -> None:
        stem = f".{name.replace('/', '-')}-{version}"
        archive_path = self.install_root / f"{stem}.tgz"
        staging_dir = self.install_root / f"{stem}.staging"
        try:
            self.registry.download_tarball(tarball_url, archive_path)
            self.extractor.extract(archive_path, staging_dir)
            self._replace_package_dir(staging_dir, package_dir)
        finally:
            # Leave nothing behind whether or not extraction worked.
            if archive_path.exists():
                archive_path.unlink()
            if staging_dir.exists():
                shutil.rmtree(staging_dir, ignore_errors=True)

    @staticmethod
    def _replace_package_dir(staging_dir: Path, package_dir: Path) -> None:
        # The old files stay in place until the new ones are fully unpacked.
        try:
            if package_dir.exists():
                shutil.rmtree(package_dir)
            package_dir.parent.mkdir(parents=True, exist_ok=True)
            staging_dir.rename(package_dir)
        except OSError as e:
            raise ExtractionError(f"Error moving package into {package_dir}: {e}") from e

    @staticmethod
    def _push_dependencies(
        stack: List[Tuple[str, object]], dependencies: Mapping[str, str]
    ) -> None:
        # Reversed so the first declared dependency is popped first.
        for name, version_range in reversed(list(dependencies.items())):
            stack.append((_REQUEST, DependencySpec(name, str(version_range))))
