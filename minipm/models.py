"""
Core data models for the installer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


LATEST = "latest"


@dataclass(frozen=True)
class DependencySpec:
    """A dependency as declared by a manifest or a package version."""

    name: str
    version_range: str

    def __str__(self) -> str:
        return f"{self.name}@{self.version_range}"


@dataclass(frozen=True)
class VersionRecord:
    """Registry data for one published version."""

    version: str
    tarball_url: str
    dependencies: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PackageMetadata:
    """Published metadata for a package name."""

    name: str
    dist_tag_latest: Optional[str]
    versions: Dict[str, VersionRecord]

    @classmethod
    def from_registry(cls, name: str, payload: Dict[str, Any]) -> "PackageMetadata":
        """Build metadata from an npm registry packument."""
        versions = {}
        for ver, ver_data in (payload.get('versions') or {}).items():
            if not isinstance(ver_data, dict):
                continue
            tarball = (ver_data.get('dist') or {}).get('tarball')
            if not tarball:
                continue
            versions[ver] = VersionRecord(
                version=ver,
                tarball_url=tarball,
                dependencies=dict(ver_data.get('dependencies') or {}),
            )
        latest = (payload.get('dist-tags') or {}).get('latest')
        return cls(name=name, dist_tag_latest=latest, versions=versions)


@dataclass(frozen=True)
class InstalledEntry:
    """A package accepted into the installed set during a run."""

    name: str
    requested: str
    version: str


class InstallOutcome(Enum):
    """How a single install request ended."""
    INSTALLED = "installed"
    OVERWRITTEN = "overwritten"
    ALREADY_SATISFIED = "already_satisfied"
    NEWER_INSTALLED = "newer_installed"
    CYCLE = "cycle"
    FAILED = "failed"


@dataclass(frozen=True)
class InstallEvent:
    """Record of one processed request."""

    name: str
    requested: str
    resolved: Optional[str]
    outcome: InstallOutcome
    previous: Optional[str] = None
    detail: Optional[str] = None
