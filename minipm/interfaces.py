"""
Interfaces for the registry and archive collaborators.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .models import PackageMetadata


class RegistryClient(Protocol):
    """Fetch package metadata and tarballs from a registry."""

    def fetch_package_metadata(self, package_name: str) -> PackageMetadata:
        ...

    def download_tarball(self, tarball_url: str, destination: Path) -> Path:
        ...


class ArchiveExtractor(Protocol):
    """Unpack a downloaded package archive into a directory."""

    def extract(self, archive_path: Path, destination: Path) -> None:
        ...
