"""
Exception hierarchy for minipm.
"""

from __future__ import annotations


class MinipmError(Exception):
    """Base class for all minipm failures."""


class ManifestError(MinipmError):
    """The manifest exists but cannot be used."""


class ManifestMissingError(ManifestError):
    """No manifest file in the project directory."""

    def __init__(self, path) -> None:
        super().__init__(f"{path.name} not found in {path.parent}")
        self.path = path


class ResolutionError(MinipmError):
    """No published version satisfies a requested range."""

    def __init__(self, name: str, version_range: str, reason: str = "") -> None:
        message = f"No matching version found for {name}@{version_range}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.name = name
        self.version_range = version_range


class RegistryError(MinipmError):
    """Fetching metadata or a tarball from the registry failed."""


class ExtractionError(MinipmError):
    """A downloaded tarball could not be unpacked."""
