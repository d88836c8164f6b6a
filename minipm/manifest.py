"""
Reading and updating the project manifest (package.json).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from .errors import ManifestError, ManifestMissingError
from .models import LATEST, DependencySpec


logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"


def parse_package_argument(value: str) -> DependencySpec:
    """Split ``name[@range]`` into a dependency spec.

    A leading ``@`` belongs to a scoped name (``@scope/pkg@^1.0.0``).
    A missing range means ``latest``.
    """
    text = (value or "").strip()
    at = text.find("@", 1)
    if at == -1:
        name, version_range = text, ""
    else:
        name, version_range = text[:at], text[at + 1:]
    name = name.strip()
    if not name:
        raise ValueError(f"Invalid package argument: {value!r}")
    return DependencySpec(name, version_range.strip() or LATEST)


class Manifest:
    """A package.json file on disk."""

    def __init__(self, path: Path, data: Dict[str, Any]) -> None:
        self.path = Path(path)
        self.data = data

    @classmethod
    def load(cls, path: Path) -> "Manifest":
        path = Path(path)
        if not path.exists():
            raise ManifestMissingError(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ManifestError(f"Invalid JSON in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ManifestError(f"{path} must contain a JSON object")
        deps = data.get('dependencies')
        if deps is not None and not isinstance(deps, dict):
            raise ManifestError(f"'dependencies' in {path} must be an object")
        return cls(path, data)

    @property
    def dependencies(self) -> Dict[str, str]:
        return dict(self.data.get('dependencies') or {})

    def add(self, spec: DependencySpec) -> None:
        """Declare a dependency, replacing any earlier entry for the name."""
        deps = self.data.setdefault('dependencies', {})
        deps[spec.name] = spec.version_range
        logger.debug("Set %s to %s in %s", spec.name, spec.version_range, self.path)

    def save(self) -> Path:
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(self.data, f, indent=2)
            f.write("\n")
        return self.path
