"""
Semantic version helpers with npm range semantics.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

import semantic_version

from .errors import ResolutionError


logger = logging.getLogger(__name__)


def version_key(value: str) -> Optional[semantic_version.Version]:
    """Parse a registry version string, or return None if it is not semver.

    npm tolerates a leading ``v`` or ``=``, so we do too.
    """
    if not value:
        return None
    text = value.strip().lstrip("=v").strip()
    try:
        return semantic_version.Version(text)
    except ValueError:
        return None


def parse_range(version_range: str) -> semantic_version.NpmSpec:
    """Parse an npm range expression. Raises ValueError if it is invalid."""
    text = (version_range or "").strip()
    if not text:
        text = "*"
    return semantic_version.NpmSpec(text)


def satisfies(version: str, version_range: str) -> bool:
    """Return True if ``version`` falls within ``version_range``."""
    parsed = version_key(version)
    if parsed is None:
        return False
    try:
        spec = parse_range(version_range)
    except ValueError:
        return False
    return spec.match(parsed)


def compare_versions(left: str, right: str) -> int:
    """Compare two versions by semver precedence: -1, 0 or 1."""
    left_key = version_key(left)
    right_key = version_key(right)
    if left_key is None or right_key is None:
        raise ValueError(f"Cannot compare {left!r} with {right!r}")
    left_key = left_key.truncate("prerelease")
    right_key = right_key.truncate("prerelease")
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0


def resolve_version(available: Iterable[str], version_range: str, name: str = "") -> str:
    """Return the highest version in ``available`` that satisfies the range.

    The registry's own spelling of the chosen version is returned, so it can
    be used as a key into the packument's ``versions`` map.
    """
    try:
        spec = parse_range(version_range)
    except ValueError as e:
        raise ResolutionError(name, version_range, f"invalid range ({e})") from e

    candidates: Dict[semantic_version.Version, str] = {}
    for raw in available:
        parsed = version_key(raw)
        if parsed is None:
            logger.debug("Ignoring non-semver version %r of %s", raw, name)
            continue
        candidates.setdefault(parsed, raw)

    best = spec.select(candidates)
    if best is None:
        raise ResolutionError(name, version_range)
    return candidates[best]
