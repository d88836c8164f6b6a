"""
Run-scoped record of accepted installations.
"""

from __future__ import annotations

from typing import Dict, Iterator, Optional

from .models import InstalledEntry


class InstalledSet:
    """Which version of each package name the current run has placed on disk.

    Holds at most one entry per name. Lives for one install run only.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, InstalledEntry] = {}

    def get(self, name: str) -> Optional[InstalledEntry]:
        return self._entries.get(name)

    def record(self, name: str, requested: str, version: str) -> InstalledEntry:
        entry = InstalledEntry(name=name, requested=requested, version=version)
        self._entries[name] = entry
        return entry

    def as_dict(self) -> Dict[str, str]:
        """Name to the range string that was requested."""
        return {name: entry.requested for name, entry in self._entries.items()}

    def versions(self) -> Dict[str, str]:
        """Name to the concrete version on disk."""
        return {name: entry.version for name, entry in self._entries.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[InstalledEntry]:
        return iter(list(self._entries.values()))
