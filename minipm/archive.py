"""
Tarball extraction for registry packages.
"""

from __future__ import annotations

import logging
import tarfile
from pathlib import Path, PurePosixPath
from typing import List, Optional

from .errors import ExtractionError


logger = logging.getLogger(__name__)


def strip_path(name: str, components: int) -> Optional[str]:
    """Drop the first ``components`` parts of an archive member path.

    Returns None for members that disappear entirely (the wrapper directory
    itself) or that would escape the destination.
    """
    parts = [p for p in PurePosixPath(name).parts if p not in ('', '.')]
    if parts and parts[0] == '/':
        return None
    if '..' in parts:
        return None
    remaining = parts[components:]
    if not remaining:
        return None
    return '/'.join(remaining)


class TarballExtractor:
    """Extract gzip tarballs, stripping the wrapper directory npm adds."""

    def __init__(self, strip_components: int = 1) -> None:
        self.strip_components = strip_components

    def extract(self, archive_path: Path, destination: Path) -> None:
        """Extract ``archive_path`` into ``destination``.

        Args:
            archive_path: Downloaded ``.tgz`` file
            destination: Package directory, created if missing
        """
        destination.mkdir(parents=True, exist_ok=True)
        logger.debug("Extracting %s to %s", archive_path, destination)
        try:
            with tarfile.open(archive_path, 'r:*') as tar:
                members = self._select_members(tar)
                if hasattr(tarfile, 'data_filter'):
                    tar.extractall(destination, members=members, filter='data')
                else:
                    tar.extractall(destination, members=members)
        except (tarfile.TarError, OSError) as e:
            raise ExtractionError(f"Error extracting package {archive_path.name}: {e}") from e

    def _select_members(self, tar: tarfile.TarFile) -> List[tarfile.TarInfo]:
        members = []
        for member in tar.getmembers():
            stripped = strip_path(member.name, self.strip_components)
            if stripped is None:
                continue
            if member.islnk():
                linkname = strip_path(member.linkname, self.strip_components)
                if linkname is None:
                    continue
                member.linkname = linkname
            member.name = stripped
            members.append(member)
        return members
