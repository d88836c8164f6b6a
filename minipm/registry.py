"""
npm registry client.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import requests
from tqdm import tqdm

from .errors import RegistryError
from .models import PackageMetadata


logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"


class NpmRegistryClient:
    """Client for an npm-compatible registry."""

    def __init__(
        self,
        registry_url: str = DEFAULT_REGISTRY_URL,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        show_progress: bool = True,
    ) -> None:
        self.registry_url = registry_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout
        self.show_progress = show_progress

    def package_url(self, package_name: str) -> str:
        # Scoped names keep their "@" but the slash must be encoded.
        return f"{self.registry_url}/{quote(package_name, safe='@')}"

    def fetch_package_metadata(self, package_name: str) -> PackageMetadata:
        """Fetch the packument for a package name.

        Args:
            package_name: Name of the package

        Returns:
            Parsed package metadata
        """
        url = self.package_url(package_name)
        logger.debug("Fetching metadata for %s from %s", package_name, url)
        try:
            with self.session.get(url, timeout=self.timeout) as response:
                response.raise_for_status()
                data = response.json()
        except requests.RequestException as e:
            raise RegistryError(f"Error fetching package info for {package_name}: {e}") from e
        except ValueError as e:
            raise RegistryError(f"Invalid metadata for {package_name}: {e}") from e

        if not isinstance(data, dict):
            raise RegistryError(f"Invalid metadata for {package_name}: expected a JSON object")
        return PackageMetadata.from_registry(package_name, data)

    def download_tarball(self, tarball_url: str, destination: Path) -> Path:
        """Stream a tarball to ``destination``.

        Args:
            tarball_url: URL from ``dist.tarball``
            destination: File path to write

        Returns:
            The destination path
        """
        logger.debug("Downloading %s", tarball_url)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with self.session.get(tarball_url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                total_size = int(response.headers.get('content-length', 0))
                with open(destination, 'wb') as f:
                    with tqdm(
                        total=total_size,
                        unit='B',
                        unit_scale=True,
                        desc=destination.name,
                        disable=not self.show_progress,
                        leave=False,
                    ) as pbar:
                        for chunk in response.iter_content(chunk_size=8192):
                            f.write(chunk)
                            pbar.update(len(chunk))
        except requests.RequestException as e:
            raise RegistryError(f"Error downloading package from {tarball_url}: {e}") from e
        except OSError as e:
            raise RegistryError(f"Error writing {destination}: {e}") from e
        return destination
