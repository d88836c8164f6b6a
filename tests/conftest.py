"""Shared fixtures for minipm tests."""

import io
import json
import tarfile
from pathlib import Path
from typing import Dict, Optional

import pytest

from minipm.errors import RegistryError
from minipm.models import PackageMetadata, VersionRecord


def write_tarball(path: Path, files: Dict[str, str], wrapper: str = "package") -> Path:
    """Write a gzip tarball with every file nested under ``wrapper/``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, "w:gz") as tar:
        for name, content in files.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(name=f"{wrapper}/{name}")
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return path


class FakeRegistry:
    """In-memory registry serving generated tarballs."""

    def __init__(self, packages: Dict[str, Dict[str, Dict[str, str]]],
                 latest: Optional[Dict[str, str]] = None) -> None:
        self.packages = packages
        self.latest = latest or {}
        self.fetches = []
        self.downloads = []
        self.fail_downloads = set()
        self._urls = {}

    def tarball_url(self, name: str, version: str) -> str:
        url = f"https://registry.test/{name}/-/{name.split('/')[-1]}-{version}.tgz"
        self._urls[url] = (name, version)
        return url

    def fetch_package_metadata(self, package_name: str) -> PackageMetadata:
        self.fetches.append(package_name)
        if package_name not in self.packages:
            raise RegistryError(f"Error fetching package info for {package_name}: 404")
        versions = {
            ver: VersionRecord(ver, self.tarball_url(package_name, ver), dict(deps))
            for ver, deps in self.packages[package_name].items()
        }
        return PackageMetadata(package_name, self.latest.get(package_name), versions)

    def download_tarball(self, tarball_url: str, destination: Path) -> Path:
        self.downloads.append(tarball_url)
        if tarball_url in self.fail_downloads:
            raise RegistryError(f"Error downloading package from {tarball_url}: 500")
        name, version = self._urls[tarball_url]
        manifest = json.dumps({"name": name, "version": version})
        return write_tarball(destination, {"package.json": manifest, "index.js": f"// {version}\n"})


@pytest.fixture
def registry_factory():
    return FakeRegistry


@pytest.fixture
def tarball_writer():
    return write_tarball
