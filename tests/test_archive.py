"""Tests for tarball extraction."""

import io
import tarfile

import pytest

from minipm.archive import TarballExtractor, strip_path
from minipm.errors import ExtractionError


def test_strip_path():
    assert strip_path("package/lib/index.js", 1) == "lib/index.js"
    assert strip_path("package", 1) is None
    assert strip_path("package/", 1) is None
    assert strip_path("./package/index.js", 1) == "index.js"
    assert strip_path("package/../../evil.js", 1) is None
    assert strip_path("/etc/passwd", 1) is None


def test_extract_strips_wrapper_directory(tmp_path, tarball_writer):
    archive = tarball_writer(
        tmp_path / "pkg.tgz",
        {"package.json": "{}", "lib/index.js": "module.exports = 1;"},
    )
    destination = tmp_path / "node_modules" / "pkg"

    TarballExtractor().extract(archive, destination)

    assert (destination / "package.json").read_text() == "{}"
    assert (destination / "lib" / "index.js").exists()
    assert not (destination / "package").exists()


def test_extract_handles_any_wrapper_name(tmp_path, tarball_writer):
    archive = tarball_writer(tmp_path / "pkg.tgz", {"index.js": "x"}, wrapper="node")

    TarballExtractor().extract(archive, tmp_path / "out")

    assert (tmp_path / "out" / "index.js").read_text() == "x"


def test_extract_skips_traversal_entries(tmp_path):
    archive = tmp_path / "evil.tgz"
    with tarfile.open(archive, "w:gz") as tar:
        for name in ("package/ok.txt", "package/../../escape.txt"):
            info = tarfile.TarInfo(name=name)
            info.size = 2
            tar.addfile(info, io.BytesIO(b"hi"))

    TarballExtractor().extract(archive, tmp_path / "out")

    assert (tmp_path / "out" / "ok.txt").exists()
    assert not (tmp_path / "escape.txt").exists()


def test_extract_corrupt_archive_raises(tmp_path):
    archive = tmp_path / "broken.tgz"
    archive.write_bytes(b"definitely not a tarball")

    with pytest.raises(ExtractionError):
        TarballExtractor().extract(archive, tmp_path / "out")
