"""Tests for package.json handling."""

import json
from pathlib import Path

import pytest

from minipm.errors import ManifestError, ManifestMissingError
from minipm.manifest import Manifest, parse_package_argument
from minipm.models import DependencySpec


@pytest.mark.parametrize(
    "argument, expected",
    [
        ("left-pad", DependencySpec("left-pad", "latest")),
        ("left-pad@^1.0.0", DependencySpec("left-pad", "^1.0.0")),
        ("left-pad@", DependencySpec("left-pad", "latest")),
        ("@types/node", DependencySpec("@types/node", "latest")),
        ("@types/node@~20.1.0", DependencySpec("@types/node", "~20.1.0")),
    ],
)
def test_parse_package_argument(argument, expected):
    assert parse_package_argument(argument) == expected


def test_parse_package_argument_rejects_empty_name():
    with pytest.raises(ValueError):
        parse_package_argument("   ")


def test_load_missing_manifest(tmp_path: Path):
    with pytest.raises(ManifestMissingError):
        Manifest.load(tmp_path / "package.json")


def test_load_rejects_non_object(tmp_path: Path):
    path = tmp_path / "package.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(ManifestError):
        Manifest.load(path)


def test_add_overwrites_and_preserves_other_fields(tmp_path: Path):
    path = tmp_path / "package.json"
    path.write_text(json.dumps({"name": "app", "dependencies": {"a": "^1.0.0"}}), encoding="utf-8")

    manifest = Manifest.load(path)
    manifest.add(DependencySpec("a", "^2.0.0"))
    manifest.add(DependencySpec("b", "latest"))
    manifest.save()

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == {"name": "app", "dependencies": {"a": "^2.0.0", "b": "latest"}}


def test_dependencies_default_to_empty(tmp_path: Path):
    path = tmp_path / "package.json"
    path.write_text("{}", encoding="utf-8")

    assert Manifest.load(path).dependencies == {}
