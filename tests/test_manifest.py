from __future__ import annotations

from pathlib import Path

import pytest

from release_gate.errors import ConfigurationError
from release_gate.manifest import VersionToken, parse_version, read_manifest_text, read_version


def test_parse_version_cargo_manifest(cargo_toml: Path) -> None:
    token = read_version(cargo_toml)
    assert token == VersionToken(raw="2.3.1")
    assert token.tag_name == "v2.3.1"


def test_first_version_line_wins() -> None:
    text = 'version = "1.0.0"\nversion = "9.9.9"\n'
    assert parse_version(text).raw == "1.0.0"


def test_indented_version_keys_are_ignored() -> None:
    text = '[dependencies.foo]\n  version = "0.4.0"\n\n[package]\nversion = "0.5.0"\n'
    assert parse_version(text).raw == "0.5.0"


def test_prerelease_and_build_metadata_accepted() -> None:
    assert parse_version('version = "1.2.3-rc.1+build.5"').raw == "1.2.3-rc.1+build.5"


def test_trailing_comment_allowed() -> None:
    assert parse_version('version = "1.2.3"  # bumped\n').raw == "1.2.3"


def test_custom_tag_prefix() -> None:
    assert parse_version('version = "1.2.3"', tag_prefix="release-").tag_name == "release-1.2.3"


def test_missing_version_line() -> None:
    with pytest.raises(ConfigurationError):
        parse_version('[package]\nname = "albums"\n')


@pytest.mark.parametrize("raw", ["", "1.2", "v1.2.3", "latest", "01.2.3"])
def test_non_semver_rejected(raw: str) -> None:
    with pytest.raises(ConfigurationError):
        parse_version(f'version = "{raw}"\n')


def test_missing_manifest_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="does not exist"):
        read_version(tmp_path / "Cargo.toml")


def test_read_manifest_text(cargo_toml: Path, tmp_path: Path) -> None:
    assert read_manifest_text(cargo_toml).startswith("[package]")
    with pytest.raises(ConfigurationError, match="does not exist"):
        read_manifest_text(tmp_path / "missing.toml")
