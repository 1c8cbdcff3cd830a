"""
manifest.py

Responsibility: extract the declared version from a project manifest (e.g. Cargo.toml).

The manifest is read as plain text, not as TOML: the first line that starts with
`version = "..."` wins, the same way `grep '^version'` would pick it. Indented
`version` keys (dependency tables, workspace members) are ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from release_gate.errors import ConfigurationError

DEFAULT_TAG_PREFIX = "v"

_VERSION_LINE = re.compile(r'^version\s*=\s*"(?P<raw>[^"]*)"\s*(?:#.*)?$', re.MULTILINE)
_SEMVER = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)


@dataclass(frozen=True)
class VersionToken:
    """A version read from the manifest, and the tag it is released under."""

    raw: str
    prefix: str = DEFAULT_TAG_PREFIX

    @property
    def tag_name(self) -> str:
        return f"{self.prefix}{self.raw}"

    def __str__(self) -> str:
        return self.raw


def parse_version(text: str, *, tag_prefix: str = DEFAULT_TAG_PREFIX) -> VersionToken:
    """
    Return the VersionToken declared by the first `version = "..."` line of `text`.

    Raises ConfigurationError when no such line exists or the value is not a
    semantic version (X.Y.Z with optional pre-release/build suffix).
    """
    m = _VERSION_LINE.search(text)
    if m is None:
        raise ConfigurationError('Manifest has no `version = "..."` line.')

    raw = m.group("raw").strip()
    if not _SEMVER.match(raw):
        raise ConfigurationError(f"Manifest version is not a semantic version: {raw!r}")
    return VersionToken(raw=raw, prefix=tag_prefix)


def read_manifest_text(manifest_path: str | Path) -> str:
    path = Path(manifest_path)
    if not path.is_file():
        raise ConfigurationError(f"Manifest file does not exist: {path}")
    return path.read_text(encoding="utf-8")


def read_version(manifest_path: str | Path, *, tag_prefix: str = DEFAULT_TAG_PREFIX) -> VersionToken:
    return parse_version(read_manifest_text(manifest_path), tag_prefix=tag_prefix)
