from __future__ import annotations

from pathlib import Path

import pytest

from release_gate.errors import DuplicateVersionError, ExternalServiceError
from release_gate.github_client import Release


class FakeReleaseHost:
    """Release host backed by a set of tags; every tag counts as released."""

    def __init__(self, tags: set[str] | None = None, *, fail_query: bool = False) -> None:
        self.tags = set(tags or ())
        self.fail_query = fail_query
        self.created: list[tuple[str, str]] = []
        self.published: list[tuple[str, list[Path], str, str]] = []

    def release_exists(self, tag_name: str) -> bool:
        if self.fail_query:
            raise ExternalServiceError("GitHub API error 401 GET /releases: Bad credentials")
        return tag_name in self.tags

    def create_tag(self, tag_name: str, commit_ref: str) -> None:
        if tag_name in self.tags:
            raise DuplicateVersionError(tag_name)
        self.tags.add(tag_name)
        self.created.append((tag_name, commit_ref))

    def publish(self, tag_name, files, *, name, body="", commit_ref=None):
        self.published.append((tag_name, [Path(f) for f in files], name, body))
        return Release(id=1, tag_name=tag_name, html_url=f"https://example.invalid/{tag_name}", upload_url="")


@pytest.fixture
def host() -> FakeReleaseHost:
    return FakeReleaseHost()


@pytest.fixture
def cargo_toml(tmp_path: Path) -> Path:
    path = tmp_path / "Cargo.toml"
    path.write_text(
        '[package]\nname = "albums"\nversion = "2.3.1"\nedition = "2021"\n\n'
        '[dependencies]\nregex = { version = "1.11" }\n',
        encoding="utf-8",
    )
    return path
