"""
github_client.py

Responsibility: Isolate all direct GitHub REST API interaction.

This module must be the only place that:
- Constructs GitHub REST endpoints
- Sends HTTP requests to the GitHub API and upload hosts
- Interprets GitHub API responses / error payloads

`GitHubClient` implements the release host capability used by the gate
(`release_exists`, `create_tag`) and the publisher (`publish`).
"""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

import requests

from release_gate.errors import ConfigurationError, DuplicateVersionError, ExternalServiceError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.github.com"


class GitHubError(ExternalServiceError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


@dataclass(frozen=True)
class Release:
    id: int
    tag_name: str
    html_url: str
    upload_url: str

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "Release":
        return cls(
            id=int(data["id"]),
            tag_name=str(data["tag_name"]),
            html_url=str(data.get("html_url") or ""),
            # upload_url is an RFC 6570 template: https://uploads.github.com/.../assets{?name,label}
            upload_url=str(data.get("upload_url") or "").split("{", 1)[0],
        )


class GitHubClient:
    def __init__(self, token: str, repository: str, api_base: str = DEFAULT_API_BASE) -> None:
        if not token.strip():
            raise ConfigurationError("GitHub token is required (use --github-token or set GITHUB_TOKEN).")
        owner, _, name = repository.partition("/")
        if not owner or not name or "/" in name:
            raise ConfigurationError(f"Repository must look like OWNER/NAME, got {repository!r}")
        self._token = token
        self._repository = repository
        self._api_base = api_base.rstrip("/")

    @property
    def repository(self) -> str:
        return self._repository

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._token}",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "release-gate",
        }

    def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        data: bytes | None = None,
        content_type: str | None = None,
    ) -> Any:
        # Absolute URLs are used for the uploads host.
        url = path if path.startswith("https://") or path.startswith("http://") else f"{self._api_base}{path}"
        headers = self._headers()
        if content_type:
            headers["Content-Type"] = content_type
        try:
            r = requests.request(
                method,
                url,
                headers=headers,
                json=json_body,
                params=params,
                data=data,
                timeout=30,
            )
        except requests.RequestException as e:
            raise GitHubError(f"GitHub API request failed {method} {path}: {e}") from e

        if r.status_code >= 400:
            try:
                payload = r.json()
            except ValueError:
                payload = {"message": r.text}
            message = payload.get("message", payload) if isinstance(payload, dict) else payload
            raise GitHubError(f"GitHub API error {r.status_code} {method} {path}: {message}", r.status_code)
        if r.status_code == 204 or not r.content:
            return None
        try:
            return r.json()
        except ValueError as e:
            raise GitHubError(f"GitHub API returned non-JSON {method} {path}", r.status_code) from e

    def _repo_path(self, suffix: str) -> str:
        return f"/repos/{self._repository}{suffix}"

    def get_release(self, tag_name: str) -> Release | None:
        """
        Return the release published under `tag_name`, or None when there is none.
        """
        try:
            data = self._request("GET", self._repo_path(f"/releases/tags/{tag_name}"))
        except GitHubError as e:
            if e.status_code == 404:
                return None
            raise
        return Release.from_payload(data)

    def release_exists(self, tag_name: str) -> bool:
        return self.get_release(tag_name) is not None

    def create_tag(self, tag_name: str, commit_ref: str) -> None:
        """
        Create the lightweight tag `tag_name` pointing at `commit_ref`.

        GitHub refuses to create a ref that already exists (422), which makes this a
        conditional create: a concurrent or earlier run that got there first surfaces
        as DuplicateVersionError rather than a second tag.
        """
        body = {"ref": f"refs/tags/{tag_name}", "sha": commit_ref}
        try:
            self._request("POST", self._repo_path("/git/refs"), json_body=body)
        except GitHubError as e:
            if e.status_code == 422 and "already exists" in str(e).lower():
                raise DuplicateVersionError(tag_name, f"Tag {tag_name} already exists") from e
            raise
        logger.info("Created tag %s at %s", tag_name, commit_ref)

    def create_release(
        self,
        tag_name: str,
        *,
        name: str,
        body: str = "",
        commit_ref: str | None = None,
    ) -> Release:
        payload: dict[str, Any] = {"tag_name": tag_name, "name": name, "body": body}
        if commit_ref:
            payload["target_commitish"] = commit_ref
        data = self._request("POST", self._repo_path("/releases"), json_body=payload)
        release = Release.from_payload(data)
        logger.info("Created release %s (%s)", release.tag_name, release.html_url)
        return release

    def upload_asset(self, release: Release, file_path: str | Path) -> None:
        """
        Attach `file_path` to `release`, replacing an existing asset with the same name.
        """
        path = Path(file_path)
        if not path.is_file():
            raise ConfigurationError(f"Artifact file does not exist: {path}")

        assets = self._request("GET", self._repo_path(f"/releases/{release.id}/assets")) or []
        for asset in assets:
            if asset.get("name") == path.name:
                logger.info("Replacing existing asset %s", path.name)
                self._request("DELETE", self._repo_path(f"/releases/assets/{asset['id']}"))

        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        self._request(
            "POST",
            release.upload_url,
            params={"name": path.name},
            data=path.read_bytes(),
            content_type=content_type,
        )
        logger.info("Uploaded %s to %s", path.name, release.tag_name)

    def publish(
        self,
        tag_name: str,
        files: Iterable[str | Path],
        *,
        name: str,
        body: str = "",
        commit_ref: str | None = None,
    ) -> Release:
        """
        Create (or reuse) the release labeled `tag_name` and attach every file to it.
        """
        paths = [Path(f) for f in files]
        missing = [str(p) for p in paths if not p.is_file()]
        if missing:
            raise ConfigurationError(f"Artifact file(s) do not exist: {', '.join(missing)}")

        release = self.get_release(tag_name)
        if release is None:
            try:
                release = self.create_release(tag_name, name=name, body=body, commit_ref=commit_ref)
            except GitHubError as e:
                # Another matrix job created it first.
                if e.status_code != 422:
                    raise
                release = self.get_release(tag_name)
                if release is None:
                    raise
        else:
            logger.info("Updating existing release %s", tag_name)

        for p in paths:
            self.upload_asset(release, p)
        return release
