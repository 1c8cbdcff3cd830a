"""
gate.py

Responsibility: decide, once per pipeline run, whether a new release should proceed.

The gate reads the declared version, asks the release host whether that version has
been released, and if not tags the current commit. Tag creation is the only mutation
it performs; building and publishing happen downstream with the gate's output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Union

from release_gate.errors import DuplicateVersionError
from release_gate.manifest import DEFAULT_TAG_PREFIX, VersionToken, parse_version

logger = logging.getLogger(__name__)

ALREADY_RELEASED = "already released"


class ReleaseHost(Protocol):
    def release_exists(self, tag_name: str) -> bool: ...

    def create_tag(self, tag_name: str, commit_ref: str) -> None: ...


@dataclass(frozen=True)
class Proceed:
    token: VersionToken

    @property
    def tag_name(self) -> str:
        return self.token.tag_name


@dataclass(frozen=True)
class Abort:
    token: VersionToken
    reason: str = ALREADY_RELEASED

    @property
    def tag_name(self) -> str:
        return self.token.tag_name


GateDecision = Union[Proceed, Abort]


def evaluate(
    manifest_text: str,
    host: ReleaseHost,
    commit_ref: str,
    *,
    tag_prefix: str = DEFAULT_TAG_PREFIX,
) -> GateDecision:
    """
    Run the version gate against `host`.

    Returns Proceed after tagging `commit_ref`, or Abort when the version is already
    released. A tag-creation conflict (the tag appeared between the check and the
    create) is also an Abort. ConfigurationError and ExternalServiceError propagate;
    a failed existence query never falls through to tag creation.
    """
    token = parse_version(manifest_text, tag_prefix=tag_prefix)
    logger.info("Detected version: %s", token.raw)

    if host.release_exists(token.tag_name):
        logger.info("Version %s already released.", token.raw)
        return Abort(token)

    try:
        host.create_tag(token.tag_name, commit_ref)
    except DuplicateVersionError as e:
        logger.info("Version %s already tagged: %s", token.raw, e)
        return Abort(token)

    return Proceed(token)
