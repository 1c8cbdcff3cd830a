"""
errors.py

Responsibility: the error taxonomy shared by the gate, the release host client and the CLI.

Every error is terminal for the current run. The CLI is the only place that catches
`ReleaseGateError` and maps it to a process exit code.
"""

from __future__ import annotations


class ReleaseGateError(RuntimeError):
    exit_code = 1


class ConfigurationError(ReleaseGateError):
    """Manifest, config file or command line inputs are missing or malformed."""

    exit_code = 2


class DuplicateVersionError(ReleaseGateError):
    """The version was already released (or tagged). An expected stop, not a crash."""

    exit_code = 1

    def __init__(self, tag_name: str, message: str | None = None) -> None:
        self.tag_name = tag_name
        super().__init__(message or f"{tag_name} already released")


class ExternalServiceError(ReleaseGateError):
    """The release host or the git executable failed (auth, network, rate limit, ...)."""

    exit_code = 3
