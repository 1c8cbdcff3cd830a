"""
git.py

Responsibility: the few local git operations the gate needs.

- Resolve the commit being released when CI does not provide GITHUB_SHA
- Mirror a newly created release tag into the local checkout (`git tag`)
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from release_gate.errors import ExternalServiceError

logger = logging.getLogger(__name__)


def _run(cmd: list[str], *, cwd: Path) -> str:
    """
    Run a git command and return its stripped stdout, raising ExternalServiceError on failure.
    """
    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd),
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except FileNotFoundError as e:
        raise ExternalServiceError(f"Command not found: {cmd[0]}") from e
    except subprocess.CalledProcessError as e:
        raise ExternalServiceError(f"Command failed: {' '.join(cmd)}\n\n{e.stdout}") from e
    return result.stdout.strip()


def head_commit(cwd: str | Path = ".") -> str:
    return _run(["git", "rev-parse", "HEAD"], cwd=Path(cwd))


def local_tag_exists(tag_name: str, cwd: str | Path = ".") -> bool:
    out = _run(["git", "tag", "--list", tag_name], cwd=Path(cwd))
    return out == tag_name


def create_local_tag(tag_name: str, commit_ref: str, cwd: str | Path = ".") -> None:
    """
    Create `tag_name` at `commit_ref` in the local repository (no push).
    """
    if local_tag_exists(tag_name, cwd):
        logger.debug("Local tag %s already present", tag_name)
        return
    _run(["git", "tag", tag_name, commit_ref], cwd=Path(cwd))
    logger.info("Tagged local checkout %s at %s", tag_name, commit_ref)
