"""
release_gate package

Version-gated release trigger for CI: tag and publish a release only when the
version declared in the project manifest has not been released yet.

Key responsibilities are split across modules:
- `manifest.py`: extract the declared version from the manifest
- `gate.py`: the proceed / abort decision and the tag side effect
- `github_client.py`: isolated GitHub REST API interactions (release lookup, tags, assets)
- `git.py`: local git plumbing (HEAD commit, local tags)
- `config.py`, `renderer.py`, `outputs.py`: configuration, templated text, workflow outputs
- `cli.py`: CLI entrypoint and orchestration (gate -> build -> publish)
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
