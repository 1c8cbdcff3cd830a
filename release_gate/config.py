"""
config.py

Responsibility: Load the gate configuration into a deterministic, typed model.

Sources, lowest precedence first:
- built-in defaults
- an optional YAML file (`.release-gate.yml` in the working directory, or `--config`)
- GitHub Actions environment variables
- explicit overrides from the CLI (None values are ignored)
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from release_gate.errors import ConfigurationError
from release_gate.github_client import DEFAULT_API_BASE
from release_gate.manifest import DEFAULT_TAG_PREFIX
from release_gate.renderer import DEFAULT_RELEASE_BODY, DEFAULT_RELEASE_NAME

DEFAULT_CONFIG_FILE = ".release-gate.yml"

_STR_KEYS = ("manifest", "tag_prefix", "repository", "api_base", "release_name", "release_body")


@dataclass(frozen=True)
class GateConfig:
    """Everything a gate or publish run needs, after all sources are merged."""

    manifest: str = "Cargo.toml"
    tag_prefix: str = DEFAULT_TAG_PREFIX
    targets: tuple[str, ...] = ("x86_64-pc-windows-gnu",)
    repository: str = ""
    api_base: str = DEFAULT_API_BASE
    release_name: str = DEFAULT_RELEASE_NAME
    release_body: str = DEFAULT_RELEASE_BODY
    local_tag: bool = False
    token: str = field(default="", repr=False)
    commit: str = ""
    github_output: str = ""
    step_summary: str = ""


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Config file is not valid YAML: {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must be a mapping at the top level: {path}")

    unknown = sorted(set(data) - set(_STR_KEYS) - {"targets", "local_tag"})
    if unknown:
        raise ConfigurationError(f"Unknown config key(s) in {path}: {', '.join(unknown)}")

    out: dict[str, Any] = {}
    for key in _STR_KEYS:
        if data.get(key) is not None:
            out[key] = str(data[key])

    targets = data.get("targets")
    if targets is not None:
        if isinstance(targets, str):
            targets = [targets]
        if not isinstance(targets, list) or not all(isinstance(t, str) and t.strip() for t in targets):
            raise ConfigurationError("`targets` must be a list of target names.")
        out["targets"] = tuple(t.strip() for t in targets)

    if data.get("local_tag") is not None:
        out["local_tag"] = bool(data["local_tag"])
    return out


def _from_env(env: Mapping[str, str]) -> dict[str, Any]:
    pairs = {
        "token": env.get("GITHUB_TOKEN") or env.get("GH_TOKEN"),
        "repository": env.get("GITHUB_REPOSITORY"),
        "commit": env.get("GITHUB_SHA"),
        "api_base": env.get("GITHUB_API_URL"),
        "github_output": env.get("GITHUB_OUTPUT"),
        "step_summary": env.get("GITHUB_STEP_SUMMARY"),
    }
    return {k: v for k, v in pairs.items() if v}


def load_config(
    config_path: str | Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> GateConfig:
    """
    Build a GateConfig. An explicit `config_path` must exist; the default file is optional.
    """
    values: dict[str, Any] = {}

    if config_path is not None:
        path = Path(config_path)
        if not path.is_file():
            raise ConfigurationError(f"Config file does not exist: {path}")
        values.update(_load_yaml(path))
    elif Path(DEFAULT_CONFIG_FILE).is_file():
        values.update(_load_yaml(Path(DEFAULT_CONFIG_FILE)))

    values.update(_from_env(env or {}))
    values.update({k: v for k, v in (overrides or {}).items() if v is not None})

    known = {f.name for f in dataclasses.fields(GateConfig)}
    return GateConfig(**{k: v for k, v in values.items() if k in known})
