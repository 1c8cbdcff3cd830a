"""
cli.py

Responsibility: CLI entrypoint for release-gate.

Commands:
- `version`: print the manifest version and the tag it would be released under
- `gate`: run the version gate once, tag the commit if the version is new, and expose
  the decision to later workflow steps (GITHUB_OUTPUT / GITHUB_STEP_SUMMARY)
- `publish`: create or update the release for a tag and attach built artifacts

Build jobs fan out from the single `gate` run through its `targets` output, so the
tag is created exactly once no matter how many targets are built.

This module should orchestrate behavior but keep concerns isolated:
- Version extraction: `manifest.py`
- Decision logic: `gate.py`
- GitHub API: `github_client.py`
- Local git: `git.py`
"""

from __future__ import annotations

import argparse
import json
import logging
import os

from release_gate import __version__, git
from release_gate.config import GateConfig, load_config
from release_gate.errors import DuplicateVersionError, ExternalServiceError, ReleaseGateError
from release_gate.gate import Proceed, evaluate
from release_gate.github_client import GitHubClient
from release_gate.manifest import read_manifest_text, read_version
from release_gate.outputs import write_outputs, write_summary
from release_gate.renderer import render_summary, render_text

logger = logging.getLogger(__name__)

EXIT_ALREADY_RELEASED = DuplicateVersionError.exit_code


def _configure_logging(verbosity: int) -> None:
    level = logging.INFO
    if verbosity > 0:
        level = logging.DEBUG
    elif verbosity < 0:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-7s | %(message)s",
        datefmt="%H:%M:%S",
    )


def _config_from_args(args: argparse.Namespace) -> GateConfig:
    targets = getattr(args, "target", None)
    overrides = {
        "manifest": getattr(args, "manifest", None),
        "repository": getattr(args, "repository", None),
        "commit": getattr(args, "commit", None),
        "token": getattr(args, "github_token", None),
        "targets": tuple(targets) if targets else None,
        "local_tag": True if getattr(args, "local_tag", False) else None,
    }
    return load_config(args.config, env=os.environ, overrides=overrides)


def _client(cfg: GateConfig) -> GitHubClient:
    return GitHubClient(cfg.token, cfg.repository, api_base=cfg.api_base)


def version_cmd(args: argparse.Namespace) -> int:
    cfg = _config_from_args(args)
    token = read_version(cfg.manifest, tag_prefix=cfg.tag_prefix)
    print(f"{token.raw} {token.tag_name}")
    return 0


def gate_cmd(args: argparse.Namespace) -> int:
    cfg = _config_from_args(args)
    manifest_text = read_manifest_text(cfg.manifest)
    client = _client(cfg)
    commit = cfg.commit or git.head_commit()

    decision = evaluate(manifest_text, client, commit, tag_prefix=cfg.tag_prefix)
    proceed = isinstance(decision, Proceed)
    reason = "" if proceed else decision.reason

    if proceed and cfg.local_tag:
        try:
            git.create_local_tag(decision.tag_name, commit)
        except ExternalServiceError:
            logger.error(
                "Tag %s was already created on %s; delete it there before re-running.",
                decision.tag_name,
                cfg.repository,
            )
            raise

    write_outputs(
        {
            "version": decision.token.raw,
            "tag": decision.tag_name,
            "proceed": "true" if proceed else "false",
            "reason": reason,
            "targets": json.dumps(list(cfg.targets)),
        },
        cfg.github_output,
    )
    write_summary(
        render_summary(
            version=decision.token.raw,
            tag=decision.tag_name,
            proceed=proceed,
            reason=reason,
            targets=list(cfg.targets) if proceed else [],
        ),
        cfg.step_summary,
    )

    if proceed:
        return 0
    logger.info("Nothing to do: %s %s.", decision.tag_name, reason)
    return 0 if args.no_fail_on_released else EXIT_ALREADY_RELEASED


def publish_cmd(args: argparse.Namespace) -> int:
    cfg = _config_from_args(args)
    tag = args.tag
    version = tag[len(cfg.tag_prefix) :] if cfg.tag_prefix and tag.startswith(cfg.tag_prefix) else tag
    context = {"tag": tag, "version": version, "repository": cfg.repository}

    release = _client(cfg).publish(
        tag,
        args.files,
        name=render_text(cfg.release_name, context),
        body=render_text(cfg.release_body, context),
        commit_ref=cfg.commit or None,
    )
    write_outputs({"release_url": release.html_url}, cfg.github_output)
    return 0


def _add_repo_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--repository", default=None, help="GitHub repository OWNER/NAME (or set GITHUB_REPOSITORY)")
    p.add_argument("--github-token", default=None, help="GitHub token (or set env GITHUB_TOKEN)")
    p.add_argument("--commit", default=None, help="Commit SHA to release (default: GITHUB_SHA, then git HEAD)")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="release-gate", description="Version-gated release tagging and publishing")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--config", default=None, help="YAML config file (default: .release-gate.yml if present)")
    p.add_argument("-v", "--verbose", dest="verbosity", action="store_const", const=1, default=0)
    p.add_argument("-q", "--quiet", dest="verbosity", action="store_const", const=-1)
    sub = p.add_subparsers(dest="command", required=True)

    v = sub.add_parser("version", help="Print the manifest version and its release tag")
    v.add_argument("--manifest", default=None, help="Manifest file (default: Cargo.toml)")
    v.set_defaults(func=version_cmd)

    g = sub.add_parser("gate", help="Tag the commit if the manifest version was not released yet")
    g.add_argument("--manifest", default=None, help="Manifest file (default: Cargo.toml)")
    g.add_argument("--target", action="append", default=None, help="Build target to fan out to (repeatable)")
    g.add_argument(
        "--no-fail-on-released",
        action="store_true",
        help="Exit 0 with proceed=false when the version is already released",
    )
    g.add_argument("--local-tag", action="store_true", help="Also create the tag in the local checkout")
    _add_repo_args(g)
    g.set_defaults(func=gate_cmd)

    pub = sub.add_parser("publish", help="Create or update a release and attach files")
    pub.add_argument("--tag", required=True, help="Release tag, e.g. v1.2.3")
    pub.add_argument("files", nargs="+", help="Artifact files to attach")
    _add_repo_args(pub)
    pub.set_defaults(func=publish_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbosity)
    try:
        return int(args.func(args))
    except DuplicateVersionError as e:
        logger.info("Nothing to do: %s", e)
        return e.exit_code
    except ReleaseGateError as e:
        logger.error("%s", e)
        return e.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
