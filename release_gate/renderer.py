"""
renderer.py

Responsibility: Deterministically render the release title, release body and job summary.

Templates are Jinja2 strings. They either come from the config file (`release_name`,
`release_body`) or fall back to the defaults below. Undefined variables are errors.

This module intentionally does NOT know about GitHub, git, or CLI parsing.
"""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError

from release_gate.errors import ConfigurationError

DEFAULT_RELEASE_NAME = "{{ tag }}"

DEFAULT_RELEASE_BODY = "Release {{ tag }} of {{ repository }}.\n"

SUMMARY_TEMPLATE = """\
## Release gate

| | |
|---|---|
| Version | `{{ version }}` |
| Tag | `{{ tag }}` |
| Decision | {{ "proceed" if proceed else "abort" }} |
{%- if reason %}
| Reason | {{ reason }} |
{%- endif %}
{%- if targets %}
| Targets | {{ targets | join(", ") }} |
{%- endif %}
"""


class RenderError(ConfigurationError):
    pass


_env = Environment(
    autoescape=False,
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)


def render_text(template_text: str, context: dict[str, Any]) -> str:
    try:
        return _env.from_string(template_text).render(**context)
    except TemplateError as e:
        raise RenderError(f"Failed rendering template {template_text!r}: {e}") from e


def render_summary(
    *,
    version: str,
    tag: str,
    proceed: bool,
    reason: str = "",
    targets: list[str] | None = None,
) -> str:
    return render_text(
        SUMMARY_TEMPLATE,
        {
            "version": version,
            "tag": tag,
            "proceed": proceed,
            "reason": reason,
            "targets": targets or [],
        },
    )
