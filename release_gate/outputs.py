"""
outputs.py

Responsibility: hand the gate's results to later workflow steps.

- `name=value` lines appended to the file named by GITHUB_OUTPUT
- Markdown appended to the file named by GITHUB_STEP_SUMMARY

Outside of GitHub Actions (no output file configured) the values are printed instead.
"""

from __future__ import annotations

import uuid
from pathlib import Path


def _format_output(name: str, value: str) -> str:
    if "\n" not in value:
        return f"{name}={value}\n"
    # Multi-line values use the heredoc form: name<<DELIM ... DELIM
    delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def write_outputs(values: dict[str, str], github_output: str | Path | None) -> None:
    lines = "".join(_format_output(k, v) for k, v in values.items())
    if not github_output:
        print(lines, end="")
        return
    with Path(github_output).open("a", encoding="utf-8") as f:
        f.write(lines)


def write_summary(markdown: str, summary_path: str | Path | None) -> None:
    if not summary_path:
        return
    path = Path(summary_path)
    prefix = "\n" if path.exists() and path.stat().st_size > 0 else ""
    with path.open("a", encoding="utf-8") as f:
        f.write(prefix + markdown)
