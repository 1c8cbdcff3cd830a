from __future__ import annotations

from pathlib import Path

import pytest

from release_gate.errors import ConfigurationError
from release_gate.outputs import write_outputs, write_summary
from release_gate.renderer import DEFAULT_RELEASE_BODY, render_summary, render_text


def test_write_outputs_appends(tmp_path: Path) -> None:
    out = tmp_path / "github_output"
    out.write_text("earlier=1\n", encoding="utf-8")
    write_outputs({"version": "2.3.1", "proceed": "true"}, out)
    assert out.read_text(encoding="utf-8") == "earlier=1\nversion=2.3.1\nproceed=true\n"


def test_write_outputs_multiline_uses_delimiter(tmp_path: Path) -> None:
    out = tmp_path / "github_output"
    write_outputs({"notes": "a\nb"}, out)
    lines = out.read_text(encoding="utf-8").splitlines()
    delimiter = lines[0].split("<<", 1)[1]
    assert lines == [f"notes<<{delimiter}", "a", "b", delimiter]


def test_write_outputs_prints_without_file(capsys: pytest.CaptureFixture[str]) -> None:
    write_outputs({"tag": "v2.3.1"}, None)
    assert capsys.readouterr().out == "tag=v2.3.1\n"


def test_write_summary(tmp_path: Path) -> None:
    summary = tmp_path / "summary.md"
    write_summary("# one\n", summary)
    write_summary("# two\n", summary)
    assert summary.read_text(encoding="utf-8") == "# one\n\n# two\n"
    write_summary("ignored", None)


def test_render_summary_proceed() -> None:
    text = render_summary(version="2.3.1", tag="v2.3.1", proceed=True, targets=["a", "b"])
    assert "| Decision | proceed |" in text
    assert "| Targets | a, b |" in text
    assert "Reason" not in text


def test_render_summary_abort() -> None:
    text = render_summary(version="2.3.1", tag="v2.3.1", proceed=False, reason="already released")
    assert "| Decision | abort |" in text
    assert "| Reason | already released |" in text


def test_render_text_default_body() -> None:
    body = render_text(DEFAULT_RELEASE_BODY, {"tag": "v1.0.0", "version": "1.0.0", "repository": "octo/albums"})
    assert body == "Release v1.0.0 of octo/albums.\n"


def test_render_text_undefined_variable_is_config_error() -> None:
    with pytest.raises(ConfigurationError):
        render_text("{{ nope }}", {})
