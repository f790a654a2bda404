"""Contains unit tests for the utils.actions module."""

from pathlib import Path

import pytest

from pr_workflows.utils.actions import (
    append_step_summary,
    emit_error_annotation,
    emit_warning_annotation,
    escape_annotation,
    escape_annotation_property,
    format_output,
    write_output,
)


def test_format_output_single_line() -> None:
    """Test the name=value form of a step output."""
    assert format_output("all-labels", "documentation,ios") == "all-labels=documentation,ios\n"


def test_format_output_multi_line_uses_delimiter() -> None:
    """Test that multi-line values use the heredoc form."""
    formatted = format_output("l10n-changed-files", "lib/a.dart\nlib/b.dart")
    header, first, second, footer, trailing = formatted.split("\n")
    name, delimiter = header.split("<<")
    assert name == "l10n-changed-files"
    assert delimiter.startswith("ghadelimiter_")
    assert (first, second) == ("lib/a.dart", "lib/b.dart")
    assert footer == delimiter
    assert trailing == ""


def test_write_output_appends_to_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that outputs are appended to the output file and echoed."""
    output_path = tmp_path / "github_output"
    output_path.write_text("existing=1\n", encoding="utf-8")
    write_output("new-labels", "documentation", output_path)
    assert output_path.read_text(encoding="utf-8") == "existing=1\nnew-labels=documentation\n"
    assert "new-labels=documentation" in capsys.readouterr().out


def test_write_output_without_file(capsys: pytest.CaptureFixture[str]) -> None:
    """Test that outputs are only echoed outside of a runner."""
    write_output("l10n-status", "up-to-date", None)
    assert capsys.readouterr().out == "l10n-status=up-to-date\n"


def test_append_step_summary(tmp_path: Path) -> None:
    """Test that Markdown is appended to the job summary."""
    summary_path = tmp_path / "summary.md"
    append_step_summary("### First\n", summary_path)
    append_step_summary("### Second", summary_path)
    assert summary_path.read_text(encoding="utf-8") == "### First\n\n### Second\n\n"


def test_append_step_summary_without_file(tmp_path: Path) -> None:
    """Test that nothing is written without a summary file."""
    append_step_summary("### Ignored", None)
    assert list(tmp_path.iterdir()) == []


def test_escape_annotation() -> None:
    """Test escaping of workflow command data."""
    assert escape_annotation("100%\r\ndone") == "100%25%0D%0Adone"


def test_emit_error_annotation(capsys: pytest.CaptureFixture[str]) -> None:
    """Test the ::error:: workflow command."""
    emit_error_annotation("two\nlines", title="Label update rejected")
    assert capsys.readouterr().out == "::error title=Label update rejected::two%0Alines\n"


def test_escape_annotation_property() -> None:
    """Test that property values also escape the colon and comma separators."""
    assert escape_annotation_property("Error: a, b\n100%") == "Error%3A a%2C b%0A100%25"


def test_emit_error_annotation_escapes_title(capsys: pytest.CaptureFixture[str]) -> None:
    """Test that a title holding separators cannot end the properties early."""
    emit_error_annotation("failed: see log", title="Labeler: config, remote")
    assert capsys.readouterr().out == "::error title=Labeler%3A config%2C remote::failed: see log\n"


def test_emit_warning_annotation(capsys: pytest.CaptureFixture[str]) -> None:
    """Test the ::warning:: workflow command."""
    emit_warning_annotation("outdated")
    assert capsys.readouterr().out == "::warning::outdated\n"
