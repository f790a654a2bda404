"""Helpers for talking to the GitHub Actions runner.

Step outputs are appended to the file named by ``GITHUB_OUTPUT``, Markdown
summaries to ``GITHUB_STEP_SUMMARY``, and annotations are printed as workflow
commands on stdout. Outside of a runner (no file configured) the outputs are
only echoed, so the CLI stays usable on a developer machine.
"""

import uuid
from pathlib import Path

import structlog
import typer

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def format_output(name: str, value: str) -> str:
    """Format a step output in the syntax GitHub Actions expects.

    Multi-line values use the heredoc form with a random delimiter.
    """
    if "\n" not in value:
        return f"{name}={value}\n"
    delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def write_output(name: str, value: str, output_path: Path | None) -> None:
    """Write a step output to GITHUB_OUTPUT (when available) and echo it."""
    if output_path is not None:
        with open(output_path, "a", encoding="utf-8") as f:
            f.write(format_output(name, value))
        logger.debug("Wrote step output", name=name, output_path=str(output_path))
    typer.echo(f"{name}={value}")


def append_step_summary(markdown: str, summary_path: Path | None) -> None:
    """Append Markdown to the job summary when running inside GitHub Actions."""
    if summary_path is None:
        return
    with open(summary_path, "a", encoding="utf-8") as f:
        f.write(markdown.rstrip("\n") + "\n\n")


def escape_annotation(message: str) -> str:
    """Escape a message for use in a workflow command."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_annotation_property(value: str) -> str:
    """Escape a workflow command property value, where ``:`` and ``,`` are separators."""
    return escape_annotation(value).replace(":", "%3A").replace(",", "%2C")


def emit_error_annotation(message: str, title: str | None = None) -> None:
    """Emit an ``::error::`` workflow command so the failure shows up on the run page."""
    properties = f" title={escape_annotation_property(title)}" if title else ""
    typer.echo(f"::error{properties}::{escape_annotation(message)}")


def emit_warning_annotation(message: str) -> None:
    """Emit a ``::warning::`` workflow command."""
    typer.echo(f"::warning::{escape_annotation(message)}")
