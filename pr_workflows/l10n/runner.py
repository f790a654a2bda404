"""Runs external commands for the localization check."""

import shlex
import subprocess
from pathlib import Path
from typing import Protocol

import structlog

from pr_workflows.l10n.models import CommandResult

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class CommandRunner(Protocol):
    """Runs a command in a directory and reports its outcome."""

    def run(self, command: list[str] | str, cwd: Path) -> CommandResult:
        """Run a command. A string is run through the shell, a list is executed directly."""
        ...


class SubprocessCommandRunner:
    """Runs commands with subprocess, capturing their output."""

    def run(self, command: list[str] | str, cwd: Path) -> CommandResult:
        """Run a command and capture stdout and stderr.

        Raises:
            OSError: If the executable cannot be started.
        """
        shell = isinstance(command, str)
        display = command if shell else shlex.join(command)
        logger.info("Running command", command=display, cwd=str(cwd))
        completed = subprocess.run(
            command,
            cwd=cwd,
            shell=shell,
            capture_output=True,
            text=True,
            check=False,
        )
        logger.debug("Command finished", command=display, exit_code=completed.returncode)
        return CommandResult(command=display, exit_code=completed.returncode, stdout=completed.stdout, stderr=completed.stderr)
