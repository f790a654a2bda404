"""Checks that committed localization artifacts match freshly generated ones.

The checker runs the generator in the working directory and then asks git
whether anything under that directory changed. Modified, deleted and new
untracked files all count: the committed state is only up to date when
regeneration leaves the working tree untouched.
"""

from pathlib import Path

import structlog

from pr_workflows.l10n.exceptions import InvalidStateTransitionError, L10nToolError
from pr_workflows.l10n.models import CheckerState, CommandResult, L10nCheckResult, L10nStatus
from pr_workflows.l10n.runner import CommandRunner
from pr_workflows.utils.constants import MAX_LOGGED_DIFF_LENGTH

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

GIT_STATUS_COMMAND = ["git", "status", "--porcelain", "-z", "--untracked-files=all", "--", "."]
GIT_DIFF_COMMAND = ["git", "--no-pager", "diff", "--no-color", "--", "."]

ALLOWED_TRANSITIONS: dict[CheckerState, frozenset[CheckerState]] = {
    CheckerState.IDLE: frozenset({CheckerState.GENERATING}),
    CheckerState.GENERATING: frozenset({CheckerState.COMPARING, CheckerState.FAILED}),
    CheckerState.COMPARING: frozenset({CheckerState.UP_TO_DATE, CheckerState.OUTDATED, CheckerState.FAILED}),
    CheckerState.UP_TO_DATE: frozenset(),
    CheckerState.OUTDATED: frozenset(),
    CheckerState.FAILED: frozenset(),
}


def parse_porcelain_status(output: str) -> list[str]:
    """Extract the paths from ``git status --porcelain -z`` output.

    Entries are ``XY path``; renames and copies are followed by an extra
    entry holding the original path, which is skipped.
    """
    paths: list[str] = []
    entries = iter(output.split("\0"))
    for entry in entries:
        if len(entry) < 4:
            continue
        status, path = entry[:2], entry[3:]
        paths.append(path)
        if "R" in status or "C" in status:
            next(entries, None)
    return sorted(set(paths))


def truncate_diff(diff: str, limit: int = MAX_LOGGED_DIFF_LENGTH) -> str:
    """Keep long diffs readable in logs and summaries."""
    if len(diff) <= limit:
        return diff
    return diff[:limit] + f"\n... [truncated - {len(diff) - limit} characters removed]"


class LocalizationFreshnessChecker:
    """Regenerates localization artifacts and compares them with the committed state."""

    def __init__(self, runner: CommandRunner, working_directory: Path, l10n_command: str) -> None:
        """Initialize the checker in the idle state."""
        self.runner = runner
        self.working_directory = working_directory
        self.l10n_command = l10n_command
        self.state = CheckerState.IDLE

    def _transition(self, new_state: CheckerState) -> None:
        if new_state not in ALLOWED_TRANSITIONS[self.state]:
            raise InvalidStateTransitionError(f"Cannot move from {self.state.value} to {new_state.value}")
        logger.debug("Checker state changed", previous_state=self.state.value, state=new_state.value)
        self.state = new_state

    def _run(self, command: list[str] | str) -> CommandResult:
        try:
            result = self.runner.run(command, self.working_directory)
        except OSError as exc:
            self._transition(CheckerState.FAILED)
            display = command if isinstance(command, str) else " ".join(command)
            raise L10nToolError(f"Could not start '{display}': {exc}", command=display) from exc
        if not result.succeeded:
            self._transition(CheckerState.FAILED)
            logger.error("Command failed", command=result.command, exit_code=result.exit_code, stderr=result.stderr)
            raise L10nToolError(
                f"'{result.command}' exited with status {result.exit_code}",
                command=result.command,
                exit_code=result.exit_code,
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return result

    def generate(self) -> CommandResult:
        """Run the localization generator.

        Raises:
            L10nToolError: If the generator exits with a non-zero status.
        """
        self._transition(CheckerState.GENERATING)
        logger.info("Generating localization files", command=self.l10n_command, working_directory=str(self.working_directory))
        return self._run(self.l10n_command)

    def compare(self) -> L10nCheckResult:
        """Compare the working tree against the committed state.

        Raises:
            L10nToolError: If git cannot report the status of the working directory.
        """
        self._transition(CheckerState.COMPARING)
        status = self._run(GIT_STATUS_COMMAND)
        changed_files = parse_porcelain_status(status.stdout)
        if not changed_files:
            self._transition(CheckerState.UP_TO_DATE)
            logger.info("Localization files are up to date")
            return L10nCheckResult(status=L10nStatus.UP_TO_DATE)

        diff = truncate_diff(self._run(GIT_DIFF_COMMAND).stdout)
        self._transition(CheckerState.OUTDATED)
        logger.warning("Localization files are outdated", changed_files=changed_files)
        return L10nCheckResult(status=L10nStatus.OUTDATED, changed_files=changed_files, diff=diff)

    def check(self) -> L10nCheckResult:
        """Generate, then compare."""
        self.generate()
        return self.compare()
