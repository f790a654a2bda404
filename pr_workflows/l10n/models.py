"""Data models for the localization check."""

from dataclasses import dataclass, field
from enum import Enum


class L10nStatus(str, Enum):
    """Whether the committed localization files match freshly generated ones."""

    UP_TO_DATE = "up-to-date"
    OUTDATED = "outdated"


class CheckerState(str, Enum):
    """States of the localization freshness checker."""

    IDLE = "idle"
    GENERATING = "generating"
    COMPARING = "comparing"
    UP_TO_DATE = "up-to-date"
    OUTDATED = "outdated"
    FAILED = "failed"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of an external command."""

    command: str
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        """Whether the command exited with status zero."""
        return self.exit_code == 0


@dataclass
class L10nCheckResult:
    """Contains results of the localization check."""

    status: L10nStatus
    changed_files: list[str] = field(default_factory=list)
    diff: str = ""

    @property
    def is_outdated(self) -> bool:
        """Whether the committed files are stale."""
        return self.status is L10nStatus.OUTDATED
