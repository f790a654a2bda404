"""Custom exceptions for the localization check."""


class L10nToolError(Exception):
    """Raised when an external tool (the generator, git, flutter) fails.

    This is a tool failure, not a content mismatch.
    """

    def __init__(self, message: str, command: str, exit_code: int | None = None, stdout: str = "", stderr: str = "") -> None:
        """Initialize the error with the failed command and its output."""
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr


class L10nContentMismatchError(Exception):
    """Raised when generated localization files differ from the committed ones and the run is gated on it."""

    def __init__(self, changed_files: list[str]) -> None:
        """Initialize the error with the paths that differ."""
        super().__init__(
            f"Localization files are outdated: {len(changed_files)} generated file(s) differ from the committed state. "
            "Run the localization command locally and commit the result."
        )
        self.changed_files = changed_files


class InvalidStateTransitionError(Exception):
    """Raised when the checker is driven out of order."""

    pass
