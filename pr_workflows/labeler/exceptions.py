"""Custom exceptions for the labeler."""


class LabelerConfigurationError(Exception):
    """Raised when the label rules cannot be loaded. No label is changed after this error."""

    def __init__(self, message: str, source: str | None = None) -> None:
        """Initialize the error with a message and the configuration source it refers to."""
        super().__init__(f"{message} (source: {source})" if source else message)
        self.source = source


class ConfigurationNotFoundError(LabelerConfigurationError):
    """Raised when the configuration file, its repository, or its ref is missing or inaccessible."""

    pass


class ConfigurationParseError(LabelerConfigurationError):
    """Raised when the configuration file is not valid YAML or does not follow the rule schema."""

    pass


class LabelAPIError(Exception):
    """Raised when GitHub rejects a label mutation.

    Mutations that succeeded before the rejection stay applied; they are listed
    in ``added`` and ``removed``.
    """

    def __init__(
        self,
        message: str,
        action: str,
        labels: list[str],
        added: list[str] | None = None,
        removed: list[str] | None = None,
        status_code: int | None = None,
    ) -> None:
        """Initialize the error with the failed action and what had been applied before it."""
        super().__init__(message)
        self.action = action
        self.labels = labels
        self.added = added or []
        self.removed = removed or []
        self.status_code = status_code
