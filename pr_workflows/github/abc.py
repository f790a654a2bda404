"""Base ABC for GitHub clients."""

from abc import ABC, abstractmethod
from typing import Any


class GitHubClientBase(ABC):
    """Base ABC for GitHub clients."""

    # Repository operations
    @abstractmethod
    async def get_file_content(self, file_path: str, ref: str | None = None) -> str:
        """Get the content of a file at a ref (the default branch when ref is None)."""
        pass

    # Pull request operations
    @abstractmethod
    async def get_pull_request(self, pull_request_number: int) -> Any:
        """Get a pull request for a repository."""
        pass

    @abstractmethod
    async def list_files_in_pull_request(self, pull_number: int) -> list[str]:
        """List the paths of the files changed in a pull request."""
        pass

    # Label operations on issues and pull requests
    @abstractmethod
    async def add_labels_to_issue(self, issue_number: int, labels: list[str]) -> list[str]:
        """Add labels to an issue (or pull request), returning the labels now applied."""
        pass

    @abstractmethod
    async def remove_label_from_issue(self, issue_number: int, label: str) -> bool:
        """Remove a label from an issue (or pull request), returning False if it was not applied."""
        pass
