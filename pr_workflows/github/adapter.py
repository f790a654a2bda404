"""GitHub client adapter for the githubkit library."""

import base64
from functools import wraps
from pathlib import Path
from typing import Any, Awaitable, Callable, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import RequestFailed
from githubkit.versions.latest.models import (
    DiffEntry,
    Label,
    PullRequest,
)

from pr_workflows.configuration.models import GitHubAuthenticationType
from pr_workflows.utils.constants import PULL_REQUEST_FILES_PAGE_SIZE
from pr_workflows.utils.github import split_repository_in_configuration

from .abc import GitHubClientBase
from .client import GitHubClient, get_github_client

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def handle_github_422(func: F) -> F:
    """Decorator to handle GitHub 422 Unprocessable Entity errors, logging and raising with details."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except RequestFailed as exc:
            if exc.response.status_code == 422:
                try:
                    error_data = exc.response.json()
                except Exception:
                    error_data = {}
                message = error_data.get("message", "Unprocessable Entity")
                errors = error_data.get("errors", [])
                logger.error(
                    "GitHub 422 Unprocessable Entity",
                    function=func.__name__,
                    message=message,
                    errors=errors,
                    url=getattr(exc.response, "url", None),
                    status_code=422,
                )
                raise ValueError(
                    f"GitHub 422 error in {func.__name__}: {message} | errors: {errors} | url: {getattr(exc.response, 'url', None)}"
                ) from exc
            raise

    return wrapper  # type: ignore


def is_not_found(exc: RequestFailed) -> bool:
    """Return True if a failed request was answered with 404 Not Found."""
    return exc.response.status_code == 404


class GitHubKitAdapter(GitHubClientBase):
    """GitHub client adapter for the githubkit library."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    @property
    def full_name(self) -> str:
        """The repository in 'owner/repo' format."""
        return f"{self.owner}/{self.repo_name}"

    @classmethod
    async def create(
        cls,
        repo: str,
        github_auth_type: GitHubAuthenticationType,
        github_pat_token: str | None = None,
        github_app_id: int | None = None,
        github_app_private_key_path: Path | None = None,
        github_app_installation_id: int | None = None,
        github_api_url: str = "https://api.github.com",
    ) -> Self:
        """Create a new GitHub client adapter.

        Args:
            repo: Repository in 'owner/repo' format
            github_auth_type: Type of authentication (PAT or APP)
            github_pat_token: Personal access token or workflow token (required for PAT auth)
            github_app_id: GitHub App ID (required for APP auth)
            github_app_private_key_path: Path to private key file (required for APP auth)
            github_app_installation_id: Installation ID for APP auth (looked up from the repository when omitted)
            github_api_url: GitHub API URL (defaults to https://api.github.com)

        Returns:
            Configured GitHubKitAdapter instance

        Raises:
            ValueError: If the repository is malformed or the App installation cannot be found
        """
        owner, repo_name = await split_repository_in_configuration(repo=repo)
        logger.info(
            "Creating client for GitHub instance and repository",
            github_api_url=github_api_url,
            owner=owner,
            repo_name=repo_name,
        )
        client = await get_github_client(
            repo=repo,
            github_auth_type=github_auth_type,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            github_api_url=github_api_url,
        )
        return cls(client, owner, repo_name)

    # Repository operations
    async def get_file_content(self, file_path: str, ref: str | None = None) -> str:
        """Get the decoded content of a file.

        Raises:
            FileNotFoundError: If the repository, ref or path does not exist (or is not visible to the credentials).
            IsADirectoryError: If the path names a directory.
        """
        params: dict[str, Any] = {"ref": ref} if ref else {}
        try:
            response = await self.client.rest.repos.async_get_content(
                owner=self.owner,
                repo=self.repo_name,
                path=file_path,
                **params,
            )
        except RequestFailed as exc:
            if is_not_found(exc):
                raise FileNotFoundError(f"{file_path} not found in {self.full_name} at {ref or 'the default branch'}") from exc
            raise
        content_file = response.parsed_data
        if isinstance(content_file, list) or getattr(content_file, "type", "file") != "file":
            raise IsADirectoryError(f"{file_path} in {self.full_name} is not a file")
        return base64.b64decode(content_file.content).decode("utf-8")

    # Pull request operations
    async def get_pull_request(self, pull_request_number: int) -> PullRequest:
        """Get a pull request from the repository."""
        response: Response[PullRequest] = await self.client.rest.pulls.async_get(
            owner=self.owner,
            repo=self.repo_name,
            pull_number=pull_request_number,
        )
        return response.parsed_data

    async def list_files_in_pull_request(self, pull_number: int, per_page: int = PULL_REQUEST_FILES_PAGE_SIZE) -> list[str]:
        """List the paths of all files changed in a pull request, handling pagination."""
        filenames: list[str] = []
        page: int = 1
        while True:
            response: Response[list[DiffEntry]] = await self.client.rest.pulls.async_list_files(
                owner=self.owner,
                repo=self.repo_name,
                pull_number=pull_number,
                per_page=per_page,
                page=page,
            )
            files = response.parsed_data
            filenames.extend(entry.filename for entry in files)
            if len(files) < per_page:
                break
            page += 1
        logger.debug("Listed pull request files", pull_number=pull_number, file_count=len(filenames), pages=page)
        return filenames

    # Label operations on issues and pull requests
    @handle_github_422
    async def add_labels_to_issue(self, issue_number: int, labels: list[str]) -> list[str]:
        """Add labels to an issue or pull request.

        GitHub treats labels that are already applied as a no-op, and creates
        labels that do not yet exist in the repository.
        """
        response: Response[list[Label]] = await self.client.rest.issues.async_add_labels(
            owner=self.owner,
            repo=self.repo_name,
            issue_number=issue_number,
            labels=labels,
        )
        return [label.name for label in response.parsed_data]

    async def remove_label_from_issue(self, issue_number: int, label: str) -> bool:
        """Remove a label from an issue or pull request.

        A 404 means the label was not applied (or no longer exists) and is reported as False.
        """
        try:
            await self.client.rest.issues.async_remove_label(
                owner=self.owner,
                repo=self.repo_name,
                issue_number=issue_number,
                name=label,
            )
        except RequestFailed as exc:
            if is_not_found(exc):
                logger.info("Label was already absent", issue_number=issue_number, label=label)
                return False
            raise
        return True
