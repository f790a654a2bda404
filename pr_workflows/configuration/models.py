"""Models for configuration between CLI arguments and environment variables."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class GitHubAuthenticationType(str, Enum):
    """Enum for GitHub authentication types."""

    PAT = "pat"
    APP = "app"


@dataclass
class BaseConfig:
    """Configuration shared by every pr-workflows command."""

    debug: bool
    github_output: Path | None
    github_step_summary: Path | None


@dataclass
class GitHubConfig(BaseConfig):
    """Configuration for commands that talk to the GitHub API."""

    github_api_url: str
    github_authentication_type: GitHubAuthenticationType
    github_pat_token: str | None
    github_app_id: int | None
    github_app_private_key_path: Path | None
    github_app_installation_id: int | None
    repo: str


@dataclass
class LabelerConfig(GitHubConfig):
    """Configuration for the label command."""

    pr_number: int
    config_repo: str | None
    config_path: str
    config_ref: str | None
    sync_labels: bool
    dot: bool
    dry_run: bool


@dataclass
class L10nCheckConfig(BaseConfig):
    """Configuration for the check-l10n command."""

    working_directory: Path
    l10n_command: str
    fail_on_changes: bool
    flutter_version: str | None
    flutter_channel: str | None
