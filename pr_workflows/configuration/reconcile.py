"""Reconciles configuration between CLI arguments and environment variables."""

from pathlib import Path

import structlog

from pr_workflows.configuration.env import Settings, get_settings
from pr_workflows.configuration.exceptions import GitHubAuthenticationConfigurationUndefinedError, RequiredConfigurationElementError
from pr_workflows.configuration.models import GitHubAuthenticationType, L10nCheckConfig, LabelerConfig
from pr_workflows.utils.github import load_event_payload, pull_request_number_from_event, split_repository_in_configuration

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def validate_github_authentication_configuration(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> GitHubAuthenticationType:
    """Validates the GitHub authentication configuration.

    Args:
        github_pat_token (str | None): The GitHub PAT token.
        github_app_id (int | None): The GitHub App ID.
        github_app_private_key_path (str | None): The path to the GitHub App private key.
        github_app_installation_id (int | None): The GitHub App installation ID. Optional; looked up per repository when omitted.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If both PAT and App configurations are undefined.

    Returns:
        GitHubAuthenticationType: The type of GitHub authentication used.
    """
    if github_pat_token and (github_app_id or github_app_private_key_path or github_app_installation_id):
        raise GitHubAuthenticationConfigurationUndefinedError("Both PAT and GitHub App configurations are defined. Please use one or the other.")

    if github_pat_token:
        return GitHubAuthenticationType.PAT

    if github_app_id and github_app_private_key_path:
        return GitHubAuthenticationType.APP
    elif github_app_id or github_app_private_key_path or github_app_installation_id:
        missing_settings: list[dict[str, str]] = []
        if not github_app_id:
            missing_settings.append({"name": "GitHub App ID", "cli_name": "github_app_id", "env_name": "GITHUB_APP_ID"})
        if not github_app_private_key_path:
            missing_settings.append(
                {"name": "GitHub App private key path", "cli_name": "github_app_private_key_path", "env_name": "GITHUB_APP_PRIVATE_KEY_PATH"}
            )
        msg = "Incomplete GitHub App configuration - missing settings include " + ", ".join(
            f"{setting['name']} (command line option {setting['cli_name']}, environment variable {setting['env_name']})"
            for setting in missing_settings
        )
        raise GitHubAuthenticationConfigurationUndefinedError(msg)
    else:
        raise GitHubAuthenticationConfigurationUndefinedError(
            "No GitHub authentication configuration provided. Please provide either a token or a GitHub App configuration."
        )


def _blank_to_none(value: str | None) -> str | None:
    """Workflow inputs arrive as empty strings when unset."""
    if value is None or not value.strip():
        return None
    return value.strip()


async def reconcile_labeler_configuration(
    cli_debug: bool,
    cli_github_api_url: str | None,
    cli_github_pat_token: str | None,
    cli_github_app_id: int | None,
    cli_github_app_private_key_path: Path | None,
    cli_github_app_installation_id: int | None,
    cli_repo: str | None,
    cli_pr_number: int | None,
    cli_config_repo: str | None,
    cli_config_path: str,
    cli_config_ref: str | None,
    cli_sync_labels: bool,
    cli_dot: bool,
    cli_dry_run: bool,
    settings: Settings | None = None,
) -> LabelerConfig:
    """Build the label command configuration from CLI values and the runner environment.

    CLI values win; the repository, API URL and pull request number fall back
    to the variables and event payload provided by GitHub Actions.

    Raises:
        RequiredConfigurationElementError: If the repository or pull request number cannot be determined.
        GitHubAuthenticationConfigurationUndefinedError: If the authentication configuration is invalid.
        ValueError: If a repository is not in 'owner/repo' format.
    """
    settings = settings or get_settings()

    repo = _blank_to_none(cli_repo) or settings.GITHUB_REPOSITORY
    if not repo:
        raise RequiredConfigurationElementError(name="Repository", cli_name="--repo", env_name="GITHUB_REPOSITORY")
    await split_repository_in_configuration(repo)

    pr_number = cli_pr_number
    if pr_number is None:
        pr_number = pull_request_number_from_event(load_event_payload(settings.GITHUB_EVENT_PATH))
        logger.debug("Read pull request number from event payload", event_path=str(settings.GITHUB_EVENT_PATH), pr_number=pr_number)
    if pr_number is None:
        raise RequiredConfigurationElementError(name="Pull request number", cli_name="--pr-number", env_name="PR_NUMBER")

    config_repo = _blank_to_none(cli_config_repo)
    if config_repo is not None:
        await split_repository_in_configuration(config_repo)

    config_path = _blank_to_none(cli_config_path)
    if config_path is None:
        raise RequiredConfigurationElementError(name="Labeler configuration path", cli_name="--config-path", env_name="CONFIG_PATH")

    github_authentication_type = await validate_github_authentication_configuration(
        github_pat_token=cli_github_pat_token,
        github_app_id=cli_github_app_id,
        github_app_private_key_path=cli_github_app_private_key_path,
        github_app_installation_id=cli_github_app_installation_id,
    )

    return LabelerConfig(
        debug=cli_debug or settings.DEBUG,
        github_output=settings.GITHUB_OUTPUT,
        github_step_summary=settings.GITHUB_STEP_SUMMARY,
        github_api_url=_blank_to_none(cli_github_api_url) or settings.GITHUB_API_URL,
        github_authentication_type=github_authentication_type,
        github_pat_token=cli_github_pat_token,
        github_app_id=cli_github_app_id,
        github_app_private_key_path=cli_github_app_private_key_path,
        github_app_installation_id=cli_github_app_installation_id,
        repo=repo,
        pr_number=pr_number,
        config_repo=config_repo,
        config_path=config_path,
        config_ref=_blank_to_none(cli_config_ref),
        sync_labels=cli_sync_labels,
        dot=cli_dot,
        dry_run=cli_dry_run,
    )


async def reconcile_l10n_check_configuration(
    cli_debug: bool,
    cli_working_directory: Path,
    cli_l10n_command: str,
    cli_fail_on_changes: bool,
    cli_flutter_version: str | None,
    cli_flutter_channel: str | None,
    settings: Settings | None = None,
) -> L10nCheckConfig:
    """Build the check-l10n command configuration.

    Raises:
        RequiredConfigurationElementError: If the generation command is empty.
        FileNotFoundError: If the working directory does not exist.
        NotADirectoryError: If the working directory is not a directory.
    """
    settings = settings or get_settings()

    l10n_command = _blank_to_none(cli_l10n_command)
    if l10n_command is None:
        raise RequiredConfigurationElementError(name="Localization command", cli_name="--l10n-command", env_name="L10N_COMMAND")

    if not cli_working_directory.exists():
        raise FileNotFoundError(f"Working directory not found: {cli_working_directory.absolute()}")
    if not cli_working_directory.is_dir():
        raise NotADirectoryError(f"Working directory is not a directory: {cli_working_directory.absolute()}")

    return L10nCheckConfig(
        debug=cli_debug or settings.DEBUG,
        github_output=settings.GITHUB_OUTPUT,
        github_step_summary=settings.GITHUB_STEP_SUMMARY,
        working_directory=cli_working_directory,
        l10n_command=l10n_command,
        fail_on_changes=cli_fail_on_changes,
        flutter_version=_blank_to_none(cli_flutter_version),
        flutter_channel=_blank_to_none(cli_flutter_channel),
    )
