"""Synchronous driver for configuration reconciliation for the CLI entry point."""

import asyncio
from pathlib import Path

from pr_workflows.configuration import reconcile
from pr_workflows.configuration.models import L10nCheckConfig, LabelerConfig
from pr_workflows.utils.constants import DEFAULT_L10N_COMMAND, DEFAULT_LABELER_CONFIG_PATH, DEFAULT_WORKING_DIRECTORY


def get_labeler_config(
    debug: bool = False,
    github_api_url: str | None = None,
    github_pat_token: str | None = None,
    github_app_id: int | None = None,
    github_app_private_key_path: Path | None = None,
    github_app_installation_id: int | None = None,
    repo: str | None = None,
    pr_number: int | None = None,
    config_repo: str | None = None,
    config_path: str = DEFAULT_LABELER_CONFIG_PATH,
    config_ref: str | None = None,
    sync_labels: bool = True,
    dot: bool = True,
    dry_run: bool = False,
) -> LabelerConfig:
    """Synchronously get the reconciled label configuration."""
    return asyncio.run(
        reconcile.reconcile_labeler_configuration(
            cli_debug=debug,
            cli_github_api_url=github_api_url,
            cli_github_pat_token=github_pat_token,
            cli_github_app_id=github_app_id,
            cli_github_app_private_key_path=github_app_private_key_path,
            cli_github_app_installation_id=github_app_installation_id,
            cli_repo=repo,
            cli_pr_number=pr_number,
            cli_config_repo=config_repo,
            cli_config_path=config_path,
            cli_config_ref=config_ref,
            cli_sync_labels=sync_labels,
            cli_dot=dot,
            cli_dry_run=dry_run,
        )
    )


def get_l10n_check_config(
    debug: bool = False,
    working_directory: Path = Path(DEFAULT_WORKING_DIRECTORY),
    l10n_command: str = DEFAULT_L10N_COMMAND,
    fail_on_changes: bool = True,
    flutter_version: str | None = None,
    flutter_channel: str | None = None,
) -> L10nCheckConfig:
    """Synchronously get the reconciled check-l10n configuration."""
    return asyncio.run(
        reconcile.reconcile_l10n_check_configuration(
            cli_debug=debug,
            cli_working_directory=working_directory,
            cli_l10n_command=l10n_command,
            cli_fail_on_changes=fail_on_changes,
            cli_flutter_version=flutter_version,
            cli_flutter_channel=flutter_channel,
        )
    )
