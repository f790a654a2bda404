"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from githubkit.exception import RequestFailed
from typer import Option
from typing_extensions import Annotated

from pr_workflows.configuration.driver import get_l10n_check_config, get_labeler_config
from pr_workflows.configuration.exceptions import GitHubAuthenticationConfigurationUndefinedError, RequiredConfigurationElementError
from pr_workflows.configuration.models import L10nCheckConfig, LabelerConfig
from pr_workflows.l10n.driver import run_l10n_check
from pr_workflows.l10n.exceptions import L10nContentMismatchError, L10nToolError
from pr_workflows.labeler.driver import LabelerResult, run_labeler_workflow
from pr_workflows.labeler.exceptions import LabelAPIError, LabelerConfigurationError
from pr_workflows.utils.actions import append_step_summary, emit_error_annotation, emit_warning_annotation, write_output
from pr_workflows.utils.constants import (
    DEFAULT_L10N_COMMAND,
    DEFAULT_LABELER_CONFIG_PATH,
    DEFAULT_WORKING_DIRECTORY,
    OUTPUT_ALL_LABELS,
    OUTPUT_NEW_LABELS,
)
from pr_workflows.utils.log import configure_logging

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Pull request automation for GitHub Actions workflows.")


def fail(message: str, title: str) -> typer.Exit:
    """Report an error on stderr and as a workflow annotation, returning the exit to raise."""
    typer.echo(message, err=True)
    emit_error_annotation(message, title=title)
    return typer.Exit(1)


def render_labeler_summary(result: LabelerResult, config: LabelerConfig) -> str:
    """Render the Markdown job summary for a label run."""
    lines = ["### Pull request labels", ""]
    if result.dry_run:
        lines.extend(["_Dry run: no labels were changed._", ""])
    added = result.plan.labels_to_add if result.dry_run else result.applied.added
    removed = result.plan.labels_to_remove if result.dry_run else result.applied.removed
    lines.append(f"- Added: {', '.join(f'`{label}`' for label in added) or 'none'}")
    lines.append(f"- Removed: {', '.join(f'`{label}`' for label in removed) or 'none'}")
    if result.plan.truncated_labels:
        lines.append(f"- Not added (label limit reached): {', '.join(f'`{label}`' for label in result.plan.truncated_labels)}")
    lines.append(f"- Sync labels: `{str(config.sync_labels).lower()}`")
    return "\n".join(lines)


@typer_app.command(name="label")
def label_cli(
    repo: Annotated[str | None, Option(envvar="GITHUB_REPOSITORY", help="Repository name (owner/repo).")] = None,
    pr_number: Annotated[
        int | None, Option(envvar="PR_NUMBER", help="Pull request number. Defaults to the pull request in the GitHub Actions event payload.")
    ] = None,
    config_repo: Annotated[
        str, Option(envvar="CONFIG_REPO", help="Repository (owner/repo) holding the labeler configuration. Empty means the local checkout.")
    ] = "",
    config_path: Annotated[str, Option(envvar="CONFIG_PATH", help="Path of the labeler configuration file.")] = DEFAULT_LABELER_CONFIG_PATH,
    config_ref: Annotated[
        str | None, Option(envvar="CONFIG_REF", help="Branch, tag or SHA of the configuration repository. Defaults to its default branch.")
    ] = None,
    sync_labels: Annotated[
        bool, Option("--sync-labels/--no-sync-labels", envvar="SYNC_LABELS", help="Remove configured labels whose rules no longer match.")
    ] = True,
    dot: Annotated[bool, Option("--dot/--no-dot", envvar="DOT", help="Let globs match paths that start with a dot.")] = True,
    dry_run: Annotated[bool, Option(envvar="DRY_RUN", help="Compute label changes without applying them.")] = False,
    github_api_url: Annotated[str | None, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")] = None,
    github_pat_token: Annotated[
        str | None, Option(envvar=["GITHUB_PAT_TOKEN", "GITHUB_TOKEN"], help="GitHub token (personal access token or workflow token).")
    ] = None,
    github_app_id: Annotated[int | None, Option(envvar="GITHUB_APP_ID", help="GitHub App ID.")] = None,
    github_app_private_key_path: Annotated[Path | None, Option(envvar="GITHUB_APP_PRIVATE_KEY_PATH", help="Path to GitHub App private key.")] = None,
    github_app_installation_id: Annotated[int | None, Option(envvar="GITHUB_APP_INSTALLATION_ID", help="GitHub App installation ID. Looked up from the repository when omitted.")] = None,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = False,
) -> None:
    """Label a pull request based on the files it changes."""
    configure_logging(debug)
    try:
        config = get_labeler_config(
            debug=debug,
            github_api_url=github_api_url,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            repo=repo,
            pr_number=pr_number,
            config_repo=config_repo,
            config_path=config_path,
            config_ref=config_ref,
            sync_labels=sync_labels,
            dot=dot,
            dry_run=dry_run,
        )
    except (RequiredConfigurationElementError, GitHubAuthenticationConfigurationUndefinedError, ValueError, OSError) as exc:
        raise fail(f"Invalid configuration: {exc}", title="Labeler configuration error") from exc

    typer.echo(f"Labeling pull request #{config.pr_number} in {config.repo}")
    try:
        result = asyncio.run(run_labeler_workflow(config))
    except LabelerConfigurationError as exc:
        raise fail(str(exc), title="Labeler configuration error") from exc
    except LabelAPIError as exc:
        if exc.added or exc.removed:
            typer.echo(f"Applied before the failure: added {exc.added or 'none'}, removed {exc.removed or 'none'}", err=True)
        raise fail(str(exc), title="Label update rejected") from exc
    except (RequestFailed, ValueError) as exc:
        raise fail(f"GitHub API request failed: {exc}", title="GitHub API error") from exc

    write_output(OUTPUT_NEW_LABELS, ",".join(result.new_labels), config.github_output)
    write_output(OUTPUT_ALL_LABELS, ",".join(result.all_labels), config.github_output)
    append_step_summary(render_labeler_summary(result, config), config.github_step_summary)


@typer_app.command(name="check-l10n")
def check_l10n_cli(
    working_directory: Annotated[
        Path, Option(envvar="WORKING_DIRECTORY", help="Directory of the Flutter project holding the translation files.")
    ] = Path(DEFAULT_WORKING_DIRECTORY),
    l10n_command: Annotated[str, Option(envvar="L10N_COMMAND", help="Command that regenerates the localization files.")] = DEFAULT_L10N_COMMAND,
    fail_on_changes: Annotated[
        bool,
        Option("--fail-on-changes/--no-fail-on-changes", envvar="FAIL_ON_CHANGES", help="Fail when the generated files differ from the committed ones."),
    ] = True,
    flutter_version: Annotated[
        str | None, Option(envvar="FLUTTER_VERSION", help="Expected Flutter version (e.g. 3.22.0, 3.x or any).")
    ] = None,
    flutter_channel: Annotated[str | None, Option(envvar="FLUTTER_CHANNEL", help="Expected Flutter channel (e.g. stable).")] = None,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = False,
) -> None:
    """Check that committed localization files match freshly generated ones."""
    configure_logging(debug)
    try:
        config: L10nCheckConfig = get_l10n_check_config(
            debug=debug,
            working_directory=working_directory,
            l10n_command=l10n_command,
            fail_on_changes=fail_on_changes,
            flutter_version=flutter_version,
            flutter_channel=flutter_channel,
        )
    except (RequiredConfigurationElementError, OSError) as exc:
        raise fail(f"Invalid configuration: {exc}", title="Localization check configuration error") from exc

    try:
        result = run_l10n_check(config)
    except L10nToolError as exc:
        if exc.stdout:
            typer.echo(exc.stdout, err=True)
        if exc.stderr:
            typer.echo(exc.stderr, err=True)
        raise fail(str(exc), title="Localization tool failed") from exc
    except L10nContentMismatchError as exc:
        for path in exc.changed_files:
            typer.echo(f"  - {path}", err=True)
        raise fail(str(exc), title="Localization files outdated") from exc

    if result.is_outdated:
        emit_warning_annotation(f"Localization files are outdated ({len(result.changed_files)} file(s) differ), not failing the run.")
    else:
        typer.echo("✅ Localization files are up to date.")


if __name__ == "__main__":
    typer_app()
