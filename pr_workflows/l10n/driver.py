"""Orchestrates the localization freshness check."""

import structlog

from pr_workflows.configuration.models import L10nCheckConfig
from pr_workflows.l10n.checker import LocalizationFreshnessChecker
from pr_workflows.l10n.exceptions import L10nContentMismatchError
from pr_workflows.l10n.models import L10nCheckResult
from pr_workflows.l10n.runner import CommandRunner, SubprocessCommandRunner
from pr_workflows.l10n.toolchain import verify_flutter_toolchain
from pr_workflows.utils.actions import append_step_summary, write_output
from pr_workflows.utils.constants import OUTPUT_L10N_CHANGED_FILES, OUTPUT_L10N_STATUS

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def render_l10n_summary(result: L10nCheckResult, config: L10nCheckConfig) -> str:
    """Render the Markdown job summary for a localization check."""
    if not result.is_outdated:
        return f"### Localization check\n\n✅ Localization files in `{config.working_directory}` are up to date."
    lines = [
        "### Localization check",
        "",
        f"❌ Running `{config.l10n_command}` in `{config.working_directory}` changed {len(result.changed_files)} file(s):",
        "",
    ]
    lines.extend(f"- `{path}`" for path in result.changed_files)
    if result.diff:
        lines.extend(["", "<details><summary>Diff</summary>", "", "```diff", result.diff.rstrip("\n"), "```", "", "</details>"])
    return "\n".join(lines)


def publish_l10n_result(result: L10nCheckResult, config: L10nCheckConfig) -> None:
    """Expose the check result as step outputs and a job summary."""
    write_output(OUTPUT_L10N_STATUS, result.status.value, config.github_output)
    write_output(OUTPUT_L10N_CHANGED_FILES, "\n".join(result.changed_files), config.github_output)
    append_step_summary(render_l10n_summary(result, config), config.github_step_summary)


def run_l10n_check(config: L10nCheckConfig, runner: CommandRunner | None = None) -> L10nCheckResult:
    """Run the localization check and gate on the result.

    The status output is published before gating, so downstream steps can
    read ``outdated`` even when the run fails.

    Raises:
        L10nToolError: If the toolchain, the generator or git fails.
        L10nContentMismatchError: If the files are outdated and ``fail_on_changes`` is set.
    """
    runner = runner or SubprocessCommandRunner()
    verify_flutter_toolchain(runner, config.working_directory, config.flutter_version, config.flutter_channel)

    checker = LocalizationFreshnessChecker(runner, config.working_directory, config.l10n_command)
    result = checker.check()
    publish_l10n_result(result, config)

    if result.is_outdated:
        if config.fail_on_changes:
            raise L10nContentMismatchError(result.changed_files)
        logger.warning("Localization files are outdated, not failing because fail-on-changes is disabled", changed_files=result.changed_files)
    return result
