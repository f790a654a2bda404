"""Orchestrates labeling a pull request from its changed files."""

import time
from dataclasses import dataclass, field

import structlog
from githubkit.exception import RequestFailed

from pr_workflows.configuration.models import LabelerConfig
from pr_workflows.github.abc import GitHubClientBase
from pr_workflows.github.adapter import GitHubKitAdapter
from pr_workflows.labeler.config import resolve_label_rules
from pr_workflows.labeler.exceptions import LabelAPIError
from pr_workflows.labeler.models import LabelApplyResult, LabelPlan, PullRequestContext
from pr_workflows.labeler.reconcile import reconcile_labels

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


@dataclass
class LabelerResult:
    """Contains the results of the label workflow."""

    plan: LabelPlan
    applied: LabelApplyResult = field(default_factory=LabelApplyResult)
    dry_run: bool = False

    @property
    def new_labels(self) -> list[str]:
        """Labels added by this run (planned labels for a dry run)."""
        return self.plan.labels_to_add if self.dry_run else self.applied.added

    @property
    def all_labels(self) -> list[str]:
        """Labels on the pull request after this run."""
        return list(self.plan.final_labels)


def _status_code(exc: Exception) -> int | None:
    if isinstance(exc, RequestFailed):
        return exc.response.status_code
    return None


async def apply_label_plan(adapter: GitHubClientBase, issue_number: int, plan: LabelPlan) -> LabelApplyResult:
    """Apply a label plan to a pull request.

    Adds go out in a single request; GitHub ignores labels that are already
    applied. Removals go out one label at a time and a label that is already
    gone counts as removed.

    Raises:
        LabelAPIError: If GitHub rejects a mutation. Mutations applied before the rejection stay applied.
    """
    result = LabelApplyResult()
    labels_to_add = plan.labels_to_add
    if labels_to_add:
        try:
            await adapter.add_labels_to_issue(issue_number, labels_to_add)
        except (RequestFailed, ValueError) as exc:
            logger.error("Failed to add labels", issue_number=issue_number, labels=labels_to_add, error=str(exc))
            raise LabelAPIError(
                f"Failed to add labels {labels_to_add} to #{issue_number}: {exc}",
                action="add",
                labels=labels_to_add,
                status_code=_status_code(exc),
            ) from exc
        result.added.extend(labels_to_add)
        logger.info("Added labels", issue_number=issue_number, labels=labels_to_add)

    for label in plan.labels_to_remove:
        try:
            await adapter.remove_label_from_issue(issue_number, label)
        except (RequestFailed, ValueError) as exc:
            logger.error("Failed to remove label", issue_number=issue_number, label=label, error=str(exc))
            raise LabelAPIError(
                f"Failed to remove label '{label}' from #{issue_number}: {exc}",
                action="remove",
                labels=[label],
                added=result.added,
                removed=result.removed,
                status_code=_status_code(exc),
            ) from exc
        result.removed.append(label)
        logger.info("Removed label", issue_number=issue_number, label=label)
    return result


async def build_pull_request_context(adapter: GitHubClientBase, pr_number: int) -> PullRequestContext:
    """Fetch the pull request and its changed files from GitHub."""
    pull_request = await adapter.get_pull_request(pr_number)
    changed_files = await adapter.list_files_in_pull_request(pr_number)
    return PullRequestContext(
        number=pr_number,
        changed_files=frozenset(changed_files),
        labels=frozenset(label.name for label in pull_request.labels),
        head_branch=pull_request.head.ref,
        base_branch=pull_request.base.ref,
    )


async def run_labeler_workflow(config: LabelerConfig, adapter: GitHubClientBase | None = None) -> LabelerResult:
    """Run the label workflow: resolve rules, reconcile labels, apply the changes.

    The rules are resolved before any label is touched, so configuration
    errors never leave a partially labeled pull request.
    """
    if adapter is None:
        adapter = await GitHubKitAdapter.create(
            repo=config.repo,
            github_auth_type=config.github_authentication_type,
            github_pat_token=config.github_pat_token,
            github_app_id=config.github_app_id,
            github_app_private_key_path=config.github_app_private_key_path,
            github_app_installation_id=config.github_app_installation_id,
            github_api_url=config.github_api_url,
        )

    async def create_config_repo_adapter(repo: str) -> GitHubClientBase:
        # The configured installation ID belongs to the current repository; others are looked up.
        installation_id = config.github_app_installation_id if repo.casefold() == config.repo.casefold() else None
        return await GitHubKitAdapter.create(
            repo=repo,
            github_auth_type=config.github_authentication_type,
            github_pat_token=config.github_pat_token,
            github_app_id=config.github_app_id,
            github_app_private_key_path=config.github_app_private_key_path,
            github_app_installation_id=installation_id,
            github_api_url=config.github_api_url,
        )

    start_time = time.time()
    context = await build_pull_request_context(adapter, config.pr_number)
    logger.info(
        "Fetched pull request",
        pr_number=context.number,
        changed_file_count=len(context.changed_files),
        current_labels=sorted(context.labels),
        head_branch=context.head_branch,
        base_branch=context.base_branch,
    )

    rules = await resolve_label_rules(
        config_path=config.config_path,
        config_repo=config.config_repo,
        config_ref=config.config_ref,
        adapter_factory=create_config_repo_adapter,
        current_adapter=adapter,
        fallback_ref=context.base_branch,
    )

    plan = reconcile_labels(context, rules, sync_labels=config.sync_labels, dot=config.dot)
    if config.dry_run:
        logger.info("Dry run, not applying label changes", labels_to_add=plan.labels_to_add, labels_to_remove=plan.labels_to_remove)
        return LabelerResult(plan=plan, dry_run=True)

    if not plan.has_changes:
        logger.info("Pull request labels are up to date", pr_number=context.number)
        return LabelerResult(plan=plan)

    applied = await apply_label_plan(adapter, context.number, plan)
    logger.info(
        "Labeled pull request",
        pr_number=context.number,
        added=applied.added,
        removed=applied.removed,
        duration=round(time.time() - start_time, 2),
    )
    return LabelerResult(plan=plan, applied=applied)
