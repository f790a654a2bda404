"""Decides which labels to add to and remove from a pull request.

GitHub compares label names case-insensitively, so every membership check
here goes through ``str.casefold``.
"""

from collections.abc import Sequence

import structlog

from pr_workflows.labeler.matching import rule_matches
from pr_workflows.labeler.models import LabelAction, LabelDecision, LabelPlan, LabelRule, PullRequestContext
from pr_workflows.utils.constants import GITHUB_MAX_LABELS_PER_ISSUE

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def evaluate_rules(context: PullRequestContext, rules: Sequence[LabelRule], dot: bool = True) -> dict[str, bool]:
    """Evaluate every rule, keyed by label in first-seen order.

    A label configured more than once matches if any of its rules matches.
    Labels differing only in case are the same label and keep the first spelling.
    """
    matches: dict[str, bool] = {}
    spellings: dict[str, str] = {}
    for rule in rules:
        matched = rule_matches(rule, context, dot)
        label = spellings.setdefault(rule.label.casefold(), rule.label)
        matches[label] = matches.get(label, False) or matched
        logger.debug("Evaluated label rule", label=rule.label, matched=matched)
    return matches


def reconcile_labels(
    context: PullRequestContext,
    rules: Sequence[LabelRule],
    sync_labels: bool = True,
    dot: bool = True,
    max_labels: int = GITHUB_MAX_LABELS_PER_ISSUE,
) -> LabelPlan:
    """Compute the minimal label changes for a pull request.

    Labels whose rules match are added unless already applied. With
    ``sync_labels`` configured labels whose rules no longer match are removed
    if applied, using the spelling found on the pull request. Labels that no
    rule mentions are left alone. Adds that would push the pull request past
    ``max_labels`` are dropped in rule order.

    The function is pure, so running it again against the resulting labels
    yields an empty plan.
    """
    matches = evaluate_rules(context, rules, dot)
    current = {label.casefold(): label for label in context.labels}

    to_add = [label for label, matched in matches.items() if matched and label.casefold() not in current]
    to_remove = [current[label.casefold()] for label, matched in matches.items() if sync_labels and not matched and label.casefold() in current]

    kept_count = len(current) - len(to_remove)
    available = max(max_labels - kept_count, 0)
    truncated = to_add[available:]
    to_add = to_add[:available]
    if truncated:
        logger.warning(
            "Maximum number of labels per pull request reached, excess labels will not be added",
            max_labels=max_labels,
            truncated_labels=truncated,
        )

    decisions = tuple(LabelDecision(label=label, action=LabelAction.ADD) for label in to_add) + tuple(
        LabelDecision(label=label, action=LabelAction.REMOVE) for label in to_remove
    )
    final_labels = tuple(sorted((set(context.labels) - set(to_remove)) | set(to_add)))
    plan = LabelPlan(
        decisions=decisions,
        final_labels=final_labels,
        matched_labels=tuple(label for label, matched in matches.items() if matched),
        truncated_labels=tuple(truncated),
    )
    logger.info(
        "Reconciled pull request labels",
        pr_number=context.number,
        sync_labels=sync_labels,
        labels_to_add=plan.labels_to_add,
        labels_to_remove=plan.labels_to_remove,
        final_labels=list(final_labels),
    )
    return plan
