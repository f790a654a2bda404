"""Unit tests for computing label plans."""

import pytest

from pr_workflows.labeler.models import (
    BranchCondition,
    BranchTarget,
    LabelAction,
    LabelDecision,
    LabelRule,
    MatchBlock,
    MatchMode,
    PullRequestContext,
)
from pr_workflows.labeler.reconcile import evaluate_rules, reconcile_labels

RULES = [
    LabelRule.from_patterns("documentation", ["**/*.md", "docs/**"]),
    LabelRule.from_patterns("android", ["android/**/*"]),
    LabelRule.from_patterns("ios", ["ios/**/*"]),
]


def make_context(files: list[str], labels: set[str] | None = None) -> PullRequestContext:
    """Build a pull request context."""
    return PullRequestContext(number=42, changed_files=frozenset(files), labels=frozenset(labels or set()))


def apply(context: PullRequestContext, labels: tuple[str, ...]) -> PullRequestContext:
    """Return the context as it looks after a plan was applied."""
    return PullRequestContext(number=context.number, changed_files=context.changed_files, labels=frozenset(labels))


def test_matching_label_is_added() -> None:
    """Test that a README change adds the documentation label."""
    plan = reconcile_labels(make_context(["README.md"]), RULES)
    assert plan.decisions == (LabelDecision(label="documentation", action=LabelAction.ADD),)
    assert plan.final_labels == ("documentation",)
    assert plan.matched_labels == ("documentation",)


def test_non_matching_change_adds_nothing() -> None:
    """Test that an iOS change does not add the android label."""
    plan = reconcile_labels(make_context(["ios/Main.swift"]), [LabelRule.from_patterns("android", ["android/**/*"])])
    assert plan.decisions == ()
    assert plan.has_changes is False


def test_already_applied_label_is_not_added_again() -> None:
    """Test that a matching label already on the pull request produces no decision."""
    plan = reconcile_labels(make_context(["README.md"], {"documentation"}), RULES)
    assert plan.decisions == ()
    assert plan.final_labels == ("documentation",)


def test_sync_removes_configured_label_that_no_longer_matches() -> None:
    """Test that sync removes a configured label whose files are no longer changed."""
    plan = reconcile_labels(make_context(["ios/Main.swift"], {"android"}), RULES)
    assert plan.labels_to_add == ["ios"]
    assert plan.labels_to_remove == ["android"]
    assert plan.final_labels == ("ios",)


def test_sync_disabled_never_removes() -> None:
    """Test that without sync no label is removed."""
    plan = reconcile_labels(make_context(["ios/Main.swift"], {"android"}), RULES, sync_labels=False)
    assert plan.labels_to_remove == []
    assert plan.final_labels == ("android", "ios")


def test_unmanaged_labels_are_kept() -> None:
    """Test that labels no rule mentions are never removed."""
    plan = reconcile_labels(make_context(["README.md"], {"needs-review", "android"}), RULES)
    assert "needs-review" not in plan.labels_to_remove
    assert plan.final_labels == ("documentation", "needs-review")


@pytest.mark.parametrize(
    "files,labels,sync",
    [
        pytest.param(["README.md"], set(), True, id="add"),
        pytest.param(["ios/Main.swift"], {"android", "wip"}, True, id="add_and_remove"),
        pytest.param(["android/app/build.gradle", "docs/index.md"], {"ios"}, False, id="no_sync"),
        pytest.param([], {"documentation"}, True, id="no_changed_files"),
    ],
)
def test_reconcile_is_idempotent(files: list[str], labels: set[str], sync: bool) -> None:
    """Test that reconciling against the result of a plan yields an empty plan."""
    context = make_context(files, labels)
    first = reconcile_labels(context, RULES, sync_labels=sync)
    second = reconcile_labels(apply(context, first.final_labels), RULES, sync_labels=sync)
    assert second.decisions == ()
    assert second.final_labels == first.final_labels


def test_pull_request_without_changed_files_removes_configured_labels() -> None:
    """Test that an empty change set matches no changed-files rule."""
    plan = reconcile_labels(make_context([], {"documentation"}), RULES)
    assert plan.labels_to_remove == ["documentation"]


def test_duplicate_labels_match_if_any_rule_matches() -> None:
    """Test that a label configured twice applies when either rule matches."""
    rules = [
        LabelRule.from_patterns("mobile", ["android/**"]),
        LabelRule.from_patterns("mobile", ["ios/**"]),
    ]
    assert evaluate_rules(make_context(["ios/Main.swift"]), rules) == {"mobile": True}
    plan = reconcile_labels(make_context(["ios/Main.swift"], {"mobile"}), rules)
    assert plan.decisions == ()


def test_branch_rule_labels_pull_request() -> None:
    """Test that a head-branch rule adds its label."""
    rule = LabelRule(
        label="feature",
        blocks=(MatchBlock(mode=MatchMode.ANY, conditions=(BranchCondition(target=BranchTarget.HEAD, patterns=("^feature",)),)),),
    )
    context = PullRequestContext(number=1, changed_files=frozenset({"a.py"}), head_branch="feature/login")
    assert reconcile_labels(context, [rule]).labels_to_add == ["feature"]


def test_labels_over_the_limit_are_truncated(caplog: pytest.LogCaptureFixture) -> None:
    """Test that adds past the label limit are dropped in rule order and reported."""
    rules = [LabelRule.from_patterns(f"label-{idx}", ["**"]) for idx in range(4)]
    plan = reconcile_labels(make_context(["a.py"], {"existing"}), rules, max_labels=3)
    assert plan.labels_to_add == ["label-0", "label-1"]
    assert plan.truncated_labels == ("label-2", "label-3")
    assert len(plan.final_labels) == 3
    assert "Maximum number of labels" in caplog.text


def test_removals_free_room_for_adds() -> None:
    """Test that labels removed by sync do not count against the limit."""
    rules = [LabelRule.from_patterns("old", ["old/**"]), LabelRule.from_patterns("new", ["new/**"])]
    plan = reconcile_labels(make_context(["new/a.py"], {"old"}), rules, max_labels=1)
    assert plan.labels_to_add == ["new"]
    assert plan.labels_to_remove == ["old"]
    assert plan.truncated_labels == ()


def test_label_names_are_compared_case_insensitively() -> None:
    """Test that a label already applied with different casing is neither re-added nor duplicated."""
    rules = [LabelRule.from_patterns("Documentation", ["**/*.md"])]
    plan = reconcile_labels(make_context(["README.md"], {"documentation"}), rules)
    assert plan.decisions == ()
    assert plan.final_labels == ("documentation",)


def test_sync_removes_label_applied_with_different_casing() -> None:
    """Test that sync removes a configured label using the spelling found on the pull request."""
    rules = [LabelRule.from_patterns("Android", ["android/**/*"])]
    plan = reconcile_labels(make_context(["ios/Main.swift"], {"android", "needs-review"}), rules)
    assert plan.decisions == (LabelDecision(label="android", action=LabelAction.REMOVE),)
    assert plan.final_labels == ("needs-review",)


def test_rules_differing_only_in_case_share_a_label() -> None:
    """Test that rules for the same label in different casing are combined under the first spelling."""
    rules = [LabelRule.from_patterns("Docs", ["docs/**"]), LabelRule.from_patterns("docs", ["**/*.md"])]
    assert evaluate_rules(make_context(["README.md"]), rules) == {"Docs": True}
