"""Value types used by the labeler.

All types are immutable; a fresh set is built for every run.
"""

from dataclasses import dataclass, field
from enum import Enum


class ChangedFilesMatchKind(str, Enum):
    """How the globs of a changed-files matcher are combined with the changed files."""

    ANY_GLOB_TO_ANY_FILE = "any-glob-to-any-file"
    ANY_GLOB_TO_ALL_FILES = "any-glob-to-all-files"
    ALL_GLOBS_TO_ANY_FILE = "all-globs-to-any-file"
    ALL_GLOBS_TO_ALL_FILES = "all-globs-to-all-files"


class BranchTarget(str, Enum):
    """Which branch of the pull request a branch condition inspects."""

    HEAD = "head-branch"
    BASE = "base-branch"


class MatchMode(str, Enum):
    """How the conditions of a match block are combined."""

    ANY = "any"
    ALL = "all"


class LabelAction(str, Enum):
    """Mutation applied to a pull request label."""

    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True)
class ChangedFilesMatcher:
    """A set of globs and the way they must match the changed files."""

    kind: ChangedFilesMatchKind
    globs: tuple[str, ...]


@dataclass(frozen=True)
class ChangedFilesCondition:
    """A ``changed-files`` entry of a rule block."""

    matchers: tuple[ChangedFilesMatcher, ...]


@dataclass(frozen=True)
class BranchCondition:
    """A ``head-branch`` or ``base-branch`` entry: regular expressions searched in the branch name."""

    target: BranchTarget
    patterns: tuple[str, ...]


MatchCondition = ChangedFilesCondition | BranchCondition


@dataclass(frozen=True)
class MatchBlock:
    """A group of conditions combined with ``any`` or ``all`` semantics."""

    mode: MatchMode
    conditions: tuple[MatchCondition, ...]


@dataclass(frozen=True)
class LabelRule:
    """A label and its blocks; the label applies when any block matches."""

    label: str
    blocks: tuple[MatchBlock, ...]

    @classmethod
    def from_patterns(cls, label: str, patterns: list[str] | tuple[str, ...]) -> "LabelRule":
        """Build the common rule form: the label applies when any glob matches any changed file."""
        matcher = ChangedFilesMatcher(kind=ChangedFilesMatchKind.ANY_GLOB_TO_ANY_FILE, globs=tuple(patterns))
        block = MatchBlock(mode=MatchMode.ANY, conditions=(ChangedFilesCondition(matchers=(matcher,)),))
        return cls(label=label, blocks=(block,))


@dataclass(frozen=True)
class PullRequestContext:
    """What the reconciler knows about the pull request being labeled."""

    number: int
    changed_files: frozenset[str]
    labels: frozenset[str] = field(default_factory=frozenset)
    head_branch: str | None = None
    base_branch: str | None = None


@dataclass(frozen=True)
class LabelDecision:
    """A single label mutation."""

    label: str
    action: LabelAction


@dataclass(frozen=True)
class LabelPlan:
    """The minimal set of decisions that brings the pull request labels in line with the rules."""

    decisions: tuple[LabelDecision, ...]
    final_labels: tuple[str, ...]
    matched_labels: tuple[str, ...]
    truncated_labels: tuple[str, ...] = ()

    @property
    def labels_to_add(self) -> list[str]:
        """Labels the plan adds, in rule order."""
        return [decision.label for decision in self.decisions if decision.action is LabelAction.ADD]

    @property
    def labels_to_remove(self) -> list[str]:
        """Labels the plan removes, in rule order."""
        return [decision.label for decision in self.decisions if decision.action is LabelAction.REMOVE]

    @property
    def has_changes(self) -> bool:
        """Whether applying the plan would change anything."""
        return bool(self.decisions)


@dataclass
class LabelApplyResult:
    """Labels actually added and removed on GitHub."""

    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
