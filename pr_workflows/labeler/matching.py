"""Evaluates label rules against a pull request.

Glob matching is delegated to wcmatch with globstar, brace and extglob
support, so ``**/*.md`` matches ``README.md`` as well as ``docs/a/b.md``.
A glob that starts with ``!`` matches the paths the rest of the glob does not.
"""

import re
from collections.abc import Iterable

from wcmatch import glob as wcglob

from pr_workflows.labeler.models import (
    BranchCondition,
    BranchTarget,
    ChangedFilesMatcher,
    ChangedFilesMatchKind,
    LabelRule,
    MatchBlock,
    MatchCondition,
    MatchMode,
    PullRequestContext,
)

BASE_GLOB_FLAGS = wcglob.GLOBSTAR | wcglob.BRACE | wcglob.EXTGLOB


def glob_flags(dot: bool) -> int:
    """Return the wcmatch flags for the given dot-file setting."""
    return BASE_GLOB_FLAGS | wcglob.DOTGLOB if dot else BASE_GLOB_FLAGS


def glob_matches(path: str, pattern: str, dot: bool = True) -> bool:
    """Return True if a single glob (optionally negated with a leading ``!``) matches a path."""
    if pattern.startswith("!"):
        return not wcglob.globmatch(path, pattern[1:], flags=glob_flags(dot))
    return wcglob.globmatch(path, pattern, flags=glob_flags(dot))


def changed_files_matcher_matches(matcher: ChangedFilesMatcher, changed_files: Iterable[str], dot: bool = True) -> bool:
    """Evaluate one matcher. A pull request without changed files matches nothing."""
    files = sorted(changed_files)
    if not files:
        return False
    globs = matcher.globs
    if matcher.kind is ChangedFilesMatchKind.ANY_GLOB_TO_ANY_FILE:
        return any(glob_matches(path, pattern, dot) for pattern in globs for path in files)
    if matcher.kind is ChangedFilesMatchKind.ANY_GLOB_TO_ALL_FILES:
        return any(all(glob_matches(path, pattern, dot) for path in files) for pattern in globs)
    if matcher.kind is ChangedFilesMatchKind.ALL_GLOBS_TO_ANY_FILE:
        return any(all(glob_matches(path, pattern, dot) for pattern in globs) for path in files)
    return all(glob_matches(path, pattern, dot) for pattern in globs for path in files)


def branch_condition_matches(condition: BranchCondition, context: PullRequestContext, mode: MatchMode) -> bool:
    """Search the branch name with each regular expression."""
    branch = context.head_branch if condition.target is BranchTarget.HEAD else context.base_branch
    if not branch:
        return False
    results = (re.search(pattern, branch) is not None for pattern in condition.patterns)
    return any(results) if mode is MatchMode.ANY else all(results)


def condition_matches(condition: MatchCondition, context: PullRequestContext, mode: MatchMode, dot: bool = True) -> bool:
    """Evaluate a condition with the semantics of the block that holds it.

    Inside an ``any`` block a condition matches when one of its matchers or
    patterns does; inside an ``all`` block every one must.
    """
    if isinstance(condition, BranchCondition):
        return branch_condition_matches(condition, context, mode)
    results = (changed_files_matcher_matches(matcher, context.changed_files, dot) for matcher in condition.matchers)
    return any(results) if mode is MatchMode.ANY else all(results)


def block_matches(block: MatchBlock, context: PullRequestContext, dot: bool = True) -> bool:
    """Evaluate a block: any or all of its conditions."""
    results = (condition_matches(condition, context, block.mode, dot) for condition in block.conditions)
    return any(results) if block.mode is MatchMode.ANY else all(results)


def rule_matches(rule: LabelRule, context: PullRequestContext, dot: bool = True) -> bool:
    """A rule matches when any one of its blocks matches."""
    return any(block_matches(block, context, dot) for block in rule.blocks)
