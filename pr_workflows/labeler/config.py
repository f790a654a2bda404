"""Resolves label rules from the local checkout or from a repository on GitHub."""

from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import structlog
from githubkit.exception import RequestFailed
from pydantic import ValidationError
from ruamel.yaml.error import YAMLError

from pr_workflows.github.abc import GitHubClientBase
from pr_workflows.labeler.exceptions import ConfigurationNotFoundError, ConfigurationParseError
from pr_workflows.labeler.models import (
    BranchCondition,
    BranchTarget,
    ChangedFilesCondition,
    ChangedFilesMatcher,
    ChangedFilesMatchKind,
    LabelRule,
    MatchBlock,
    MatchCondition,
    MatchMode,
)
from pr_workflows.labeler.schemas import ChangedFilesEntryModel, MatchConditionModel, RuleEntryModel
from pr_workflows.utils.yaml import load_yaml_file, load_yaml_text

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

AdapterFactory = Callable[[str], Awaitable[GitHubClientBase]]
"""Creates an adapter for another repository ('owner/repo')."""


def _changed_files_matchers(entries: list[ChangedFilesEntryModel]) -> tuple[ChangedFilesMatcher, ...]:
    matchers: list[ChangedFilesMatcher] = []
    for entry in entries:
        for kind in ChangedFilesMatchKind:
            globs = getattr(entry, kind.value.replace("-", "_"))
            if globs is not None:
                matchers.append(ChangedFilesMatcher(kind=kind, globs=tuple(globs)))
    return tuple(matchers)


def _conditions(model: MatchConditionModel) -> list[MatchCondition]:
    conditions: list[MatchCondition] = []
    if model.changed_files is not None:
        conditions.append(ChangedFilesCondition(matchers=_changed_files_matchers(model.changed_files)))
    if model.head_branch is not None:
        conditions.append(BranchCondition(target=BranchTarget.HEAD, patterns=tuple(model.head_branch)))
    if model.base_branch is not None:
        conditions.append(BranchCondition(target=BranchTarget.BASE, patterns=tuple(model.base_branch)))
    return conditions


def _rule_blocks(entries: list[RuleEntryModel]) -> tuple[MatchBlock, ...]:
    """Turn each entry of a label into one match block.

    ``all`` entries become ``all`` blocks. ``any`` entries and entries made of
    bare conditions become ``any`` blocks.
    """
    blocks: list[MatchBlock] = []
    for entry in entries:
        if entry.all_ is not None:
            conditions = [condition for item in entry.all_ for condition in _conditions(item)]
            blocks.append(MatchBlock(mode=MatchMode.ALL, conditions=tuple(conditions)))
        elif entry.any_ is not None:
            conditions = [condition for item in entry.any_ for condition in _conditions(item)]
            blocks.append(MatchBlock(mode=MatchMode.ANY, conditions=tuple(conditions)))
        else:
            blocks.append(MatchBlock(mode=MatchMode.ANY, conditions=tuple(_conditions(entry))))
    return tuple(blocks)


def parse_label_rules(document: Any, source: str) -> list[LabelRule]:
    """Validate a parsed configuration document and build the label rules.

    Raises:
        ConfigurationParseError: If the document is not a mapping of label to a list of rule entries.
    """
    if document is None:
        raise ConfigurationParseError("Labeler configuration is empty", source=source)
    if not isinstance(document, dict):
        raise ConfigurationParseError(
            f"Labeler configuration must be a mapping of label to rules, found {type(document).__name__}",
            source=source,
        )

    rules: list[LabelRule] = []
    for raw_label, raw_entries in document.items():
        label = str(raw_label)
        if not isinstance(raw_entries, list):
            raise ConfigurationParseError(
                f"Found unexpected type for label '{label}' (should be a list of rule entries, found {type(raw_entries).__name__})",
                source=source,
            )
        entries: list[RuleEntryModel] = []
        for idx, raw_entry in enumerate(raw_entries):
            if raw_entry is None:
                continue
            try:
                entries.append(RuleEntryModel.model_validate(raw_entry))
            except ValidationError as ve:
                logger.error("Validation error for label rule", source=source, label=label, entry_index=idx, error=ve.errors())
                raise ConfigurationParseError(f"Invalid rule entry {idx} for label '{label}': {ve}", source=source) from ve
        if not entries:
            raise ConfigurationParseError(f"Label '{label}' must list at least one rule entry", source=source)
        rules.append(LabelRule(label=label, blocks=_rule_blocks(entries)))

    logger.info("Loaded label rules", source=source, rule_count=len(rules))
    return rules


def parse_label_rules_text(text: str, source: str) -> list[LabelRule]:
    """Parse label rules from YAML text."""
    try:
        document = load_yaml_text(text)
    except YAMLError as exc:
        logger.error("Failed to parse labeler configuration", source=source, error=str(exc))
        raise ConfigurationParseError(f"Labeler configuration is not valid YAML: {exc}", source=source) from exc
    return parse_label_rules(document, source)


def load_local_label_rules(path: Path) -> list[LabelRule]:
    """Load label rules from a file in the local checkout.

    Raises:
        ConfigurationNotFoundError: If the file does not exist.
        ConfigurationParseError: If the file is not a valid configuration.
    """
    source = str(path)
    if not path.is_file():
        raise ConfigurationNotFoundError("Labeler configuration file not found", source=source)
    try:
        document = load_yaml_file(path)
    except YAMLError as exc:
        logger.error("Failed to parse labeler configuration", source=source, error=str(exc))
        raise ConfigurationParseError(f"Labeler configuration is not valid YAML: {exc}", source=source) from exc
    return parse_label_rules(document, source)


async def fetch_remote_label_rules(adapter: GitHubClientBase, config_path: str, ref: str | None) -> list[LabelRule]:
    """Fetch and parse label rules from a repository through the GitHub API.

    Raises:
        ConfigurationNotFoundError: If the repository, ref or path is missing or inaccessible.
        ConfigurationParseError: If the file is not a valid configuration.
    """
    source = f"{getattr(adapter, 'full_name', 'repository')}:{config_path}@{ref or 'default branch'}"
    logger.info("Fetching labeler configuration", source=source)
    try:
        text = await adapter.get_file_content(config_path, ref)
    except (FileNotFoundError, IsADirectoryError) as exc:
        raise ConfigurationNotFoundError(f"Labeler configuration not found: {exc}", source=source) from exc
    except RequestFailed as exc:
        raise ConfigurationNotFoundError(
            f"Labeler configuration is not accessible (HTTP {exc.response.status_code})",
            source=source,
        ) from exc
    return parse_label_rules_text(text, source)


async def resolve_label_rules(
    config_path: str,
    config_repo: str | None = None,
    config_ref: str | None = None,
    adapter_factory: AdapterFactory | None = None,
    current_adapter: GitHubClientBase | None = None,
    fallback_ref: str | None = None,
    base_directory: Path = Path("."),
) -> list[LabelRule]:
    """Resolve label rules from the configured source.

    Without ``config_repo`` the file is read from the local checkout. If it is
    not there and ``current_adapter`` is given, it is fetched from the current
    repository at ``fallback_ref`` (the pull request's base branch). With
    ``config_repo`` the file is fetched from that repository at ``config_ref``.

    Raises:
        ConfigurationNotFoundError: If the configuration cannot be found or accessed.
        ConfigurationParseError: If the configuration is malformed.
    """
    if config_repo:
        if adapter_factory is None:
            raise ConfigurationNotFoundError("No GitHub client available to fetch remote configuration", source=config_repo)
        try:
            remote_adapter = await adapter_factory(config_repo)
        except (ValueError, RequestFailed) as exc:
            raise ConfigurationNotFoundError(f"Configuration repository is not accessible: {exc}", source=config_repo) from exc
        return await fetch_remote_label_rules(remote_adapter, config_path, config_ref)

    local_path = base_directory / config_path
    if local_path.is_file() or current_adapter is None:
        return load_local_label_rules(local_path)

    logger.info("Labeler configuration not found locally, fetching from repository", path=str(local_path), ref=fallback_ref)
    return await fetch_remote_label_rules(current_adapter, config_path, fallback_ref)
