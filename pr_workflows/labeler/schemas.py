"""Pydantic schema for the entries of a labeler configuration file.

Each label maps to a list of entries and applies when any entry matches. An
entry holds an ``any`` block, an ``all`` block, or bare
``changed-files``/``head-branch``/``base-branch`` keys:

    documentation:
      - changed-files:
          - any-glob-to-any-file: ['docs/**', '**/*.md']
    feature:
      - head-branch: ['^feature', 'feature']
"""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _as_string_list(value: Any) -> Any:
    """Accept a single string wherever a list of strings is expected."""
    if isinstance(value, str):
        return [value]
    return value


def _require_non_empty(values: list[str] | None) -> list[str] | None:
    if values is not None:
        if not values:
            raise ValueError("must list at least one pattern")
        if any(not pattern for pattern in values):
            raise ValueError("patterns must not be empty strings")
    return values


def _has_values(model: BaseModel) -> bool:
    return any(getattr(model, name) is not None for name in type(model).model_fields)


class ChangedFilesEntryModel(BaseModel):
    """One item of a ``changed-files`` list."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    any_glob_to_any_file: list[str] | None = Field(default=None, alias="any-glob-to-any-file")
    any_glob_to_all_files: list[str] | None = Field(default=None, alias="any-glob-to-all-files")
    all_globs_to_any_file: list[str] | None = Field(default=None, alias="all-globs-to-any-file")
    all_globs_to_all_files: list[str] | None = Field(default=None, alias="all-globs-to-all-files")

    @field_validator("*", mode="before")
    @classmethod
    def coerce_globs(cls, value: Any) -> Any:
        """Accept a single glob string."""
        return _as_string_list(value)

    @field_validator("*")
    @classmethod
    def check_globs(cls, value: list[str] | None) -> list[str] | None:
        """Reject empty glob lists."""
        return _require_non_empty(value)

    @model_validator(mode="after")
    def check_has_matcher(self) -> "ChangedFilesEntryModel":
        """An entry must name at least one matcher."""
        if not _has_values(self):
            raise ValueError("changed-files entry must contain at least one matcher")
        return self


class MatchConditionModel(BaseModel):
    """A condition inside an ``any`` or ``all`` block, or bare in an entry."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    changed_files: list[ChangedFilesEntryModel] | None = Field(default=None, alias="changed-files")
    head_branch: list[str] | None = Field(default=None, alias="head-branch")
    base_branch: list[str] | None = Field(default=None, alias="base-branch")

    @field_validator("head_branch", "base_branch", mode="before")
    @classmethod
    def coerce_branch_patterns(cls, value: Any) -> Any:
        """Accept a single regular expression string."""
        return _as_string_list(value)

    @field_validator("head_branch", "base_branch")
    @classmethod
    def check_branch_patterns(cls, value: list[str] | None) -> list[str] | None:
        """Branch patterns must be valid regular expressions."""
        _require_non_empty(value)
        for pattern in value or []:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid regular expression {pattern!r}: {exc}") from exc
        return value

    @field_validator("changed_files")
    @classmethod
    def check_changed_files(cls, value: list[ChangedFilesEntryModel] | None) -> list[ChangedFilesEntryModel] | None:
        """A changed-files list must not be empty."""
        if value is not None and not value:
            raise ValueError("changed-files must list at least one matcher")
        return value

    @model_validator(mode="after")
    def check_has_condition(self) -> "MatchConditionModel":
        """A condition must name at least one key."""
        if not _has_values(self):
            raise ValueError("condition must contain changed-files, head-branch or base-branch")
        return self


class RuleEntryModel(MatchConditionModel):
    """One item of the list a label maps to."""

    any_: list[MatchConditionModel] | None = Field(default=None, alias="any")
    all_: list[MatchConditionModel] | None = Field(default=None, alias="all")

    @field_validator("any_", "all_")
    @classmethod
    def check_block(cls, value: list[MatchConditionModel] | None) -> list[MatchConditionModel] | None:
        """Blocks must hold at least one condition."""
        if value is not None and not value:
            raise ValueError("block must list at least one condition")
        return value

    @model_validator(mode="after")
    def check_has_condition(self) -> "RuleEntryModel":
        """An entry holds exactly one of an any block, an all block or bare conditions."""
        if not _has_values(self):
            raise ValueError("entry must contain any, all, changed-files, head-branch or base-branch")
        has_bare_conditions = any(getattr(self, name) is not None for name in MatchConditionModel.model_fields)
        forms = [self.any_ is not None, self.all_ is not None, has_bare_conditions]
        if sum(forms) > 1:
            raise ValueError("entry must hold only one of any, all or bare conditions; list them as separate entries")
        return self
