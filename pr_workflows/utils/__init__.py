"""Utility modules for shared functionality."""

from .constants import (
    DEFAULT_L10N_COMMAND,
    DEFAULT_LABELER_CONFIG_PATH,
    GITHUB_MAX_LABELS_PER_ISSUE,
)

__all__ = [
    "DEFAULT_L10N_COMMAND",
    "DEFAULT_LABELER_CONFIG_PATH",
    "GITHUB_MAX_LABELS_PER_ISSUE",
]
