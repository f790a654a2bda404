"""Shared constants used across the application."""

# Labeler Constants
# -----------------

DEFAULT_LABELER_CONFIG_PATH = ".github/labeler.yml"
"""Default path of the labeler configuration file, relative to the repository root."""

GITHUB_MAX_LABELS_PER_ISSUE = 100
"""GitHub refuses to attach more than this many labels to a single issue or pull request."""

PULL_REQUEST_FILES_PAGE_SIZE = 100
"""Page size used when listing the files of a pull request (GitHub's maximum)."""

# Localization Constants
# ----------------------

DEFAULT_L10N_COMMAND = "flutter gen-l10n"
"""Default command used to regenerate localization artifacts."""

DEFAULT_WORKING_DIRECTORY = "."
"""Default working directory of the localization check."""

MATCH_ANY_TOOL_VERSION = "any"
"""Tool version/channel value that disables toolchain verification."""

MAX_LOGGED_DIFF_LENGTH = 20000
"""Maximum number of characters of `git diff` output kept for logs and step summaries."""

# GitHub Actions Output Names
# ---------------------------

OUTPUT_L10N_STATUS = "l10n-status"
OUTPUT_L10N_CHANGED_FILES = "l10n-changed-files"
OUTPUT_NEW_LABELS = "new-labels"
OUTPUT_ALL_LABELS = "all-labels"
