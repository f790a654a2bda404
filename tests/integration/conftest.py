"""Pytest configuration for integration tests."""

import subprocess
from pathlib import Path
from typing import Callable, Generator

import pytest
import structlog

RUNNER_ENVIRONMENT_VARIABLES = [
    "GITHUB_OUTPUT",
    "GITHUB_STEP_SUMMARY",
    "GITHUB_EVENT_PATH",
    "GITHUB_REPOSITORY",
    "GITHUB_TOKEN",
    "GITHUB_PAT_TOKEN",
    "GITHUB_APP_ID",
    "GITHUB_APP_PRIVATE_KEY_PATH",
    "GITHUB_APP_INSTALLATION_ID",
    "PR_NUMBER",
    "CONFIG_REPO",
    "CONFIG_PATH",
    "CONFIG_REF",
    "SYNC_LABELS",
    "DRY_RUN",
    "WORKING_DIRECTORY",
    "L10N_COMMAND",
    "FAIL_ON_CHANGES",
    "FLUTTER_VERSION",
    "FLUTTER_CHANNEL",
    "DEBUG",
]

ARB_FILE = '{\n  "@@locale": "en",\n  "hello": "Hello"\n}\n'
GENERATED_FILE = "// Generated file. Do not edit.\nconst hello = 'Hello';\n"
GENERATOR_SCRIPT = """#!/bin/sh
value=$(sed -n 's/.*"hello": "\\(.*\\)".*/\\1/p' lib/l10n/app_en.arb)
printf "// Generated file. Do not edit.\\nconst hello = '%s';\\n" "$value" > lib/l10n/app_localizations.dart
"""
GENERATOR_COMMAND = "sh tool/gen_l10n.sh"


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Undo the logging configuration applied by each CLI invocation."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def runner_env(tmp_path: Path) -> dict[str, str | None]:
    """Environment for CLI invocations: runner files under tmp_path and nothing inherited from a real runner."""
    env: dict[str, str | None] = {name: None for name in RUNNER_ENVIRONMENT_VARIABLES}
    env["GITHUB_OUTPUT"] = str(tmp_path / "github_output")
    env["GITHUB_STEP_SUMMARY"] = str(tmp_path / "step_summary.md")
    return env


def git(repo: Path, *args: str) -> str:
    """Run a git command in a repository and return its stdout."""
    completed = subprocess.run(
        ["git", "-c", "user.name=Localization Bot", "-c", "user.email=l10n@example.com", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return completed.stdout


@pytest.fixture
def run_git() -> Callable[..., str]:
    """Run git commands in a test repository."""
    return git


@pytest.fixture
def generator_command() -> str:
    """Shell command that regenerates the localization code of the flutter_project fixture."""
    return GENERATOR_COMMAND


@pytest.fixture
def flutter_project(tmp_path: Path) -> Path:
    """A committed project with a translation file and the code generated from it."""
    project = tmp_path / "app"
    (project / "lib" / "l10n").mkdir(parents=True)
    (project / "lib" / "l10n" / "app_en.arb").write_text(ARB_FILE, encoding="utf-8")
    (project / "lib" / "l10n" / "app_localizations.dart").write_text(GENERATED_FILE, encoding="utf-8")
    (project / "tool").mkdir()
    (project / "tool" / "gen_l10n.sh").write_text(GENERATOR_SCRIPT, encoding="utf-8")
    git(project, "init", "--quiet")
    git(project, "add", ".")
    git(project, "commit", "--quiet", "-m", "Add localizations")
    return project
