"""Unit tests for the Flutter toolchain verification."""

import json
from pathlib import Path
from typing import Callable

import pytest

from pr_workflows.l10n.exceptions import L10nToolError
from pr_workflows.l10n.models import CommandResult
from pr_workflows.l10n.toolchain import parse_flutter_version_output, verify_flutter_toolchain, version_matches, version_specifier

VERSION_COMMAND = "flutter --version --machine"
VERSION_OUTPUT = json.dumps({"frameworkVersion": "3.22.2", "channel": "stable", "dartSdkVersion": "3.4.3"})


@pytest.mark.parametrize(
    "expected,actual,matches",
    [
        pytest.param("any", "3.22.2", True, id="any"),
        pytest.param("3.22.2", "3.22.2", True, id="exact"),
        pytest.param("3.22", "3.22.2", True, id="prefix"),
        pytest.param("3.x", "3.22.2", True, id="wildcard"),
        pytest.param("3.22.*", "3.22.2", True, id="star_wildcard"),
        pytest.param(">=3.19", "3.22.2", True, id="specifier"),
        pytest.param("<3.19", "3.22.2", False, id="failing_specifier"),
        pytest.param("3.19.x", "3.22.2", False, id="different_minor"),
        pytest.param("3.22.2.1", "3.22.2", False, id="longer_than_installed"),
        pytest.param("3.24.x", "3.24.0-0.1.pre", True, id="flutter_prerelease_matches_prefix"),
        pytest.param("3.24.0", "3.24.0-0.1.pre", False, id="flutter_prerelease_is_not_the_release"),
        pytest.param("3.24.0-0.1.pre", "3.24.0-0.1.pre", True, id="exact_flutter_prerelease"),
        pytest.param("3.24.0-0.2.pre", "3.24.0-0.1.pre", False, id="other_flutter_prerelease"),
    ],
)
def test_version_matches(expected: str, actual: str, matches: bool) -> None:
    """Test matching a requested Flutter version against the installed one."""
    assert version_matches(expected, actual) is matches


def test_version_specifier_forms() -> None:
    """Test the specifiers built from the supported request forms."""
    assert str(version_specifier("3.x")) == "==3.*"
    assert str(version_specifier("3.22")) == "==3.22.*"
    assert str(version_specifier("3.22.2")) == "==3.22.2"
    assert str(version_specifier("x")) == ""


@pytest.mark.parametrize(
    "expected,actual",
    [
        pytest.param("3.*.2", "3.22.2", id="wildcard_in_the_middle"),
        pytest.param("3.22.2", "main", id="unparseable_installed_version"),
    ],
)
def test_version_matches_rejects_unsupported_versions(expected: str, actual: str) -> None:
    """Test that versions that cannot be compared raise a ValueError."""
    with pytest.raises(ValueError):
        version_matches(expected, actual)


def test_parse_flutter_version_output_skips_progress_lines() -> None:
    """Test that text printed before the JSON object is ignored."""
    output = "Downloading Dart SDK...\n" + VERSION_OUTPUT
    assert parse_flutter_version_output(output)["frameworkVersion"] == "3.22.2"


def test_parse_flutter_version_output_without_json() -> None:
    """Test that output without JSON is rejected."""
    with pytest.raises(ValueError):
        parse_flutter_version_output("Flutter 3.22.2 • channel stable")


def test_verify_flutter_toolchain_skipped_without_request(tmp_path: Path, fake_runner_factory: Callable) -> None:
    """Test that flutter is not run when no version or channel is requested."""
    runner = fake_runner_factory()
    assert verify_flutter_toolchain(runner, tmp_path, None, "any") is None
    assert runner.commands == []


def test_verify_flutter_toolchain_matches(tmp_path: Path, fake_runner_factory: Callable) -> None:
    """Test that a matching toolchain returns the version information."""
    runner = fake_runner_factory(results={VERSION_COMMAND: CommandResult(command=VERSION_COMMAND, exit_code=0, stdout=VERSION_OUTPUT)})
    info = verify_flutter_toolchain(runner, tmp_path, "3.22.x", "stable")
    assert info is not None
    assert info["channel"] == "stable"


@pytest.mark.parametrize(
    "version,channel,message",
    [
        pytest.param("3.19.0", None, "3.19.0 was requested", id="wrong_version"),
        pytest.param(None, "beta", "beta was requested", id="wrong_channel"),
    ],
)
def test_verify_flutter_toolchain_mismatch(
    tmp_path: Path, fake_runner_factory: Callable, version: str | None, channel: str | None, message: str
) -> None:
    """Test that a mismatched toolchain is a tool error."""
    runner = fake_runner_factory(results={VERSION_COMMAND: CommandResult(command=VERSION_COMMAND, exit_code=0, stdout=VERSION_OUTPUT)})
    with pytest.raises(L10nToolError, match=message):
        verify_flutter_toolchain(runner, tmp_path, version, channel)


def test_verify_flutter_toolchain_command_failure(tmp_path: Path, fake_runner_factory: Callable) -> None:
    """Test that a failing flutter command is a tool error."""
    runner = fake_runner_factory(results={VERSION_COMMAND: CommandResult(command=VERSION_COMMAND, exit_code=1, stderr="boom")})
    with pytest.raises(L10nToolError) as exc_info:
        verify_flutter_toolchain(runner, tmp_path, "3.22.2", None)
    assert exc_info.value.exit_code == 1


def test_verify_flutter_toolchain_unsupported_request(tmp_path: Path, fake_runner_factory: Callable) -> None:
    """Test that a version request that cannot be compared is a tool error."""
    runner = fake_runner_factory(results={VERSION_COMMAND: CommandResult(command=VERSION_COMMAND, exit_code=0, stdout=VERSION_OUTPUT)})
    with pytest.raises(L10nToolError, match="Cannot compare Flutter 3.22.2"):
        verify_flutter_toolchain(runner, tmp_path, "3.*.2", None)
