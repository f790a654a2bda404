"""Verifies the Flutter toolchain matches the requested version and channel."""

import json
from pathlib import Path
from typing import Any

import structlog
from packaging import version
from packaging.specifiers import InvalidSpecifier, SpecifierSet

from pr_workflows.l10n.exceptions import L10nToolError
from pr_workflows.l10n.runner import CommandRunner
from pr_workflows.utils.constants import MATCH_ANY_TOOL_VERSION

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

FLUTTER_VERSION_COMMAND = ["flutter", "--version", "--machine"]
VERSION_WILDCARDS = {"x", "X", "*"}
SPECIFIER_OPERATORS = ("==", "!=", "<", ">", "~=")
FULL_RELEASE_COMPONENTS = 3


def version_specifier(expected: str) -> SpecifierSet:
    """Turn a requested Flutter version into a version specifier.

    Requests that already start with an operator (``>=3.19``) are used as is.
    Trailing ``x``/``*`` components and requests shorter than major.minor.patch
    become prefix matches, so ``3.x`` is ``==3.*`` and ``3.22`` is ``==3.22.*``.

    Raises:
        InvalidSpecifier: If the request cannot be expressed as a specifier.
    """
    if expected.startswith(SPECIFIER_OPERATORS):
        return SpecifierSet(expected)
    parts = expected.split(".")
    while parts and parts[-1] in VERSION_WILDCARDS:
        parts.pop()
    if not parts:
        return SpecifierSet()
    if any(part in VERSION_WILDCARDS for part in parts):
        raise InvalidSpecifier(f"wildcards are only supported at the end of a version: {expected!r}")
    release = ".".join(parts)
    if len(parts) < FULL_RELEASE_COMPONENTS:
        return SpecifierSet(f"=={release}.*")
    return SpecifierSet(f"=={release}")


def installed_version(actual: str) -> version.Version:
    """Parse the installed Flutter version.

    Flutter pre-releases (``3.24.0-0.1.pre``) are not PEP 440 versions; they
    are read as a development release of their base version.

    Raises:
        InvalidVersion: If the version cannot be parsed.
    """
    try:
        return version.Version(actual)
    except version.InvalidVersion:
        release, separator, _ = actual.partition("-")
        if not separator:
            raise
        return version.Version(f"{release}.dev0")


def version_matches(expected: str, actual: str) -> bool:
    """Compare a requested version to an installed one.

    ``any`` matches everything. Flutter pre-release requests only match the
    exact same pre-release.

    Raises:
        ValueError: If either version cannot be parsed.
    """
    if expected == MATCH_ANY_TOOL_VERSION or expected == actual:
        return True
    if "-" in expected:
        return False
    return version_specifier(expected).contains(installed_version(actual), prereleases=True)


def parse_flutter_version_output(output: str) -> dict[str, Any]:
    """Parse ``flutter --version --machine``, which may print progress lines before the JSON."""
    start = output.find("{")
    if start == -1:
        raise ValueError("no JSON object in flutter --version output")
    payload = json.loads(output[start:])
    if not isinstance(payload, dict):
        raise ValueError("flutter --version output is not a JSON object")
    return payload


def verify_flutter_toolchain(
    runner: CommandRunner,
    working_directory: Path,
    flutter_version: str | None,
    flutter_channel: str | None,
) -> dict[str, Any] | None:
    """Check the installed Flutter SDK against the requested version and channel.

    Returns the parsed version information, or None when nothing was requested.

    Raises:
        L10nToolError: If flutter cannot be run or does not match the request.
    """
    wants_version = flutter_version not in (None, MATCH_ANY_TOOL_VERSION)
    wants_channel = flutter_channel not in (None, MATCH_ANY_TOOL_VERSION)
    if not (wants_version or wants_channel):
        return None

    command = " ".join(FLUTTER_VERSION_COMMAND)
    try:
        result = runner.run(FLUTTER_VERSION_COMMAND, working_directory)
    except OSError as exc:
        raise L10nToolError(f"Could not start '{command}': {exc}", command=command) from exc
    if not result.succeeded:
        raise L10nToolError(
            f"'{command}' exited with status {result.exit_code}",
            command=command,
            exit_code=result.exit_code,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    try:
        info = parse_flutter_version_output(result.stdout)
    except ValueError as exc:
        raise L10nToolError(f"Could not read Flutter version: {exc}", command=command, stdout=result.stdout) from exc

    framework_version = str(info.get("frameworkVersion", ""))
    framework_channel = str(info.get("channel", ""))
    logger.info("Detected Flutter toolchain", version=framework_version, channel=framework_channel)

    if wants_version:
        try:
            matched = version_matches(str(flutter_version), framework_version)
        except ValueError as exc:
            raise L10nToolError(f"Cannot compare Flutter {framework_version} to {flutter_version}: {exc}", command=command) from exc
        if not matched:
            raise L10nToolError(f"Flutter {framework_version} is installed but {flutter_version} was requested", command=command)
    if wants_channel and framework_channel != flutter_channel:
        raise L10nToolError(f"Flutter channel {framework_channel} is installed but {flutter_channel} was requested", command=command)
    return info
