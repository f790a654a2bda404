"""Contains utility functions for GitHub interactions."""

import json
from pathlib import Path
from typing import Any


async def split_repository_in_configuration(repo: str | None) -> tuple[str, str]:
    """Splits the repository in the configuration into owner and repository."""
    if repo is None:
        raise ValueError("A repository is required in the configuration.")
    repo = repo.strip("/")
    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError("Repository must be in the format 'owner/repo' with no leading/trailing slashes or extra parts.")
    owner, repository = parts
    return owner, repository


def load_event_payload(event_path: Path | None) -> dict[str, Any]:
    """Load the webhook payload GitHub Actions stores at GITHUB_EVENT_PATH.

    Returns an empty dictionary when no event path is configured.
    """
    if event_path is None:
        return {}
    with open(event_path, encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, dict):
        raise ValueError(f"Event payload at {event_path} is not a JSON object")
    return payload


def pull_request_number_from_event(payload: dict[str, Any]) -> int | None:
    """Extract the pull request number from a pull_request or pull_request_target payload."""
    pull_request = payload.get("pull_request")
    if isinstance(pull_request, dict) and isinstance(pull_request.get("number"), int):
        return pull_request["number"]
    number = payload.get("number")
    if isinstance(number, int):
        return number
    return None
