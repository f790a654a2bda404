# This file is intended to hold the setup for the authenticated githubkit client.

"""Sets up the authenticated githubkit client."""

from pathlib import Path
from typing import TypeAlias

from githubkit import GitHub
from githubkit.auth import (
    AppAuthStrategy,
    AppInstallationAuthStrategy,
    TokenAuthStrategy,
)
from githubkit.versions.latest.models import Installation

from pr_workflows.configuration.models import GitHubAuthenticationType
from pr_workflows.utils.github import split_repository_in_configuration

GitHubClient: TypeAlias = GitHub[AppInstallationAuthStrategy] | GitHub[TokenAuthStrategy]


async def get_github_app_client(
    repo: str,
    github_app_id: int,
    github_app_private_key_path: Path,
    github_api_url: str,
    github_app_installation_id: int | None = None,
) -> GitHub[AppInstallationAuthStrategy]:
    """Returns a GitHub client authenticated as an installation of the App.

    A given installation ID is used as is. Without one, the installation
    that covers the repository is looked up.
    """
    try:
        with open(github_app_private_key_path) as f:
            private_key = f.read()
        auth = AppAuthStrategy(
            app_id=github_app_id,
            private_key=private_key,
        )
        app_client = GitHub(auth=auth, base_url=github_api_url, http_cache=False)

        if github_app_installation_id is None:
            owner, repository = await split_repository_in_configuration(repo=repo)
            resp = await app_client.rest.apps.async_get_repo_installation(
                owner=owner,
                repo=repository,
            )
            repo_installation: Installation = resp.parsed_data
            github_app_installation_id = repo_installation.id
        return app_client.with_auth(app_client.auth.as_installation(github_app_installation_id))
    except Exception as e:
        raise ValueError(f"Failed to get GitHub App installation for {repo}: {e}") from e


async def get_github_pat_client(github_pat_token: str, github_api_url: str) -> GitHub[TokenAuthStrategy]:
    """Returns a GitHub client authenticated with a token (a PAT or the workflow's GITHUB_TOKEN)."""
    if not github_pat_token:
        raise RuntimeError("Token authentication requires github_pat_token in config.")
    return GitHub(auth=TokenAuthStrategy(github_pat_token), base_url=github_api_url, http_cache=False)


async def get_github_client(
    repo: str,
    github_auth_type: GitHubAuthenticationType,
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
    github_api_url: str,
) -> GitHubClient:
    """Returns an authenticated GitHub client using either GitHub App or token credentials.

    Supports custom base URL for GitHub Enterprise Server (GHES).
    Raises RuntimeError if the credentials for the chosen type are incomplete.
    """
    if github_auth_type == GitHubAuthenticationType.APP:
        if not (github_app_id and github_app_private_key_path):
            raise RuntimeError("GitHub App authentication requires app_id and private_key_path in config.")
        return await get_github_app_client(repo, github_app_id, github_app_private_key_path, github_api_url, github_app_installation_id)
    if not github_pat_token:
        raise RuntimeError("Token authentication requires github_pat_token in config.")
    return await get_github_pat_client(github_pat_token, github_api_url)
