"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment variable settings for the application.

    Most values are provided by the GitHub Actions runner.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False

    # GitHub API settings
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_REPOSITORY: str | None = None

    # GitHub Actions runner files
    GITHUB_EVENT_PATH: Path | None = None
    GITHUB_OUTPUT: Path | None = None
    GITHUB_STEP_SUMMARY: Path | None = None


def get_settings() -> Settings:
    """Read the settings from the current environment."""
    return Settings()
