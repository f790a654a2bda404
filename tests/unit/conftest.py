"""Fixtures for unit tests."""

from pathlib import Path
from typing import Callable, Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog

from pr_workflows.configuration.models import GitHubAuthenticationType, L10nCheckConfig, LabelerConfig
from pr_workflows.l10n.models import CommandResult


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


def make_label_mock(name: str) -> MagicMock:
    """Create a mock for a Label object."""
    mock = MagicMock()
    mock.name = name
    return mock


@pytest.fixture
def mock_adapter() -> MagicMock:
    """A GitHub adapter whose pull request #7 changes README.md and carries the 'stale' label."""
    adapter = MagicMock()
    adapter.full_name = "octocat/hello-world"
    pull_request = MagicMock()
    pull_request.labels = [make_label_mock("stale")]
    pull_request.head.ref = "feature/docs"
    pull_request.base.ref = "main"
    adapter.get_pull_request = AsyncMock(return_value=pull_request)
    adapter.list_files_in_pull_request = AsyncMock(return_value=["README.md"])
    adapter.get_file_content = AsyncMock(side_effect=FileNotFoundError("not found"))
    adapter.add_labels_to_issue = AsyncMock(return_value=[])
    adapter.remove_label_from_issue = AsyncMock(return_value=True)
    return adapter


@pytest.fixture
def labeler_config(tmp_path: Path) -> LabelerConfig:
    """A labeler configuration pointing at a config file under tmp_path."""
    return LabelerConfig(
        debug=False,
        github_output=tmp_path / "github_output",
        github_step_summary=None,
        github_api_url="https://api.github.com",
        github_authentication_type=GitHubAuthenticationType.PAT,
        github_pat_token="token",
        github_app_id=None,
        github_app_private_key_path=None,
        github_app_installation_id=None,
        repo="octocat/hello-world",
        pr_number=7,
        config_repo=None,
        config_path=str(tmp_path / "labeler.yml"),
        config_ref=None,
        sync_labels=True,
        dot=True,
        dry_run=False,
    )


@pytest.fixture
def l10n_config(tmp_path: Path) -> L10nCheckConfig:
    """A localization check configuration writing outputs under tmp_path."""
    return L10nCheckConfig(
        debug=False,
        github_output=tmp_path / "github_output",
        github_step_summary=tmp_path / "step_summary.md",
        working_directory=tmp_path,
        l10n_command="flutter gen-l10n",
        fail_on_changes=True,
        flutter_version=None,
        flutter_channel=None,
    )


class FakeCommandRunner:
    """Command runner that replays canned results and records what was run."""

    def __init__(self, results: dict[str, CommandResult] | None = None, default: Callable[[str], CommandResult] | None = None) -> None:
        """Initialize with results keyed by the command's display string."""
        self.results = results or {}
        self.default = default or (lambda command: CommandResult(command=command, exit_code=0))
        self.commands: list[str] = []

    def run(self, command: list[str] | str, cwd: Path) -> CommandResult:
        """Return the canned result for a command."""
        display = command if isinstance(command, str) else " ".join(command)
        self.commands.append(display)
        if display in self.results:
            return self.results[display]
        return self.default(display)


@pytest.fixture
def fake_runner_factory() -> Callable[..., FakeCommandRunner]:
    """Build fake command runners."""
    return FakeCommandRunner
