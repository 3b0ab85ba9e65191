import json
from pathlib import Path

import pytest

from autoassign.config import AssignmentMap, RelayConfig
from autoassign.sentry_client import AssignmentError

ENV_VARS = (
    "SENTRY_API_TOKEN",
    "SENTRY_DSN",
    "SENTRY_API_BASE",
    "AUTOASSIGN_ASSIGNMENTS",
    "AUTOASSIGN_BIND_ADDR",
    "AUTOASSIGN_REQUEST_TIMEOUT",
    "AUTOASSIGN_LOG_DIR",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def assignments_file(tmp_path: Path) -> Path:
    path = tmp_path / "assignments.json"
    path.write_text(json.dumps({
        "sentry-bot": "name@domain.com",
        "sentry-bot-client": "name2@domain.com",
    }))
    return path


@pytest.fixture
def relay_config(assignments_file: Path) -> RelayConfig:
    return RelayConfig(
        api_token="test-token",
        sentry_dsn="https://public@sentry.example.com/1",
        assignments_path=str(assignments_file),
        log_dir=None,
    )


@pytest.fixture
def assignments() -> AssignmentMap:
    return AssignmentMap({
        "sentry-bot": "name@domain.com",
        "sentry-bot-client": "name2@domain.com",
    })


class DummySentryClient:
    """Records assignments instead of calling Sentry."""

    def __init__(self, error: Exception | None = None):
        self.calls: list[tuple[str, str]] = []
        self.error = error
        self.closed = False

    def assign_issue(self, issue_id: str, assignee: str) -> None:
        self.calls.append((issue_id, assignee))
        if self.error is not None:
            raise self.error

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def dummy_client() -> DummySentryClient:
    return DummySentryClient()


@pytest.fixture
def failing_client() -> DummySentryClient:
    return DummySentryClient(AssignmentError("received non-200 status from Sentry: 403", status_code=403))
