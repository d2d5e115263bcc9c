import os
import tempfile
from pathlib import Path

# Logger configuration is read at import time, so set it before any project import
os.environ.setdefault("LOG_TO_CONSOLE", "false")
os.environ.setdefault("LOG_DIR", str(Path(tempfile.gettempdir()) / "serp-collector-test-logs"))

import pytest  # noqa: E402

from config.config import BrightDataSettings  # noqa: E402
from models.job import ProgressResponse, TriggerResponse  # noqa: E402
from api.base_client import BaseDatasetClient  # noqa: E402


class FakeDatasetClient(BaseDatasetClient):
    """
    Scripted dataset client for orchestrator and poller tests.
    Returns statuses in order and records every call.
    """

    def __init__(self, trigger_body=None, statuses=(), payload=None):
        self.trigger_body = {"snapshot_id": "s_test"} if trigger_body is None else trigger_body
        self.statuses = list(statuses)
        self.payload = [] if payload is None else payload
        self.calls: list[tuple[str, object]] = []

    async def trigger(self, specs):
        self.calls.append(("trigger", list(specs)))
        return TriggerResponse.model_validate(self.trigger_body)

    async def status(self, job_id):
        self.calls.append(("status", job_id))
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        return ProgressResponse(status=status)

    async def download(self, job_id):
        self.calls.append(("download", job_id))
        return self.payload

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)


class FakeTimer:
    """Manual clock whose sleep() advances time instantly."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def clock(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def settings():
    return BrightDataSettings(
        api_key="test-key",
        dataset_id="gd_test",
        base_url="https://api.example.test/datasets/v3",
    )


@pytest.fixture
def fake_timer():
    return FakeTimer()


@pytest.fixture
def mock_env(monkeypatch):
    """Fixture to mock environment variables for testing."""
    env_vars = {
        "BRIGHTDATA_API_KEY": "test-key",
        "BRIGHTDATA_DATASET_ID": "gd_test",
        "BRIGHTDATA_API_BASE_URL": "https://api.example.test/datasets/v3/",
        "POLL_INTERVAL_SECONDS": "2",
        "MAX_WAIT_SECONDS": "60",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def make_client():
    """Factory for FakeDatasetClient instances."""
    return FakeDatasetClient
