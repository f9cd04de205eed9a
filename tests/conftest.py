"""
Pytest configuration and shared fixtures for Skysweep tests.
"""
import io
import json

import pytest
from rich.console import Console

from skysweep.memory import InMemoryRecordStore
from skysweep.models import Session
from tests.fixtures.mock_data import TEST_DID, create_mock_settings


class RecordingConsole(Console):
    """Console that writes plain text to a buffer."""

    def __init__(self):
        self.buffer = io.StringIO()
        super().__init__(file=self.buffer, width=200, color_system=None)

    @property
    def text(self) -> str:
        return self.buffer.getvalue()

    @property
    def lines(self):
        return [line.rstrip() for line in self.text.splitlines()]


@pytest.fixture
def output(monkeypatch):
    """Capture everything the sweep prints."""
    recording = RecordingConsole()
    monkeypatch.setattr("skysweep.cleanup.console", recording)
    monkeypatch.setattr("skysweep.app.console", recording)
    return recording


@pytest.fixture
def settings():
    return create_mock_settings()


@pytest.fixture
def session():
    return Session(access_jwt="test-jwt", did=TEST_DID, handle="test.bsky.social")


@pytest.fixture
def store():
    return InMemoryRecordStore(did=TEST_DID, page_size=2)


@pytest.fixture
def config_file(tmp_path):
    """Write a config.json and return its path."""

    def _write(data):
        path = tmp_path / "config.json"
        if isinstance(data, str):
            path.write_text(data)
        else:
            path.write_text(json.dumps(data))
        return path

    return _write


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "api: marks tests that mock HTTP interactions"
    )


def pytest_collection_modifyitems(config, items):
    """Add markers based on test location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
