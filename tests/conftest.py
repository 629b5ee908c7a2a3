"""Pytest configuration and fixtures for EmgStream tests."""

import pytest
import tempfile
import logging
from pathlib import Path

import yaml
from pubsub import pub

from emgstream.config import EmgStreamConfig


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line("markers", "integration: tests spanning several components")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_pubsub():
    """Drop listeners left behind by a test."""
    yield
    pub.unsubAll()


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def test_config(temp_data_dir):
    """Default configuration with storage and logs in a temp directory."""
    config = EmgStreamConfig()
    config.set('storage.data_directory', str(Path(temp_data_dir) / "data"))
    config.set('logging.file_path', str(Path(temp_data_dir) / "logs" / "emgstream.log"))
    config.set('logging.console_output', False)
    return config


@pytest.fixture
def config_file(temp_data_dir):
    """Write a YAML config file and return its path."""
    def write(content: dict) -> str:
        path = Path(temp_data_dir) / "emgstream.yaml"
        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(content, f)
        return str(path)

    return write
