"""Shared test fixtures."""

import json
import sqlite3
from pathlib import Path

import pytest
import yaml

from tidewatch.config.defaults import DEFAULT_SPOTS
from tidewatch.config.schema import AppConfig, FetchConfig, ProviderConfig
from tidewatch.storage.database import connect, run_migrations
from tidewatch.storage.secret_repo import MemorySecretStore

TEST_BASE_URL = "https://tides.test/api/v3"
TEST_KEY = "0f8e4c2a-1b3d-4e5f-9a8b-7c6d5e4f3a2b"


class RecordingSleep:
    """Async stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def combined_payload(fixtures_dir: Path) -> dict:
    with open(fixtures_dir / "worldtides_combined.json") as f:
        return json.load(f)


@pytest.fixture
def forecast_payload(fixtures_dir: Path) -> dict:
    with open(fixtures_dir / "open_meteo_forecast.json") as f:
        return json.load(f)


@pytest.fixture
def marine_payload(fixtures_dir: Path) -> dict:
    with open(fixtures_dir / "open_meteo_marine.json") as f:
        return json.load(f)


@pytest.fixture
def provider_config() -> ProviderConfig:
    return ProviderConfig(base_url=TEST_BASE_URL)


@pytest.fixture
def fetch_config() -> FetchConfig:
    return FetchConfig(backoff_base_s=0.01)


@pytest.fixture
def secret_store() -> MemorySecretStore:
    return MemorySecretStore({"worldtides_api_key": TEST_KEY})


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def default_config() -> AppConfig:
    """Return default AppConfig with default spots."""
    return AppConfig(spots=DEFAULT_SPOTS)


@pytest.fixture
def db(tmp_path: Path) -> sqlite3.Connection:
    """Migrated temporary database."""
    conn = connect(tmp_path / "test.db")
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "fetch": {"max_attempts": 2, "chunk_pause_ms": 250},
        "cache": {"ttl_minutes": 5},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
