"""Shared test fixtures."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import yaml

from skyview.config.schema import AppConfig
from skyview.ingest.forecast_fetcher import ForecastFetcher
from skyview.ingest.location_search import LocationSearch, SearchResult, SearchStatus
from skyview.models.location import Location
from skyview.models.weather import parse_snapshot
from skyview.storage.last_city_store import LastCityStore
from skyview.workflow.search_workflow import SearchWorkflow

FIXTURE_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _no_api_key_env(monkeypatch):
    monkeypatch.delenv("WEATHERAPI_KEY", raising=False)


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURE_DIR


@pytest.fixture
def forecast_payload() -> dict:
    with open(FIXTURE_DIR / "weatherapi_forecast_astana.json") as f:
        return json.load(f)


@pytest.fixture
def search_payload() -> list:
    with open(FIXTURE_DIR / "weatherapi_search_ast.json") as f:
        return json.load(f)


@pytest.fixture
def default_config(tmp_path: Path) -> AppConfig:
    return AppConfig(storage={"db_path": str(tmp_path / "app.db")})


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "api": {"base_url": "https://test-weather.example.com/v1", "api_key": "k"},
        "search": {"debounce_ms": 50},
        "storage": {"db_path": str(tmp_path / "app.db")},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def store(tmp_path: Path) -> LastCityStore:
    return LastCityStore(tmp_path / "app.db")


@pytest.fixture
def mock_search() -> MagicMock:
    search = MagicMock(spec=LocationSearch)
    search.search = AsyncMock(
        return_value=SearchResult(
            SearchStatus.OK, [Location(name="Astana", country="Kazakhstan")]
        )
    )
    return search


@pytest.fixture
def mock_fetcher(forecast_payload: dict) -> MagicMock:
    fetcher = MagicMock(spec=ForecastFetcher)

    async def fetch(city_name: str, days: int = 7):
        payload = dict(forecast_payload)
        payload["location"] = {**payload["location"], "name": city_name}
        return parse_snapshot(payload, city_name)

    fetcher.fetch = AsyncMock(side_effect=fetch)
    return fetcher


@pytest.fixture
def workflow(mock_search, mock_fetcher, store) -> SearchWorkflow:
    return SearchWorkflow(
        mock_search, mock_fetcher, store, debounce_ms=50
    )
