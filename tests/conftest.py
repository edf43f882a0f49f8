"""
Shared fixtures for the plant recommender tests.
"""
from types import MappingProxyType
from typing import Optional
from unittest.mock import MagicMock

import pytest

from climate import WeatherSnapshot
from config import Settings, get_settings
from plant_database import DroughtTolerance, TraitRecord
from trefle import CatalogCandidate


# Settings are cached per process; never leak env changes between tests.
# Hooks rather than an autouse fixture so hypothesis tests stay fixture-free.
def pytest_runtest_setup(item):
    get_settings.cache_clear()


def pytest_runtest_teardown(item, nextitem):
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openweather_api_key="test-weather-key",
        trefle_token="test-trefle-token",
        catalog_result_limit=10,
        catalog_max_workers=3,
    )


@pytest.fixture
def api_env(monkeypatch):
    monkeypatch.setenv("OPENWEATHER_API_KEY", "test-weather-key")
    monkeypatch.setenv("TREFLE_TOKEN", "test-trefle-token")
    monkeypatch.setenv("AUTH_USERNAME", "gardener")
    monkeypatch.setenv("AUTH_PASSWORD", "secret-pass")
    monkeypatch.setenv("AUTH_SECRET_KEY", "test-secret")


def make_snapshot(
    temperature: float = 28.0,
    humidity: float = 40.0,
    rain_days: float = 0.5,
    description: str = "clear sky",
    precipitation: float = 0.0,
) -> WeatherSnapshot:
    return WeatherSnapshot(
        temperature=temperature,
        humidity=humidity,
        precipitation=precipitation,
        wind_speed=10.0,
        description=description,
        forecast_temp=temperature,
        temp_min=temperature - 5,
        temp_max=temperature + 5,
        rain_days=rain_days,
        climate_summary="Hot, dry",
    )


def make_candidate(
    plant_id: int,
    scientific_name: str,
    common_name: str = "Unknown",
    family: str = "Unknown",
    image_url: Optional[str] = None,
) -> CatalogCandidate:
    return CatalogCandidate(
        id=plant_id,
        scientific_name=scientific_name,
        common_name=common_name,
        family=family,
        image_url=image_url,
    )


def make_traits(drought="high", sun=8, humidity=4, temp_min=-10, temp_max=40, regions=("mediterranean",)):
    return TraitRecord(DroughtTolerance(drought), sun, humidity, temp_min, temp_max, frozenset(regions))


def mock_response(status_code: int = 200, payload=None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload if payload is not None else {}
    response.text = "{}" if payload is not None else ""
    return response


@pytest.fixture
def hot_dry_weather() -> WeatherSnapshot:
    return make_snapshot(temperature=28.0, humidity=40.0, rain_days=0.5)


@pytest.fixture
def stub_table():
    return MappingProxyType({
        "olea europaea": make_traits("high", 9, 4, -10, 40),
        "rosa": make_traits("medium", 7, 6, -20, 35, ("temperate",)),
    })
