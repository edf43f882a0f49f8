"""
Plant recommender - OpenWeatherMap client.
Current conditions + 5-day forecast (3-hour intervals, ~40 samples), both metric units.
"""
from typing import Any, Dict, List, Optional, Tuple

import requests

from climate import CurrentConditions, ForecastSample, WeatherSnapshot, aggregate_forecast
from config import Settings, get_settings
from errors import EmptyForecastError, ProviderUnavailable
from log_config import get_logger

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"

logger = get_logger(__name__)


def _get_json(endpoint: str, lat: float, lon: float, api_key: str, timeout: int) -> Dict[str, Any]:
    url = f"{OPENWEATHER_BASE_URL}/{endpoint}"
    try:
        response = requests.get(
            url,
            params={"lat": lat, "lon": lon, "appid": api_key, "units": "metric"},
            timeout=timeout,
        )
    except requests.exceptions.Timeout:
        raise ProviderUnavailable("openweathermap", f"{endpoint} request timed out")
    except requests.exceptions.RequestException as e:
        raise ProviderUnavailable("openweathermap", f"{endpoint} request failed - {e}")
    if response.status_code != 200:
        raise ProviderUnavailable("openweathermap", f"{endpoint} API error", response.status_code)
    try:
        return response.json()
    except ValueError:
        raise ProviderUnavailable("openweathermap", f"{endpoint} returned invalid JSON")


def parse_current(data: Dict[str, Any]) -> CurrentConditions:
    """Map the /weather payload; a missing block is a provider fault."""
    try:
        main = data["main"]
        weather = data.get("weather") or [{}]
        return CurrentConditions(
            temperature=float(main["temp"]),
            humidity=float(main["humidity"]),
            wind_speed_mps=float(data.get("wind", {}).get("speed", 0.0)),
            description=weather[0].get("description", "unknown"),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ProviderUnavailable("openweathermap", f"malformed current weather payload - {e!r}")


def parse_forecast(data: Dict[str, Any]) -> List[ForecastSample]:
    """Map the /forecast payload's `list` into samples, in provider order."""
    samples = []
    try:
        for item in data.get("list") or []:
            main = item["main"]
            pop = item.get("pop")
            samples.append(ForecastSample(
                temperature=float(main["temp"]),
                humidity=float(main["humidity"]),
                wind_speed_mps=float(item.get("wind", {}).get("speed", 0.0)),
                rain_mm=float((item.get("rain") or {}).get("3h", 0.0)),
                pop=float(pop) if pop is not None else None,
            ))
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ProviderUnavailable("openweathermap", f"malformed forecast payload - {e!r}")
    return samples


def fetch_current(lat: float, lon: float, settings: Optional[Settings] = None) -> CurrentConditions:
    settings = settings or get_settings()
    api_key = settings.require_weather_key()
    data = _get_json("weather", lat, lon, api_key, settings.provider_timeout_seconds)
    return parse_current(data)


def fetch_forecast(lat: float, lon: float, settings: Optional[Settings] = None) -> List[ForecastSample]:
    settings = settings or get_settings()
    api_key = settings.require_weather_key()
    data = _get_json("forecast", lat, lon, api_key, settings.provider_timeout_seconds)
    samples = parse_forecast(data)
    if not samples:
        raise EmptyForecastError("openweathermap")
    return samples


def fetch_weather_inputs(
    lat: float, lon: float, settings: Optional[Settings] = None
) -> Tuple[CurrentConditions, List[ForecastSample]]:
    settings = settings or get_settings()
    # Credentials are checked before either call goes out
    settings.require_weather_key()
    return fetch_current(lat, lon, settings), fetch_forecast(lat, lon, settings)


def get_weather(lat: float, lon: float, settings: Optional[Settings] = None) -> WeatherSnapshot:
    """
    Weather snapshot for plant recommendations at (lat, lon).
    Raises ConfigurationError without credentials, ProviderUnavailable on any provider failure.
    """
    current, samples = fetch_weather_inputs(lat, lon, settings)
    snapshot = aggregate_forecast(samples, current)
    logger.debug(
        "Weather aggregated",
        lat=lat,
        lon=lon,
        samples=len(samples),
        forecast_temp=snapshot.forecast_temp,
        rain_days=snapshot.rain_days,
    )
    return snapshot
