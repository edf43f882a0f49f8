"""
Plant recommender - climate derivation.
Reduces a 3-hour forecast into a WeatherSnapshot, classifies it into a
climate archetype, and offers a crude month/bounding-box seasonal guess.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

from errors import EmptyInputError

# 3-hour forecast intervals per calendar day
SAMPLES_PER_DAY = 8
RAIN_THRESHOLD_MM = 0.1
MPS_TO_KMH = 3.6


class ClimateArchetype(str, Enum):
    MEDITERRANEAN = "mediterranean"
    TROPICAL = "tropical"
    TEMPERATE_WET = "temperate_wet"
    COLD = "cold"
    ARID = "arid"
    TEMPERATE = "temperate"


@dataclass(frozen=True)
class ForecastSample:
    """One 3-hour forecast interval, in provider units (wind in m/s)."""
    temperature: float
    humidity: float
    wind_speed_mps: float
    rain_mm: float = 0.0
    pop: Optional[float] = None  # probability of precipitation, 0-1


@dataclass(frozen=True)
class CurrentConditions:
    temperature: float
    humidity: float
    wind_speed_mps: float
    description: str


@dataclass(frozen=True)
class WeatherSnapshot:
    temperature: float         # current, °C
    humidity: float            # current, %
    precipitation: float       # next-interval rain chance, %
    wind_speed: float          # current, km/h
    description: str           # "clear sky"
    forecast_temp: float       # median over the forecast
    temp_min: float
    temp_max: float
    rain_days: float           # approximate rainy days per week
    climate_summary: str
    forecast_humidity: float = 0.0
    forecast_wind_speed: float = 0.0

    def __post_init__(self):
        if not (self.temp_min <= self.forecast_temp <= self.temp_max):
            raise ValueError(
                f"forecast_temp {self.forecast_temp} outside [{self.temp_min}, {self.temp_max}]"
            )
        if self.rain_days < 0:
            raise ValueError("rain_days must be >= 0")


@dataclass(frozen=True)
class SeasonalPattern:
    season: str
    typical_temp: float
    typical_rain_days: float
    drought_risk: str


def median(values: Sequence[float]) -> float:
    """Standard median: middle element, or mean of the two middle elements."""
    if len(values) == 0:
        raise EmptyInputError(message="median of empty sequence")
    return float(np.median(np.asarray(values, dtype=float)))


def estimate_rain_days(rain_mm: Sequence[float]) -> float:
    """
    Rainy intervals divided by intervals per day. This is an approximation of
    expected rainy days in the forecast window, not an exact count of days.
    """
    rainy_intervals = sum(1 for mm in rain_mm if mm > RAIN_THRESHOLD_MM)
    return rainy_intervals / SAMPLES_PER_DAY


def climate_summary(temp: float, rain_days: float, humidity: float, wind_speed: float) -> str:
    """Short human-readable phrase, e.g. "Hot, dry, dry air"."""
    parts: List[str] = []

    if temp > 30:
        parts.append("Very hot")
    elif temp > 25:
        parts.append("Hot")
    elif temp > 20:
        parts.append("Warm")
    elif temp > 15:
        parts.append("Mild")
    elif temp > 10:
        parts.append("Cool")
    else:
        parts.append("Cold")

    if rain_days < 1:
        parts.append("dry")
    elif rain_days < 3:
        parts.append("occasional rain")
    elif rain_days < 5:
        parts.append("moderate rain")
    else:
        parts.append("rainy")

    if humidity > 80:
        parts.append("very humid")
    elif humidity > 70:
        parts.append("humid")
    elif humidity < 40:
        parts.append("dry air")

    if wind_speed > 30:
        parts.append("windy")
    elif wind_speed > 20:
        parts.append("breezy")

    return ", ".join(parts)


def aggregate_forecast(
    samples: Sequence[ForecastSample],
    current: CurrentConditions,
) -> WeatherSnapshot:
    """
    Build the per-request WeatherSnapshot from current conditions and forecast samples.
    Raises EmptyInputError when there are no forecast samples.
    """
    if not samples:
        raise EmptyInputError()

    temps = np.array([s.temperature for s in samples], dtype=float)
    humidities = np.array([s.humidity for s in samples], dtype=float)
    winds_kmh = np.array([s.wind_speed_mps for s in samples], dtype=float) * MPS_TO_KMH

    forecast_temp = median(temps)
    avg_humidity = float(humidities.mean())
    avg_wind = float(winds_kmh.mean())
    rain_days = estimate_rain_days([s.rain_mm for s in samples])

    first_pop = samples[0].pop
    precipitation = first_pop * 100 if first_pop else 0.0

    return WeatherSnapshot(
        temperature=current.temperature,
        humidity=current.humidity,
        precipitation=precipitation,
        wind_speed=current.wind_speed_mps * MPS_TO_KMH,
        description=current.description,
        forecast_temp=forecast_temp,
        temp_min=float(temps.min()),
        temp_max=float(temps.max()),
        rain_days=rain_days,
        climate_summary=climate_summary(forecast_temp, rain_days, avg_humidity, avg_wind),
        forecast_humidity=avg_humidity,
        forecast_wind_speed=avg_wind,
    )


def classify_climate(temp: float, humidity: float, rain_days: float) -> ClimateArchetype:
    """
    Ordered rules, first match wins. Rules overlap (hot and dry also satisfies
    arid), so the order is the priority.
    """
    if temp > 25 and rain_days < 2 and humidity < 60:
        return ClimateArchetype.MEDITERRANEAN
    if temp > 20 and humidity > 70:
        return ClimateArchetype.TROPICAL
    if temp < 15 and rain_days > 4:
        return ClimateArchetype.TEMPERATE_WET
    if temp < 10:
        return ClimateArchetype.COLD
    if rain_days < 1 and temp > 20:
        return ClimateArchetype.ARID
    return ClimateArchetype.TEMPERATE


def classify_snapshot(snapshot: WeatherSnapshot) -> ClimateArchetype:
    return classify_climate(snapshot.temperature, snapshot.humidity, snapshot.rain_days)


def seasonal_pattern(latitude: float, longitude: float, month: int) -> SeasonalPattern:
    """
    Typical conditions for the month (1-12). Only the eastern Mediterranean
    box (35-45N, 15-30E) has summer/winter profiles; everything else is
    treated as transitional.
    """
    if 35 < latitude < 45 and 15 < longitude < 30:
        if 6 <= month <= 9:
            return SeasonalPattern("summer", 30, 1, "high")
        if month == 12 or month <= 2:
            return SeasonalPattern("winter", 12, 8, "low")
    return SeasonalPattern("transitional", 20, 4, "medium")
