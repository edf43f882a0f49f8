"""
Plant recommender - weather suitability scoring.
Four independent sub-scores, summed without weights:
drought 0-35, light 0-30, humidity 0-20, temperature range 0-15.
All thresholds are fixed; there is no clamp on the total.
"""
from dataclasses import dataclass
from typing import Union

from climate import WeatherSnapshot
from plant_database import DroughtTolerance, NoTraitMatch, TraitRecord

UNKNOWN_PLANT_SCORE = 10
TEMP_TOLERANCE_MARGIN = 5

# |sun - ideal| -> points; anything further apart scores 0
LIGHT_POINTS = {0: 30, 1: 25, 2: 15, 3: 5}


@dataclass(frozen=True)
class ScoreBreakdown:
    drought: int
    light: int
    humidity: int
    temperature: int

    @property
    def total(self) -> int:
        return self.drought + self.light + self.humidity + self.temperature


def drought_score(drought: DroughtTolerance, rain_days: float) -> int:
    if drought == DroughtTolerance.HIGH and rain_days < 2:
        return 35
    if drought == DroughtTolerance.HIGH and rain_days < 4:
        return 25
    if drought == DroughtTolerance.MEDIUM and 2 <= rain_days <= 5:
        return 30
    if drought == DroughtTolerance.LOW and rain_days > 5:
        return 35
    if drought == DroughtTolerance.MEDIUM:
        return 20
    return 0


def ideal_sun(temperature: float) -> int:
    """Hotter weather -> sun-loving plants."""
    if temperature > 25:
        return 8
    if temperature > 15:
        return 6
    return 4


def light_score(sun: int, temperature: float) -> int:
    return LIGHT_POINTS.get(abs(sun - ideal_sun(temperature)), 0)


def humidity_score(preference: int, ambient_humidity: float) -> int:
    if ambient_humidity > 70 and preference > 6:
        return 20
    if ambient_humidity < 50 and preference < 5:
        return 20
    if abs(ambient_humidity / 10 - preference) <= 2:
        return 10
    return 0


def temperature_score(temp_min: float, temp_max: float, temperature: float) -> int:
    if temp_min <= temperature <= temp_max:
        return 15
    if temp_min - TEMP_TOLERANCE_MARGIN <= temperature <= temp_max + TEMP_TOLERANCE_MARGIN:
        return 8
    return 0


def score_breakdown(traits: TraitRecord, weather: WeatherSnapshot) -> ScoreBreakdown:
    return ScoreBreakdown(
        drought=drought_score(traits.drought, weather.rain_days),
        light=light_score(traits.sun, weather.temperature),
        humidity=humidity_score(traits.humidity, weather.humidity),
        temperature=temperature_score(traits.temp_min, traits.temp_max, weather.temperature),
    )


def score_plant(traits: Union[TraitRecord, NoTraitMatch], weather: WeatherSnapshot) -> int:
    """
    Suitability of a plant for the current weather, conceptually 0-100.
    Unknown plants get a flat UNKNOWN_PLANT_SCORE instead of being rejected.
    """
    if isinstance(traits, NoTraitMatch):
        return UNKNOWN_PLANT_SCORE
    return score_breakdown(traits, weather).total


# --- Watering ---

BASE_WATERING_INTERVAL_DAYS = 7
WET_PRECIPITATION_PCT = 50
HOT_TEMPERATURE = 30


def predict_water_need(
    drought: DroughtTolerance,
    weather: WeatherSnapshot,
    base_days: int = BASE_WATERING_INTERVAL_DAYS,
) -> int:
    """
    Days between waterings. Likely rain stretches the interval, heat shortens
    it and drought-hardy plants can wait longer. Never negative.
    """
    days = base_days
    if weather.precipitation > WET_PRECIPITATION_PCT:
        days += 3
    if weather.temperature > HOT_TEMPERATURE:
        days -= 2
    if drought == DroughtTolerance.HIGH:
        days += 2
    return max(0, days)
