"""
Plant recommender - recommendation engine.

Pipeline for a (lat, lon):
  weather snapshot -> climate archetype
  catalog searches -> deduplicated candidate pool -> trait lookup -> score

Fallback ladder, each tier tried only if the previous one came back empty:
  1. catalog       - catalog candidates we have traits for, score > 30
  2. database      - curated table scored directly against the weather, score > 40
  3. static_default - olive / lavender / rosemary with fixed scores
Any exception along the way goes straight to static_default; recommend()
never raises.
"""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Callable, Iterable, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from climate import ClimateArchetype, WeatherSnapshot, classify_snapshot
from config import Settings, get_settings
from log_config import get_logger
from plant_database import (
    PLANT_DATABASE,
    STATIC_DEFAULTS,
    TraitLookup,
    TraitMatch,
    TraitRecord,
    display_name,
    find_plant_traits,
)
from scoring import predict_water_need, score_plant
from trefle import CatalogCandidate, search_plants
from weather import get_weather

# Bias toward Mediterranean / drought-tolerant vocabulary
SEARCH_TERMS = (
    "mediterranean",
    "lavender",
    "olive",
    "rosemary",
    "sage",
    "thyme",
)
MAX_RECOMMENDATIONS = 5
CATALOG_MIN_SCORE = 30
DATABASE_MIN_SCORE = 40
DATABASE_FAMILY_LABEL = "Mediterranean Native"

WeatherProvider = Callable[[float, float], WeatherSnapshot]
CatalogSearch = Callable[[str, int], List[CatalogCandidate]]

logger = get_logger(__name__)


class RecommendationTier(str, Enum):
    CATALOG = "catalog"
    DATABASE = "database"
    STATIC_DEFAULT = "static_default"


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    species: str
    family: Optional[str] = None
    drought: str
    sun: int
    humidity: int
    image: Optional[str] = None
    score: int
    weather_note: str
    climate: ClimateArchetype
    watering_interval_days: Optional[int] = None


@dataclass(frozen=True)
class ScoredCandidate:
    candidate: CatalogCandidate
    match: TraitLookup
    score: int


@dataclass(frozen=True)
class RecommendationResult:
    tier: RecommendationTier
    recommendations: List[Recommendation]


# --- Candidate aggregation ---

def dedupe_candidates(batches: Iterable[Sequence[CatalogCandidate]]) -> List[CatalogCandidate]:
    """Flatten search batches, keeping the first record seen for each catalog id."""
    seen_ids = set()
    pool = []
    for batch in batches:
        for candidate in batch:
            if candidate.id in seen_ids:
                continue
            seen_ids.add(candidate.id)
            pool.append(candidate)
    return pool


def gather_candidates(
    search: CatalogSearch,
    terms: Sequence[str] = SEARCH_TERMS,
    limit: int = 10,
    max_workers: int = 6,
) -> List[CatalogCandidate]:
    """
    Run every search term (concurrently), skip the ones that fail, and merge
    the results in term order so "first seen wins" doesn't depend on timing.
    """
    def _search_term(term: str) -> List[CatalogCandidate]:
        try:
            return list(search(term, limit))
        except Exception as e:
            logger.warning("Catalog search failed", term=term, error=str(e))
            return []

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        batches = list(pool.map(_search_term, terms))

    candidates = dedupe_candidates(batches)
    logger.info("Catalog candidates gathered", terms=len(terms), unique=len(candidates))
    return candidates


# --- Tiers ---

def score_candidates(
    candidates: Iterable[CatalogCandidate],
    weather: WeatherSnapshot,
    table: Mapping[str, TraitRecord] = PLANT_DATABASE,
) -> List[ScoredCandidate]:
    scored = []
    for candidate in candidates:
        match = find_plant_traits(candidate.scientific_name, table)
        traits = match.traits if isinstance(match, TraitMatch) else match
        scored.append(ScoredCandidate(candidate, match, score_plant(traits, weather)))
    return scored


def catalog_tier(
    candidates: Iterable[CatalogCandidate],
    weather: WeatherSnapshot,
    climate: ClimateArchetype,
    table: Mapping[str, TraitRecord] = PLANT_DATABASE,
) -> List[Recommendation]:
    """Known plants from the catalog pool scoring above CATALOG_MIN_SCORE, best first."""
    usable = [
        s for s in score_candidates(candidates, weather, table)
        if s.match and s.score > CATALOG_MIN_SCORE
    ]
    top = sorted(usable, key=lambda s: s.score, reverse=True)[:MAX_RECOMMENDATIONS]
    logger.info(
        "Top catalog plants",
        plants=[(s.candidate.scientific_name, s.score) for s in top],
    )

    note = (
        f"Ideal for {weather.description} "
        f"({weather.temperature:.1f}°C, {weather.rain_days:.1f} rainy days)"
    )
    recommendations = []
    for s in top:
        plant = s.candidate
        traits = s.match.traits
        common_name = plant.common_name if plant.common_name != "Unknown" else None
        recommendations.append(Recommendation(
            name=common_name or plant.scientific_name,
            species=plant.scientific_name,
            family=plant.family,
            drought=traits.drought.value,
            sun=traits.sun,
            humidity=traits.humidity,
            image=plant.image_url,
            score=s.score,
            weather_note=note,
            climate=climate,
            watering_interval_days=predict_water_need(traits.drought, weather),
        ))
    return recommendations


def database_tier(
    weather: WeatherSnapshot,
    climate: ClimateArchetype,
    table: Mapping[str, TraitRecord] = PLANT_DATABASE,
) -> List[Recommendation]:
    """Curated table scored directly against the weather, bypassing the catalog."""
    scored = [(name, traits, score_plant(traits, weather)) for name, traits in table.items()]
    usable = [entry for entry in scored if entry[2] > DATABASE_MIN_SCORE]
    top = sorted(usable, key=lambda entry: entry[2], reverse=True)[:MAX_RECOMMENDATIONS]

    note = f"Perfect for {weather.description} ({weather.temperature:.1f}°C)"
    return [
        Recommendation(
            name=display_name(name),
            species=name,
            family=DATABASE_FAMILY_LABEL,
            drought=traits.drought.value,
            sun=traits.sun,
            humidity=traits.humidity,
            score=score,
            weather_note=note,
            climate=climate,
            watering_interval_days=predict_water_need(traits.drought, weather),
        )
        for name, traits, score in top
    ]


def static_default_tier() -> List[Recommendation]:
    return [
        Recommendation(climate=ClimateArchetype.MEDITERRANEAN, **plant)
        for plant in STATIC_DEFAULTS
    ]


# --- Orchestration ---

def _run_ladder(
    lat: float,
    lon: float,
    weather_provider: WeatherProvider,
    catalog_search: CatalogSearch,
    table: Mapping[str, TraitRecord],
    settings: Settings,
) -> RecommendationResult:
    weather = weather_provider(lat, lon)
    climate = classify_snapshot(weather)
    logger.info(
        "Weather fetched",
        temp=weather.temperature,
        rain_days=weather.rain_days,
        humidity=weather.humidity,
        climate=climate.value,
    )

    candidates = gather_candidates(
        catalog_search,
        limit=settings.catalog_result_limit,
        max_workers=settings.catalog_max_workers,
    )
    recommendations = catalog_tier(candidates, weather, climate, table)
    if recommendations:
        return RecommendationResult(RecommendationTier.CATALOG, recommendations)

    logger.info("Using fallback recommendations from database", candidates=len(candidates))
    recommendations = database_tier(weather, climate, table)
    if recommendations:
        return RecommendationResult(RecommendationTier.DATABASE, recommendations)

    logger.warning("No database plant suits the weather; serving static defaults", climate=climate.value)
    return RecommendationResult(RecommendationTier.STATIC_DEFAULT, static_default_tier())


def run_recommendation(
    lat: float,
    lon: float,
    weather_provider: Optional[WeatherProvider] = None,
    catalog_search: Optional[CatalogSearch] = None,
    table: Mapping[str, TraitRecord] = PLANT_DATABASE,
    settings: Optional[Settings] = None,
) -> RecommendationResult:
    """Ranked recommendations for (lat, lon) tagged with the tier that produced them."""
    try:
        settings = settings or get_settings()
        weather_provider = weather_provider or partial(get_weather, settings=settings)
        catalog_search = catalog_search or partial(search_plants, settings=settings)
        return _run_ladder(lat, lon, weather_provider, catalog_search, table, settings)
    except Exception:
        logger.error("Recommendation pipeline failed; serving static defaults", lat=lat, lon=lon, exc_info=True)
        return RecommendationResult(RecommendationTier.STATIC_DEFAULT, static_default_tier())


def recommend(lat: float, lon: float, **kwargs) -> List[Recommendation]:
    """Engine entry point: 1-5 recommendations, never raises."""
    return run_recommendation(lat, lon, **kwargs).recommendations
