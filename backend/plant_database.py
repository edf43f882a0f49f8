"""
Plant recommender - curated horticultural trait table.
The plant catalog doesn't reliably return growth data, so drought tolerance,
sun/humidity preference and temperature range come from this local table,
keyed by normalized scientific name (or by genus alone).
"""
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Union


class DroughtTolerance(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class TraitRecord:
    drought: DroughtTolerance
    sun: int                 # 1-10
    humidity: int            # 1-10
    temp_min: float
    temp_max: float
    native_regions: FrozenSet[str]


def _traits(drought: str, sun: int, humidity: int, temp_min: float, temp_max: float, *regions: str) -> TraitRecord:
    return TraitRecord(DroughtTolerance(drought), sun, humidity, temp_min, temp_max, frozenset(regions))


# Insertion order is the fuzzy-match tie-break; keep it stable.
PLANT_DATABASE: Mapping[str, TraitRecord] = MappingProxyType({
    # --- Mediterranean trees ---
    "olea europaea": _traits("high", 9, 4, -10, 40, "mediterranean"),
    "pinus halepensis": _traits("high", 9, 3, -15, 40, "mediterranean"),
    "quercus ilex": _traits("high", 8, 5, -15, 40, "mediterranean"),
    "cupressus sempervirens": _traits("high", 9, 4, -15, 40, "mediterranean"),

    # --- Mediterranean herbs ---
    "lavandula angustifolia": _traits("high", 8, 3, -15, 35, "mediterranean"),
    "rosmarinus officinalis": _traits("high", 8, 4, -10, 40, "mediterranean"),
    "salvia officinalis": _traits("high", 8, 4, -15, 35, "mediterranean"),
    "thymus vulgaris": _traits("high", 8, 3, -20, 35, "mediterranean"),
    "origanum vulgare": _traits("high", 7, 4, -15, 35, "mediterranean"),

    # --- Mediterranean shrubs ---
    "nerium oleander": _traits("high", 9, 4, -10, 45, "mediterranean"),
    "myrtus communis": _traits("high", 8, 5, -10, 40, "mediterranean"),
    "cistus": _traits("high", 9, 3, -10, 40, "mediterranean"),
    "laurus nobilis": _traits("medium", 7, 5, -10, 35, "mediterranean"),

    # --- Common garden plants ---
    "rosa": _traits("medium", 7, 6, -20, 35, "temperate"),
    "geranium": _traits("medium", 6, 5, -5, 30, "temperate"),
    "bougainvillea": _traits("high", 9, 4, 0, 40, "tropical", "mediterranean"),

    # --- Vegetables & kitchen herbs ---
    "allium": _traits("medium", 6, 5, -15, 30, "temperate"),
    "ocimum basilicum": _traits("low", 7, 6, 10, 35, "tropical"),
    "petroselinum crispum": _traits("medium", 5, 6, -5, 30, "temperate"),
})

DISPLAY_NAMES: Mapping[str, str] = MappingProxyType({
    "olea europaea": "Olive Tree",
    "lavandula angustifolia": "Lavender",
    "rosmarinus officinalis": "Rosemary",
    "salvia officinalis": "Sage",
    "thymus vulgaris": "Thyme",
    "origanum vulgare": "Oregano",
    "nerium oleander": "Oleander",
    "myrtus communis": "Myrtle",
    "laurus nobilis": "Bay Laurel",
})

# Last-resort list when the whole pipeline fails; scores are fixed.
STATIC_DEFAULTS: List[Dict[str, Any]] = [
    {
        "name": "Olive Tree",
        "species": "Olea europaea",
        "family": "Oleaceae",
        "drought": "high", "sun": 9, "humidity": 4,
        "score": 95,
        "weather_note": "Perfect Mediterranean climate plant",
    },
    {
        "name": "Lavender",
        "species": "Lavandula angustifolia",
        "family": "Lamiaceae",
        "drought": "high", "sun": 8, "humidity": 3,
        "score": 90,
        "weather_note": "Drought-tolerant and aromatic",
    },
    {
        "name": "Rosemary",
        "species": "Rosmarinus officinalis",
        "family": "Lamiaceae",
        "drought": "high", "sun": 8, "humidity": 4,
        "score": 88,
        "weather_note": "Hardy herb for dry conditions",
    },
]


class MatchMethod(str, Enum):
    EXACT = "exact"
    GENUS = "genus"
    FUZZY = "fuzzy"


@dataclass(frozen=True)
class TraitMatch:
    key: str
    traits: TraitRecord
    method: MatchMethod


class NoTraitMatch:
    """Lookup found nothing. A normal outcome, scored with a low baseline."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_TRAIT_MATCH"


NO_TRAIT_MATCH = NoTraitMatch()

TraitLookup = Union[TraitMatch, NoTraitMatch]


def normalize_name(name: str) -> str:
    """Lowercase, single-space separated."""
    return " ".join(str(name).lower().split())


def find_plant_traits(
    scientific_name: str,
    table: Mapping[str, TraitRecord] = PLANT_DATABASE,
) -> TraitLookup:
    """
    Resolve a (possibly noisy) catalog scientific name to curated traits.

    Tries, in order:
      1. exact key match on the normalized name
      2. genus match ("Allium schoenoprasum" -> "allium")
      3. containment: name contains a key, or a key contains the genus.
         First hit in table order wins.

    The containment step is deliberately loose: a short genus token can land
    on an unrelated key that happens to contain it.
    """
    normalized = normalize_name(scientific_name)
    if not normalized:
        return NO_TRAIT_MATCH

    if normalized in table:
        return TraitMatch(normalized, table[normalized], MatchMethod.EXACT)

    genus = normalized.split(" ")[0]
    if genus in table:
        return TraitMatch(genus, table[genus], MatchMethod.GENUS)

    for key, traits in table.items():
        if key in normalized or genus in key:
            return TraitMatch(key, traits, MatchMethod.FUZZY)

    return NO_TRAIT_MATCH


def display_name(scientific_name: str) -> str:
    """Friendly common name, else the scientific name as given."""
    return DISPLAY_NAMES.get(normalize_name(scientific_name), scientific_name)
