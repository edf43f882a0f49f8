"""
Plant recommender - Trefle plant catalog client.
Search returns basic taxonomy only; growth data is not reliably available,
which is why traits come from plant_database instead.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import requests

from config import Settings, get_settings
from errors import ProviderUnavailable
from log_config import get_logger

TREFLE_BASE_URL = "https://trefle.io/api/v1"

logger = get_logger(__name__)


@dataclass(frozen=True)
class CatalogCandidate:
    id: int
    scientific_name: str
    common_name: str = "Unknown"
    family: str = "Unknown"
    genus: Optional[str] = None
    image_url: Optional[str] = None
    growth: Mapping[str, Any] = field(default_factory=dict, compare=False)


def parse_candidate(raw: Dict[str, Any]) -> Optional[CatalogCandidate]:
    """Search hit -> candidate. Hits without id or scientific name are dropped."""
    plant_id = raw.get("id")
    scientific_name = raw.get("scientific_name")
    if plant_id is None or not scientific_name:
        return None
    genus = raw.get("genus")
    if isinstance(genus, dict):
        genus = genus.get("name")
    return CatalogCandidate(
        id=plant_id,
        scientific_name=scientific_name,
        common_name=raw.get("common_name") or "Unknown",
        family=raw.get("family") or "Unknown",
        genus=genus,
        image_url=raw.get("image_url") or None,
    )


def search_plants(query: str, limit: int = 20, settings: Optional[Settings] = None) -> List[CatalogCandidate]:
    """
    Free-text catalog search. No token, or a token the catalog rejects
    (401/403) -> empty result (logged, not raised).
    Network failures and other HTTP errors raise ProviderUnavailable so callers
    can skip the term.
    """
    settings = settings or get_settings()
    token = settings.trefle_token
    if not token:
        logger.warning("Trefle token missing", query=query)
        return []

    try:
        response = requests.get(
            f"{TREFLE_BASE_URL}/plants/search",
            params={"token": token, "q": query, "limit": limit},
            timeout=settings.provider_timeout_seconds,
        )
    except requests.exceptions.RequestException as e:
        raise ProviderUnavailable("trefle", f"search '{query}' failed - {e}")
    if response.status_code in (401, 403):
        # Rejected credentials behave like missing ones
        logger.warning("Trefle token rejected", query=query, status=response.status_code)
        return []
    if response.status_code != 200:
        raise ProviderUnavailable("trefle", f"search '{query}' error", response.status_code)

    try:
        data = response.json()
    except ValueError:
        raise ProviderUnavailable("trefle", f"search '{query}' returned invalid JSON")

    candidates = []
    for raw in data.get("data") or []:
        candidate = parse_candidate(raw)
        if candidate is not None:
            candidates.append(candidate)
    return candidates[:limit]


def get_plant_by_id(plant_id: int, settings: Optional[Settings] = None) -> Optional[CatalogCandidate]:
    """Single plant with main-species growth data when the catalog has it. None on any failure."""
    settings = settings or get_settings()
    token = settings.trefle_token
    if not token:
        return None

    try:
        response = requests.get(
            f"{TREFLE_BASE_URL}/plants/{plant_id}",
            params={"token": token},
            timeout=settings.provider_timeout_seconds,
        )
        if response.status_code != 200:
            return None
        plant = response.json().get("data")
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.error("Failed to fetch plant", plant_id=plant_id, error=str(e))
        return None

    if not plant or not plant.get("scientific_name"):
        return None
    main_species = plant.get("main_species") or {}
    genus = plant.get("genus")
    return CatalogCandidate(
        id=plant.get("id", plant_id),
        scientific_name=plant["scientific_name"],
        common_name=plant.get("common_name") or plant["scientific_name"],
        family=plant.get("family") or "Unknown",
        genus=genus.get("name") if isinstance(genus, dict) else genus,
        image_url=plant.get("image_url") or main_species.get("image_url"),
        growth=main_species.get("growth") or {},
    )
