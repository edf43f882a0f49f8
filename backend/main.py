"""
Plant recommender - FastAPI backend.
Weather-aware plant recommendations for a map point, plus the weather,
seasonal and catalog lookups the frontend shows alongside them.
"""
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime
from typing import List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from auth import create_access_token, verify_token, verify_user
from climate import classify_snapshot, seasonal_pattern
from config import get_settings
from errors import ProviderUnavailable
from log_config import configure_logging, get_logger
from recommend import Recommendation, run_recommendation
from trefle import get_plant_by_id
from weather import get_weather

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(json_logs=settings.log_json, log_level=settings.log_level)
    # Missing weather credentials is fatal here, not per request
    settings.require_weather_key()
    if not settings.trefle_token:
        logger.warning("TREFLE_TOKEN not set; catalog searches will return nothing")
    yield


app = FastAPI(title="Plant Recommender API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Request/Response models ---
class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class RecommendationsResponse(BaseModel):
    success: bool = True
    tier: str
    count: int
    recommendations: List[Recommendation]


class WeatherResponse(BaseModel):
    success: bool = True
    lat: float
    lon: float
    temp: float
    humidity: float
    precipitation: float
    wind_speed: float
    description: str
    forecast_temp: float
    temp_min: float
    temp_max: float
    rain_days: float
    climate_summary: str
    climate: str


class PlantResponse(BaseModel):
    id: int
    common_name: str
    scientific_name: str
    family: str
    genus: Optional[str] = None
    image_url: Optional[str] = None
    growth: dict = {}


def get_token(authorization: Optional[str] = Header(None)) -> str:
    """Extract and validate Bearer token from Authorization header."""
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing token")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid authorization header")
    token = parts[1]
    if verify_token(token) is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return token


@app.post("/login", response_model=LoginResponse)
def login(req: LoginRequest):
    """Login with username/password; returns JWT."""
    if not verify_user(req.username, req.password):
        raise HTTPException(status_code=401, detail="Invalid username or password")
    return LoginResponse(access_token=create_access_token(data={"sub": req.username}))


@app.get("/recommend-plants", response_model=RecommendationsResponse)
def recommend_plants(
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude"),
    token: str = Depends(get_token),
):
    """Up to 5 plants ranked for the weather at (lat, lon). Always answers; see `tier`."""
    result = run_recommendation(lat, lon)
    return RecommendationsResponse(
        tier=result.tier.value,
        count=len(result.recommendations),
        recommendations=result.recommendations,
    )


@app.get("/weather-by-coords", response_model=WeatherResponse)
def weather_by_coords(
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude"),
    token: str = Depends(get_token),
):
    """Current conditions plus forecast-derived climate for (lat, lon)."""
    try:
        snapshot = get_weather(lat, lon)
    except ProviderUnavailable as e:
        raise HTTPException(status_code=502, detail=f"Weather unavailable: {e}")
    return WeatherResponse(
        lat=lat,
        lon=lon,
        temp=snapshot.temperature,
        humidity=snapshot.humidity,
        precipitation=snapshot.precipitation,
        wind_speed=snapshot.wind_speed,
        description=snapshot.description,
        forecast_temp=snapshot.forecast_temp,
        temp_min=snapshot.temp_min,
        temp_max=snapshot.temp_max,
        rain_days=snapshot.rain_days,
        climate_summary=snapshot.climate_summary,
        climate=classify_snapshot(snapshot).value,
    )


@app.get("/seasonal-pattern")
def get_seasonal_pattern(
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude"),
    token: str = Depends(get_token),
):
    """Typical conditions for the current month (rough heuristic)."""
    pattern = seasonal_pattern(lat, lon, datetime.now().month)
    return {"success": True, **asdict(pattern)}


@app.get("/plants/{plant_id}", response_model=PlantResponse)
def get_plant(plant_id: int, token: str = Depends(get_token)):
    plant = get_plant_by_id(plant_id)
    if plant is None:
        raise HTTPException(status_code=404, detail="Plant not found")
    return PlantResponse(
        id=plant.id,
        common_name=plant.common_name,
        scientific_name=plant.scientific_name,
        family=plant.family,
        genus=plant.genus,
        image_url=plant.image_url,
        growth=dict(plant.growth),
    )


@app.get("/health")
def health():
    return {
        "status": "active",
        "version": "1.0.0",
        "security_layer": "JWT enabled",
        "features": [
            "plant_recommendations",
            "weather",
            "seasonal_pattern",
            "plant_lookup",
        ],
    }
