"""FastAPI server exposing the place resolver and condition rules."""

from datetime import datetime

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from models.weather import UnknownConditionError, WeatherReading
from skymesh_app.app import SkyMeshApp
from skymesh_app.logging_config import configure_logging

configure_logging()

skymesh_app = SkyMeshApp()
app = FastAPI(title="SkyMesh", version="0.1.0")


class PlaceRequest(BaseModel):
    """Location to resolve to a supported place."""

    city_name: str = ""
    country_code: str = ""
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)


class ClassifyRequest(BaseModel):
    """Weather description plus optional ephemeris."""

    description: str = ""
    sunrise: datetime | None = None
    sunset: datetime | None = None
    now: datetime | None = None


class BackgroundRequest(PlaceRequest, ClassifyRequest):
    """Everything needed to pick a background asset."""

    condition: str | None = Field(None, description="Force a canonical condition instead of classifying")


class EvaluateRequest(BaseModel):
    """Weather reading plus optional per-family preferences."""

    reading: WeatherReading
    preferences: dict[str, bool] | None = None


@app.get("/healthz")
async def healthcheck() -> dict:
    """Lightweight readiness probe."""

    return {
        "status": "ok",
        "service": "skymesh",
        "environment": skymesh_app.config.environment or "local",
        "cities": len(skymesh_app.catalog.cities),
    }


@app.post("/places/resolve")
async def resolve_place(request: PlaceRequest) -> dict:
    place = skymesh_app.matcher.resolve_place(
        request.city_name, request.country_code, request.latitude, request.longitude
    )
    return {
        "place": place.place_key,
        "region": place.region,
        "asset_segment": place.asset_segment,
        "tier": place.tier,
        "tier_tag": place.tier_tag,
    }


@app.post("/conditions/classify")
async def classify(request: ClassifyRequest) -> dict:
    condition = skymesh_app.classifier.classify(
        request.description, sunrise=request.sunrise, sunset=request.sunset, now=request.now
    )
    return {"condition": condition.value}


@app.post("/backgrounds/select")
async def select_background(request: BackgroundRequest) -> dict:
    """Pick the background asset key for a location and weather description."""

    try:
        selection = skymesh_app.selector.select(
            request.city_name,
            request.country_code,
            request.description,
            lat=request.latitude,
            lon=request.longitude,
            sunrise=request.sunrise,
            sunset=request.sunset,
            now=request.now,
            condition=request.condition,
        )
    except UnknownConditionError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {
        "asset_key": selection.asset_key,
        "asset_path": skymesh_app.selector.asset_path(selection.asset_key),
        "condition": selection.condition.value,
        "tier": selection.tier,
        "tier_tag": selection.tier_tag,
    }


@app.post("/conditions/evaluate")
async def evaluate(request: EvaluateRequest) -> dict:
    """Run the alert rules and return cards most severe first."""

    cards = skymesh_app.condition_cards(request.reading, preferences=request.preferences)
    return {"cards": [card.to_dict() for card in cards]}


def get_app() -> FastAPI:
    """Expose the FastAPI instance for ASGI servers."""

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:app", host="0.0.0.0", port=int("8080"), reload=False)
