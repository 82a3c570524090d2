"""Weather reading and canonical condition models."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class UnknownConditionError(ValueError):
    """Raised when a value is not one of the canonical weather conditions."""


class CanonicalCondition(str, Enum):
    """Weather buckets used to pick the background asset variant."""

    SUNNY = "sunny"
    CLOUDY = "cloudy"
    RAINY = "rainy"
    SNOWY = "snowy"
    FOGGY = "foggy"
    SUNSET = "sunset"

    @classmethod
    def parse(cls, value: "CanonicalCondition | str") -> "CanonicalCondition":
        """Return the enum member for ``value`` or fail fast for anything else."""

        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise UnknownConditionError(
                f"Unknown weather condition '{value}'. Expected one of: {allowed}"
            ) from None


class WeatherReading(BaseModel):
    """Snapshot of current weather measurements.

    Every measurement is optional. ``None`` means the value was not reported
    and the rules depending on it are skipped; it is never read as zero.
    """

    temperature: Optional[float] = None
    feels_like: Optional[float] = None
    humidity: Optional[float] = Field(default=None, ge=0, le=100)
    wind_speed: Optional[float] = Field(default=None, ge=0)
    description: str = ""
    pressure: Optional[float] = None
    visibility: Optional[float] = Field(default=None, ge=0)
    uv_index: Optional[float] = Field(default=None, ge=0)
    air_quality: Optional[int] = Field(default=None, ge=1, le=5)
    pm25: Optional[float] = Field(default=None, ge=0)
    pm10: Optional[float] = Field(default=None, ge=0)
    precipitation_probability: Optional[float] = Field(default=None, ge=0, le=1)
    sunrise: Optional[datetime] = None
    sunset: Optional[datetime] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    city_name: str = ""
    country: str = ""

    model_config = {"frozen": True}

    @classmethod
    def from_openweather(cls, payload: Dict[str, Any], **extra: Any) -> "WeatherReading":
        """Map an already-fetched OpenWeather current-weather document.

        Fields OpenWeather does not report (UV, air quality, PM) can be passed
        through ``extra`` once the caller has them.
        """

        main = payload.get("main") or {}
        wind = payload.get("wind") or {}
        sys_block = payload.get("sys") or {}
        coord = payload.get("coord") or {}
        weather: List[Dict[str, Any]] = payload.get("weather") or []

        def _timestamp(key: str) -> Optional[datetime]:
            value = sys_block.get(key)
            if value is None:
                return None
            return datetime.fromtimestamp(int(value), tz=timezone.utc)

        fields: Dict[str, Any] = {
            "temperature": main.get("temp"),
            "feels_like": main.get("feels_like"),
            "humidity": main.get("humidity"),
            "pressure": main.get("pressure"),
            "wind_speed": wind.get("speed"),
            "visibility": payload.get("visibility"),
            "description": weather[0].get("description", "") if weather else "",
            "precipitation_probability": payload.get("pop"),
            "sunrise": _timestamp("sunrise"),
            "sunset": _timestamp("sunset"),
            "latitude": coord.get("lat"),
            "longitude": coord.get("lon"),
            "city_name": payload.get("name") or "",
            "country": sys_block.get("country") or "",
        }
        fields.update(extra)
        return cls.model_validate(fields)


__all__ = ["CanonicalCondition", "UnknownConditionError", "WeatherReading"]
