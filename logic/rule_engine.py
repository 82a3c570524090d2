"""Deterministic weather alert rules.

Each family is evaluated independently, so one reading can yield several
cards. A family whose inputs were not reported produces nothing. The result
is sorted danger, then warning, then info; the sort is stable, so cards of the
same severity keep family order: heat wave, cold wave, UV, air quality, strong
wind, car wash, laundry.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Mapping, Optional

from models.condition_card import CardType, ConditionCard, Severity, default_preferences
from models.weather import WeatherReading
from skymesh_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)

HEAT_DANGER_C = 35.0
HEAT_WARNING_C = 33.0
COLD_DANGER_C = -15.0
COLD_WARNING_C = -12.0

UV_DANGER = 11.0
UV_WARNING = 8.0
UV_INFO = 6.0

AQI_DANGER = 5
AQI_WARNING = 4
PM25_DANGER = 76.0
PM25_WARNING = 36.0
PM10_DANGER = 151.0
PM10_WARNING = 81.0

WIND_DANGER_MS = 14.0
WIND_WARNING_MS = 9.0

ACTIVITY_MAX_PRECIPITATION = 0.2
CAR_WASH_MAX_AQI = 3
LAUNDRY_MAX_HUMIDITY = 60.0
LAUNDRY_MIN_WIND_MS = 2.0
LAUNDRY_MAX_WIND_MS = WIND_WARNING_MS


def _place(reading: WeatherReading) -> str:
    return reading.city_name or "your area"


def _level_text(severity: Severity) -> str:
    return "Advisory" if severity is Severity.WARNING else "Warning"


class ConditionRuleEngine:
    """Evaluates a weather reading against the alert rule table."""

    def __init__(self) -> None:
        self._rules: List[Callable[[WeatherReading, datetime], Optional[ConditionCard]]] = [
            self._heat_wave,
            self._cold_wave,
            self._uv_index,
            self._air_quality,
            self._strong_wind,
            self._car_wash,
            self._laundry,
        ]

    def evaluate(
        self,
        reading: WeatherReading,
        preferences: Mapping[str, bool] | None = None,
        now: datetime | None = None,
    ) -> List[ConditionCard]:
        """Return every applicable card, most severe first.

        ``preferences`` maps a card family's settings key to whether it is
        enabled; unspecified keys stay enabled.
        """

        enabled = default_preferences()
        enabled.update(preferences or {})
        created_at = now or datetime.now(timezone.utc)

        cards: List[ConditionCard] = []
        for rule in self._rules:
            card = rule(reading, created_at)
            if card is None:
                continue
            if not enabled.get(card.type.settings_key, True):
                LOGGER.debug("Card %s disabled by preferences", card.type.value)
                continue
            cards.append(card)

        cards.sort(key=lambda card: card.severity.rank, reverse=True)
        log_event(
            LOGGER,
            logging.DEBUG,
            "conditions_evaluated",
            city_name=reading.city_name,
            card_count=len(cards),
            card_types=[card.type.value for card in cards],
            severities=[card.severity.value for card in cards],
        )
        return cards

    def _heat_wave(self, reading: WeatherReading, created_at: datetime) -> Optional[ConditionCard]:
        temperature = reading.temperature
        if temperature is None:
            return None
        if temperature >= HEAT_DANGER_C:
            severity = Severity.DANGER
        elif temperature >= HEAT_WARNING_C:
            severity = Severity.WARNING
        else:
            return None
        level = _level_text(severity)
        return ConditionCard(
            type=CardType.HEAT_WAVE,
            severity=severity,
            title=f"Heat Wave {level}",
            message=(
                f"Heat wave {level}! Today's high temperature in {_place(reading)} will reach "
                f"{round(temperature)}°C. Don't forget to stay hydrated."
            ),
            icon="🌡️",
            data={"temperature": temperature, "city_name": reading.city_name},
            created_at=created_at,
        )

    def _cold_wave(self, reading: WeatherReading, created_at: datetime) -> Optional[ConditionCard]:
        temperature = reading.temperature
        if temperature is None:
            return None
        if temperature <= COLD_DANGER_C:
            severity = Severity.DANGER
        elif temperature <= COLD_WARNING_C:
            severity = Severity.WARNING
        else:
            return None
        level = _level_text(severity)
        return ConditionCard(
            type=CardType.COLD_WAVE,
            severity=severity,
            title=f"Cold Wave {level}",
            message=(
                f"Cold wave {level}! Temperature in {_place(reading)} will drop to "
                f"{round(temperature)}°C. Dress warmly when going outside."
            ),
            icon="❄️",
            data={"temperature": temperature, "city_name": reading.city_name},
            created_at=created_at,
        )

    def _uv_index(self, reading: WeatherReading, created_at: datetime) -> Optional[ConditionCard]:
        uv_index = reading.uv_index
        if uv_index is None:
            return None
        if uv_index >= UV_DANGER:
            severity = Severity.DANGER
        elif uv_index >= UV_WARNING:
            severity = Severity.WARNING
        elif uv_index >= UV_INFO:
            severity = Severity.INFO
        else:
            return None

        if severity is Severity.INFO:
            title = "UV Advisory"
            message = "UV Advisory! Today's UV index is high. Use a hat or sunglasses when going outside."
            icon = "🕶️"
        else:
            title = "UV Warning"
            message = "UV Warning! UV index is very high. Avoid outdoor activities between 11 AM and 3 PM."
            icon = "☀️"
        return ConditionCard(
            type=CardType.UV_INDEX,
            severity=severity,
            title=title,
            message=message,
            icon=icon,
            data={"uv_index": uv_index},
            created_at=created_at,
        )

    def _air_quality(self, reading: WeatherReading, created_at: datetime) -> Optional[ConditionCard]:
        aqi = reading.air_quality
        if aqi is None:
            return None
        pm25 = reading.pm25
        pm10 = reading.pm10
        very_bad = (
            aqi >= AQI_DANGER
            or (pm25 is not None and pm25 >= PM25_DANGER)
            or (pm10 is not None and pm10 >= PM10_DANGER)
        )
        bad = (
            aqi >= AQI_WARNING
            or (pm25 is not None and pm25 >= PM25_WARNING)
            or (pm10 is not None and pm10 >= PM10_WARNING)
        )
        if very_bad:
            severity = Severity.DANGER
            title = "Very Poor Air Quality"
            message = (
                "Very poor air quality! Fine dust concentration is at dangerous levels. "
                "Keep windows closed and stay indoors as much as possible."
            )
            icon = "🚨"
        elif bad:
            severity = Severity.WARNING
            title = "Poor Air Quality"
            message = (
                f"Poor air quality! Fine dust concentration in {_place(reading)} is high. "
                "Wear a mask when going outside."
            )
            icon = "😷"
        else:
            return None
        return ConditionCard(
            type=CardType.AIR_QUALITY,
            severity=severity,
            title=title,
            message=message,
            icon=icon,
            data={"aqi": aqi, "pm25": pm25, "pm10": pm10, "city_name": reading.city_name},
            created_at=created_at,
        )

    def _strong_wind(self, reading: WeatherReading, created_at: datetime) -> Optional[ConditionCard]:
        wind_speed = reading.wind_speed
        if wind_speed is None or wind_speed < WIND_WARNING_MS:
            return None
        severity = Severity.DANGER if wind_speed >= WIND_DANGER_MS else Severity.WARNING
        return ConditionCard(
            type=CardType.STRONG_WIND,
            severity=severity,
            title="Strong Wind Warning" if severity is Severity.DANGER else "Strong Wind Advisory",
            message=(
                f"Strong winds of {wind_speed:.1f} m/s in {_place(reading)}. "
                "Be careful with facilities and outdoor objects."
            ),
            icon="💨",
            data={"wind_speed": wind_speed, "city_name": reading.city_name},
            created_at=created_at,
        )

    def _car_wash(self, reading: WeatherReading, created_at: datetime) -> Optional[ConditionCard]:
        precipitation = reading.precipitation_probability
        aqi = reading.air_quality
        if precipitation is None or aqi is None:
            return None
        if precipitation > ACTIVITY_MAX_PRECIPITATION or aqi > CAR_WASH_MAX_AQI:
            return None
        return ConditionCard(
            type=CardType.CAR_WASH_INDEX,
            severity=Severity.INFO,
            title="Perfect Car Wash Day",
            message="Perfect day for car washing! Little rain is expected, so it will stay clean longer.",
            icon="🚗",
            data={"precipitation_probability": precipitation, "aqi": aqi},
            created_at=created_at,
        )

    def _laundry(self, reading: WeatherReading, created_at: datetime) -> Optional[ConditionCard]:
        precipitation = reading.precipitation_probability
        humidity = reading.humidity
        wind_speed = reading.wind_speed
        if precipitation is None or humidity is None or wind_speed is None:
            return None
        if precipitation > ACTIVITY_MAX_PRECIPITATION or humidity > LAUNDRY_MAX_HUMIDITY:
            return None
        if not LAUNDRY_MIN_WIND_MS <= wind_speed < LAUNDRY_MAX_WIND_MS:
            return None
        return ConditionCard(
            type=CardType.LAUNDRY_INDEX,
            severity=Severity.INFO,
            title="Perfect Laundry Weather",
            message="Perfect laundry weather! Dry air and a light breeze make it ideal for drying clothes.",
            icon="👔",
            data={
                "precipitation_probability": precipitation,
                "humidity": humidity,
                "wind_speed": wind_speed,
            },
            created_at=created_at,
        )


__all__ = ["ConditionRuleEngine"]
