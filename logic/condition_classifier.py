"""Map free-text weather descriptions onto the canonical background conditions."""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import List, Optional, Tuple, Union

from models.weather import CanonicalCondition

logger = logging.getLogger(__name__)

Timestamp = Union[datetime, time, int, float]

# Descriptions containing any of these are clear or cloudy and get the
# night-time sunset treatment.
CLEAR_OR_CLOUDY_MARKERS: Tuple[str, ...] = ("clear", "few clouds", "scattered", "broken", "overcast")

# Evaluated top to bottom, first substring hit wins.
DESCRIPTION_TABLE: Tuple[Tuple[str, CanonicalCondition], ...] = (
    ("clear sky", CanonicalCondition.SUNNY),
    ("few clouds", CanonicalCondition.SUNNY),
    ("scattered clouds", CanonicalCondition.CLOUDY),
    ("broken clouds", CanonicalCondition.CLOUDY),
    ("overcast clouds", CanonicalCondition.CLOUDY),
    ("shower rain", CanonicalCondition.RAINY),
    ("rain", CanonicalCondition.RAINY),
    ("thunderstorm", CanonicalCondition.RAINY),
    ("snow", CanonicalCondition.SNOWY),
    ("mist", CanonicalCondition.FOGGY),
    ("fog", CanonicalCondition.FOGGY),
    ("haze", CanonicalCondition.FOGGY),
    ("smoke", CanonicalCondition.FOGGY),
)

# Inclusive UTC hour windows treated as dusk/dawn when no ephemeris is known.
TWILIGHT_HOURS: Tuple[Tuple[int, int], ...] = ((17, 19), (5, 7))


def _as_utc_datetime(value: Timestamp) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    raise TypeError(f"Unsupported timestamp type: {type(value).__name__}")


def _time_of_day(value: Timestamp) -> time:
    """Reduce a timestamp to its UTC wall-clock time."""

    if isinstance(value, time):
        if value.tzinfo is not None:
            offset = value.utcoffset()
            moment = datetime.combine(date(2000, 1, 1), value.replace(tzinfo=None)) - offset
            return moment.time()
        return value
    return _as_utc_datetime(value).time().replace(tzinfo=None)


class WeatherConditionClassifier:
    """Classifies a weather description into exactly one canonical condition."""

    def __init__(
        self,
        table: Tuple[Tuple[str, CanonicalCondition], ...] = DESCRIPTION_TABLE,
        default: CanonicalCondition = CanonicalCondition.SUNNY,
    ) -> None:
        self.table: List[Tuple[str, CanonicalCondition]] = [
            (needle, CanonicalCondition.parse(result)) for needle, result in table
        ]
        self.default = CanonicalCondition.parse(default)

    @staticmethod
    def is_clear_or_cloudy(description: str) -> bool:
        lowered = (description or "").lower()
        return any(marker in lowered for marker in CLEAR_OR_CLOUDY_MARKERS)

    @staticmethod
    def is_night(
        now: Timestamp,
        sunrise: Optional[Timestamp] = None,
        sunset: Optional[Timestamp] = None,
    ) -> bool:
        """Decide whether ``now`` falls outside daylight.

        With both sunrise and sunset the comparison is done on UTC time of day.
        When sunset's time of day precedes sunrise's (daylight spans UTC
        midnight) night is the interval between them. Without ephemeris the
        fixed twilight hour windows apply.
        """

        if sunrise is not None and sunset is not None:
            current = _time_of_day(now)
            rise = _time_of_day(sunrise)
            set_ = _time_of_day(sunset)
            if rise < set_:
                return current < rise or current > set_
            return set_ < current < rise

        hour = _time_of_day(now).hour
        return any(start <= hour <= end for start, end in TWILIGHT_HOURS)

    def map_description(self, description: str) -> CanonicalCondition:
        """Run the ordered substring table without any time-of-day logic."""

        lowered = (description or "").lower()
        for needle, result in self.table:
            if needle in lowered:
                return result
        return self.default

    def classify(
        self,
        description: str,
        sunrise: Optional[Timestamp] = None,
        sunset: Optional[Timestamp] = None,
        now: Optional[Timestamp] = None,
    ) -> CanonicalCondition:
        """Return the canonical condition for a description at a point in time."""

        if self.is_clear_or_cloudy(description):
            moment = now if now is not None else datetime.now(timezone.utc)
            if self.is_night(moment, sunrise, sunset):
                logger.debug("'%s' observed at night, using sunset", description)
                return CanonicalCondition.SUNSET

        condition = self.map_description(description)
        logger.debug("Mapped '%s' to %s", description, condition.value)
        return condition


__all__ = [
    "CLEAR_OR_CLOUDY_MARKERS",
    "DESCRIPTION_TABLE",
    "TWILIGHT_HOURS",
    "WeatherConditionClassifier",
]
