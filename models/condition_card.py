"""Alert cards produced by the weather condition rule engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict


class CardType(str, Enum):
    """The seven alert families a card can belong to."""

    HEAT_WAVE = "heat_wave"
    COLD_WAVE = "cold_wave"
    UV_INDEX = "uv_index"
    AIR_QUALITY = "air_quality"
    STRONG_WIND = "strong_wind"
    CAR_WASH_INDEX = "car_wash_index"
    LAUNDRY_INDEX = "laundry_index"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def settings_key(self) -> str:
        """Preference toggle that enables or disables this family."""

        return _SETTINGS_KEYS[self]


_DISPLAY_NAMES: Dict[CardType, str] = {
    CardType.HEAT_WAVE: "Heat Wave",
    CardType.COLD_WAVE: "Cold Wave",
    CardType.UV_INDEX: "UV Index",
    CardType.AIR_QUALITY: "Air Quality",
    CardType.STRONG_WIND: "Strong Wind",
    CardType.CAR_WASH_INDEX: "Car Wash Index",
    CardType.LAUNDRY_INDEX: "Laundry Index",
}

_SETTINGS_KEYS: Dict[CardType, str] = {
    CardType.HEAT_WAVE: "heat_cold_alerts",
    CardType.COLD_WAVE: "heat_cold_alerts",
    CardType.UV_INDEX: "uv_alerts",
    CardType.AIR_QUALITY: "air_quality_alerts",
    CardType.STRONG_WIND: "wind_alerts",
    CardType.CAR_WASH_INDEX: "activity_indices",
    CardType.LAUNDRY_INDEX: "activity_indices",
}


class Severity(str, Enum):
    """Card severity with the total order info < warning < danger."""

    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def color_hex(self) -> str:
        return _SEVERITY_COLORS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK: Dict[Severity, int] = {Severity.INFO: 1, Severity.WARNING: 2, Severity.DANGER: 3}
_SEVERITY_COLORS: Dict[Severity, str] = {
    Severity.INFO: "#2196F3",
    Severity.WARNING: "#FF9800",
    Severity.DANGER: "#F44336",
}


def default_preferences() -> Dict[str, bool]:
    """Every card family enabled."""

    return {key: True for key in dict.fromkeys(_SETTINGS_KEYS.values())}


@dataclass(frozen=True)
class ConditionCard:
    """A single alert or activity card.

    ``data`` carries the raw values that produced the card. ``created_at`` is
    left out of equality so that two evaluations of the same reading compare
    equal.
    """

    type: CardType
    severity: Severity
    title: str
    message: str
    icon: str
    data: Dict[str, Any] = field(hash=False)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc), compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "title": self.title,
            "message": self.message,
            "icon": self.icon,
            "color": self.severity.color_hex,
            "data": dict(self.data),
            "created_at": self.created_at.isoformat(),
        }


__all__ = ["CardType", "ConditionCard", "Severity", "default_preferences"]
