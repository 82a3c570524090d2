"""Per-country exceptions to same-country place resolution.

Some countries have supported cities that are a poor stand-in for the rest of
the country. An override decides whether a requested city may snap to one of
the country's supported cities and, if not, which fallback region applies.
New exceptions are added by registering another ``kind`` in ``OVERRIDE_KINDS``
and declaring it in the catalog's ``country_overrides`` block.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional, Protocol

from models.places import CatalogError, compact_city_key

logger = logging.getLogger(__name__)


class CountryOverride(Protocol):
    """Strategy consulted for a single country during place resolution."""

    def allows_country_match(self, city_key: str) -> bool:
        """Return True when the city may resolve to a supported city of its country."""

    def fallback_region(self, city_name: str, latitude: Optional[float]) -> Optional[str]:
        """Return a dynamic fallback region, or None to use the static table."""


@dataclass(frozen=True)
class NamedSubsetOverride:
    """Only the listed cities qualify for same-country resolution."""

    cities: FrozenSet[str]

    def allows_country_match(self, city_key: str) -> bool:
        return city_key in self.cities

    def fallback_region(self, city_name: str, latitude: Optional[float]) -> Optional[str]:
        return None


@dataclass(frozen=True)
class LatitudeSplitOverride:
    """Split a country into south and north fallback regions.

    A city named in ``southern_cities`` is south. Otherwise a latitude strictly
    below ``latitude_threshold`` is south, and everything else (including a
    missing latitude) is north.
    """

    supported_cities: FrozenSet[str]
    southern_cities: FrozenSet[str]
    latitude_threshold: float
    south_region: str
    north_region: str

    def allows_country_match(self, city_key: str) -> bool:
        return city_key in self.supported_cities

    def fallback_region(self, city_name: str, latitude: Optional[float]) -> Optional[str]:
        if compact_city_key(city_name) in self.southern_cities:
            logger.debug("City %s is on the southern list", city_name)
            return self.south_region
        if latitude is not None and latitude < self.latitude_threshold:
            logger.debug("Latitude %.4f is south of %.1f", latitude, self.latitude_threshold)
            return self.south_region
        return self.north_region


def _named_subset(entry: Mapping[str, Any], supported: FrozenSet[str]) -> NamedSubsetOverride:
    return NamedSubsetOverride(cities=frozenset(entry.get("cities", supported)))


def _latitude_split(entry: Mapping[str, Any], supported: FrozenSet[str]) -> LatitudeSplitOverride:
    try:
        return LatitudeSplitOverride(
            supported_cities=supported,
            southern_cities=frozenset(compact_city_key(name) for name in entry.get("southern_cities", [])),
            latitude_threshold=float(entry["latitude_threshold"]),
            south_region=str(entry["south_region"]),
            north_region=str(entry["north_region"]),
        )
    except KeyError as exc:
        raise CatalogError(f"latitude_split override is missing {exc}") from exc


OVERRIDE_KINDS: Dict[str, Callable[[Mapping[str, Any], FrozenSet[str]], CountryOverride]] = {
    "named_subset": _named_subset,
    "latitude_split": _latitude_split,
}


def build_override(entry: Mapping[str, Any], supported_cities: FrozenSet[str]) -> CountryOverride:
    """Instantiate the override strategy described by a catalog entry."""

    kind = entry.get("kind")
    factory = OVERRIDE_KINDS.get(str(kind))
    if factory is None:
        raise CatalogError(f"Unknown country override kind '{kind}'. Allowed: {sorted(OVERRIDE_KINDS)}")
    return factory(entry, supported_cities)


__all__ = [
    "CountryOverride",
    "LatitudeSplitOverride",
    "NamedSubsetOverride",
    "OVERRIDE_KINDS",
    "build_override",
]
