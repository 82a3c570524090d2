"""Resolve an arbitrary city/country/coordinate input to a supported place.

Resolution runs a four-tier cascade and the first tier that produces a place
wins:

1. exact match of the normalized city name (or a district alias);
2. a supported city of the same country, nearest by great-circle distance when
   coordinates are known and picked at random otherwise;
3. the country's fallback region;
4. the nearest fallback region by centroid, or a random catalog city when
   there are no coordinates.

Nearest-neighbour ties go to the candidate that appears first in catalog
order, so results are stable for a given catalog.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Protocol, Sequence, Tuple, TypeVar

from logic.country_overrides import CountryOverride, build_override
from models.places import PlaceCatalog, normalize_city_key
from skymesh_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)

EARTH_RADIUS_KM = 6371.0

TIER_EXACT = 1
TIER_SAME_COUNTRY = 2
TIER_REGION_FALLBACK = 3
TIER_FINAL_FALLBACK = 4

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything that can pick an element uniformly; ``random.Random`` qualifies."""

    def choice(self, seq: Sequence[T]) -> T:
        ...


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres on a spherical Earth."""

    d_lat = _to_radians(lat2 - lat1)
    d_lon = _to_radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) * math.sin(d_lat / 2)
        + math.cos(_to_radians(lat1)) * math.cos(_to_radians(lat2)) * math.sin(d_lon / 2) * math.sin(d_lon / 2)
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def _to_radians(degrees: float) -> float:
    return degrees * math.pi / 180


def nearest(
    latitude: float, longitude: float, candidates: Iterable[Tuple[str, Tuple[float, float]]]
) -> Tuple[Optional[str], float]:
    """Return the closest candidate key and its distance; earlier candidates win ties."""

    best_key: Optional[str] = None
    best_distance = math.inf
    for key, (lat, lon) in candidates:
        distance = haversine_km(latitude, longitude, lat, lon)
        if distance < best_distance:
            best_key = key
            best_distance = distance
    return best_key, best_distance


@dataclass(frozen=True)
class PlaceResolution:
    """Outcome of place resolution."""

    place_key: str
    region: str
    tier: int
    tier_tag: str

    @property
    def asset_segment(self) -> str:
        return f"{self.region}/{self.place_key}"


class GeoCityMatcher:
    """Picks a representative place for any city, country and optional coordinates."""

    def __init__(
        self,
        catalog: PlaceCatalog,
        rng: RandomSource | None = None,
        overrides: Dict[str, CountryOverride] | None = None,
    ) -> None:
        self.catalog = catalog
        self.rng = rng or random.Random()
        if overrides is None:
            overrides = {
                country: build_override(entry, frozenset(catalog.cities_for_country(country)))
                for country, entry in catalog.country_overrides.items()
            }
        self.overrides = dict(overrides)

    def resolve_place(
        self,
        city_name: str,
        country_code: str,
        lat: float | None = None,
        lon: float | None = None,
    ) -> PlaceResolution:
        """Run the resolution cascade. Never raises for well-typed input."""

        country = (country_code or "").strip().upper()
        city_key = normalize_city_key(city_name)
        has_coords = lat is not None and lon is not None

        resolution = (
            self._exact_match(city_key)
            or self._same_country(city_key, country, lat, lon)
            or self._region_fallback(city_name, country, lat)
            or self._final_fallback(lat, lon)
        )
        log_event(
            LOGGER,
            logging.DEBUG,
            "place_resolved",
            city_key=city_key,
            country=country,
            has_coordinates=has_coords,
            tier=resolution.tier,
            tier_tag=resolution.tier_tag,
            place=resolution.asset_segment,
        )
        return resolution

    def _exact_match(self, city_key: str) -> Optional[PlaceResolution]:
        if not city_key:
            return None
        city = self.catalog.lookup(city_key)
        if city is None:
            return None
        return PlaceResolution(city.key, city.region, TIER_EXACT, "exact_match")

    def _same_country(
        self, city_key: str, country: str, lat: float | None, lon: float | None
    ) -> Optional[PlaceResolution]:
        candidates = self.catalog.cities_for_country(country)
        if not candidates:
            return None
        override = self.overrides.get(country)
        if override is not None and not override.allows_country_match(city_key):
            LOGGER.debug("Country %s override rejected city '%s'", country, city_key)
            return None

        if lat is not None and lon is not None:
            key, distance = nearest(
                lat,
                lon,
                (
                    (candidate, (self.catalog.city(candidate).latitude, self.catalog.city(candidate).longitude))
                    for candidate in candidates
                ),
            )
            LOGGER.debug("Nearest supported city in %s is %s (%.1f km)", country, key, distance)
            city = self.catalog.city(key or candidates[0])
            return PlaceResolution(city.key, city.region, TIER_SAME_COUNTRY, "nearest_in_country")

        city = self.catalog.city(self.rng.choice(candidates))
        return PlaceResolution(city.key, city.region, TIER_SAME_COUNTRY, "random_in_country")

    def _region_fallback(self, city_name: str, country: str, lat: float | None) -> Optional[PlaceResolution]:
        if country not in self.catalog.region_fallback:
            return None
        region = self.catalog.region_fallback[country]
        override = self.overrides.get(country)
        if override is not None:
            region = override.fallback_region(city_name, lat) or region
        return PlaceResolution(region, region, TIER_REGION_FALLBACK, "region_fallback")

    def _final_fallback(self, lat: float | None, lon: float | None) -> PlaceResolution:
        if lat is not None and lon is not None and self.catalog.region_centroids:
            region, distance = nearest(lat, lon, self.catalog.region_centroids.items())
            if region is not None:
                LOGGER.debug("Nearest fallback region is %s (%.1f km)", region, distance)
                return PlaceResolution(region, region, TIER_FINAL_FALLBACK, "nearest_region")

        city = self.catalog.city(self.rng.choice(self.catalog.all_city_keys()))
        return PlaceResolution(city.key, city.region, TIER_FINAL_FALLBACK, "random_city")


__all__ = [
    "EARTH_RADIUS_KM",
    "GeoCityMatcher",
    "PlaceResolution",
    "RandomSource",
    "TIER_EXACT",
    "TIER_FINAL_FALLBACK",
    "TIER_REGION_FALLBACK",
    "TIER_SAME_COUNTRY",
    "haversine_km",
    "nearest",
]
