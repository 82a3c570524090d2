"""Static place catalog used to pick background imagery for a location.

The catalog is read once from ``models/data/place_catalog.json`` and exposed
as immutable mappings. Its size is a property of the data file; nothing in the
resolver depends on how many cities it lists.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "place_catalog.json"


class CatalogError(ValueError):
    """Raised when the place catalog data is internally inconsistent."""


def normalize_city_key(value: str | None) -> str:
    """Lowercase a city name and strip its spaces, e.g. ``"Seoul "`` -> ``"seoul"``."""

    return (value or "").lower().replace(" ", "")


def compact_city_key(value: str | None) -> str:
    """Collapse spaces, hyphens and underscores so ``Hong Kong`` matches ``hong_kong``."""

    return (value or "").lower().replace(" ", "").replace("-", "").replace("_", "")


@dataclass(frozen=True)
class City:
    """A supported city with its coordinates and asset region."""

    key: str
    country: str
    latitude: float
    longitude: float
    region: str


@dataclass(frozen=True)
class PlaceCatalog:
    """Immutable lookup tables for cities, countries and fallback regions."""

    cities: Mapping[str, City]
    aliases: Mapping[str, str]
    country_cities: Mapping[str, Tuple[str, ...]]
    region_fallback: Mapping[str, str]
    region_centroids: Mapping[str, Tuple[float, float]]
    country_overrides: Mapping[str, Mapping[str, Any]]

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "PlaceCatalog":
        """Build and validate a catalog from its JSON document."""

        cities: Dict[str, City] = {}
        for raw in payload.get("cities", []):
            try:
                city = City(
                    key=str(raw["key"]),
                    country=str(raw["country"]).upper(),
                    latitude=float(raw["latitude"]),
                    longitude=float(raw["longitude"]),
                    region=str(raw["region"]),
                )
            except (KeyError, TypeError, ValueError) as exc:
                raise CatalogError(f"Malformed city entry {raw!r}: {exc}") from exc
            if city.key in cities:
                raise CatalogError(f"Duplicate city key '{city.key}'")
            if not city.region:
                raise CatalogError(f"City '{city.key}' has no region")
            cities[city.key] = city

        aliases = {str(alias): str(target) for alias, target in payload.get("aliases", {}).items()}
        for alias, target in aliases.items():
            if target not in cities:
                raise CatalogError(f"Alias '{alias}' points at unknown city '{target}'")

        country_cities: Dict[str, Tuple[str, ...]] = {}
        for country, keys in payload.get("country_cities", {}).items():
            missing = [key for key in keys if key not in cities]
            if missing:
                raise CatalogError(f"Country '{country}' references unknown cities: {missing}")
            country_cities[country.upper()] = tuple(keys)

        region_centroids: Dict[str, Tuple[float, float]] = {}
        for region, coords in payload.get("region_centroids", {}).items():
            if len(coords) != 2:
                raise CatalogError(f"Centroid for '{region}' must be [lat, lon]")
            region_centroids[region] = (float(coords[0]), float(coords[1]))

        region_fallback = {
            country.upper(): str(region) for country, region in payload.get("region_fallback", {}).items()
        }
        unknown_regions = sorted({region for region in region_fallback.values() if region not in region_centroids})
        if unknown_regions:
            raise CatalogError(f"Fallback regions without centroids: {unknown_regions}")

        overrides = {
            country.upper(): MappingProxyType(dict(entry))
            for country, entry in payload.get("country_overrides", {}).items()
        }

        return cls(
            cities=MappingProxyType(cities),
            aliases=MappingProxyType(aliases),
            country_cities=MappingProxyType(country_cities),
            region_fallback=MappingProxyType(region_fallback),
            region_centroids=MappingProxyType(region_centroids),
            country_overrides=MappingProxyType(overrides),
        )

    def city(self, key: str) -> City:
        return self.cities[key]

    def lookup(self, city_key: str) -> City | None:
        """Return the catalog city for a normalized key or one of its aliases."""

        if city_key in self.cities:
            return self.cities[city_key]
        target = self.aliases.get(city_key)
        return self.cities[target] if target else None

    def cities_for_country(self, country_code: str | None) -> List[str]:
        """Return supported city keys for a country, empty when none are supported."""

        return list(self.country_cities.get((country_code or "").upper(), ()))

    def all_city_keys(self) -> List[str]:
        return list(self.cities)


def _read_catalog(path: Path) -> PlaceCatalog:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Place catalog {path} is not valid JSON: {exc}") from exc
    catalog = PlaceCatalog.from_dict(payload)
    logger.info(
        "Loaded place catalog from %s (%d cities, %d fallback countries)",
        path,
        len(catalog.cities),
        len(catalog.region_fallback),
    )
    return catalog


@lru_cache(maxsize=None)
def _cached_catalog(path: str) -> PlaceCatalog:
    return _read_catalog(Path(path))


def load_place_catalog(path: str | Path | None = None) -> PlaceCatalog:
    """Load a catalog once per path; later calls reuse the same immutable object."""

    resolved = Path(path) if path else DEFAULT_CATALOG_PATH
    return _cached_catalog(str(resolved.resolve()))


__all__ = [
    "CatalogError",
    "City",
    "PlaceCatalog",
    "DEFAULT_CATALOG_PATH",
    "compact_city_key",
    "load_place_catalog",
    "normalize_city_key",
]
