"""Model package exports."""

from models.condition_card import CardType, ConditionCard, Severity
from models.places import CatalogError, City, PlaceCatalog, load_place_catalog
from models.weather import CanonicalCondition, UnknownConditionError, WeatherReading

__all__ = [
    "CanonicalCondition",
    "CardType",
    "CatalogError",
    "City",
    "ConditionCard",
    "PlaceCatalog",
    "Severity",
    "UnknownConditionError",
    "WeatherReading",
    "load_place_catalog",
]
