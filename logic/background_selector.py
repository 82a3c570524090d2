"""Compose place resolution and condition classification into an asset key."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from logic.condition_classifier import Timestamp, WeatherConditionClassifier
from logic.geo_matching import GeoCityMatcher, PlaceResolution
from models.weather import CanonicalCondition
from skymesh_app.config import DEFAULT_ASSET_EXTENSION, DEFAULT_ASSET_ROOT
from skymesh_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)


def build_asset_key(place: PlaceResolution, condition: CanonicalCondition | str) -> str:
    """Format ``<region>/<place>_<condition>``, the key asset lookup depends on."""

    parsed = CanonicalCondition.parse(condition)
    return f"{place.region}/{place.place_key}_{parsed.value}"


@dataclass(frozen=True)
class BackgroundSelection:
    """Asset key plus the resolution details that produced it."""

    asset_key: str
    place: PlaceResolution
    condition: CanonicalCondition

    @property
    def tier(self) -> int:
        return self.place.tier

    @property
    def tier_tag(self) -> str:
        return self.place.tier_tag


class BackgroundSelector:
    """Wires the place matcher and the condition classifier together."""

    def __init__(
        self,
        matcher: GeoCityMatcher,
        classifier: WeatherConditionClassifier,
        asset_root: str = DEFAULT_ASSET_ROOT,
        asset_extension: str = DEFAULT_ASSET_EXTENSION,
    ) -> None:
        self.matcher = matcher
        self.classifier = classifier
        self.asset_root = asset_root.rstrip("/")
        self.asset_extension = asset_extension

    def select(
        self,
        city_name: str,
        country_code: str,
        description: str,
        lat: Optional[float] = None,
        lon: Optional[float] = None,
        sunrise: Optional[Timestamp] = None,
        sunset: Optional[Timestamp] = None,
        now: Optional[Timestamp] = None,
        condition: CanonicalCondition | str | None = None,
    ) -> BackgroundSelection:
        """Resolve the place, classify the weather and build the asset key.

        ``condition`` skips classification; it must be a canonical value.
        """

        forced = CanonicalCondition.parse(condition) if condition is not None else None
        place = self.matcher.resolve_place(city_name, country_code, lat, lon)
        resolved = forced or self.classifier.classify(description, sunrise=sunrise, sunset=sunset, now=now)
        selection = BackgroundSelection(
            asset_key=build_asset_key(place, resolved),
            place=place,
            condition=resolved,
        )
        log_event(
            LOGGER,
            logging.INFO,
            "background_selected",
            asset_key=selection.asset_key,
            tier=selection.tier,
            tier_tag=selection.tier_tag,
            condition_forced=forced is not None,
        )
        return selection

    def select_background(
        self,
        city_name: str,
        country_code: str,
        description: str,
        lat: Optional[float] = None,
        lon: Optional[float] = None,
        sunrise: Optional[Timestamp] = None,
        sunset: Optional[Timestamp] = None,
        now: Optional[Timestamp] = None,
        condition: CanonicalCondition | str | None = None,
    ) -> str:
        """Same as :meth:`select` but returns only the asset key."""

        return self.select(
            city_name,
            country_code,
            description,
            lat=lat,
            lon=lon,
            sunrise=sunrise,
            sunset=sunset,
            now=now,
            condition=condition,
        ).asset_key

    def asset_path(self, asset_key: str) -> str:
        return f"{self.asset_root}/{asset_key}{self.asset_extension}"


__all__ = [
    "BackgroundSelection",
    "BackgroundSelector",
    "DEFAULT_ASSET_EXTENSION",
    "DEFAULT_ASSET_ROOT",
    "build_asset_key",
]
