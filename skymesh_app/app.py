"""SkyMesh core bootstrap."""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Mapping, Optional

from logic.background_selector import BackgroundSelection, BackgroundSelector
from logic.condition_classifier import Timestamp, WeatherConditionClassifier
from logic.geo_matching import GeoCityMatcher, RandomSource
from logic.random_city import RandomCityRotation
from logic.rule_engine import ConditionRuleEngine
from models.condition_card import ConditionCard
from models.places import PlaceCatalog, load_place_catalog
from models.weather import WeatherReading
from skymesh_app.config import SkyMeshConfig
from skymesh_app.logging_config import configure_logging, get_logger, log_event, operation_context

LOGGER = get_logger(__name__)


class SkyMeshApp:
    """Wires together the catalog, place resolver, classifier and rule engine."""

    def __init__(
        self,
        config: SkyMeshConfig | None = None,
        catalog: PlaceCatalog | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        self.config = config or SkyMeshConfig.from_env()
        configure_logging(self.config.log_level)

        self.catalog = catalog or load_place_catalog(self.config.catalog_path)
        self.rng = rng or random.Random(self.config.random_seed)
        self.matcher = GeoCityMatcher(self.catalog, rng=self.rng)
        self.classifier = WeatherConditionClassifier()
        self.selector = BackgroundSelector(
            self.matcher,
            self.classifier,
            asset_root=self.config.asset_root,
            asset_extension=self.config.asset_extension,
        )
        self.rule_engine = ConditionRuleEngine()
        self.random_cities = RandomCityRotation(self.catalog, rng=self.rng)

        log_event(
            LOGGER,
            logging.INFO,
            "app_initialized",
            environment=self.config.environment or "local",
            city_count=len(self.catalog.cities),
            seeded=self.config.random_seed is not None,
        )

    def background_for(
        self,
        city_name: str,
        country_code: str,
        description: str,
        lat: Optional[float] = None,
        lon: Optional[float] = None,
        sunrise: Optional[Timestamp] = None,
        sunset: Optional[Timestamp] = None,
        now: Optional[Timestamp] = None,
    ) -> Dict[str, Any]:
        """Return the asset key, its file path and the tier that produced it."""

        with operation_context("background_for"):
            selection: BackgroundSelection = self.selector.select(
                city_name,
                country_code,
                description,
                lat=lat,
                lon=lon,
                sunrise=sunrise,
                sunset=sunset,
                now=now,
            )
            return {
                "asset_key": selection.asset_key,
                "asset_path": self.selector.asset_path(selection.asset_key),
                "condition": selection.condition.value,
                "place": selection.place.place_key,
                "region": selection.place.region,
                "tier": selection.tier,
                "tier_tag": selection.tier_tag,
            }

    def background_for_reading(self, reading: WeatherReading, now: Optional[Timestamp] = None) -> Dict[str, Any]:
        """Convenience wrapper pulling every selector input out of a reading."""

        return self.background_for(
            reading.city_name,
            reading.country,
            reading.description,
            lat=reading.latitude,
            lon=reading.longitude,
            sunrise=reading.sunrise,
            sunset=reading.sunset,
            now=now,
        )

    def condition_cards(
        self, reading: WeatherReading, preferences: Mapping[str, bool] | None = None
    ) -> List[ConditionCard]:
        with operation_context("condition_cards"):
            return self.rule_engine.evaluate(reading, preferences=preferences)


__all__ = ["SkyMeshApp"]
