"""Random city rotation without repeats for the "surprise me" location."""

from __future__ import annotations

import logging
import random
from typing import List

from logic.geo_matching import RandomSource
from models.places import City, PlaceCatalog

logger = logging.getLogger(__name__)


class RandomCityRotation:
    """Draws catalog cities at random, never repeating until all were shown.

    Once every city has been drawn the buffer is cleared and a new round starts.
    """

    def __init__(self, catalog: PlaceCatalog, rng: RandomSource | None = None) -> None:
        self.catalog = catalog
        self.rng = rng or random.Random()
        self._shown: List[str] = []

    def next_city(self) -> City:
        remaining = [key for key in self.catalog.all_city_keys() if key not in self._shown]
        if not remaining:
            logger.debug("All %d cities shown, starting a new round", len(self._shown))
            self._shown.clear()
            remaining = self.catalog.all_city_keys()
        key = self.rng.choice(remaining)
        self._shown.append(key)
        return self.catalog.city(key)

    def recently_shown(self) -> List[str]:
        return list(self._shown)

    def reset(self) -> None:
        self._shown.clear()


__all__ = ["RandomCityRotation"]
