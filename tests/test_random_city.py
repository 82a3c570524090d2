"""Random city rotation."""

import random

from conftest import FixedChoice
from logic.random_city import RandomCityRotation
from models.places import PlaceCatalog


def test_rotation_shows_every_city_once_per_round(catalog: PlaceCatalog) -> None:
    rotation = RandomCityRotation(catalog, rng=random.Random(5))
    total = len(catalog.all_city_keys())

    drawn = [rotation.next_city().key for _ in range(total)]

    assert sorted(drawn) == sorted(catalog.all_city_keys())
    assert rotation.recently_shown() == drawn


def test_rotation_starts_new_round_when_exhausted(catalog: PlaceCatalog) -> None:
    rotation = RandomCityRotation(catalog, rng=random.Random(9))
    total = len(catalog.all_city_keys())
    for _ in range(total):
        rotation.next_city()

    extra = rotation.next_city()

    assert rotation.recently_shown() == [extra.key]


def test_rotation_skips_already_shown_cities(catalog: PlaceCatalog) -> None:
    stub = FixedChoice([0, 0])
    rotation = RandomCityRotation(catalog, rng=stub)

    first = rotation.next_city()
    second = rotation.next_city()

    assert first.key == catalog.all_city_keys()[0]
    assert second.key == catalog.all_city_keys()[1]
    assert first.key not in stub.calls[1]


def test_reset_clears_history(catalog: PlaceCatalog) -> None:
    rotation = RandomCityRotation(catalog, rng=FixedChoice([]))
    rotation.next_city()
    rotation.reset()

    assert rotation.recently_shown() == []
    assert rotation.next_city().key == catalog.all_city_keys()[0]
