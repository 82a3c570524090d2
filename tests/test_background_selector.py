"""Background asset key composition."""

import random
from datetime import datetime, timezone

import pytest

from conftest import FixedChoice
from logic.background_selector import BackgroundSelector, build_asset_key
from logic.condition_classifier import WeatherConditionClassifier
from logic.geo_matching import GeoCityMatcher, PlaceResolution
from models.places import PlaceCatalog
from models.weather import CanonicalCondition, UnknownConditionError

NOON_UTC = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
EVENING_UTC = datetime(2024, 6, 1, 18, 0, tzinfo=timezone.utc)


def _selector(catalog: PlaceCatalog, rng=None) -> BackgroundSelector:
    return BackgroundSelector(GeoCityMatcher(catalog, rng=rng), WeatherConditionClassifier())


def test_seoul_clear_noon_is_sunny_exact_match(catalog: PlaceCatalog) -> None:
    selector = _selector(catalog)
    selection = selector.select("Seoul", "KR", "clear sky", lat=37.5665, lon=126.9780, now=NOON_UTC)

    assert selection.asset_key == "asia/seoul_sunny"
    assert selection.tier == 1
    assert selection.tier_tag == "exact_match"
    assert selection.condition is CanonicalCondition.SUNNY


def test_evening_clear_sky_uses_sunset_variant(catalog: PlaceCatalog) -> None:
    key = _selector(catalog).select_background("Seoul", "KR", "clear sky", now=EVENING_UTC)
    assert key == "asia/seoul_sunset"


def test_region_fallback_key_uses_region_as_place(catalog: PlaceCatalog) -> None:
    key = _selector(catalog).select_background("Lahore", "PK", "haze", now=NOON_UTC)
    assert key == "northern_india/northern_india_foggy"


def test_forced_condition_skips_classification(catalog: PlaceCatalog) -> None:
    selection = _selector(catalog).select("Tokyo", "JP", "clear sky", now=NOON_UTC, condition="Snowy")

    assert selection.asset_key == "asia/tokyo_snowy"
    assert selection.condition is CanonicalCondition.SNOWY


def test_unknown_forced_condition_fails_fast(catalog: PlaceCatalog) -> None:
    stub = FixedChoice([])
    selector = _selector(catalog, rng=stub)

    with pytest.raises(UnknownConditionError):
        selector.select("Springfield", "US", "clear sky", condition="hail")
    assert stub.calls == []


def test_build_asset_key_validates_condition() -> None:
    place = PlaceResolution(place_key="paris", region="europe", tier=1, tier_tag="exact_match")

    assert build_asset_key(place, CanonicalCondition.RAINY) == "europe/paris_rainy"
    with pytest.raises(UnknownConditionError):
        build_asset_key(place, "drizzly")


def test_asset_path_joins_root_and_extension(catalog: PlaceCatalog) -> None:
    selector = BackgroundSelector(
        GeoCityMatcher(catalog), WeatherConditionClassifier(), asset_root="static/bg/", asset_extension=".jpg"
    )
    assert selector.asset_path("asia/seoul_sunny") == "static/bg/asia/seoul_sunny.jpg"
    assert _selector(catalog).asset_path("asia/seoul_sunny") == "assets/location_images/asia/seoul_sunny.png"


def test_selection_is_deterministic_with_seeded_rng(catalog: PlaceCatalog) -> None:
    first = _selector(catalog, rng=random.Random(3))
    second = _selector(catalog, rng=random.Random(3))

    for city, country in [("Springfield", "US"), ("", ""), ("Perth", "AU")]:
        assert first.select_background(city, country, "rain", now=NOON_UTC) == second.select_background(
            city, country, "rain", now=NOON_UTC
        )


def test_select_background_accepts_every_select_argument(catalog: PlaceCatalog) -> None:
    selector = _selector(catalog)

    key = selector.select_background(
        city_name="Paris",
        country_code="FR",
        description="clear sky",
        lat=48.8566,
        lon=2.3522,
        sunrise=datetime(2024, 6, 1, 4, 0, tzinfo=timezone.utc),
        sunset=datetime(2024, 6, 1, 20, 0, tzinfo=timezone.utc),
        now=NOON_UTC,
        condition="foggy",
    )

    assert key == "europe/paris_foggy"
    assert key == selector.select("Paris", "FR", "clear sky", now=NOON_UTC, condition="foggy").asset_key
