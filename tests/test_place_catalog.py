"""Place catalog loading and consistency checks."""

import pytest

from models.places import CatalogError, PlaceCatalog, compact_city_key, load_place_catalog, normalize_city_key


def _minimal_payload() -> dict:
    return {
        "cities": [
            {"key": "alpha", "country": "AA", "latitude": 10.0, "longitude": 10.0, "region": "north"},
            {"key": "beta", "country": "AA", "latitude": 20.0, "longitude": 20.0, "region": "north"},
        ],
        "aliases": {"alpha_district": "alpha"},
        "country_cities": {"AA": ["alpha", "beta"]},
        "region_fallback": {"BB": "far_region"},
        "region_centroids": {"far_region": [0.0, 0.0]},
    }


def test_every_country_city_exists_with_a_region(catalog: PlaceCatalog) -> None:
    """Every country mapping points at a catalog city that has a region."""

    assert catalog.country_cities
    for country, keys in catalog.country_cities.items():
        assert keys, f"{country} lists no cities"
        for key in keys:
            city = catalog.lookup(key)
            assert city is not None, f"{country} references missing city {key}"
            assert city.region


def test_every_alias_resolves_to_catalog_city(catalog: PlaceCatalog) -> None:
    for alias, target in catalog.aliases.items():
        assert catalog.lookup(alias) == catalog.city(target)


def test_fallback_regions_have_centroids(catalog: PlaceCatalog) -> None:
    for region in catalog.region_fallback.values():
        assert region in catalog.region_centroids


def test_catalog_is_loaded_once_and_immutable(catalog: PlaceCatalog) -> None:
    """Repeated loads reuse the same object and tables reject writes."""

    assert load_place_catalog() is catalog
    with pytest.raises(TypeError):
        catalog.cities["atlantis"] = catalog.city("seoul")  # type: ignore[index]
    with pytest.raises(TypeError):
        catalog.region_fallback["ZZ"] = "nowhere"  # type: ignore[index]


def test_cities_for_country_handles_unknown_and_lowercase(catalog: PlaceCatalog) -> None:
    assert catalog.cities_for_country("kr") == ["seoul"]
    assert catalog.cities_for_country("ZZ") == []
    assert catalog.cities_for_country(None) == []
    assert len(catalog.cities_for_country("US")) > 1


def test_from_dict_builds_minimal_catalog() -> None:
    built = PlaceCatalog.from_dict(_minimal_payload())

    assert built.all_city_keys() == ["alpha", "beta"]
    assert built.lookup("alpha_district").key == "alpha"
    assert built.lookup("gamma") is None
    assert built.region_centroids["far_region"] == (0.0, 0.0)


@pytest.mark.parametrize(
    "mutate, message",
    [
        (lambda p: p["country_cities"].update({"AA": ["alpha", "ghost"]}), "unknown cities"),
        (lambda p: p["aliases"].update({"nowhere": "ghost"}), "unknown city"),
        (lambda p: p["region_fallback"].update({"CC": "uncharted"}), "without centroids"),
        (lambda p: p["cities"].append(dict(p["cities"][0])), "Duplicate"),
        (lambda p: p["cities"].append({"key": "broken"}), "Malformed"),
    ],
)
def test_from_dict_rejects_inconsistent_data(mutate, message: str) -> None:
    payload = _minimal_payload()
    mutate(payload)

    with pytest.raises(CatalogError, match=message):
        PlaceCatalog.from_dict(payload)


def test_load_rejects_invalid_json(tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(CatalogError):
        load_place_catalog(path)


def test_city_key_normalisation() -> None:
    assert normalize_city_key("  Seoul ") == "seoul"
    assert normalize_city_key("New York") == "newyork"
    assert normalize_city_key(None) == ""
    assert compact_city_key("Hong Kong") == compact_city_key("hong_kong") == "hongkong"
