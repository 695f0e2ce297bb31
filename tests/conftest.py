from __future__ import annotations

import json
from types import MappingProxyType

import pytest

from globepick.core.geo import CoordinateTransform
from globepick.geometry.shapes import CountryFeature, MultiPolygon, Polygon
from helpers import square


@pytest.fixture
def transform() -> CoordinateTransform:
    return CoordinateTransform(5.0)


@pytest.fixture
def squareland() -> CountryFeature:
    return CountryFeature(
        name="Squareland",
        geometry=Polygon(rings=(square(0, 0, 10),)),
        properties=MappingProxyType({"NAME": "Squareland", "ISO": "SQL"}),
    )


@pytest.fixture
def twin_isles() -> CountryFeature:
    return CountryFeature(
        name="Twin Isles",
        geometry=MultiPolygon(
            polygons=(
                Polygon(rings=(square(20, 20, 10),)),
                Polygon(rings=(square(40, 40, 10),)),
            )
        ),
    )


@pytest.fixture
def feature_collection() -> dict:
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"NAME": "Squareland"},
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[[0, 0], [10, 0], [10, 10], [0, 10], [0, 0]]],
                },
            },
            {
                "type": "Feature",
                "properties": {"name": "Twin Isles"},
                "geometry": {
                    "type": "MultiPolygon",
                    "coordinates": [
                        [[[20, 20], [30, 20], [30, 30], [20, 30], [20, 20]]],
                        [[[40, 40], [50, 40], [50, 50], [40, 50], [40, 40]]],
                    ],
                },
            },
            {"type": "Feature", "properties": {"NAME": "Nowhere"}, "geometry": None},
        ],
    }


@pytest.fixture
def geojson_file(tmp_path, feature_collection):
    path = tmp_path / "countries.geojson"
    path.write_text(json.dumps(feature_collection), encoding="utf-8")
    return path
