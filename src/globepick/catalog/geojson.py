"""
Country dataset loader (GeoJSON).

The dataset is a GeoJSON `FeatureCollection` whose features carry `properties.NAME`
(or `properties.name`) and a `Polygon` / `MultiPolygon` geometry with `[lon, lat]`
coordinates. We convert it into immutable `CountryFeature` objects for `CountryIndex`.

Features without a usable geometry are skipped (and logged) instead of failing the
whole load: one bad country must not leave the globe without any countries.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any

from globepick.core.env import resolve_project_path
from globepick.core.errors import MalformedGeometryError
from globepick.core.http import get_json
from globepick.geometry.shapes import CountryFeature, MultiPolygon, Polygon, PolygonGeometry, Ring

logger = logging.getLogger(__name__)

UNKNOWN_COUNTRY_NAME = "Unknown Country"


def _parse_ring(raw: Any) -> Ring:
    if not isinstance(raw, list):
        raise MalformedGeometryError(f"ring must be a list, got {type(raw).__name__}")
    out = []
    for position in raw:
        if not isinstance(position, (list, tuple)) or len(position) < 2:
            raise MalformedGeometryError(f"position must be [lon, lat], got {position!r}")
        try:
            out.append((float(position[0]), float(position[1])))
        except (TypeError, ValueError) as exc:
            raise MalformedGeometryError(f"non-numeric position {position!r}") from exc
    return tuple(out)


def _parse_polygon(raw: Any) -> Polygon:
    if not isinstance(raw, list):
        raise MalformedGeometryError(f"polygon coordinates must be a list, got {type(raw).__name__}")
    return Polygon(rings=tuple(_parse_ring(ring) for ring in raw))


def parse_geometry(raw: Any) -> PolygonGeometry:
    """Convert a GeoJSON geometry object into `Polygon` / `MultiPolygon`.

    Raises:
        MalformedGeometryError: For unsupported types or malformed coordinates.
    """
    if not isinstance(raw, dict):
        raise MalformedGeometryError("geometry must be an object")
    kind = raw.get("type")
    coords = raw.get("coordinates")
    if kind == "Polygon":
        return _parse_polygon(coords)
    if kind == "MultiPolygon":
        if not isinstance(coords, list):
            raise MalformedGeometryError("MultiPolygon coordinates must be a list")
        return MultiPolygon(polygons=tuple(_parse_polygon(p) for p in coords))
    raise MalformedGeometryError(f"unsupported geometry type: {kind!r}")


def feature_name(properties: dict[str, Any]) -> str:
    for key in ("NAME", "name"):
        value = properties.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return UNKNOWN_COUNTRY_NAME


def parse_feature_collection(payload: Any) -> list[CountryFeature]:
    """Parse a GeoJSON FeatureCollection into country features (file order preserved)."""
    if not isinstance(payload, dict) or payload.get("type") != "FeatureCollection":
        raise MalformedGeometryError("expected a GeoJSON FeatureCollection")
    raw_features = payload.get("features")
    if not isinstance(raw_features, list):
        raise MalformedGeometryError("FeatureCollection.features must be a list")

    out: list[CountryFeature] = []
    skipped = 0
    for index, raw in enumerate(raw_features):
        if not isinstance(raw, dict):
            skipped += 1
            continue
        properties = raw.get("properties") or {}
        if not isinstance(properties, dict):
            properties = {}
        name = feature_name(properties)
        if not raw.get("geometry"):
            logger.debug("Feature %d (%s) has no geometry; skipping", index, name)
            skipped += 1
            continue
        try:
            geometry = parse_geometry(raw["geometry"])
        except MalformedGeometryError as exc:
            logger.warning("Skipping feature %d (%s): %s", index, name, exc.message)
            skipped += 1
            continue
        out.append(CountryFeature(name=name, geometry=geometry, properties=MappingProxyType(dict(properties))))

    if skipped:
        logger.info("Parsed %d country feature(s), skipped %d", len(out), skipped)
    return out


def _is_url(source: str) -> bool:
    return source.startswith("http://") or source.startswith("https://")


def load_countries(source: str | Path, *, timeout_seconds: float = 30) -> list[CountryFeature]:
    """Load country features from a local GeoJSON file or an http(s) URL."""
    if isinstance(source, str) and _is_url(source):
        logger.info("Fetching country data from %s", source)
        payload = get_json(source, timeout_seconds=timeout_seconds)
    else:
        path = resolve_project_path(source)
        logger.info("Reading country data from %s", path)
        payload = json.loads(path.read_text(encoding="utf-8"))
    return parse_feature_collection(payload)
