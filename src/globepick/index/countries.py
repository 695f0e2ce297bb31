"""
Country lookup by coordinate.

`CountryIndex` owns the loaded country features for the lifetime of a session. It is
filled once by `load()` (a single atomic replace) and read many times afterwards, so
no locking is needed: readers see either the previous tuple or the new one.

`resolve()` distinguishes three outcomes:
- a `CountryFeature` (first match in insertion order),
- `Unresolved.OCEAN` (data loaded, nothing contains the point),
- `Unresolved.NOT_LOADED` (no data yet; callers keep the UI responsive instead of blocking).
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Mapping

from globepick.core.errors import DataNotLoadedError
from globepick.core.geo import GeoPoint
from globepick.geometry.containment import contains_polygon
from globepick.geometry.shapes import CountryFeature, PolygonGeometry

logger = logging.getLogger(__name__)

OCEAN_NAME = "Ocean/International Waters"
NOT_LOADED_NAME = "Loading countries..."


class Unresolved(enum.Enum):
    OCEAN = OCEAN_NAME
    NOT_LOADED = NOT_LOADED_NAME


ResolutionStatus = Literal["country", "ocean", "not_loaded"]


@dataclass(frozen=True)
class Resolution:
    """What a clicked coordinate resolved to (handed to UI and downstream services)."""

    name: str
    lat: float
    lon: float
    status: ResolutionStatus
    properties: Mapping[str, Any] = field(default_factory=dict)
    geometry: PolygonGeometry | None = None

    @property
    def is_country(self) -> bool:
        return self.status == "country"


class CountryIndex:
    """Linear-scan country resolver."""

    def __init__(self, features: Iterable[CountryFeature] | None = None):
        self._features: tuple[CountryFeature, ...] | None = None
        if features is not None:
            self.load(features)

    @property
    def loaded(self) -> bool:
        return self._features is not None

    def __len__(self) -> int:
        return len(self._features or ())

    @property
    def features(self) -> tuple[CountryFeature, ...]:
        return self._features or ()

    def load(self, features: Iterable[CountryFeature]) -> None:
        """Replace the whole index with `features` (insertion order is scan order)."""
        snapshot = tuple(features)
        self._features = snapshot
        logger.info("Country index loaded: %d feature(s)", len(snapshot))

    def require_loaded(self) -> tuple[CountryFeature, ...]:
        features = self._features
        if features is None:
            raise DataNotLoadedError("country data has not finished loading")
        return features

    def resolve(self, point: GeoPoint) -> CountryFeature | Unresolved:
        features = self._features
        if features is None:
            return Unresolved.NOT_LOADED
        for feature in features:
            if contains_polygon(point, feature.geometry):
                return feature
        return Unresolved.OCEAN

    def lookup(self, point: GeoPoint) -> Resolution:
        """Resolve `point` into the `Resolution` struct."""
        found = self.resolve(point)
        if isinstance(found, CountryFeature):
            return Resolution(
                name=found.name,
                lat=point.lat,
                lon=point.lon,
                status="country",
                properties=found.properties,
                geometry=found.geometry,
            )
        status: ResolutionStatus = "ocean" if found is Unresolved.OCEAN else "not_loaded"
        return Resolution(name=found.value, lat=point.lat, lon=point.lon, status=status)

    def get(self, name: str) -> CountryFeature | None:
        """Case-insensitive lookup by feature name (first match wins)."""
        wanted = name.strip().casefold()
        for feature in self.require_loaded():
            if feature.name.casefold() == wanted:
                return feature
        return None

    def names(self) -> list[str]:
        return [f.name for f in self.features]
