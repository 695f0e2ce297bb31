"""
Selection orchestration.

`GlobeSession` wires the resolution core together for one globe:

    intersections -> SurfacePick -> CountryIndex.lookup -> OutlineBuilder.build

and keeps the current `SelectionState`. Each interaction replaces the state wholesale;
the previous state's outline buffers are disposed first so repeated clicks do not
accumulate vertex data. A pick that misses the globe surface leaves the selection as is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from globepick.config.settings import Settings
from globepick.core.errors import InvalidIntersectionError
from globepick.core.geo import CoordinateTransform, GeoPoint
from globepick.core.time import LocalTimeEstimate, estimate_local_time
from globepick.geometry.outline import LineSegmentBuffer, OutlineBuilder, OutlineLayer
from globepick.index.countries import CountryIndex, Resolution
from globepick.pick.surface import Candidates, PickResult, SurfacePick

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionState:
    resolution: Resolution | None = None
    pick: PickResult | None = None
    buffers: tuple[LineSegmentBuffer, ...] = ()
    local_time: LocalTimeEstimate | None = None

    @property
    def empty(self) -> bool:
        return self.resolution is None

    def dispose(self) -> None:
        for buffer in self.buffers:
            buffer.dispose()


class GlobeSession:
    """Owns the resolution pipeline and the current selection for one globe."""

    def __init__(
        self,
        *,
        index: CountryIndex,
        picker: SurfacePick,
        outline_builder: OutlineBuilder,
    ):
        if picker.transform is not outline_builder.transform:
            raise ValueError("picker and outline builder must share one CoordinateTransform")
        self._index = index
        self._picker = picker
        self._outline = outline_builder
        self._state = SelectionState()

    @classmethod
    def from_settings(cls, settings: Settings, index: CountryIndex | None = None) -> GlobeSession:
        globe = settings.globe
        transform = CoordinateTransform(globe.radius, tolerance=globe.transform_tolerance)
        layers = [
            OutlineLayer(radius=layer.radius, color=layer.color, opacity=layer.opacity)
            for layer in settings.outline.layers
        ]
        return cls(
            index=index if index is not None else CountryIndex(),
            picker=SurfacePick(
                transform,
                tolerance=globe.pick_tolerance,
                uv_tolerance_deg=globe.uv_tolerance_deg,
                marker_lift=globe.marker_lift,
            ),
            outline_builder=OutlineBuilder(transform, layers),
        )

    @property
    def transform(self) -> CoordinateTransform:
        return self._picker.transform

    @property
    def index(self) -> CountryIndex:
        return self._index

    @property
    def outline_builder(self) -> OutlineBuilder:
        return self._outline

    @property
    def state(self) -> SelectionState:
        return self._state

    def select(
        self, candidates: Candidates, *, now: datetime | None = None, strict: bool = False
    ) -> SelectionState:
        """Resolve a click; on an invalid pick the current selection is kept.

        With `strict=True` the `InvalidIntersectionError` is re-raised (still without
        touching the current selection) so API callers can report it.
        """
        try:
            pick = self._picker.pick(candidates)
        except InvalidIntersectionError as exc:
            logger.info("Dropping pick: %s", exc.message)
            if strict:
                raise
            return self._state
        return self._select(pick.geo, pick=pick, now=now)

    def select_geo(self, point: GeoPoint, *, now: datetime | None = None) -> SelectionState:
        return self._select(point, pick=None, now=now)

    def clear(self) -> SelectionState:
        return self._replace(SelectionState())

    def _select(self, point: GeoPoint, *, pick: PickResult | None, now: datetime | None) -> SelectionState:
        resolution = self._index.lookup(point)
        buffers = self._outline.build(resolution.geometry)
        logger.info(
            "Selected %s at lat=%.4f lon=%.4f (%s, %d outline layer(s))",
            resolution.name,
            point.lat,
            point.lon,
            resolution.status,
            len(buffers),
        )
        return self._replace(
            SelectionState(
                resolution=resolution,
                pick=pick,
                buffers=tuple(buffers),
                local_time=estimate_local_time(point.lon, now),
            )
        )

    def _replace(self, new_state: SelectionState) -> SelectionState:
        old_state = self._state
        old_state.dispose()
        self._state = new_state
        return new_state
