"""
Country outline generation.

The renderer draws a selected country as several `LineSegments` layers at slightly
different radii (inner glow, main line, outer glow). This module produces the vertex
data for those layers:

- one `LineSegmentBuffer` per `OutlineLayer`, shared by every ring of the country,
- two vertices per segment (flat `x, y, z` floats, ready for a position attribute),
- vertices computed by the same `CoordinateTransform` that resolves clicks, so the
  outline always sits over the clicked region.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from globepick.core.errors import MalformedGeometryError, OutOfRangeError
from globepick.core.geo import CartesianPoint, CoordinateTransform
from globepick.geometry.shapes import PolygonGeometry, Ring, outer_rings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutlineLayer:
    """Rendering parameters for one outline pass."""

    radius: float
    color: str = "#00ff88"
    opacity: float = 1.0


@dataclass
class LineSegmentBuffer:
    """Vertex data for one outline layer."""

    layer: OutlineLayer
    positions: list[float] = field(default_factory=list)
    disposed: bool = False

    @property
    def segment_count(self) -> int:
        return len(self.positions) // 6

    def vertices(self) -> Iterator[CartesianPoint]:
        p = self.positions
        for k in range(0, len(p), 3):
            yield CartesianPoint(p[k], p[k + 1], p[k + 2])

    def dispose(self) -> None:
        """Release vertex data once the renderer detaches this buffer."""
        self.positions = []
        self.disposed = True


def _ring_segments(ring: Ring) -> list[tuple[tuple[float, float], tuple[float, float]]]:
    """Consecutive `(lat, lon)` pairs of a ring, including the closing edge N-1 -> 0."""
    if len(ring) < 3:
        raise MalformedGeometryError(f"ring has {len(ring)} vertices; at least 3 are required")

    out = []
    skipped = 0
    n = len(ring)
    for i in range(n):
        lon1, lat1 = ring[i][0], ring[i][1]
        lon2, lat2 = ring[(i + 1) % n][0], ring[(i + 1) % n][1]
        if not all(math.isfinite(v) for v in (lat1, lon1, lat2, lon2)):
            skipped += 1
            continue
        if (lat1, lon1) == (lat2, lon2):
            continue
        out.append(((lat1, lon1), (lat2, lon2)))
    if skipped:
        logger.warning(
            "Skipping %d outline segment(s) with non-finite coordinates (%s)",
            skipped,
            MalformedGeometryError.default_code,
        )
    return out


class OutlineBuilder:
    """Builds outline buffers for a country geometry."""

    def __init__(self, transform: CoordinateTransform, layers: Sequence[OutlineLayer] = ()):
        self._transform = transform
        self._layers = tuple(layers)

    @property
    def transform(self) -> CoordinateTransform:
        return self._transform

    @property
    def layers(self) -> tuple[OutlineLayer, ...]:
        return self._layers

    def build(
        self, geometry: PolygonGeometry | None, layers: Sequence[OutlineLayer] | None = None
    ) -> list[LineSegmentBuffer]:
        """Return one buffer per layer; empty when there is nothing to draw."""
        use_layers = self._layers if layers is None else tuple(layers)
        if geometry is None or not use_layers:
            return []

        segments: list[tuple[tuple[float, float], tuple[float, float]]] = []
        for index, ring in enumerate(outer_rings(geometry)):
            try:
                segments.extend(_ring_segments(ring))
            except MalformedGeometryError as exc:
                logger.warning("Skipping outline ring %d: %s (%s)", index, exc.message, exc.code)
        if not segments:
            return []

        buffers: list[LineSegmentBuffer] = []
        for layer in use_layers:
            positions: list[float] = []
            for (lat1, lon1), (lat2, lon2) in segments:
                try:
                    a = self._transform.to_cartesian(lat1, lon1, layer.radius)
                    b = self._transform.to_cartesian(lat2, lon2, layer.radius)
                except OutOfRangeError:
                    continue
                positions.extend((a.x, a.y, a.z, b.x, b.y, b.z))
            if positions:
                buffers.append(LineSegmentBuffer(layer=layer, positions=positions))

        logger.debug("Built %d outline layer(s) with %d segment(s) each", len(buffers), len(segments))
        return buffers
