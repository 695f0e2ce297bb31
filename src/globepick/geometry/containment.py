"""
Point-in-polygon tests (even-odd ray casting) in lon/lat space.

The ray runs from the test point toward +lon. Only outer rings are tested: holes
are ignored, and rings crossing the anti-meridian are not unwrapped, so countries
spanning +-180 degrees can mis-resolve near the seam.
"""

from __future__ import annotations

from typing import Sequence

from globepick.core.geo import GeoPoint
from globepick.geometry.shapes import MultiPolygon, Polygon, PolygonGeometry


def contains(point: GeoPoint, ring: Sequence[Sequence[float]]) -> bool:
    """Return True if `point` lies inside `ring` (a sequence of `(lon, lat)` vertices).

    Edge (i, i+1 mod N) toggles inclusion when it straddles the point's latitude and
    the point lies west of the edge's crossing longitude. Rings with fewer than three
    vertices enclose nothing.
    """
    n = len(ring)
    if n < 3:
        return False

    x = point.lon
    y = point.lat
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]
        j = i
        if yi == yj:
            # Horizontal edges never straddle the ray.
            continue
        if (yi > y) != (yj > y):
            crossing = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < crossing:
                inside = not inside
    return inside


def contains_polygon(point: GeoPoint, geometry: PolygonGeometry | None) -> bool:
    """Test `point` against the outer ring(s) of a Polygon or MultiPolygon."""
    if geometry is None:
        return False
    if isinstance(geometry, Polygon):
        return contains(point, geometry.outer)
    if isinstance(geometry, MultiPolygon):
        return any(contains(point, polygon.outer) for polygon in geometry.polygons)
    raise TypeError(f"unsupported geometry type: {type(geometry).__name__}")
