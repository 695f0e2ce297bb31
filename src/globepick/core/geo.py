from __future__ import annotations

import math
from dataclasses import dataclass
from math import asin, atan2, cos, degrees, radians, sin, sqrt

from globepick.core.errors import OutOfRangeError

"""
Geospatial primitives and the canonical globe coordinate transform.

The globe is a sphere centred on the origin with +Y pointing at the north pole and
longitude 0 on +X. Every consumer (click resolution, outline drawing, click marker)
goes through `CoordinateTransform`; no other module derives lat/lon from x/y/z.

    x = r * cos(lat) * cos(lon)
    y = r * sin(lat)
    z = -r * cos(lat) * sin(lon)

    lat = asin(y / |p|)
    lon = atan2(-z, x)
"""

# Below this horizontal extent (relative to |p|) a point is treated as a pole.
_POLE_EPSILON = 1e-12


def _normalize_lon(lon: float) -> float:
    wrapped = ((lon + 180.0) % 360.0) - 180.0
    if wrapped >= 180.0:
        wrapped -= 360.0
    return wrapped


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees.

    Longitude is normalized into [-180, 180) and latitude clamped into [-90, 90]
    on construction, so every instance satisfies the range invariant.
    """

    lat: float
    lon: float

    def __post_init__(self) -> None:
        lat = float(self.lat)
        lon = float(self.lon)
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise OutOfRangeError(f"GeoPoint requires finite values, got lat={lat!r} lon={lon!r}")
        object.__setattr__(self, "lat", max(-90.0, min(90.0, lat)))
        object.__setattr__(self, "lon", _normalize_lon(lon))

    @classmethod
    def from_lonlat(cls, pair: tuple[float, float]) -> GeoPoint:
        """Build from a GeoJSON-ordered `(lon, lat)` pair."""
        lon, lat = pair
        return cls(lat=lat, lon=lon)


@dataclass(frozen=True)
class CartesianPoint:
    """A point in globe-local 3D space."""

    x: float
    y: float
    z: float

    def norm(self) -> float:
        return sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def scaled(self, factor: float) -> CartesianPoint:
        return CartesianPoint(self.x * factor, self.y * factor, self.z * factor)

    def distance_to(self, other: CartesianPoint) -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return sqrt(dx * dx + dy * dy + dz * dz)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


def central_angle_deg(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle angle in degrees between two points (haversine form)."""
    lat1 = radians(a.lat)
    lat2 = radians(b.lat)
    dlat = lat2 - lat1
    dlon = radians(b.lon - a.lon)

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    return degrees(2 * asin(min(1.0, sqrt(h))))


class CoordinateTransform:
    """Bidirectional mapping between `GeoPoint` and points on a sphere.

    `radius` is the reference globe radius; `tolerance` is the relative deviation
    from it that `to_geo` accepts before rejecting a point as off-surface.
    """

    def __init__(self, radius: float = 5.0, *, tolerance: float = 1e-3):
        if not (math.isfinite(radius) and radius > 0):
            raise ValueError("radius must be a finite number > 0")
        if not (0 < tolerance < 1):
            raise ValueError("tolerance must be in (0, 1)")
        self._radius = float(radius)
        self._tolerance = float(tolerance)

    @property
    def radius(self) -> float:
        return self._radius

    @property
    def tolerance(self) -> float:
        return self._tolerance

    def to_cartesian(self, lat: float, lon: float, radius: float | None = None) -> CartesianPoint:
        """Map decimal-degree lat/lon onto a sphere (default: the globe radius)."""
        r = self._radius if radius is None else float(radius)
        if not (math.isfinite(lat) and math.isfinite(lon) and math.isfinite(r)):
            raise OutOfRangeError(f"non-finite input lat={lat!r} lon={lon!r} radius={r!r}")
        if not -90.0 <= lat <= 90.0:
            raise OutOfRangeError(f"latitude {lat!r} outside [-90, 90]")

        lat_r = radians(lat)
        lon_r = radians(lon)
        return CartesianPoint(
            x=r * cos(lat_r) * cos(lon_r),
            y=r * sin(lat_r),
            z=-r * cos(lat_r) * sin(lon_r),
        )

    def geo_to_cartesian(self, point: GeoPoint, radius: float | None = None) -> CartesianPoint:
        return self.to_cartesian(point.lat, point.lon, radius)

    def to_geo(self, point: CartesianPoint, tolerance: float | None = None) -> GeoPoint:
        """Inverse of `to_cartesian` for points on the globe surface.

        Raises:
            OutOfRangeError: If the point is non-finite, or its distance from the origin
                deviates from the globe radius by more than `tolerance` (relative).
        """
        if not point.is_finite():
            raise OutOfRangeError(f"non-finite point {point!r}")
        tol = self._tolerance if tolerance is None else float(tolerance)
        d = point.norm()
        if abs(d - self._radius) > tol * self._radius:
            raise OutOfRangeError(
                f"point at distance {d:.6f} is not on the globe surface (radius={self._radius}, tolerance={tol})"
            )

        lat = degrees(asin(max(-1.0, min(1.0, point.y / d))))
        if math.hypot(point.x, point.z) <= _POLE_EPSILON * d:
            # Longitude is undefined at the poles; report 0 by convention.
            return GeoPoint(lat=lat, lon=0.0)
        lon = degrees(atan2(-point.z, point.x))
        return GeoPoint(lat=lat, lon=lon)

    def project(self, point: CartesianPoint) -> CartesianPoint:
        """Scale `point` along its ray from the origin onto the globe surface."""
        if not point.is_finite():
            raise OutOfRangeError(f"non-finite point {point!r}")
        d = point.norm()
        if d == 0:
            raise OutOfRangeError("cannot project the globe centre onto the surface")
        return point.scaled(self._radius / d)

    def surface_marker(self, point: GeoPoint, lift: float) -> CartesianPoint:
        """Position for a click marker floating `lift` units above the surface."""
        return self.geo_to_cartesian(point, self._radius + float(lift))

    @staticmethod
    def to_uv(point: GeoPoint) -> tuple[float, float]:
        """Equirectangular texture coordinates (u grows eastward, v grows northward).

        Matches a sphere mesh whose texture row v = 1 sits at the north pole.
        """
        return ((point.lon + 180.0) / 360.0, (point.lat + 90.0) / 180.0)

    @staticmethod
    def from_uv(u: float, v: float) -> GeoPoint:
        if not (math.isfinite(u) and math.isfinite(v)):
            raise OutOfRangeError(f"non-finite uv ({u!r}, {v!r})")
        return GeoPoint(lat=v * 180.0 - 90.0, lon=u * 360.0 - 180.0)
