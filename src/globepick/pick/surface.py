"""
Surface picking: renderer ray/sphere intersections -> canonical `GeoPoint`.

The renderer's ray cast returns intersections nearest first. A candidate is accepted
when its distance from the globe centre is within `tolerance` (relative) of the globe
radius; otherwise the next candidate is tried. The coordinate always comes from
`CoordinateTransform.to_geo` on the 3D point. A texture UV, when supplied, is only
compared against that result and logged on disagreement.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Union

from globepick.core.errors import InvalidIntersectionError
from globepick.core.geo import CartesianPoint, CoordinateTransform, GeoPoint, central_angle_deg

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Intersection:
    """One ray-cast hit in globe-local space."""

    point: CartesianPoint
    uv: tuple[float, float] | None = None


@dataclass(frozen=True)
class PickResult:
    geo: GeoPoint
    surface_point: CartesianPoint
    marker: CartesianPoint
    candidate_index: int = 0
    uv: tuple[float, float] | None = None
    uv_mismatch: bool = False


Candidates = Union[Intersection, Sequence[Intersection]]


class SurfacePick:
    def __init__(
        self,
        transform: CoordinateTransform,
        *,
        tolerance: float = 0.04,
        uv_tolerance_deg: float = 1.0,
        marker_lift: float = 0.02,
    ):
        if not (0 < tolerance < 1):
            raise ValueError("tolerance must be in (0, 1)")
        self._transform = transform
        self._tolerance = float(tolerance)
        self._uv_tolerance_deg = float(uv_tolerance_deg)
        self._marker_lift = float(marker_lift)

    @property
    def transform(self) -> CoordinateTransform:
        return self._transform

    def within_tolerance(self, point: CartesianPoint) -> bool:
        if not point.is_finite():
            return False
        r = self._transform.radius
        return abs(point.norm() - r) <= self._tolerance * r

    def pick(self, candidates: Candidates) -> PickResult:
        """Return the first acceptable candidate as a `PickResult`.

        Raises:
            InvalidIntersectionError: If no candidate lies within tolerance of the surface.
        """
        if isinstance(candidates, Intersection):
            candidates = [candidates]

        for index, hit in enumerate(candidates):
            if not self.within_tolerance(hit.point):
                logger.debug(
                    "Rejecting intersection %d at distance %.4f (radius=%s)",
                    index,
                    hit.point.norm(),
                    self._transform.radius,
                )
                continue

            geo = self._transform.to_geo(hit.point, tolerance=self._tolerance)
            return PickResult(
                geo=geo,
                surface_point=self._transform.geo_to_cartesian(geo),
                marker=self._transform.surface_marker(geo, self._marker_lift),
                candidate_index=index,
                uv=hit.uv,
                uv_mismatch=self._uv_disagrees(geo, hit.uv),
            )

        raise InvalidIntersectionError(
            f"no intersection within {self._tolerance:.0%} of globe radius {self._transform.radius}"
        )

    def _uv_disagrees(self, geo: GeoPoint, uv: tuple[float, float] | None) -> bool:
        if uv is None:
            return False
        try:
            uv_geo = self._transform.from_uv(*uv)
        except ValueError:
            logger.warning("Ignoring non-finite uv %r", uv)
            return True
        angle = central_angle_deg(geo, uv_geo)
        if angle > self._uv_tolerance_deg:
            logger.warning(
                "UV cross-check disagrees by %.2f deg (point lat=%.4f lon=%.4f, uv lat=%.4f lon=%.4f)",
                angle,
                geo.lat,
                geo.lon,
                uv_geo.lat,
                uv_geo.lon,
            )
            return True
        return False
