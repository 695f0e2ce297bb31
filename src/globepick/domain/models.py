"""
API models (Pydantic).

These types are the JSON contract between the resolution core and its consumers:
- the renderer (outline buffers, click marker),
- the UI (resolved name, coordinates, local time),
- downstream weather/news/time services (`{lat, lon, name}`).

The core itself works with frozen dataclasses; conversion happens here so the
geometry modules stay free of serialization concerns.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from globepick.core.geo import CartesianPoint
from globepick.core.time import LocalTimeEstimate
from globepick.geometry.outline import LineSegmentBuffer
from globepick.geometry.shapes import MultiPolygon, Polygon, PolygonGeometry
from globepick.index.countries import Resolution
from globepick.pick.surface import Intersection
from globepick.selection import SelectionState


class Vec3(BaseModel):
    x: float
    y: float
    z: float

    def to_point(self) -> CartesianPoint:
        return CartesianPoint(self.x, self.y, self.z)

    @classmethod
    def from_point(cls, point: CartesianPoint) -> "Vec3":
        return cls(x=point.x, y=point.y, z=point.z)


class IntersectionIn(BaseModel):
    """One ray-cast hit reported by the renderer (globe-local space)."""

    point: Vec3
    uv: tuple[float, float] | None = None

    def to_intersection(self) -> Intersection:
        return Intersection(point=self.point.to_point(), uv=self.uv)


class PickRequest(BaseModel):
    """Nearest hit first; `candidates` holds further hits along the same ray."""

    point: Vec3
    uv: tuple[float, float] | None = None
    candidates: list[IntersectionIn] = Field(default_factory=list)

    def intersections(self) -> list[Intersection]:
        first = Intersection(point=self.point.to_point(), uv=self.uv)
        return [first, *(c.to_intersection() for c in self.candidates)]


def _geometry_type(geometry: PolygonGeometry | None) -> str | None:
    if geometry is None:
        return None
    if isinstance(geometry, Polygon):
        return "Polygon"
    if isinstance(geometry, MultiPolygon):
        return "MultiPolygon"
    raise TypeError(f"unsupported geometry type: {type(geometry).__name__}")


class ResolutionOut(BaseModel):
    name: str
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, lt=180)
    status: Literal["country", "ocean", "not_loaded"]
    properties: dict[str, Any] = Field(default_factory=dict)
    geometry_type: Literal["Polygon", "MultiPolygon"] | None = None

    @classmethod
    def from_resolution(cls, resolution: Resolution) -> "ResolutionOut":
        return cls(
            name=resolution.name,
            lat=resolution.lat,
            lon=resolution.lon,
            status=resolution.status,
            properties=dict(resolution.properties),
            geometry_type=_geometry_type(resolution.geometry),
        )


class OutlineBufferOut(BaseModel):
    radius: float
    color: str
    opacity: float
    segment_count: int
    positions: list[float]

    @classmethod
    def from_buffer(cls, buffer: LineSegmentBuffer) -> "OutlineBufferOut":
        return cls(
            radius=buffer.layer.radius,
            color=buffer.layer.color,
            opacity=buffer.layer.opacity,
            segment_count=buffer.segment_count,
            positions=list(buffer.positions),
        )


class LocalTimeOut(BaseModel):
    label: str
    offset_hours: int
    local_time: datetime
    time_string: str
    is_daytime: bool

    @classmethod
    def from_estimate(cls, estimate: LocalTimeEstimate) -> "LocalTimeOut":
        return cls(
            label=estimate.label,
            offset_hours=estimate.offset_hours,
            local_time=estimate.local_time,
            time_string=estimate.time_string,
            is_daytime=estimate.is_daytime,
        )


class SelectionOut(BaseModel):
    """A full selection: what the UI shows and what the renderer draws."""

    resolution: ResolutionOut
    marker: Vec3 | None = None
    uv_mismatch: bool = False
    local_time: LocalTimeOut | None = None
    outline: list[OutlineBufferOut] = Field(default_factory=list)

    @classmethod
    def from_state(cls, state: SelectionState) -> "SelectionOut":
        if state.resolution is None:
            raise ValueError("cannot serialize an empty selection")
        pick = state.pick
        return cls(
            resolution=ResolutionOut.from_resolution(state.resolution),
            marker=Vec3.from_point(pick.marker) if pick is not None else None,
            uv_mismatch=pick.uv_mismatch if pick is not None else False,
            local_time=LocalTimeOut.from_estimate(state.local_time) if state.local_time else None,
            outline=[OutlineBufferOut.from_buffer(b) for b in state.buffers],
        )


class CountriesStatus(BaseModel):
    loaded: bool
    count: int
    source: str
    names: list[str] = Field(default_factory=list)
    error: str | None = None
