"""
Country geometry types.

GeoJSON `Polygon` and `MultiPolygon` become a small tagged variant (`Polygon` |
`MultiPolygon`). Consumers dispatch with `isinstance` and raise `TypeError` on
anything else, so adding a variant forces every consumer to be updated.

Coordinates stay in GeoJSON order: each vertex is a `(lon, lat)` tuple.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Union

Ring = tuple[tuple[float, float], ...]


@dataclass(frozen=True)
class Polygon:
    """One outer ring followed by zero or more hole rings."""

    rings: tuple[Ring, ...] = ()

    @property
    def outer(self) -> Ring:
        return self.rings[0] if self.rings else ()

    @property
    def holes(self) -> tuple[Ring, ...]:
        return self.rings[1:]


@dataclass(frozen=True)
class MultiPolygon:
    polygons: tuple[Polygon, ...] = ()


PolygonGeometry = Union[Polygon, MultiPolygon]


def iter_polygons(geometry: PolygonGeometry | None) -> Iterator[Polygon]:
    """Yield the constituent polygons of a geometry (nothing for `None`)."""
    if geometry is None:
        return
    if isinstance(geometry, Polygon):
        yield geometry
    elif isinstance(geometry, MultiPolygon):
        yield from geometry.polygons
    else:
        raise TypeError(f"unsupported geometry type: {type(geometry).__name__}")


def outer_rings(geometry: PolygonGeometry | None) -> list[Ring]:
    """Outer boundary of every polygon; holes are not part of the resolution model."""
    return [p.outer for p in iter_polygons(geometry) if p.outer]


@dataclass(frozen=True)
class CountryFeature:
    """A named country boundary loaded from GeoJSON."""

    name: str
    geometry: PolygonGeometry
    properties: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}), compare=False, hash=False)
