from __future__ import annotations


def square(lon0: float, lat0: float, size: float) -> tuple[tuple[float, float], ...]:
    """Open square ring in GeoJSON (lon, lat) order."""
    return (
        (lon0, lat0),
        (lon0 + size, lat0),
        (lon0 + size, lat0 + size),
        (lon0, lat0 + size),
    )
