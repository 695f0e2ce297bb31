"""
Error taxonomy for the geospatial resolution core.

Every error carries a stable machine-readable `code` so the API layer and logs can
report failures consistently. None of these errors is fatal to the process:

- `OutOfRangeError`: a malformed geo point, or a Cartesian point that is not on the sphere.
- `InvalidIntersectionError`: no pick candidate lies within tolerance of the globe surface.
- `DataNotLoadedError`: the country dataset has not been loaded yet. `CountryIndex.resolve`
  reports this as a sentinel instead of raising; only `require_loaded()` raises it.
- `MalformedGeometryError`: a ring with fewer than 3 points, non-finite coordinates, or a
  GeoJSON geometry we cannot parse. Outline building logs and skips these.
"""

from __future__ import annotations


class GlobePickError(Exception):
    """Base exception for all resolution-core errors."""

    default_code: str = "GLOBEPICK_ERROR"

    def __init__(self, message: str = "", *, code: str = "") -> None:
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)

    def to_error_dict(self) -> dict[str, str]:
        """Return a structured error payload with stable keys."""
        return {"code": self.code, "message": self.message}


class OutOfRangeError(GlobePickError, ValueError):
    default_code = "OUT_OF_RANGE"


class InvalidIntersectionError(GlobePickError):
    default_code = "INVALID_INTERSECTION"


class DataNotLoadedError(GlobePickError):
    default_code = "DATA_NOT_LOADED"


class MalformedGeometryError(GlobePickError, ValueError):
    default_code = "MALFORMED_GEOMETRY"
