"""
API routes.

Endpoints:
- GET    `/api/countries`: dataset load status and country names.
- POST   `/api/pick`: resolve a renderer intersection into a full selection.
- GET    `/api/resolve`: resolve a lat/lon pair (no outline).
- GET    `/api/countries/{name}/outline`: outline buffers for one country.
- DELETE `/api/selection`: clear the current selection.

The country dataset is loaded once in a background thread; until it finishes,
resolution answers with the `not_loaded` status instead of blocking.
"""

from __future__ import annotations

import logging
import math
import threading
from functools import lru_cache

from fastapi import APIRouter, HTTPException

from globepick.catalog.geojson import load_countries
from globepick.config.settings import get_settings
from globepick.core.errors import DataNotLoadedError, InvalidIntersectionError, OutOfRangeError
from globepick.core.geo import GeoPoint
from globepick.domain.models import (
    CountriesStatus,
    OutlineBufferOut,
    PickRequest,
    ResolutionOut,
    SelectionOut,
)
from globepick.selection import GlobeSession

logger = logging.getLogger(__name__)

router = APIRouter()

_selection_lock = threading.Lock()
_load_lock = threading.Lock()
_load_thread: threading.Thread | None = None
_load_error: str | None = None


@lru_cache
def _session() -> GlobeSession:
    return GlobeSession.from_settings(get_settings())


def _load_countries_into_session() -> None:
    global _load_error
    settings = get_settings()
    try:
        features = load_countries(
            settings.countries.source,
            timeout_seconds=settings.countries.http_timeout_seconds,
        )
    except Exception as exc:
        # Resolution keeps answering `not_loaded`; the status endpoint reports why.
        logger.exception("Failed to load country data from %s", settings.countries.source)
        _load_error = f"{type(exc).__name__}: {exc}"
        return
    _session().index.load(features)
    _load_error = None


def start_country_load() -> threading.Thread:
    """Start the one-time background load (no-op if already running or done)."""
    global _load_thread
    with _load_lock:
        if _load_thread is None or (not _load_thread.is_alive() and _load_error is not None):
            _load_thread = threading.Thread(target=_load_countries_into_session, name="country-load", daemon=True)
            _load_thread.start()
        return _load_thread


@router.get("/api/countries", response_model=CountriesStatus)
def get_countries() -> CountriesStatus:
    """Return dataset load status (used by the UI to show a loading hint)."""
    index = _session().index
    return CountriesStatus(
        loaded=index.loaded,
        count=len(index),
        source=get_settings().countries.source,
        names=index.names(),
        error=_load_error,
    )


@router.post("/api/pick", response_model=SelectionOut)
def post_pick(request: PickRequest) -> SelectionOut:
    """Resolve a click on the globe and return the new selection."""
    session = _session()
    with _selection_lock:
        try:
            state = session.select(request.intersections(), strict=True)
        except InvalidIntersectionError as exc:
            raise HTTPException(status_code=422, detail=exc.to_error_dict()) from exc
        return SelectionOut.from_state(state)


@router.get("/api/resolve", response_model=ResolutionOut)
def get_resolve(lat: float, lon: float) -> ResolutionOut:
    if not (math.isfinite(lat) and math.isfinite(lon)) or not -90 <= lat <= 90:
        err = OutOfRangeError(f"invalid coordinate lat={lat!r} lon={lon!r}")
        raise HTTPException(status_code=422, detail=err.to_error_dict())
    resolution = _session().index.lookup(GeoPoint(lat=lat, lon=lon))
    return ResolutionOut.from_resolution(resolution)


@router.get("/api/countries/{name}/outline", response_model=list[OutlineBufferOut])
def get_country_outline(name: str) -> list[OutlineBufferOut]:
    session = _session()
    try:
        feature = session.index.get(name)
    except DataNotLoadedError as exc:
        raise HTTPException(status_code=503, detail=exc.to_error_dict()) from exc
    if feature is None:
        raise HTTPException(status_code=404, detail=f"unknown country: {name}")
    return [OutlineBufferOut.from_buffer(b) for b in session.outline_builder.build(feature.geometry)]


@router.delete("/api/selection")
def delete_selection() -> dict:
    with _selection_lock:
        _session().clear()
    return {"cleared": True}
