# src/globepick/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance, configures CORS for the browser renderer and
kicks off the one-time country dataset load. Resolution logic lives in
`globepick.api.routes` and `globepick.selection`.
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from globepick.config.settings import get_settings
from globepick.core.logging import configure_logging

from . import routes

configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    if get_settings().countries.load_on_startup:
        routes.start_country_load()
    yield


app = FastAPI(title="GlobePick API", version="0.1.0", lifespan=lifespan)

# CORS (dev-friendly): the globe renderer usually runs on a separate local dev server.
# Configure via env:
# - GLOBEPICK_CORS_ORIGINS="http://localhost:5173,http://127.0.0.1:5173"
# - GLOBEPICK_CORS_ALLOW_LOCAL=0 to disable the default localhost allowance
cors_origins = [s.strip() for s in os.getenv("GLOBEPICK_CORS_ORIGINS", "").split(",") if s.strip()]
cors_allow_local = os.getenv("GLOBEPICK_CORS_ALLOW_LOCAL", "1").strip().lower() in {"1", "true", "yes", "y"}
cors_origin_regex = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$" if cors_allow_local and not cors_origins else ""
if cors_origins or cors_origin_regex:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_origin_regex=cors_origin_regex or None,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(routes.router)
