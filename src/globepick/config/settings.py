# src/globepick/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/globepick/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `GLOBEPICK_LOG_LEVEL`, `GLOBEPICK_COUNTRIES_SOURCE`)
- an external YAML file via `GLOBEPICK_CONFIG_PATH`

Design rule:
- Geometry knobs (globe radius, tolerances, outline layers) live in YAML, not in the
  geometry modules. The renderer and the resolver must agree on the radius.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from globepick.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `globepick.config`."""
    text = resources.files("globepick.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "GlobePick"
    log_level: str = "INFO"


class GlobeSettings(BaseModel):
    radius: float = Field(5.0, gt=0)
    transform_tolerance: float = Field(0.001, gt=0, lt=1)
    pick_tolerance: float = Field(0.04, gt=0, lt=1)
    uv_tolerance_deg: float = Field(1.0, gt=0)
    marker_lift: float = Field(0.02, ge=0)


class OutlineLayerSettings(BaseModel):
    radius: float = Field(..., gt=0)
    color: str = "#00ff88"
    opacity: float = Field(1.0, ge=0, le=1)


def _default_layers() -> list[OutlineLayerSettings]:
    return [
        OutlineLayerSettings(radius=5.08, opacity=0.4),
        OutlineLayerSettings(radius=5.09, opacity=0.6),
        OutlineLayerSettings(radius=5.10, opacity=1.0),
        OutlineLayerSettings(radius=5.11, opacity=0.6),
        OutlineLayerSettings(radius=5.12, opacity=0.4),
    ]


class OutlineSettings(BaseModel):
    layers: list[OutlineLayerSettings] = Field(default_factory=_default_layers)


class CountriesSettings(BaseModel):
    source: str = "data/world.geojson"
    http_timeout_seconds: float = 30
    load_on_startup: bool = True


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    globe: GlobeSettings = Field(default_factory=GlobeSettings)
    outline: OutlineSettings = Field(default_factory=OutlineSettings)
    countries: CountriesSettings = Field(default_factory=CountriesSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload."""
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("GLOBEPICK_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    source = os.getenv("GLOBEPICK_COUNTRIES_SOURCE")
    if source:
        data.setdefault("countries", {})["source"] = source

    radius = os.getenv("GLOBEPICK_GLOBE_RADIUS")
    if radius:
        data.setdefault("globe", {})["radius"] = float(radius)

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("GLOBEPICK_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
