"""
GlobePick CLI entrypoint.

This CLI is intended for quick checks of the resolution core without a renderer:
resolve a coordinate, resolve a raw 3D intersection, or dump a country's outline
buffers. It uses the same `GlobeSession` wiring as the HTTP API.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from globepick.catalog.geojson import load_countries
from globepick.config.settings import get_settings
from globepick.core.errors import GlobePickError
from globepick.core.geo import CartesianPoint, GeoPoint
from globepick.core.logging import configure_logging
from globepick.core.time import parse_datetime
from globepick.domain.models import OutlineBufferOut, SelectionOut
from globepick.index.countries import CountryIndex
from globepick.pick.surface import Intersection
from globepick.selection import GlobeSession, SelectionState


def _session(args: argparse.Namespace) -> GlobeSession:
    settings = get_settings()
    source = args.source or settings.countries.source
    features = load_countries(source, timeout_seconds=settings.countries.http_timeout_seconds)
    return GlobeSession.from_settings(settings, CountryIndex(features))


def _print_selection(state: SelectionState, as_json: bool) -> None:
    if as_json:
        print(json.dumps(SelectionOut.from_state(state).model_dump(mode="json"), ensure_ascii=False, indent=2))
        return

    resolution = state.resolution
    if resolution is None:
        print("No selection")
        return
    print(f"{resolution.name}  ({resolution.lat:.2f}, {resolution.lon:.2f})  [{resolution.status}]")
    if state.local_time is not None:
        day = "day" if state.local_time.is_daytime else "night"
        print(f"  local time: {state.local_time.time_string}  {day}")
    if state.pick is not None and state.pick.uv_mismatch:
        print("  warning: texture UV disagrees with the 3D intersection")
    for buffer in state.buffers:
        print(f"  outline r={buffer.layer.radius:.2f} opacity={buffer.layer.opacity:.1f}: {buffer.segment_count} segments")


def _cmd_resolve(args: argparse.Namespace) -> int:
    session = _session(args)
    now = parse_datetime(args.at) if args.at else None
    state = session.select_geo(GeoPoint(lat=args.lat, lon=args.lon), now=now)
    _print_selection(state, args.json)
    return 0


def _cmd_pick(args: argparse.Namespace) -> int:
    session = _session(args)
    now = parse_datetime(args.at) if args.at else None
    uv = (args.u, args.v) if args.u is not None and args.v is not None else None
    hit = Intersection(point=CartesianPoint(args.x, args.y, args.z), uv=uv)
    try:
        state = session.select(hit, now=now, strict=True)
    except GlobePickError as exc:
        print(f"error: {exc.message} ({exc.code})")
        return 2
    _print_selection(state, args.json)
    return 0


def _cmd_outline(args: argparse.Namespace) -> int:
    session = _session(args)
    feature = session.index.get(args.name)
    if feature is None:
        print(f"error: unknown country '{args.name}'")
        return 1
    buffers = session.outline_builder.build(feature.geometry)
    if args.json:
        print(json.dumps([OutlineBufferOut.from_buffer(b).model_dump(mode="json") for b in buffers], indent=2))
        return 0
    print(f"{feature.name}: {len(buffers)} layer(s)")
    for buffer in buffers:
        print(f"  r={buffer.layer.radius:.2f} color={buffer.layer.color}: {buffer.segment_count} segments")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the GlobePick CLI."""
    parser = argparse.ArgumentParser(prog="globepick")
    parser.add_argument("--source", type=str, default=None, help="GeoJSON path or URL (default: from config)")
    parser.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    sub = parser.add_subparsers(dest="command", required=True)

    res = sub.add_parser("resolve", help="Resolve a latitude/longitude to a country.")
    res.add_argument("--lat", required=True, type=float)
    res.add_argument("--lon", required=True, type=float)
    res.add_argument("--at", type=str, default=None, help="ISO datetime for the local time estimate")
    res.set_defaults(func=_cmd_resolve)

    pick = sub.add_parser("pick", help="Resolve a 3D intersection point on the globe.")
    pick.add_argument("--x", required=True, type=float)
    pick.add_argument("--y", required=True, type=float)
    pick.add_argument("--z", required=True, type=float)
    pick.add_argument("--u", type=float, default=None, help="Texture u (optional cross-check)")
    pick.add_argument("--v", type=float, default=None, help="Texture v (optional cross-check)")
    pick.add_argument("--at", type=str, default=None, help="ISO datetime for the local time estimate")
    pick.set_defaults(func=_cmd_pick)

    out = sub.add_parser("outline", help="Print outline buffers for a country.")
    out.add_argument("name")
    out.set_defaults(func=_cmd_outline)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m globepick.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
