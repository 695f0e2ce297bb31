import logging
import math

import pytest

from globepick.geometry.outline import LineSegmentBuffer, OutlineBuilder, OutlineLayer
from globepick.geometry.shapes import CountryFeature, MultiPolygon, Polygon
from globepick.index.countries import CountryIndex
from globepick.pick.surface import Intersection, SurfacePick
from helpers import square

LAYERS = [
    OutlineLayer(radius=5.08, opacity=0.4),
    OutlineLayer(radius=5.10, opacity=1.0),
    OutlineLayer(radius=5.12, opacity=0.4),
]


def test_one_buffer_per_layer(transform, squareland):
    buffers = OutlineBuilder(transform, LAYERS).build(squareland.geometry)
    assert [b.layer for b in buffers] == LAYERS
    for buffer in buffers:
        assert buffer.segment_count == 4
        assert len(buffer.positions) == 4 * 6


def test_vertices_sit_on_the_layer_radius(transform, squareland):
    for buffer in OutlineBuilder(transform, LAYERS).build(squareland.geometry):
        for vertex in buffer.vertices():
            assert vertex.norm() == pytest.approx(buffer.layer.radius)


def test_closing_duplicate_vertex_adds_no_segment(transform):
    closed = Polygon(rings=((*square(0, 0, 10), (0, 0)),))
    buffers = OutlineBuilder(transform, LAYERS).build(closed)
    assert all(b.segment_count == 4 for b in buffers)


def test_multipolygon_rings_share_one_buffer_per_layer(transform, twin_isles):
    buffers = OutlineBuilder(transform, LAYERS).build(twin_isles.geometry)
    assert len(buffers) == len(LAYERS)
    assert all(b.segment_count == 8 for b in buffers)


def test_holes_are_not_outlined(transform):
    with_hole = Polygon(rings=(square(0, 0, 10), square(4, 4, 2)))
    buffers = OutlineBuilder(transform, LAYERS).build(with_hole)
    assert all(b.segment_count == 4 for b in buffers)


def test_non_finite_vertices_are_skipped(transform, caplog):
    ring = ((0, 0), (10, 0), (math.nan, 5), (10, 10), (0, 10))
    with caplog.at_level(logging.WARNING, logger="globepick.geometry.outline"):
        buffers = OutlineBuilder(transform, LAYERS).build(Polygon(rings=(ring,)))
    assert "Skipping 2 outline segment(s) with non-finite coordinates (MALFORMED_GEOMETRY)" in caplog.text
    assert all(b.segment_count == 3 for b in buffers)
    assert all(math.isfinite(v) for b in buffers for v in b.positions)


def test_empty_geometry_builds_nothing(transform):
    builder = OutlineBuilder(transform, LAYERS)
    assert builder.build(None) == []
    assert builder.build(Polygon()) == []
    assert builder.build(MultiPolygon()) == []
    assert OutlineBuilder(transform).build(Polygon(rings=(square(0, 0, 1),))) == []


def test_short_ring_is_logged_and_skipped(transform, caplog):
    geometry = MultiPolygon(
        polygons=(Polygon(rings=(((0, 0), (1, 1)),)), Polygon(rings=(square(0, 0, 10),)))
    )
    with caplog.at_level(logging.WARNING, logger="globepick.geometry.outline"):
        buffers = OutlineBuilder(transform, LAYERS).build(geometry)
    assert all(b.segment_count == 4 for b in buffers)
    assert "MALFORMED_GEOMETRY" in caplog.text


def test_layers_argument_overrides_builder_defaults(transform, squareland):
    builder = OutlineBuilder(transform, LAYERS)
    buffers = builder.build(squareland.geometry, [OutlineLayer(radius=6.0, color="#ff0000")])
    assert len(buffers) == 1
    assert buffers[0].layer.color == "#ff0000"


def test_outline_aligns_with_pick_at_a_border_vertex(transform, squareland):
    # Click exactly on the (lon=10, lat=10) corner of Squareland.
    picker = SurfacePick(transform)
    pick = picker.pick(Intersection(point=transform.to_cartesian(10, 10)))
    assert pick.geo.lat == pytest.approx(10)
    assert pick.geo.lon == pytest.approx(10)

    surface_layer = OutlineLayer(radius=transform.radius)
    buffers = OutlineBuilder(transform, [surface_layer, *LAYERS]).build(squareland.geometry)

    nearest = min(v.distance_to(pick.surface_point) for v in buffers[0].vertices())
    assert nearest < 1e-9

    # Raised layers lie on the same ray from the centre.
    for buffer in buffers[1:]:
        scale = transform.radius / buffer.layer.radius
        nearest = min(v.scaled(scale).distance_to(pick.surface_point) for v in buffer.vertices())
        assert nearest < 1e-9


def test_outline_aligns_with_pick_inside_a_small_country(transform):
    tiny = Polygon(rings=(square(-82.501, 27.599, 0.002),))
    index = CountryIndex()
    index.load([CountryFeature(name="Dot", geometry=tiny)])
    pick = SurfacePick(transform).pick(Intersection(point=transform.to_cartesian(27.6, -82.5)))
    assert index.lookup(pick.geo).name == "Dot"

    buffers = OutlineBuilder(transform, [OutlineLayer(radius=transform.radius)]).build(tiny)
    nearest = min(v.distance_to(pick.surface_point) for v in buffers[0].vertices())
    # Half-diagonal of a 0.002 degree square on a radius-5 sphere is ~1.2e-4.
    assert nearest < 2e-4

    # A mirrored longitude (the classic z-sign mistake) lands far away.
    mirrored = transform.to_cartesian(27.6, 82.5)
    assert min(v.distance_to(mirrored) for v in buffers[0].vertices()) > 1.0


def test_dispose_releases_positions():
    buffer = LineSegmentBuffer(layer=OutlineLayer(radius=5.1), positions=[0.0] * 6)
    buffer.dispose()
    assert buffer.disposed is True
    assert buffer.positions == []
    assert buffer.segment_count == 0
    assert list(buffer.vertices()) == []
