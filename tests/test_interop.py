"""Tests for conversion to and from shapely geometries."""
import pytest
from shapely import wkt as shapely_wkt

from gis_viz.data.polygons import parse_wkt
from gis_viz.geometry.interop import from_shapely, to_shapely
from gis_viz.geometry.rings import area

FAMILY = [
    "POINT(1 2)",
    "LINESTRING(0 0,1 1,2 0)",
    "POLYGON((0 0,10 0,10 10,0 10,0 0),(2 2,4 2,4 4,2 4,2 2))",
    "MULTIPOINT(1 2,3 4)",
    "MULTILINESTRING((0 0,1 1),(2 2,3 3,4 4))",
    "MULTIPOLYGON(((0 0,4 0,4 4,0 0)),((5 5,7 5,7 7,5 7,5 5)))",
    "GEOMETRYCOLLECTION(POINT(4 6),LINESTRING(4 6,7 10))",
]


@pytest.mark.parametrize("text", FAMILY)
def test_round_trip(text):
    geom = parse_wkt(text)
    assert from_shapely(to_shapely(geom)) == geom


@pytest.mark.parametrize("text", FAMILY)
def test_same_shape_as_shapely_reader(text):
    assert to_shapely(parse_wkt(text)).wkt == shapely_wkt.loads(text).wkt


def test_shapely_output_parses():
    # shapely writes "POLYGON ((0 0, 10 0, ...), (...))"
    shape = shapely_wkt.loads(FAMILY[2])
    assert parse_wkt(shape.wkt) == parse_wkt(FAMILY[2])


def test_area_matches_shapely():
    shape = shapely_wkt.loads("POLYGON((0 0,0 10,10 10,10 0,0 0))")
    poly = from_shapely(shape)
    assert abs(area(poly.exterior)) == pytest.approx(shape.area)


def test_empty():
    assert from_shapely(to_shapely(parse_wkt("POINT EMPTY"))).is_empty
    assert from_shapely(to_shapely(parse_wkt("POLYGON EMPTY"))).is_empty


@pytest.mark.parametrize("text_z,text", [
    ("POINT Z (1 2 3)", "POINT(1 2)"),
    ("LINESTRING Z (0 0 5, 1 1 6)", "LINESTRING(0 0,1 1)"),
    (
        "POLYGON Z ((0 0 1, 10 0 1, 10 10 1, 0 0 1), (2 1 0, 3 1 0, 3 2 0, 2 1 0))",
        "POLYGON((0 0,10 0,10 10,0 0),(2 1,3 1,3 2,2 1))",
    ),
    ("MULTIPOLYGON Z (((0 0 1, 1 0 1, 1 1 1, 0 0 1)))", "MULTIPOLYGON(((0 0,1 0,1 1,0 0)))"),
])
def test_z_dropped(text_z, text):
    assert from_shapely(shapely_wkt.loads(text_z)) == parse_wkt(text)
