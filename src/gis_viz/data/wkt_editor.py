"""
WKT <-> coordinate editor data.

Editor data is the nested mapping an interactive coordinate form submits:

    {0: {"gis_type": "POLYGON",
         "POLYGON": {"no_of_lines": 1,
                     0: {"no_of_points": 4,
                         0: {"x": "0", "y": "0"}, 1: {...}, ...}}}}

Keys may be ints or their string form (JSON). Any level may be missing or
partially filled in; blank coordinates become the `empty` placeholder.
"""
from __future__ import annotations

from typing import Any, Callable, Mapping

from gis_viz.data.polygons import parse_wkt
from gis_viz.geometry.shapes import (
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    PointGeometry,
    Polygon,
    Ring,
)

MIN_RING_POINTS = 4
MIN_LINE_POINTS = 2


def _get(data: Any, *keys: Any) -> Any:
    """Walk nested mappings; int keys also match their str form. None if any level is missing."""
    cur = data
    for key in keys:
        if not isinstance(cur, Mapping):
            return None
        if key in cur:
            cur = cur[key]
        elif str(key) in cur:
            cur = cur[str(key)]
        else:
            return None
    return cur


def _count(value: Any, default: int, minimum: int) -> int:
    try:
        n = int(value) if value is not None else default
    except (TypeError, ValueError):
        n = default
    return max(n, minimum)


def _coord(point: Any, axis: str, empty: str) -> str:
    v = _get(point, axis)
    if v is None or str(v).strip() == "":
        return empty
    return str(v)


def _point_text(point: Any, empty: str) -> str:
    return _coord(point, "x", empty) + " " + _coord(point, "y", empty)


def _points_text(container: Any, n: int, empty: str) -> str:
    return ",".join(_point_text(_get(container, j), empty) for j in range(n))


def _rings_text(container: Any, n_rings: int, empty: str) -> str:
    rings = []
    for i in range(n_rings):
        ring = _get(container, i)
        n = _count(_get(ring, "no_of_points"), MIN_RING_POINTS, MIN_RING_POINTS)
        rings.append("(" + _points_text(ring, n, empty) + ")")
    return ",".join(rings)


def generate_point_wkt(gis_data: Any, index: int = 0, empty: str = "") -> str:
    return "POINT(" + _point_text(_get(gis_data, index, "POINT"), empty) + ")"


def generate_linestring_wkt(gis_data: Any, index: int = 0, empty: str = "") -> str:
    data = _get(gis_data, index, "LINESTRING")
    n = _count(_get(data, "no_of_points"), MIN_LINE_POINTS, MIN_LINE_POINTS)
    return "LINESTRING(" + _points_text(data, n, empty) + ")"


def generate_polygon_wkt(gis_data: Any, index: int = 0, empty: str = "") -> str:
    """At least 1 ring and at least 4 points per ring; blanks become `empty`."""
    data = _get(gis_data, index, "POLYGON")
    n_rings = _count(_get(data, "no_of_lines"), 1, 1)
    return "POLYGON(" + _rings_text(data, n_rings, empty) + ")"


def generate_multipoint_wkt(gis_data: Any, index: int = 0, empty: str = "") -> str:
    data = _get(gis_data, index, "MULTIPOINT")
    n = _count(_get(data, "no_of_points"), 1, 1)
    return "MULTIPOINT(" + _points_text(data, n, empty) + ")"


def generate_multilinestring_wkt(gis_data: Any, index: int = 0, empty: str = "") -> str:
    data = _get(gis_data, index, "MULTILINESTRING")
    n_lines = _count(_get(data, "no_of_lines"), 1, 1)
    lines = []
    for i in range(n_lines):
        line = _get(data, i)
        n = _count(_get(line, "no_of_points"), MIN_LINE_POINTS, MIN_LINE_POINTS)
        lines.append("(" + _points_text(line, n, empty) + ")")
    return "MULTILINESTRING(" + ",".join(lines) + ")"


def generate_multipolygon_wkt(gis_data: Any, index: int = 0, empty: str = "") -> str:
    data = _get(gis_data, index, "MULTIPOLYGON")
    n_polygons = _count(_get(data, "no_of_polygons"), 1, 1)
    polygons = []
    for k in range(n_polygons):
        poly = _get(data, k)
        n_rings = _count(_get(poly, "no_of_lines"), 1, 1)
        polygons.append("(" + _rings_text(poly, n_rings, empty) + ")")
    return "MULTIPOLYGON(" + ",".join(polygons) + ")"


_GENERATORS: dict[str, Callable[[Any, int, str], str]] = {
    "POINT": generate_point_wkt,
    "LINESTRING": generate_linestring_wkt,
    "POLYGON": generate_polygon_wkt,
    "MULTIPOINT": generate_multipoint_wkt,
    "MULTILINESTRING": generate_multilinestring_wkt,
    "MULTIPOLYGON": generate_multipolygon_wkt,
}


def _entry_type(entry: Any) -> str:
    gis_type = _get(entry, "gis_type")
    if gis_type:
        return str(gis_type).upper()
    # No explicit tag: use the single geometry key present
    if isinstance(entry, Mapping):
        for key in entry:
            if str(key).upper() in _GENERATORS:
                return str(key).upper()
    return "POLYGON"


def _generate_entry(gis_data: Any, index: int, empty: str) -> str:
    gis_type = _entry_type(_get(gis_data, index))
    if gis_type not in _GENERATORS:
        raise ValueError(f"Unsupported geometry type for editor data: {gis_type!r}")
    return _GENERATORS[gis_type](gis_data, index, empty)


def generate_collection_wkt(gis_data: Any, empty: str = "") -> str:
    """Members are gis_data[0..geom_count-1], each generated by its own type."""
    n = _count(_get(gis_data, "GEOMETRYCOLLECTION", "geom_count"), 1, 1)
    members = [_generate_entry(gis_data, i, empty) for i in range(n)]
    return "GEOMETRYCOLLECTION(" + ",".join(members) + ")"


def generate_wkt(gis_data: Any, index: int = 0, empty: str = "") -> str:
    """WKT for entry `index` of the editor data, or the whole collection for GEOMETRYCOLLECTION."""
    top_type = str(_get(gis_data, "gis_type") or "").upper()
    if top_type == "GEOMETRYCOLLECTION" or _get(gis_data, "GEOMETRYCOLLECTION") is not None:
        return generate_collection_wkt(gis_data, empty)
    return _generate_entry(gis_data, index, empty)


# ---------------------------------------------------------------------------
# WKT -> editor data
# ---------------------------------------------------------------------------

def _points_params(points: Ring) -> dict[Any, Any]:
    params: dict[Any, Any] = {"no_of_points": len(points)}
    for i, p in enumerate(points):
        params[i] = {"x": p.x, "y": p.y}
    return params


def _rings_params(rings: tuple[Ring, ...]) -> dict[Any, Any]:
    params: dict[Any, Any] = {"no_of_lines": len(rings)}
    for i, ring in enumerate(rings):
        params[i] = _points_params(ring)
    return params


def geometry_params(geom: Geometry) -> dict[Any, Any]:
    """Editor parameters for a single (non-collection) geometry."""
    if isinstance(geom, PointGeometry):
        return {} if geom.point is None else {"x": geom.point.x, "y": geom.point.y}
    if isinstance(geom, (LineString, MultiPoint)):
        return _points_params(geom.points)
    if isinstance(geom, Polygon):
        return _rings_params(geom.rings)
    if isinstance(geom, MultiLineString):
        return _rings_params(geom.lines)
    if isinstance(geom, MultiPolygon):
        params: dict[Any, Any] = {"no_of_polygons": len(geom.polygons)}
        for k, poly in enumerate(geom.polygons):
            params[k] = _rings_params(poly.rings)
        return params
    raise TypeError(f"No editor parameters for {type(geom).__name__}")


def coordinate_params(wkt: str) -> dict[Any, Any]:
    """Editor parameters for a single-geometry WKT value."""
    return geometry_params(parse_wkt(wkt))


def editor_data(wkt: str) -> dict[Any, Any]:
    """
    Full editor data for a WKT value; feeding it to generate_wkt() yields a
    literal that parses to the same coordinates.
    """
    geom = parse_wkt(wkt)
    if isinstance(geom, GeometryCollection):
        data: dict[Any, Any] = {
            "gis_type": "GEOMETRYCOLLECTION",
            "GEOMETRYCOLLECTION": {"geom_count": len(geom.geometries)},
        }
        for i, member in enumerate(geom.geometries):
            data[i] = {"gis_type": member.geom_type, member.geom_type: geometry_params(member)}
        return data
    return {0: {"gis_type": geom.geom_type, geom.geom_type: geometry_params(geom)}}
