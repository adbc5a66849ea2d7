"""
WKT parsing: lexical extraction of rings and points from spatial literals.

Extraction is delimiter splitting only (no grammar validation beyond balanced
parentheses). Bad numeric tokens raise MalformedGeometryError instead of turning into 0.
"""
from __future__ import annotations

import math
import re

from gis_viz.geometry.shapes import (
    GEOMETRY_TYPES,
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    PointGeometry,
    Polygon,
    Ring,
)

# "),(" with optional whitespace, as written by most WKT producers
_RING_SEP = re.compile(r"\)\s*,\s*\(")
_TAGGED = re.compile(r"^\s*([A-Za-z]+)\s*(.*?)\s*$", re.S)
_EWKT = re.compile(r"^\s*SRID\s*=\s*(\d+)\s*;(.*)$", re.I | re.S)
_QUOTED = re.compile(
    r"^\s*(?:[A-Za-z_]+\s*\()?\s*'([^']*)'\s*(?:,\s*(\d+))?\s*\)?\s*$", re.S
)


class MalformedGeometryError(ValueError):
    """WKT text that cannot be split into numeric coordinates."""


def _clip(text: str, n: int = 60) -> str:
    return text if len(text) <= n else text[: n - 3] + "..."


def parse_point(text: str) -> Point:
    """Parse 'x y' into a Point."""
    tokens = text.split()
    if len(tokens) != 2:
        raise MalformedGeometryError(f"Expected 2 coordinates, got {len(tokens)} in {_clip(text)!r}")
    try:
        x, y = float(tokens[0]), float(tokens[1])
    except ValueError:
        raise MalformedGeometryError(f"Non-numeric coordinate in {_clip(text)!r}") from None
    if not (math.isfinite(x) and math.isfinite(y)):
        raise MalformedGeometryError(f"Non-finite coordinate in {_clip(text)!r}")
    return Point(x, y)


def extract_ring(ring_text: str) -> Ring:
    """Split one ring body 'x y,x y,...' into points. Empty text gives an empty ring."""
    if not ring_text.strip():
        return ()
    return tuple(parse_point(p) for p in ring_text.split(","))


def _body(wkt: str) -> str:
    """Text between the first '(' and the final ')'."""
    s = wkt.strip()
    start = s.find("(")
    if start < 0 or not s.endswith(")"):
        raise MalformedGeometryError(f"Missing parentheses in {_clip(wkt)!r}")
    return s[start + 1 : -1].strip()


def _strip_parens(text: str) -> str:
    s = text.strip()
    if not (s.startswith("(") and s.endswith(")")):
        raise MalformedGeometryError(f"Expected parenthesized group, got {_clip(text)!r}")
    return s[1:-1].strip()


def _check_balanced(text: str) -> None:
    depth = 0
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                break
    if depth != 0:
        raise MalformedGeometryError(f"Unbalanced parentheses in {_clip(text)!r}")


def split_top_level(body: str) -> list[str]:
    """Split on commas that are not nested inside parentheses."""
    parts: list[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(body):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(body[start:i].strip())
            start = i + 1
    tail = body[start:].strip()
    if tail or parts:
        parts.append(tail)
    return parts


def _split_rings(rings_text: str) -> list[str]:
    """'(a),(b)' -> ['a', 'b']"""
    if not rings_text.strip():
        return []
    inner = _strip_parens(rings_text)
    if not inner:
        return []
    return _RING_SEP.split(inner)


# ---------------------------------------------------------------------------
# Polygon extraction (caller already knows the literal is a POLYGON)
# ---------------------------------------------------------------------------

def extract_rings(wkt: str) -> list[Ring]:
    """
    Nested mode: 'POLYGON((...),(...))' -> [outer ring, hole, ...].
    The type keyword is not checked. Degenerate rings are returned as given.
    """
    return [extract_ring(r) for r in _split_rings(_body(wkt))]


def extract_points(wkt: str) -> list[Point]:
    """Flat mode: every ring's points concatenated in ring order."""
    points: list[Point] = []
    for ring in extract_rings(wkt):
        points.extend(ring)
    return points


# ---------------------------------------------------------------------------
# Full geometry family
# ---------------------------------------------------------------------------

def _parse_multipoint(body: str) -> MultiPoint:
    points = []
    for part in split_top_level(body):
        if part.startswith("("):
            part = _strip_parens(part)
        points.append(parse_point(part))
    return MultiPoint(tuple(points))


def _parse_polygon_body(body: str) -> Polygon:
    # body is '(ring),(ring)' without the outer POLYGON parentheses
    return Polygon(tuple(extract_ring(r) for r in _split_rings(body)))


def _parse_tagged(geom_type: str, rest: str) -> Geometry:
    if geom_type not in GEOMETRY_TYPES:
        raise MalformedGeometryError(f"Unknown geometry type {geom_type!r}")
    if rest.upper() == "EMPTY":
        if geom_type == "POINT":
            return PointGeometry(None)
        return GEOMETRY_TYPES[geom_type](())
    if not rest.startswith("("):
        raise MalformedGeometryError(f"Expected '(' after {geom_type}, got {_clip(rest)!r}")
    body = _body(rest)

    if geom_type == "POINT":
        return PointGeometry(parse_point(body))
    if geom_type == "LINESTRING":
        return LineString(extract_ring(body))
    if geom_type == "POLYGON":
        return _parse_polygon_body(body)
    if geom_type == "MULTIPOINT":
        return _parse_multipoint(body)
    if geom_type == "MULTILINESTRING":
        return MultiLineString(tuple(extract_ring(_strip_parens(p)) for p in split_top_level(body)))
    if geom_type == "MULTIPOLYGON":
        return MultiPolygon(tuple(_parse_polygon_body(_strip_parens(p)) for p in split_top_level(body)))
    # GEOMETRYCOLLECTION
    return GeometryCollection(tuple(parse_wkt(p) for p in split_top_level(body)))


def parse_wkt(wkt: str) -> Geometry:
    """
    Parse any WKT literal of the supported family into a geometry value.
    Raises MalformedGeometryError on unknown types, unbalanced parentheses or bad numbers.
    """
    if not wkt or not wkt.strip():
        raise MalformedGeometryError("Empty WKT string")
    m = _TAGGED.match(wkt)
    if m is None:
        raise MalformedGeometryError(f"No geometry type in {_clip(wkt)!r}")
    _check_balanced(wkt)
    return _parse_tagged(m.group(1).upper(), m.group(2))


def geometry_type(wkt: str) -> str:
    """Leading type keyword, upper-cased ('' if none)."""
    m = _TAGGED.match(wkt or "")
    return m.group(1).upper() if m else ""


def split_value(value: str) -> tuple[str, int]:
    """
    Split a spatial column value into (wkt, srid).

    Accepts "SRID=4326;POINT(1 2)", "'POINT(1 2)',4326",
    "ST_GeomFromText('POINT(1 2)',4326)" and plain WKT (srid 0).
    """
    s = (value or "").strip()
    m = _EWKT.match(s)
    if m:
        return m.group(2).strip(), int(m.group(1))
    m = _QUOTED.match(s)
    if m:
        return m.group(1).strip(), int(m.group(2) or 0)
    return s, 0
