"""
Geometry value types: coordinates, rings and the closed set of WKT geometry variants.

Everything here is immutable. Dispatch over the variant set is done with isinstance
checks in the consumers (parser, scaling, renderers); `GEOMETRY_TYPES` is the full set.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterator, NamedTuple, Union


class Point(NamedTuple):
    """Coordinate pair (x, y)."""
    x: float
    y: float


Ring = tuple[Point, ...]


def as_ring(points) -> Ring:
    """Coerce an iterable of (x, y) pairs into a Ring of float Points."""
    return tuple(Point(float(x), float(y)) for x, y in points)


def open_ring(ring: Ring) -> Ring:
    """Drop the closing duplicate point if the ring repeats its first point at the end."""
    if len(ring) > 1 and ring[0] == ring[-1]:
        return ring[:-1]
    return ring


@dataclass(frozen=True)
class PointGeometry:
    point: Point | None
    geom_type: ClassVar[str] = "POINT"

    @property
    def is_empty(self) -> bool:
        return self.point is None


@dataclass(frozen=True)
class LineString:
    points: Ring
    geom_type: ClassVar[str] = "LINESTRING"

    @property
    def is_empty(self) -> bool:
        return not self.points


@dataclass(frozen=True)
class Polygon:
    """
    rings[0] is the outer boundary, rings[1:] are holes.
    Holes are not checked against the outer ring; malformed input is kept as given.
    """
    rings: tuple[Ring, ...]
    geom_type: ClassVar[str] = "POLYGON"

    @property
    def is_empty(self) -> bool:
        return not self.rings

    @property
    def exterior(self) -> Ring:
        return self.rings[0] if self.rings else ()

    @property
    def holes(self) -> tuple[Ring, ...]:
        return self.rings[1:]


@dataclass(frozen=True)
class MultiPoint:
    points: Ring
    geom_type: ClassVar[str] = "MULTIPOINT"

    @property
    def is_empty(self) -> bool:
        return not self.points


@dataclass(frozen=True)
class MultiLineString:
    lines: tuple[Ring, ...]
    geom_type: ClassVar[str] = "MULTILINESTRING"

    @property
    def is_empty(self) -> bool:
        return not self.lines


@dataclass(frozen=True)
class MultiPolygon:
    polygons: tuple[Polygon, ...]
    geom_type: ClassVar[str] = "MULTIPOLYGON"

    @property
    def is_empty(self) -> bool:
        return not self.polygons


@dataclass(frozen=True)
class GeometryCollection:
    geometries: tuple["Geometry", ...]
    geom_type: ClassVar[str] = "GEOMETRYCOLLECTION"

    @property
    def is_empty(self) -> bool:
        return not self.geometries


Geometry = Union[
    PointGeometry,
    LineString,
    Polygon,
    MultiPoint,
    MultiLineString,
    MultiPolygon,
    GeometryCollection,
]

GEOMETRY_TYPES: dict[str, type] = {
    cls.geom_type: cls
    for cls in (
        PointGeometry,
        LineString,
        Polygon,
        MultiPoint,
        MultiLineString,
        MultiPolygon,
        GeometryCollection,
    )
}


def iter_paths(geom: Geometry) -> Iterator[Ring]:
    """
    Yield every coordinate sequence of a geometry in drawing order:
    a point as a 1-point sequence, each line, each polygon ring (outer first).
    """
    if isinstance(geom, PointGeometry):
        if geom.point is not None:
            yield (geom.point,)
    elif isinstance(geom, LineString):
        if geom.points:
            yield geom.points
    elif isinstance(geom, Polygon):
        yield from geom.rings
    elif isinstance(geom, MultiPoint):
        for p in geom.points:
            yield (p,)
    elif isinstance(geom, MultiLineString):
        yield from geom.lines
    elif isinstance(geom, MultiPolygon):
        for poly in geom.polygons:
            yield from poly.rings
    elif isinstance(geom, GeometryCollection):
        for member in geom.geometries:
            yield from iter_paths(member)
    else:
        raise TypeError(f"Not a geometry: {type(geom).__name__}")
