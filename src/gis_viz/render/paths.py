"""
Break a geometry into drawable parts and map them into device space.
Every renderer goes through here so they agree on ordering and label anchors.
"""
from __future__ import annotations

from dataclasses import dataclass

from gis_viz.geometry.scaling import ScaleBounds, Viewport
from gis_viz.geometry.shapes import (
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

POINT = "point"
LINE = "line"
POLYGON = "polygon"


@dataclass(frozen=True)
class Part:
    """One drawable unit: a point, a line, or a polygon with all of its rings."""
    kind: str
    paths: tuple[Ring, ...]


def parts_of(geom: Geometry) -> list[Part]:
    if isinstance(geom, PointGeometry):
        return [] if geom.point is None else [Part(POINT, ((geom.point,),))]
    if isinstance(geom, LineString):
        return [Part(LINE, (geom.points,))] if geom.points else []
    if isinstance(geom, Polygon):
        return [Part(POLYGON, geom.rings)] if geom.rings else []
    if isinstance(geom, MultiPoint):
        return [Part(POINT, ((p,),)) for p in geom.points]
    if isinstance(geom, MultiLineString):
        return [Part(LINE, (line,)) for line in geom.lines if line]
    if isinstance(geom, MultiPolygon):
        return [Part(POLYGON, p.rings) for p in geom.polygons if p.rings]
    if isinstance(geom, GeometryCollection):
        out: list[Part] = []
        for member in geom.geometries:
            out.extend(parts_of(member))
        return out
    raise TypeError(f"Not a geometry: {type(geom).__name__}")


def scale_parts(
    parts: list[Part],
    bounds: ScaleBounds,
    viewport: Viewport,
    *,
    invert_y: bool,
    keep_aspect: bool = False,
) -> list[Part]:
    return [
        Part(
            part.kind,
            tuple(
                tuple(bounds.to_device(p, viewport, invert_y=invert_y, keep_aspect=keep_aspect) for p in path)
                for path in part.paths
            ),
        )
        for part in parts
    ]


def label_anchor(parts: list[Part]) -> Point | None:
    """Second point of the first path; the only point when the path has one."""
    for part in parts:
        for path in part.paths:
            if len(path) >= 2:
                return path[1]
            if path:
                return path[0]
    return None

