"""
Conversion between gis_viz geometry values and Shapely geometries.
"""
from __future__ import annotations

from shapely import geometry as sg
from shapely.geometry.base import BaseGeometry

from gis_viz.geometry.shapes import (
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    PointGeometry,
    Polygon,
    as_ring,
)


def _shapely_polygon(poly: Polygon) -> sg.Polygon:
    if poly.is_empty:
        return sg.Polygon()
    return sg.Polygon(poly.exterior, list(poly.holes))


def to_shapely(geom: Geometry) -> BaseGeometry:
    if isinstance(geom, PointGeometry):
        return sg.Point() if geom.point is None else sg.Point(geom.point)
    if isinstance(geom, LineString):
        return sg.LineString(geom.points)
    if isinstance(geom, Polygon):
        return _shapely_polygon(geom)
    if isinstance(geom, MultiPoint):
        return sg.MultiPoint(list(geom.points))
    if isinstance(geom, MultiLineString):
        return sg.MultiLineString([list(line) for line in geom.lines])
    if isinstance(geom, MultiPolygon):
        return sg.MultiPolygon([_shapely_polygon(p) for p in geom.polygons])
    if isinstance(geom, GeometryCollection):
        return sg.GeometryCollection([to_shapely(g) for g in geom.geometries])
    raise TypeError(f"Not a geometry: {type(geom).__name__}")


def _from_shapely_polygon(poly: sg.Polygon) -> Polygon:
    if poly.is_empty:
        return Polygon(())
    rings = [as_ring(c[:2] for c in poly.exterior.coords)]
    rings.extend(as_ring(c[:2] for c in r.coords) for r in poly.interiors)
    return Polygon(tuple(rings))


def from_shapely(shape: BaseGeometry) -> Geometry:
    """Inverse of to_shapely. Z values are dropped."""
    kind = shape.geom_type
    if kind == "Point":
        return PointGeometry(None if shape.is_empty else as_ring([shape.coords[0][:2]])[0])
    if kind in ("LineString", "LinearRing"):
        return LineString(as_ring(c[:2] for c in shape.coords))
    if kind == "Polygon":
        return _from_shapely_polygon(shape)
    if kind == "MultiPoint":
        return MultiPoint(as_ring((p.x, p.y) for p in shape.geoms))
    if kind == "MultiLineString":
        return MultiLineString(tuple(as_ring(c[:2] for c in line.coords) for line in shape.geoms))
    if kind == "MultiPolygon":
        return MultiPolygon(tuple(_from_shapely_polygon(p) for p in shape.geoms))
    if kind == "GeometryCollection":
        return GeometryCollection(tuple(from_shapely(g) for g in shape.geoms))
    raise TypeError(f"Unsupported shapely geometry: {kind}")
