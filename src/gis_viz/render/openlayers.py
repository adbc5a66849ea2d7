"""
OpenLayers renderer: describe a row as a map feature (geometry type + world
coordinates + style) instead of drawing it. LayerFeature.to_script() gives the
JavaScript snippet a map page evaluates against its `vectorSource`.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Sequence

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
from gis_viz.render.style import OPENLAYERS_DEFAULTS, RenderStyle, check_color

WEB_MERCATOR = 3857
DEFAULT_SRID = 4326

_OL_TYPES = {
    "POINT": "Point",
    "LINESTRING": "LineString",
    "POLYGON": "Polygon",
    "MULTIPOINT": "MultiPoint",
    "MULTILINESTRING": "MultiLineString",
    "MULTIPOLYGON": "MultiPolygon",
    "GEOMETRYCOLLECTION": "GeometryCollection",
}


def _coords(ring: Ring) -> list[list[float]]:
    return [[p.x, p.y] for p in ring]


def ol_coordinates(geom: Geometry) -> Any:
    """Nested coordinate arrays in OpenLayers layout; a list of members for collections."""
    if isinstance(geom, PointGeometry):
        return [] if geom.point is None else [geom.point.x, geom.point.y]
    if isinstance(geom, (LineString, MultiPoint)):
        return _coords(geom.points)
    if isinstance(geom, Polygon):
        return [_coords(r) for r in geom.rings]
    if isinstance(geom, MultiLineString):
        return [_coords(line) for line in geom.lines]
    if isinstance(geom, MultiPolygon):
        return [[_coords(r) for r in p.rings] for p in geom.polygons]
    if isinstance(geom, GeometryCollection):
        return [ol_coordinates(g) for g in geom.geometries]
    raise TypeError(f"Not a geometry: {type(geom).__name__}")


@dataclass(frozen=True)
class OlGeometry:
    geometry_type: str
    coordinates: Any
    members: tuple["OlGeometry", ...] = ()

    @classmethod
    def from_geometry(cls, geom: Geometry) -> "OlGeometry":
        if isinstance(geom, GeometryCollection):
            return cls(
                _OL_TYPES[geom.geom_type],
                None,
                tuple(cls.from_geometry(g) for g in geom.geometries),
            )
        return cls(_OL_TYPES[geom.geom_type], ol_coordinates(geom))

    def to_script(self) -> str:
        if self.geometry_type == "GeometryCollection":
            inner = ",".join(m.to_script() for m in self.members)
            return f"new ol.geom.GeometryCollection([{inner}])"
        return f"new ol.geom.{self.geometry_type}({json.dumps(self.coordinates)})"


@dataclass(frozen=True)
class LayerFeature:
    """
    geometry: type tag and world coordinates
    style:    {'fill': {...}, 'stroke': {...}, 'image': {...}?, 'text': {...}?}
              'text' is present only for labelled rows
    srid:     source spatial reference of the coordinates
    """
    geometry: OlGeometry
    style: dict[str, Any] = field(default_factory=dict)
    srid: int = 0

    def geometry_script(self) -> str:
        script = self.geometry.to_script()
        srid = self.srid or DEFAULT_SRID
        if srid != WEB_MERCATOR:
            script += f".transform('EPSG:{srid}', 'EPSG:{WEB_MERCATOR}')"
        return script

    def style_script(self) -> str:
        parts = []
        if "fill" in self.style:
            parts.append("fill: new ol.style.Fill(" + json.dumps(self.style["fill"]) + ")")
        if "stroke" in self.style:
            parts.append("stroke: new ol.style.Stroke(" + json.dumps(self.style["stroke"]) + ")")
        if "image" in self.style:
            image = self.style["image"]
            parts.append(
                "image: new ol.style.Circle({"
                + "fill: new ol.style.Fill(" + json.dumps(image["fill"]) + "),"
                + "stroke: new ol.style.Stroke(" + json.dumps(image["stroke"]) + "),"
                + "radius: " + json.dumps(image["radius"])
                + "})"
            )
        if "text" in self.style:
            parts.append("text: new ol.style.Text(" + json.dumps(self.style["text"]) + ")")
        return "new ol.style.Style({" + ",".join(parts) + "})"

    def to_script(self) -> str:
        return (
            "var feature = new ol.Feature(" + self.geometry_script() + ");"
            + "feature.setStyle(" + self.style_script() + ");"
            + "vectorSource.addFeature(feature);"
        )


def _has_kind(geom: Geometry, kinds: tuple[type, ...]) -> bool:
    if isinstance(geom, GeometryCollection):
        return any(_has_kind(g, kinds) for g in geom.geometries)
    return isinstance(geom, kinds)


def feature_style(geom: Geometry, color: Sequence[int], st: RenderStyle, label: str) -> dict[str, Any]:
    """
    Style dict for one feature. An ol.style.Style has a single stroke, so when a
    collection holds both polygons and lines the line stroke (row color,
    line_width) is used for every member; polygons still show through their fill.
    """
    rgb = list(check_color(color)[:3])
    stroke_rgb = list(check_color(st.stroke_color)[:3])
    style: dict[str, Any] = {}
    if _has_kind(geom, (Polygon, MultiPolygon)):
        style["fill"] = {"color": rgb + [st.opacity]}
        style["stroke"] = {"color": stroke_rgb, "width": st.stroke_width}
    if _has_kind(geom, (LineString, MultiLineString)):
        # replaces the polygon outline in mixed collections
        style["stroke"] = {"color": rgb, "width": st.line_width}
    if _has_kind(geom, (PointGeometry, MultiPoint)):
        style["image"] = {
            "fill": {"color": "white"},
            "stroke": {"color": rgb, "width": st.line_width},
            "radius": st.point_radius,
        }
    if label:
        style["text"] = {"text": label}
    return style


def render_openlayers(
    wkt: str,
    *,
    srid: int = 0,
    label: str = "",
    color: Sequence[int] | None = None,
    style: RenderStyle | None = None,
) -> LayerFeature:
    """Describe one row for client-side rendering. Coordinates stay in world space."""
    st = (style or RenderStyle()).resolve(OPENLAYERS_DEFAULTS)
    geom = parse_wkt(wkt)
    text = label or st.label
    return LayerFeature(
        geometry=OlGeometry.from_geometry(geom),
        style=feature_style(geom, color if color is not None else st.fill_color, st, text),
        srid=srid,
    )
