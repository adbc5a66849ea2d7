"""
SVG renderer: one WKT row -> SVG element markup (y axis not inverted).

All polygon rings of a row become subpaths of a single <path> with
fill-rule="evenodd", so holes render from plain concatenation.
"""
from __future__ import annotations

import hashlib
from typing import Sequence
from xml.sax.saxutils import escape

from gis_viz.data.polygons import parse_wkt
from gis_viz.geometry.scaling import ScaleBounds, Viewport
from gis_viz.geometry.shapes import Ring, open_ring
from gis_viz.render.paths import LINE, POINT, POLYGON, label_anchor, parts_of, scale_parts
from gis_viz.render.style import SVG_DEFAULTS, RenderStyle, to_hex

SVG_NS = "http://www.w3.org/2000/svg"


def fmt_num(v: float) -> str:
    """Compact decimal: 10.0 -> '10', 1.23456789 -> '1.234568'."""
    s = f"{v:.6f}".rstrip("0").rstrip(".")
    return "0" if s in ("-0", "") else s


def _attrs(options: dict[str, object]) -> str:
    return "".join(f' {k}="{escape(str(v), {chr(34): "&quot;"})}"' for k, v in options.items())


def ring_path(ring: Ring) -> str:
    """' M x, y L x, y ... Z ' for one ring; a repeated closing point is not emitted."""
    pts = open_ring(ring)
    if not pts:
        return ""
    d = f" M {fmt_num(pts[0][0])}, {fmt_num(pts[0][1])}"
    for x, y in pts[1:]:
        d += f" L {fmt_num(x)}, {fmt_num(y)}"
    return d + " Z "


def element_id(label: str, wkt: str) -> str:
    """Stable id: label followed by a short digest of the geometry text."""
    return label + hashlib.sha1(wkt.encode("utf-8")).hexdigest()[:8]


def render_svg(
    wkt: str,
    bounds: ScaleBounds,
    viewport: Viewport,
    *,
    label: str = "",
    color: Sequence[int] | None = None,
    style: RenderStyle | None = None,
    keep_aspect: bool = False,
    elem_id: str | None = None,
) -> str:
    """Markup for one row: <path>/<polyline>/<circle> elements plus an optional <text>."""
    st = (style or RenderStyle()).resolve(SVG_DEFAULTS)
    fill = to_hex(color if color is not None else st.fill_color)
    stroke = to_hex(st.stroke_color)
    text = label or st.label
    base_id = elem_id if elem_id is not None else element_id(text, wkt)

    parts = scale_parts(parts_of(parse_wkt(wkt)), bounds, viewport, invert_y=False, keep_aspect=keep_aspect)

    out: list[str] = []
    d = "".join(ring_path(ring) for part in parts if part.kind == POLYGON for ring in part.paths)
    if d:
        out.append('<path d="' + d + '"' + _attrs({
            "name": text,
            "id": base_id,
            "class": "polygon vector",
            "stroke": stroke,
            "stroke-width": st.stroke_width,
            "fill": fill,
            "fill-rule": "evenodd",
            "fill-opacity": st.opacity,
        }) + "/>")
    for part in parts:
        if part.kind == LINE:
            points = " ".join(f"{fmt_num(x)},{fmt_num(y)}" for x, y in part.paths[0])
            out.append('<polyline points="' + points + '"' + _attrs({
                "name": text,
                "id": f"{base_id}-{len(out)}" if out else base_id,
                "class": "linestring vector",
                "fill": "none",
                "stroke": fill,
                "stroke-width": st.line_width,
            }) + "/>")
        elif part.kind == POINT:
            x, y = part.paths[0][0]
            out.append("<circle" + _attrs({
                "cx": fmt_num(x),
                "cy": fmt_num(y),
                "r": st.point_radius,
                "name": text,
                "id": f"{base_id}-{len(out)}" if out else base_id,
                "class": "point vector",
                "fill": "white",
                "stroke": fill,
                "stroke-width": st.line_width,
            }) + "/>")

    if text:
        anchor = label_anchor(parts)
        if anchor is not None:
            out.append(
                f'<text x="{fmt_num(anchor[0])}" y="{fmt_num(anchor[1])}"'
                f' font-size="{st.font_size}" fill="{stroke}">{escape(text)}</text>'
            )
    return "".join(out)


def svg_document(body: str, width: float, height: float) -> str:
    """Wrap row markup in a standalone <svg> element."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<svg xmlns="{SVG_NS}" version="1.1" width="{fmt_num(width)}" height="{fmt_num(height)}"'
        f' viewBox="0 0 {fmt_num(width)} {fmt_num(height)}">'
        f"<g>{body}</g></svg>\n"
    )
