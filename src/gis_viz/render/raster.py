"""
Raster renderer: draw one WKT row onto a RasterCanvas (y axis points down).
"""
from __future__ import annotations

from typing import Sequence

from gis_viz.data.polygons import parse_wkt
from gis_viz.data.rasterize import RasterCanvas
from gis_viz.geometry.scaling import ScaleBounds, Viewport
from gis_viz.render.paths import LINE, POINT, label_anchor, parts_of, scale_parts
from gis_viz.render.style import RASTER_DEFAULTS, RenderStyle


def render_raster(
    wkt: str,
    canvas: RasterCanvas,
    bounds: ScaleBounds,
    *,
    label: str = "",
    color: Sequence[int] | None = None,
    style: RenderStyle | None = None,
    viewport: Viewport | None = None,
    keep_aspect: bool = False,
) -> RasterCanvas:
    """
    Parse wkt, scale it with the shared bounds and draw it on canvas.

    Polygons are filled with all rings in one call (holes stay empty) and each
    ring is outlined in stroke_color when stroke_width > 0. Lines are stroked,
    points become filled dots. A non-empty label is drawn once, at the
    second scaled point of the first ring or line.
    """
    st = (style or RenderStyle()).resolve(RASTER_DEFAULTS)
    fill = canvas.allocate_color(*(color if color is not None else st.fill_color)[:3])
    stroke = canvas.allocate_color(*st.stroke_color[:3])
    text = label or st.label

    parts = scale_parts(
        parts_of(parse_wkt(wkt)),
        bounds,
        viewport or canvas.viewport,
        invert_y=True,
        keep_aspect=keep_aspect,
    )
    for part in parts:
        if part.kind == POINT:
            canvas.draw_point(part.paths[0][0], fill, radius=int(st.point_radius))
        elif part.kind == LINE:
            canvas.draw_polyline(part.paths[0], fill, thickness=int(st.line_width))
        else:
            canvas.draw_filled_polygon(part.paths, fill, opacity=st.opacity)
            if st.stroke_width > 0:
                for ring in part.paths:
                    canvas.draw_polyline(ring, stroke, thickness=int(round(st.stroke_width)), closed=True)

    if text:
        anchor = label_anchor(parts)
        if anchor is not None:
            canvas.draw_text(anchor[0], anchor[1], text, stroke, scale=st.font_size)
    return canvas
