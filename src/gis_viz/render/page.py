"""
Page renderer: draw WKT rows onto a matplotlib page measured in points,
origin at the top-left, then save it as PDF (or any format matplotlib writes).
"""
from __future__ import annotations

from pathlib import Path
from typing import Sequence

from matplotlib.figure import Figure
from matplotlib.patches import Circle, PathPatch
from matplotlib.path import Path as MplPath

from gis_viz.data.polygons import parse_wkt
from gis_viz.geometry.rings import area
from gis_viz.geometry.scaling import ScaleBounds, Viewport
from gis_viz.geometry.shapes import open_ring
from gis_viz.render.paths import LINE, POINT, label_anchor, parts_of, scale_parts
from gis_viz.render.style import PAGE_DEFAULTS, RenderStyle, check_color

POINTS_PER_INCH = 72.0


def _rgb(color: Sequence[int]) -> tuple[float, float, float]:
    r, g, b = check_color(color)[:3]
    return r / 255.0, g / 255.0, b / 255.0


class PageDocument:
    """
    Single page of width x height points. Shapes are matplotlib patches on one
    axes spanning the whole page with the y axis flipped.
    """

    def __init__(self, width: float = 595.0, height: float = 842.0):
        if width <= 0 or height <= 0:
            raise ValueError(f"Page size must be positive, got {(width, height)}")
        self.width = float(width)
        self.height = float(height)
        self.figure = Figure(figsize=(self.width / POINTS_PER_INCH, self.height / POINTS_PER_INCH))
        self.axes = self.figure.add_axes((0, 0, 1, 1))
        self.axes.set_xlim(0, self.width)
        self.axes.set_ylim(self.height, 0)
        self.axes.set_axis_off()
        self.cursor = (0.0, 0.0)

    @property
    def viewport(self) -> Viewport:
        return Viewport(self.width, self.height)

    def draw_polygon(
        self,
        rings: Sequence[Sequence[Sequence[float]]],
        fill_color: Sequence[int],
        stroke_color: Sequence[int] | None = None,
        stroke_width: float = 0.0,
        opacity: float = 1.0,
    ) -> PathPatch | None:
        """
        All rings go into one compound path. matplotlib fills with the nonzero
        rule, so every ring after the first is wound opposite to the first one;
        the result matches an even-odd fill and holes stay empty.
        """
        vertices: list[tuple[float, float]] = []
        codes: list[int] = []
        outer_sign = 0.0
        for ring in rings:
            pts = open_ring(tuple((float(x), float(y)) for x, y in ring))
            if len(pts) < 3:
                continue
            signed = area(pts)
            if not outer_sign:
                outer_sign = signed
            elif signed * outer_sign > 0:
                pts = pts[::-1]
            vertices.extend(pts)
            vertices.append(pts[0])
            codes.append(MplPath.MOVETO)
            codes.extend([MplPath.LINETO] * (len(pts) - 1))
            codes.append(MplPath.CLOSEPOLY)
        if not vertices:
            return None
        patch = PathPatch(
            MplPath(vertices, codes),
            facecolor=_rgb(fill_color),
            edgecolor=_rgb(stroke_color) if stroke_color is not None else "none",
            linewidth=stroke_width,
            alpha=opacity,
        )
        self.axes.add_patch(patch)
        return patch

    def draw_line(self, path: Sequence[Sequence[float]], color: Sequence[int], width: float = 1.0) -> None:
        if len(path) < 2:
            return
        xs = [p[0] for p in path]
        ys = [p[1] for p in path]
        self.axes.plot(xs, ys, color=_rgb(color), linewidth=width)

    def draw_point(self, point: Sequence[float], color: Sequence[int], radius: float = 3.0) -> None:
        self.axes.add_patch(Circle((point[0], point[1]), radius, facecolor=_rgb(color), edgecolor="none"))

    def set_cursor(self, x: float, y: float) -> None:
        self.cursor = (float(x), float(y))

    def draw_text(self, text: str, font_size: float = 5.0, color: Sequence[int] = (0, 0, 0)) -> None:
        """Write text with its top-left corner at the cursor."""
        x, y = self.cursor
        self.axes.text(x, y, text, fontsize=font_size, color=_rgb(color), ha="left", va="top")

    def save(self, out_path: str | Path, fmt: str | None = None) -> None:
        Path(out_path).parent.mkdir(parents=True, exist_ok=True)
        self.figure.savefig(out_path, format=fmt)


def render_page(
    wkt: str,
    page: PageDocument,
    bounds: ScaleBounds,
    *,
    label: str = "",
    color: Sequence[int] | None = None,
    style: RenderStyle | None = None,
    viewport: Viewport | None = None,
    keep_aspect: bool = False,
) -> PageDocument:
    """Draw one row on the page; the label goes at the second scaled point of the first ring."""
    st = (style or RenderStyle()).resolve(PAGE_DEFAULTS)
    fill = color if color is not None else st.fill_color
    text = label or st.label

    parts = scale_parts(
        parts_of(parse_wkt(wkt)),
        bounds,
        viewport or page.viewport,
        invert_y=True,
        keep_aspect=keep_aspect,
    )
    for part in parts:
        if part.kind == POINT:
            page.draw_point(part.paths[0][0], fill, radius=st.point_radius)
        elif part.kind == LINE:
            page.draw_line(part.paths[0], fill, width=st.line_width)
        else:
            page.draw_polygon(
                part.paths, fill,
                stroke_color=st.stroke_color, stroke_width=st.stroke_width, opacity=st.opacity,
            )

    if text:
        anchor = label_anchor(parts)
        if anchor is not None:
            page.set_cursor(anchor[0], anchor[1])
            page.draw_text(text, font_size=st.font_size, color=st.stroke_color)
    return page
