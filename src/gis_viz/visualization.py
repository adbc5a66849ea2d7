"""
Batch visualization: many WKT rows drawn to one canvas with shared scaling.

Rows are parsed once to fold the bounds (outer rings only), the bounds are frozen,
then each output format re-renders every row from its WKT text. A malformed row
is logged and skipped; the rest of the batch still renders.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Sequence

from gis_viz.data.io import write_text
from gis_viz.data.polygons import MalformedGeometryError, parse_wkt, split_value
from gis_viz.data.rasterize import RasterCanvas
from gis_viz.geometry.scaling import ScaleAccumulator, ScaleBounds, Viewport
from gis_viz.render.openlayers import LayerFeature, render_openlayers
from gis_viz.render.page import PageDocument, render_page
from gis_viz.render.raster import render_raster
from gis_viz.render.style import PALETTE, Color, RenderStyle, palette_color, parse_color
from gis_viz.render.svg import render_svg, svg_document

logger = logging.getLogger(__name__)

FORMATS = ("png", "svg", "pdf", "ol")


@dataclass
class VisualizationSettings:
    width: int = 600
    height: int = 450
    padding: float = 10.0
    keep_aspect: bool = False
    srid: int = 0
    wkt_column: str = "wkt"
    label_column: str = "label"
    background: Color = (255, 255, 255)
    palette: list[Color] = field(default_factory=lambda: list(PALETTE))
    style: RenderStyle = field(default_factory=RenderStyle)

    @classmethod
    def from_config(cls, config: dict[str, Any] | None) -> "VisualizationSettings":
        """Build from a config dict (e.g. YAML); unknown keys are ignored."""
        config = config or {}
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {k: v for k, v in config.items() if k in known}
        if "palette" in kwargs:
            kwargs["palette"] = [parse_color(c) for c in kwargs["palette"]]
        if "background" in kwargs:
            kwargs["background"] = parse_color(kwargs["background"])
        if isinstance(kwargs.get("style"), dict):
            style_cfg = dict(kwargs["style"])
            for key in ("fill_color", "stroke_color"):
                if style_cfg.get(key) is not None:
                    style_cfg[key] = parse_color(style_cfg[key])
            kwargs["style"] = RenderStyle(**style_cfg)
        return cls(**kwargs)


@dataclass(frozen=True)
class GisRow:
    index: int
    wkt: str
    label: str = ""
    srid: int = 0
    color: Color | None = None


class Visualization:
    """
    Usage:
        vis = Visualization(rows, VisualizationSettings(width=800, height=600))
        vis.to_svg()            # standalone SVG document
        vis.to_png("out.png")   # RasterCanvas, saved if a path is given
        vis.errors              # [(row_index, message), ...] for skipped rows
    """

    def __init__(
        self,
        rows: Sequence[dict[str, Any]],
        settings: VisualizationSettings | None = None,
    ):
        self.settings = settings or VisualizationSettings()
        self.rows: list[GisRow] = []
        self.errors: list[tuple[int, str]] = []
        self.bounds = self._collect(rows)

    def _collect(self, rows: Sequence[dict[str, Any]]) -> ScaleBounds:
        s = self.settings
        acc = ScaleAccumulator()
        for i, row in enumerate(rows):
            wkt, srid = split_value(str(row.get(s.wkt_column) or ""))
            try:
                geom = parse_wkt(wkt)
                color = parse_color(row["color"]) if row.get("color") else None
            except MalformedGeometryError as e:
                logger.warning("Skipping row %d: %s", i, e)
                self.errors.append((i, str(e)))
                continue
            except ValueError as e:
                logger.warning("Skipping row %d: bad color: %s", i, e)
                self.errors.append((i, str(e)))
                continue
            acc.observe_geometry(geom)
            self.rows.append(GisRow(
                index=i,
                wkt=wkt,
                label=str(row.get(s.label_column) or ""),
                srid=srid or s.srid,
                color=color or palette_color(len(self.rows), s.palette),
            ))
        bounds = acc.freeze()
        if acc.is_empty:
            logger.debug("No coordinates observed; using zero bounds")
        elif bounds.min_x == bounds.max_x or bounds.min_y == bounds.max_y:
            logger.debug("Zero-extent bounds %s; scale factor 1 on that axis", bounds)
        return bounds

    @property
    def viewport(self) -> Viewport:
        s = self.settings
        p = s.padding
        return Viewport(max(s.width - 2 * p, 1), max(s.height - 2 * p, 1), p, p)

    def to_png(self, out_path: str | Path | None = None) -> RasterCanvas:
        s = self.settings
        canvas = RasterCanvas(s.width, s.height, background=s.background)
        for row in self.rows:
            render_raster(
                row.wkt, canvas, self.bounds,
                label=row.label, color=row.color, style=s.style,
                viewport=self.viewport, keep_aspect=s.keep_aspect,
            )
        if out_path is not None:
            canvas.save(out_path)
        return canvas

    def to_pdf(self, out_path: str | Path | None = None) -> PageDocument:
        s = self.settings
        page = PageDocument(s.width, s.height)
        for row in self.rows:
            render_page(
                row.wkt, page, self.bounds,
                label=row.label, color=row.color, style=s.style,
                viewport=self.viewport, keep_aspect=s.keep_aspect,
            )
        if out_path is not None:
            page.save(out_path, fmt="pdf")
        return page

    def to_svg(self) -> str:
        s = self.settings
        body = "".join(
            render_svg(
                row.wkt, self.bounds, self.viewport,
                label=row.label, color=row.color, style=s.style,
                keep_aspect=s.keep_aspect, elem_id=f"{row.label}{row.index}",
            )
            for row in self.rows
        )
        return svg_document(body, s.width, s.height)

    def features(self) -> list[LayerFeature]:
        return [
            render_openlayers(
                row.wkt, srid=row.srid, label=row.label, color=row.color, style=self.settings.style,
            )
            for row in self.rows
        ]

    def to_openlayers(self) -> str:
        return "".join(f.to_script() for f in self.features())

    def save(self, fmt: str, out_path: str | Path) -> None:
        """Write the batch in one of FORMATS."""
        fmt = fmt.lower()
        if fmt == "png":
            self.to_png(out_path)
        elif fmt == "pdf":
            self.to_pdf(out_path)
        elif fmt == "svg":
            write_text(self.to_svg(), out_path)
        elif fmt == "ol":
            write_text(self.to_openlayers(), out_path)
        else:
            raise ValueError(f"Unknown format {fmt!r}; expected one of {FORMATS}")
