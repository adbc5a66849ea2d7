"""
Raster canvas: RGB numpy image (H, W, 3) uint8 drawn with OpenCV.
Coordinates are (x, y) with x=col, y=row and row 0 at the top.
"""
from __future__ import annotations

from pathlib import Path
from typing import Sequence

import cv2
import numpy as np
from PIL import Image

from gis_viz.geometry.scaling import Viewport
from gis_viz.render.style import Color, check_color


def _to_pts(path: Sequence[Sequence[float]]) -> np.ndarray:
    # OpenCV polygon functions expect (N, 1, 2) int32
    return np.rint(np.asarray(path, dtype=np.float64)).astype(np.int32).reshape((-1, 1, 2))


class RasterCanvas:
    """Raster drawing surface. Every draw call mutates `image` in place."""

    def __init__(
        self,
        width: int,
        height: int,
        background: Sequence[int] = (255, 255, 255),
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {(width, height)}")
        self.image = np.zeros((height, width, 3), dtype=np.uint8)
        self.image[:] = check_color(background)[:3]

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])

    @property
    def viewport(self) -> Viewport:
        return Viewport(self.width, self.height)

    def allocate_color(self, *rgb: int) -> Color:
        """Validated (r, g, b) tuple usable by the draw calls."""
        return check_color(rgb)[:3]

    def draw_filled_polygon(
        self,
        rings: Sequence[Sequence[Sequence[float]]],
        color: Color,
        opacity: float = 1.0,
    ) -> None:
        """
        Fill all rings in a single fillPoly call; overlapping ring areas cancel
        out, so holes stay unfilled.
        """
        contours = [_to_pts(r) for r in rings if len(r) >= 3]
        if not contours:
            return
        if opacity >= 1.0:
            cv2.fillPoly(self.image, contours, color=tuple(int(c) for c in color[:3]))
            return
        mask = np.zeros(self.image.shape[:2], dtype=np.uint8)
        cv2.fillPoly(mask, contours, 1)
        self._blend(mask, color, opacity)

    def draw_polyline(
        self,
        path: Sequence[Sequence[float]],
        color: Color,
        thickness: int = 1,
        closed: bool = False,
    ) -> None:
        if len(path) < 2:
            return
        cv2.polylines(
            self.image, [_to_pts(path)], isClosed=closed,
            color=tuple(int(c) for c in color[:3]), thickness=max(1, int(thickness)),
        )

    def draw_point(self, point: Sequence[float], color: Color, radius: int = 3) -> None:
        center = (int(round(point[0])), int(round(point[1])))
        cv2.circle(self.image, center, max(1, int(radius)), tuple(int(c) for c in color[:3]), thickness=-1)

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        color: Color = (0, 0, 0),
        scale: float = 0.35,
    ) -> None:
        cv2.putText(
            self.image, text, (int(round(x)), int(round(y))),
            cv2.FONT_HERSHEY_SIMPLEX, scale, tuple(int(c) for c in color[:3]), 1, cv2.LINE_AA,
        )

    def _blend(self, mask: np.ndarray, color: Color, alpha: float) -> None:
        overlay = self.image.copy()
        overlay[mask > 0] = color[:3]
        cv2.addWeighted(overlay, alpha, self.image, 1 - alpha, 0, self.image)

    def save(self, out_path: str | Path) -> None:
        """Write the canvas as an image file (format from the suffix)."""
        Path(out_path).parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(self.image).save(out_path)

