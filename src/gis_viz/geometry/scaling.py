"""
Scaling engine: world-coordinate bounds shared by every row of a batch, and the
affine map from world coordinates into a device viewport.

Two phases:
  ScaleAccumulator  mutable, owned by the single writer folding over the rows.
  ScaleBounds       frozen result of ScaleAccumulator.freeze(), safe to share
                    across any number of renderer calls.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

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
)


@dataclass(frozen=True)
class Viewport:
    """Device-space rectangle: origin (x, y) and size (width, height)."""
    width: float
    height: float
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class ScaleBounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def scale_factors(self, viewport: Viewport, keep_aspect: bool = False) -> tuple[float, float]:
        """
        sx = viewport.width / (max_x - min_x), sy likewise.
        A zero extent on an axis uses a factor of 1 for that axis.
        keep_aspect uses min(sx, sy) on both axes.
        """
        dx = self.max_x - self.min_x
        dy = self.max_y - self.min_y
        sx = viewport.width / dx if dx != 0 else 1.0
        sy = viewport.height / dy if dy != 0 else 1.0
        if keep_aspect:
            s = min(sx, sy)
            return s, s
        return sx, sy

    def to_device(
        self,
        point: Point,
        viewport: Viewport,
        *,
        invert_y: bool = True,
        keep_aspect: bool = False,
    ) -> Point:
        """Map a world point into viewport space. invert_y puts the origin at the top-left."""
        sx, sy = self.scale_factors(viewport, keep_aspect)
        x = viewport.x + (point[0] - self.min_x) * sx
        if invert_y:
            y = viewport.y + viewport.height - (point[1] - self.min_y) * sy
        else:
            y = viewport.y + (point[1] - self.min_y) * sy
        return Point(x, y)


def to_device_space(
    point: Point,
    bounds: ScaleBounds,
    viewport: Viewport,
    *,
    invert_y: bool = True,
    keep_aspect: bool = False,
) -> Point:
    return bounds.to_device(point, viewport, invert_y=invert_y, keep_aspect=keep_aspect)


class ScaleAccumulator:
    """
    Running min/max over observed points. Not thread-safe: one owner folds rows,
    then calls freeze() before rendering starts.
    """

    def __init__(self) -> None:
        self.min_x = float("inf")
        self.max_x = float("-inf")
        self.min_y = float("inf")
        self.max_y = float("-inf")
        self.count = 0

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    def observe(self, points: Iterable[Point]) -> "ScaleAccumulator":
        for x, y in points:
            if x < self.min_x:
                self.min_x = x
            if x > self.max_x:
                self.max_x = x
            if y < self.min_y:
                self.min_y = y
            if y > self.max_y:
                self.max_y = y
            self.count += 1
        return self

    def observe_geometry(self, geom: Geometry) -> "ScaleAccumulator":
        """Fold a geometry in. Polygons contribute their outer ring only."""
        if isinstance(geom, PointGeometry):
            if geom.point is not None:
                self.observe((geom.point,))
        elif isinstance(geom, (LineString, MultiPoint)):
            self.observe(geom.points)
        elif isinstance(geom, Polygon):
            self.observe(geom.exterior)
        elif isinstance(geom, MultiLineString):
            for line in geom.lines:
                self.observe(line)
        elif isinstance(geom, MultiPolygon):
            for poly in geom.polygons:
                self.observe(poly.exterior)
        elif isinstance(geom, GeometryCollection):
            for member in geom.geometries:
                self.observe_geometry(member)
        else:
            raise TypeError(f"Not a geometry: {type(geom).__name__}")
        return self

    def freeze(self) -> ScaleBounds:
        """Immutable bounds. Nothing observed gives all-zero bounds."""
        if self.is_empty:
            return ScaleBounds(0.0, 0.0, 0.0, 0.0)
        return ScaleBounds(self.min_x, self.max_x, self.min_y, self.max_y)


def bounds_of(geometries: Iterable[Geometry]) -> ScaleBounds:
    """Fold and freeze in one step."""
    acc = ScaleAccumulator()
    for g in geometries:
        acc.observe_geometry(g)
    return acc.freeze()
