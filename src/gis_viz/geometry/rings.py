"""
Ring math in world coordinates: signed area, orientation, point-in-polygon,
a point guaranteed inside a ring, and grouping of loose rings into polygons.
"""
from __future__ import annotations

import math
from typing import Sequence

from gis_viz.geometry.shapes import Point, Polygon, Ring, open_ring

INTERIOR_POINT_MAX_ITER = 64


def area(ring: Sequence[Point]) -> float:
    """
    Signed shoelace area. A repeated closing point is ignored.
    Negative means clockwise under this convention (see is_outer_ring).
    """
    pts = open_ring(tuple(ring))
    n = len(pts)
    if n == 0:
        return 0.0
    #        _n-1
    # A = 1/2 \   x(i) * y(i+1) - y(i) * x(i+1)
    #         /__
    #         i=0
    total = 0.0
    for i in range(n):
        j = (i + 1) % n
        total += pts[i][0] * pts[j][1]
        total -= pts[i][1] * pts[j][0]
    return total / 2.0


def is_outer_ring(ring: Sequence[Point]) -> bool:
    """Clockwise (negative signed area) rings are outer rings."""
    return area(ring) < 0


def point_in_polygon(point: Point, ring: Sequence[Point]) -> bool:
    """
    Even-odd ray casting. Edges are tested with y in (min_y, max_y], so a point
    on the left edge of an axis-aligned rectangle is outside and one on the
    right edge is inside.
    """
    pts = open_ring(tuple(ring))
    n = len(pts)
    if n == 0:
        return False
    px, py = point[0], point[1]
    counter = 0
    p1 = pts[0]
    for i in range(1, n + 1):
        p2 = pts[i % n]
        if py <= min(p1[1], p2[1]) or py > max(p1[1], p2[1]) or px > max(p1[0], p2[0]):
            p1 = p2
            continue
        if p1[1] != p2[1]:
            x_inters = (py - p1[1]) * (p2[0] - p1[0]) / (p2[1] - p1[1]) + p1[0]
            if p1[0] == p2[0] or px <= x_inters:
                counter += 1
        p1 = p2
    return counter % 2 != 0


def interior_point(ring: Sequence[Point], max_iter: int = INTERIOR_POINT_MAX_ITER) -> Point | None:
    """
    A point inside a simple closed ring, or None.

    Takes the first edge whose end points differ in y, then tests both sides of
    its midpoint along the edge normal at distance eps, squaring eps after each
    miss. Gives up when eps underflows to 0 or after max_iter rounds.
    """
    pts = tuple(ring)
    edge = None
    for a, b in zip(pts, pts[1:]):
        if a[1] != b[1]:
            edge = (a, b)
            break
    if edge is None:
        return None
    (x0, y0), (x1, y1) = edge
    mx = (x0 + x1) / 2
    my = (y0 + y1) / 2
    denominator = math.sqrt((y1 - y0) ** 2 + (x0 - x1) ** 2)

    # eps must stay < 1 so squaring shrinks it
    eps = 0.1
    for _ in range(max_iter):
        for sign in (1.0, -1.0):
            cx = mx + sign * eps * (y1 - y0) / denominator
            cy = my + (cx - mx) * (x0 - x1) / (y1 - y0)
            candidate = Point(cx, cy)
            if point_in_polygon(candidate, pts):
                return candidate
        eps = eps ** 2
        if eps == 0:
            return None
    return None


def rings_to_polygons(rings: Sequence[Ring]) -> list[Polygon]:
    """
    Group a flat list of rings into polygons: each clockwise ring starts a polygon,
    each other ring becomes a hole of the first outer ring containing its interior
    point. Rings that fit nowhere become polygons of their own.
    """
    outers: list[list[Ring]] = []
    inners: list[Ring] = []
    for ring in rings:
        if is_outer_ring(ring):
            outers.append([ring])
        else:
            inners.append(ring)
    for ring in inners:
        sample = interior_point(ring)
        owner = None
        if sample is not None:
            for group in outers:
                if point_in_polygon(sample, group[0]):
                    owner = group
                    break
        if owner is None:
            outers.append([ring])
        else:
            owner.append(ring)
    return [Polygon(tuple(group)) for group in outers]
