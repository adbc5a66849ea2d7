"""Tests for the page (PDF) renderer."""
import numpy as np
import pytest
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.path import Path as MplPath
from matplotlib.patches import Circle, PathPatch

from gis_viz.geometry.scaling import ScaleBounds
from gis_viz.render.page import PageDocument, render_page
from gis_viz.render.style import RenderStyle

BOUNDS = ScaleBounds(0.0, 10.0, 0.0, 10.0)
SQUARE = "POLYGON((0 0,10 0,10 10,0 10,0 0))"
WITH_HOLE = "POLYGON((0 0,10 0,10 10,0 10,0 0),(2 2,4 2,4 4,2 4,2 2))"


def _patches(page, kind):
    return [p for p in page.axes.patches if isinstance(p, kind)]


def _pixel(page, x, y):
    """RGB of the rendered page at page coordinates (x, y), origin top-left."""
    canvas = FigureCanvasAgg(page.figure)
    canvas.draw()
    image = np.asarray(canvas.buffer_rgba())
    h, w = image.shape[:2]
    return tuple(int(v) for v in image[int(y / page.height * h), int(x / page.width * w), :3])


class TestPageDocument:
    def test_size(self):
        page = PageDocument(200, 100)
        assert page.viewport.width == 200
        assert page.viewport.height == 100
        w, h = page.figure.get_size_inches()
        assert (w * 72, h * 72) == pytest.approx((200, 100))

    def test_bad_size(self):
        with pytest.raises(ValueError):
            PageDocument(0, 100)

    def test_degenerate_ring_skipped(self):
        page = PageDocument(100, 100)
        assert page.draw_polygon([[(0, 0), (1, 1)]], (0, 0, 0)) is None
        assert not page.axes.patches

    def test_save_pdf(self, tmp_path):
        page = render_page(SQUARE, PageDocument(100, 100), BOUNDS, label="A")
        out = tmp_path / "page.pdf"
        page.save(out, fmt="pdf")
        assert out.read_bytes().startswith(b"%PDF")


class TestRenderPage:
    def test_square_inverted_into_page(self):
        page = render_page(SQUARE, PageDocument(100, 100), BOUNDS, color=(255, 0, 0))
        (patch,) = _patches(page, PathPatch)
        verts = patch.get_path().vertices
        assert np.allclose(verts[0], (0, 100))
        assert np.allclose(verts[1], (100, 100))
        assert np.allclose(verts[2], (100, 0))
        assert patch.get_facecolor()[:3] == pytest.approx((1.0, 0.0, 0.0))

    def test_hole_is_second_subpath(self):
        wkt = "POLYGON((0 0,10 0,10 10,0 10,0 0),(2 2,4 2,4 4,2 4,2 2))"
        page = render_page(wkt, PageDocument(100, 100), BOUNDS)
        (patch,) = _patches(page, PathPatch)
        codes = list(patch.get_path().codes)
        assert codes.count(MplPath.MOVETO) == 2
        assert codes.count(MplPath.CLOSEPOLY) == 2

    @pytest.mark.parametrize("wkt", [
        WITH_HOLE,
        "POLYGON((0 0,10 0,10 10,0 10,0 0),(2 2,2 4,4 4,4 2,2 2))",
        "POLYGON((0 0,0 10,10 10,10 0,0 0),(2 2,4 2,4 4,2 4,2 2))",
    ])
    def test_hole_left_unfilled(self, wkt):
        page = render_page(wkt, PageDocument(100, 100), BOUNDS, color=(255, 0, 0))
        assert _pixel(page, 30, 70) == (255, 255, 255)   # world (3, 3)
        assert _pixel(page, 70, 30) == (255, 0, 0)       # world (7, 7)

    def test_hole_wound_against_outer(self):
        page = render_page(WITH_HOLE, PageDocument(100, 100), BOUNDS)
        (patch,) = _patches(page, PathPatch)
        path = patch.get_path()
        starts = [i for i, c in enumerate(path.codes) if c == MplPath.MOVETO]
        outer = path.vertices[starts[0]:starts[1] - 1]
        hole = path.vertices[starts[1]:-1]

        def signed(v):
            x, y = v[:, 0], v[:, 1]
            return float(np.sum(x * np.roll(y, -1) - y * np.roll(x, -1))) / 2

        assert signed(outer) * signed(hole) < 0

    def test_stroke_style(self):
        style = RenderStyle(stroke_color=(0, 0, 255), stroke_width=3)
        page = render_page(SQUARE, PageDocument(100, 100), BOUNDS, style=style)
        (patch,) = _patches(page, PathPatch)
        assert patch.get_edgecolor()[:3] == pytest.approx((0.0, 0.0, 1.0))
        assert patch.get_linewidth() == pytest.approx(3.0)

    def test_default_stroke(self):
        page = render_page(SQUARE, PageDocument(100, 100), BOUNDS)
        (patch,) = _patches(page, PathPatch)
        assert patch.get_edgecolor()[:3] == pytest.approx((0.0, 0.0, 0.0))
        assert patch.get_linewidth() == pytest.approx(0.5)

    def test_label_at_cursor(self):
        page = render_page(SQUARE, PageDocument(100, 100), BOUNDS, label="A")
        assert page.cursor == (100.0, 100.0)
        (text,) = page.axes.texts
        assert text.get_text() == "A"
        assert text.get_position() == pytest.approx((100.0, 100.0))

    def test_no_label(self):
        page = render_page(SQUARE, PageDocument(100, 100), BOUNDS)
        assert not page.axes.texts

    def test_opacity(self):
        page = render_page(SQUARE, PageDocument(100, 100), BOUNDS, style=RenderStyle(opacity=0.3))
        (patch,) = _patches(page, PathPatch)
        assert patch.get_alpha() == pytest.approx(0.3)

    def test_point_and_line(self):
        page = PageDocument(100, 100)
        render_page("POINT(5 5)", page, BOUNDS)
        render_page("LINESTRING(0 0,10 10)", page, BOUNDS)
        (circle,) = _patches(page, Circle)
        assert circle.center == pytest.approx((50.0, 50.0))
        assert len(page.axes.lines) == 1

    def test_rows_accumulate(self):
        page = PageDocument(100, 100)
        for wkt in (SQUARE, "POLYGON((0 0,5 0,5 5,0 0))"):
            render_page(wkt, page, BOUNDS)
        assert len(_patches(page, PathPatch)) == 2
