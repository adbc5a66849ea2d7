"""Tests for batch visualization over many rows."""
import logging
import xml.etree.ElementTree as ET

import pytest

from gis_viz.geometry.scaling import ScaleBounds
from gis_viz.render.style import PALETTE, RenderStyle
from gis_viz.visualization import Visualization, VisualizationSettings

ROWS = [
    {"wkt": "POLYGON((0 0,10 0,10 10,0 10,0 0))", "label": "A"},
    {"wkt": "POLYGON((0 0, abc 10))", "label": "broken"},
    {"wkt": "'POLYGON((20 20,30 20,30 30,20 20))',27700", "label": "B"},
    {"wkt": "POINT(5 40)", "label": ""},
]

SVG = "{http://www.w3.org/2000/svg}"


@pytest.fixture
def vis():
    return Visualization(ROWS, VisualizationSettings(width=200, height=100))


# ---------------------------------------------------------------------------
# Collecting rows
# ---------------------------------------------------------------------------

class TestCollect:
    def test_malformed_row_skipped(self, vis):
        assert [r.index for r in vis.rows] == [0, 2, 3]
        assert [i for i, _ in vis.errors] == [1]

    def test_warning_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="gis_viz.visualization"):
            Visualization(ROWS)
        assert any("row 1" in r.getMessage() for r in caplog.records)

    def test_bounds_from_valid_rows(self, vis):
        assert vis.bounds == ScaleBounds(0.0, 30.0, 0.0, 40.0)

    def test_srid_and_colors(self, vis):
        assert vis.rows[1].srid == 27700
        assert vis.rows[0].srid == 0
        assert vis.rows[0].color == PALETTE[0]
        assert vis.rows[1].color == PALETTE[1]

    def test_row_color_column(self):
        v = Visualization([{"wkt": "POINT(1 1)", "color": "#00ff00"}, {"wkt": "POINT(2 2)", "color": "nope"}])
        assert v.rows[0].color == (0, 255, 0)
        assert [i for i, _ in v.errors] == [1]

    def test_no_rows(self):
        v = Visualization([])
        assert v.bounds == ScaleBounds(0.0, 0.0, 0.0, 0.0)
        assert "<g></g>" in v.to_svg()

    def test_custom_columns(self):
        v = Visualization(
            [{"geom": "POINT(1 2)", "name": "p"}],
            VisualizationSettings(wkt_column="geom", label_column="name"),
        )
        assert v.rows[0].label == "p"


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

class TestOutputs:
    def test_svg(self, vis):
        root = ET.fromstring(vis.to_svg().encode("utf-8"))
        paths = root.findall(f".//{SVG}path")
        assert len(paths) == 2
        assert paths[0].get("id") == "A0"
        assert len(root.findall(f".//{SVG}circle")) == 1
        assert [t.text for t in root.findall(f".//{SVG}text")] == ["A", "B"]

    def test_png(self, vis, tmp_path):
        canvas = vis.to_png(tmp_path / "out.png")
        assert canvas.image.shape == (100, 200, 3)
        assert (tmp_path / "out.png").is_file()

    def test_pdf(self, vis, tmp_path):
        page = vis.to_pdf(tmp_path / "out.pdf")
        assert len(page.axes.patches) == 3
        assert (tmp_path / "out.pdf").read_bytes().startswith(b"%PDF")

    def test_openlayers(self, vis):
        script = vis.to_openlayers()
        assert script.count("vectorSource.addFeature(feature);") == 3
        assert "'EPSG:27700'" in script

    @pytest.mark.parametrize("fmt", ["png", "svg", "pdf", "ol"])
    def test_save(self, vis, tmp_path, fmt):
        out = tmp_path / f"out.{fmt}"
        vis.save(fmt, out)
        assert out.stat().st_size > 0

    def test_save_unknown_format(self, vis, tmp_path):
        with pytest.raises(ValueError):
            vis.save("bmp", tmp_path / "out.bmp")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class TestSettings:
    def test_from_config(self):
        s = VisualizationSettings.from_config({
            "width": 300,
            "palette": ["#ff0000", "0,0,255"],
            "background": [0, 0, 0],
            "style": {"stroke_color": "#00ff00", "opacity": 0.5},
            "unknown": 1,
        })
        assert s.width == 300
        assert s.palette == [(255, 0, 0), (0, 0, 255)]
        assert s.background == (0, 0, 0)
        assert s.style == RenderStyle(stroke_color=(0, 255, 0), opacity=0.5)

    def test_from_empty_config(self):
        assert VisualizationSettings.from_config(None) == VisualizationSettings()

    def test_bad_palette_color(self):
        with pytest.raises(ValueError):
            VisualizationSettings.from_config({"palette": ["#gg0000"]})
