"""Tests for the gis-viz command line."""
import csv
import json

import pytest

from gis_viz.cli import _load_config, inspect_row, main


@pytest.fixture
def rows_csv(tmp_path):
    path = tmp_path / "rows.csv"
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["wkt", "label"])
        w.writerow(["POLYGON((0 0,10 0,10 10,0 10,0 0))", "A"])
        w.writerow(["POLYGON((0 0, abc 10))", "bad"])
    return path


# ---------------------------------------------------------------------------
# render
# ---------------------------------------------------------------------------

class TestRender:
    def test_svg_from_suffix(self, rows_csv, tmp_path, capsys):
        out = tmp_path / "out.svg"
        assert main(["render", "--input", str(rows_csv), "--out", str(out)]) == 0
        assert out.read_text(encoding="utf-8").count("<path") == 1
        printed = capsys.readouterr().out
        assert "Skipped 1" in printed
        assert "Wrote 1 rows" in printed

    def test_config_and_flags(self, rows_csv, tmp_path):
        cfg = tmp_path / "cfg.yaml"
        cfg.write_text("width: 50\nheight: 40\npadding: 0\n", encoding="utf-8")
        out = tmp_path / "out.png"
        assert main(["render", "--input", str(rows_csv), "--out", str(out), "--config", str(cfg), "--width", "64"]) == 0
        from PIL import Image
        assert Image.open(out).size == (64, 40)

    def test_json_rows_to_openlayers(self, tmp_path):
        rows = tmp_path / "rows.json"
        rows.write_text(json.dumps(["POINT(1 2)", {"wkt": "LINESTRING(0 0,1 1)", "label": "L"}]), encoding="utf-8")
        out = tmp_path / "layer.js"
        assert main(["render", "--input", str(rows), "--out", str(out), "--format", "ol", "--srid", "3857"]) == 0
        script = out.read_text(encoding="utf-8")
        assert script.count("vectorSource.addFeature") == 2
        assert ".transform(" not in script

    def test_missing_input(self, tmp_path):
        assert main(["render", "--input", str(tmp_path / "nope.csv"), "--out", str(tmp_path / "o.svg")]) == 1

    def test_all_rows_bad(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("wkt\nPOINT(x y)\n", encoding="utf-8")
        assert main(["render", "--input", str(path), "--out", str(tmp_path / "o.svg")]) == 1

    def test_unknown_suffix(self, rows_csv, tmp_path):
        assert main(["render", "--input", str(rows_csv), "--out", str(tmp_path / "o.bmp")]) == 1


# ---------------------------------------------------------------------------
# inspect
# ---------------------------------------------------------------------------

class TestInspect:
    def test_inspect_row(self):
        info = inspect_row("POLYGON((0 0,0 10,10 10,10 0,0 0),(2 2,4 2,4 4,2 4,2 2))")
        assert info["type"] == "POLYGON"
        assert info["n_points"] == 10
        assert info["outer_area"] == pytest.approx(-100.0)
        assert info["outer_clockwise"] is True
        assert info["n_holes"] == 1
        assert info["valid"] is True

    def test_inspect_degenerate_is_invalid(self):
        assert inspect_row("POLYGON((0 0,1 1))")["valid"] is False

    def test_inspect_csv(self, rows_csv, tmp_path):
        out = tmp_path / "report.csv"
        assert main(["inspect", "--input", str(rows_csv), "--out_csv", str(out)]) == 0
        with open(out, newline="", encoding="utf-8") as f:
            records = list(csv.DictReader(f))
        assert [r["type"] for r in records] == ["POLYGON", ""]
        assert records[1]["error"]


# ---------------------------------------------------------------------------
# wkt / editor
# ---------------------------------------------------------------------------

class TestEditor:
    def test_editor_then_wkt(self, tmp_path, capsys):
        assert main(["editor", "--wkt", "'POLYGON((0 0,10 0,10 10,0 0))',4326"]) == 0
        data = capsys.readouterr().out
        path = tmp_path / "editor.json"
        path.write_text(data, encoding="utf-8")
        assert main(["wkt", "--editor_json", str(path)]) == 0
        assert capsys.readouterr().out.strip() == "POLYGON((0.0 0.0,10.0 0.0,10.0 10.0,0.0 0.0))"

    def test_wkt_placeholder(self, tmp_path, capsys):
        path = tmp_path / "editor.json"
        path.write_text(json.dumps({"0": {"gis_type": "POLYGON"}}), encoding="utf-8")
        assert main(["wkt", "--editor_json", str(path), "--empty", "0"]) == 0
        assert capsys.readouterr().out.strip() == "POLYGON((0 0,0 0,0 0,0 0))"

    def test_editor_malformed(self):
        assert main(["editor", "--wkt", "POLYGON((0 0, abc 10))"]) == 1


def test_load_config(tmp_path):
    assert _load_config(None) == {}
    assert _load_config(tmp_path / "missing.yaml") == {}
    bad = tmp_path / "bad.yaml"
    bad.write_text("width: [1, 2\n", encoding="utf-8")
    assert _load_config(bad) == {}
