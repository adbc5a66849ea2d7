"""
CLI: render, inspect, wkt, editor.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml


def _load_config(config_path: str | Path | None) -> dict:
    if not config_path or not Path(config_path).is_file():
        return {}
    try:
        with open(config_path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        print(f"Ignoring unreadable config {config_path}: {e}", file=sys.stderr)
        return {}


def cmd_render(args: argparse.Namespace) -> int:
    from gis_viz.data.io import read_rows
    from gis_viz.visualization import FORMATS, Visualization, VisualizationSettings
    if not Path(args.input).is_file():
        print(f"Input not found: {args.input}", file=sys.stderr)
        return 1
    config = _load_config(args.config)
    for key in ("width", "height", "srid", "wkt_column", "label_column"):
        value = getattr(args, key)
        if value is not None:
            config[key] = value
    if args.keep_aspect:
        config["keep_aspect"] = True
    settings = VisualizationSettings.from_config(config)

    rows = read_rows(args.input)
    vis = Visualization(rows, settings)
    if rows and not vis.rows:
        print(f"All {len(rows)} rows failed to parse", file=sys.stderr)
        return 1
    fmt = args.format or Path(args.out).suffix.lstrip(".").lower()
    if fmt not in FORMATS:
        print(f"Unknown output format {fmt!r}; use --format", file=sys.stderr)
        return 1
    vis.save(fmt, args.out)
    b = vis.bounds
    print(f"  Bounds: x=[{b.min_x}, {b.max_x}] y=[{b.min_y}, {b.max_y}]")
    if vis.errors:
        print(f"  Skipped {len(vis.errors)} malformed rows: {[i for i, _ in vis.errors]}")
    print(f"Wrote {len(vis.rows)} rows as {fmt} to {args.out}")
    return 0


def inspect_row(wkt: str) -> dict[str, Any]:
    """Analytical summary of one WKT value (world coordinates)."""
    from shapely.errors import GEOSException

    from gis_viz.data.polygons import parse_wkt
    from gis_viz.geometry.interop import to_shapely
    from gis_viz.geometry.rings import area, interior_point, is_outer_ring
    from gis_viz.geometry.shapes import MultiPolygon, Polygon, iter_paths

    geom = parse_wkt(wkt)
    out: dict[str, Any] = {
        "type": geom.geom_type,
        "n_points": sum(len(p) for p in iter_paths(geom)),
    }
    polygons: list[Polygon] = []
    if isinstance(geom, Polygon):
        polygons = [geom]
    elif isinstance(geom, MultiPolygon):
        polygons = list(geom.polygons)
    if polygons and polygons[0].rings:
        outer = polygons[0].exterior
        out["outer_area"] = area(outer)
        out["outer_clockwise"] = is_outer_ring(outer)
        out["n_holes"] = sum(len(p.holes) for p in polygons)
        sample = interior_point(outer)
        out["interior_point"] = "" if sample is None else f"{sample.x} {sample.y}"
    try:
        out["valid"] = bool(to_shapely(geom).is_valid)
    except (ValueError, GEOSException):
        # too few coordinates for shapely to build the geometry
        out["valid"] = False
    return out


def cmd_inspect(args: argparse.Namespace) -> int:
    from gis_viz.data.io import read_rows, write_rows_csv
    from gis_viz.data.polygons import MalformedGeometryError, split_value
    if not Path(args.input).is_file():
        print(f"Input not found: {args.input}", file=sys.stderr)
        return 1
    results: list[dict[str, Any]] = []
    failed = 0
    for i, row in enumerate(read_rows(args.input)):
        wkt, srid = split_value(str(row.get(args.wkt_column) or ""))
        try:
            info = inspect_row(wkt)
        except MalformedGeometryError as e:
            failed += 1
            info = {"type": "", "error": str(e)}
        record = {"row": i, "srid": srid, "type": "", "n_points": "", "outer_area": "",
                  "outer_clockwise": "", "n_holes": "", "interior_point": "", "valid": "", "error": ""}
        record.update(info)
        results.append(record)
        print(f"  row {i}: " + ", ".join(f"{k}={v}" for k, v in info.items()))
    if args.out_csv:
        write_rows_csv(results, args.out_csv)
        print(f"Wrote {len(results)} rows to {args.out_csv}")
    return 1 if results and failed == len(results) else 0


def cmd_wkt(args: argparse.Namespace) -> int:
    from gis_viz.data.io import load_editor_json
    from gis_viz.data.wkt_editor import generate_wkt
    if not Path(args.editor_json).is_file():
        print(f"Editor data not found: {args.editor_json}", file=sys.stderr)
        return 1
    data = load_editor_json(args.editor_json)
    try:
        print(generate_wkt(data, args.index, args.empty))
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1
    return 0


def cmd_editor(args: argparse.Namespace) -> int:
    from gis_viz.data.polygons import MalformedGeometryError, split_value
    from gis_viz.data.wkt_editor import editor_data
    wkt, _ = split_value(args.wkt)
    try:
        data = editor_data(wkt)
    except MalformedGeometryError as e:
        print(str(e), file=sys.stderr)
        return 1
    print(json.dumps(data, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="gis-viz", description="Render and inspect WKT geometry")
    p.add_argument("--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="command", required=True)
    # render
    r = sub.add_parser("render", help="Render rows of WKT to png, svg, pdf or an OpenLayers script")
    r.add_argument("--input", required=True, help="CSV or JSON rows with a WKT column")
    r.add_argument("--out", required=True, help="Output file")
    r.add_argument("--format", choices=("png", "svg", "pdf", "ol"), help="Default: from --out suffix")
    r.add_argument("--config", help="YAML config (optional)")
    r.add_argument("--width", type=int, help="Canvas width (default 600)")
    r.add_argument("--height", type=int, help="Canvas height (default 450)")
    r.add_argument("--keep_aspect", action="store_true", help="Same scale on both axes")
    r.add_argument("--srid", type=int, help="SRID for rows without one (OpenLayers output)")
    r.add_argument("--wkt_column", help="WKT column name (default wkt)")
    r.add_argument("--label_column", help="Label column name (default label)")
    r.set_defaults(func=cmd_render)
    # inspect
    i = sub.add_parser("inspect", help="Area, orientation and interior point per row")
    i.add_argument("--input", required=True, help="CSV or JSON rows with a WKT column")
    i.add_argument("--wkt_column", default="wkt", help="WKT column name")
    i.add_argument("--out_csv", help="Write results to CSV")
    i.set_defaults(func=cmd_inspect)
    # wkt
    w = sub.add_parser("wkt", help="Build WKT from coordinate editor JSON")
    w.add_argument("--editor_json", required=True, help="Editor data JSON file")
    w.add_argument("--index", type=int, default=0, help="Geometry index in the editor data")
    w.add_argument("--empty", default="", help="Placeholder for blank coordinates")
    w.set_defaults(func=cmd_wkt)
    # editor
    e = sub.add_parser("editor", help="Print coordinate editor JSON for a WKT value")
    e.add_argument("--wkt", required=True, help="WKT (or 'WKT',SRID) value")
    e.set_defaults(func=cmd_editor)
    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
