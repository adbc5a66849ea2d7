"""
Read spatial rows (CSV / JSON) and editor data; write text outputs.
A row is a dict with at least a WKT column and optionally a label column.
"""
from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any


def read_rows_csv(path: str | Path) -> list[dict[str, str]]:
    """Read a CSV with a header row into a list of row dicts."""
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))


def read_rows_json(path: str | Path) -> list[dict[str, Any]]:
    """
    Read rows from JSON: either a list of objects or {"rows": [...]}.
    Bare strings in the list are taken as WKT values.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("rows", [])
    rows = []
    for item in data:
        if isinstance(item, str):
            rows.append({"wkt": item})
        elif isinstance(item, dict):
            rows.append(item)
    return rows


def read_rows(path: str | Path) -> list[dict[str, Any]]:
    """Dispatch on suffix: .json -> read_rows_json, anything else -> CSV."""
    if Path(path).suffix.lower() == ".json":
        return read_rows_json(path)
    return read_rows_csv(path)


def load_editor_json(path: str | Path) -> dict[str, Any]:
    """Load coordinate-editor data (see gis_viz.data.wkt_editor)."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def write_text(text: str, out_path: str | Path) -> None:
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(text)


def write_rows_csv(rows: list[dict[str, Any]], out_path: str | Path) -> None:
    """Write row dicts to CSV (columns from the first row)."""
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    if not rows:
        out.write_text("", encoding="utf-8")
        return
    with open(out, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=list(rows[0].keys()), extrasaction="ignore")
        w.writeheader()
        w.writerows(rows)
