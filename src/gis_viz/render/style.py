"""
Colors and render options shared by the renderers.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Sequence

Color = tuple[int, ...]

# Row colors cycle through this list when a row has none of its own
PALETTE: list[Color] = [
    (176, 46, 224),
    (224, 100, 46),
    (224, 214, 46),
    (46, 151, 224),
    (188, 224, 46),
    (224, 46, 117),
    (92, 224, 46),
    (224, 176, 46),
    (0, 34, 224),
    (114, 108, 177),
    (72, 26, 54),
    (186, 198, 88),
    (18, 224, 46),
]

BLACK: Color = (0, 0, 0)


def check_color(color: Sequence[int]) -> Color:
    """Validate an RGB or RGBA color with components in [0, 255]."""
    c = tuple(int(v) for v in color)
    if len(c) not in (3, 4):
        raise ValueError(f"Color must have 3 or 4 components, got {len(c)}")
    if any(v < 0 or v > 255 for v in c):
        raise ValueError(f"Color components must be in [0, 255], got {c}")
    return c


def parse_color(value: str | Sequence[int]) -> Color:
    """Accept '#rrggbb', 'r,g,b[,a]' or a sequence of ints."""
    if isinstance(value, str):
        s = value.strip()
        if s.startswith("#") and len(s) == 7:
            try:
                return tuple(int(s[i : i + 2], 16) for i in (1, 3, 5))
            except ValueError:
                raise ValueError(f"Bad hex color {value!r}") from None
        try:
            return check_color(int(v) for v in s.split(","))
        except ValueError:
            raise ValueError(f"Bad color {value!r}") from None
    return check_color(value)


def to_hex(color: Sequence[int]) -> str:
    """(255, 0, 16) -> '#ff0010'. Alpha is ignored."""
    r, g, b = check_color(color)[:3]
    return f"#{r:02x}{g:02x}{b:02x}"


def palette_color(index: int, palette: Sequence[Color] = PALETTE) -> Color:
    return tuple(palette[index % len(palette)])


@dataclass(frozen=True)
class RenderStyle:
    """
    Per-call render options. None means "use the output format's default".

    fill_color:   polygon / point fill
    stroke_color: outline and line color
    stroke_width: outline width (line geometries use line_width)
    opacity:      fill opacity in [0, 1]
    label:        text drawn at the label anchor; '' draws nothing
    line_width:   stroke width for line geometries
    point_radius: radius of point markers
    font_size:    label size (page and raster outputs)
    """
    fill_color: Color | None = None
    stroke_color: Color | None = None
    stroke_width: float | None = None
    opacity: float | None = None
    label: str | None = None
    line_width: float | None = None
    point_radius: float | None = None
    font_size: float | None = None

    def resolve(self, defaults: "RenderStyle") -> "RenderStyle":
        """Fill unset fields from defaults and validate colors and opacity."""
        merged = replace(
            defaults,
            **{f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None},
        )
        if merged.fill_color is not None:
            object.__setattr__(merged, "fill_color", check_color(merged.fill_color))
        if merged.stroke_color is not None:
            object.__setattr__(merged, "stroke_color", check_color(merged.stroke_color))
        if merged.opacity is not None and not 0.0 <= merged.opacity <= 1.0:
            raise ValueError(f"opacity must be in [0, 1], got {merged.opacity}")
        return merged


SVG_DEFAULTS = RenderStyle(
    fill_color=PALETTE[0],
    stroke_color=BLACK,
    stroke_width=0.5,
    opacity=0.8,
    label="",
    line_width=2,
    point_radius=3,
    font_size=5,
)

RASTER_DEFAULTS = RenderStyle(
    fill_color=PALETTE[0],
    stroke_color=BLACK,
    stroke_width=1,
    opacity=1.0,
    label="",
    line_width=2,
    point_radius=3,
    font_size=0.35,
)

PAGE_DEFAULTS = RenderStyle(
    fill_color=PALETTE[0],
    stroke_color=BLACK,
    stroke_width=0.5,
    opacity=1.0,
    label="",
    line_width=2,
    point_radius=3,
    font_size=5,
)

OPENLAYERS_DEFAULTS = RenderStyle(
    fill_color=PALETTE[0],
    stroke_color=BLACK,
    stroke_width=0.5,
    opacity=0.8,
    label="",
    line_width=2,
    point_radius=3,
)
