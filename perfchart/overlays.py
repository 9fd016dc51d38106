from __future__ import annotations

from dataclasses import dataclass, field


BASELINE_HEIGHT_PX = 5
GRADUATION_INSET_PX = 4


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class Gridline:
    rect: Rect
    label: str


@dataclass
class OverlayLayout:
    """Pixel placements of everything drawn on top of the chart raster."""

    cursor: Rect | None = None
    marker: Rect | None = None
    ruler: Rect | None = None
    baseline: Rect | None = None
    gridlines: list[Gridline] = field(default_factory=list)


def column_rect(index: int, *, width: int, height: int, columns: int) -> Rect:
    slot = width / max(1, columns)
    return Rect(x=int(round(slot * index)), y=0, width=int(round(slot)), height=height)


def ruler_rect(pointer_y: float, *, width: int, height: int) -> Rect:
    return Rect(x=0, y=0, width=width, height=int(round(min(max(pointer_y, 0.0), float(height)))))


def baseline_rect(pointer_y: float, *, width: int) -> Rect:
    return Rect(x=0, y=int(round(pointer_y - BASELINE_HEIGHT_PX / 2)), width=width, height=BASELINE_HEIGHT_PX)


def gridline_rect(pixel_y: float, *, width: int) -> Rect:
    return Rect(x=0, y=int(round(pixel_y)), width=max(0, width - GRADUATION_INSET_PX), height=1)
