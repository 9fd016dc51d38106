from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from perfchart.raster.canvas import draw_pixel, draw_vline
from perfchart.series import RGBA


def draw_polyline(dst: np.ndarray, points: Sequence[tuple[int, int]], color: RGBA, width: int = 1) -> None:
    if len(points) == 1:
        x, y = points[0]
        _stamp(dst, x, y, color=color, width=width)
        return
    for (x0, y0), (x1, y1) in zip(points[:-1], points[1:]):
        _draw_segment(dst, x0, y0, x1, y1, color=color, width=width)


def draw_error_bar(dst: np.ndarray, x: int, y_low: int, y_high: int, color: RGBA, width: int = 1) -> None:
    offset = width // 2
    for dx in range(width):
        draw_vline(dst, x - offset + dx, y_low, y_high, color)


def _draw_segment(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA, width: int) -> None:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    while True:
        _stamp(dst, x0, y0, color=color, width=width)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _stamp(dst: np.ndarray, x: int, y: int, color: RGBA, width: int) -> None:
    lo = -(width // 2)
    hi = (width - 1) // 2
    for yy in range(y + lo, y + hi + 1):
        for xx in range(x + lo, x + hi + 1):
            draw_pixel(dst, xx, yy, color)
