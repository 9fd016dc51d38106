from __future__ import annotations

import numpy as np

from perfchart.series import RGBA


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def blit(dst: np.ndarray, src: np.ndarray, x0: int = 0, y0: int = 0, *, opacity: float = 1.0) -> None:
    """Composite ``src`` over an opaque ``dst`` with an extra global opacity."""
    h, w, _ = src.shape
    y1 = min(dst.shape[0], y0 + h)
    x1 = min(dst.shape[1], x0 + w)
    if y0 >= y1 or x0 >= x1:
        return
    view = dst[y0:y1, x0:x1]
    patch = src[: y1 - y0, : x1 - x0]
    alpha = patch[:, :, 3:4].astype(np.float32) / 255.0 * float(opacity)
    inv = 1.0 - alpha
    view[:, :, :3] = np.rint(patch[:, :, :3] * alpha + view[:, :, :3] * inv).astype(np.uint8)
    view[:, :, 3] = 255


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0] or x < 0 or x >= dst.shape[1]:
        return
    if color[3] == 255:
        dst[y, x] = color
        return
    a = color[3] / 255.0
    current = dst[y, x, :3].astype(np.float32)
    dst[y, x, :3] = np.rint(np.asarray(color[:3], dtype=np.float32) * a + current * (1.0 - a)).astype(np.uint8)
    dst[y, x, 3] = 255


def fill_rect(dst: np.ndarray, x: int, y: int, width: int, height: int, color: RGBA) -> None:
    xa = max(0, x)
    ya = max(0, y)
    xb = min(dst.shape[1], x + width)
    yb = min(dst.shape[0], y + height)
    if xa >= xb or ya >= yb:
        return
    region = dst[ya:yb, xa:xb]
    a = color[3] / 255.0
    region[:, :, :3] = np.rint(
        np.asarray(color[:3], dtype=np.float32) * a + region[:, :, :3].astype(np.float32) * (1.0 - a)
    ).astype(np.uint8)
    region[:, :, 3] = 255


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    left = min(x0, x1)
    fill_rect(dst, left, y, abs(x1 - x0) + 1, 1, color)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA) -> None:
    top = min(y0, y1)
    fill_rect(dst, x, top, 1, abs(y1 - y0) + 1, color)
