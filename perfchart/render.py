from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
import logging

import numpy as np

from perfchart.coordinates import CoordinateMapper
from perfchart.raster import blit, draw_error_bar, draw_polyline, new_canvas
from perfchart.series import RGBA, Dataset


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderStyle:
    background: RGBA = (255, 255, 255, 255)
    line_width: int = 2
    deviation_width: int = 1
    dim_opacity: float = 0.2


def _px(value: float) -> int:
    return int(np.floor(value + 0.5))


class RenderCache:
    """Caches the undimmed raster of every trace and composites highlighted traces over it."""

    def __init__(
        self,
        mapper: CoordinateMapper,
        dataset: Dataset,
        color_of: Callable[[int], RGBA],
        style: RenderStyle | None = None,
    ) -> None:
        self._mapper = mapper
        self._dataset = dataset
        self._color_of = color_of
        self.style = style or RenderStyle()
        self._base: np.ndarray | None = None
        self.base_renders = 0

    @property
    def valid(self) -> bool:
        return self._base is not None

    def invalidate(self) -> None:
        if self._base is not None:
            LOGGER.debug("render cache invalidated")
        self._base = None

    def render_base(self) -> np.ndarray:
        if self._base is None:
            LOGGER.debug(
                "rendering base raster: %d traces x %d samples at %dx%d",
                self._dataset.trace_count,
                self._dataset.sample_count,
                self._mapper.width_max,
                self._mapper.height_max,
            )
            canvas = new_canvas(self._mapper.width_max, self._mapper.height_max, color=self.style.background)
            for i in range(self._dataset.trace_count):
                self.draw_trace(canvas, i)
            self._base = canvas
            self.base_renders += 1
        return self._base

    def compose(self, selection: Sequence[int]) -> np.ndarray:
        base = self.render_base()
        if not selection:
            return base.copy()
        frame = new_canvas(base.shape[1], base.shape[0], color=self.style.background)
        blit(frame, base, opacity=self.style.dim_opacity)
        for index in selection:
            self.draw_trace(frame, index)
        return frame

    def draw_trace(self, canvas: np.ndarray, trace_index: int) -> None:
        color = self._color_of(trace_index)
        values = self._dataset.values[trace_index]
        deviations = self._dataset.deviations[trace_index]
        segments: list[list[tuple[int, int]]] = []
        current: list[tuple[int, int]] = []
        bars: list[tuple[int, int, int]] = []
        for i, value in enumerate(values.tolist()):
            if np.isnan(value):
                # A gap ends the segment; nothing is interpolated across it.
                if current:
                    segments.append(current)
                    current = []
                continue
            x = _px(self._mapper.to_pixel_x(i))
            current.append((x, _px(self._mapper.to_pixel_y(value))))
            if value != 0.0:
                deviation = float(deviations[i])
                if not np.isnan(deviation):
                    bars.append(
                        (
                            x,
                            _px(self._mapper.to_pixel_y(value - deviation)),
                            _px(self._mapper.to_pixel_y(value + deviation)),
                        )
                    )
        if current:
            segments.append(current)
        for points in segments:
            draw_polyline(canvas, points, color=color, width=self.style.line_width)
        for x, y_low, y_high in bars:
            draw_error_bar(canvas, x, y_low, y_high, color=color, width=self.style.deviation_width)
