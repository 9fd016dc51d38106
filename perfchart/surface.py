from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from functools import partial
import logging
from pathlib import Path
from typing import Any

import numpy as np
from PIL import Image

from perfchart.adapters import normalize_dataset, normalize_labels
from perfchart.colors import assign_trace_colors
from perfchart.compile import FrameBatch, compile_frame_batch
from perfchart.coordinates import CoordinateMapper
from perfchart.display import resolve_chart_size
from perfchart.errors import PlotDataError
from perfchart.events import InputEvent
from perfchart.interaction import DispatchResult, InspectUpdate, InteractionController, PointActivation
from perfchart.overlays import OverlayLayout, Rect
from perfchart.raster import draw_hline, draw_text, fill_rect, new_canvas, text_size
from perfchart.readout import format_baseline_delta, format_inspection
from perfchart.render import RenderCache, RenderStyle
from perfchart.series import RGBA, Dataset, IndexLabel


LOGGER = logging.getLogger(__name__)

IDLE_READOUT = "move mouse over graph"


@dataclass(frozen=True)
class ChartStyle:
    render: RenderStyle = field(default_factory=RenderStyle)
    cursor_color: RGBA = (100, 80, 240, 77)
    marker_color: RGBA = (100, 100, 100, 77)
    baseline_color: RGBA = (0, 100, 100, 77)
    baseline_text_color: RGBA = (0, 100, 100, 255)
    ruler_color: RGBA = (0, 0, 0, 255)
    gridline_color: RGBA = (0, 0, 0, 20)
    gridline_label_color: RGBA = (0, 0, 0, 102)
    gridline_font_px: float = 9.0
    legend_font_px: float = 12.0
    text_color: RGBA = (0, 0, 0, 255)


@dataclass(frozen=True)
class LegendEntry:
    index: int
    name: str
    color: RGBA
    handler: Callable[[], bool]


class ChartSurface:
    """One interactive chart: raster, overlays and legend wired to a single controller."""

    def __init__(
        self,
        traces: Any,
        labels: Sequence[Any],
        names: Sequence[str] | None = None,
        *,
        units: str = "",
        width: int | None = None,
        height: int | None = None,
        host_size: tuple[int, int] | None = None,
        style: ChartStyle | None = None,
        enable_wheel_zoom: bool = True,
    ) -> None:
        self.dataset: Dataset = normalize_dataset(traces)
        self.labels: tuple[IndexLabel, ...] = normalize_labels(labels, sample_count=self.dataset.sample_count)
        if names is None:
            names = [f"trace {i + 1}" for i in range(self.dataset.trace_count)]
        if len(names) != self.dataset.trace_count:
            raise PlotDataError(f"name count mismatch: {len(names)} != {self.dataset.trace_count}")
        self.names = tuple(str(name) for name in names)
        self.units = units
        self.style = style or ChartStyle()
        self.colors = assign_trace_colors(self.names)

        plot_w, plot_h = resolve_chart_size(width, height, host_size=host_size)
        self.mapper = CoordinateMapper(self.dataset, plot_w, plot_h)
        self.cache = RenderCache(self.mapper, self.dataset, self.color_of, self.style.render)
        self.controller = InteractionController(
            self.mapper,
            self.cache,
            self.dataset,
            self.labels,
            enable_wheel_zoom=enable_wheel_zoom,
            on_inspect=self._handle_inspect,
            on_point_activated=self._handle_activation,
        )
        self.legend: tuple[LegendEntry, ...] = tuple(
            LegendEntry(index=i, name=name, color=self.colors[i], handler=partial(self.toggle_trace, i))
            for i, name in enumerate(self.names)
        )
        self.on_inspect: Callable[[InspectUpdate], None] | None = None
        self.on_point_activated: Callable[[IndexLabel, IndexLabel], None] | None = None
        self.readout = IDLE_READOUT
        self.baseline_readout = ""
        LOGGER.debug("chart surface created: %d traces, %dx%d", self.dataset.trace_count, plot_w, plot_h)

    @property
    def width(self) -> int:
        return self.mapper.width_max

    @property
    def height(self) -> int:
        return self.mapper.height_max

    def color_of(self, trace_index: int) -> RGBA:
        return self.colors[trace_index]

    def handle(self, event: InputEvent) -> DispatchResult:
        result = self.controller.dispatch(event)
        if self.controller.context.baseline is None:
            self.baseline_readout = ""
        return result

    def toggle_trace(self, trace_index: int) -> bool:
        return self.controller.toggle_trace(trace_index)

    def frame(self) -> np.ndarray:
        if self.controller.context.frame is None or not self.cache.valid:
            return self.controller.render()
        return self.controller.context.frame

    def overlays(self) -> OverlayLayout:
        return self.controller.context.overlays

    def frame_batch(self) -> FrameBatch:
        return compile_frame_batch(self.frame(), self.overlays())

    def snapshot(self) -> np.ndarray:
        """Flatten frame, gridlines, overlays and the legend row into one RGBA image."""
        style = self.style
        frame = self.frame()
        legend_h = int(round(style.legend_font_px * 2)) + 8
        canvas = new_canvas(self.width, self.height + legend_h, color=style.render.background)
        canvas[: self.height] = frame
        overlays = self.overlays()
        for gridline in overlays.gridlines:
            _draw_dashed_hline(canvas[: self.height], gridline.rect, style.gridline_color, dash=3)
            draw_text(
                canvas,
                gridline.rect.x + 4,
                gridline.rect.y + 1,
                gridline.label,
                style.gridline_label_color,
                font_size_px=style.gridline_font_px,
            )
        if overlays.baseline is not None:
            _fill(canvas[: self.height], overlays.baseline, style.baseline_color)
        for rect, color in ((overlays.marker, style.marker_color), (overlays.cursor, style.cursor_color)):
            if rect is not None:
                _fill(canvas[: self.height], rect, color)
        if overlays.ruler is not None and overlays.ruler.height > 0:
            ruler = Rect(overlays.ruler.x, overlays.ruler.height - 1, overlays.ruler.width, 1)
            _draw_dashed_hline(canvas[: self.height], ruler, style.ruler_color, dash=1)
        self._draw_legend_row(canvas, top=self.height + 4)
        return canvas

    def save_png(self, path: str | Path) -> Path:
        out = Path(path)
        Image.fromarray(self.snapshot()).save(out)
        LOGGER.info("wrote %s", out)
        return out

    def _draw_legend_row(self, canvas: np.ndarray, *, top: int) -> None:
        style = self.style
        font_px = style.legend_font_px
        x = 4
        head = "Legend: "
        draw_text(canvas, x, top, head, style.text_color, font_size_px=font_px)
        x += text_size(head, font_size_px=font_px)[0] + 4
        selection = set(self.controller.selection)
        for entry in self.legend:
            text = entry.name if entry.index == len(self.legend) - 1 else entry.name + ","
            draw_text(canvas, x, top, text, entry.color, font_size_px=font_px, bold=entry.index in selection)
            x += text_size(text, font_size_px=font_px)[0] + 6
        second_row = top + int(round(font_px)) + 4
        draw_text(canvas, 4, second_row, self.readout, style.text_color, font_size_px=font_px)
        if self.baseline_readout:
            offset = text_size(self.readout, font_size_px=font_px)[0] + 12
            draw_text(canvas, 4 + offset, second_row, self.baseline_readout, style.baseline_text_color, font_size_px=font_px)

    def _handle_inspect(self, update: InspectUpdate) -> None:
        self.readout = format_inspection(update, self.units)
        if update.baseline_delta is not None:
            self.baseline_readout = format_baseline_delta(update.baseline_delta, self.units)
        if self.on_inspect is not None:
            self.on_inspect(update)

    def _handle_activation(self, activation: PointActivation) -> None:
        if self.on_point_activated is not None:
            self.on_point_activated(activation.previous, activation.current)


def _fill(canvas: np.ndarray, rect: Rect, color: RGBA) -> None:
    fill_rect(canvas, rect.x, rect.y, rect.width, rect.height, color)


def _draw_dashed_hline(canvas: np.ndarray, rect: Rect, color: RGBA, *, dash: int) -> None:
    for x0 in range(rect.x, rect.x + rect.width, dash * 2):
        draw_hline(canvas, x0, min(rect.x + rect.width, x0 + dash) - 1, rect.y, color)
