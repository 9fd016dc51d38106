from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
import logging

import numpy as np

from perfchart.coordinates import CoordinateMapper
from perfchart.events import InputEvent
from perfchart.overlays import Gridline, OverlayLayout, baseline_rect, column_rect, gridline_rect, ruler_rect
from perfchart.render import RenderCache
from perfchart.series import Dataset, IndexLabel, previous_label
from perfchart.ticks import Tick, TickPlanner


LOGGER = logging.getLogger(__name__)

FINE_ZOOM_MODIFIER = "shift"
FINE_ZOOM_FACTOR = 0.1


@dataclass(frozen=True)
class ReferenceBaseline:
    value: float
    pixel_y: float


@dataclass(frozen=True)
class BaselineDelta:
    delta: float
    fraction: float


@dataclass(frozen=True)
class InspectUpdate:
    index: int
    label: IndexLabel
    value: float
    deviation: float
    data_y: float
    baseline_delta: BaselineDelta | None = None


@dataclass(frozen=True)
class PointActivation:
    index: int
    previous: IndexLabel
    current: IndexLabel


@dataclass
class ChartContext:
    """Mutable per-chart interaction state; one instance per chart, never shared."""

    selection: list[int] = field(default_factory=list)
    baseline: ReferenceBaseline | None = None
    hovered_index: int | None = None
    marked_index: int | None = None
    ticks: list[Tick] = field(default_factory=list)
    overlays: OverlayLayout = field(default_factory=OverlayLayout)
    frame: np.ndarray | None = None


@dataclass(frozen=True)
class DispatchResult:
    frame_changed: bool = False
    overlays_changed: bool = False
    inspect: InspectUpdate | None = None
    activation: PointActivation | None = None
    selected: bool | None = None


def baseline_delta(data_y: float, baseline: float) -> BaselineDelta:
    delta = data_y - baseline
    with np.errstate(divide="ignore", invalid="ignore"):
        # A zero baseline yields an infinite or NaN fraction, shown as-is.
        fraction = float(np.float64(delta) / np.float64(baseline))
    return BaselineDelta(delta=delta, fraction=fraction)


def zoom_bounds(y_min: float, y_max: float, data_y: float, zoom: float) -> tuple[float, float]:
    """Move both y-bounds toward ``data_y``; negative ``zoom`` moves them away."""
    bottom_to_pointer = (data_y + y_min) / 2 - y_min
    top_to_pointer = y_max - (y_max + data_y) / 2
    return (y_min + bottom_to_pointer * zoom, y_max - top_to_pointer * zoom)


class InteractionController:
    def __init__(
        self,
        mapper: CoordinateMapper,
        cache: RenderCache,
        dataset: Dataset,
        labels: tuple[IndexLabel, ...],
        *,
        enable_wheel_zoom: bool = True,
        on_inspect: Callable[[InspectUpdate], None] | None = None,
        on_point_activated: Callable[[PointActivation], None] | None = None,
    ) -> None:
        if len(labels) != dataset.sample_count:
            raise ValueError("labels must cover every sample index")
        self._mapper = mapper
        self._cache = cache
        self._dataset = dataset
        self._labels = labels
        self._planner = TickPlanner(mapper)
        self.enable_wheel_zoom = enable_wheel_zoom
        self.on_inspect = on_inspect
        self.on_point_activated = on_point_activated
        self.context = ChartContext()
        self._replan_ticks()

    @property
    def mapper(self) -> CoordinateMapper:
        return self._mapper

    @property
    def selection(self) -> tuple[int, ...]:
        return tuple(self.context.selection)

    def render(self) -> np.ndarray:
        self.context.frame = self._cache.compose(self.context.selection)
        return self.context.frame

    def pointer_move(self, x: float, y: float) -> InspectUpdate:
        ctx = self.context
        index = self._mapper.nearest_index(x)
        data_y = self._mapper.to_data_y(y)
        ctx.hovered_index = index
        sample = self._dataset.sample(0, index)
        delta = baseline_delta(data_y, ctx.baseline.value) if ctx.baseline is not None else None
        update = InspectUpdate(
            index=index,
            label=self._labels[index],
            value=sample.value,
            deviation=sample.deviation,
            data_y=data_y,
            baseline_delta=delta,
        )
        width, height = self._mapper.width_max, self._mapper.height_max
        ctx.overlays.ruler = ruler_rect(y, width=width, height=height)
        ctx.overlays.cursor = column_rect(index, width=width, height=height, columns=len(self._labels))
        if self.on_inspect is not None:
            self.on_inspect(update)
        return update

    def wheel(self, delta: float, y: float, *, fine: bool = False) -> bool:
        if not self.enable_wheel_zoom:
            return False
        zoom = -1.0 if delta < 0 else 1.0
        if fine:
            zoom *= FINE_ZOOM_FACTOR
        vp = self._mapper.viewport
        data_y = self._mapper.to_data_y(y)
        y_min, y_max = zoom_bounds(vp.y_min, vp.y_max, data_y, zoom)
        # The cached raster is only valid for the viewport it was drawn under.
        self._cache.invalidate()
        self._mapper.set_y_bounds(y_min, y_max)
        LOGGER.debug("zoom %+.1f at y=%s -> [%s, %s]", zoom, data_y, y_min, y_max)
        self.clear_baseline()
        self._replan_ticks()
        self.render()
        return True

    def click(self, y: float | None = None, *, shift: bool = False) -> PointActivation | ReferenceBaseline | None:
        if shift:
            if y is None:
                raise ValueError("placing a baseline requires a pointer y position")
            return self.place_baseline(y)
        ctx = self.context
        index = ctx.hovered_index
        if index is None:
            return None
        ctx.marked_index = index
        ctx.overlays.marker = ctx.overlays.cursor
        activation = PointActivation(
            index=index,
            previous=previous_label(self._labels, index),
            current=self._labels[index],
        )
        if self.on_point_activated is not None:
            self.on_point_activated(activation)
        return activation

    def place_baseline(self, y: float) -> ReferenceBaseline:
        self.clear_baseline()
        baseline = ReferenceBaseline(value=self._mapper.to_data_y(y), pixel_y=float(y))
        self.context.baseline = baseline
        self.context.overlays.baseline = baseline_rect(y, width=self._mapper.width_max)
        LOGGER.debug("baseline placed at %s", baseline.value)
        return baseline

    def clear_baseline(self) -> None:
        self.context.baseline = None
        self.context.overlays.baseline = None

    def toggle_trace(self, trace_index: int) -> bool:
        if not 0 <= trace_index < self._dataset.trace_count:
            raise IndexError(f"trace index out of range: {trace_index}")
        selection = self.context.selection
        if trace_index in selection:
            selection.remove(trace_index)
            selected = False
        else:
            selection.append(trace_index)
            selected = True
        self.render()
        return selected

    def dispatch(self, event: InputEvent) -> DispatchResult:
        if event.event_type == "pointer_move":
            update = self.pointer_move(_require(event.x, "x"), _require(event.y, "y"))
            return DispatchResult(overlays_changed=True, inspect=update)
        if event.event_type == "wheel":
            applied = self.wheel(
                _require(event.delta_y, "delta_y"),
                _require(event.y, "y"),
                fine=event.has_modifier(FINE_ZOOM_MODIFIER),
            )
            return DispatchResult(frame_changed=applied, overlays_changed=applied)
        if event.event_type == "pointer_down":
            if event.has_modifier("shift"):
                self.click(_require(event.y, "y"), shift=True)
                return DispatchResult(overlays_changed=True)
            activation = self.click()
            return DispatchResult(overlays_changed=activation is not None, activation=activation)
        if event.event_type == "legend_toggle":
            selected = self.toggle_trace(int(_require(event.trace_index, "trace_index")))
            return DispatchResult(frame_changed=True, selected=selected)
        raise ValueError(f"unsupported event type: {event.event_type}")

    def _replan_ticks(self) -> None:
        ticks = self._planner.plan()
        self.context.ticks = ticks
        self.context.overlays.gridlines = [
            Gridline(rect=gridline_rect(tick.pixel_y, width=self._mapper.width_max), label=tick.label) for tick in ticks
        ]


def _require(value, name: str):
    if value is None:
        raise ValueError(f"event is missing `{name}`")
    return value
