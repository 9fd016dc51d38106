from perfchart.coordinates import CoordinateMapper, Viewport, compute_viewport
from perfchart.errors import NoPlottableDataError, PlotDataError
from perfchart.events import InputEvent
from perfchart.interaction import (
    BaselineDelta,
    ChartContext,
    DispatchResult,
    InspectUpdate,
    InteractionController,
    PointActivation,
    ReferenceBaseline,
)
from perfchart.render import RenderCache, RenderStyle
from perfchart.series import CompoundId, Dataset, Sample, SimpleId
from perfchart.surface import ChartStyle, ChartSurface, LegendEntry
from perfchart.ticks import Tick, TickPlanner

__all__ = [
    "BaselineDelta",
    "ChartContext",
    "ChartStyle",
    "ChartSurface",
    "CompoundId",
    "CoordinateMapper",
    "Dataset",
    "DispatchResult",
    "InputEvent",
    "InspectUpdate",
    "InteractionController",
    "LegendEntry",
    "NoPlottableDataError",
    "PlotDataError",
    "PointActivation",
    "ReferenceBaseline",
    "RenderCache",
    "RenderStyle",
    "Sample",
    "SimpleId",
    "Tick",
    "TickPlanner",
    "Viewport",
    "compute_viewport",
]
