from __future__ import annotations

from dataclasses import dataclass
import logging
import math

import numpy as np

from perfchart.errors import NoPlottableDataError, PlotDataError
from perfchart.series import Dataset


LOGGER = logging.getLogger(__name__)


@dataclass
class Viewport:
    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def x_range(self) -> float:
        return self.x_max - self.x_min

    @property
    def y_range(self) -> float:
        return self.y_max - self.y_min


def compute_viewport(dataset: Dataset) -> Viewport:
    """X spans every index with half a slot of margin; y is padded by the largest deviation."""
    values = dataset.values
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        raise NoPlottableDataError("no plottable data: every value sample is missing")
    deviations = dataset.deviations[np.isfinite(dataset.deviations)]
    max_deviation = float(np.max(deviations)) if deviations.size else 0.0
    return Viewport(
        x_min=-0.5,
        x_max=(dataset.sample_count - 1) + 0.5,
        y_min=float(np.min(finite)) - max_deviation,
        y_max=float(np.max(finite)) + max_deviation,
    )


class CoordinateMapper:
    """Maps between data space and the pixel surface of one chart."""

    def __init__(self, dataset: Dataset, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise PlotDataError("chart width and height must be > 0")
        self._sample_count = dataset.sample_count
        self.width_max = int(width)
        self.height_max = int(height)
        self.viewport = compute_viewport(dataset)
        LOGGER.debug(
            "viewport initialised: x=[%s, %s] y=[%s, %s]",
            self.viewport.x_min,
            self.viewport.x_max,
            self.viewport.y_min,
            self.viewport.y_max,
        )

    def set_y_bounds(self, y_min: float, y_max: float) -> None:
        self.viewport.y_min = float(y_min)
        self.viewport.y_max = float(y_max)

    def to_pixel_x(self, value: float) -> float:
        vp = self.viewport
        return self.width_max * ((value - vp.x_min) / vp.x_range)

    def to_pixel_y(self, value: float, viewport: Viewport | None = None) -> float:
        vp = viewport or self.viewport
        if vp.y_range == 0:
            return self.height_max / 2
        return self.height_max - self.height_max * (value - vp.y_min) / vp.y_range

    def to_data_x(self, position: float) -> float:
        vp = self.viewport
        return position / self.width_max * vp.x_range + vp.x_min

    def to_data_y(self, position: float) -> float:
        vp = self.viewport
        if vp.y_range == 0:
            return vp.y_min
        return vp.y_min + vp.y_range * (self.height_max - position) / self.height_max

    def nearest_index(self, position: float) -> int:
        value = self.to_data_x(position)
        last = self._sample_count - 1
        if value < 0:
            return 0
        if value > last:
            return last
        # Halves round up.
        return int(math.floor(value + 0.5))
