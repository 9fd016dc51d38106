from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import math
import re

from perfchart.coordinates import CoordinateMapper, Viewport


STEP_CEILING = 5_000_000_000.0
MIN_TICKS = 3
BOTTOM_EXCLUSION = 0.05

_THREE_DIGITS = re.compile(r"(\d+)(\d{3})")


@dataclass(frozen=True)
class Tick:
    value: float
    pixel_y: float
    label: str


def add_commas(number: float | int | str) -> str:
    """Insert thousands separators into the integral part of ``number``.

    >>> add_commas(1234.56)
    '1,234.56'
    >>> add_commas("99999")
    '99,999'
    """
    text = str(number)
    integral, dot, fractional = text.partition(".")
    while _THREE_DIGITS.search(integral):
        integral = _THREE_DIGITS.sub(r"\1,\2", integral, count=1)
    return integral + dot + fractional


def choose_step(y_range: float) -> float:
    """Coarsest step from the 5 / 2.5 / 1 family that fits at least three ticks."""
    if not (y_range > 0) or not math.isfinite(y_range):
        return 0.0
    step = STEP_CEILING
    while step > 0:
        if math.floor(y_range / step) >= MIN_TICKS:
            return step
        step /= 2
        if math.floor(y_range / step) >= MIN_TICKS:
            return step
        step /= 2.5
        if math.floor(y_range / step) >= MIN_TICKS:
            return step
        step /= 2
    return 0.0


def format_tick(value: float, step: float) -> str:
    decimals = _decimals_from_step(step)
    if abs(value) <= step * 1e-9:
        value = 0.0
    try:
        quantized = Decimal(repr(value)).quantize(Decimal("1").scaleb(-decimals))
    except InvalidOperation:
        return add_commas(repr(value))
    text = format(quantized, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return add_commas(text)


class TickPlanner:
    """Chooses horizontal gridlines for the visible y-range of a mapper."""

    def __init__(self, mapper: CoordinateMapper) -> None:
        self._mapper = mapper

    def plan(self, viewport: Viewport | None = None) -> list[Tick]:
        vp = viewport or self._mapper.viewport
        lower = vp.y_min + BOTTOM_EXCLUSION * vp.y_range
        y_range = vp.y_max - lower
        step = choose_step(y_range)
        if step <= 0:
            return []
        first = math.ceil(lower / step)
        ticks: list[Tick] = []
        k = first
        while True:
            value = k * step
            if value >= vp.y_max:
                break
            ticks.append(Tick(value=value, pixel_y=self._mapper.to_pixel_y(value, vp), label=format_tick(value, step)))
            k += 1
        return ticks


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not math.isfinite(step):
        return 6
    exponent = Decimal(repr(step)).normalize().as_tuple().exponent
    return min(12, max(0, -int(exponent)))
