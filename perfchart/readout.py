from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
import math

from perfchart.interaction import BaselineDelta, InspectUpdate
from perfchart.ticks import add_commas


def to_fixed(value: float, digits: int) -> str:
    """Fixed-point text with half-up rounding; non-finite values keep their names."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    quantum = Decimal(1).scaleb(-digits)
    return format(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP), "f")


def _signed(value: float, digits: int) -> str:
    return ("+" if value >= 0 else "") + to_fixed(value, digits)


def format_inspection(update: InspectUpdate, units: str = "") -> str:
    return (
        f"{update.label.display()}: "
        f"{add_commas(to_fixed(update.value, 2))} {units} +/- "
        f"{add_commas(to_fixed(update.deviation, 2))} "
        f"{add_commas(to_fixed(update.data_y, 2))} {units}"
    )


def format_baseline_delta(delta: BaselineDelta, units: str = "") -> str:
    return f"{_signed(delta.delta, 0)} {units}: {_signed(delta.fraction * 100, 3)}%"
