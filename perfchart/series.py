from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Union
import numbers
import re

import numpy as np


RGBA = tuple[int, int, int, int]


@dataclass(frozen=True)
class Sample:
    value: float
    deviation: float

    @property
    def missing(self) -> bool:
        return bool(np.isnan(self.value))


@dataclass(frozen=True)
class Dataset:
    """Rectangular (trace, index) grid of values and deviations; NaN marks a missing sample."""

    values: np.ndarray
    deviations: np.ndarray

    def __post_init__(self) -> None:
        if self.values.ndim != 2:
            raise ValueError("values must have shape (traces, samples)")
        if self.values.shape != self.deviations.shape:
            raise ValueError("values and deviations shape mismatch")
        self.values.setflags(write=False)
        self.deviations.setflags(write=False)

    @property
    def trace_count(self) -> int:
        return int(self.values.shape[0])

    @property
    def sample_count(self) -> int:
        return int(self.values.shape[1])

    def sample(self, trace_index: int, index: int) -> Sample:
        return Sample(
            value=float(self.values[trace_index, index]),
            deviation=float(self.deviations[trace_index, index]),
        )


_PLAIN_DECIMAL = re.compile(r"[+-]?\d+(\.\d+)?")


def _is_numeric(value: object) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    if isinstance(value, numbers.Real):
        return True
    if isinstance(value, str):
        return _PLAIN_DECIMAL.fullmatch(value.strip()) is not None
    return False


def _increment(value: object) -> object:
    # Only numeric identifiers move; anything else passes through as-is.
    if not _is_numeric(value):
        return value
    if isinstance(value, str):
        text = value.strip()
        if "." in text:
            return str(float(text) + 1)
        return str(int(text) + 1)
    return value + 1


def _revision_text(value: object) -> str:
    return f"r{value}" if _is_numeric(value) else str(value)


@dataclass(frozen=True)
class SimpleId:
    value: object

    def incremented(self) -> "SimpleId":
        return SimpleId(_increment(self.value))

    @property
    def primary(self) -> object:
        return self.value

    def display(self) -> str:
        return _revision_text(self.value)


@dataclass(frozen=True)
class CompoundId:
    """Identifier made of named sub-identifiers, e.g. {"chromium": 1200, "webkit": 88000}."""

    fields: Mapping[str, object] = field(default_factory=dict)

    def incremented(self) -> "CompoundId":
        return CompoundId({key: _increment(value) for key, value in self.fields.items()})

    @property
    def primary(self) -> object:
        for value in self.fields.values():
            return value
        return ""

    def display(self) -> str:
        parts: list[str] = []
        for i, (key, value) in enumerate(self.fields.items()):
            if i == 0:
                parts.append(_revision_text(value))
            elif value not in (None, ""):
                parts.append(f"{key} {_revision_text(value)}")
        return ", ".join(parts)


IndexLabel = Union[SimpleId, CompoundId]


def previous_label(labels: tuple[IndexLabel, ...], index: int) -> IndexLabel:
    """Label that opens the inclusive range ending at ``labels[index]``."""
    if index <= 0:
        return labels[index]
    return labels[index - 1].incremented()
