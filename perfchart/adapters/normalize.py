from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
import logging
from typing import Any

import numpy as np
import torch

from perfchart.errors import PlotDataError
from perfchart.series import CompoundId, Dataset, IndexLabel, SimpleId


LOGGER = logging.getLogger(__name__)


def normalize_dataset(traces: Any) -> Dataset:
    """Coerce ``traces[t][i] = (value, deviation)`` into a float Dataset.

    Entries may be numbers, numeric strings, ``Decimal`` or ``None``; anything
    that does not parse as a float becomes NaN.
    """
    grid = _coerce_grid(traces)
    if grid.ndim != 3 or grid.shape[2] != 2:
        raise PlotDataError("each sample must be a [value, deviation] pair")
    if grid.shape[0] == 0:
        raise PlotDataError("dataset has no traces")
    if grid.shape[1] == 0:
        raise PlotDataError("traces have no samples")
    values = np.ascontiguousarray(grid[:, :, 0], dtype=np.float64)
    deviations = np.ascontiguousarray(grid[:, :, 1], dtype=np.float64)
    return Dataset(values=values, deviations=deviations)


def normalize_labels(labels: Sequence[Any], *, sample_count: int) -> tuple[IndexLabel, ...]:
    if len(labels) != sample_count:
        raise PlotDataError(f"label count mismatch: {len(labels)} != {sample_count}")
    out: list[IndexLabel] = []
    for raw in labels:
        if isinstance(raw, (SimpleId, CompoundId)):
            out.append(raw)
        elif isinstance(raw, Mapping):
            out.append(CompoundId({key: _plain_scalar(value) for key, value in raw.items()}))
        else:
            out.append(SimpleId(_plain_scalar(raw)))
    return tuple(out)


def _plain_scalar(raw: Any) -> Any:
    if isinstance(raw, np.generic):
        return raw.item()
    if isinstance(raw, torch.Tensor) and raw.ndim == 0:
        return raw.item()
    return raw


def _coerce_grid(traces: Any) -> np.ndarray:
    if isinstance(traces, torch.Tensor):
        tensor = traces.detach()
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return tensor.to(torch.float64).numpy()

    if isinstance(traces, np.ndarray) and traces.dtype.kind in {"i", "u", "f"}:
        return traces.astype(np.float64, copy=False)

    if isinstance(traces, np.ndarray):
        traces = traces.tolist()

    if not isinstance(traces, Sequence) or isinstance(traces, (str, bytes, bytearray)):
        raise PlotDataError(f"unsupported dataset input type: {type(traces)!r}")

    lengths = {len(trace) for trace in traces}
    if len(lengths) > 1:
        raise PlotDataError(f"traces differ in length: {sorted(lengths)}")
    sample_count = lengths.pop() if lengths else 0

    out = np.full((len(traces), sample_count, 2), np.nan, dtype=np.float64)
    coerced = 0
    for t, trace in enumerate(traces):
        for i, pair in enumerate(trace):
            if isinstance(pair, (str, bytes)) or not isinstance(pair, Sequence) or len(pair) != 2:
                raise PlotDataError(f"trace {t} sample {i} is not a [value, deviation] pair: {pair!r}")
            for k, raw in enumerate(pair):
                parsed = _parse_float(raw)
                if np.isnan(parsed) and not _is_explicit_missing(raw):
                    coerced += 1
                out[t, i, k] = parsed
    if coerced:
        LOGGER.warning("coerced %d unparseable numeric entries to NaN", coerced)
    return out


def _parse_float(raw: Any) -> float:
    if raw is None:
        return float("nan")
    if isinstance(raw, Decimal):
        return float(raw)
    try:
        return float(raw)
    except (TypeError, ValueError):
        return float("nan")


def _is_explicit_missing(raw: Any) -> bool:
    if raw is None:
        return True
    try:
        return bool(np.isnan(float(raw)))
    except (TypeError, ValueError):
        return False
