from __future__ import annotations


class PlotDataError(ValueError):
    pass


class NoPlottableDataError(PlotDataError):
    """Raised when every value sample in a dataset is missing."""
