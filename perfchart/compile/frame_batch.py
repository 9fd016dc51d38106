from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import torch

from perfchart.overlays import OverlayLayout


@dataclass(frozen=True)
class FrameBatch:
    tensor_h_w_4: torch.Tensor
    overlays: OverlayLayout

    @property
    def width(self) -> int:
        return int(self.tensor_h_w_4.shape[1])

    @property
    def height(self) -> int:
        return int(self.tensor_h_w_4.shape[0])


def compile_frame_batch(frame_rgba: np.ndarray, overlays: OverlayLayout) -> FrameBatch:
    if frame_rgba.dtype != np.uint8:
        raise ValueError("frame_rgba must be uint8")
    if frame_rgba.ndim != 3 or frame_rgba.shape[2] != 4:
        raise ValueError("frame_rgba must have shape (H, W, 4)")
    tensor = torch.from_numpy(np.ascontiguousarray(frame_rgba).copy())
    return FrameBatch(tensor_h_w_4=tensor, overlays=overlays)
