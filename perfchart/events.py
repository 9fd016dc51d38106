from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional


EventType = Literal[
    "pointer_move",
    "pointer_down",
    "wheel",
    "legend_toggle",
]


@dataclass(frozen=True)
class InputEvent:
    event_type: EventType
    x: Optional[float] = None
    y: Optional[float] = None
    delta_y: Optional[float] = None
    trace_index: Optional[int] = None
    modifiers: Optional[dict[str, bool]] = None

    def has_modifier(self, name: str) -> bool:
        return bool(self.modifiers and self.modifiers.get(name, False))
