from __future__ import annotations

from collections.abc import Sequence
import re

from perfchart.series import RGBA


# Unambiguous for normal and colour-deficient viewers (Okabe & Ito).
PALETTE: tuple[tuple[int, int, int], ...] = (
    (0, 114, 178),  # blue
    (230, 159, 0),  # orange
    (0, 158, 115),  # green
    (204, 121, 167),  # purplish pink
    (86, 180, 233),  # sky blue
    (213, 94, 0),  # dark orange
    (0, 0, 0),  # black
    (240, 228, 66),  # yellow
)

_SUFFIX = re.compile(r"-.*", re.DOTALL)


def make_color(i: int) -> RGBA:
    r, g, b = PALETTE[i % len(PALETTE)]
    return (r, g, b, 255)


def css_color(color: RGBA) -> str:
    return f"rgb({color[0]},{color[1]},{color[2]})"


def color_category(name: str) -> str:
    category = _SUFFIX.sub("", name, count=1)
    if "ref" not in name:
        category += "-ref"
    return category


def assign_trace_colors(names: Sequence[str]) -> list[RGBA]:
    """One colour per trace; traces sharing a category share the colour of its first member."""
    by_category: dict[str, RGBA] = {}
    colors: list[RGBA] = []
    for name in names:
        category = color_category(name)
        if category not in by_category:
            by_category[category] = make_color(len(by_category))
        colors.append(by_category[category])
    return colors
