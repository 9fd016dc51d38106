from __future__ import annotations


PAGE_MARGIN_PX = 16
CHROME_HEIGHT_PX = 85
MAX_PLOT_HEIGHT_PX = 400
DEFAULT_FALLBACK_SIZE = (1280, 720)


def resolve_chart_size(
    width: int | None = None,
    height: int | None = None,
    *,
    host_size: tuple[int, int] | None = None,
) -> tuple[int, int]:
    """Return the (width, height) of the plot surface in pixels.

    Missing dimensions come from the host viewport less the page margin; the
    plot height always leaves room for the legend row and is capped.
    """
    if width is None or height is None:
        host_w, host_h = host_size or _detect_screen_size() or DEFAULT_FALLBACK_SIZE
        if width is None:
            width = host_w - PAGE_MARGIN_PX
        if height is None:
            height = host_h - PAGE_MARGIN_PX
    plot_height = min(MAX_PLOT_HEIGHT_PX, height - CHROME_HEIGHT_PX)
    if width <= 0 or plot_height <= 0:
        raise ValueError(f"chart surface too small: {width}x{plot_height}")
    return (int(width), int(plot_height))


def _detect_screen_size() -> tuple[int, int] | None:
    try:
        import tkinter as tk

        root = tk.Tk()
        root.withdraw()
        width = int(root.winfo_screenwidth())
        height = int(root.winfo_screenheight())
        root.destroy()
        if width > 0 and height > 0:
            return (width, height)
    except Exception:
        return None
    return None
