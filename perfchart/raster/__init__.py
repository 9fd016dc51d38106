from .canvas import blit, draw_hline, draw_vline, fill_rect, new_canvas
from .draw_lines import draw_error_bar, draw_polyline
from .draw_text import draw_text, text_size

__all__ = [
    "blit",
    "draw_error_bar",
    "draw_hline",
    "draw_polyline",
    "draw_text",
    "draw_vline",
    "fill_rect",
    "new_canvas",
    "text_size",
]
