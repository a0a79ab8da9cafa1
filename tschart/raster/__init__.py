from .canvas import RasterCanvas, blend_mask, blend_rect, new_canvas
from .draw_text import FontMeasurer, font_extents, load_font, render_text_mask, rotate_mask, text_extents

__all__ = [
    "FontMeasurer",
    "RasterCanvas",
    "blend_mask",
    "blend_rect",
    "font_extents",
    "load_font",
    "new_canvas",
    "render_text_mask",
    "rotate_mask",
    "text_extents",
]
