"""Rendering modules: Pillow draw surface, compositor and codec."""

from rasterfit.render.codec import (
    decode,
    decode_base64,
    encode,
    encode_base64,
    fetch,
    get_image_dimensions,
    load_image,
)
from rasterfit.render.compositor import (
    crop,
    crop_and_fill_compose,
    image_size,
    layer,
    layout_text,
    letterbox_compose,
    overlay_text,
    resize_by_height_compose,
    resize_compose,
)
from rasterfit.render.surface import DrawContext, PillowTextMeasurer, begin_draw, measure_text

__all__ = [
    "DrawContext",
    "PillowTextMeasurer",
    "begin_draw",
    "crop",
    "crop_and_fill_compose",
    "decode",
    "decode_base64",
    "encode",
    "encode_base64",
    "fetch",
    "get_image_dimensions",
    "image_size",
    "layer",
    "layout_text",
    "letterbox_compose",
    "load_image",
    "measure_text",
    "overlay_text",
    "resize_by_height_compose",
    "resize_compose",
]
