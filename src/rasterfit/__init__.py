"""Aspect-preserving crop, resize, letterbox and fitted text overlay for Pillow images."""

__version__ = "0.1.0"

# High-level Python API
from rasterfit.config import RasterSettings, load_config
from rasterfit.errors import (
    CodecError,
    CorruptData,
    InvalidDimension,
    MeasurementFailure,
    NetworkFailure,
    OutOfBounds,
    RasterFitError,
    UnsupportedFormat,
)
from rasterfit.fonts import FontFace, register_fonts
from rasterfit.geometry import (
    FitPolicy,
    Point,
    Rect,
    ScaleResult,
    Size,
    SizeF,
    crop_and_fill,
    letterbox_offset,
    resize,
    resize_by_height,
)
from rasterfit.render import (
    crop,
    crop_and_fill_compose,
    decode,
    decode_base64,
    encode,
    encode_base64,
    fetch,
    layer,
    letterbox_compose,
    load_image,
    overlay_text,
    resize_by_height_compose,
    resize_compose,
)
from rasterfit.text import (
    TextLayout,
    expand_bounding_area,
    fit_font_size,
    layout_centered_text,
    search_font_size,
)

__all__ = [
    "CodecError",
    "CorruptData",
    "FitPolicy",
    "FontFace",
    "InvalidDimension",
    "MeasurementFailure",
    "NetworkFailure",
    "OutOfBounds",
    "Point",
    "RasterFitError",
    "RasterSettings",
    "Rect",
    "ScaleResult",
    "Size",
    "SizeF",
    "TextLayout",
    "UnsupportedFormat",
    "crop",
    "crop_and_fill",
    "crop_and_fill_compose",
    "decode",
    "decode_base64",
    "encode",
    "encode_base64",
    "expand_bounding_area",
    "fetch",
    "fit_font_size",
    "layer",
    "layout_centered_text",
    "letterbox_compose",
    "letterbox_offset",
    "load_config",
    "load_image",
    "overlay_text",
    "register_fonts",
    "resize",
    "resize_by_height",
    "resize_by_height_compose",
    "resize_compose",
    "search_font_size",
]
