"""Pillow draw surface: scaled blits, text, debug rectangles and measurement."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from PIL import Image, ImageDraw

from rasterfit.errors import MeasurementFailure
from rasterfit.fonts import FontFace
from rasterfit.geometry import Point, Rect, SizeF
from rasterfit.types import Color, RasterImage, ResampleName

logger = logging.getLogger(__name__)

RESAMPLE_FILTERS: dict[str, Image.Resampling] = {
    "nearest": Image.Resampling.NEAREST,
    "bilinear": Image.Resampling.BILINEAR,
    "bicubic": Image.Resampling.BICUBIC,
    "lanczos": Image.Resampling.LANCZOS,
}


def has_alpha(image: RasterImage) -> bool:
    """True if the image carries transparency."""
    return image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info


def canvas_mode(image: RasterImage) -> str:
    """Mode for a fresh canvas that can hold ``image`` without loss."""
    if has_alpha(image):
        return "RGBA"
    if image.mode in ("RGB", "L"):
        return image.mode
    return "RGB"


def measure_text(text: str, font: FontFace, size: float) -> SizeF:
    """
    Measure a single line of text.

    Width is the advance length; height is the full line height
    (ascent + descent), blank space included.

    Raises:
        MeasurementFailure: If the text is empty or Pillow cannot size the font.
    """
    if not text:
        raise MeasurementFailure("Cannot measure empty text")

    try:
        pil_font = font.at(size)
        width = pil_font.getlength(text)
        ascent, descent = pil_font.getmetrics()
    except (OSError, ValueError) as e:
        raise MeasurementFailure(
            f"Failed to measure {text!r} with {font.name} at {size}: {e}",
            details={"text": text, "font": font.name, "size": size},
        ) from e

    return SizeF(width=float(width), height=float(ascent + descent))


class PillowTextMeasurer:
    """Stand-alone text measurer (no canvas required)."""

    def measure_text(self, text: str, font: FontFace, size: float) -> SizeF:
        return measure_text(text, font, size)


class DrawContext:
    """
    Drawing handle bound to one canvas.

    Obtain through ``begin_draw``; the handle is released when the block exits.
    """

    def __init__(self, canvas: RasterImage, resample: ResampleName = "bicubic") -> None:
        """
        Args:
            canvas: Image to draw on (mutated in place).
            resample: Filter name used when drawImage scales.
        """
        self.canvas = canvas
        self.resample = RESAMPLE_FILTERS[resample]
        self._draw: ImageDraw.ImageDraw | None = ImageDraw.Draw(canvas)

    @property
    def draw(self) -> ImageDraw.ImageDraw:
        if self._draw is None:
            raise RuntimeError("DrawContext used after release")
        return self._draw

    def release(self) -> None:
        self._draw = None

    def measure_text(self, text: str, font: FontFace, size: float) -> SizeF:
        return measure_text(text, font, size)

    def draw_image(self, source: RasterImage, dest: Rect, blend: bool = False) -> None:
        """
        Draw ``source`` scaled to ``dest``.

        Negative offsets and overflow are clipped by the canvas. With
        ``blend`` the source alpha channel is used as the paste mask;
        otherwise pixels (alpha included) are copied as-is.
        """
        if blend and has_alpha(source):
            source = source.convert("RGBA")
        elif source.mode != self.canvas.mode:
            source = source.convert(self.canvas.mode)

        dest_size = dest.size.as_tuple()
        if source.size != dest_size:
            source = source.resize(dest_size, resample=self.resample)

        mask = source if blend and source.mode == "RGBA" else None
        self.canvas.paste(source, (dest.x, dest.y), mask)

    def draw_text(
        self,
        text: str,
        font: FontFace,
        size: float,
        origin: Point,
        color: Color,
        anchor: str = "la",
    ) -> None:
        """
        Draw a single line of text.

        Args:
            anchor: Pillow text anchor; "la" puts the left/ascender corner at ``origin``.
        """
        self.draw.text((origin.x, origin.y), text, fill=color, font=font.at(size), anchor=anchor)

    def draw_rect(self, rect: Rect, stroke_color: Color = "yellow") -> None:
        """Outline a rectangle (debug visualization)."""
        self.draw.rectangle(
            (rect.x, rect.y, rect.right - 1, rect.bottom - 1), outline=stroke_color
        )


@contextmanager
def begin_draw(canvas: RasterImage, resample: ResampleName = "bicubic") -> Iterator[DrawContext]:
    """
    Open a drawing context on ``canvas``, released on every exit path.

    Example:
        with begin_draw(image) as ctx:
            ctx.draw_image(logo, Rect(10, 10, 64, 64), blend=True)
    """
    ctx = DrawContext(canvas, resample)
    try:
        yield ctx
    finally:
        ctx.release()
