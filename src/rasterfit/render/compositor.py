"""Crop, resize, text overlay and layering on Pillow images.

Ownership: ``crop``, ``crop_and_fill_compose``, ``resize_compose``,
``resize_by_height_compose`` and ``letterbox_compose`` return a new image and
leave the source untouched. ``overlay_text`` and ``layer`` draw onto the image
they are given and return that same object; copy it first if the original
must survive.
"""

import logging

from PIL import Image

from rasterfit import geometry
from rasterfit.config import RasterSettings
from rasterfit.errors import OutOfBounds
from rasterfit.fonts import FontFace
from rasterfit.geometry import FitPolicy, Point, Rect, ScaleResult, Size
from rasterfit.render.surface import begin_draw, canvas_mode, has_alpha
from rasterfit.text import TextLayout, TextMeasurer, layout_centered_text
from rasterfit.types import Color, RasterImage

logger = logging.getLogger(__name__)


def image_size(image: RasterImage) -> Size:
    """Size of a Pillow image as a Size value."""
    return Size(image.width, image.height)


def crop(image: RasterImage, rect: Rect) -> RasterImage:
    """
    Extract a sub-region without scaling.

    Args:
        image: Source image.
        rect: Region to extract; must lie inside the image.

    Returns:
        New image of size (rect.width, rect.height).

    Raises:
        InvalidDimension: If the rectangle is empty.
        OutOfBounds: If any part of the rectangle lies outside the image.
    """
    geometry.require_positive(rect.size, "crop")

    if rect.x < 0 or rect.y < 0 or rect.right > image.width or rect.bottom > image.height:
        raise OutOfBounds((rect.x, rect.y, rect.width, rect.height), (image.width, image.height))

    return image.crop(rect.as_box())


def _compose(image: RasterImage, result: ScaleResult, settings: RasterSettings) -> RasterImage:
    canvas = Image.new(canvas_mode(image), result.canvas.as_tuple())
    with begin_draw(canvas, settings.resample) as ctx:
        ctx.draw_image(image, result.dest_rect)
    return canvas


def crop_and_fill_compose(
    image: RasterImage, target_size: Size, settings: RasterSettings | None = None
) -> RasterImage:
    """
    Scale to cover ``target_size`` and centre-crop the overflow.

    Args:
        image: Source image.
        target_size: Output size (exact).
        settings: Optional settings override (resampling filter).

    Returns:
        New image of exactly ``target_size``.
    """
    settings = settings or RasterSettings()
    result = geometry.crop_and_fill(image_size(image), target_size)
    return _compose(image, result, settings)


def resize_compose(
    image: RasterImage,
    target_size: Size,
    policy: FitPolicy,
    settings: RasterSettings | None = None,
) -> RasterImage:
    """
    Resize preserving aspect ratio.

    FILL_SMALLEST returns an image exactly as large as the fitted content
    (no padding; see ``letterbox_compose``). FILL_LARGEST returns an image of
    ``target_size`` with the overflow centre-cropped.
    """
    settings = settings or RasterSettings()
    result = geometry.resize(image_size(image), target_size, policy)
    return _compose(image, result, settings)


def resize_by_height_compose(
    image: RasterImage, height: int, settings: RasterSettings | None = None
) -> RasterImage:
    """Resize to a fixed height, keeping the aspect ratio."""
    settings = settings or RasterSettings()
    dest = geometry.resize_by_height(image_size(image), height)
    result = ScaleResult(dest.width, dest.height, 0, 0, dest)
    return _compose(image, result, settings)


def letterbox_compose(
    image: RasterImage,
    target_size: Size,
    background: Color | None = None,
    settings: RasterSettings | None = None,
) -> RasterImage:
    """
    Fit inside ``target_size`` and pad the remainder with ``background``.

    Args:
        image: Source image.
        target_size: Output size (exact).
        background: Padding color. Defaults to settings.letterbox_color.
        settings: Optional settings override.

    Returns:
        New image of ``target_size``; RGBA unless an opaque background is given.
    """
    settings = settings or RasterSettings()
    fitted = geometry.resize(image_size(image), target_size, FitPolicy.FILL_SMALLEST)
    offset_x, offset_y = geometry.letterbox_offset(fitted.dest_size, target_size)

    if background is None:
        fill: Color = settings.letterbox_color
        mode = "RGBA"
    else:
        fill = background
        mode = "RGBA" if isinstance(fill, tuple) and len(fill) == 4 else canvas_mode(image)
        # Grayscale canvases cannot take an RGB tuple
        if mode == "L" and isinstance(fill, tuple):
            mode = "RGB"

    canvas = Image.new(mode, target_size.as_tuple(), fill)
    with begin_draw(canvas, settings.resample) as ctx:
        ctx.draw_image(image, Rect(offset_x, offset_y, fitted.dest_width, fitted.dest_height))

    logger.debug(f"letterbox {image.size} -> {target_size.as_tuple()} at ({offset_x}, {offset_y})")
    return canvas


def overlay_text(
    image: RasterImage,
    center_point: Point,
    bounding_area: Size,
    text: str,
    font: FontFace,
    color: Color,
    draw_bounding_box: bool | None = None,
    settings: RasterSettings | None = None,
) -> RasterImage:
    """
    Draw ``text`` fitted to ``bounding_area`` and centred on ``center_point``.

    Draws onto ``image`` in place and returns the same object.

    Args:
        image: Image to draw on (mutated).
        center_point: Centre of the bounding area.
        bounding_area: Area the text should fill.
        text: Single line of text.
        font: Font face; the size is computed.
        color: Text color.
        draw_bounding_box: Outline the bounding area in yellow. Defaults to settings.debug_bounding_box.
        settings: Optional settings override.

    Returns:
        ``image``.

    Raises:
        MeasurementFailure: If the text cannot be measured.
    """
    settings = settings or RasterSettings()
    if draw_bounding_box is None:
        draw_bounding_box = settings.debug_bounding_box

    with begin_draw(image, settings.resample) as ctx:
        layout = layout_text(center_point, bounding_area, text, font, ctx, settings)

        if draw_bounding_box:
            box = Rect(
                int(center_point.x - bounding_area.width / 2),
                int(center_point.y - bounding_area.height / 2),
                bounding_area.width,
                bounding_area.height,
            )
            ctx.draw_rect(box, "yellow")

        ctx.draw_text(text, font, layout.font_size, layout.draw_origin, color)

    logger.debug(f"overlay_text {text!r} at size {layout.font_size:.2f} origin {layout.draw_origin}")
    return image


def layout_text(
    center_point: Point,
    bounding_area: Size,
    text: str,
    font: FontFace,
    measurer: TextMeasurer,
    settings: RasterSettings | None = None,
) -> TextLayout:
    """Run the text layout with the sizing options from ``settings``."""
    settings = settings or RasterSettings()
    return layout_centered_text(
        center_point,
        bounding_area,
        text,
        font,
        measurer,
        probe_size=settings.probe_font_size,
        height_compression=settings.text_height_compression,
        fit=settings.font_fit,
        tolerance=settings.font_search_tolerance,
    )


def layer(
    background: RasterImage,
    foreground: RasterImage,
    x: int,
    y: int,
    settings: RasterSettings | None = None,
) -> RasterImage:
    """
    Draw ``foreground`` onto ``background`` at (x, y), unscaled.

    Foreground transparency is respected. Anything beyond the background
    edges is clipped, not validated. Mutates and returns ``background``.

    Palette backgrounds are composited in true color and re-quantized into
    the same handle with a fresh palette.
    """
    settings = settings or RasterSettings()
    if background.mode == "P":
        return _layer_palette(background, foreground, x, y, settings)

    with begin_draw(background, settings.resample) as ctx:
        ctx.draw_image(foreground, Rect(x, y, foreground.width, foreground.height), blend=True)
    return background


def _layer_palette(
    background: RasterImage,
    foreground: RasterImage,
    x: int,
    y: int,
    settings: RasterSettings,
) -> RasterImage:
    working = background.convert("RGBA" if has_alpha(background) else "RGB")
    with begin_draw(working, settings.resample) as ctx:
        ctx.draw_image(foreground, Rect(x, y, foreground.width, foreground.height), blend=True)

    # Octree is the only quantizer that accepts RGBA
    method = Image.Quantize.FASTOCTREE if working.mode == "RGBA" else Image.Quantize.MEDIANCUT
    quantized = working.quantize(colors=256, method=method, dither=Image.Dither.NONE)
    palette_mode = quantized.palette.mode

    background.paste(quantized)
    background.putpalette(quantized.getpalette(palette_mode), palette_mode)
    if palette_mode == "RGBA":
        background.info.pop("transparency", None)

    logger.debug(f"layer re-quantized palette background {background.size}")
    return background
