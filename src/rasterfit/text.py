"""Font sizing and centring for text overlays.

Geometry only: measurement comes from an injected TextMeasurer, so these
functions run against a fake measurer in tests and against Pillow in
rasterfit.render.surface.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from rasterfit.errors import MeasurementFailure
from rasterfit.geometry import Point, Size, SizeF, require_positive
from rasterfit.types import FontFitMode

if TYPE_CHECKING:
    from rasterfit.fonts import FontFace

logger = logging.getLogger(__name__)

# Reference size measured once before scaling to the fitted size
PROBE_FONT_SIZE = 10.0

# Empirical correction for ascender/descender whitespace in measured line height
TEXT_HEIGHT_COMPRESSION = 0.75

# Smallest size the binary search will return
MIN_FONT_SIZE = 1.0


class TextMeasurer(Protocol):
    """Anything that can report the extent of a string at a font size."""

    def measure_text(self, text: str, font: FontFace, size: float) -> SizeF:
        ...


@dataclass(frozen=True)
class TextLayout:
    """
    Result of fitting a string into a bounding area.

    Attributes:
        font_size: Fitted font size in pixels.
        draw_origin: Top-left corner of the centred (height-compressed) text box.
        measured_size: Measured size at font_size, before height compression.
    """

    font_size: float
    draw_origin: Point
    measured_size: SizeF


def _measure(measurer: TextMeasurer, text: str, font: FontFace, size: float) -> SizeF:
    measured = measurer.measure_text(text, font, size)
    if measured.width <= 0 or measured.height <= 0:
        raise MeasurementFailure(
            f"Text {text!r} measured as {measured.width}x{measured.height} at size {size}",
            details={"text": text, "size": size},
        )
    return measured


def fit_font_size(
    bounding_area: Size,
    text: str,
    font: FontFace,
    measurer: TextMeasurer,
    probe_size: float = PROBE_FONT_SIZE,
) -> float:
    """
    Estimate the largest font size at which ``text`` fits ``bounding_area``.

    Measures once at ``probe_size`` and scales by the limiting ratio. This
    assumes text extent grows linearly with nominal size, which is only
    approximately true (hinting, kerning and rounding all bend the curve), so
    the result can overshoot or undershoot by a pixel or two. Use
    ``search_font_size`` when an exact fit matters.

    Args:
        bounding_area: Area the text should fill.
        text: Single line of text.
        font: Font face to measure with.
        measurer: Text measurement capability.
        probe_size: Reference size for the single measurement.

    Returns:
        Fitted font size in pixels.

    Raises:
        InvalidDimension: If the bounding area is empty.
        MeasurementFailure: If the text has no measurable extent.
    """
    require_positive(bounding_area, "bounding area")
    probe = _measure(measurer, text, font, probe_size)

    h_ratio = bounding_area.height / probe.height
    w_ratio = bounding_area.width / probe.width
    ratio = min(h_ratio, w_ratio)

    font_size = probe_size * ratio
    logger.debug(
        f"fit_font_size {text!r} in {bounding_area.width}x{bounding_area.height}: "
        f"probe={probe.width:.1f}x{probe.height:.1f} ratio={ratio:.3f} size={font_size:.2f}"
    )
    return font_size


def search_font_size(
    bounding_area: Size,
    text: str,
    font: FontFace,
    measurer: TextMeasurer,
    probe_size: float = PROBE_FONT_SIZE,
    tolerance: float = 0.25,
    min_size: float = MIN_FONT_SIZE,
) -> float:
    """
    Find the largest font size that fits by binary search on real measurements.

    Starts from the linear estimate and brackets it, then halves the interval
    until it is narrower than ``tolerance``. Never returns less than ``min_size``
    even if the text does not fit at that size.

    Raises:
        InvalidDimension: If the bounding area is empty.
        MeasurementFailure: If the text has no measurable extent.
    """
    estimate = fit_font_size(bounding_area, text, font, measurer, probe_size)

    def fits(size: float) -> bool:
        measured = _measure(measurer, text, font, size)
        return measured.width <= bounding_area.width and measured.height <= bounding_area.height

    low = min_size
    high = max(estimate * 1.5, min_size * 2)
    iterations = 0

    # Grow the upper bound until it no longer fits
    while iterations < 16 and fits(high):
        low = high
        high *= 2
        iterations += 1

    while high - low > tolerance:
        mid = (low + high) / 2
        if fits(mid):
            low = mid
        else:
            high = mid
        iterations += 1

    logger.debug(
        f"search_font_size {text!r}: estimate={estimate:.2f} result={low:.2f} "
        f"({iterations} iterations)"
    )
    return low


def layout_centered_text(
    center_point: Point,
    bounding_area: Size,
    text: str,
    font: FontFace,
    measurer: TextMeasurer,
    *,
    probe_size: float = PROBE_FONT_SIZE,
    height_compression: float = TEXT_HEIGHT_COMPRESSION,
    fit: FontFitMode = "linear",
    tolerance: float = 0.25,
) -> TextLayout:
    """
    Fit ``text`` to ``bounding_area`` and centre it on ``center_point``.

    The measured height is multiplied by ``height_compression`` before
    centring. The 0.75 default is an empirical correction for the blank
    ascender/descender space in a measured line; it has no derivation and may
    not suit every font.

    Args:
        center_point: Centre of the bounding area in image coordinates.
        bounding_area: Size of the area the text should fill.
        text: Single line of text.
        font: Font face.
        measurer: Text measurement capability.
        probe_size: Reference size for the linear estimate.
        height_compression: Factor applied to measured height for centring.
        fit: "linear" single-probe estimate or "search" binary search.
        tolerance: Size precision for "search".

    Returns:
        TextLayout with the top-left draw origin and the uncompressed measured size.
    """
    if fit == "search":
        font_size = search_font_size(bounding_area, text, font, measurer, probe_size, tolerance)
    else:
        font_size = fit_font_size(bounding_area, text, font, measurer, probe_size)

    measured = _measure(measurer, text, font, font_size)
    compressed_height = measured.height * height_compression

    left = center_point.x - bounding_area.width / 2
    top = center_point.y - bounding_area.height / 2
    origin = Point(
        x=left + (bounding_area.width - measured.width) / 2,
        y=top + (bounding_area.height - compressed_height) / 2,
    )

    return TextLayout(font_size=font_size, draw_origin=origin, measured_size=measured)


def expand_bounding_area(bounding_area: Size, layout: TextLayout) -> Size:
    """
    Grow the area height by half the unused vertical slack.

    Post-step for callers that lay out further content relative to the text:
    when the rendered text is shorter than the area, the area height becomes
    ``height + (height - text_height) / 2``. Otherwise the area is unchanged.
    """
    text_height = layout.measured_size.height
    if text_height >= bounding_area.height:
        return bounding_area

    slack = bounding_area.height - text_height
    return Size(bounding_area.width, int(bounding_area.height + slack / 2))
