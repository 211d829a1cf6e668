"""Fit geometry for crop, fill and resize operations.

Pure functions only: no Pillow calls, no I/O. The compositor turns the
returned ScaleResult into a canvas allocation and a single draw call.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from rasterfit.errors import InvalidDimension

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Size:
    """Integer pixel size."""

    width: int
    height: int

    def as_tuple(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class SizeF:
    """Fractional size (text measurements)."""

    width: float
    height: float


@dataclass(frozen=True)
class Point:
    """Position in image coordinates (origin top-left, y grows downward)."""

    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    """Crop or placement region in pixels."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    def as_box(self) -> tuple[int, int, int, int]:
        """Return the (left, top, right, bottom) box Pillow expects."""
        return (self.x, self.y, self.right, self.bottom)


class FitPolicy(Enum):
    """Which ratio drives scaling when aspect ratios differ."""

    FILL_SMALLEST = "smallest"
    """Fit inside the target. No crop; the caller may letterbox."""

    FILL_LARGEST = "largest"
    """Cover the target. Overflow is cropped, never letterboxed."""


@dataclass(frozen=True)
class ScaleResult:
    """
    Placement of scaled content on a canvas.

    Attributes:
        dest_width: Width of the scaled content.
        dest_height: Height of the scaled content.
        offset_x: Left edge of the content on the canvas (negative = overflow).
        offset_y: Top edge of the content on the canvas (negative = overflow).
        canvas: Size of the canvas the content is drawn into.
    """

    dest_width: int
    dest_height: int
    offset_x: int
    offset_y: int
    canvas: Size

    @property
    def dest_size(self) -> Size:
        return Size(self.dest_width, self.dest_height)

    @property
    def dest_rect(self) -> Rect:
        """Destination rectangle for the draw call."""
        return Rect(self.offset_x, self.offset_y, self.dest_width, self.dest_height)


def require_positive(size: Size, name: str = "source") -> None:
    """
    Validate that both dimensions are positive.

    Raises:
        InvalidDimension: If width or height is zero or negative.
    """
    if size.width <= 0 or size.height <= 0:
        raise InvalidDimension(name, size.width, size.height)


def _ratios(source: Size, target: Size) -> tuple[float, float]:
    require_positive(source, "source")
    require_positive(target, "target")
    return (target.width / source.width, target.height / source.height)


def _scaled(length: int, scale: float) -> int:
    # Never collapse a side to zero pixels
    return max(1, round(length * scale))


def _overflow_offset(target: int, dest: int) -> int:
    # Centre only when content overflows; truncate toward zero
    diff = target - dest
    return int(diff / 2) if diff < 0 else 0


def crop_and_fill(source: Size, target: Size) -> ScaleResult:
    """
    Scale so the content covers the whole target, centring the overflow.

    The larger of the two ratios wins, so the result always crops and never
    letterboxes. The canvas is exactly ``target``; content that overflows it
    gets a negative offset and is clipped by the draw call.

    Args:
        source: Size of the source image.
        target: Size of the output canvas.

    Returns:
        ScaleResult with canvas == target.

    Raises:
        InvalidDimension: If either size has a non-positive dimension.
    """
    ratio_w, ratio_h = _ratios(source, target)
    scale = max(ratio_w, ratio_h)

    dest_width = _scaled(source.width, scale)
    dest_height = _scaled(source.height, scale)

    result = ScaleResult(
        dest_width=dest_width,
        dest_height=dest_height,
        offset_x=_overflow_offset(target.width, dest_width),
        offset_y=_overflow_offset(target.height, dest_height),
        canvas=target,
    )
    logger.debug(f"crop_and_fill {source} -> {target}: scale={scale:.4f} {result}")
    return result


def resize(source: Size, target: Size, policy: FitPolicy) -> ScaleResult:
    """
    Scale preserving aspect ratio under the given fit policy.

    FILL_SMALLEST uses the smaller ratio: content fits entirely inside the
    target and the canvas shrinks to exactly the content (offset 0, 0). Padding
    out to a fixed canvas is the caller's job (see ``letterbox_offset``).

    FILL_LARGEST uses the larger ratio: the canvas is ``target`` and overflow
    is centred with a negative offset, as in ``crop_and_fill``.

    Raises:
        InvalidDimension: If either size has a non-positive dimension.
    """
    ratio_w, ratio_h = _ratios(source, target)

    if policy is FitPolicy.FILL_SMALLEST:
        scale = min(ratio_w, ratio_h)
    else:
        scale = max(ratio_w, ratio_h)

    dest_width = _scaled(source.width, scale)
    dest_height = _scaled(source.height, scale)

    if policy is FitPolicy.FILL_SMALLEST:
        result = ScaleResult(
            dest_width=dest_width,
            dest_height=dest_height,
            offset_x=0,
            offset_y=0,
            canvas=Size(dest_width, dest_height),
        )
    else:
        result = ScaleResult(
            dest_width=dest_width,
            dest_height=dest_height,
            offset_x=_overflow_offset(target.width, dest_width),
            offset_y=_overflow_offset(target.height, dest_height),
            canvas=target,
        )

    logger.debug(f"resize[{policy.value}] {source} -> {target}: scale={scale:.4f} {result}")
    return result


def resize_by_height(source: Size, target_height: int) -> Size:
    """
    Scale to a fixed height, keeping the aspect ratio.

    Args:
        source: Size of the source image.
        target_height: Desired output height in pixels.

    Returns:
        Output size; height equals ``target_height``.
    """
    require_positive(source, "source")
    if target_height <= 0:
        raise InvalidDimension("target", source.width, target_height)

    scale = target_height / source.height
    return Size(_scaled(source.width, scale), target_height)


def letterbox_offset(dest: Size, target: Size) -> tuple[int, int]:
    """
    Offsets that centre fitted content inside a fixed target canvas.

    Only non-negative slack is distributed; dimensions that already fill or
    overflow the target get 0.
    """
    x = (target.width - dest.width) // 2 if target.width > dest.width else 0
    y = (target.height - dest.height) // 2 if target.height > dest.height else 0
    return (x, y)
