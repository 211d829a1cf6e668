"""Typed errors raised by rasterfit.

Every failure surfaces to the caller as one of these. Nothing is logged and
dropped inside the library.
"""


class RasterFitError(Exception):
    """Base exception for rasterfit."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidDimension(RasterFitError, ValueError):
    """Raised when a width or height is zero or negative."""

    def __init__(self, name: str, width: int, height: int):
        super().__init__(
            message=f"Invalid {name} dimensions: {width}x{height} (both must be > 0)",
            details={"name": name, "width": width, "height": height},
        )


class OutOfBounds(RasterFitError, ValueError):
    """Raised when a crop rectangle leaves the source image."""

    def __init__(self, rect: tuple[int, int, int, int], bounds: tuple[int, int]):
        x, y, width, height = rect
        super().__init__(
            message=(
                f"Crop rectangle ({x}, {y}, {width}x{height}) exceeds "
                f"image bounds {bounds[0]}x{bounds[1]}"
            ),
            details={"rect": rect, "bounds": bounds},
        )


class CodecError(RasterFitError):
    """Base class for encode/decode failures."""


class UnsupportedFormat(CodecError):
    """Raised when image data or a target format is not understood by the codec."""


class CorruptData(CodecError):
    """Raised when image data is recognised but cannot be decoded."""


class MeasurementFailure(RasterFitError):
    """Raised when text metrics cannot be obtained."""


class NetworkFailure(RasterFitError):
    """Raised when fetching a remote image fails."""

    def __init__(self, url: str, reason: str):
        super().__init__(
            message=f"Failed to fetch {url}: {reason}",
            details={"url": url, "reason": reason},
        )
