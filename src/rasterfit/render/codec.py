"""Image encode/decode helpers and URL loading using Pillow and requests."""

import base64
import binascii
import logging
import re
from io import BytesIO

import requests
from PIL import Image, UnidentifiedImageError

from rasterfit.config import RasterSettings
from rasterfit.errors import CorruptData, NetworkFailure, UnsupportedFormat
from rasterfit.types import RasterImage

logger = logging.getLogger(__name__)

# data:image/png;base64,....
DATA_URI_PATTERN = re.compile(r"^data:[\w/+.-]*;base64,", re.IGNORECASE)

# Formats that cannot store an alpha channel
_OPAQUE_FORMATS = {"JPEG", "BMP"}

# Common names Pillow has no save handler for
_FORMAT_ALIASES = {"JPG": "JPEG", "TIF": "TIFF"}


def decode(image_data: bytes) -> RasterImage:
    """
    Decode raw bytes into an image.

    The pixel data is loaded eagerly so truncated files fail here rather
    than at first draw.

    Args:
        image_data: Raw image bytes (JPEG, PNG, etc.).

    Returns:
        PIL Image object.

    Raises:
        UnsupportedFormat: If the bytes are not a format Pillow recognises.
        CorruptData: If the bytes are recognised but cannot be decoded.
    """
    try:
        img = Image.open(BytesIO(image_data))
    except UnidentifiedImageError as e:
        raise UnsupportedFormat(f"Unrecognised image data ({len(image_data)} bytes)") from e

    try:
        img.load()
    except (OSError, SyntaxError, ValueError) as e:
        raise CorruptData(f"Failed to decode {img.format} image: {e}") from e

    logger.debug(f"Decoded {img.format} image {img.width}x{img.height} ({img.mode})")
    return img


def encode(img: RasterImage, format: str | None = None, settings: RasterSettings | None = None) -> bytes:
    """
    Save an image to bytes.

    Args:
        img: PIL Image object.
        format: Image format (PNG, JPEG, etc.). Defaults to settings.default_format.
        settings: Optional settings override.

    Returns:
        Encoded image bytes.

    Raises:
        UnsupportedFormat: If Pillow cannot write ``format``.
    """
    settings = settings or RasterSettings()
    target_format = (format or settings.default_format).upper()
    target_format = _FORMAT_ALIASES.get(target_format, target_format)

    # Flatten alpha for formats that cannot store it
    if target_format in _OPAQUE_FORMATS and img.mode not in ("RGB", "L"):
        img = img.convert("RGB")

    buffer = BytesIO()
    try:
        img.save(buffer, format=target_format)
    except KeyError as e:
        raise UnsupportedFormat(f"Unknown image format: {target_format}") from e
    except (OSError, ValueError) as e:
        raise UnsupportedFormat(f"Cannot encode {img.mode} image as {target_format}: {e}") from e

    return buffer.getvalue()


def decode_base64(image_string: str) -> RasterImage:
    """
    Decode a base64 string (optionally a data URI) into an image.

    Raises:
        CorruptData: If the string is not valid base64 or the image is broken.
        UnsupportedFormat: If the decoded bytes are not a recognised format.
    """
    payload = "".join(DATA_URI_PATTERN.sub("", image_string.strip()).split())
    try:
        image_data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CorruptData(f"Invalid base64 image data: {e}") from e

    return decode(image_data)


def encode_base64(img: RasterImage, format: str | None = None, settings: RasterSettings | None = None) -> str:
    """Encode an image and return it as a base64 string."""
    return base64.b64encode(encode(img, format, settings)).decode("ascii")


def fetch(
    url: str,
    timeout: float | None = None,
    session: requests.Session | None = None,
    settings: RasterSettings | None = None,
) -> bytes:
    """
    Download raw bytes from a URL. No retries.

    Args:
        url: http(s) URL.
        timeout: Seconds before giving up. Defaults to settings.fetch_timeout.
        session: Optional requests session to reuse connections.
        settings: Optional settings override.

    Returns:
        Response body.

    Raises:
        NetworkFailure: On connection errors, timeouts and non-2xx responses.
    """
    settings = settings or RasterSettings()
    http = session or requests
    headers = {"User-Agent": settings.user_agent}

    logger.debug(f"Fetching {url}")
    try:
        response = http.get(url, timeout=timeout or settings.fetch_timeout, headers=headers)
        response.raise_for_status()
    except requests.RequestException as e:
        raise NetworkFailure(url, str(e)) from e

    return response.content


def load_image(
    url: str,
    timeout: float | None = None,
    session: requests.Session | None = None,
    settings: RasterSettings | None = None,
) -> RasterImage:
    """Fetch and decode an image from a URL."""
    return decode(fetch(url, timeout=timeout, session=session, settings=settings))


def get_image_dimensions(image_data: bytes) -> tuple[int, int]:
    """
    Get dimensions of encoded image data.

    Only the header is read.

    Raises:
        UnsupportedFormat: If the bytes are not a recognised format.
    """
    try:
        img = Image.open(BytesIO(image_data))
    except UnidentifiedImageError as e:
        raise UnsupportedFormat(f"Unrecognised image data ({len(image_data)} bytes)") from e
    return (img.width, img.height)
