"""Fetch TrueType files from Google Fonts into a per-user cache."""

import logging
import re
from pathlib import Path
from typing import Optional

import requests

logger = logging.getLogger(__name__)

CACHE_DIR = Path.home() / ".cache" / "rasterfit" / "fonts"

# The legacy v1 endpoint serves TrueType sources to non-browser clients
CSS_URL = "https://fonts.googleapis.com/css?family={family}:{weight}&display=swap"

# url(...) optionally followed by format('...')
_SRC_PATTERN = re.compile(r"url\(\s*['\"]?([^'\")\s]+)['\"]?\s*\)(?:\s*format\(\s*['\"]([\w-]+)['\"]\s*\))?")


def get_google_font(
    family: str,
    weight: int = 400,
    cache_dir: Path | None = None,
    session: requests.Session | None = None,
) -> Optional[Path]:
    """
    Return a cached TTF for ``family`` at ``weight``, downloading it on first use.

    Download problems are logged and reported as None; ``FontFace.resolve``
    then moves on to the next lookup step.

    Args:
        family: Google Fonts family, spaces allowed ("Roboto Slab").
        weight: Numeric weight, 100-900.
        cache_dir: Where cached files live. Defaults to ~/.cache/rasterfit/fonts.
        session: HTTP session to use instead of the requests module.

    Returns:
        Cached file path, or None.
    """
    cache_dir = cache_dir or CACHE_DIR
    cache_path = cache_dir / f"{family.replace(' ', '')}-{weight}.ttf"

    if cache_path.exists():
        logger.info(f"Using cached Google Font: {cache_path.name}")
        return cache_path

    http = session or requests
    css_url = CSS_URL.format(family=family.replace(" ", "+"), weight=weight)

    try:
        logger.info(f"Downloading Google Font: {family} (weight {weight})")
        css_response = http.get(css_url, timeout=10)
        css_response.raise_for_status()

        ttf_url = _extract_font_url_from_css(css_response.text)
        if ttf_url is None:
            logger.error(f"No TrueType source in Google Fonts CSS for {family}")
            return None

        font_response = http.get(ttf_url, timeout=30)
        font_response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Failed to download Google Font {family} (weight {weight}): {e}")
        return None

    cache_dir.mkdir(parents=True, exist_ok=True)
    cache_path.write_bytes(font_response.content)
    logger.info(f"Downloaded and cached Google Font: {cache_path.name}")
    return cache_path


def _extract_font_url_from_css(css_content: str) -> Optional[str]:
    """First source declared as truetype, or failing that the first .ttf URL."""
    sources = _SRC_PATTERN.findall(css_content)

    for url, fmt in sources:
        if fmt.lower() == "truetype":
            return url

    return next((url for url, _ in sources if url.lower().endswith(".ttf")), None)
