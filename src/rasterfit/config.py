"""Configuration loading and validation."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

from rasterfit.types import FontFitMode, ResampleName

DEFAULT_CONFIG_NAME = "rasterfit.toml"


class RasterSettings(BaseModel):
    """
    Tunables for resampling, text fitting, encoding and fetching.

    All parameters have sensible defaults. Override only what you need using
    Pydantic's model_copy():

        base = RasterSettings()
        sharp = base.model_copy(update={"resample": "lanczos"})
    """

    # ========================================================================
    # Drawing
    # ========================================================================
    resample: ResampleName = "bicubic"
    """Filter used for every scaled image draw. Bicubic matches the expected quality."""

    letterbox_color: tuple[int, int, int, int] = (0, 0, 0, 0)
    """Padding color for letterbox_compose as RGBA 0-255. Default: transparent."""

    debug_bounding_box: bool = False
    """Outline the text bounding area in yellow when overlaying text."""

    # ========================================================================
    # Text fitting
    # ========================================================================
    probe_font_size: float = Field(default=10.0, gt=0)
    """Reference size measured once before scaling linearly to the fitted size."""

    text_height_compression: float = Field(default=0.75, gt=0, le=1.0)
    """Empirical factor applied to measured text height before centring."""

    font_fit: FontFitMode = "linear"
    """"linear" for the single-probe estimate, "search" for binary search."""

    font_search_tolerance: float = Field(default=0.25, gt=0)
    """Stop the binary search once the size interval is narrower than this."""

    # ========================================================================
    # Codec / network
    # ========================================================================
    default_format: str = "PNG"
    """Format used by encode() when none is given."""

    fetch_timeout: float = Field(default=10.0, gt=0)
    """Timeout in seconds for URL fetches."""

    user_agent: str = "rasterfit/0.1"
    """User-Agent header sent with URL fetches."""


def load_config(config_path: Path | None = None) -> RasterSettings:
    """
    Load settings from a TOML file.

    Args:
        config_path: Path to config file. If None, looks for rasterfit.toml in current directory.

    Returns:
        Validated RasterSettings object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If a value is invalid.
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_NAME

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        config_dict = tomllib.load(f)

    # Settings may live at top level or under a [rasterfit] table
    return RasterSettings(**config_dict.get("rasterfit", config_dict))
