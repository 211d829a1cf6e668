"""Font resolution for Pillow text rendering."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import ImageFont

from rasterfit.fonts.google import get_google_font

logger = logging.getLogger(__name__)

FONTS_DIR = Path(__file__).parent
FONT_SUFFIXES = (".ttf", ".otf")

# Font path registry: maps normalized font names to TTF/OTF files
_FONT_PATHS: dict[str, Path] = {}


def _normalize_font_name(name: str) -> str:
    """
    Normalize a font name to TitleCase convention.

    Examples:
        "iosevka-regular" → "Iosevka-Regular"
        "dejavu-sans" → "Dejavu-Sans"

    Args:
        name: Font name to normalize (can be any case)

    Returns:
        TitleCase font name
    """
    parts = name.split('-')
    return '-'.join(part.title() for part in parts)


def register_fonts(directory: Path | None = None) -> int:
    """
    Register every TTF/OTF font file found in a directory.

    Each font is registered under a TitleCase name based on its filename
    (without extension), e.g. ``dejavu-sans.ttf`` → ``Dejavu-Sans``.

    Args:
        directory: Directory to scan. Defaults to the package fonts directory.

    Returns:
        Number of fonts registered.
    """
    directory = directory or FONTS_DIR
    font_files = sorted([*directory.glob("*.ttf"), *directory.glob("*.otf")])

    if not font_files:
        logger.debug(f"No font files found in {directory}")
        return 0

    for font_path in font_files:
        font_name = _normalize_font_name(font_path.stem)
        _FONT_PATHS[font_name] = font_path
        logger.info(f"Registered font: {font_name} from {font_path.name}")

    return len(font_files)


def get_font_path(font_name: str) -> Optional[Path]:
    """
    Get the file path for a registered font.

    Args:
        font_name: Font name, any case.

    Returns:
        Path to the font file, or None if the font is not registered.
    """
    return _FONT_PATHS.get(_normalize_font_name(font_name))


@dataclass(frozen=True)
class FontFace:
    """
    A font family independent of size.

    ``path`` is None for Pillow's bundled default font. Use ``at(size)`` to get
    a sized Pillow font for measuring or drawing.
    """

    name: str
    path: Path | None = None

    @classmethod
    def default(cls) -> "FontFace":
        """Pillow's bundled scalable font."""
        return cls(name="default")

    @classmethod
    def resolve(cls, font_spec: str | Path | None) -> "FontFace":
        """
        Resolve a font specification to a FontFace.

        Resolution priority:
        1. An existing font file path
        2. A font registered with register_fonts() (case-insensitive)
        3. "Family:weight" downloaded from Google Fonts and cached
        4. A font file name Pillow can find in the system font directories
        5. Pillow's bundled default font

        Args:
            font_spec: Path, font name, "Family:weight", or None for the default.

        Returns:
            FontFace (never None).

        Raises:
            FileNotFoundError: If a .ttf/.otf file name is given but no such
                file exists (bare names fall back to the default instead).

        Examples:
            >>> FontFace.resolve("fonts/Inter-Bold.ttf")
            >>> FontFace.resolve("roboto:700")
            >>> FontFace.resolve(None)  # bundled default
        """
        if font_spec is None or str(font_spec).strip().lower() in ("", "default"):
            return cls.default()

        spec = str(font_spec).strip()

        # 1. Direct path
        candidate = Path(spec).expanduser()
        if candidate.suffix.lower() in FONT_SUFFIXES and candidate.exists():
            return cls(name=candidate.stem, path=candidate)

        # 2. Registered font
        if registered := get_font_path(spec):
            logger.debug(f"Font '{spec}' found in registry")
            return cls(name=_normalize_font_name(spec), path=registered)

        # 3. Google Fonts (weight specified)
        if ":" in spec:
            family, weight_str = spec.split(":", 1)
            try:
                weight = int(weight_str.strip())
            except ValueError:
                logger.warning(f"Invalid font weight '{weight_str}' in '{spec}', ignoring")
            else:
                logger.info(f"Font '{spec}' not found locally, trying Google Fonts...")
                font_path = get_google_font(family.strip(), weight)
                if font_path:
                    return cls(name=f"{_normalize_font_name(family.strip())}-{weight}", path=font_path)
                logger.warning(f"Could not download '{spec}' from Google Fonts")

        # 4. System font lookup by file name
        try:
            font = ImageFont.truetype(spec, 10)
        except OSError as e:
            if candidate.suffix.lower() in FONT_SUFFIXES:
                raise FileNotFoundError(f"Font file not found: {spec}") from e
        else:
            system_path = Path(font.path) if isinstance(font.path, str) else None
            if system_path is not None:
                return cls(name=system_path.stem, path=system_path)

        # 5. Fall back
        logger.info(f"Using bundled default font for '{spec}'")
        return cls.default()

    def at(self, size: float) -> ImageFont.FreeTypeFont:
        """
        Get this face at a given pixel size.

        Raises:
            OSError: If the font file cannot be read.
        """
        if self.path is None:
            return ImageFont.load_default(size=size)
        return ImageFont.truetype(str(self.path), size=size)
