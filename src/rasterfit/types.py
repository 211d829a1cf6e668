"""Type aliases used across the rasterfit package."""

from typing import Literal, Tuple, Union

from PIL import Image

# Raster handle (Pillow image, owned by the caller)
RasterImage = Image.Image

# Color types (Pillow accepts 0-255 tuples or CSS-style names)
RGBColor = Tuple[int, int, int]
RGBAColor = Tuple[int, int, int, int]
Color = Union[str, RGBColor, RGBAColor]

# Resampling filter names, mapped to Image.Resampling by the draw surface
ResampleName = Literal["nearest", "bilinear", "bicubic", "lanczos"]

# Font fitting strategy: single linear probe or binary search
FontFitMode = Literal["linear", "search"]

# Fit policy names accepted on the command line
PolicyName = Literal["smallest", "largest"]
