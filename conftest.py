"""Shared fixtures for rasterfit tests."""

import pytest
from PIL import Image

from rasterfit.geometry import SizeF


class LinearMeasurer:
    """Fake measurer whose extent grows exactly linearly with font size."""

    def __init__(self, char_width: float = 0.5, line_height: float = 1.25, padding: float = 0.0):
        self.char_width = char_width
        self.line_height = line_height
        self.padding = padding
        self.calls: list[float] = []

    def measure_text(self, text, font, size):
        self.calls.append(size)
        if not text:
            return SizeF(0.0, 0.0)
        return SizeF(self.char_width * size * len(text) + self.padding, self.line_height * size)


@pytest.fixture
def measurer():
    """Linear fake measurer (width = 0.5 * size per char, height = 1.25 * size)."""
    return LinearMeasurer()


@pytest.fixture
def solid_image():
    """Factory for solid-color RGB images."""

    def _make(width: int, height: int, color=(200, 30, 30), mode: str = "RGB"):
        return Image.new(mode, (width, height), color)

    return _make


@pytest.fixture
def gradient_image():
    """800x600 RGB image with a horizontal red and vertical green gradient."""
    img = Image.new("RGB", (800, 600))
    pixels = img.load()
    for y in range(600):
        for x in range(800):
            pixels[x, y] = (int(x / 800 * 255), int(y / 600 * 255), 120)
    return img


@pytest.fixture
def make_measurer():
    """Factory for LinearMeasurer with custom proportions."""
    return LinearMeasurer
