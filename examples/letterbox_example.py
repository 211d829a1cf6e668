#!/usr/bin/env python3
"""
Letterbox Example: Fit, Pad and Watermark

Shows the three resize flavours side by side and layers a logo on top.
"""

from PIL import Image

from rasterfit import (
    FitPolicy,
    RasterSettings,
    Size,
    layer,
    letterbox_compose,
    resize_by_height_compose,
    resize_compose,
)

settings = RasterSettings(resample="lanczos")

source = Image.open("photo.jpg")  # Replace with your image
target = Size(800, 800)

# Fits inside 800x800; one side may be shorter
fitted = resize_compose(source, target, FitPolicy.FILL_SMALLEST, settings)
print(f"FILL_SMALLEST: {fitted.size}")

# Covers 800x800; overflow cropped
covered = resize_compose(source, target, FitPolicy.FILL_LARGEST, settings)
print(f"FILL_LARGEST:  {covered.size}")

# Fits inside and pads to exactly 800x800
boxed = letterbox_compose(source, target, background="black", settings=settings)
print(f"Letterbox:     {boxed.size}")

# Small logo, 64px tall, layered into the corner (mutates boxed)
logo = resize_by_height_compose(Image.open("logo.png"), 64, settings)
layer(boxed, logo, boxed.width - logo.width - 16, 16)

boxed.save("boxed.png")
print("✓ Saved boxed.png")
