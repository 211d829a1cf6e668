#!/usr/bin/env python3
"""
Simple Example: Square Thumbnail with a Caption

Fetches an image, centre-crops it to a square and writes a fitted caption.
"""

from rasterfit import FontFace, Point, Size, crop_and_fill_compose, encode, load_image, overlay_text

# Replace with your own image URL
cover = load_image("https://picsum.photos/seed/rasterfit/1200/800")

# Exactly 600x600, overflow centre-cropped
thumb = crop_and_fill_compose(cover, Size(600, 600))

# Caption fills a 500x90 box near the bottom (drawn in place)
overlay_text(
    thumb,
    Point(300, 520),
    Size(500, 90),
    "Neon Nights",
    FontFace.resolve("Orbitron:700"),
    (255, 255, 255),
)

with open("thumbnail.png", "wb") as f:
    f.write(encode(thumb, "PNG"))

print("✓ Thumbnail saved to: thumbnail.png")
