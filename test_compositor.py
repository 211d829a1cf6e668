"""
Tests for the Pillow compositor: crop, fill, resize, letterbox, text and layering
"""

import pytest
from PIL import Image, ImageChops

from rasterfit.config import RasterSettings
from rasterfit.errors import InvalidDimension, MeasurementFailure, OutOfBounds
from rasterfit.fonts import FontFace
from rasterfit.geometry import FitPolicy, Point, Rect, Size
from rasterfit.render.compositor import (
    crop,
    crop_and_fill_compose,
    layer,
    layout_text,
    letterbox_compose,
    overlay_text,
    resize_by_height_compose,
    resize_compose,
)
from rasterfit.render.surface import PillowTextMeasurer, begin_draw

RED = (200, 30, 30)
BLUE = (20, 40, 220)
BLACK = (0, 0, 0)


class TestCrop:
    """Tests for crop"""

    def test_extracts_region(self, gradient_image):
        result = crop(gradient_image, Rect(100, 50, 200, 120))

        assert result.size == (200, 120)
        assert result.getpixel((0, 0)) == gradient_image.getpixel((100, 50))
        assert result is not gradient_image

    def test_full_image_is_allowed(self, gradient_image):
        assert crop(gradient_image, Rect(0, 0, 800, 600)).size == (800, 600)

    @pytest.mark.parametrize(
        "rect",
        [Rect(700, 0, 200, 100), Rect(0, 550, 100, 100), Rect(-1, 0, 10, 10), Rect(0, -5, 10, 10)],
    )
    def test_out_of_bounds_is_never_clamped(self, gradient_image, rect):
        with pytest.raises(OutOfBounds):
            crop(gradient_image, rect)

    def test_empty_rect(self, gradient_image):
        with pytest.raises(InvalidDimension):
            crop(gradient_image, Rect(0, 0, 0, 10))


class TestCropAndFillCompose:
    """Tests for crop_and_fill_compose"""

    def test_output_is_exactly_target(self, gradient_image):
        result = crop_and_fill_compose(gradient_image, Size(400, 400))

        assert result.size == (400, 400)
        assert result.mode == "RGB"

    def test_source_is_untouched(self, gradient_image):
        before = gradient_image.copy()
        crop_and_fill_compose(gradient_image, Size(400, 400))

        assert ImageChops.difference(before, gradient_image).getbbox() is None

    def test_crop_is_centred(self, solid_image):
        """Blue centre stripe stays centred after the horizontal crop"""
        source = solid_image(800, 600, RED)
        source.paste(BLUE, (350, 0, 450, 600))

        result = crop_and_fill_compose(source, Size(400, 400))

        assert result.getpixel((200, 200)) == BLUE
        assert result.getpixel((5, 200)) == RED
        assert result.getpixel((394, 200)) == RED

    def test_keeps_transparency(self, solid_image):
        source = solid_image(100, 50, (10, 20, 30, 0), mode="RGBA")
        result = crop_and_fill_compose(source, Size(40, 40))

        assert result.mode == "RGBA"
        assert result.getpixel((20, 20))[3] == 0

    def test_palette_source_is_converted(self, gradient_image):
        source = gradient_image.convert("P")
        assert crop_and_fill_compose(source, Size(64, 64)).mode == "RGB"


class TestResizeCompose:
    """Tests for resize_compose and resize_by_height_compose"""

    def test_fill_smallest_shrinks_canvas_to_content(self, solid_image):
        result = resize_compose(solid_image(400, 300), Size(800, 800), FitPolicy.FILL_SMALLEST)

        assert result.size == (800, 600)
        assert result.getpixel((799, 599)) == RED

    def test_fill_largest_fills_target(self, solid_image):
        result = resize_compose(solid_image(400, 300), Size(800, 800), FitPolicy.FILL_LARGEST)

        assert result.size == (800, 800)
        assert result.getpixel((0, 0)) == RED
        assert result.getpixel((799, 799)) == RED

    def test_resample_setting_is_used(self, gradient_image):
        settings = RasterSettings(resample="nearest")
        result = resize_compose(gradient_image, Size(80, 80), FitPolicy.FILL_SMALLEST, settings)

        assert result.size == (80, 60)

    def test_by_height(self, gradient_image):
        result = resize_by_height_compose(gradient_image, 300)

        assert result.size == (400, 300)

    def test_by_height_invalid(self, gradient_image):
        with pytest.raises(InvalidDimension):
            resize_by_height_compose(gradient_image, 0)


class TestLetterboxCompose:
    """Tests for letterbox_compose"""

    def test_pads_with_background(self, solid_image):
        result = letterbox_compose(solid_image(400, 300), Size(800, 800), background="black")

        assert result.size == (800, 800)
        assert result.mode == "RGB"
        assert result.getpixel((400, 50)) == BLACK
        assert result.getpixel((400, 750)) == BLACK
        assert result.getpixel((400, 400)) == RED

    def test_default_padding_is_transparent(self, solid_image):
        result = letterbox_compose(solid_image(300, 400), Size(800, 800))

        assert result.mode == "RGBA"
        assert result.getpixel((20, 400))[3] == 0
        assert result.getpixel((400, 400)) == RED + (255,)

    def test_exact_fit_has_no_padding(self, solid_image):
        result = letterbox_compose(solid_image(200, 100), Size(400, 200), background="black")

        assert result.getpixel((0, 0)) == RED
        assert result.getpixel((399, 199)) == RED


    def test_grayscale_source_with_color_background(self):
        source = Image.new("L", (40, 20), 128)

        result = letterbox_compose(source, Size(40, 40), background=(255, 0, 0))

        assert result.mode == "RGB"
        assert result.getpixel((20, 2)) == (255, 0, 0)
        assert result.getpixel((20, 20)) == (128, 128, 128)

    def test_grayscale_source_keeps_grayscale_for_named_background(self):
        result = letterbox_compose(Image.new("L", (40, 20), 128), Size(40, 40), background="black")

        assert result.mode == "L"
        assert result.getpixel((20, 2)) == 0


class TestOverlayText:
    """Tests for overlay_text"""

    def test_draws_in_place_and_returns_same_image(self, solid_image):
        image = solid_image(400, 200, BLACK)
        before = image.copy()

        result = overlay_text(image, Point(200, 100), Size(300, 80), "Hello", FontFace.default(), "white")

        assert result is image
        changed = ImageChops.difference(before, image).getbbox()
        assert changed is not None

    def test_text_is_centred_on_layout(self, solid_image):
        """Drawn glyphs sit inside the measured box, centred on the area"""
        image = solid_image(400, 200, BLACK)
        before = image.copy()
        center, area = Point(200, 100), Size(300, 80)
        layout = layout_text(center, area, "Hello", FontFace.default(), PillowTextMeasurer())

        overlay_text(image, center, area, "Hello", FontFace.default(), "white")

        left, top, right, bottom = ImageChops.difference(before, image).getbbox()
        origin, measured = layout.draw_origin, layout.measured_size
        assert origin.x + measured.width / 2 == pytest.approx(center.x)
        assert left >= origin.x - 1
        assert right <= origin.x + measured.width + 1
        assert top >= origin.y - 1
        assert bottom <= origin.y + measured.height + 1
        # Side bearings only shift the ink by a few pixels
        assert (left + right) / 2 == pytest.approx(center.x, abs=0.05 * layout.font_size + 2)
        assert image.getpixel((2, 2)) == BLACK
        assert image.getpixel((397, 197)) == BLACK

    def test_debug_bounding_box(self, solid_image):
        image = solid_image(400, 200, BLACK)

        overlay_text(
            image, Point(200, 100), Size(300, 80), "Hi", FontFace.default(), "white", draw_bounding_box=True
        )

        # Box spans x 50..349, y 60..139
        assert image.getpixel((50, 100)) == (255, 255, 0)
        assert image.getpixel((349, 100)) == (255, 255, 0)

    def test_debug_box_from_settings(self, solid_image):
        image = solid_image(400, 200, BLACK)
        settings = RasterSettings(debug_bounding_box=True)

        overlay_text(image, Point(200, 100), Size(300, 80), "Hi", FontFace.default(), "white", settings=settings)

        assert image.getpixel((50, 100)) == (255, 255, 0)

    def test_empty_text_fails(self, solid_image):
        with pytest.raises(MeasurementFailure):
            overlay_text(solid_image(100, 100), Point(50, 50), Size(80, 20), "", FontFace.default(), "white")

    def test_layout_fits_pillow_measurement(self):
        """The searched size really fits when measured by Pillow"""
        settings = RasterSettings(font_fit="search")
        measurer = PillowTextMeasurer()
        area = Size(240, 60)

        layout = layout_text(Point(120, 30), area, "Caption", FontFace.default(), measurer, settings)

        assert layout.measured_size.width <= area.width
        assert layout.measured_size.height <= area.height


class TestLayer:
    """Tests for layer"""

    def test_draws_foreground_at_position(self, solid_image):
        background = solid_image(100, 100, RED)
        foreground = solid_image(20, 20, BLUE)

        result = layer(background, foreground, 10, 10)

        assert result is background
        assert background.getpixel((15, 15)) == BLUE
        assert background.getpixel((5, 5)) == RED
        assert background.getpixel((30, 30)) == RED

    def test_respects_foreground_alpha(self, solid_image):
        background = solid_image(50, 50, RED)
        foreground = Image.new("RGBA", (20, 20), (0, 0, 0, 0))
        foreground.paste((20, 40, 220, 255), (0, 0, 10, 20))

        layer(background, foreground, 0, 0)

        assert background.getpixel((5, 5)) == BLUE
        assert background.getpixel((15, 5)) == RED

    def test_overflow_is_clipped(self, solid_image):
        background = solid_image(100, 100, RED)

        layer(background, solid_image(20, 20, BLUE), 90, -10)

        assert background.size == (100, 100)
        assert background.getpixel((95, 5)) == BLUE
        assert background.getpixel((85, 5)) == RED

    def test_not_scaled(self, solid_image):
        background = solid_image(100, 100, RED)

        layer(background, solid_image(10, 10, BLUE), 0, 0)

        assert background.getpixel((9, 9)) == BLUE
        assert background.getpixel((10, 10)) == RED


    def test_palette_background_keeps_colors(self, solid_image):
        background = solid_image(50, 50, RED).quantize(4)

        result = layer(background, solid_image(10, 10, BLUE), 0, 0)

        assert result is background
        assert background.mode == "P"
        rgb = background.convert("RGB")
        assert rgb.getpixel((5, 5)) == BLUE
        assert rgb.getpixel((30, 30)) == RED

    def test_palette_background_with_alpha_foreground(self, solid_image):
        background = solid_image(50, 50, RED).quantize(4)
        foreground = Image.new("RGBA", (20, 20), (0, 0, 0, 0))
        foreground.paste((20, 40, 220, 255), (0, 0, 10, 20))

        layer(background, foreground, 0, 0)

        rgb = background.convert("RGB")
        assert rgb.getpixel((5, 5)) == BLUE
        assert rgb.getpixel((15, 5)) == RED


class TestDrawContext:
    """Tests for the scoped draw surface"""

    def test_released_after_block(self, solid_image):
        with begin_draw(solid_image(10, 10)) as ctx:
            ctx.draw_rect(Rect(0, 0, 10, 10))

        with pytest.raises(RuntimeError):
            ctx.draw_rect(Rect(0, 0, 10, 10))

    def test_released_on_error(self, solid_image):
        with pytest.raises(ValueError):
            with begin_draw(solid_image(10, 10)) as ctx:
                raise ValueError("boom")

        with pytest.raises(RuntimeError):
            ctx.draw_rect(Rect(0, 0, 5, 5))
