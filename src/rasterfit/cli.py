"""CLI interface for rasterfit."""

import logging
from pathlib import Path

import click
from PIL import Image

from rasterfit.config import DEFAULT_CONFIG_NAME, RasterSettings, load_config
from rasterfit.errors import RasterFitError
from rasterfit.fonts import FontFace, register_fonts
from rasterfit.geometry import FitPolicy, Point, Rect, Size
from rasterfit.render.codec import decode, encode, load_image
from rasterfit.render.compositor import (
    crop,
    crop_and_fill_compose,
    layer,
    letterbox_compose,
    overlay_text,
    resize_by_height_compose,
    resize_compose,
)
from rasterfit.types import RasterImage


def _parse_ints(value: str, count: int, separators: str) -> list[int]:
    normalized = value.lower()
    for sep in separators:
        normalized = normalized.replace(sep, ",")
    parts = [p.strip() for p in normalized.split(",")]
    if len(parts) != count:
        raise ValueError(f"expected {count} values")
    return [int(p) for p in parts]


def _size_option(ctx: click.Context, param: click.Parameter, value: str | None) -> Size | None:
    if value is None:
        return None
    try:
        width, height = _parse_ints(value, 2, "x")
    except ValueError:
        raise click.BadParameter(f"'{value}' is not WIDTHxHEIGHT (e.g. 400x300)")
    return Size(width, height)


def _point_option(ctx: click.Context, param: click.Parameter, value: str | None) -> tuple[int, int] | None:
    if value is None:
        return None
    try:
        x, y = _parse_ints(value, 2, "")
    except ValueError:
        raise click.BadParameter(f"'{value}' is not X,Y (e.g. 120,40)")
    return (x, y)


def _rect_option(ctx: click.Context, param: click.Parameter, value: str) -> Rect:
    try:
        x, y, width, height = _parse_ints(value, 4, "")
    except ValueError:
        raise click.BadParameter(f"'{value}' is not X,Y,WIDTH,HEIGHT (e.g. 0,0,200,100)")
    return Rect(x, y, width, height)


def _read_source(source: str, settings: RasterSettings) -> RasterImage:
    """Load an image from a local path or an http(s) URL."""
    if source.startswith(("http://", "https://")):
        return load_image(source, settings=settings)
    return decode(Path(source).read_bytes())


def _write_output(image: RasterImage, output: Path, settings: RasterSettings) -> None:
    """Encode using the format implied by the output suffix."""
    image_format = Image.registered_extensions().get(output.suffix.lower(), settings.default_format)
    output.write_bytes(encode(image, image_format, settings))
    click.echo(f"✓ Saved {image.width}x{image.height} image to: {output}")


def _fail(error: Exception) -> None:
    click.echo(f"Error: {error}", err=True)
    raise SystemExit(1)


@click.group()
@click.version_option(package_name="rasterfit")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help=f"Path to settings TOML file. Defaults to ./{DEFAULT_CONFIG_NAME} when present.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config: Path | None, verbose: bool) -> None:
    """Crop, resize, letterbox, caption and layer raster images."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    try:
        if config is not None:
            settings = load_config(config)
        elif (Path.cwd() / DEFAULT_CONFIG_NAME).exists():
            settings = load_config()
        else:
            settings = RasterSettings()
    except (OSError, ValueError) as e:
        _fail(e)

    # Register fonts shipped in the package fonts directory
    register_fonts()
    ctx.obj = settings


@main.command()
@click.argument("source")
@click.pass_obj
def info(settings: RasterSettings, source: str) -> None:
    """Print format, size and mode of SOURCE (path or URL)."""
    try:
        image = _read_source(source, settings)
    except (RasterFitError, OSError) as e:
        _fail(e)
    click.echo(f"{image.format or 'unknown'} {image.width}x{image.height} {image.mode}")


@main.command(name="crop")
@click.argument("source")
@click.argument("output", type=click.Path(path_type=Path))
@click.option("--rect", required=True, callback=_rect_option, help="Region as X,Y,WIDTH,HEIGHT.")
@click.pass_obj
def crop_command(settings: RasterSettings, source: str, output: Path, rect: Rect) -> None:
    """Extract a region of SOURCE without scaling."""
    try:
        _write_output(crop(_read_source(source, settings), rect), output, settings)
    except (RasterFitError, OSError) as e:
        _fail(e)


@main.command()
@click.argument("source")
@click.argument("output", type=click.Path(path_type=Path))
@click.option("--size", required=True, callback=_size_option, help="Output size as WIDTHxHEIGHT.")
@click.pass_obj
def fill(settings: RasterSettings, source: str, output: Path, size: Size) -> None:
    """Scale SOURCE to cover SIZE exactly, centre-cropping the overflow."""
    try:
        _write_output(crop_and_fill_compose(_read_source(source, settings), size, settings), output, settings)
    except (RasterFitError, OSError) as e:
        _fail(e)


@main.command(name="resize")
@click.argument("source")
@click.argument("output", type=click.Path(path_type=Path))
@click.option("--size", required=True, callback=_size_option, help="Target size as WIDTHxHEIGHT.")
@click.option(
    "--policy",
    type=click.Choice(["smallest", "largest"], case_sensitive=False),
    default="smallest",
    help="'smallest' fits inside (no crop), 'largest' covers (crop). Default: smallest.",
)
@click.option("--letterbox", is_flag=True, help="Pad a 'smallest' fit out to the full target size.")
@click.option("--background", type=str, help="Letterbox padding color (name or #rrggbb).")
@click.pass_obj
def resize_command(
    settings: RasterSettings,
    source: str,
    output: Path,
    size: Size,
    policy: str,
    letterbox: bool,
    background: str | None,
) -> None:
    """Resize SOURCE to SIZE preserving its aspect ratio."""
    fit_policy = FitPolicy(policy.lower())
    if letterbox and fit_policy is not FitPolicy.FILL_SMALLEST:
        _fail(ValueError("--letterbox only applies to --policy smallest"))

    try:
        image = _read_source(source, settings)
        if letterbox:
            result = letterbox_compose(image, size, background, settings)
        else:
            result = resize_compose(image, size, fit_policy, settings)
        _write_output(result, output, settings)
    except (RasterFitError, OSError) as e:
        _fail(e)


@main.command(name="fit-height")
@click.argument("source")
@click.argument("output", type=click.Path(path_type=Path))
@click.option("--height", required=True, type=int, help="Output height in pixels.")
@click.pass_obj
def fit_height(settings: RasterSettings, source: str, output: Path, height: int) -> None:
    """Scale SOURCE to HEIGHT keeping its aspect ratio."""
    try:
        _write_output(resize_by_height_compose(_read_source(source, settings), height, settings), output, settings)
    except (RasterFitError, OSError) as e:
        _fail(e)


@main.command()
@click.argument("source")
@click.argument("output", type=click.Path(path_type=Path))
@click.argument("text")
@click.option("--center", callback=_point_option, help="Centre of the text area as X,Y. Default: image centre.")
@click.option("--box", callback=_size_option, help="Text area as WIDTHxHEIGHT. Default: whole image.")
@click.option("--font", "font_spec", type=str, help="Font file, registered name, or Google 'Family:weight'.")
@click.option("--color", type=str, default="white", help="Text color (default: white).")
@click.option("--debug-box", is_flag=True, help="Outline the text area in yellow.")
@click.pass_obj
def text(
    settings: RasterSettings,
    source: str,
    output: Path,
    text: str,
    center: tuple[int, int] | None,
    box: Size | None,
    font_spec: str | None,
    color: str,
    debug_box: bool,
) -> None:
    """Draw TEXT onto SOURCE, sized to fill the text area."""
    try:
        image = _read_source(source, settings)
        if image.mode not in ("RGB", "RGBA"):
            image = image.convert("RGBA")

        area = box or Size(image.width, image.height)
        cx, cy = center or (image.width // 2, image.height // 2)

        overlay_text(
            image,
            Point(cx, cy),
            area,
            text,
            FontFace.resolve(font_spec),
            color,
            draw_bounding_box=debug_box or None,
            settings=settings,
        )
        _write_output(image, output, settings)
    except (RasterFitError, OSError) as e:
        _fail(e)


@main.command(name="layer")
@click.argument("background")
@click.argument("foreground")
@click.argument("output", type=click.Path(path_type=Path))
@click.option("--at", "position", callback=_point_option, default="0,0", help="Top-left of FOREGROUND as X,Y.")
@click.pass_obj
def layer_command(
    settings: RasterSettings,
    background: str,
    foreground: str,
    output: Path,
    position: tuple[int, int],
) -> None:
    """Draw FOREGROUND onto BACKGROUND at its native size."""
    try:
        base = _read_source(background, settings)
        top = _read_source(foreground, settings)
        x, y = position
        _write_output(layer(base, top, x, y, settings), output, settings)
    except (RasterFitError, OSError) as e:
        _fail(e)


if __name__ == "__main__":
    main()
