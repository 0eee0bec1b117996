"""Command line interface: ``browser``, ``image`` and ``pipeline`` commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlsplit

from .catalog.models import MODELS
from .catalog.palettes import PALETTES
from .config import SETTINGS, configure_logging
from .errors import IOFailure, PipelineError
from .infrastructure.files import atomic_write, discard, read_text, temporary_artifact
from .infrastructure.network import FETCHER, is_url
from .pipeline import Pipeline
from .stage_config import ImageOptions
from .stages.browser import BrowserStage
from .stages.image import ImageStage


def _add_io_options(parser: argparse.ArgumentParser, input_help: str) -> None:
    parser.add_argument("-i", "--input", required=True, help=input_help)
    parser.add_argument("-o", "--output", help="Output file path (optional)")
    parser.add_argument("--model", help="Model name for automatic configuration (e.g., og_png)")


def _add_image_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--format", choices=("png", "bmp"), help="Output format")
    parser.add_argument("--width", type=int, help="Image width in pixels")
    parser.add_argument("--height", type=int, help="Image height in pixels")
    parser.add_argument("--rotation", type=int, help="Rotation in degrees (clockwise)")
    parser.add_argument("--colors", type=int, help="Number of colors for quantization")
    parser.add_argument("--bit-depth", "--bitDepth", dest="bit_depth", type=int, help="Bit depth (1, 2, 8)")
    parser.add_argument("--offset-x", "--offsetX", dest="offset_x", type=int, help="Horizontal offset in pixels")
    parser.add_argument("--offset-y", "--offsetY", dest="offset_y", type=int, help="Vertical offset in pixels")
    parser.add_argument("--dither", action="store_true", help="Enable Floyd-Steinberg dithering")
    parser.add_argument("--palette", help="Palette ID (e.g., color-6a, color-7a, bw, gray-256)")
    parser.add_argument("--colormap", help="Comma-separated hex colors (e.g., #FF0000,#00FF00,#0000FF)")


def image_options_from_args(args: argparse.Namespace) -> ImageOptions:
    return ImageOptions(
        format=args.format,
        width=args.width,
        height=args.height,
        rotation=args.rotation,
        colors=args.colors,
        bit_depth=args.bit_depth,
        offset_x=args.offset_x,
        offset_y=args.offset_y,
        dither=True if args.dither else None,
        palette=args.palette,
        colormap=args.colormap,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eink-pipeline",
        description="Render HTML and convert images for e-ink displays.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    browser = commands.add_parser("browser", help="Convert HTML content or URL to PNG using browser rendering")
    _add_io_options(browser, "Input HTML file path or URL")
    browser.add_argument("--timezone", help="Browser timezone (e.g., UTC, Europe/Berlin)")

    image = commands.add_parser("image", help="Process images for e-ink display compatibility")
    _add_io_options(image, "Input image file path or URL")
    _add_image_options(image)

    pipeline = commands.add_parser(
        "pipeline",
        help="Convert HTML content or URL to an optimized e-ink image (browser + image processing)",
    )
    _add_io_options(pipeline, "Input HTML file path or URL")
    _add_image_options(pipeline)
    pipeline.add_argument("--timezone", help="Browser timezone (e.g., UTC, Europe/Berlin)")

    commands.add_parser("models", help="List supported device models")
    commands.add_parser("palettes", help="List supported palettes")

    serve = commands.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=None)

    return parser


def html_content(source: str) -> str:
    if is_url(source):
        return FETCHER.fetch_text(source)
    return read_text(source)


def default_output_path(source: str, suffix: str) -> Path:
    if is_url(source):
        stem = Path(urlsplit(source).path).stem or "output"
        return Path.cwd() / f"{stem}{suffix}"
    path = Path(source)
    return path.with_name(f"{path.stem}{suffix}")


def run_browser(args: argparse.Namespace) -> Path:
    stage = BrowserStage().html(html_content(args.input))
    if args.model:
        stage.configure_from_model(args.model)
    if args.timezone:
        stage.timezone(args.timezone)
    stage.output_path(args.output or default_output_path(args.input, "_browser.png"))
    return stage(None)


def run_image(args: argparse.Namespace) -> Path:
    stage = ImageStage(image_options_from_args(args))
    if args.model:
        stage.configure_from_model(args.model)
    if args.output:
        stage.output_path(args.output)

    if not is_url(args.input):
        if not Path(args.input).is_file():
            raise IOFailure(f"Input file not found: {args.input}")
        return stage(Path(args.input))

    downloaded = temporary_artifact("eink_source_", Path(urlsplit(args.input).path).suffix or ".img")
    try:
        atomic_write(downloaded, FETCHER.fetch_bytes(args.input))
        return stage(downloaded)
    finally:
        discard(downloaded)


def run_pipeline(args: argparse.Namespace) -> Path:
    pipeline = Pipeline()
    if args.model:
        pipeline.model(args.model)

    browser = BrowserStage().html(html_content(args.input))
    if args.timezone:
        browser.timezone(args.timezone)
    pipeline.pipe(browser)

    image = ImageStage(image_options_from_args(args))
    if args.output:
        image.output_path(args.output)
    pipeline.pipe(image)

    return pipeline.process()


def _list_models() -> None:
    for model in MODELS.values():
        print(
            f"{model.id:<36} {model.width}x{model.height} rot={model.rotation} "
            f"colors={model.colors} bits={model.bit_depth} {model.format}"
            + (f" palette={model.palette_id}" if model.palette_id else "")
        )


def _list_palettes() -> None:
    for palette in PALETTES.values():
        detail = ",".join(palette.colors) if palette.colors else f"{palette.grays} grays"
        print(f"{palette.id:<12} {palette.name:<40} {detail}")


_COMMANDS = {
    "browser": (run_browser, "Browser rendering"),
    "image": (run_image, "Image processing"),
    "pipeline": (run_pipeline, "Pipeline processing"),
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    if args.command == "models":
        _list_models()
        return 0
    if args.command == "palettes":
        _list_palettes()
        return 0
    if args.command == "serve":
        from .app import create_app

        create_app().run(host=args.host, port=args.port or SETTINGS.port, debug=False)
        return 0

    handler, label = _COMMANDS[args.command]
    try:
        result = handler(args)
    except PipelineError as exc:
        print(f"{label} failed: {exc}", file=sys.stderr)
        return 1

    print(f"{label} completed successfully!")
    print(f"Output: {result}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
