#!/usr/bin/env python3
# ascii_frame/cli.py
"""
Entry point for ascii_frame.
Loads configuration, runs one image through the pipeline and prints it.
"""

import argparse
import logging
import sys

from PIL import Image, UnidentifiedImageError
from prompt_toolkit import print_formatted_text

from ascii_frame.canvas import Canvas
from ascii_frame.config import Config
from ascii_frame.errors import RasterError
from ascii_frame.logging_conf import setup_logging
from ascii_frame.rendering.glyphs import to_text
from ascii_frame.rendering.preview import buffer_to_ascii
from ascii_frame.rendering.renderer import to_formatted_text
from ascii_frame.version import version_info

log = logging.getLogger("ascii_frame.cli")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="ascii-frame", description="Render an image as terminal glyphs.")
    ap.add_argument("image", nargs="?", help="image file readable by Pillow")
    ap.add_argument("--config", help="config file (default: per-user JSON)")
    ap.add_argument("--width", type=int, help="output columns")
    ap.add_argument("--height", type=int, help="output rows")
    ap.add_argument("--mode", choices=("glyph", "block"))
    ap.add_argument("--palette", help="glyph ramp name")
    ap.add_argument("--kernel", choices=("sobel", "prewitt"))
    ap.add_argument("--seams", type=int, help="seams to carve after scaling")
    ap.add_argument("--no-color", action="store_true")
    ap.add_argument("--text", action="store_true", help="plain text, no styles")
    ap.add_argument("--preview", action="store_true", help="weighted-luma preview, skips the pipeline")
    ap.add_argument("-v", "--verbose", action="store_true")
    ap.add_argument("--version", action="store_true")
    return ap


def _overrides(args) -> dict:
    pipeline, render = {}, {}
    if args.width:
        pipeline["width"] = args.width
    if args.height:
        pipeline["height"] = args.height
    if args.kernel:
        pipeline["kernel"] = args.kernel
    if args.seams is not None:
        pipeline["seams"] = args.seams
    if args.mode:
        render["mode"] = args.mode
    if args.palette:
        render["palette"] = args.palette
    if args.no_color:
        render["color"] = False
    return {"pipeline": pipeline, "render": render}


def _preview(img, width: int, height: int) -> int:
    rgba = img.convert("RGBA").resize((width, height))
    print(buffer_to_ascii(rgba.tobytes(), width, height), end="")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.version:
        print(version_info())
        return 0
    if not args.image:
        build_parser().print_usage(sys.stderr)
        return 2

    cfg = Config.load(args.config, create_if_missing=False)
    cfg.update(_overrides(args))
    setup_logging(cfg, verbose=args.verbose)
    log.debug("Config overrides: %s", cfg.changed())

    try:
        with Image.open(args.image) as img:
            if args.preview:
                return _preview(img, *cfg.target_size)
            canvas = Canvas(cfg)
            raster = canvas.push_image(img)
    except (OSError, UnidentifiedImageError) as e:
        log.error("Cannot read %s: %s", args.image, e)
        return 1
    except RasterError as e:
        log.error("Pipeline failed: %s", e)
        return 2

    if args.text or not sys.stdout.isatty():
        print(to_text(raster))
    else:
        print_formatted_text(to_formatted_text(canvas.frame()))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
