"""Command-line entry point for PixelShade.

This tool loads an image, pixelates it into flat nearest-neighbor blocks,
applies contrast, brightness and a soft drop shadow, and saves the result
as a PNG.

All processing occurs on NumPy arrays; Pillow is used only for
loading and saving.

Usage example:
    pixelshade -i input.png -o output.png --pixel 8 --contrast 1.2 --shadow 6
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from .errors import ImageLoadError, ParameterError
from .params import (
    BRIGHTNESS_RANGE,
    CONTRAST_RANGE,
    DEFAULT_PARAMETERS,
    PIXEL_SIZE_RANGE,
    SHADOW_RADIUS_RANGE,
    RenderParameters,
)
from .renderer import render
from .utils.loader import load_image


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    argv : list[str] | None
        Optional list of arguments for testing. If None, uses sys.argv.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        prog="pixelshade",
        description=(
            "Turn an image into block pixel art with brightness, contrast "
            "and drop-shadow controls."
        ),
    )

    parser.add_argument("-i", "--input", required=True, help="Path to input image file")
    parser.add_argument("-o", "--output", required=True, help="Path to output PNG file")

    parser.add_argument(
        "--pixel",
        type=int,
        default=DEFAULT_PARAMETERS.pixel_size,
        help=(
            "Block edge length in source pixels, %d..%d. 0 keeps the original "
            "resolution." % PIXEL_SIZE_RANGE
        ),
    )
    parser.add_argument(
        "--brightness",
        type=float,
        default=DEFAULT_PARAMETERS.brightness,
        help="Brightness multiplier, %.1f..%.1f." % BRIGHTNESS_RANGE,
    )
    parser.add_argument(
        "--contrast",
        type=float,
        default=DEFAULT_PARAMETERS.contrast,
        help="Contrast multiplier around mid-grey, %.1f..%.1f." % CONTRAST_RANGE,
    )
    parser.add_argument(
        "--shadow",
        type=int,
        default=DEFAULT_PARAMETERS.shadow_radius,
        help="Drop-shadow blur radius in pixels, %d..%d. 0 disables it." % SHADOW_RADIUS_RANGE,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return parser.parse_args(argv)


def params_from_args(ns: argparse.Namespace) -> RenderParameters:
    """Build render parameters from parsed arguments, rejecting bad values."""
    params = RenderParameters(
        pixel_size=ns.pixel,
        brightness=ns.brightness,
        contrast=ns.contrast,
        shadow_radius=ns.shadow,
    )
    params.validate()
    return params


def validate_args(ns: argparse.Namespace) -> None:
    """Validate argument values and raise ValueError for invalid inputs.

    Parameters
    ----------
    ns : argparse.Namespace
        Parsed CLI arguments.
    """
    params_from_args(ns)
    if not Path(ns.input).exists():
        raise ValueError(f"Input file not found: {ns.input}")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry function for the CLI.

    Parameters
    ----------
    argv : list[str] | None
        Optional list of arguments for testing.

    Returns
    -------
    int
        Exit status code (0 for success, non-zero for failure).
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        validate_args(args)
    except (ParameterError, ValueError) as e:
        print(f"Argument error: {e}")
        return 2

    try:
        source = load_image(args.input)
    except ImageLoadError as e:
        print(f"Load error: {e}")
        return 1

    out = render(source, params_from_args(args))
    out.save(args.output)
    print(f"Wrote {out.width}x{out.height} image to {args.output}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
