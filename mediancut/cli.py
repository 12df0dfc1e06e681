# mediancut/cli.py
import argparse
import logging
import re
import sys
from typing import Optional

from mediancut.config import DEFAULT_PALETTE_COUNT, MAX_PALETTE, MIN_PALETTE, PROG
from mediancut.errors import ImageDecodeError, ImageEncodeError
from mediancut.io_utils import load_image_rgba, pixels_to_image, save_image_rgba
from mediancut.quantization.median_cut import median_cut

_DECIMAL = re.compile(r"\+?[0-9]+")

def palette_count_arg(text: str) -> int:
    """Parse -p: a plain decimal integer within the palette limits."""
    if not _DECIMAL.fullmatch(text):
        raise argparse.ArgumentTypeError(f"invalid number of colors: '{text}'")
    n = int(text)
    if not MIN_PALETTE <= n <= MAX_PALETTE:
        raise argparse.ArgumentTypeError(
            f"number of colors must be between {MIN_PALETTE} and {MAX_PALETTE}, got {n}"
        )
    return n

def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description=(
            "Performs color quantization on the given image using a slightly modified\n"
            "version of the median cut algorithm."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mediancut photo.png out.png
  mediancut -p 16 photo.png out.png --report
        """,
    )
    parser.add_argument("input", metavar="INPUT", help="Input image file path")
    parser.add_argument("output", metavar="OUTPUT", help="Output file path (always written as PNG)")
    parser.add_argument(
        "-p",
        dest="palette_count",
        metavar="N",
        type=palette_count_arg,
        default=DEFAULT_PALETTE_COUNT,
        help=f"Number of colors in the output image (default {DEFAULT_PALETTE_COUNT})",
    )
    parser.add_argument(
        "--report", action="store_true", help="Print palette size, MSE and SSIM of the result"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log tree construction")
    return parser

def fatal(message: str) -> int:
    print(f"{PROG}: {message}", file=sys.stderr)
    return 1

def main(args: Optional[list] = None) -> int:
    """
    Run the CLI on `args` (defaults to sys.argv[1:]).
    Returns 0 on success and 1 on decode/encode/memory failure; usage errors
    exit through argparse with status 2.
    """
    parsed = create_parser().parse_args(args)

    if parsed.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        w, h, pixels = load_image_rgba(parsed.input)
    except ImageDecodeError as e:
        return fatal(str(e))

    original = pixels.copy() if parsed.report else None
    try:
        median_cut(parsed.palette_count, pixels, w, h)
    except MemoryError:
        return fatal("no memory")

    try:
        written = save_image_rgba(parsed.output, w, h, pixels)
    except ImageEncodeError as e:
        return fatal(str(e))

    if parsed.report:
        # scikit-image is slow to import
        from mediancut.metrics.similarity import quality_report

        stats = quality_report(pixels_to_image(original, w, h), pixels_to_image(pixels, w, h))
        print(f"  Output saved: {written}")
        print(f"  Colors: {stats['palette_size']} (requested {parsed.palette_count})")
        print(f"  MSE: {stats['mse']}")
        print(f"  SSIM: {stats['ssim']}")

    return 0

def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
