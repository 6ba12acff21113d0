"""
termviz command line interface.

Draws a still or animated image in the terminal using the xterm
256-color palette, or exports it to a shell script.

Supported formats:
- ✓ GIF (animated, with frame disposal)
- ✓ PNG, JPEG, BMP, WEBP and anything else Pillow can open (first frame)
"""

import argparse
import sys
from typing import List, Optional

from PIL import UnidentifiedImageError

from .config import Config
from .geometry import GeometryError
from .image import RenderOptions, TerminalImage
from .utils import print_status


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='termviz',
        description='Render images and animated GIFs in a 256-color terminal.',
    )
    parser.add_argument('image', help='Path to the image file')
    parser.add_argument(
        '-e', '--export', metavar='FILE', dest='export_filename',
        help='Export the image to a shell script instead of drawing it (e.g. for motd)',
    )
    parser.add_argument(
        '-l', '--loop', type=int, default=Config.DEFAULT_LOOP_COUNT, dest='loop_count',
        help='Number of times to play an animation; 0 renders the first picture only',
    )
    parser.add_argument(
        '-d', '--delay-multiplier', type=float, default=Config.DEFAULT_DELAY_MULTIPLIER,
        help='Speed up (<1) or slow down (>1) animations',
    )
    parser.add_argument(
        '-w', '--width', type=int, default=Config.DEFAULT_USER_WIDTH, dest='user_width',
        help='Use this width instead of the terminal width (useful over SSH)',
    )
    parser.add_argument('--progress', action='store_true', help='Show a progress bar while preparing frames')
    parser.add_argument('--debug', action='store_true', help='Print debug information to stderr')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the CLI.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)
    if args.debug:
        Config.DEBUG_MODE = True
    if args.progress:
        Config.SHOW_PROGRESS = True

    try:
        options = RenderOptions(
            export_filename=args.export_filename,
            loop_count=args.loop_count,
            delay_multiplier=args.delay_multiplier,
            user_width=args.user_width,
        )
        image = TerminalImage(args.image, options)
        image.init()
        image.draw()
    except (OSError, UnidentifiedImageError, ValueError, GeometryError) as e:
        print_status('ERROR', e)
        return 1
    except KeyboardInterrupt:
        # Leave the terminal colors in a sane state
        sys.stdout.write('\x1b[0m\n')
        return 130

    if options.export_filename:
        print_status('OK', f"Exported -> {options.export_filename}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
