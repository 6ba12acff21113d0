"""
Configuration constants for the termviz renderer.
"""


class Config:
    """Configuration constants for the termviz renderer."""

    # Defaults for per-run options
    DEFAULT_LOOP_COUNT = 1
    DEFAULT_DELAY_MULTIPLIER = 1.0
    DEFAULT_USER_WIDTH = 0  # 0 = compute from terminal size

    # Terminal geometry
    TPUT_COMMAND = 'tput'
    TPUT_TIMEOUT = 5  # seconds
    ANIMATION_COLUMNS = 40  # looping animations don't query the column count
    PROMPT_ROWS = 1  # reserved for the shell prompt shown after the image

    # Escape sequences
    PIXEL_TEMPLATE = '\x1b[48;5;{}m \x1b[0m'
    CURSOR_UP_TEMPLATE = '\x1b[{}A'

    # One delay unit, as passed to Writer.sleep()
    DELAY_UNIT_SECONDS = 0.001

    # Script export
    SCRIPT_SHEBANG = '#!/bin/sh'
    SCRIPT_MODE = 0o755

    # Nearest-color lookups remembered by Xterm256Palette
    PALETTE_CACHE_SIZE = 4096

    # Console output
    SHOW_PROGRESS = False
    DEBUG_MODE = False
