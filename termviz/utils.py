"""
Console helpers shared by the termviz modules.

Status lines go to stderr so that they never interleave with the
image written to stdout.
"""

import sys
from typing import Any

from .config import Config


def safe_console_text(value: Any) -> str:
    """
    Convert arbitrary text into a form that can be safely printed to the current console.
    
    Args:
        value: Value to render as text.
    
    Returns:
        String compatible with the console encoding, with unencodable characters replaced.
    """
    if value is None:
        text = ""
    else:
        text = str(value)

    encoding = getattr(sys.stderr, "encoding", None) or "utf-8"
    try:
        return text.encode(encoding, errors="replace").decode(encoding, errors="replace")
    except LookupError:
        # Unknown console encoding
        return text.encode("utf-8", errors="replace").decode("utf-8", errors="replace")


def print_status(tag: str, message: Any) -> None:
    """Print a tagged status line (e.g. ``[OK] ...``) to stderr."""
    print(f"[{tag}] {safe_console_text(message)}", file=sys.stderr)


def print_debug(message: Any) -> None:
    """Print a ``[DEBUG]`` line when Config.DEBUG_MODE is active."""
    if Config.DEBUG_MODE:
        print_status('DEBUG', message)
