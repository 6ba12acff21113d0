"""
Terminal-size-aware scale computation.

The resolver reconciles the intrinsic image size, an optional user
width and the terminal viewport into the pixel grid the frames are
resized to. Terminal rows/columns come from a GeometryProvider so that
tests can supply fixed values instead of spawning ``tput``.
"""

import math
import subprocess
from abc import ABC, abstractmethod
from typing import List, Tuple

from .config import Config
from .utils import print_debug


class GeometryError(RuntimeError):
    """Raised when the terminal geometry can't be determined."""


class GeometryProvider(ABC):
    """Source of the terminal viewport size."""

    @abstractmethod
    def rows(self) -> int:
        """Number of text rows in the terminal."""

    @abstractmethod
    def columns(self) -> int:
        """Number of text columns in the terminal."""


class TputGeometry(GeometryProvider):
    """Queries the terminal size by running ``tput lines`` / ``tput cols``."""

    def __init__(self, command: str = None, timeout: float = None):
        self._command = command or Config.TPUT_COMMAND
        self._timeout = timeout if timeout is not None else Config.TPUT_TIMEOUT

    def rows(self) -> int:
        return self._query('lines')

    def columns(self) -> int:
        return self._query('cols')

    def _query(self, capability: str) -> int:
        """
        Run tput for a single capability and parse its output.

        Args:
            capability: tput capability name ('lines' or 'cols')

        Returns:
            The integer value reported by tput

        Raises:
            GeometryError: If tput fails or prints anything but a single integer
        """
        try:
            result = subprocess.run(
                [self._command, capability],
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise GeometryError(f"couldn't determine {capability}: {e}") from e

        output: List[str] = result.stdout.splitlines()
        if len(output) != 1:
            raise GeometryError(f"unexpected output when determining {capability}")
        try:
            value = int(output[0].strip())
        except ValueError as e:
            raise GeometryError(f"couldn't parse {capability}: {e}") from e

        print_debug(f"tput {capability} = {value}")
        return value


def resolve_geometry(
    image_width: int,
    image_height: int,
    user_width: int = 0,
    provider: GeometryProvider = None,
    query_columns: bool = True,
) -> Tuple[int, int]:
    """
    Compute the pixel grid an image is scaled to before quantization.

    Args:
        image_width: Intrinsic image width in pixels
        image_height: Intrinsic image height in pixels
        user_width: Fixed output width; 0 to fit the terminal instead
        provider: Terminal size source, consulted only when user_width is unset
        query_columns: False for looping animations, which lay out against
            Config.ANIMATION_COLUMNS rather than the real column count

    Returns:
        (width, height) tuple. The height is halved because a terminal
        cell is roughly twice as tall as it is wide.

    Raises:
        GeometryError: If the terminal size is needed but can't be determined
        ValueError: If the image has no pixels
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Image has zero size ({image_width}x{image_height})")

    scale = 1.0
    if user_width > 0:
        scale = user_width / image_width
    else:
        if provider is None:
            provider = TputGeometry()

        term_width = Config.ANIMATION_COLUMNS
        if query_columns:
            term_width = provider.columns()
        # Each row shows two pixel rows; keep one row free for the prompt
        term_height = provider.rows() * 2 - Config.PROMPT_ROWS

        if term_width < image_width or term_height < image_height:
            scale = min(term_width / image_width, term_height / image_height)

    width = int(math.floor(scale * image_width))
    height = int(math.floor(scale * image_height))
    height = height // 2

    print_debug(f"Resolved geometry {image_width}x{image_height} -> {width}x{height} (scale {scale:.3f})")
    return width, height
