from typing import Optional

from .compositor import FrameCompositor
from .config import Config
from .decoder import SourceDecoder
from .geometry import GeometryProvider, resolve_geometry
from .models import RenderTarget
from .palette import Xterm256Palette
from .quantizer import FrameQuantizer
from .renderer import Renderer
from .utils import print_debug
from .writer import ScriptWriter, TerminalWriter, Writer


class RenderOptions(object):
    """Per-run options for drawing an image."""

    def __init__(
        self,
        export_filename: Optional[str] = None,
        loop_count: int = None,
        delay_multiplier: float = None,
        user_width: int = None,
    ):
        """
        Initialize RenderOptions.

        Args:
            export_filename: Write a shell script to this path instead of drawing
                in the terminal (e.g. to show the image from motd)
            loop_count: Times to play an animation; 0 renders the first picture only
            delay_multiplier: Scales the delay between animation frames
            user_width: Fixed output width; the height follows the aspect ratio.
                Useful in SSH sessions where terminal resizes aren't registered
        """
        self.export_filename = export_filename
        self.loop_count = Config.DEFAULT_LOOP_COUNT if loop_count is None else loop_count
        self.delay_multiplier = (
            Config.DEFAULT_DELAY_MULTIPLIER if delay_multiplier is None else delay_multiplier
        )
        self.user_width = Config.DEFAULT_USER_WIDTH if user_width is None else user_width

        if self.loop_count < 0:
            raise ValueError(f"Loop count must be non-negative, got {self.loop_count}")
        if self.delay_multiplier < 0:
            raise ValueError(f"Delay multiplier must be non-negative, got {self.delay_multiplier}")
        if self.user_width < 0:
            raise ValueError(f"Width must be non-negative, got {self.user_width}")


class TerminalImage(object):
    """
    An image (still or animated) prepared for display in a terminal.

    Call init() to decode, scale and quantize the image, then draw()
    to render it.
    """

    @property
    def target(self) -> Optional[RenderTarget]:
        """The prepared frames (None until init() has run)."""
        return self._target

    def __init__(
        self,
        filename: str,
        options: RenderOptions = None,
        geometry: GeometryProvider = None,
        palette=None,
    ):
        self.filename = filename
        self.options = options or RenderOptions()
        self._geometry = geometry
        self._palette = palette if palette is not None else Xterm256Palette()
        self._target: Optional[RenderTarget] = None

    def init(self) -> RenderTarget:
        """
        Decode the image file and prepare every frame for rendering.

        Returns:
            The assembled RenderTarget

        Raises:
            OSError: If the image file can't be read
            PIL.UnidentifiedImageError: If the file isn't a supported image
            ValueError: If the image data is malformed
            GeometryError: If the terminal size can't be determined
        """
        options = self.options
        source = SourceDecoder.decode_file(self.filename, animate=options.loop_count > 0)

        width, height = resolve_geometry(
            source.width,
            source.height,
            user_width=options.user_width,
            provider=self._geometry,
            query_columns=not (source.animated and options.loop_count > 0),
        )

        frames, loop_count = FrameCompositor().composite(source, options.loop_count)
        quantizer = FrameQuantizer(self._palette, width, height, options.delay_multiplier)
        self._target = quantizer.build_target(frames, loop_count)

        print_debug(
            f"Prepared {len(self._target)} frame(s) at {width}x{height}, loop count {loop_count}"
        )
        return self._target

    def draw(self, writer: Writer = None) -> None:
        """
        Render the prepared image.

        Args:
            writer: Output sink. Defaults to a ScriptWriter when an export
                filename is configured, otherwise a TerminalWriter on stdout.

        Raises:
            ValueError: If init() hasn't been called
        """
        if self._target is None:
            raise ValueError("Image not initialized yet. Call init() first.")
        if writer is None:
            if self.options.export_filename:
                writer = ScriptWriter(self.options.export_filename)
            else:
                writer = TerminalWriter()
        Renderer(self._target).draw(writer)
