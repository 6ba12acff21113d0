from .config import Config
from .const import RendererState
from .models import RenderTarget
from .writer import Writer


class Renderer(object):
    """
    Plays a RenderTarget on a Writer.

    Every frame after the first overwrites the previous one: the cursor
    is moved back up by the image height and the previous frame's delay
    is slept before the next frame is drawn.
    """

    @property
    def state(self) -> RendererState:
        """Current lifecycle state of this Renderer."""
        return self._state

    def __init__(self, target: RenderTarget):
        self._target = target
        self._state = RendererState.IDLE

    def draw(self, writer: Writer) -> None:
        """
        Render all frames for ``loop_count`` passes, then close the writer.

        Args:
            writer: Output sink

        Raises:
            ValueError: If this renderer has already drawn
        """
        if self._state != RendererState.IDLE:
            raise ValueError(f"Cannot draw: renderer state is {self._state.value}, expected idle")
        self._state = RendererState.PLAYING

        target = self._target
        first_frame_done = False
        delay = 0
        for _ in range(target.loop_count):
            for frame in target.frames:
                if first_frame_done:
                    writer.line_up(target.height)
                    writer.sleep(delay)
                for row in frame.picture:
                    for index in row:
                        writer.write(Config.PIXEL_TEMPLATE.format(index))
                    writer.write("\n")
                first_frame_done = True
                delay = frame.delay

        writer.close()
        self._state = RendererState.DONE
