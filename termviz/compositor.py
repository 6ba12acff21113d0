from typing import List, Optional, Tuple

from PIL import Image

from .const import DisposalMethod
from .models import CompositedFrame, SourceImage
from .utils import print_debug


class FrameCompositor(object):
    """
    Turns a SourceImage into full-canvas rasters, one per logical frame.

    Animations are replayed onto a persistent RGBA canvas: every frame is
    drawn over the canvas, the canvas is captured, and the frame's
    disposal instruction prepares the canvas for the next frame.
    """

    def composite(self, source: SourceImage, loop_count: int) -> Tuple[List[CompositedFrame], int]:
        """
        Composite all frames of a source image.

        Args:
            source: Decoded image
            loop_count: Requested loop count; 0 renders the first frame only

        Returns:
            (frames, loop_count) where loop_count is forced to 1 for still images
        """
        if not source.animated or loop_count == 0:
            first = source.frames[0]
            canvas = self._new_canvas(source.width, source.height)
            self._draw_over(canvas, first.image, first.left, first.top)
            return [CompositedFrame(canvas, 0)], 1

        return self._replay(source), loop_count

    def _replay(self, source: SourceImage) -> List[CompositedFrame]:
        width, height = source.width, source.height
        canvas = self._new_canvas(width, height)
        previous: Optional[Image.Image] = None
        composited = []

        for i, frame in enumerate(source.frames):
            canvas = self._draw_over(canvas, frame.image, frame.left, frame.top)
            # Source delays are in hundredths of a second
            composited.append(CompositedFrame(canvas.copy(), frame.delay * 10))

            disposal = frame.disposal
            if disposal == DisposalMethod.BACKGROUND:
                canvas = self._new_canvas(width, height)
                # Falls through to NONE: the blank canvas becomes the restore point
                previous = canvas.copy()
            elif disposal == DisposalMethod.NONE:
                previous = canvas.copy()
            elif disposal == DisposalMethod.PREVIOUS:
                if previous is not None:
                    canvas = previous.copy()

            print_debug(f"Frame {i}: {frame!r}")

        return composited

    @staticmethod
    def _new_canvas(width: int, height: int) -> Image.Image:
        return Image.new('RGBA', (width, height), (0, 0, 0, 0))

    @staticmethod
    def _draw_over(canvas: Image.Image, image: Image.Image, left: int, top: int) -> Image.Image:
        """Alpha-composite ``image`` onto ``canvas`` at (left, top), clipped to the canvas."""
        layer = Image.new('RGBA', canvas.size, (0, 0, 0, 0))
        layer.paste(image, (left, top))
        canvas.alpha_composite(layer)
        return canvas
