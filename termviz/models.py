from typing import List, Sequence

import numpy as np
from PIL import Image

from .const import DisposalMethod


class SourceFrame(object):
    """
    One raw frame of a decoded image, before compositing.

    For static images the frame covers the whole image. For animations
    it covers only the frame's own rectangle inside the logical screen.
    """

    @property
    def image(self) -> Image.Image:
        """RGBA pixels of this frame at its own size."""
        return self._image

    @property
    def left(self) -> int:
        return self._left

    @property
    def top(self) -> int:
        return self._top

    @property
    def delay(self) -> int:
        """Frame delay in hundredths of a second."""
        return self._delay

    @property
    def disposal(self) -> DisposalMethod:
        return self._disposal

    def __init__(
        self,
        image: Image.Image,
        left: int = 0,
        top: int = 0,
        delay: int = 0,
        disposal: DisposalMethod = DisposalMethod.UNSPECIFIED,
    ):
        self._image = image
        self._left = left
        self._top = top
        self._delay = delay
        self._disposal = disposal

    def __repr__(self):
        return (
            f"SourceFrame(size={self._image.size}, offset=({self._left}, {self._top}), "
            f"delay={self._delay}, disposal={self._disposal.name})"
        )


class SourceImage(object):
    """
    A decoded still image or animated sequence.

    Immutable once decoded; the frame list is exposed as a tuple.
    """

    @property
    def width(self) -> int:
        """Intrinsic (logical screen) width in pixels."""
        return self._width

    @property
    def height(self) -> int:
        """Intrinsic (logical screen) height in pixels."""
        return self._height

    @property
    def format(self) -> str:
        """Format name as detected by Pillow (e.g. 'GIF', 'PNG')."""
        return self._format

    @property
    def animated(self) -> bool:
        """True when the frames should be replayed through the disposal state machine."""
        return self._animated

    @property
    def frames(self) -> Sequence[SourceFrame]:
        return self._frames

    def __init__(
        self,
        width: int,
        height: int,
        image_format: str,
        frames: List[SourceFrame],
        animated: bool = False,
    ):
        if not frames:
            raise ValueError("SourceImage requires at least one frame")
        self._width = width
        self._height = height
        self._format = image_format
        self._frames = tuple(frames)
        self._animated = animated


class CompositedFrame(object):
    """A full-canvas RGBA raster captured during compositing, with its source delay."""

    def __init__(self, image: Image.Image, delay_ms: int = 0):
        self.image = image
        self.delay_ms = delay_ms


class RenderedFrame(object):
    """A quantized frame: palette indices laid out as (height, width), plus its display delay."""

    @property
    def picture(self) -> np.ndarray:
        return self._picture

    @property
    def delay(self) -> int:
        """Display delay in delay units (see Config.DELAY_UNIT_SECONDS)."""
        return self._delay

    @property
    def width(self) -> int:
        return self._picture.shape[1]

    @property
    def height(self) -> int:
        return self._picture.shape[0]

    def __init__(self, picture: np.ndarray, delay: int = 0):
        if picture.ndim != 2:
            raise ValueError(f"Frame picture must be 2D, got shape {picture.shape}")
        if delay < 0:
            raise ValueError(f"Frame delay must be non-negative, got {delay}")
        picture = picture.astype(np.uint8, copy=True)
        picture.setflags(write=False)
        self._picture = picture
        self._delay = delay


class RenderTarget(object):
    """
    The fully prepared image: quantized frames in playback order,
    the loop count and the resolved geometry.

    Created once by the pipeline and read by the Renderer.
    """

    @property
    def frames(self) -> Sequence[RenderedFrame]:
        return self._frames

    @property
    def loop_count(self) -> int:
        return self._loop_count

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def __init__(
        self,
        frames: List[RenderedFrame],
        loop_count: int,
        width: int,
        height: int,
    ):
        if loop_count < 0:
            raise ValueError(f"Loop count must be non-negative, got {loop_count}")
        for i, frame in enumerate(frames):
            if (frame.width, frame.height) != (width, height):
                raise ValueError(
                    f"Frame {i} is {frame.width}x{frame.height}, expected {width}x{height}"
                )
        self._frames = tuple(frames)
        self._loop_count = loop_count
        self._width = width
        self._height = height

    def __len__(self):
        return len(self._frames)
