"""
Image decoding.

Formats are detected from the file content by Pillow. Animated GIFs are
split into their raw frames here so that the compositor can replay the
disposal state machine itself; Pillow's own frame iterator hands back
frames that are already composited.
"""

import io
from io import IOBase
from struct import pack, unpack
from typing import List, Optional

from PIL import Image

from .const import ANIMATED_FORMATS, DisposalMethod
from .models import SourceFrame, SourceImage
from .utils import print_debug


GIF_SIGNATURES = (b'GIF87a', b'GIF89a')

EXTENSION_INTRODUCER = 0x21
IMAGE_SEPARATOR = 0x2C
TRAILER = 0x3B
GRAPHIC_CONTROL_LABEL = 0xF9


class GifDecoder(object):
    """
    Walks the block structure of a GIF stream and decodes every frame.

    Each image descriptor is re-wrapped into a standalone single-frame
    GIF (same color tables, frame placed at 0,0) and decoded by Pillow,
    which yields the frame's own pixels with undefined (transparent)
    pixels left at alpha 0.
    """

    def __init__(self, fp: IOBase):
        self._fp = fp

    def decode(self) -> SourceImage:
        signature = self._read(6)
        if signature not in GIF_SIGNATURES:
            raise ValueError(f"Not a GIF stream (signature {signature!r})")

        screen_width, screen_height, screen_flags, _background, _aspect = unpack(
            '<HHBBB', self._read(7)
        )
        if screen_width == 0 or screen_height == 0:
            raise ValueError("GIF logical screen has zero size")
        global_table = b''
        if screen_flags & 0x80:
            global_table = self._read(3 * (2 << (screen_flags & 0x07)))

        frames: List[SourceFrame] = []
        control: Optional[dict] = None
        while True:
            introducer = self._read(1)[0]
            if introducer == TRAILER:
                break
            if introducer == EXTENSION_INTRODUCER:
                label = self._read(1)[0]
                data = self._read_sub_blocks()
                if label == GRAPHIC_CONTROL_LABEL:
                    control = self._parse_graphic_control(data)
            elif introducer == IMAGE_SEPARATOR:
                frames.append(self._read_frame(screen_flags, global_table, control))
                # A graphic control extension applies to the next image only
                control = None
            else:
                raise ValueError(f"Unknown GIF block introducer 0x{introducer:02X}")

        if not frames:
            raise ValueError("GIF contains no image data")

        print_debug(f"Decoded GIF {screen_width}x{screen_height} with {len(frames)} frames")
        return SourceImage(screen_width, screen_height, 'GIF', frames, animated=True)

    def _read(self, size: int) -> bytes:
        data = self._fp.read(size)
        if len(data) != size:
            raise ValueError("Truncated GIF data")
        return data

    def _read_sub_blocks(self) -> bytes:
        """Read a chain of data sub-blocks up to the zero-length terminator."""
        chunks = []
        while True:
            size = self._read(1)[0]
            if size == 0:
                return b''.join(chunks)
            chunks.append(self._read(size))

    def _read_raw_sub_blocks(self) -> bytes:
        """Like _read_sub_blocks, but keep the length prefixes and terminator."""
        chunks = []
        while True:
            size_byte = self._read(1)
            chunks.append(size_byte)
            if size_byte[0] == 0:
                return b''.join(chunks)
            chunks.append(self._read(size_byte[0]))

    @staticmethod
    def _parse_graphic_control(data: bytes) -> dict:
        if len(data) < 4:
            raise ValueError("Truncated graphic control extension")
        flags, delay, transparent_index = unpack('<BHB', data[:4])
        return {
            'disposal': DisposalMethod.from_value((flags >> 2) & 0x07),
            'delay': delay,
            'transparent': transparent_index if flags & 0x01 else None,
        }

    def _read_frame(self, screen_flags: int, global_table: bytes, control: Optional[dict]) -> SourceFrame:
        left, top, width, height, flags = unpack('<HHHHB', self._read(9))
        local_table = b''
        if flags & 0x80:
            local_table = self._read(3 * (2 << (flags & 0x07)))
        min_code_size = self._read(1)
        image_data = self._read_raw_sub_blocks()

        if width == 0 or height == 0:
            raise ValueError(f"GIF frame at ({left}, {top}) has zero size")

        transparent = control['transparent'] if control else None
        stream = io.BytesIO()
        stream.write(b'GIF89a')
        stream.write(pack('<HHBBB', width, height, screen_flags, 0, 0))
        stream.write(global_table)
        if transparent is not None:
            stream.write(pack('<BBBBHBB', EXTENSION_INTRODUCER, GRAPHIC_CONTROL_LABEL, 4, 0x01, 0, transparent, 0))
        stream.write(pack('<BHHHHB', IMAGE_SEPARATOR, 0, 0, width, height, flags))
        stream.write(local_table)
        stream.write(min_code_size)
        stream.write(image_data)
        stream.write(bytes([TRAILER]))
        stream.seek(0)

        with Image.open(stream) as im:
            rgba = im.convert('RGBA')

        return SourceFrame(
            rgba,
            left=left,
            top=top,
            delay=control['delay'] if control else 0,
            disposal=control['disposal'] if control else DisposalMethod.UNSPECIFIED,
        )


class SourceDecoder(object):
    """Entry point for turning an image file into a SourceImage."""

    @staticmethod
    def decode_file(file_path: str, animate: bool = True) -> SourceImage:
        """
        Decode an image file.

        Args:
            file_path: Path to the image file
            animate: When False, animated formats are reduced to their first frame

        Returns:
            Decoded SourceImage

        Raises:
            OSError: If the file can't be opened or read
            PIL.UnidentifiedImageError: If the content isn't a known image format
            ValueError: If an animated stream is malformed
        """
        with open(file_path, 'rb') as fp:
            return SourceDecoder.decode_stream(fp, animate=animate)

    @staticmethod
    def decode_stream(fp: IOBase, animate: bool = True) -> SourceImage:
        with Image.open(fp) as im:
            image_format = im.format
            if not (animate and image_format in ANIMATED_FORMATS):
                first = im.convert('RGBA')
                print_debug(f"Decoded {image_format} {first.width}x{first.height} as a still image")
                return SourceImage(first.width, first.height, image_format, [SourceFrame(first)])

        fp.seek(0)
        return GifDecoder(fp).decode()
