from struct import pack
from typing import Dict, List, Sequence

import pytest
from PIL import Image

from termviz.config import Config
from termviz.geometry import GeometryProvider
from termviz.writer import Writer


# Four-color global table used by every generated GIF
GIF_PALETTE = [(0, 0, 0), (255, 0, 0), (0, 255, 0), (0, 0, 255)]
BLACK, RED, GREEN, BLUE = range(4)


def _lzw_pixels(indices: Sequence[int]) -> bytes:
    """
    Encode palette indices as a GIF LZW stream (minimum code size 2).

    A clear code precedes every pixel so the code width never grows
    past 3 bits.
    """
    clear, end = 4, 5
    codes = []
    for index in indices:
        codes.extend([clear, index])
    codes.append(end)

    value = 0
    bits = 0
    out = bytearray()
    for code in codes:
        value |= code << bits
        bits += 3
        while bits >= 8:
            out.append(value & 0xFF)
            value >>= 8
            bits -= 8
    if bits:
        out.append(value & 0xFF)
    return bytes(out)


def _sub_blocks(data: bytes) -> bytes:
    out = bytearray()
    for i in range(0, len(data), 255):
        chunk = data[i:i + 255]
        out.append(len(chunk))
        out.extend(chunk)
    out.append(0)
    return bytes(out)


def make_gif_bytes(width: int, height: int, frames: List[Dict]) -> bytes:
    """
    Assemble a GIF89a stream by hand.

    Each frame dict holds ``pixels`` (row-major palette indices) and
    optionally ``left``, ``top``, ``width``, ``height``, ``delay``
    (hundredths of a second), ``disposal`` and ``transparent``.
    """
    out = bytearray(b'GIF89a')
    out += pack('<HHBBB', width, height, 0x81, 0, 0)
    for r, g, b in GIF_PALETTE:
        out += bytes([r, g, b])

    for frame in frames:
        frame_width = frame.get('width', width)
        frame_height = frame.get('height', height)
        transparent = frame.get('transparent')
        flags = (frame.get('disposal', 0) << 2) | (1 if transparent is not None else 0)
        out += pack(
            '<BBBBHBB', 0x21, 0xF9, 4, flags, frame.get('delay', 0),
            transparent if transparent is not None else 0, 0,
        )
        out += pack(
            '<BHHHHB', 0x2C, frame.get('left', 0), frame.get('top', 0),
            frame_width, frame_height, 0,
        )
        out += bytes([2])
        out += _sub_blocks(_lzw_pixels(frame['pixels']))

    out += b'\x3B'
    return bytes(out)


@pytest.fixture
def gif_file(tmp_path):
    """Factory writing a hand-assembled GIF to tmp_path."""
    def _write(width, height, frames, name='anim.gif'):
        path = tmp_path / name
        path.write_bytes(make_gif_bytes(width, height, frames))
        return str(path)
    return _write


@pytest.fixture
def png_file(tmp_path):
    """Factory writing a solid-color PNG to tmp_path."""
    def _write(width, height, color=(255, 0, 0), name='still.png'):
        path = tmp_path / name
        Image.new('RGB', (width, height), color).save(path, format='PNG')
        return str(path)
    return _write


class FixedGeometry(GeometryProvider):
    """Geometry provider with fixed values that records which values were asked for."""

    def __init__(self, rows: int = 24, columns: int = 80):
        self._rows = rows
        self._columns = columns
        self.queries: List[str] = []

    def rows(self) -> int:
        self.queries.append('rows')
        return self._rows

    def columns(self) -> int:
        self.queries.append('columns')
        return self._columns


class RecordingWriter(Writer):
    """Writer that records every call as an event tuple."""

    def __init__(self):
        self.events: List[tuple] = []

    def write(self, text: str) -> None:
        self.events.append(('write', text))

    def line_up(self, rows: int) -> None:
        self.events.append(('line_up', rows))

    def sleep(self, delay: int) -> None:
        self.events.append(('sleep', delay))

    def close(self) -> None:
        self.events.append(('close',))


class RecordingPalette(object):
    """Palette returning a fixed index and recording every color it was asked about."""

    def __init__(self, result: int = 7):
        self.result = result
        self.colors: List[tuple] = []

    def index(self, color) -> int:
        self.colors.append(tuple(int(c) for c in color))
        return self.result


@pytest.fixture
def recording_writer():
    return RecordingWriter()


@pytest.fixture
def recording_palette():
    return RecordingPalette()


@pytest.fixture(autouse=True)
def reset_config():
    """Restore console switches the CLI may flip."""
    debug, progress = Config.DEBUG_MODE, Config.SHOW_PROGRESS
    yield
    Config.DEBUG_MODE, Config.SHOW_PROGRESS = debug, progress


def pixel(index: int) -> str:
    return Config.PIXEL_TEMPLATE.format(index)
