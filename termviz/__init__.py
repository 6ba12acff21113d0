"""termviz package entrypoints."""

from .geometry import GeometryError, TputGeometry, resolve_geometry
from .image import RenderOptions, TerminalImage
from .models import RenderTarget, RenderedFrame
from .palette import Xterm256Palette
from .renderer import Renderer
from .writer import ScriptWriter, TerminalWriter, Writer

__all__ = [
    'GeometryError', 'TputGeometry', 'resolve_geometry',
    'RenderOptions', 'TerminalImage',
    'RenderTarget', 'RenderedFrame',
    'Xterm256Palette', 'Renderer',
    'ScriptWriter', 'TerminalWriter', 'Writer',
]
