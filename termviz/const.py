from enum import Enum, IntEnum


class DisposalMethod(IntEnum):
    """GIF frame disposal instruction (graphic control extension, bits 2-4)."""
    UNSPECIFIED = 0
    NONE = 1  # leave the canvas as-is
    BACKGROUND = 2  # restore to background
    PREVIOUS = 3  # restore to previous

    @classmethod
    def from_value(cls, value: int) -> 'DisposalMethod':
        try:
            return cls(value)
        except ValueError:
            # Values 4-7 are reserved; decoders treat them as "no action"
            return cls.UNSPECIFIED


class RendererState(Enum):
    """Lifecycle state of a Renderer."""
    IDLE = "idle"  # nothing drawn yet
    PLAYING = "playing"  # frames are being written to the sink
    DONE = "done"  # all loops drawn and sink closed


# Pillow format names that carry a replayable animation
ANIMATED_FORMATS = frozenset({'GIF'})
