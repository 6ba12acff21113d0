"""
Output sinks for the renderer.

A Writer receives raw text, cursor movement and delays. TerminalWriter
plays them back live; ScriptWriter records them as a shell script that
reproduces the output when run (e.g. from a motd hook).
"""

import os
import sys
import time
from abc import ABC, abstractmethod
from typing import List, TextIO

from .config import Config


class Writer(ABC):
    """Abstract output sink."""

    @abstractmethod
    def write(self, text: str) -> None:
        """Write raw text."""

    @abstractmethod
    def line_up(self, rows: int) -> None:
        """Move the cursor up by ``rows`` lines."""

    @abstractmethod
    def sleep(self, delay: int) -> None:
        """Pause for ``delay`` delay units (see Config.DELAY_UNIT_SECONDS)."""

    @abstractmethod
    def close(self) -> None:
        """Flush and finalize the output."""


class TerminalWriter(Writer):
    """Writes straight to an interactive terminal stream."""

    def __init__(self, stream: TextIO = None):
        self._stream = stream if stream is not None else sys.stdout

    def write(self, text: str) -> None:
        self._stream.write(text)

    def line_up(self, rows: int) -> None:
        if rows > 0:
            self._stream.write(Config.CURSOR_UP_TEMPLATE.format(rows))

    def sleep(self, delay: int) -> None:
        # Show the frame before pausing on it
        self._stream.flush()
        time.sleep(delay * Config.DELAY_UNIT_SECONDS)

    def close(self) -> None:
        self._stream.flush()


def escape_printf(text: str) -> str:
    """
    Escape text for use as a single-quoted printf(1) format string.

    Args:
        text: Raw text, possibly containing escape characters and newlines

    Returns:
        The escaped format string, without surrounding quotes
    """
    return (
        text.replace('\\', '\\\\')
        .replace('%', '%%')
        .replace("'", "'\\''")
        .replace('\x1b', '\\033')
        .replace('\n', '\\n')
    )


class ScriptWriter(Writer):
    """
    Records output as an executable shell script.

    Consecutive writes are merged into one ``printf`` command; the file
    is only created when the writer is closed. Delays become
    ``sleep <seconds>`` with a fractional operand, which needs a
    GNU coreutils or BSD sleep(1); POSIX only guarantees whole seconds.
    """

    def __init__(self, filename: str):
        self._filename = filename
        self._commands: List[str] = []
        self._pending: List[str] = []

    @property
    def filename(self) -> str:
        return self._filename

    def write(self, text: str) -> None:
        self._pending.append(text)

    def line_up(self, rows: int) -> None:
        if rows > 0:
            self.write(Config.CURSOR_UP_TEMPLATE.format(rows))

    def sleep(self, delay: int) -> None:
        self._flush_pending()
        seconds = delay * Config.DELAY_UNIT_SECONDS
        self._commands.append(f"sleep {seconds:.3f}")

    def close(self) -> None:
        self._flush_pending()
        with open(self._filename, 'w', encoding='utf-8', newline='\n') as fp:
            fp.write(Config.SCRIPT_SHEBANG + '\n')
            for command in self._commands:
                fp.write(command + '\n')
        os.chmod(self._filename, Config.SCRIPT_MODE)

    def _flush_pending(self) -> None:
        if self._pending:
            self._commands.append(f"printf '{escape_printf(''.join(self._pending))}'")
            self._pending = []
