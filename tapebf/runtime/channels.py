"""Input sources and output sinks the core reads from and writes to."""

from __future__ import annotations

import sys
from typing import Callable, Optional

from ..constants import CLEAR_SEQUENCE
from .errors import IoFailure


class ByteSource:
    """Blocking single-byte reader consumed by the input instruction."""

    def read_byte(self) -> Optional[int]:
        """Return the next byte, or ``None`` once the stream is exhausted."""
        raise NotImplementedError


class StreamSource(ByteSource):
    """Reads from a binary stream, ``sys.stdin.buffer`` unless told otherwise.

    Text streams are accepted too: each character is UTF-8 encoded and its
    bytes are handed out one per read.
    """

    def __init__(self, stream=None):
        self._stream = stream
        self._pending = b""

    @property
    def stream(self):
        if self._stream is None:
            return sys.stdin.buffer
        return self._stream

    def read_byte(self) -> Optional[int]:
        if not self._pending:
            try:
                chunk = self.stream.read(1)
            except OSError as exc:
                raise IoFailure(f"Failed to read program input: {exc}") from exc
            if not chunk:
                return None
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            self._pending = chunk
        value = self._pending[0]
        self._pending = self._pending[1:]
        return value


class BufferSource(ByteSource):
    """In-memory input, handy for tests and for ``--input`` files."""

    def __init__(self, data=b""):
        if isinstance(data, str):
            data = data.encode("utf-8")
        self.data = bytes(data)
        self.position = 0

    def read_byte(self) -> Optional[int]:
        if self.position >= len(self.data):
            return None
        value = self.data[self.position]
        self.position += 1
        return value

    @property
    def remaining(self) -> int:
        return len(self.data) - self.position


def console_sink(stream=None) -> Callable[[str], None]:
    """Return a sink that writes text to *stream* (stdout by default)."""

    def write(text: str) -> None:
        out = stream if stream is not None else sys.stdout
        out.write(text)
        out.flush()

    return write


def clear_terminal(stream=None) -> None:
    out = stream if stream is not None else sys.stdout
    out.write(CLEAR_SEQUENCE)
    out.flush()


__all__ = [
    "BufferSource",
    "ByteSource",
    "StreamSource",
    "clear_terminal",
    "console_sink",
]
