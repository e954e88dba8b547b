from __future__ import annotations

from typing import BinaryIO, Iterator, Optional

from .rules import CHUNK_SIZE


class ByteCursor:
    """
    Hands out one byte at a time from a binary stream.

    Reads happen in chunks, which is invisible to callers: `next_byte()`
    returns an int in 0..255, or None once the stream is exhausted.
    """

    def __init__(self, stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> None:
        self._stream = stream
        self._chunk_size = chunk_size
        self._chunk = b""
        self._pos = 0
        self.consumed = 0

    def next_byte(self) -> Optional[int]:
        if self._pos >= len(self._chunk):
            self._chunk = self._stream.read(self._chunk_size)
            self._pos = 0
            if not self._chunk:
                return None
        byte = self._chunk[self._pos]
        self._pos += 1
        self.consumed += 1
        return byte

    def __iter__(self) -> Iterator[int]:
        while True:
            byte = self.next_byte()
            if byte is None:
                return
            yield byte
