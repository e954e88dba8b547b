"""
Core normalization logic.

Responsibilities:
- leading whitespace re-rendering (spaces <-> tabs, column preserving)
- line ending re-rendering (DOS <-> Unix, stray CR/LF runs collapsed)
- single forward pass: one byte in, zero or more bytes out
"""

from __future__ import annotations

import io
from enum import Enum
from typing import BinaryIO

from .cursor import ByteCursor
from .models import Config, LeadingStyle
from .rules import CR, LF, NEWLINE_BYTES, SPACE, TAB


class WhitespaceState(Enum):
    start = "start"
    leading_run = "leading_run"
    body = "body"
    after_break = "after_break"


class NewlineState(Enum):
    start = "start"
    saw_cr = "saw_cr"
    saw_lf = "saw_lf"
    other = "other"


def _advance_column(column: int, byte: int, tab_size: int) -> int:
    if byte == TAB:
        # always up to the next stop, never down
        return (column // tab_size + 1) * tab_size
    return column + 1


def render_padding(column: int, leading: LeadingStyle, tab_size: int) -> bytes:
    """
    Render `column` worth of leading whitespace.

    Rules:
    - tab style: one tab per started tab stop; a partial last stop rounds
      up to a whole tab, so no spaces are ever emitted.
    - space style: column spaces.
    """
    if leading is LeadingStyle.tab:
        return b"\t" * -(-column // tab_size)
    return b" " * column


class LeadingWhitespaceNormalizer:
    """
    Re-renders the whitespace run at the start of every line.

    Whitespace is buffered as a column count while in the leading run and
    written out, in the configured style, as soon as the first body byte or a
    line break arrives. CR and LF bytes are never emitted from here; only the
    padding that precedes them.
    """

    def __init__(self, config: Config) -> None:
        self.leading = config.leading
        self.tab_size = config.tab_size
        self.state = WhitespaceState.start
        self.column = 0

    @property
    def active(self) -> bool:
        return self.leading is not LeadingStyle.unset

    def _padding(self) -> bytes:
        return render_padding(self.column, self.leading, self.tab_size)

    def feed(self, byte: int) -> bytes:
        if byte in NEWLINE_BYTES:
            out = self._padding() if self.state is WhitespaceState.leading_run else b""
            self.state = WhitespaceState.after_break
            self.column = 0
            return out

        if not self.active:
            return bytes((byte,))

        if byte == SPACE or byte == TAB:
            if self.state is WhitespaceState.body:
                return bytes((byte,))
            if self.state is not WhitespaceState.leading_run:
                self.state = WhitespaceState.leading_run
                self.column = 0
            self.column = _advance_column(self.column, byte, self.tab_size)
            return b""

        out = b""
        if self.state is WhitespaceState.leading_run:
            out = self._padding()
            self.column = 0
        self.state = WhitespaceState.body
        return out + bytes((byte,))

    def finish(self) -> bytes:
        """Padding for a leading run the stream ended in, if any."""
        out = self._padding() if self.state is WhitespaceState.leading_run else b""
        self.state = WhitespaceState.start
        self.column = 0
        return out


class LineEndingNormalizer:
    """
    Turns every logical line break into the configured newline.

    CR LF is one break. LF CR is two, as are CR CR and LF LF. Bytes that are
    not CR or LF produce nothing here.
    """

    def __init__(self, config: Config) -> None:
        self.active = config.is_trailing_set
        self.newline = config.newline
        self.state = NewlineState.start

    def feed(self, byte: int) -> bytes:
        if byte not in NEWLINE_BYTES:
            self.state = NewlineState.other
            return b""

        if not self.active:
            return bytes((byte,))

        if self.state is NewlineState.saw_cr and byte == LF:
            self.state = NewlineState.other
            return b""

        self.state = NewlineState.saw_cr if byte == CR else NewlineState.saw_lf
        return self.newline


def transform_stream(config: Config, source: BinaryIO, sink: BinaryIO) -> int:
    """
    Run one transform pass from `source` to `sink`.

    Each byte goes through the whitespace machine, then the newline machine,
    and both fragments are written in that order. Returns the number of bytes
    read.
    """
    cursor = ByteCursor(source)
    whitespace = LeadingWhitespaceNormalizer(config)
    newline = LineEndingNormalizer(config)

    for byte in cursor:
        fragment = whitespace.feed(byte) + newline.feed(byte)
        if fragment:
            sink.write(fragment)

    tail = whitespace.finish()
    if tail:
        sink.write(tail)

    return cursor.consumed


def transform_bytes(raw: bytes, config: Config) -> bytes:
    outp = io.BytesIO()
    transform_stream(config, io.BytesIO(raw), outp)
    return outp.getvalue()
