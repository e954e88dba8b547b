"""
Statistics pass.

Tallies, in one forward pass and without rewriting anything:
- lines and how each one begins (space only, tab only, neither, both)
- how each line ends (DOS, Unix, malformed)
- non-whitespace bytes as ANSI bytes or complete UTF-8 sequences
"""

from __future__ import annotations

import io
from typing import BinaryIO

from .cursor import ByteCursor
from .models import SummaryCounts
from .rules import CR, LF, SPACE, TAB


def utf8_sequence_length(byte: int) -> int:
    """Expected UTF-8 sequence length for a lead byte, 0 if it cannot lead one."""
    if byte & 0x80 == 0x00:
        return 1
    if byte & 0xE0 == 0xC0:
        return 2
    if byte & 0xF0 == 0xE0:
        return 3
    if byte & 0xF8 == 0xF0:
        return 4
    return 0


def _is_continuation(byte: int) -> bool:
    return byte & 0xC0 == 0x80


class StatisticsCollector:
    def __init__(self) -> None:
        self.counts = SummaryCounts()

        # per line flags
        self._start = True
        self._space = False
        self._tab = False
        self._cr = False
        self._lf = False

        # partial UTF-8 sequence
        self._needed = 0
        self._consumed = 0

    def feed(self, byte: int) -> None:
        if byte == TAB:
            self._flush_sequence()
            self._whitespace(tab=True)
        elif byte == SPACE:
            self._flush_sequence()
            self._whitespace(tab=False)
        elif byte == LF:
            self._flush_sequence()
            self._line_feed()
        elif byte == CR:
            self._flush_sequence()
            self._carriage_return()
        else:
            self._start = False
            self._cr = False
            self._lf = False
            self._classify(byte)

    def finish(self) -> SummaryCounts:
        self._flush_sequence()
        return self.counts

    def _whitespace(self, tab: bool) -> None:
        if self._start:
            if tab:
                self._tab = True
            else:
                self._space = True
        self._cr = False
        self._lf = False

    def _line_feed(self) -> None:
        counts = self.counts
        if self._cr:
            counts.dos += 1
        else:
            counts.unix += 1
            self._lf = True

        counts.lines += 1
        if self._tab and self._space:
            counts.both += 1
        elif self._tab:
            counts.tab_only += 1
        elif self._space:
            counts.space_only += 1
        else:
            counts.neither += 1

        self._tab = False
        self._space = False
        self._start = True
        self._cr = False

    def _carriage_return(self) -> None:
        if self._lf:
            # The LF was optimistically counted as Unix; LF CR is malformed.
            self.counts.malformed += 1
            self.counts.unix -= 1
            self._cr = False
        else:
            self._cr = True
        self._lf = False

    def _flush_sequence(self) -> None:
        self.counts.ansi += self._consumed
        self._needed = 0
        self._consumed = 0

    def _classify(self, byte: int) -> None:
        if self._needed:
            if _is_continuation(byte):
                self._consumed += 1
                if self._consumed == self._needed:
                    self.counts.utf8 += 1
                    self._needed = 0
                    self._consumed = 0
                return
            # broken sequence; this byte gets a fresh look below
            self._flush_sequence()

        if byte < 0x80:
            return

        length = utf8_sequence_length(byte)
        if length < 2:
            self.counts.ansi += 1
        else:
            self._needed = length
            self._consumed = 1


def summarize_stream(source: BinaryIO) -> SummaryCounts:
    collector = StatisticsCollector()
    for byte in ByteCursor(source):
        collector.feed(byte)
    return collector.finish()


def summarize_bytes(raw: bytes) -> SummaryCounts:
    return summarize_stream(io.BytesIO(raw))


def render_summary(name: str, counts: SummaryCounts) -> str:
    out = [f"{name}\n", f"  Total Lines:\t{counts.lines}\n", "Line beginning:\n"]

    def row(label: str, value: int) -> None:
        if value:
            out.append(f"  {label}{value}\n")

    row("Space only:\t", counts.space_only)
    row("Tab only:\t", counts.tab_only)
    row("Neither:\t", counts.neither)
    row("Both:\t\t", counts.both)
    out.append("Line ending:\n")
    row("Dos:\t\t", counts.dos)
    row("Unix:\t\t", counts.unix)
    row("Malformed:\t", counts.malformed)
    if counts.ansi or counts.utf8:
        out.append("Character encoding:\n")
        row("ANSI:\t\t", counts.ansi)
        row("UTF-8:\t\t", counts.utf8)
    return "".join(out)


def render_debug(name: str, counts: SummaryCounts) -> str:
    fields = (
        counts.lines,
        counts.space_only,
        counts.tab_only,
        counts.neither,
        counts.both,
        counts.dos,
        counts.unix,
        counts.malformed,
    )
    return f"{name}\n" + " ".join(str(v) for v in fields) + "\n"
