"""
Deterministic byte rules.

Every byte the checker cares about is named here; anything else is "other".
"""

TAB = 0x09
LF = 0x0A
CR = 0x0D
SPACE = 0x20

NEWLINE_BYTES = (CR, LF)
WHITESPACE_BYTES = (SPACE, TAB)

DOS_NEWLINE = b"\r\n"
UNIX_NEWLINE = b"\n"

TAB_SIZES = (2, 4, 8)
DEFAULT_TAB_SIZE = 4

CHUNK_SIZE = 64 * 1024  # read size for ByteCursor, not a logical buffer
