from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .rules import DEFAULT_TAB_SIZE, DOS_NEWLINE, TAB_SIZES, UNIX_NEWLINE


class LeadingStyle(str, Enum):
    unset = "unset"
    space = "space"
    tab = "tab"


class LineEnding(str, Enum):
    unset = "unset"
    dos = "dos"
    unix = "unix"


class Config(BaseModel):
    """
    One checker run, fixed once parsed.

    The model is frozen: drivers and both state machines receive the same
    instance and never modify it.
    """

    model_config = ConfigDict(frozen=True)

    input_path: Optional[Path] = None
    output_path: Optional[Path] = None
    replace: bool = False
    leading: LeadingStyle = LeadingStyle.unset
    trailing: LineEnding = LineEnding.unset
    tab_size: int = Field(default=DEFAULT_TAB_SIZE, examples=[4])
    debug: bool = False

    @field_validator("tab_size")
    @classmethod
    def _check_tab_size(cls, value: int) -> int:
        if value not in TAB_SIZES:
            raise ValueError(f"tab size must be one of {TAB_SIZES}, got {value}")
        return value

    @property
    def is_leading_set(self) -> bool:
        return self.leading is not LeadingStyle.unset

    @property
    def is_trailing_set(self) -> bool:
        return self.trailing is not LineEnding.unset

    @property
    def is_summary(self) -> bool:
        return not (self.is_leading_set or self.is_trailing_set)

    @property
    def newline(self) -> bytes:
        return DOS_NEWLINE if self.trailing is LineEnding.dos else UNIX_NEWLINE

    def describe(self) -> str:
        lines = [
            f"Input file name:  {self.input_path}",
            f"Output file name: {self.output_path or '<stdout>'}",
        ]
        if self.leading is LeadingStyle.space:
            lines.append("Leading whitespace will be rendered as spaces")
        elif self.leading is LeadingStyle.tab:
            lines.append("Leading whitespace will be rendered as tabs")
        else:
            lines.append("Leading whitespace will be unchanged")
        if self.is_trailing_set:
            lines.append(f"Newlines will be {self.trailing.value.capitalize()} style")
        else:
            lines.append("Newlines will be unchanged")
        lines.append(f"Tab size: {self.tab_size}")
        if self.replace:
            lines.append("Overwriting source file contents")
        if self.debug:
            lines.append("Generating debug summary")
        return "\n".join(lines)


class SummaryCounts(BaseModel):
    lines: int = 0
    space_only: int = 0
    tab_only: int = 0
    neither: int = 0
    both: int = 0
    dos: int = 0
    unix: int = 0
    malformed: int = 0
    ansi: int = 0
    utf8: int = 0


class TransformedText(BaseModel):
    sha256: str
    content_b64: str
    size: int = 0


class TransformResponse(BaseModel):
    transformed: TransformedText
    before: SummaryCounts
    after: SummaryCounts


class SummaryResponse(BaseModel):
    file: str
    counts: SummaryCounts
    report: str
    detected_encoding: Optional[str] = Field(default=None, examples=["utf_8"])


class HealthResponse(BaseModel):
    ok: bool = True
