"""Dates as stored in PDF strings (`D:YYYYMMDDHHmmSS...`)."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

from .errors import ParseError, PdfError, UnexpectedPrimitive, Utf8DecodeError
from .primitive import PdfString, debug_name

_UINT = re.compile(r"\+?[0-9]+\Z")
_U8_MAX = 0xFF
_U16_MAX = 0xFFFF


def _parse_uint(raw: bytes, maximum: int) -> Optional[int]:
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return None
    if not _UINT.match(text):
        return None
    value = int(text)
    return value if value <= maximum else None


def _parse_or(data: bytes, start: int, end: int, default: int) -> int:
    if end > len(data):
        return default
    value = _parse_uint(data[start:end], _U8_MAX)
    return default if value is None else value


@dataclass(frozen=True)
class Date:
    """A calendar date and time with a time-zone offset."""

    year: int
    month: int = 1
    day: int = 1
    hour: int = 0
    minute: int = 0
    second: int = 0
    tz_hour: int = 0
    tz_minute: int = 0

    @classmethod
    def from_primitive(cls, value: Any) -> Date:
        """Read a date from a string primitive; missing or bad fields take defaults."""
        if not isinstance(value, PdfString):
            raise UnexpectedPrimitive("String", debug_name(value))
        data = value.data
        try:
            data.decode("utf-8")
        except UnicodeDecodeError:
            raise Utf8DecodeError() from None
        if not (len(data) > 2 and data.startswith(b"D:")):
            raise PdfError("Failed parsing date")
        if len(data) < 6:
            raise PdfError("Missing obligatory year in date")
        year = _parse_uint(data[2:6], _U16_MAX)
        if year is None:
            raise ParseError(f"invalid year {data[2:6]!r}")
        return cls(
            year=year,
            month=_parse_or(data, 6, 8, 1),
            day=_parse_or(data, 8, 10, 1),
            hour=_parse_or(data, 10, 12, 0),
            minute=_parse_or(data, 12, 14, 0),
            second=_parse_or(data, 14, 16, 0),
            tz_hour=_parse_or(data, 16, 18, 0),
            tz_minute=_parse_or(data, 19, 21, 0),
        )


__all__ = ["Date"]