"""Splitting PDF input into lexemes at whitespace and delimiters."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional, TypeVar, Union

from .errors import (
    NotFound,
    ParseError,
    PdfEOFError,
    PdfError,
    UnexpectedLexeme,
    Utf8DecodeError,
)
from .primitive import Name

T = TypeVar("T")

_WHITESPACE = frozenset(b"\x00 \r\n\t")
_DELIMITERS = frozenset(b"()<>[]{}/%")
_DIGITS = frozenset(b"0123456789")
_INT_TEXT = re.compile(r"[+-]?[0-9]+\Z")
_FLOAT_FORBIDDEN = re.compile(r"[_\s]")


def is_whitespace(byte: int) -> bool:
    """True for the bytes PDF treats as whitespace."""
    return byte in _WHITESPACE


def _is_delimiter(byte: int) -> bool:
    return byte in _DELIMITERS


def boundary(data: bytes, pos: int, condition: Callable[[int], bool]) -> int:
    """First position at or after `pos` whose byte fails `condition`, or len(data)."""
    for offset, byte in enumerate(data[pos:]):
        if not condition(byte):
            return pos + offset
    return len(data)


def boundary_rev(data: bytes, pos: int, condition: Callable[[int], bool]) -> int:
    """Start of the run of bytes satisfying `condition` that ends right before `pos`."""
    for index in range(pos - 1, -1, -1):
        if not condition(data[index]):
            return index + 1
    return 0


def _is_int(data: bytes) -> bool:
    return all(b in _DIGITS for b in data)


def _convert(text: str, kind: Callable[[str], T]) -> T:
    if kind is int and not _INT_TEXT.match(text):
        raise ParseError(f"invalid integer {text!r}")
    if kind is float and (not text or _FLOAT_FORBIDDEN.search(text)):
        raise ParseError(f"invalid number {text!r}")
    try:
        return kind(text)
    except (ValueError, TypeError, OverflowError) as exc:
        raise ParseError(exc) from exc


@dataclass(frozen=True, eq=False)
class Substr:
    """A lexeme: a slice of the input together with its offset in the file."""

    slice: bytes
    file_offset: int = 0

    def __post_init__(self) -> None:
        data = self.slice
        if isinstance(data, str):
            data = data.encode("utf-8")
        object.__setattr__(self, "slice", bytes(data))

    def __bytes__(self) -> bytes:
        return self.slice

    def __len__(self) -> int:
        return len(self.slice)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Substr):
            return self.slice == other.slice
        if isinstance(other, (bytes, bytearray, memoryview, str)):
            return self.equals(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.slice)

    def __str__(self) -> str:
        return self.to_string()

    def to_string(self) -> str:
        """The lexeme as text, replacing invalid UTF-8."""
        return self.slice.decode("utf-8", errors="replace")

    def to_name(self) -> Name:
        """The lexeme as a name; it must be valid UTF-8."""
        try:
            return Name(self.slice.decode("utf-8"))
        except UnicodeDecodeError:
            raise Utf8DecodeError() from None

    def to(self, kind: Callable[[str], T]) -> T:
        """Convert the lexeme's text with `kind` (such as int or float)."""
        try:
            text = self.slice.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(exc) from exc
        return _convert(text, kind)

    def is_integer(self) -> bool:
        data = self.slice
        if not data:
            return False
        if data[0] == ord("-"):
            if len(data) < 2:
                return False
            data = data[1:]
        return _is_int(data)

    def is_real_number(self) -> bool:
        return self.real_number() is not None

    def real_number(self) -> Optional[Substr]:
        """The leading part of the lexeme that forms a real number, if any."""
        data = self.slice
        if not data:
            return None
        if data[0] == ord("-"):
            if len(data) < 2:
                return None
            data = data[1:]
        dot = data.find(b".")
        if dot >= 0:
            if not _is_int(data[:dot]):
                return None
            data = data[dot + 1:]
        for length, byte in enumerate(data):
            if byte not in _DIGITS:
                if length == 0:
                    return None
                end = len(self.slice) - len(data) + length
                return Substr(self.slice[:end], self.file_offset)
        return self

    def equals(self, other: Union[bytes, bytearray, memoryview, str]) -> bool:
        if isinstance(other, str):
            other = other.encode("utf-8")
        return self.slice == bytes(other)

    def reslice(self, start: int) -> Substr:
        """The lexeme from `start` on, with the file offset moved accordingly."""
        return Substr(self.slice[start:], self.file_offset + start)

    def file_range(self) -> range:
        return range(self.file_offset, self.file_offset + len(self.slice))


class Lexer:
    """Walks the lexemes of a buffer forwards and backwards."""

    def __init__(self, buf: bytes, file_offset: int = 0) -> None:
        self.buf = bytes(buf)
        self.file_offset = file_offset
        self._pos = 0

    @property
    def pos(self) -> int:
        return self._pos

    def next(self) -> Substr:
        """Return the next lexeme and move past it."""
        lexeme, pos = self._next_word()
        self._pos = pos
        return lexeme

    def next_stream(self) -> None:
        """Consume the end-of-line that follows the `stream` keyword."""
        pos = self._skip_whitespace(self._pos)
        if pos + 6 >= len(self.buf):
            raise PdfEOFError()
        b0 = self.buf[pos + 6]
        if b0 == ord("\n"):
            self._pos = pos + 7
        elif b0 == ord("\r"):
            if pos + 7 >= len(self.buf):
                raise PdfEOFError()
            if self.buf[pos + 7] != ord("\n"):
                raise PdfError("invalid whitespace following 'stream'")
            self._pos = pos + 8
        else:
            raise PdfError("invalid whitespace")

    def back(self) -> Substr:
        """Return the previous lexeme and move to its first byte."""
        end_pos = boundary_rev(self.buf, self._pos, is_whitespace)
        start_pos = boundary_rev(self.buf, end_pos, lambda b: not is_whitespace(b))
        self._pos = start_pos
        return self.new_substr(start_pos, end_pos)

    def peek(self) -> Substr:
        """The next lexeme without moving; empty at the end of input."""
        try:
            lexeme, _ = self._next_word()
        except PdfEOFError:
            return self.new_substr(self._pos, self._pos)
        return lexeme

    def next_expect(self, expected: str) -> None:
        """Consume the next lexeme, raising UnexpectedLexeme unless it is `expected`."""
        word = self.next()
        if not word.equals(expected):
            raise UnexpectedLexeme(self._pos, word.to_string(), expected)

    def next_as(self, kind: Callable[[str], T]) -> T:
        return self.next().to(kind)

    def _skip_whitespace(self, pos: int) -> int:
        pos = boundary(self.buf, pos, is_whitespace)
        if pos >= len(self.buf):
            raise PdfEOFError()
        return pos

    def _at_whitespace(self, pos: int) -> bool:
        return pos < len(self.buf) and is_whitespace(self.buf[pos])

    def _at_delimiter(self, pos: int) -> bool:
        return pos < len(self.buf) and _is_delimiter(self.buf[pos])

    def _read_word_end(self, pos: int) -> int:
        while (
            pos < len(self.buf)
            and not self._at_whitespace(pos)
            and not self._at_delimiter(pos)
        ):
            pos += 1
        return pos

    def _next_word(self) -> tuple[Substr, int]:
        buf = self.buf
        if self._pos == len(buf):
            raise PdfEOFError()
        pos = self._skip_whitespace(self._pos)
        while buf[pos] == ord("%"):
            pos += 1
            newline = buf.find(b"\n", pos)
            if newline >= 0:
                pos = newline + 1
            pos = self._skip_whitespace(pos)

        start_pos = pos
        if self._at_delimiter(pos):
            if buf[pos] == ord("/"):
                pos = self._read_word_end(pos + 1)
                return self.new_substr(start_pos, pos), pos
            if buf[pos:pos + 2] in (b"<<", b">>"):
                pos += 1
            pos += 1
            return self.new_substr(start_pos, pos), pos

        pos = self._read_word_end(pos)
        return self.new_substr(start_pos, pos), pos

    def new_substr(self, start: int, end: int) -> Substr:
        """Substr of the buffer; a backward range is turned around."""
        if start > end:
            start, end = end + 1, start + 1
        return Substr(self.buf[start:end], self.file_offset + start)

    def set_pos(self, pos: int) -> Substr:
        """Move to `pos` (clamped to the buffer); returns what lies in between."""
        new_pos = min(max(pos, 0), len(self.buf))
        if self._pos < new_pos:
            start, end = self._pos, new_pos
        else:
            start, end = new_pos, self._pos
        self._pos = new_pos
        return self.new_substr(start, end)

    def set_pos_from_end(self, pos: int) -> Substr:
        return self.set_pos(max(max(len(self.buf) - pos, 0) - 1, 0))

    def offset_pos(self, offset: int) -> Substr:
        return self.set_pos(self._pos + offset)

    def _incr_pos(self) -> bool:
        if self._pos >= len(self.buf) - 1:
            return False
        self._pos += 1
        return True

    def seek_newline(self) -> Substr:
        """Move to the start of the next line; returns the skipped text."""
        if self._pos >= len(self.buf):
            raise PdfEOFError()
        start = self._pos
        while self.buf[self._pos] != ord("\n") and self._incr_pos():
            pass
        self._incr_pos()
        return self.new_substr(start, self._pos)

    def seek_substr(self, substr: Union[bytes, str]) -> Optional[Substr]:
        """Move past the next occurrence of `substr`; returns the text before it."""
        if isinstance(substr, str):
            substr = substr.encode("utf-8")
        start = self._pos
        matched = 0
        while True:
            if self._pos >= len(self.buf):
                return None
            if self.buf[self._pos] == substr[matched]:
                matched += 1
            else:
                matched = 0
            if matched == len(substr):
                break
            self._pos += 1
        self._pos += 1
        return self.new_substr(start, self._pos - len(substr))

    def seek_substr_back(self, substr: Union[bytes, str]) -> Substr:
        """Search backwards for `substr` and move right after it."""
        if isinstance(substr, str):
            substr = substr.encode("utf-8")
        end = self._pos
        start = self.buf.rfind(substr, 0, end)
        if start < 0:
            raise NotFound(substr.decode("utf-8", errors="replace"))
        self._pos = start + len(substr)
        return self.new_substr(self._pos, end)

    def read_n(self, n: int) -> Substr:
        """Read at most `n` bytes."""
        start_pos = self._pos
        self._pos += n
        if self._pos >= len(self.buf):
            self._pos = max(len(self.buf) - 1, 0)
        if start_pos < len(self.buf):
            return self.new_substr(start_pos, self._pos)
        return self.new_substr(0, 0)

    def remaining(self) -> bytes:
        """The buffer from the current position to the end."""
        return self.buf[self._pos:]

    def context(self) -> str:
        """Text around the current position, for messages."""
        lo = max(self._pos - 40, 0)
        hi = min(len(self.buf), self._pos + 40)
        return self.buf[lo:hi].decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        return f"Lexer(pos={self._pos}, len={len(self.buf)})"


__all__: list[Any] = [
    "Lexer",
    "Substr",
    "boundary",
    "boundary_rev",
    "is_whitespace",
]