"""Lexers for the bodies of literal `( ... )` and hexadecimal `< ... >` strings."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Optional

from .errors import HexDecodeError, PdfEOFError

_ESCAPES = {
    ord("n"): ord("\n"),
    ord("r"): ord("\r"),
    ord("t"): ord("\t"),
    ord("b"): 0x08,
    ord("f"): 0x0C,
    ord("("): ord("("),
    ord(")"): ord(")"),
    ord("\\"): ord("\\"),
}
_OCTAL = frozenset(b"01234567")
_HEX_WHITESPACE = frozenset(b" \t\n\r\x0c")
_CR = ord("\r")
_LF = ord("\n")


def _hex_value(byte: int) -> Optional[int]:
    if 0x30 <= byte <= 0x39:
        return byte - 0x30
    if 0x41 <= byte <= 0x46:
        return byte - 0x41 + 10
    if 0x61 <= byte <= 0x66:
        return byte - 0x61 + 10
    return None


class StringLexer:
    """Decodes a literal string body byte by byte.

    `buf` starts right after the opening `(` and may run to the end of the
    input; the lexer stops at the matching `)`.  Iterating yields the decoded
    bytes, and `offset` tells how many input bytes have been consumed.
    """

    def __init__(self, buf: bytes) -> None:
        self.buf = bytes(buf)
        self._pos = 0
        self._nested = 0

    @property
    def offset(self) -> int:
        """Number of bytes of `buf` consumed so far."""
        return self._pos

    def __iter__(self) -> Iterator[int]:
        while (byte := self.next_lexeme()) is not None:
            yield byte

    def next_lexeme(self) -> Optional[int]:
        """The next decoded byte, or None once the closing `)` is reached."""
        c = self._next_byte()
        if c == ord("\\"):
            return self._escape()
        if c == ord("("):
            self._nested += 1
            return c
        if c == ord(")"):
            self._nested -= 1
            return None if self._nested < 0 else c
        return c

    def _escape(self) -> Optional[int]:
        c = self._next_byte()
        if c in _ESCAPES:
            return _ESCAPES[c]
        if c in (_LF, _CR):
            # A backslash before an end-of-line joins the lines.
            follow = _CR if c == _LF else _LF
            if self._pos < len(self.buf) and self.buf[self._pos] == follow:
                self._pos += 1
            return self.next_lexeme()
        self._pos -= 1
        code = 0
        for _ in range(3):
            d = self._peek_byte()
            if d not in _OCTAL:
                break
            self._pos += 1
            code = code * 8 + (d - 0x30)
        return code & 0xFF

    def _next_byte(self) -> int:
        if self._pos >= len(self.buf):
            raise PdfEOFError()
        self._pos += 1
        return self.buf[self._pos - 1]

    def _peek_byte(self) -> int:
        if self._pos >= len(self.buf):
            raise PdfEOFError()
        return self.buf[self._pos]


class HexStringLexer:
    """Decodes a hexadecimal string body into bytes.

    `buf` starts right after the opening `<`; the lexer stops at `>`.  An odd
    final digit is completed with a zero nibble.
    """

    def __init__(self, buf: bytes) -> None:
        self.buf = bytes(buf)
        self._pos = 0

    @property
    def offset(self) -> int:
        """Number of bytes of `buf` consumed so far."""
        return self._pos

    def __iter__(self) -> Iterator[int]:
        while (byte := self.next_hex_byte()) is not None:
            yield byte

    def next_hex_byte(self) -> Optional[int]:
        """The next decoded byte, or None once the closing `>` is reached."""
        c1 = self._next_non_whitespace()
        if c1 == ord(">"):
            return None
        high = _hex_value(c1)
        if high is None:
            following = self.buf[self._pos] if self._pos < len(self.buf) else 0
            raise HexDecodeError(self._pos, bytes([c1, following]))
        c2 = self._next_non_whitespace()
        if c2 == ord(">"):
            self._pos -= 1
            low = 0
        else:
            low = _hex_value(c2)
            if low is None:
                raise HexDecodeError(self._pos, bytes([c1, c2]))
        return (high << 4) | low

    def _next_non_whitespace(self) -> int:
        while True:
            if self._pos >= len(self.buf):
                raise PdfEOFError()
            byte = self.buf[self._pos]
            self._pos += 1
            if byte not in _HEX_WHITESPACE:
                return byte


__all__ = ["HexStringLexer", "StringLexer"]