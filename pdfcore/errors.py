"""Exceptions raised while reading and writing PDF objects."""

from __future__ import annotations


class PdfError(Exception):
    """Base class of every error raised by this package."""


class PdfEOFError(PdfError):
    """The input ended before the object being read was complete."""

    def __init__(self, message: str = "unexpected end of file") -> None:
        super().__init__(message)


class UnexpectedPrimitive(PdfError):
    """A primitive of one kind was found where another was expected."""

    def __init__(self, expected: str, found: str) -> None:
        self.expected = expected
        self.found = found
        super().__init__(
            f"expected primitive {expected}, found primitive {found} instead"
        )


class MissingEntry(PdfError):
    """A required dictionary entry is absent."""

    def __init__(self, typ: str, field: str) -> None:
        self.typ = typ
        self.field = field
        super().__init__(f"missing entry {field!r} in {typ}")


class KeyValueMismatch(PdfError):
    """A dictionary entry holds a different name than the one expected."""

    def __init__(self, key: str, value: str, found: str) -> None:
        self.key = key
        self.value = value
        self.found = found
        super().__init__(
            f"expected key {key!r} to have value {value!r}, found {found!r}"
        )


class UnexpectedLexeme(PdfError):
    """The lexer produced a token other than the one expected."""

    def __init__(self, pos: int, lexeme: str, expected: str) -> None:
        self.pos = pos
        self.lexeme = lexeme
        self.expected = expected
        super().__init__(
            f"unexpected lexeme {lexeme!r} at position {pos}, expected {expected!r}"
        )


class HexDecodeError(PdfError):
    """A hexadecimal digit pair could not be decoded."""

    def __init__(self, pos: int, data: bytes) -> None:
        self.pos = pos
        self.data = bytes(data)
        super().__init__(f"invalid hex digits {self.data!r} at position {pos}")


class Utf8DecodeError(PdfError):
    """Bytes were not valid UTF-8."""

    def __init__(self, message: str = "invalid UTF-8") -> None:
        super().__init__(message)


class Utf16DecodeError(PdfError):
    """Bytes were not valid UTF-16BE."""

    def __init__(self, message: str = "invalid UTF-16BE") -> None:
        super().__init__(message)


class MaxDepthError(PdfError):
    """Objects were nested deeper than the parser allows."""

    def __init__(self, message: str = "maximum nesting depth exceeded") -> None:
        super().__init__(message)


class PrimitiveNotAllowed(PdfError):
    """A primitive was found that the caller did not permit."""

    def __init__(self, allowed: object, found: object) -> None:
        self.allowed = allowed
        self.found = found
        super().__init__(f"primitive not allowed: allowed {allowed!r}, found {found!r}")


class UnknownType(PdfError):
    """A token does not start any known kind of object."""

    def __init__(self, pos: int, first_lexeme: str, rest: str) -> None:
        self.pos = pos
        self.first_lexeme = first_lexeme
        self.rest = rest
        super().__init__(
            f"unknown object type at position {pos}: {first_lexeme!r} followed by {rest!r}"
        )


class NotFound(PdfError):
    """A searched-for word does not occur in the input."""

    def __init__(self, word: str) -> None:
        self.word = word
        super().__init__(f"{word!r} not found")


class XRefStreamType(PdfError):
    """A cross-reference stream entry has an unknown type field."""

    def __init__(self, found: int) -> None:
        self.found = found
        super().__init__(f"invalid xref stream entry type {found}")


class UnspecifiedXRefEntry(PdfError):
    """The cross-reference table has no entry for an object number."""

    def __init__(self, id: int) -> None:
        self.id = id
        super().__init__(f"xref entry for object {id} is not specified")


class ParseError(PdfError):
    """A token could not be converted to the requested value."""

    def __init__(self, source: object) -> None:
        self.source = source
        super().__init__(f"parse error: {source}")