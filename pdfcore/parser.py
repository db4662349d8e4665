"""Parsing PDF objects, streams and indirect objects from bytes."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from .errors import (
    HexDecodeError,
    MaxDepthError,
    MissingEntry,
    ParseError,
    PdfEOFError,
    PdfError,
    PrimitiveNotAllowed,
    UnexpectedLexeme,
    UnexpectedPrimitive,
    UnknownType,
    Utf8DecodeError,
)
from .lexer import Lexer, Substr
from .primitive import (
    Dictionary,
    Name,
    PdfStream,
    PdfString,
    PlainRef,
    as_unsigned,
    debug_name,
)
from .string_lexer import HexStringLexer, StringLexer

logger = logging.getLogger(__name__)

MAX_DEPTH = 20

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_OBJ_NR_MAX = 2**64 - 1
_GEN_NR_MAX = 2**16 - 1

Decoder = Callable[[PlainRef, bytes], bytes]


class ParseFlags(enum.Flag):
    """Kinds of primitive a caller is willing to accept."""

    INTEGER = 1 << 0
    STREAM = 1 << 1
    DICT = 1 << 2
    NUMBER = 1 << 3
    NAME = 1 << 4
    ARRAY = 1 << 5
    STRING = 1 << 6
    BOOL = 1 << 7
    NULL = 1 << 8
    REF = 1 << 9
    ANY = (1 << 10) - 1


@dataclass(frozen=True)
class ParseOptions:
    """How lenient the parser is with malformed input."""

    allow_missing_endobj: bool = False
    allow_xref_error: bool = False


class Resolver(Protocol):
    options: ParseOptions

    def resolve(self, ref: PlainRef) -> Any: ...

    def resolve_flags(self, ref: PlainRef, flags: ParseFlags, depth: int) -> Any: ...


@dataclass
class NoResolve:
    """A resolver for contexts without a file: every reference is an error."""

    options: ParseOptions = field(default_factory=ParseOptions)

    def resolve(self, ref: PlainRef) -> Any:
        raise PdfError(f"cannot resolve reference {ref.id} {ref.gen} R")

    def resolve_flags(self, ref: PlainRef, flags: ParseFlags, depth: int) -> Any:
        return self.resolve(ref)


@dataclass(frozen=True)
class Context:
    """The indirect object being parsed and the decoder for its strings."""

    id: PlainRef = field(default_factory=lambda: PlainRef(0, 0))
    decoder: Optional[Decoder] = None

    def decrypt(self, data: bytes) -> bytes:
        """Decrypt `data` with this object's decoder, if there is one."""
        if self.decoder is None:
            return bytes(data)
        return bytes(self.decoder(self.id, bytes(data)))


def _check(flags: ParseFlags, allowed: ParseFlags) -> None:
    if not (flags & allowed):
        raise PrimitiveNotAllowed(allowed, flags)


def _to_ranged_int(lexeme: Substr, low: int, high: int) -> int:
    value = lexeme.to(int)
    if not low <= value <= high:
        raise ParseError(f"number {value} out of range")
    return value


def _obj_nr(lexeme: Substr) -> int:
    return _to_ranged_int(lexeme, 0, _OBJ_NR_MAX)


def _gen_nr(lexeme: Substr) -> int:
    return _to_ranged_int(lexeme, 0, _GEN_NR_MAX)


def _nibble(byte: int) -> Optional[int]:
    if 0x30 <= byte <= 0x39:
        return byte - 0x30
    if 0x41 <= byte <= 0x46:
        return byte - 0x41 + 10
    if 0x61 <= byte <= 0x66:
        return byte - 0x61 + 10
    return None


def _decode_name(rest: bytes) -> Name:
    out = bytearray()
    while (idx := rest.find(b"#")) >= 0:
        pair = rest[idx + 1:idx + 3]
        if len(pair) != 2:
            raise PdfEOFError()
        hi, lo = _nibble(pair[0]), _nibble(pair[1])
        if hi is None or lo is None:
            raise HexDecodeError(idx, pair)
        out += rest[:idx]
        out.append(hi << 4 | lo)
        rest = rest[idx + 3:]
    out += rest
    try:
        return Name(bytes(out).decode("utf-8"))
    except UnicodeDecodeError:
        raise Utf8DecodeError() from None


def parse(
    data: bytes, resolver: Optional[Resolver] = None, flags: ParseFlags = ParseFlags.ANY
) -> Any:
    """Parse one primitive from `data`.

    Streams are only accepted if their dictionary holds no indirect references;
    use `parse_stream` otherwise.
    """
    return parse_with_lexer(Lexer(data), resolver, flags)


def parse_with_lexer(
    lexer: Lexer, resolver: Optional[Resolver] = None, flags: ParseFlags = ParseFlags.ANY
) -> Any:
    """Parse one primitive at the lexer's position."""
    return parse_with_lexer_ctx(lexer, resolver, None, flags, MAX_DEPTH)


def parse_with_lexer_ctx(
    lexer: Lexer,
    resolver: Optional[Resolver],
    ctx: Optional[Context],
    flags: ParseFlags = ParseFlags.ANY,
    max_depth: int = MAX_DEPTH,
) -> Any:
    """Parse one primitive; on error the lexer is moved back to where it started."""
    resolver = resolver if resolver is not None else NoResolve()
    pos = lexer.pos
    try:
        return _parse(lexer, resolver, ctx, flags, max_depth)
    except PdfError:
        lexer.set_pos(pos)
        raise


def _parse_dictionary(
    lexer: Lexer, resolver: Resolver, ctx: Optional[Context], max_depth: int
) -> Dictionary:
    result = Dictionary()
    while True:
        token = lexer.next()
        if token.slice.startswith(b"/"):
            key = token.reslice(1).to_name()
            result[key] = parse_with_lexer_ctx(
                lexer, resolver, ctx, ParseFlags.ANY, max_depth
            )
        elif token.equals(b">>"):
            return result
        else:
            raise UnexpectedLexeme(lexer.pos, token.to_string(), "/ or >>")


def _parse_stream_object(
    info: Dictionary, lexer: Lexer, resolver: Resolver, ctx: Context
) -> PdfStream:
    lexer.next_stream()
    length_entry = info.get("Length")
    match length_entry:
        case None:
            raise MissingEntry("<Stream>", "Length")
        case int() if not isinstance(length_entry, bool) and length_entry >= 0:
            length = length_entry
        case PlainRef():
            length = as_unsigned(
                resolver.resolve_flags(length_entry, ParseFlags.INTEGER, 1)
            )
        case _:
            raise UnexpectedPrimitive(
                "unsigned Integer or Reference", debug_name(length_entry)
            )

    data = lexer.read_n(length)
    if len(data) != length:
        raise PdfEOFError()
    lexer.next_expect("endstream")
    return PdfStream(info=info, id=ctx.id, file_range=data.file_range())


def _parse(
    lexer: Lexer,
    resolver: Resolver,
    ctx: Optional[Context],
    flags: ParseFlags,
    max_depth: int,
) -> Any:
    first = lexer.next()

    if first.equals(b"<<"):
        _check(flags, ParseFlags.DICT)
        if max_depth == 0:
            raise MaxDepthError()
        info = _parse_dictionary(lexer, resolver, ctx, max_depth - 1)
        if lexer.peek().equals(b"stream"):
            if ctx is None:
                raise PrimitiveNotAllowed(ParseFlags.STREAM, flags)
            return _parse_stream_object(info, lexer, resolver, ctx)
        return info

    if first.is_integer():
        _check(flags, ParseFlags.INTEGER | ParseFlags.REF)
        pos_bk = lexer.pos
        second = lexer.next()
        if second.is_integer():
            third = lexer.next()
            if third.equals(b"R"):
                _check(flags, ParseFlags.REF)
                return PlainRef(_obj_nr(first), _gen_nr(second))
        _check(flags, ParseFlags.INTEGER)
        lexer.set_pos(pos_bk)
        return _to_ranged_int(first, _I32_MIN, _I32_MAX)

    real = first.real_number()
    if real is not None:
        _check(flags, ParseFlags.NUMBER)
        return real.to(float)

    if first.slice.startswith(b"/"):
        _check(flags, ParseFlags.NAME)
        return _decode_name(first.slice[1:])

    if first.equals(b"["):
        _check(flags, ParseFlags.ARRAY)
        if max_depth == 0:
            raise MaxDepthError()
        items = []
        while not lexer.peek().equals(b"]"):
            items.append(
                parse_with_lexer_ctx(lexer, resolver, ctx, ParseFlags.ANY, max_depth - 1)
            )
        lexer.next()
        return items

    if first.equals(b"(") or first.equals(b"<"):
        _check(flags, ParseFlags.STRING)
        body = StringLexer(lexer.remaining()) if first.equals(b"(") else HexStringLexer(
            lexer.remaining()
        )
        data = bytes(body)
        lexer.offset_pos(body.offset)
        if ctx is not None:
            data = ctx.decrypt(data)
        return PdfString(data)

    if first.equals(b"true") or first.equals(b"false"):
        _check(flags, ParseFlags.BOOL)
        return first.equals(b"true")

    if first.equals(b"null"):
        _check(flags, ParseFlags.NULL)
        return None

    raise UnknownType(lexer.pos, first.to_string(), lexer.read_n(50).to_string())


def parse_stream(data: bytes, resolver: Optional[Resolver], ctx: Context) -> PdfStream:
    """Parse a stream from `data`; its dictionary may hold indirect references."""
    return parse_stream_with_lexer(Lexer(data), resolver, ctx)


def parse_stream_with_lexer(
    lexer: Lexer, resolver: Optional[Resolver], ctx: Context
) -> PdfStream:
    """Parse a stream at the lexer's position."""
    resolver = resolver if resolver is not None else NoResolve()
    first = lexer.next()
    if not first.equals(b"<<"):
        raise UnexpectedPrimitive("Stream", "something else")
    info = _parse_dictionary(lexer, resolver, None, MAX_DEPTH)
    if not lexer.peek().equals(b"stream"):
        raise UnexpectedPrimitive("Stream", "Dictionary")
    return _parse_stream_object(info, lexer, resolver, Context(id=ctx.id))


def _parse_object_header(lexer: Lexer) -> PlainRef:
    ref = PlainRef(_obj_nr(lexer.next()), _gen_nr(lexer.next()))
    lexer.next_expect("obj")
    return ref


def parse_indirect_object(
    lexer: Lexer,
    resolver: Optional[Resolver],
    decrypt: Optional[Decoder] = None,
    flags: ParseFlags = ParseFlags.ANY,
) -> tuple[PlainRef, Any]:
    """Parse `N G obj ... endobj`, returning the reference and the object."""
    resolver = resolver if resolver is not None else NoResolve()
    ref = _parse_object_header(lexer)
    ctx = Context(id=ref, decoder=decrypt)
    obj = parse_with_lexer_ctx(lexer, resolver, ctx, flags, MAX_DEPTH)

    if resolver.options.allow_missing_endobj:
        pos = lexer.pos
        try:
            lexer.next_expect("endobj")
        except PdfError as exc:
            logger.warning("error parsing obj %d %d: %s", ref.id, ref.gen, exc)
            lexer.set_pos(pos)
    else:
        lexer.next_expect("endobj")
    return ref, obj


def parse_indirect_stream(
    lexer: Lexer, resolver: Optional[Resolver], decrypt: Optional[Decoder] = None
) -> tuple[PlainRef, PdfStream]:
    """Parse an indirect object that must be a stream."""
    ref = _parse_object_header(lexer)
    stream = parse_stream_with_lexer(lexer, resolver, Context(id=ref, decoder=decrypt))
    lexer.next_expect("endobj")
    return ref, stream


__all__ = [
    "Context",
    "MAX_DEPTH",
    "NoResolve",
    "ParseFlags",
    "ParseOptions",
    "parse",
    "parse_indirect_object",
    "parse_indirect_stream",
    "parse_stream",
    "parse_stream_with_lexer",
    "parse_with_lexer",
    "parse_with_lexer_ctx",
]