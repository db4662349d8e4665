"""Reading cross-reference tables, streams and trailers."""

from __future__ import annotations

import logging
import zlib
from collections.abc import Sequence
from typing import BinaryIO, Optional

from .errors import ParseError, PdfEOFError, PdfError, UnexpectedLexeme, XRefStreamType
from .lexer import Lexer
from .parser import (
    NoResolve,
    ParseFlags,
    ParseOptions,
    parse_indirect_stream,
    parse_with_lexer,
)
from .primitive import Dictionary, PdfStream, as_dictionary
from .xref import XRefFree, XRefInfo, XRefRaw, XRefSection, XRefStream

logger = logging.getLogger(__name__)

_U16_MAX = 2**16 - 1
_U32_MAX = 2**32 - 1
_U64_MAX = 2**64 - 1


def read_uint(width: int, stream: BinaryIO) -> int:
    """Read a big-endian unsigned integer of `width` bytes."""
    data = stream.read(width)
    if len(data) != width:
        raise PdfEOFError()
    return int.from_bytes(data, "big")


def _remaining(stream: BinaryIO) -> int:
    pos = stream.tell()
    end = stream.seek(0, 2)
    stream.seek(pos)
    return end - pos


def parse_xref_section_from_stream(
    first_id: int,
    num_entries: int,
    width: Sequence[int],
    stream: BinaryIO,
    options: Optional[ParseOptions] = None,
) -> XRefSection:
    """Read `num_entries` entries with field widths `width` from `stream`."""
    options = options if options is not None else ParseOptions()
    if len(width) != 3:
        raise PdfError("invalid xref length array")
    w0, w1, w2 = width
    entry_width = w0 + w1 + w2
    available = _remaining(stream)
    if num_entries * entry_width > available:
        if options.allow_xref_error:
            logger.warning("not enough xref data. truncating.")
            num_entries = available // entry_width
        else:
            raise PdfError("not enough xref data")

    section = XRefSection(first_id)
    for _ in range(num_entries):
        kind = 1 if w0 == 0 else read_uint(w0, stream)
        field1 = read_uint(w1, stream)
        field2 = read_uint(w2, stream)
        match kind:
            case 0:
                section.entries.append(XRefFree(field1, field2))
            case 1:
                section.entries.append(XRefRaw(field1, field2))
            case 2:
                section.entries.append(XRefStream(field1, field2))
            case _:
                raise XRefStreamType(kind)
    return section


def _filters(info: Dictionary) -> list:
    value = info.get("Filter")
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _stream_data(lexer: Lexer, stream: PdfStream) -> bytes:
    start = stream.file_range.start - lexer.file_offset
    stop = stream.file_range.stop - lexer.file_offset
    data = lexer.buf[start:stop]
    params = stream.info.get("DecodeParms")
    if isinstance(params, Dictionary) and params.get("Predictor", 1) not in (None, 1):
        raise PdfError("stream predictors are not supported")
    for name in _filters(stream.info):
        if name != "FlateDecode":
            raise PdfError(f"unsupported stream filter {name}")
        try:
            data = zlib.decompress(data)
        except zlib.error as exc:
            raise PdfError(f"cannot inflate stream: {exc}") from exc
    return data


def parse_xref_stream_and_trailer(
    lexer: Lexer, resolver=None
) -> tuple[list[XRefSection], Dictionary]:
    """Read the xref stream at the lexer's position and the trailer."""
    resolver = resolver if resolver is not None else NoResolve()
    _, xref_stream = parse_indirect_stream(lexer, resolver, None)
    if lexer.next() == "trailer":
        trailer = as_dictionary(parse_with_lexer(lexer, resolver, ParseFlags.DICT))
    else:
        trailer = xref_stream.info.copy()

    info = XRefInfo.from_dict(xref_stream.info)
    data = _stream_data(lexer, xref_stream)
    index = info.index or []
    if len(index) % 2 != 0:
        raise PdfError(
            f"xref stream has {len(index)} elements which is not an even number"
        )

    import io

    reader = io.BytesIO(data)
    sections = [
        parse_xref_section_from_stream(first_id, count, info.w, reader, resolver.options)
        for first_id, count in zip(index[::2], index[1::2])
    ]
    return sections, trailer


def _next_uint(lexer: Lexer, maximum: int) -> int:
    return _ranged(lexer.next().to(int), maximum)


def _ranged(value: int, maximum: int) -> int:
    if not 0 <= value <= maximum:
        raise ParseError(f"number {value} out of range")
    return value


def parse_xref_table_and_trailer(
    lexer: Lexer, resolver=None
) -> tuple[list[XRefSection], Dictionary]:
    """Read a classic xref table (after the `xref` keyword) and the trailer."""
    resolver = resolver if resolver is not None else NoResolve()
    sections = []
    while lexer.peek() != "trailer":
        start_id = _next_uint(lexer, _U32_MAX)
        num_ids = _next_uint(lexer, _U32_MAX)
        section = XRefSection(start_id)
        for count in range(num_ids):
            w1 = lexer.next()
            if w1 == "trailer":
                raise PdfError(
                    f"xref table declares {num_ids} entries, but only {count} follow."
                )
            w2 = lexer.next()
            w3 = lexer.next()
            if w3 == "f":
                section.add_free_entry(
                    _ranged(w1.to(int), _U64_MAX), _ranged(w2.to(int), _U16_MAX)
                )
            elif w3 == "n":
                section.add_inuse_entry(
                    _ranged(w1.to(int), _U64_MAX), _ranged(w2.to(int), _U16_MAX)
                )
            else:
                raise UnexpectedLexeme(lexer.pos, w3.to_string(), "f or n")
        sections.append(section)

    lexer.next_expect("trailer")
    trailer = as_dictionary(parse_with_lexer(lexer, resolver, ParseFlags.DICT))
    return sections, trailer


def read_xref_and_trailer_at(
    lexer: Lexer, resolver=None
) -> tuple[list[XRefSection], Dictionary]:
    """Read either a classic xref table or an xref stream, with its trailer."""
    if lexer.next() == "xref":
        return parse_xref_table_and_trailer(lexer, resolver)
    lexer.back()
    return parse_xref_stream_and_trailer(lexer, resolver)


__all__ = [
    "parse_xref_section_from_stream",
    "parse_xref_stream_and_trailer",
    "parse_xref_table_and_trailer",
    "read_uint",
    "read_xref_and_trailer_at",
]