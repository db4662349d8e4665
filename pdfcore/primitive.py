"""The basic PDF object model: primitives, dictionaries, strings and names."""

from __future__ import annotations

import math
import struct
from collections.abc import Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Union

from .errors import (
    KeyValueMismatch,
    MissingEntry,
    PdfError,
    UnexpectedPrimitive,
    Utf8DecodeError,
    Utf16DecodeError,
)

_UTF16_BOM = b"\xfe\xff"


class Name(str):
    """A PDF name object; compares and hashes like the plain string."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Name({str.__repr__(self)})"


@dataclass(frozen=True, order=True)
class PlainRef:
    """A reference to an indirect object by number and generation."""

    id: int
    gen: int = 0


def _decode_utf16be(data: bytes, lossy: bool) -> str:
    if len(data) % 2:
        raise Utf16DecodeError("UTF-16BE data has an odd number of bytes")
    out: list[str] = []

    def invalid() -> None:
        if not lossy:
            raise Utf16DecodeError("unpaired surrogate in UTF-16BE data")
        out.append("\ufffd")

    pending = None
    for (unit,) in struct.iter_unpack(">H", data):
        if pending is not None:
            if 0xDC00 <= unit <= 0xDFFF:
                out.append(chr(0x10000 + ((pending - 0xD800) << 10) + (unit - 0xDC00)))
                pending = None
                continue
            invalid()
            pending = None
        if 0xD800 <= unit <= 0xDBFF:
            pending = unit
        elif 0xDC00 <= unit <= 0xDFFF:
            invalid()
        else:
            out.append(chr(unit))
    if pending is not None:
        invalid()
    return "".join(out)


def utf16be_to_string(data: bytes) -> str:
    """Decode UTF-16BE bytes, raising on any invalid sequence."""
    return _decode_utf16be(bytes(data), lossy=False)


def utf16be_to_string_lossy(data: bytes) -> str:
    """Decode UTF-16BE bytes, replacing unpaired surrogates with U+FFFD."""
    return _decode_utf16be(bytes(data), lossy=True)


@dataclass(frozen=True)
class PdfString:
    """A PDF string object: raw bytes without encoding information."""

    data: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))

    def __bytes__(self) -> bytes:
        return self.data

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        parts = ['"']
        for b in self.data:
            if b == 0x22:
                parts.append('\\"')
            elif 0x20 <= b <= 0x7E:
                parts.append(chr(b))
            elif b <= 7:
                parts.append(f"\\{b}")
            else:
                parts.append(f"\\x{b:02x}")
        parts.append('"')
        return "".join(parts)

    def serialize(self) -> bytes:
        """Encode as a literal string, or as a hex string if any byte is non-ASCII."""
        if any(b >= 0x80 for b in self.data):
            return b"<" + self.data.hex().encode("ascii") + b">"
        escaped = (
            self.data.replace(b"\\", b"\\\\").replace(b"(", b"\\(").replace(b")", b"\\)")
        )
        return b"(" + escaped + b")"

    def to_string_lossy(self) -> str:
        """Decode as UTF-16BE (with BOM) or UTF-8, replacing invalid characters."""
        if self.data.startswith(_UTF16_BOM):
            return utf16be_to_string_lossy(self.data[2:])
        return self.data.decode("utf-8", errors="replace")

    def to_string(self) -> str:
        """Decode as UTF-16BE (with BOM) or UTF-8, raising on invalid data."""
        if self.data.startswith(_UTF16_BOM):
            return utf16be_to_string(self.data[2:])
        try:
            return self.data.decode("utf-8")
        except UnicodeDecodeError:
            raise Utf8DecodeError() from None


class Dictionary(MutableMapping):
    """A PDF dictionary; keys are names and iteration is in sorted key order."""

    def __init__(self, entries: Any = None, /, **kwargs: Any) -> None:
        self._entries: dict[Name, Any] = {}
        if entries is not None:
            self.update(entries)
        self.update(kwargs)

    def __getitem__(self, key: str) -> Any:
        return self._entries[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._entries[Name(key)] = value

    def __delitem__(self, key: str) -> None:
        del self._entries[key]

    def __iter__(self) -> Iterator[Name]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def copy(self) -> Dictionary:
        return Dictionary(self)

    def require(self, typ: str, key: str) -> Any:
        """Remove and return the entry, raising MissingEntry if it is absent."""
        try:
            return self._entries.pop(key)
        except KeyError:
            raise MissingEntry(typ, key) from None

    def expect(self, typ: str, key: str, value: str, required: bool) -> None:
        """Check that `key` holds the name `value`, or, if not required, is absent."""
        try:
            found = self._entries[key]
        except KeyError:
            if required:
                raise MissingEntry(typ, key) from None
            return
        name = as_name(found)
        if name != value:
            raise KeyValueMismatch(key, value, name)

    def serialize(self, level: int = 0) -> bytes:
        """Encode in PDF syntax, indenting nested lines by `level`."""
        parts = [b"<<\n"]
        for key, value in self.items():
            parts.append(b" " * (2 * level + 2) + b"/" + key.encode("utf-8") + b" ")
            parts.append(serialize(value, level + 2))
            parts.append(b"\n")
        parts.append(b" " * (2 * level) + b">>\n")
        return b"".join(parts)

    def __str__(self) -> str:
        body = ", ".join(f"/{k}={format_primitive(v)}" for k, v in self.items())
        return f"<{body}>"

    def __repr__(self) -> str:
        lines = "".join(f"/{k}: {format_primitive(v)}\n" for k, v in self.items())
        return "{\n" + lines + "}"


@dataclass
class PdfStream:
    """A stream's dictionary together with where its data lies in the file."""

    info: Dictionary = field(default_factory=Dictionary)
    id: PlainRef = field(default_factory=lambda: PlainRef(0, 0))
    file_range: range = range(0)


Primitive = Union[
    None, bool, int, float, PdfString, PdfStream, Dictionary, list, PlainRef, Name
]


def debug_name(value: Any) -> str:
    """Name of the kind of primitive `value` is, for messages."""
    match value:
        case None:
            return "Null"
        case bool():
            return "Boolean"
        case int():
            return "Integer"
        case float():
            return "Number"
        case PdfString():
            return "String"
        case PdfStream():
            return "Stream"
        case Dictionary():
            return "Dictionary"
        case list() | tuple():
            return "Array"
        case PlainRef():
            return "Reference"
        case str():
            return "Name"
    raise TypeError(f"not a PDF primitive: {value!r}")


def _format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value == 0 and math.copysign(1.0, value) < 0:
        return "-0"
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def format_primitive(value: Any) -> str:
    """Short human-readable form of a primitive."""
    match value:
        case None:
            return "null"
        case bool():
            return "true" if value else "false"
        case int():
            return str(value)
        case float():
            return _format_number(value)
        case PdfString():
            return repr(value)
        case PdfStream():
            return "stream"
        case Dictionary():
            return str(value)
        case list() | tuple():
            return "[" + ", ".join(format_primitive(v) for v in value) + "]"
        case PlainRef():
            return f"@{value.id}"
        case str():
            return f"/{value}"
    raise TypeError(f"not a PDF primitive: {value!r}")


def serialize_name(name: str) -> bytes:
    """Encode a name, escaping backslashes and parentheses; ASCII only."""
    out = bytearray(b"/")
    for ch in name:
        if ch > "~":
            raise ValueError("only ASCII names can be serialized")
        if ch in "\\()":
            out += b"\\"
        out += ch.encode("ascii")
    return bytes(out)


def _serialize_list(items: Any, level: int) -> bytes:
    inner = b" ".join(serialize(item, level + 1) for item in items)
    return b" " * (2 * level) + b"[" + inner + b"]"


def serialize(value: Any, level: int = 0) -> bytes:
    """Encode a primitive in PDF syntax."""
    match value:
        case None:
            return b"null"
        case bool():
            return b"true" if value else b"false"
        case int():
            return str(value).encode("ascii")
        case float():
            return _format_number(value).encode("ascii")
        case PdfString():
            return value.serialize()
        case PdfStream():
            raise PdfError("cannot serialize a stream: its data is not held in memory")
        case Dictionary():
            return value.serialize(level)
        case list() | tuple():
            return _serialize_list(value, level)
        case PlainRef():
            return f"{value.id} {value.gen} R".encode("ascii")
        case str():
            return serialize_name(value)
    raise TypeError(f"not a PDF primitive: {value!r}")


def as_integer(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise UnexpectedPrimitive("Integer", debug_name(value))


def as_unsigned(value: Any) -> int:
    n = as_integer(value)
    if n < 0:
        raise PdfError("negative integer")
    return n


def as_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise UnexpectedPrimitive("Number", debug_name(value))
    return float(value)


def as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise UnexpectedPrimitive("Boolean", debug_name(value))


def as_name(value: Any) -> Name:
    if isinstance(value, str):
        return Name(value)
    raise UnexpectedPrimitive("Name", debug_name(value))


def as_string(value: Any) -> PdfString:
    if isinstance(value, PdfString):
        return value
    raise UnexpectedPrimitive("String", debug_name(value))


def as_array(value: Any) -> list:
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    raise UnexpectedPrimitive("Array", debug_name(value))


def as_dictionary(value: Any) -> Dictionary:
    if isinstance(value, Dictionary):
        return value
    raise UnexpectedPrimitive("Dictionary", debug_name(value))


def as_reference(value: Any) -> PlainRef:
    if isinstance(value, PlainRef):
        return value
    raise UnexpectedPrimitive("Reference", debug_name(value))


def as_stream(value: Any) -> PdfStream:
    if isinstance(value, PdfStream):
        return value
    raise UnexpectedPrimitive("Stream", debug_name(value))


def to_text(value: Any) -> str:
    """Text of a name, or the lossily decoded text of a string."""
    if isinstance(value, PdfString):
        return value.to_string_lossy()
    if isinstance(value, str):
        return str(value)
    raise UnexpectedPrimitive("Name or String", debug_name(value))


__all__ = [
    "Dictionary",
    "Name",
    "PdfStream",
    "PdfString",
    "PlainRef",
    "Primitive",
    "as_array",
    "as_bool",
    "as_dictionary",
    "as_integer",
    "as_name",
    "as_number",
    "as_reference",
    "as_stream",
    "as_string",
    "as_unsigned",
    "debug_name",
    "format_primitive",
    "serialize",
    "serialize_name",
    "to_text",
    "utf16be_to_string",
    "utf16be_to_string_lossy",
]