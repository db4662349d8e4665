"""The cross-reference table: where each object of a file can be found."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .errors import MissingEntry, PdfError, UnspecifiedXRefEntry
from .primitive import Dictionary, Name, as_integer, as_unsigned

_U32_MAX = 2**32 - 1
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


@dataclass(frozen=True)
class XRefFree:
    """An object number that is not in use."""

    next_obj_nr: int
    gen_nr: int


@dataclass(frozen=True)
class XRefRaw:
    """An object stored directly in the file at byte offset `pos`."""

    pos: int
    gen_nr: int


@dataclass(frozen=True)
class XRefStream:
    """An object compressed inside the object stream `stream_id`."""

    stream_id: int
    index: int


@dataclass(frozen=True)
class XRefPromised:
    """An object number reserved for an object not yet written."""


@dataclass(frozen=True)
class XRefInvalid:
    """An entry that no cross-reference section has specified."""


XRef = Union[XRefFree, XRefRaw, XRefStream, XRefPromised, XRefInvalid]


def gen_nr(entry: XRef) -> int:
    """Generation number of an entry; objects in streams always have 0."""
    match entry:
        case XRefFree(gen_nr=number) | XRefRaw(gen_nr=number):
            return number
        case XRefStream():
            return 0
    raise PdfError(f"{entry!r} has no generation number")


def byte_len(n: int) -> int:
    """Number of bytes needed to store `n` big-endian; at least one."""
    return max(1, (n.bit_length() + 7) // 8)


class XRefTable:
    """Lookup table from object number to cross-reference entry."""

    def __init__(self, num_objects: int = 0) -> None:
        self._entries: list[XRef] = [XRefInvalid()] * num_objects

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[XRef]:
        return iter(self._entries)

    def object_ids(self) -> Iterator[int]:
        """Numbers of the objects that are in use."""
        for number, entry in enumerate(self._entries):
            if isinstance(entry, (XRefRaw, XRefStream)):
                yield number

    def _check(self, id: int) -> None:
        if not 0 <= id < len(self._entries):
            raise UnspecifiedXRefEntry(id)

    def get(self, id: int) -> XRef:
        self._check(id)
        return self._entries[id]

    def set(self, id: int, entry: XRef) -> None:
        self._check(id)
        self._entries[id] = entry

    def push(self, entry: XRef) -> None:
        self._entries.append(entry)

    def max_field_widths(self) -> tuple[int, int]:
        """Largest values of the two numeric fields over all entries."""
        max_a = max_b = 0
        for entry in self._entries:
            match entry:
                case XRefRaw(pos=a, gen_nr=b) | XRefFree(next_obj_nr=a, gen_nr=b):
                    pass
                case XRefStream(stream_id=a, index=b):
                    pass
                case _:
                    continue
            max_a = max(max_a, a)
            max_b = max(max_b, b)
        return max_a, max_b

    def add_entries_from(self, section: XRefSection) -> None:
        """Merge a section, keeping entries that have a higher generation."""
        for number, entry in section.numbered():
            if not 0 <= number < len(self._entries):
                continue
            current = self._entries[number]
            match current:
                case XRefRaw() | XRefFree():
                    update = gen_nr(entry) > current.gen_nr
                case XRefStream() | XRefInvalid():
                    update = True
                case _:
                    raise PdfError(f"found {current!r}")
            if update:
                self._entries[number] = entry

    def encode_stream_data(self, size: int) -> tuple[XRefInfo, bytes]:
        """Encode the first `size` entries as cross-reference stream data."""
        a_w, b_w = (byte_len(n) for n in self.max_field_widths())
        data = bytearray()
        for entry in self._entries[:size]:
            match entry:
                case XRefFree(next_obj_nr=a, gen_nr=b):
                    kind = 0
                case XRefRaw(pos=a, gen_nr=b):
                    kind = 1
                case XRefStream(stream_id=a, index=b):
                    kind = 2
                case _:
                    raise PdfError(f"invalid xref entry: {entry!r}")
            data.append(kind)
            data += a.to_bytes(a_w, "big")
            data += b.to_bytes(b_w, "big")
        info = XRefInfo(size=size, index=[0, size], prev=None, w=[1, a_w, b_w])
        return info, bytes(data)

    def format(self) -> str:
        """The table in the layout of a classic xref section, one line per entry."""
        lines = []
        for number, entry in enumerate(self._entries):
            match entry:
                case XRefFree():
                    line = f"{number:4}: {entry.next_obj_nr:010} {entry.gen_nr:05} f"
                case XRefRaw():
                    line = f"{number:4}: {entry.pos:010} {entry.gen_nr:05} n"
                case XRefStream():
                    line = f"{number:4}: in stream {entry.stream_id}, index {entry.index}"
                case XRefPromised():
                    line = f"{number:4}: Promised?"
                case _:
                    line = f"{number:4}: Invalid!"
            lines.append(line + "\n")
        return "".join(lines)

    def __str__(self) -> str:
        return self.format()


@dataclass
class XRefSection:
    """A run of consecutive entries as found in a file."""

    first_id: int
    entries: list[XRef] = field(default_factory=list)

    def add_free_entry(self, next_obj_nr: int, gen_nr: int) -> None:
        self.entries.append(XRefFree(next_obj_nr, gen_nr))

    def add_inuse_entry(self, pos: int, gen_nr: int) -> None:
        self.entries.append(XRefRaw(pos, gen_nr))

    def numbered(self) -> Iterator[tuple[int, XRef]]:
        """Pairs of object number and entry."""
        for offset, entry in enumerate(self.entries):
            yield self.first_id + offset, entry


def _u32(value: Any) -> int:
    n = as_unsigned(value)
    if n > _U32_MAX:
        raise PdfError(f"integer {n} does not fit in 32 bits")
    return n


def _one_or_many(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


@dataclass
class XRefInfo:
    """The dictionary of a cross-reference stream."""

    size: int
    index: Optional[list[int]] = None
    prev: Optional[int] = None
    w: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.index is None:
            self.index = [0, self.size]

    @classmethod
    def from_dict(cls, dictionary: Dictionary) -> XRefInfo:
        """Read the fields from a stream dictionary whose /Type is /XRef."""
        dictionary.expect("XRefInfo", "Type", "XRef", True)
        size_value = dictionary.get("Size")
        if size_value is None:
            raise MissingEntry("XRefInfo", "Size")
        size = _u32(size_value)
        if "Index" in dictionary:
            index = [_u32(v) for v in _one_or_many(dictionary["Index"])]
        else:
            index = [0, size]
        prev_value = dictionary.get("Prev")
        prev = None
        if prev_value is not None:
            prev = as_integer(prev_value)
            if not _I32_MIN <= prev <= _I32_MAX:
                raise PdfError(f"integer {prev} does not fit in 32 bits")
        w = [as_unsigned(v) for v in _one_or_many(dictionary.get("W"))]
        return cls(size=size, index=index, prev=prev, w=w)

    def to_dict(self) -> Dictionary:
        result = Dictionary()
        result["Type"] = Name("XRef")
        result["Size"] = self.size
        result["Index"] = list(self.index or [])
        if self.prev is not None:
            result["Prev"] = self.prev
        result["W"] = list(self.w)
        return result


__all__ = [
    "XRef",
    "XRefFree",
    "XRefInfo",
    "XRefInvalid",
    "XRefPromised",
    "XRefRaw",
    "XRefSection",
    "XRefStream",
    "XRefTable",
    "byte_len",
    "gen_nr",
]