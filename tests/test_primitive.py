import pytest
from hypothesis import given
from hypothesis import strategies as st

from pdfcore.errors import (
    KeyValueMismatch,
    MissingEntry,
    PdfError,
    UnexpectedPrimitive,
    Utf8DecodeError,
    Utf16DecodeError,
)
from pdfcore.primitive import (
    Dictionary,
    Name,
    PdfStream,
    PdfString,
    PlainRef,
    as_array,
    as_bool,
    as_dictionary,
    as_integer,
    as_name,
    as_number,
    as_reference,
    as_stream,
    as_string,
    as_unsigned,
    debug_name,
    format_primitive,
    serialize,
    serialize_name,
    to_text,
    utf16be_to_string,
    utf16be_to_string_lossy,
)

REPLACEMENT = "\ufffd"


def test_name_hashes_like_str():
    s = "Hello World!"
    assert hash(Name(s)) == hash(s)
    assert Name(s) == s


def test_utf16be_string():
    s = PdfString(bytes([0xFE, 0xFF, 0x20, 0x09]))
    assert s.to_string_lossy() == "\u2009"


def test_utf16be_invalid_string():
    s = PdfString(bytes([0xFE, 0xFF, 0xD8, 0x34]))
    assert s.to_string_lossy() == REPLACEMENT


def test_utf16be_invalid_bytelen():
    s = PdfString(bytes([0xFE, 0xFF, 0xD8, 0x34, 0x20]))
    with pytest.raises(Utf16DecodeError):
        s.to_string_lossy()


def test_pdfstring_lossy_vs_ascii():
    s = PdfString(bytes([0xFE, 0xFF, 0xD8, 0x34]))
    with pytest.raises(Utf16DecodeError):
        s.to_string()

    s = PdfString(bytes([0xFE, 0xFF, 0x00, 0xE4]))
    assert s.to_string_lossy() == "ä"
    assert s.to_string() == "ä"

    s = PdfString(b"mit\xc3\xa4")
    assert s.to_string_lossy() == "mitä"
    assert s.to_string() == "mitä"

    s = PdfString(b"mit\xe4")
    assert s.to_string_lossy() == "mit" + REPLACEMENT
    with pytest.raises(Utf8DecodeError):
        s.to_string()


def test_utf16_surrogate_pair():
    data = "\U0001d11e".encode("utf-16-be")
    assert utf16be_to_string(data) == "\U0001d11e"
    assert utf16be_to_string_lossy(data) == "\U0001d11e"


@given(st.text())
def test_utf16_with_bom_round_trip(text):
    assert PdfString(b"\xfe\xff" + text.encode("utf-16-be")).to_string() == text


@given(st.text())
def test_utf8_round_trip(text):
    # UTF-8 never produces the byte 0xfe, so no encoded text carries the UTF-16 mark.
    assert PdfString(text.encode("utf-8")).to_string() == text


def test_string_serialize_literal_escapes():
    assert PdfString(b"a(b)\\c").serialize() == b"(a\\(b\\)\\\\c)"


def test_string_serialize_hex_for_high_bytes():
    assert PdfString(b"\x90\x1f").serialize() == b"<901f>"


def test_string_debug_repr():
    assert repr(PdfString(b'a"\x01\xff')) == '"a\\"\\1\\xff"'


def test_serialize_scalars():
    assert serialize(None) == b"null"
    assert serialize(True) == b"true"
    assert serialize(-12) == b"-12"
    assert serialize(1.5) == b"1.5"
    assert serialize(2.0) == b"2"
    assert serialize(PlainRef(13, 0)) == b"13 0 R"
    assert serialize(Name("Type")) == b"/Type"


def test_serialize_array():
    assert serialize([1, Name("A"), PdfString(b"x")]) == b"[1 /A (x)]"


def test_serialize_name_escapes_and_rejects_non_ascii():
    assert serialize_name("a(b)") == b"/a\\(b\\)"
    with pytest.raises(ValueError):
        serialize_name("ä")


def test_serialize_stream_raises():
    with pytest.raises(PdfError):
        serialize(PdfStream())


def test_dictionary_sorted_and_serialized():
    d = Dictionary()
    d["Type"] = Name("XRef")
    d["Size"] = 3
    assert list(d) == ["Size", "Type"]
    assert all(isinstance(k, Name) for k in d)
    assert d.serialize(0) == b"<<\n  /Size 3\n  /Type /XRef\n>>\n"


def test_dictionary_display_and_debug():
    d = Dictionary({"A": 1, "B": Name("X")})
    assert str(d) == "</A=1, /B=/X>"
    assert repr(d) == "{\n/A: 1\n/B: /X\n}"


def test_dictionary_require():
    d = Dictionary({"Length": 5})
    assert d.require("Stream", "Length") == 5
    assert len(d) == 0
    with pytest.raises(MissingEntry) as info:
        d.require("Stream", "Length")
    assert info.value.field == "Length"


def test_dictionary_expect():
    d = Dictionary({"Type": Name("XRef")})
    d.expect("XRefInfo", "Type", "XRef", True)
    with pytest.raises(KeyValueMismatch) as info:
        d.expect("XRefInfo", "Type", "Page", True)
    assert info.value.found == "XRef"
    empty = Dictionary()
    empty.expect("XRefInfo", "Type", "XRef", False)
    with pytest.raises(MissingEntry):
        empty.expect("XRefInfo", "Type", "XRef", True)
    with pytest.raises(UnexpectedPrimitive):
        Dictionary({"Type": 1}).expect("X", "Type", "XRef", True)


def test_dictionary_equality():
    assert Dictionary({"A": 1}) == Dictionary({"A": 1})
    assert Dictionary({"A": 1}) != Dictionary({"A": 2})


def test_format_primitive():
    assert format_primitive([1, True, None]) == "[1, true, null]"
    assert format_primitive(PlainRef(7, 0)) == "@7"
    assert format_primitive(Name("N")) == "/N"
    assert format_primitive(PdfStream()) == "stream"
    assert format_primitive(0.25) == "0.25"


def test_debug_name():
    assert debug_name(True) == "Boolean"
    assert debug_name(3) == "Integer"
    assert debug_name(3.0) == "Number"
    assert debug_name(Dictionary()) == "Dictionary"
    assert debug_name([]) == "Array"
    assert debug_name(None) == "Null"
    with pytest.raises(TypeError):
        debug_name(object())


def test_accessors_accept_matching_kind():
    ref = PlainRef(1, 0)
    stream = PdfStream()
    d = Dictionary()
    assert as_integer(4) == 4
    assert as_unsigned(4) == 4
    assert as_number(3) == 3.0
    assert as_bool(False) is False
    assert as_name(Name("X")) == "X"
    assert as_string(PdfString(b"x")).data == b"x"
    assert as_array([1]) == [1]
    assert as_dictionary(d) is d
    assert as_reference(ref) is ref
    assert as_stream(stream) is stream


def test_accessors_reject_other_kinds():
    with pytest.raises(UnexpectedPrimitive) as info:
        as_integer(True)
    assert info.value.found == "Boolean"
    with pytest.raises(UnexpectedPrimitive):
        as_number(Name("x"))
    with pytest.raises(UnexpectedPrimitive):
        as_bool(1)
    with pytest.raises(UnexpectedPrimitive):
        as_array(Dictionary())
    with pytest.raises(PdfError):
        as_unsigned(-1)


def test_to_text():
    assert to_text(Name("Helvetica")) == "Helvetica"
    assert to_text(PdfString(b"mit\xc3\xa4")) == "mitä"
    with pytest.raises(UnexpectedPrimitive) as info:
        to_text(5)
    assert info.value.expected == "Name or String"