import pytest

from pdfcore.errors import (
    HexDecodeError,
    KeyValueMismatch,
    MaxDepthError,
    MissingEntry,
    NotFound,
    ParseError,
    PdfEOFError,
    PdfError,
    PrimitiveNotAllowed,
    UnexpectedLexeme,
    UnexpectedPrimitive,
    UnknownType,
    UnspecifiedXRefEntry,
    Utf8DecodeError,
    Utf16DecodeError,
    XRefStreamType,
)


def test_eof_error_carries_message_and_is_pdf_error():
    err = PdfEOFError("ran out")
    assert isinstance(err, PdfError)
    assert str(err) == "ran out"


def test_unexpected_primitive_fields():
    err = UnexpectedPrimitive("Integer", "Name")
    assert (err.expected, err.found) == ("Integer", "Name")
    assert "Integer" in str(err) and "Name" in str(err)


def test_missing_entry_fields():
    err = MissingEntry("<Stream>", "Length")
    assert (err.typ, err.field) == ("<Stream>", "Length")
    assert "Length" in str(err)


def test_key_value_mismatch_fields():
    err = KeyValueMismatch("Type", "XRef", "Page")
    assert (err.key, err.value, err.found) == ("Type", "XRef", "Page")
    assert "Page" in str(err)


def test_unexpected_lexeme_fields():
    err = UnexpectedLexeme(12, "foo", "endobj")
    assert (err.pos, err.lexeme, err.expected) == (12, "foo", "endobj")
    assert "endobj" in str(err)


def test_hex_decode_error_keeps_bytes():
    err = HexDecodeError(3, bytearray(b"zz"))
    assert err.data == b"zz"
    assert err.pos == 3


def test_primitive_not_allowed_fields():
    err = PrimitiveNotAllowed(4, 1)
    assert (err.allowed, err.found) == (4, 1)


def test_unknown_type_fields():
    err = UnknownType(7, "@", "rest of input")
    assert (err.pos, err.first_lexeme, err.rest) == (7, "@", "rest of input")
    assert "rest of input" in str(err)


def test_not_found_word():
    err = NotFound("startxref")
    assert err.word == "startxref"
    assert "startxref" in str(err)


def test_xref_errors_fields():
    assert XRefStreamType(5).found == 5
    assert UnspecifiedXRefEntry(42).id == 42
    assert "42" in str(UnspecifiedXRefEntry(42))


def test_parse_error_keeps_source():
    cause = ValueError("bad digit")
    err = ParseError(cause)
    assert err.source is cause
    assert "bad digit" in str(err)


@pytest.mark.parametrize(
    "cls", [Utf8DecodeError, Utf16DecodeError, MaxDepthError, PdfEOFError]
)
def test_default_message_errors_are_pdf_errors(cls):
    err = cls()
    assert isinstance(err, PdfError)
    assert str(err) == str(cls())
    assert len(str(err)) > 0