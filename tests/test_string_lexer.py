import pytest
from hypothesis import given, strategies as st

from pdfcore.errors import HexDecodeError, PdfEOFError
from pdfcore.string_lexer import HexStringLexer, StringLexer


def lex(data: bytes) -> bytes:
    return bytes(StringLexer(data))


def hexlex(data: bytes) -> bytes:
    return bytes(HexStringLexer(data))


def test_escapes():
    assert lex(b"a\\nb\\rc\\td\\(f/)\\\\hei)") == b"a\nb\rc\td(f/"


@pytest.mark.parametrize(
    "data",
    [
        b"These \\\ntwo strings \\\nare the same.)",
        b"These \\\rtwo strings \\\rare the same.)",
        b"These \\\r\ntwo strings \\\r\nare the same.)",
    ],
)
def test_string_split_lines(data):
    assert lex(data) == b"These two strings are the same."


@pytest.mark.parametrize(
    "data, expected",
    [
        (
            b"This string contains\\245two octal characters\\307.)",
            b"This string contains\xa5two octal characters\xc7.",
        ),
        (b"\\0053)", b"\x053"),
        (b"\\053)", b"+"),
        (b"\\53)", b"+"),
        (b"\\541)", b"a"),
    ],
)
def test_octal_escape(data, expected):
    assert lex(data) == expected


def test_nested_parentheses_are_kept():
    assert lex(b"a(b)c)rest") == b"a(b)c"


def test_offset_points_past_closing_paren():
    lexer = StringLexer(b"ab)cd")
    assert bytes(lexer) == b"ab"
    assert lexer.offset == 3


def test_unterminated_string_raises_eof():
    with pytest.raises(PdfEOFError):
        lex(b"abc")


def test_next_lexeme_returns_none_at_end():
    lexer = StringLexer(b")")
    assert lexer.next_lexeme() is None


@given(st.binary().map(lambda b: b.replace(b"\\", b"").replace(b"(", b"").replace(b")", b"")))
def test_plain_bytes_pass_through(body):
    lexer = StringLexer(body + b")")
    assert bytes(lexer) == body
    assert lexer.offset == len(body) + 1


def test_hex():
    assert hexlex(b"901FA3>") == b"\x90\x1f\xa3"
    assert hexlex(b"901FA>") == b"\x90\x1f\xa0"
    assert hexlex(b"1 9F\t5\r\n4\x0c62a>") == b"\x19\xf5\x46\x2a"


def test_hex_offset():
    lexer = HexStringLexer(b"901FA>tail")
    assert bytes(lexer) == b"\x90\x1f\xa0"
    assert lexer.offset == 6


def test_hex_invalid_digit():
    with pytest.raises(HexDecodeError) as info:
        hexlex(b"9G>")
    assert info.value.data == b"9G"


def test_hex_invalid_first_digit():
    with pytest.raises(HexDecodeError) as info:
        hexlex(b"zz>")
    assert info.value.data == b"zz"


def test_hex_unterminated():
    with pytest.raises(PdfEOFError):
        hexlex(b"90")


@given(st.binary())
def test_hex_roundtrip(data):
    assert hexlex(data.hex().encode("ascii") + b">") == data