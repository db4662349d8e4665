# pdfcore

Low-level building blocks for PDF files: the primitive object model, a
byte-level lexer, decoders for literal and hexadecimal strings, an object
parser, cross-reference tables and streams, PDF dates, and a writer for
path operators. It needs only the standard library.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `pdfcore.primitive`: PDF values. Names are `Name` (a `str` subclass),
  strings are `PdfString` (raw bytes), dictionaries are `Dictionary` (a
  mutable mapping that iterates in sorted key order), references are
  `PlainRef`, stream headers are `PdfStream`; null, integers, reals,
  booleans and arrays are Python's `None`, `int`, `float`, `bool` and
  `list`. Accessors such as `as_integer`, `as_unsigned`, `as_number`,
  `as_name`, `as_string`, `as_array`, `as_dictionary`, `as_reference` and
  `as_stream` raise `UnexpectedPrimitive` for the wrong kind. `serialize`
  writes a value back out as PDF syntax, `format_primitive` gives a short
  readable form, and `PdfString.to_string` / `to_string_lossy` decode
  UTF-16BE (with byte-order mark) or UTF-8 text.
- `pdfcore.lexer`: `Lexer` splits a byte buffer into lexemes (`Substr`) at
  whitespace and delimiters, skips `%` comments, and can step back, peek,
  seek and read raw bytes.
- `pdfcore.string_lexer`: `StringLexer` decodes the body of a `( ... )`
  string (escapes, octal codes, nested parentheses, line continuations);
  `HexStringLexer` decodes the body of a `< ... >` string.
- `pdfcore.parser`: `parse`, `parse_with_lexer`, `parse_with_lexer_ctx`,
  `parse_stream`, `parse_indirect_object` and `parse_indirect_stream`.
  `ParseFlags` limits which kinds of primitive are accepted, `ParseOptions`
  sets leniency (`allow_missing_endobj`, `allow_xref_error`), `NoResolve`
  is a resolver that refuses every reference, and `Context` carries the
  object being parsed and an optional decoder callable applied to its
  strings. Nesting is limited to `MAX_DEPTH` (20) levels.
- `pdfcore.xref`: the entry kinds `XRefFree`, `XRefRaw`, `XRefStream`,
  `XRefPromised`, `XRefInvalid`; `XRefTable` (merge sections with
  `add_entries_from`, list in-use objects with `object_ids`, encode entries
  as stream data with `encode_stream_data`, print with `format`);
  `XRefSection`; and `XRefInfo`, the cross-reference stream dictionary.
- `pdfcore.parse_xref`: `read_xref_and_trailer_at` reads either a classic
  `xref` table or a cross-reference stream, with the trailer dictionary.
- `pdfcore.date`: `Date.from_primitive` reads `D:YYYYMMDDHHmmSS...`
  strings; missing or unreadable fields after the year take defaults.
- `pdfcore.path`: `PathBuilder` writes `m`, `l`, `c`, `v`, `y`, `h` and
  fill operators to a text stream; quadratic curves are written as cubics.
  `FillMode` picks the non-zero or even-odd rule.
- `pdfcore.errors`: every failure is a subclass of `PdfError`.

## Examples

Parsing an object:

```python
from pdfcore.parser import parse, NoResolve, ParseFlags
from pdfcore.primitive import as_name

value = parse(b"<</Type /Page /Count 3>>", NoResolve(), ParseFlags.DICT)
print(as_name(value["Type"]))    # Page
print(value["Count"])            # 3
```

Reading a cross-reference table:

```python
from pdfcore.lexer import Lexer
from pdfcore.parse_xref import read_xref_and_trailer_at
from pdfcore.parser import NoResolve

data = b"xref\n0 2\n0000000000 65535 f \n0000000017 00000 n \ntrailer\n<</Size 2>>"
sections, trailer = read_xref_and_trailer_at(Lexer(data), NoResolve())
print(sections[0].entries)       # [XRefFree(...), XRefRaw(pos=17, gen_nr=0)]
print(trailer["Size"])           # 2
```

Writing a path:

```python
import io
from pdfcore.path import PathBuilder, FillMode

out = io.StringIO()
path = PathBuilder(out, (0, 0))
path.line_to((10, 0))
path.line_to((10, 10))
path.close()
path.fill(FillMode.NON_ZERO)
print(out.getvalue())
```

## What it does not do

This is a toolkit of parts, not a PDF reader or writer. It does not open
whole documents, walk page trees, locate `startxref`, rebuild damaged
cross-reference tables or resolve indirect references against a file; a
resolver has to be supplied by the caller (`NoResolve` refuses them all).
It has no encryption support beyond calling a decoder you pass in. Stream
data is not held in memory: `serialize` raises for a `PdfStream`, and the
only filter applied when reading a cross-reference stream is `FlateDecode`
without predictors. There is no command-line tool.