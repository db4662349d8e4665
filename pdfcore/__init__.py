"""Low-level PDF object model, lexer, object parser, cross-reference tables, dates and path writing."""

__version__ = "0.1.0"