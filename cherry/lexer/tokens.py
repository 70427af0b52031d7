"""
Token records for the Cherry lexer.

A token's type is a grammar `Terminal` taken from the `TerminalTable` the
lexer was built with, so the parser can match tokens against rule bodies
without a separate translation step.

This module also holds the character classes the scanner dispatches on.
"""

from dataclasses import dataclass

from ..grammar.symbols import Terminal, TerminalKind


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in a source file.

    Line and column are 1-based; offset counts characters from the start
    of the file.
    """
    filename: str
    line: int
    column: int
    offset: int = 0

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    A single lexical token.

    `location` points at the first character of the lexeme.
    """
    type: Terminal
    lexeme: str
    location: SourceLocation

    def __str__(self) -> str:
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r}, {self.location!r})"

    @property
    def filename(self) -> str:
        return self.location.filename

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def column(self) -> int:
        return self.location.column

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a keyword."""
        return self.type.kind is TerminalKind.KEYWORD

    @property
    def is_operator(self) -> bool:
        """Check if this token is an operator or punctuation."""
        return self.type.kind is TerminalKind.SYMBOL

    @property
    def is_literal(self) -> bool:
        """Check if this token is an identifier or a literal value."""
        return self.type.kind is TerminalKind.LITERAL

    @property
    def is_undefined(self) -> bool:
        return self.type.name == "UNDEF"

    @property
    def is_end(self) -> bool:
        return self.type.name == "EOTS"


# Character classes used by the scanner. Only ASCII letters and digits take
# part in words and numbers; anything else falls through to symbol scanning.
DIGITS = frozenset("0123456789")
HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
BINARY_DIGITS = frozenset("01")
LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
WHITESPACE = frozenset(" \t\r\f\v")

HEX_PREFIXES = frozenset("xX")
BINARY_PREFIXES = frozenset("bB")
WIDE_SUFFIXES = frozenset("lL")
SKINNY_SUFFIXES = frozenset("sS")

COMMENT_START = "#"
STRING_QUOTE = '"'
CHAR_QUOTE = "'"
ESCAPE = "\\"
UNICODE_ESCAPE = "u"

# `\uXXXX` takes at most this many hex digits after the `u`.
MAX_UNICODE_ESCAPE_DIGITS = 4


def is_word_start(char: str) -> bool:
    return char in LETTERS or char == "_"


def is_word_char(char: str) -> bool:
    return char in LETTERS or char in DIGITS or char == "_"


def is_digit(char: str) -> bool:
    return char in DIGITS


def is_hex_digit(char: str) -> bool:
    return char in HEX_DIGITS
