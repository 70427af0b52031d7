"""
Cherry Lexer Package

Character-level scanner for Cherry source files.

Key Features:
- Single pass over a text stream with character pushback
- Radix literals (0x, 0b, leading-zero octal) and L/S width suffixes
- Maximal-munch operator recognition against the terminal table
- Soft errors become UNDEF tokens; literal errors abort the file
- Every token records the file, line and column of its first character
"""

from .tokens import Token, SourceLocation
from .lexer import Lexer, tokenize_string, tokenize_file
from .errors import (
    Diagnostic,
    LexerError,
    LexicalError,
    LiteralTypeConflictError,
    UnterminatedLiteralError,
    LexerWarning,
)

__all__ = [
    "Lexer",
    "Token",
    "SourceLocation",
    "tokenize_string",
    "tokenize_file",
    "Diagnostic",
    "LexerError",
    "LexicalError",
    "LiteralTypeConflictError",
    "UnterminatedLiteralError",
    "LexerWarning",
]
