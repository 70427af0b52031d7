"""
Error handling for the Cherry lexer.

Soft errors (`LexicalError`) are collected on the lexer and the offending
text becomes an `UNDEF` token. Hard errors (`LiteralTypeConflictError`,
`UnterminatedLiteralError`) are raised out of `Lexer.tokenize` and abort the
scan of that one file.
"""

from typing import Optional, List
from dataclasses import dataclass

from ..errors import CherryError
from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """A located message about a source file (error, warning, info)."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning", "info"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        if self.code:
            severity_prefix += f"[{self.code}]"
        result = f"{severity_prefix}: {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class LexerError(CherryError):
    """
    Base exception for errors found while scanning a file.

    Carries a `Diagnostic` with the location of the offending lexeme.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    def __str__(self) -> str:
        return str(self.diagnostic)


class LexicalError(LexerError):
    """An unrecognized character sequence. Recorded, never raised out of the lexer."""


class LiteralTypeConflictError(LexerError):
    """A width suffix (`L`, `S`) on a hexadecimal, octal or binary literal."""


class UnterminatedLiteralError(LexerError):
    """A string or character literal that runs to the end of the file."""


class LexerWarning:
    """
    Represents a lexer warning that doesn't stop compilation.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="warning",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    def __str__(self) -> str:
        return str(self.diagnostic)


ERROR_CODES = {
    "L001": "Undefined character sequence",
    "L002": "Unterminated string literal",
    "L003": "Unterminated character literal",
    "L004": "Radix and width suffix conflict",
    "L005": "Character literal too long",
    "L006": "Radix prefix without digits",
    "L007": "Empty character literal",
    "L008": "Digit out of range for octal literal",
}


def create_undefined_sequence_error(lexeme: str, location: SourceLocation) -> LexicalError:
    """Create a soft error for punctuation that matches no terminal."""
    if len(lexeme) == 1 and not lexeme.isprintable():
        help_text = f"Non-printable character (Unicode: U+{ord(lexeme):04X}) is not allowed."
    else:
        help_text = f"'{lexeme}' is not an operator or punctuation symbol in Cherry."

    return LexicalError(
        message=f"{ERROR_CODES['L001']}: '{lexeme}'",
        location=location,
        code="L001",
        help_text=help_text,
    )


def create_unterminated_string_error(location: SourceLocation) -> UnterminatedLiteralError:
    return UnterminatedLiteralError(
        message=ERROR_CODES["L002"],
        location=location,
        code="L002",
        help_text='String literals must be closed with a matching " quote.',
        suggestions=['Add a closing " quote']
    )


def create_unterminated_char_error(location: SourceLocation) -> UnterminatedLiteralError:
    return UnterminatedLiteralError(
        message=ERROR_CODES["L003"],
        location=location,
        code="L003",
        help_text="Character literals must be closed with a matching ' quote.",
        suggestions=["Add a closing ' quote"]
    )


def create_type_conflict_error(lexeme: str, radix: str, location: SourceLocation) -> LiteralTypeConflictError:
    """Create the hard error for a width suffix on a non-decimal literal."""
    return LiteralTypeConflictError(
        message=f"{ERROR_CODES['L004']}: '{lexeme}' is a {radix} literal",
        location=location,
        code="L004",
        help_text=f"The L and S suffixes only apply to decimal literals, not {radix} ones.",
        suggestions=["Remove the suffix", "Write the value as a decimal literal"]
    )


def create_long_char_warning(lexeme: str, location: SourceLocation) -> LexerWarning:
    return LexerWarning(
        message=f"{ERROR_CODES['L005']}: {lexeme}",
        location=location,
        code="L005",
        help_text="Use a string literal for more than one character.",
    )


def create_missing_radix_digits_error(lexeme: str, location: SourceLocation) -> LexicalError:
    return LexicalError(
        message=f"{ERROR_CODES['L006']}: '{lexeme}'",
        location=location,
        code="L006",
        help_text="A 0x or 0b prefix must be followed by at least one digit.",
    )


def create_empty_char_warning(location: SourceLocation) -> LexerWarning:
    return LexerWarning(ERROR_CODES["L007"], location, code="L007")


def create_octal_digit_error(lexeme: str, location: SourceLocation) -> LexicalError:
    """Create a soft error for an 8 or 9 in a leading-zero (octal) literal."""
    return LexicalError(
        message=f"{ERROR_CODES['L008']}: '{lexeme}'",
        location=location,
        code="L008",
        help_text="Octal literals use the digits 0-7. Drop the leading 0 for a decimal literal.",
    )
