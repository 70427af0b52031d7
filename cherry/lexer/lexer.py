"""
Cherry Lexer - turns one source file into a token stream.

The lexer pulls characters one at a time from a text stream and can push
characters back. One character of pushback covers almost everything; the two
places that back up further are a number followed by `.` and a non-digit
(`3.x` ends the number before the dot) and an operator prefix that is not
itself an operator (`..` is backed out to `.`). The pushback stack therefore
holds up to two characters.

Scanning loop:
    skip whitespace and `#` comments
    classify the next character -> word | number | string | char | symbol
    repeat until end of file, then append a single EOTS ("$") token

Undefined punctuation, a bare `0x`/`0b` and an octal literal holding 8 or 9
become UNDEF tokens with a soft `LexicalError` in `errors`. A width suffix on a
radix literal and an unterminated string or character literal raise out of
`tokenize()`, and the lexer stays failed afterwards.
"""

import io
from collections import deque
from typing import Callable, Deque, List, Optional, TextIO, Tuple, Union

from ..grammar.language import build_terminal_table
from ..grammar.symbols import Terminal, TerminalTable
from .tokens import (
    Token, SourceLocation, WHITESPACE, HEX_PREFIXES, BINARY_PREFIXES, BINARY_DIGITS,
    WIDE_SUFFIXES, SKINNY_SUFFIXES, COMMENT_START, STRING_QUOTE, CHAR_QUOTE, ESCAPE,
    UNICODE_ESCAPE, MAX_UNICODE_ESCAPE_DIGITS,
    is_word_start, is_word_char, is_digit, is_hex_digit,
)
from .errors import (
    LexerError, LexicalError, LexerWarning, create_undefined_sequence_error,
    create_unterminated_string_error, create_unterminated_char_error,
    create_type_conflict_error, create_long_char_warning, create_empty_char_warning,
    create_missing_radix_digits_error, create_octal_digit_error,
)

# (character, line, column, offset) of a character that has been read
_ReadChar = Tuple[str, int, int, int]


class Lexer:
    """
    Cherry lexical analyzer.

    One instance scans one file. All of its state (position, pushback,
    lexeme buffer) is private to the instance, so separate files can be
    scanned on separate threads sharing the same `TerminalTable`.
    """

    def __init__(self, source: Union[str, TextIO], filename: str = "<unknown>",
                 terminals: Optional[TerminalTable] = None):
        """
        Args:
            source: Source text, or a text stream to read it from
            filename: Name recorded in every token's location
            terminals: Terminal table to classify lexemes against
        """
        self.filename = filename
        self.terminals = terminals if terminals is not None else build_terminal_table()
        self._stream: TextIO = io.StringIO(source) if isinstance(source, str) else source

        # Position of the next character to be read
        self._line = 1
        self._column = 1
        self._offset = 0

        self._pending: List[_ReadChar] = []
        self._recent: Deque[_ReadChar] = deque(maxlen=2)
        self._buffer: List[str] = []

        self.tokens: List[Token] = []
        self.errors: List[LexicalError] = []
        self.warnings: List[LexerWarning] = []
        self._finished = False
        self._fatal: Optional[LexerError] = None

        lookup = self.terminals.lookup
        self._real = lookup("REAL")
        self._dec = lookup("DEC")
        self._hex = lookup("HEX")
        self._oct = lookup("OCT")
        self._bin = lookup("BIN")
        self._wide = lookup("WIDE")
        self._skinny = lookup("SKINNY")
        self._strl = lookup("STRL")
        self._chrl = lookup("CHRL")

    def tokenize(self) -> List[Token]:
        """
        Scan the whole source.

        Returns:
            List of tokens ending with exactly one EOTS token

        Raises:
            LiteralTypeConflictError: width suffix on a hex, octal or binary literal
            UnterminatedLiteralError: string or character literal reaches end of file

        A raised error ends the scan for good: later calls raise it again.
        """
        if self._fatal is not None:
            raise self._fatal
        if self._finished:
            return self.tokens

        try:
            self._scan_all()
        except LexerError as e:
            self._fatal = e
            self._finished = True
            raise

        eots = self.terminals.eots
        self.tokens.append(Token(eots, eots.lexeme, self._mark()))
        self._finished = True
        return self.tokens

    def _scan_all(self) -> None:
        while True:
            self._skip_whitespace_and_comments()
            start = self._mark()
            char = self._read()
            if not char:
                break

            self._buffer = [char]
            if is_word_start(char):
                token = self._scan_word(start)
            elif is_digit(char):
                token = self._scan_number(start)
            elif char == STRING_QUOTE:
                token = self._scan_string(start)
            elif char == CHAR_QUOTE:
                token = self._scan_char(start)
            else:
                token = self._scan_symbol(start)
            self.tokens.append(token)

    # ------------------------------------------------------------------
    # Character stream
    # ------------------------------------------------------------------

    def _read(self) -> str:
        """Next character, or "" at end of file."""
        if self._pending:
            char, line, column, offset = self._pending.pop()
        else:
            char = self._stream.read(1)
            if not char:
                return ""
            line, column, offset = self._line, self._column, self._offset

        self._recent.append((char, line, column, offset))
        if char == "\n":
            self._line, self._column = line + 1, 1
        else:
            self._line, self._column = line, column + 1
        self._offset = offset + 1
        return char

    def _unread(self):
        """Push the most recently read character back onto the stream."""
        entry = self._recent.pop()
        self._pending.append(entry)
        _, self._line, self._column, self._offset = entry

    def _mark(self) -> SourceLocation:
        return SourceLocation(self.filename, self._line, self._column, self._offset)

    def _take(self) -> str:
        lexeme = "".join(self._buffer)
        self._buffer = []
        return lexeme

    def _consume_while(self, predicate: Callable[[str], bool], limit: Optional[int] = None) -> int:
        """Append matching characters to the lexeme buffer; return how many were taken."""
        count = 0
        while limit is None or count < limit:
            char = self._read()
            if not char:
                break
            if not predicate(char):
                self._unread()
                break
            self._buffer.append(char)
            count += 1
        return count

    def _skip_whitespace_and_comments(self):
        while True:
            char = self._read()
            if not char:
                return
            if char == COMMENT_START:
                self._skip_to_end_of_line()
            elif char != "\n" and char not in WHITESPACE:
                self._unread()
                return

    def _skip_to_end_of_line(self):
        while True:
            char = self._read()
            if not char or char == "\n":
                return

    # ------------------------------------------------------------------
    # Token scanners; the first character is already in the buffer
    # ------------------------------------------------------------------

    def _scan_word(self, start: SourceLocation) -> Token:
        self._consume_while(is_word_char)
        lexeme = self._take()
        return Token(self.terminals.classify_word(lexeme), lexeme, start)

    def _scan_number(self, start: SourceLocation) -> Token:
        kind = self._real

        if self._buffer[0] == "0":
            char = self._read()
            if char in HEX_PREFIXES:
                kind = self._hex
            elif char in BINARY_PREFIXES:
                kind = self._bin
            elif is_digit(char):
                kind = self._oct
            elif char:
                self._unread()
            if kind is not self._real:
                self._buffer.append(char)

        if kind is self._hex or kind is self._bin:
            valid = is_hex_digit if kind is self._hex else BINARY_DIGITS.__contains__
            if self._consume_while(valid) == 0:
                lexeme = self._take()
                self.errors.append(create_missing_radix_digits_error(lexeme, start))
                return Token(self.terminals.undefined, lexeme, start)
        else:
            self._consume_while(is_digit)
            if kind is self._real:
                kind = self._scan_fraction()

        kind = self._scan_suffix(kind, start)
        lexeme = self._take()
        if kind is self._oct and any(digit in "89" for digit in lexeme):
            self.errors.append(create_octal_digit_error(lexeme, start))
            return Token(self.terminals.undefined, lexeme, start)
        return Token(kind, lexeme, start)

    def _scan_fraction(self) -> Terminal:
        """Grow a `.digits` fraction onto a decimal literal if one follows."""
        char = self._read()
        if char != ".":
            if char:
                self._unread()
            return self._real

        after = self._read()
        if not is_digit(after):
            if after:
                self._unread()
            self._unread()
            return self._real

        self._buffer.extend((char, after))
        self._consume_while(is_digit)
        return self._dec

    def _scan_suffix(self, kind: Terminal, start: SourceLocation) -> Terminal:
        """Consume an optional L/S width suffix; only decimal literals may carry one."""
        char = self._read()
        if char in WIDE_SUFFIXES:
            width = self._wide
        elif char in SKINNY_SUFFIXES:
            width = self._skinny
        else:
            if char:
                self._unread()
            return kind

        self._buffer.append(char)
        if kind is not self._real and kind is not self._dec:
            radix = {self._hex: "hexadecimal", self._oct: "octal", self._bin: "binary"}[kind]
            raise create_type_conflict_error(self._take(), radix, start)
        return width

    def _scan_string(self, start: SourceLocation) -> Token:
        while True:
            char = self._read()
            if not char:
                raise create_unterminated_string_error(start)
            self._buffer.append(char)
            if char == STRING_QUOTE:
                break
        return Token(self._strl, self._take(), start)

    def _scan_char(self, start: SourceLocation) -> Token:
        char = self._read()
        if not char:
            raise create_unterminated_char_error(start)
        self._buffer.append(char)

        if char == CHAR_QUOTE:
            self.warnings.append(create_empty_char_warning(start))
            return Token(self._chrl, self._take(), start)

        if char == ESCAPE:
            char = self._read()
            if not char:
                raise create_unterminated_char_error(start)
            self._buffer.append(char)
            if char == UNICODE_ESCAPE:
                self._consume_while(is_hex_digit, limit=MAX_UNICODE_ESCAPE_DIGITS)

        overflow = False
        while True:
            char = self._read()
            if not char:
                raise create_unterminated_char_error(start)
            self._buffer.append(char)
            if char == CHAR_QUOTE:
                break
            overflow = True

        lexeme = self._take()
        if overflow:
            self.warnings.append(create_long_char_warning(lexeme, start))
        return Token(self._chrl, lexeme, start)

    def _scan_symbol(self, start: SourceLocation) -> Token:
        """Maximal munch over the operator table."""
        while True:
            char = self._read()
            if not char:
                break
            if not self.terminals.is_symbol_prefix("".join(self._buffer) + char):
                self._unread()
                break
            self._buffer.append(char)

        # A prefix that is not an operator itself ("..") gives back its last character.
        if len(self._buffer) > 1 and not self.terminals.is_symbol("".join(self._buffer)):
            self._buffer.pop()
            self._unread()

        lexeme = self._take()
        terminal = self.terminals.classify_symbol(lexeme)
        if terminal is self.terminals.undefined:
            self.errors.append(create_undefined_sequence_error(lexeme, start))
        return Token(terminal, lexeme, start)

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def has_errors(self) -> bool:
        """Check if lexer recorded any soft errors."""
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        """Check if lexer recorded any warnings."""
        return len(self.warnings) > 0

    def get_diagnostics(self) -> List[Union[LexicalError, LexerWarning]]:
        """Get all recorded diagnostics (soft errors and warnings)."""
        return self.errors + self.warnings


def tokenize_string(source: str, filename: str = "<string>",
                    terminals: Optional[TerminalTable] = None) -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Soft errors are left as UNDEF tokens; hard errors propagate.
    """
    return Lexer(source, filename, terminals).tokenize()


def tokenize_file(filepath: str, encoding: str = "utf-8",
                  terminals: Optional[TerminalTable] = None) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        LexerError: If a hard lexer error occurs
        OSError: If the file cannot be read
    """
    with open(filepath, "r", encoding=encoding) as f:
        return Lexer(f, str(filepath), terminals).tokenize()
