"""
Test suite for the Cherry lexer.

Tests cover:
- Keywords, identifiers and the token stream terminator
- Numeric literal classes, radix prefixes and width suffixes
- Maximal-munch operator recognition
- String and character literals
- Positions, comments and whitespace
- Soft and hard lexical errors
"""

import io
import os
import sys
import tempfile
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from cherry.grammar import build_terminal_table
from cherry.lexer import (
    Lexer, tokenize_string, tokenize_file,
    LiteralTypeConflictError, UnterminatedLiteralError,
)
from cherry.lexer.errors import ERROR_CODES

TERMINALS = build_terminal_table()


def types(source):
    return [t.type.name for t in tokenize_string(source, terminals=TERMINALS)]


def first_token(source):
    return tokenize_string(source, terminals=TERMINALS)[0]


class TestBasicTokens(unittest.TestCase):
    """Words and the end of the stream."""

    def test_use_directive(self):
        self.assertEqual(types("use Foo.Bar;"), ["USE", "ID", "DOT", "ID", "SMC", "EOTS"])

    def test_namespace_directive(self):
        tokens = tokenize_string("namespace Cherry.Core;", terminals=TERMINALS)
        self.assertEqual([t.lexeme for t in tokens], ["namespace", "Cherry", ".", "Core", ";", "$"])
        self.assertTrue(tokens[0].is_keyword)
        self.assertTrue(tokens[1].is_literal)
        self.assertTrue(tokens[2].is_operator)
        self.assertTrue(tokens[-1].is_end)

    def test_identifiers(self):
        self.assertEqual(types("_x x1 useful Use"), ["ID", "ID", "ID", "ID", "EOTS"])

    def test_empty_source(self):
        tokens = tokenize_string("", terminals=TERMINALS)
        self.assertEqual(len(tokens), 1)
        self.assertTrue(tokens[0].is_end)
        self.assertEqual((tokens[0].line, tokens[0].column), (1, 1))

    def test_single_eots(self):
        for source in ["", "   \n", "# only a comment", "use A;", "a + b\n\n"]:
            names = types(source)
            self.assertEqual(names.count("EOTS"), 1, source)
            self.assertEqual(names[-1], "EOTS", source)

    def test_tokenize_is_idempotent(self):
        lexer = Lexer("use A;", terminals=TERMINALS)
        first = lexer.tokenize()
        self.assertIs(lexer.tokenize(), first)
        self.assertEqual(len(first), 4)

    def test_reads_from_stream(self):
        lexer = Lexer(io.StringIO("use A;"), "stream.ch", TERMINALS)
        tokens = lexer.tokenize()
        self.assertEqual(tokens[0].filename, "stream.ch")
        self.assertEqual(len(tokens), 4)

    def test_default_terminal_table(self):
        self.assertEqual([t.type.name for t in Lexer("use").tokenize()], ["USE", "EOTS"])


class TestNumbers(unittest.TestCase):
    """Numeric literals."""

    def assertLiteral(self, source, kind):
        token = first_token(source)
        self.assertEqual(token.type.name, kind, source)
        self.assertEqual(token.lexeme, source)

    def test_decimal_integer(self):
        self.assertLiteral("42", "REAL")
        self.assertLiteral("0", "REAL")

    def test_fraction(self):
        self.assertLiteral("3.14", "DEC")
        self.assertLiteral("0.5", "DEC")

    def test_radix_literals(self):
        self.assertLiteral("0x1F", "HEX")
        self.assertLiteral("0XdeadBEEF", "HEX")
        self.assertLiteral("0b101", "BIN")
        self.assertLiteral("0755", "OCT")

    def test_width_suffixes(self):
        self.assertLiteral("123L", "WIDE")
        self.assertLiteral("123l", "WIDE")
        self.assertLiteral("12S", "SKINNY")
        self.assertLiteral("2.5L", "WIDE")

    def test_suffix_on_radix_literal(self):
        for source in ["0x1FL", "0b1s", "0755S"]:
            with self.assertRaises(LiteralTypeConflictError, msg=source) as ctx:
                tokenize_string(source, terminals=TERMINALS)
            self.assertEqual(ctx.exception.diagnostic.code, "L004")
            self.assertEqual(ctx.exception.location.column, 1)

    def test_dot_without_fraction(self):
        self.assertEqual(types("3.x"), ["REAL", "DOT", "ID", "EOTS"])
        self.assertEqual(types("3."), ["REAL", "DOT", "EOTS"])
        self.assertEqual(types("1..2"), ["REAL", "DOT", "DOT", "REAL", "EOTS"])

    def test_number_followed_by_word(self):
        tokens = tokenize_string("42abc", terminals=TERMINALS)
        self.assertEqual([(t.type.name, t.lexeme) for t in tokens[:2]], [("REAL", "42"), ("ID", "abc")])

    def test_radix_prefix_without_digits(self):
        lexer = Lexer("0x;", terminals=TERMINALS)
        tokens = lexer.tokenize()
        self.assertEqual([t.type.name for t in tokens], ["UNDEF", "SMC", "EOTS"])
        self.assertEqual(tokens[0].lexeme, "0x")
        self.assertEqual(lexer.errors[0].diagnostic.code, "L006")

    def test_octal_with_out_of_range_digit(self):
        lexer = Lexer("09 0789; 0777", terminals=TERMINALS)
        tokens = lexer.tokenize()
        self.assertEqual([(t.type.name, t.lexeme) for t in tokens],
                         [("UNDEF", "09"), ("UNDEF", "0789"), ("SMC", ";"), ("OCT", "0777"), ("EOTS", "$")])
        self.assertEqual([e.diagnostic.code for e in lexer.errors], ["L008", "L008"])
        self.assertEqual(lexer.errors[1].location.column, 4)

    def test_decimal_nine_is_not_octal(self):
        self.assertLiteral("90", "REAL")
        self.assertLiteral("9.5", "DEC")

    def test_suffix_on_bad_octal_is_still_a_conflict(self):
        with self.assertRaises(LiteralTypeConflictError):
            tokenize_string("09L", terminals=TERMINALS)


class TestOperators(unittest.TestCase):
    """Maximal munch over the operator table."""

    def test_longest_match(self):
        self.assertEqual(types("<<="), ["LSHEQ", "EOTS"])
        self.assertEqual(types("<<<"), ["LLSH", "EOTS"])
        self.assertEqual(types(">>>"), ["LRSH", "EOTS"])
        self.assertEqual(types("..."), ["ELL", "EOTS"])
        self.assertEqual(types("::"), ["SRO", "EOTS"])
        self.assertEqual(types("??"), ["COA", "EOTS"])

    def test_split_after_longest_match(self):
        self.assertEqual(types("<<<="), ["LLSH", "ASG", "EOTS"])
        self.assertEqual(types("a++b"), ["ID", "INC", "ID", "EOTS"])
        self.assertEqual(types("x==y"), ["ID", "LEQ", "ID", "EOTS"])

    def test_unmatched_prefix_backs_off(self):
        self.assertEqual(types("a..b"), ["ID", "DOT", "DOT", "ID", "EOTS"])
        self.assertEqual(types(".."), ["DOT", "DOT", "EOTS"])

    def test_undefined_symbol(self):
        lexer = Lexer("use @;", terminals=TERMINALS)
        tokens = lexer.tokenize()
        self.assertEqual([t.type.name for t in tokens], ["USE", "UNDEF", "SMC", "EOTS"])
        self.assertTrue(tokens[1].is_undefined)
        self.assertTrue(lexer.has_errors())
        self.assertEqual(len(lexer.errors), 1)
        self.assertEqual(lexer.errors[0].diagnostic.code, "L001")
        self.assertEqual(lexer.errors[0].location.column, 5)

    def test_eots_lexeme_is_not_an_operator(self):
        self.assertEqual(types("$"), ["UNDEF", "EOTS"])


class TestStringAndCharLiterals(unittest.TestCase):

    def test_string(self):
        token = first_token('"hello world"')
        self.assertEqual(token.type.name, "STRL")
        self.assertEqual(token.lexeme, '"hello world"')

    def test_string_spans_lines(self):
        tokens = tokenize_string('"a\nb" x', terminals=TERMINALS)
        self.assertEqual(tokens[0].type.name, "STRL")
        self.assertEqual((tokens[1].line, tokens[1].column), (2, 4))

    def test_unterminated_string(self):
        with self.assertRaises(UnterminatedLiteralError) as ctx:
            tokenize_string('use "oops', terminals=TERMINALS)
        self.assertEqual(ctx.exception.diagnostic.code, "L002")
        self.assertEqual(ctx.exception.location.column, 5)

    def test_char(self):
        self.assertEqual(first_token("'a'").type.name, "CHRL")
        self.assertEqual(first_token("'\\n'").lexeme, "'\\n'")
        self.assertEqual(first_token("'\\''").lexeme, "'\\''")
        self.assertEqual(first_token("'\\u0041'").lexeme, "'\\u0041'")

    def test_char_warnings(self):
        lexer = Lexer("'ab' ''", terminals=TERMINALS)
        tokens = lexer.tokenize()
        self.assertEqual([t.type.name for t in tokens], ["CHRL", "CHRL", "EOTS"])
        self.assertFalse(lexer.has_errors())
        self.assertTrue(lexer.has_warnings())
        self.assertEqual([w.diagnostic.code for w in lexer.warnings], ["L005", "L007"])
        self.assertEqual(len(lexer.get_diagnostics()), 2)

    def test_messages_use_error_code_titles(self):
        lexer = Lexer("'ab' '' @ 0b", terminals=TERMINALS)
        lexer.tokenize()
        for diagnostic in lexer.get_diagnostics():
            code = diagnostic.diagnostic.code
            self.assertTrue(diagnostic.diagnostic.message.startswith(ERROR_CODES[code]), code)
        self.assertEqual(sorted(d.diagnostic.code for d in lexer.get_diagnostics()),
                         ["L001", "L005", "L006", "L007"])

    def test_unterminated_char(self):
        for source in ["'a", "'", "'\\"]:
            with self.assertRaises(UnterminatedLiteralError, msg=source) as ctx:
                tokenize_string(source, terminals=TERMINALS)
            self.assertEqual(ctx.exception.diagnostic.code, "L003")


class TestHardErrors(unittest.TestCase):
    """A raised literal error ends the scan of that file."""

    def test_failed_scan_stays_failed(self):
        lexer = Lexer("use A; 0x1FL use B;", terminals=TERMINALS)
        with self.assertRaises(LiteralTypeConflictError):
            lexer.tokenize()
        with self.assertRaises(LiteralTypeConflictError) as ctx:
            lexer.tokenize()
        self.assertEqual(ctx.exception.diagnostic.code, "L004")
        self.assertEqual([t.lexeme for t in lexer.tokens], ["use", "A", ";"])

    def test_unterminated_string_stays_failed(self):
        lexer = Lexer('use "open', terminals=TERMINALS)
        for _ in range(2):
            with self.assertRaises(UnterminatedLiteralError):
                lexer.tokenize()
        self.assertFalse(any(t.is_end for t in lexer.tokens))


class TestPositions(unittest.TestCase):
    """Line and column bookkeeping."""

    def test_line_and_column(self):
        tokens = tokenize_string("use A;\n  namespace B;", "pos.ch", TERMINALS)
        positions = [(t.lexeme, t.line, t.column) for t in tokens]
        self.assertEqual(positions, [
            ("use", 1, 1), ("A", 1, 5), (";", 1, 6),
            ("namespace", 2, 3), ("B", 2, 13), (";", 2, 14),
            ("$", 2, 15),
        ])
        self.assertEqual(str(tokens[3].location), "pos.ch:2:3")

    def test_comments_and_whitespace(self):
        source = "# header comment\n\tuse X; # trailing\n\n"
        tokens = tokenize_string(source, terminals=TERMINALS)
        self.assertEqual([t.type.name for t in tokens], ["USE", "ID", "SMC", "EOTS"])
        self.assertEqual((tokens[0].line, tokens[0].column), (2, 2))
        self.assertEqual(tokens[-1].line, 4)

    def test_comment_after_token_without_space(self):
        self.assertEqual(types("a#b\nc"), ["ID", "ID", "EOTS"])

    def test_offsets(self):
        tokens = tokenize_string("ab\ncd", terminals=TERMINALS)
        self.assertEqual([t.location.offset for t in tokens], [0, 3, 5])

    def test_positions_after_backoff(self):
        tokens = tokenize_string("1..2", terminals=TERMINALS)
        self.assertEqual([t.column for t in tokens], [1, 2, 3, 4, 5])


class TestTokenizeFile(unittest.TestCase):

    def test_tokenize_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "main.cherry")
            with open(path, "w", encoding="utf-8") as f:
                f.write("namespace App;\nuse Lib.IO;\n")
            tokens = tokenize_file(path, terminals=TERMINALS)
        self.assertEqual([t.type.name for t in tokens],
                         ["NAMESPACE", "ID", "SMC", "USE", "ID", "DOT", "ID", "SMC", "EOTS"])
        self.assertEqual(tokens[0].filename, path)
        self.assertEqual(tokens[3].line, 2)


if __name__ == '__main__':
    unittest.main()
