"""
Test suite for the Cherry grammar model.

Tests cover:
- Terminal table construction and classification
- Grammar building (duplicate heads, closure, epsilon bodies)
- Symbol lookup by index and by name
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from cherry.grammar import (
    GrammarBuilder, GrammarError, DuplicateHeadError, UnknownSymbolError,
    NonTerminal, Terminal, TerminalKind, TerminalTable, is_terminal, is_nonterminal,
    build_terminal_table, build_cherry_grammar,
)

L, K, S, X = TerminalKind.LITERAL, TerminalKind.KEYWORD, TerminalKind.SYMBOL, TerminalKind.SPECIAL

SMALL_ALPHABET = [
    ("ID", "id", L),
    ("UNDEF", "undef", X),
    ("EOTS", "$", X),
    ("EPSILON", "ε", X),
    ("A", "a", K),
    ("B", "b", K),
    ("PLUS", "+", S),
]


class TestTerminalTable(unittest.TestCase):
    """Test cases for the terminal alphabet."""

    def setUp(self):
        self.table = build_terminal_table()

    def test_lookup_by_name_and_index(self):
        use = self.table.lookup("USE")
        self.assertEqual(use.lexeme, "use")
        self.assertIs(self.table.lookup(use.index), use)
        self.assertIs(self.table["USE"], use)

    def test_indices_are_dense(self):
        self.assertEqual([t.index for t in self.table], list(range(len(self.table))))

    def test_unknown_terminal(self):
        with self.assertRaises(UnknownSymbolError):
            self.table.lookup("NOT_A_TERMINAL")
        with self.assertRaises(UnknownSymbolError):
            self.table.lookup(len(self.table))
        with self.assertRaises(UnknownSymbolError):
            self.table.lookup(-1)

    def test_distinguished_terminals(self):
        self.assertEqual(self.table.eots.lexeme, "$")
        self.assertTrue(self.table.epsilon.is_epsilon)
        self.assertEqual(self.table.identifier.name, "ID")
        self.assertEqual(self.table.undefined.name, "UNDEF")

    def test_classify_word(self):
        self.assertEqual(self.table.classify_word("namespace").name, "NAMESPACE")
        self.assertEqual(self.table.classify_word("Namespace").name, "ID")
        self.assertEqual(self.table.classify_word("counter").name, "ID")

    def test_classify_symbol(self):
        self.assertEqual(self.table.classify_symbol("<<=").name, "LSHEQ")
        self.assertEqual(self.table.classify_symbol("...").name, "ELL")
        self.assertEqual(self.table.classify_symbol("@").name, "UNDEF")
        # Keywords are not symbols
        self.assertEqual(self.table.classify_symbol("use").name, "UNDEF")

    def test_symbol_prefixes(self):
        self.assertTrue(self.table.is_symbol_prefix(".."))
        self.assertFalse(self.table.is_symbol(".."))
        self.assertTrue(self.table.is_symbol_prefix("<<<"))
        self.assertFalse(self.table.is_symbol_prefix("<<<="))

    def test_duplicate_name_rejected(self):
        with self.assertRaises(GrammarError):
            TerminalTable(SMALL_ALPHABET + [("A", "other", K)])

    def test_duplicate_lexeme_rejected(self):
        with self.assertRaises(GrammarError):
            TerminalTable(SMALL_ALPHABET + [("C", "a", K)])

    def test_required_terminals(self):
        with self.assertRaises(GrammarError):
            TerminalTable([("ID", "id", L), ("A", "a", K)])

    def test_membership(self):
        other = TerminalTable(SMALL_ALPHABET)
        self.assertIn(self.table.lookup("ID"), self.table)
        self.assertNotIn(other.lookup("A"), self.table)


class TestGrammarBuilder(unittest.TestCase):
    """Test cases for building grammars."""

    def setUp(self):
        self.terminals = TerminalTable(SMALL_ALPHABET)
        self.builder = GrammarBuilder(self.terminals)
        self.t = self.terminals.lookup

    def test_nonterminals_get_dense_indices(self):
        s, a, b = self.builder.nonterminals("S", "X", "Y")
        self.assertEqual([s.index, a.index, b.index], [0, 1, 2])
        # Declaring again returns the same symbol
        self.assertIs(self.builder.nonterminal("X"), a)

    def test_duplicate_head(self):
        s = self.builder.nonterminal("S")
        self.builder.define_rule(s, [[self.t("A")]])
        with self.assertRaises(DuplicateHeadError) as ctx:
            self.builder.define_rule(s, [[self.t("B")]])
        self.assertEqual(ctx.exception.head_name, "S")

    def test_missing_rule_is_reported_on_build(self):
        s, x = self.builder.nonterminals("S", "X")
        self.builder.define_rule(s, [[x, self.t("A")]])
        with self.assertRaises(UnknownSymbolError) as ctx:
            self.builder.build()
        self.assertEqual(ctx.exception.key, "X")

    def test_epsilon_body_is_empty_derivation(self):
        s = self.builder.nonterminal("S")
        rule = self.builder.define_rule(s, [[self.t("A")], [self.t("EPSILON")]])
        self.assertEqual(rule.bodies[1], ())
        self.assertTrue(rule.has_empty_body)

    def test_undeclared_nonterminal_rejected(self):
        s = self.builder.nonterminal("S")
        stranger = NonTerminal("T", 5)
        with self.assertRaises(UnknownSymbolError):
            self.builder.define_rule(s, [[stranger]])

    def test_foreign_terminal_rejected(self):
        s = self.builder.nonterminal("S")
        foreign = build_terminal_table().lookup("USE")
        with self.assertRaises(UnknownSymbolError):
            self.builder.define_rule(s, [[foreign]])

    def test_rule_needs_a_body(self):
        s = self.builder.nonterminal("S")
        with self.assertRaises(GrammarError):
            self.builder.define_rule(s, [])

    def test_empty_grammar(self):
        with self.assertRaises(GrammarError):
            self.builder.build()

    def test_start_defaults_to_first_declared(self):
        s, x = self.builder.nonterminals("S", "X")
        self.builder.define_rule(s, [[x]])
        self.builder.define_rule(x, [[self.t("A")]])
        self.assertIs(self.builder.build().start, s)


class TestCherryGrammar(unittest.TestCase):
    """Test cases for the Cherry grammar and symbol lookup."""

    def setUp(self):
        self.grammar = build_cherry_grammar()

    def test_rules_ordered_by_head(self):
        heads = [rule.head.name for rule in self.grammar.rules]
        self.assertEqual(heads, ["DOCUMENT", "START", "DIRECTIVE", "PACKAGING", "TYPE_NAME"])
        self.assertEqual(self.grammar.start.name, "DOCUMENT")

    def test_lookup_by_index(self):
        symbol = self.grammar.lookup(4)
        self.assertTrue(is_nonterminal(symbol))
        self.assertEqual(symbol.name, "TYPE_NAME")

    def test_lookup_by_name(self):
        self.assertEqual(self.grammar.lookup("START").index, 1)
        use = self.grammar.lookup("USE")
        self.assertTrue(is_terminal(use))
        self.assertIsInstance(use, Terminal)

    def test_lookup_failures(self):
        with self.assertRaises(UnknownSymbolError):
            self.grammar.lookup(5)
        with self.assertRaises(UnknownSymbolError):
            self.grammar.lookup("STATEMENT")
        with self.assertRaises(UnknownSymbolError):
            self.grammar.nonterminal("USE")

    def test_rule_for(self):
        rule = self.grammar.rule_for("START")
        self.assertEqual(len(rule.bodies), 3)
        self.assertTrue(rule.has_empty_body)
        self.assertIs(self.grammar.rule_for(rule.head), rule)

    def test_rule_for_foreign_nonterminal(self):
        other = build_cherry_grammar()
        foreign = NonTerminal("GHOST", 0)
        with self.assertRaises(UnknownSymbolError):
            self.grammar.rule_for(foreign)
        # Same name and index from another build is an equal value
        self.assertIs(self.grammar.rule_for(other.start).head, self.grammar.start)

    def test_rule_text(self):
        self.assertEqual(str(self.grammar.rule_for("TYPE_NAME")),
                         "<type-name> ::= id | <type-name> . id")
        self.assertEqual(str(self.grammar.rule_for("START")),
                         "<start> ::= <directive> <start> | <packaging> <start> | ε")


if __name__ == '__main__':
    unittest.main()
