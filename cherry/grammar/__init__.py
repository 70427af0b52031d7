"""
Cherry Grammar Package

Symbol model, production rules and FIRST-set analysis for the Cherry
language. Everything here is built once at compiler startup and is
read-only afterwards.
"""

from .symbols import (
    Terminal, NonTerminal, Symbol, TerminalKind, TerminalTable,
    is_terminal, is_nonterminal,
)
from .grammar import Rule, Grammar, GrammarBuilder
from .first_sets import FirstSetSolver, FirstSets
from .language import CHERRY_TERMINALS, build_terminal_table, build_cherry_grammar
from .errors import GrammarError, DuplicateHeadError, UnknownSymbolError

__all__ = [
    "Terminal",
    "NonTerminal",
    "Symbol",
    "TerminalKind",
    "TerminalTable",
    "is_terminal",
    "is_nonterminal",
    "Rule",
    "Grammar",
    "GrammarBuilder",
    "FirstSetSolver",
    "FirstSets",
    "CHERRY_TERMINALS",
    "build_terminal_table",
    "build_cherry_grammar",
    "GrammarError",
    "DuplicateHeadError",
    "UnknownSymbolError",
]
