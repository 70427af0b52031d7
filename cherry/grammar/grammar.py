"""
The grammar table: one production rule per non-terminal.

A rule `S -> a | b | ...` is a head non-terminal and an ordered tuple of
alternative bodies; each body is a sequence of symbols. An empty body is the
empty derivation. Writing `EPSILON` as the only symbol of a body means the
same thing and is normalized to the empty body.

Grammars are assembled with a `GrammarBuilder` and frozen by `build()`, which
checks that every non-terminal used anywhere has a rule. After that the
`Grammar` is read-only and can be shared between threads.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .errors import DuplicateHeadError, GrammarError, UnknownSymbolError
from .symbols import NonTerminal, Symbol, TerminalTable, is_terminal

Body = Tuple[Symbol, ...]


@dataclass(frozen=True)
class Rule:
    """A production rule with its alternative bodies."""
    head: NonTerminal
    bodies: Tuple[Body, ...]

    def __str__(self) -> str:
        alternatives = []
        for body in self.bodies:
            alternatives.append(" ".join(str(symbol) for symbol in body) if body else "ε")
        return f"{self.head} ::= {' | '.join(alternatives)}"

    @property
    def has_empty_body(self) -> bool:
        return any(len(body) == 0 for body in self.bodies)


class GrammarBuilder:
    """
    Collects non-terminals and rules before the grammar is frozen.

    Non-terminals are numbered in the order they are first declared.
    """

    def __init__(self, terminals: TerminalTable):
        self.terminals = terminals
        self._nonterminals: List[NonTerminal] = []
        self._by_name: Dict[str, NonTerminal] = {}
        self._rules: Dict[int, Rule] = {}

    def nonterminal(self, name: str) -> NonTerminal:
        """Declare a non-terminal, or return the one already declared under `name`."""
        existing = self._by_name.get(name)
        if existing is not None:
            return existing
        nonterminal = NonTerminal(name, len(self._nonterminals))
        self._nonterminals.append(nonterminal)
        self._by_name[name] = nonterminal
        return nonterminal

    def nonterminals(self, *names: str) -> Tuple[NonTerminal, ...]:
        return tuple(self.nonterminal(name) for name in names)

    def define_rule(self, head: NonTerminal, bodies: Iterable[Sequence[Symbol]]) -> Rule:
        """Register the rule for `head`. A head can only have one rule."""
        self._check_declared(head, "rule head")
        if head.index in self._rules:
            raise DuplicateHeadError(head.name)

        normalized = []
        for body in bodies:
            body = tuple(body)
            for symbol in body:
                self._check_symbol(symbol, head)
            # A lone epsilon is the empty derivation.
            if len(body) == 1 and is_terminal(body[0]) and body[0].is_epsilon:
                body = ()
            normalized.append(body)

        if not normalized:
            raise GrammarError(f"Rule for '{head.name}' has no bodies")

        rule = Rule(head, tuple(normalized))
        self._rules[head.index] = rule
        return rule

    def build(self, start: Optional[NonTerminal] = None) -> "Grammar":
        """Freeze the grammar. The start symbol defaults to the first declared non-terminal."""
        if not self._nonterminals:
            raise GrammarError("Grammar has no non-terminals")

        for nonterminal in self._nonterminals:
            if nonterminal.index not in self._rules:
                raise UnknownSymbolError(nonterminal.name, "non-terminal is used but has no rule")

        if start is None:
            start = self._nonterminals[0]
        self._check_declared(start, "start symbol")

        rules = tuple(self._rules[nt.index] for nt in self._nonterminals)
        return Grammar(self.terminals, tuple(self._nonterminals), rules, start)

    def _check_declared(self, nonterminal: NonTerminal, role: str):
        if not isinstance(nonterminal, NonTerminal):
            raise GrammarError(f"{role} must be a NonTerminal, got {nonterminal!r}")
        if self._by_name.get(nonterminal.name) != nonterminal:
            raise UnknownSymbolError(nonterminal.name, f"{role} was not declared with this builder")

    def _check_symbol(self, symbol: Symbol, head: NonTerminal):
        if is_terminal(symbol):
            if symbol not in self.terminals:
                raise UnknownSymbolError(symbol.name, f"terminal in a body of '{head.name}'")
        elif isinstance(symbol, NonTerminal):
            self._check_declared(symbol, f"symbol in a body of '{head.name}'")
        else:
            raise GrammarError(f"Body of '{head.name}' contains a non-symbol: {symbol!r}")


class Grammar:
    """
    A closed, immutable set of production rules.

    `rules[i]` is the rule whose head has index `i`.
    """

    def __init__(self, terminals: TerminalTable, nonterminals: Tuple[NonTerminal, ...],
                 rules: Tuple[Rule, ...], start: NonTerminal):
        self.terminals = terminals
        self.nonterminals = nonterminals
        self.rules = rules
        self.start = start
        self._by_name = {nt.name: nt for nt in nonterminals}

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self):
        return iter(self.rules)

    def __str__(self) -> str:
        return "\n".join(str(rule) for rule in self.rules)

    def lookup(self, key: Union[int, str]) -> Symbol:
        """
        Resolve a symbol.

        An integer is a non-terminal (rule) index. A string is a symbol name;
        non-terminal names are searched before terminal names.
        """
        if isinstance(key, bool):
            raise UnknownSymbolError(key)
        if isinstance(key, int):
            if 0 <= key < len(self.nonterminals):
                return self.nonterminals[key]
            raise UnknownSymbolError(key, "no non-terminal with this index")
        if key in self._by_name:
            return self._by_name[key]
        return self.terminals.lookup(key)

    def nonterminal(self, key: Union[int, str]) -> NonTerminal:
        symbol = self.lookup(key)
        if not isinstance(symbol, NonTerminal):
            raise UnknownSymbolError(key, "names a terminal, not a non-terminal")
        return symbol

    def rule_for(self, head: Union[NonTerminal, int, str]) -> Rule:
        if not isinstance(head, NonTerminal):
            head = self.nonterminal(head)
        elif self._by_name.get(head.name) != head:
            raise UnknownSymbolError(head.name, "non-terminal belongs to another grammar")
        return self.rules[head.index]
