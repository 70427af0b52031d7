"""
FIRST sets for the Cherry grammar.

FIRST(N) is the set of terminals that can begin a string derived from N,
plus epsilon when N can derive the empty string.

The solver keeps every set as a row of a boolean matrix (one row per
non-terminal, one column per terminal) and makes whole passes over the rule
table until a pass changes nothing. Sets only grow and the alphabet is
finite, so the loop ends; self-referential and left-recursive rules simply
read the row as it stands in the current pass.

For each body `s1 s2 ... sk` of a rule with head A:
  - a terminal `si` is added to FIRST(A) and ends the body;
  - a non-terminal `si` contributes FIRST(si) without epsilon, and the body
    continues only if `si` is nullable;
  - a body that runs out of symbols adds epsilon to FIRST(A).
"""

import logging
from collections.abc import Mapping
from typing import Dict, FrozenSet, Iterable, Iterator, List, Union

import numpy as np

from .errors import UnknownSymbolError
from .grammar import Body, Grammar
from .symbols import NonTerminal, Symbol, Terminal, is_terminal

logger = logging.getLogger(__name__)


class FirstSetSolver:
    """Computes FIRST sets for every non-terminal of a grammar."""

    def __init__(self, grammar: Grammar):
        self.grammar = grammar
        self._epsilon = grammar.terminals.epsilon.index
        self._width = len(grammar.terminals)

    def solve(self) -> "FirstSets":
        first = np.zeros((len(self.grammar.nonterminals), self._width), dtype=bool)
        passes = 0
        changed = True

        while changed:
            changed = False
            passes += 1
            for rule in self.grammar.rules:
                row = first[rule.head.index]
                before = row.copy()
                for body in rule.bodies:
                    row |= self._body_first(first, body)
                if not np.array_equal(before, row):
                    changed = True

        logger.debug("FIRST sets converged after %d passes over %d rules", passes, len(self.grammar))
        return FirstSets(self.grammar, first, passes)

    def _body_first(self, first: np.ndarray, body: Body) -> np.ndarray:
        result = np.zeros(self._width, dtype=bool)
        for symbol in body:
            if is_terminal(symbol):
                if symbol.index == self._epsilon:
                    continue
                result[symbol.index] = True
                return result
            row = first[symbol.index]
            result |= row
            result[self._epsilon] = False
            if not row[self._epsilon]:
                return result
        result[self._epsilon] = True
        return result


class FirstSets(Mapping):
    """
    Read-only mapping from non-terminal to its FIRST set.

    Keys may be given as `NonTerminal` objects or by name.
    """

    def __init__(self, grammar: Grammar, matrix: np.ndarray, passes: int):
        self.grammar = grammar
        self.passes = passes
        self._matrix = matrix.copy()
        self._matrix.setflags(write=False)
        terminals = grammar.terminals
        self._sets: Dict[NonTerminal, FrozenSet[Terminal]] = {
            nt: frozenset(terminals.lookup(int(i)) for i in np.flatnonzero(self._matrix[nt.index]))
            for nt in grammar.nonterminals
        }

    def _resolve(self, key: Union[NonTerminal, str]) -> NonTerminal:
        if isinstance(key, NonTerminal):
            if key in self._sets:
                return key
            raise UnknownSymbolError(key.name, "non-terminal belongs to another grammar")
        return self.grammar.nonterminal(key)

    def __getitem__(self, key: Union[NonTerminal, str]) -> FrozenSet[Terminal]:
        try:
            return self._sets[self._resolve(key)]
        except UnknownSymbolError:
            raise KeyError(key) from None

    def __iter__(self) -> Iterator[NonTerminal]:
        return iter(self.grammar.nonterminals)

    def __len__(self) -> int:
        return len(self._sets)

    def __repr__(self) -> str:
        return f"FirstSets({self.as_dict()!r})"

    @property
    def matrix(self) -> np.ndarray:
        """The read-only boolean matrix, rows by non-terminal index, columns by terminal index."""
        return self._matrix

    def nullable(self, key: Union[NonTerminal, str]) -> bool:
        return bool(self._matrix[self._resolve(key).index, self.grammar.terminals.epsilon.index])

    def first_of(self, symbols: Iterable[Symbol]) -> FrozenSet[Terminal]:
        """FIRST of a symbol string; contains epsilon if the whole string is nullable."""
        epsilon = self.grammar.terminals.epsilon
        result = set()
        for symbol in symbols:
            if is_terminal(symbol):
                if symbol == epsilon:
                    continue
                result.add(symbol)
                return frozenset(result)
            first = self[symbol]
            result.update(first - {epsilon})
            if epsilon not in first:
                return frozenset(result)
        result.add(epsilon)
        return frozenset(result)

    def as_dict(self) -> Dict[str, List[str]]:
        """Terminal names per non-terminal name, both in index order."""
        return {
            nt.name: [t.name for t in sorted(self._sets[nt], key=lambda t: t.index)]
            for nt in self.grammar.nonterminals
        }
