"""
Grammar symbols for the Cherry front end.

A symbol is either a `Terminal` or a `NonTerminal`. Both are frozen value
types carrying a name and a dense index; code that needs to tell them apart
checks the type, not a flag.

Terminals live in a `TerminalTable`, which is built once from an ordered list
of definitions and then only read. The lexer classifies lexemes against it and
the grammar resolves rule bodies against it.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Iterator, List, Tuple, Union

from .errors import GrammarError, UnknownSymbolError


class TerminalKind(Enum):
    """How a terminal is recognized in source text."""
    LITERAL = auto()    # identifiers and literal classes (id, hex, strl, ...)
    KEYWORD = auto()    # reserved words
    SYMBOL = auto()     # operators and punctuation
    SPECIAL = auto()    # epsilon, end of token stream, undefined


@dataclass(frozen=True)
class Terminal:
    """An atomic grammar symbol matching one lexeme class."""
    name: str
    lexeme: str
    index: int
    kind: TerminalKind

    def __str__(self) -> str:
        return self.lexeme

    @property
    def is_epsilon(self) -> bool:
        return self.name == EPSILON


@dataclass(frozen=True)
class NonTerminal:
    """A grammar symbol that expands into the bodies of its rule."""
    name: str
    index: int

    def __str__(self) -> str:
        return f"<{self.name.lower().replace('_', '-')}>"


Symbol = Union[Terminal, NonTerminal]

# Names of the terminals every table must define.
EPSILON = "EPSILON"
EOTS = "EOTS"
UNDEF = "UNDEF"
ID = "ID"

REQUIRED_TERMINALS = (EPSILON, EOTS, UNDEF, ID)


def is_terminal(symbol: Symbol) -> bool:
    return isinstance(symbol, Terminal)


def is_nonterminal(symbol: Symbol) -> bool:
    return isinstance(symbol, NonTerminal)


class TerminalTable:
    """
    Immutable table of the terminal alphabet.

    Terminals get their index from their position in the definition list.
    Names must be unique, and so must lexemes, because the lexer maps text
    back to terminals.
    """

    def __init__(self, definitions: Iterable[Tuple[str, str, TerminalKind]]):
        terminals: List[Terminal] = []
        by_name: Dict[str, Terminal] = {}
        by_lexeme: Dict[str, Terminal] = {}

        for name, lexeme, kind in definitions:
            if name in by_name:
                raise GrammarError(f"Terminal '{name}' is defined twice")
            if lexeme in by_lexeme:
                raise GrammarError(
                    f"Terminals '{by_lexeme[lexeme].name}' and '{name}' share the lexeme {lexeme!r}"
                )
            terminal = Terminal(name, lexeme, len(terminals), kind)
            terminals.append(terminal)
            by_name[name] = terminal
            by_lexeme[lexeme] = terminal

        missing = [name for name in REQUIRED_TERMINALS if name not in by_name]
        if missing:
            raise GrammarError(f"Terminal table is missing required terminals: {', '.join(missing)}")

        self._terminals: Tuple[Terminal, ...] = tuple(terminals)
        self._by_name = by_name
        self._keywords = {t.lexeme: t for t in terminals if t.kind is TerminalKind.KEYWORD}
        self._symbols = {t.lexeme: t for t in terminals if t.kind is TerminalKind.SYMBOL}
        self._symbol_prefixes: FrozenSet[str] = frozenset(
            lexeme[:end] for lexeme in self._symbols for end in range(1, len(lexeme) + 1)
        )

    def __len__(self) -> int:
        return len(self._terminals)

    def __iter__(self) -> Iterator[Terminal]:
        return iter(self._terminals)

    def __contains__(self, item) -> bool:
        return isinstance(item, Terminal) and self._owns(item)

    def _owns(self, terminal: Terminal) -> bool:
        return terminal.index < len(self._terminals) and self._terminals[terminal.index] == terminal

    def lookup(self, key: Union[int, str]) -> Terminal:
        """Return the terminal with the given index or name."""
        if isinstance(key, bool):
            raise UnknownSymbolError(key, "terminal keys are names or indices")
        if isinstance(key, int):
            if 0 <= key < len(self._terminals):
                return self._terminals[key]
            raise UnknownSymbolError(key, "no terminal with this index")
        try:
            return self._by_name[key]
        except KeyError:
            raise UnknownSymbolError(key, "no terminal with this name") from None

    def __getitem__(self, key: Union[int, str]) -> Terminal:
        return self.lookup(key)

    def classify_word(self, lexeme: str) -> Terminal:
        """Keyword terminal for `lexeme`, or the identifier terminal."""
        return self._keywords.get(lexeme, self.identifier)

    def classify_symbol(self, lexeme: str) -> Terminal:
        """Operator terminal for `lexeme`, or the undefined terminal."""
        return self._symbols.get(lexeme, self.undefined)

    def is_symbol(self, lexeme: str) -> bool:
        return lexeme in self._symbols

    def is_symbol_prefix(self, text: str) -> bool:
        """True if some operator starts with `text` (or equals it)."""
        return text in self._symbol_prefixes

    @property
    def epsilon(self) -> Terminal:
        return self._by_name[EPSILON]

    @property
    def eots(self) -> Terminal:
        return self._by_name[EOTS]

    @property
    def undefined(self) -> Terminal:
        return self._by_name[UNDEF]

    @property
    def identifier(self) -> Terminal:
        return self._by_name[ID]
