"""
Errors raised while building the grammar.

These are fatal at compiler startup: the grammar is constructed before any
file is scanned, and nothing downstream can run without it.
"""

from ..errors import CherryError


class GrammarError(CherryError):
    """Base class for grammar construction errors."""


class DuplicateHeadError(GrammarError):
    """A second rule was defined for a non-terminal that already has one."""

    def __init__(self, head_name: str):
        super().__init__(f"Rule for non-terminal '{head_name}' is already defined")
        self.head_name = head_name


class UnknownSymbolError(GrammarError):
    """A lookup or rule body named a symbol the grammar does not define."""

    def __init__(self, key, context: str = ""):
        message = f"Unknown grammar symbol: {key!r}"
        if context:
            message += f" ({context})"
        super().__init__(message)
        self.key = key
