"""
Runtime flags.

Flags look like `--name` or `--name(sub,sub)`. Sub-flags are only valid
inside the parent that owns them: `--diagnose(tokens,first)` raises
DIAGNOSE, TOKENS and FIRST.
"""

import re
from enum import Enum
from typing import Dict, Iterable, Optional, Set, Tuple

from ..errors import CherryError


class RuntimeFlag(Enum):
    DIAGNOSE = "diagnose"
    TOKENS = "tokens"
    FIRST = "first"
    STARTUP = "startup"


# top-level flag -> sub-flags it accepts
FLAG_TREE: Dict[RuntimeFlag, Tuple[RuntimeFlag, ...]] = {
    RuntimeFlag.DIAGNOSE: (RuntimeFlag.TOKENS, RuntimeFlag.FIRST, RuntimeFlag.STARTUP),
}

_FLAG_PATTERN = re.compile(r"^--(?P<name>[a-z_-]+)(?:\((?P<subs>[^)]*)\))?$")


class FlagDoesNotExistError(CherryError):
    """An unknown flag, or a sub-flag used outside its parent."""

    def __init__(self, flag: str, parent: str = ""):
        if parent:
            message = f"Flag '{flag}' does not exist under '--{parent}'"
        else:
            message = f"Flag '{flag}' does not exist"
        super().__init__(message)
        self.flag = flag


class FlagParser:
    """Turns command-line flag strings into a set of `RuntimeFlag`s."""

    def __init__(self, tree: Optional[Dict[RuntimeFlag, Tuple[RuntimeFlag, ...]]] = None):
        self.tree = tree if tree is not None else FLAG_TREE

    def parse(self, arguments: Iterable[str]) -> Set[RuntimeFlag]:
        raised: Set[RuntimeFlag] = set()
        for argument in arguments:
            raised |= self.parse_one(argument)
        return raised

    def parse_one(self, argument: str) -> Set[RuntimeFlag]:
        match = _FLAG_PATTERN.match(argument.strip())
        if match is None:
            raise FlagDoesNotExistError(argument)

        name = match.group("name")
        parent = self._top_level(name)
        if parent is None:
            raise FlagDoesNotExistError(argument)

        raised = {parent}
        subs = match.group("subs")
        if subs:
            allowed = {flag.value: flag for flag in self.tree.get(parent, ())}
            for sub in subs.split(","):
                sub = sub.strip()
                if sub not in allowed:
                    raise FlagDoesNotExistError(sub, parent=name)
                raised.add(allowed[sub])
        return raised

    def _top_level(self, name: str):
        for flag in self.tree:
            if flag.value == name:
                return flag
        return None
