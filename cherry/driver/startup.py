"""
Compiler startup: build everything the scan phase reads.

The terminal table, the grammar and its FIRST sets are built once, on the
calling thread, before any file is scheduled. The resulting `CompilerContext`
is immutable and shared by every scan task.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config import CompilerConfig
from ..grammar import FirstSetSolver, FirstSets, Grammar, TerminalTable
from ..grammar.language import build_terminal_table, build_cherry_grammar
from .profiler import StartupProfiler, StartupProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompilerContext:
    """Read-only state produced by `bootstrap`."""
    config: CompilerConfig
    terminals: TerminalTable
    grammar: Grammar
    first_sets: FirstSets
    profile: StartupProfile


def bootstrap(config: Optional[CompilerConfig] = None,
              profiler: Optional[StartupProfiler] = None) -> CompilerContext:
    """
    Build the terminal table, grammar and FIRST sets.

    Raises:
        GrammarError: the grammar is malformed; nothing can be compiled
    """
    if config is None:
        config = CompilerConfig()
    if profiler is None:
        profiler = StartupProfiler()

    with profiler.profile_phase("terminal_table", "Terminal alphabet"):
        terminals = build_terminal_table()

    with profiler.profile_phase("grammar", "Production rules"):
        grammar = build_cherry_grammar(terminals)

    with profiler.profile_phase("first_sets", "FIRST-set fixpoint"):
        first_sets = FirstSetSolver(grammar).solve()

    profile = profiler.create_profile_report()
    logger.debug(
        "Startup finished in %.1fms: %d terminals, %d rules, FIRST sets in %d passes",
        profile.total_startup_time_ms, len(terminals), len(grammar), first_sets.passes,
    )
    return CompilerContext(config, terminals, grammar, first_sets, profile)
