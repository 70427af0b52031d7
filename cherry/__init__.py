"""
Cherry Compiler Front End

Grammar model, FIRST-set analysis and a concurrent lexical scanner for the
Cherry programming language.

Architecture:
    cherry/
    ├── grammar/         # Terminals, non-terminals, rules, FIRST sets
    ├── lexer/           # Tokenization and lexical analysis
    ├── driver/          # Startup, input files, flags, scan orchestration
    ├── diagnostics.py   # XML dumps for --diagnose(...)
    └── cli.py           # `cherry` command

License: MIT
"""

__version__ = "0.1.0-alpha"
__license__ = "MIT"

from .errors import CherryError, ConfigError, OrchestratorInterruptedError
from .config import CompilerConfig
from .grammar import Grammar, GrammarBuilder, FirstSetSolver, FirstSets, TerminalTable
from .lexer import Lexer, Token, tokenize_string, tokenize_file
from .driver import CompilationOrchestrator, CompilationReport, bootstrap

__all__ = [
    # Core classes
    "Grammar",
    "GrammarBuilder",
    "FirstSetSolver",
    "FirstSets",
    "TerminalTable",
    "Lexer",
    "Token",
    "tokenize_string",
    "tokenize_file",
    "CompilationOrchestrator",
    "CompilationReport",
    "bootstrap",
    "CompilerConfig",

    # Errors
    "CherryError",
    "ConfigError",
    "OrchestratorInterruptedError",

    # Version info
    "__version__",
]
