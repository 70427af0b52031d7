"""
Cherry Driver Package

Everything between the command line and the lexer: startup (grammar and
FIRST sets), input file checks, runtime flags and the per-file scan
orchestrator.
"""

from .profiler import StartupProfiler, StartupProfile, StartupPhase
from .startup import CompilerContext, bootstrap
from .files import FileRegistry, NoInputFilesError, InvalidExtensionError
from .flags import RuntimeFlag, FlagParser, FlagDoesNotExistError
from .orchestrator import (
    CompilationOrchestrator, CompilationReport, ScanOutcome, scan_file,
)

__all__ = [
    "StartupProfiler",
    "StartupProfile",
    "StartupPhase",
    "CompilerContext",
    "bootstrap",
    "FileRegistry",
    "NoInputFilesError",
    "InvalidExtensionError",
    "RuntimeFlag",
    "FlagParser",
    "FlagDoesNotExistError",
    "CompilationOrchestrator",
    "CompilationReport",
    "ScanOutcome",
    "scan_file",
]
