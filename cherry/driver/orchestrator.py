"""
Compilation orchestrator.

Scans every registered file as its own task on a thread pool. The pool grows
with the number of files unless `max_workers` caps it. Results are collected
in submission order, not completion order, so the report lists files the way
they were given.

A failure in one file never affects another: hard lexer errors, unreadable
files and unexpected exceptions all become failed `ScanOutcome`s. If the wait
is interrupted (Ctrl-C or the configured timeout) the tasks that had not
finished are cancelled or abandoned and recorded as interrupted; finished
results are kept.
"""

import logging
import time
from concurrent import futures
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from ..errors import OrchestratorInterruptedError
from ..grammar import TerminalTable
from ..lexer import Lexer, LexerError, Diagnostic, SourceLocation, Token

logger = logging.getLogger(__name__)


@dataclass
class ScanOutcome:
    """Result of scanning one file. `diagnostic` is set exactly when the scan failed."""
    path: Path
    tokens: List[Token] = field(default_factory=list)
    diagnostic: Optional[Diagnostic] = None
    warnings: List[Diagnostic] = field(default_factory=list)
    soft_errors: List[Diagnostic] = field(default_factory=list)
    elapsed_ms: float = 0.0
    interrupted: bool = False

    @property
    def ok(self) -> bool:
        return self.diagnostic is None


ScanFunction = Callable[[Path], ScanOutcome]


def _failure(path: Path, message: str, code: Optional[str] = None,
             location: Optional[SourceLocation] = None, **kwargs) -> ScanOutcome:
    # Errors without a position in the file point at line 0, column 0.
    if location is None:
        location = SourceLocation(str(path), 0, 0)
    diagnostic = Diagnostic(message=message, location=location, severity="error", code=code)
    return ScanOutcome(path=path, diagnostic=diagnostic, **kwargs)


def scan_file(path: Union[str, Path], terminals: TerminalTable, encoding: str = "utf-8") -> ScanOutcome:
    """Tokenize one file, turning expected failures into a failed outcome."""
    path = Path(path)
    start = time.perf_counter()

    try:
        with open(path, "r", encoding=encoding) as f:
            lexer = Lexer(f, str(path), terminals)
            tokens = lexer.tokenize()
    except LexerError as e:
        outcome = ScanOutcome(path=path, diagnostic=e.diagnostic)
    except UnicodeDecodeError as e:
        outcome = _failure(path, f"Cannot decode file as {encoding}: {e.reason}", code="IO002")
    except OSError as e:
        outcome = _failure(path, f"Cannot read file: {e.strerror or e}", code="IO001")
    else:
        outcome = ScanOutcome(
            path=path,
            tokens=tokens,
            warnings=[w.diagnostic for w in lexer.warnings],
            soft_errors=[e.diagnostic for e in lexer.errors],
        )

    outcome.elapsed_ms = (time.perf_counter() - start) * 1000
    return outcome


@dataclass
class CompilationReport:
    """Per-file outcomes of one run, in the order the files were submitted."""
    outcomes: List[ScanOutcome]
    elapsed_ms: float = 0.0
    interrupted: bool = False

    @property
    def succeeded(self) -> List[ScanOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> List[ScanOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        text = (f"{len(self.outcomes)} files: {len(self.succeeded)} succeeded, "
                f"{len(self.failed)} failed ({self.elapsed_ms:.1f}ms)")
        if self.interrupted:
            text += " [interrupted]"
        return text


class CompilationOrchestrator:
    """Fans the scan phase out over a thread pool."""

    def __init__(self, terminals: TerminalTable, max_workers: Optional[int] = None,
                 timeout: Optional[float] = None, scan: Optional[ScanFunction] = None,
                 encoding: str = "utf-8"):
        """
        Args:
            terminals: Shared, read-only terminal table
            max_workers: Pool size; None gives one worker per file
            timeout: Seconds to wait for the whole run; None waits forever
            scan: Per-file scan callable, `scan_file` by default
            encoding: Source file encoding for the default scan
        """
        self.terminals = terminals
        self.max_workers = max_workers
        self.timeout = timeout
        self._scan = scan if scan is not None else partial(scan_file, terminals=terminals, encoding=encoding)

    def _run_one(self, path: Path) -> ScanOutcome:
        start = time.perf_counter()
        try:
            outcome = self._scan(path)
        except Exception as e:
            logger.exception("Unexpected failure while scanning %s", path)
            outcome = _failure(path, f"Internal error: {type(e).__name__}: {e}", code="E999")
            outcome.elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug("Scanned %s in %.2fms (%s)", path, outcome.elapsed_ms,
                     "ok" if outcome.ok else "failed")
        return outcome

    def run(self, paths: Iterable[Union[str, Path]]) -> CompilationReport:
        paths = [Path(p) for p in paths]
        start = time.perf_counter()
        if not paths:
            return CompilationReport([], 0.0)

        workers = self.max_workers or len(paths)
        executor = futures.ThreadPoolExecutor(max_workers=workers, thread_name_prefix="CherryScan")
        pending = [executor.submit(self._run_one, path) for path in paths]

        outcomes: List[Optional[ScanOutcome]] = [None] * len(paths)
        interrupted = False
        deadline = None if self.timeout is None else time.monotonic() + self.timeout

        try:
            for slot, future in enumerate(pending):
                remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
                outcomes[slot] = future.result(timeout=remaining)
        except (KeyboardInterrupt, futures.TimeoutError) as e:
            interrupted = True
            reason = "timed out" if isinstance(e, futures.TimeoutError) else "interrupted"
            logger.warning("Compilation %s; keeping finished results", reason)
            for future in pending:
                future.cancel()
        finally:
            executor.shutdown(wait=not interrupted)

        if interrupted:
            for slot, future in enumerate(pending):
                if outcomes[slot] is not None:
                    continue
                if future.done() and not future.cancelled():
                    outcomes[slot] = future.result()
                else:
                    error = OrchestratorInterruptedError(f"Scan of {paths[slot]} did not finish")
                    outcomes[slot] = _failure(paths[slot], str(error), code="E998", interrupted=True)

        report = CompilationReport(outcomes, (time.perf_counter() - start) * 1000, interrupted)
        logger.info(report.summary())
        return report
