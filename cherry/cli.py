"""
Command-line entry point for the Cherry front end.

    cherry [--config FILE] [-v] [--workers N] [--timeout SECS]
           [--diagnose(tokens,first,startup)] FILE...

Exit status is 0 when every file scanned cleanly, 1 when any file failed
and 2 for usage errors (bad flags, bad files, bad configuration).
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import CompilerConfig
from .diagnostics import DiagnosticExporter
from .driver import (
    CompilationOrchestrator, FileRegistry, FlagParser, RuntimeFlag, StartupProfiler, bootstrap,
)
from .errors import CherryError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cherry",
        usage="%(prog)s [options] [--diagnose(tokens,first,startup)] FILE...",
        description="Cherry compiler front end: scans Cherry source files into token streams",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
        epilog="""
Examples:
    cherry main.cherry util.ch                 # Scan two files
    cherry --diagnose(tokens,first) main.ry    # Also dump tokens and FIRST sets as XML
    cherry --config cherry.json -v src/*.ch    # Use a config file, verbose logging
        """
    )
    parser.add_argument('--config', metavar='FILE',
                        help='JSON configuration file')
    parser.add_argument('--workers', type=int, metavar='N',
                        help='Maximum number of scan threads (default: one per file)')
    parser.add_argument('--timeout', type=float, metavar='SECS',
                        help='Give up waiting on the scan phase after SECS seconds')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='More logging (repeat for debug output)')
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    return parser


def load_config(args: argparse.Namespace) -> CompilerConfig:
    """Config file first, then command-line overrides."""
    config = CompilerConfig.from_json(args.config) if args.config else CompilerConfig()
    overrides = {}
    if args.workers is not None:
        overrides['max_workers'] = args.workers
    if args.timeout is not None:
        overrides['scan_timeout'] = args.timeout
    return dataclasses.replace(config, **overrides) if overrides else config


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args, extra = parser.parse_known_args(argv)

    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    # argparse leaves runtime flags and file names in `extra`
    flag_args = [arg for arg in extra if arg.startswith("-")]
    file_args = [arg for arg in extra if not arg.startswith("-")]

    try:
        flags = FlagParser().parse(flag_args)
        config = load_config(args)
        files = FileRegistry(config).register(file_args)
    except (CherryError, FileNotFoundError) as e:
        print(f"cherry: error: {e}", file=sys.stderr)
        return 2

    profiler = StartupProfiler()
    context = bootstrap(config, profiler)

    orchestrator = CompilationOrchestrator(
        context.terminals,
        max_workers=config.max_workers,
        timeout=config.scan_timeout,
        encoding=config.encoding,
    )
    report = orchestrator.run(files)

    for outcome in report.outcomes:
        for diagnostic in outcome.soft_errors + outcome.warnings:
            print(diagnostic, file=sys.stderr)
        if not outcome.ok:
            print(outcome.diagnostic, file=sys.stderr)

    if RuntimeFlag.DIAGNOSE in flags:
        write_diagnostics(DiagnosticExporter(config.diagnostics_dir), flags, context, report, profiler)

    print(report.summary())
    return 0 if report.ok else 1


def write_diagnostics(exporter: DiagnosticExporter, flags, context, report, profiler: StartupProfiler):
    exporter.dump_flags(flags)
    if RuntimeFlag.TOKENS in flags:
        for outcome in report.succeeded:
            exporter.dump_tokens(outcome.tokens, str(outcome.path))
    if RuntimeFlag.FIRST in flags:
        exporter.dump_first_sets(context.first_sets)
    if RuntimeFlag.STARTUP in flags:
        profiler.print_report()
        profiler.export_profile(str(Path(exporter.root) / "startup" / "startup_profile.json"))
    logger.info("Diagnostics written to %s", exporter.root)


if __name__ == "__main__":
    sys.exit(main())
