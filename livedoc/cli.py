"""CLI entrypoints for livedoc commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ConfigError
from .llm.client import GenerationError
from .logging import configure_logging
from .orchestrator import AnalysisOutcome, Orchestrator, SyncOutcome


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="livedoc",
        description="Inventory functions in a source tree and keep function docs in sync.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Report the functions found in JavaScript/TypeScript sources.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    _add_path_argument(analyze_parser)
    analyze_parser.add_argument(
        "--top",
        type=int,
        default=None,
        help="Number of files to list by function count (default from config, 10).",
    )
    analyze_parser.add_argument(
        "--pattern",
        action="append",
        dest="patterns",
        help="Glob pattern to analyse; may be repeated.",
    )
    analyze_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the per-file function inventory as JSON instead of the report.",
    )

    sync_parser = subparsers.add_parser(
        "sync",
        help="Regenerate documentation for exported functions changed in the last commit.",
    )
    _add_verbose_option(sync_parser, suppress_default=True)
    _add_path_argument(sync_parser)
    sync_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview documentation changes without writing them.",
    )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for livedoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    as_json = bool(getattr(args, "json", False))
    configure_logging(verbose=bool(args.verbose), quiet=as_json, log_file=args.log_file)

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    orchestrator = Orchestrator()

    if args.command == "analyze":
        try:
            outcome = orchestrator.run_analysis(args.path, patterns=args.patterns, top_n=args.top)
        except (FileNotFoundError, NotADirectoryError, ConfigError) as exc:
            parser.exit(1, f"livedoc analyze failed: {exc}\n")
        _print_analysis(outcome, as_json=as_json)
    elif args.command == "sync":
        try:
            outcome = orchestrator.run_sync(args.path, dry_run=bool(args.dry_run))
        except (ConfigError, NotADirectoryError) as exc:
            parser.exit(1, f"livedoc sync failed: {exc}\n")
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except GenerationError as exc:
            parser.exit(1, f"livedoc sync failed: {exc}\nRun with --verbose for more details.\n")
        _print_sync(outcome)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _print_analysis(outcome: AnalysisOutcome, *, as_json: bool) -> None:
    if as_json:
        payload = {
            "root": str(outcome.root),
            "files": [analysis.to_dict() for analysis in outcome.analyses],
            "summary": {
                "totalFiles": outcome.summary.total_files,
                "successfullyParsed": outcome.summary.successfully_parsed,
                "totalFunctions": outcome.summary.total_functions,
                "totalLines": outcome.summary.total_lines,
                "totalSize": outcome.summary.total_size,
                "errors": [
                    {"file": path, "error": error} for path, error in outcome.summary.errors
                ],
            },
        }
        print(json.dumps(payload, indent=2))
        return
    if not outcome.analyses:
        print("No JavaScript files found to analyze")
        return
    print(outcome.report, end="")


def _print_sync(outcome: SyncOutcome) -> None:
    if not outcome.selection.files:
        print("No relevant source files changed.")
    for result in outcome.results:
        print(f"{result.name} ({result.file_path}): {result.status.value}")
    for warning in outcome.warnings:
        print(f"warning: {warning}")
    if outcome.dry_run:
        print("Documentation changes (dry-run):")
        print(outcome.diff or "(no diff)")
    elif outcome.updated:
        print(f"Documentation updated at {_relativize(outcome.docs_path)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
