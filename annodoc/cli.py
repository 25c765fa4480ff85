"""CLI entrypoints for annodoc commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .logging import configure_logging
from .orchestrator import Orchestrator
from .render import RunSummary


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_output_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output directory for Markdown files (defaults to output.dir, 'report').",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Render documentation and print the target paths without writing.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="annodoc",
        description="Generate Markdown documentation from annotated Playwright test specs.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug-level logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Document spec files from their source alone.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the source root (defaults to current directory).",
    )
    generate_parser.add_argument(
        "-p",
        "--pattern",
        action="append",
        dest="patterns",
        default=None,
        help="Glob selecting spec files; repeatable (defaults to e2e/**/*.spec.ts).",
    )
    _add_output_options(generate_parser)

    report_parser = subparsers.add_parser(
        "report",
        help="Document a test run from a Playwright JSON report.",
    )
    _add_verbose_option(report_parser, suppress_default=True)
    report_parser.add_argument("results", help="Path to the Playwright JSON results file.")
    report_parser.add_argument(
        "--root",
        default=None,
        help="Source root the report's file paths are relative to (defaults to config.rootDir).",
    )
    _add_output_options(report_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for annodoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    orchestrator = Orchestrator()
    dry_run = bool(getattr(args, "dry_run", False))

    if args.command == "generate":
        try:
            summary = orchestrator.run_generate(
                args.path,
                output_dir=args.output,
                patterns=args.patterns,
                dry_run=dry_run,
            )
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except (ConfigError, RuntimeError) as exc:
            parser.exit(1, f"annodoc generate failed: {exc}\nRun with --verbose for more details.\n")
    elif args.command == "report":
        try:
            summary = orchestrator.run_report(
                args.results,
                root=args.root,
                output_dir=args.output,
                dry_run=dry_run,
            )
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except RuntimeError as exc:
            parser.exit(1, f"annodoc report failed: {exc}\nRun with --verbose for more details.\n")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")

    _print_summary(summary)
    if summary.failed:
        parser.exit(1, f"Failed to write {len(summary.failed)} file(s)\n")


def _print_summary(summary: RunSummary) -> None:
    if summary.dry_run:
        print("Documentation (dry-run):")
        for target in summary.documents:
            print(f"  {_relativize(Path(target))}")
        return
    if not summary.written:
        print("No documentation generated")
        return
    print(f"Documentation generated in {_relativize(summary.output_dir)} ({len(summary.written)} files)")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
