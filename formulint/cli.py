"""CLI entrypoints for formulint commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

from .checker import Checker
from .config import ConfigError
from .errors import DescriptorValidationError
from .integrity import verify_artifact
from .logging import configure_logging
from .report import BatchReport
from .serializer import render_descriptor
from .validators import load_descriptor


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="formulint",
        description="Validate Homebrew formula descriptors and detect conflicting formulae.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Validate formula files or whole taps and report every issue.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    check_parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Formula files or tap directories (defaults to current directory).",
    )
    check_parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format for the report printed to stdout.",
    )
    check_parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Write the JSON report to this path.",
    )
    check_parser.add_argument(
        "--no-report",
        action="store_true",
        help="Do not write a JSON report file.",
    )

    render_parser = subparsers.add_parser(
        "render",
        help="Print the canonical form of a valid formula.",
    )
    _add_verbose_option(render_parser, suppress_default=True)
    render_parser.add_argument("formula", help="Path to the formula file.")

    verify_parser = subparsers.add_parser(
        "verify",
        help="Check a downloaded artifact against a formula's sha256.",
    )
    _add_verbose_option(verify_parser, suppress_default=True)
    verify_parser.add_argument("formula", help="Path to the formula file.")
    verify_parser.add_argument("artifact", help="Path to the downloaded source file.")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the validation HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for formulint commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=args.quiet, log_file=args.log_file)

    if args.command == "check":
        try:
            report = Checker().check_paths(
                args.paths,
                write=not args.no_report,
                report_path=args.report,
            )
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(2, f"{exc}\n")
        except ConfigError as exc:
            parser.exit(2, f"formulint check failed: {exc}\n")
        if args.format == "json":
            print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
        else:
            for line in _format_report(report):
                print(line)
        if not report.ok:
            sys.exit(1)
    elif args.command == "render":
        descriptor = _load_formula(parser, args.formula)
        sys.stdout.write(render_descriptor(descriptor))
    elif args.command == "verify":
        descriptor = _load_formula(parser, args.formula)
        artifact = Path(args.artifact)
        if not artifact.is_file():
            parser.exit(2, f"Artifact not found: {artifact}\n")
        issue = verify_artifact(descriptor, artifact)
        if issue is not None:
            parser.exit(1, f"{issue}\n")
        print(f"{artifact.name} matches sha256 of {descriptor.name}")
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(2, "Unknown command\n")


def _load_formula(parser: argparse.ArgumentParser, formula: str):  # type: ignore[no-untyped-def]
    path = Path(formula)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        parser.exit(2, f"Cannot read {formula}: {exc}\n")
    try:
        return load_descriptor(text, origin=formula)
    except DescriptorValidationError as exc:
        lines = [str(exc)] + [f"  {issue}" for issue in exc.issues]
        parser.exit(1, "\n".join(lines) + "\n")


def _format_report(report: BatchReport) -> List[str]:
    lines: List[str] = []
    for result in report.results:
        label = result.origin or "<text>"
        if result.ok:
            lines.append(f"ok    {label}")
            continue
        lines.append(f"FAIL  {label}")
        for issue in result.issues:
            location = f"line {issue.line}: " if issue.line is not None else ""
            lines.append(f"      {location}{issue.kind.value} [{issue.field}] {issue.detail}")
    for conflict in report.conflicts:
        lines.append(f"FAIL  {conflict.kind.value} [{conflict.field}] {conflict.detail}")
    total = len(report.issues)
    lines.append(
        f"{report.valid_count}/{len(report.results)} descriptor(s) valid, {total} issue(s)"
    )
    return lines


if __name__ == "__main__":
    main(sys.argv[1:])
