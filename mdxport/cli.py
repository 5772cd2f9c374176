"""CLI entrypoints for mdxport commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .logging import configure_logging
from .migrator import Migrator
from .models import ScanResult


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
        prog="mdxport",
        description="Migrate MDX documentation, resolving custom components into native ones.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        help="List the unknown components found in a document.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    scan_parser.add_argument("path", help="Path to a .md or .mdx document.")

    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert a document and write <name>.converted.mdx next to it.",
    )
    _add_verbose_option(convert_parser, suppress_default=True)
    convert_parser.add_argument("path", help="Path to a .md or .mdx document.")
    convert_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Where to write the converted document.",
    )
    convert_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print a diff of the conversion without writing anything.",
    )
    convert_parser.add_argument(
        "--no-ai",
        action="store_true",
        help="Skip the generative service; unknown components become manual review stubs.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for mdxport commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    migrator = Migrator()

    if args.command == "scan":
        try:
            result = migrator.run_scan(args.path)
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except RuntimeError as exc:
            parser.exit(1, f"mdxport scan failed: {exc}\nRun with --verbose for more details.\n")
        print(_format_inventory(result))
    elif args.command == "convert":
        dry_run = bool(getattr(args, "dry_run", False))
        try:
            result = migrator.run_convert(
                args.path,
                output=args.output,
                dry_run=dry_run,
                use_ai=not bool(getattr(args, "no_ai", False)),
            )
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except RuntimeError as exc:
            parser.exit(1, f"mdxport convert failed: {exc}\nRun with --verbose for more details.\n")
        if dry_run:
            print("Conversion changes (dry-run):")
            print(result.diff or "(no diff)")
        else:
            print(f"Converted document written to {_relativize(result.path)}")
        for warning in result.outcome.warnings:
            print(f"warning: {warning}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _format_inventory(result: ScanResult) -> str:
    if not result.component_blocks:
        return "No unknown components found."
    lines = [f"{len(result.component_blocks)} unknown component(s):"]
    for block in result.component_blocks:
        classification = block.classification
        lines.append(
            f"  <{block.name}> usages={len(block.usages)} "
            f"definition={'yes' if block.definition else 'no'} "
            f"category={classification.category} ({classification.confidence})"
        )
    return "\n".join(lines)


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
