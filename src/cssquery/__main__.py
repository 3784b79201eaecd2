#!/usr/bin/env python3
"""Command-line interface for cssquery."""

from __future__ import annotations

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from .errors import SelectorError, XMLLoadError
from .loader import parse_xml
from .traverser import CombinatorMode, Traverser, TraverserOpts


def _get_version() -> str:
    try:
        return version("cssquery")
    except PackageNotFoundError:  # pragma: no cover
        return "dev"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cssquery",
        description="Select nodes from an XML document with CSS selectors.",
        epilog=(
            "Examples:\n"
            "  cssquery collection.xml --selector 'cd title' --format text\n"
            "  cat collection.xml | cssquery - --selector 'cd.featured'\n"
            "  cssquery collection.xml --selector 'collection > cd' --strict-combinators\n"
            "\n"
            "If you don't have the 'cssquery' command available, use:\n"
            "  python -m cssquery ...\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "path",
        nargs="?",
        help="XML file to read, or '-' to read from stdin",
    )
    parser.add_argument(
        "--selector",
        help="CSS selector for choosing nodes (defaults to the document root element)",
    )
    parser.add_argument(
        "--format",
        choices=["xml", "text", "count"],
        default="xml",
        help="Output format (default: xml)",
    )
    parser.add_argument(
        "--first",
        action="store_true",
        help="Only output the first matching node",
    )
    parser.add_argument(
        "--strict-combinators",
        action="store_true",
        help="Enforce child, descendant and sibling combinators instead of the legacy behaviour",
    )
    parser.add_argument(
        "--separator",
        default=" ",
        help="Text-only: join string between text nodes (default: a single space)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log matching steps to stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"cssquery {_get_version()}",
    )

    args = parser.parse_args(argv)

    if not args.path:
        parser.print_help(sys.stderr)
        raise SystemExit(1)

    return args


def _read_xml(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()

    return Path(path).read_bytes()


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(sys.argv[1:] if argv is None else argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s", stream=sys.stderr)

    try:
        doc = parse_xml(_read_xml(args.path))
    except (OSError, XMLLoadError) as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2) from e

    opts = TraverserOpts(combinators=CombinatorMode.STRICT if args.strict_combinators else CombinatorMode.LEGACY)
    try:
        if args.selector is None:
            nodes = doc.element_children
        else:
            nodes = Traverser(doc, opts).find(args.selector).to_list()
    except SelectorError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2) from e

    if args.format == "count":
        sys.stdout.write(f"{len(nodes)}\n")

    if not nodes:
        raise SystemExit(1)

    if args.first:
        nodes = nodes[:1]

    if args.format == "count":
        return

    if args.format == "text":
        outputs = [node.to_text(separator=args.separator) for node in nodes]
    else:
        outputs = [node.to_xml() for node in nodes]
    sys.stdout.write("\n".join(outputs))
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()
