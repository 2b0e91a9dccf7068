from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

import ooxmlviewer
from ooxmlviewer.inspector.data_types import ArchiveSummary
from ooxmlviewer.inspector.serialization import summary_to_host_value
from ooxmlviewer.inspector.util.zip_bomb import DEFAULT_ZIP_BOMB_LIMITS
from ooxmlviewer.tree import build_tree, iter_tree_lines
from ooxmlviewer.xml_format import preview_part


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ooxmlviewer",
        description="List the parts of a .docx, .pptx or .xlsx file (or emit JSON with --json).",
    )
    parser.add_argument(
        "path",
        type=Path,
        help="Path to the file to inspect.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the archive summary as JSON instead of the part tree.",
    )
    parser.add_argument(
        "--part",
        metavar="PART",
        help="Print a formatted preview of a single part, e.g. word/document.xml.",
    )
    parser.add_argument(
        "--safe",
        action="store_true",
        help="Reject archives that look like ZIP bombs before decompressing them.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Write debug diagnostics to stderr.",
    )
    return parser


def _render_tree(summary: ArchiveSummary, file_name: str) -> str:
    if not summary.entries:
        return "Archive contains no entries."
    lines = list(iter_tree_lines(build_tree(summary)))
    lines.append(f"Loaded {len(summary)} parts from {file_name}.")
    return "\n".join(lines)


def _render_part(summary: ArchiveSummary, part: str) -> str:
    entry = summary.find(part)
    if entry is None:
        raise ValueError(f"No part named {part}")
    return preview_part(entry)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    try:
        args, unknown = parser.parse_known_args(argv)
    except SystemExit as exc:
        code = exc.code if isinstance(exc.code, int) else 1
        return code

    if unknown:
        unknown_str = " ".join(unknown)
        print(
            f"ooxmlviewer: warning: unsupported arguments: {unknown_str}",
            file=sys.stderr,
        )
        return 1

    if args.verbose:
        ooxmlviewer.initialize()
        logging.getLogger("ooxmlviewer").setLevel(logging.DEBUG)

    try:
        if args.json and args.part:
            raise ValueError("--json and --part cannot be combined")
        limits = DEFAULT_ZIP_BOMB_LIMITS if args.safe else None
        summary = ooxmlviewer.inspect_file(args.path, limits=limits)
        if args.json:
            json.dump(summary_to_host_value(summary), sys.stdout)
            sys.stdout.write("\n")
        elif args.part:
            sys.stdout.write(_render_part(summary, args.part))
            sys.stdout.write("\n")
        else:
            sys.stdout.write(_render_tree(summary, args.path.name))
            sys.stdout.write("\n")
        return 0
    except Exception as exc:
        print(f"ooxmlviewer: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
