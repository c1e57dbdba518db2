"""
Command line front end: combine PDFs into one N-up, optionally ink-saving, PDF.

Example:
    nup-toolkit lecture1.pdf lecture2.pdf -o handout.pdf -n 4 --borders --ink-saver
"""

from __future__ import annotations

import argparse
import logging
import sys
import uuid
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence, Set

from nup_toolkit import __version__
from nup_toolkit.builder import (
    AssemblyError,
    DocumentSession,
    load_layout_settings,
)
from nup_toolkit.core.models import (
    MAX_PAGES_PER_SHEET,
    MIN_PAGES_PER_SHEET,
    LayoutSettings,
    PageItem,
    Rotation,
)

logger = logging.getLogger(__name__)


def parse_page_ranges(selection: str, page_count: int) -> List[int]:
    """
    Parse a 1-based page list like "1,3-5" into 0-based indices.

    Order and repeats are kept as written.

    Raises:
        ValueError: If the selection is malformed or out of range

    Example:
        >>> parse_page_ranges("4,1-2", 5)
        [3, 0, 1]
    """
    indices: List[int] = []
    for part in selection.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            start_s, end_s = part.split("-", 1)
            start, end = int(start_s), int(end_s)
            if start > end:
                raise ValueError(f"Descending range: {part}")
            numbers = range(start, end + 1)
        else:
            numbers = range(int(part), int(part) + 1)
        for n in numbers:
            if not 1 <= n <= page_count:
                raise ValueError(f"Page {n} out of range 1-{page_count}")
            indices.append(n - 1)
    if not indices:
        raise ValueError(f"No pages in selection: {selection!r}")
    return indices


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nup-toolkit",
        description="Pack pages of one or more PDFs onto N-up sheets.",
    )
    parser.add_argument("inputs", nargs="+", type=Path, help="Source PDF files")
    parser.add_argument("-o", "--output", type=Path, required=True, help="Output PDF path")
    parser.add_argument(
        "-n", "--pages-per-sheet",
        type=int,
        choices=range(MIN_PAGES_PER_SHEET, MAX_PAGES_PER_SHEET + 1),
        help="Source pages per output sheet (overrides --settings)",
    )
    parser.add_argument("--borders", action="store_true", help="Outline every cell")
    parser.add_argument("--page-numbers", action="store_true", help="Number every cell")
    parser.add_argument("--settings", type=Path, help="JSON layout settings file")
    parser.add_argument("--pages", help='1-based pages across all inputs, e.g. "1,3-5"')
    parser.add_argument(
        "--rotate",
        type=int,
        choices=[r.value for r in Rotation],
        default=0,
        help="Clockwise rotation applied to every page",
    )
    parser.add_argument("--grayscale", action="store_true", help="Convert pages to grayscale")
    parser.add_argument("--ink-saver", action="store_true", help="Invert and boost pages to save ink")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _resolve_layout(args: argparse.Namespace) -> LayoutSettings:
    base = load_layout_settings(args.settings) if args.settings else LayoutSettings()
    return LayoutSettings(
        pages_per_sheet=args.pages_per_sheet or base.pages_per_sheet,
        show_borders=args.borders or base.show_borders,
        show_page_numbers=args.page_numbers or base.show_page_numbers,
    )


def _apply_page_options(session: DocumentSession, args: argparse.Namespace) -> None:
    pages = session.pages
    if args.pages:
        pages = [pages[i] for i in parse_page_ranges(args.pages, len(pages))]

    edited: List[PageItem] = []
    seen: Set[str] = set()
    for page in pages:
        # Repeated pages become independent items
        if page.id in seen:
            page = replace(page, id=str(uuid.uuid4()))
        seen.add(page.id)
        if args.rotate:
            page = page.with_rotation(args.rotate)
        if args.grayscale:
            page = page.with_filters(replace(page.filters, grayscale=True))
        edited.append(page)
    session.set_pages(edited)

    if args.ink_saver:
        session.set_ink_saver(True)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )

    session = DocumentSession()
    try:
        for path in args.inputs:
            session.add_file(path.read_bytes(), path.name)
        _apply_page_options(session, args)
        layout = _resolve_layout(args)

        logger.info(f"Writing {session.sheet_count(layout)} sheets to {args.output}")
        output = session.assemble_sync(layout)

        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_bytes(output)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except AssemblyError as e:
        print(f"Assembly failed: {e}", file=sys.stderr)
        return 1

    logger.info(f"Wrote {args.output} ({len(output)} bytes)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
