"""
Command-line interface for pageflow.

Usage:
    pageflow render input.html --output output.pdf [--css style.css]
    pageflow pagesize [--css style.css]
    pageflow version
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .document import Document
from .exceptions import PageflowError
from .units import format_length, parse_length


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pageflow",
        description="pageflow - place styled HTML fragments on a PDF page",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pageflow render letter.html --output letter.pdf
  pageflow render letter.html --css page.css --width 12cm --x 3cm --y 25cm
  pageflow pagesize --css page.css
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser("render", help="Render an HTML fragment to PDF")
    render_parser.add_argument("input", help="Input HTML file")
    render_parser.add_argument(
        "-o", "--output",
        help="Output PDF path (default: input name with .pdf extension)"
    )
    render_parser.add_argument(
        "--css",
        action="append",
        default=[],
        help="Stylesheet file, may be given several times"
    )
    render_parser.add_argument("--width", help="Column width, e.g. 12cm (default: text area width)")
    render_parser.add_argument("--x", help="Left edge, e.g. 2cm (default: left margin)")
    render_parser.add_argument("--y", help="Top edge from page bottom (default: below top margin)")
    render_parser.add_argument("--title", default="", help="Document title")
    render_parser.add_argument("--author", default="", help="Document author")
    render_parser.add_argument("--subject", default="", help="Document subject")
    render_parser.add_argument("--keywords", default="", help="Comma separated keywords")

    pagesize_parser = subparsers.add_parser("pagesize", help="Show resolved page geometry")
    pagesize_parser.add_argument(
        "--css",
        action="append",
        default=[],
        help="Stylesheet file, may be given several times"
    )

    subparsers.add_parser("version", help="Show version information")

    return parser


def _load_css(document: Document, paths: List[str]) -> None:
    for path in paths:
        document.parse_css_string(Path(path).read_text(encoding="utf-8"))


def cmd_render(args) -> int:
    """Handle render command."""
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1
    output_path = Path(args.output) if args.output else input_path.with_suffix(".pdf")

    document = Document.new(output_path)
    document.title = args.title
    document.author = args.author
    document.subject = args.subject
    document.keywords = args.keywords
    document.creator = "pageflow"
    _load_css(document, args.css)

    page = document.page_size()
    width = parse_length(args.width) if args.width else page.width - page.margin_left - page.margin_right
    x = parse_length(args.x) if args.x else page.margin_left
    y = parse_length(args.y) if args.y else page.height - page.margin_top

    document.output_at(input_path.read_text(encoding="utf-8"), width, x, y)
    document.finish()
    print(f"Saved: {output_path}")
    return 0


def cmd_pagesize(args) -> int:
    """Handle pagesize command."""
    # Geometry is resolved without ever writing the file
    document = Document.new(Path("pagesize.pdf"))
    _load_css(document, args.css)
    page = document.page_size()
    print(f"width:         {format_length(page.width)}")
    print(f"height:        {format_length(page.height)}")
    print(f"margin-top:    {format_length(page.margin_top)}")
    print(f"margin-bottom: {format_length(page.margin_bottom)}")
    print(f"margin-left:   {format_length(page.margin_left)}")
    print(f"margin-right:  {format_length(page.margin_right)}")
    return 0


def cmd_version(args=None) -> int:
    """Handle version command."""
    from .version import __version__
    print(f"pageflow v{__version__}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    commands = {
        "render": cmd_render,
        "pagesize": cmd_pagesize,
        "version": cmd_version,
    }
    if args.command not in commands:
        parser.print_help()
        return 1

    try:
        return commands[args.command](args)
    except PageflowError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error: Cannot read file: {exc}", file=sys.stderr)
        return 1
