"""Command-line interface for md2print.

Usage::

    md2print Note.md                      # writes Note.html
    md2print Note.md -o out.html          # explicit output path
    md2print Note.md -o -                 # print the page to stdout
    md2print Note.md --theme dark         # use the vault's dark variant
    md2print Note.md --font-size 16 --mono-font "JetBrains Mono"
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from md2print import __version__
from md2print.converter import Converter
from md2print.errors import Md2PrintError
from md2print.page import PageOptions
from md2print.value_store import ThemeVariant


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="md2print",
        description="Render an Obsidian note to print-ready HTML.",
    )
    parser.add_argument(
        "input",
        help="Path to the Markdown note to convert.",
    )
    parser.add_argument(
        "-o", "--output",
        help="Output HTML file path, or '-' for stdout. Defaults to <input>.html.",
    )
    parser.add_argument(
        "-t", "--theme",
        default=ThemeVariant.LIGHT.value,
        choices=[v.value for v in ThemeVariant],
        help="Theme variant (default: %(default)s).",
    )
    parser.add_argument("--font-size", type=int, help="Body font size in px.")
    parser.add_argument("--zoom-factor", type=float, help="Zoom factor.")
    parser.add_argument("--mono-font", help="Monospace font family.")
    parser.add_argument("--h1-weight", type=int, help="Font weight of level 1 headings.")
    parser.add_argument("--h2-weight", type=int, help="Font weight of level 2 headings.")
    parser.add_argument(
        "--no-vault",
        action="store_true",
        help="Do not look for an enclosing vault; use default styling.",
    )
    parser.add_argument(
        "-e", "--encoding",
        default="utf-8",
        help="Input file encoding (default: %(default)s).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print progress information.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    input_path = Path(args.input)
    if not input_path.is_file():
        print(f"Error: file not found: {input_path}", file=sys.stderr)
        return 1

    to_stdout = args.output == "-"
    if to_stdout:
        output_path = None
    elif args.output:
        output_path = Path(args.output)
    else:
        output_path = input_path.with_suffix(".html")

    options = PageOptions().derive(
        font_size=args.font_size,
        zoom_factor=args.zoom_factor,
        mono_font=args.mono_font,
        h1_weight=args.h1_weight,
        h2_weight=args.h2_weight,
        variant=ThemeVariant(args.theme),
    )

    if args.verbose:
        print(f"Input:  {input_path}", file=sys.stderr)
        print(f"Output: {output_path or 'stdout'}", file=sys.stderr)
        print(f"Theme:  {options.variant.value}", file=sys.stderr)

    try:
        converter = Converter(options)
        html = converter.convert_file(
            input_path,
            output_path,
            encoding=args.encoding,
            use_vault=not args.no_vault,
        )
    except (Md2PrintError, OSError, UnicodeDecodeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if to_stdout:
        sys.stdout.write(html)
    elif args.verbose:
        print(f"Done. {output_path.stat().st_size} bytes written.", file=sys.stderr)
    else:
        print(f"Converted: {output_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
