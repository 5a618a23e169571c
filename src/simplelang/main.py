import argparse
import logging
import sys
from pathlib import Path

from simplelang.ast_debug import debug_ast
from simplelang.config import DEFAULT_FILE_ENCODING
from simplelang.errors import ParseError
from simplelang.parser import Parser
from simplelang.printer import format_program


def format_header(label: str, width: int = 80, fill_char: str = "═") -> str:
    padding = max(width - len(label) - 4, 0)
    return f"\n{fill_char} {label} {fill_char * padding}"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="simplelang",
        description="Parse a simple source file and print its syntax tree"
    )
    parser.add_argument(
        "source_file",
        type=Path,
        help="Source file to parse (e.g. count.simple)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print only the syntax tree as JSON"
    )
    parser.add_argument(
        "--spans",
        action="store_true",
        help="Include source spans in the syntax tree dump"
    )
    parser.add_argument(
        "--canonical",
        action="store_true",
        help="Also print the program in canonical form"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        source = args.source_file.read_text(encoding=DEFAULT_FILE_ENCODING)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading source file: {e}", file=sys.stderr)
        return 1

    simple_parser = Parser(source_name=str(args.source_file))
    try:
        program = simple_parser.parse(source)
    except ParseError as e:
        print(e.format_snippet(source), file=sys.stderr)
        return 1

    if args.json:
        print(debug_ast(program, include_spans=args.spans))
        return 0

    print(format_header("Source Code"))
    print(source.strip())

    print(format_header("AST"))
    print(debug_ast(program, include_spans=args.spans))

    if args.canonical:
        print(format_header("Canonical Form"))
        print(format_program(program), end="")

    return 0


if __name__ == "__main__":
    sys.exit(main())
