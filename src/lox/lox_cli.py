"""
Lox CLI Entrypoint.

This module provides the command-line interface for the Lox front end.
It scans and parses a program, reports syntax errors, and prints the parsed tree.

Features:
    - Read source from `.lox` files or inline strings.
    - Scan and parse the program, printing every diagnostic to stderr as it is found.
    - Dump the statements as S-expressions or JSON.
    - Launch an interactive REPL.

Example usage:
    lox hello.lox
    lox -s "print 1 + 2;"
    lox program.lox --dump json --max-arity 255
    lox --repl --verbose

Exit codes:
    0   success
    64  usage error (bad arguments, unsupported file)
    65  the program has syntax errors

Functions:
    run_lox(source: str, is_string: bool = False, max_arity: int = MAX_ARITY,
            dump: str = "tree") -> int:
        Executes the pipeline (scan → parse → print) and returns the exit code.

    main() -> None:
        Parses CLI arguments and invokes the appropriate action (REPL or file).
"""

import argparse
import json
import sys

from lox.lox_diagnostics import Diagnostic, Diagnostics
from lox.lox_lexer import CharacterStream, Lexer
from lox.lox_parser import MAX_ARITY, Parser
from lox.lox_printer import AstPrinter

EXIT_OK = 0
EXIT_USAGE = 64
EXIT_DATA_ERROR = 65

DUMP_FORMATS = ("tree", "json", "none")


def print_diagnostic(diagnostic: Diagnostic) -> None:
    print(diagnostic.format(), file=sys.stderr)


def run_lox(
    source: str,
    is_string: bool = False,
    max_arity: int = MAX_ARITY,
    dump: str = "tree",
) -> int:
    """
    Run the Lox front end: scan, parse, and print the parsed program.

    Args:
        source (str): The Lox source code or path to a `.lox` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        max_arity (int): Maximum call arguments / function parameters before a diagnostic.
        dump (str): Output format for the parsed program: 'tree', 'json' or 'none'.

    Returns:
        int: The process exit code, 65 when any syntax error was reported.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.lox',
            or if `dump` is not a known format.
    """
    if not is_string and not source.endswith(".lox"):
        raise ValueError("Only .lox files are supported.")
    if dump not in DUMP_FORMATS:
        raise ValueError(f"Unknown dump format: {dump!r}")
    # 1. Read source
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    diagnostics = Diagnostics(sink=print_diagnostic)

    # 2. Scanning
    tokens = Lexer(CharacterStream(source), diagnostics).tokenize()

    # 3. Parsing
    statements = Parser(tokens, diagnostics, max_arity).parse()

    # 4. Stop if there was a syntax error
    if diagnostics.had_error:
        return EXIT_DATA_ERROR

    # 5. Output result
    if dump == "tree":
        output = AstPrinter().print_program(statements)
        if output:
            print(output)
    elif dump == "json":
        print(json.dumps([stmt.to_dict() for stmt in statements], indent=2))
    return EXIT_OK


def main() -> None:
    """
    Entry point for the Lox CLI.

    Parses command-line arguments and dispatches to the appropriate mode:
    - Launches the REPL if no arguments are passed or `--repl` is specified.
    - Otherwise, runs the front end on a file or string and exits with its code.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--max-arity`: Argument/parameter limit (default: 8).
        - `--dump`: Output format for the parsed program ('tree', 'json', 'none').
        - `--repl`: Launch the interactive REPL.
        - `--verbose`: Verbose REPL mode (show tokens).
    """
    if len(sys.argv) == 1:
        # No args passed: open REPL instead
        from lox.lox_repl import start_repl

        start_repl()
        return
    parser = argparse.ArgumentParser(prog="lox")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--max-arity",
        type=int,
        default=MAX_ARITY,
        help=f"Maximum number of call arguments and parameters (default: {MAX_ARITY})",
    )
    parser.add_argument(
        "--dump",
        choices=DUMP_FORMATS,
        default="tree",
        help="How to print the parsed program (default: tree)",
    )
    parser.add_argument(
        "--repl",
        action="store_true",
        help="Launch interactive REPL instead of parsing a source",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Verbose REPL mode (if --repl)"
    )

    try:
        args = parser.parse_args()
    except SystemExit as exc:
        # argparse exits with 2 on bad usage; report it as a usage error
        sys.exit(EXIT_OK if exc.code == 0 else EXIT_USAGE)

    if args.max_arity < 0:
        print("[error] >>> --max-arity must be non-negative", file=sys.stderr)
        sys.exit(EXIT_USAGE)

    if args.repl or args.source is None:
        from lox.lox_repl import start_repl

        start_repl(max_arity=args.max_arity, verbose=args.verbose)
        return

    try:
        code = run_lox(
            source=args.source,
            is_string=args.string,
            max_arity=args.max_arity,
            dump=args.dump,
        )
    except (ValueError, OSError) as e:
        print(f"[error] >>> {e}", file=sys.stderr)
        sys.exit(EXIT_USAGE)
    sys.exit(code)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
