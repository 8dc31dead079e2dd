"""
Interactive prompt for the Lox front end.

Each entry is scanned and parsed on its own with a fresh `Diagnostics`
collector, so an error in one entry never leaks into the next. Parsed
statements are echoed in their printed form. An entry that is a single bare
expression (no trailing `;`) is accepted too and echoed as an expression.

Commands:
    exit / quit      leave the REPL
    verbose-mode     toggle printing the token stream before the tree
"""

import io
import traceback

from lox.lox_diagnostics import Diagnostics
from lox.lox_lexer import CharacterStream, Lexer, Token
from lox.lox_parser import MAX_ARITY, ParseError, Parser
from lox.lox_printer import AstPrinter


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def read_entry() -> str | None:
    """Reads one entry, continuing over several lines while braces are open.

    Returns None when the user asks to leave.
    """
    src_lines: list[str] = []
    brace_count = 0
    while True:
        prompt = "> " if not src_lines else ". "
        line = input(prompt)
        if line.strip() in ("exit", "quit") and not src_lines:
            return None
        src_lines.append(line)
        brace_count += line.count("{") - line.count("}")
        if brace_count <= 0:
            return "\n".join(src_lines).strip()


def try_bare_expression(tokens: list[Token], max_arity: int) -> str | None:
    """Returns the printed expression if `tokens` hold exactly one expression."""
    parser = Parser(tokens, Diagnostics(), max_arity)
    try:
        expr = parser.parse_expr_entrypoint()
    except ParseError:
        return None
    if parser.diagnostics.had_error:
        return None
    return AstPrinter().print_expr(expr)


def run_entry(src: str, max_arity: int = MAX_ARITY, verbose: bool = False) -> bool:
    """Scans, parses and echoes one entry. Returns True when it parsed cleanly."""
    diagnostics = Diagnostics()
    tokens = Lexer(CharacterStream(src), diagnostics).tokenize()
    if verbose:
        print(f"[tokens] >>> {tokens}")

    if not diagnostics.had_error:
        statements = Parser(tokens, diagnostics, max_arity).parse()
        if not diagnostics.had_error:
            output = AstPrinter().print_program(statements)
            if output:
                print(output)
            return True
        expr_text = try_bare_expression(tokens, max_arity)
        if expr_text is not None:
            print(expr_text)
            return True

    print("[error] >>>")
    for diagnostic in diagnostics:
        print(diagnostic.format())
    return False


def start_repl(max_arity: int = MAX_ARITY, verbose: bool = False) -> None:
    print("Lox REPL. Type 'exit' or 'quit' to leave.")

    while True:
        try:
            src = read_entry()
            if src is None:
                print("Exiting Lox REPL.")
                return
            if not src:
                continue
            if src.lower() == "verbose-mode":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue
            try:
                run_entry(src, max_arity=max_arity, verbose=verbose)
            except Exception:
                print_traceback()
        except (KeyboardInterrupt, EOFError):
            print("\nExiting Lox REPL.")
            break


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
