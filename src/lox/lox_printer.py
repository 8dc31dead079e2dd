"""
Renders Lox syntax trees back into text.

Classes and Features:
    - AstPrinter: Dispatches each node to an `emit_<kind>` method and returns its text.
    - Expressions print in a canonical, fully parenthesized infix form: every
      Unary, Binary, Logical, Grouping and Assign node gets its own parentheses.
      The output is valid Lox, so scanning and parsing it again yields the same
      tree apart from the Grouping nodes those parentheses introduce.
    - Statements print as one S-expression each, e.g. `(while true (print 1))`.

Example:
    >>> AstPrinter().print_expr(expr)
    '(1 + (2 * 3))'

Raises:
    TypeError: If something other than an AST node is handed to the printer.
    NotImplementedError: If a node kind has no `emit_*` method.
    ValueError: If a number literal is NaN or negative infinity.
"""

import math
from decimal import Decimal

from lox.lox_ast import (
    Assign,
    Binary,
    Block,
    Call,
    Expression,
    Function,
    Grouping,
    If,
    Literal,
    Logical,
    Node,
    Print,
    Return,
    Unary,
    Var,
    Variable,
    While,
)


def format_number(value: float) -> str:
    """Renders a number as a Lox NUMBER lexeme that scans back to `value`.

    Lox has no exponent syntax, so every value is written out in positional
    notation. Infinity, which the scanner yields for an overlong digit run,
    is written as the shortest digit run that overflows.
    """
    if math.isinf(value) and value > 0:
        return "1" + "0" * 309
    if not math.isfinite(value):
        raise ValueError(f"Number has no Lox spelling: {value!r}")
    if value.is_integer():
        return str(int(value))
    # repr() is the shortest text that round-trips; Decimal lays it out without an exponent
    text = format(Decimal(repr(value)), "f")
    return text.rstrip("0").rstrip(".")


def format_literal(value: object) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return f'"{value}"'
    raise TypeError(f"Unsupported literal value: {value!r}")


class AstPrinter:
    """Converts expression and statement nodes into their canonical text form."""

    def print_expr(self, node: Node) -> str:
        return self._visit(node)

    def print_stmt(self, node: Node) -> str:
        return self._visit(node)

    def print_program(self, statements: list[Node]) -> str:
        """Prints each statement on its own line.

        Raises:
            TypeError: If any element is not an AST node.
        """
        if not all(isinstance(node, Node) for node in statements):
            raise TypeError("All items in a program must be AST nodes.")
        return "\n".join(self._visit(node) for node in statements)

    def _visit(self, node: Node) -> str:
        if not isinstance(node, Node):
            raise TypeError(f"Expected an AST node, got {type(node).__name__}")
        method = getattr(self, f"emit_{node.kind}", None)
        if method is None:
            raise NotImplementedError(f"No printer method for node kind '{node.kind}'")
        result: str = method(node)
        return result

    # --- expressions ---

    def emit_literal(self, node: Literal) -> str:
        return format_literal(node.value)

    def emit_grouping(self, node: Grouping) -> str:
        return f"({self._visit(node.expression)})"

    def emit_unary(self, node: Unary) -> str:
        return f"({node.operator.lexeme}{self._visit(node.right)})"

    def emit_binary(self, node: Binary) -> str:
        return f"({self._visit(node.left)} {node.operator.lexeme} {self._visit(node.right)})"

    def emit_logical(self, node: Logical) -> str:
        return f"({self._visit(node.left)} {node.operator.lexeme} {self._visit(node.right)})"

    def emit_variable(self, node: Variable) -> str:
        return node.name.lexeme

    def emit_assign(self, node: Assign) -> str:
        return f"({node.name.lexeme} = {self._visit(node.value)})"

    def emit_call(self, node: Call) -> str:
        args = ", ".join(self._visit(arg) for arg in node.arguments)
        return f"{self._visit(node.callee)}({args})"

    # --- statements ---

    def emit_expression(self, node: Expression) -> str:
        return f"(expr {self._visit(node.expression)})"

    def emit_print(self, node: Print) -> str:
        return f"(print {self._visit(node.expression)})"

    def emit_var(self, node: Var) -> str:
        if node.initializer is None:
            return f"(var {node.name.lexeme})"
        return f"(var {node.name.lexeme} = {self._visit(node.initializer)})"

    def emit_block(self, node: Block) -> str:
        parts = ["block", *(self._visit(stmt) for stmt in node.statements)]
        return f"({' '.join(parts)})"

    def emit_if(self, node: If) -> str:
        cond = self._visit(node.condition)
        then = self._visit(node.then_branch)
        if node.else_branch is None:
            return f"(if {cond} {then})"
        return f"(if-else {cond} {then} {self._visit(node.else_branch)})"

    def emit_while(self, node: While) -> str:
        return f"(while {self._visit(node.condition)} {self._visit(node.body)})"

    def emit_function(self, node: Function) -> str:
        params = ", ".join(p.lexeme for p in node.params)
        parts = [f"fun {node.name.lexeme}({params})"]
        parts.extend(self._visit(stmt) for stmt in node.body)
        return f"({' '.join(parts)})"

    def emit_return(self, node: Return) -> str:
        if node.value is None:
            return "(return)"
        return f"(return {self._visit(node.value)})"
