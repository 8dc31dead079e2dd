"""
Lox Language Parser

Parses Lox source tokens into structured abstract syntax trees (ASTs).

This module implements a recursive-descent parser that transforms the flat list
of lexer-generated `Token` objects into a sequence of statement nodes from
`lox.lox_ast`, ready for a tree-walking evaluator.

Grammar
-------
    program     -> declaration* EOF
    declaration -> varDecl | funDecl | statement
    statement   -> forStmt | ifStmt | printStmt | returnStmt | whileStmt
                 | block | exprStmt
    expression  -> assignment
    assignment  -> IDENTIFIER "=" assignment | logic_or
    logic_or    -> logic_and ( "or" logic_and )*
    logic_and   -> equality ( "and" equality )*
    equality    -> comparison ( ( "!=" | "==" ) comparison )*
    comparison  -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        -> factor ( ( "-" | "+" ) factor )*
    factor      -> unary ( ( "/" | "*" ) unary )*
    unary       -> ( "!" | "-" ) unary | call
    call        -> primary ( "(" arguments? ")" )*
    primary     -> "true" | "false" | "nil" | NUMBER | STRING
                 | "(" expression ")" | IDENTIFIER

Every binary level parses one operand at the next-higher level and then folds
further operands into left-associative nodes, so no associativity table is
needed. Assignment and unary recurse into themselves and are right-associative.
`for` loops are desugared into Block/While/Expression nodes on the spot.

Parser Behavior
---------------
- A grammar violation is reported to the `Diagnostics` collector as soon as it
  is detected, then unwinds the current declaration with `ParseError`.
- `parse_declaration()` turns that unwind into a failed `ParseResult`; the
  caller runs `synchronize()` to skip to the next statement boundary and keeps
  going. One parse therefore reports every independent syntax error.
- Invalid assignment targets and arity overflow are reported without
  unwinding; the node is still produced.

Entry Points
------------
- `Parser.parse()`: Parse a full program into a list of statements.
- `Parser.parse_declaration()`: Parse one declaration into a `ParseResult`.
- `Parser.parse_expression()`: Parse a single expression.
- `Parser.parse_expr_entrypoint()`: Parse input that is one bare expression (REPL mode).
- `parse()`: Module-level helper returning statements and their diagnostics.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from lox.lox_ast import (
    Assign,
    Binary,
    Block,
    Call,
    Expr,
    Expression,
    Function,
    Grouping,
    If,
    Literal,
    Logical,
    Print,
    Return,
    Stmt,
    Unary,
    Var,
    Variable,
    While,
)
from lox.lox_constants import (
    AND,
    BANG,
    BANG_EQUAL,
    COMMA,
    ELSE,
    EOF,
    EQUAL,
    EQUAL_EQUAL,
    FALSE,
    FOR,
    FUN,
    GREATER,
    GREATER_EQUAL,
    IDENTIFIER,
    IF,
    LEFT_BRACE,
    LEFT_PAREN,
    LESS,
    LESS_EQUAL,
    MINUS,
    NIL,
    NUMBER,
    OR,
    PLUS,
    PRINT,
    RETURN,
    RIGHT_BRACE,
    RIGHT_PAREN,
    SEMICOLON,
    SLASH,
    STAR,
    STRING,
    TRUE,
    VAR,
    WHILE,
    statement_keywords,
)
from lox.lox_diagnostics import Diagnostics
from lox.lox_lexer import Token

# Upper bound on call arguments and function parameters. Not a language
# guarantee; Parser takes its own `max_arity`.
MAX_ARITY = 8

# Deepest nesting of expressions or statements before the parse gives up on
# the construct; keeps deep input from exhausting the interpreter stack.
MAX_NESTING = 50


class ParseError(SyntaxError):
    """Unwinds the declaration being parsed after a violation has been reported."""

    def __init__(self, token: Token, message: str) -> None:
        super().__init__(message)
        self.token = token
        self.message = message


@dataclass(frozen=True)
class ParseResult:
    """Outcome of one declaration: either a statement or the error that aborted it."""

    statement: Stmt | None = None
    error: ParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TokenCursor:
    """
    Read position over a token sequence, owned by exactly one parse.

    The cursor never moves past the EOF sentinel; a sequence handed in without
    one gets an EOF appended after its last token.

    Attributes
    ----------
    tokens : list[Token]
        The token stream, ending in EOF.
    position : int
        Index of the current (not yet consumed) token.
    diagnostics : Diagnostics
        Collector that receives every error raised through `error()`.
    """

    def __init__(self, tokens: list[Token], diagnostics: Diagnostics) -> None:
        self.tokens: list[Token] = list(tokens)
        if not self.tokens or self.tokens[-1].type != EOF:
            last_line = self.tokens[-1].line if self.tokens else 1
            self.tokens.append(Token(EOF, "", None, last_line, 0))
        self.position: int = 0
        self.diagnostics = diagnostics

    def peek(self) -> Token:
        return self.tokens[self.position]

    def previous(self) -> Token:
        return self.tokens[self.position - 1 if self.position > 0 else 0]

    def is_at_end(self) -> bool:
        return self.peek().type == EOF

    def advance(self) -> Token:
        tok = self.peek()
        if not self.is_at_end():
            self.position += 1
        return tok

    def check(self, kind: str) -> bool:
        if self.is_at_end():
            return False
        return self.peek().type == kind

    def match(self, *kinds: str) -> bool:
        for kind in kinds:
            if self.check(kind):
                self.advance()
                return True
        return False

    def consume(self, kind: str, message: str) -> Token:
        if self.check(kind):
            return self.advance()
        raise self.error(self.peek(), message)

    def error(self, token: Token, message: str) -> ParseError:
        """Reports `message` at `token` and returns the error for the caller to raise."""
        self.diagnostics.error_at(token, message)
        return ParseError(token, message)


class Parser:
    """
    Lox Parser Class

    Responsible for transforming a list of lexical tokens into statement nodes.

    Attributes
    ----------
    cursor : TokenCursor
        Read position over the input tokens.
    diagnostics : Diagnostics
        Receives every syntax error found while parsing.
    max_arity : int
        Largest number of call arguments or function parameters accepted
        without a diagnostic.
    max_nesting : int
        Deepest expression or statement nesting accepted; one level deeper
        fails the enclosing declaration with a diagnostic.
    """

    def __init__(
        self,
        tokens: list[Token],
        diagnostics: Diagnostics | None = None,
        max_arity: int = MAX_ARITY,
        max_nesting: int = MAX_NESTING,
    ) -> None:
        if max_arity < 0:
            raise ValueError(f"max_arity must be non-negative, got {max_arity}")
        if max_nesting < 1:
            raise ValueError(f"max_nesting must be positive, got {max_nesting}")
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.cursor = TokenCursor(tokens, self.diagnostics)
        self.max_arity = max_arity
        self.max_nesting = max_nesting
        self._nesting = 0

    def parse(self) -> list[Stmt]:
        """Parse a full Lox program. Declarations that failed are left out."""
        statements: list[Stmt] = []
        while not self.cursor.is_at_end():
            result = self.parse_declaration()
            if result.ok:
                assert result.statement is not None  # for mypy
                statements.append(result.statement)
            else:
                self.synchronize()
        return statements

    def parse_declaration(self) -> ParseResult:
        """Parse one declaration; a syntax error comes back as a failed result."""
        try:
            return ParseResult(statement=self._declaration())
        except ParseError as error:
            return ParseResult(error=error)

    def synchronize(self) -> None:
        """Discard tokens up to the next statement boundary after a failed declaration."""
        self.cursor.advance()
        while not self.cursor.is_at_end():
            if self.cursor.previous().type == SEMICOLON:
                return
            if self.cursor.peek().type in statement_keywords:
                return
            self.cursor.advance()

    @contextmanager
    def _nested(self, message: str) -> Iterator[None]:
        if self._nesting >= self.max_nesting:
            raise self.cursor.error(self.cursor.peek(), message)
        self._nesting += 1
        try:
            yield
        finally:
            self._nesting -= 1

    # --- declarations ---

    def _declaration(self) -> Stmt:
        if self.cursor.match(VAR):
            return self.parse_var_declaration()
        if self.cursor.match(FUN):
            return self.parse_function("function")
        return self.parse_statement()

    def parse_var_declaration(self) -> Var:
        name = self.cursor.consume(IDENTIFIER, "Expect variable name.")

        initializer: Expr | None = None
        if self.cursor.match(EQUAL):
            initializer = self.parse_expression()

        self.cursor.consume(SEMICOLON, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    def parse_function(self, kind: str) -> Function:
        """Parse `name(params) { body }` after the `fun` keyword."""
        name = self.cursor.consume(IDENTIFIER, f"Expect {kind} name.")
        self.cursor.consume(LEFT_PAREN, f"Expect '(' after {kind} name.")
        params: list[Token] = []
        if not self.cursor.check(RIGHT_PAREN):
            while True:
                if len(params) == self.max_arity:
                    self.cursor.error(
                        self.cursor.peek(),
                        f"Cannot have more than {self.max_arity} parameters.",
                    )
                params.append(self.cursor.consume(IDENTIFIER, "Expect parameter name."))
                if not self.cursor.match(COMMA):
                    break
        self.cursor.consume(RIGHT_PAREN, "Expect ')' after parameters.")
        self.cursor.consume(LEFT_BRACE, f"Expect '{{' before {kind} body.")
        with self._nested("Statement nested too deeply."):
            body = self.parse_block()
        return Function(name, tuple(params), tuple(body))

    # --- statements ---

    def parse_statement(self) -> Stmt:
        with self._nested("Statement nested too deeply."):
            return self._statement()

    def _statement(self) -> Stmt:
        if self.cursor.match(FOR):
            return self.parse_for()
        if self.cursor.match(IF):
            return self.parse_if()
        if self.cursor.match(PRINT):
            return self.parse_print()
        if self.cursor.match(RETURN):
            return self.parse_return()
        if self.cursor.match(WHILE):
            return self.parse_while()
        if self.cursor.match(LEFT_BRACE):
            return Block(tuple(self.parse_block()))
        return self.parse_expression_statement()

    def parse_for(self) -> Stmt:
        """Parse a `for` loop and desugar it into Block/While/Expression nodes."""
        self.cursor.consume(LEFT_PAREN, "Expect '(' after 'for'.")

        initializer: Stmt | None
        if self.cursor.match(SEMICOLON):
            initializer = None
        elif self.cursor.match(VAR):
            initializer = self.parse_var_declaration()
        else:
            initializer = self.parse_expression_statement()

        condition: Expr | None = None
        if not self.cursor.check(SEMICOLON):
            condition = self.parse_expression()
        self.cursor.consume(SEMICOLON, "Expect ';' after loop condition.")

        increment: Expr | None = None
        if not self.cursor.check(RIGHT_PAREN):
            increment = self.parse_expression()
        self.cursor.consume(RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.parse_statement()

        if increment is not None:
            body = Block((body, Expression(increment)))
        if condition is None:
            condition = Literal(True)
        body = While(condition, body)
        if initializer is not None:
            body = Block((initializer, body))
        return body

    def parse_if(self) -> If:
        self.cursor.consume(LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.parse_expression()
        self.cursor.consume(RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.parse_statement()
        else_branch: Stmt | None = None
        # Binds to the nearest unmatched `if`.
        if self.cursor.match(ELSE):
            else_branch = self.parse_statement()
        return If(condition, then_branch, else_branch)

    def parse_print(self) -> Print:
        value = self.parse_expression()
        self.cursor.consume(SEMICOLON, "Expect ';' after expression.")
        return Print(value)

    def parse_return(self) -> Return:
        keyword = self.cursor.previous()
        value: Expr | None = None
        if not self.cursor.check(SEMICOLON):
            value = self.parse_expression()
        self.cursor.consume(SEMICOLON, "Expect ';' after return value.")
        return Return(keyword, value)

    def parse_while(self) -> While:
        self.cursor.consume(LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.parse_expression()
        self.cursor.consume(RIGHT_PAREN, "Expect ')' after condition.")
        body = self.parse_statement()
        return While(condition, body)

    def parse_block(self) -> list[Stmt]:
        """Parse declarations up to the closing `}`; errors recover inside the block."""
        statements: list[Stmt] = []
        while not self.cursor.check(RIGHT_BRACE) and not self.cursor.is_at_end():
            result = self.parse_declaration()
            if result.ok:
                assert result.statement is not None  # for mypy
                statements.append(result.statement)
            else:
                self.synchronize()
        self.cursor.consume(RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def parse_expression_statement(self) -> Expression:
        expr = self.parse_expression()
        self.cursor.consume(SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    # --- expressions ---

    def parse_expr_entrypoint(self) -> Expr:
        """Parse input that must be exactly one expression (REPL mode).

        Raises:
            ParseError: If the input is not a single well-formed expression.
        """
        expr = self.parse_expression()
        if not self.cursor.is_at_end():
            raise self.cursor.error(self.cursor.peek(), "Expect end of expression.")
        return expr

    def parse_expression(self) -> Expr:
        with self._nested("Expression nested too deeply."):
            return self.parse_assignment()

    def parse_assignment(self) -> Expr:
        expr = self.parse_or()

        if self.cursor.match(EQUAL):
            equals = self.cursor.previous()
            with self._nested("Expression nested too deeply."):
                value = self.parse_assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            # Reported only; the statement around it still parses.
            self.cursor.error(equals, "Invalid assignment target.")

        return expr

    def parse_or(self) -> Expr:
        expr = self.parse_and()
        while self.cursor.match(OR):
            operator = self.cursor.previous()
            right = self.parse_and()
            expr = Logical(expr, operator, right)
        return expr

    def parse_and(self) -> Expr:
        expr = self.parse_equality()
        while self.cursor.match(AND):
            operator = self.cursor.previous()
            right = self.parse_equality()
            expr = Logical(expr, operator, right)
        return expr

    def parse_equality(self) -> Expr:
        expr = self.parse_comparison()
        while self.cursor.match(BANG_EQUAL, EQUAL_EQUAL):
            operator = self.cursor.previous()
            right = self.parse_comparison()
            expr = Binary(expr, operator, right)
        return expr

    def parse_comparison(self) -> Expr:
        expr = self.parse_term()
        while self.cursor.match(GREATER, GREATER_EQUAL, LESS, LESS_EQUAL):
            operator = self.cursor.previous()
            right = self.parse_term()
            expr = Binary(expr, operator, right)
        return expr

    def parse_term(self) -> Expr:
        expr = self.parse_factor()
        while self.cursor.match(MINUS, PLUS):
            operator = self.cursor.previous()
            right = self.parse_factor()
            expr = Binary(expr, operator, right)
        return expr

    def parse_factor(self) -> Expr:
        expr = self.parse_unary()
        while self.cursor.match(SLASH, STAR):
            operator = self.cursor.previous()
            right = self.parse_unary()
            expr = Binary(expr, operator, right)
        return expr

    def parse_unary(self) -> Expr:
        if self.cursor.match(BANG, MINUS):
            operator = self.cursor.previous()
            with self._nested("Expression nested too deeply."):
                right = self.parse_unary()
            return Unary(operator, right)
        return self.parse_call()

    def parse_call(self) -> Expr:
        expr = self.parse_primary()
        while self.cursor.match(LEFT_PAREN):
            expr = self._finish_call(expr)
        return expr

    def _finish_call(self, callee: Expr) -> Call:
        arguments: list[Expr] = []
        if not self.cursor.check(RIGHT_PAREN):
            while True:
                if len(arguments) == self.max_arity:
                    self.cursor.error(
                        self.cursor.peek(),
                        f"Cannot have more than {self.max_arity} arguments.",
                    )
                arguments.append(self.parse_expression())
                if not self.cursor.match(COMMA):
                    break
        paren = self.cursor.consume(RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee, paren, tuple(arguments))

    def parse_primary(self) -> Expr:
        if self.cursor.match(FALSE):
            return Literal(False)
        if self.cursor.match(TRUE):
            return Literal(True)
        if self.cursor.match(NIL):
            return Literal(None)

        if self.cursor.match(NUMBER, STRING):
            return Literal(self.cursor.previous().literal)

        if self.cursor.match(LEFT_PAREN):
            expr = self.parse_expression()
            self.cursor.consume(RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        if self.cursor.match(IDENTIFIER):
            return Variable(self.cursor.previous())

        raise self.cursor.error(self.cursor.peek(), "Expect expression.")


def parse(
    tokens: list[Token],
    diagnostics: Diagnostics | None = None,
    max_arity: int = MAX_ARITY,
) -> tuple[list[Stmt], Diagnostics]:
    """Parse `tokens`, returning the statements together with the diagnostics collected."""
    parser = Parser(tokens, diagnostics, max_arity)
    return parser.parse(), parser.diagnostics
