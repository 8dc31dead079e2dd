"""
Defines the abstract syntax tree (AST) node structure for the Lox programming language.

The tree is split into two closed families of immutable nodes:

    Expr: Literal, Grouping, Unary, Binary, Logical, Variable, Assign, Call
    Stmt: Expression, Print, Var, Block, If, While, Function, Return

Each variant is a frozen dataclass tagged by a `kind` string, so consumers
(evaluator, printer, tests) dispatch on the node class or on `kind` instead of
going through a visitor. Child sequences are tuples: a node owns its children
exclusively and can be neither mutated nor shared into a cycle.

There is no node for `for` loops. The parser desugars them into Block, While
and Expression nodes.

Serialization:
    `to_dict()` converts a node and all descendants into plain dictionaries,
    suitable for JSON output. Tokens are reduced to their lexeme, which makes two
    trees parsed from differently laid out source compare equal as dicts.

Example:
    node = Binary(Literal(1.0), Token("PLUS", "+", None, 1, 3), Literal(2.0))
    node.to_dict()  # {"kind": "binary", "left": {...}, "operator": "+", "right": {...}}
"""

from dataclasses import dataclass, fields
from typing import Any, ClassVar, TypedDict, Union

from lox.lox_lexer import Token


class ASTDict(TypedDict, total=False):
    """Shape of a serialized node: `kind` plus one entry per field."""

    kind: str


LiteralValue = Union[bool, float, str, None]


def _serialize(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, Token):
        return value.lexeme
    if isinstance(value, tuple):
        return [_serialize(v) for v in value]
    return value


@dataclass(frozen=True)
class Node:
    kind: ClassVar[str] = "node"

    def to_dict(self) -> ASTDict:
        result: dict[str, Any] = {"kind": self.kind}
        for f in fields(self):
            result[f.name] = _serialize(getattr(self, f.name))
        return result  # type: ignore[return-value]


# Expressions


@dataclass(frozen=True)
class Literal(Node):
    """A constant. Equality also compares the value's type, so `true` never equals `1`."""

    kind: ClassVar[str] = "literal"
    value: LiteralValue

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Literal):
            return NotImplemented
        return type(self.value) is type(other.value) and self.value == other.value

    def __hash__(self) -> int:
        return hash((type(self.value), self.value))


@dataclass(frozen=True)
class Grouping(Node):
    kind: ClassVar[str] = "grouping"
    expression: "Expr"


@dataclass(frozen=True)
class Unary(Node):
    kind: ClassVar[str] = "unary"
    operator: Token
    right: "Expr"


@dataclass(frozen=True)
class Binary(Node):
    kind: ClassVar[str] = "binary"
    left: "Expr"
    operator: Token
    right: "Expr"


@dataclass(frozen=True)
class Logical(Node):
    """`and` / `or`; kept apart from Binary because evaluation short-circuits."""

    kind: ClassVar[str] = "logical"
    left: "Expr"
    operator: Token
    right: "Expr"


@dataclass(frozen=True)
class Variable(Node):
    kind: ClassVar[str] = "variable"
    name: Token


@dataclass(frozen=True)
class Assign(Node):
    kind: ClassVar[str] = "assign"
    name: Token
    value: "Expr"


@dataclass(frozen=True)
class Call(Node):
    """A call site. `paren` is the closing parenthesis, used to locate runtime errors."""

    kind: ClassVar[str] = "call"
    callee: "Expr"
    paren: Token
    arguments: tuple["Expr", ...] = ()


Expr = Union[Literal, Grouping, Unary, Binary, Logical, Variable, Assign, Call]


# Statements


@dataclass(frozen=True)
class Expression(Node):
    kind: ClassVar[str] = "expression"
    expression: Expr


@dataclass(frozen=True)
class Print(Node):
    kind: ClassVar[str] = "print"
    expression: Expr


@dataclass(frozen=True)
class Var(Node):
    kind: ClassVar[str] = "var"
    name: Token
    initializer: Expr | None = None


@dataclass(frozen=True)
class Block(Node):
    kind: ClassVar[str] = "block"
    statements: tuple["Stmt", ...] = ()


@dataclass(frozen=True)
class If(Node):
    kind: ClassVar[str] = "if"
    condition: Expr
    then_branch: "Stmt"
    else_branch: "Stmt | None" = None


@dataclass(frozen=True)
class While(Node):
    kind: ClassVar[str] = "while"
    condition: Expr
    body: "Stmt"


@dataclass(frozen=True)
class Function(Node):
    kind: ClassVar[str] = "function"
    name: Token
    params: tuple[Token, ...] = ()
    body: tuple["Stmt", ...] = ()


@dataclass(frozen=True)
class Return(Node):
    kind: ClassVar[str] = "return"
    keyword: Token
    value: Expr | None = None


Stmt = Union[Expression, Print, Var, Block, If, While, Function, Return]

EXPR_TYPES: tuple[type[Node], ...] = (
    Literal,
    Grouping,
    Unary,
    Binary,
    Logical,
    Variable,
    Assign,
    Call,
)
STMT_TYPES: tuple[type[Node], ...] = (
    Expression,
    Print,
    Var,
    Block,
    If,
    While,
    Function,
    Return,
)
