import dataclasses
import json

import hypothesis.strategies as st
import pytest
from hypothesis import given

from lox.lox_ast import (
    EXPR_TYPES,
    STMT_TYPES,
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
    Print,
    Return,
    Unary,
    Var,
    Variable,
    While,
)
from lox.lox_lexer import Token

PLUS = Token("PLUS", "+", None, 1, 3)
NAME = Token("IDENTIFIER", "x", None, 1, 1)


def test_nodes_are_frozen() -> None:
    node = Binary(Literal(1.0), PLUS, Literal(2.0))
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.left = Literal(3.0)  # type: ignore[misc]


def test_nodes_compare_structurally() -> None:
    assert Binary(Literal(1.0), PLUS, Literal(2.0)) == Binary(Literal(1.0), PLUS, Literal(2.0))
    assert Binary(Literal(1.0), PLUS, Literal(2.0)) != Binary(Literal(2.0), PLUS, Literal(1.0))


def test_nodes_are_hashable() -> None:
    block = Block((Print(Literal("a")), Var(NAME, None)))
    assert hash(block) == hash(Block((Print(Literal("a")), Var(NAME, None))))


def test_kinds_are_unique_per_variant() -> None:
    kinds = [cls.kind for cls in EXPR_TYPES + STMT_TYPES]
    assert len(kinds) == len(set(kinds)) == 16


def test_kind_is_not_a_field() -> None:
    assert "kind" not in {f.name for f in dataclasses.fields(Literal)}


def test_to_dict_binary() -> None:
    d = Binary(Literal(1.0), PLUS, Variable(NAME)).to_dict()
    assert d == {
        "kind": "binary",
        "left": {"kind": "literal", "value": 1.0},
        "operator": "+",
        "right": {"kind": "variable", "name": "x"},
    }


def test_to_dict_sequences_become_lists() -> None:
    paren = Token("RIGHT_PAREN", ")", None, 1, 5)
    d = Call(Variable(NAME), paren, (Literal(1.0), Literal(2.0))).to_dict()
    assert d["arguments"] == [
        {"kind": "literal", "value": 1.0},
        {"kind": "literal", "value": 2.0},
    ]
    assert d["paren"] == ")"


def test_to_dict_statements() -> None:
    fn = Function(
        Token("IDENTIFIER", "f", None, 1, 5),
        (NAME,),
        (Return(Token("RETURN", "return", None, 1, 12), Variable(NAME)),),
    )
    assert fn.to_dict() == {
        "kind": "function",
        "name": "f",
        "params": ["x"],
        "body": [
            {"kind": "return", "keyword": "return", "value": {"kind": "variable", "name": "x"}}
        ],
    }


def test_to_dict_optional_children() -> None:
    assert Var(NAME).to_dict() == {"kind": "var", "name": "x", "initializer": None}
    stmt = If(Literal(True), Print(Literal(1.0)))
    assert stmt.to_dict()["else_branch"] is None


def test_to_dict_ignores_positions() -> None:
    other_plus = Token("PLUS", "+", None, 7, 20)
    a = Binary(Literal(1.0), PLUS, Literal(2.0))
    b = Binary(Literal(1.0), other_plus, Literal(2.0))
    assert a != b
    assert a.to_dict() == b.to_dict()


def test_to_dict_is_json_serializable() -> None:
    program = [
        Var(NAME, Unary(Token("MINUS", "-", None, 1, 9), Literal(1.0))),
        While(
            Logical(Variable(NAME), Token("OR", "or", None, 2, 9), Literal(False)),
            Block((Expression(Assign(NAME, Grouping(Literal(None)))),)),
        ),
    ]
    text = json.dumps([node.to_dict() for node in program])
    assert json.loads(text)[1]["body"]["statements"][0]["expression"]["kind"] == "assign"


@given(st.text(), st.text())  # type: ignore[misc]
def test_string_literals_equal_by_value(a: str, b: str) -> None:
    assert (Literal(a) == Literal(b)) == (a == b)


@given(st.lists(st.integers(min_value=0, max_value=100), max_size=10))  # type: ignore[misc]
def test_block_children_keep_order(values: list[int]) -> None:
    block = Block(tuple(Print(Literal(float(v))) for v in values))
    assert [s["expression"]["value"] for s in block.to_dict()["statements"]] == [
        float(v) for v in values
    ]


@pytest.mark.parametrize(
    "a,b",
    [(True, 1.0), (False, 0.0), (None, False), ("1", 1.0)],
)  # type: ignore[misc]
def test_literals_of_different_types_are_not_equal(a: object, b: object) -> None:
    assert Literal(a) != Literal(b)  # type: ignore[arg-type]
    assert Literal(a) == Literal(a)  # type: ignore[arg-type]


def test_literal_type_propagates_through_parents() -> None:
    assert Print(Literal(True)) != Print(Literal(1.0))
    assert While(Literal(True), Block()) != While(Literal(1.0), Block())


def test_literal_hash_distinguishes_bool_from_number() -> None:
    assert len({Literal(True), Literal(1.0), Literal(False), Literal(0.0)}) == 4
