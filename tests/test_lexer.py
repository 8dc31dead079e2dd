import pytest
from hypothesis import given
from hypothesis import strategies as st

from lox.lox_constants import keywords
from lox.lox_diagnostics import Diagnostics
from lox.lox_lexer import CharacterStream, Lexer, Token, scan


def tokenize(source: str) -> list[Token]:
    """Scans `source`, dropping the trailing EOF."""
    tokens = scan(source)
    assert tokens[-1].type == "EOF"
    return tokens[:-1]


def test_single_char_tokens() -> None:
    code = "( ) { } , . - + ; / *"
    expected = [
        "LEFT_PAREN",
        "RIGHT_PAREN",
        "LEFT_BRACE",
        "RIGHT_BRACE",
        "COMMA",
        "DOT",
        "MINUS",
        "PLUS",
        "SEMICOLON",
        "SLASH",
        "STAR",
    ]
    assert [t.type for t in tokenize(code)] == expected


def test_one_or_two_char_operators_use_longest_match() -> None:
    code = "! != = == > >= < <="
    expected = [
        "BANG",
        "BANG_EQUAL",
        "EQUAL",
        "EQUAL_EQUAL",
        "GREATER",
        "GREATER_EQUAL",
        "LESS",
        "LESS_EQUAL",
    ]
    assert [t.type for t in tokenize(code)] == expected


def test_adjacent_operators_without_spaces() -> None:
    assert [t.lexeme for t in tokenize("a>=b==!c")] == ["a", ">=", "b", "==", "!", "c"]


def test_string_token_carries_literal_without_quotes() -> None:
    tok = tokenize('"hello world"')[0]
    assert tok.type == "STRING"
    assert tok.lexeme == '"hello world"'
    assert tok.literal == "hello world"


def test_multiline_string_advances_line() -> None:
    tokens = tokenize('"a\nb" x')
    assert tokens[0].literal == "a\nb"
    assert tokens[1].line == 2


def test_number_token_is_float() -> None:
    tok = tokenize("123")[0]
    assert tok.type == "NUMBER"
    assert tok.lexeme == "123"
    assert tok.literal == 123.0
    assert isinstance(tok.literal, float)


def test_decimal_number_token() -> None:
    tok = tokenize("123.456")[0]
    assert tok.literal == 123.456


def test_trailing_dot_is_not_part_of_number() -> None:
    tokens = tokenize("12.")
    assert [(t.type, t.lexeme) for t in tokens] == [("NUMBER", "12"), ("DOT", ".")]


def test_identifier_token() -> None:
    tok = tokenize("my_Var1")[0]
    assert tok.type == "IDENTIFIER"
    assert tok.lexeme == "my_Var1"
    assert tok.literal is None


@pytest.mark.parametrize("word,kind", sorted(keywords.items()))  # type: ignore[misc]
def test_reserved_words(word: str, kind: str) -> None:
    tok = tokenize(word)[0]
    assert tok.type == kind


def test_keywords_are_case_sensitive() -> None:
    assert tokenize("Print")[0].type == "IDENTIFIER"


def test_line_and_column_tracking() -> None:
    tokens = tokenize("x = 1;\ny = 2;")
    assert (tokens[0].line, tokens[0].col) == (1, 1)
    assert (tokens[4].line, tokens[4].col) == (2, 1)
    assert tokens[6].col == 5


def test_skip_whitespace_and_comments() -> None:
    tokens = tokenize("   \n  // a comment\n123")
    assert len(tokens) == 1
    assert tokens[0].literal == 123.0
    assert tokens[0].line == 3


def test_slash_is_not_a_comment() -> None:
    assert [t.type for t in tokenize("a / b")] == ["IDENTIFIER", "SLASH", "IDENTIFIER"]


def test_token_eof_only_for_empty_source() -> None:
    tokens = scan("")
    assert len(tokens) == 1
    assert tokens[0].type == "EOF"


def test_next_token_keeps_returning_eof() -> None:
    lexer = Lexer(CharacterStream(""))
    assert lexer.next_token().type == "EOF"
    assert lexer.next_token().type == "EOF"


def test_unexpected_character_is_reported_and_skipped() -> None:
    diagnostics = Diagnostics()
    tokens = scan("a @ b", diagnostics)
    assert [t.lexeme for t in tokens[:-1]] == ["a", "b"]
    assert diagnostics.messages() == ["Unexpected character."]
    assert diagnostics.reports[0].where == ""
    assert diagnostics.reports[0].line == 1


def test_unterminated_string_is_reported() -> None:
    diagnostics = Diagnostics()
    tokens = scan('print "oops', diagnostics)
    assert [t.type for t in tokens] == ["PRINT", "EOF"]
    assert diagnostics.messages() == ["Unterminated string."]


def test_every_lexical_error_is_reported() -> None:
    diagnostics = Diagnostics()
    scan("#\n$\n", diagnostics)
    assert [d.line for d in diagnostics.reports] == [1, 2]


def test_character_stream_read_past_end_raises() -> None:
    stream = CharacterStream("")
    with pytest.raises(EOFError):
        stream.next()


def test_character_stream_peek_out_of_bounds() -> None:
    stream = CharacterStream("ab")
    assert stream.peek(5) == ""
    assert stream.peek(-1) == ""


def test_token_equality_and_hash() -> None:
    a = Token("NUMBER", "1", 1.0, 1, 1)
    b = Token("NUMBER", "1", 1.0, 1, 1)
    assert a == b
    assert hash(a) == hash(b)
    assert a != Token("NUMBER", "1", 1.0, 2, 1)
    assert a != "1"


def test_token_repr() -> None:
    assert repr(Token("PLUS", "+")) == "Token(PLUS, '+')"
    assert repr(Token("NUMBER", "2", 2.0)) == "Token(NUMBER, '2', 2.0)"


@given(st.integers(min_value=0, max_value=10**9))  # type: ignore[misc]
def test_integer_literals_scan_to_floats(n: int) -> None:
    tok = tokenize(str(n))[0]
    assert tok.type == "NUMBER"
    assert tok.literal == float(n)


@given(
    st.from_regex(r"[a-zA-Z_][a-zA-Z0-9_]{0,10}", fullmatch=True).filter(
        lambda x: x not in keywords
    )
)  # type: ignore[misc]
def test_identifiers_scan_as_single_token(name: str) -> None:
    tokens = tokenize(name)
    assert len(tokens) == 1
    assert tokens[0].type == "IDENTIFIER"
    assert tokens[0].lexeme == name


@given(st.text(alphabet="abc xyz019", max_size=20))  # type: ignore[misc]
def test_string_literals_round_trip(body: str) -> None:
    tok = tokenize(f'"{body}"')[0]
    assert tok.type == "STRING"
    assert tok.literal == body


@pytest.mark.parametrize("source", ["café", "λ", "x²"])  # type: ignore[misc]
def test_identifiers_are_ascii_only(source: str) -> None:
    diagnostics = Diagnostics()
    tokens = scan(source, diagnostics)
    assert all(t.lexeme.isascii() for t in tokens)
    assert diagnostics.messages() == ["Unexpected character."]


def test_non_ascii_digit_does_not_continue_identifier() -> None:
    diagnostics = Diagnostics()
    assert [t.lexeme for t in scan("a٣b", diagnostics)[:-1]] == ["a", "b"]
    assert len(diagnostics) == 1
