"""
Lexical analyzer for the Lox programming language.

This module provides core components for converting raw source code into token streams:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with kind, lexeme, literal value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Features:
    - Skips whitespace and single-line comments (`//`)
    - Supports longest-match recognition of one- and two-character operators
    - Recognizes:
        * Identifiers (ASCII letters, digits and `_`) and keywords
        * Numbers (integer and decimal, always carried as float literals)
        * Strings (may span lines, no escape sequences)
        * Punctuation

Errors:
    Malformed input never raises. Unexpected characters and unterminated strings
    are reported to a `Diagnostics` collector and scanning continues, so a single
    pass surfaces every lexical error. The token stream always ends in exactly one
    EOF token.

Example:
    >>> lexer = Lexer(CharacterStream("print 42;"))
    >>> lexer.next_token()
    Token(PRINT, 'print')

Exports:
    - CharacterStream
    - Token
    - Lexer
    - scan
    - token_hashmap
"""

import string
from typing import Any

from lox.lox_constants import (
    EOF,
    IDENTIFIER,
    NUMBER,
    STRING,
    keywords,
    operator_tokens,
    single_char_tokens,
    token_hashmap,
)
from lox.lox_diagnostics import Diagnostics

Literal = float | str | None


def _is_digit(ch: str) -> bool:
    return ch != "" and ch in string.digits


def _is_alpha(ch: str) -> bool:
    return ch != "" and (ch in string.ascii_letters or ch == "_")


def _is_alnum(ch: str) -> bool:
    return _is_alpha(ch) or _is_digit(ch)


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    This stream is used by the Lox lexer to support character-by-character scanning
    with precise source location metadata for error reporting.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token in the Lox language.

    Tokens are never modified after the lexer produces them; the parser only
    reads them.

    Attributes:
        type (str): The token kind (e.g. 'IDENTIFIER', 'NUMBER', 'EOF').
        lexeme (str): The raw source text of the token.
        literal (float | str | None): The scanned value of NUMBER and STRING tokens.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
    """

    __slots__ = ("type", "lexeme", "literal", "line", "col")

    def __init__(
        self,
        type_: str,
        lexeme: str,
        literal: Literal = None,
        line: int = 0,
        col: int = 0,
    ):
        self.type = type_
        self.lexeme = lexeme
        self.literal = literal
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        if self.literal is not None:
            return f"Token({self.type}, {self.lexeme!r}, {self.literal!r})"
        return f"Token({self.type}, {self.lexeme!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.lexeme == other.lexeme
            and self.literal == other.literal
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.lexeme, self.literal, self.line, self.col))


class Lexer:
    """Lexical analyzer for the Lox language.

    The Lexer takes a CharacterStream and converts it into a stream of Token objects.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        diagnostics (Diagnostics): Collector that receives lexical errors.
    """

    def __init__(
        self, stream: CharacterStream, diagnostics: Diagnostics | None = None
    ) -> None:
        self.stream = stream
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips all whitespace and `//` comments in the stream."""
        while not self.stream.end_of_file():
            if self.peek() in " \t\r\n":
                self.advance()
            elif self.peek() == "/" and self.peek(1) == "/":
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest valid operator from the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        ch = self.peek()

        if ch in single_char_tokens:
            self.advance()
            return Token(single_char_tokens[ch], ch, None, line, col)

        pair = ch + self.peek(1)
        if pair in operator_tokens:
            self.advance()
            self.advance()
            return Token(operator_tokens[pair], pair, None, line, col)
        if ch in operator_tokens:
            self.advance()
            return Token(operator_tokens[ch], ch, None, line, col)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Characters that start no token are reported and skipped, so the
        returned token is always well-formed.
        """
        while True:
            self.skip_whitespace()

            if self.stream.end_of_file():
                return Token(EOF, "", None, self.stream.line, self.stream.column)

            ch = self.peek()
            line, col = self.stream.line, self.stream.column

            # 1. Identifier or keyword
            if _is_alpha(ch):
                ident = ""
                while _is_alnum(self.peek()):
                    ident += self.advance()
                return Token(keywords.get(ident, IDENTIFIER), ident, None, line, col)

            # 2. Number; a trailing '.' without digits is left for the DOT token
            if _is_digit(ch):
                num = ""
                while _is_digit(self.peek()):
                    num += self.advance()
                if self.peek() == "." and _is_digit(self.peek(1)):
                    num += self.advance()
                    while _is_digit(self.peek()):
                        num += self.advance()
                return Token(NUMBER, num, float(num), line, col)

            # 3. String
            if ch == '"':
                self.advance()
                val = ""
                while not self.stream.end_of_file() and self.peek() != '"':
                    val += self.advance()
                if self.stream.end_of_file():
                    self.diagnostics.error(line, "Unterminated string.")
                    continue
                self.advance()
                return Token(STRING, f'"{val}"', val, line, col)

            # 4. Operator or punctuation
            token = self.match_operator()
            if token:
                return token

            # 5. Unknown character
            self.advance()
            self.diagnostics.error(line, "Unexpected character.")

    def tokenize(self) -> list[Token]:
        """Scans the whole stream, returning every token up to and including EOF."""
        tokens: list[Token] = []
        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.type == EOF:
                return tokens


def scan(source: str, diagnostics: Diagnostics | None = None) -> list[Token]:
    """Tokenizes `source` in one call; lexical errors go to `diagnostics`."""
    return Lexer(CharacterStream(source), diagnostics).tokenize()


__all__ = ["CharacterStream", "Lexer", "Token", "scan", "token_hashmap"]
