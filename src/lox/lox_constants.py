"""
Token kinds and lexeme tables for the Lox language.

Token kinds are plain uppercase strings, shared by the lexer, the parser and
the tests. Three lookup tables drive the lexer:

    single_char_tokens: one-character punctuation that never extends.
    operator_tokens:    one- or two-character operators (`!`, `!=`, `=`, `==`, ...).
    keywords:           reserved words, matched after an identifier is read.

`token_hashmap` merges all three so callers can map any fixed lexeme to its kind.
"""

# Single-character tokens
LEFT_PAREN = "LEFT_PAREN"
RIGHT_PAREN = "RIGHT_PAREN"
LEFT_BRACE = "LEFT_BRACE"
RIGHT_BRACE = "RIGHT_BRACE"
COMMA = "COMMA"
DOT = "DOT"
MINUS = "MINUS"
PLUS = "PLUS"
SEMICOLON = "SEMICOLON"
SLASH = "SLASH"
STAR = "STAR"

# One or two character tokens
BANG = "BANG"
BANG_EQUAL = "BANG_EQUAL"
EQUAL = "EQUAL"
EQUAL_EQUAL = "EQUAL_EQUAL"
GREATER = "GREATER"
GREATER_EQUAL = "GREATER_EQUAL"
LESS = "LESS"
LESS_EQUAL = "LESS_EQUAL"

# Literals
IDENTIFIER = "IDENTIFIER"
STRING = "STRING"
NUMBER = "NUMBER"

# Keywords
AND = "AND"
CLASS = "CLASS"
ELSE = "ELSE"
FALSE = "FALSE"
FUN = "FUN"
FOR = "FOR"
IF = "IF"
NIL = "NIL"
OR = "OR"
PRINT = "PRINT"
RETURN = "RETURN"
SUPER = "SUPER"
THIS = "THIS"
TRUE = "TRUE"
VAR = "VAR"
WHILE = "WHILE"

EOF = "EOF"

single_char_tokens: dict[str, str] = {
    "(": LEFT_PAREN,
    ")": RIGHT_PAREN,
    "{": LEFT_BRACE,
    "}": RIGHT_BRACE,
    ",": COMMA,
    ".": DOT,
    "-": MINUS,
    "+": PLUS,
    ";": SEMICOLON,
    "/": SLASH,
    "*": STAR,
}

operator_tokens: dict[str, str] = {
    "!": BANG,
    "!=": BANG_EQUAL,
    "=": EQUAL,
    "==": EQUAL_EQUAL,
    ">": GREATER,
    ">=": GREATER_EQUAL,
    "<": LESS,
    "<=": LESS_EQUAL,
}

keywords: dict[str, str] = {
    "and": AND,
    "class": CLASS,
    "else": ELSE,
    "false": FALSE,
    "for": FOR,
    "fun": FUN,
    "if": IF,
    "nil": NIL,
    "or": OR,
    "print": PRINT,
    "return": RETURN,
    "super": SUPER,
    "this": THIS,
    "true": TRUE,
    "var": VAR,
    "while": WHILE,
}

token_hashmap: dict[str, str] = {**single_char_tokens, **operator_tokens, **keywords}

# Keywords that open a new statement; error recovery stops in front of them.
statement_keywords: frozenset[str] = frozenset(
    {CLASS, FUN, VAR, FOR, IF, WHILE, PRINT, RETURN}
)

__all__ = [
    "keywords",
    "operator_tokens",
    "single_char_tokens",
    "statement_keywords",
    "token_hashmap",
]
