"""
Token definitions for the Kestrel lexer.

This module defines every token type the Kestrel lexer can produce:
- Keywords (a small fixed set)
- Identifiers
- Integer and floating-point literals
- Fixed punctuation and operator markers
- A generic operator token for any other single character
- The EOF sentinel

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Any


class TokenType(Enum):
    """
    Enumeration of all token types in Kestrel.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = auto()                    # End of input (sentinel)

    # ========================================================================
    # Literals
    # ========================================================================
    INTEGER = auto()                # 42
    FLOAT = auto()                  # 3.14

    # ========================================================================
    # Identifiers and Keywords
    # ========================================================================
    IDENTIFIER = auto()             # foo, _tmp1

    FN = auto()                     # fn (function definition)
    RETURN = auto()                 # return
    EXTERN = auto()                 # extern (declaration only)
    TRUE = auto()                   # true
    FALSE = auto()                  # false
    NUMBER = auto()                 # number (type name)
    PRINT = auto()                  # print
    START = auto()                  # start

    # ========================================================================
    # Operators
    # ========================================================================

    # Arithmetic
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /

    # Logical
    LOGICAL_AND = auto()            # &&
    LOGICAL_OR = auto()             # ||

    # Assignment and comparison
    ASSIGN = auto()                 # =
    EQUAL = auto()                  # ==
    NOT_EQUAL = auto()              # !=
    LESS_THAN = auto()              # <
    GREATER_THAN = auto()           # >
    LESS_EQUAL = auto()             # <=
    GREATER_EQUAL = auto()          # >=

    # Misc
    DOT = auto()                    # .
    QUESTION = auto()               # ?
    COLON = auto()                  # :
    TILDE = auto()                  # ~

    # Any other single non-space character
    OPERATOR = auto()

    # ========================================================================
    # Punctuation and Delimiters
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }

    SEMICOLON = auto()              # ;
    COMMA = auto()                  # ,


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and debugging information.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of input

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the Kestrel language.

    Contains the token type, lexeme (raw text), semantic value and source
    location. Two tokens are equal when type, lexeme and value match; the
    location does not take part in comparisons.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # Parsed/semantic value (e.g., int for INTEGER)
    location: SourceLocation = field(compare=False)

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    def describe(self) -> str:
        """Human-readable description used in diagnostics."""
        if self.type == TokenType.EOF:
            return "end of input"
        return f"{self.type.name} '{self.lexeme}'"

    @property
    def is_literal(self) -> bool:
        """Check if this token is a numeric literal."""
        return self.type in (TokenType.INTEGER, TokenType.FLOAT)

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a keyword."""
        return self.type in KEYWORD_TYPES

    @property
    def is_operator(self) -> bool:
        """Check if this token is an operator."""
        return self.type in OPERATOR_TYPES

    @property
    def is_identifier(self) -> bool:
        """Check if this token is an identifier."""
        return self.type == TokenType.IDENTIFIER


# Lookup tables used by the lexer for keyword/operator recognition

KEYWORDS = {
    "fn": TokenType.FN,
    "return": TokenType.RETURN,
    "extern": TokenType.EXTERN,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "number": TokenType.NUMBER,
    "print": TokenType.PRINT,
    "start": TokenType.START,
}

OPERATORS = {
    # Arithmetic
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,

    # Logical
    "&&": TokenType.LOGICAL_AND,
    "||": TokenType.LOGICAL_OR,

    # Assignment and comparison
    "=": TokenType.ASSIGN,
    "==": TokenType.EQUAL,
    "!=": TokenType.NOT_EQUAL,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    "<=": TokenType.LESS_EQUAL,
    ">=": TokenType.GREATER_EQUAL,

    # Misc
    ".": TokenType.DOT,
    "?": TokenType.QUESTION,
    ":": TokenType.COLON,
    "~": TokenType.TILDE,
}

PUNCTUATION = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
}

KEYWORD_TYPES = frozenset(KEYWORDS.values())
OPERATOR_TYPES = frozenset(OPERATORS.values()) | {TokenType.OPERATOR}

# Integer literals are signed 64-bit values
INTEGER_MIN = -(2 ** 63)
INTEGER_MAX = 2 ** 63 - 1
INTEGER_MAX_DIGITS = len(str(INTEGER_MAX))
