"""
Kestrel Lexer - turns source text into a token list

The whole scanner is one composite regex with named groups. Order of the
groups is the priority order: the first alternative that matches at a
position wins, so multi-character operators have to come before their
single-character prefixes.

Comments run from '#' to the end of the line and are thrown away
together with whitespace.

xwest
"""

import logging
import math
import re
from typing import List, Optional

from .tokens import (
    Token, TokenType, SourceLocation, KEYWORDS, OPERATORS, PUNCTUATION,
    INTEGER_MAX, INTEGER_MAX_DIGITS
)
from .errors import (
    LexerError, create_invalid_number_error, create_number_overflow_error
)


# Token categories, highest priority first
_TOKEN_PATTERN = re.compile(
    r"(?P<COMMENT>\#[^\n]*)|"
    r"(?P<WHITESPACE>\s+)|"
    r"(?P<IDENTIFIER>[^\W\d]\w*)|"
    r"(?P<SEPARATOR>[;,])|"
    r"(?P<LOGICAL>&&|\|\|)|"
    r"(?P<BRACKET>[(){}])|"
    r"(?P<FLOAT>[0-9]+\.[0-9]+)|"
    r"(?P<INTEGER>[0-9]+)|"
    r"(?P<RELATIONAL><=|==|>=|!=|[=<>])|"
    r"(?P<OPERATOR>\S)"
)

_SKIPPED = frozenset({"COMMENT", "WHITESPACE"})


class Lexer:
    """
    Kestrel lexical analyzer.

    Converts source code text into a list of tokens terminated by an EOF
    token. A malformed numeric literal raises LexerError and stops the
    scan; every other character sequence produces tokens.
    """

    def __init__(self, source: str, filename: str = "<unknown>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source file for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []
        self._logger = logging.getLogger("Lexer")

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.

        Returns:
            List of tokens including the trailing EOF token

        Raises:
            LexerError: If a numeric literal cannot be converted
        """
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens = []

        while self.pos < len(self.source):
            # Never None: the WHITESPACE and OPERATOR alternatives cover every character
            match = _TOKEN_PATTERN.match(self.source, self.pos)

            token = self._make_token(match.lastgroup, match.group())
            if token is not None:
                self.tokens.append(token)

            self._advance_over(match.group())

        self.tokens.append(Token(TokenType.EOF, "", None, self._location()))

        self._logger.debug("Tokenized %s: %d tokens", self.filename, len(self.tokens))
        return self.tokens

    def _make_token(self, category: str, lexeme: str) -> Optional[Token]:
        """Build the token for one regex match, or None for skipped text."""
        if category in _SKIPPED:
            return None

        location = self._location()

        if category == "IDENTIFIER":
            token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)
            if token_type == TokenType.IDENTIFIER:
                value = lexeme
            elif token_type in (TokenType.TRUE, TokenType.FALSE):
                value = token_type == TokenType.TRUE
            else:
                value = None
            return Token(token_type, lexeme, value, location)

        if category == "INTEGER":
            return self._tokenize_integer(lexeme, location)

        if category == "FLOAT":
            return self._tokenize_float(lexeme, location)

        if category in ("SEPARATOR", "BRACKET"):
            return Token(PUNCTUATION[lexeme], lexeme, None, location)

        # LOGICAL, RELATIONAL and single-character operators
        token_type = OPERATORS.get(lexeme, TokenType.OPERATOR)
        return Token(token_type, lexeme, None, location)

    def _tokenize_integer(self, lexeme: str, location: SourceLocation) -> Token:
        """Tokenize a decimal integer literal."""
        # Reject by length first; int() refuses very long digit strings
        digits = lexeme.lstrip("0") or "0"
        if len(digits) > INTEGER_MAX_DIGITS:
            raise create_number_overflow_error(lexeme, location, "a signed 64-bit integer")

        try:
            value = int(digits, 10)
        except ValueError:
            raise create_invalid_number_error(lexeme, location, "Cannot parse integer in base 10")

        if value > INTEGER_MAX:
            raise create_number_overflow_error(lexeme, location, "a signed 64-bit integer")

        return Token(TokenType.INTEGER, lexeme, value, location)

    def _tokenize_float(self, lexeme: str, location: SourceLocation) -> Token:
        """Tokenize a floating-point literal."""
        try:
            value = float(lexeme)
        except ValueError:
            raise create_invalid_number_error(lexeme, location, "Cannot parse floating-point number")

        if math.isinf(value):
            raise create_number_overflow_error(lexeme, location, "a 64-bit float")

        return Token(TokenType.FLOAT, lexeme, value, location)

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _advance_over(self, text: str):
        """Advance position past text, updating line/column."""
        newlines = text.count("\n")
        if newlines:
            self.line += newlines
            self.column = len(text) - text.rfind("\n")
        else:
            self.column += len(text)
        self.pos += len(text)


def tokenize(source: str, filename: str = "<string>") -> List[Token]:
    """
    Tokenize a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        List of tokens, the last one being EOF

    Raises:
        LexerError: If a numeric literal is malformed
    """
    return Lexer(source, filename).tokenize()


# Name used by the rest of the toolchain
tokenize_string = tokenize


def tokenize_file(filepath: str) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Args:
        filepath: Path to source file

    Returns:
        List of tokens

    Raises:
        LexerError: If lexing fails
        IOError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return tokenize(source, filepath)
