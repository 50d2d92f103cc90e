"""
Error handling for the Kestrel parser.

Provides error reporting with source location information, error
recovery strategies and diagnostics for syntax errors.

Author: xwest
"""

from typing import Optional, List, Union

from ..lexer.tokens import Token, TokenType, SourceLocation
from ..lexer.errors import Diagnostic


class ParseError(Exception):
    """
    Exception raised when the parser cannot build a construct.

    Contains detailed diagnostic information for error reporting. The
    construct being parsed yields no AST node.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


class SyntaxErrorRecovery:
    """
    Utilities for error recovery in the parser.

    Provides strategies to continue parsing after a syntax error so that
    several errors can be collected in one pass.
    """

    # Token types that start or end a top-level statement
    STATEMENT_BOUNDARIES = {
        TokenType.SEMICOLON,
        TokenType.FN,
        TokenType.EXTERN,
        TokenType.EOF,
    }

    @staticmethod
    def suggest_missing_token(expected: TokenType) -> List[str]:
        """Suggest what token might be missing."""
        token_suggestions = {
            TokenType.RIGHT_PAREN: ["Add a closing parenthesis ')'"],
            TokenType.LEFT_PAREN: ["Add an opening parenthesis '(' before the parameter list"],
            TokenType.IDENTIFIER: ["Add a name"],
        }

        return list(token_suggestions.get(expected, []))

    @staticmethod
    def synchronize_to_statement_boundary(tokens: List[Token], current_pos: int) -> int:
        """
        Skip forward to the next statement boundary.

        A ';' is consumed; 'fn', 'extern' and EOF are left in place so
        the next parse step starts on them.

        Returns the position to resume parsing from.
        """
        while current_pos < len(tokens):
            token_type = tokens[current_pos].type

            if token_type == TokenType.SEMICOLON:
                return current_pos + 1

            if token_type in SyntaxErrorRecovery.STATEMENT_BOUNDARIES:
                return current_pos

            current_pos += 1

        return current_pos


# Parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Expected token not found",
    "P004": "Unclosed delimiter",
    "P005": "Invalid expression",
    "P008": "Malformed function signature",
    "P010": "Unexpected end of input",
    "P013": "Malformed argument list",
}


# Helper functions for creating common parser errors

def _describe_expected(expected: Union[TokenType, str]) -> str:
    return expected.name if isinstance(expected, TokenType) else expected


def create_unexpected_token_error(expected: Union[TokenType, str], found: Token,
                                  code: str = "P001") -> ParseError:
    """Create an error for an unexpected token."""
    if found.type == TokenType.EOF:
        return create_unexpected_eof_error(_describe_expected(expected), found)

    expected_str = _describe_expected(expected)
    found_str = found.describe()

    suggestions = SyntaxErrorRecovery.suggest_missing_token(expected) if isinstance(expected, TokenType) else []

    return ParseError(
        message=f"Expected {expected_str}, found {found_str}",
        location=found.location,
        token=found,
        code=code,
        help_text=f"The parser expected to see {expected_str} at this position, but found {found_str} instead.",
        suggestions=suggestions
    )


def create_unclosed_delimiter_error(delimiter: str, open_location: SourceLocation,
                                    found: Token) -> ParseError:
    """Create an error for an unclosed delimiter."""
    closing_delimiters = {
        "(": ")",
        "{": "}",
    }

    closing = closing_delimiters.get(delimiter, delimiter)

    return ParseError(
        message=f"Expected '{closing}' to close '{delimiter}', found {found.describe()}",
        location=found.location,
        token=found,
        code="P004",
        help_text=f"The opening '{delimiter}' at {open_location} was never closed.",
        suggestions=[f"Add a closing '{closing}'"]
    )


def create_invalid_expression_error(reason: str, found: Token) -> ParseError:
    """Create an error for a token that cannot start an expression."""
    if found.type == TokenType.EOF:
        return create_unexpected_eof_error("expression", found)

    return ParseError(
        message=f"Invalid expression: {reason}",
        location=found.location,
        token=found,
        code="P005",
        help_text=reason,
        suggestions=["Check the expression syntax", "Ensure all operators have operands"]
    )


def create_argument_list_error(found: Token) -> ParseError:
    """Create an error for a malformed call argument list."""
    if found.type == TokenType.EOF:
        return create_unexpected_eof_error("')' or ',' in argument list", found)

    return ParseError(
        message=f"Expected ')' or ',' in argument list, found {found.describe()}",
        location=found.location,
        token=found,
        code="P013",
        help_text="Call arguments are separated by ',' and the list is closed with ')'.",
        suggestions=["Add a ',' between arguments", "Add a closing parenthesis ')'"]
    )


def create_signature_error(expected: str, found: Token) -> ParseError:
    """Create an error for a malformed function prototype."""
    if found.type == TokenType.EOF:
        return create_unexpected_eof_error(f"{expected} in prototype", found)

    return ParseError(
        message=f"Expected {expected} in prototype, found {found.describe()}",
        location=found.location,
        token=found,
        code="P008",
        help_text="A prototype is a name followed by '(', parameter names without separators, and ')'.",
        suggestions=["Write the prototype as name(a b c)"]
    )


def create_unexpected_eof_error(expected: str, found: Token) -> ParseError:
    """Create an error for unexpected end of input."""
    return ParseError(
        message=f"Unexpected end of input, expected {expected}",
        location=found.location,
        token=found,
        code="P010",
        help_text=f"The parser reached the end of the input while expecting {expected}.",
        suggestions=[f"Add the missing {expected}", "Check for incomplete statements"]
    )
