"""
Error handling for the Kestrel lexer.

Provides error reporting with source location information and
IDE-friendly diagnostics. Lexer errors are always fatal: the lexer
stops at the first one.

Author: xwest
"""

from typing import Optional, List
from dataclasses import dataclass
from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """Base class for diagnostics (errors, warnings, info)."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning", "info", "hint"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        result = f"{severity_prefix}: {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class LexerError(Exception):
    """
    Exception raised when the lexer encounters a fatal error.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
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

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


# Longest literal quoted verbatim in a message
MAX_QUOTED_LEXEME = 32


def _shorten(lexeme: str) -> str:
    if len(lexeme) <= MAX_QUOTED_LEXEME:
        return lexeme
    return f"{lexeme[:MAX_QUOTED_LEXEME]}... ({len(lexeme)} characters)"


# Error codes for categorization
ERROR_CODES = {
    "L003": "Invalid numeric literal",
    "L007": "Number literal overflow",
}


def create_invalid_number_error(lexeme: str, location: SourceLocation, reason: str) -> LexerError:
    """Create an error for a numeric literal that cannot be converted."""
    return LexerError(
        message=f"Invalid numeric literal: '{_shorten(lexeme)}'",
        location=location,
        code="L003",
        help_text=reason,
        suggestions=["Check the numeric format"]
    )


def create_number_overflow_error(lexeme: str, location: SourceLocation, limit: str) -> LexerError:
    """Create an error for a numeric literal outside the representable range."""
    return LexerError(
        message=f"Number literal overflow: '{_shorten(lexeme)}'",
        location=location,
        code="L007",
        help_text=f"The literal does not fit in {limit}.",
        suggestions=["Use a smaller literal"]
    )
