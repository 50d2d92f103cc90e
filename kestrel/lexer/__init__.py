"""
Kestrel Lexer Package

Implements the lexical analyzer (tokenizer) for the Kestrel language.

Key Features:
- Single composite regex scanner with a fixed category priority
- '#' line comments
- Eager conversion of integer and float literals
- Explicit EOF sentinel token
- Source location tracking for diagnostics

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, tokenize, tokenize_string, tokenize_file
from .errors import LexerError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "LexerError",
    "tokenize",
    "tokenize_string",
    "tokenize_file",
]
