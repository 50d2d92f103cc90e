"""
Kestrel Front End Package

Lexer and parser for Kestrel, a small expression-oriented language.
Source text goes through the lexer into a token list and through the
parser into an AST of function definitions, extern declarations and
top-level expressions, ready for a code generator.

Architecture:
    kestrel/
    ├── lexer/           # Tokenization
    ├── parser/          # Syntax analysis and AST generation
    ├── config.py        # Front end configuration
    └── cli.py           # Command line driver

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__license__ = "MIT"

from .config import FrontendConfiguration, RecoveryMode
from .lexer import Lexer, LexerError, tokenize
from .parser import Parser, ParseError, parse_string, parse_file

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "FrontendConfiguration",
    "RecoveryMode",

    # Functions
    "tokenize",
    "parse_string",
    "parse_file",

    # Errors
    "LexerError",
    "ParseError",

    # Version info
    "__version__",
    "__author__",
    "__license__",
]
