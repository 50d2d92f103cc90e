"""
Front end configuration for Kestrel.

Author: xwest
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict

from .lexer.tokens import TokenType


class RecoveryMode(Enum):
    """What the parser does after a syntax error"""
    ABORT = auto()          # Stop at the first error
    SKIP_TOKEN = auto()     # Skip one token and carry on
    SYNCHRONIZE = auto()    # Skip to the next statement boundary


def default_binop_precedence() -> Dict[TokenType, int]:
    """Precedence of the binary operators (higher binds tighter)."""
    return {
        TokenType.LESS_THAN: 10,
        TokenType.PLUS: 20,
        TokenType.MINUS: 20,
        TokenType.MULTIPLY: 40,
    }


@dataclass
class FrontendConfiguration:
    """Configuration parameters for lexing and parsing"""

    # Source naming
    filename: str = "<string>"

    # Error handling
    recovery_mode: RecoveryMode = RecoveryMode.SKIP_TOKEN
    raise_on_error: bool = True
    max_errors: int = 100

    # Grammar
    anonymous_function_name: str = "__anon_expr"
    binop_precedence: Dict[TokenType, int] = field(default_factory=default_binop_precedence)

    def __post_init__(self):
        if self.max_errors < 1:
            raise ValueError("max_errors must be at least 1")
        for token_type, precedence in self.binop_precedence.items():
            if precedence <= 0:
                raise ValueError(
                    f"Precedence for {token_type.name} must be positive, got {precedence}"
                )
