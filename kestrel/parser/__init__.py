"""
Kestrel Parser Package

Implements a recursive descent parser with operator-precedence climbing
for the Kestrel language.

Key Features:
- Precedence climbing for binary operators (left-associative)
- Function definitions, extern declarations and top-level expressions
- AST nodes with source spans and structural equality
- Configurable error recovery
- Tree and infix printers for debugging and snapshot tests

Author: xwest
"""

from .ast_nodes import (
    ASTNode, ASTNodeType, ASTVisitor, SourceSpan,
    ExprAST, NumberExpr, VariableExpr, BinaryExpr, CallExpr,
    PrototypeAST, FunctionAST, Program,
)
from .parser import Parser, parse_string, parse_file
from .errors import ParseError
from .printer import ASTPrinter, InfixPrinter, dump_ast, to_infix

__all__ = [
    # Core parser
    "Parser",
    "parse_string",
    "parse_file",

    # AST nodes
    "ASTNode", "ASTNodeType", "ASTVisitor", "SourceSpan",
    "ExprAST", "NumberExpr", "VariableExpr", "BinaryExpr", "CallExpr",
    "PrototypeAST", "FunctionAST", "Program",

    # Printers
    "ASTPrinter", "InfixPrinter", "dump_ast", "to_infix",

    # Error handling
    "ParseError",
]
