"""
Abstract Syntax Tree node definitions for Kestrel.

Defines the AST node types produced by the parser: four expression
variants, function prototypes, function definitions and the program that
holds them. Every node owns its children exclusively; the tree is built
bottom-up and never contains cycles or parent pointers.

Nodes compare structurally. The source span is carried for diagnostics
but does not take part in equality, so two parses of differently laid
out source compare equal when they describe the same tree.

Author: xwest
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Any, Union
from dataclasses import dataclass, field
from enum import Enum

from ..lexer.tokens import SourceLocation, Token


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    PROGRAM = "Program"

    FUNCTION = "FunctionAST"
    PROTOTYPE = "PrototypeAST"

    NUMBER_EXPR = "NumberExpr"
    VARIABLE_EXPR = "VariableExpr"
    BINARY_EXPR = "BinaryExpr"
    CALL_EXPR = "CallExpr"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a span of source code (start and end locations)."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename == self.end.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start}-{self.end}"


class ASTVisitor:
    """
    Base visitor for traversing AST nodes.

    visit() dispatches to a method named visit_<ClassName> when the
    subclass defines one, and to generic_visit() otherwise.
    """

    def visit(self, node: 'ASTNode') -> Any:
        method = getattr(self, f"visit_{node.__class__.__name__}", self.generic_visit)
        return method(node)

    def generic_visit(self, node: 'ASTNode') -> List[Any]:
        """Visit all children of a node and return their results."""
        return [child.accept(self) for child in node.children()]


class ASTNode(ABC):
    """Base class for all AST nodes."""

    node_type: ASTNodeType

    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all child nodes."""

    def __str__(self) -> str:
        span = getattr(self, "span", None)
        if span is None:
            return self.node_type.value
        return f"{self.node_type.value}@{span}"


# ============================================================================
# Expressions
# ============================================================================

class ExprAST(ASTNode):
    """Base class for expressions."""


@dataclass
class NumberExpr(ExprAST):
    """Numeric literal. Integer literals are stored as floats."""
    value: float
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    node_type = ASTNodeType.NUMBER_EXPR

    def children(self) -> List[ASTNode]:
        return []


@dataclass
class VariableExpr(ExprAST):
    """Reference to a named variable."""
    name: str
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    node_type = ASTNodeType.VARIABLE_EXPR

    def children(self) -> List[ASTNode]:
        return []


@dataclass
class BinaryExpr(ExprAST):
    """Binary operation expression."""
    operator: Token
    lhs: ExprAST
    rhs: ExprAST
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    node_type = ASTNodeType.BINARY_EXPR

    @property
    def op(self) -> str:
        """The operator's source text, e.g. '+'."""
        return self.operator.lexeme

    def children(self) -> List[ASTNode]:
        return [self.lhs, self.rhs]


@dataclass
class CallExpr(ExprAST):
    """Function call expression."""
    callee: str
    args: List[ExprAST]
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    node_type = ASTNodeType.CALL_EXPR

    def children(self) -> List[ASTNode]:
        return list(self.args)


# ============================================================================
# Functions
# ============================================================================

@dataclass
class PrototypeAST(ASTNode):
    """
    Function signature: name and parameter names.

    Parameter names are not checked for uniqueness.
    """
    name: str
    args: List[str]
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    node_type = ASTNodeType.PROTOTYPE

    def children(self) -> List[ASTNode]:
        return []


@dataclass
class FunctionAST(ASTNode):
    """Function definition: a prototype and a single body expression."""
    prototype: PrototypeAST
    body: ExprAST
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    node_type = ASTNodeType.FUNCTION

    @property
    def name(self) -> str:
        return self.prototype.name

    def children(self) -> List[ASTNode]:
        return [self.prototype, self.body]


Item = Union[FunctionAST, PrototypeAST]


@dataclass
class Program(ASTNode):
    """Root AST node: the top-level items in source order."""
    items: List[Item]
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    node_type = ASTNodeType.PROGRAM

    def children(self) -> List[ASTNode]:
        return list(self.items)

    @property
    def functions(self) -> List[FunctionAST]:
        return [item for item in self.items if isinstance(item, FunctionAST)]

    @property
    def externs(self) -> List[PrototypeAST]:
        return [item for item in self.items if isinstance(item, PrototypeAST)]
