"""
Visitors that render Kestrel ASTs as text.

ASTPrinter produces an indented tree dump for debugging and snapshot
tests. InfixPrinter produces source text with every binary node wrapped
in parentheses; parsing that text gives back a structurally equal tree.
"""

import math
from decimal import Decimal
from typing import List, Optional

from .ast_nodes import (
    ASTVisitor, ASTNode, NumberExpr, VariableExpr, BinaryExpr, CallExpr,
    PrototypeAST, FunctionAST, Program
)


def format_number(value: float) -> str:
    """
    Format a number as a Kestrel float literal.

    Always positional (no exponent) and always with a fractional part,
    so the text lexes back to a single FLOAT token of the same value.
    """
    if not math.isfinite(value):
        raise ValueError(f"Cannot write {value!r} as a Kestrel literal")

    text = format(Decimal(repr(value)), "f")
    if "." not in text:
        text += ".0"
    return text


class ASTPrinter(ASTVisitor):
    """Visitor that renders the AST structure as indented lines."""

    def __init__(self, indent: str = "  ") -> None:
        self.indent = indent
        self.indent_level = 0
        self.lines: List[str] = []

    def _emit(self, text: str) -> None:
        self.lines.append(f"{self.indent * self.indent_level}{text}")

    def _emit_with_children(self, text: str, node: ASTNode) -> None:
        self._emit(text)
        self.indent_level += 1
        self.generic_visit(node)
        self.indent_level -= 1

    def render(self, node: ASTNode) -> str:
        """Return the dump of node as a single string."""
        self.lines = []
        self.indent_level = 0
        node.accept(self)
        return "\n".join(self.lines)

    def visit_Program(self, node: Program) -> None:  # pylint: disable=invalid-name
        self._emit_with_children("Program", node)

    def visit_FunctionAST(self, node: FunctionAST) -> None:  # pylint: disable=invalid-name
        self._emit_with_children(f"FunctionAST '{node.name}'", node)

    def visit_PrototypeAST(self, node: PrototypeAST) -> None:  # pylint: disable=invalid-name
        self._emit(f"PrototypeAST '{node.name}' ({' '.join(node.args)})")

    def visit_BinaryExpr(self, node: BinaryExpr) -> None:  # pylint: disable=invalid-name
        self._emit_with_children(f"BinaryExpr '{node.op}'", node)

    def visit_CallExpr(self, node: CallExpr) -> None:  # pylint: disable=invalid-name
        self._emit_with_children(f"CallExpr '{node.callee}' [{len(node.args)} args]", node)

    def visit_VariableExpr(self, node: VariableExpr) -> None:  # pylint: disable=invalid-name
        self._emit(f"VariableExpr '{node.name}'")

    def visit_NumberExpr(self, node: NumberExpr) -> None:  # pylint: disable=invalid-name
        self._emit(f"NumberExpr {node.value!r}")


class InfixPrinter(ASTVisitor):
    """
    Visitor that renders the AST back to Kestrel source.

    Functions named anonymous_function_name with no parameters are written
    as bare top-level expressions.
    """

    def __init__(self, anonymous_function_name: Optional[str] = "__anon_expr") -> None:
        self.anonymous_function_name = anonymous_function_name

    def visit_Program(self, node: Program) -> str:  # pylint: disable=invalid-name
        parts = []
        for item in node.items:
            text = item.accept(self)
            if isinstance(item, PrototypeAST):
                text = f"extern {text}"
            # ';' keeps a following '(' from being read as a call of the previous item
            parts.append(f"{text};\n")
        return "".join(parts)

    def visit_FunctionAST(self, node: FunctionAST) -> str:  # pylint: disable=invalid-name
        prototype = node.prototype
        if prototype.name == self.anonymous_function_name and not prototype.args:
            return node.body.accept(self)
        return f"fn {prototype.accept(self)} {node.body.accept(self)}"

    def visit_PrototypeAST(self, node: PrototypeAST) -> str:  # pylint: disable=invalid-name
        return f"{node.name}({' '.join(node.args)})"

    def visit_BinaryExpr(self, node: BinaryExpr) -> str:  # pylint: disable=invalid-name
        return f"({node.lhs.accept(self)} {node.op} {node.rhs.accept(self)})"

    def visit_CallExpr(self, node: CallExpr) -> str:  # pylint: disable=invalid-name
        args = ", ".join(arg.accept(self) for arg in node.args)
        return f"{node.callee}({args})"

    def visit_VariableExpr(self, node: VariableExpr) -> str:  # pylint: disable=invalid-name
        return node.name

    def visit_NumberExpr(self, node: NumberExpr) -> str:  # pylint: disable=invalid-name
        return format_number(node.value)


def dump_ast(node: ASTNode) -> str:
    """Indented tree dump of node."""
    return ASTPrinter().render(node)


def to_infix(node: ASTNode, anonymous_function_name: Optional[str] = "__anon_expr") -> str:
    """Fully parenthesized source text for node."""
    return node.accept(InfixPrinter(anonymous_function_name))
