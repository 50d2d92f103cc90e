"""
Test suite for the Kestrel parser.

Tests cover:
- Operator precedence and associativity
- Calls, variables, literals and grouping
- Prototypes, definitions, externs and top-level expressions
- Error reporting for malformed input
- Error recovery policies

Author: xwest
"""

import os
import sys
import tempfile
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from kestrel.config import FrontendConfiguration, RecoveryMode, default_binop_precedence
from kestrel.lexer import Token, TokenType, SourceLocation, tokenize
from kestrel.lexer.tokens import OPERATORS
from kestrel.parser import (
    Parser, ParseError, parse_string, parse_file,
    NumberExpr, VariableExpr, BinaryExpr, CallExpr, PrototypeAST, FunctionAST, Program
)

LOC = SourceLocation("<test>", 1, 1, 0)


def num(value):
    return NumberExpr(float(value))


def var(name):
    return VariableExpr(name)


def binop(op, lhs, rhs):
    return BinaryExpr(Token(OPERATORS[op], op, None, LOC), lhs, rhs)


class ParserTestCase(unittest.TestCase):
    """Shared helpers."""

    def _parser(self, source: str, **config) -> Parser:
        return Parser(tokenize(source), FrontendConfiguration(**config))

    def _parse_expr(self, source: str):
        return self._parser(source).parse_expression()


class TestExpressions(ParserTestCase):
    """Expression parsing."""

    def test_multiplication_binds_tighter_on_right(self):
        """1 + 2 * 3 groups the product."""
        self.assertEqual(
            self._parse_expr("1 + 2 * 3"),
            binop("+", num(1), binop("*", num(2), num(3)))
        )

    def test_multiplication_binds_tighter_on_left(self):
        """1 * 2 + 3 groups the product."""
        self.assertEqual(
            self._parse_expr("1 * 2 + 3"),
            binop("+", binop("*", num(1), num(2)), num(3))
        )

    def test_subtraction_is_left_associative(self):
        """1 - 2 - 3 is (1 - 2) - 3."""
        self.assertEqual(
            self._parse_expr("1 - 2 - 3"),
            binop("-", binop("-", num(1), num(2)), num(3))
        )

    def test_multiplication_is_left_associative(self):
        self.assertEqual(
            self._parse_expr("2 * 3 * 4"),
            binop("*", binop("*", num(2), num(3)), num(4))
        )

    def test_comparison_has_lowest_precedence(self):
        """'<' binds looser than arithmetic."""
        self.assertEqual(
            self._parse_expr("a + b < c * d"),
            binop("<", binop("+", var("a"), var("b")), binop("*", var("c"), var("d")))
        )

    def test_mixed_levels(self):
        """A higher operator in the middle folds before the lower one continues."""
        self.assertEqual(
            self._parse_expr("1 + 2 * 3 - 4"),
            binop("-", binop("+", num(1), binop("*", num(2), num(3))), num(4))
        )
        self.assertEqual(
            self._parse_expr("1 < 2 + 3 * 4"),
            binop("<", num(1), binop("+", num(2), binop("*", num(3), num(4))))
        )

    def test_parentheses_override_precedence(self):
        self.assertEqual(
            self._parse_expr("(1 + 2) * 3"),
            binop("*", binop("+", num(1), num(2)), num(3))
        )
        self.assertEqual(self._parse_expr("((x))"), var("x"))

    def test_numbers_are_floats(self):
        """Integer and float literals both become float leaves."""
        integer = self._parse_expr("4")
        self.assertEqual(integer, num(4))
        self.assertIsInstance(integer.value, float)

        self.assertEqual(self._parse_expr("2.5"), NumberExpr(2.5))

    def test_variable(self):
        self.assertEqual(self._parse_expr("x"), var("x"))

    def test_call(self):
        """foo(1, 2) is a call with two numeric arguments in order."""
        expr = self._parse_expr("foo(1, 2)")
        self.assertIsInstance(expr, CallExpr)
        self.assertEqual(expr.callee, "foo")
        self.assertEqual(expr.args, [num(1), num(2)])

    def test_call_without_arguments(self):
        self.assertEqual(self._parse_expr("foo()"), CallExpr("foo", []))

    def test_nested_calls(self):
        self.assertEqual(
            self._parse_expr("f(g(x), y + 1)"),
            CallExpr("f", [CallExpr("g", [var("x")]), binop("+", var("y"), num(1))])
        )

    def test_call_in_binary_expression(self):
        self.assertEqual(
            self._parse_expr("f(1) * 2"),
            binop("*", CallExpr("f", [num(1)]), num(2))
        )

    def test_expression_stops_at_non_operator(self):
        """Tokens without a precedence end the expression unconsumed."""
        parser = self._parser("1 / 2")
        self.assertEqual(parser.parse_expression(), num(1))
        self.assertEqual(parser.current_token.type, TokenType.DIVIDE)

    def test_binary_operator_structure(self):
        expr = self._parse_expr("a + b")
        self.assertIsInstance(expr, BinaryExpr)
        self.assertEqual(expr.op, "+")
        self.assertEqual(expr.operator.type, TokenType.PLUS)
        self.assertEqual(expr.children(), [var("a"), var("b")])

    def test_equality_ignores_layout(self):
        self.assertEqual(self._parse_expr("1+2"), self._parse_expr("1 +\n   2"))

    def test_spans(self):
        expr = self._parse_expr("a +\n  b")
        self.assertEqual(expr.span.start.line, 1)
        self.assertEqual(expr.span.end.line, 2)
        self.assertEqual(expr.span.end.column, 3)


class TestPrecedenceEngine(ParserTestCase):
    """Direct use of the precedence climbing operations."""

    def test_get_token_precedence(self):
        expectations = {"+": 20, "-": 20, "*": 40, "<": 10, ")": -1, "/": -1, "x": -1, "": -1}
        for source, precedence in expectations.items():
            with self.subTest(source=source):
                self.assertEqual(self._parser(source).get_token_precedence(), precedence)

    def test_bin_op_rhs_folds_operators(self):
        parser = self._parser("+ 2 * 3")
        self.assertEqual(
            parser.parse_bin_op_rhs(0, num(1)),
            binop("+", num(1), binop("*", num(2), num(3)))
        )

    def test_bin_op_rhs_leaves_lower_operators(self):
        """An operator below the minimum precedence is left for the caller."""
        parser = self._parser("+ 2")
        self.assertEqual(parser.parse_bin_op_rhs(30, num(1)), num(1))
        self.assertEqual(parser.current_token.type, TokenType.PLUS)

    def test_bin_op_rhs_with_hand_built_lhs(self):
        """A left operand without a span takes its start from the operator."""
        parser = self._parser("+ 2")
        expr = parser.parse_bin_op_rhs(0, NumberExpr(1.0))

        self.assertEqual(expr, binop("+", num(1), num(2)))
        self.assertEqual(expr.span.start.column, 1)
        self.assertEqual(expr.span.end.column, 3)

    def test_parse_identifier_expr_variable(self):
        """Without '(' the identifier is a variable and nothing is consumed."""
        parser = self._parser("+ 1")
        self.assertEqual(parser.parse_identifier_expr("x"), var("x"))
        self.assertEqual(parser.current_token.type, TokenType.PLUS)

    def test_parse_identifier_expr_call(self):
        parser = self._parser("(1)")
        self.assertEqual(parser.parse_identifier_expr("f"), CallExpr("f", [num(1)]))
        self.assertEqual(parser.current_token.type, TokenType.EOF)

    def test_custom_precedence_table(self):
        """Extra operators can be installed through the configuration."""
        table = default_binop_precedence()
        table[TokenType.DIVIDE] = 40
        parser = self._parser("1 + 6 / 3", binop_precedence=table)
        self.assertEqual(
            parser.parse_expression(),
            binop("+", num(1), binop("/", num(6), num(3)))
        )


class TestExpressionErrors(ParserTestCase):
    """Malformed expressions."""

    def test_unterminated_argument_list(self):
        """foo(1, runs out of input and reports it."""
        with self.assertRaises(ParseError) as ctx:
            self._parse_expr("foo(1,")
        self.assertEqual(ctx.exception.code, "P010")
        self.assertIn("end of input", ctx.exception.message)

    def test_missing_separator_in_argument_list(self):
        with self.assertRaises(ParseError) as ctx:
            self._parse_expr("foo(1 2)")
        self.assertEqual(ctx.exception.code, "P013")
        self.assertIn("Expected ')' or ','", ctx.exception.message)
        self.assertEqual(ctx.exception.location.column, 7)
        self.assertEqual(ctx.exception.token.value, 2)

    def test_trailing_comma_in_argument_list(self):
        with self.assertRaises(ParseError) as ctx:
            self._parse_expr("foo(1,)")
        self.assertEqual(ctx.exception.code, "P005")

    def test_unclosed_parenthesis(self):
        """(1 reports the missing ')'."""
        with self.assertRaises(ParseError) as ctx:
            self._parse_expr("(1")
        self.assertEqual(ctx.exception.code, "P004")
        self.assertIn("')'", ctx.exception.message)
        self.assertIn("1:1", ctx.exception.diagnostic.help_text)

    def test_unclosed_parenthesis_before_other_token(self):
        with self.assertRaises(ParseError) as ctx:
            self._parse_expr("(1 2")
        self.assertEqual(ctx.exception.code, "P004")
        self.assertIn("INTEGER '2'", ctx.exception.message)

    def test_unexpected_token(self):
        for source in (")", "return 1", "{", "true", "+ 1"):
            with self.subTest(source=source):
                with self.assertRaises(ParseError) as ctx:
                    self._parse_expr(source)
                self.assertEqual(ctx.exception.code, "P005")
                self.assertIn("where an expression was expected", ctx.exception.message)

    def test_missing_right_operand(self):
        with self.assertRaises(ParseError) as ctx:
            self._parse_expr("1 +")
        self.assertEqual(ctx.exception.code, "P010")

    def test_empty_expression(self):
        with self.assertRaises(ParseError) as ctx:
            self._parse_expr("")
        self.assertIn("expected expression", ctx.exception.message)

    def test_token_list_without_eof(self):
        """Running off the end of a list with no EOF is a ParseError."""
        tokens = tokenize("foo(1,")[:-1]
        with self.assertRaises(ParseError):
            Parser(tokens).parse_expression()

        with self.assertRaises(ParseError):
            Parser([]).parse_primary()

    def test_error_str_has_location(self):
        with self.assertRaises(ParseError) as ctx:
            Parser(tokenize("foo(1 2)", "prog.ks")).parse_expression()
        rendered = str(ctx.exception)
        self.assertTrue(rendered.startswith("ERROR: "))
        self.assertIn("--> prog.ks:1:7", rendered)


class TestFunctions(ParserTestCase):
    """Prototypes, definitions, externs and top-level expressions."""

    def test_extern(self):
        """extern foo(a b) is a prototype with two parameters."""
        proto = self._parser("extern foo(a b)").parse_extern()
        self.assertIsInstance(proto, PrototypeAST)
        self.assertEqual(proto, PrototypeAST("foo", ["a", "b"]))
        self.assertEqual(proto.span.start.column, 1)

    def test_prototype_without_parameters(self):
        self.assertEqual(self._parser("foo()").parse_prototype(), PrototypeAST("foo", []))

    def test_duplicate_parameters_are_accepted(self):
        self.assertEqual(self._parser("f(x x)").parse_prototype(), PrototypeAST("f", ["x", "x"]))

    def test_prototype_errors(self):
        cases = {
            "(a)": ("P008", "function name"),
            "foo a": ("P008", "'('"),
            "foo(a, b)": ("P008", "')'"),
            "foo(a b": ("P010", "')'"),
            "": ("P010", "function name"),
        }
        for source, (code, fragment) in cases.items():
            with self.subTest(source=source):
                with self.assertRaises(ParseError) as ctx:
                    self._parser(source).parse_prototype()
                self.assertEqual(ctx.exception.code, code)
                self.assertIn(fragment, ctx.exception.message)

    def test_definition(self):
        func = self._parser("fn add(a b) a + b").parse_definition()
        self.assertEqual(
            func,
            FunctionAST(PrototypeAST("add", ["a", "b"]), binop("+", var("a"), var("b")))
        )
        self.assertEqual(func.name, "add")
        self.assertEqual((func.span.start.column, func.span.end.column), (1, 17))

    def test_definition_requires_fn(self):
        with self.assertRaises(ParseError) as ctx:
            self._parser("extern f()").parse_definition()
        self.assertEqual(ctx.exception.code, "P002")
        self.assertIn("'fn'", ctx.exception.message)

    def test_definition_requires_body(self):
        with self.assertRaises(ParseError):
            self._parser("fn f(x)").parse_definition()

    def test_block_body_is_rejected(self):
        with self.assertRaises(ParseError):
            self._parser("fn f(x) { return x; }").parse_definition()

    def test_top_level_expression(self):
        func = self._parser("1 + 2").parse_top_level_expr()
        self.assertEqual(
            func,
            FunctionAST(PrototypeAST("__anon_expr", []), binop("+", num(1), num(2)))
        )

    def test_anonymous_function_name_is_configurable(self):
        func = self._parser("x", anonymous_function_name="main").parse_top_level_expr()
        self.assertEqual(func.prototype, PrototypeAST("main", []))


class TestStart(ParserTestCase):
    """Single top-level parse steps."""

    def test_dispatch(self):
        parser = self._parser("; fn f() 1 extern g() 2")

        self.assertIsNone(parser.start())
        self.assertEqual(parser.current_token.type, TokenType.FN)

        self.assertEqual(parser.start(), FunctionAST(PrototypeAST("f", []), num(1)))
        self.assertEqual(parser.start(), PrototypeAST("g", []))
        self.assertEqual(parser.start(), FunctionAST(PrototypeAST("__anon_expr", []), num(2)))

        self.assertIsNone(parser.start())
        self.assertEqual(parser.current_token.type, TokenType.EOF)


class TestProgram(ParserTestCase):
    """Whole program parsing."""

    def test_program(self):
        program = parse_string("""
            # math helpers
            extern sin(x);
            fn double(x) x * 2;
            fn f(x y) sin(x) + double(y)
            f(1, 2.5)
        """)

        self.assertIsInstance(program, Program)
        self.assertEqual(len(program.items), 4)
        self.assertEqual(program.externs, [PrototypeAST("sin", ["x"])])
        self.assertEqual([func.name for func in program.functions],
                         ["double", "f", "__anon_expr"])
        self.assertEqual(program.items[3].body, CallExpr("f", [num(1), NumberExpr(2.5)]))

    def test_empty_program(self):
        self.assertEqual(parse_string("").items, [])
        self.assertEqual(parse_string(";;; # nothing\n").items, [])
        self.assertEqual(Parser([]).parse().items, [])

    def test_parse_file(self):
        with tempfile.NamedTemporaryFile("w", suffix=".ks", delete=False, encoding="utf-8") as f:
            f.write("fn one() 1\n")
            path = f.name

        try:
            program = parse_file(path)
        finally:
            os.unlink(path)

        self.assertEqual(program.items, [FunctionAST(PrototypeAST("one", []), num(1))])
        self.assertEqual(program.span.start.filename, path)

    def test_first_error_is_raised_by_default(self):
        parser = self._parser("fn 1; )")
        with self.assertRaises(ParseError) as ctx:
            parser.parse()

        self.assertEqual(len(parser.errors), 2)
        self.assertIs(ctx.exception, parser.errors[0])
        self.assertIn("function name", ctx.exception.message)

    def test_skip_token_recovery(self):
        """The failing token is skipped and parsing continues."""
        parser = self._parser("1 + ) 2 3; fn g() 1", raise_on_error=False)
        program = parser.parse()

        self.assertEqual(len(parser.errors), 1)
        self.assertEqual(
            [item.body for item in program.items],
            [num(2), num(3), num(1)]
        )

    def test_synchronize_recovery(self):
        """Parsing resumes after the next ';'."""
        parser = self._parser(
            "1 + ) 2 3; fn g() 1",
            raise_on_error=False,
            recovery_mode=RecoveryMode.SYNCHRONIZE
        )
        program = parser.parse()

        self.assertEqual(len(parser.errors), 1)
        self.assertEqual(program.items, [FunctionAST(PrototypeAST("g", []), num(1))])

    def test_synchronize_keeps_following_definition(self):
        """A definition that starts where the error happened is not skipped."""
        parser = self._parser(
            "(1 fn g() 2",
            raise_on_error=False,
            recovery_mode=RecoveryMode.SYNCHRONIZE
        )
        program = parser.parse()

        self.assertEqual(len(parser.errors), 1)
        self.assertEqual(program.items, [FunctionAST(PrototypeAST("g", []), num(2))])

    def test_abort_recovery(self):
        parser = self._parser(") ) fn g() 1", recovery_mode=RecoveryMode.ABORT,
                              raise_on_error=False)
        with self.assertRaises(ParseError):
            parser.parse()
        self.assertEqual(len(parser.errors), 1)

    def test_max_errors(self):
        parser = self._parser(") ) ) )", raise_on_error=False, max_errors=2)
        parser.parse()
        self.assertEqual(len(parser.errors), 2)

    def test_recovery_always_terminates(self):
        for mode in RecoveryMode:
            if mode == RecoveryMode.ABORT:
                continue
            with self.subTest(mode=mode):
                parser = self._parser("fn fn extern ( ) , ; fn", raise_on_error=False,
                                      recovery_mode=mode)
                parser.parse()
                self.assertTrue(parser.errors)


class TestConfiguration(unittest.TestCase):
    """Configuration validation."""

    def test_defaults(self):
        config = FrontendConfiguration()
        self.assertEqual(config.recovery_mode, RecoveryMode.SKIP_TOKEN)
        self.assertTrue(config.raise_on_error)
        self.assertEqual(config.binop_precedence[TokenType.MULTIPLY], 40)

    def test_invalid_values(self):
        with self.assertRaises(ValueError):
            FrontendConfiguration(max_errors=0)
        with self.assertRaises(ValueError):
            FrontendConfiguration(binop_precedence={TokenType.PLUS: 0})

    def test_tables_are_not_shared(self):
        first = FrontendConfiguration()
        first.binop_precedence[TokenType.DIVIDE] = 40
        self.assertNotIn(TokenType.DIVIDE, FrontendConfiguration().binop_precedence)


if __name__ == '__main__':
    unittest.main()
