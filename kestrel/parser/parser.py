"""
Kestrel Pratt Parser Implementation

Implements a recursive-descent parser with operator-precedence climbing
for binary expressions. The parser keeps a single cursor into the token
list, never rewinds, and decides every production from the current token.

Reading past the last token yields an EOF sentinel instead of failing,
so running out of input is reported as an ordinary ParseError.

Author: xwest
"""

import logging
from typing import Dict, List, Optional

from ..config import FrontendConfiguration, RecoveryMode
from ..lexer.tokens import Token, TokenType, SourceLocation
from .ast_nodes import (
    ASTNode, SourceSpan, ExprAST, NumberExpr, VariableExpr, BinaryExpr, CallExpr,
    PrototypeAST, FunctionAST, Program, Item
)
from .errors import (
    ParseError, create_unexpected_token_error, create_unclosed_delimiter_error,
    create_invalid_expression_error, create_argument_list_error,
    create_signature_error, SyntaxErrorRecovery
)


# Precedence returned for tokens that are not binary operators
NOT_AN_OPERATOR = -1


class Parser:
    """
    Kestrel parser.

    Builds FunctionAST / PrototypeAST items from a token list. Each public
    parse_* method either returns a complete node or raises ParseError;
    parse() drives whole programs and applies the configured recovery
    policy between top-level items.
    """

    def __init__(self, tokens: List[Token], config: Optional[FrontendConfiguration] = None):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: List of tokens from the lexer (a trailing EOF is optional)
            config: Front end configuration; defaults are used when omitted
        """
        self.tokens = tokens
        self.config = config or FrontendConfiguration()
        self.current = 0
        self.errors: List[ParseError] = []
        self.precedences: Dict[TokenType, int] = dict(self.config.binop_precedence)
        self._eof: Optional[Token] = None
        self._logger = logging.getLogger("Parser")

    @property
    def current_token(self) -> Token:
        """The token under the cursor (EOF once the input is exhausted)."""
        return self._peek()

    def parse(self) -> Program:
        """
        Parse the token stream into a Program.

        Returns:
            Program AST node holding every successfully parsed item

        Raises:
            ParseError: In ABORT mode on the first error; otherwise the first
                recorded error once parsing finishes, if config.raise_on_error
        """
        items: List[Item] = []
        self.errors = []

        while not self._is_at_end():
            start_pos = self.current
            try:
                item = self.start()
                if item is not None:
                    items.append(item)

            except ParseError as e:
                self.errors.append(e)
                self._logger.warning("Syntax error at %s: %s", e.location, e.message)

                if self.config.recovery_mode == RecoveryMode.ABORT:
                    raise

                if len(self.errors) >= self.config.max_errors:
                    self._logger.warning("Stopping after %d errors", len(self.errors))
                    break

                self._recover(start_pos)

        program = Program(items, self._program_span())

        if self.errors and self.config.raise_on_error:
            raise self.errors[0]

        return program

    def start(self) -> Optional[Item]:
        """
        Perform one top-level parse step.

        Returns:
            The parsed item, or None for an empty statement or end of input
        """
        token = self._peek()

        if token.type == TokenType.EOF:
            return None

        if token.type == TokenType.SEMICOLON:
            self._advance()
            return None

        if token.type == TokenType.FN:
            item = self.parse_definition()
        elif token.type == TokenType.EXTERN:
            item = self.parse_extern()
        else:
            item = self.parse_top_level_expr()

        self._logger.debug("Parsed %s '%s'", item.node_type.value, item.name)
        return item

    # Top-level constructs

    def parse_definition(self) -> FunctionAST:
        """Parse 'fn' prototype expression."""
        fn_token = self._consume(TokenType.FN, "'fn'")

        prototype = self.parse_prototype()
        body = self.parse_expression()

        span = SourceSpan(fn_token.location, self._span_end(body, fn_token.location))
        return FunctionAST(prototype, body, span)

    def parse_extern(self) -> PrototypeAST:
        """Parse 'extern' prototype."""
        extern_token = self._consume(TokenType.EXTERN, "'extern'")

        prototype = self.parse_prototype()
        span = SourceSpan(extern_token.location, self._span_end(prototype, extern_token.location))
        return PrototypeAST(prototype.name, prototype.args, span)

    def parse_top_level_expr(self) -> FunctionAST:
        """Parse a bare expression and wrap it in an anonymous function."""
        start_location = self._peek().location

        body = self.parse_expression()

        prototype = PrototypeAST(
            self.config.anonymous_function_name,
            [],
            SourceSpan(start_location, start_location)
        )
        return FunctionAST(
            prototype, body, SourceSpan(start_location, self._span_end(body, start_location))
        )

    def parse_prototype(self) -> PrototypeAST:
        """Parse IDENT '(' { IDENT } ')'."""
        name_token = self._peek()
        if name_token.type != TokenType.IDENTIFIER:
            raise create_signature_error("function name", name_token)
        self._advance()

        if not self._match(TokenType.LEFT_PAREN):
            raise create_signature_error("'('", self._peek())

        # Parameter names follow each other without separators
        args: List[str] = []
        while self._check(TokenType.IDENTIFIER):
            args.append(self._advance().value)

        if not self._check(TokenType.RIGHT_PAREN):
            raise create_signature_error("')'", self._peek())
        close_token = self._advance()

        span = SourceSpan(name_token.location, close_token.location)
        return PrototypeAST(name_token.value, args, span)

    # Expressions

    def parse_expression(self) -> ExprAST:
        """Parse a primary expression followed by any binary operators."""
        lhs = self.parse_primary()
        return self.parse_bin_op_rhs(0, lhs)

    def parse_bin_op_rhs(self, min_precedence: int, lhs: ExprAST) -> ExprAST:
        """
        Fold binary operators into lhs, precedence climbing style.

        Consumes operators whose precedence is at least min_precedence. An
        operator of equal precedence ends the recursive call, which makes
        same-level operators left-associative.
        """
        while True:
            token_precedence = self.get_token_precedence()

            # Also stops on non-operators, whose precedence is -1
            if token_precedence < min_precedence:
                return lhs

            operator = self._advance()
            rhs = self.parse_primary()

            # Let a tighter-binding operator take rhs as its lhs
            next_precedence = self.get_token_precedence()
            if token_precedence < next_precedence:
                rhs = self.parse_bin_op_rhs(token_precedence + 1, rhs)

            span = SourceSpan(
                self._span_start(lhs, operator.location),
                self._span_end(rhs, operator.location)
            )
            lhs = BinaryExpr(operator, lhs, rhs, span)

    def get_token_precedence(self) -> int:
        """Precedence of the current token, or -1 if it is not a binary operator."""
        return self.precedences.get(self._peek().type, NOT_AN_OPERATOR)

    def parse_primary(self) -> ExprAST:
        """Parse an identifier, call, numeric literal or parenthesized expression."""
        token = self._peek()

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return self.parse_identifier_expr(token.value, token.location)

        if token.type in (TokenType.INTEGER, TokenType.FLOAT):
            return self.parse_number_expr()

        if token.type == TokenType.LEFT_PAREN:
            return self.parse_paren_expr()

        raise create_invalid_expression_error(
            f"unexpected {token.describe()} where an expression was expected",
            token
        )

    def parse_identifier_expr(self, name: str,
                              start_location: Optional[SourceLocation] = None) -> ExprAST:
        """
        Parse what follows an identifier that has just been consumed.

        Without a following '(' the identifier is a variable reference,
        otherwise it is a call and the argument list is parsed.
        """
        if start_location is None:
            start_location = self._previous().location

        if not self._check(TokenType.LEFT_PAREN):
            return VariableExpr(name, SourceSpan(start_location, start_location))

        self._advance()  # Consume (

        args: List[ExprAST] = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                args.append(self.parse_expression())

                if self._check(TokenType.RIGHT_PAREN):
                    break

                if not self._match(TokenType.COMMA):
                    raise create_argument_list_error(self._peek())

        end_token = self._advance()  # Consume )

        return CallExpr(name, args, SourceSpan(start_location, end_token.location))

    def parse_number_expr(self) -> NumberExpr:
        """Parse an integer or float literal into a numeric leaf."""
        token = self._advance()
        return NumberExpr(float(token.value), SourceSpan(token.location, token.location))

    def parse_paren_expr(self) -> ExprAST:
        """Parse '(' expression ')'."""
        open_token = self._advance()  # Consume (

        expr = self.parse_expression()

        if not self._check(TokenType.RIGHT_PAREN):
            raise create_unclosed_delimiter_error("(", open_token.location, self._peek())
        self._advance()

        return expr

    # Utility methods

    def _recover(self, start_pos: int):
        """Move the cursor to where parsing resumes after an error."""
        if self.config.recovery_mode == RecoveryMode.SYNCHRONIZE:
            resume = SyntaxErrorRecovery.synchronize_to_statement_boundary(
                self.tokens, self.current
            )
            # Never resume at or before the start of the failed construct
            self.current = max(resume, start_pos + 1)
        else:
            self.current = min(self.current + 1, len(self.tokens))

        self._logger.debug("Resuming at token %d", self.current)

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        return self._peek().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._peek()
        if not self._is_at_end():
            self.current += 1
        return token

    def _is_at_end(self) -> bool:
        """Check if we've reached the end of tokens."""
        return self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        """Return current token without consuming; EOF past the end."""
        if self.current < len(self.tokens):
            return self.tokens[self.current]
        return self._eof_token()

    def _previous(self) -> Token:
        """Return previous token."""
        if self.current > 0:
            return self.tokens[self.current - 1]
        return self._peek()

    def _eof_token(self) -> Token:
        if self._eof is None:
            if self.tokens:
                location = self.tokens[-1].location
            else:
                location = SourceLocation(self.config.filename, 1, 1, 0)
            self._eof = Token(TokenType.EOF, "", None, location)
        return self._eof

    def _consume(self, token_type: TokenType, expected: str) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()

        raise create_unexpected_token_error(expected, self._peek(), code="P002")

    def _program_span(self) -> SourceSpan:
        if self.tokens:
            return SourceSpan(self.tokens[0].location, self.tokens[-1].location)
        location = self._eof_token().location
        return SourceSpan(location, location)

    @staticmethod
    def _span_start(node: ASTNode, fallback: SourceLocation) -> SourceLocation:
        """Start of node's span; nodes built outside the parser may have none."""
        return node.span.start if node.span is not None else fallback

    @staticmethod
    def _span_end(node: ASTNode, fallback: SourceLocation) -> SourceLocation:
        return node.span.end if node.span is not None else fallback


def parse_string(source: str, filename: str = "<string>",
                 config: Optional[FrontendConfiguration] = None) -> Program:
    """
    Convenience function to parse a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting
        config: Front end configuration

    Returns:
        Program AST

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
    """
    from ..lexer import tokenize

    tokens = tokenize(source, filename)
    parser = Parser(tokens, config)
    return parser.parse()


def parse_file(filepath: str, config: Optional[FrontendConfiguration] = None) -> Program:
    """
    Convenience function to parse a source file.

    Args:
        filepath: Path to source file
        config: Front end configuration

    Returns:
        Program AST

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
        IOError: If file cannot be read
    """
    from ..lexer import tokenize_file

    tokens = tokenize_file(filepath)
    parser = Parser(tokens, config)
    return parser.parse()
