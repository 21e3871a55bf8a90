"""Parser for the Monkey language.

Statements are parsed by recursive descent and expressions by precedence
climbing (a Pratt parser): each token kind may have a prefix parse
function, used when the token starts an expression, and an infix parse
function, used when the token follows a complete left operand. The
parser keeps a two-token window (`cur_token`, `peek_token`) over the
lexer.

Parsing never raises on malformed input. A construct that cannot be
completed records a `ParseError` and returns None, and the statement
loop moves on to the next token.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Dict, List, Optional, Tuple

from .ast import (
    ArrayLiteral, BlockStatement, BooleanLiteral, CallExpression, Expression,
    ExpressionStatement, FunctionLiteral, HashLiteral, Identifier, IfExpression,
    IndexExpression, InfixExpression, IntegerLiteral, LetStatement,
    PrefixExpression, Program, ReturnStatement, Statement, StringLiteral,
)
from .deep_stack import call_with_deep_stack
from .errors import ParseError, ParseErrorKind
from .lexer import Lexer
from .tokens import Token, TokenKind

INT64_MAX = 2 ** 63 - 1


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2       # ==
    LESSGREATER = 3  # > or <
    SUM = 4          # +
    PRODUCT = 5      # *
    PREFIX = 6       # -X or !X
    CALL = 7         # myFunction(X)
    INDEX = 8        # array[index]


PRECEDENCES = {
    TokenKind.EQ: Precedence.EQUALS,
    TokenKind.NOT_EQ: Precedence.EQUALS,
    TokenKind.LT: Precedence.LESSGREATER,
    TokenKind.GT: Precedence.LESSGREATER,
    TokenKind.PLUS: Precedence.SUM,
    TokenKind.MINUS: Precedence.SUM,
    TokenKind.SLASH: Precedence.PRODUCT,
    TokenKind.ASTERISK: Precedence.PRODUCT,
    TokenKind.LPAREN: Precedence.CALL,
    TokenKind.LBRACKET: Precedence.INDEX,
}

PrefixParseFn = Callable[[], Optional[Expression]]
InfixParseFn = Callable[[Expression], Optional[Expression]]


class Parser:
    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.errors: List[ParseError] = []

        self.prefix_parse_fns: Dict[TokenKind, PrefixParseFn] = {
            TokenKind.IDENT: self.parse_identifier,
            TokenKind.INT: self.parse_integer_literal,
            TokenKind.STRING: self.parse_string_literal,
            TokenKind.TRUE: self.parse_boolean,
            TokenKind.FALSE: self.parse_boolean,
            TokenKind.BANG: self.parse_prefix_expression,
            TokenKind.MINUS: self.parse_prefix_expression,
            TokenKind.LPAREN: self.parse_grouped_expression,
            TokenKind.IF: self.parse_if_expression,
            TokenKind.FUNCTION: self.parse_function_literal,
            TokenKind.LBRACKET: self.parse_array_literal,
            TokenKind.LBRACE: self.parse_hash_literal,
        }
        self.infix_parse_fns: Dict[TokenKind, InfixParseFn] = {
            kind: self.parse_infix_expression
            for kind in (
                TokenKind.PLUS, TokenKind.MINUS, TokenKind.SLASH, TokenKind.ASTERISK,
                TokenKind.EQ, TokenKind.NOT_EQ, TokenKind.LT, TokenKind.GT,
            )
        }
        self.infix_parse_fns[TokenKind.LPAREN] = self.parse_call_expression
        self.infix_parse_fns[TokenKind.LBRACKET] = self.parse_index_expression

        # Fill the two-token window.
        self.cur_token: Token = self.lexer.next_token()
        self.peek_token: Token = self.lexer.next_token()

    @classmethod
    def from_source(cls, source: str) -> 'Parser':
        return cls(Lexer(source))

    def next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_token_is(self, kind: TokenKind) -> bool:
        return self.cur_token.kind is kind

    def peek_token_is(self, kind: TokenKind) -> bool:
        return self.peek_token.kind is kind

    def expect_peek(self, kind: TokenKind) -> bool:
        if self.peek_token_is(kind):
            self.next_token()
            return True
        self.errors.append(ParseError(ParseErrorKind.UNEXPECTED_TOKEN, expected=kind, actual=self.peek_token.kind))
        return False

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.kind, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur_token.kind, Precedence.LOWEST)

    # Program and statements

    def parse(self) -> Program:
        statements: List[Statement] = []
        try:
            call_with_deep_stack(self.parse_statements, statements)
        except RecursionError:
            self.errors.append(ParseError(ParseErrorKind.NESTING_TOO_DEEP))
        return Program(tuple(statements))

    def parse_statements(self, statements: List[Statement]) -> None:
        while not self.cur_token_is(TokenKind.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()

    def parse_statement(self) -> Optional[Statement]:
        kind = self.cur_token.kind
        if kind is TokenKind.LET:
            return self.parse_let_statement()
        if kind is TokenKind.RETURN:
            return self.parse_return_statement()
        if kind is TokenKind.SEMICOLON:
            # empty statement
            return None
        return self.parse_expression_statement()

    def parse_let_statement(self) -> Optional[LetStatement]:
        token = self.cur_token
        if not self.expect_peek(TokenKind.IDENT):
            return None
        name = Identifier(self.cur_token, self.cur_token.literal)
        if not self.expect_peek(TokenKind.ASSIGN):
            return None
        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            self.errors.append(ParseError(ParseErrorKind.INITIAL_VALUE_NOT_FOUND, name=name.value))
            return None
        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()
        return LetStatement(token, name, value)

    def parse_return_statement(self) -> Optional[ReturnStatement]:
        token = self.cur_token
        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            self.errors.append(ParseError(ParseErrorKind.RETURN_VALUE_NOT_FOUND))
            return None
        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()
        return ReturnStatement(token, value)

    def parse_expression_statement(self) -> Optional[ExpressionStatement]:
        token = self.cur_token
        expression = self.parse_required_expression(Precedence.LOWEST)
        if expression is None:
            return None
        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()
        return ExpressionStatement(token, expression)

    def parse_block_statement(self) -> Optional[BlockStatement]:
        token = self.cur_token
        statements: List[Statement] = []
        self.next_token()
        while not self.cur_token_is(TokenKind.RBRACE):
            if self.cur_token_is(TokenKind.EOF):
                self.errors.append(ParseError(ParseErrorKind.UNEXPECTED_TOKEN, expected=TokenKind.RBRACE, actual=TokenKind.EOF))
                return None
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()
        return BlockStatement(token, tuple(statements))

    # Expressions

    def parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        prefix = self.prefix_parse_fns.get(self.cur_token.kind)
        if prefix is None:
            return None
        left = prefix()
        while left is not None and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek_token.kind)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)
        return left

    def parse_required_expression(self, precedence: Precedence) -> Optional[Expression]:
        """Parse an expression, reporting a token that cannot start one.

        The report is skipped when a nested construct already recorded
        its own error.
        """
        error_count = len(self.errors)
        expression = self.parse_expression(precedence)
        if expression is None and len(self.errors) == error_count:
            self.errors.append(ParseError(
                ParseErrorKind.NO_PREFIX_PARSE,
                actual=self.cur_token.kind,
                literal=self.cur_token.literal,
            ))
        return expression

    def parse_identifier(self) -> Expression:
        return Identifier(self.cur_token, self.cur_token.literal)

    def parse_integer_literal(self) -> Optional[Expression]:
        token = self.cur_token
        try:
            value = int(token.literal)
        except ValueError:
            value = None
        if value is None or value > INT64_MAX:
            self.errors.append(ParseError(ParseErrorKind.ILLEGAL_INTEGER_LITERAL, literal=token.literal))
            return None
        return IntegerLiteral(token, value)

    def parse_string_literal(self) -> Expression:
        return StringLiteral(self.cur_token, self.cur_token.literal)

    def parse_boolean(self) -> Optional[Expression]:
        token = self.cur_token
        values = {'true': True, 'false': False}
        if token.literal not in values:
            self.errors.append(ParseError(ParseErrorKind.ILLEGAL_BOOLEAN_LITERAL, literal=token.literal))
            return None
        return BooleanLiteral(token, values[token.literal])

    def parse_prefix_expression(self) -> Optional[Expression]:
        token = self.cur_token
        operator = token.literal
        self.next_token()
        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            self.errors.append(ParseError(ParseErrorKind.PREFIX_RIGHT_VALUE_NOT_FOUND, operator=operator))
            return None
        return PrefixExpression(token, operator, right)

    def parse_infix_expression(self, left: Expression) -> Optional[Expression]:
        token = self.cur_token
        operator = token.literal
        precedence = self.cur_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        if right is None:
            self.errors.append(ParseError(ParseErrorKind.INFIX_RIGHT_VALUE_NOT_FOUND, operator=operator))
            return None
        return InfixExpression(token, left, operator, right)

    def parse_grouped_expression(self) -> Optional[Expression]:
        self.next_token()
        expression = self.parse_required_expression(Precedence.LOWEST)
        if expression is None:
            return None
        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return expression

    def parse_if_expression(self) -> Optional[Expression]:
        token = self.cur_token
        if not self.expect_peek(TokenKind.LPAREN):
            return None
        self.next_token()
        condition = self.parse_required_expression(Precedence.LOWEST)
        if condition is None:
            return None
        if not self.expect_peek(TokenKind.RPAREN):
            return None
        if not self.expect_peek(TokenKind.LBRACE):
            return None
        consequence = self.parse_block_statement()
        if consequence is None:
            return None

        alternative = None
        if self.peek_token_is(TokenKind.ELSE):
            self.next_token()
            if not self.expect_peek(TokenKind.LBRACE):
                return None
            alternative = self.parse_block_statement()
            if alternative is None:
                return None
        return IfExpression(token, condition, consequence, alternative)

    def parse_function_literal(self) -> Optional[Expression]:
        token = self.cur_token
        if not self.expect_peek(TokenKind.LPAREN):
            return None
        parameters = self.parse_function_parameters()
        if parameters is None:
            return None
        if not self.expect_peek(TokenKind.LBRACE):
            return None
        body = self.parse_block_statement()
        if body is None:
            return None
        return FunctionLiteral(token, parameters, body)

    def parse_function_parameters(self) -> Optional[Tuple[Identifier, ...]]:
        if self.peek_token_is(TokenKind.RPAREN):
            self.next_token()
            return ()
        if not self.expect_peek(TokenKind.IDENT):
            return None
        params = [Identifier(self.cur_token, self.cur_token.literal)]
        while self.peek_token_is(TokenKind.COMMA):
            self.next_token()
            if not self.expect_peek(TokenKind.IDENT):
                return None
            params.append(Identifier(self.cur_token, self.cur_token.literal))
        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return tuple(params)

    def parse_call_expression(self, function: Expression) -> Optional[Expression]:
        token = self.cur_token
        arguments = self.parse_expression_list(TokenKind.RPAREN)
        if arguments is None:
            return None
        return CallExpression(token, function, arguments)

    def parse_array_literal(self) -> Optional[Expression]:
        token = self.cur_token
        elements = self.parse_expression_list(TokenKind.RBRACKET)
        if elements is None:
            return None
        return ArrayLiteral(token, elements)

    def parse_expression_list(self, end: TokenKind) -> Optional[Tuple[Expression, ...]]:
        if self.peek_token_is(end):
            self.next_token()
            return ()
        self.next_token()
        first = self.parse_required_expression(Precedence.LOWEST)
        if first is None:
            return None
        items = [first]
        while self.peek_token_is(TokenKind.COMMA):
            self.next_token()
            self.next_token()
            item = self.parse_required_expression(Precedence.LOWEST)
            if item is None:
                return None
            items.append(item)
        if not self.expect_peek(end):
            return None
        return tuple(items)

    def parse_index_expression(self, left: Expression) -> Optional[Expression]:
        token = self.cur_token
        self.next_token()
        index = self.parse_required_expression(Precedence.LOWEST)
        if index is None:
            return None
        if not self.expect_peek(TokenKind.RBRACKET):
            return None
        return IndexExpression(token, left, index)

    def parse_hash_literal(self) -> Optional[Expression]:
        token = self.cur_token
        pairs: List[Tuple[Expression, Expression]] = []
        while not self.peek_token_is(TokenKind.RBRACE):
            self.next_token()
            key = self.parse_required_expression(Precedence.LOWEST)
            if key is None:
                return None
            if not self.expect_peek(TokenKind.COLON):
                return None
            self.next_token()
            value = self.parse_required_expression(Precedence.LOWEST)
            if value is None:
                return None
            pairs.append((key, value))
            if not self.peek_token_is(TokenKind.RBRACE) and not self.expect_peek(TokenKind.COMMA):
                return None
        if not self.expect_peek(TokenKind.RBRACE):
            return None
        return HashLiteral(token, tuple(pairs))


def parse_program(source: str) -> Tuple[Program, List[ParseError]]:
    """Parse source code into a Program and the list of parse errors."""
    parser = Parser(Lexer(source))
    program = parser.parse()
    return program, parser.errors
