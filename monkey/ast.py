"""Abstract Syntax Tree (AST) definitions for the Monkey language.

Nodes are frozen dataclasses built once by the parser and never mutated
afterwards. Every node keeps the token it was created from. `str(node)`
gives a canonical rendering with every prefix, infix and index
expression fully parenthesised, so the rendering of a parsed program can
be fed back to the parser and yields the same tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .tokens import Token


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    token: Token

    def token_literal(self) -> str:
        return self.token.literal


class Statement(Node):
    pass


class Expression(Node):
    pass


def render_statements(statements: Sequence[Statement]) -> str:
    """Join statements so that the result parses back to the same list.

    Expression statements carry no terminator of their own, so one is
    added whenever another statement follows.
    """
    parts = []
    last = len(statements) - 1
    for i, stmt in enumerate(statements):
        text = str(stmt)
        if isinstance(stmt, ExpressionStatement) and i < last:
            text += ';'
        parts.append(text)
    return ' '.join(parts)


@dataclass(frozen=True)
class Program:
    statements: Tuple[Statement, ...]

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ''

    def __str__(self) -> str:
        return render_statements(self.statements)


###############################################################################
# Expressions
###############################################################################


@dataclass(frozen=True)
class Identifier(Expression):
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int

    def __str__(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool

    def __str__(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class StringLiteral(Expression):
    value: str

    def __str__(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class PrefixExpression(Expression):
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass(frozen=True)
class InfixExpression(Expression):
    left: Expression
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class IfExpression(Expression):
    condition: Expression
    consequence: 'BlockStatement'
    alternative: Optional['BlockStatement'] = None

    def __str__(self) -> str:
        text = f"if ({self.condition}) {self.consequence}"
        if self.alternative is not None:
            text += f" else {self.alternative}"
        return text


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    parameters: Tuple[Identifier, ...]
    body: 'BlockStatement'

    def __str__(self) -> str:
        params = ', '.join(str(p) for p in self.parameters)
        return f"{self.token.literal}({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression(Expression):
    function: Expression
    arguments: Tuple[Expression, ...]

    def __str__(self) -> str:
        args = ', '.join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    elements: Tuple[Expression, ...]

    def __str__(self) -> str:
        return '[' + ', '.join(str(e) for e in self.elements) + ']'


@dataclass(frozen=True)
class IndexExpression(Expression):
    left: Expression
    index: Expression

    def __str__(self) -> str:
        return f"({self.left}[{self.index}])"


@dataclass(frozen=True)
class HashLiteral(Expression):
    pairs: Tuple[Tuple[Expression, Expression], ...]

    def __str__(self) -> str:
        return '{' + ', '.join(f"{k}: {v}" for k, v in self.pairs) + '}'


###############################################################################
# Statements
###############################################################################


@dataclass(frozen=True)
class LetStatement(Statement):
    name: Identifier
    value: Expression

    def __str__(self) -> str:
        return f"{self.token.literal} {self.name} = {self.value};"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    return_value: Expression

    def __str__(self) -> str:
        return f"{self.token.literal} {self.return_value};"


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expression: Expression

    def __str__(self) -> str:
        return str(self.expression)


@dataclass(frozen=True)
class BlockStatement(Statement):
    statements: Tuple[Statement, ...]

    def __str__(self) -> str:
        if not self.statements:
            return '{ }'
        return '{ ' + render_statements(self.statements) + ' }'
