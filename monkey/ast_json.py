"""JSON serialization/deserialization for Monkey ASTs.

This module converts between the AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Each node becomes an
object tagged with its class name under "type" and carries its token as
{"kind": ..., "literal": ...}, so a decoded tree renders and evaluates
exactly like the parsed one.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    ArrayLiteral, BlockStatement, BooleanLiteral, CallExpression, Expression,
    ExpressionStatement, FunctionLiteral, HashLiteral, Identifier, IfExpression,
    IndexExpression, InfixExpression, IntegerLiteral, LetStatement,
    PrefixExpression, Program, ReturnStatement, Statement, StringLiteral,
)
from .errors import AstFormatError
from .tokens import Token, TokenKind


def token_to_obj(token: Token) -> Dict[str, str]:
    return {"kind": token.kind.name, "literal": token.literal}


def token_from_obj(o: Any) -> Token:
    try:
        return Token(TokenKind[o["kind"]], o["literal"])
    except (KeyError, TypeError) as e:
        raise AstFormatError(f"invalid token: {o!r}") from e


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None
    if isinstance(node, Program):
        return {"type": "Program", "statements": [ast_to_obj(s) for s in node.statements]}

    obj: Dict[str, Any] = {"type": type(node).__name__, "token": token_to_obj(node.token)}

    # Statements
    if isinstance(node, LetStatement):
        obj.update(name=ast_to_obj(node.name), value=ast_to_obj(node.value))
    elif isinstance(node, ReturnStatement):
        obj.update(return_value=ast_to_obj(node.return_value))
    elif isinstance(node, ExpressionStatement):
        obj.update(expression=ast_to_obj(node.expression))
    elif isinstance(node, BlockStatement):
        obj.update(statements=[ast_to_obj(s) for s in node.statements])
    # Expressions
    elif isinstance(node, (Identifier, IntegerLiteral, BooleanLiteral, StringLiteral)):
        obj.update(value=node.value)
    elif isinstance(node, PrefixExpression):
        obj.update(operator=node.operator, right=ast_to_obj(node.right))
    elif isinstance(node, InfixExpression):
        obj.update(left=ast_to_obj(node.left), operator=node.operator, right=ast_to_obj(node.right))
    elif isinstance(node, IfExpression):
        obj.update(
            condition=ast_to_obj(node.condition),
            consequence=ast_to_obj(node.consequence),
            alternative=ast_to_obj(node.alternative),
        )
    elif isinstance(node, FunctionLiteral):
        obj.update(parameters=[ast_to_obj(p) for p in node.parameters], body=ast_to_obj(node.body))
    elif isinstance(node, CallExpression):
        obj.update(function=ast_to_obj(node.function), arguments=[ast_to_obj(a) for a in node.arguments])
    elif isinstance(node, ArrayLiteral):
        obj.update(elements=[ast_to_obj(e) for e in node.elements])
    elif isinstance(node, IndexExpression):
        obj.update(left=ast_to_obj(node.left), index=ast_to_obj(node.index))
    elif isinstance(node, HashLiteral):
        obj.update(pairs=[[ast_to_obj(k), ast_to_obj(v)] for (k, v) in node.pairs])
    else:
        raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")
    return obj


def _child(obj: Any, expected: type, slot: str) -> Any:
    """Decode `obj` and check it is the kind of node `slot` holds."""
    node = ast_from_obj(obj)
    if not isinstance(node, expected):
        raise AstFormatError(f"{slot} must be {expected.__name__}, got {type(node).__name__}")
    return node


def _many(items: Any, expected: type, slot: str) -> tuple:
    if not isinstance(items, list):
        raise AstFormatError(f"{slot} must be a list")
    return tuple(_child(item, expected, slot) for item in items)


def _pairs(items: Any) -> tuple:
    if not isinstance(items, list):
        raise AstFormatError("pairs must be a list")
    return tuple(
        (_child(k, Expression, "hash key"), _child(v, Expression, "hash value"))
        for (k, v) in items
    )


def program_from_obj(obj: Any) -> Program:
    """Decode a whole JSON document, which must hold a Program."""
    return _child(obj, Program, "document")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise AstFormatError("Invalid AST object")
    t = obj.get("type")
    try:
        if t == "Program":
            return Program(statements=_many(obj["statements"], Statement, "statement"))

        token = token_from_obj(obj.get("token"))
        if t == "LetStatement":
            return LetStatement(
                token,
                name=_child(obj["name"], Identifier, "let name"),
                value=_child(obj["value"], Expression, "let value"),
            )
        if t == "ReturnStatement":
            return ReturnStatement(token, return_value=_child(obj["return_value"], Expression, "return value"))
        if t == "ExpressionStatement":
            return ExpressionStatement(token, expression=_child(obj["expression"], Expression, "expression"))
        if t == "BlockStatement":
            return BlockStatement(token, statements=_many(obj["statements"], Statement, "statement"))
        if t == "Identifier":
            return Identifier(token, value=str(obj["value"]))
        if t == "IntegerLiteral":
            return IntegerLiteral(token, value=int(obj["value"]))
        if t == "BooleanLiteral":
            return BooleanLiteral(token, value=bool(obj["value"]))
        if t == "StringLiteral":
            return StringLiteral(token, value=str(obj["value"]))
        if t == "PrefixExpression":
            return PrefixExpression(token, operator=str(obj["operator"]), right=_child(obj["right"], Expression, "operand"))
        if t == "InfixExpression":
            return InfixExpression(
                token,
                left=_child(obj["left"], Expression, "operand"),
                operator=str(obj["operator"]),
                right=_child(obj["right"], Expression, "operand"),
            )
        if t == "IfExpression":
            alternative = obj.get("alternative")
            return IfExpression(
                token,
                condition=_child(obj["condition"], Expression, "condition"),
                consequence=_child(obj["consequence"], BlockStatement, "consequence"),
                alternative=None if alternative is None else _child(alternative, BlockStatement, "alternative"),
            )
        if t == "FunctionLiteral":
            return FunctionLiteral(
                token,
                parameters=_many(obj["parameters"], Identifier, "parameter"),
                body=_child(obj["body"], BlockStatement, "function body"),
            )
        if t == "CallExpression":
            return CallExpression(
                token,
                function=_child(obj["function"], Expression, "callee"),
                arguments=_many(obj["arguments"], Expression, "argument"),
            )
        if t == "ArrayLiteral":
            return ArrayLiteral(token, elements=_many(obj["elements"], Expression, "array element"))
        if t == "IndexExpression":
            return IndexExpression(
                token,
                left=_child(obj["left"], Expression, "indexed value"),
                index=_child(obj["index"], Expression, "index"),
            )
        if t == "HashLiteral":
            return HashLiteral(token, pairs=_pairs(obj["pairs"]))
    except AstFormatError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise AstFormatError(f"malformed {t} node: {e}") from e

    raise AstFormatError(f"Unknown AST node type: {t}")
