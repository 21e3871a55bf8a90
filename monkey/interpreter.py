"""Tree-walking interpreter for the Monkey language.

This module ties the toolchain together: `parse_program` runs the lexer
and parser, `Interpreter` evaluates the resulting AST against an
`Environment`, and `run_program` / `run_line` are the entry points used
by the command line (a fresh environment per file, a shared one per
interactive session).

Language errors never travel as Python exceptions. Each evaluation step
returns a value; if that value is an `ErrorVal` the caller hands it
straight back up without evaluating anything else. `return` works the
same way through `ReturnValue`, which block evaluation passes up
unchanged and which is unwrapped once at a function call or at the top
of the program.
"""

from __future__ import annotations

import sys
from typing import List, Mapping, Optional, Sequence, TextIO, Tuple

from .ast import (
    ArrayLiteral, BlockStatement, BooleanLiteral, CallExpression, Expression,
    ExpressionStatement, FunctionLiteral, HashLiteral, Identifier, IfExpression,
    IndexExpression, InfixExpression, IntegerLiteral, LetStatement,
    PrefixExpression, Program, ReturnStatement, Statement, StringLiteral,
)
from .builtin_function import BUILTINS, BuiltinFunction
from .deep_stack import call_with_deep_stack
from .environment import Environment
from .errors import ParseError
from .parser import parse_program
from .types import (
    NULL, Array, Boolean, ErrorKind, ErrorVal, Function, Hash, Integer,
    ReturnValue, String, Value,
    call_non_function_value, index_operator_not_supported, invalid_hash_key,
    is_error, is_hashable, is_truthy, make_integer, native_bool_to_boolean,
    undefined_identifier, unknown_infix_operator, unknown_prefix_operator,
)

__all__ = ['Interpreter', 'parse_program', 'run_program', 'run_line']


def truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


class Interpreter:
    """Evaluates Monkey ASTs.

    The interpreter holds no evaluation state of its own; everything a
    program leaves behind lives in the `Environment` passed to
    `evaluate`. `debug_level` controls tracing: 1 traces top-level
    statement results, 2 adds `let` bindings and function calls, 3 adds
    `if` conditions and builtin calls. Trace lines go to `debug_file`
    when given, otherwise to stderr.
    """
    def __init__(
        self,
        debug_level: int = 0,
        debug_file: Optional[str] = None,
        builtins: Mapping[str, BuiltinFunction] = BUILTINS,
    ):
        self.debug_level = debug_level
        self.builtins = builtins
        self.debug_fp: Optional[TextIO] = None
        if debug_level > 0 and debug_file is not None:
            self.debug_fp = open(debug_file, 'w', encoding='utf-8')

    def debug(self, msg: str) -> None:
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    def close(self) -> None:
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def __enter__(self) -> 'Interpreter':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # Public API
    def evaluate(self, program: Program, env: Environment) -> Optional[Value]:
        """Evaluate a whole program; None means it produced no value.

        Evaluation runs through `call_with_deep_stack`, so call depth is
        bounded by `RECURSION_LIMIT` rather than Python's default limit.
        """
        try:
            return call_with_deep_stack(self.eval_program, program, env)
        except RecursionError:
            self.debug('recursion limit reached')
            return ErrorVal(ErrorKind.RECURSION_DEPTH_EXCEEDED)

    def eval_program(self, program: Program, env: Environment) -> Optional[Value]:
        result: Optional[Value] = None
        for stmt in program.statements:
            result = self.execute(stmt, env)
            if self.debug_level >= 1:
                self.debug(f"{stmt} => {'<no value>' if result is None else repr(result)}")
            if isinstance(result, ReturnValue):
                return result.value
            if isinstance(result, ErrorVal):
                return result
        return result

    # Statements
    def execute(self, node: Statement, env: Environment) -> Optional[Value]:
        if isinstance(node, ExpressionStatement):
            return self.eval_expression(node.expression, env)
        if isinstance(node, BlockStatement):
            return self.execute_block(node.statements, env)
        if isinstance(node, ReturnStatement):
            value = self.eval_expression(node.return_value, env)
            if is_error(value):
                return value
            return ReturnValue(value)
        if isinstance(node, LetStatement):
            value = self.eval_expression(node.value, env)
            if is_error(value):
                return value
            env.set(node.name.value, value)
            if self.debug_level >= 2:
                self.debug(f"let {node.name.value} = {value!r}")
            return None
        raise TypeError(f"execute: unexpected node type {type(node).__name__}")

    def execute_block(self, statements: Sequence[Statement], env: Environment) -> Optional[Value]:
        result: Optional[Value] = None
        for stmt in statements:
            result = self.execute(stmt, env)
            # ReturnValue stays wrapped so enclosing blocks stop too.
            if isinstance(result, (ReturnValue, ErrorVal)):
                return result
        return result

    # Expressions
    def eval_expression(self, node: Expression, env: Environment) -> Value:
        if isinstance(node, IntegerLiteral):
            return Integer(node.value)
        if isinstance(node, StringLiteral):
            return String(node.value)
        if isinstance(node, BooleanLiteral):
            return native_bool_to_boolean(node.value)
        if isinstance(node, PrefixExpression):
            right = self.eval_expression(node.right, env)
            if is_error(right):
                return right
            return self.eval_prefix(node.operator, right)
        if isinstance(node, InfixExpression):
            left = self.eval_expression(node.left, env)
            if is_error(left):
                return left
            right = self.eval_expression(node.right, env)
            if is_error(right):
                return right
            return self.eval_infix(node.operator, left, right)
        if isinstance(node, IfExpression):
            return self.eval_if(node, env)
        if isinstance(node, Identifier):
            return self.eval_identifier(node, env)
        if isinstance(node, FunctionLiteral):
            return Function(node.parameters, node.body, env)
        if isinstance(node, CallExpression):
            return self.eval_call(node, env)
        if isinstance(node, ArrayLiteral):
            elements = self.eval_expressions(node.elements, env)
            if isinstance(elements, ErrorVal):
                return elements
            return Array(tuple(elements))
        if isinstance(node, IndexExpression):
            left = self.eval_expression(node.left, env)
            if is_error(left):
                return left
            index = self.eval_expression(node.index, env)
            if is_error(index):
                return index
            return self.eval_index(left, index)
        if isinstance(node, HashLiteral):
            return self.eval_hash_literal(node, env)
        raise TypeError(f"evaluate: unexpected node type {type(node).__name__}")

    def eval_expressions(self, nodes: Sequence[Expression], env: Environment):
        """Evaluate left to right; return the first error or the list of values."""
        values: List[Value] = []
        for node in nodes:
            value = self.eval_expression(node, env)
            if is_error(value):
                return value
            values.append(value)
        return values

    def eval_prefix(self, operator: str, right: Value) -> Value:
        if operator == '!':
            return native_bool_to_boolean(not is_truthy(right))
        if operator == '-' and isinstance(right, Integer):
            return make_integer(-right.value)
        return unknown_prefix_operator(operator, right)

    def eval_infix(self, operator: str, left: Value, right: Value) -> Value:
        if isinstance(left, Integer) and isinstance(right, Integer):
            return self.eval_integer_infix(operator, left, right)
        if isinstance(left, Boolean) and isinstance(right, Boolean):
            if operator == '==':
                return native_bool_to_boolean(left.value == right.value)
            if operator == '!=':
                return native_bool_to_boolean(left.value != right.value)
            return unknown_infix_operator(left, operator, right)
        if isinstance(left, String) and isinstance(right, String):
            if operator == '+':
                return String(left.value + right.value)
            if operator == '==':
                return native_bool_to_boolean(left.value == right.value)
            if operator == '!=':
                return native_bool_to_boolean(left.value != right.value)
            return unknown_infix_operator(left, operator, right)
        return unknown_infix_operator(left, operator, right)

    def eval_integer_infix(self, operator: str, left: Integer, right: Integer) -> Value:
        a, b = left.value, right.value
        if operator == '+':
            return make_integer(a + b)
        if operator == '-':
            return make_integer(a - b)
        if operator == '*':
            return make_integer(a * b)
        if operator == '/':
            if b == 0:
                return ErrorVal(ErrorKind.DIVISION_BY_ZERO)
            return make_integer(truncating_div(a, b))
        if operator == '<':
            return native_bool_to_boolean(a < b)
        if operator == '>':
            return native_bool_to_boolean(a > b)
        if operator == '==':
            return native_bool_to_boolean(a == b)
        if operator == '!=':
            return native_bool_to_boolean(a != b)
        return unknown_infix_operator(left, operator, right)

    def eval_if(self, node: IfExpression, env: Environment) -> Value:
        condition = self.eval_expression(node.condition, env)
        if is_error(condition):
            return condition
        truthy = is_truthy(condition)
        if self.debug_level >= 3:
            self.debug(f"if condition {condition!r} -> {truthy}")
        if truthy:
            block = node.consequence
        elif node.alternative is not None:
            block = node.alternative
        else:
            return NULL
        result = self.execute(block, env)
        return NULL if result is None else result

    def eval_identifier(self, node: Identifier, env: Environment) -> Value:
        value = env.get(node.value)
        if value is not None:
            return value
        builtin = self.builtins.get(node.value)
        if builtin is not None:
            return builtin
        return undefined_identifier(node.value)

    def eval_call(self, node: CallExpression, env: Environment) -> Value:
        function = self.eval_expression(node.function, env)
        if is_error(function):
            return function

        if isinstance(function, Function):
            call_env = Environment.enclosed(function.env)
            # Parameters and arguments pair up positionally: surplus
            # arguments are not evaluated, missing ones stay unbound.
            for param, arg_node in zip(function.parameters, node.arguments):
                arg = self.eval_expression(arg_node, env)
                if is_error(arg):
                    return arg
                call_env.set(param.value, arg)
            if self.debug_level >= 2:
                self.debug(f"call {node.function} with {len(node.arguments)} argument(s)")
            result = self.execute(function.body, call_env)
            if isinstance(result, ReturnValue):
                return result.value
            return NULL if result is None else result

        if isinstance(function, BuiltinFunction):
            args = self.eval_expressions(node.arguments, env)
            if isinstance(args, ErrorVal):
                return args
            if self.debug_level >= 3:
                self.debug(f"builtin {function.name}({', '.join(repr(a) for a in args)})")
            return function(args)

        return call_non_function_value(function)

    def eval_index(self, left: Value, index: Value) -> Value:
        if isinstance(left, Array) and isinstance(index, Integer):
            i = index.value
            if i < 0 or i >= len(left.elements):
                return NULL
            return left.elements[i]
        if isinstance(left, Hash):
            if not is_hashable(index):
                return invalid_hash_key(index)
            return left.pairs.get(index, NULL)
        return index_operator_not_supported(left)

    def eval_hash_literal(self, node: HashLiteral, env: Environment) -> Value:
        pairs = {}
        for key_node, value_node in node.pairs:
            key = self.eval_expression(key_node, env)
            if is_error(key):
                return key
            if not is_hashable(key):
                return invalid_hash_key(key)
            value = self.eval_expression(value_node, env)
            if is_error(value):
                return value
            pairs[key] = value
        return Hash(pairs)


def run_line(
    source: str,
    env: Environment,
    interpreter: Optional[Interpreter] = None,
) -> Tuple[List[ParseError], Optional[Value]]:
    """Parse and evaluate `source` against a caller-owned environment.

    Evaluation is skipped when parsing reported errors.
    """
    program, errors = parse_program(source)
    if errors:
        return errors, None
    if interpreter is None:
        interpreter = Interpreter()
    return errors, interpreter.evaluate(program, env)


def run_program(
    source: str,
    debug_level: int = 0,
    debug_file: Optional[str] = None,
) -> Tuple[List[ParseError], Optional[Value]]:
    """Parse and evaluate a complete program in a fresh environment."""
    with Interpreter(debug_level=debug_level, debug_file=debug_file) as interpreter:
        return run_line(source, Environment(), interpreter)
