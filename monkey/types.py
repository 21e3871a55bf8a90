"""Runtime values for the Monkey interpreter.

Every value the evaluator produces is an instance of one of the `Value`
subclasses below. Errors are ordinary values (`ErrorVal`) so they can
flow through the evaluator without Python exceptions. `ReturnValue` is an
internal wrapper used to unwind a function body and never reaches a
caller of the interpreter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Dict, Tuple

if TYPE_CHECKING:
    from .ast import BlockStatement, Identifier
    from .environment import Environment

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class Value:
    """Base class for all runtime values."""
    type_name: ClassVar[str] = 'Value'


@dataclass(frozen=True)
class Integer(Value):
    type_name: ClassVar[str] = 'Integer'
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class String(Value):
    type_name: ClassVar[str] = 'String'
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Boolean(Value):
    type_name: ClassVar[str] = 'Boolean'
    value: bool

    def __str__(self) -> str:
        return 'true' if self.value else 'false'


class Null(Value):
    """Marker object for the Monkey `null` value. Use the NULL singleton."""
    type_name: ClassVar[str] = 'Null'

    def __repr__(self) -> str:
        return 'NULL'

    def __str__(self) -> str:
        return 'null'


NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


@dataclass(frozen=True)
class ReturnValue(Value):
    type_name: ClassVar[str] = 'ReturnValue'
    value: Value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, eq=False)
class Function(Value):
    """A user-defined function closed over its defining environment."""
    type_name: ClassVar[str] = 'Function'
    parameters: Tuple['Identifier', ...]
    body: 'BlockStatement'
    env: 'Environment' = field(repr=False)

    def __str__(self) -> str:
        params = ', '.join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"


@dataclass(frozen=True)
class Array(Value):
    type_name: ClassVar[str] = 'Array'
    elements: Tuple[Value, ...]

    def __str__(self) -> str:
        return '[' + ', '.join(str(e) for e in self.elements) + ']'


@dataclass(frozen=True)
class Hash(Value):
    """A hash map keyed by Integer, String or Boolean values.

    Hashable values compare structurally, so the key objects themselves
    are used as dict keys. Insertion order is kept only for rendering.
    """
    type_name: ClassVar[str] = 'Hash'
    pairs: Dict[Value, Value]

    def __str__(self) -> str:
        return '{' + ', '.join(f"{k}: {v}" for k, v in self.pairs.items()) + '}'


HASHABLE_TYPES = (Integer, String, Boolean)


def is_hashable(value: Value) -> bool:
    return isinstance(value, HASHABLE_TYPES)


class ErrorKind(Enum):
    UNKNOWN_INFIX_OPERATOR = 'unknown_infix_operator'
    UNKNOWN_PREFIX_OPERATOR = 'unknown_prefix_operator'
    UNDEFINED_IDENTIFIER = 'undefined_identifier'
    CALL_NON_FUNCTION_VALUE = 'call_non_function_value'
    INVALID_ARGUMENT = 'invalid_argument'
    INVALID_NUMBER_OF_ARGUMENTS = 'invalid_number_of_arguments'
    INDEX_OPERATOR_NOT_SUPPORTED = 'index_operator_not_supported'
    INVALID_HASH_KEY = 'invalid_hash_key'
    DIVISION_BY_ZERO = 'division_by_zero'
    INTEGER_OVERFLOW = 'integer_overflow'
    RECURSION_DEPTH_EXCEEDED = 'recursion_depth_exceeded'

    @property
    def label(self) -> str:
        # Both operator kinds print the same way.
        if self in (ErrorKind.UNKNOWN_INFIX_OPERATOR, ErrorKind.UNKNOWN_PREFIX_OPERATOR):
            return 'unknown operator'
        if self is ErrorKind.RECURSION_DEPTH_EXCEEDED:
            return 'maximum recursion depth exceeded'
        return self.value.replace('_', ' ')


@dataclass(frozen=True)
class ErrorVal(Value):
    """A Monkey runtime error.

    Errors are first-class values: the evaluator returns them instead of
    raising, and every caller checks for them after each sub-evaluation.
    `context` holds the kind-specific detail shown after the kind label.
    """
    type_name: ClassVar[str] = 'Error'
    kind: ErrorKind
    context: str = ''

    @property
    def message(self) -> str:
        if not self.context:
            return self.kind.label
        return f"{self.kind.label} - {self.context}"

    def __str__(self) -> str:
        return f"Error: {self.message}"


# Constructors for each error kind. They keep the wording of error
# messages in one place.

def unknown_infix_operator(left: Value, operator: str, right: Value) -> ErrorVal:
    return ErrorVal(ErrorKind.UNKNOWN_INFIX_OPERATOR, f"{type_name(left)} {operator} {type_name(right)}")


def unknown_prefix_operator(operator: str, right: Value) -> ErrorVal:
    return ErrorVal(ErrorKind.UNKNOWN_PREFIX_OPERATOR, f"{operator}{type_name(right)}")


def undefined_identifier(name: str) -> ErrorVal:
    return ErrorVal(ErrorKind.UNDEFINED_IDENTIFIER, name)


def call_non_function_value(value: Value) -> ErrorVal:
    return ErrorVal(ErrorKind.CALL_NON_FUNCTION_VALUE, type_name(value))


def invalid_argument(value: Value, function_name: str) -> ErrorVal:
    return ErrorVal(ErrorKind.INVALID_ARGUMENT, f"type: {type_name(value)}, function name: {function_name}")


def invalid_number_of_arguments(function_name: str, expected: int, got: int) -> ErrorVal:
    return ErrorVal(
        ErrorKind.INVALID_NUMBER_OF_ARGUMENTS,
        f"function name: {function_name}, expected: {expected}, got: {got}",
    )


def index_operator_not_supported(value: Value) -> ErrorVal:
    return ErrorVal(ErrorKind.INDEX_OPERATOR_NOT_SUPPORTED, f"type: {type_name(value)}")


def invalid_hash_key(value: Value) -> ErrorVal:
    return ErrorVal(ErrorKind.INVALID_HASH_KEY, f"type: {type_name(value)}")


def is_error(value: object) -> bool:
    return isinstance(value, ErrorVal)


def type_name(value: Value) -> str:
    """Return the Monkey type name of a runtime value."""
    return value.type_name


def is_truthy(value: Value) -> bool:
    """Only `false` and `null` are falsy; everything else, 0 included, is truthy."""
    if value is NULL:
        return False
    if isinstance(value, Boolean):
        return value.value
    return True


def native_bool_to_boolean(value: bool) -> Boolean:
    return TRUE if value else FALSE


def make_integer(value: int) -> Value:
    """Wrap a Python int, reporting results outside the signed 64-bit range."""
    if value < INT64_MIN or value > INT64_MAX:
        return ErrorVal(ErrorKind.INTEGER_OVERFLOW, str(value))
    return Integer(value)
