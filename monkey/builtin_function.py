from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, ClassVar, List, Mapping, Optional

from monkey.types import (
    NULL, Array, Integer, String, Value,
    invalid_argument, invalid_number_of_arguments,
)

NativeFn = Callable[[List[Value]], Value]


@dataclass(frozen=True, eq=False)
class BuiltinFunction(Value):
    type_name: ClassVar[str] = 'Builtin'
    name: str
    arity: Optional[int]  # None means variadic
    fn: NativeFn

    def __call__(self, args: List[Value]) -> Value:
        if self.arity is not None and len(args) != self.arity:
            return invalid_number_of_arguments(self.name, self.arity, len(args))
        return self.fn(args)

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"

    def __str__(self) -> str:
        return 'builtin function'


def builtin_len(args: List[Value]) -> Value:
    arg = args[0]
    if isinstance(arg, String):
        return Integer(len(arg.value))
    if isinstance(arg, Array):
        return Integer(len(arg.elements))
    return invalid_argument(arg, 'len')


def builtin_first(args: List[Value]) -> Value:
    arg = args[0]
    if not isinstance(arg, Array):
        return invalid_argument(arg, 'first')
    return arg.elements[0] if arg.elements else NULL


def builtin_last(args: List[Value]) -> Value:
    arg = args[0]
    if not isinstance(arg, Array):
        return invalid_argument(arg, 'last')
    return arg.elements[-1] if arg.elements else NULL


def builtin_rest(args: List[Value]) -> Value:
    arg = args[0]
    if not isinstance(arg, Array):
        return invalid_argument(arg, 'rest')
    return Array(arg.elements[1:])


def builtin_push(args: List[Value]) -> Value:
    array, item = args
    if not isinstance(array, Array):
        return invalid_argument(array, 'push')
    # Arrays are tuples, so the argument is never modified.
    return Array(array.elements + (item,))


def builtin_puts(args: List[Value]) -> Value:
    for arg in args:
        print(arg)
    return NULL


def make_builtins() -> Mapping[str, BuiltinFunction]:
    table = {
        'len': BuiltinFunction('len', 1, builtin_len),
        'first': BuiltinFunction('first', 1, builtin_first),
        'last': BuiltinFunction('last', 1, builtin_last),
        'rest': BuiltinFunction('rest', 1, builtin_rest),
        'push': BuiltinFunction('push', 2, builtin_push),
        'puts': BuiltinFunction('puts', None, builtin_puts),
    }
    return MappingProxyType(table)


# Process-wide, read-only table consulted after the environment chain misses.
BUILTINS = make_builtins()
