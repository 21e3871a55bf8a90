from dataclasses import dataclass
from enum import Enum
from typing import Optional

from monkey.tokens import TokenKind


class ParseErrorKind(Enum):
    UNEXPECTED_TOKEN = 'unexpected token'
    NO_PREFIX_PARSE = 'no prefix parse'
    INITIAL_VALUE_NOT_FOUND = 'initial value not found'
    RETURN_VALUE_NOT_FOUND = 'return value not found'
    PREFIX_RIGHT_VALUE_NOT_FOUND = 'prefix right value not found'
    INFIX_RIGHT_VALUE_NOT_FOUND = 'infix right value not found'
    ILLEGAL_INTEGER_LITERAL = 'illegal integer literal'
    ILLEGAL_BOOLEAN_LITERAL = 'illegal boolean literal'
    NESTING_TOO_DEEP = 'nesting too deep'


@dataclass(frozen=True)
class ParseError:
    """A structural error recorded by the parser.

    Only the fields relevant to `kind` are set; the rest stay None.
    """
    kind: ParseErrorKind
    expected: Optional[TokenKind] = None
    actual: Optional[TokenKind] = None
    name: Optional[str] = None
    operator: Optional[str] = None
    literal: Optional[str] = None

    def __str__(self) -> str:
        kind = self.kind
        if kind is ParseErrorKind.UNEXPECTED_TOKEN:
            return f"Invalid token is found. Expected to be: {self.expected}, got: {self.actual}"
        if kind is ParseErrorKind.NO_PREFIX_PARSE:
            return f"No expression can start with token: {self.actual}"
        if kind is ParseErrorKind.INITIAL_VALUE_NOT_FOUND:
            return f"Initial value is not found after '=' for name: {self.name}"
        if kind is ParseErrorKind.RETURN_VALUE_NOT_FOUND:
            return "Return value is not found after 'return'"
        if kind is ParseErrorKind.PREFIX_RIGHT_VALUE_NOT_FOUND:
            return f"Right value is not found after prefix operator: {self.operator}"
        if kind is ParseErrorKind.INFIX_RIGHT_VALUE_NOT_FOUND:
            return f"Right value is not found after infix operator: {self.operator}"
        if kind is ParseErrorKind.ILLEGAL_INTEGER_LITERAL:
            return f"Illegal character found in integer literal: {self.literal}"
        if kind is ParseErrorKind.ILLEGAL_BOOLEAN_LITERAL:
            return f"Illegal character found in boolean literal: {self.literal}"
        return "Expression nesting is too deep to parse"


class AstFormatError(ValueError):
    """Raised when a JSON AST document cannot be turned back into nodes."""
