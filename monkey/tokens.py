"""Token definitions for the Monkey language.

A token is a (kind, literal) pair produced by the lexer. Keywords are
recognised by a static lookup over identifier text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    ILLEGAL = 'ILLEGAL'
    EOF = 'EOF'

    # Identifiers and literals
    IDENT = 'IDENT'
    INT = 'INT'
    STRING = 'STRING'

    # Operators
    ASSIGN = '='
    PLUS = '+'
    MINUS = '-'
    BANG = '!'
    ASTERISK = '*'
    SLASH = '/'
    LT = '<'
    GT = '>'
    EQ = '=='
    NOT_EQ = '!='

    # Delimiters
    COMMA = ','
    COLON = ':'
    SEMICOLON = ';'
    LPAREN = '('
    RPAREN = ')'
    LBRACE = '{'
    RBRACE = '}'
    LBRACKET = '['
    RBRACKET = ']'

    # Keywords
    FUNCTION = 'FUNCTION'
    LET = 'LET'
    TRUE = 'TRUE'
    FALSE = 'FALSE'
    IF = 'IF'
    ELSE = 'ELSE'
    RETURN = 'RETURN'

    def __str__(self) -> str:
        return self.name


KEYWORDS = {
    'fn': TokenKind.FUNCTION,
    'let': TokenKind.LET,
    'true': TokenKind.TRUE,
    'false': TokenKind.FALSE,
    'if': TokenKind.IF,
    'else': TokenKind.ELSE,
    'return': TokenKind.RETURN,
}

# Characters that always form a token on their own. '=' and '!' are
# handled separately because they may start a two-character operator.
SINGLE_CHAR_TOKENS = {
    '+': TokenKind.PLUS,
    '-': TokenKind.MINUS,
    '*': TokenKind.ASTERISK,
    '/': TokenKind.SLASH,
    '<': TokenKind.LT,
    '>': TokenKind.GT,
    ',': TokenKind.COMMA,
    ':': TokenKind.COLON,
    ';': TokenKind.SEMICOLON,
    '(': TokenKind.LPAREN,
    ')': TokenKind.RPAREN,
    '{': TokenKind.LBRACE,
    '}': TokenKind.RBRACE,
    '[': TokenKind.LBRACKET,
    ']': TokenKind.RBRACKET,
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    literal: str

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.literal!r})"


def lookup_ident(identifier: str) -> Token:
    """Return a keyword token for `identifier`, or a plain IDENT token."""
    return Token(KEYWORDS.get(identifier, TokenKind.IDENT), identifier)
