"""Lexer for the Monkey language.

The lexer walks the source one character at a time and hands out tokens
on demand through `next_token`. Every multi-character token class is
decided by its first character, so a single character of lookahead is
all the scanner needs. There is no escape processing in string literals
and no error channel: anything unrecognised becomes an ILLEGAL token and
is reported later by the parser.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from .tokens import SINGLE_CHAR_TOKENS, Token, TokenKind, lookup_ident


def is_identifier_char(ch: str) -> bool:
    return ch.isalpha() or ch == '_'


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.position = 0       # index of self.ch
        self.read_position = 0  # index of the next character to read
        self.ch: Optional[str] = None
        self.read_char()

    def read_char(self) -> None:
        if self.read_position >= len(self.source):
            self.ch = None
        else:
            self.ch = self.source[self.read_position]
        self.position = self.read_position
        self.read_position += 1

    def peek_char(self) -> Optional[str]:
        if self.read_position >= len(self.source):
            return None
        return self.source[self.read_position]

    def next_token(self) -> Token:
        self.skip_whitespace()
        ch = self.ch
        if ch is None:
            return Token(TokenKind.EOF, '')

        if ch == '=':
            if self.peek_char() == '=':
                self.read_char()
                self.read_char()
                return Token(TokenKind.EQ, '==')
            token = Token(TokenKind.ASSIGN, ch)
        elif ch == '!':
            if self.peek_char() == '=':
                self.read_char()
                self.read_char()
                return Token(TokenKind.NOT_EQ, '!=')
            token = Token(TokenKind.BANG, ch)
        elif ch in SINGLE_CHAR_TOKENS:
            token = Token(SINGLE_CHAR_TOKENS[ch], ch)
        elif ch == '"':
            return Token(TokenKind.STRING, self.read_string())
        elif is_identifier_char(ch):
            return lookup_ident(self.read_identifier())
        elif ch.isdigit():
            return Token(TokenKind.INT, self.read_number())
        else:
            token = Token(TokenKind.ILLEGAL, ch)

        self.read_char()
        return token

    def skip_whitespace(self) -> None:
        while self.ch is not None and self.ch.isspace():
            self.read_char()

    def read_identifier(self) -> str:
        start = self.position
        while self.ch is not None and is_identifier_char(self.ch):
            self.read_char()
        return self.source[start:self.position]

    def read_number(self) -> str:
        start = self.position
        while self.ch is not None and self.ch.isdigit():
            self.read_char()
        return self.source[start:self.position]

    def read_string(self) -> str:
        # Unterminated strings run to the end of the input.
        self.read_char()
        start = self.position
        while self.ch is not None and self.ch != '"':
            self.read_char()
        literal = self.source[start:self.position]
        self.read_char()
        return literal

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including the first EOF token."""
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenKind.EOF:
                return


def tokenize(source: str) -> List[Token]:
    """Convert source code into a list of tokens ending with EOF."""
    return list(Lexer(source))
