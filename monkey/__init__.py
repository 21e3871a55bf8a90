# Monkey language package
# This package provides a lexer, parser and tree-walking interpreter for the Monkey language.
from .environment import Environment
from .interpreter import run_program, run_line, parse_program, Interpreter
from .lexer import Lexer
from .parser import Parser

__all__ = [
    'run_program',
    'run_line',
    'parse_program',
    'Interpreter',
    'Environment',
    'Lexer',
    'Parser',
]
