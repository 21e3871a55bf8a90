"""CLI entry point for the Monkey interpreter.

Usage:
    python -m monkey [-v|-vv|-vvv] [repl]
    python -m monkey [-v...] <program_file>
    python -m monkey [-v...] --emit-ast <program_file>
    python -m monkey [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --debug-file  Where trace lines go when -v is given (default: debug.txt)
  --emit-ast    Parse the given .monkey file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a program file (or with the word `repl`) an interactive session
starts. Every line is parsed and evaluated on its own, but all lines
share one environment, so `let` bindings persist until `exit`.
"""

import argparse
import cmd
import json
import sys
from pathlib import Path
from typing import List, Optional

from termcolor import colored

from .ast_json import ast_to_obj, program_from_obj
from .environment import Environment
from .errors import AstFormatError, ParseError
from .interpreter import Interpreter, parse_program, run_line
from .types import ErrorVal, Value

ERROR = "red"


def print_error(msg: str) -> None:
    print(colored("error: ", ERROR, attrs=["bold"]) + msg, file=sys.stderr)


def print_parse_errors(errors: List[ParseError]) -> None:
    print("Parse failed with error(s):")
    for error in errors:
        print(f"    {error}")


def print_result(value: Optional[Value]) -> None:
    if value is None:
        return
    if isinstance(value, ErrorVal):
        print(colored(str(value), ERROR))
    else:
        print(value)


def read_source(path_arg: str) -> str:
    path = Path(path_arg)
    if not path.exists():
        print_error(f"file {path} not found")
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


class Shell(cmd.Cmd):
    """Interactive Monkey session."""
    intro = "Monkey interpreter\nType 'exit' to leave."
    prompt = "monkey> "

    def __init__(self, interpreter: Interpreter, env: Optional[Environment] = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.interpreter = interpreter
        self.env = env if env is not None else Environment()

    def onecmd(self, line):
        """Only a bare `exit` (or end of input) is a command; any other line is Monkey source."""
        line = line.strip()
        if not line:
            return self.emptyline()
        if line == 'exit':
            return self.do_exit('')
        if line == 'EOF':
            return self.do_EOF('')
        self.default(line)
        return False

    def default(self, line):
        """Evaluates a line of Monkey source."""
        errors, value = run_line(line, self.env, self.interpreter)
        if errors:
            print_parse_errors(errors)
        else:
            print_result(value)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog='monkey', description="Monkey language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--debug-file', default='debug.txt', help='file receiving trace output when -v is given')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='MONKEY_FILE', help='emit AST JSON for the given .monkey file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help="Monkey program file to execute, or 'repl'")
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        program, errors = parse_program(read_source(args.emit_ast))
        if errors:
            print_parse_errors(errors)
            sys.exit(1)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    with Interpreter(debug_level=args.v, debug_file=args.debug_file) as interpreter:
        # Execute from AST JSON
        if args.ast:
            try:
                program = program_from_obj(json.loads(read_source(args.ast)))
            except (json.JSONDecodeError, AstFormatError) as e:
                print_error(f"invalid AST file {args.ast}: {e}")
                sys.exit(1)
            result = interpreter.evaluate(program, Environment())
            print_result(result)
            if isinstance(result, ErrorVal):
                sys.exit(1)
            return

        if args.program is None or args.program == 'repl':
            Shell(interpreter).cmdloop()
            return

        errors, result = run_line(read_source(args.program), Environment(), interpreter)
        if errors:
            print_parse_errors(errors)
            sys.exit(1)
        print_result(result)
        if isinstance(result, ErrorVal):
            sys.exit(1)


if __name__ == '__main__':
    main()
