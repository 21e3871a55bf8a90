import json

import pytest

from monkey.__main__ import Shell, main
from monkey.environment import Environment
from monkey.interpreter import Interpreter


def write_program(tmp_path, source, name='prog.monkey'):
    path = tmp_path / name
    path.write_text(source, encoding='utf-8')
    return path


def test_runs_program_file_and_prints_result(tmp_path, capsys):
    path = write_program(tmp_path, 'puts("hi"); let a = 20; a * 2 + 2')
    main([str(path)])
    assert capsys.readouterr().out == 'hi\n42\n'


def test_program_without_final_value_prints_only_output(tmp_path, capsys):
    path = write_program(tmp_path, 'let a = 1;')
    main([str(path)])
    assert capsys.readouterr().out == ''


def test_parse_errors_are_listed(tmp_path, capsys):
    path = write_program(tmp_path, 'let x 5;\n)')
    with pytest.raises(SystemExit) as excinfo:
        main([str(path)])
    assert excinfo.value.code == 1
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == 'Parse failed with error(s):'
    assert lines[1] == '    Invalid token is found. Expected to be: ASSIGN, got: INT'
    assert lines[2] == '    No expression can start with token: RPAREN'


def test_runtime_error_is_printed_and_exits_nonzero(tmp_path, capsys):
    path = write_program(tmp_path, '5 + true')
    with pytest.raises(SystemExit) as excinfo:
        main([str(path)])
    assert excinfo.value.code == 1
    assert 'Error: unknown operator - Integer + Boolean' in capsys.readouterr().out


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / 'nope.monkey')])
    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert 'error: ' in err
    assert 'nope.monkey not found' in err


def test_emit_ast_then_run_it(tmp_path, capsys):
    path = write_program(tmp_path, 'let sq = fn(x) { x * x }; sq(7)')
    main(['--emit-ast', str(path)])
    ast_path = tmp_path / 'prog.monkey.ast.json'
    assert capsys.readouterr().out.strip() == str(ast_path)
    assert json.loads(ast_path.read_text(encoding='utf-8'))['type'] == 'Program'

    main(['--ast', str(ast_path)])
    assert capsys.readouterr().out == '49\n'


def test_invalid_ast_file(tmp_path, capsys):
    path = write_program(tmp_path, '{"type": "Nope"}', name='bad.ast.json')
    with pytest.raises(SystemExit):
        main(['--ast', str(path)])
    assert 'invalid AST file' in capsys.readouterr().err


def test_verbose_flag_writes_trace(tmp_path, capsys):
    path = write_program(tmp_path, '1 + 2')
    debug_file = tmp_path / 'trace.txt'
    main(['-v', '--debug-file', str(debug_file), str(path)])
    assert capsys.readouterr().out == '3\n'
    assert '(1 + 2) => Integer(value=3)' in debug_file.read_text(encoding='utf-8')


def test_emit_ast_and_ast_are_exclusive(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(['--emit-ast', 'a.monkey', '--ast', 'a.ast.json'])
    assert excinfo.value.code == 2


def make_shell():
    return Shell(Interpreter(), Environment())


def test_shell_keeps_bindings_between_lines(capsys):
    shell = make_shell()
    assert not shell.onecmd('let add = fn(a, b) { a + b };')
    assert not shell.onecmd('let x = 40;')
    assert not shell.onecmd('add(x, 2)')
    assert capsys.readouterr().out == '42\n'
    assert 'add' in shell.env


def test_shell_prints_parse_errors_and_keeps_going(capsys):
    shell = make_shell()
    shell.onecmd('let = 1;')
    out = capsys.readouterr().out
    assert out.startswith('Parse failed with error(s):\n')
    shell.onecmd('"still" + " alive"')
    assert capsys.readouterr().out == 'still alive\n'


def test_shell_prints_runtime_errors(capsys):
    shell = make_shell()
    shell.onecmd('missing')
    assert 'Error: undefined identifier - missing' in capsys.readouterr().out


def test_shell_lines_starting_with_operators(capsys):
    shell = make_shell()
    shell.onecmd('!true')
    shell.onecmd('-5 * 2')
    shell.onecmd('[1, 2][0]')
    assert capsys.readouterr().out == 'false\n-10\n1\n'


def test_shell_empty_line_does_nothing(capsys):
    shell = make_shell()
    shell.onecmd('1 + 1')
    capsys.readouterr()
    assert not shell.onecmd('')
    assert capsys.readouterr().out == ''


def test_shell_exit_and_eof():
    shell = make_shell()
    assert shell.onecmd('exit')
    assert shell.onecmd('EOF')


def test_repl_session_from_stdin(monkeypatch, capsys):
    monkeypatch.setattr('sys.stdin', __import__('io').StringIO('let a = 3;\na * a\nexit\n'))
    main(['repl'])
    out = capsys.readouterr().out
    assert '9\n' in out
    assert 'monkey> ' in out


def test_shell_evaluates_lines_named_like_shell_commands(capsys):
    shell = make_shell()
    assert not shell.onecmd('let help = 5;')
    assert not shell.onecmd('help')
    assert not shell.onecmd('let exit_code = fn(x) { x * 2 }; exit_code(21)')
    assert capsys.readouterr().out == '5\n42\n'


def test_shell_question_mark_is_monkey_input(capsys):
    shell = make_shell()
    assert not shell.onecmd('?')
    assert capsys.readouterr().out.startswith('Parse failed with error(s):\n')


def test_ast_file_with_misplaced_node(tmp_path, capsys):
    document = {
        'type': 'Program',
        'statements': [{'type': 'Identifier', 'token': {'kind': 'IDENT', 'literal': 'x'}, 'value': 'x'}],
    }
    path = write_program(tmp_path, json.dumps(document), name='misplaced.ast.json')
    with pytest.raises(SystemExit) as excinfo:
        main(['--ast', str(path)])
    assert excinfo.value.code == 1
    assert 'statement must be Statement, got Identifier' in capsys.readouterr().err


def test_ast_file_that_is_not_a_program(tmp_path, capsys):
    document = {'type': 'Identifier', 'token': {'kind': 'IDENT', 'literal': 'x'}, 'value': 'x'}
    path = write_program(tmp_path, json.dumps(document), name='bare.ast.json')
    with pytest.raises(SystemExit):
        main(['--ast', str(path)])
    assert 'document must be Program' in capsys.readouterr().err
