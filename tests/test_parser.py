import pytest

from monkey.ast import (
    ArrayLiteral, BlockStatement, BooleanLiteral, CallExpression,
    ExpressionStatement, FunctionLiteral, HashLiteral, Identifier, IfExpression,
    IndexExpression, InfixExpression, IntegerLiteral, LetStatement,
    PrefixExpression, ReturnStatement, StringLiteral,
)
from monkey.errors import ParseErrorKind
from monkey.parser import Parser, parse_program
from monkey.tokens import TokenKind


def parse_ok(source):
    program, errors = parse_program(source)
    assert errors == [], [str(e) for e in errors]
    return program


def single_expression(source):
    program = parse_ok(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


@pytest.mark.parametrize('source, name, value', [
    ('let x = 5;', 'x', 5),
    ('let y = true;', 'y', True),
    ('let foobar = y;', 'foobar', 'y'),
])
def test_let_statements(source, name, value):
    program = parse_ok(source)
    stmt, = program.statements
    assert isinstance(stmt, LetStatement)
    assert stmt.token_literal() == 'let'
    assert stmt.name.value == name
    assert stmt.value.value == value


@pytest.mark.parametrize('source, value', [
    ('return 5;', 5),
    ('return true;', True),
    ('return foobar;', 'foobar'),
])
def test_return_statements(source, value):
    stmt, = parse_ok(source).statements
    assert isinstance(stmt, ReturnStatement)
    assert stmt.token_literal() == 'return'
    assert stmt.return_value.value == value


def test_semicolons_are_optional_and_empty_statements_skipped():
    program = parse_ok(';; let a = 1\n a ;;')
    assert [type(s) for s in program.statements] == [LetStatement, ExpressionStatement]


def test_literal_expressions():
    assert single_expression('foobar;') == Identifier(single_expression('foobar').token, 'foobar')
    assert isinstance(single_expression('5;'), IntegerLiteral)
    assert single_expression('5;').value == 5
    assert single_expression('false').value is False
    assert isinstance(single_expression('true'), BooleanLiteral)
    string = single_expression('"hello world"')
    assert isinstance(string, StringLiteral)
    assert string.value == 'hello world'


def test_largest_integer_literal_is_accepted():
    assert single_expression('9223372036854775807').value == 2 ** 63 - 1


@pytest.mark.parametrize('source, operator, value', [
    ('!5;', '!', 5),
    ('-15;', '-', 15),
    ('!true;', '!', True),
])
def test_prefix_expressions(source, operator, value):
    expr = single_expression(source)
    assert isinstance(expr, PrefixExpression)
    assert expr.operator == operator
    assert expr.right.value == value


@pytest.mark.parametrize('operator', ['+', '-', '*', '/', '>', '<', '==', '!='])
def test_infix_expressions(operator):
    expr = single_expression(f'5 {operator} 6;')
    assert isinstance(expr, InfixExpression)
    assert expr.left.value == 5
    assert expr.operator == operator
    assert expr.right.value == 6


@pytest.mark.parametrize('source, expected', [
    ('-a * b', '((-a) * b)'),
    ('!-a', '(!(-a))'),
    ('a + b + c', '((a + b) + c)'),
    ('a + b - c', '((a + b) - c)'),
    ('a * b * c', '((a * b) * c)'),
    ('a * b / c', '((a * b) / c)'),
    ('a + b / c', '(a + (b / c))'),
    ('a + b * c', '(a + (b * c))'),
    ('a + b * c + d / e - f', '(((a + (b * c)) + (d / e)) - f)'),
    ('3 + 4; -5 * 5', '(3 + 4); ((-5) * 5)'),
    ('5 > 4 == 3 < 4', '((5 > 4) == (3 < 4))'),
    ('5 > 4 != 3 < 4', '((5 > 4) != (3 < 4))'),
    ('3 + 4 * 5 == 3 * 1 + 4 * 5', '((3 + (4 * 5)) == ((3 * 1) + (4 * 5)))'),
    ('true', 'true'),
    ('3 > 5 == false', '((3 > 5) == false)'),
    ('1 + (2 + 3) + 4', '((1 + (2 + 3)) + 4)'),
    ('(5 + 5) * 2', '((5 + 5) * 2)'),
    ('2 / (5 + 5)', '(2 / (5 + 5))'),
    ('-(5 + 5)', '(-(5 + 5))'),
    ('!(true == true)', '(!(true == true))'),
    ('a + add(b * c) + d', '((a + add((b * c))) + d)'),
    ('add(a, b, 1, 2 * 3, 4 + 5, add(6, 7 * 8))', 'add(a, b, 1, (2 * 3), (4 + 5), add(6, (7 * 8)))'),
    ('add(a + b + c * d / f + g)', 'add((((a + b) + ((c * d) / f)) + g))'),
    ('a * [1, 2, 3, 4][b * c] * d', '((a * ([1, 2, 3, 4][(b * c)])) * d)'),
    ('add(a * b[2], b[1], 2 * [1, 2][1])', 'add((a * (b[2])), (b[1]), (2 * ([1, 2][1])))'),
])
def test_operator_precedence_rendering(source, expected):
    assert str(parse_ok(source)) == expected


@pytest.mark.parametrize('source', [
    'let myVar = anotherVar;',
    'let a = 1; a + 2; return a;',
    'if (x < y) { x } else { y }',
    'if (a) { b } c',
    'let add = fn(x, y) { x + y; }; add(1, 2 * 3);',
    'fn() {}',
    'let s = "foo" + "bar";',
    '{"one": 1, 2: [true, false], true: fn(x) { x }}["one"]',
    'let f = fn(n) { if (n < 2) { return n; } f(n - 1) + f(n - 2) }; f(10)',
])
def test_rendering_reparses_to_the_same_program(source):
    rendered = str(parse_ok(source))
    assert str(parse_ok(rendered)) == rendered


def test_let_statement_rendering():
    assert str(parse_ok('let myVar = anotherVar;')) == 'let myVar = anotherVar;'


def test_if_expression():
    expr = single_expression('if (x < y) { x }')
    assert isinstance(expr, IfExpression)
    assert str(expr.condition) == '(x < y)'
    assert isinstance(expr.consequence, BlockStatement)
    consequence, = expr.consequence.statements
    assert consequence.expression.value == 'x'
    assert expr.alternative is None


def test_if_else_expression():
    expr = single_expression('if (x < y) { x } else { y }')
    alternative, = expr.alternative.statements
    assert alternative.expression.value == 'y'
    assert str(expr) == 'if ((x < y)) { x } else { y }'


def test_function_literal():
    expr = single_expression('fn(x, y) { x + y; }')
    assert isinstance(expr, FunctionLiteral)
    assert [p.value for p in expr.parameters] == ['x', 'y']
    body, = expr.body.statements
    assert str(body) == '(x + y)'


@pytest.mark.parametrize('source, expected', [
    ('fn() {};', []),
    ('fn(x) {x};', ['x']),
    ('fn(x, y, z) {};', ['x', 'y', 'z']),
])
def test_function_parameters(source, expected):
    assert [p.value for p in single_expression(source).parameters] == expected


@pytest.mark.parametrize('source, function, arguments', [
    ('add();', 'add', []),
    ('add(1);', 'add', ['1']),
    ('add(1, 2 * 3, 4 + 5);', 'add', ['1', '(2 * 3)', '(4 + 5)']),
])
def test_call_expressions(source, function, arguments):
    expr = single_expression(source)
    assert isinstance(expr, CallExpression)
    assert str(expr.function) == function
    assert [str(a) for a in expr.arguments] == arguments


def test_array_and_index_expressions():
    array = single_expression('[1, 2 * 2, 3 + 3]')
    assert isinstance(array, ArrayLiteral)
    assert [str(e) for e in array.elements] == ['1', '(2 * 2)', '(3 + 3)']
    assert single_expression('[]').elements == ()

    index = single_expression('myArray[1 + 1]')
    assert isinstance(index, IndexExpression)
    assert str(index.left) == 'myArray'
    assert str(index.index) == '(1 + 1)'


def test_hash_literals():
    expr = single_expression('{"one": 1, "two": 2, "three": 3}')
    assert isinstance(expr, HashLiteral)
    assert [(k.value, v.value) for k, v in expr.pairs] == [('one', 1), ('two', 2), ('three', 3)]

    assert single_expression('{}').pairs == ()

    with_expressions = single_expression('{"one": 0 + 1, "two": 10 - 8, "three": 15 / 5}')
    assert [str(v) for _, v in with_expressions.pairs] == ['(0 + 1)', '(10 - 8)', '(15 / 5)']

    mixed_keys = single_expression('{1: "a", true: "b",}')
    assert [type(k) for k, _ in mixed_keys.pairs] == [IntegerLiteral, BooleanLiteral]


def errors_for(source):
    _, errors = parse_program(source)
    assert errors, f'expected parse errors for {source!r}'
    return errors


def test_unexpected_token_error():
    error, = errors_for('let x 5;')
    assert error.kind is ParseErrorKind.UNEXPECTED_TOKEN
    assert error.expected is TokenKind.ASSIGN
    assert error.actual is TokenKind.INT
    assert str(error) == 'Invalid token is found. Expected to be: ASSIGN, got: INT'


def test_let_without_name():
    error = errors_for('let = 5;')[0]
    assert error.expected is TokenKind.IDENT
    assert error.actual is TokenKind.ASSIGN


def test_let_without_initial_value():
    error, = errors_for('let x = ;')
    assert error.kind is ParseErrorKind.INITIAL_VALUE_NOT_FOUND
    assert str(error) == "Initial value is not found after '=' for name: x"


def test_return_without_value():
    error, = errors_for('return;')
    assert error.kind is ParseErrorKind.RETURN_VALUE_NOT_FOUND


def test_prefix_and_infix_without_right_value():
    error, = errors_for('-;')
    assert error.kind is ParseErrorKind.PREFIX_RIGHT_VALUE_NOT_FOUND
    assert str(error) == 'Right value is not found after prefix operator: -'

    error, = errors_for('1 + ;')
    assert error.kind is ParseErrorKind.INFIX_RIGHT_VALUE_NOT_FOUND
    assert error.operator == '+'


def test_integer_literal_out_of_range():
    error, = errors_for('9223372036854775808')
    assert error.kind is ParseErrorKind.ILLEGAL_INTEGER_LITERAL
    assert error.literal == '9223372036854775808'


def test_token_that_cannot_start_an_expression():
    error, = errors_for(')')
    assert error.kind is ParseErrorKind.NO_PREFIX_PARSE
    assert str(error) == 'No expression can start with token: RPAREN'


def test_unterminated_block():
    error, = errors_for('if (x) { x')
    assert error.kind is ParseErrorKind.UNEXPECTED_TOKEN
    assert error.expected is TokenKind.RBRACE
    assert error.actual is TokenKind.EOF


def test_function_parameters_must_be_identifiers():
    error = errors_for('fn(1) {}')[0]
    assert error.expected is TokenKind.IDENT
    assert error.actual is TokenKind.INT


def test_unclosed_call_arguments():
    error = errors_for('add(1, 2')[0]
    assert error.expected is TokenKind.RPAREN
    assert error.actual is TokenKind.EOF


def test_illegal_character_is_reported():
    error = errors_for('let a = @;')[0]
    assert error.kind is ParseErrorKind.INITIAL_VALUE_NOT_FOUND


def test_parsing_continues_after_an_error():
    program, errors = parse_program('let x 5; let y = 10;')
    assert len(errors) == 1
    assert [str(s) for s in program.statements] == ['5', 'let y = 10;']


def test_deep_nesting_is_reported_instead_of_crashing():
    source = '(' * 30000 + '1' + ')' * 30000
    _, errors = parse_program(source)
    assert ParseErrorKind.NESTING_TOO_DEEP in [e.kind for e in errors]


def test_parser_from_source():
    parser = Parser.from_source('let a = 1;')
    program = parser.parse()
    assert parser.errors == []
    assert str(program) == 'let a = 1;'


def test_nesting_deeper_than_the_default_recursion_limit_parses():
    source = '(' * 2000 + '1' + ')' * 2000
    program = parse_ok(source)
    assert str(program) == '1'
