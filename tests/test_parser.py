import pytest
from hypothesis import given

from numex.ast import (
    Assign,
    BinaryOp,
    Block,
    Call,
    Constant,
    FunctionDef,
    MatrixLiteral,
    Parenthesis,
    Range,
    Symbol,
    UnaryOp,
)
from numex.exceptions import ParseError
from numex.hypothesis import expressions
from numex.numbers import Decimal, Float, Rational
from numex.parser import Parser, parse

num = lambda x: Constant(Float(x))
x, y, z = Symbol("x"), Symbol("y"), Symbol("z")


class TestParser:
    def test_precedence(self):
        assert parse("1 + 2 * 3") == BinaryOp("+", num(1), BinaryOp("*", num(2), num(3)))
        assert parse("1 + 1 == 2") == BinaryOp("==", BinaryOp("+", num(1), num(1)), num(2))
        assert parse("x * y ^ 2") == BinaryOp("*", x, BinaryOp("^", y, num(2)))

    def test_associativity(self):
        assert parse("1 - 2 - 3") == BinaryOp("-", BinaryOp("-", num(1), num(2)), num(3))
        assert parse("2 ^ 3 ^ 2") == BinaryOp("^", num(2), BinaryOp("^", num(3), num(2)))

    def test_unary_binds_tighter_than_power(self):
        assert parse("-2^2") == BinaryOp("^", UnaryOp("-", num(2)), num(2))
        assert parse("2^-1") == BinaryOp("^", num(2), UnaryOp("-", num(1)))

    def test_factorial(self):
        assert parse("3!") == UnaryOp("!", num(3))
        assert parse("-3!") == UnaryOp("-", UnaryOp("!", num(3)))
        assert parse("x!!") == UnaryOp("!", UnaryOp("!", x))

    def test_ranges(self):
        assert parse("1:3") == Range(num(1), None, num(3))
        assert parse("1:2:9") == Range(num(1), num(2), num(9))
        assert parse("1:x+1") == Range(num(1), None, BinaryOp("+", x, num(1)))

    def test_calls(self):
        assert parse("f(x, 2)") == Call("f", [x, num(2)])
        assert parse("f()") == Call("f", [])

    def test_function_definitions(self):
        expected = FunctionDef("f", ["x", "y"], BinaryOp("+", x, y))
        assert parse("f(x, y) = x + y") == expected
        assert parse("g() = 42") == FunctionDef("g", [], num(42))

    def test_assignments(self):
        assert parse("x = y = 2") == Assign("x", Assign("y", num(2)))

    def test_matrices(self):
        row = lambda *xs: MatrixLiteral([num(v) for v in xs])
        assert parse("[[1, 2], [3, 4]]") == MatrixLiteral([row(1, 2), row(3, 4)])
        assert parse("[]") == MatrixLiteral([])

    def test_parenthesis_are_kept(self):
        expected = BinaryOp("*", Parenthesis(BinaryOp("+", num(1), num(2))), num(3))
        assert parse("(1 + 2) * 3") == expected

    def test_strings(self):
        assert parse('"hello"') == Constant("hello")
        assert parse('"a" == "b"') == BinaryOp("==", Constant("a"), Constant("b"))

    def test_blocks(self):
        assert parse("a = 1; b = 2\na + b") == Block([
            Assign("a", num(1)),
            Assign("b", num(2)),
            BinaryOp("+", Symbol("a"), Symbol("b")),
        ])
        assert parse("1\n") == num(1)

    def test_kinds_of_numbers(self):
        assert parse("0.5", number="rational") == Constant(Rational(1, 2))
        assert parse("0.1", number="decimal", precision=10) == Constant(Decimal("0.1", 10))
        assert parse("1", number="rational") != num(1)

    @pytest.mark.parametrize("kind, cls", [("float", Float), ("decimal", Decimal), ("rational", Rational)])
    def test_literals_of_every_kind(self, kind, cls):
        tree = parse("x = 2 * 3", number=kind)
        assert tree == Assign("x", BinaryOp("*", Constant(cls(2)), Constant(cls(3))))
        assert all(type(node.value) is cls for node in tree.filter(lambda n: isinstance(n, Constant)))

    def test_parsing_is_pure(self):
        src = "f(x) = x ^ 2 + [1, 2]"
        assert parse(src) == parse(src)
        assert hash(parse(src)) == hash(parse(src))

    def test_parser_is_callable(self):
        parser = Parser(number="rational")
        assert parser("1/2") == BinaryOp("/", Constant(Rational(1)), Constant(Rational(2)))
        assert [tk.type for tk in parser.lex("1/2")] == ["NUMBER", "MUL_OP", "NUMBER"]


class TestParseErrors:
    def test_unexpected_token(self):
        with pytest.raises(ParseError) as exc:
            parse("1 + * 2")
        assert exc.value.offset == 4
        assert "'*'" in str(exc.value)

    def test_unexpected_end_of_input(self):
        with pytest.raises(ParseError) as exc:
            parse("(1 + 2")
        assert exc.value.offset == 6
        assert str(exc.value) == "unexpected end of input (line 1, column 7)"

    def test_error_location_in_multiline_source(self):
        with pytest.raises(ParseError) as exc:
            parse("x = 1\ny = )")
        assert exc.value.offset == 10
        assert (exc.value.line, exc.value.column) == (2, 5)

    def test_empty_source(self):
        with pytest.raises(ParseError):
            parse("  \n ")

    def test_invalid_parameters(self):
        with pytest.raises(ParseError) as exc:
            parse("f(1) = 2")
        assert exc.value.offset == 0
        with pytest.raises(ParseError):
            parse("y = f(x, x) = 1")

    def test_lexer_errors_report_position(self):
        with pytest.raises(ParseError) as exc:
            parse("1 + 2 @ 3")
        assert exc.value.offset == 6


class TestSource:
    @pytest.mark.parametrize("src", [
        "1 + 2 * 3",
        "(1 + 2) * 3",
        "2 ^ 3 ^ 2",
        "(2 ^ 3) ^ 2",
        "-2 ^ 2",
        "-(2 ^ 2)",
        "a - (b - c)",
        "a - b - c",
        "f(x, y) = x * y",
        "[[1, 2], [3, 4]]",
        "1:2:10",
        '"a" == "b"',
        "x = 3!",
    ])
    def test_source_round_trip(self, src):
        assert str(parse(src)) == src

    def test_minimal_parenthesis(self):
        a, b, c = Symbol("a"), Symbol("b"), Symbol("c")
        assert str(BinaryOp("-", a, BinaryOp("-", b, c))) == "a - (b - c)"
        assert str(BinaryOp("^", BinaryOp("^", a, b), c)) == "(a ^ b) ^ c"
        assert str(BinaryOp("^", a, BinaryOp("^", b, c))) == "a ^ b ^ c"
        assert str(UnaryOp("!", UnaryOp("-", a))) == "(-a)!"
        assert str(BinaryOp("^", a, Constant(Rational(1, 3)))) == "a ^ (1/3)"

    @given(expressions())
    def test_printed_source_is_stable(self, expr):
        src = str(expr)
        assert str(parse(src)) == src
