import math

import pytest

from numex import Engine, Matrix, Scope
from numex.evaluator import FunctionValue
from numex.exceptions import (
    ArityMismatch,
    DivisionByZero,
    EmptyProgram,
    ParseError,
    RecursionLimitExceeded,
    ShapeMismatch,
    UndefinedSymbol,
    UnsupportedOperand,
)
from numex.numbers import Float, Rational


@pytest.fixture(scope="module")
def engine():
    return Engine()


@pytest.fixture(scope="module")
def rational():
    return Engine(number="rational")


@pytest.fixture(scope="module")
def array():
    return Engine(matrix="array")


class TestArithmetic:
    def test_operators(self, engine):
        ev = engine.evaluate
        assert ev("1 + 2 * 3") == 7
        assert ev("2^3^2") == 512
        assert ev("-2^2") == 4
        assert ev("7 % 3") == 1
        assert ev("10 / 4") == 2.5
        assert ev("3!") == 6
        assert isinstance(ev("1 + 1"), Float)

    def test_comparisons_return_booleans(self, engine):
        assert engine.evaluate("1 < 2") is True
        assert engine.evaluate("2 == 3") is False
        assert engine.evaluate("1 + 1 >= 2") is True

    def test_rational_arithmetic(self, rational):
        assert rational.evaluate("1/3 + 3/7") == Rational(16, 21)
        assert rational.evaluate("(1/3) / (3/7)") == Rational(7, 9)
        assert isinstance(rational.evaluate("2 * 3"), Rational)

    def test_float_division_by_zero(self, engine):
        assert engine.evaluate("1/0").to_number() == math.inf
        assert engine.evaluate("-1/0").to_number() == -math.inf
        assert engine.evaluate("0/0").is_nan()

    def test_exact_division_by_zero(self, rational):
        with pytest.raises(DivisionByZero):
            rational.evaluate("1/0")
        with pytest.raises(DivisionByZero):
            Engine(number="decimal").evaluate("1/0")

    def test_strings_and_constants(self, engine):
        assert engine.evaluate('"abc"') == "abc"
        assert engine.evaluate("pi") == math.pi
        assert engine.evaluate("true") is True


class TestScopes:
    def test_undefined_symbol(self, engine):
        with pytest.raises(UndefinedSymbol) as exc:
            engine.evaluate("x + 1")
        assert exc.value.name == "x"
        with pytest.raises(UndefinedSymbol):
            engine.evaluate("foo(1)")

    def test_assignment_writes_to_dictionary(self, engine):
        scope = {}
        assert engine.evaluate("x = 2", scope) == 2
        assert scope == {"x": 2}

    def test_python_values_are_coerced(self, engine, rational):
        assert engine.evaluate("x / y", {"x": 3, "y": 2}) == 1.5
        assert rational.evaluate("x / y", {"x": 3, "y": 2}) == Rational(3, 2)

    def test_statements_share_scope(self, engine):
        assert engine.evaluate(["f = 3", "g = 4", "f * g"]) == 12
        assert engine.evaluate("a = 2; b = 3; a * b") == 6

    def test_empty_programs(self, engine):
        with pytest.raises(EmptyProgram):
            engine.evaluate([])
        with pytest.raises(EmptyProgram):
            engine.evaluate("   ")

    def test_parse_errors_propagate(self, engine):
        with pytest.raises(ParseError):
            engine.evaluate("1 +")

    def test_scope_objects(self, engine):
        parent = Scope({"a": 1})
        child = parent.child()
        assert engine.evaluate("b = a + 1", child) == 2
        assert "b" in child and "b" not in parent


class TestFunctions:
    def test_function_definition(self, engine):
        scope = Scope()
        engine.evaluate("f(x) = x^2", scope)
        assert engine.evaluate("f(2)", scope) == 4
        with pytest.raises(ArityMismatch):
            engine.evaluate("f(2, 3)", scope)

    def test_function_values_are_callables(self, engine):
        f = engine.evaluate("f(x, y) = x * y")
        assert isinstance(f, FunctionValue)
        assert f(3, 4) == 12
        assert f.arity == 2
        assert str(f) == "f(x, y) = x * y"

    def test_closures_see_the_defining_scope(self, engine):
        assert engine.evaluate(["a = 2", "g(x) = a * x", "a = 3", "g(2)"]) == 6

    def test_parameters_shadow_outer_names(self, engine):
        scope = {}
        assert engine.evaluate(["x = 10", "h(x) = x + 1", "h(1)"], scope) == 2
        assert scope["x"] == 10

    def test_local_assignments_do_not_leak(self, engine):
        with pytest.raises(UndefinedSymbol):
            engine.evaluate(["k(y) = (z = y)", "k(1)", "z"])

    def test_recursion_limit(self, engine):
        with pytest.raises(RecursionLimitExceeded):
            engine.evaluate(["r(n) = r(n)", "r(1)"])

    def test_max_depth_bounds_nested_calls(self):
        program = ["f(x) = x + 1", "g(x) = f(x) * 2", "h(x) = g(x) - 1", "h(1)"]
        assert Engine(max_depth=3).evaluate(program) == 3
        with pytest.raises(RecursionLimitExceeded) as exc:
            Engine(max_depth=2).evaluate(program)
        assert str(exc.value) == "f() called more than 2 levels deep"
        assert Engine(max_depth=2).evaluate("((((((1))))))") == 1

    def test_depth_is_restored_after_errors(self):
        engine = Engine(max_depth=3)
        with pytest.raises(RecursionLimitExceeded):
            engine.evaluate(["r(n) = r(n)", "r(1)"])
        assert engine.evaluator.depth == 0
        assert engine.evaluate(["f(x) = x", "g(x) = f(x)", "g(4)"]) == 4

    def test_long_flat_expressions(self, engine, rational):
        assert engine.evaluate(" + ".join(["1"] * 500)) == 500
        assert rational.evaluate(" - ".join(["1"] * 500)) == -498
        assert engine.evaluate("2 * " + " * ".join(["1"] * 500) + " + 3^2") == 11

    def test_host_callables(self, engine):
        assert engine.evaluate("double(4)", {"double": lambda x: x * 2}) == 8
        assert engine.evaluate("n()", {"n": lambda: 42}) == 42
        with pytest.raises(UnsupportedOperand):
            engine.evaluate("n(1)", {"n": 42})

    def test_operators_are_resolved_in_registry(self):
        engine = Engine()
        engine.import_({"add": lambda a, b: "patched"}, override=True)
        assert engine.evaluate("1 + 2") == "patched"
        assert engine.evaluate("add(1, 2)") == "patched"

    def test_operations_are_values(self, engine):
        assert engine.evaluate("map([1, 4, 9], sqrt)") == [1, 2, 3]
        assert engine.evaluate(["sq(x) = x^2", "map([1, 2, 3], sq)"]) == [1, 4, 9]
        assert engine.evaluate(["big(x) = x > 1", "filter([1, 2, 3], big)"]) == [2, 3]

    def test_evaluate_operation(self, engine):
        assert engine.evaluate('evaluate("1 + 2")') == 3


class TestContainers:
    def test_matrix_literals(self, engine, array):
        value = engine.evaluate("[[1, 2], [3, 4]]")
        assert isinstance(value, Matrix)
        assert value == Matrix([[1, 2], [3, 4]])
        assert value.size() == [2, 2]
        assert array.evaluate("[1, 2]") == [1, 2]
        assert isinstance(array.evaluate("[1, 2]"), list)

    def test_ragged_matrices(self, engine, array):
        with pytest.raises(ShapeMismatch):
            engine.evaluate("[[1, 2], [3]]")
        with pytest.raises(ShapeMismatch):
            array.evaluate("[[1, 2], [3]]")

    def test_broadcasting(self, engine, array):
        assert engine.evaluate("[1, 2] + 1") == Matrix([2, 3])
        assert array.evaluate("add(4, [5, 6])") == [9, 10]
        assert array.evaluate("[1, 2] * [3, 4]") == [3, 8]
        with pytest.raises(ShapeMismatch):
            engine.evaluate("[1, 2] + [1, 2, 3]")

    def test_ranges_include_the_end(self, array):
        assert array.evaluate("1:4") == [1, 2, 3, 4]
        assert array.evaluate("0:2:6") == [0, 2, 4, 6]
        assert array.evaluate("3:-1:1") == [3, 2, 1]
        assert array.evaluate("n = 3; 1:n") == [1, 2, 3]

    def test_filter_preserves_order_and_input(self, array):
        scope = {"data": [6, -2, -1, 4, 3]}
        assert array.evaluate("filter(data, is_positive)", scope) == [6, 4, 3]
        assert array.evaluate("map(data, square)", scope) == [36, 4, 1, 16, 9]
        assert scope["data"] == [6, -2, -1, 4, 3]

    @pytest.mark.parametrize("src", ["1 + 2 * 3", "2 ^ 0.5", "(1 - 3) / 7", "5! / 3", "sum(1:10)"])
    def test_evaluation_is_deterministic(self, engine, src):
        assert engine.evaluate(engine.parse(src), {}) == engine.evaluate(engine.parse(src), {})

    def test_compiled_expressions(self, engine):
        code = engine.compile("x^2 + 1")
        assert code.evaluate({"x": 2}) == 5
        assert code.evaluate({"x": 3}) == 10
        assert str(code) == "x ^ 2 + 1"
