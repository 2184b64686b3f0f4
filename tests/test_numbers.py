import math

import pytest
from hypothesis import given

from numex import numbers
from numex.exceptions import DivisionByZero, DomainError, UnsupportedOperand
from numex.hypothesis import rationals
from numex.numbers import Decimal, Float, Kind, Ordering, Rational, convert


class TestRational:
    def test_fractions_are_stored_in_lowest_terms(self):
        x = Rational(6, -8)
        assert (x.numerator, x.denominator) == (-3, 4)

    def test_zero_denominator_is_rejected(self):
        with pytest.raises(DivisionByZero):
            Rational(1, 0)

    def test_arithmetic_is_exact(self):
        a, b = Rational(1, 3), Rational(3, 7)
        assert numbers.add(a, b) == Rational(16, 21)
        assert numbers.subtract(a, b) == Rational(-2, 21)
        assert numbers.multiply(a, b) == Rational(1, 7)
        assert numbers.divide(a, b) == Rational(7, 9)

    def test_division_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            numbers.divide(Rational(1), Rational(0))
        with pytest.raises(DivisionByZero):
            numbers.mod(Rational(1), Rational(0))

    def test_modulo_has_the_sign_of_divisor(self):
        assert numbers.mod(Rational(7), Rational(3)) == 1
        assert numbers.mod(Rational(-7), Rational(3)) == 2

    def test_integer_powers_stay_exact(self):
        assert numbers.pow(Rational(2, 3), Rational(2)) == Rational(4, 9)
        assert numbers.pow(Rational(2, 3), Rational(-2)) == Rational(9, 4)
        with pytest.raises(DivisionByZero):
            numbers.pow(Rational(0), Rational(-1))

    def test_fractional_powers_fall_back_to_decimal(self):
        result = numbers.pow(Rational(4), Rational(1, 2))
        assert result.kind is Kind.DECIMAL
        assert result == 2

    def test_from_string(self):
        assert Rational.from_string("1/3") == Rational(1, 3)
        assert Rational.from_string("0.125") == Rational(1, 8)
        assert Rational.from_string("-2") == Rational(-2)
        with pytest.raises(DomainError):
            Rational.from_string("one third")

    def test_to_string(self):
        assert Rational(1, 3).to_string() == "1/3"
        assert Rational(4, 2).to_string() == "2"

    @given(rationals(), rationals())
    def test_addition_agrees_with_fractions(self, a, b):
        assert numbers.add(a, b).to_python() == a.to_python() + b.to_python()

    @given(rationals(), rationals())
    def test_multiplication_agrees_with_fractions(self, a, b):
        assert numbers.multiply(a, b).to_python() == a.to_python() * b.to_python()


class TestFloat:
    def test_division_by_zero_follows_ieee(self):
        assert numbers.divide(Float(1), Float(0)).to_number() == math.inf
        assert numbers.divide(Float(-1), Float(0)).to_number() == -math.inf
        assert numbers.divide(Float(0), Float(0)).is_nan()

    def test_to_string(self):
        assert Float(14.0).to_string() == "14"
        assert Float(2 / 3).to_string() == "0.6666666666666666"
        assert Float(0.1).to_string() == "0.1"
        assert Float(math.inf).to_string() == "Infinity"
        assert Float(-math.inf).to_string() == "-Infinity"
        assert Float(math.nan).to_string() == "NaN"

    def test_invalid_operations_return_nan(self):
        assert numbers.pow(Float(-8), Float(1 / 3)).is_nan()
        assert numbers.sqrt(Float(-1)).is_nan()
        assert numbers.log(Float(-1)).is_nan()


class TestDecimal:
    def test_arithmetic_respects_precision(self):
        x = numbers.divide(Decimal(1, 10), Decimal(3, 10))
        assert x.to_string() == "0.3333333333"

    def test_floats_are_converted_from_shortest_repr(self):
        assert Decimal(0.1).to_string() == "0.1"

    def test_larger_precision_wins(self):
        assert (Decimal(1, 5) + Decimal(1, 20)).precision == 20

    def test_division_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            numbers.divide(Decimal(1), Decimal(0))

    def test_square_root_of_negative_number_raises(self):
        with pytest.raises(DomainError):
            numbers.sqrt(Decimal(-1))


class TestPromotion:
    def test_rational_and_float_gives_float(self):
        result = numbers.add(Rational(1, 2), Float(0.25))
        assert isinstance(result, Float)
        assert result == 0.75

    def test_rational_and_decimal_gives_decimal(self):
        result = numbers.add(Rational(1, 2), Decimal("0.25"))
        assert isinstance(result, Decimal)
        assert result == 0.75

    def test_decimal_and_float_keeps_decimal_precision(self):
        result = numbers.add(Decimal(1, 10), Float(0.5))
        assert isinstance(result, Decimal)
        assert result.precision == 10

    def test_equality_and_hash_across_kinds(self):
        assert Float(0.5) == Rational(1, 2) == Decimal("0.5")
        assert hash(Float(0.5)) == hash(Rational(1, 2)) == hash(Decimal("0.5"))
        assert Rational(3) == 3

    def test_unsupported_operands(self):
        with pytest.raises(UnsupportedOperand):
            numbers.add(Float(1), "x")

    def test_convert(self):
        assert convert(Float(0.1), "rational") == Rational(1, 10)
        assert convert(Rational(1, 4), Kind.FLOAT) == 0.25
        with pytest.raises(DomainError):
            convert(Float(math.inf), Kind.RATIONAL)


class TestCompare:
    def test_compare_after_promotion(self):
        assert numbers.compare(Rational(1, 3), Float(0.3)) is Ordering.GT
        assert numbers.compare(1, 1) is Ordering.EQ
        assert numbers.compare(Decimal(1), Rational(3, 2)) is Ordering.LT

    def test_nan_is_unordered(self):
        with pytest.raises(DomainError):
            numbers.compare(Float(math.nan), Float(1))


class TestRounding:
    def test_round_half_away_from_zero(self):
        assert numbers.round_to(Float(2.5)) == 3
        assert numbers.round_to(Float(-2.5)) == -3
        assert numbers.round_to(Rational(7, 2)) == 4
        assert numbers.round_to(Rational(-7, 2)) == -4

    def test_round_with_digits(self):
        assert numbers.round_to(Float(1.005), 2) == 1.01
        assert numbers.floor(Float(1.23456), 2) == 1.23
        assert numbers.ceil(Rational(1, 3), 1) == Rational(2, 5)

    def test_floor_and_ceil(self):
        assert numbers.floor(Rational(-7, 2)) == -4
        assert numbers.ceil(Rational(-7, 2)) == -3

    def test_negative_digits_are_invalid(self):
        with pytest.raises(DomainError):
            numbers.round_to(Float(1.5), -1)

    def test_sign_keeps_kind(self):
        assert numbers.sign(Rational(-3, 4)) == Rational(-1)
        assert isinstance(numbers.sign(Decimal("2.5")), Decimal)
        assert numbers.sign(Float(0)) == 0
        assert numbers.sign(Float(math.nan)).is_nan()

    def test_factorial(self):
        assert numbers.factorial(Rational(5)) == 120
        assert numbers.factorial(Float(0)) == 1
        with pytest.raises(DomainError):
            numbers.factorial(Float(-1))
        with pytest.raises(DomainError):
            numbers.factorial(Float(2.5))
