"""
Numeric tower.

Values are instances of one of three closed kinds:

* Float: IEEE-754 double precision numbers;
* Decimal: arbitrary precision decimals that carry their own precision;
* Rational: exact fractions, always stored in lowest terms.

Arithmetic functions promote mixed operands before dispatching to the
implementation registered for the resulting kind:

* Rational op Rational stays Rational;
* Rational op Decimal -> Decimal;
* Rational op Float -> Float;
* Decimal op Float -> Decimal, at the precision of the Decimal operand.

Division by zero follows IEEE semantics for Float (infinities and NaN), but
raises DivisionByZero for the exact kinds.
"""
import decimal
import enum
import fractions
import math
from contextlib import contextmanager
from functools import lru_cache
from typing import Tuple, Union

from .exceptions import DivisionByZero, DomainError, UnsupportedOperand

__all__ = [
    "DEFAULT_PRECISION",
    "Kind",
    "Ordering",
    "Number",
    "Float",
    "Decimal",
    "Rational",
    "as_number",
    "convert",
    "promote",
    "add",
    "subtract",
    "multiply",
    "divide",
    "pow",
    "mod",
    "negate",
    "absolute",
    "sign",
    "compare",
    "sqrt",
    "exp",
    "log",
    "log10",
    "floor",
    "ceil",
    "round_to",
    "factorial",
    "float_function",
]

DEFAULT_PRECISION = 64
PyNumber = Union[int, float, decimal.Decimal, fractions.Fraction]


class Kind(enum.Enum):
    """
    Kinds of numbers in the tower.
    """

    FLOAT = "float"
    DECIMAL = "decimal"
    RATIONAL = "rational"

    def __repr__(self):
        return "Kind." + self.name


class Ordering(enum.IntEnum):
    """
    Result of compare().
    """

    LT = -1
    EQ = 0
    GT = 1


@lru_cache(32)
def context(precision: int) -> decimal.Context:
    """
    Decimal context for the given precision.
    """
    return decimal.Context(
        prec=precision,
        rounding=decimal.ROUND_HALF_EVEN,
        traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
    )


@contextmanager
def decimal_errors():
    """
    Translate signals from the decimal module into numex errors.
    """
    try:
        yield
    except decimal.DivisionByZero as exc:
        raise DivisionByZero("division by zero") from exc
    except decimal.Overflow as exc:
        raise DomainError("decimal overflow") from exc
    except decimal.InvalidOperation as exc:
        raise DomainError("invalid decimal operation") from exc


# ==============================================================================
# VALUE TYPES
# ==============================================================================


class Number:
    """
    Base class for all values in the numeric tower.

    Numbers are immutable. Equality is exact and works across kinds and with
    Python numbers, hence ``Float(0.5) == Rational(1, 2) == 0.5``.
    """

    __slots__ = ()
    kind: Kind

    def to_number(self) -> float:
        """
        Convert to a Python float.
        """
        raise NotImplementedError

    def to_python(self) -> PyNumber:
        """
        Convert to the closest Python numeric type (float, decimal.Decimal or
        fractions.Fraction) without loss of information.
        """
        raise NotImplementedError

    def to_string(self) -> str:
        """
        Deterministic string rendering.
        """
        raise NotImplementedError

    def is_integer(self) -> bool:
        raise NotImplementedError

    def is_zero(self) -> bool:
        return self.sign() == 0

    def is_finite(self) -> bool:
        return True

    def is_nan(self) -> bool:
        return False

    def sign(self) -> int:
        raise NotImplementedError

    #
    # Python protocols
    #
    def __str__(self):
        return self.to_string()

    def __float__(self):
        return self.to_number()

    def __int__(self):
        return int(self.to_python())

    def __bool__(self):
        return self.is_nan() or not self.is_zero()

    def __eq__(self, other):
        if isinstance(other, Number):
            return self.to_python() == other.to_python()
        elif isinstance(other, (int, float, decimal.Decimal, fractions.Fraction)):
            return self.to_python() == other
        return NotImplemented

    def __hash__(self):
        return hash(self.to_python())

    def __lt__(self, other):
        return compare(self, other) is Ordering.LT

    def __le__(self, other):
        return compare(self, other) is not Ordering.GT

    def __gt__(self, other):
        return compare(self, other) is Ordering.GT

    def __ge__(self, other):
        return compare(self, other) is not Ordering.LT

    def __add__(self, other):
        return add(self, other)

    def __radd__(self, other):
        return add(other, self)

    def __sub__(self, other):
        return subtract(self, other)

    def __rsub__(self, other):
        return subtract(other, self)

    def __mul__(self, other):
        return multiply(self, other)

    def __rmul__(self, other):
        return multiply(other, self)

    def __truediv__(self, other):
        return divide(self, other)

    def __rtruediv__(self, other):
        return divide(other, self)

    def __mod__(self, other):
        return mod(self, other)

    def __rmod__(self, other):
        return mod(other, self)

    def __pow__(self, other):
        return pow(self, other)

    def __rpow__(self, other):
        return pow(other, self)

    def __neg__(self):
        return negate(self)

    def __pos__(self):
        return self

    def __abs__(self):
        return absolute(self)


class Float(Number):
    """
    Double precision floating point number.
    """

    __slots__ = ("_value",)
    kind = Kind.FLOAT
    value = property(lambda self: self._value)

    def __init__(self, value=0.0):
        self._value = float(value)

    def __repr__(self):
        return f"Float({self._value!r})"

    def to_number(self):
        return self._value

    def to_python(self):
        return self._value

    def to_string(self):
        value = self._value
        if math.isnan(value):
            return "NaN"
        elif math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        elif value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)

    def is_integer(self):
        return self._value.is_integer()

    def is_finite(self):
        return math.isfinite(self._value)

    def is_nan(self):
        return math.isnan(self._value)

    def sign(self):
        value = self._value
        return (value > 0) - (value < 0)


class Decimal(Number):
    """
    Arbitrary precision decimal number.

    Args:
        value:
            A string, integer, float or decimal.Decimal. Floats are converted
            from their shortest representation, hence Decimal(0.1) is exactly
            one tenth.
        precision:
            Number of significant digits used to store the value and to
            perform arithmetic with it.
    """

    __slots__ = ("_value", "_precision")
    kind = Kind.DECIMAL
    value = property(lambda self: self._value)
    precision = property(lambda self: self._precision)

    def __init__(self, value=0, precision=DEFAULT_PRECISION):
        if isinstance(value, Decimal):
            value = value._value
        elif isinstance(value, float):
            value = repr(value)
        elif isinstance(value, str):
            value = value.strip()
        elif not isinstance(value, (int, decimal.Decimal)):
            raise UnsupportedOperand(f"cannot create Decimal from {value!r}")
        with decimal_errors():
            self._value = context(precision).create_decimal(value)
        self._precision = precision

    def __repr__(self):
        return f"Decimal({self.to_string()!r}, precision={self._precision})"

    def to_number(self):
        return float(self._value)

    def to_python(self):
        return self._value

    def to_string(self):
        value = self._value
        if value.is_nan():
            return "NaN"
        elif value.is_infinite():
            return "Infinity" if value > 0 else "-Infinity"
        elif value.is_zero():
            return "0"
        return format(value.normalize(context(self._precision)), "f")

    def is_integer(self):
        value = self._value
        return value.is_finite() and value == value.to_integral_value()

    def is_finite(self):
        return self._value.is_finite()

    def is_nan(self):
        return self._value.is_nan()

    def sign(self):
        if self._value.is_nan():
            return 0
        return (self._value > 0) - (self._value < 0)


class Rational(Number):
    """
    Exact fraction numerator/denominator.

    Fractions are always reduced to their lowest terms and the sign is stored
    in the numerator. A zero denominator is rejected with DivisionByZero.
    """

    __slots__ = ("_numerator", "_denominator")
    kind = Kind.RATIONAL
    numerator = property(lambda self: self._numerator)
    denominator = property(lambda self: self._denominator)

    def __init__(self, numerator=0, denominator=1):
        if not isinstance(numerator, int) or not isinstance(denominator, int):
            raise UnsupportedOperand(
                f"rational terms must be integers: {numerator!r}/{denominator!r}"
            )
        if denominator == 0:
            raise DivisionByZero(f"zero denominator: {numerator}/0")
        if denominator < 0:
            numerator, denominator = -numerator, -denominator
        gcd = math.gcd(numerator, denominator)
        self._numerator = int(numerator) // gcd
        self._denominator = int(denominator) // gcd

    @classmethod
    def from_string(cls, text: str) -> "Rational":
        """
        Create fraction from strings such as "1/3", "-2" or "0.125".
        """
        text = text.strip()
        if "/" in text:
            num, _, den = text.partition("/")
            try:
                return cls(int(num), int(den))
            except ValueError:
                raise DomainError(f"invalid fraction: {text!r}")
        try:
            value = decimal.Decimal(text)
        except decimal.InvalidOperation:
            raise DomainError(f"invalid fraction: {text!r}")
        if not value.is_finite():
            raise DomainError(f"invalid fraction: {text!r}")
        return cls(*value.as_integer_ratio())

    def __repr__(self):
        return f"Rational({self._numerator}, {self._denominator})"

    def to_number(self):
        try:
            return self._numerator / self._denominator
        except OverflowError:
            return math.copysign(math.inf, self._numerator)

    def to_python(self):
        return fractions.Fraction(self._numerator, self._denominator)

    def to_string(self):
        if self._denominator == 1:
            return str(self._numerator)
        return f"{self._numerator}/{self._denominator}"

    def is_integer(self):
        return self._denominator == 1

    def sign(self):
        return (self._numerator > 0) - (self._numerator < 0)


# ==============================================================================
# CONVERSION AND PROMOTION
# ==============================================================================


def as_number(value) -> Number:
    """
    Coerce Python numbers to the tower.

    Integers and fractions become Rationals, floats become Floats and
    decimal.Decimal values become Decimals.
    """
    if isinstance(value, Number):
        return value
    elif isinstance(value, int):
        return Rational(int(value))
    elif isinstance(value, float):
        return Float(value)
    elif isinstance(value, decimal.Decimal):
        return Decimal(value)
    elif isinstance(value, fractions.Fraction):
        return Rational(value.numerator, value.denominator)
    raise UnsupportedOperand(f"not a number: {value!r}")


def _float_to_decimal(x: Float, precision):
    return Decimal(x.value, precision)


def _float_to_rational(x: Float, precision):
    if not x.is_finite():
        raise DomainError(f"cannot convert {x} to a fraction")
    return Rational(*decimal.Decimal(repr(x.value)).as_integer_ratio())


def _decimal_to_float(x: Decimal, precision):
    return Float(float(x.value))


def _decimal_to_rational(x: Decimal, precision):
    if not x.is_finite():
        raise DomainError(f"cannot convert {x} to a fraction")
    return Rational(*x.value.as_integer_ratio())


def _rational_to_float(x: Rational, precision):
    return Float(x.to_number())


def _rational_to_decimal(x: Rational, precision):
    with decimal_errors():
        value = context(precision).divide(
            decimal.Decimal(x.numerator), decimal.Decimal(x.denominator)
        )
    return Decimal(value, precision)


CONVERSIONS = {
    (Kind.FLOAT, Kind.DECIMAL): _float_to_decimal,
    (Kind.FLOAT, Kind.RATIONAL): _float_to_rational,
    (Kind.DECIMAL, Kind.FLOAT): _decimal_to_float,
    (Kind.DECIMAL, Kind.RATIONAL): _decimal_to_rational,
    (Kind.RATIONAL, Kind.FLOAT): _rational_to_float,
    (Kind.RATIONAL, Kind.DECIMAL): _rational_to_decimal,
}


def convert(value, kind: Union[Kind, str], precision: int = None) -> Number:
    """
    Convert value to the given kind.

    Args:
        value:
            A Number or Python number.
        kind:
            Target kind (a Kind or its string value).
        precision:
            Precision of Decimal results. Defaults to the precision of a
            Decimal argument, or DEFAULT_PRECISION.
    """
    value = as_number(value)
    kind = Kind(kind)
    if precision is None:
        precision = getattr(value, "precision", DEFAULT_PRECISION)
    if value.kind is kind:
        if kind is Kind.DECIMAL and precision != value.precision:
            return Decimal(value.value, precision)
        return value
    return CONVERSIONS[value.kind, kind](value, precision)


def promote(a, b) -> Tuple[Number, Number]:
    """
    Convert pair of values to a common kind.
    """
    a, b = as_number(a), as_number(b)
    if a.kind is b.kind:
        return a, b
    elif a.kind is Kind.DECIMAL:
        return a, convert(b, Kind.DECIMAL, a.precision)
    elif b.kind is Kind.DECIMAL:
        return convert(a, Kind.DECIMAL, b.precision), b
    return convert(a, Kind.FLOAT), convert(b, Kind.FLOAT)


def _dispatch(table, name, a, b, *args):
    a, b = promote(a, b)
    try:
        impl = table[a.kind]
    except KeyError:
        raise UnsupportedOperand(f"{name} is not defined for {a.kind.value} values")
    return impl(a, b, *args)


def _dispatch_unary(table, name, a, *args):
    a = as_number(a)
    try:
        impl = table[a.kind]
    except KeyError:
        raise UnsupportedOperand(f"{name} is not defined for {a.kind.value} values")
    return impl(a, *args)


def _decimal_binary(method):
    def impl(a, b):
        precision = max(a.precision, b.precision)
        with decimal_errors():
            value = getattr(context(precision), method)(a.value, b.value)
        return Decimal(value, precision)

    impl.__name__ = f"decimal_{method}"
    return impl


def _decimal_unary(method):
    def impl(a, *args):
        with decimal_errors():
            value = getattr(context(a.precision), method)(a.value)
        return Decimal(value, a.precision)

    impl.__name__ = f"decimal_{method}"
    return impl


# ==============================================================================
# ARITHMETIC
# ==============================================================================


def _float_divide(a, b):
    x, y = a.value, b.value
    if y == 0.0:
        if x == 0.0 or math.isnan(x):
            return Float(math.nan)
        return Float(math.copysign(math.inf, x) * math.copysign(1.0, y))
    return Float(x / y)


def _decimal_divide(a, b):
    if b.value.is_zero():
        raise DivisionByZero("division by zero")
    return _decimal_binary("divide")(a, b)


def _rational_divide(a, b):
    if b.numerator == 0:
        raise DivisionByZero("division by zero")
    return Rational(a.numerator * b.denominator, a.denominator * b.numerator)


def _float_mod(a, b):
    if b.value == 0.0:
        return Float(math.nan)
    return Float(a.value % b.value)


def _decimal_mod(a, b):
    if b.value.is_zero():
        raise DivisionByZero("modulo by zero")
    precision = max(a.precision, b.precision)
    ctx = context(precision)
    with decimal_errors():
        quotient = ctx.divide(a.value, b.value).to_integral_value(
            rounding=decimal.ROUND_FLOOR
        )
        value = ctx.subtract(a.value, ctx.multiply(b.value, quotient))
    return Decimal(value, precision)


def _rational_mod(a, b):
    if b.numerator == 0:
        raise DivisionByZero("modulo by zero")
    quotient = (a.numerator * b.denominator) // (a.denominator * b.numerator)
    return _RATIONAL_SUBTRACT(a, _RATIONAL_MULTIPLY(b, Rational(quotient)))


def _float_pow(a, b, precision=None):
    x, y = a.value, b.value
    if x == 0.0 and y < 0:
        return Float(math.inf)
    try:
        return Float(math.pow(x, y))
    except OverflowError:
        odd = y.is_integer() and y % 2 == 1
        return Float(math.copysign(math.inf, x) if odd else math.inf)
    except ValueError:
        return Float(math.nan)


def _decimal_pow(a, b, precision=None):
    precision = max(a.precision, b.precision)
    if a.value.is_zero() and b.value < 0:
        raise DivisionByZero("zero raised to a negative power")
    with decimal_errors():
        value = context(precision).power(a.value, b.value)
    return Decimal(value, precision)


def _rational_pow(a, b, precision=None):
    if b.denominator != 1:
        precision = precision or DEFAULT_PRECISION
        return _decimal_pow(
            convert(a, Kind.DECIMAL, precision), convert(b, Kind.DECIMAL, precision)
        )
    exponent = b.numerator
    if exponent >= 0:
        return Rational(a.numerator ** exponent, a.denominator ** exponent)
    if a.numerator == 0:
        raise DivisionByZero("zero raised to a negative power")
    return Rational(a.denominator ** -exponent, a.numerator ** -exponent)


_RATIONAL_SUBTRACT = lambda a, b: Rational(
    a.numerator * b.denominator - b.numerator * a.denominator,
    a.denominator * b.denominator,
)
_RATIONAL_MULTIPLY = lambda a, b: Rational(
    a.numerator * b.numerator, a.denominator * b.denominator
)

ADD = {
    Kind.FLOAT: lambda a, b: Float(a.value + b.value),
    Kind.DECIMAL: _decimal_binary("add"),
    Kind.RATIONAL: lambda a, b: Rational(
        a.numerator * b.denominator + b.numerator * a.denominator,
        a.denominator * b.denominator,
    ),
}
SUBTRACT = {
    Kind.FLOAT: lambda a, b: Float(a.value - b.value),
    Kind.DECIMAL: _decimal_binary("subtract"),
    Kind.RATIONAL: _RATIONAL_SUBTRACT,
}
MULTIPLY = {
    Kind.FLOAT: lambda a, b: Float(a.value * b.value),
    Kind.DECIMAL: _decimal_binary("multiply"),
    Kind.RATIONAL: _RATIONAL_MULTIPLY,
}
DIVIDE = {
    Kind.FLOAT: _float_divide,
    Kind.DECIMAL: _decimal_divide,
    Kind.RATIONAL: _rational_divide,
}
MOD = {
    Kind.FLOAT: _float_mod,
    Kind.DECIMAL: _decimal_mod,
    Kind.RATIONAL: _rational_mod,
}
POW = {
    Kind.FLOAT: _float_pow,
    Kind.DECIMAL: _decimal_pow,
    Kind.RATIONAL: _rational_pow,
}
NEGATE = {
    Kind.FLOAT: lambda a: Float(-a.value),
    Kind.DECIMAL: _decimal_unary("minus"),
    Kind.RATIONAL: lambda a: Rational(-a.numerator, a.denominator),
}
ABSOLUTE = {
    Kind.FLOAT: lambda a: Float(abs(a.value)),
    Kind.DECIMAL: _decimal_unary("abs"),
    Kind.RATIONAL: lambda a: Rational(abs(a.numerator), a.denominator),
}


def add(a, b) -> Number:
    return _dispatch(ADD, "add", a, b)


def subtract(a, b) -> Number:
    return _dispatch(SUBTRACT, "subtract", a, b)


def multiply(a, b) -> Number:
    return _dispatch(MULTIPLY, "multiply", a, b)


def divide(a, b) -> Number:
    """
    Divide a by b.

    Float division by zero returns an infinity or NaN; Decimal and Rational
    division by zero raises DivisionByZero.
    """
    return _dispatch(DIVIDE, "divide", a, b)


def mod(a, b) -> Number:
    """
    Modulo with the sign of the divisor (a - b * floor(a / b)).
    """
    return _dispatch(MOD, "mod", a, b)


def pow(a, b, precision: int = None) -> Number:
    """
    Raise a to the power b.

    Rationals raised to integer exponents stay exact. Any other exponent
    makes the result a Decimal with the given precision.
    """
    return _dispatch(POW, "pow", a, b, precision)


def negate(a) -> Number:
    return _dispatch_unary(NEGATE, "negate", a)


def absolute(a) -> Number:
    return _dispatch_unary(ABSOLUTE, "abs", a)


def sign(a) -> Number:
    """
    Sign of a (-1, 0 or 1) in the same kind as a. NaN is returned unchanged.
    """
    a = as_number(a)
    if a.is_nan():
        return a
    return convert(Rational(a.sign()), a.kind, getattr(a, "precision", None))


def compare(a, b) -> Ordering:
    """
    Compare two numbers after promotion.

    NaN values are unordered and raise DomainError.
    """
    a, b = promote(a, b)
    if a.is_nan() or b.is_nan():
        raise DomainError("cannot compare NaN")
    x, y = a.to_python(), b.to_python()
    if x < y:
        return Ordering.LT
    elif x > y:
        return Ordering.GT
    return Ordering.EQ


# ==============================================================================
# ELEMENTARY FUNCTIONS
# ==============================================================================


def _float_sqrt(a, precision=None):
    if a.value < 0:
        return Float(math.nan)
    return Float(math.sqrt(a.value))


def _decimal_sqrt(a, precision=None):
    if a.value < 0:
        raise DomainError(f"square root of negative number: {a}")
    return _decimal_unary("sqrt")(a)


def _rational_sqrt(a, precision=None):
    if a.numerator < 0:
        raise DomainError(f"square root of negative number: {a}")
    num, den = math.isqrt(a.numerator), math.isqrt(a.denominator)
    if num * num == a.numerator and den * den == a.denominator:
        return Rational(num, den)
    return _decimal_sqrt(convert(a, Kind.DECIMAL, precision or DEFAULT_PRECISION))


def _float_exp(a, precision=None):
    try:
        return Float(math.exp(a.value))
    except OverflowError:
        return Float(math.inf)


def _float_log(a, precision=None):
    x = a.value
    if x < 0 or math.isnan(x):
        return Float(math.nan)
    elif x == 0:
        return Float(-math.inf)
    return Float(math.log(x))


def _float_log10(a, precision=None):
    x = a.value
    if x < 0 or math.isnan(x):
        return Float(math.nan)
    elif x == 0:
        return Float(-math.inf)
    return Float(math.log10(x))


def _via_decimal(method):
    def impl(a, precision=None):
        a = convert(a, Kind.DECIMAL, precision or DEFAULT_PRECISION)
        return _decimal_unary(method)(a)

    impl.__name__ = f"rational_{method}"
    return impl


SQRT = {
    Kind.FLOAT: _float_sqrt,
    Kind.DECIMAL: _decimal_sqrt,
    Kind.RATIONAL: _rational_sqrt,
}
EXP = {
    Kind.FLOAT: _float_exp,
    Kind.DECIMAL: _decimal_unary("exp"),
    Kind.RATIONAL: _via_decimal("exp"),
}
LOG = {
    Kind.FLOAT: _float_log,
    Kind.DECIMAL: _decimal_unary("ln"),
    Kind.RATIONAL: _via_decimal("ln"),
}
LOG10 = {
    Kind.FLOAT: _float_log10,
    Kind.DECIMAL: _decimal_unary("log10"),
    Kind.RATIONAL: _via_decimal("log10"),
}


def sqrt(a, precision: int = None) -> Number:
    """
    Square root.

    Float returns NaN for negative arguments, while exact kinds raise
    DomainError. Rationals that are not perfect squares fall back to Decimal.
    """
    return _dispatch_unary(SQRT, "sqrt", a, precision)


def exp(a, precision: int = None) -> Number:
    return _dispatch_unary(EXP, "exp", a, precision)


def log(a, base=None, precision: int = None) -> Number:
    """
    Natural logarithm, or logarithm in the given base.
    """
    result = _dispatch_unary(LOG, "log", a, precision)
    if base is None:
        return result
    return divide(result, _dispatch_unary(LOG, "log", base, precision))


def log10(a, precision: int = None) -> Number:
    return _dispatch_unary(LOG10, "log10", a, precision)


def _quantize(value: decimal.Decimal, digits, rounding):
    exponent = decimal.Decimal(1).scaleb(-digits)
    precision = max(1, value.adjusted() + digits + 2)
    ctx = decimal.Context(prec=precision, traps=[decimal.InvalidOperation])
    return value.quantize(exponent, rounding=rounding, context=ctx)


def _rational_quantize(a, digits, rounding):
    scale = 10 ** digits
    num, den = a.numerator * scale, a.denominator
    if rounding == decimal.ROUND_FLOOR:
        result = num // den
    elif rounding == decimal.ROUND_CEILING:
        result = -(-num // den)
    else:
        result = (2 * abs(num) + den) // (2 * den)
        result = -result if num < 0 else result
    return Rational(result, scale)


def _round(a, digits, rounding) -> Number:
    a = as_number(a)
    digits = int(digits)
    if digits < 0:
        raise DomainError(f"number of digits must be non-negative: {digits}")
    if not a.is_finite():
        return a
    if a.kind is Kind.FLOAT:
        value = _quantize(decimal.Decimal(repr(a.value)), digits, rounding)
        return Float(float(value))
    elif a.kind is Kind.DECIMAL:
        with decimal_errors():
            value = _quantize(a.value, digits, rounding)
        return Decimal(value, a.precision)
    elif a.kind is Kind.RATIONAL:
        return _rational_quantize(a, digits, rounding)
    raise UnsupportedOperand(f"cannot round {a.kind.value} values")


def floor(a, digits=0) -> Number:
    """
    Round towards minus infinity, keeping the given number of decimal digits.
    """
    return _round(a, digits, decimal.ROUND_FLOOR)


def ceil(a, digits=0) -> Number:
    """
    Round towards plus infinity, keeping the given number of decimal digits.
    """
    return _round(a, digits, decimal.ROUND_CEILING)


def round_to(a, digits=0) -> Number:
    """
    Round half away from zero, keeping the given number of decimal digits.
    """
    return _round(a, digits, decimal.ROUND_HALF_UP)


def factorial(a) -> Number:
    """
    Factorial of a non-negative integer, in the same kind as the argument.
    """
    a = as_number(a)
    if not a.is_integer() or a.sign() < 0:
        raise DomainError(f"factorial is defined only for non-negative integers: {a}")
    n = int(a)
    if a.kind is Kind.FLOAT:
        return Float(float(math.factorial(n)) if n <= 170 else math.inf)
    elif a.kind is Kind.DECIMAL:
        return Decimal(math.factorial(n), a.precision)
    return Rational(math.factorial(n))


def float_function(func):
    """
    Lift a function of floats (e.g. math.sin) to numbers.

    Arguments are converted to Python floats and results are always Floats.
    Invalid arguments produce NaN.
    """

    def function(*args):
        xs = [as_number(x).to_number() for x in args]
        try:
            return Float(func(*xs))
        except ValueError:
            return Float(math.nan)
        except OverflowError:
            return Float(math.inf)

    function.__name__ = func.__name__
    function.__doc__ = func.__doc__
    return function
