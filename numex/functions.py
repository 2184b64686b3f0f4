"""
Catalog of builtin operations.

Operations are plain Python functions. The ones that depend on the engine
configuration (the default kind of numbers, precision of decimals, etc.)
receive a Config object as the first argument, which is bound when the
registry is created with default_registry().

Arithmetic functions broadcast over containers: a scalar combined with a
container is applied to every element, and containers of the same shape
combine elementwise.
"""
import decimal
import fractions
import functools
import math
import re
from functools import partial
from typing import Callable, Dict, List

from . import numbers
from .config import Config
from .exceptions import ArityMismatch, DomainError, ShapeMismatch, UnsupportedOperand
from .matrix import (
    Index,
    Matrix,
    broadcast,
    deep_map,
    flatten,
    format_value,
    is_collection,
    resize,
    size_of,
    subset as subset_value,
    to_nested,
)
from .numbers import Decimal, Float, Kind, Number, Ordering, Rational, as_number, convert
from .registry import Registry


# ==============================================================================
# COERCION
# ==============================================================================


def integer(n, config: Config) -> Number:
    """
    Integer n as a number of the configured kind.
    """
    return convert(Rational(int(n)), config.number, config.precision)


def coerce(value, config: Config):
    """
    Convert Python values to the values used by the evaluator.

    Integers become numbers of the configured kind, floats become Floats,
    decimal.Decimal become Decimals and fractions.Fraction become Rationals.
    Lists, tuples and matrices are coerced recursively.
    """
    if value is None or isinstance(value, (bool, str, Number)):
        return value
    elif isinstance(value, int):
        return integer(value, config)
    elif isinstance(value, float):
        return Float(value)
    elif isinstance(value, decimal.Decimal):
        return Decimal(value, config.precision)
    elif isinstance(value, fractions.Fraction):
        return Rational(value.numerator, value.denominator)
    elif isinstance(value, Matrix):
        return value.map(partial(coerce, config=config))
    elif isinstance(value, (list, tuple)):
        return [coerce(x, config) for x in value]
    return value


def container(data, config: Config, like=None):
    """
    Wrap data in a Matrix, unless the configuration (or the like argument)
    asks for plain lists.
    """
    if like is not None:
        return Matrix(data) if isinstance(like, Matrix) else data
    return Matrix(data) if config.matrix == "matrix" else data


def as_int(value) -> int:
    """
    Convert integral number to a Python int, raising DomainError otherwise.
    """
    if isinstance(value, int):
        return int(value)
    value = as_number(value)
    if not value.is_integer():
        raise DomainError(f"expected an integer, got {value}")
    return int(value)


def parse_number(text: str, config: Config) -> Number:
    """
    Parse string as a number of the configured kind.
    """
    text = text.strip()
    try:
        if config.number == "decimal":
            return Decimal(text, config.precision)
        elif config.number == "rational":
            return Rational.from_string(text)
        return Float(float(text))
    except (ValueError, UnsupportedOperand):
        raise DomainError(f"invalid number: {text!r}")


# ==============================================================================
# ARITHMETIC
# ==============================================================================


def _fold(func, a, b, rest):
    result = broadcast(func, a, b)
    for x in rest:
        result = broadcast(func, result, x)
    return result


def add(a, b, *rest):
    return _fold(numbers.add, a, b, rest)


def subtract(a, b):
    return broadcast(numbers.subtract, a, b)


def multiply(a, b, *rest):
    """
    Elementwise multiplication. Use matmul() for the matrix product.
    """
    return _fold(numbers.multiply, a, b, rest)


def divide(a, b):
    return broadcast(numbers.divide, a, b)


def mod(a, b):
    return broadcast(numbers.mod, a, b)


def pow(config, a, b):
    return broadcast(lambda x, y: numbers.pow(x, y, config.precision), a, b)


def unary_minus(x):
    return deep_map(numbers.negate, x)


def unary_plus(x):
    return deep_map(as_number, x)


def absolute(x):
    return deep_map(numbers.absolute, x)


def sign(x):
    return deep_map(numbers.sign, x)


def sqrt(config, x):
    return deep_map(lambda v: numbers.sqrt(v, config.precision), x)


def square(x):
    return deep_map(lambda v: numbers.multiply(v, v), x)


def cube(x):
    return deep_map(lambda v: numbers.multiply(v, numbers.multiply(v, v)), x)


def exp(config, x):
    return deep_map(lambda v: numbers.exp(v, config.precision), x)


def log(config, x, base=None):
    """
    Natural logarithm of x, or logarithm in the given base.
    """
    return deep_map(lambda v: numbers.log(v, base, config.precision), x)


def log10(config, x):
    return deep_map(lambda v: numbers.log10(v, config.precision), x)


def floor(x, digits=0):
    digits = as_int(digits)
    return deep_map(lambda v: numbers.floor(v, digits), x)


def ceil(x, digits=0):
    digits = as_int(digits)
    return deep_map(lambda v: numbers.ceil(v, digits), x)


def round_(x, digits=0):
    """
    Round half away from zero, keeping the given number of decimal digits.
    """
    digits = as_int(digits)
    return deep_map(lambda v: numbers.round_to(v, digits), x)


def factorial(x):
    return deep_map(numbers.factorial, x)


def elementwise(func: Callable) -> Callable:
    """
    Lift scalar function to containers.
    """

    def function(x):
        return deep_map(func, x)

    function.__name__ = func.__name__
    function.__doc__ = func.__doc__
    return function


TRIGONOMETRIC = {
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "asin": math.asin,
    "acos": math.acos,
    "atan": math.atan,
}


def atan2(y, x):
    return broadcast(numbers.float_function(math.atan2), y, x)


# ==============================================================================
# COMPARISONS AND PREDICATES
# ==============================================================================


def _order(x, y):
    # None means unordered (NaN)
    if isinstance(x, str) and isinstance(y, str):
        return Ordering((x > y) - (x < y))
    x, y = as_number(x), as_number(y)
    if x.is_nan() or y.is_nan():
        return None
    return numbers.compare(x, y)


def comparison(name, accept) -> Callable:
    """
    Create a comparison function that is true when the ordering of its
    arguments is in the accept set.
    """

    def function(a, b):
        return broadcast(lambda x, y: _order(x, y) in accept, a, b)

    function.__name__ = name
    return function


LT, EQ, GT = Ordering.LT, Ordering.EQ, Ordering.GT
equal = comparison("equal", {EQ})
unequal = comparison("unequal", {LT, GT, None})
smaller = comparison("smaller", {LT})
smaller_eq = comparison("smaller_eq", {LT, EQ})
larger = comparison("larger", {GT})
larger_eq = comparison("larger_eq", {GT, EQ})


def compare(config, a, b):
    """
    Return -1, 0 or 1 if a is smaller, equal or larger than b.
    """

    def order(x, y):
        result = _order(x, y)
        if result is None:
            raise DomainError("cannot compare NaN")
        return integer(result, config)

    return broadcast(order, a, b)


def is_positive(x):
    return deep_map(lambda v: as_number(v).sign() > 0, x)


def is_negative(x):
    return deep_map(lambda v: as_number(v).sign() < 0, x)


def is_zero(x):
    def test(v):
        v = as_number(v)
        return not v.is_nan() and v.is_zero()

    return deep_map(test, x)


def is_integer(x):
    return deep_map(lambda v: as_number(v).is_integer(), x)


def is_numeric(x):
    return deep_map(lambda v: isinstance(v, (Number, bool)), x)


def has_numeric_value(x):
    """
    True for numbers, booleans and strings that represent numbers.
    """

    def test(v):
        if isinstance(v, (Number, bool)):
            return True
        elif isinstance(v, str):
            try:
                float(v)
            except ValueError:
                return False
            return True
        return False

    return deep_map(test, x)


# ==============================================================================
# CONVERSIONS
# ==============================================================================


def number(x):
    """
    Convert value to Float. Strings are parsed.
    """

    def to_float(v):
        if isinstance(v, str):
            try:
                return Float(float(v))
            except ValueError:
                raise DomainError(f"invalid number: {v!r}")
        return convert(v, Kind.FLOAT)

    return deep_map(to_float, x)


def bignumber(config, x):
    """
    Convert value to Decimal with the configured precision.
    """

    def to_decimal(v):
        if isinstance(v, str):
            return Decimal(v, config.precision)
        return convert(v, Kind.DECIMAL, config.precision)

    return deep_map(to_decimal, x)


def fraction(x, denominator=None):
    """
    Convert value to Rational. Also accepts fraction(numerator, denominator)
    and strings such as "1/3".
    """
    if denominator is not None:
        return Rational(as_int(x), as_int(denominator))

    def to_rational(v):
        if isinstance(v, str):
            return Rational.from_string(v)
        return convert(v, Kind.RATIONAL)

    return deep_map(to_rational, x)


def format(x, precision=None):
    """
    Render value as string, optionally with the given number of significant
    digits.
    """
    return format_value(x, None if precision is None else as_int(precision))


TYPE_NAMES = [
    (bool, "boolean"),
    (Float, "Float"),
    (Decimal, "Decimal"),
    (Rational, "Rational"),
    (str, "string"),
    (Matrix, "Matrix"),
    (list, "Array"),
    (tuple, "Array"),
    (Index, "Index"),
    (type(None), "null"),
]


def type_of(x) -> str:
    for cls, name in TYPE_NAMES:
        if isinstance(x, cls):
            return name
    if callable(x):
        return "Function"
    return type(x).__name__


# ==============================================================================
# CONTAINERS
# ==============================================================================


def matrix(data=None):
    return Matrix(data)


def size(config, x):
    dims = [integer(n, config) for n in size_of(x)]
    return Matrix(dims) if isinstance(x, Matrix) else dims


def _dimensions(args) -> List[int]:
    if len(args) == 1 and is_collection(args[0]):
        args = flatten(args[0])
    return [as_int(n) for n in args]


def ones(config, *size):
    dims = _dimensions(size)
    data = resize([], dims, integer(1, config)) if dims else []
    return container(data, config)


def zeros(config, *size):
    dims = _dimensions(size)
    data = resize([], dims, integer(0, config)) if dims else []
    return container(data, config)


def identity(config, n, m=None):
    """
    Matrix of size n x m (or n x n) with ones in the main diagonal.
    """
    n = as_int(n)
    m = n if m is None else as_int(m)
    one, zero = integer(1, config), integer(0, config)
    data = [[one if i == j else zero for j in range(m)] for i in range(n)]
    return container(data, config)


def diag(config, x):
    """
    Diagonal matrix from a vector, or the diagonal of a 2-D matrix.
    """
    dims = size_of(x)
    data = to_nested(x)
    if len(dims) == 1:
        zero = integer(0, config)
        n = dims[0]
        result = [[data[i] if i == j else zero for j in range(n)] for i in range(n)]
    elif len(dims) == 2:
        result = [data[i][i] for i in range(min(dims))]
    else:
        raise ShapeMismatch(f"diag() expects a vector or a 2-D matrix, got size {dims}")
    return container(result, config, like=x)


def transpose(x):
    if isinstance(x, Matrix):
        return x.transpose()
    elif is_collection(x):
        return Matrix(x).transpose().value_of()
    return x


def concat(*args):
    """
    Concatenate containers along a dimension.

    The last argument can be the (0-based) dimension. It defaults to the
    last dimension of the arguments.
    """
    args = list(args)
    dim = None
    if args and not is_collection(args[-1]):
        dim = as_int(args.pop())
    if not args:
        raise ArityMismatch("concat() expects at least one container")
    if not all(is_collection(x) for x in args):
        raise UnsupportedOperand("concat() arguments must be containers")

    ndims = {len(size_of(x)) for x in args}
    if len(ndims) != 1:
        raise ShapeMismatch("cannot concatenate containers with different dimensions")
    ndim, = ndims
    dim = ndim - 1 if dim is None else dim
    if not 0 <= dim < ndim:
        raise ShapeMismatch(f"invalid dimension {dim} for {ndim}-D containers")

    result = _concat([to_nested(x) for x in args], dim)
    size_of(result)
    if any(isinstance(x, Matrix) for x in args):
        return Matrix(result)
    return result


def _concat(items, dim):
    if dim == 0:
        return [row for data in items for row in data]
    lengths = {len(data) for data in items}
    if len(lengths) != 1:
        raise ShapeMismatch(f"dimension mismatch in concat: {sorted(lengths)}")
    n, = lengths
    return [_concat([data[i] for data in items], dim - 1) for i in range(n)]


def arange(start, end, step=1, include_end=False) -> list:
    """
    List of numbers from start to end (exclusive, unless include_end is
    true) with the given step.
    """
    start, end, step = as_number(start), as_number(end), as_number(step)
    if step.is_zero() or step.is_nan():
        raise DomainError("range step must be a non-zero number")
    if not (start.is_finite() and end.is_finite()):
        raise DomainError("range limits must be finite")

    positive = step.sign() > 0
    out = []
    i = 0
    while True:
        value = numbers.add(start, numbers.multiply(step, Rational(i)))
        order = numbers.compare(value, end)
        if order is Ordering.EQ:
            if include_end:
                out.append(value)
            break
        elif (order is Ordering.GT) if positive else (order is Ordering.LT):
            break
        out.append(value)
        i += 1
    return out


def range_(config, *args):
    """
    Create a range of numbers.

    Accepts range(start, end[, step[, include_end]]) or a string such as
    range("2:-1:-3") in the "start:end" or "start:step:end" formats. The
    end is excluded unless include_end is true.
    """
    if args and isinstance(args[0], str):
        text, *rest = args
        parts = [parse_number(p, config) for p in text.split(":")]
        if len(parts) == 2:
            start, end = parts
            step = integer(1, config)
        elif len(parts) == 3:
            start, step, end = parts
        else:
            raise DomainError(f"invalid range: {text!r}")
        include_end = bool(rest[0]) if rest else False
    elif 2 <= len(args) <= 4:
        start, end, *rest = args
        step = rest[0] if rest else integer(1, config)
        include_end = bool(rest[1]) if len(rest) > 1 else False
    else:
        raise ArityMismatch(f"range() expects 1 to 4 arguments, got {len(args)}")
    return container(arange(start, end, step, include_end), config)


def index(*dimensions):
    return Index(*dimensions)


def subset(config, value, index, replacement=None):
    """
    Get or replace entries of a container selected by an Index.
    """
    if not isinstance(index, Index):
        raise UnsupportedOperand(f"expected an Index, got {type_of(index)}")
    return subset_value(value, index, replacement, integer(0, config))


def map_(x, callback):
    """
    Apply callback to every element of container. The input is not modified.
    """
    if not callable(callback):
        raise UnsupportedOperand("map() expects a function")
    return deep_map(callback, x)


def filter_(x, test):
    """
    Return elements of a 1-D container that satisfy test.

    Test can be a function or a regular expression (either compiled or as a
    string). Regular expressions are searched in the string representation
    of each element.
    """
    if not is_collection(x):
        raise UnsupportedOperand("filter() expects a container")
    if len(size_of(x)) != 1:
        raise ShapeMismatch("filter() only supports 1-D containers")

    if isinstance(test, str):
        try:
            test = re.compile(test)
        except re.error as exc:
            raise DomainError(f"invalid regular expression: {exc}")
    if isinstance(test, re.Pattern):
        pattern = test

        def predicate(v):
            text = v if isinstance(v, str) else format_value(v)
            return pattern.search(text) is not None

    elif callable(test):
        predicate = lambda v: bool(test(v))
    else:
        raise UnsupportedOperand("filter() expects a function or a regular expression")

    items = [v for v in to_nested(x) if predicate(v)]
    return Matrix(items) if isinstance(x, Matrix) else items


def _dot(x, y):
    if not x:
        raise ShapeMismatch("cannot multiply empty vectors")
    return functools.reduce(numbers.add, map(numbers.multiply, x, y))


def matmul(a, b):
    """
    Matrix product of vectors and 2-D matrices.
    """
    size_a, size_b = size_of(a), size_of(b)
    x, y = to_nested(a), to_nested(b)
    shapes = (len(size_a), len(size_b))
    inner_a = size_a[-1] if size_a else None
    inner_b = size_b[0] if size_b else None
    if 0 in shapes or max(shapes) > 2 or inner_a != inner_b:
        raise ShapeMismatch(f"cannot multiply sizes {size_a} and {size_b}")

    if shapes == (1, 1):
        return _dot(x, y)
    elif shapes == (2, 2):
        columns = [list(col) for col in zip(*y)]
        result = [[_dot(row, col) for col in columns] for row in x]
    elif shapes == (2, 1):
        result = [_dot(row, y) for row in x]
    else:
        result = [_dot(x, list(col)) for col in zip(*y)]
    if isinstance(a, Matrix) or isinstance(b, Matrix):
        return Matrix(result)
    return result


# ==============================================================================
# STATISTICS
# ==============================================================================


NORMALIZATIONS = {"unbiased": -1, "uncorrected": 0, "biased": 1}


def reduce_along(func, data: list, dim: int):
    """
    Apply func to the lists of values along the given dimension of data.
    """
    if dim == 0:
        if data and isinstance(data[0], list):
            return [reduce_along(func, list(column), 0) for column in zip(*data)]
        return func(data)
    return [reduce_along(func, row, dim - 1) for row in data]


def _statistic_args(name, args):
    args = list(args)
    normalization = None
    if args and isinstance(args[-1], str):
        normalization = args.pop()
    if not args:
        raise ArityMismatch(f"{name}() expects at least one argument")
    if len(args) == 1 and is_collection(args[0]):
        return args[0], None, normalization
    if len(args) == 2 and is_collection(args[0]) and not is_collection(args[1]):
        return args[0], as_int(args[1]), normalization
    if any(is_collection(x) for x in args):
        raise UnsupportedOperand(f"{name}() cannot mix scalars and containers")
    return args, None, normalization


def statistic(name: str, reduce: Callable, normalized=False) -> Callable:
    """
    Create a statistic function from a function of a list of values.

    The result accepts variadic scalars, a container or a container plus a
    dimension. Normalized statistics also accept a trailing normalization
    string.
    """

    def function(*args):
        data, dim, normalization = _statistic_args(name, args)
        func = reduce
        if normalization is not None:
            if not normalized:
                raise UnsupportedOperand(f"{name}() does not accept strings")
            func = partial(reduce, normalization=normalization)
        if dim is None:
            return func(flatten(data))

        size = size_of(data)
        if not 0 <= dim < len(size):
            raise ShapeMismatch(f"invalid dimension {dim} for size {size}")
        result = reduce_along(func, to_nested(data), dim)
        if isinstance(data, Matrix) and isinstance(result, list):
            return Matrix(result)
        return result

    function.__name__ = name
    return function


def _sum(config, values):
    if not values:
        return integer(0, config)
    return functools.reduce(numbers.add, values)


def _prod(config, values):
    if not values:
        return integer(1, config)
    return functools.reduce(numbers.multiply, values)


def _non_empty(name, values):
    if not values:
        raise DomainError(f"{name}() of an empty collection")
    return [as_number(x) for x in values]


def _mean(values):
    values = _non_empty("mean", values)
    return numbers.divide(functools.reduce(numbers.add, values), Rational(len(values)))


def _min(values):
    values = _non_empty("min", values)
    return functools.reduce(lambda x, y: y if numbers.compare(y, x) is LT else x, values)


def _max(values):
    values = _non_empty("max", values)
    return functools.reduce(lambda x, y: y if numbers.compare(y, x) is GT else x, values)


def _variance(values, normalization="unbiased"):
    values = _non_empty("variance", values)
    try:
        correction = NORMALIZATIONS[normalization]
    except KeyError:
        raise DomainError(f"unknown normalization: {normalization!r}")
    mean = _mean(values)
    deviations = [numbers.subtract(x, mean) for x in values]
    squares = functools.reduce(numbers.add, [numbers.multiply(d, d) for d in deviations])
    return numbers.divide(squares, Rational(len(values) + correction))


def _std(config, values, normalization="unbiased"):
    return numbers.sqrt(_variance(values, normalization), config.precision)


# ==============================================================================
# CONSTANTS
# ==============================================================================


def decimal_pi(precision: int) -> decimal.Decimal:
    """
    Compute pi to the given number of significant digits.
    """
    ctx = decimal.Context(prec=precision + 3)
    lasts, t, s, n, na, d, da = 0, decimal.Decimal(3), decimal.Decimal(3), 1, 0, 0, 24
    while s != lasts:
        lasts = s
        n, na = n + na, na + 8
        d, da = d + da, da + 32
        t = ctx.divide(ctx.multiply(t, n), d)
        s = ctx.add(s, t)
    return decimal.Context(prec=precision).plus(s)


def constants(config: Config) -> Dict[str, object]:
    """
    Builtin constants for the given configuration.
    """
    if config.number == "decimal":
        precision = config.precision
        pi = Decimal(decimal_pi(precision), precision)
        e = numbers.exp(Decimal(1, precision))
        inf, nan = Decimal("Infinity", precision), Decimal("NaN", precision)
    else:
        pi, e = Float(math.pi), Float(math.e)
        inf, nan = Float(math.inf), Float(math.nan)
    return {
        "pi": pi,
        "e": e,
        "tau": numbers.multiply(pi, Rational(2)),
        "true": True,
        "false": False,
        "Infinity": inf,
        "NaN": nan,
    }


# ==============================================================================
# REGISTRY
# ==============================================================================

# Functions that receive the configuration as first argument
CONFIGURABLE = [
    ("pow", pow),
    ("sqrt", sqrt),
    ("exp", exp),
    ("log", log),
    ("log10", log10),
    ("compare", compare),
    ("bignumber", bignumber),
    ("size", size),
    ("ones", ones),
    ("zeros", zeros),
    ("identity", identity),
    ("diag", diag),
    ("range", range_),
    ("subset", subset),
]

OPERATIONS = [
    # Arithmetic
    ("add", add),
    ("subtract", subtract),
    ("multiply", multiply),
    ("divide", divide),
    ("mod", mod),
    ("unary_minus", unary_minus),
    ("unary_plus", unary_plus),
    ("abs", absolute),
    ("sign", sign),
    ("square", square),
    ("cube", cube),
    ("floor", floor),
    ("ceil", ceil),
    ("round", round_),
    ("factorial", factorial),
    # Trigonometry
    *((name, elementwise(numbers.float_function(func))) for name, func in TRIGONOMETRIC.items()),
    ("atan2", atan2),
    # Comparison
    ("equal", equal),
    ("unequal", unequal),
    ("smaller", smaller),
    ("smaller_eq", smaller_eq),
    ("larger", larger),
    ("larger_eq", larger_eq),
    # Predicates and conversions
    ("is_positive", is_positive),
    ("is_negative", is_negative),
    ("is_zero", is_zero),
    ("is_integer", is_integer),
    ("is_numeric", is_numeric),
    ("has_numeric_value", has_numeric_value),
    ("number", number),
    ("fraction", fraction),
    ("format", format),
    ("type_of", type_of),
    # Containers
    ("matrix", matrix),
    ("transpose", transpose),
    ("concat", concat),
    ("index", index),
    ("map", map_),
    ("filter", filter_),
    ("matmul", matmul),
]


def builtins(config: Config) -> Dict[str, Callable]:
    """
    Mapping of names to builtin operations bound to the given configuration.
    """
    ops = dict(OPERATIONS)
    ops.update((name, partial(func, config)) for name, func in CONFIGURABLE)
    ops.update(
        sum=statistic("sum", partial(_sum, config)),
        prod=statistic("prod", partial(_prod, config)),
        mean=statistic("mean", _mean),
        min=statistic("min", _min),
        max=statistic("max", _max),
        variance=statistic("variance", _variance, normalized=True),
        std=statistic("std", partial(_std, config), normalized=True),
    )
    return ops


def default_registry(config: Config = None) -> Registry:
    """
    Create a new registry with all builtin operations and constants.
    """
    config = Config() if config is None else config
    registry = Registry()
    for name, function in builtins(config).items():
        registry.register(name, function)
    for name, value in constants(config).items():
        registry.constant(name, value)
    return registry
