"""
Containers: immutable Matrix objects, plain lists ("arrays") and Index
selections.

Every function in this module accepts nested lists, tuples and Matrix
instances interchangeably. Results are Matrix instances if any container
argument is a Matrix, and plain lists otherwise.
"""
import itertools
import json
from typing import List

from .exceptions import ShapeMismatch, UnsupportedOperand
from .numbers import Float, Kind, Number, convert

__all__ = [
    "Matrix",
    "Index",
    "is_collection",
    "size_of",
    "to_nested",
    "flatten",
    "deep_map",
    "broadcast",
    "resize",
    "subset",
    "format_value",
]


def is_collection(value) -> bool:
    """
    True if value is a list, tuple or Matrix.
    """
    return isinstance(value, (list, tuple, Matrix))


def to_nested(value):
    """
    Return a deep copy of container as nested lists. Scalars are returned
    unchanged.
    """
    if isinstance(value, Matrix):
        value = value._data
    if isinstance(value, (list, tuple)):
        return [to_nested(x) for x in value]
    return value


def size_of(value) -> List[int]:
    """
    Return the dimensions of value.

    Scalars have size [], and ragged containers raise ShapeMismatch.
    """
    if isinstance(value, Matrix):
        return value.size()
    if not isinstance(value, (list, tuple)):
        return []
    if not value:
        return [0]
    sizes = [size_of(x) for x in value]
    first = sizes[0]
    for other in sizes[1:]:
        if other != first:
            raise ShapeMismatch(f"dimension mismatch: {first} != {other}")
    return [len(value), *first]


def flatten(value) -> list:
    """
    Return list with all scalar entries of container in row-major order.
    """
    if isinstance(value, Matrix):
        value = value._data
    if isinstance(value, (list, tuple)):
        return [y for x in value for y in flatten(x)]
    return [value]


def deep_map(func, value):
    """
    Apply func to every scalar entry of a container, preserving its shape and
    type. Scalars are passed directly to func.
    """
    if isinstance(value, Matrix):
        return Matrix(deep_map(func, value._data))
    elif isinstance(value, (list, tuple)):
        return [deep_map(func, x) for x in value]
    return func(value)


def _zip_map(func, x, y):
    if isinstance(x, list):
        return [_zip_map(func, u, v) for u, v in zip(x, y)]
    return func(x, y)


def broadcast(func, a, b):
    """
    Apply binary function elementwise.

    A scalar combined with a container is applied to every element of the
    container. Two containers must have the same shape.
    """
    a_is_collection, b_is_collection = is_collection(a), is_collection(b)
    if not (a_is_collection or b_is_collection):
        return func(a, b)

    as_matrix = isinstance(a, Matrix) or isinstance(b, Matrix)
    if a_is_collection and b_is_collection:
        size_a, size_b = size_of(a), size_of(b)
        if size_a != size_b:
            raise ShapeMismatch(f"dimension mismatch: {size_a} != {size_b}")
        data = _zip_map(func, to_nested(a), to_nested(b))
    elif a_is_collection:
        data = deep_map(lambda x: func(x, b), to_nested(a))
    else:
        data = deep_map(lambda y: func(a, y), to_nested(b))
    return Matrix(data) if as_matrix else data


def _first_scalar(value, default):
    while isinstance(value, list):
        if not value:
            return default
        value = value[0]
    return value


def resize(value, size, default=0):
    """
    Return nested lists with the given size. New entries are filled with
    default and extra entries are dropped.
    """
    data = to_nested(value)
    size = [int(n) for n in size]
    if any(n < 0 for n in size):
        raise ShapeMismatch(f"invalid size: {size}")
    if not size:
        return _first_scalar(data, default)
    return _resize(data, size, default)


def _resize(data, size, default):
    n, *rest = size
    if not isinstance(data, list):
        data = [] if data is None else [data]
    out = []
    for i in range(n):
        item = data[i] if i < len(data) else None
        if rest:
            out.append(_resize(item, rest, default))
        elif item is None:
            out.append(default)
        else:
            out.append(_first_scalar(item, default))
    return out


def _check_bounds(data, i):
    if not 0 <= i < len(data):
        raise ShapeMismatch(f"index out of range: {i} (size {len(data)})")


def _get(data, dims):
    head, *rest = dims
    if isinstance(head, int):
        _check_bounds(data, head)
        return _get(data[head], rest) if rest else data[head]
    out = []
    for i in head:
        _check_bounds(data, i)
        out.append(_get(data[i], rest) if rest else data[i])
    return out


def _set(data, position, item):
    *path, last = position
    for i in path:
        data = data[i]
    data[last] = item


def subset(value, index, replacement=None, default=0):
    """
    Get or replace a subset of a container.

    Args:
        value:
            A list or Matrix.
        index:
            An Index instance selecting (0-based) entries of each dimension.
        replacement:
            If given, return a copy of value with the selected entries
            replaced. Replacement can be a scalar or a container with the
            same (squeezed) shape of the selection. The container grows as
            necessary to fit the index, new entries are filled with default.

    Selections using a scalar in every dimension return a scalar. Scalar
    dimensions are otherwise squeezed from the result.
    """
    if not isinstance(index, Index):
        index = Index(*index) if isinstance(index, (list, tuple)) else Index(index)
    data = to_nested(value)
    size = size_of(data)
    dims = index.dimensions
    if len(dims) != len(size):
        raise ShapeMismatch(
            f"index has {len(dims)} dimensions, but value has {len(size)}"
        )

    if replacement is None:
        result = _get(data, dims)
    else:
        ranges = [[d] if isinstance(d, int) else list(d) for d in dims]
        needed = [max([n, *(i + 1 for i in r)]) for n, r in zip(size, ranges)]
        if needed != size:
            data = resize(data, needed, default)

        positions = list(itertools.product(*ranges))
        if is_collection(replacement):
            selection = [len(r) for r in ranges if len(r) != 1]
            shape = [n for n in size_of(replacement) if n != 1]
            if selection != shape:
                raise ShapeMismatch(
                    f"dimension mismatch: cannot replace {selection} with {shape}"
                )
            items = flatten(replacement)
        else:
            items = itertools.repeat(replacement)
        for position, item in zip(positions, items):
            _set(data, position, item)
        result = data

    if isinstance(value, Matrix) and isinstance(result, list):
        return Matrix(result)
    return result


def format_value(value, precision=None) -> str:
    """
    Render value as a string.

    Args:
        value:
            Any value produced by the evaluator.
        precision:
            Optional number of significant digits used to render numbers.
    """
    if isinstance(value, Number):
        if precision is None:
            return value.to_string()
        return _format_number(value, int(precision))
    elif isinstance(value, bool):
        return "true" if value else "false"
    elif value is None:
        return "null"
    elif isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    elif isinstance(value, Matrix):
        return format_value(value._data, precision)
    elif isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_value(x, precision) for x in value) + "]"
    return str(value)


def _format_number(value: Number, precision):
    if not value.is_finite():
        return value.to_string()
    if isinstance(value, Float):
        return f"{value.value:.{precision}g}".replace("e+", "e")
    significant = convert(value, Kind.DECIMAL, precision).value.normalize()
    return format(significant, "f")


# ==============================================================================
# MATRIX AND INDEX TYPES
# ==============================================================================


class Matrix:
    """
    Immutable rectangular container of values.

    Matrices wrap nested lists. Methods that would modify a matrix in place
    (resize, subset with a replacement, etc.) return new matrices instead.
    """

    __slots__ = ("_data", "_size")

    def __init__(self, data=None):
        if data is None:
            data = []
        elif isinstance(data, Matrix):
            data = data._data
        elif not isinstance(data, (list, tuple)):
            raise UnsupportedOperand(f"cannot create matrix from {data!r}")
        self._size = size_of(data)
        self._data = to_nested(data)

    @property
    def ndim(self) -> int:
        return len(self._size)

    def size(self) -> List[int]:
        """
        List with the length of each dimension.
        """
        return list(self._size)

    def value_of(self) -> list:
        """
        Copy of matrix data as nested lists.
        """
        return to_nested(self._data)

    def clone(self) -> "Matrix":
        return Matrix(self._data)

    def map(self, func) -> "Matrix":
        return deep_map(func, self)

    def flatten(self) -> list:
        return flatten(self._data)

    def transpose(self) -> "Matrix":
        """
        Transpose of a 2-D matrix. Vectors are returned unchanged.
        """
        if self.ndim == 1:
            return self.clone()
        elif self.ndim != 2:
            raise ShapeMismatch(f"cannot transpose matrix of size {self._size}")
        rows, cols = self._size
        return Matrix([[self._data[i][j] for i in range(rows)] for j in range(cols)])

    def resize(self, size, default=0) -> "Matrix":
        """
        Return a new matrix with the given size.
        """
        data = resize(self._data, size, default)
        return Matrix(data if isinstance(data, list) else [data])

    def subset(self, index, replacement=None, default=0):
        """
        See :func:`subset`.
        """
        return subset(self, index, replacement, default)

    def to_string(self) -> str:
        return format_value(self)

    def __str__(self):
        return format_value(self)

    def __repr__(self):
        return f"Matrix({self._data!r})"

    def __len__(self):
        return len(self._data)

    def __iter__(self):
        return iter(to_nested(self._data))

    def __getitem__(self, index):
        if isinstance(index, tuple):
            return subset(self, Index(*index))
        return to_nested(self._data[index])

    def __eq__(self, other):
        if isinstance(other, Matrix):
            return self._size == other._size and self._data == other._data
        elif isinstance(other, list):
            return self._data == other
        return NotImplemented

    __hash__ = None


class Index:
    """
    Zero-based selection of matrix entries.

    Each dimension receives either an integer or a sequence of integers.
    """

    __slots__ = ("_dimensions",)

    def __init__(self, *dimensions):
        self._dimensions = tuple(_index_dimension(d) for d in dimensions)

    @property
    def dimensions(self) -> tuple:
        return self._dimensions

    def is_scalar(self) -> bool:
        return all(isinstance(d, int) for d in self._dimensions)

    def __eq__(self, other):
        if isinstance(other, Index):
            return self._dimensions == other._dimensions
        return NotImplemented

    def __hash__(self):
        return hash(self._dimensions)

    def __repr__(self):
        args = ", ".join(map(repr, self._dimensions))
        return f"Index({args})"


def _index_dimension(value):
    if is_collection(value):
        items = flatten(value)
        return tuple(_index_dimension(x) for x in items)
    if isinstance(value, bool):
        raise UnsupportedOperand(f"invalid index: {value!r}")
    if isinstance(value, Number):
        if not value.is_integer():
            raise UnsupportedOperand(f"index must be an integer: {value}")
        value = int(value)
    if not isinstance(value, int):
        raise UnsupportedOperand(f"invalid index: {value!r}")
    if value < 0:
        raise ShapeMismatch(f"index out of range: {value}")
    return value
