import pytest

from numex.exceptions import ShapeMismatch, UnsupportedOperand
from numex.matrix import Index, Matrix, broadcast, format_value, resize, size_of, subset
from numex.numbers import Decimal, Float, Rational

add = lambda x, y: x + y


class TestMatrix:
    def test_size(self):
        assert Matrix([[1, 2, 3], [4, 5, 6]]).size() == [2, 3]
        assert Matrix().size() == [0]
        assert size_of(1) == []
        with pytest.raises(ShapeMismatch):
            Matrix([[1, 2], [3]])
        with pytest.raises(UnsupportedOperand):
            Matrix(1)

    def test_matrices_do_not_share_data(self):
        data = [[1, 2], [3, 4]]
        m = Matrix(data)
        data[0][0] = 42
        assert m[0] == [1, 2]
        row = m[0]
        row[0] = 42
        assert m.value_of() == [[1, 2], [3, 4]]

    def test_transpose_and_resize(self):
        m = Matrix([[1, 2, 3], [4, 5, 6]])
        assert m.transpose() == Matrix([[1, 4], [2, 5], [3, 6]])
        assert m.resize([3, 2]) == Matrix([[1, 2], [4, 5], [0, 0]])
        assert m.size() == [2, 3]
        assert resize([1, 2], [4], default=9) == [1, 2, 9, 9]

    def test_subset(self):
        m = Matrix([[1, 2], [3, 4]])
        assert m.subset(Index(1, 1)) == 4
        assert m.subset(Index([0, 1], 0)) == Matrix([1, 3])
        assert m[1, 0] == 3
        replaced = m.subset(Index(0, 0), 9)
        assert replaced == Matrix([[9, 2], [3, 4]])
        assert m == Matrix([[1, 2], [3, 4]])
        with pytest.raises(ShapeMismatch):
            subset([1, 2], Index(0, 0))

    def test_broadcast(self):
        assert broadcast(add, [1, 2], 1) == [2, 3]
        assert broadcast(add, 1, Matrix([1, 2])) == Matrix([2, 3])
        assert broadcast(add, [[1], [2]], [[3], [4]]) == [[4], [6]]
        with pytest.raises(ShapeMismatch):
            broadcast(add, [1, 2], [[1, 2]])


class TestIndex:
    def test_dimensions(self):
        assert Index(1, [0, 2]).dimensions == (1, (0, 2))
        assert Index(Float(1)).dimensions == (1,)
        assert Index(1, 2).is_scalar()
        assert not Index([1], 2).is_scalar()

    def test_invalid_indexes(self):
        with pytest.raises(UnsupportedOperand):
            Index(Float(0.5))
        with pytest.raises(UnsupportedOperand):
            Index(True)
        with pytest.raises(ShapeMismatch):
            Index(-1)


class TestFormat:
    def test_format_values(self):
        assert format_value(Float(0.5)) == "0.5"
        assert format_value(Rational(1, 3)) == "1/3"
        assert format_value(Decimal("1.50")) == "1.5"
        assert format_value(True) == "true"
        assert format_value(None) == "null"
        assert format_value("a") == '"a"'
        assert format_value(Matrix([[1, 2], [3, 4]])) == "[[1, 2], [3, 4]]"

    def test_format_with_precision(self):
        assert format_value(Float(3.14159), 3) == "3.14"
        assert format_value(Rational(1, 3), 4) == "0.3333"
        assert format_value([Float(2 / 3)], 2) == "[0.67]"
