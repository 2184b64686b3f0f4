"""
Hypothesis strategies for numbers and expression trees.
"""
from hypothesis import strategies as st

from . import ast
from .numbers import Decimal, Float, Rational
from .operators import BinaryOp, UnaryOp

names = lambda: st.sampled_from(["x", "y", "z", "alpha", "x1", "_tmp"])

floats = lambda **kwargs: st.floats(allow_nan=False, allow_infinity=False, **kwargs).map(Float)

rationals = lambda: st.builds(
    Rational,
    st.integers(-10 ** 6, 10 ** 6),
    st.integers(1, 10 ** 6),
)

decimals = lambda precision=64: st.decimals(
    allow_nan=False, allow_infinity=False, places=6
).map(lambda x: Decimal(x, precision))


def numbers():
    """
    Finite numbers of any kind.
    """
    return st.one_of(floats(), rationals(), decimals())


def constants():
    """
    Constant nodes with non-negative integral values, which have the same
    source representation in every kind of number.
    """
    return st.integers(0, 10 ** 6).map(lambda n: ast.Constant(Float(n)))


def atoms():
    return st.one_of(constants(), names().map(ast.Symbol))


def expressions(max_leaves=20):
    """
    Expression trees built from arithmetic operators, function calls and
    parenthesis.
    """
    binary_ops = st.sampled_from([op for op in BinaryOp])
    unary_ops = st.sampled_from([UnaryOp.NEG, UnaryOp.POS])

    def extend(children):
        return st.one_of(
            st.builds(ast.BinaryOp, binary_ops, children, children),
            st.builds(ast.UnaryOp, unary_ops, children),
            st.builds(lambda x: ast.UnaryOp(UnaryOp.FACTORIAL, x), children),
            st.builds(ast.Parenthesis, children),
            st.builds(ast.Call, names(), st.lists(children, min_size=1, max_size=3)),
        )

    return st.recursive(atoms(), extend, max_leaves=max_leaves)
