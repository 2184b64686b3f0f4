import json
from typing import Tuple

from .base import Node
from .utils import intersperse, wrap_tokens
from .. import operators as ops
from ..numbers import Number, Rational


# ==============================================================================
# LEAF NODES
# ==============================================================================


class Constant(Node):
    """
    Literal value: a number, a string or a boolean.
    """

    __slots__ = _fields = ("value",)

    @property
    def precedence_level(self):
        value = self.value
        if isinstance(value, Number):
            if isinstance(value, Rational) and value.denominator != 1:
                return ops.BinaryOp.DIV.precedence_level
            if value.sign() < 0:
                return ops.UnaryOp.NEG.precedence_level
        return ops.PRECEDENCE_ATOM

    def _key(self):
        return type(self.value), self.value

    def tokens(self):
        value = self.value
        if isinstance(value, bool):
            yield "true" if value else "false"
        elif isinstance(value, str):
            yield json.dumps(value, ensure_ascii=False)
        elif isinstance(value, Number):
            yield value.to_string()
        else:
            yield str(value)


class Symbol(Node):
    """
    Reference to a variable, constant or function by name.
    """

    __slots__ = _fields = ("name",)

    def tokens(self):
        yield self.name


# ==============================================================================
# OPERATORS
# ==============================================================================


class UnaryOp(Node):
    """
    Prefix (+x, -x) or postfix (x!) operator.
    """

    __slots__ = _fields = ("op", "operand")

    def __init__(self, op, operand):
        super().__init__(ops.UnaryOp.from_name(op), operand)

    @property
    def precedence_level(self):
        return self.op.precedence_level

    def tokens(self):
        wrap = self.operand.precedence_level < self.precedence_level
        if self.op.postfix:
            yield from self.child_tokens(self.operand, wrap)
            yield self.op.value
        else:
            yield self.op.value
            yield from self.child_tokens(self.operand, wrap)


class BinaryOp(Node):
    """
    Binary operator, e.g., ``lhs + rhs`` or ``lhs < rhs``.
    """

    __slots__ = _fields = ("op", "lhs", "rhs")

    def __init__(self, op, lhs, rhs):
        super().__init__(ops.BinaryOp.from_name(op), lhs, rhs)

    @property
    def precedence_level(self):
        return self.op.precedence_level

    def tokens(self):
        op = self.op
        level = op.precedence_level

        lhs_level = self.lhs.precedence_level
        wrap = lhs_level < level or (lhs_level == level and op.right_associative)
        yield from self.child_tokens(self.lhs, wrap)

        yield f" {op.value} "

        rhs_level = self.rhs.precedence_level
        wrap = rhs_level < level or (rhs_level == level and op.left_associative)
        yield from self.child_tokens(self.rhs, wrap)


# ==============================================================================
# COMPOSITE NODES
# ==============================================================================


class Call(Node):
    """
    Function call ``name(*args)``.
    """

    __slots__ = _fields = ("name", "args")

    def __init__(self, name: str, args=()):
        super().__init__(name, tuple(args))

    def tokens(self):
        yield self.name
        yield "("
        yield from intersperse(", ", (arg.tokens() for arg in self.args))
        yield ")"


class FunctionDef(Node):
    """
    Definition of a user function, ``name(*params) = body``.
    """

    __slots__ = _fields = ("name", "params", "body")
    precedence_level = ops.PRECEDENCE_STATEMENT

    def __init__(self, name: str, params: Tuple[str, ...], body: Node):
        super().__init__(name, tuple(params), body)

    def tokens(self):
        yield self.name
        yield "("
        yield ", ".join(self.params)
        yield ") = "
        yield from self.body.tokens()


class Assign(Node):
    """
    Variable assignment ``name = value``.
    """

    __slots__ = _fields = ("name", "value")
    precedence_level = ops.PRECEDENCE_STATEMENT

    def tokens(self):
        yield self.name
        yield " = "
        yield from self.value.tokens()


class Parenthesis(Node):
    """
    Explicit parenthesis in source code.

    It evaluates to the value of its content, but is kept in the tree so
    source can be reconstructed faithfully.
    """

    __slots__ = _fields = ("content",)

    def tokens(self):
        yield from self.child_tokens(self.content, True)


class MatrixLiteral(Node):
    """
    Matrix literal ``[a, b, c]``. Nested literals create 2-D matrices.
    """

    __slots__ = _fields = ("items",)

    def __init__(self, items=()):
        super().__init__(tuple(items))

    def tokens(self):
        items = intersperse(", ", (item.tokens() for item in self.items))
        yield from wrap_tokens(items, brackets="[]")


class Range(Node):
    """
    Range ``start:end`` or ``start:step:end``. The end is inclusive.

    Step is None when omitted.
    """

    __slots__ = _fields = ("start", "step", "end")
    precedence_level = ops.PRECEDENCE_RANGE

    def tokens(self):
        parts = [self.start, self.end] if self.step is None else [self.start, self.step, self.end]
        parts = (self.child_tokens(x, x.precedence_level <= self.precedence_level) for x in parts)
        yield from intersperse(":", parts)


class Block(Node):
    """
    Sequence of statements. Evaluates to the value of the last statement.
    """

    __slots__ = _fields = ("statements",)
    precedence_level = ops.PRECEDENCE_STATEMENT

    def __init__(self, statements=()):
        super().__init__(tuple(statements))

    def tokens(self):
        yield from intersperse("\n", (stmt.tokens() for stmt in self.statements))
