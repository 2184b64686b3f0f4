import enum
from typing import Union

PRECEDENCE_STATEMENT = 0
PRECEDENCE_COMPARISON = 2
PRECEDENCE_RANGE = 3
PRECEDENCE_ADD = 4
PRECEDENCE_MUL = 5
PRECEDENCE_POW = 6
PRECEDENCE_UNARY = 7
PRECEDENCE_FACTORIAL = 8
PRECEDENCE_ATOM = 10


class Op(enum.Enum):
    """
    Base enum for operator symbols.

    Each member maps to a precedence level and to the name of the registry
    operation that evaluates it. Subclasses fill both tables after the class
    body, since members only exist once the enum is created.
    """

    @classmethod
    def from_name(cls, symbol: Union[str, "Op"]) -> "Op":
        """
        Return the operator spelled as symbol.

        Operators that are already members of cls are returned unchanged.
        """
        if isinstance(symbol, cls):
            return symbol
        try:
            return cls(symbol)
        except ValueError:
            raise ValueError(f"invalid operator: {symbol}") from None

    @property
    def function_name(self) -> str:
        """
        Registry name of the operation that implements the operator.
        """
        return _FUNCTIONS[self]

    @property
    def precedence_level(self) -> int:
        """
        Binding power of operator. Higher values bind tighter.
        """
        return _PRECEDENCE[self]

    def __repr__(self):
        return "Op." + self.name


class BinaryOp(Op):
    """
    Binary operators of the expression language, from loosest to tightest.
    """

    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "^"

    @property
    def right_associative(self):
        return self is BinaryOp.POW

    @property
    def left_associative(self):
        return not self.right_associative


class UnaryOp(Op):
    """
    Unary operators. Factorial is the only postfix operator.
    """

    NEG = "-"
    POS = "+"
    FACTORIAL = "!"

    @property
    def postfix(self):
        return self is UnaryOp.FACTORIAL


_B, _U = BinaryOp, UnaryOp

# (operator, precedence, registry name)
_TABLE = [
    (_B.EQ, PRECEDENCE_COMPARISON, "equal"),
    (_B.NE, PRECEDENCE_COMPARISON, "unequal"),
    (_B.LT, PRECEDENCE_COMPARISON, "smaller"),
    (_B.LE, PRECEDENCE_COMPARISON, "smaller_eq"),
    (_B.GT, PRECEDENCE_COMPARISON, "larger"),
    (_B.GE, PRECEDENCE_COMPARISON, "larger_eq"),
    (_B.ADD, PRECEDENCE_ADD, "add"),
    (_B.SUB, PRECEDENCE_ADD, "subtract"),
    (_B.MUL, PRECEDENCE_MUL, "multiply"),
    (_B.DIV, PRECEDENCE_MUL, "divide"),
    (_B.MOD, PRECEDENCE_MUL, "mod"),
    (_B.POW, PRECEDENCE_POW, "pow"),
    (_U.NEG, PRECEDENCE_UNARY, "unary_minus"),
    (_U.POS, PRECEDENCE_UNARY, "unary_plus"),
    (_U.FACTORIAL, PRECEDENCE_FACTORIAL, "factorial"),
]
_PRECEDENCE = {op: level for op, level, _ in _TABLE}
_FUNCTIONS = {op: name for op, _, name in _TABLE}
del _B, _U
