__all__ = [
    "NumexError",
    "ParseError",
    "EvalError",
    "UndefinedSymbol",
    "ArityMismatch",
    "ShapeMismatch",
    "DivisionByZero",
    "DomainError",
    "UnsupportedOperand",
    "UnknownOperation",
    "EmptyProgram",
    "RecursionLimitExceeded",
    "ChainResolved",
]


class NumexError(Exception):
    """
    Base class for all errors raised by numex.
    """


class ParseError(NumexError):
    """
    Malformed source code.

    Attributes:
        offset:
            0-based position of the offending character in the source string.
        line, column:
            1-based line and column of the same position.
    """

    def __init__(self, msg, offset=None, source=None):
        super().__init__(msg)
        self.msg = msg
        self.offset = offset
        self.source = source
        self.line = self.column = None
        if offset is not None and source is not None:
            head = source[:offset]
            self.line = head.count("\n") + 1
            self.column = offset - (head.rfind("\n") + 1) + 1

    def __str__(self):
        if self.line is None:
            return self.msg
        return f"{self.msg} (line {self.line}, column {self.column})"


class EvalError(NumexError):
    """
    Base class for errors raised while evaluating expressions.
    """


class UndefinedSymbol(EvalError):
    """
    Name is not bound in scope, nor in the registry.
    """

    def __init__(self, name):
        super().__init__(f"undefined symbol: {name}")
        self.name = name


class ArityMismatch(EvalError, TypeError):
    """
    Function called with the wrong number of arguments.
    """


class ShapeMismatch(EvalError):
    """
    Containers with incompatible dimensions.
    """


class DivisionByZero(EvalError, ZeroDivisionError):
    """
    Division by an exact zero (Rational and Decimal kinds).
    """


class DomainError(EvalError, ValueError):
    """
    Argument outside the domain of a function (e.g., sqrt of a negative
    Decimal).
    """


class UnsupportedOperand(EvalError, TypeError):
    """
    Value of a type not supported by the requested operation.
    """


class UnknownOperation(EvalError):
    """
    Operation is not present in the registry.
    """

    def __init__(self, name):
        super().__init__(f"unknown operation: {name}")
        self.name = name


class EmptyProgram(EvalError):
    """
    Evaluation of an empty list of statements.
    """


class RecursionLimitExceeded(EvalError):
    """
    Evaluation nested deeper than the configured limit.
    """


class ChainResolved(EvalError):
    """
    Chain was already resolved and cannot be used anymore.
    """
