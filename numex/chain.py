from typing import Callable, Dict

from .exceptions import ChainResolved, UnknownOperation
from .matrix import format_value
from .registry import Operation


class Chain:
    """
    Fluent wrapper that threads a value through registry operations.

    Each method call applies the operation with the same name to the wrapped
    value (as first argument) and the given arguments, returning a new chain.

    Examples:
        >>> chain(3).add(4).multiply(2).resolve()
        Float(14.0)

    The mapping of operations is captured when the chain is created.
    Resolving a chain returns the wrapped value and makes the handle inert:
    any further use raises ChainResolved.
    """

    __slots__ = ("_value", "_operations", "_coerce", "_resolved")

    def __init__(self, value, operations: Dict[str, Operation], coerce: Callable = None):
        if isinstance(value, Chain):
            value = value.value_of()
        self._value = value
        self._operations = operations
        self._coerce = coerce or (lambda x: x)
        self._resolved = False

    def __repr__(self):
        state = " (resolved)" if self._resolved else ""
        return f"Chain({self._value!r}){state}"

    def __str__(self):
        return self.to_string()

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        self._check()
        try:
            operation = self._operations[name]
        except KeyError:
            raise UnknownOperation(name)

        def method(*args):
            self._check()
            args = [self._unwrap(arg) for arg in args]
            value = operation(self._value, *args)
            return Chain(value, self._operations, self._coerce)

        method.__name__ = name
        return method

    def _check(self):
        if self._resolved:
            raise ChainResolved("chain was already resolved")

    def _unwrap(self, arg):
        if isinstance(arg, Chain):
            return arg.value_of()
        return self._coerce(arg)

    def resolve(self):
        """
        Return wrapped value and make chain inert.
        """
        self._check()
        self._resolved = True
        return self._value

    done = resolve

    def value_of(self):
        """
        Return wrapped value without resolving the chain.
        """
        self._check()
        return self._value

    def to_string(self) -> str:
        """
        String representation of wrapped value. Does not resolve the chain.
        """
        self._check()
        return format_value(self._value)
