"""
Registry of named operations.

Operators, builtin functions and chain methods are all resolved by name
through a registry. Replacing an entry (e.g., "add") changes the behavior of
every construct that uses it.
"""
import inspect
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Union

from .exceptions import ArityMismatch, UnknownOperation
from .logging import log

Arity = Union[int, Tuple[int, Optional[int]], None]
NOT_GIVEN = object()


class Operation:
    """
    Named callable with an explicit arity.

    Args:
        name:
            Name used to register operation.
        function:
            Python implementation.
        arity:
            Either an exact number of arguments, a (min, max) pair (max can be
            None) or None for variadic functions. It is inferred from the
            signature of function if not given.
    """

    __slots__ = ("name", "function", "arity")

    def __init__(self, name: str, function: Callable, arity: Arity = NOT_GIVEN):
        self.name = name
        self.function = function
        self.arity = infer_arity(function) if arity is NOT_GIVEN else arity

    def __repr__(self):
        return f"Operation({self.name!r}, arity={self.arity!r})"

    def __call__(self, *args):
        self.check_arity(len(args))
        return self.function(*args)

    @property
    def bounds(self) -> Tuple[int, Optional[int]]:
        """
        Minimum and maximum number of arguments (max is None if unbounded).
        """
        arity = self.arity
        if arity is None:
            return 0, None
        elif isinstance(arity, int):
            return arity, arity
        return arity

    def check_arity(self, n: int):
        """
        Raise ArityMismatch if operation does not accept n arguments.
        """
        lo, hi = self.bounds
        if n < lo or (hi is not None and n > hi):
            if lo == hi:
                expected = str(lo)
            elif hi is None:
                expected = f"at least {lo}"
            else:
                expected = f"{lo} to {hi}"
            raise ArityMismatch(
                f"{self.name}() expects {expected} arguments, got {n}"
            )


def infer_arity(function) -> Arity:
    """
    Infer arity of a Python callable from its signature.
    """
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        return None

    required = optional = 0
    for param in signature.parameters.values():
        if param.kind is param.VAR_POSITIONAL:
            return required, None
        elif param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            if param.default is param.empty:
                required += 1
            else:
                optional += 1
    if optional:
        return required, required + optional
    return required


class Factory:
    """
    Deferred operation that is created when imported into a registry.

    The create function receives the resolved dependencies as keyword
    arguments and must return the implementation.
    """

    __slots__ = ("name", "dependencies", "create")

    def __init__(self, name: str, dependencies: Iterable[str], create: Callable):
        self.name = name
        self.dependencies = tuple(dependencies)
        self.create = create

    def __repr__(self):
        return f"Factory({self.name!r}, {list(self.dependencies)!r})"

    def __call__(self, registry: "Registry"):
        resolved = {name: registry.resolve(name) for name in self.dependencies}
        return self.create(**resolved)


def factory(name: str, dependencies: Iterable[str], create: Callable) -> Factory:
    """
    Declare an operation that depends on other registry entries.

    Dependencies are resolved when the factory is imported into an engine.
    An unknown dependency raises UnknownOperation.

    Examples:
        >>> double = factory("double", ["multiply"], lambda multiply: lambda x: multiply(x, 2))
    """
    return Factory(name, dependencies, create)


class Registry:
    """
    Mapping of names to operations and constants.
    """

    def __init__(self, operations: Dict[str, Operation] = None, constants: Dict[str, Any] = None):
        self.operations: Dict[str, Operation] = dict(operations or {})
        self.constants: Dict[str, Any] = dict(constants or {})

    def __repr__(self):
        return f"<Registry: {len(self.operations)} operations, {len(self.constants)} constants>"

    def __contains__(self, name):
        return name in self.operations or name in self.constants

    def __iter__(self):
        yield from self.operations
        yield from self.constants

    def register(self, name=None, function=None, *, arity: Arity = NOT_GIVEN):
        """
        Register function under the given name.

        Can be used as a decorator either with or without a name:

            @registry.register
            def double(x): ...

            @registry.register("twice", arity=1)
            def double(x): ...
        """
        if callable(name):
            name, function = name.__name__, name
        if function is None:

            def decorator(func):
                self.register(name or func.__name__, func, arity=arity)
                return func

            return decorator

        op = function if isinstance(function, Operation) else Operation(name, function, arity)
        if op.name != name:
            op = Operation(name, op.function, op.arity)
        self.operations[name] = op
        self.constants.pop(name, None)
        return op

    def constant(self, name: str, value):
        """
        Register constant value.
        """
        self.constants[name] = value
        self.operations.pop(name, None)
        return value

    def lookup(self, name: str) -> Operation:
        """
        Return operation with the given name or raise UnknownOperation.
        """
        try:
            return self.operations[name]
        except KeyError:
            raise UnknownOperation(name)

    def resolve(self, name: str):
        """
        Return operation or constant with the given name or raise
        UnknownOperation.
        """
        if name in self.constants:
            return self.constants[name]
        return self.lookup(name)

    def remove(self, name: str):
        if self.operations.pop(name, None) is None and self.constants.pop(name, NOT_GIVEN) is NOT_GIVEN:
            raise UnknownOperation(name)

    def copy(self) -> "Registry":
        return Registry(self.operations, self.constants)

    def snapshot(self) -> Dict[str, Operation]:
        """
        Copy of the current mapping of operations.
        """
        return dict(self.operations)

    def import_(self, mapping: Dict[str, Any], override=False):
        """
        Import values from mapping.

        Callables become operations, factories are resolved against the
        registry after all other values are imported and everything else is
        registered as a constant. Existing names raise ValueError, unless
        override=True.
        """
        if not override:
            for name in mapping:
                if name in self:
                    raise ValueError(f"cannot import {name!r}: name already exists")

        factories = []
        for name, value in mapping.items():
            if isinstance(value, Factory):
                factories.append((name, value))
            elif callable(value):
                self.register(name, value)
            else:
                self.constant(name, value)

        for name, value in factories:
            self.register(name, value(self))

        log.debug(f"imported {len(mapping)} names: {', '.join(mapping)}")
