"""
Engines bundle a configuration, a registry of operations, a parser and an
evaluator. Module level functions use cached default engines.
"""
from functools import lru_cache
from typing import Any, Dict, List, Union

from . import ast
from .chain import Chain
from .config import Config
from .evaluator import Evaluator, FunctionValue
from .exceptions import EmptyProgram
from .functions import coerce, default_registry
from .logging import log
from .parser import Parser
from .registry import Factory, Operation, Registry, infer_arity
from .scope import Scope, as_scope

Expression = Union[str, ast.Node, List[Union[str, ast.Node]]]


class Compiled:
    """
    Parsed expression bound to an engine.
    """

    __slots__ = ("node", "engine")

    def __init__(self, node: ast.Node, engine: "Engine"):
        self.node = node
        self.engine = engine

    def __repr__(self):
        return f"<Compiled: {self.node.source()}>"

    def __str__(self):
        return self.node.source()

    def evaluate(self, scope=None):
        return self.engine.evaluator.evaluate(self.node, scope)


class Engine:
    """
    Expression engine.

    Args:
        config:
            A Config instance. Extra keyword options override its fields.
        registry:
            Registry of operations. Each engine creates a fresh registry with
            the builtin operations and its own "evaluate" operation, unless
            one is given explicitly. Given registries are used unchanged.

    Registry operations are also available as methods. Python values passed
    to them are converted to the engine's values:

        >>> engine = Engine(number="rational")
        >>> engine.divide(1, 3)
        Rational(1, 3)
    """

    def __init__(self, config: Config = None, registry: Registry = None, **options):
        if config is None:
            config = Config(**options)
        elif options:
            config = config.replace(**options)
        self.config = config
        self.parser = Parser.from_config(config)
        if registry is None:
            registry = default_registry(config)
            registry.register("evaluate", self._evaluate_operation, arity=1)
        self.registry = registry
        self.evaluator = Evaluator(registry, config)
        log.debug(f"created engine {config!r}")

    def __repr__(self):
        return f"Engine({self.config!r})"

    def __getattr__(self, name):
        registry = self.__dict__.get("registry")
        if name.startswith("_") or registry is None:
            raise AttributeError(name)
        if name in registry.constants:
            return registry.constants[name]
        try:
            operation = registry.operations[name]
        except KeyError:
            raise AttributeError(f"engine has no operation {name!r}")

        def method(*args):
            return operation(*map(self.coerce, args))

        method.__name__ = name
        return method

    def coerce(self, value):
        """
        Convert Python value to the kinds of values used by the engine.
        """
        return coerce(value, self.config)

    def parse(self, src: str) -> ast.Node:
        """
        Parse source code into an expression tree.
        """
        return self.parser.parse(src)

    def compile(self, src: str) -> Compiled:
        """
        Parse source code and return an object that can be evaluated many
        times with different scopes.
        """
        return Compiled(self.parse(src), self)

    def evaluate(self, expr: Expression, scope=None):
        """
        Evaluate expression.

        Args:
            expr:
                Source code, an expression tree or a list of those. Lists are
                evaluated in order in the same scope and return the value of
                the last expression.
            scope:
                A Scope, a dictionary (that receives assignments) or None.
        """
        scope = as_scope(scope)
        if isinstance(expr, (list, tuple)):
            if not expr:
                raise EmptyProgram("no expressions to evaluate")
            result = None
            for item in expr:
                result = self.evaluate(item, scope)
            return result
        elif isinstance(expr, str):
            if not expr.strip():
                raise EmptyProgram("empty expression")
            expr = self.parse(expr)
        return self.evaluator.evaluate(expr, scope)

    def _evaluate_operation(self, expr):
        return self.evaluate(expr, Scope())

    def chain(self, value) -> Chain:
        """
        Wrap value in a chain bound to the current registry operations.
        """
        return Chain(self.coerce(value), self.registry.snapshot(), self.coerce)

    def session(self, scope=None) -> "Session":
        """
        Create a session with a persistent scope.
        """
        return Session(self, scope)

    def import_(self, mapping: Dict[str, Any], override=False):
        """
        Import functions, factories and constants into the registry.

        Existing names raise ValueError unless override is True.
        """
        prepared = {}
        for name, value in mapping.items():
            if isinstance(value, (Factory, Operation, FunctionValue)):
                prepared[name] = value
            elif callable(value):
                prepared[name] = Operation(name, self._host_function(value), infer_arity(value))
            else:
                prepared[name] = self.coerce(value)
        self.registry.import_(prepared, override=override)

    def _host_function(self, func):
        def function(*args):
            return self.coerce(func(*args))

        function.__name__ = getattr(func, "__name__", "function")
        return function


class Session:
    """
    Engine with a persistent scope.
    """

    def __init__(self, engine: Engine = None, scope=None):
        self.engine = Engine() if engine is None else engine
        self.scope = as_scope(scope)

    def __repr__(self):
        return f"<Session: {', '.join(self.scope.get_all())}>"

    def evaluate(self, expr: Expression):
        return self.engine.evaluate(expr, self.scope)

    def get(self, name: str, default=None):
        return self.scope.get(name, default)

    def set(self, name: str, value):
        return self.scope.set(name, self.engine.coerce(value))

    def get_all(self) -> Dict[str, Any]:
        return self.scope.get_all()

    def remove(self, name: str):
        self.scope.remove(name)

    def clear(self):
        self.scope.clear()


#
# Module API
#
@lru_cache(16)
def _cached_engine(options) -> Engine:
    return Engine(**dict(options))


def default_engine(**options) -> Engine:
    """
    Shared engine for the given options.

    Shared engines should not be modified with import_(). Use create() to
    obtain a private engine.
    """
    return _cached_engine(tuple(sorted(options.items())))


def create(**options) -> Engine:
    """
    Create a new engine with a private registry.
    """
    return Engine(**options)


def parse(src: str, **options) -> ast.Node:
    return default_engine(**options).parse(src)


def compile(src: str, **options) -> Compiled:
    return default_engine(**options).compile(src)


def evaluate(expr: Expression, scope=None, **options):
    return default_engine(**options).evaluate(expr, scope)


def chain(value, **options) -> Chain:
    return default_engine(**options).chain(value)
