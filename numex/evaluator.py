from typing import Callable, Tuple

from . import ast
from .config import Config
from .exceptions import (
    ArityMismatch,
    RecursionLimitExceeded,
    UndefinedSymbol,
    UnsupportedOperand,
)
from .functions import arange, coerce, container, integer
from .logging import log
from .matrix import Matrix, size_of, to_nested
from .registry import Registry
from .scope import NOT_GIVEN, Scope, as_scope


class FunctionValue:
    """
    User defined function created by ``name(*params) = body``.

    Function values close over the scope in which they were defined and are
    plain Python callables: arguments are coerced as if they were passed from
    the expression language.
    """

    __slots__ = ("name", "params", "body", "closure", "evaluator")

    def __init__(self, name: str, params: Tuple[str, ...], body: ast.Node, closure: Scope, evaluator: "Evaluator"):
        self.name = name
        self.params = tuple(params)
        self.body = body
        self.closure = closure
        self.evaluator = evaluator

    def __repr__(self):
        return f"<function {self.source()}>"

    def __str__(self):
        return self.source()

    def __call__(self, *args):
        if len(args) != len(self.params):
            raise ArityMismatch(
                f"{self.name}() expects {len(self.params)} arguments, got {len(args)}"
            )
        evaluator = self.evaluator
        config = evaluator.config
        variables = {k: coerce(v, config) for k, v in zip(self.params, args)}
        if evaluator.depth >= config.max_depth:
            raise RecursionLimitExceeded(
                f"{self.name}() called more than {config.max_depth} levels deep"
            )
        evaluator.depth += 1
        try:
            return evaluator.evaluate(self.body, self.closure.child(variables))
        finally:
            evaluator.depth -= 1

    @property
    def arity(self) -> int:
        return len(self.params)

    def source(self) -> str:
        return ast.FunctionDef(self.name, self.params, self.body).source()


class Evaluator:
    """
    Tree walking evaluator.

    Operators and function calls are resolved through the registry, so
    replacing a registry entry changes how expressions evaluate.
    """

    def __init__(self, registry: Registry, config: Config = None):
        self.registry = registry
        self.config = Config() if config is None else config
        self.depth = 0
        self.handlers = {
            ast.Constant: self.eval_constant,
            ast.Symbol: self.eval_symbol,
            ast.UnaryOp: self.eval_unary_op,
            ast.BinaryOp: self.eval_binary_op,
            ast.Call: self.eval_call,
            ast.FunctionDef: self.eval_function_def,
            ast.Assign: self.eval_assign,
            ast.Parenthesis: self.eval_parenthesis,
            ast.MatrixLiteral: self.eval_matrix,
            ast.Range: self.eval_range,
            ast.Block: self.eval_block,
        }

    def evaluate(self, node: ast.Node, scope=None):
        """
        Evaluate expression tree in the given scope (a Scope, a dictionary or
        None).
        """
        scope = as_scope(scope)
        try:
            return self.eval(node, scope)
        except RecursionError:
            raise RecursionLimitExceeded("maximum recursion depth exceeded") from None

    def eval(self, node: ast.Node, scope: Scope):
        try:
            handler = self.handlers[type(node)]
        except KeyError:
            raise TypeError(f"cannot evaluate {type(node).__name__} objects")

        return handler(node, scope)

    #
    # Node handlers
    #
    def eval_constant(self, node, scope):
        return node.value

    def eval_symbol(self, node, scope):
        name = node.name
        value = scope.get(name, NOT_GIVEN)
        if value is not NOT_GIVEN:
            return coerce(value, self.config)
        registry = self.registry
        if name in registry.constants:
            return registry.constants[name]
        elif name in registry.operations:
            return registry.operations[name]
        raise UndefinedSymbol(name)

    def eval_unary_op(self, node, scope):
        operand = self.eval(node.operand, scope)
        return self.registry.lookup(node.op.function_name)(operand)

    def eval_binary_op(self, node, scope):
        # Long left-nested chains (1 + 2 + 3 + ...) are folded in a loop
        chain = []
        while isinstance(node, ast.BinaryOp) and node.op.left_associative:
            chain.append(node)
            node = node.lhs
        if not chain:
            lhs = self.eval(node.lhs, scope)
            rhs = self.eval(node.rhs, scope)
            return self.registry.lookup(node.op.function_name)(lhs, rhs)

        value = self.eval(node, scope)
        for link in reversed(chain):
            rhs = self.eval(link.rhs, scope)
            value = self.registry.lookup(link.op.function_name)(value, rhs)
        return value

    def eval_call(self, node, scope):
        func = self.function(node.name, scope)
        args = [self.eval(arg, scope) for arg in node.args]
        return func(*args)

    def function(self, name: str, scope: Scope) -> Callable:
        """
        Resolve callable by name in scope or in the registry.
        """
        value = scope.get(name, NOT_GIVEN)
        if value is NOT_GIVEN:
            if name in self.registry.operations:
                return self.registry.operations[name]
            elif name in self.registry.constants:
                value = self.registry.constants[name]
            else:
                raise UndefinedSymbol(name)
        if not callable(value):
            raise UnsupportedOperand(f"{name} is not a function")
        elif isinstance(value, FunctionValue):
            return value
        return self.host_function(value)

    def host_function(self, func):
        config = self.config

        def function(*args):
            return coerce(func(*args), config)

        return function

    def eval_function_def(self, node, scope):
        func = FunctionValue(node.name, node.params, node.body, scope, self)
        log.debug(f"defined function {func}")
        return scope.set(node.name, func)

    def eval_assign(self, node, scope):
        return scope.set(node.name, self.eval(node.value, scope))

    def eval_parenthesis(self, node, scope):
        return self.eval(node.content, scope)

    def eval_matrix(self, node, scope):
        items = [self.eval(item, scope) for item in node.items]
        data = [to_nested(x) if isinstance(x, Matrix) else x for x in items]
        if self.config.matrix == "matrix":
            return Matrix(data)
        size_of(data)
        return data

    def eval_range(self, node, scope):
        start = self.eval(node.start, scope)
        if node.step is None:
            step = integer(1, self.config)
        else:
            step = self.eval(node.step, scope)
        end = self.eval(node.end, scope)
        return container(arange(start, end, step, include_end=True), self.config)

    def eval_block(self, node, scope):
        result = None
        for statement in node.statements:
            result = self.eval(statement, scope)
        return result
