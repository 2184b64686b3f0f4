from functools import lru_cache
from typing import Callable

from lark import Transformer, UnexpectedInput, UnexpectedToken, v_args

from . import ast
from .exceptions import ParseError
from .grammar import load_grammar
from .lexer import is_alpha as default_is_alpha, lexer_class, tokenize
from .numbers import DEFAULT_PRECISION, Decimal, Float, Kind, Rational


@v_args(inline=True)
class TreeBuilder(Transformer):
    """
    Build expression trees from the rules of the expression grammar.

    Numeric literals are converted to the given kind of number.
    """

    def __init__(self, number="float", precision=DEFAULT_PRECISION):
        super().__init__()
        self.kind = Kind(number)
        self.precision = precision

    def block(self, *statements):
        if len(statements) == 1:
            return statements[0]
        return ast.Block(statements)

    def assign(self, name, value):
        return ast.Assign(str(name), value)

    def function_def(self, name, args, body):
        params = []
        for arg in args or ():
            if not isinstance(arg, ast.Symbol):
                msg = f"invalid parameter in definition of {name}(): {arg}"
                raise ParseError(msg, name.start_pos)
            params.append(arg.name)
        if len(set(params)) != len(params):
            raise ParseError(f"repeated parameter in definition of {name}()", name.start_pos)
        return ast.FunctionDef(str(name), params, body)

    def binary(self, lhs, op, rhs):
        return ast.BinaryOp(str(op), lhs, rhs)

    def unary(self, op, operand):
        return ast.UnaryOp(str(op), operand)

    def factorial(self, operand, _bang):
        return ast.UnaryOp("!", operand)

    def range(self, *args):
        if len(args) == 2:
            start, end = args
            return ast.Range(start, None, end)
        return ast.Range(*args)

    def number(self, token):
        text = str(token)
        if self.kind is Kind.FLOAT:
            value = Float(float(text))
        elif self.kind is Kind.DECIMAL:
            value = Decimal(text, self.precision)
        else:
            value = Rational.from_string(text)
        return ast.Constant(value)

    def string(self, token):
        return ast.Constant(str(token))

    def symbol(self, token):
        return ast.Symbol(str(token))

    def call(self, name, args):
        return ast.Call(str(name), args or ())

    def parens(self, content):
        return ast.Parenthesis(content)

    def matrix(self, args):
        return ast.MatrixLiteral(args or ())

    def args(self, *items):
        return list(items)


@lru_cache(32)
def grammar_for(is_alpha: Callable = default_is_alpha, number="float", precision=DEFAULT_PRECISION):
    """
    Return the compiled Lark parser for the given classifier and kind of
    numeric literals.
    """
    return load_grammar(
        "expr",
        lexer=lexer_class(is_alpha),
        transformer=TreeBuilder(number, precision),
    )


class Parser:
    """
    Callable that parses source code into expression trees.

    Args:
        is_alpha:
            Identifier classifier with signature ``is_alpha(c, prev, next)``.
        number:
            Kind of numeric literals ("float", "decimal" or "rational").
        precision:
            Precision of Decimal literals.
    """

    def __init__(self, is_alpha=None, number="float", precision=DEFAULT_PRECISION):
        self.is_alpha = default_is_alpha if is_alpha is None else is_alpha
        self.number = number
        self.precision = precision

    @classmethod
    def from_config(cls, config) -> "Parser":
        return cls(config.is_alpha, config.number, config.precision)

    @property
    def grammar(self):
        return grammar_for(self.is_alpha, self.number, self.precision)

    def __call__(self, src: str) -> ast.Node:
        return self.parse(src)

    def parse(self, src: str) -> ast.Node:
        """
        Parse source code. Raises ParseError for invalid inputs.
        """
        if not src.strip():
            raise ParseError("empty expression", 0, src)
        try:
            return self.grammar.parse(src)
        except ParseError as exc:
            if exc.source is None:
                raise ParseError(exc.msg, exc.offset, src) from None
            raise
        except UnexpectedToken as exc:
            token = exc.token
            if token.type == "$END":
                raise ParseError("unexpected end of input", len(src), src) from None
            raise ParseError(f"unexpected token {str(token)!r}", token.start_pos, src) from None
        except UnexpectedInput as exc:
            raise ParseError(str(exc), exc.pos_in_stream, src) from None

    def lex(self, src: str) -> list:
        """
        List of tokens in source code.
        """
        return list(tokenize(src, self.is_alpha))


def parse(src: str, is_alpha=None, number="float", precision=DEFAULT_PRECISION) -> ast.Node:
    """
    Parse string of source code into an expression tree.
    """
    return Parser(is_alpha, number, precision).parse(src)
