# flake8: noqa
from .base import Node
from .nodes import (
    Constant,
    Symbol,
    UnaryOp,
    BinaryOp,
    Call,
    FunctionDef,
    Assign,
    Parenthesis,
    MatrixLiteral,
    Range,
    Block,
)
from .utils import wrap_tokens
