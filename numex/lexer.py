"""
Scanner for the expression language.

Identifiers are recognized by a pluggable classifier, ``is_alpha(c, prev,
next)``, that receives the current character and its neighbours. Since the
classifier is an arbitrary Python function, scanning is done by hand and the
resulting tokens are fed to Lark through a custom lexer class.
"""
import json
import re
from functools import lru_cache
from typing import Callable, Iterator, List

from lark import Token
from lark.lexer import Lexer

from .exceptions import ParseError

NUMBER = re.compile(r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
COMPARISONS = ("==", "!=", "<=", ">=", "<", ">")
OPERATORS = {
    "+": "ADD_OP",
    "-": "ADD_OP",
    "*": "MUL_OP",
    "/": "MUL_OP",
    "%": "MUL_OP",
    "^": "POW",
    "!": "BANG",
    "=": "_EQUAL",
    ":": "_COLON",
    ",": "_COMMA",
    ";": "_SEP",
}
OPEN_BRACKETS = {"(": "_LPAR", "[": "_LSQB"}
CLOSE_BRACKETS = {")": "_RPAR", "]": "_RSQB"}


def is_alpha(c: str, prev: str = "", next: str = "") -> bool:
    """
    Default identifier classifier: unicode letters and underscore.
    """
    return c.isalpha() or c == "_"


def scan(text: str, is_alpha: Callable = is_alpha) -> Iterator[Token]:
    """
    Iterate over all tokens in text, including every statement separator.

    Raises ParseError on invalid characters and unterminated strings.
    """
    i, size = 0, len(text)
    line, line_start = 1, 0
    depth = 0

    def token(kind, value, start, end):
        column = start - line_start + 1
        return Token(kind, value, start, line, column, line, column + end - start, end)

    while i < size:
        c = text[i]

        # Newlines separate statements, except inside brackets
        if c == "\n":
            if depth == 0:
                yield token("_SEP", c, i, i + 1)
            i += 1
            line, line_start = line + 1, i
            continue
        elif c.isspace():
            i += 1
            continue
        elif c == "#":
            end = text.find("\n", i)
            i = size if end == -1 else end
            continue

        prev = text[i - 1] if i > 0 else ""
        next = text[i + 1] if i + 1 < size else ""

        # Numbers
        if c.isdigit() or (c == "." and next.isdigit()):
            m = NUMBER.match(text, i)
            yield token("NUMBER", m.group(), i, m.end())
            i = m.end()

        # Identifiers
        elif is_alpha(c, prev, next):
            start = i
            i += 1
            while i < size:
                c, prev = text[i], text[i - 1]
                next = text[i + 1] if i + 1 < size else ""
                if not (is_alpha(c, prev, next) or c.isdigit()):
                    break
                i += 1
            yield token("NAME", text[start:i], start, i)

        # Strings
        elif c == '"':
            end = _string_end(text, i)
            try:
                value = json.loads(text[i:end])
            except ValueError:
                raise ParseError("invalid string literal", i, text)
            yield token("STRING", value, i, end)
            i = end

        # Operators and punctuation
        elif text.startswith(COMPARISONS, i):
            op = next_comparison(text, i)
            yield token("COMPARE", op, i, i + len(op))
            i += len(op)
        elif c in OPERATORS:
            yield token(OPERATORS[c], c, i, i + 1)
            i += 1
        elif c in OPEN_BRACKETS:
            depth += 1
            yield token(OPEN_BRACKETS[c], c, i, i + 1)
            i += 1
        elif c in CLOSE_BRACKETS:
            depth = max(depth - 1, 0)
            yield token(CLOSE_BRACKETS[c], c, i, i + 1)
            i += 1
        else:
            raise ParseError(f"unexpected character {c!r}", i, text)


def next_comparison(text, i):
    for op in COMPARISONS:
        if text.startswith(op, i):
            return op


def _string_end(text, start):
    i = start + 1
    while i < len(text):
        c = text[i]
        if c == "\\":
            i += 2
        elif c == '"':
            return i + 1
        elif c == "\n":
            break
        else:
            i += 1
    raise ParseError("unterminated string", start, text)


def tokenize(text: str, is_alpha: Callable = is_alpha) -> Iterator[Token]:
    """
    Iterate over tokens of source text.

    Statement separators are normalized: leading and trailing separators are
    dropped and runs of separators are collapsed into a single one.
    """
    pending = None
    started = False
    for tk in scan(text, is_alpha):
        if tk.type == "_SEP":
            if started and pending is None:
                pending = tk
            continue
        if pending is not None:
            yield pending
            pending = None
        started = True
        yield tk


def token_types(text: str, is_alpha: Callable = is_alpha) -> List[str]:
    """
    List of token types in text. Mostly useful for debugging.
    """
    return [tk.type for tk in tokenize(text, is_alpha)]


#
# Lark integration
#
class ExpressionLexer(Lexer):
    """
    Lark lexer that delegates to tokenize().

    Use lexer_class() to create a lexer with a custom identifier classifier.
    """

    is_alpha = staticmethod(is_alpha)

    def __init__(self, lexer_conf=None):
        self.lexer_conf = lexer_conf

    def lex(self, text):
        return tokenize(text, self.is_alpha)


@lru_cache(16)
def lexer_class(is_alpha: Callable = is_alpha) -> type:
    """
    Return a subclass of ExpressionLexer bound to the given classifier.
    """
    if is_alpha is ExpressionLexer.is_alpha:
        return ExpressionLexer
    ns = {"is_alpha": staticmethod(is_alpha)}
    return type("ExpressionLexer", (ExpressionLexer,), ns)
