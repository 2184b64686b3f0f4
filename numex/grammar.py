from functools import lru_cache
from pathlib import Path

from lark import Lark

from .logging import log

DEFAULTS = {"parser": "lalr"}
PATH = Path(__file__).parent / "grammars"


def grammar_source(name: str) -> str:
    """
    Return the source of an internal grammar.
    """
    with open(PATH / (name + ".lark"), encoding="utf8") as fd:
        return fd.read()


@lru_cache(32)
def load_grammar(name, **options) -> Lark:
    """
    Load internal grammar and compile it with the given Lark options.

    Compiled grammars are cached, hence options must be hashable.
    """
    options = {**DEFAULTS, **options}
    log.debug(f"compiling grammar {name!r} with options {options}")
    return Lark(grammar_source(name), **options)

