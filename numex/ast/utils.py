from typing import Iterable, Iterator


def wrap_tokens(tokens: Iterable[str], wrap=True, brackets="()") -> Iterator[str]:
    """
    Yield tokens, enclosed in the given pair of brackets if wrap is true.
    """
    if wrap:
        open_, close = brackets
        yield open_
        yield from tokens
        yield close
    else:
        yield from tokens


def intersperse(sep: str, groups: Iterable[Iterable[str]]) -> Iterator[str]:
    """
    Chain token groups, emitting sep between consecutive groups.
    """
    first = True
    for group in groups:
        if not first:
            yield sep
        first = False
        yield from group
