"""
Command line calculator.

    numex -e "sqrt(2) ^ 2"

evaluates a single expression, while

    numex --number rational

starts an interactive session that uses exact fractions for numeric
literals. An empty line asks to quit.
"""
import argparse
import sys

from .config import NUMBER_KINDS, Config
from .engine import Engine, Session
from .exceptions import NumexError
from .matrix import format_value

parser = argparse.ArgumentParser(
    prog="numex",
    description="Evaluate numeric expressions.",
)
parser.add_argument("-e", "--expr", help="evaluate expression, print the result and exit")
parser.add_argument("-n", "--number", choices=NUMBER_KINDS, help="kind of numeric literals (default: float)")
parser.add_argument("-p", "--precision", type=int, help="significant digits of decimal numbers")
parser.add_argument("--ast", action="store_true", help="print expression trees instead of evaluating them")


def execute(session: Session, expr: str, show_ast=False) -> str:
    """
    Evaluate expression in session (or parse it, if show_ast is True) and
    return the output string.
    """
    if show_ast:
        return repr(session.engine.parse(expr))
    return format_value(session.evaluate(expr))


def eval_loop(session: Session = None, show_ast=False):
    """
    Calculator interactive mainloop.
    """
    session = Engine().session() if session is None else session
    while True:
        try:
            expr = input("> ")
        except EOFError:
            break
        if not expr.strip():
            if input("quit? [y/N] ").lower() == "y":
                break
            else:
                continue
        try:
            print(execute(session, expr, show_ast))
        except NumexError as ex:
            print("error:", ex)


def main(argv=None):
    args = parser.parse_args(argv)
    options = {}
    if args.number is not None:
        options["number"] = args.number
    if args.precision is not None:
        options["precision"] = args.precision
    try:
        config = Config.from_env(**options)
    except ValueError as ex:
        parser.error(str(ex))
    session = Engine(config).session()

    if args.expr is not None:
        try:
            print(execute(session, args.expr, args.ast))
        except NumexError as ex:
            print("error:", ex, file=sys.stderr)
            return 1
        return 0

    print("Starting numex calculator")
    eval_loop(session, args.ast)
    return 0
