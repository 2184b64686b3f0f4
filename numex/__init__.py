"""
A numeric expression engine with a Float/Decimal/Rational numeric tower.
"""
from .exceptions import *
from .config import Config
from .numbers import Decimal, Float, Rational
from .matrix import Index, Matrix
from .scope import Scope
from .registry import Registry, factory
from .chain import Chain
from .engine import Engine, Session, chain, compile, create, evaluate, parse
from .logging import log

__version__ = "0.1.0"
__author__ = "Fábio Macêdo Mendes"
__email__ = "fabiomacedomendes@gmail.com"
