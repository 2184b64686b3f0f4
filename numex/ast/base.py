from typing import Callable, Iterator, List, Tuple

from ..operators import PRECEDENCE_ATOM
from .utils import wrap_tokens


class Node:
    """
    Base class for expression tree nodes.

    Nodes are immutable and own their children: a tree never shares nodes
    and has no cycles. Two trees are equal if they have the same structure
    and the same constants.

    Subclasses declare their attributes in the _fields tuple (which is also
    used as __slots__). Children are either nodes or tuples of nodes.
    """

    __slots__ = ()
    _fields: Tuple[str, ...] = ()
    precedence_level = PRECEDENCE_ATOM

    def __init__(self, *args):
        cls = type(self)
        if len(args) != len(self._fields):
            msg = f"{cls.__name__} expects {len(self._fields)} arguments, got {len(args)}"
            raise TypeError(msg)
        for name, value in zip(self._fields, args):
            object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} nodes are immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} nodes are immutable")

    def __eq__(self, other):
        if type(self) is type(other):
            return self._key() == other._key()
        return NotImplemented

    def __hash__(self):
        return hash((type(self), self._key()))

    def __repr__(self):
        args = ", ".join(repr(getattr(self, name)) for name in self._fields)
        return f"{type(self).__name__}({args})"

    def __str__(self):
        return self.source()

    def _key(self):
        return tuple(getattr(self, name) for name in self._fields)

    #
    # API methods
    #
    @property
    def type(self) -> str:
        """
        Name of node type (e.g., "BinaryOp").
        """
        return type(self).__name__

    @property
    def children(self) -> Tuple["Node", ...]:
        """
        Tuple with all direct child nodes.
        """
        return tuple(child for _, child in self.named_children())

    def named_children(self) -> Iterator[Tuple[str, "Node"]]:
        """
        Iterate over (path, child) pairs, where path is the name of the
        attribute holding the child (e.g., "lhs" or "args[0]").
        """
        for name in self._fields:
            value = getattr(self, name)
            if isinstance(value, Node):
                yield name, value
            elif isinstance(value, tuple):
                for i, item in enumerate(value):
                    if isinstance(item, Node):
                        yield f"{name}[{i}]", item

    def source(self) -> str:
        """
        Return source code representation for node.
        """
        return "".join(self.tokens())

    def tokens(self) -> Iterator[str]:
        """
        Return an iterator over tokens for the output source code.

        Tokens can be joined together to construct the source code
        representation of element.
        """
        raise NotImplementedError("tokens() method must be implemented in subclass")

    def child_tokens(self, child: "Node", wrap=False) -> Iterator[str]:
        """
        Tokens of child node, optionally wrapped in parenthesis.
        """
        return wrap_tokens(child.tokens(), wrap)

    def traverse(self, callback: Callable, path: str = None, parent: "Node" = None):
        """
        Call ``callback(node, path, parent)`` for node and all its
        descendants, in depth-first pre-order.
        """
        callback(self, path, parent)
        for name, child in self.named_children():
            child.traverse(callback, name, self)

    def filter(self, predicate: Callable[["Node"], bool]) -> List["Node"]:
        """
        Return the list of all nodes in tree (in pre-order) that satisfy
        predicate.
        """
        nodes = []

        def collect(node, path, parent):
            if predicate(node):
                nodes.append(node)

        self.traverse(collect)
        return nodes
