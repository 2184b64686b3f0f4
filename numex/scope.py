from typing import Any, Dict, Iterator, Optional

from .exceptions import UndefinedSymbol

NOT_GIVEN = object()


class Scope:
    """
    Mapping of names to values with an optional enclosing scope.

    Lookup is lexical: names are searched locally and then in each enclosing
    scope. Assignment always binds in the local scope. If a dictionary is
    given, it is used as storage and receives all assignments.
    """

    __slots__ = ("variables", "parent")

    def __init__(self, variables: Optional[Dict[str, Any]] = None, parent: "Scope" = None):
        self.variables = {} if variables is None else variables
        self.parent = parent

    def __repr__(self):
        return f"Scope({self.variables!r}, parent={self.parent!r})"

    def __contains__(self, name):
        scope = self
        while scope is not None:
            if name in scope.variables:
                return True
            scope = scope.parent
        return False

    def __iter__(self) -> Iterator[str]:
        return iter(self.get_all())

    def get(self, name: str, default=None):
        """
        Return value bound to name or default, if name is not defined.
        """
        scope = self
        while scope is not None:
            try:
                return scope.variables[name]
            except KeyError:
                scope = scope.parent
        return default

    def lookup(self, name: str):
        """
        Like get(), but raises UndefinedSymbol if name is not defined.
        """
        value = self.get(name, NOT_GIVEN)
        if value is NOT_GIVEN:
            raise UndefinedSymbol(name)
        return value

    def set(self, name: str, value):
        """
        Bind name to value in the local scope and return value.
        """
        self.variables[name] = value
        return value

    def remove(self, name: str):
        """
        Remove name from the local scope. Raises UndefinedSymbol if name is
        not bound locally.
        """
        try:
            del self.variables[name]
        except KeyError:
            raise UndefinedSymbol(name)

    def get_all(self) -> Dict[str, Any]:
        """
        Return a new dictionary with all visible names. Local bindings shadow
        the enclosing ones.
        """
        if self.parent is None:
            return dict(self.variables)
        return {**self.parent.get_all(), **self.variables}

    def clear(self):
        """
        Remove all local bindings.
        """
        self.variables.clear()

    def child(self, variables=None) -> "Scope":
        """
        Create a new scope enclosed by this one.
        """
        return Scope(variables, parent=self)


def as_scope(scope) -> Scope:
    """
    Coerce None, dictionaries and scopes to Scope instances.
    """
    if scope is None:
        return Scope()
    elif isinstance(scope, Scope):
        return scope
    elif isinstance(scope, dict):
        return Scope(scope)
    raise TypeError(f"invalid scope: {scope!r}")
