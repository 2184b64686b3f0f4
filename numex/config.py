import os
from typing import Callable, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .lexer import is_alpha as default_is_alpha

NumberKind = Literal["float", "decimal", "rational"]
MatrixKind = Literal["matrix", "array"]
NUMBER_KINDS = get_args(NumberKind)


class Config(BaseModel):
    """
    Engine configuration.

    Args:
        number:
            Kind of numeric literals and of Python integers passed to the
            engine: "float", "decimal" or "rational".
        precision:
            Number of significant digits used by Decimal values.
        matrix:
            Result of matrix literals: "matrix" (Matrix objects) or "array"
            (nested lists).
        max_depth:
            Maximum depth of nested calls to user defined functions before
            failing with RecursionLimitExceeded.
        is_alpha:
            Identifier classifier with signature ``is_alpha(c, prev, next)``.

    Invalid values raise pydantic's ValidationError, which is a ValueError.
    """

    model_config = ConfigDict(frozen=True)

    number: NumberKind = "float"
    precision: int = Field(default=64, gt=0, strict=True)
    matrix: MatrixKind = "matrix"
    max_depth: int = Field(default=128, gt=0, strict=True)
    is_alpha: Callable[[str, str, str], bool] = Field(default=default_is_alpha, repr=False)

    @field_validator("is_alpha", mode="before")
    @classmethod
    def default_classifier(cls, value):
        return default_is_alpha if value is None else value

    @classmethod
    def from_env(cls, environ=None, **kwargs) -> "Config":
        """
        Create configuration reading defaults from NUMEX_NUMBER and
        NUMEX_PRECISION environment variables.

        Keyword arguments take precedence over the environment.
        """
        environ = os.environ if environ is None else environ
        if "NUMEX_NUMBER" in environ:
            kwargs.setdefault("number", environ["NUMEX_NUMBER"].lower())
        if "NUMEX_PRECISION" in environ:
            try:
                precision = int(environ["NUMEX_PRECISION"])
            except ValueError:
                raise ValueError(
                    f"invalid NUMEX_PRECISION: {environ['NUMEX_PRECISION']!r}"
                ) from None
            kwargs.setdefault("precision", precision)
        return cls(**kwargs)

    def replace(self, **changes) -> "Config":
        """
        Return a validated copy of configuration with the given fields replaced.
        """
        return self.model_validate({**self.model_dump(), **changes})
