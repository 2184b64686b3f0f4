"""
JSON serialization of numbers and matrices.

Values that have no JSON counterpart are encoded as objects tagged with an
"@type" key, e.g. ``{"@type": "Rational", "numerator": 1, "denominator": 3}``.
Use reviver as the object_hook of json.loads() to restore them.
"""
import json

from .matrix import Matrix
from .numbers import Decimal, Float, Rational

TYPE_KEY = "@type"


def encode(value):
    """
    Convert value to a JSON compatible object. Used as the default argument
    of json.dumps().
    """
    if isinstance(value, Float):
        return {TYPE_KEY: "Float", "value": value.to_string()}
    elif isinstance(value, Decimal):
        return {TYPE_KEY: "Decimal", "value": value.to_string(), "precision": value.precision}
    elif isinstance(value, Rational):
        return {
            TYPE_KEY: "Rational",
            "numerator": value.numerator,
            "denominator": value.denominator,
        }
    elif isinstance(value, Matrix):
        return {TYPE_KEY: "Matrix", "data": value.value_of(), "size": value.size()}
    raise TypeError(f"object of type {type(value).__name__} is not JSON serializable")


DECODERS = {
    "Float": lambda obj: Float(float(obj["value"])),
    "Decimal": lambda obj: Decimal(obj["value"], obj["precision"]),
    "Rational": lambda obj: Rational(obj["numerator"], obj["denominator"]),
    "Matrix": lambda obj: Matrix(obj["data"]),
}


def reviver(obj: dict):
    """
    Restore tagged objects. Use as json.loads(..., object_hook=reviver).

    Objects without a known tag are returned unchanged.
    """
    try:
        decoder = DECODERS[obj[TYPE_KEY]]
    except (KeyError, TypeError):
        return obj
    return decoder(obj)


def dumps(value, **kwargs) -> str:
    """
    Serialize value to a JSON string.
    """
    return json.dumps(value, default=encode, **kwargs)


def loads(data: str, **kwargs):
    """
    Deserialize JSON string, restoring tagged values.
    """
    return json.loads(data, object_hook=reviver, **kwargs)
