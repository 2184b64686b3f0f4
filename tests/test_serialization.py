import json
import math

import pytest

from numex import Matrix
from numex.numbers import Decimal, Float, Rational
from numex.serialization import dumps, loads, reviver


class TestSerialization:
    def test_tagged_objects(self):
        assert json.loads(dumps(Decimal("1.5", 64))) == {
            "@type": "Decimal",
            "value": "1.5",
            "precision": 64,
        }
        assert json.loads(dumps(Rational(1, 3))) == {
            "@type": "Rational",
            "numerator": 1,
            "denominator": 3,
        }

    def test_values_are_restored(self):
        values = [Float(0.5), Decimal("1.5", 20), Rational(1, 3), True, "a", None]
        restored = loads(dumps(values))
        assert restored == values
        assert [type(x) for x in restored] == [type(x) for x in values]
        assert restored[1].precision == 20

    def test_matrices(self):
        value = loads(dumps(Matrix([[Rational(1, 2), Rational(3)]])))
        assert isinstance(value, Matrix)
        assert value == Matrix([[Rational(1, 2), Rational(3)]])
        assert isinstance(value.flatten()[0], Rational)

    def test_special_floats(self):
        assert loads(dumps(Float(math.inf))).to_number() == math.inf
        assert loads(dumps(Float(math.nan))).is_nan()

    def test_reviver_ignores_plain_objects(self):
        assert loads('{"a": 1}') == {"a": 1}
        assert json.loads('{"@type": "Other"}', object_hook=reviver) == {"@type": "Other"}

    def test_unknown_types(self):
        with pytest.raises(TypeError):
            dumps(object())
