import pytest

from numex import Engine, Matrix, chain
from numex.chain import Chain
from numex.exceptions import ChainResolved, UnknownOperation
from numex.numbers import Float


class TestChain:
    def test_operations_thread_the_value(self):
        assert chain(3).add(4).multiply(2).resolve() == 14
        assert chain(3).add(4).multiply(2).done() == 14
        assert chain([1, 2]).add(1).resolve() == [2, 3]

    def test_each_call_returns_a_new_chain(self):
        a = chain(1)
        b = a.add(1)
        assert isinstance(b, Chain)
        assert a.value_of() == 1
        assert b.value_of() == 2

    def test_resolved_chains_are_inert(self):
        c = chain(3)
        assert c.resolve() == 3
        with pytest.raises(ChainResolved):
            c.add(1)
        with pytest.raises(ChainResolved):
            c.resolve()
        with pytest.raises(ChainResolved):
            c.value_of()

    def test_method_obtained_before_resolution(self):
        c = chain(3)
        add = c.add
        c.resolve()
        with pytest.raises(ChainResolved):
            add(1)

    def test_to_string_does_not_resolve(self):
        c = chain(2).divide(3)
        assert c.to_string() == "0.6666666666666666"
        assert str(c) == "0.6666666666666666"
        assert c.resolve() == Float(2 / 3)

    def test_unknown_operations(self):
        with pytest.raises(UnknownOperation):
            chain(1).frobnicate
        assert not hasattr(chain(1), "_private")

    def test_chains_as_arguments(self):
        assert chain(2).multiply(chain(3)).resolve() == 6
        assert Chain(chain(5), {}).value_of() == 5

    def test_chain_captures_operations(self):
        engine = Engine()
        c = engine.chain(1)
        engine.import_({"twice": lambda x: x * 2})
        with pytest.raises(UnknownOperation):
            c.twice()
        assert engine.chain(1).twice().resolve() == 2

    def test_chain_uses_engine_configuration(self):
        engine = Engine(number="rational")
        assert engine.chain(1).divide(3).to_string() == "1/3"
        assert isinstance(engine.chain([[1, 2]]).transpose().resolve(), list)
        assert isinstance(engine.chain(Matrix([[1, 2]])).transpose().resolve(), Matrix)
