import pytest

from clove.types.environment import Environment
from clove.types.errors import CloveSyntaxError, CloveUnboundSymbol
from clove.types.symbol import Symbol

X = Symbol("x")


@pytest.fixture
def root():
    env = Environment()
    env.define(X, 1)
    return env


def test_lookup_walks_outward(root):
    child = Environment(outer=root)
    assert child.lookup(X) == 1


def test_inner_binding_shadows_outer(root):
    child = Environment(outer=root)
    child.define(X, 2)
    assert child.lookup(X) == 2
    assert root.lookup(X) == 1


def test_set_updates_nearest_frame(root):
    child = Environment(outer=root)
    child.set(X, 5)
    assert root.lookup(X) == 5
    assert X not in child.vars


def test_set_of_unbound_symbol_fails(root):
    with pytest.raises(CloveUnboundSymbol) as e:
        root.set(Symbol("nope"), 1)
    assert e.value.name == Symbol("nope")


def test_lookup_of_unbound_symbol_fails(root):
    with pytest.raises(CloveUnboundSymbol):
        Environment(outer=root).lookup(Symbol("missing"))


def test_define_requires_a_symbol(root):
    with pytest.raises(CloveSyntaxError):
        root.define("x", 1)


def test_define_global_targets_root(root):
    grandchild = Environment(outer=Environment(outer=root))
    grandchild.define_global(Symbol("g"), 42)
    assert root.vars[Symbol("g")] == 42
    assert grandchild.find(Symbol("g")) is root
