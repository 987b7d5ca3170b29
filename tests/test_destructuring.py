import pytest

from clove.reader.parser import read_string
from clove.types.bind import bind_pattern, destructure
from clove.types.environment import Environment
from clove.types.errors import CloveDestructureError
from clove.types.nil import Nil
from clove.types.symbol import Symbol


def _bindings(pattern: str, value: str) -> dict:
    return {str(k): v for k, v in destructure(read_string(pattern), read_string(value))}


@pytest.mark.parametrize(
    "pattern,value,expected",
    [
        ("a", "[1 2]", {"a": [1, 2]}),
        ("[a b]", "[1 2 3]", {"a": 1, "b": 2}),
        ("[a b]", "[1]", {"a": 1, "b": Nil}),
        ("[a b]", "nil", {"a": Nil, "b": Nil}),
        ("[x & xs]", "[1 2 3]", {"x": 1, "xs": [2, 3]}),
        ("[[a b] c]", "[[1 2] 3]", {"a": 1, "b": 2, "c": 3}),
        ("[[a & r] b]", "[(1 2 3) 4]", {"a": 1, "r": [2, 3], "b": 4}),
        ("[]", "[1 2]", {}),
        ("[a b]", '"hi"', {"a": "h", "b": "i"}),
    ],
)
def test_destructure(pattern, value, expected):
    assert _bindings(pattern, value) == expected


def test_exhausted_rest_binds_empty_sequence_not_nil():
    out = _bindings("[x & xs]", "[1]")
    assert out["x"] == 1
    assert out["xs"] is not Nil
    assert len(out["xs"]) == 0


@pytest.mark.parametrize(
    "pattern",
    ["[a & b c]", "[a &]", "[a & [b]]", "[1 a]", "&", "{:a a}"],
)
def test_malformed_patterns_are_rejected(pattern):
    with pytest.raises(CloveDestructureError):
        destructure(read_string(pattern), read_string("[1 2 3]"))


def test_non_sequence_value_is_rejected():
    with pytest.raises(CloveDestructureError) as e:
        destructure(read_string("[a b]"), 5)
    assert e.value.value == 5


def test_failed_match_binds_nothing():
    env = Environment()
    with pytest.raises(CloveDestructureError):
        bind_pattern(read_string("[a [b c]]"), read_string("[1 2]"), env)
    assert Symbol("a") not in env.vars
    assert not env.vars


def test_fn_parameters_destructure(itp):
    assert itp.eval("((fn [[a b] c] (+ a b c)) [1 2] 3)") == 6
    assert itp.eval("((fn [x & xs] xs) 1)") == []
    assert itp.eval("((fn [x & xs] (nil? xs)) 1)") is False


def test_let_destructures_sequentially(itp):
    assert itp.eval("(let [[a & more] [1 2 3] n (count more)] [a n])") == [1, 2]
