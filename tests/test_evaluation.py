import pytest

from clove.reader.parser import read_string
from clove.types.collections import List, Map, Vector
from clove.types.errors import (
    CloveSyntaxError,
    CloveTypeError,
    CloveUnboundSymbol,
    CloveUserError,
)
from clove.types.nil import Nil
from clove.types.symbol import Keyword, Symbol


@pytest.mark.parametrize(
    "source,expected",
    [
        ("42", 42),
        ("-3.5", -3.5),
        ('"str"', "str"),
        (":kw", Keyword("kw")),
        ("nil", Nil),
        ("true", True),
        ("()", []),
        ("'sym", Symbol("sym")),
        ("'(a b)", [Symbol("a"), Symbol("b")]),
        ("[(+ 1 1) 3]", [2, 3]),
        ("(if nil 1 2)", 2),
        ("(if 0 1 2)", 1),
        ('(if "" 1 2)', 1),
        ("(if false 1)", Nil),
        ("(+ 1 2 3)", 6),
        ("(- 10 4 1)", 5),
        ("(* 2 3)", 6),
        ("(= [1 2] '(1 2))", True),
        ("(= 1 true)", False),
        ("(apply + 1 2 [3 4])", 10),
        ("(str \"a\" 1 nil :k)", "a1:k"),
        ("(count {:a 1 :b 2})", 2),
        ("(get [1 2 3] 1)", 2),
        ("(nth '(1 2 3) 2)", 3),
        ("(cons 0 [1 2])", [0, 1, 2]),
        ("(concat [1] '(2) nil [3])", [1, 2, 3]),
        ("(list* 1 2 [3 4])", [1, 2, 3, 4]),
        ("(partition 2 [1 2 3 4 5])", [[1, 2], [3, 4]]),
        ("(split-at 1 [1 2 3])", [[1], [2, 3]]),
        ("(into [] '(1 2))", [1, 2]),
        ("(empty? [])", True),
        ("(empty? nil)", True),
        ("(seq [])", Nil),
    ],
)
def test_evaluation(bare, source, expected):
    assert bare.eval(source) == expected


def test_map_literal_evaluates_keys_and_values(bare):
    out = bare.eval("{:a (+ 1 2) (keyword \"b\") 4}")
    assert isinstance(out, Map)
    assert out == {Keyword("a"): 3, Keyword("b"): 4}


def test_def_binds_globally_and_returns_value(bare):
    assert bare.eval("(def x 5)") == 5
    assert bare.eval("x") == 5
    # def inside a function body still lands in the top-level frame
    bare.eval("((fn [] (def y 7)))")
    assert bare.eval("y") == 7


def test_set_updates_existing_binding(bare):
    bare.eval("(def counter 1)")
    assert bare.eval("(set! counter (+ counter 1))") == 2
    assert bare.eval("counter") == 2


def test_set_of_unbound_symbol_fails(bare):
    with pytest.raises(CloveUnboundSymbol):
        bare.eval("(set! never-defined 1)")


def test_unbound_symbol_reports_name(bare):
    with pytest.raises(CloveUnboundSymbol) as e:
        bare.eval("undefined-thing")
    assert e.value.name == Symbol("undefined-thing")


@pytest.mark.parametrize(
    "source",
    ["(if)", "(if 1 2 3 4)", "(quote)", "(def)", "(def 1 2)", "(set! x)", "(unquote x)", "(unquote-splicing x)"],
)
def test_malformed_special_forms(bare, source):
    with pytest.raises(CloveSyntaxError):
        bare.eval(source)


def test_arguments_evaluate_left_to_right(bare):
    bare.eval("(def trail [])")
    bare.eval("(list (set! trail (conj trail 1)) (set! trail (conj trail 2)))")
    assert bare.eval("trail") == [1, 2]


def test_quasiquote_fills_and_splices(bare):
    bare.eval("(def xs [1 2])")
    out = bare.eval("`(a ~(+ 1 2) ~@xs)")
    assert isinstance(out, List)
    assert out == read_string("(a 3 1 2)")
    vec = bare.eval("`[0 ~@xs]")
    assert isinstance(vec, Vector)
    assert vec == [0, 1, 2]


def test_nested_quasiquote_keeps_inner_unquote(bare):
    out = bare.eval("`(a `(b ~(c ~(+ 1 2))))")
    assert out == read_string("(a (quasiquote (b (unquote (c 3)))))")


def test_splicing_a_non_sequence_fails(bare):
    with pytest.raises(CloveTypeError):
        bare.eval("`(a ~@5)")


def test_error_primitive_raises_user_error(bare):
    with pytest.raises(CloveUserError) as e:
        bare.eval('(error "bad value:" 42)')
    assert e.value.message == "bad value: 42"


def test_primitive_type_errors(bare):
    with pytest.raises(CloveTypeError):
        bare.eval('(+ 1 "a")')
    with pytest.raises(CloveTypeError):
        bare.eval("(first 5)")


def test_nil_does_not_order_against_numbers(bare):
    with pytest.raises(CloveTypeError):
        bare.eval("(< nil 1)")
    with pytest.raises(TypeError):
        Nil < 1
