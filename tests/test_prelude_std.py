import pytest
from hypothesis import given, settings, strategies as st

from clove.interpreter import Interpreter
from clove.types.collections import Map
from clove.types.errors import CloveMacroExpansionError, CloveUserError
from clove.types.nil import Nil
from clove.types.symbol import Keyword

kw = Keyword


@pytest.mark.parametrize(
    "source,expected",
    [
        # control flow
        ("(do 1 2 3)", 3),
        ("(do)", Nil),
        ("(comment (anything at all))", Nil),
        ("(when true 1 2)", 2),
        ("(when false 1)", Nil),
        ("(when-not false 1)", 1),
        ("(if-not false 1 2)", 1),
        ("(if-not true 1)", Nil),
        ("(cond false 1 nil 2 :else 3)", 3),
        ("(cond false 1)", Nil),
        ("(cond)", Nil),
        ("(condp = 2 1 :one 2 :two :none)", kw("two")),
        ("(condp = 9 1 :one :none)", kw("none")),
        ("(condp < 5 10 :big 1 :small)", kw("small")),
        ("(or nil false 3)", 3),
        ("(or nil false)", False),
        ("(or)", Nil),
        ("(and 1 2 3)", 3),
        ("(and 1 nil 3)", Nil),
        ("(and)", True),
        # binding
        ("(let [a 1 b (+ a 1)] (* a b))", 2),
        ("(let [] 5)", 5),
        ("(let [x 1] (let [x 2] x))", 2),
        ("(if-let [x (seq [])] :yes :no)", kw("no")),
        ("(if-let [[x] [5]] x :no)", 5),
        ("(if-let [x false] :yes)", Nil),
        ("(when-let [x 3] (+ x 1))", 4),
        ("(when-let [x nil] 1)", Nil),
        # threading
        ("(-> 5 (+ 3) (* 2))", 16),
        ("(-> 2 inc)", 3),
        ("(-> [1 2] (conj 3) count)", 3),
        ("(->> [1 2 3 4] (filter even?))", [2, 4]),
        ("(->> [1 2 3] (map inc) (reduce +))", 9),
        # functions
        ("(identity 4)", 4),
        ("((constantly 7) 1 2 3)", 7),
        ("((complement even?) 3)", True),
        ("((comp inc inc) 1)", 3),
        ("((comp str inc) 1)", "2"),
        ("((comp) 5)", 5),
        ("((comp - + *) 2 3)", -6),
        ("((partial + 10) 1 2)", 13),
        ("((juxt inc dec) 5)", [6, 4]),
        # sequences
        ("(reduce + [1 2 3 4])", 10),
        ("(reduce + 10 [1 2 3])", 16),
        ("(reduce + [])", 0),
        ("(reduce + [7])", 7),
        ("(reduce conj [] '(1 2))", [1, 2]),
        ("(map inc [1 2 3])", [2, 3, 4]),
        ("(map + [1 2] [10 20 30])", [11, 22]),
        ("(mapv inc '())", []),
        ("(filter even? (range 10))", [0, 2, 4, 6, 8]),
        ("(remove even? [1 2 3])", [1, 3]),
        ("(keep (fn [x] (when (odd? x) (* x x))) [1 2 3])", [1, 9]),
        ("(mapcat (fn [x] [x x]) [1 2])", [1, 1, 2, 2]),
        ("(take-while pos? [3 2 0 1])", [3, 2]),
        ("(drop-while pos? [3 2 0 1])", [0, 1]),
        ("(drop-while pos? [1 2])", []),
        ("(take 2 [1 2 3])", [1, 2]),
        ("(take 5 [1])", [1]),
        ("(drop 2 [1 2 3])", [3]),
        ("(reverse [1 2 3])", [3, 2, 1]),
        ("(reverse nil)", []),
        ("(some even? [1 3 4])", True),
        ("(some even? [1 3])", Nil),
        ("(some {:a 1} [:b :a])", 1),
        ("(every? odd? [1 3])", True),
        ("(every? odd? [])", True),
        ("(every? odd? [1 2])", False),
        ("(not-any? odd? [2 4])", True),
        ("(range 3)", [0, 1, 2]),
        ("(range 2 5)", [2, 3, 4]),
        ("(range 5 0 -2)", [5, 3, 1]),
        ("(range 0)", []),
        ("(last [1 2 3])", 3),
        ("(last [])", Nil),
        ("(butlast [1 2 3])", [1, 2]),
        ("(butlast [1])", Nil),
        ("(interpose 0 [1 2 3])", [1, 0, 2, 0, 3]),
        ("(interpose 0 [])", []),
        ("(distinct [1 2 1 3 2])", [1, 2, 3]),
        ("(nth [1 2 3] 5 :none)", kw("none")),
    ],
)
def test_core_library(itp, source, expected):
    assert itp.eval(source) == expected


@pytest.mark.parametrize(
    "source,expected",
    [
        ("(group-by odd? [1 2 3 4 5])", {True: [1, 3, 5], False: [2, 4]}),
        ("(frequencies [:a :b :a])", {kw("a"): 2, kw("b"): 1}),
        ("(zipmap [:a :b :c] [1 2])", {kw("a"): 1, kw("b"): 2}),
        ("(merge {:a 1} {:b 2} {:a 3})", {kw("a"): 3, kw("b"): 2}),
        ("(merge {:a 1} nil)", {kw("a"): 1}),
        ("(update {:a 1} :a + 10)", {kw("a"): 11}),
    ],
)
def test_core_library_maps(itp, source, expected):
    out = itp.eval(source)
    assert isinstance(out, Map)
    assert out == expected


def test_maps_keep_booleans_apart_from_numbers(itp):
    assert itp.eval("(= {:a true} {:a 1})") is False
    assert itp.eval("(= {:a [1 2]} {:a (list 1 2)})") is True
    assert itp.eval("(distinct [1 true 0 false])") == [1, True, 0, False]
    groups = itp.eval("(group-by (fn [x] (if (odd? x) 1 true)) [1 2 3 4])")
    assert len(groups) == 2
    assert groups == Map([(1, [1, 3]), (True, [2, 4])])
    assert itp.eval("(get {1 :one} true)") is Nil
    assert itp.eval("(frequencies [1 true 1 false 0])") == Map([(1, 2), (True, 1), (False, 1), (0, 1)])
    assert itp.eval("(contains? {0 :zero} false)") is False
    assert itp.eval("(count {1 :a true :b})") == 2
    assert itp.eval("(dissoc {1 :a true :b} true)") == {1: kw("a")}


def test_merge_of_nothing_is_nil(itp):
    assert itp.eval("(merge)") is Nil


def test_cond_evaluates_only_the_selected_branch(itp):
    assert itp.eval('(cond false (error "no") true :hit false (error "no"))') == kw("hit")


def test_or_and_short_circuit(itp):
    assert itp.eval('(or 1 (error "no"))') == 1
    assert itp.eval('(and nil (error "no"))') is Nil


def test_or_evaluates_each_operand_once(itp):
    itp.eval("(def hits 0)")
    itp.eval("(or (do (set! hits (inc hits)) 5) 6)")
    assert itp.eval("hits") == 1


def test_condp_without_match_fails_when_evaluated(itp):
    itp.eval("(defn classify [n] (condp = n 1 :one 2 :two))")
    assert itp.eval("(classify 2)") == kw("two")
    with pytest.raises(CloveUserError) as e:
        itp.eval("(classify 3)")
    assert not isinstance(e.value, CloveMacroExpansionError)
    assert "3" in e.value.message


def test_range_rejects_zero_step(itp):
    with pytest.raises(CloveUserError):
        itp.eval("(range 0 5 0)")


def test_letfn_supports_mutual_recursion(itp):
    src = """
    (letfn [(ev? [n] (if (= n 0) true (od? (dec n))))
            (od? [n] (if (= n 0) false (ev? (dec n))))]
      [(ev? 10) (od? 7) (ev? 3)])
    """
    assert itp.eval(src) == [True, True, False]


def test_letfn_with_empty_body_is_nil(itp):
    assert itp.eval("(letfn [(f [x] x)])") is Nil


def test_letfn_names_do_not_leak(itp):
    from clove.types.errors import CloveUnboundSymbol

    itp.eval("(letfn [(helper [x] (* 2 x))] (helper 2))")
    with pytest.raises(CloveUnboundSymbol):
        itp.eval("helper")


def test_threading_macros_expand_as_rewrites(itp):
    from clove.reader.parser import read_string

    assert itp.eval("(macroexpand-all '(-> x (f a) g))") == read_string("(g (f x a))")
    assert itp.eval("(macroexpand-all '(->> x (f a) g))") == read_string("(g (f a x))")


def test_defn_with_docstring_and_multiple_arities(itp):
    itp.eval(
        """
        (defn greet
          "Says hello."
          ([] (greet "world"))
          ([who] (str "hello " who)))
        """
    )
    assert itp.eval("(greet)") == "hello world"
    assert itp.eval('(greet "clove")') == "hello clove"


# Properties over generated integer vectors; one shared interpreter keeps
# hypothesis from reloading the library per example.

_ITP = None


def _shared():
    global _ITP
    if _ITP is None:
        _ITP = Interpreter()
    return _ITP


def _vec(xs):
    return "[" + " ".join(str(x) for x in xs) + "]"


int_lists = st.lists(st.integers(min_value=-1000, max_value=1000), max_size=25)


@settings(max_examples=40, deadline=None)
@given(int_lists)
def test_reduce_plus_matches_sum(xs):
    assert _shared().eval(f"(reduce + 0 {_vec(xs)})") == sum(xs)


@settings(max_examples=40, deadline=None)
@given(int_lists)
def test_filter_and_remove_partition_the_input(xs):
    itp = _shared()
    kept = itp.eval(f"(filter even? {_vec(xs)})")
    dropped = itp.eval(f"(remove even? {_vec(xs)})")
    assert list(kept) == [x for x in xs if x % 2 == 0]
    assert len(kept) + len(dropped) == len(xs)


@settings(max_examples=40, deadline=None)
@given(int_lists)
def test_reverse_twice_is_identity(xs):
    assert _shared().eval(f"(reverse (reverse {_vec(xs)}))") == xs
