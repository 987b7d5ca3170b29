import sys

from clove.interpreter import Interpreter


def test_large_tail_recursive_factorial_runs_without_exception():
    """Tail calls run on the trampoline, so depth is not bounded by the Python stack."""
    if hasattr(sys, "set_int_max_str_digits"):
        sys.set_int_max_str_digits(100_000)

    interp = Interpreter()

    program = """
    (defn fact [n acc]
      (if (= n 0)
          acc
          (fact (- n 1) (* n acc))))
    (fact 1500 1)
    """

    result = interp.eval(program)

    assert isinstance(result, int)
    assert result > 0


def test_tail_calls_deeper_than_the_recursion_limit(itp):
    depth = sys.getrecursionlimit() * 2
    itp.eval("(defn count-down [n] (if (= n 0) :done (count-down (dec n))))")
    assert str(itp.eval(f"(count-down {depth})")) == ":done"


def test_tail_calls_through_let_and_cond(itp):
    itp.eval(
        """
        (defn collatz-steps [n steps]
          (let [next-n (if (even? n) (/ n 2) (+ (* 3 n) 1))]
            (cond
              (= n 1) steps
              :else (collatz-steps next-n (inc steps)))))
        """
    )
    assert itp.eval("(collatz-steps 27 0)") == 111


def test_mutual_recursion_stays_flat(itp):
    src = """
    (letfn [(ev? [n] (if (= n 0) true (od? (dec n))))
            (od? [n] (if (= n 0) false (ev? (dec n))))]
      (ev? 20000))
    """
    assert itp.eval(src) is True


def test_library_folds_over_long_sequences(itp):
    assert itp.eval("(reduce + (range 5000))") == sum(range(5000))
    assert itp.eval("(count (filter odd? (range 3000)))") == 1500
    assert itp.eval("(count (butlast (range 5000)))") == 4999
    assert itp.eval("(last (butlast (range 5000)))") == 4998
