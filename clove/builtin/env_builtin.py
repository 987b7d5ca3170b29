"""Built-in functions for the Clove runtime environment.

This module defines the primitives the standard library is written against:
the sequence protocol (seq/first/rest/conj/into/count), list construction,
equality and predicates, arithmetic and comparison, maps and vectors, `apply`,
`error`, `gensym`, and the macroexpand helpers. Every builtin has the
signature `f(env, args)` and checks its own arity.
"""
from __future__ import annotations

from numbers import Number
from typing import Any

from clove import LispValue
from clove.evaluation.apply import apply as apply_engine
from clove.evaluation.evaluator import evaluate0, expander
from clove.types import seq as sq
from clove.types.collections import EMPTY, ArraySeq, List, Map, Vector, pr_str, values_equal
from clove.types.environment import Environment
from clove.types.errors import CloveArityMismatch, CloveTypeError, CloveUserError
from clove.types.lambda_fn import Lambda, Macro
from clove.types.nil import Nil, is_truthy
from clove.types.symbol import Keyword, Symbol, gensym as make_gensym


def _expect(name: str, args: list, lo: int, hi: int | None = -1) -> None:
    """Raise CloveArityMismatch unless lo <= len(args) <= hi (hi=None: unbounded, -1: exactly lo)."""
    if hi == -1:
        hi = lo
    n = len(args)
    if n < lo or (hi is not None and n > hi):
        raise CloveArityMismatch(name, n)


def _numbers(name: str, args: list) -> list:
    for a in args:
        if isinstance(a, bool) or not isinstance(a, Number):
            raise CloveTypeError(f"All arguments to {name} must be numbers, got {pr_str(a)}")
    return args


def _int(name: str, x: Any) -> int:
    if isinstance(x, bool) or not isinstance(x, int):
        raise CloveTypeError(f"{name} expects an integer, got {pr_str(x)}")
    return x


# -------------------------------
# Equality and predicates
# -------------------------------
def equals(env: Environment, args: list[LispValue]) -> bool:
    """True if all arguments are structurally equal (booleans never equal numbers)."""
    _expect("=", args, 1, None)
    return all(values_equal(a, b) for a, b in zip(args, args[1:]))


def not_equals(env: Environment, args: list[LispValue]) -> bool:
    return not equals(env, args)


def identical(env: Environment, args: list[LispValue]) -> bool:
    _expect("identical?", args, 2)
    return args[0] is args[1]


def logical_not(env: Environment, args: list[LispValue]) -> bool:
    """Logical NOT for a single value; only nil and false are considered falsey."""
    _expect("not", args, 1)
    return not is_truthy(args[0])


def _predicate(name: str, test):
    def pred(env: Environment, args: list[LispValue]) -> bool:
        _expect(name, args, 1)
        return bool(test(args[0]))

    pred.__name__ = name
    return pred


def is_fn(x: Any) -> bool:
    if isinstance(x, Lambda):
        return True
    if isinstance(x, (Macro, Keyword, Map, type)):
        return False
    return callable(x)


def is_empty(env: Environment, args: list[LispValue]) -> bool:
    """(empty? coll): true when (seq coll) is nil."""
    _expect("empty?", args, 1)
    return sq.seq(args[0]) is Nil


def is_even(env: Environment, args: list[LispValue]) -> bool:
    _expect("even?", args, 1)
    return _int("even?", args[0]) % 2 == 0


def is_odd(env: Environment, args: list[LispValue]) -> bool:
    _expect("odd?", args, 1)
    return _int("odd?", args[0]) % 2 == 1


# -------------------------------
# Arithmetic
# -------------------------------
def add(env: Environment, args: list[LispValue]) -> LispValue:
    """Return the numeric sum of all arguments; errors if any arg is non-numeric."""
    return sum(_numbers("+", args))


def sub(env: Environment, args: list[LispValue]) -> LispValue:
    """Subtract all subsequent numbers from the first; unary negation for one arg."""
    _expect("-", args, 1, None)
    _numbers("-", args)
    if len(args) == 1:
        return -args[0]
    result = args[0]
    for x in args[1:]:
        result -= x
    return result


def mul(env: Environment, args: list[LispValue]) -> LispValue:
    """Return the product of all arguments; errors if any arg is non-numeric."""
    result = 1
    for x in _numbers("*", args):
        result *= x
    return result


def div(env: Environment, args: list[LispValue]) -> LispValue:
    """Divide left-to-right; integer operands that divide exactly stay integers."""
    _expect("/", args, 1, None)
    _numbers("/", args)
    if len(args) == 1:
        args = [1, *args]
    result = args[0]
    try:
        for x in args[1:]:
            if isinstance(result, int) and isinstance(x, int) and x != 0 and result % x == 0:
                result //= x
            else:
                result /= x
    except ZeroDivisionError:
        raise CloveTypeError("Divide by zero")
    return result


def mod(env: Environment, args: list[LispValue]) -> LispValue:
    """(mod n d) => n % d. Exactly 2 integer arguments."""
    _expect("mod", args, 2)
    n, d = _int("mod", args[0]), _int("mod", args[1])
    if d == 0:
        raise CloveTypeError("Divide by zero")
    return n % d


def inc(env: Environment, args: list[LispValue]) -> LispValue:
    _expect("inc", args, 1)
    return _numbers("inc", args)[0] + 1


def dec(env: Environment, args: list[LispValue]) -> LispValue:
    _expect("dec", args, 1)
    return _numbers("dec", args)[0] - 1


def _comparison(name: str, test):
    def compare(env: Environment, args: list[LispValue]) -> bool:
        """Chainable comparison over adjacent pairs."""
        _expect(name, args, 1, None)
        _numbers(name, args)
        return all(test(a, b) for a, b in zip(args, args[1:]))

    compare.__name__ = name
    return compare


def max_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    _expect("max", args, 1, None)
    return max(_numbers("max", args))


def min_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    _expect("min", args, 1, None)
    return min(_numbers("min", args))


# -------------------------------
# Sequence protocol
# -------------------------------
def seq(env: Environment, args: list[LispValue]) -> LispValue:
    _expect("seq", args, 1)
    return sq.seq(args[0])


def first(env: Environment, args: list[LispValue]) -> LispValue:
    _expect("first", args, 1)
    return sq.first(args[0])


def rest(env: Environment, args: list[LispValue]) -> LispValue:
    _expect("rest", args, 1)
    return sq.rest(args[0])


def next_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    _expect("next", args, 1)
    return sq.next_(args[0])


def second(env: Environment, args: list[LispValue]) -> LispValue:
    _expect("second", args, 1)
    return sq.first(sq.rest(args[0]))


def conj(env: Environment, args: list[LispValue]) -> LispValue:
    _expect("conj", args, 1, None)
    return sq.conj(args[0], *args[1:])


def into(env: Environment, args: list[LispValue]) -> LispValue:
    _expect("into", args, 2)
    return sq.into(args[0], args[1])


def count(env: Environment, args: list[LispValue]) -> int:
    _expect("count", args, 1)
    return sq.count(args[0])


def nth(env: Environment, args: list[LispValue]) -> LispValue:
    """(nth coll index) / (nth coll index not-found)."""
    _expect("nth", args, 2, 3)
    coll, index = args[0], _int("nth", args[1])
    if 0 <= index:
        for i, x in enumerate(sq.iterate(coll)):
            if i == index:
                return x
    if len(args) == 3:
        return args[2]
    raise CloveTypeError(f"Index {index} out of bounds")


# -------------------------------
# List construction
# -------------------------------
def cons(env: Environment, args: list[LispValue]) -> LispValue:
    """(cons x coll): a new sequence with x in front of coll's sequence view."""
    _expect("cons", args, 2)
    head, tail = args
    s = sq.seq(tail)
    if s is Nil:
        return EMPTY.cons(head)
    return s.cons(head)


def list_builtin(env: Environment, args: list[LispValue]) -> List:
    """Construct a list from the provided arguments."""
    return sq.to_list(args)


def list_star(env: Environment, args: list[LispValue]) -> LispValue:
    """(list* a b ... coll): prepend the leading items to the final sequence."""
    _expect("list*", args, 1, None)
    out = sq.seq(args[-1])
    if out is Nil:
        out = EMPTY
    for x in reversed(args[:-1]):
        out = out.cons(x)
    return out if len(out) else Nil


def concat(env: Environment, args: list[LispValue]) -> List:
    """Concatenate the sequence views of every argument; nil counts as empty."""
    items: list[LispValue] = []
    for coll in args:
        items.extend(sq.iterate(coll))
    return sq.to_list(items)


def partition(env: Environment, args: list[LispValue]) -> List:
    """(partition n coll) / (partition n step coll); an incomplete tail is dropped."""
    _expect("partition", args, 2, 3)
    n = _int("partition", args[0])
    step = _int("partition", args[1]) if len(args) == 3 else n
    if n <= 0 or step <= 0:
        raise CloveTypeError("partition size and step must be positive")
    items = list(sq.iterate(args[-1]))
    groups = [sq.to_list(items[i:i + n]) for i in range(0, len(items) - n + 1, step)]
    return sq.to_list(groups)


def split_at(env: Environment, args: list[LispValue]) -> Vector:
    """(split-at n coll) => [(take n coll) (drop n coll)]"""
    _expect("split-at", args, 2)
    n = max(_int("split-at", args[0]), 0)
    items = list(sq.iterate(args[1]))
    return Vector((sq.to_list(items[:n]), sq.to_list(items[n:])))


def apply(env: Environment, args: list[LispValue]) -> LispValue:
    """Builtin apply: (apply f a b ... coll) spreads the final collection as trailing args."""
    _expect("apply", args, 2, None)
    func = args[0]
    spread = list(args[1:-1]) + list(sq.iterate(args[-1]))
    # Not a tail call, so the engine hands back a concrete value
    return apply_engine(func, spread, env, evaluate0, False)


# -------------------------------
# Vectors and maps
# -------------------------------
def vector(env: Environment, args: list[LispValue]) -> Vector:
    return Vector(args)


def vec(env: Environment, args: list[LispValue]) -> Vector:
    _expect("vec", args, 1)
    return Vector(sq.iterate(args[0]))


def hash_map(env: Environment, args: list[LispValue]) -> Map:
    if len(args) % 2:
        raise CloveTypeError("hash-map expects an even number of arguments")
    return Map(zip(args[::2], args[1::2]))


def get(env: Environment, args: list[LispValue]) -> LispValue:
    """(get coll key) / (get coll key default) on maps and vectors; nil otherwise."""
    _expect("get", args, 2, 3)
    coll, key = args[0], args[1]
    default = args[2] if len(args) == 3 else Nil
    if isinstance(coll, Map):
        return coll.get(key, default)
    if isinstance(coll, Vector) and isinstance(key, int) and not isinstance(key, bool):
        return coll[key] if 0 <= key < len(coll) else default
    return default


def assoc(env: Environment, args: list[LispValue]) -> LispValue:
    """(assoc m k v & kvs) on maps (nil acts as an empty map) and vectors."""
    _expect("assoc", args, 3, None)
    coll, kvs = args[0], args[1:]
    if len(kvs) % 2:
        raise CloveTypeError("assoc expects even number of arguments after map/vector")
    if coll is Nil:
        coll = Map()
    for k, v in zip(kvs[::2], kvs[1::2]):
        if isinstance(coll, Map):
            coll = coll.assoc(k, v)
        elif isinstance(coll, Vector):
            i = _int("assoc", k)
            if i == len(coll):
                coll = coll.conj(v)
            elif 0 <= i < len(coll):
                coll = Vector(coll[:i] + (v,) + coll[i + 1:])
            else:
                raise CloveTypeError(f"Index {i} out of bounds")
        else:
            raise CloveTypeError(f"Cannot assoc on {pr_str(coll)}")
    return coll


def dissoc(env: Environment, args: list[LispValue]) -> LispValue:
    _expect("dissoc", args, 1, None)
    coll = args[0]
    if coll is Nil:
        return Nil
    if not isinstance(coll, Map):
        raise CloveTypeError(f"Cannot dissoc on {pr_str(coll)}")
    return coll.without(*args[1:])


def contains(env: Environment, args: list[LispValue]) -> bool:
    _expect("contains?", args, 2)
    coll, key = args
    if isinstance(coll, Map):
        return key in coll
    if isinstance(coll, Vector):
        return isinstance(key, int) and not isinstance(key, bool) and 0 <= key < len(coll)
    return False


def keys(env: Environment, args: list[LispValue]) -> LispValue:
    _expect("keys", args, 1)
    return sq.to_list(args[0].keys()) if isinstance(args[0], Map) and args[0] else Nil


def vals(env: Environment, args: list[LispValue]) -> LispValue:
    _expect("vals", args, 1)
    return sq.to_list(args[0].values()) if isinstance(args[0], Map) and args[0] else Nil


# -------------------------------
# Symbols, strings, errors
# -------------------------------
def _to_string(x: LispValue) -> str:
    """Display form used by str and error: nil -> "", strings unquoted."""
    if x is Nil:
        return ""
    if isinstance(x, str):
        return x
    return pr_str(x)


def str_builtin(env: Environment, args: list[LispValue]) -> str:
    return "".join(_to_string(a) for a in args)


def symbol(env: Environment, args: list[LispValue]) -> Symbol:
    _expect("symbol", args, 1)
    if not isinstance(args[0], str):
        raise CloveTypeError(f"symbol expects a string, got {pr_str(args[0])}")
    return Symbol(args[0])


def keyword(env: Environment, args: list[LispValue]) -> Keyword:
    _expect("keyword", args, 1)
    x = args[0]
    if isinstance(x, Keyword):
        return x
    if isinstance(x, Symbol):
        return Keyword(x.id)
    if isinstance(x, str):
        return Keyword(x)
    raise CloveTypeError(f"keyword expects a string or symbol, got {pr_str(x)}")


def gensym(env: Environment, args: list[LispValue]) -> Symbol:
    """(gensym) or (gensym prefix): a symbol no other symbol will ever equal."""
    _expect("gensym", args, 0, 1)
    if not args:
        return make_gensym()
    p = args[0]
    if isinstance(p, Symbol):
        return make_gensym(p.id)
    if isinstance(p, str):
        return make_gensym(p)
    raise CloveTypeError("gensym prefix must be a Symbol or string")


def error(env: Environment, args: list[LispValue]) -> LispValue:
    """(error msg & more): abort evaluation; raised inside a macro it aborts expansion."""
    _expect("error", args, 1, None)
    raise CloveUserError(" ".join(_to_string(a) for a in args))


# -------------------------------
# Macro expansion helpers
# -------------------------------
def macroexpand_1(env: Environment, args: list[LispValue]) -> LispValue:
    """(macroexpand-1 'form): expand the head macro once and return the result."""
    _expect("macroexpand-1", args, 1)
    return expander.expand_1(args[0], env)


def macroexpand(env: Environment, args: list[LispValue]) -> LispValue:
    """(macroexpand 'form): expand the head until it is no longer a macro call."""
    _expect("macroexpand", args, 1)
    return expander.macroexpand(args[0], env)


def macroexpand_all(env: Environment, args: list[LispValue]) -> LispValue:
    """(macroexpand-all 'form): expand every macro call in form, outside quoted templates."""
    _expect("macroexpand-all", args, 1)
    return expander.macroexpand_all(args[0], env)


def register(env: Environment) -> None:
    """Register all builtin functions into the given environment."""
    env.update(
        {
            Symbol("="): equals,
            Symbol("not="): not_equals,
            Symbol("identical?"): identical,
            Symbol("not"): logical_not,
            Symbol("nil?"): _predicate("nil?", lambda x: x is Nil),
            Symbol("some?"): _predicate("some?", lambda x: x is not Nil),
            Symbol("true?"): _predicate("true?", lambda x: x is True),
            Symbol("false?"): _predicate("false?", lambda x: x is False),
            Symbol("empty?"): is_empty,
            Symbol("even?"): is_even,
            Symbol("odd?"): is_odd,
            Symbol("zero?"): _predicate("zero?", lambda x: not isinstance(x, bool) and x == 0),
            Symbol("pos?"): _predicate("pos?", lambda x: _numbers("pos?", [x])[0] > 0),
            Symbol("neg?"): _predicate("neg?", lambda x: _numbers("neg?", [x])[0] < 0),
            Symbol("number?"): _predicate("number?", lambda x: isinstance(x, Number) and not isinstance(x, bool)),
            Symbol("string?"): _predicate("string?", lambda x: isinstance(x, str)),
            Symbol("symbol?"): _predicate("symbol?", lambda x: isinstance(x, Symbol)),
            Symbol("keyword?"): _predicate("keyword?", lambda x: isinstance(x, Keyword)),
            Symbol("fn?"): _predicate("fn?", is_fn),
            Symbol("list?"): _predicate("list?", lambda x: isinstance(x, List)),
            Symbol("vector?"): _predicate("vector?", lambda x: isinstance(x, Vector)),
            Symbol("map?"): _predicate("map?", lambda x: isinstance(x, Map)),
            Symbol("seq?"): _predicate("seq?", lambda x: isinstance(x, (List, ArraySeq))),
            Symbol("coll?"): _predicate("coll?", lambda x: isinstance(x, (List, ArraySeq, Vector, Map))),
            Symbol("boolean?"): _predicate("boolean?", lambda x: isinstance(x, bool)),
            Symbol("+"): add,
            Symbol("-"): sub,
            Symbol("*"): mul,
            Symbol("/"): div,
            Symbol("mod"): mod,
            Symbol("inc"): inc,
            Symbol("dec"): dec,
            Symbol("<"): _comparison("<", lambda a, b: a < b),
            Symbol("<="): _comparison("<=", lambda a, b: a <= b),
            Symbol(">"): _comparison(">", lambda a, b: a > b),
            Symbol(">="): _comparison(">=", lambda a, b: a >= b),
            Symbol("max"): max_builtin,
            Symbol("min"): min_builtin,
            Symbol("seq"): seq,
            Symbol("first"): first,
            Symbol("rest"): rest,
            Symbol("next"): next_builtin,
            Symbol("second"): second,
            Symbol("conj"): conj,
            Symbol("into"): into,
            Symbol("count"): count,
            Symbol("nth"): nth,
            Symbol("cons"): cons,
            Symbol("list"): list_builtin,
            Symbol("list*"): list_star,
            Symbol("concat"): concat,
            Symbol("partition"): partition,
            Symbol("split-at"): split_at,
            Symbol("apply"): apply,
            Symbol("vector"): vector,
            Symbol("vec"): vec,
            Symbol("hash-map"): hash_map,
            Symbol("get"): get,
            Symbol("assoc"): assoc,
            Symbol("dissoc"): dissoc,
            Symbol("contains?"): contains,
            Symbol("keys"): keys,
            Symbol("vals"): vals,
            Symbol("str"): str_builtin,
            Symbol("symbol"): symbol,
            Symbol("keyword"): keyword,
            Symbol("gensym"): gensym,
            Symbol("error"): error,
            Symbol("macroexpand-1"): macroexpand_1,
            Symbol("macroexpand"): macroexpand,
            Symbol("macroexpand-all"): macroexpand_all,
        }
    )
