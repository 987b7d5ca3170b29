from __future__ import annotations

from typing import List as TList

from clove import LispValue, SExpression
from clove.types import seq as sq
from clove.types.collections import Vector
from clove.types.environment import Environment
from clove.types.errors import CloveDestructureError
from clove.types.nil import Nil
from clove.types.symbol import AMPERSAND, Symbol


def check_pattern(pattern: SExpression) -> None:
    """Validate the shape of a binding pattern without looking at any value.

    A pattern is a Symbol or a Vector of patterns, optionally ending in
    `& name`. Raises CloveDestructureError for anything else.
    """
    if isinstance(pattern, Symbol):
        if pattern == AMPERSAND:
            raise CloveDestructureError(pattern, Nil, "& outside of a vector pattern")
        return
    if not isinstance(pattern, Vector):
        raise CloveDestructureError(pattern, Nil, "unsupported binding form")
    if AMPERSAND in pattern:
        at = pattern.index(AMPERSAND)
        tail = pattern[at + 1:]
        if len(tail) != 1:
            raise CloveDestructureError(pattern, Nil, "& must be followed by exactly one name")
        if not isinstance(tail[0], Symbol) or tail[0] == AMPERSAND:
            raise CloveDestructureError(pattern, Nil, "rest binding after & must be a symbol")
        positional = pattern[:at]
    else:
        positional = pattern
    for p in positional:
        check_pattern(p)


def destructure(pattern: SExpression, value: LispValue) -> TList[tuple[Symbol, LispValue]]:
    """
    Compile `pattern` against `value` into a flat list of (symbol, value) pairs.

    Supports:
    - Symbol: binds the whole value
    - [] : binds nothing
    - [p1 p2 ...]: p1 against (first v), the rest against (rest v); positions
      past the end of the value bind nil
    - [p1 ... & name]: name gets the remaining sequence as-is (an empty
      sequence, never nil, once exhausted)
    - nested vectors recurse structurally

    Nothing is bound here, so a mismatch anywhere leaves no partial bindings.
    """
    check_pattern(pattern)
    pairs: TList[tuple[Symbol, LispValue]] = []
    _collect(pattern, value, pairs)
    return pairs


def _collect(pattern: SExpression, value: LispValue, pairs: list) -> None:
    if isinstance(pattern, Symbol):
        pairs.append((pattern, value))
        return
    if not sq.is_seqable(value):
        raise CloveDestructureError(pattern, value, "value is not a sequence")
    remaining = value
    items = iter(pattern)
    for p in items:
        if p == AMPERSAND:
            pairs.append((next(items), remaining))
            return
        _collect(p, sq.first(remaining), pairs)
        remaining = sq.rest(remaining)


def bind_pattern(pattern: SExpression, value: LispValue, env: Environment) -> Environment:
    """Destructure `value` with `pattern` and define every binding in `env`."""
    for name, val in destructure(pattern, value):
        env.define(name, val)
    return env


def bind_arguments(
    params: Vector,
    supplied_args: TList[LispValue],
    closure_env: Environment,
) -> Environment:
    """
    Bind evaluated (or, for macros, unevaluated) arguments to a parameter vector.

    The arguments are viewed as one sequence so `[a & more]` and nested
    patterns work exactly like `let` destructuring. Returns a new Environment
    whose outer is the closure_env.
    """
    local_env = Environment(outer=closure_env)
    args = sq.to_list(supplied_args)
    pairs: TList[tuple[Symbol, LispValue]] = []
    _collect(params, args, pairs)
    for name, val in pairs:
        local_env.define(name, val)
    return local_env
