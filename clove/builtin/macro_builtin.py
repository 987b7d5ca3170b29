"""Builtin macro transformers for Clove (implemented in Python).
"""

from typing import Any

from clove import SExpression
from clove.types.collections import List
from clove.types.environment import Environment
from clove.types.errors import CloveArityMismatch, CloveSyntaxError
from clove.types.lambda_fn import Macro
from clove.types.symbol import Symbol

DEF = Symbol("def")
FN = Symbol("fn")


def defn_macro(args: list[SExpression], env: Any) -> SExpression:
    """(defn name doc? [params] body...) -> define a function named `name`.

    Expands into (def name (fn name [params] body...)); multi-arity clauses
    `([p] body...) ([p q] body...)` pass straight through to fn.

    N.B.
        This illustrates how you can 'short-circuit' macro expansion in
    the evaluation for specific cases. Here we're simply providing the
    syntax directly, so the prelude can use defn before any Lisp-level
    macro exists.
    """
    if len(args) < 2:
        raise CloveArityMismatch(Symbol("defn"), len(args))

    name = args[0]
    if not isinstance(name, Symbol):
        raise CloveSyntaxError(f"defn name must be a Symbol, got {name!r}")
    sigs = list(args[1:])
    if isinstance(sigs[0], str) and len(sigs) > 1:
        sigs = sigs[1:]  # docstring

    return List.from_iterable([DEF, name, List.from_iterable([FN, name, *sigs])])


def register(env: Environment) -> None:
    """Register builtin macros in the provided top-level environment."""
    env.define(Symbol("defn"), Macro(defn_macro, Symbol("defn")))
