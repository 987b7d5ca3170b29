"""Core evaluator and trampoline for the Clove interpreter.

Implements head-position macro expansion, special-form dispatch, and tail-call
aware application via a simple trampoline using TailCall objects.
"""

from __future__ import annotations

from clove import SExpression, LispValue
from clove.evaluation.apply import apply, resolve
from clove.evaluation.special_forms import SPECIAL_FORMS
from clove.types.collections import List, Map, Vector
from clove.types.environment import Environment
from clove.types.macro_expander import MacroExpander
from clove.types.symbol import Symbol


def evaluate(expr: SExpression, env: Environment) -> LispValue:
    """
    Trampoline evaluator: tail-call aware evaluation.
    """
    return resolve(evaluate0(expr, env, True), evaluate0)  # Start in 'tail' mode.


def evaluate0(
    expr: SExpression,
    env: Environment,
    is_tail_call: bool = False,
) -> LispValue:
    """
    Core evaluator: single-step evaluation with tail-call awareness.
    Returns either a value or, in tail position only, a TailCall.
    """
    if isinstance(expr, Symbol):
        return env.lookup(expr)

    if isinstance(expr, List):
        if not len(expr):
            return expr
        head = expr.first()
        if isinstance(head, Symbol):
            # --- Special forms handling ---
            handler = SPECIAL_FORMS.get(head)
            if handler is not None:
                return handler(list(expr.rest()), env, evaluate0, is_tail_call)
            # Expand a head-position macro to a fixed point, then evaluate the result
            if expander.is_macro_call(expr, env):
                expanded = expander.macroexpand(expr, env)
                return evaluate0(expanded, env, is_tail_call)

        # Ordinary application: head first, then arguments left to right.
        fn = evaluate0(head, env)
        args = [evaluate0(arg, env) for arg in expr.rest()]
        return apply(fn, args, env, evaluate0, is_tail_call)

    if isinstance(expr, Vector):
        return Vector(evaluate0(x, env) for x in expr)

    if isinstance(expr, Map):
        return Map((evaluate0(k, env), evaluate0(v, env)) for k, v in expr.items())

    # --- Atoms return as-is ---
    return expr


expander = MacroExpander(evaluate0)
