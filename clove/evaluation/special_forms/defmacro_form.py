"""Special form: defmacro.

Defines a macro transformer in the top-level environment using a fn-like body.
"""

from __future__ import annotations

from clove import EvaluatorFn, SExpression, LispValue
from clove.evaluation.special_forms.lambda_form import make_lambda
from clove.types.environment import Environment
from clove.types.errors import CloveSyntaxError
from clove.types.lambda_fn import Macro
from clove.types.nil import Nil
from clove.types.symbol import Symbol


def defmacro_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    _: bool,
) -> LispValue:
    """(defmacro name doc? [params] body...) or (defmacro name doc? ([p] b...) ...)"""
    if len(tail) < 2:
        raise CloveSyntaxError("defmacro requires a name and parameter list")

    macro_name = tail[0]
    if not isinstance(macro_name, Symbol):
        raise CloveSyntaxError(f"Macro name must be a Symbol, got {macro_name!r}")

    sigs = tail[1:]
    if isinstance(sigs[0], str) and len(sigs) > 1:
        sigs = sigs[1:]  # docstring

    transformer = make_lambda([macro_name, *sigs], env)
    env.define_global(macro_name, Macro(transformer, macro_name))

    return Nil
