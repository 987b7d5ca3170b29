"""Application engine for Clove.

This module centralizes function application semantics for the interpreter:
- Arity selection: an exact fixed arity wins, otherwise the variadic arity
  collects the trailing arguments (Lambda.select_arity).
- Parameter binding through the destructuring binder, into a fresh frame
  whose outer is the closure's captured environment.
- Tail-call awareness via TailCall objects (consumed by the trampoline).
- Application of Python callables registered in the environment, and of
  keywords and maps used as lookup functions.

Keeping this logic in one place prevents duplication between the evaluator,
the macro expander, and builtin helpers that call back into Lisp functions.
"""

from __future__ import annotations

from typing import Callable

from clove import LispValue, EvaluatorFn, SExpression
from clove.types.bind import bind_arguments
from clove.types.collections import Map
from clove.types.environment import Environment
from clove.types.errors import CloveArityMismatch, CloveNotApplicable
from clove.types.lambda_fn import Lambda, Macro
from clove.types.nil import Nil
from clove.types.symbol import Keyword
from clove.types.tail_call import TailCall


def eval_body(
    body: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool,
) -> LispValue | TailCall:
    """Evaluate body forms in order; only the last one sits in tail position."""
    if not body:
        return Nil
    for form in body[:-1]:
        evaluate_fn(form, env, False)
    return evaluate_fn(body[-1], env, is_tail_call)


def resolve(result: LispValue | TailCall, evaluate_fn: EvaluatorFn) -> LispValue:
    """Step the trampoline until a concrete value is produced."""
    while isinstance(result, TailCall):
        result = eval_body(result.body, result.env, evaluate_fn, True)
    return result


def apply_lambda(
    fn: Lambda,
    args: list[LispValue],
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool,
) -> LispValue | TailCall:
    """Apply a Lisp Lambda value.

    Parameters:
    - fn: The Lambda being applied.
    - args: The argument values (unevaluated syntax when fn is a macro transformer).
    - evaluate_fn: Evaluator function used to run the body.
    - is_tail_call: Whether the call position is tail; if True, return a TailCall.

    Raises CloveArityMismatch when no arity accepts len(args), and
    CloveDestructureError when an argument does not fit its parameter pattern.
    """
    arity = fn.select_arity(len(args))
    new_env = bind_arguments(arity.params, args, fn.env)
    if is_tail_call:
        return TailCall(arity.body, new_env)
    # Not tail position: step evaluation immediately
    return resolve(eval_body(arity.body, new_env, evaluate_fn, True), evaluate_fn)


def _lookup_call(coll: LispValue, args: list[LispValue], name: str) -> LispValue:
    if len(args) not in (1, 2):
        raise CloveArityMismatch(name, len(args))
    default = args[1] if len(args) == 2 else Nil
    if isinstance(coll, Map):
        return coll.get(args[0], default)
    return default


def apply(
    head: Lambda | Callable[[Environment, list[LispValue]], LispValue] | object,
    args: list[LispValue],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    tail: bool = False,
) -> LispValue | TailCall:
    """Apply a Lambda, a Python builtin, a keyword or a map.

    - For Lambda, defer to apply_lambda (arity dispatch, binding, tail calls).
    - Keywords look themselves up in a map: (:k m) / (:k m default).
    - Maps look up their argument: (m k) / (m k default).
    - For Python callables (builtins), invoke with the runtime env and list of args.
    - Otherwise, raise CloveNotApplicable.
    """
    if isinstance(head, Lambda):
        return apply_lambda(head, args, evaluate_fn, tail)
    if isinstance(head, Keyword):
        if not args:
            raise CloveArityMismatch(head, 0)
        return _lookup_call(args[0], [head, *args[1:]], str(head))
    if isinstance(head, Map):
        return _lookup_call(head, args, "map")
    if isinstance(head, Macro):
        raise CloveNotApplicable(head)
    if callable(head):
        return head(env, args)
    raise CloveNotApplicable(head)
