from clove import EvaluatorFn
from clove import SExpression, LispValue
from clove.types.collections import List, Vector
from clove.types.environment import Environment
from clove.types.errors import CloveSyntaxError
from clove.types.lambda_fn import Arity, Lambda
from clove.types.symbol import Symbol


def parse_arities(sigs: list[SExpression]) -> list[Arity]:
    """Accept either `[params] body...` or one or more `([params] body...)` clauses."""
    if not sigs:
        raise CloveSyntaxError("fn requires a parameter vector")
    if isinstance(sigs[0], Vector):
        return [Arity(sigs[0], sigs[1:])]
    arities = []
    for clause in sigs:
        if not isinstance(clause, List) or not len(clause):
            raise CloveSyntaxError(f"Invalid fn arity clause {clause!r}, expected ([params] body...)")
        arities.append(Arity(clause.first(), list(clause.rest())))
    return arities


def make_lambda(tail: list[SExpression], env: Environment) -> Lambda:
    """Build a closure from the tail of a `fn` form.

    A named fn gets its own frame binding the name to the closure, so the body
    can recurse without any global definition.
    """
    name = None
    if tail and isinstance(tail[0], Symbol):
        name, tail = tail[0], tail[1:]
    arities = parse_arities(list(tail))
    if name is None:
        return Lambda(arities, env)
    fn_env = Environment(outer=env)
    fn = Lambda(arities, fn_env, name)
    fn_env.define(name, fn)
    return fn


def lambda_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    _: bool,
) -> LispValue:
    # (fn [params] body...), (fn name [params] body...),
    # (fn name? ([p1] b1...) ([p2 & more] b2...))
    # Body forms run in order and the last value is returned; no body -> nil.
    return make_lambda(tail, env)
