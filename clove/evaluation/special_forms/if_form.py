from clove import EvaluatorFn
from clove import SExpression, LispValue
from clove.types.environment import Environment
from clove.types.errors import CloveSyntaxError
from clove.types.nil import Nil, is_truthy


def if_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    """(if test then else?) evaluates exactly one branch, in tail position."""
    if len(tail) not in (2, 3):
        raise CloveSyntaxError("if requires a test, a then-expression and an optional else-expression")

    if is_truthy(evaluate_fn(tail[0], env)):
        branch = tail[1]
    elif len(tail) == 3:
        branch = tail[2]
    else:
        return Nil
    return evaluate_fn(branch, env, is_tail_call)
