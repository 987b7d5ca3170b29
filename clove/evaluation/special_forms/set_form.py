from clove import EvaluatorFn
from clove import SExpression, LispValue
from clove.evaluation.special_forms.define_form import binding_target
from clove.types.environment import Environment


def set_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    _: bool = False,
) -> LispValue:
    """(set! name value) rebinds `name` in the nearest frame that already holds it.

    It never creates a binding; letfn uses it to fill the placeholders it introduces.
    """
    name, val_expr = binding_target("set!", tail)
    value = evaluate_fn(val_expr, env)
    env.set(name, value)
    return value
