from clove import EvaluatorFn
from clove import SExpression, LispValue
from clove.types.environment import Environment
from clove.types.errors import CloveSyntaxError
from clove.types.symbol import Symbol


def binding_target(form: str, tail: list[SExpression]) -> tuple[Symbol, SExpression]:
    """Check the shape `(form name value)` and return the name and value expression."""
    if len(tail) != 2:
        raise CloveSyntaxError(f"{form} requires exactly 2 arguments: ({form} name value)")
    name, val_expr = tail
    if not isinstance(name, Symbol):
        raise CloveSyntaxError(f"{form} first argument must be a Symbol, got {name!r}")
    return name, val_expr


def define_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    _: bool,
) -> LispValue:
    """
    (def name value)
    Always binds in the top-level environment, whatever frame it is evaluated in;
    redefinition overwrites. Returns the value.
    """
    name, val_expr = binding_target("def", tail)
    value = evaluate_fn(val_expr, env)
    env.define_global(name, value)
    return value
