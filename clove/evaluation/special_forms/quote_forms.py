from clove import SExpression, LispValue, EvaluatorFn
from clove.types import seq as sq
from clove.types.collections import List, Map, Vector
from clove.types.errors import CloveSyntaxError, CloveTypeError
from clove.types.symbol import Symbol

QUASIQUOTE = Symbol("quasiquote")
UNQUOTE = Symbol("unquote")
UNQUOTE_SPLICING = Symbol("unquote-splicing")


def _tagged(expr: SExpression, tag: Symbol) -> bool:
    return isinstance(expr, List) and len(expr) == 2 and expr.first() == tag


def eval_quasiquote(
    evaluate_fn: EvaluatorFn,
    expr: SExpression,
    env,
    depth: int = 1,
) -> SExpression:
    """Build the template `expr`, filling in ~x and splicing ~@xs at depth 1."""

    def _process_items(items) -> list:
        result_list = []
        for item in items:
            if _tagged(item, UNQUOTE_SPLICING) and depth == 1:
                spliced_val = evaluate_fn(item[1], env)
                if not sq.is_seqable(spliced_val):
                    raise CloveTypeError("Unquote-splicing must produce a sequence")
                result_list.extend(sq.iterate(spliced_val))
                continue
            result_list.append(eval_quasiquote(evaluate_fn, item, env, depth))
        return result_list

    if isinstance(expr, List):
        if not len(expr):
            return expr
        if _tagged(expr, UNQUOTE):
            if depth == 1:
                return evaluate_fn(expr[1], env)
            return List.from_iterable([UNQUOTE, eval_quasiquote(evaluate_fn, expr[1], env, depth - 1)])
        if _tagged(expr, UNQUOTE_SPLICING) and depth > 1:
            return List.from_iterable(
                [UNQUOTE_SPLICING, eval_quasiquote(evaluate_fn, expr[1], env, depth - 1)]
            )
        if _tagged(expr, QUASIQUOTE):
            return List.from_iterable([QUASIQUOTE, eval_quasiquote(evaluate_fn, expr[1], env, depth + 1)])
        return List.from_iterable(_process_items(expr))

    if isinstance(expr, Vector):
        return Vector(_process_items(expr))

    if isinstance(expr, Map):
        return Map(
            (eval_quasiquote(evaluate_fn, k, env, depth), eval_quasiquote(evaluate_fn, v, env, depth))
            for k, v in expr.items()
        )

    # Atoms and symbols returned as-is
    return expr


def quote_form(
    tail: list[SExpression], env, evaluate_fn: EvaluatorFn, _: bool
) -> LispValue:
    if len(tail) != 1:
        raise CloveSyntaxError("quote expects exactly 1 argument")
    return tail[0]


def quasiquote_form(
    tail: list[SExpression],
    env,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    if len(tail) != 1:
        raise CloveSyntaxError("quasiquote expects exactly 1 argument")
    # Quasiquote returns the constructed data structure; do not evaluate it here.
    return eval_quasiquote(evaluate_fn, tail[0], env)


def unquote_form(
    tail: list[SExpression], env, evaluate_fn: EvaluatorFn, _: bool
) -> LispValue:
    raise CloveSyntaxError("unquote (~) not valid outside of quasiquote")


def unquote_splice_form(
    tail: list[SExpression], env, evaluate_fn: EvaluatorFn, _: bool
) -> LispValue:
    raise CloveSyntaxError("unquote-splicing (~@) not valid outside of quasiquote")
