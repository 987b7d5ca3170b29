"""Registry of special forms for the Clove evaluator.

Maps Symbols to handler functions that implement non-standard evaluation rules.
The evaluator consults this table before macro expansion and ordinary function
application, so these names cannot be shadowed by macros. Every other control
form (do, let, when, cond, ...) is a macro in the prelude.

Handlers take (tail, env, evaluate_fn, is_tail_call).
"""

from clove.types.symbol import Symbol
from clove.evaluation.special_forms.set_form import set_form
from clove.evaluation.special_forms.defmacro_form import defmacro_form
from clove.evaluation.special_forms.quote_forms import quote_form, quasiquote_form, unquote_form, unquote_splice_form
from clove.evaluation.special_forms.lambda_form import lambda_form
from clove.evaluation.special_forms.define_form import define_form
from clove.evaluation.special_forms.if_form import if_form

SPECIAL_FORMS = {
    Symbol("quote"): quote_form,
    Symbol("if"): if_form,
    Symbol("fn"): lambda_form,
    Symbol("def"): define_form,
    Symbol("set!"): set_form,
    Symbol("defmacro"): defmacro_form,
    Symbol("quasiquote"): quasiquote_form,
    Symbol("unquote"): unquote_form,
    Symbol("unquote-splicing"): unquote_splice_form,
}
