from __future__ import annotations

import logging

from clove import EvaluatorFn, SExpression
from clove.evaluation.apply import apply_lambda
from clove.types.collections import List, Map, Vector
from clove.types.environment import Environment
from clove.types.errors import CloveMacroExpansionError, CloveUserError
from clove.types.lambda_fn import Lambda, Macro
from clove.types.symbol import Symbol

logger = logging.getLogger(__name__)

QUOTE = Symbol("quote")
QUASIQUOTE = Symbol("quasiquote")
FN = Symbol("fn")
DEFMACRO = Symbol("defmacro")


class MacroExpander:
    """
    Rewrites macro calls into the forms they stand for.

    Macros are ordinary environment bindings holding a Macro value, so a local
    binding of the same name shadows a global macro. A call is expanded by
    running the transformer on the raw, unevaluated argument forms and taking
    its return value as the replacement form.

    Features:
    - Head-position macro expansion, repeated to a fixed point
    - Recursive nested expansion (skips quote/quasiquote templates)
    - Arity-dispatched Lambda transformers and Python callable transformers
    - `error` inside a transformer surfaces as CloveMacroExpansionError
    """

    def __init__(self, evaluate_fn: EvaluatorFn):
        # evaluate0-compatible evaluator used to run Lambda transformer bodies
        self.evaluate_fn = evaluate_fn

    def macro_for(
        self, form: SExpression, env: Environment, shadowed: frozenset = frozenset()
    ) -> Macro | None:
        """Return the Macro bound to the head of `form`, if any.

        `shadowed` holds local names (fn parameters) that hide global macros
        during whole-form expansion, before those locals exist in any frame.
        """
        if isinstance(form, List) and len(form):
            head = form.first()
            if isinstance(head, Symbol) and head not in shadowed:
                frame = env.find(head)
                if frame is not None:
                    value = frame.vars[head]
                    if isinstance(value, Macro):
                        return value
        return None

    def is_macro_call(self, form: SExpression, env: Environment) -> bool:
        return self.macro_for(form, env) is not None

    def _run_transformer(self, macro: Macro, args: list[SExpression], env: Environment) -> SExpression:
        """
        Canonical macro transformer invocation:
        - Bind raw, unevaluated args to the transformer's parameters (no argument evaluation).
        - Run the transformer body once to produce an expansion form.
        - Do NOT evaluate the returned expansion here; just return it.
        """
        transformer = macro.transformer
        try:
            if isinstance(transformer, Lambda):
                return apply_lambda(transformer, args, self.evaluate_fn, False)
            # Python callable macro transformers accept (args, env) and return a form
            return transformer(args, env)
        except CloveMacroExpansionError:
            raise
        except CloveUserError as e:
            raise CloveMacroExpansionError(e.message, macro=macro.name) from e

    # Single-step head expansion
    def expand_1(
        self, form: SExpression, env: Environment, shadowed: frozenset = frozenset()
    ) -> SExpression:
        """Expand only the head-position macro if present."""
        macro = self.macro_for(form, env, shadowed)
        if macro is None:
            return form  # Not a macro call, unchanged
        expansion = self._run_transformer(macro, list(form.rest()), env)
        logger.debug("expanded %s => %r", macro.name, expansion)
        return expansion

    # Fixed-point head expansion
    def macroexpand(
        self, form: SExpression, env: Environment, shadowed: frozenset = frozenset()
    ) -> SExpression:
        """Expand the head repeatedly until it is no longer a macro call."""
        cur = form
        while self.macro_for(cur, env, shadowed) is not None:
            cur = self.expand_1(cur, env, shadowed)
        return cur

    # Full expansion
    def macroexpand_all(
        self, form: SExpression, env: Environment, shadowed: frozenset = frozenset()
    ) -> SExpression:
        expanded = self.macroexpand(form, env, shadowed)

        if isinstance(expanded, List):
            if not len(expanded):
                return expanded
            head = expanded.first()
            # Do not recurse into (quote ...) or (quasiquote ...) templates.
            if head in (QUOTE, QUASIQUOTE):
                return expanded
            if head in (FN, DEFMACRO):
                return self._expand_fn(expanded, env, shadowed)
            return List.from_iterable(self.macroexpand_all(x, env, shadowed) for x in expanded)

        if isinstance(expanded, Vector):
            return Vector(self.macroexpand_all(x, env, shadowed) for x in expanded)

        if isinstance(expanded, Map):
            return Map(
                (self.macroexpand_all(k, env, shadowed), self.macroexpand_all(v, env, shadowed))
                for k, v in expanded.items()
            )

        return expanded

    def _expand_fn(self, form: List, env: Environment, shadowed: frozenset) -> List:
        """Expand fn/defmacro bodies with their parameter names shadowing macros."""
        items = list(form)
        out = [items[0]]
        names = set(shadowed)
        i = 1
        if i < len(items) and isinstance(items[i], Symbol):
            names.add(items[i])
            out.append(items[i])
            i += 1
        if items[0] == DEFMACRO and i < len(items) - 1 and isinstance(items[i], str):
            out.append(items[i])  # docstring
            i += 1
        sigs = items[i:]
        if sigs and isinstance(sigs[0], Vector):
            out.extend(self._expand_arity(sigs[0], sigs[1:], env, names))
        else:
            for clause in sigs:
                if isinstance(clause, List) and len(clause) and isinstance(clause.first(), Vector):
                    arity = self._expand_arity(clause.first(), list(clause.rest()), env, names)
                    out.append(List.from_iterable(arity))
                else:
                    out.append(clause)  # malformed; fn reports it when evaluated
        return List.from_iterable(out)

    def _expand_arity(self, params: Vector, body: list, env: Environment, names: set) -> list:
        scope = frozenset(names | pattern_symbols(params))
        return [params, *(self.macroexpand_all(f, env, scope) for f in body)]


def pattern_symbols(pattern: SExpression) -> set:
    """Every symbol a binding pattern introduces."""
    if isinstance(pattern, Symbol):
        return {pattern}
    if isinstance(pattern, Vector):
        out: set = set()
        for p in pattern:
            out |= pattern_symbols(p)
        return out
    return set()
