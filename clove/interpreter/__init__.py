from __future__ import annotations

import logging
import sys
from typing import Callable, Literal

from clove import SExpression, LispValue
from clove.builtin.env_builtin import register
from clove.builtin.macro_builtin import register as register_macros
from clove.config import get_recursion_limit
from clove.evaluation.evaluator import evaluate, expander
from clove.reader.parser import lex, TokenStream
from clove.types.environment import Environment
from clove.types.errors import CloveTypeError
from clove.types.lambda_fn import Lambda, Macro
from clove.types.nil import Nil
from clove.types.symbol import Symbol

logger = logging.getLogger(__name__)


def _as_symbol(name: Symbol | str) -> Symbol:
    return name if isinstance(name, Symbol) else Symbol(name)


class Interpreter:
    """
    Orchestrates reading, expanding and evaluating Clove code.
    Maintains one top-level Environment across calls; macros and functions
    defined by earlier forms are visible to later ones.
    """

    def __init__(
        self,
        prelude: str | None | Literal['auto'] = 'auto',
    ):
        limit = get_recursion_limit()
        if sys.getrecursionlimit() < limit:
            sys.setrecursionlimit(limit)

        self.env: Environment = self.new_environment()

        if prelude is None:
            pass  # explicit: no prelude
        elif prelude == 'auto':
            # Lazy import to avoid circular imports
            from clove.modules.package_loader import load_prelude
            load_prelude(self)
        elif prelude:
            self.eval_prelude(prelude)

        logger.debug("interpreter ready with %d top-level bindings", len(self.env.vars))

    @staticmethod
    def new_environment() -> Environment:
        """A fresh top-level environment seeded with primitives and builtin macros."""
        env = Environment()
        register(env)
        register_macros(env)
        return env

    def local_environment(self) -> Environment:
        """A private frame over the shared top level, for one independent evaluation."""
        return Environment(outer=self.env)

    def expand_and_evaluate(self, form: SExpression, env: Environment | None = None) -> LispValue:
        """Fully expand one top-level form, then evaluate it."""
        target = env if env is not None else self.env
        return evaluate(expander.macroexpand_all(form, target), target)

    def define_macro(
        self,
        name: Symbol | str,
        transformer: Lambda | Macro | Callable[[list, Environment], SExpression],
    ) -> Macro:
        """Install a macro; a Python transformer is called as f(args, env)."""
        sym = _as_symbol(name)
        macro = transformer if isinstance(transformer, Macro) else Macro(transformer, sym)
        self.env.define_global(sym, macro)
        return macro

    def define_function(
        self,
        name: Symbol | str,
        closure: Lambda | Callable[[Environment, list], LispValue],
    ) -> None:
        """Install a function; a Python builtin is called as f(env, args)."""
        if not isinstance(closure, Lambda) and not callable(closure):
            raise CloveTypeError(f"define_function expects a function, got {closure!r}")
        self.env.define_global(_as_symbol(name), closure)

    def read(self, code: str) -> list[SExpression]:
        return list(TokenStream(lex(code)).parse_all())

    def eval_prelude(self, code: str) -> None:
        tokens = lex(code)
        stream = TokenStream(iter(tokens))
        while (expr := stream.parse_expr()) is not None:
            self.expand_and_evaluate(expr)

    def eval(self, code: str, env: Environment | None = None) -> LispValue:
        """Evaluate every form in `code`; returns the last value (nil for no forms)."""
        target = env if env is not None else self.env
        tokens = lex(code)
        stream = TokenStream(iter(tokens))
        result: LispValue = Nil
        while (expr := stream.parse_expr()) is not None:
            result = self.expand_and_evaluate(expr, target)
        return result
