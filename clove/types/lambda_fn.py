"""Function and macro representation for Clove."""

from __future__ import annotations

from io import StringIO
from typing import Any, Callable, Optional

from clove import SExpression
from clove.types.bind import check_pattern
from clove.types.collections import Vector
from clove.types.environment import Environment
from clove.types.errors import CloveArityMismatch, CloveSyntaxError
from clove.types.symbol import AMPERSAND, Symbol


class Arity:
    """One (parameter vector, body) alternative of a function."""

    __slots__ = ("params", "body", "required", "variadic")

    def __init__(self, params: Vector, body: list[SExpression]):
        if not isinstance(params, Vector):
            raise CloveSyntaxError(f"Parameter declaration must be a vector, got {params!r}")
        check_pattern(params)
        self.params: Vector = params
        self.body: list[SExpression] = list(body)
        self.variadic: bool = AMPERSAND in params
        self.required: int = params.index(AMPERSAND) if self.variadic else len(params)

    def accepts(self, argc: int) -> bool:
        if self.variadic:
            return argc >= self.required
        return argc == self.required

    def __repr__(self) -> str:
        return f"Arity({self.params!r}, {len(self.body)} form(s))"


def check_arities(name: Optional[Symbol], arities: list[Arity]) -> None:
    """Reject ambiguous arity sets when the function is created."""
    seen: set[int] = set()
    variadic = [a for a in arities if a.variadic]
    if len(variadic) > 1:
        raise CloveSyntaxError(f"{name or 'fn'}: can't have more than 1 variadic overload")
    for a in arities:
        if a.variadic:
            continue
        if a.required in seen:
            raise CloveSyntaxError(f"{name or 'fn'}: can't have 2 overloads with same arity ({a.required})")
        seen.add(a.required)
    if variadic and seen and max(seen) > variadic[0].required:
        raise CloveSyntaxError(
            f"{name or 'fn'}: can't have fixed arity function with more params than variadic function"
        )


class Lambda:
    """A first-class closure: ordered arities, captured env, optional name."""

    __slots__ = ("arities", "env", "name")

    def __init__(
        self,
        arities: list[Arity],
        env: Environment | None = None,
        name: Symbol | None = None,
    ):
        check_arities(name, arities)
        self.arities: list[Arity] = arities
        # Avoid shared default Environment across instances
        self.env: Environment = env if env is not None else Environment()
        self.name: Symbol | None = name

    def select_arity(self, argc: int) -> Arity:
        """Exact fixed arity first, then the variadic catch-all."""
        catch_all = None
        for arity in self.arities:
            if arity.variadic:
                catch_all = arity
            elif arity.required == argc:
                return arity
        if catch_all is not None and catch_all.accepts(argc):
            return catch_all
        raise CloveArityMismatch(self.name, argc)

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write("(fn")
            if self.name is not None:
                buffer.write(f" {self.name}")
            for arity in self.arities:
                buffer.write(f" {arity.params!r}")
            buffer.write(")")
            return buffer.getvalue()

    def __repr__(self) -> str:
        """Return the Lisp-style representation of the function."""
        return str(self)


class Macro:
    """Tags a transformer so the expander runs it on unevaluated syntax.

    The transformer is either a Lambda (arity-dispatched like any function) or
    a Python callable `f(args, env)` returning the replacement form.
    """

    __slots__ = ("transformer", "name")

    def __init__(self, transformer: Lambda | Callable[[list, Environment], Any], name: Symbol | None = None):
        self.transformer = transformer
        self.name = name if name is not None else getattr(transformer, "name", None)

    def __repr__(self) -> str:
        return f"<macro {self.name}>"
