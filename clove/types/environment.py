"""Runtime environment for Clove.

The Environment stores bindings of Symbols to evaluated Lisp values and supports
nested scopes via an `outer` link. A frame is created for every function
application; closures keep their defining frame alive by holding a reference
to it. The root frame is the process-wide top level: `def` writes there under
a lock so two evaluations never observe a half-made definition.
"""

from __future__ import annotations

import logging
import threading
from io import StringIO
from typing import Optional

from clove import LispValue
from clove.types.errors import CloveSyntaxError, CloveUnboundSymbol
from clove.types.symbol import Symbol

logger = logging.getLogger(__name__)


class Environment:
    """Hierarchical mapping from Symbols to Lisp values."""

    __slots__ = ("vars", "outer", "_lock")

    def __init__(self, outer: Optional[Environment] = None):
        self.vars: dict[Symbol, LispValue] = {}
        self.outer: Environment | None = outer
        # Only the top-level frame is shared between evaluations
        self._lock: threading.RLock | None = threading.RLock() if outer is None else None

    def define(self, name: Symbol, value: LispValue) -> None:
        """Bind `name` to `value` in this frame.

        Raises CloveSyntaxError if `name` is not a Symbol.
        """
        if not isinstance(name, Symbol):
            raise CloveSyntaxError(f"Cannot bind {name!r}: not a symbol")
        self.vars[name] = value

    def root(self) -> Environment:
        env = self
        while env.outer is not None:
            env = env.outer
        return env

    def define_global(self, name: Symbol, value: LispValue) -> None:
        """Bind `name` in the top-level frame, serialised against other definers."""
        root = self.root()
        with root._lock:
            root.define(name, value)
        logger.debug("defined %s", name)

    def find(self, symbol: Symbol) -> Optional[Environment]:
        """Find the nearest environment in the chain that contains `symbol`."""
        env: Optional[Environment] = self
        while env is not None:
            if symbol in env.vars:
                return env
            env = env.outer
        return None

    def set(self, name: Symbol, value: LispValue) -> None:
        """Update an existing binding for `name` in the environment chain.

        Raises CloveUnboundSymbol if the symbol is not found.
        """
        env = self.find(name)
        if env is None:
            raise CloveUnboundSymbol(name)
        if env._lock is not None:
            with env._lock:
                env.vars[name] = value
        else:
            env.vars[name] = value

    def lookup(self, name: Symbol) -> LispValue:
        """Look up the value bound to `name`, innermost frame first.

        Raises CloveUnboundSymbol if not found.
        """
        env: Optional[Environment] = self
        while env is not None:
            vars_ = env.vars
            if name in vars_:
                return vars_[name]
            env = env.outer
        raise CloveUnboundSymbol(name)

    def update(self, mapping: dict[Symbol, LispValue]) -> None:
        """Bulk-define a mapping of Symbol -> value in the current frame."""
        for k, v in mapping.items():
            self.define(k, v)

    def _write_vars(self, buffer: StringIO) -> None:
        """Write this frame's variables into the buffer in a compact form."""
        buffer.write("{")
        first = True
        for k, v in self.vars.items():
            if not first:
                buffer.write(", ")
            buffer.write(f"{k}: {v!r}")
            first = False
        buffer.write("}")

    def __str__(self) -> str:
        """Human-readable single-frame view with an indicator for parent."""
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")  # indicate parent exists
            return buffer.getvalue()

    def __repr__(self) -> str:
        """Frame sizes along the chain; the root frame holds every primitive."""
        sizes = []
        env = self
        while env is not None:
            sizes.append(str(len(env.vars)))
            env = env.outer
        return f"<Environment chain: {' -> '.join(sizes)}>"
