"""Error kinds surfaced by the Clove core.

Every error aborts the enclosing top-level evaluation. Each kind keeps the
structured context a host needs to render its own diagnostic (symbol name,
argument count, offending pattern) as attributes; the message text is only a
convenience.
"""

from __future__ import annotations

from typing import Any


class CloveError(Exception):
    """ Base class for all Clove errors"""
    pass


class CloveSyntaxError(CloveError):
    """ Raised when source text or a special form is malformed"""


class CloveTypeError(CloveError):
    """ Raised when a primitive receives a value of the wrong kind"""


class CloveUnboundSymbol(CloveError):
    """ Raised when a symbol is looked up or set! before it is bound"""

    def __init__(self, name: Any):
        super().__init__(f"Unable to resolve symbol: {name}")
        self.name = name


class CloveArityMismatch(CloveError):
    """ Raised when no arity of a function accepts the given argument count"""

    def __init__(self, fn_name: Any, argc: int):
        super().__init__(f"Wrong number of args ({argc}) passed to: {fn_name or 'fn'}")
        self.fn_name = fn_name
        self.argc = argc


class CloveNotApplicable(CloveError):
    """ Raised when the head of an application is not a function"""

    def __init__(self, value: Any):
        super().__init__(f"Cannot apply non-function {value!r}")
        self.value = value


class CloveDestructureError(CloveError):
    """ Raised when a binding pattern does not match the shape of its value"""

    def __init__(self, pattern: Any, value: Any, reason: str = "shape mismatch"):
        super().__init__(f"Cannot destructure {value!r} with {pattern!r}: {reason}")
        self.pattern = pattern
        self.value = value
        self.reason = reason


class CloveUserError(CloveError):
    """ Raised by the `error` primitive"""

    def __init__(self, message: Any):
        super().__init__(str(message))
        self.message = message


class CloveMacroExpansionError(CloveUserError):
    """ Raised when a macro transformer calls `error` while expanding"""

    def __init__(self, message: Any, macro: Any = None):
        super().__init__(message)
        self.macro = macro
