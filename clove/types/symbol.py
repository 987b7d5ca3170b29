from __future__ import annotations

import logging
import sys
import threading
from itertools import count

logger = logging.getLogger(__name__)


class Symbol:
    __slots__ = ("id",)

    def __init__(self, name: str):
        # Intern to ensure fast equality/hash and reduce memory
        self.id = sys.intern(name)

    def __eq__(self, other: object) -> bool:
        # A GenSym never equals a plain Symbol, even with the same printed name
        return type(other) is Symbol and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self):
        return f"Symbol({self.id!r})"

    def __str__(self):
        return self.id


class GenSym(Symbol):
    """A symbol produced by `gensym`: equal only to itself.

    The printed name carries a counter suffix for readability, but identity is
    what makes two generated symbols distinct, so a caller's symbol that happens
    to print the same can never be captured by a macro temporary.
    """

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return object.__hash__(self)

    def __repr__(self):
        return f"GenSym({self.id!r})"


class Keyword:
    """Self-evaluating `:name` atom."""

    __slots__ = ("name",)

    def __init__(self, name: str):
        self.name = sys.intern(name)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Keyword) and self.name == other.name

    def __hash__(self) -> int:
        return hash((Keyword, self.name))

    def __repr__(self):
        return f":{self.name}"

    __str__ = __repr__


_gensym_counter = count(1)
_gensym_lock = threading.Lock()


def gensym(prefix: str = "G__") -> GenSym:
    """Return a fresh symbol, distinct from every other symbol for the process lifetime."""
    with _gensym_lock:
        n = next(_gensym_counter)
    sym = GenSym(f"{prefix}{n}")
    logger.debug("gensym minted %s", sym)
    return sym


AMPERSAND = Symbol("&")
