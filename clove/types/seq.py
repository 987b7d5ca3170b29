"""The sequence protocol every container takes part in.

`seq` is the universal emptiness test: it returns Nil for nil or an empty
container, otherwise a non-empty view (a List or an ArraySeq) that supports
`first`/`rest`. `rest` never returns Nil; an exhausted sequence is the empty
list. `conj` adds in the container's natural position and `into` folds
`conj` over a source's sequence view. Library code iterates through these
functions only and never inspects the concrete container type.
"""

from __future__ import annotations

from typing import Any, Iterator

from clove import LispValue
from clove.types.collections import EMPTY, ArraySeq, List, Map, Vector
from clove.types.errors import CloveTypeError
from clove.types.nil import Nil


def is_seqable(x: Any) -> bool:
    return x is Nil or isinstance(x, (List, ArraySeq, Vector, Map, tuple, list, str))


def seq(x: Any) -> LispValue:
    if x is Nil:
        return Nil
    if isinstance(x, List):
        return x if len(x) else Nil
    if isinstance(x, ArraySeq):
        return x
    if isinstance(x, Map):
        return ArraySeq.create(x.entries())
    if isinstance(x, tuple):
        return ArraySeq.create(x)
    if isinstance(x, (list, str)):
        return ArraySeq.create(tuple(x))
    raise CloveTypeError(f"Don't know how to create a seq from {type(x).__name__}: {x!r}")


def first(x: Any) -> LispValue:
    s = seq(x)
    return Nil if s is Nil else s.first()


def rest(x: Any) -> LispValue:
    s = seq(x)
    return EMPTY if s is Nil else s.rest()


def next_(x: Any) -> LispValue:
    return seq(rest(x))


def iterate(x: Any) -> Iterator[Any]:
    """Walk any seqable value through first/rest."""
    s = seq(x)
    while s is not Nil:
        yield s.first()
        s = seq(s.rest())


def conj(coll: Any, *xs: Any) -> LispValue:
    if coll is Nil:
        coll = EMPTY
    if isinstance(coll, Vector):
        return coll.conj(*xs)
    if isinstance(coll, (List, ArraySeq)):
        out = coll
        for x in xs:
            out = out.cons(x)
        return out
    if isinstance(coll, Map):
        out = coll
        for entry in xs:
            if isinstance(entry, Map):
                for k, v in entry.items():
                    out = out.assoc(k, v)
                continue
            if entry is Nil:
                continue
            if not isinstance(entry, (tuple, list, List, ArraySeq)) or len(entry) != 2:
                raise CloveTypeError(f"Map entry must be a two-element vector, got {entry!r}")
            k, v = tuple(entry)
            out = out.assoc(k, v)
        return out
    raise CloveTypeError(f"Cannot conj onto {type(coll).__name__}: {coll!r}")


def into(dst: Any, src: Any) -> LispValue:
    out = dst
    for x in iterate(src):
        out = conj(out, x)
    return out


def count(x: Any) -> int:
    if x is Nil:
        return 0
    if isinstance(x, (List, ArraySeq, Map, tuple, list, str)):
        return len(x)
    raise CloveTypeError(f"count not supported on {type(x).__name__}")


def to_list(items) -> List:
    return List.from_iterable(items)
