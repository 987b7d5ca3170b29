"""Persistent collection types shared by code and data.

- List:     immutable singly-linked list; O(1) first/rest/count, head-prepend conj.
- Vector:   immutable indexed sequence (a tuple subclass); tail-append conj.
- Map:      associative mapping with unique keys; every update returns a new Map.
            true and false are never the same key as 1 and 0.
- ArraySeq: a sequence view over an indexed container with O(1) rest. It is how
            vectors and maps take part in first/rest traversal without copying.

Sequential values (List, Vector, ArraySeq) compare equal element-wise to each
other and to plain Python lists and tuples.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, Iterator

from clove.types.nil import Nil, NilType
from clove.types.symbol import Symbol, Keyword


def values_equal(a: Any, b: Any) -> bool:
    """Structural equality that keeps booleans apart from the integers 0 and 1."""
    if a is b:
        return True
    if isinstance(a, bool) or isinstance(b, bool):
        return False
    if is_sequential(a) and is_sequential(b):
        return sequential_equal(a, b)
    if isinstance(a, Map) and isinstance(b, Map):
        return a.same_entries(b)
    return a == b


def is_sequential(x: Any) -> bool:
    return isinstance(x, (List, ArraySeq, tuple, list))


def sequential_equal(a: Iterable, b: Any) -> bool:
    if a is b:
        return True
    if not is_sequential(b):
        return False
    if len(a) != len(b):
        return False
    return all(values_equal(x, y) for x, y in zip(a, b))


def _sequential_hash(xs: Iterable) -> int:
    return hash(tuple(xs))


class List:
    """Immutable cons list. `EMPTY` is the shared empty list."""

    __slots__ = ("_first", "_rest", "_count")

    def __init__(self, first: Any = Nil, rest: Any = None, count: int | None = None):
        self._first = first
        self._rest = rest
        if count is None:
            count = 0 if rest is None else 1 + len(rest)
        self._count = count

    @staticmethod
    def from_iterable(items: Iterable) -> List:
        out = EMPTY
        for x in reversed(list(items)):
            out = out.cons(x)
        return out

    def cons(self, x: Any) -> List:
        return List(x, self, self._count + 1)

    def first(self) -> Any:
        return self._first if self._count else Nil

    def rest(self) -> Any:
        if self._count <= 1:
            return EMPTY
        return self._rest

    def __len__(self) -> int:
        return self._count

    def __bool__(self) -> bool:
        # A list is a value; emptiness is tested with seq/empty?
        return True

    def __iter__(self) -> Iterator[Any]:
        node = self
        while isinstance(node, List):
            if node._count == 0:
                return
            yield node._first
            node = node._rest
        # tail built by consing onto another kind of seq
        yield from node

    def __getitem__(self, index):
        if isinstance(index, slice):
            return List.from_iterable(list(self)[index])
        if index < 0:
            index += self._count
        if not 0 <= index < self._count:
            raise IndexError("List index out of range")
        for i, x in enumerate(self):
            if i == index:
                return x

    def __eq__(self, other: object) -> bool:
        return sequential_equal(self, other)

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return _sequential_hash(self)

    def __repr__(self) -> str:
        return "(" + " ".join(pr_str(x) for x in self) + ")"


EMPTY = List()


class ArraySeq:
    """Non-empty sequence view over a tuple, starting at index `i`."""

    __slots__ = ("_items", "_i")

    def __init__(self, items: tuple, i: int = 0):
        self._items = items
        self._i = i

    @staticmethod
    def create(items: tuple, i: int = 0):
        """Return a view, or Nil when there is nothing left to view."""
        if i >= len(items):
            return Nil
        return ArraySeq(items, i)

    def first(self) -> Any:
        return self._items[self._i]

    def rest(self) -> Any:
        if self._i + 1 >= len(self._items):
            return EMPTY
        return ArraySeq(self._items, self._i + 1)

    def cons(self, x: Any) -> List:
        return List(x, self, len(self) + 1)

    def __len__(self) -> int:
        return len(self._items) - self._i

    def __bool__(self) -> bool:
        return True

    def __iter__(self) -> Iterator[Any]:
        items = self._items
        for j in range(self._i, len(items)):
            yield items[j]

    def __getitem__(self, index):
        if isinstance(index, slice):
            return List.from_iterable(list(self)[index])
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError("ArraySeq index out of range")
        return self._items[self._i + index]

    def __eq__(self, other: object) -> bool:
        return sequential_equal(self, other)

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return _sequential_hash(self)

    def __repr__(self) -> str:
        return "(" + " ".join(pr_str(x) for x in self) + ")"


class Vector(tuple):
    """Immutable vector; `conj` appends at the tail."""

    __slots__ = ()

    def conj(self, *xs: Any) -> Vector:
        return Vector(tuple.__add__(self, xs))

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Vector(tuple.__getitem__(self, index))
        return tuple.__getitem__(self, index)

    def __eq__(self, other: object) -> bool:
        return sequential_equal(self, other)

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return tuple.__hash__(self)

    def __repr__(self) -> str:
        return "[" + " ".join(pr_str(x) for x in self) + "]"


class _BoolKey:
    """Slot key for true/false, which Python would otherwise file under 1/0."""

    __slots__ = ("value",)

    def __init__(self, value: bool):
        self.value = value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _BoolKey) and other.value is self.value

    def __hash__(self) -> int:
        return hash((_BoolKey, self.value))


def _slot(key: Any) -> Any:
    return _BoolKey(key) if isinstance(key, bool) else key


class Map(Mapping):
    """Associative mapping; never mutated in place once built.

    Entries are kept as (key, value) pairs in a dict indexed by `_slot(key)`.
    Built from another mapping or from an iterable of pairs; later pairs win.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Any = ()):
        self._entries: dict[Any, tuple] = {}
        pairs = entries.items() if isinstance(entries, Mapping) else entries
        for k, v in pairs:
            self._entries[_slot(k)] = (k, v)

    def _copy(self) -> Map:
        out = Map()
        out._entries = dict(self._entries)
        return out

    def assoc(self, key: Any, value: Any) -> Map:
        out = self._copy()
        out._entries[_slot(key)] = (key, value)
        return out

    def without(self, *keys: Any) -> Map:
        out = self._copy()
        for k in keys:
            out._entries.pop(_slot(k), None)
        return out

    def entries(self) -> tuple:
        return tuple(Vector(entry) for entry in self._entries.values())

    def items(self) -> tuple:
        return tuple(self._entries.values())

    def get(self, key: Any, default: Any = None) -> Any:
        entry = self._entries.get(_slot(key))
        return default if entry is None else entry[1]

    def __getitem__(self, key: Any) -> Any:
        return self._entries[_slot(key)][1]

    def __contains__(self, key: object) -> bool:
        return _slot(key) in self._entries

    def __iter__(self) -> Iterator[Any]:
        return (k for k, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def same_entries(self, other: Map) -> bool:
        if len(self) != len(other):
            return False
        for slot, (_, v) in self._entries.items():
            theirs = other._entries.get(slot)
            if theirs is None or not values_equal(v, theirs[1]):
                return False
        return True

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Mapping):
            return False
        return self.same_entries(other if isinstance(other, Map) else Map(other))

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return hash(frozenset((slot, v) for slot, (_, v) in self._entries.items()))

    def __repr__(self) -> str:
        return "{" + ", ".join(f"{pr_str(k)} {pr_str(v)}" for k, v in self.items()) + "}"


def pr_str(x: Any) -> str:
    """Readable representation used by the collection reprs."""
    if x is True:
        return "true"
    if x is False:
        return "false"
    if isinstance(x, NilType):
        return "nil"
    if isinstance(x, str):
        return '"' + x.replace("\\", "\\\\").replace('"', '\\"') + '"'
    if isinstance(x, (Symbol, Keyword)):
        return str(x)
    return repr(x)
