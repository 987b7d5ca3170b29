from __future__ import annotations


class NilType:
    def __repr__(self): return "nil"
    def __bool__(self): return False
    def __len__(self): return 0
    def __iter__(self): return iter(())

    def __eq__(self, other):
        return isinstance(other, NilType)

    def __hash__(self):
        return hash(NilType)


Nil = NilType()


def is_truthy(value) -> bool:
    """Only nil and false are falsey; 0, "" and empty collections are truthy."""
    return value is not Nil and value is not False
