"""Runtime settings read from the process environment.

CLOVE_PRELUDE_PATH     directory holding core.clj, or the path of core.clj itself
CLOVE_RECURSION_LIMIT  floor applied to sys.setrecursionlimit (default 10000)
"""
from __future__ import annotations

import os
from pathlib import Path

PRELUDE_FILE = 'core.clj'

_BUNDLED_PRELUDE = Path(__file__).resolve().parent / 'prelude'
_DEFAULT_RECURSION_LIMIT = 10000
_MIN_RECURSION_LIMIT = 1000


def _setting(var: str) -> str | None:
    raw = os.environ.get(var, '').strip()
    return raw or None


def get_prelude_root() -> Path:
    """Directory the core library is read from; the bundled one unless overridden."""
    raw = _setting('CLOVE_PRELUDE_PATH')
    if raw is None:
        return _BUNDLED_PRELUDE
    where = Path(raw)
    return where.parent if where.is_file() or where.name == PRELUDE_FILE else where


def get_recursion_limit() -> int:
    """Minimum Python recursion limit for deep non-tail Lisp recursion."""
    raw = _setting('CLOVE_RECURSION_LIMIT')
    if raw is None:
        return _DEFAULT_RECURSION_LIMIT
    try:
        limit = int(raw)
    except ValueError:
        raise ValueError(f"CLOVE_RECURSION_LIMIT must be an integer, got {raw!r}") from None
    return max(limit, _MIN_RECURSION_LIMIT)
