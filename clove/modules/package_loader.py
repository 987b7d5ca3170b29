from __future__ import annotations

import logging
from typing import Protocol

from clove.config import PRELUDE_FILE, get_prelude_root

logger = logging.getLogger(__name__)


class PreludeHost(Protocol):
    def eval_prelude(self, code: str) -> None: ...


def load_prelude(host: PreludeHost) -> None:
    """Read core.clj from the configured prelude root and evaluate it in `host`."""
    source = get_prelude_root() / PRELUDE_FILE
    if not source.is_file():
        raise FileNotFoundError(f"no {PRELUDE_FILE} found at {source}")
    logger.debug("loading prelude from %s", source)
    host.eval_prelude(source.read_text(encoding='utf-8'))
