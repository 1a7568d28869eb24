"""Process-wide memo table for expensive lazy lookups (tokenizer encodings).

Entries may legitimately hold ``None`` (e.g. "encoding unavailable offline"),
so presence is tracked separately from the value. Tests reset it per case.
"""
from __future__ import annotations

import threading
from typing import Any, Callable, TypeVar

T = TypeVar("T")

_MEMO: dict[str, Any] = {}
_LOCK = threading.Lock()


def memoized(key: str, loader: Callable[[], T]) -> T:
    """Return the value stored under ``key``, running ``loader`` once on first use."""
    with _LOCK:
        if key in _MEMO:
            return _MEMO[key]
    value = loader()
    with _LOCK:
        return _MEMO.setdefault(key, value)


def clear_all_caches() -> None:
    with _LOCK:
        _MEMO.clear()
