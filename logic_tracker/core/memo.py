from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Hashable, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_MISSING = object()


class MemoCache:
    """Per-snapshot result cache.

    The cache starts unsealed: lookups always miss and nothing is stored, so
    results computed while the engine is still deriving its guaranteed keys are
    never reused. ``seal`` is called once when that derivation is finished and
    makes the cache eligible for the rest of the instance's life.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[Hashable, ...], Any] = {}
        self.sealed = False
        self.hits = 0
        self.misses = 0

    def seal(self) -> None:
        if self.sealed:
            raise RuntimeError("MemoCache is already sealed.")
        self._entries.clear()
        self.sealed = True
        logger.debug("memo cache sealed")

    def get_or_compute(self, key: tuple[Hashable, ...], compute: Callable[[], Any]) -> Any:
        if not self.sealed:
            return compute()
        cached = self._entries.get(key, _MISSING)
        if cached is not _MISSING:
            self.hits += 1
            return cached
        self.misses += 1
        value = compute()
        self._entries[key] = value
        return value

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: tuple[Hashable, ...]) -> bool:
        return key in self._entries


def memoized(method: F) -> F:
    """Cache a method's result in ``self._memo`` keyed by name and arguments."""

    name = method.__name__

    @wraps(method)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
        key = (name, *args, *sorted(kwargs.items()))
        return self._memo.get_or_compute(key, lambda: method(self, *args, **kwargs))

    return wrapper  # type: ignore[return-value]
