"""Bounded memoization of resolved values.

Keys are JSON serializations of (namespace, operation name, normalized
input, options).  Values are ``CacheItem`` wrappers so that an explicit
"no value" result (``NullObject``) can be told apart from a missing key.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from cachetools import LRUCache

if TYPE_CHECKING:
    from csscalc.options import CalcOptions

MAX_CACHE = 4096


class CacheItem:
    """A cached value, or the null marker when ``is_null`` is set."""

    __slots__ = ("_item", "_is_null")

    def __init__(self, item: Any, is_null: bool = False) -> None:
        self._item = item
        self._is_null = bool(is_null)

    @property
    def item(self) -> Any:
        return self._item

    @property
    def is_null(self) -> bool:
        return self._is_null

    def __repr__(self) -> str:
        if self._is_null:
            return f"{type(self).__name__}()"
        return f"{type(self).__name__}({self._item!r})"


class NullObject(CacheItem):
    """Explicit "no value" result."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(None, is_null=True)


class CalcCache:
    """Cache service storing ``CacheItem`` values under string keys.

    Storage and least-recently-used eviction are delegated to
    ``cachetools.LRUCache``.
    """

    def __init__(self, max_size: int = MAX_CACHE) -> None:
        if max_size < 1:
            raise ValueError(f"Cache size must be positive, got {max_size}")
        self.lru: LRUCache[str, Any] = LRUCache(maxsize=max_size)

    def __len__(self) -> int:
        return len(self.lru)

    def get(self, key: str) -> CacheItem | None:
        """Return the cached item, or ``None`` when the key is absent."""
        if not key or key not in self.lru:
            return None
        item = self.lru[key]
        if isinstance(item, CacheItem):
            return item
        del self.lru[key]
        return None

    def set(self, key: str, value: Any) -> None:
        """Store ``value``; ``None`` is stored as a ``NullObject``."""
        if not key:
            return
        if value is None:
            self.lru[key] = NullObject()
        elif isinstance(value, CacheItem):
            self.lru[key] = value
        else:
            self.lru[key] = CacheItem(value)

    def clear(self) -> None:
        self.lru.clear()


def create_cache_key(key_data: dict[str, Any], options: CalcOptions | None = None) -> str:
    """Build a deterministic cache key.

    Returns ``""`` (no caching) when ``key_data`` is empty or the options
    carry a callback, since callback results are not determined by the input.
    """
    if not key_data:
        return ""
    opt: dict[str, Any] = {}
    if options is not None:
        if options.has_callbacks:
            return ""
        opt = options.cache_fragment()
    return json.dumps({**key_data, "opt": opt}, separators=(",", ":"))


_DEFAULT_CACHE = CalcCache(MAX_CACHE)


def default_cache() -> CalcCache:
    """Return the process-wide cache used when no cache is passed explicitly."""
    return _DEFAULT_CACHE
