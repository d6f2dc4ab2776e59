"""Time-bounded memoisation for identity lookups."""

from __future__ import annotations

import dataclasses
import time
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@dataclasses.dataclass(frozen=True, slots=True)
class _Entry[V]:
    value: V
    expires_at: float


class TTLCache[K, V]:
    """Mapping whose entries expire ``ttl_s`` seconds after being stored.

    Only successful values are ever stored; there is no way to record a miss.
    Expired entries are evicted on access, on every store, and by :meth:`purge`.

    Parameters
    ----------
    ttl_s
        Entry lifetime in seconds. A non-positive TTL disables storage.
    clock
        Monotonic clock returning seconds; injectable for tests.

    """

    def __init__(
        self,
        ttl_s: float,
        *,
        clock: cabc.Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialise an empty cache."""
        self._ttl_s = ttl_s
        self._clock = clock
        self._entries: dict[K, _Entry[V]] = {}

    @property
    def ttl_s(self) -> float:
        """Return the configured entry lifetime."""
        return self._ttl_s

    def __len__(self) -> int:
        """Return the number of stored entries, expired or not."""
        return len(self._entries)

    def get(self, key: K) -> V | None:
        """Return the live value for ``key``, evicting it when expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            del self._entries[key]
            return None
        return entry.value

    def set_if_absent(self, key: K, value: V) -> V:
        """Store ``value`` unless a live entry exists; return the winning value.

        The first writer within the TTL window wins, so concurrent misses for
        the same key converge on one value. Expired entries for other keys are
        purged first, so the cache holds at most one TTL window of lookups.
        """
        self.purge()
        existing = self.get(key)
        if existing is not None:
            return existing
        if self._ttl_s > 0:
            self._entries[key] = _Entry(value, self._clock() + self._ttl_s)
        return value

    def invalidate(self, key: K) -> None:
        """Drop ``key`` if present."""
        self._entries.pop(key, None)

    def purge(self) -> int:
        """Evict every expired entry and return how many were removed."""
        now = self._clock()
        expired = [
            key for key, entry in self._entries.items() if entry.expires_at <= now
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()
