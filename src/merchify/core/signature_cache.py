"""Two-tier cache of URL signatures.

Signing a mockup URL costs a round trip to the signer service, and the same
design/product combination is typically requested many times. The
:class:`SignatureCache` maps a canonical, account-qualified URL to the
signature the signer issued for it.

Tiers
-----
1. **Memory** — a dictionary bounded at ``memory_capacity`` entries.
   Inserting past capacity evicts the least recently touched entry.
2. **Durable store** — an optional :class:`~merchify.core.storage.KeyValueStore`
   slot holding the ``storage_capacity`` most recently touched entries as a
   JSON list. It seeds the memory tier on construction so signatures survive
   across sessions.

The durable tier is strictly best-effort:

- availability is probed once at construction with a write and a delete
- any failure (probe, load, or write-through) disables it for the lifetime
  of the instance, after a warning is logged
- it is never re-probed

Persisted format::

    [{"url": "/mockup?...&accountId=acct", "signature": "abc", "timestamp": 1700000000000}, ...]
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from merchify.core.config import CACHE_CONFIG
from merchify.core.storage import KeyValueStore

logger = logging.getLogger(__name__)

PROBE_KEY = "__merchify_storage_test__"


class CachedSignature(BaseModel):
    """One cache entry. ``timestamp`` is the last access in epoch milliseconds."""

    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(..., alias="url")
    signature: str
    timestamp: int


class CacheStats(BaseModel):
    """Read-only view of a cache's size and age range."""

    size: int
    memory_capacity: int
    durable_enabled: bool
    storage_capacity: int
    oldest_timestamp: int | None = None
    newest_timestamp: int | None = None


_entries_adapter = TypeAdapter(list[CachedSignature])


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class SignatureCache:
    """Bounded signature cache with an optional durable mirror.

    Args:
        memory_capacity: Maximum number of entries held in memory.
        storage_capacity: Maximum number of entries mirrored to ``store``.
            Clamped to ``memory_capacity``.
        store: Durable key-value slot, or ``None`` for memory-only.
        cache_name: Slot name used in ``store``.
        clock: Millisecond clock, injectable for tests.
    """

    def __init__(
        self,
        memory_capacity: int = CACHE_CONFIG["memory_cache_size"],
        storage_capacity: int = CACHE_CONFIG["storage_cache_size"],
        store: KeyValueStore | None = None,
        cache_name: str = CACHE_CONFIG["signature_cache_key"],
        clock: Callable[[], int] = _wall_clock_ms,
    ):
        if memory_capacity < 1:
            raise ValueError(f"memory_capacity must be at least 1, got {memory_capacity}")

        self.memory_capacity = memory_capacity
        self.storage_capacity = max(0, min(storage_capacity, memory_capacity))
        self.cache_name = cache_name
        self._store = store
        self._clock = clock
        self._last_timestamp = 0
        self._entries: dict[str, CachedSignature] = {}

        self._durable_enabled = self._probe_store()
        self._load_from_store()

    @property
    def durable_enabled(self) -> bool:
        return self._durable_enabled

    def _now(self) -> int:
        # Strictly increasing so that recency ordering never ties
        now = max(self._clock(), self._last_timestamp + 1)
        self._last_timestamp = now
        return now

    def _probe_store(self) -> bool:
        """Check once whether the durable store accepts writes."""
        if self._store is None:
            return False

        try:
            self._store.set_item(PROBE_KEY, PROBE_KEY)
            self._store.remove_item(PROBE_KEY)
        except Exception as e:
            logger.warning(f"Durable store unavailable, using in-memory signature cache: {e}")
            return False
        return True

    def _load_from_store(self) -> None:
        """Seed memory with the most recent persisted entries."""
        if not self._durable_enabled:
            return

        try:
            raw = self._store.get_item(self.cache_name)
            if not raw:
                return
            entries = _entries_adapter.validate_json(raw)
        except Exception as e:
            logger.warning(f"Failed to load signature cache from durable store: {e}")
            self._durable_enabled = False
            return

        entries.sort(key=lambda entry: entry.timestamp, reverse=True)
        for entry in entries[: self.storage_capacity]:
            self._entries[entry.key] = entry
            self._last_timestamp = max(self._last_timestamp, entry.timestamp)

        logger.debug(f"Loaded {len(self._entries)} signatures from durable store")

    def _save_to_store(self) -> None:
        """Write the most recent entries through to the durable store."""
        if not self._durable_enabled:
            return

        recent = sorted(self._entries.values(), key=lambda entry: entry.timestamp, reverse=True)
        try:
            payload = _entries_adapter.dump_json(
                recent[: self.storage_capacity], by_alias=True
            ).decode("utf-8")
            self._store.set_item(self.cache_name, payload)
        except Exception as e:
            logger.warning(f"Failed to save signature cache to durable store: {e}")
            self._durable_enabled = False

    def get(self, key: str) -> str | None:
        """Return the cached signature for ``key`` and mark it as recently used.

        Args:
            key: Canonical account-qualified URL.

        Returns:
            The signature, or ``None`` on a miss.
        """
        entry = self._entries.get(key)
        if entry is None:
            return None

        entry.timestamp = self._now()
        self._save_to_store()
        return entry.signature

    def set(self, key: str, signature: str) -> None:
        """Store a signature, evicting the least recently used entry if full.

        Args:
            key: Canonical account-qualified URL.
            signature: Signature issued by the signer for ``key``.
        """
        if key not in self._entries and len(self._entries) >= self.memory_capacity:
            # min() keeps the first of equal timestamps, i.e. insertion order
            oldest = min(self._entries.values(), key=lambda entry: entry.timestamp)
            del self._entries[oldest.key]
            logger.debug(f"Evicted signature for {oldest.key}")

        self._entries[key] = CachedSignature(key=key, signature=signature, timestamp=self._now())
        self._save_to_store()

    def stats(self) -> CacheStats:
        """Return current size, capacities and timestamp range."""
        timestamps = [entry.timestamp for entry in self._entries.values()]
        return CacheStats(
            size=len(self._entries),
            memory_capacity=self.memory_capacity,
            durable_enabled=self._durable_enabled,
            storage_capacity=self.storage_capacity,
            oldest_timestamp=min(timestamps) if timestamps else None,
            newest_timestamp=max(timestamps) if timestamps else None,
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries
