"""
============================================================================
PING ORCHESTRATOR - KEYED STORE
============================================================================
Generic, thread-safe, in-memory mapping from an identity to the latest
entity saved under it.

Each store is built with a key extractor, a plain function that returns
the identity of an entity. The extractor runs on every save and the save
fails with StoreIdentityError when it raises or returns an empty value.

Locking
-------
Every key owns its own lock, created on first write. Writers on
different keys never contend; a reader of a key waits for a writer of
the same key. The lock map itself is guarded by a separate lock held
only long enough to look up or create an entry.
============================================================================
"""

import threading
from typing import Callable, Dict, Generic, List, Optional, TypeVar

from exceptions.storage import StoreIdentityError
from utils.logger import get_logger


logger = get_logger("KeyedStore")

K = TypeVar("K")
E = TypeVar("E")


class KeyedStore(Generic[K, E]):
    """
    In-memory store holding one entity per key.

    Usage
    -----
        store = KeyedStore(lambda result: result.host, entity_name="IcmpProbeResult")
        store.put(result)
        store.get("10.0.0.1")
    """

    def __init__(self, key_of: Callable[[E], K], entity_name: str = "entity"):
        self._key_of = key_of
        self.entity_name = entity_name

        self._entries: Dict[K, E] = {}
        self._locks: Dict[K, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # ------------------------------------------------------------------
    # IDENTITY
    # ------------------------------------------------------------------

    def identity_of(self, entity: E) -> K:
        """
        Resolve the identity of *entity*.

        Raises
        ------
        StoreIdentityError
            If the extractor fails or yields None or an empty string.
        """
        try:
            key = self._key_of(entity)
        except Exception as e:
            raise StoreIdentityError(
                f"Can't resolve the identity of {self.entity_name}: {e}",
                entity_name=self.entity_name,
                cause=e
            ) from e

        if key is None or (isinstance(key, str) and not key.strip()):
            raise StoreIdentityError(
                f"Identity of {self.entity_name} is empty",
                entity_name=self.entity_name
            )

        return key

    def _lock_for(self, key: K) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    # ------------------------------------------------------------------
    # OPERATIONS
    # ------------------------------------------------------------------

    def put(self, entity: E) -> E:
        """
        Insert or replace the entry for the entity's identity.

        Returns the stored entity.
        """
        key = self.identity_of(entity)
        with self._lock_for(key):
            self._entries[key] = entity
        logger.debug(f"Saved {self.entity_name} under {key!r}")
        return entity

    def get(self, key: K) -> Optional[E]:
        """Return the entity stored under *key*, or None."""
        with self._locks_guard:
            lock = self._locks.get(key)
        if lock is None:
            return None
        with lock:
            return self._entries.get(key)

    def keys(self) -> List[K]:
        with self._locks_guard:
            return list(self._locks)

    def __contains__(self, key: object) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self.keys())
