from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Dict, List

from .store import KeyValueStore, QuotaExceededError, cache_key

DEFAULT_NAMESPACE = "timetableCache"
DEFAULT_TTL_SECONDS = 30 * 60


class CacheManager:
    """TTL-scoped cache of scheduler results, one entry per timetable.

    Entries are JSON ``{"storedAt": <epoch seconds>, "payload": [...]}`` where
    the payload is the section list exactly as the scheduler returned it.
    Caching is best effort: a full or unwritable store never turns into an error.
    """

    def __init__(
        self,
        backend: KeyValueStore,
        *,
        namespace: str = DEFAULT_NAMESPACE,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.backend = backend
        self.namespace = namespace
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.logger = logging.getLogger(__name__)

    def key_for(self, timetable_id: str) -> str:
        return cache_key(self.namespace, timetable_id)

    def load(self, timetable_id: str) -> List[Dict[str, Any]] | None:
        key = self.key_for(timetable_id)
        raw = self.backend.get(key)
        if raw is None:
            self.logger.info(f"Cache miss for {key}")
            return None
        try:
            entry = json.loads(raw)
            stored_at = float(entry["storedAt"])
            payload = entry["payload"]
        except (ValueError, KeyError, TypeError):
            payload = None
        if not isinstance(payload, list) or not all(isinstance(p, dict) for p in payload):
            self.logger.warning(f"Discarding unreadable cache entry {key}")
            self._discard(key)
            return None
        age = self.clock() - stored_at
        if age >= self.ttl_seconds:
            self.logger.info(f"Cache entry {key} expired ({age:.0f}s old)")
            self._discard(key)
            return None
        self.logger.info(f"Cache hit for {key} ({age:.0f}s old)")
        return payload

    def store(self, timetable_id: str, payload: List[Dict[str, Any]]) -> bool:
        key = self.key_for(timetable_id)
        value = json.dumps({"storedAt": self.clock(), "payload": payload})
        try:
            try:
                self.backend.set(key, value)
                return True
            except QuotaExceededError as e:
                self.logger.warning(f"Cache write for {key} over quota ({e}); evicting and retrying")
            self.backend.remove(key)
            self.backend.set(key, value)
            return True
        except QuotaExceededError:
            self.logger.warning(f"Cache write for {key} failed again; caching disabled for it")
        except OSError as e:
            self.logger.warning(f"Cache write for {key} failed: {e}")
        return False

    def _discard(self, key: str) -> None:
        try:
            self.backend.remove(key)
        except OSError as e:
            self.logger.warning(f"Could not remove cache entry {key}: {e}")

    def invalidate(self, timetable_id: str) -> None:
        self._discard(self.key_for(timetable_id))
