"""
Caches de résultats de calcul à durée de vie bornée.

Ce module fournit deux implémentations interchangeables: en mémoire (dev/tests, mono-processus) et
Redis (partagé entre instances). Une entrée n'est jamais servie au-delà de sa durée de vie.
"""

import logging
import threading
import time
from datetime import timedelta

import redis
from pydantic import ValidationError
from redis.exceptions import ConnectionError, TimeoutError

from salat.app.metrics import SCHEDULE_CACHE_STORE_ERRORS
from salat.domain.entities import ScheduleResult

DEFAULT_TTL = timedelta(days=7)
KEY_PREFIX = "schedule:"

log = logging.getLogger(__name__)


class InMemoryResultCache:
    """
    Cache en mémoire protégé par un verrou.

    L'âge d'une entrée est mesuré sur une horloge monotone; l'expiration est paresseuse (à la
    lecture) et `purge_expired()` permet un nettoyage explicite.
    """

    def __init__(self, ttl: timedelta = DEFAULT_TTL, clock=time.monotonic):
        """Initialise un cache vide.

        Args:
            ttl: durée de vie des entrées.
            clock: source de temps monotone en secondes (injectable pour les tests).
        """
        self.ttl_seconds = ttl.total_seconds()
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[float, ScheduleResult]] = {}

    def _expired(self, inserted_at: float) -> bool:
        return self._clock() - inserted_at > self.ttl_seconds

    def get(self, key: str) -> ScheduleResult | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            inserted_at, result = entry
            if self._expired(inserted_at):
                del self._entries[key]
                return None
            return result

    def set(self, key: str, result: ScheduleResult) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), result)

    def invalidate(self) -> None:
        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        """Supprime les entrées expirées et retourne leur nombre."""
        with self._lock:
            stale = [
                key
                for key, (inserted_at, _) in self._entries.items()
                if self._expired(inserted_at)
            ]
            for key in stale:
                del self._entries[key]
            return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class RedisResultCache:
    """Cache adossé à Redis (clé: `schedule:{clé}`, valeur JSON, expiration via SETEX).

    Une indisponibilité de Redis, ou une entrée illisible, est traitée comme une absence en cache:
    le calcul est refait.
    """

    def __init__(self, url: str, ttl: timedelta = DEFAULT_TTL, client: redis.Redis | None = None):
        """Crée un client Redis à partir de l'URL fournie (ou utilise `client`)."""
        self.client = client or redis.Redis.from_url(url, decode_responses=True)
        self.ttl_seconds = int(ttl.total_seconds())

    def get(self, key: str) -> ScheduleResult | None:
        try:
            raw = self.client.get(f"{KEY_PREFIX}{key}")
        except (ConnectionError, TimeoutError) as e:
            log.warning("Schedule cache unavailable on read", extra={"error": str(e)})
            SCHEDULE_CACHE_STORE_ERRORS.labels(operation="get").inc()
            return None
        if not raw:
            return None
        try:
            return ScheduleResult.model_validate_json(raw)
        except ValidationError as e:
            # Entrée écrite par une version incompatible: recalculée puis réécrite
            log.warning("Schedule cache entry unreadable", extra={"key": key, "error": str(e)})
            SCHEDULE_CACHE_STORE_ERRORS.labels(operation="decode").inc()
            return None

    def set(self, key: str, result: ScheduleResult) -> None:
        try:
            self.client.setex(f"{KEY_PREFIX}{key}", self.ttl_seconds, result.model_dump_json())
        except (ConnectionError, TimeoutError) as e:
            log.warning("Schedule cache unavailable on write", extra={"error": str(e)})
            SCHEDULE_CACHE_STORE_ERRORS.labels(operation="set").inc()

    def _keys(self) -> list[str]:
        return list(self.client.scan_iter(match=f"{KEY_PREFIX}*"))

    def invalidate(self) -> None:
        try:
            keys = self._keys()
            if keys:
                self.client.delete(*keys)
        except (ConnectionError, TimeoutError) as e:
            log.warning("Schedule cache unavailable on invalidate", extra={"error": str(e)})
            SCHEDULE_CACHE_STORE_ERRORS.labels(operation="invalidate").inc()

    def __len__(self) -> int:
        try:
            return len(self._keys())
        except (ConnectionError, TimeoutError) as e:
            log.warning("Schedule cache unavailable on count", extra={"error": str(e)})
            SCHEDULE_CACHE_STORE_ERRORS.labels(operation="count").inc()
            return 0
