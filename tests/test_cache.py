"""Tests pour les caches de résultats (mémoire et Redis)."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from unittest.mock import Mock

import redis
from prometheus_client import REGISTRY
from redis.exceptions import ConnectionError, TimeoutError

from salat.domain.entities import (
    DisclosureTier,
    HijriDate,
    Prayer,
    PrayerTimeEntry,
    PrecisionMode,
    ScheduleResult,
)
from salat.infra.cache import InMemoryResultCache, RedisResultCache

TTL = timedelta(days=7)
TTL_SECONDS = 604800
KEY = "2025-03-10:40.71:-74.01:America/New_York"


def _result() -> ScheduleResult:
    base = datetime(2025, 3, 10, tzinfo=timezone.utc)
    return ScheduleResult(
        date=date(2025, 3, 10),
        prayer_times=tuple(
            PrayerTimeEntry(prayer=p, time=base + timedelta(hours=h))
            for p, h in zip(Prayer, (5, 12, 16, 19, 20))
        ),
        hijri_date=HijriDate(year=1446, month=9, day=10),
        is_ramadan=True,
        disclosure_tier=DisclosureTier.SHORT_TERM,
        timezone="America/New_York",
        is_high_latitude=False,
        precision=PrecisionMode.exact(),
    )


class TestInMemoryResultCache:
    """Tests pour InMemoryResultCache."""

    def setup_method(self) -> None:
        self.now = 0.0
        self.cache = InMemoryResultCache(ttl=TTL, clock=lambda: self.now)

    def test_get_returns_stored_result(self) -> None:
        """Teste la lecture d'une entrée fraîche."""
        result = _result()
        self.cache.set(KEY, result)
        assert self.cache.get(KEY) is result
        assert self.cache.get("missing") is None

    def test_entry_expires_after_ttl(self) -> None:
        """Teste qu'une entrée n'est jamais servie au-delà de sa durée de vie."""
        self.cache.set(KEY, _result())
        self.now = TTL.total_seconds()
        assert self.cache.get(KEY) is not None
        self.now = TTL.total_seconds() + 1
        assert self.cache.get(KEY) is None
        assert len(self.cache) == 0

    def test_purge_expired(self) -> None:
        """Teste le nettoyage explicite des entrées expirées."""
        self.cache.set("old", _result())
        self.now = TTL.total_seconds() + 1
        self.cache.set("fresh", _result())
        assert self.cache.purge_expired() == 1
        assert len(self.cache) == 1

    def test_invalidate(self) -> None:
        """Teste la suppression de toutes les entrées."""
        self.cache.set(KEY, _result())
        self.cache.invalidate()
        assert self.cache.get(KEY) is None


class TestRedisResultCache:
    """Tests pour RedisResultCache."""

    def setup_method(self) -> None:
        self.client = Mock(spec=redis.Redis)
        self.cache = RedisResultCache("redis://localhost:6379/0", ttl=TTL, client=self.client)

    def test_set_uses_setex_with_prefix(self) -> None:
        """Teste l'écriture JSON avec expiration native."""
        result = _result()
        self.cache.set(KEY, result)
        self.client.setex.assert_called_once_with(
            f"schedule:{KEY}", TTL_SECONDS, result.model_dump_json()
        )

    def test_get_deserializes(self) -> None:
        """Teste la relecture d'un résultat sérialisé."""
        result = _result()
        self.client.get.return_value = result.model_dump_json()
        assert self.cache.get(KEY) == result
        self.client.get.assert_called_once_with(f"schedule:{KEY}")

    def test_get_missing(self) -> None:
        """Teste une clé absente."""
        self.client.get.return_value = None
        assert self.cache.get(KEY) is None

    def test_unavailable_redis_is_a_miss(self) -> None:
        """Teste qu'une panne Redis est traitée comme une absence en cache."""
        self.client.get.side_effect = ConnectionError("down")
        self.client.setex.side_effect = ConnectionError("down")
        assert self.cache.get(KEY) is None
        self.cache.set(KEY, _result())

    def test_invalidate_deletes_prefixed_keys(self) -> None:
        """Teste la suppression des seules clés du cache."""
        self.client.scan_iter.return_value = iter([f"schedule:{KEY}"])
        self.cache.invalidate()
        self.client.scan_iter.assert_called_once_with(match="schedule:*")
        self.client.delete.assert_called_once_with(f"schedule:{KEY}")

    def test_unavailable_redis_on_invalidate_and_count(self) -> None:
        """Teste que l'invalidation et le comptage ne lèvent pas quand Redis est indisponible."""
        self.client.scan_iter.side_effect = TimeoutError("slow")
        before = _store_errors("invalidate")
        self.cache.invalidate()
        assert len(self.cache) == 0
        assert _store_errors("invalidate") == before + 1
        self.client.delete.assert_not_called()

    def test_unreadable_entry_is_a_miss(self) -> None:
        """Teste qu'une entrée incompatible est ignorée et comptée comme erreur de décodage."""
        self.client.get.return_value = '{"date": "2025-03-10", "prayer_times": []}'
        before = _store_errors("decode")
        assert self.cache.get(KEY) is None
        assert _store_errors("decode") == before + 1


def _store_errors(operation: str) -> float:
    return (
        REGISTRY.get_sample_value(
            "schedule_cache_store_errors_total", {"operation": operation}
        )
        or 0.0
    )
