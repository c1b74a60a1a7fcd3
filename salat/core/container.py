"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, moteur astronomique, calendrier, cache, résolveur de
position) et expose un singleton `container` utilisé par le reste de l'application.
"""

from datetime import timedelta

from salat.core.settings import Settings, get_settings
from salat.domain.config import ScheduleConfig
from salat.domain.entities import Coordinate, Location
from salat.domain.events import EventEstimator
from salat.domain.services import ScheduleOrchestrator
from salat.infra.astro.internal_engine import InternalPrayerEngine
from salat.infra.cache import InMemoryResultCache, RedisResultCache
from salat.infra.calendar import TabularHijriCalendar
from salat.infra.clock import SystemClock
from salat.infra.location import StaticLocationResolver
from salat.infra.timezones import ZoneInfoProvider


def _default_location(settings: Settings) -> Location | None:
    if (
        settings.DEFAULT_LATITUDE is None
        or settings.DEFAULT_LONGITUDE is None
        or not settings.DEFAULT_TIMEZONE
    ):
        return None
    return Location(
        coordinate=Coordinate(
            latitude=settings.DEFAULT_LATITUDE, longitude=settings.DEFAULT_LONGITUDE
        ),
        timezone=settings.DEFAULT_TIMEZONE,
    )


class Container:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        ttl = timedelta(days=self.settings.CACHE_TTL_DAYS)
        if self.settings.REDIS_URL:
            try:
                self.cache = RedisResultCache(self.settings.REDIS_URL, ttl=ttl)
                self.storage_backend = "redis"
            except Exception as err:
                if self.settings.REQUIRE_REDIS:
                    raise RuntimeError("Redis required but unavailable") from err
                self.cache = InMemoryResultCache(ttl=ttl)
                self.storage_backend = "memory-fallback"
        else:
            if self.settings.REQUIRE_REDIS:
                raise RuntimeError("Redis required but REDIS_URL not set")
            self.cache = InMemoryResultCache(ttl=ttl)
            self.storage_backend = "memory"

        self.config = ScheduleConfig.from_settings(self.settings)
        self.engine = InternalPrayerEngine()
        self.calendar = TabularHijriCalendar()
        self.timezones = ZoneInfoProvider()
        self.clock = SystemClock()
        self.locations = StaticLocationResolver(
            default=_default_location(self.settings),
            default_timezone=self.settings.DEFAULT_TIMEZONE,
        )
        self.events = EventEstimator(self.calendar)
        self.orchestrator = ScheduleOrchestrator(
            engine=self.engine,
            calendar=self.calendar,
            location_resolver=self.locations,
            timezones=self.timezones,
            cache=self.cache,
            clock=self.clock,
            config=self.config,
            coordinate_decimals=self.settings.CACHE_COORDINATE_DECIMALS,
            range_concurrency=self.settings.RANGE_CONCURRENCY,
        )


container = Container()
