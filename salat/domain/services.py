"""
Orchestration du calcul d'horaires à date future.

Pipeline d'un appel `get_schedule`:
classification de l'horizon → résolution de la position → clé de cache → calcul brut par le
moteur astronomique → détection du mois de jeûne → décalage de l'isha → haute latitude →
précision d'affichage → assemblage d'un `ScheduleResult` immuable, mis en cache.

Les erreurs typées (`ScheduleError`) remontent telles quelles; toute autre erreur du moteur est
convertie en `CalculationFailed`.
"""

from __future__ import annotations

import asyncio
import inspect
from datetime import date, datetime

import structlog

from salat.app.metrics import (
    ENGINE_INVOCATIONS,
    SCHEDULE_CACHE_HITS,
    SCHEDULE_CACHE_MISSES,
    SCHEDULE_REQUESTS,
)
from salat.domain import horizon
from salat.domain.config import ScheduleConfig
from salat.domain.entities import (
    CANONICAL_ORDER,
    Coordinate,
    DisclosureTier,
    Location,
    PrayerTimeEntry,
    ScheduleRequest,
    ScheduleResult,
)
from salat.domain.errors import (
    MAX_RANGE_DAYS,
    CalculationFailed,
    DateRangeTooLarge,
    InvalidDate,
    ScheduleError,
)
from salat.domain.policies import apply_ramadan_isha_offset, is_high_latitude
from salat.domain.ports import (
    AstronomicalEngine,
    Clock,
    LocationResolver,
    LunarCalendarConverter,
    ResultCache,
    TimeZoneProvider,
)
from salat.domain.precision import select_precision

DEFAULT_COORDINATE_DECIMALS = 2
DEFAULT_RANGE_CONCURRENCY = 8

log = structlog.get_logger(__name__)


class ScheduleOrchestrator:
    """Service métier exposant le calcul d'une date et d'une plage de dates.

    Responsabilités:
    - Valider l'horizon demandé contre le plafond configuré.
    - Déléguer le calcul brut au moteur et la conversion lunaire au calendrier.
    - Appliquer les règles (isha du mois de jeûne, haute latitude, précision).
    - Servir et alimenter le cache de résultats.
    """

    def __init__(
        self,
        engine: AstronomicalEngine,
        calendar: LunarCalendarConverter,
        location_resolver: LocationResolver,
        timezones: TimeZoneProvider,
        cache: ResultCache,
        clock: Clock,
        config: ScheduleConfig | None = None,
        coordinate_decimals: int = DEFAULT_COORDINATE_DECIMALS,
        range_concurrency: int = DEFAULT_RANGE_CONCURRENCY,
    ):
        """Initialise l'orchestrateur avec ses collaborateurs.

        Paramètres:
        - engine: moteur astronomique (synchrone ou asynchrone).
        - calendar: convertisseur grégorien ↔ hégirien.
        - location_resolver: résolution de la position (async).
        - timezones: fournisseur de fuseaux IANA.
        - cache: stockage des résultats (durée de vie gérée par le cache).
        - clock: source du jour courant.
        - config: configuration par défaut, remplaçable à chaque appel.
        - coordinate_decimals: arrondi des coordonnées dans la clé de cache.
        - range_concurrency: nombre de jours calculés en parallèle pour une plage.
        """
        self.engine = engine
        self.calendar = calendar
        self.locations = location_resolver
        self.timezones = timezones
        self.cache = cache
        self.clock = clock
        self.config = config or ScheduleConfig()
        self.coordinate_decimals = coordinate_decimals
        self.range_concurrency = max(1, range_concurrency)

    def _config(self, override: ScheduleConfig | None) -> ScheduleConfig:
        return override or self.config

    def classify(
        self, day: date | datetime | str, config: ScheduleConfig | None = None
    ) -> DisclosureTier:
        """Niveau de divulgation d'une date, ou `LookaheadExceeded` au-delà du plafond."""
        cfg = self._config(config)
        return horizon.classify(day, self.clock.today(), cfg.lookahead_ceiling_months)

    def is_high_latitude(self, coordinate: Coordinate) -> bool:
        return is_high_latitude(coordinate)

    def cache_key(
        self,
        day: date,
        location: Location,
        tier: DisclosureTier,
        config: ScheduleConfig | None = None,
    ) -> str:
        """Clé couvrant toutes les entrées influant sur le résultat."""
        cfg = self._config(config)
        lat, lon = location.coordinate.rounded(self.coordinate_decimals)
        fmt = f"{{:.{self.coordinate_decimals}f}}"
        return ":".join(
            (
                day.isoformat(),
                fmt.format(lat),
                fmt.format(lon),
                location.timezone,
                cfg.cache_fragment(),
                tier.value,
            )
        )

    def invalidate_cache(self) -> None:
        """Vide le cache (ex: après changement de règles de fuseau)."""
        self.cache.invalidate()
        log.info("schedule_cache_invalidated")

    async def get_schedule(
        self,
        day: date | datetime | str,
        location: Location | Coordinate | None = None,
        config: ScheduleConfig | None = None,
    ) -> ScheduleResult:
        """Calcule (ou relit en cache) les horaires d'une date.

        Raises:
            InvalidDate, LookaheadExceeded, PermissionDenied, LocationUnavailable,
            CalculationFailed.
        """
        cfg = self._config(config)
        target = horizon.as_calendar_date(day)
        today = self.clock.today()
        tier = horizon.classify(target, today, cfg.lookahead_ceiling_months)
        resolved = await self.locations.resolve(location)
        return await self._schedule_for(target, tier, resolved, cfg)

    async def fulfil(
        self, request: ScheduleRequest, config: ScheduleConfig | None = None
    ) -> ScheduleResult:
        """Traite une requête complète; sa méthode et son école priment sur la configuration."""
        cfg = self._config(config).model_copy(
            update={"method": request.method, "madhab": request.madhab}
        )
        return await self.get_schedule(request.date, request.location, cfg)

    async def get_schedule_range(
        self,
        start: date | datetime | str,
        end: date | datetime | str,
        location: Location | Coordinate | None = None,
        config: ScheduleConfig | None = None,
    ) -> list[ScheduleResult]:
        """Un résultat par jour, bornes incluses, dans l'ordre chronologique.

        Raises:
            InvalidDate: `end` antérieur à `start`.
            DateRangeTooLarge: plus de 90 jours entre `start` et `end`.
        """
        cfg = self._config(config)
        first = horizon.as_calendar_date(start)
        last = horizon.as_calendar_date(end)
        span = (last - first).days
        if span < 0:
            raise InvalidDate(f"Invalid date provided: range end {last} precedes start {first}")
        if span > MAX_RANGE_DAYS:
            raise DateRangeTooLarge(span, MAX_RANGE_DAYS)
        today = self.clock.today()
        days = [date.fromordinal(first.toordinal() + offset) for offset in range(span + 1)]
        # Validation complète avant tout calcul: aucun résultat partiel.
        tiers = [horizon.classify(d, today, cfg.lookahead_ceiling_months) for d in days]
        resolved = await self.locations.resolve(location)
        semaphore = asyncio.Semaphore(self.range_concurrency)

        async def _one(d: date, tier: DisclosureTier) -> ScheduleResult:
            async with semaphore:
                return await self._schedule_for(d, tier, resolved, cfg)

        results = await asyncio.gather(*(_one(d, t) for d, t in zip(days, tiers)))
        log.info(
            "schedule_range_computed",
            start=first.isoformat(),
            end=last.isoformat(),
            days=len(results),
        )
        return list(results)

    async def _schedule_for(
        self, day: date, tier: DisclosureTier, location: Location, cfg: ScheduleConfig
    ) -> ScheduleResult:
        SCHEDULE_REQUESTS.labels(tier.value).inc()
        key = self.cache_key(day, location, tier, cfg)
        cached = self.cache.get(key)
        if cached is not None:
            SCHEDULE_CACHE_HITS.inc()
            log.debug("schedule_cache_hit", key=key)
            return cached
        SCHEDULE_CACHE_MISSES.inc()
        result = await self._compute(day, tier, location, cfg)
        self.cache.set(key, result)
        return result

    async def _raw_instants(
        self, day: date, location: Location, cfg: ScheduleConfig
    ) -> list[datetime]:
        try:
            raw = self.engine.compute(location.coordinate, day, cfg.method, cfg.madhab)
            if inspect.isawaitable(raw):
                raw = await raw
        except ScheduleError:
            ENGINE_INVOCATIONS.labels("error").inc()
            raise
        except Exception as err:
            ENGINE_INVOCATIONS.labels("error").inc()
            log.warning("engine_failed", date=day.isoformat(), error=str(err))
            raise CalculationFailed(f"Failed to calculate prayer times: {err}") from err
        ENGINE_INVOCATIONS.labels("ok").inc()
        instants = list(raw)
        if len(instants) != len(CANONICAL_ORDER):
            raise CalculationFailed(f"Engine returned {len(instants)} instants, expected 5")
        if any(instant.tzinfo is None for instant in instants):
            raise CalculationFailed("Engine returned naive instants")
        return instants

    async def _compute(
        self, day: date, tier: DisclosureTier, location: Location, cfg: ScheduleConfig
    ) -> ScheduleResult:
        # Règles de fuseau courantes lues à chaque calcul, jamais un décalage mémorisé.
        tz = self.timezones.get(location.timezone)
        instants = await self._raw_instants(day, location, cfg)
        localized = [instant.astimezone(tz) for instant in instants]
        if any(later <= earlier for earlier, later in zip(localized, localized[1:])):
            raise CalculationFailed("Prayer times are not strictly increasing")

        is_ramadan = self.calendar.is_ramadan(day)
        entries = apply_ramadan_isha_offset(
            [PrayerTimeEntry(prayer=p, time=t) for p, t in zip(CANONICAL_ORDER, localized)],
            is_ramadan=is_ramadan,
            method=cfg.method,
            user_enabled=cfg.ramadan_isha_offset_enabled,
        )
        high_latitude = is_high_latitude(location.coordinate)
        result = ScheduleResult(
            date=day,
            prayer_times=entries,
            hijri_date=self.calendar.to_hijri(day),
            is_ramadan=is_ramadan,
            disclosure_tier=tier,
            timezone=location.timezone,
            is_high_latitude=high_latitude,
            precision=select_precision(tier, cfg.allow_long_range_exact),
        )
        lat, lon = location.coordinate.rounded(self.coordinate_decimals)
        log.info(
            "schedule_computed",
            date=day.isoformat(),
            tier=tier.value,
            lat=lat,
            lon=lon,
            tz=location.timezone,
            high_latitude=high_latitude,
            ramadan=is_ramadan,
        )
        return result
