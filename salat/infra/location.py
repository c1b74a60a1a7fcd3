"""
Résolveurs de position.

Le serveur ne dispose d'aucune géolocalisation: la position vient de la requête, ou à défaut d'une
position par défaut configurée. Une coordonnée seule reçoit le fuseau du lieu qu'elle désigne; le
fuseau par défaut ne sert que si aucun fuseau n'est trouvé pour ce lieu.
"""

import structlog

from salat.domain.entities import Coordinate, Location
from salat.domain.errors import LocationUnavailable, PermissionDenied
from salat.infra.timezones import CoordinateTimeZoneLookup

log = structlog.get_logger(__name__)


class StaticLocationResolver:
    """Retourne l'indication fournie, sinon la position configurée."""

    def __init__(
        self,
        default: Location | None = None,
        default_timezone: str | None = None,
        lookup: CoordinateTimeZoneLookup | None = None,
    ):
        self.default = default
        self.default_timezone = default_timezone or (default.timezone if default else None)
        self.lookup = lookup or CoordinateTimeZoneLookup()

    async def resolve(self, hint: Location | Coordinate | None = None) -> Location:
        if isinstance(hint, Location):
            return hint
        if isinstance(hint, Coordinate):
            return Location(coordinate=hint, timezone=self._timezone_for(hint))
        if self.default is None:
            log.info("location_unavailable")
            raise LocationUnavailable()
        return self.default

    def _timezone_for(self, coordinate: Coordinate) -> str:
        found = self.lookup.timezone_at(coordinate)
        if found:
            return found
        if not self.default_timezone:
            raise LocationUnavailable("Location is not available: time zone unknown")
        latitude, longitude = coordinate.rounded(2)
        log.info(
            "timezone_lookup_fallback",
            latitude=latitude,
            longitude=longitude,
            timezone=self.default_timezone,
        )
        return self.default_timezone


class DeniedLocationResolver:
    """Résolveur d'un environnement où l'accès à la position est refusé."""

    async def resolve(self, hint: Location | Coordinate | None = None) -> Location:
        raise PermissionDenied()
