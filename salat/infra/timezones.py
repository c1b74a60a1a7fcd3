"""Fournisseurs de fuseaux horaires IANA (règles courantes de la base tzdata).

- `ZoneInfoProvider`: identifiant IANA → règles de fuseau, résolues à chaque appel.
- `CoordinateTimeZoneLookup`: coordonnée → identifiant IANA, via les polygones de timezonefinder.
"""

from datetime import tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from timezonefinder import TimezoneFinder

from salat.domain.entities import Coordinate
from salat.domain.errors import LocationUnavailable


class ZoneInfoProvider:
    """Résout un identifiant IANA à chaque appel, sans mémoriser de décalage UTC."""

    def get(self, name: str) -> tzinfo:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as err:
            raise LocationUnavailable(f"Unknown time zone: {name!r}") from err


class CoordinateTimeZoneLookup:
    """Détermine le fuseau d'une coordonnée.

    Le `TimezoneFinder` (chargement des polygones) n'est créé qu'au premier appel.
    """

    def __init__(self, finder: TimezoneFinder | None = None):
        self._finder = finder

    @property
    def finder(self) -> TimezoneFinder:
        if self._finder is None:
            self._finder = TimezoneFinder()
        return self._finder

    def timezone_at(self, coordinate: Coordinate) -> str | None:
        """Identifiant IANA du lieu, ou None si aucun polygone ne le couvre."""
        return self.finder.timezone_at(lng=coordinate.longitude, lat=coordinate.latitude)
