"""Interfaces des collaborateurs externes consommés par l'orchestrateur.

Le calcul astronomique, la conversion de calendrier, la résolution de position, le fuseau
horaire et l'horloge sont injectés; le domaine ne dépend que de ces protocoles.
"""

from __future__ import annotations

from collections.abc import Awaitable
from datetime import date, datetime, tzinfo
from typing import Protocol

from salat.domain.entities import (
    CalculationMethod,
    Coordinate,
    HijriDate,
    Location,
    Madhab,
    ScheduleResult,
)


class LocationResolver(Protocol):
    """Résout la position à utiliser pour un calcul."""

    async def resolve(self, hint: Location | Coordinate | None = None) -> Location:
        """Retourne une position complète.

        Raises:
            PermissionDenied: accès à la position refusé.
            LocationUnavailable: aucune position exploitable.
        """


class AstronomicalEngine(Protocol):
    """Moteur « boîte noire » produisant les cinq instants bruts d'une journée."""

    def compute(
        self,
        coordinate: Coordinate,
        day: date,
        method: CalculationMethod,
        madhab: Madhab,
    ) -> list[datetime] | Awaitable[list[datetime]]:
        """Retourne fajr, dhuhr, asr, maghrib, isha (instants avec fuseau).

        Raises:
            CalculationFailed: calcul impossible pour ces paramètres.
        """


class LunarCalendarConverter(Protocol):
    """Conversion grégorien ↔ hégirien."""

    def to_hijri(self, day: date) -> HijriDate:
        """Date hégirienne correspondant à un jour grégorien."""

    def to_gregorian(self, hijri: HijriDate) -> date:
        """Jour grégorien correspondant à une date hégirienne."""

    def is_ramadan(self, day: date) -> bool:
        """Indique si le jour tombe pendant le mois de jeûne."""


class TimeZoneProvider(Protocol):
    """Fournit les règles de fuseau courantes pour un identifiant IANA."""

    def get(self, name: str) -> tzinfo:
        """Raises LocationUnavailable si le fuseau est inconnu."""


class Clock(Protocol):
    def today(self) -> date:
        """Jour courant servant de référence aux calculs d'horizon."""


class ResultCache(Protocol):
    """Stockage à durée de vie bornée des résultats calculés."""

    def get(self, key: str) -> ScheduleResult | None:
        """Résultat encore valide pour la clé, sinon None."""

    def set(self, key: str, result: ScheduleResult) -> None:
        """Insère ou remplace une entrée avec la durée de vie du cache."""

    def invalidate(self) -> None:
        """Supprime toutes les entrées."""
