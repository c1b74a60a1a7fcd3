"""
Estimation des événements du calendrier lunaire.

Les dates sont obtenues par conversion arithmétique de positions fixes (jour, mois) de l'année
hégirienne; elles peuvent différer d'un jour des dates annoncées par observation locale.
La confiance réutilise les seuils de `salat.domain.horizon`.
"""

from __future__ import annotations

from datetime import date, timedelta

import structlog

from salat.domain import horizon
from salat.domain.entities import (
    RAMADAN_MONTH,
    ConfidenceBand,
    DateInterval,
    EventEstimate,
    EventKind,
    HijriDate,
)
from salat.domain.ports import LunarCalendarConverter

RAMADAN_SPAN_DAYS = 29
SHAWWAL_MONTH = 10
DHU_AL_HIJJAH_MONTH = 12
EID_AL_ADHA_DAY = 10

# Autres événements à position fixe: nom → (mois, jour)
NAMED_EVENTS: dict[str, tuple[int, int]] = {
    "Islamic New Year": (1, 1),
    "Ashura": (1, 10),
    "Laylat al-Qadr": (RAMADAN_MONTH, 27),
    "Day of Arafah": (DHU_AL_HIJJAH_MONTH, 9),
}

log = structlog.get_logger(__name__)


class EventEstimator:
    """Estime début/fin du mois de jeûne, les deux fêtes et quelques dates notables."""

    def __init__(self, calendar: LunarCalendarConverter):
        self.calendar = calendar

    def _gregorian(self, year: int, month: int, day: int) -> tuple[date, HijriDate]:
        hijri = HijriDate(year=year, month=month, day=day)
        return self.calendar.to_gregorian(hijri), hijri

    def estimate_ramadan(self, year: int) -> DateInterval:
        """Intervalle du mois de jeûne: 1er Ramadan + 29 jours (±1 jour selon l'observation)."""
        start, _ = self._gregorian(year, RAMADAN_MONTH, 1)
        return DateInterval(start=start, end=start + timedelta(days=RAMADAN_SPAN_DAYS))

    def estimate_ramadan_start(self, year: int) -> date:
        return self.estimate_ramadan(year).start

    def estimate_ramadan_end(self, year: int) -> date:
        return self.estimate_ramadan(year).end

    def estimate_eid_al_fitr(self, year: int) -> date:
        return self._gregorian(year, SHAWWAL_MONTH, 1)[0]

    def estimate_eid_al_adha(self, year: int) -> date:
        return self._gregorian(year, DHU_AL_HIJJAH_MONTH, EID_AL_ADHA_DAY)[0]

    def confidence(self, event_date: date, today: date) -> ConfidenceBand:
        return horizon.confidence(event_date, today)

    def _estimate(
        self, kind: EventKind, name: str, year: int, month: int, day: int, today: date
    ) -> EventEstimate:
        gregorian, hijri = self._gregorian(year, month, day)
        return EventEstimate(
            kind=kind,
            name=name,
            estimated_date=gregorian,
            hijri_date=hijri,
            confidence=self.confidence(gregorian, today),
        )

    def estimate_named_event(self, name: str, year: int, today: date) -> EventEstimate:
        """Estime un événement de `NAMED_EVENTS`; KeyError si le nom est inconnu."""
        month, day = NAMED_EVENTS[name]
        return self._estimate(EventKind.OTHER, name, year, month, day, today)

    def estimate_year(
        self, year: int, today: date, include_named: bool = False
    ) -> list[EventEstimate]:
        """Estimations d'une année lunaire, triées par date grégorienne.

        Args:
            year: année hégirienne.
            today: jour de référence pour la confiance.
            include_named: ajoute les événements de `NAMED_EVENTS`.
        """
        interval = self.estimate_ramadan(year)
        estimates = [
            self._estimate(EventKind.RAMADAN_START, "Ramadan", year, RAMADAN_MONTH, 1, today),
            EventEstimate(
                kind=EventKind.RAMADAN_END,
                name="End of Ramadan",
                estimated_date=interval.end,
                hijri_date=self.calendar.to_hijri(interval.end),
                confidence=self.confidence(interval.end, today),
            ),
            self._estimate(EventKind.EID_AL_FITR, "Eid al-Fitr", year, SHAWWAL_MONTH, 1, today),
            self._estimate(
                EventKind.EID_AL_ADHA,
                "Eid al-Adha",
                year,
                DHU_AL_HIJJAH_MONTH,
                EID_AL_ADHA_DAY,
                today,
            ),
        ]
        if include_named:
            estimates.extend(self.estimate_named_event(name, year, today) for name in NAMED_EVENTS)
        estimates.sort(key=lambda e: e.estimated_date)
        log.debug("events_estimated", hijri_year=year, count=len(estimates))
        return estimates
