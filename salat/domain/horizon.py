"""
Classification de l'horizon temporel d'une date demandée.

Objectif: à partir de « aujourd'hui » et de la date cible, calculer un écart en mois calendaires
entiers puis en déduire:
- le niveau de divulgation (`DisclosureTier`) d'une requête d'horaires,
- la bande de confiance (`ConfidenceBand`) d'une estimation d'événement.

Les deux classifications partagent les mêmes seuils (12 et 60 mois).
"""

from __future__ import annotations

from datetime import date, datetime

import structlog

from salat.domain.entities import ConfidenceBand, DisclosureTier
from salat.domain.errors import InvalidDate, LookaheadExceeded

SHORT_TERM_MAX_MONTHS = 12
MEDIUM_TERM_MAX_MONTHS = 60
DEFAULT_CEILING_MONTHS = 60

log = structlog.get_logger(__name__)


def as_calendar_date(value: date | datetime | str) -> date:
    """Ramène une date, un datetime ou une chaîne ISO à un jour calendaire."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as err:
        raise InvalidDate(f"Invalid date provided: {value!r}") from err


def month_delta(today: date, target: date) -> int:
    """Nombre de mois calendaires entiers écoulés de `today` à `target`.

    Un mois n'est compté que si le quantième de `target` atteint celui de `today`: la fin de mois
    n'est jamais arrondie (31 janvier → 28 février = 0).
    """
    months = (target.year - today.year) * 12 + (target.month - today.month)
    if target.day < today.day:
        months -= 1
    return months


def horizon_band(months: int) -> int:
    """Bande commune: 0 (≤12 mois), 1 (13–60 mois), 2 (>60 mois)."""
    if months <= SHORT_TERM_MAX_MONTHS:
        return 0
    if months <= MEDIUM_TERM_MAX_MONTHS:
        return 1
    return 2


_TIER_BY_BAND = (DisclosureTier.SHORT_TERM, DisclosureTier.MEDIUM_TERM, DisclosureTier.LONG_TERM)
_CONFIDENCE_BY_BAND = (ConfidenceBand.HIGH, ConfidenceBand.MEDIUM, ConfidenceBand.LOW)


def classify(
    requested: date | datetime | str,
    today: date | datetime,
    ceiling_months: int = DEFAULT_CEILING_MONTHS,
) -> DisclosureTier:
    """Classe une date demandée en niveau de divulgation.

    Args:
        requested: date cible (l'heure éventuelle est ignorée).
        today: jour de référence.
        ceiling_months: plafond d'anticipation en mois.

    Raises:
        InvalidDate: date illisible ou antérieure à `today`.
        LookaheadExceeded: écart en mois supérieur au plafond.
    """
    target = as_calendar_date(requested)
    reference = as_calendar_date(today)
    if target == reference:
        return DisclosureTier.TODAY
    if target < reference:
        raise InvalidDate(f"Invalid date provided: {target.isoformat()} is in the past")
    months = month_delta(reference, target)
    if months > ceiling_months:
        log.info("lookahead_exceeded", requested_months=months, ceiling_months=ceiling_months)
        raise LookaheadExceeded(months, ceiling_months)
    return _TIER_BY_BAND[horizon_band(months)]


def confidence(event_date: date | datetime, today: date | datetime) -> ConfidenceBand:
    """Bande de confiance d'une estimation selon l'écart en mois (mêmes seuils que `classify`)."""
    months = month_delta(as_calendar_date(today), as_calendar_date(event_date))
    return _CONFIDENCE_BY_BAND[horizon_band(months)]
