"""
Règles de fiabilité appliquées aux horaires bruts.

- Détection des hautes latitudes (méthodes par angle de crépuscule peu fiables)
- Décalage de l'isha pendant le mois de jeûne pour les méthodes à intervalle fixe
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta

from salat.domain.entities import CalculationMethod, Coordinate, Prayer, PrayerTimeEntry

HIGH_LATITUDE_THRESHOLD = 55.0
RAMADAN_ISHA_OFFSET = timedelta(minutes=30)

# Méthodes définissant l'isha comme un intervalle fixe après le maghrib.
FIXED_INTERVAL_METHODS: frozenset[CalculationMethod] = frozenset(
    {CalculationMethod.UMM_AL_QURA, CalculationMethod.QATAR}
)


def is_high_latitude(position: float | Coordinate) -> bool:
    """Vrai si |latitude| > 55°; la borne elle-même n'est pas haute latitude."""
    latitude = position.latitude if isinstance(position, Coordinate) else position
    return abs(latitude) > HIGH_LATITUDE_THRESHOLD


def apply_ramadan_isha_offset(
    entries: Sequence[PrayerTimeEntry],
    is_ramadan: bool,
    method: CalculationMethod,
    user_enabled: bool,
) -> tuple[PrayerTimeEntry, ...]:
    """Ajoute 30 minutes à l'isha si les trois conditions sont réunies.

    Les autres entrées sont retournées inchangées; le temps astronomique n'est pas recalculé.
    """
    if not (is_ramadan and user_enabled and method in FIXED_INTERVAL_METHODS):
        return tuple(entries)
    adjusted = []
    for entry in entries:
        if entry.prayer is Prayer.ISHA:
            entry = PrayerTimeEntry(
                prayer=entry.prayer,
                time=entry.time + RAMADAN_ISHA_OFFSET,
                is_adjusted=True,
            )
        adjusted.append(entry)
    return tuple(adjusted)
