"""
Calendrier hégirien arithmétique (calendrier civil tabulaire).

Conversion par jour julien: années de 354 ou 355 jours selon un cycle de 30 ans, mois alternés de
30 et 29 jours, époque le vendredi 16 juillet 622. Les dates obtenues peuvent différer d'un jour de
celles fixées par observation du croissant.
"""

import math
from datetime import date

from salat.domain.entities import RAMADAN_MONTH, HijriDate

ISLAMIC_EPOCH = 1948439.5
GREGORIAN_ORDINAL_OFFSET = 1721424.5


def _islamic_to_jd(year: int, month: int, day: int) -> float:
    return (
        day
        + math.ceil(29.5 * (month - 1))
        + (year - 1) * 354
        + math.floor((3 + 11 * year) / 30)
        + ISLAMIC_EPOCH
        - 1
    )


class TabularHijriCalendar:
    """Convertisseur grégorien ↔ hégirien purement arithmétique."""

    def to_hijri(self, day: date) -> HijriDate:
        jd = math.floor(day.toordinal() + GREGORIAN_ORDINAL_OFFSET) + 0.5
        year = math.floor((30 * (jd - ISLAMIC_EPOCH) + 10646) / 10631)
        month = min(12, math.ceil((jd - (29 + _islamic_to_jd(year, 1, 1))) / 29.5) + 1)
        month = max(1, month)
        day_of_month = int(jd - _islamic_to_jd(year, month, 1)) + 1
        return HijriDate(year=year, month=month, day=day_of_month)

    def to_gregorian(self, hijri: HijriDate) -> date:
        jd = _islamic_to_jd(hijri.year, hijri.month, hijri.day)
        return date.fromordinal(int(jd - GREGORIAN_ORDINAL_OFFSET))

    def is_ramadan(self, day: date) -> bool:
        return self.to_hijri(day).month == RAMADAN_MONTH
