"""Tests pour le calendrier hégirien arithmétique."""

from datetime import date

from salat.domain.entities import HijriDate
from salat.infra.calendar import TabularHijriCalendar

RAMADAN_1445_START = date(2024, 3, 11)
SHAWWAL_1445_START = date(2024, 4, 10)


def test_to_hijri_known_dates() -> None:
    """Teste la conversion de dates connues du calendrier 1445."""
    calendar = TabularHijriCalendar()
    assert calendar.to_hijri(RAMADAN_1445_START) == HijriDate(year=1445, month=9, day=1)
    assert calendar.to_hijri(date(2024, 3, 10)) == HijriDate(year=1445, month=8, day=29)
    assert calendar.to_hijri(date(2024, 4, 9)) == HijriDate(year=1445, month=9, day=30)


def test_to_gregorian_known_dates() -> None:
    """Teste la conversion inverse (fêtes de 1445)."""
    calendar = TabularHijriCalendar()
    assert calendar.to_gregorian(HijriDate(year=1445, month=10, day=1)) == SHAWWAL_1445_START
    assert calendar.to_gregorian(HijriDate(year=1445, month=12, day=10)) == date(2024, 6, 17)
    assert calendar.to_gregorian(HijriDate(year=1446, month=9, day=1)) == date(2025, 3, 1)


def test_conversion_is_consistent_across_a_year() -> None:
    """Teste l'aller-retour sur une année entière et la continuité des jours."""
    calendar = TabularHijriCalendar()
    start = date(2024, 1, 1).toordinal()
    previous = None
    for ordinal in range(start, start + 366):
        day = date.fromordinal(ordinal)
        hijri = calendar.to_hijri(day)
        assert calendar.to_gregorian(hijri) == day
        if previous is not None and hijri.day != 1:
            assert hijri.day == previous.day + 1
        previous = hijri


def test_is_ramadan() -> None:
    """Teste la détection du mois de jeûne."""
    calendar = TabularHijriCalendar()
    assert calendar.is_ramadan(RAMADAN_1445_START) is True
    assert calendar.is_ramadan(date(2025, 3, 10)) is True
    assert calendar.is_ramadan(SHAWWAL_1445_START) is False
    assert calendar.is_ramadan(date(2024, 3, 10)) is False


def test_hijri_label() -> None:
    """Teste le libellé lisible d'une date hégirienne."""
    assert str(HijriDate(year=1445, month=9, day=1)) == "1 Ramadan 1445 AH"
