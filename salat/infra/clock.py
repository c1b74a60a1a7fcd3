"""Horloges injectables: système et figée (tests)."""

from datetime import date


class SystemClock:
    """Jour courant de la machine (date locale)."""

    def today(self) -> date:
        return date.today()


class FixedClock:
    """Horloge figée sur un jour donné."""

    def __init__(self, day: date):
        self.day = day

    def today(self) -> date:
        return self.day
