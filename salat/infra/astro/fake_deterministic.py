"""Moteur astronomique déterministe pour les tests et le développement.

Ce module implémente un moteur factice produisant des horaires fixes (en heure UTC du jour demandé)
et comptant ses invocations, sans aucun calcul astronomique.
"""

from datetime import date, datetime, time, timedelta, timezone

from salat.domain.entities import CalculationMethod, Coordinate, Madhab

# Heures UTC fixes: fajr, dhuhr, asr, maghrib, isha
DEFAULT_HOURS: tuple[float, ...] = (5.0, 12.5, 16.0, 19.25, 20.75)


class FakeDeterministicEngine:
    """Moteur factice déterministe.

    Produit des instants prévisibles et enregistre chaque appel (`calls`) pour vérifier
    l'utilisation du cache.
    """

    def __init__(self, hours: tuple[float, ...] = DEFAULT_HOURS):
        self.hours = hours
        self.calls: list[tuple[Coordinate, date, CalculationMethod, Madhab]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def compute(
        self,
        coordinate: Coordinate,
        day: date,
        method: CalculationMethod,
        madhab: Madhab,
    ) -> list[datetime]:
        """Retourne les heures fixes du jour `day`, en UTC."""
        self.calls.append((coordinate, day, method, madhab))
        midnight = datetime.combine(day, time(0), tzinfo=timezone.utc)
        return [midnight + timedelta(hours=h) for h in self.hours]
