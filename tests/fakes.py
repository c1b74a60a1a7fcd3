"""
Données et collaborateurs factices partagés par les tests.

Ce module fournit le jour de référence, des positions connues et un moteur asynchrone factice.
"""

from __future__ import annotations

from datetime import date, datetime

from salat.domain.entities import CalculationMethod, Coordinate, Location, Madhab
from salat.infra.astro.fake_deterministic import FakeDeterministicEngine

TODAY = date(2025, 1, 15)
NEW_YORK = Location(
    coordinate=Coordinate(latitude=40.7128, longitude=-74.0060), timezone="America/New_York"
)
OSLO = Location(coordinate=Coordinate(latitude=59.9139, longitude=10.7522), timezone="Europe/Oslo")


class AsyncFakeEngine(FakeDeterministicEngine):
    """Variante asynchrone du moteur factice (collaborateur pouvant suspendre)."""

    async def compute(  # type: ignore[override]
        self,
        coordinate: Coordinate,
        day: date,
        method: CalculationMethod,
        madhab: Madhab,
    ) -> list[datetime]:
        return super().compute(coordinate, day, method, madhab)
