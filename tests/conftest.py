"""Configuration de test pour pytest avec gestion des chemins et fabriques partagées.

Ce module ajoute la racine du projet au sys.path et fournit une horloge figée, un moteur factice et
une fabrique d'orchestrateurs pour les tests du domaine et de l'API.
"""

import os
import sys

import pytest

# Ensure project root is on sys.path so that
# imports like `from salat...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from salat.domain.config import ScheduleConfig  # noqa: E402
from salat.domain.services import ScheduleOrchestrator  # noqa: E402
from salat.infra.astro.fake_deterministic import FakeDeterministicEngine  # noqa: E402
from salat.infra.cache import InMemoryResultCache  # noqa: E402
from salat.infra.calendar import TabularHijriCalendar  # noqa: E402
from salat.infra.clock import FixedClock  # noqa: E402
from salat.infra.location import StaticLocationResolver  # noqa: E402
from salat.infra.timezones import ZoneInfoProvider  # noqa: E402
from tests.fakes import NEW_YORK, TODAY  # noqa: E402


@pytest.fixture
def fixed_clock() -> FixedClock:
    """Horloge figée sur le jour de référence des tests."""
    return FixedClock(TODAY)


@pytest.fixture
def fake_engine() -> FakeDeterministicEngine:
    return FakeDeterministicEngine()


@pytest.fixture
def make_orchestrator(fixed_clock, fake_engine):
    """Fabrique d'orchestrateurs; chaque argument remplace le collaborateur par défaut."""

    def _make(**overrides) -> ScheduleOrchestrator:
        params = {
            "engine": fake_engine,
            "calendar": TabularHijriCalendar(),
            "location_resolver": StaticLocationResolver(default=NEW_YORK),
            "timezones": ZoneInfoProvider(),
            "cache": InMemoryResultCache(),
            "clock": fixed_clock,
            "config": ScheduleConfig(),
        }
        params.update(overrides)
        return ScheduleOrchestrator(**params)

    return _make


@pytest.fixture
def orchestrator(make_orchestrator) -> ScheduleOrchestrator:
    return make_orchestrator()
