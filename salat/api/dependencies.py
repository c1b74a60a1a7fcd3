"""Dépendances FastAPI vers les composants du conteneur (remplaçables dans les tests)."""

from salat.core.container import container
from salat.domain.events import EventEstimator
from salat.domain.ports import Clock
from salat.domain.services import ScheduleOrchestrator


def get_orchestrator() -> ScheduleOrchestrator:
    return container.orchestrator


def get_event_estimator() -> EventEstimator:
    return container.events


def get_clock() -> Clock:
    return container.clock
