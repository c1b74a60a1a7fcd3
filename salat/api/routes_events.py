"""Routes d'estimation des événements du calendrier lunaire."""

from fastapi import APIRouter, Depends, Path

from salat.api.dependencies import get_clock, get_event_estimator
from salat.api.schemas import EventResponse
from salat.domain.events import EventEstimator
from salat.domain.ports import Clock

router = APIRouter(prefix="/events", tags=["events"])
estimator_dep = Depends(get_event_estimator)
clock_dep = Depends(get_clock)


@router.get("/{hijri_year}", response_model=list[EventResponse])
def get_events(
    hijri_year: int = Path(..., ge=1, le=9000),
    include_named: bool = False,
    estimator: EventEstimator = estimator_dep,
    clock: Clock = clock_dep,
):
    """
    Estime le début du mois de jeûne et les fêtes d'une année hégirienne.

    Paramètres:
    - hijri_year: année du calendrier lunaire.
    - include_named: ajoute les autres dates notables (Nouvel an, Achoura...).
    """
    estimates = estimator.estimate_year(hijri_year, clock.today(), include_named=include_named)
    return [EventResponse.from_estimate(e) for e in estimates]
