"""
Routes de calcul des horaires: une date, une plage de dates, et classification d'horizon.

La position est fournie par `lat`/`lon` (et `tz`, sinon déduit de la coordonnée); à défaut, la
position par défaut configurée est utilisée. Les erreurs du domaine sont converties par les
handlers de `salat.api.errors`.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from salat.api.dependencies import get_orchestrator
from salat.api.schemas import HorizonResponse, ScheduleResponse
from salat.core.http_constants import HTTP_BAD_REQUEST
from salat.domain.entities import Coordinate, Location
from salat.domain.horizon import as_calendar_date
from salat.domain.services import ScheduleOrchestrator

router = APIRouter(tags=["schedule"])
orchestrator_dep = Depends(get_orchestrator)


def _location(
    lat: float | None, lon: float | None, tz: str | None
) -> Location | Coordinate | None:
    """Construit l'indication de position transmise au résolveur."""
    if lat is None and lon is None:
        return None
    if lat is None or lon is None:
        raise HTTPException(status_code=HTTP_BAD_REQUEST, detail="lat and lon go together")
    coordinate = Coordinate(latitude=lat, longitude=lon)
    if tz:
        return Location(coordinate=coordinate, timezone=tz)
    return coordinate


@router.get("/schedule/{day}", response_model=ScheduleResponse)
async def get_schedule(
    day: str,
    lat: float | None = Query(None, ge=-90.0, le=90.0),
    lon: float | None = Query(None, ge=-180.0, le=180.0),
    tz: str | None = None,
    orchestrator: ScheduleOrchestrator = orchestrator_dep,
):
    """
    Retourne les horaires d'une date (YYYY-MM-DD).

    Retour: `ScheduleResponse` avec niveau de divulgation, bandeau et précision d'affichage.
    """
    result = await orchestrator.get_schedule(day, _location(lat, lon, tz))
    return ScheduleResponse.from_result(result)


@router.get("/schedule", response_model=list[ScheduleResponse])
async def get_schedule_range(
    start: str,
    end: str,
    lat: float | None = Query(None, ge=-90.0, le=90.0),
    lon: float | None = Query(None, ge=-180.0, le=180.0),
    tz: str | None = None,
    orchestrator: ScheduleOrchestrator = orchestrator_dep,
):
    """Retourne un résultat par jour de `start` à `end` inclus (90 jours d'écart au plus)."""
    results = await orchestrator.get_schedule_range(start, end, _location(lat, lon, tz))
    return [ScheduleResponse.from_result(r) for r in results]


@router.get("/horizon/{day}", response_model=HorizonResponse)
def get_horizon(day: str, orchestrator: ScheduleOrchestrator = orchestrator_dep):
    """Classe une date sans calculer d'horaires."""
    target = as_calendar_date(day)
    tier = orchestrator.classify(target)
    return HorizonResponse(
        date=target,
        disclosure_tier=tier.value,
        requires_banner=tier.requires_banner,
        banner_message=tier.banner_message,
    )
