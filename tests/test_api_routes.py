"""Tests pour les routes HTTP (horaires, plages, horizon, événements)."""

from __future__ import annotations

import re

import pytest
from fastapi.testclient import TestClient

from salat.api.dependencies import get_clock, get_event_estimator, get_orchestrator
from salat.app.main import app
from salat.core.http_constants import (
    HTTP_BAD_REQUEST,
    HTTP_BAD_GATEWAY,
    HTTP_FORBIDDEN,
    HTTP_OK,
    HTTP_SERVICE_UNAVAILABLE,
    HTTP_UNPROCESSABLE_ENTITY,
)
from salat.domain.entities import EVENT_DISCLAIMER
from salat.domain.errors import CalculationFailed
from salat.domain.events import EventEstimator
from salat.infra.calendar import TabularHijriCalendar
from salat.infra.location import DeniedLocationResolver, StaticLocationResolver

NYC_QUERY = "lat=40.7128&lon=-74.0060&tz=America/New_York"
PRAYER_COUNT = 5
RANGE_DAYS = 7
HHMM = re.compile(r"^\d{2}:\d{2}$")
WINDOW = re.compile(r"^\d{2}:\d{2} - \d{2}:\d{2}$")


@pytest.fixture
def client(make_orchestrator, fixed_clock):
    """Client de test branché sur un orchestrateur à moteur factice."""
    state = {"orchestrator": make_orchestrator(location_resolver=StaticLocationResolver())}
    app.dependency_overrides[get_orchestrator] = lambda: state["orchestrator"]
    app.dependency_overrides[get_event_estimator] = lambda: EventEstimator(TabularHijriCalendar())
    app.dependency_overrides[get_clock] = lambda: fixed_clock
    test_client = TestClient(app)
    test_client.state = state
    yield test_client
    app.dependency_overrides.clear()


def test_schedule_short_term(client: TestClient) -> None:
    """Teste une date à +6 mois: précision exacte et bandeau court terme."""
    r = client.get(f"/schedule/2025-07-15?{NYC_QUERY}")
    assert r.status_code == HTTP_OK
    body = r.json()
    assert body["disclosure_tier"] == "shortTerm"
    assert body["requires_banner"] is True
    assert body["banner_message"] == (
        "Calculated times. Subject to DST changes and official mosque schedules."
    )
    assert body["precision"] == {"kind": "exact", "window_minutes": None}
    assert body["is_high_latitude"] is False
    assert len(body["prayer_times"]) == PRAYER_COUNT
    assert [p["prayer"] for p in body["prayer_times"]] == [
        "fajr",
        "dhuhr",
        "asr",
        "maghrib",
        "isha",
    ]
    assert all(HHMM.match(p["display"]) for p in body["prayer_times"])


def test_schedule_medium_term_uses_window(client: TestClient) -> None:
    """Teste l'affichage en fenêtre et le bandeau moyen terme."""
    r = client.get(f"/schedule/2027-06-01?{NYC_QUERY}")
    assert r.status_code == HTTP_OK
    body = r.json()
    assert body["disclosure_tier"] == "mediumTerm"
    assert body["banner_message"] == (
        "Long-range estimate. DST rules and local authorities may differ. Verify closer to date."
    )
    assert all(WINDOW.match(p["display"]) for p in body["prayer_times"])


def test_schedule_lookahead_exceeded(client: TestClient) -> None:
    """Teste l'enveloppe d'erreur au-delà du plafond."""
    r = client.get(f"/schedule/2030-11-15?{NYC_QUERY}", headers={"X-Request-ID": "req-42"})
    assert r.status_code == HTTP_UNPROCESSABLE_ENTITY
    body = r.json()
    assert body["code"] == "LOOKAHEAD_EXCEEDED"
    assert body["details"] == {"requested_months": 70, "ceiling_months": 60}
    assert body["trace_id"] == "req-42"
    assert r.headers["X-Request-ID"] == "req-42"


def test_schedule_invalid_date(client: TestClient) -> None:
    """Teste le rejet d'une date illisible."""
    r = client.get(f"/schedule/not-a-date?{NYC_QUERY}")
    assert r.status_code == HTTP_UNPROCESSABLE_ENTITY
    assert r.json()["code"] == "INVALID_DATE"


def test_schedule_without_location(client: TestClient) -> None:
    """Teste l'absence de position (aucune position par défaut configurée)."""
    r = client.get("/schedule/2025-07-15")
    assert r.status_code == HTTP_SERVICE_UNAVAILABLE
    assert r.json()["code"] == "LOCATION_UNAVAILABLE"


def test_schedule_partial_coordinate(client: TestClient) -> None:
    """Teste le rejet d'une latitude sans longitude."""
    r = client.get("/schedule/2025-07-15?lat=40.7")
    assert r.status_code == HTTP_BAD_REQUEST
    assert r.json()["code"] == "BAD_REQUEST"


def test_schedule_permission_denied(client: TestClient, make_orchestrator) -> None:
    """Teste la traduction d'un refus d'accès à la position."""
    client.state["orchestrator"] = make_orchestrator(location_resolver=DeniedLocationResolver())
    r = client.get("/schedule/2025-07-15")
    assert r.status_code == HTTP_FORBIDDEN
    assert r.json()["message"] == "Location permission denied"


def test_schedule_calculation_failed(client: TestClient, make_orchestrator) -> None:
    """Teste la traduction d'un échec du moteur."""

    class FailingEngine:
        def compute(self, coordinate, day, method, madhab):
            raise CalculationFailed()

    client.state["orchestrator"] = make_orchestrator(engine=FailingEngine())
    r = client.get(f"/schedule/2025-07-15?{NYC_QUERY}")
    assert r.status_code == HTTP_BAD_GATEWAY
    assert r.json()["code"] == "CALCULATION_FAILED"


def test_schedule_range(client: TestClient) -> None:
    """Teste une plage de dates bornes incluses."""
    r = client.get(f"/schedule?start=2025-02-01&end=2025-02-07&{NYC_QUERY}")
    assert r.status_code == HTTP_OK
    body = r.json()
    assert len(body) == RANGE_DAYS
    assert body[0]["date"] == "2025-02-01"
    assert body[-1]["date"] == "2025-02-07"


def test_schedule_range_too_large(client: TestClient) -> None:
    """Teste le refus d'une plage de 91 jours."""
    r = client.get(f"/schedule?start=2025-01-15&end=2025-04-16&{NYC_QUERY}")
    assert r.status_code == HTTP_UNPROCESSABLE_ENTITY
    body = r.json()
    assert body["code"] == "DATE_RANGE_TOO_LARGE"
    assert body["message"] == "Date range exceeds the allowed limit"
    assert body["details"] == {"requested_days": 91, "max_days": 90}


def test_horizon_today(client: TestClient) -> None:
    """Teste la classification du jour courant (aucun bandeau)."""
    r = client.get("/horizon/2025-01-15")
    assert r.status_code == HTTP_OK
    assert r.json() == {
        "date": "2025-01-15",
        "disclosure_tier": "today",
        "requires_banner": False,
        "banner_message": "",
    }


def test_events(client: TestClient) -> None:
    """Teste l'estimation des événements d'une année hégirienne."""
    r = client.get("/events/1445")
    assert r.status_code == HTTP_OK
    body = r.json()
    assert [e["kind"] for e in body] == [
        "ramadan_start",
        "ramadan_end",
        "eid_al_fitr",
        "eid_al_adha",
    ]
    assert body[0]["estimated_date"] == "2024-03-11"
    assert body[0]["hijri_date"] == "1 Ramadan 1445 AH"
    assert all(e["disclaimer"] == EVENT_DISCLAIMER for e in body)
    assert all(e["confidence_text"] == "High confidence" for e in body)


def test_events_invalid_year(client: TestClient) -> None:
    """Teste la validation de l'année."""
    r = client.get("/events/0")
    assert r.status_code == HTTP_UNPROCESSABLE_ENTITY
    assert r.json()["code"] == "VALIDATION_ERROR"


def test_coordinate_only_query_uses_zone_of_coordinate(client: TestClient) -> None:
    """Teste qu'une requête `lat`/`lon` sans `tz` reçoit le fuseau du lieu (Oslo)."""
    r = client.get("/schedule/2025-07-15?lat=59.9139&lon=10.7522")
    assert r.status_code == HTTP_OK
    body = r.json()
    assert body["timezone"] == "Europe/Oslo"
    assert body["is_high_latitude"] is True
