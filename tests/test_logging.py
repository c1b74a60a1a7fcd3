"""Tests pour la configuration des logs structurés."""

from __future__ import annotations

import json
import logging

import structlog

from salat.core.logging import resolve_level, setup_logging
from salat.core.settings import Settings


def test_resolve_level() -> None:
    """Teste la conversion des noms de niveau, avec repli sur INFO."""
    assert resolve_level("warning") == logging.WARNING
    assert resolve_level(" DEBUG ") == logging.DEBUG
    assert resolve_level("verbose") == logging.INFO


def test_json_events_carry_service_and_request_id(capsys) -> None:
    """Teste le rendu JSON hors développement avec le contexte de requête."""
    setup_logging(Settings(APP_ENV="prod", LOG_LEVEL="INFO", APP_NAME="salat-test"))
    structlog.contextvars.bind_contextvars(request_id="req-42")
    try:
        structlog.get_logger("salat.test").info("schedule_computed", tier="shortTerm")
        structlog.get_logger("salat.test").debug("filtered_out")
    finally:
        structlog.contextvars.clear_contextvars()
        structlog.reset_defaults()

    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    assert len(lines) == 1
    event = json.loads(lines[0])
    assert event["event"] == "schedule_computed"
    assert event["service"] == "salat-test"
    assert event["request_id"] == "req-42"
    assert event["level"] == "info"
