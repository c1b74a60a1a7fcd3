"""Configuration des logs structurés (structlog) du service d'horaires.

- Niveau lu depuis `LOG_LEVEL` (nom standard: DEBUG, INFO, ...).
- Rendu console en développement, JSON une ligne par événement hors `dev` ou si `LOG_JSON`.
- Le `request_id` de la requête et le nom du service accompagnent chaque événement.
"""

import logging
import sys

import structlog

from salat.core.settings import Settings


def resolve_level(name: str) -> int:
    """Convertit un nom de niveau en constante `logging`; un nom inconnu donne INFO."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _service_name(service: str):
    def add_service(_logger, _method, event_dict):
        event_dict.setdefault("service", service)
        return event_dict

    return add_service


def _renderer(settings: Settings):
    if settings.LOG_JSON or settings.APP_ENV != "dev":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(settings: Settings) -> None:
    """Configure structlog pour le service à partir des paramètres applicatifs."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _service_name(settings.APP_NAME),
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            _renderer(settings),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolve_level(settings.LOG_LEVEL)),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )
