"""
Application principale FastAPI.

Ce module assemble les composants de l'application : middlewares, routes, handlers d'erreurs et
métriques.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI avec son titre/debug
- Ajouter les middlewares (request id, métriques)
- Monter les routers (santé, horaires, événements, métriques)
"""

from __future__ import annotations

from fastapi import FastAPI

from salat.api.errors import register_error_handlers
from salat.api.routes_events import router as events_router
from salat.api.routes_health import router as health_router
from salat.api.routes_schedule import router as schedule_router
from salat.app.metrics import PrometheusMiddleware, metrics_router
from salat.core.container import container
from salat.core.logging import setup_logging
from salat.middlewares.request_id import RequestIDMiddleware


def create_app() -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog)
    - Lit les paramètres d'exécution
    - Ajoute les middlewares et les handlers d'erreurs
    - Publie les routes
    """
    setup_logging(container.settings)
    settings = container.settings
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG)
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(schedule_router)
    app.include_router(events_router)
    app.include_router(metrics_router)
    return app


app = create_app()
