"""
Métriques Prometheus pour l'application.

Ce module définit les métriques HTTP et les métriques du calcul d'horaires (cache, moteur), ainsi
que l'endpoint `/metrics` et le middleware de mesure des requêtes.
"""

import time

from fastapi import APIRouter, Request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

metrics_router = APIRouter()

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "route", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "Latency of HTTP requests", ["route"]
)

# Calcul d'horaires
SCHEDULE_REQUESTS = Counter(
    "schedule_requests_total",
    "Total per-day schedule lookups",
    ["tier"],
)
SCHEDULE_CACHE_HITS = Counter(
    "schedule_cache_hits_total",
    "Schedule results served from cache",
)
SCHEDULE_CACHE_MISSES = Counter(
    "schedule_cache_misses_total",
    "Schedule results computed because absent or expired in cache",
)
SCHEDULE_CACHE_STORE_ERRORS = Counter(
    "schedule_cache_store_errors_total",
    "Schedule cache backend errors (treated as misses)",
    ["operation"],
)
ENGINE_INVOCATIONS = Counter(
    "astronomical_engine_invocations_total",
    "Astronomical engine invocations",
    ["status"],
)


@metrics_router.get("/metrics")
def metrics():
    """
    Expose les métriques Prometheus au format texte.

    Returns:
        Response: Réponse HTTP contenant les métriques au format Prometheus.
    """
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Middleware Prometheus pour mesurer les métriques HTTP.

    Collecte le nombre de requêtes et la latence par route. La route est le gabarit déclaré
    (ex: `/schedule/{day}`) quand il est connu, afin de borner la cardinalité des labels.
    """

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response: Response = await call_next(request)
        route_obj = request.scope.get("route")
        route = getattr(route_obj, "path", None) or request.scope.get("path", "unknown")
        REQUEST_COUNT.labels(request.method, route, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(route).observe(time.perf_counter() - start)
        return response
