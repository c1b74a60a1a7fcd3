"""Taxonomie des erreurs du domaine.

Chaque erreur porte un `code` stable, exploité par la couche API pour construire l'enveloppe
d'erreur. Aucune erreur n'est absorbée dans le domaine: elles remontent telles quelles à
l'appelant immédiat.
"""

from __future__ import annotations

from typing import Any

MAX_RANGE_DAYS = 90


class ScheduleError(Exception):
    """Erreur de base du calcul d'horaires."""

    code = "SCHEDULE_ERROR"
    default_message = "Schedule computation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def details(self) -> dict[str, Any]:
        return {}


class LookaheadExceeded(ScheduleError):
    """La date demandée dépasse le plafond d'anticipation configuré."""

    code = "LOOKAHEAD_EXCEEDED"

    def __init__(self, requested_months: int, ceiling_months: int) -> None:
        self.requested_months = requested_months
        self.ceiling_months = ceiling_months
        super().__init__(
            f"Requested lookahead of {requested_months} months "
            f"exceeds maximum of {ceiling_months} months"
        )

    @property
    def details(self) -> dict[str, Any]:
        return {
            "requested_months": self.requested_months,
            "ceiling_months": self.ceiling_months,
        }


class DateRangeTooLarge(ScheduleError):
    """Plage de dates supérieure à la limite autorisée."""

    code = "DATE_RANGE_TOO_LARGE"
    default_message = "Date range exceeds the allowed limit"

    def __init__(self, requested_days: int, max_days: int = MAX_RANGE_DAYS) -> None:
        self.requested_days = requested_days
        self.max_days = max_days
        super().__init__()

    @property
    def details(self) -> dict[str, Any]:
        return {"requested_days": self.requested_days, "max_days": self.max_days}


class LocationUnavailable(ScheduleError):
    code = "LOCATION_UNAVAILABLE"
    default_message = "Location is not available"


class PermissionDenied(ScheduleError):
    code = "PERMISSION_DENIED"
    default_message = "Location permission denied"


class CalculationFailed(ScheduleError):
    """Échec du moteur astronomique; le message n'est pas supposé stable."""

    code = "CALCULATION_FAILED"
    default_message = "Failed to calculate prayer times"


class InvalidDate(ScheduleError):
    code = "INVALID_DATE"
    default_message = "Invalid date provided"
