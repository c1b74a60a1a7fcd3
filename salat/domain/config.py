"""Configuration explicite du calcul d'horaires.

`ScheduleConfig` remplace la lecture d'un état global: l'orchestrateur reçoit une valeur à la
construction, et chaque appel peut en fournir une autre.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from salat.domain.entities import CalculationMethod, Madhab
from salat.domain.horizon import DEFAULT_CEILING_MONTHS


class ScheduleConfig(BaseModel):
    """Paramètres influant sur le résultat calculé."""

    model_config = ConfigDict(frozen=True)

    lookahead_ceiling_months: int = Field(DEFAULT_CEILING_MONTHS, gt=0)
    ramadan_isha_offset_enabled: bool = True
    allow_long_range_exact: bool = False
    method: CalculationMethod = CalculationMethod.MUSLIM_WORLD_LEAGUE
    madhab: Madhab = Madhab.SHAFI

    @classmethod
    def from_settings(cls, settings) -> ScheduleConfig:
        """Construit la configuration depuis `Settings` (valeurs d'environnement)."""
        return cls(
            lookahead_ceiling_months=settings.LOOKAHEAD_CEILING_MONTHS,
            ramadan_isha_offset_enabled=settings.RAMADAN_ISHA_OFFSET_ENABLED,
            allow_long_range_exact=settings.SHOW_LONG_RANGE_PRECISION,
            method=CalculationMethod(settings.CALCULATION_METHOD),
            madhab=Madhab(settings.MADHAB),
        )

    def cache_fragment(self) -> str:
        """Représentation stable des paramètres à inclure dans une clé de cache."""
        return ":".join(
            (
                self.method.value,
                self.madhab.value,
                f"isha{int(self.ramadan_isha_offset_enabled)}",
                f"exact{int(self.allow_long_range_exact)}",
            )
        )
