"""
Entités du domaine métier.

Ce module définit les modèles de données principaux utilisés pour le calcul des horaires de prière
à date future: coordonnées, entrées horaires, résultat de calcul, niveaux de divulgation, modes de
précision et estimations d'événements du calendrier lunaire.

Toutes les valeurs sont immuables (`frozen=True`): un résultat produit n'est jamais modifié.
"""

from __future__ import annotations

from datetime import date as _date
from datetime import datetime, timedelta
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

EVENT_DISCLAIMER = (
    "Estimated by astronomical calculation (planning only). "
    "Actual dates set by your local Islamic authority."
)


class Prayer(str, Enum):
    """Les cinq prières canoniques, dans l'ordre de la journée."""

    FAJR = "fajr"
    DHUHR = "dhuhr"
    ASR = "asr"
    MAGHRIB = "maghrib"
    ISHA = "isha"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


CANONICAL_ORDER: tuple[Prayer, ...] = tuple(Prayer)


class CalculationMethod(str, Enum):
    """Jeux de paramètres astronomiques (angles de crépuscule, règle de l'isha)."""

    MUSLIM_WORLD_LEAGUE = "muslim_world_league"
    EGYPTIAN = "egyptian"
    KARACHI = "karachi"
    UMM_AL_QURA = "umm_al_qura"
    DUBAI = "dubai"
    MOONSIGHTING_COMMITTEE = "moonsighting_committee"
    NORTH_AMERICA = "north_america"
    KUWAIT = "kuwait"
    QATAR = "qatar"
    SINGAPORE = "singapore"
    JAFARI_LEVA = "jafari_leva"
    JAFARI_TEHRAN = "jafari_tehran"
    FCNA_CANADA = "fcna_canada"


class Madhab(str, Enum):
    """École juridique; influe principalement sur l'heure de l'asr."""

    SUNNI = "sunni"
    SHIA = "shia"
    SHAFI = "shafi"
    HANAFI = "hanafi"

    @property
    def asr_shadow_factor(self) -> int:
        return 2 if self is Madhab.HANAFI else 1


class Coordinate(BaseModel):
    """Coordonnée géographique en degrés décimaux."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)

    def rounded(self, decimals: int) -> tuple[float, float]:
        """Retourne (lat, lon) arrondis, utilisés comme composante de clé de cache."""
        return round(self.latitude, decimals), round(self.longitude, decimals)


class Location(BaseModel):
    """Coordonnée associée à un fuseau IANA (ex: Europe/Oslo)."""

    model_config = ConfigDict(frozen=True)

    coordinate: Coordinate
    timezone: str


HIJRI_MONTH_NAMES: tuple[str, ...] = (
    "Muharram",
    "Safar",
    "Rabi al-Awwal",
    "Rabi al-Thani",
    "Jumada al-Awwal",
    "Jumada al-Thani",
    "Rajab",
    "Shaban",
    "Ramadan",
    "Shawwal",
    "Dhu al-Qadah",
    "Dhu al-Hijjah",
)

RAMADAN_MONTH = 9


class HijriDate(BaseModel):
    """Date du calendrier lunaire (hégirien)."""

    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=1)
    month: int = Field(..., ge=1, le=12)
    day: int = Field(..., ge=1, le=30)

    @property
    def month_name(self) -> str:
        return HIJRI_MONTH_NAMES[self.month - 1]

    def __str__(self) -> str:
        return f"{self.day} {self.month_name} {self.year} AH"


class PrayerTimeEntry(BaseModel):
    """Un horaire calculé; `is_adjusted` signale le décalage du mois de jeûne."""

    model_config = ConfigDict(frozen=True)

    prayer: Prayer
    time: datetime
    is_adjusted: bool = False


class DisclosureTier(str, Enum):
    """Niveau de divulgation selon l'éloignement de la date demandée."""

    TODAY = "today"
    SHORT_TERM = "shortTerm"
    MEDIUM_TERM = "mediumTerm"
    LONG_TERM = "longTerm"

    @property
    def requires_banner(self) -> bool:
        return self is not DisclosureTier.TODAY

    @property
    def banner_message(self) -> str:
        # Texte exact, ne jamais reformuler.
        return _BANNER_MESSAGES[self]


_BANNER_MESSAGES: dict[DisclosureTier, str] = {
    DisclosureTier.TODAY: "",
    DisclosureTier.SHORT_TERM: (
        "Calculated times. Subject to DST changes and official mosque schedules."
    ),
    DisclosureTier.MEDIUM_TERM: (
        "Long-range estimate. DST rules and local authorities may differ. "
        "Verify closer to date."
    ),
    DisclosureTier.LONG_TERM: (
        "Long-range estimate not recommended. "
        "Use for planning only with extreme caution."
    ),
}


class ConfidenceBand(str, Enum):
    """Confiance associée à une estimation d'événement."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def display_text(self) -> str:
        return f"{self.value.capitalize()} confidence"


PrecisionKind = Literal["exact", "window", "coarse"]


def _part_of_day(hour: int) -> str:
    if hour < 6:
        return "Early Morning"
    if hour < 12:
        return "Morning"
    if hour < 13:
        return "Noon"
    if hour < 17:
        return "Afternoon"
    if hour < 20:
        return "Evening"
    return "Night"


class PrecisionMode(BaseModel):
    """Mode d'affichage d'un horaire: exact, fenêtre centrée, ou moment de la journée."""

    model_config = ConfigDict(frozen=True)

    kind: PrecisionKind
    window_minutes: int | None = None

    @model_validator(mode="after")
    def _check_window(self) -> PrecisionMode:
        if self.kind == "window" and (self.window_minutes is None or self.window_minutes <= 0):
            raise ValueError("window precision requires a positive width")
        if self.kind != "window" and self.window_minutes is not None:
            raise ValueError("only window precision carries a width")
        return self

    @classmethod
    def exact(cls) -> PrecisionMode:
        return cls(kind="exact")

    @classmethod
    def window(cls, minutes: int) -> PrecisionMode:
        return cls(kind="window", window_minutes=minutes)

    @classmethod
    def coarse(cls) -> PrecisionMode:
        return cls(kind="coarse")

    def format_time(self, instant: datetime) -> str:
        """Formate un horaire selon le mode (HH:MM, plage HH:MM - HH:MM, ou libellé)."""
        if self.kind == "exact":
            return instant.strftime("%H:%M")
        if self.kind == "window":
            half = timedelta(minutes=self.window_minutes / 2)
            start, end = instant - half, instant + half
            return f"{start.strftime('%H:%M')} - {end.strftime('%H:%M')}"
        return _part_of_day(instant.hour)


class ScheduleResult(BaseModel):
    """Résultat immuable d'un calcul d'horaires pour une date et un lieu."""

    model_config = ConfigDict(frozen=True)

    date: _date
    prayer_times: tuple[PrayerTimeEntry, ...]
    hijri_date: HijriDate
    is_ramadan: bool
    disclosure_tier: DisclosureTier
    timezone: str
    is_high_latitude: bool
    precision: PrecisionMode

    @model_validator(mode="after")
    def _check_prayer_times(self) -> ScheduleResult:
        prayers = tuple(e.prayer for e in self.prayer_times)
        if prayers != CANONICAL_ORDER:
            raise ValueError("prayer_times must hold the five prayers in canonical order")
        times = [e.time for e in self.prayer_times]
        if any(later <= earlier for earlier, later in zip(times, times[1:])):
            raise ValueError("prayer_times must be strictly increasing")
        return self

    @computed_field
    @property
    def requires_banner(self) -> bool:
        return self.disclosure_tier.requires_banner

    @computed_field
    @property
    def banner_message(self) -> str:
        return self.disclosure_tier.banner_message

    def time_for(self, prayer: Prayer) -> datetime:
        return self.prayer_times[CANONICAL_ORDER.index(prayer)].time

    def next_prayer(self, after: datetime) -> PrayerTimeEntry | None:
        """Première prière strictement postérieure à `after`, sinon None."""
        return next((e for e in self.prayer_times if e.time > after), None)


class ScheduleRequest(BaseModel):
    """Requête transitoire construite à chaque appel."""

    model_config = ConfigDict(frozen=True)

    date: _date
    location: Location | None = None
    method: CalculationMethod
    madhab: Madhab


class DateInterval(BaseModel):
    """Intervalle de dates grégoriennes, bornes incluses."""

    model_config = ConfigDict(frozen=True)

    start: _date
    end: _date

    @property
    def days(self) -> int:
        return (self.end - self.start).days


class EventKind(str, Enum):
    """Événements estimés du calendrier lunaire."""

    RAMADAN_START = "ramadan_start"
    RAMADAN_END = "ramadan_end"
    EID_AL_FITR = "eid_al_fitr"
    EID_AL_ADHA = "eid_al_adha"
    OTHER = "other"


class EventEstimate(BaseModel):
    """Estimation d'un événement; porte toujours l'avertissement « planning only »."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    name: str
    estimated_date: _date
    hijri_date: HijriDate
    confidence: ConfidenceBand

    @computed_field
    @property
    def disclaimer(self) -> str:
        return EVENT_DISCLAIMER
