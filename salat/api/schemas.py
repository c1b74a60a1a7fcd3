# Schémas Pydantic exposés par l'API (réponses).

from datetime import date, datetime

from pydantic import BaseModel

from salat.domain.entities import EventEstimate, ScheduleResult


class HijriDateResponse(BaseModel):
    year: int
    month: int
    day: int
    month_name: str
    label: str


class PrayerTimeResponse(BaseModel):
    """Un horaire: instant ISO local et libellé formaté selon la précision."""

    prayer: str
    name: str
    time: datetime
    display: str
    is_adjusted: bool


class PrecisionResponse(BaseModel):
    kind: str
    window_minutes: int | None = None


class ScheduleResponse(BaseModel):
    """Horaires d'une journée avec le bandeau d'avertissement du niveau de divulgation.

    Champs:
    - date: str (YYYY-MM-DD)
    - prayer_times: cinq entrées dans l'ordre canonique
    - disclosure_tier / requires_banner / banner_message: texte exact à afficher
    - precision: mode d'affichage (exact ou fenêtre)
    """

    date: date
    timezone: str
    hijri_date: HijriDateResponse
    is_ramadan: bool
    is_high_latitude: bool
    disclosure_tier: str
    requires_banner: bool
    banner_message: str
    precision: PrecisionResponse
    prayer_times: list[PrayerTimeResponse]

    @classmethod
    def from_result(cls, result: ScheduleResult) -> "ScheduleResponse":
        hijri = result.hijri_date
        return cls(
            date=result.date,
            timezone=result.timezone,
            hijri_date=HijriDateResponse(
                year=hijri.year,
                month=hijri.month,
                day=hijri.day,
                month_name=hijri.month_name,
                label=str(hijri),
            ),
            is_ramadan=result.is_ramadan,
            is_high_latitude=result.is_high_latitude,
            disclosure_tier=result.disclosure_tier.value,
            requires_banner=result.requires_banner,
            banner_message=result.banner_message,
            precision=PrecisionResponse(
                kind=result.precision.kind, window_minutes=result.precision.window_minutes
            ),
            prayer_times=[
                PrayerTimeResponse(
                    prayer=entry.prayer.value,
                    name=entry.prayer.display_name,
                    time=entry.time,
                    display=result.precision.format_time(entry.time),
                    is_adjusted=entry.is_adjusted,
                )
                for entry in result.prayer_times
            ],
        )


class HorizonResponse(BaseModel):
    date: date
    disclosure_tier: str
    requires_banner: bool
    banner_message: str


class EventResponse(BaseModel):
    """Estimation d'événement; `disclaimer` est toujours présent et jamais modifié."""

    kind: str
    name: str
    estimated_date: date
    hijri_date: str
    confidence: str
    confidence_text: str
    disclaimer: str

    @classmethod
    def from_estimate(cls, estimate: EventEstimate) -> "EventResponse":
        return cls(
            kind=estimate.kind.value,
            name=estimate.name,
            estimated_date=estimate.estimated_date,
            hijri_date=str(estimate.hijri_date),
            confidence=estimate.confidence.value,
            confidence_text=estimate.confidence.display_text,
            disclaimer=estimate.disclaimer,
        )
