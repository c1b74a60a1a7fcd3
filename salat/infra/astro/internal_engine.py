"""
Moteur astronomique interne (géométrie solaire simplifiée).

Ce module calcule les cinq instants d'une journée à partir de la déclinaison solaire et de
l'équation du temps (précision de l'ordre de la minute), sans dépendance externe.
Les instants sont retournés en UTC; la localisation dans le fuseau est faite par l'appelant.

Aux hautes latitudes, lorsque l'angle de crépuscule n'est pas atteint, l'aube et la nuit sont
bornées par une fraction de la nuit proportionnelle à l'angle (règle « twilight angle »).
"""

import math
from datetime import date, datetime, time, timedelta, timezone

from salat.domain.entities import CalculationMethod, Coordinate, Madhab
from salat.domain.errors import CalculationFailed

SUNRISE_ALTITUDE = -0.833
J2000 = 2451545.0

# Paramètres par méthode: angle de l'aube, angle de l'isha ou intervalle fixe (minutes),
# angle optionnel du maghrib.
METHOD_PARAMETERS: dict[CalculationMethod, dict[str, float]] = {
    CalculationMethod.MUSLIM_WORLD_LEAGUE: {"fajr_angle": 18.0, "isha_angle": 17.0},
    CalculationMethod.EGYPTIAN: {"fajr_angle": 19.5, "isha_angle": 17.5},
    CalculationMethod.KARACHI: {"fajr_angle": 18.0, "isha_angle": 18.0},
    CalculationMethod.UMM_AL_QURA: {"fajr_angle": 18.5, "isha_interval": 90},
    CalculationMethod.DUBAI: {"fajr_angle": 18.2, "isha_angle": 18.2},
    CalculationMethod.MOONSIGHTING_COMMITTEE: {"fajr_angle": 18.0, "isha_angle": 18.0},
    CalculationMethod.NORTH_AMERICA: {"fajr_angle": 15.0, "isha_angle": 15.0},
    CalculationMethod.KUWAIT: {"fajr_angle": 18.0, "isha_angle": 17.5},
    CalculationMethod.QATAR: {"fajr_angle": 18.0, "isha_interval": 90},
    CalculationMethod.SINGAPORE: {"fajr_angle": 20.0, "isha_angle": 18.0},
    CalculationMethod.JAFARI_LEVA: {"fajr_angle": 16.0, "isha_angle": 14.0, "maghrib_angle": 4.0},
    CalculationMethod.JAFARI_TEHRAN: {
        "fajr_angle": 17.7,
        "isha_angle": 14.0,
        "maghrib_angle": 4.5,
    },
    CalculationMethod.FCNA_CANADA: {"fajr_angle": 13.0, "isha_angle": 13.0},
}


def _julian_day(day: date) -> float:
    # Midi UTC du jour demandé
    return day.toordinal() + 1721424.5 + 0.5


def _sun_position(jd: float) -> tuple[float, float]:
    """Retourne (déclinaison en degrés, équation du temps en heures)."""
    d = jd - J2000
    g = math.radians((357.529 + 0.98560028 * d) % 360)
    q = (280.459 + 0.98564736 * d) % 360
    ecliptic = math.radians((q + 1.915 * math.sin(g) + 0.020 * math.sin(2 * g)) % 360)
    obliquity = math.radians(23.439 - 0.00000036 * d)
    right_ascension = (
        math.degrees(
            math.atan2(math.cos(obliquity) * math.sin(ecliptic), math.cos(ecliptic))
        )
        / 15.0
    ) % 24
    equation = q / 15.0 - right_ascension
    equation = (equation + 12) % 24 - 12
    declination = math.degrees(math.asin(math.sin(obliquity) * math.sin(ecliptic)))
    return declination, equation


def _hour_angle(altitude: float, latitude: float, declination: float) -> float | None:
    """Durée (heures) entre le midi solaire et le passage du soleil à `altitude`, ou None."""
    lat = math.radians(latitude)
    dec = math.radians(declination)
    value = (math.sin(math.radians(altitude)) - math.sin(lat) * math.sin(dec)) / (
        math.cos(lat) * math.cos(dec)
    )
    if value < -1 or value > 1:
        return None
    return math.degrees(math.acos(value)) / 15.0


class InternalPrayerEngine:
    """
    Moteur de calcul interne des horaires de prière.

    Implémente l'algorithme classique (déclinaison, équation du temps, angle horaire) pour les
    13 méthodes supportées; les deux écoles d'asr sont gérées par le facteur d'ombre.
    """

    def compute(
        self,
        coordinate: Coordinate,
        day: date,
        method: CalculationMethod,
        madhab: Madhab,
    ) -> list[datetime]:
        """
        Calcule fajr, dhuhr, asr, maghrib et isha.

        Args:
            coordinate: Position géographique.
            day: Jour civil local.
            method: Méthode de calcul (angles/intervalle).
            madhab: École juridique (facteur d'ombre de l'asr).

        Returns:
            list[datetime]: Cinq instants UTC.

        Raises:
            CalculationFailed: soleil jamais levé ou jamais couché (jour/nuit polaire).
        """
        params = METHOD_PARAMETERS[method]
        latitude = coordinate.latitude
        declination, equation = _sun_position(_julian_day(day))
        dhuhr = 12.0 - equation - coordinate.longitude / 15.0

        half_day = _hour_angle(SUNRISE_ALTITUDE, latitude, declination)
        if half_day is None:
            raise CalculationFailed(
                f"Sun does not rise or set at latitude {latitude:.2f} on {day.isoformat()}"
            )
        sunrise = dhuhr - half_day
        sunset = dhuhr + half_day
        night = 24.0 - 2 * half_day

        fajr_angle = params["fajr_angle"]
        fajr = self._twilight(dhuhr, -fajr_angle, latitude, declination, before=True)
        safe_fajr = sunrise - night * fajr_angle / 60.0
        if fajr is None or fajr < safe_fajr:
            fajr = safe_fajr

        shadow = madhab.asr_shadow_factor + math.tan(math.radians(abs(latitude - declination)))
        asr_altitude = math.degrees(math.atan(1.0 / shadow))
        asr_offset = _hour_angle(asr_altitude, latitude, declination)
        if asr_offset is None:
            raise CalculationFailed(f"Afternoon shadow not reached on {day.isoformat()}")
        asr = dhuhr + asr_offset

        maghrib = sunset
        if "maghrib_angle" in params:
            angled = self._twilight(dhuhr, -params["maghrib_angle"], latitude, declination)
            if angled is not None:
                maghrib = angled

        if "isha_interval" in params:
            isha = maghrib + params["isha_interval"] / 60.0
        else:
            isha_angle = params["isha_angle"]
            isha = self._twilight(dhuhr, -isha_angle, latitude, declination)
            safe_isha = sunset + night * isha_angle / 60.0
            if isha is None or isha > safe_isha:
                isha = safe_isha
        if isha <= maghrib:
            isha = maghrib + 1 / 60.0

        midnight = datetime.combine(day, time(0), tzinfo=timezone.utc)
        return [midnight + timedelta(hours=h) for h in (fajr, dhuhr, asr, maghrib, isha)]

    @staticmethod
    def _twilight(
        dhuhr: float, altitude: float, latitude: float, declination: float, before: bool = False
    ) -> float | None:
        offset = _hour_angle(altitude, latitude, declination)
        if offset is None:
            return None
        return dhuhr - offset if before else dhuhr + offset
