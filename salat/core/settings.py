"""Définition et chargement des paramètres de configuration applicative.

Objectif du module
------------------
- Centraliser les paramètres (env/.env) via Pydantic Settings
- Résoudre le fichier `.env` à utiliser selon la stratégie: ENV_FILE > .env.{APP_ENV} > .env
"""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Détermination du fichier .env à utiliser avec priorité:
# 1) ENV_FILE (chemin explicite)
# 2) .env.{APP_ENV} si présent
# 3) .env (défaut)
_cwd = Path.cwd()
_env_file_from_env = os.getenv("ENV_FILE")
if _env_file_from_env:
    _ENV_FILE_PATH = _env_file_from_env
else:
    _app_env = os.getenv("APP_ENV", "dev")
    _candidate_specific = _cwd / f".env.{_app_env}"
    _candidate_default = _cwd / ".env"
    if _candidate_specific.exists():
        _ENV_FILE_PATH = _candidate_specific
    else:
        _ENV_FILE_PATH = _candidate_default


class Settings(BaseSettings):
    """Modèle de configuration chargé depuis l'environnement et .env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
    )
    APP_NAME: str = "salat-horizon"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True
    LOG_LEVEL: str = "DEBUG"
    LOG_JSON: bool = False

    REDIS_URL: str | None = None
    REQUIRE_REDIS: bool = False

    # Politique d'horizon et de précision
    LOOKAHEAD_CEILING_MONTHS: int = 60
    RAMADAN_ISHA_OFFSET_ENABLED: bool = True
    SHOW_LONG_RANGE_PRECISION: bool = False
    CALCULATION_METHOD: str = "muslim_world_league"
    MADHAB: str = "shafi"

    # Cache des résultats
    CACHE_TTL_DAYS: int = 7
    CACHE_COORDINATE_DECIMALS: int = 2
    RANGE_CONCURRENCY: int = 8

    # Localisation par défaut (aucune géolocalisation côté serveur)
    DEFAULT_LATITUDE: float | None = None
    DEFAULT_LONGITUDE: float | None = None
    DEFAULT_TIMEZONE: str | None = None


def get_settings() -> Settings:
    """Construit et retourne la configuration de l'application."""
    return Settings()
