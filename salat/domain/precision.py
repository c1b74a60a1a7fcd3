"""Sélection du mode de précision d'affichage selon le niveau de divulgation."""

from __future__ import annotations

from salat.domain.entities import DisclosureTier, PrecisionMode

WINDOW_MINUTES = 30


def select_precision(tier: DisclosureTier, allow_long_range_exact: bool = False) -> PrecisionMode:
    """Table de correspondance niveau → précision.

    - today / shortTerm: exact
    - mediumTerm: exact si l'utilisateur l'autorise, sinon fenêtre de 30 minutes
    - longTerm: fenêtre de 30 minutes, sans exception
    """
    if tier in (DisclosureTier.TODAY, DisclosureTier.SHORT_TERM):
        return PrecisionMode.exact()
    if tier is DisclosureTier.MEDIUM_TERM and allow_long_range_exact:
        return PrecisionMode.exact()
    return PrecisionMode.window(WINDOW_MINUTES)
