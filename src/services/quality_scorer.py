"""
Service d'évaluation de la complétude d'un enregistrement.

Ce module fournit le score qualité utilisé pour classer les doublons
et choisir l'enregistrement principal lors d'une fusion.

Critères évalués (points, additifs et indépendants):
- Affiche (20): URL présente de plus de 10 caractères
- Acteurs (15): non vide
- Réalisateur (10): non vide
- Résumé (25): plus de 20 caractères
- Bonus résumé long (0-10): au-delà de 100 caractères, 1 point par 50 caractères
- Lecture (30): au moins une URL de lecture valide

Maximum: 110. Le score est une fonction pure des champs de l'enregistrement,
indépendante de l'ordre d'évaluation.
"""

from dataclasses import dataclass

from src.core.entities.record import CanonicalRecord
from src.core.value_objects.playback import PlaySources
from src.services.play_source_normalizer import is_playable_url


# ====================
# Points par critère
# ====================

POINTS_COVER = 20
POINTS_ACTORS = 15
POINTS_DIRECTOR = 10
POINTS_SYNOPSIS = 25
POINTS_PLAYBACK = 30
MAX_SYNOPSIS_BONUS = 10


# ====================
# Seuils de longueur
# ====================

MIN_COVER_LENGTH = 10
MIN_SYNOPSIS_LENGTH = 20
LONG_SYNOPSIS_LENGTH = 100
SYNOPSIS_BONUS_STEP = 50


@dataclass(frozen=True)
class QualityBreakdown:
    """
    Détail du score qualité d'un enregistrement.

    Attributs :
        cover: Points de l'affiche (0 ou 20)
        actors: Points des acteurs (0 ou 15)
        director: Points du réalisateur (0 ou 10)
        synopsis: Points du résumé (0 ou 25)
        synopsis_bonus: Bonus de résumé long (0-10)
        playback: Points de lecture (0 ou 30)
    """

    cover: int
    actors: int
    director: int
    synopsis: int
    synopsis_bonus: int
    playback: int

    @property
    def total(self) -> int:
        """Score total (0-110)."""
        return (
            self.cover
            + self.actors
            + self.director
            + self.synopsis
            + self.synopsis_bonus
            + self.playback
        )

    @property
    def breakdown(self) -> dict[str, int]:
        """
        Retourne le détail des scores sous forme de dictionnaire.

        Utile pour l'affichage lors des rapports de doublons.
        """
        return {
            "cover": self.cover,
            "actors": self.actors,
            "director": self.director,
            "synopsis": self.synopsis,
            "synopsis_bonus": self.synopsis_bonus,
            "playback": self.playback,
            "total": self.total,
        }


def score_cover(cover_image_url: str) -> int:
    """Points de l'affiche."""
    if cover_image_url and len(cover_image_url) > MIN_COVER_LENGTH:
        return POINTS_COVER
    return 0


def score_synopsis(synopsis: str) -> tuple[int, int]:
    """
    Points du résumé et bonus de longueur.

    Returns:
        (points de base, bonus)
    """
    if not synopsis:
        return 0, 0
    length = len(synopsis)
    base = POINTS_SYNOPSIS if length > MIN_SYNOPSIS_LENGTH else 0
    bonus = 0
    if length > LONG_SYNOPSIS_LENGTH:
        bonus = min(MAX_SYNOPSIS_BONUS, length // SYNOPSIS_BONUS_STEP)
    return base, bonus


def has_playable_url(play_sources: PlaySources) -> bool:
    """Vérifie qu'au moins un épisode porte une URL exploitable."""
    return any(
        is_playable_url(episode.url)
        for episodes in play_sources.values()
        for episode in episodes
    )


def calculate_breakdown(record: CanonicalRecord) -> QualityBreakdown:
    """
    Calcule le détail du score qualité d'un enregistrement.

    Args:
        record: Enregistrement à évaluer.

    Returns:
        QualityBreakdown avec les points par critère.
    """
    synopsis_points, synopsis_bonus = score_synopsis(record.synopsis)
    return QualityBreakdown(
        cover=score_cover(record.cover_image_url),
        actors=POINTS_ACTORS if record.actors else 0,
        director=POINTS_DIRECTOR if record.director else 0,
        synopsis=synopsis_points,
        synopsis_bonus=synopsis_bonus,
        playback=POINTS_PLAYBACK if has_playable_url(record.play_sources) else 0,
    )


def score_record(record: CanonicalRecord) -> int:
    """Score qualité total d'un enregistrement (0-110)."""
    return calculate_breakdown(record).total
