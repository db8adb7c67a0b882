"""
Entites d'agregation des titres.

- CanonicalRecord : representation unique et fusionnee d'un titre
- SearchIndexEntry : projection etroite d'un enregistrement pour l'index de recherche
- DuplicateGroup : ensemble ephemere d'enregistrements partageant une cle d'identite
"""

import re
import unicodedata
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from src.core.value_objects.playback import PlaySources

_WHITESPACE_RE = re.compile(r"\s+")

# Cle d'identite : (titre normalise, annee de sortie)
IdentityKey = tuple[str, Optional[int]]


def normalize_title(title: str) -> str:
    """
    Normalise un titre pour la comparaison exacte.

    NFKC (pleine chasse -> demi-chasse), espaces reduits, casse ignoree.
    Aucun rapprochement approximatif.
    """
    if not title:
        return ""
    normalized = unicodedata.normalize("NFKC", title)
    normalized = _WHITESPACE_RE.sub(" ", normalized).strip()
    return normalized.casefold()


@dataclass
class CanonicalRecord:
    """
    Enregistrement canonique d'un titre.

    Attributs :
        id : Identifiant opaque, stable une fois attribue
        title : Titre affiche
        release_year : Annee de sortie (None si inconnue)
        area : Pays / region
        actors : Acteurs (liste separee par des virgules)
        director : Realisateur(s)
        writer : Scenariste(s)
        synopsis : Resume
        cover_image_url : URL de l'affiche
        category : Nom de categorie resolu
        play_sources : Sources de lecture normalisees
        contributing_providers : Fournisseurs ayant alimente l'enregistrement
        provider_priority : Priorite max parmi les fournisseurs
        quality_score : Score de completude (0-110)
        is_valid : False si les liens de lecture sont consideres morts
        last_checked_at : Derniere verification des liens (None si jamais verifie)
    """

    id: Optional[str] = None
    title: str = ""
    release_year: Optional[int] = None
    area: str = ""
    actors: str = ""
    director: str = ""
    writer: str = ""
    synopsis: str = ""
    cover_image_url: str = ""
    category: str = ""
    play_sources: PlaySources = field(default_factory=dict)
    contributing_providers: set[str] = field(default_factory=set)
    provider_priority: int = 0
    quality_score: int = 0
    is_valid: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_checked_at: Optional[datetime] = None

    @property
    def identity_key(self) -> IdentityKey:
        """Cle utilisee pour la detection des doublons."""
        return (normalize_title(self.title), self.release_year)


@dataclass(frozen=True)
class SearchIndexEntry:
    """Entree de l'index de recherche, derivee d'un CanonicalRecord."""

    id: str
    title: str
    actors: str = ""
    director: str = ""
    synopsis: str = ""

    @classmethod
    def from_record(cls, record: CanonicalRecord) -> "SearchIndexEntry":
        """Projette un enregistrement canonique vers une entree d'index."""
        if not record.id:
            raise ValueError("Un enregistrement sans id ne peut pas etre indexe")
        return cls(
            id=record.id,
            title=record.title,
            actors=record.actors,
            director=record.director,
            synopsis=record.synopsis,
        )


@dataclass
class DuplicateGroup:
    """
    Groupe de doublons calcule pendant un lot de fusion.

    Jamais persiste.
    """

    identity_key: IdentityKey
    members: list[CanonicalRecord]

    @property
    def size(self) -> int:
        return len(self.members)
