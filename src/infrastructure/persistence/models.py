"""
Modeles SQLModel pour les bases de donnees VodAgg.

Ces modeles representent les tables des bases SQLite.
Ils sont distincts des entites de domaine (dataclass dans core/entities/)
selon l'architecture hexagonale.

Tables:
- records: Enregistrements canoniques (stockage principal)
- search_entries: Index de recherche (stockage secondaire, base separee)

Les champs JSON (*_json) permettent de stocker les sources de lecture
et les fournisseurs de maniere serialisee dans SQLite.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Horodatage UTC naif (SQLite ne conserve pas le fuseau)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class RecordModel(SQLModel, table=True):
    """
    Modele representant un enregistrement canonique.

    title_key contient le titre normalise et sert, avec release_year,
    de cle d'identite pour la detection des doublons.
    """

    __tablename__ = "records"

    id: str = Field(primary_key=True)
    title: str = Field(index=True)
    title_key: str = Field(index=True)
    release_year: int | None = Field(default=None, index=True)
    area: str = ""
    actors: str = ""
    director: str = ""
    writer: str = ""
    synopsis: str = ""
    cover_image_url: str = ""
    category: str = Field(default="", index=True)
    play_sources_json: str | None = None  # JSON: {"label": [{"name", "url"}]}
    providers_json: str | None = None  # JSON: ["station_a", "station_b"]
    provider_priority: int = 0
    quality_score: int = Field(default=0, index=True)
    is_valid: bool = Field(default=True, index=True)
    created_at: datetime | None = Field(default_factory=utcnow, index=True)
    updated_at: datetime | None = Field(default_factory=utcnow, index=True)
    last_checked_at: datetime | None = Field(default=None, index=True)

    @property
    def providers(self) -> list[str]:
        """Retourne les fournisseurs deserialises."""
        if self.providers_json:
            return json.loads(self.providers_json)
        return []

    @providers.setter
    def providers(self, value: list[str]) -> None:
        """Serialise les fournisseurs en JSON (tries pour un stockage stable)."""
        self.providers_json = json.dumps(sorted(value), ensure_ascii=False)


class SearchEntryModel(SQLModel, table=True):
    """
    Modele representant une entree de l'index de recherche.

    Stocke dans une base distincte ; aucune cle etrangere vers records.
    """

    __tablename__ = "search_entries"

    id: str = Field(primary_key=True)
    title: str = Field(index=True)
    actors: str = ""
    director: str = ""
    synopsis: str = ""
