"""
Interfaces ports pour les repositories.

Interfaces abstraites (ports) définissant les contrats pour la persistance des données.
Les implémentations (adaptateurs) fourniront les mécanismes de stockage concrets
(SQLite via SQLModel, en mémoire pour les tests, etc.).

Deux stockages distincts, jamais couplés transactionnellement :
- IRecordRepository : stockage principal, source de vérité
- ISearchIndex : stockage secondaire dérivé, optimisé pour la recherche
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.core.entities.record import CanonicalRecord, SearchIndexEntry


class IRecordRepository(ABC):
    """
    Interface du stockage principal des enregistrements canoniques.

    Définit les opérations pour persister et récupérer les entités CanonicalRecord.
    """

    @abstractmethod
    def get_by_id(self, record_id: str) -> Optional[CanonicalRecord]:
        """Récupère un enregistrement par son ID."""
        ...

    @abstractmethod
    def get_many(self, record_ids: list[str]) -> list[CanonicalRecord]:
        """Récupère plusieurs enregistrements (les IDs inconnus sont ignorés)."""
        ...

    @abstractmethod
    def find_by_identity(
        self, title_key: str, release_year: Optional[int]
    ) -> Optional[CanonicalRecord]:
        """Récupère le meilleur enregistrement pour une clé d'identité."""
        ...

    @abstractmethod
    def find_without_year(self, title_key: str) -> Optional[CanonicalRecord]:
        """Récupère un enregistrement de même titre sans année de sortie."""
        ...

    @abstractmethod
    def list_all(self) -> list[CanonicalRecord]:
        """Parcours complet du stockage (regroupement, métriques)."""
        ...

    @abstractmethod
    def list_valid(self) -> list[CanonicalRecord]:
        """Liste les enregistrements valides (reconstruction de l'index)."""
        ...

    @abstractmethod
    def save(self, record: CanonicalRecord) -> CanonicalRecord:
        """Sauvegarde un enregistrement (insertion ou mise à jour)."""
        ...

    @abstractmethod
    def apply_merge(self, survivor: CanonicalRecord, loser_ids: list[str]) -> int:
        """
        Met à jour le survivant et supprime les perdants en une seule unité.

        Retourne le nombre d'enregistrements supprimés.
        """
        ...

    @abstractmethod
    def delete_many(self, record_ids: list[str]) -> int:
        """Supprime un ensemble d'enregistrements. Retourne le nombre supprimé."""
        ...

    @abstractmethod
    def search_by_title(self, keyword: str, limit: int = 20) -> list[CanonicalRecord]:
        """Recherche directe par sous-chaîne sur le titre (repli de recherche)."""
        ...

    @abstractmethod
    def list_for_check(self, checked_before: datetime, limit: int) -> list[CanonicalRecord]:
        """Enregistrements valides non vérifiés depuis checked_before, plus anciens d'abord."""
        ...

    @abstractmethod
    def mark_checked(self, record_id: str, is_valid: bool, checked_at: datetime) -> bool:
        """Enregistre le résultat d'une vérification des liens de lecture."""
        ...


class ISearchIndex(ABC):
    """
    Interface du stockage de recherche.

    Cache dérivé des enregistrements canoniques : en cas de conflit,
    le stockage principal fait foi.
    """

    @abstractmethod
    def clear(self) -> None:
        """Vide l'index."""
        ...

    @abstractmethod
    def insert_many(self, entries: list[SearchIndexEntry]) -> int:
        """Insère un lot d'entrées. Retourne le nombre inséré."""
        ...

    @abstractmethod
    def upsert(self, entry: SearchIndexEntry) -> None:
        """Insère ou remplace une entrée."""
        ...

    @abstractmethod
    def query(self, text: str, limit: int = 20) -> list[str]:
        """Recherche par sous-chaîne. Retourne les IDs d'enregistrements."""
        ...

    @abstractmethod
    def count(self) -> int:
        """Nombre d'entrées dans l'index."""
        ...
