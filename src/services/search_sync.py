"""
Synchronisation de l'index de recherche et recherche avec repli.

L'index de recherche est un cache derive du stockage principal :
- reconstruction complete periodique (vidage puis remplissage par lots)
- ecriture incrementale a la creation d'un enregistrement
- a la requete, repli sur un parcours direct du stockage principal
  quand l'index ne renvoie rien ou est indisponible

Les erreurs de synchronisation sont journalisees et rapportees,
jamais propagees : le stockage principal fait foi.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from src.core.entities.record import CanonicalRecord, SearchIndexEntry
from src.core.ports.repositories import IRecordRepository, ISearchIndex
from src.utils.helpers import chunked

DEFAULT_REBUILD_BATCH_SIZE = 500

# Les IDs de l'index ne portent pas le score : on en lit davantage avant le tri
INDEX_OVERFETCH = 5


@dataclass
class SyncResult:
    """
    Resultat d'une operation de synchronisation.

    Attributs:
        indexed: Nombre d'entrees ecrites
        batches: Nombre de lots ecrits
        ok: False si l'operation a echoue
        error: Message d'erreur (si applicable)
    """

    indexed: int = 0
    batches: int = 0
    ok: bool = True
    error: Optional[str] = None


class SearchIndexSynchronizer:
    """
    Synchroniseur de l'index de recherche.

    Seul composant autorise a ecrire dans l'index.
    """

    def __init__(
        self,
        record_repo: IRecordRepository,
        search_index: ISearchIndex,
        batch_size: int = DEFAULT_REBUILD_BATCH_SIZE,
    ) -> None:
        """
        Initialise le synchroniseur.

        Args:
            record_repo: Repository du stockage principal
            search_index: Index de recherche
            batch_size: Taille des lots d'insertion lors d'une reconstruction
        """
        self._record_repo = record_repo
        self._search_index = search_index
        self._batch_size = batch_size

    def rebuild(self, batch_size: Optional[int] = None) -> SyncResult:
        """
        Reconstruit entierement l'index a partir des enregistrements valides.

        Args:
            batch_size: Taille de lot (defaut: celle du constructeur)

        Returns:
            SyncResult avec le nombre d'entrees indexees
        """
        size = batch_size or self._batch_size
        result = SyncResult()

        try:
            records = self._record_repo.list_valid()
        except Exception as e:
            logger.error("Lecture du stockage principal impossible", error=str(e))
            return SyncResult(ok=False, error=str(e))

        entries = [SearchIndexEntry.from_record(record) for record in records if record.id]

        try:
            self._search_index.clear()
            for batch in chunked(entries, size):
                result.indexed += self._search_index.insert_many(batch)
                result.batches += 1
        except Exception as e:
            logger.error(
                "Reconstruction de l'index interrompue",
                indexed=result.indexed,
                error=str(e),
            )
            result.ok = False
            result.error = str(e)
            return result

        logger.info(
            "Index de recherche reconstruit",
            indexed=result.indexed,
            batches=result.batches,
        )
        return result

    def index_record(self, record: CanonicalRecord) -> bool:
        """
        Ecriture incrementale d'un enregistrement.

        Returns:
            True si l'entree a ete ecrite, False sinon (erreur journalisee)
        """
        if not record.id or not record.is_valid:
            return False
        try:
            self._search_index.upsert(SearchIndexEntry.from_record(record))
        except Exception as e:
            logger.warning(
                "Ecriture incrementale dans l'index echouee",
                record_id=record.id,
                error=str(e),
            )
            return False
        return True


class SearchService:
    """
    Recherche de titres.

    Interroge l'index, enrichit les resultats depuis le stockage principal,
    et se replie sur une recherche directe par titre si besoin.
    """

    def __init__(
        self, record_repo: IRecordRepository, search_index: ISearchIndex
    ) -> None:
        self._record_repo = record_repo
        self._search_index = search_index

    def _query_index(self, keyword: str, limit: int) -> list[str]:
        try:
            return self._search_index.query(keyword, limit)
        except Exception as e:
            logger.warning("Index de recherche indisponible", error=str(e))
            return []

    def search(self, keyword: str, limit: int = 20) -> list[CanonicalRecord]:
        """
        Recherche des enregistrements par mot-cle.

        Args:
            keyword: Texte recherche (titre, acteur, realisateur)
            limit: Nombre maximum de resultats

        Returns:
            Enregistrements valides, tries par score qualite decroissant
        """
        keyword = keyword.strip()
        if not keyword:
            return []

        ids = self._query_index(keyword, limit * INDEX_OVERFETCH)
        records: list[CanonicalRecord] = []
        if ids:
            # Les IDs obsoletes (perdants de fusion) disparaissent ici
            records = [
                record for record in self._record_repo.get_many(ids) if record.is_valid
            ]

        if not records:
            logger.debug("Repli sur la recherche par titre", keyword=keyword)
            return self._record_repo.search_by_title(keyword, limit)

        records.sort(key=lambda r: (-r.quality_score, r.id or ""))
        return records[:limit]
