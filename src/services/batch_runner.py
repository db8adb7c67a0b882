"""
Execution des lots de fusion.

Un lot regroupe les doublons du stockage principal puis fusionne
sequentiellement une fenetre bornee de groupes. Une erreur sur un groupe
est comptee et journalisee sans interrompre le lot.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from src.services.duplicate_grouper import DuplicateGrouperService
from src.services.merge_resolver import MergeResolver
from src.services.search_sync import SearchIndexSynchronizer, SyncResult

DEFAULT_MERGE_WINDOW = 50


class StoreUnavailableError(Exception):
    """Le stockage principal ne peut pas etre lu au demarrage d'un lot."""

    pass


@dataclass
class BatchSummary:
    """
    Bilan d'un lot de fusion.

    Attributs:
        total: Nombre de membres vus dans les groupes traites
        merged: Nombre de groupes fusionnes
        deleted: Nombre d'enregistrements supprimes
        errors: Nombre de groupes en erreur
        pending: Groupes restant au-dela de la fenetre
        stopped: True si le lot a ete interrompu par stop()
        sync: Resultat de la reconstruction de l'index (si declenchee)
    """

    total: int = 0
    merged: int = 0
    deleted: int = 0
    errors: int = 0
    pending: int = 0
    stopped: bool = False
    sync: Optional[SyncResult] = None


class MergeBatchRunner:
    """
    Orchestrateur des lots de fusion.

    Les groupes sont traites un par un ; stop() n'est pris en compte
    qu'entre deux groupes.
    """

    def __init__(
        self,
        grouper: DuplicateGrouperService,
        resolver: MergeResolver,
        synchronizer: Optional[SearchIndexSynchronizer] = None,
        window: int = DEFAULT_MERGE_WINDOW,
    ) -> None:
        """
        Initialise l'orchestrateur.

        Args:
            grouper: Service de detection des doublons
            resolver: Resolveur de fusion
            synchronizer: Si fourni, reconstruit l'index apres un lot ayant fusionne
            window: Nombre maximum de groupes par lot
        """
        self._grouper = grouper
        self._resolver = resolver
        self._synchronizer = synchronizer
        self._window = window
        self._stop_requested = False

    def stop(self) -> None:
        """Demande l'arret du lot apres le groupe en cours."""
        self._stop_requested = True

    def run(self, window: Optional[int] = None) -> BatchSummary:
        """
        Execute un lot de fusion.

        Args:
            window: Nombre maximum de groupes (defaut: celui du constructeur)

        Returns:
            BatchSummary du lot

        Raises:
            StoreUnavailableError: Si le stockage principal est illisible
        """
        self._stop_requested = False
        limit = window or self._window

        try:
            groups = self._grouper.find_groups()
        except Exception as e:
            logger.error("Stockage principal indisponible, lot annule", error=str(e))
            raise StoreUnavailableError(str(e)) from e

        summary = BatchSummary()
        if not groups:
            logger.info("Aucun doublon a fusionner")
            return summary

        selected = groups[:limit]
        summary.pending = len(groups) - len(selected)
        logger.info(
            "Lot de fusion demarre",
            groups=len(groups),
            window=limit,
        )

        for group in selected:
            if self._stop_requested:
                summary.stopped = True
                summary.pending += len(selected) - (summary.merged + summary.errors)
                logger.warning("Lot de fusion interrompu")
                break

            summary.total += group.size
            try:
                result = self._resolver.resolve(group)
            except Exception:
                summary.errors += 1
                logger.exception(
                    "Echec de fusion du groupe",
                    title=group.identity_key[0],
                    year=group.identity_key[1],
                )
                continue

            summary.merged += 1
            summary.deleted += result.deleted

        logger.info(
            "Lot de fusion termine",
            total=summary.total,
            merged=summary.merged,
            deleted=summary.deleted,
            errors=summary.errors,
        )

        if self._synchronizer is not None and summary.merged > 0:
            summary.sync = self._synchronizer.rebuild()

        return summary
