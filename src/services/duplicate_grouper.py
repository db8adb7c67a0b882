"""
Detection des doublons dans le stockage principal.

Regroupe les enregistrements par cle d'identite (titre normalise, annee)
avec egalite exacte : aucun rapprochement approximatif (fautes de frappe,
romanisations differentes), pour eviter de fusionner des titres distincts.

Le regroupement est en lecture seule.
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

from loguru import logger

from src.core.entities.record import CanonicalRecord, DuplicateGroup, IdentityKey
from src.core.ports.repositories import IRecordRepository


@dataclass
class DuplicateSummary:
    """
    Ligne du rapport des doublons en attente.

    Attributs:
        title: Titre normalise
        release_year: Annee (None si inconnue)
        count: Nombre d'enregistrements
        ids: IDs des enregistrements
        providers: Fournisseurs de l'ensemble du groupe
    """

    title: str
    release_year: int | None
    count: int
    ids: list[str]
    providers: list[str]


def _sort_key(group: DuplicateGroup) -> tuple:
    # Taille decroissante, puis cle pour un ordre deterministe
    title, year = group.identity_key
    return (-group.size, title, year is None, year or 0)


def group_duplicates(records: Iterable[CanonicalRecord]) -> list[DuplicateGroup]:
    """
    Partitionne des enregistrements en groupes de doublons.

    Args:
        records: Enregistrements a regrouper

    Returns:
        Groupes de plus d'un membre, du plus grand au plus petit
    """
    buckets: dict[IdentityKey, list[CanonicalRecord]] = defaultdict(list)
    for record in records:
        buckets[record.identity_key].append(record)

    groups = [
        DuplicateGroup(identity_key=key, members=members)
        for key, members in buckets.items()
        if len(members) > 1
    ]
    groups.sort(key=_sort_key)
    return groups


class DuplicateGrouperService:
    """
    Service de detection des doublons.

    Parcourt l'integralite du stockage principal a chaque appel.
    """

    def __init__(self, record_repo: IRecordRepository) -> None:
        """
        Initialise le service.

        Args:
            record_repo: Repository du stockage principal
        """
        self._record_repo = record_repo

    def find_groups(self) -> list[DuplicateGroup]:
        """
        Calcule les groupes de doublons du stockage.

        Les erreurs de lecture du stockage sont propagees a l'appelant.
        """
        records = self._record_repo.list_all()
        groups = group_duplicates(records)
        logger.debug(
            "Regroupement des doublons termine",
            records=len(records),
            groups=len(groups),
        )
        return groups

    def report(self, limit: int = 100) -> list[DuplicateSummary]:
        """Liste les groupes en attente de fusion sans rien modifier."""
        summaries = []
        for group in self.find_groups()[:limit]:
            title, year = group.identity_key
            providers: set[str] = set()
            for member in group.members:
                providers |= member.contributing_providers
            summaries.append(
                DuplicateSummary(
                    title=title,
                    release_year=year,
                    count=group.size,
                    ids=[member.id for member in group.members if member.id],
                    providers=sorted(providers),
                )
            )
        return summaries
