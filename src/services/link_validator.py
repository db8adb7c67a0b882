"""
Detection des liens de lecture morts.

Un passage verifie les enregistrements valides les moins recemment
controles : la premiere URL de lecture exploitable est interrogee, et un
enregistrement dont le lien ne repond pas est marque invalide. Il sort alors
de l'index a la prochaine reconstruction et compte dans le taux de validite.

Un enregistrement sans URL exploitable est date sans changer d'etat, pour
ne pas bloquer la file des verifications.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from loguru import logger

from src.core.entities.record import CanonicalRecord
from src.core.ports.api_clients import ILinkChecker
from src.core.ports.repositories import IRecordRepository
from src.services.play_source_normalizer import is_playable_url

DEFAULT_CHECK_LIMIT = 100
DEFAULT_RECHECK_DAYS = 7


@dataclass
class LinkCheckResult:
    """
    Bilan d'un passage de verification.

    Attributs:
        checked: Enregistrements dont le lien a ete interroge
        invalid: Enregistrements marques invalides
        skipped: Enregistrements sans URL exploitable
        errors: Enregistrements en erreur (stockage)
    """

    checked: int = 0
    invalid: int = 0
    skipped: int = 0
    errors: int = 0


def first_play_url(record: CanonicalRecord) -> Optional[str]:
    """Premiere URL de lecture exploitable, dans l'ordre des sources."""
    for episodes in record.play_sources.values():
        for episode in episodes:
            if is_playable_url(episode.url):
                return episode.url
    return None


class LinkValidator:
    """Service de verification des liens de lecture."""

    def __init__(
        self,
        record_repo: IRecordRepository,
        checker: ILinkChecker,
        recheck_days: int = DEFAULT_RECHECK_DAYS,
    ) -> None:
        self._record_repo = record_repo
        self._checker = checker
        self._recheck_after = timedelta(days=recheck_days)

    async def validate(
        self, limit: int = DEFAULT_CHECK_LIMIT, now: Optional[datetime] = None
    ) -> LinkCheckResult:
        """
        Verifie un lot d'enregistrements.

        Args:
            limit: Nombre maximum d'enregistrements verifies
            now: Date de reference (defaut: maintenant, UTC naif)

        Returns:
            LinkCheckResult du passage
        """
        now = now or datetime.now(timezone.utc).replace(tzinfo=None)
        records = self._record_repo.list_for_check(now - self._recheck_after, limit)
        result = LinkCheckResult()

        for record in records:
            url = first_play_url(record)
            alive = True
            if url is None:
                result.skipped += 1
            else:
                alive = await self._checker.is_alive(url)
                result.checked += 1

            try:
                self._record_repo.mark_checked(record.id, alive, now)
            except Exception as e:
                result.errors += 1
                logger.warning(
                    "Echec d'enregistrement de la verification",
                    record_id=record.id,
                    error=str(e),
                )
                continue

            if not alive:
                result.invalid += 1
                logger.info("Lien mort", record_id=record.id, title=record.title, url=url)

        logger.info(
            "Verification des liens terminee",
            checked=result.checked,
            invalid=result.invalid,
            skipped=result.skipped,
            errors=result.errors,
        )
        return result
