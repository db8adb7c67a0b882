"""
Service d'ingestion des titres des stations.

Transforme les ProviderItem en enregistrements canoniques :
- nettoyage des champs (HTML, region, affiche)
- resolution de la categorie
- normalisation des sources de lecture
- creation ou rafraichissement de l'enregistrement correspondant
- ecriture incrementale dans l'index de recherche a la creation

Une erreur sur un titre est comptee et n'interrompt pas le lot.
"""

import hashlib
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from src.core.entities.record import CanonicalRecord, normalize_title
from src.core.ports.api_clients import IProviderClient, ProviderItem
from src.core.ports.repositories import IRecordRepository
from src.core.value_objects.aggregation_config import AggregationConfig
from src.services.play_source_normalizer import (
    normalize_play_sources,
    split_provider_routes,
)
from src.services.quality_scorer import score_record
from src.services.search_sync import SearchIndexSynchronizer
from src.utils.constants import DEFAULT_PROVIDER_PRIORITY
from src.utils.helpers import clean_title, first_name, parse_year
from src.utils.text_cleaner import clean_image_url, normalize_area, strip_html

# Champs descriptifs completes lors d'un rafraichissement s'ils sont vides
_FILLABLE_FIELDS = (
    "area",
    "actors",
    "director",
    "writer",
    "synopsis",
    "cover_image_url",
    "category",
)


@dataclass
class IngestResult:
    """
    Bilan d'une ingestion.

    Attributs:
        new: Enregistrements crees
        updated: Enregistrements rafraichis
        skipped: Titres ignores (sans titre)
        errors: Titres en erreur
    """

    new: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0

    @property
    def processed(self) -> int:
        return self.new + self.updated

    def add(self, other: "IngestResult") -> None:
        self.new += other.new
        self.updated += other.updated
        self.skipped += other.skipped
        self.errors += other.errors


def generate_record_id(
    title: str, release_year: Optional[int], area: str, director: str
) -> str:
    """
    ID deterministe d'un enregistrement.

    Hash du titre normalise, de l'annee, de la region et du premier realisateur.
    """
    key = "-".join(
        [
            normalize_title(title),
            str(release_year or ""),
            area,
            first_name(director),
        ]
    )
    return hashlib.sha1(key.encode("utf-8")).hexdigest()[:16]


class IngestionService:
    """
    Service d'ingestion des stations.

    Seul point d'entree des donnees amont dans le stockage principal.
    """

    def __init__(
        self,
        record_repo: IRecordRepository,
        config: AggregationConfig,
        synchronizer: Optional[SearchIndexSynchronizer] = None,
    ) -> None:
        """
        Initialise le service.

        Args:
            record_repo: Repository du stockage principal
            config: Tables de categories et de priorites
            synchronizer: Si fourni, indexe chaque enregistrement cree
        """
        self._record_repo = record_repo
        self._config = config
        self._synchronizer = synchronizer

    def build_record(self, provider: str, item: ProviderItem) -> Optional[CanonicalRecord]:
        """
        Construit un enregistrement candidat a partir d'un titre amont.

        Returns:
            CanonicalRecord sans ID, ou None si le titre est vide
        """
        title = clean_title(item.name)
        if not title:
            return None

        raw_sources = split_provider_routes(provider, item.play_url, item.play_from)
        record = CanonicalRecord(
            title=title,
            release_year=parse_year(item.year),
            area=normalize_area(item.area),
            actors=clean_title(item.actor),
            director=clean_title(item.director),
            writer=clean_title(item.writer),
            synopsis=strip_html(item.content),
            cover_image_url=clean_image_url(item.pic),
            category=self._config.category_name(item.type_id, item.type_name),
            play_sources=normalize_play_sources(raw_sources),
            contributing_providers={provider},
            provider_priority=self._config.priority_of(
                provider, DEFAULT_PROVIDER_PRIORITY
            ),
        )
        record.quality_score = score_record(record)
        return record

    def _find_existing(self, candidate: CanonicalRecord) -> Optional[CanonicalRecord]:
        title_key = normalize_title(candidate.title)
        existing = self._record_repo.find_by_identity(title_key, candidate.release_year)
        if existing is not None:
            return existing

        if candidate.release_year is not None:
            # Titre deja connu sans annee : on lui attribue celle-ci
            yearless = self._record_repo.find_without_year(title_key)
            if yearless is not None:
                yearless.release_year = candidate.release_year
                return yearless
        return None

    @staticmethod
    def _refresh(existing: CanonicalRecord, candidate: CanonicalRecord) -> CanonicalRecord:
        """Replie un candidat dans un enregistrement existant."""
        existing.play_sources = {**existing.play_sources, **candidate.play_sources}
        existing.contributing_providers |= candidate.contributing_providers
        existing.provider_priority = max(
            existing.provider_priority, candidate.provider_priority
        )
        for attribute in _FILLABLE_FIELDS:
            if not getattr(existing, attribute):
                setattr(existing, attribute, getattr(candidate, attribute))
        if candidate.play_sources:
            existing.is_valid = True
        existing.quality_score = score_record(existing)
        return existing

    def ingest_item(self, provider: str, item: ProviderItem) -> str:
        """
        Ingere un titre.

        Returns:
            "new", "updated" ou "skipped"
        """
        candidate = self.build_record(provider, item)
        if candidate is None:
            return "skipped"

        existing = self._find_existing(candidate)
        if existing is not None:
            self._record_repo.save(self._refresh(existing, candidate))
            return "updated"

        candidate.id = generate_record_id(
            candidate.title, candidate.release_year, candidate.area, candidate.director
        )
        saved = self._record_repo.save(candidate)
        if self._synchronizer is not None:
            self._synchronizer.index_record(saved)
        return "new"

    def ingest(self, provider: str, items: list[ProviderItem]) -> IngestResult:
        """
        Ingere un lot de titres d'une station.

        Args:
            provider: Nom de la station
            items: Titres recus

        Returns:
            IngestResult du lot
        """
        result = IngestResult()
        for item in items:
            try:
                outcome = self.ingest_item(provider, item)
            except Exception as e:
                result.errors += 1
                logger.warning(
                    "Echec d'ingestion",
                    provider=provider,
                    vod_id=item.vod_id,
                    error=str(e),
                )
                continue

            if outcome == "new":
                result.new += 1
            elif outcome == "updated":
                result.updated += 1
            else:
                result.skipped += 1
        return result

    async def collect(
        self,
        client: IProviderClient,
        max_pages: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> IngestResult:
        """
        Collecte une station page par page et ingere les titres.

        Les titres de la liste sans chaine de lecture sont completes par
        l'appel de detail. Une page en echec est sautee sans raccourcir
        la collecte : le nombre de pages retenu est le plus grand annonce.

        Args:
            client: Client de la station
            max_pages: Nombre maximum de pages (defaut: toutes)
            category_id: Restreint a une categorie amont
        """
        total = IngestResult()
        page_number = 1
        known_pages = 1
        page_count = 1

        while page_number <= page_count:
            page = await client.fetch_page(page_number, category_id)
            known_pages = max(known_pages, page.page_count)
            page_count = known_pages
            if max_pages is not None:
                page_count = min(page_count, max_pages)

            items = page.items
            missing = [item.vod_id for item in items if not item.play_url]
            if missing:
                details = {
                    detail.vod_id: detail
                    for detail in await client.fetch_details(missing)
                }
                items = [details.get(item.vod_id, item) for item in items]

            result = self.ingest(client.name, items)
            total.add(result)
            logger.info(
                "Page collectee",
                provider=client.name,
                page=page_number,
                pages=page_count,
                new=result.new,
                updated=result.updated,
            )
            page_number += 1

        return total
