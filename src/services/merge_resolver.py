"""
Service de fusion des doublons.

Fusionne un groupe de doublons en un seul enregistrement :
1. recalcul du score qualite de chaque membre
2. classement (score desc, priorite fournisseur desc, id asc)
3. pour chaque champ descriptif, la valeur valide la plus longue
4. union des sources de lecture par libelle
5. union des fournisseurs, priorite maximale
6. recalcul du score du survivant
7. mise a jour du survivant et suppression des perdants en une seule unite

La fusion est idempotente : relancer sur le meme etat produit le meme
survivant, et un groupe deja fusionne n'existe plus.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from loguru import logger

from src.core.entities.record import CanonicalRecord, DuplicateGroup
from src.core.ports.repositories import IRecordRepository
from src.core.value_objects.aggregation_config import AggregationConfig
from src.core.value_objects.playback import PlaySources
from src.services.quality_scorer import score_record

# Champs descriptifs consolides (attribut -> controle de validite)
_HTTP_PREFIXES = ("http://", "https://")


def _is_valid_cover(value: str) -> bool:
    return value.startswith(_HTTP_PREFIXES)


def _is_non_empty(value: str) -> bool:
    return bool(value)


MERGED_FIELDS: dict[str, Callable[[str], bool]] = {
    "cover_image_url": _is_valid_cover,
    "area": _is_non_empty,
    "actors": _is_non_empty,
    "director": _is_non_empty,
    "writer": _is_non_empty,
    "synopsis": _is_non_empty,
}


@dataclass
class MergeResult:
    """
    Resultat de la fusion d'un groupe.

    Attributs:
        survivor: Enregistrement conserve (mis a jour)
        deleted_ids: IDs des enregistrements supprimes
        deleted: Nombre de suppressions effectives
    """

    survivor: CanonicalRecord
    deleted_ids: list[str] = field(default_factory=list)
    deleted: int = 0

    @property
    def merged(self) -> bool:
        return bool(self.deleted_ids)


def rank_members(members: list[CanonicalRecord]) -> list[CanonicalRecord]:
    """
    Classe les membres d'un groupe, le principal en tete.

    Cle : score desc, priorite desc, id asc (ordre total).
    """
    return sorted(
        members,
        key=lambda r: (-r.quality_score, -r.provider_priority, r.id or ""),
    )


def _pick_longest(ranked: list[CanonicalRecord], attribute: str, is_valid) -> str:
    best = ""
    for member in ranked:
        value = (getattr(member, attribute) or "").strip()
        # Egalite : la valeur du membre le mieux classe est conservee
        if value and is_valid(value) and len(value) > len(best):
            best = value
    return best


def _merge_play_sources(ranked: list[CanonicalRecord]) -> PlaySources:
    """
    Union des sources de lecture par libelle.

    Sur un meme libelle, le membre ecrit le plus recemment l'emporte,
    puis le mieux classe. Pas d'union au niveau des episodes.
    """
    rank_of = {id(member): position for position, member in enumerate(ranked)}

    def freshness(member: CanonicalRecord) -> tuple:
        written = member.updated_at or member.created_at or datetime.min
        return (written, -rank_of[id(member)])

    merged: PlaySources = {}
    winners: dict[str, tuple] = {}
    for member in ranked:
        member_freshness = freshness(member)
        for label, episodes in member.play_sources.items():
            if not episodes:
                continue
            if label not in winners or member_freshness > winners[label]:
                merged[label] = list(episodes)
                winners[label] = member_freshness
    return merged


def _merge_priority(
    ranked: list[CanonicalRecord], providers: set[str], config: AggregationConfig
) -> int:
    priorities = [member.provider_priority for member in ranked]
    priorities.extend(
        config.provider_priorities[provider]
        for provider in providers
        if provider in config.provider_priorities
    )
    return max(priorities) if priorities else 0


def _earliest(values: list[Optional[datetime]]) -> Optional[datetime]:
    present = [value for value in values if value is not None]
    return min(present) if present else None


def consolidate(
    members: list[CanonicalRecord], config: AggregationConfig
) -> tuple[CanonicalRecord, list[str]]:
    """
    Construit le survivant d'un groupe de doublons (fonction pure).

    Args:
        members: Membres du groupe (au moins un)
        config: Tables de priorites des fournisseurs

    Returns:
        Tuple (survivant, IDs des perdants)
    """
    if not members:
        raise ValueError("Un groupe de doublons ne peut pas etre vide")

    for member in members:
        member.quality_score = score_record(member)

    ranked = rank_members(members)
    primary, losers = ranked[0], ranked[1:]

    providers: set[str] = set()
    for member in ranked:
        providers |= member.contributing_providers

    category = primary.category or next(
        (member.category for member in ranked if member.category), ""
    )

    survivor = CanonicalRecord(
        id=primary.id,
        title=primary.title,
        release_year=primary.release_year,
        category=category,
        play_sources=_merge_play_sources(ranked),
        contributing_providers=providers,
        provider_priority=_merge_priority(ranked, providers, config),
        is_valid=any(member.is_valid for member in ranked),
        created_at=_earliest([member.created_at for member in ranked]),
        updated_at=primary.updated_at,
    )
    for attribute, is_valid in MERGED_FIELDS.items():
        setattr(survivor, attribute, _pick_longest(ranked, attribute, is_valid))

    survivor.quality_score = score_record(survivor)

    loser_ids = [loser.id for loser in losers if loser.id and loser.id != primary.id]
    return survivor, loser_ids


class MergeResolver:
    """
    Resolveur de fusion des groupes de doublons.

    Seul composant autorise a supprimer des enregistrements canoniques.
    """

    def __init__(
        self, record_repo: IRecordRepository, config: AggregationConfig
    ) -> None:
        """
        Initialise le resolveur.

        Args:
            record_repo: Repository du stockage principal
            config: Tables de priorites des fournisseurs
        """
        self._record_repo = record_repo
        self._config = config

    def resolve(self, group: DuplicateGroup) -> MergeResult:
        """
        Fusionne un groupe et persiste le resultat.

        Un groupe d'un seul membre est un no-op. Les erreurs de persistance
        sont propagees (le groupe reste intact et sera repris au prochain lot).
        """
        if group.size < 2:
            return MergeResult(survivor=group.members[0])

        survivor, loser_ids = consolidate(group.members, self._config)
        deleted = self._record_repo.apply_merge(survivor, loser_ids)

        logger.info(
            "Groupe fusionne",
            title=survivor.title,
            year=survivor.release_year,
            survivor=survivor.id,
            deleted=deleted,
            score=survivor.quality_score,
        )
        return MergeResult(survivor=survivor, deleted_ids=loser_ids, deleted=deleted)
