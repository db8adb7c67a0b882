"""
Implementation SQLModel du repository des enregistrements canoniques.

Implemente l'interface IRecordRepository pour la persistance dans
le stockage principal (SQLite via SQLModel).
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from src.core.entities.record import CanonicalRecord, normalize_title
from src.core.ports.repositories import IRecordRepository
from src.infrastructure.persistence.models import RecordModel, utcnow
from src.services.play_source_normalizer import (
    ensure_structured,
    serialize_play_sources,
)


class SQLModelRecordRepository(IRecordRepository):
    """
    Repository SQLModel pour les enregistrements canoniques.

    Implemente IRecordRepository avec conversion bidirectionnelle
    entre l'entite CanonicalRecord (domaine) et RecordModel (persistance).
    Les sources de lecture relues passent par ensure_structured, quel que
    soit leur format de stockage historique.
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active sur le stockage principal
        """
        self._session = session

    def _to_entity(self, model: RecordModel) -> CanonicalRecord:
        """Convertit un modele DB en entite domaine."""
        return CanonicalRecord(
            id=model.id,
            title=model.title,
            release_year=model.release_year,
            area=model.area or "",
            actors=model.actors or "",
            director=model.director or "",
            writer=model.writer or "",
            synopsis=model.synopsis or "",
            cover_image_url=model.cover_image_url or "",
            category=model.category or "",
            play_sources=ensure_structured(model.play_sources_json),
            contributing_providers=set(model.providers),
            provider_priority=model.provider_priority,
            quality_score=model.quality_score,
            is_valid=model.is_valid,
            created_at=model.created_at,
            updated_at=model.updated_at,
            last_checked_at=model.last_checked_at,
        )

    def _apply(self, entity: CanonicalRecord, model: RecordModel) -> None:
        """Recopie les champs d'une entite dans un modele DB."""
        model.title = entity.title
        model.title_key = normalize_title(entity.title)
        model.release_year = entity.release_year
        model.area = entity.area
        model.actors = entity.actors
        model.director = entity.director
        model.writer = entity.writer
        model.synopsis = entity.synopsis
        model.cover_image_url = entity.cover_image_url
        model.category = entity.category
        model.play_sources_json = serialize_play_sources(entity.play_sources)
        model.providers = list(entity.contributing_providers)
        model.provider_priority = entity.provider_priority
        model.quality_score = entity.quality_score
        model.is_valid = entity.is_valid
        if entity.last_checked_at is not None:
            model.last_checked_at = entity.last_checked_at
        model.updated_at = utcnow()

    def _stage(self, entity: CanonicalRecord) -> RecordModel:
        """Prepare l'insertion ou la mise a jour d'une entite (sans commit)."""
        existing = self._session.get(RecordModel, entity.id) if entity.id else None
        if existing is None:
            existing = RecordModel(
                id=entity.id or uuid.uuid4().hex[:16],
                title=entity.title,
                title_key="",
                created_at=entity.created_at or utcnow(),
            )
        self._apply(entity, existing)
        self._session.add(existing)
        return existing

    def get_by_id(self, record_id: str) -> Optional[CanonicalRecord]:
        """Recupere un enregistrement par son ID."""
        model = self._session.get(RecordModel, record_id)
        if model:
            return self._to_entity(model)
        return None

    def get_many(self, record_ids: list[str]) -> list[CanonicalRecord]:
        """Recupere plusieurs enregistrements, dans l'ordre des IDs demandes."""
        if not record_ids:
            return []
        statement = select(RecordModel).where(RecordModel.id.in_(record_ids))
        by_id = {model.id: model for model in self._session.exec(statement).all()}
        return [self._to_entity(by_id[rid]) for rid in record_ids if rid in by_id]

    def find_by_identity(
        self, title_key: str, release_year: Optional[int]
    ) -> Optional[CanonicalRecord]:
        """Recupere le meilleur enregistrement (score le plus haut) d'une cle d'identite."""
        statement = select(RecordModel).where(RecordModel.title_key == title_key)
        if release_year is None:
            statement = statement.where(RecordModel.release_year.is_(None))
        else:
            statement = statement.where(RecordModel.release_year == release_year)
        statement = statement.order_by(
            RecordModel.quality_score.desc(), RecordModel.id
        )
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model)
        return None

    def find_without_year(self, title_key: str) -> Optional[CanonicalRecord]:
        """Recupere un enregistrement de meme titre dont l'annee est inconnue."""
        statement = (
            select(RecordModel)
            .where(RecordModel.title_key == title_key)
            .where(RecordModel.release_year.is_(None))
            .order_by(RecordModel.quality_score.desc(), RecordModel.id)
        )
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model)
        return None

    def list_all(self) -> list[CanonicalRecord]:
        """Liste tous les enregistrements."""
        statement = select(RecordModel).order_by(RecordModel.id)
        return [self._to_entity(model) for model in self._session.exec(statement).all()]

    def list_valid(self) -> list[CanonicalRecord]:
        """Liste les enregistrements valides."""
        statement = (
            select(RecordModel)
            .where(RecordModel.is_valid == True)  # noqa: E712
            .order_by(RecordModel.id)
        )
        return [self._to_entity(model) for model in self._session.exec(statement).all()]

    def save(self, record: CanonicalRecord) -> CanonicalRecord:
        """Sauvegarde un enregistrement (insertion ou mise a jour)."""
        try:
            model = self._stage(record)
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise
        self._session.refresh(model)
        return self._to_entity(model)

    def _stage_deletes(self, record_ids: list[str]) -> int:
        if not record_ids:
            return 0
        statement = select(RecordModel).where(RecordModel.id.in_(record_ids))
        models = self._session.exec(statement).all()
        for model in models:
            self._session.delete(model)
        return len(models)

    def apply_merge(self, survivor: CanonicalRecord, loser_ids: list[str]) -> int:
        """
        Met a jour le survivant et supprime les perdants en un seul commit.

        En cas d'erreur, la session est annulee : ni mise a jour ni suppression.
        """
        losers = [rid for rid in loser_ids if rid != survivor.id]
        try:
            self._stage(survivor)
            deleted = self._stage_deletes(losers)
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise
        return deleted

    def delete_many(self, record_ids: list[str]) -> int:
        """Supprime un ensemble d'enregistrements."""
        try:
            deleted = self._stage_deletes(record_ids)
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise
        return deleted

    def search_by_title(self, keyword: str, limit: int = 20) -> list[CanonicalRecord]:
        """Recherche par sous-chaine sur le titre des enregistrements valides."""
        statement = (
            select(RecordModel)
            .where(RecordModel.title.contains(keyword))
            .where(RecordModel.is_valid == True)  # noqa: E712
            .order_by(RecordModel.quality_score.desc(), RecordModel.id)
            .limit(limit)
        )
        return [self._to_entity(model) for model in self._session.exec(statement).all()]

    def list_for_check(self, checked_before: datetime, limit: int) -> list[CanonicalRecord]:
        """
        Liste les enregistrements valides a reverifier, les plus anciens d'abord.

        Les enregistrements jamais verifies passent en premier.
        """
        statement = (
            select(RecordModel)
            .where(RecordModel.is_valid == True)  # noqa: E712
            .where(
                or_(
                    RecordModel.last_checked_at.is_(None),
                    RecordModel.last_checked_at < checked_before,
                )
            )
            .order_by(
                RecordModel.last_checked_at.is_not(None),
                RecordModel.last_checked_at,
                RecordModel.id,
            )
            .limit(limit)
        )
        return [self._to_entity(model) for model in self._session.exec(statement).all()]

    def mark_checked(self, record_id: str, is_valid: bool, checked_at: datetime) -> bool:
        """
        Enregistre le resultat d'une verification des liens.

        Seuls is_valid et last_checked_at changent : updated_at reste celui
        de la derniere modification du contenu.
        """
        try:
            model = self._session.get(RecordModel, record_id)
            if model is None:
                return False
            model.is_valid = is_valid
            model.last_checked_at = checked_at
            self._session.add(model)
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise
        return True
