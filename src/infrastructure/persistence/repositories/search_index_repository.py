"""
Implementation SQLModel de l'index de recherche.

Implemente l'interface ISearchIndex sur une base SQLite distincte du
stockage principal. La recherche est une correspondance de sous-chaine
sur le titre, les acteurs et le realisateur.
"""

from sqlalchemy import case, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from src.core.entities.record import SearchIndexEntry
from src.core.ports.repositories import ISearchIndex
from src.infrastructure.persistence.models import SearchEntryModel


class SQLModelSearchIndex(ISearchIndex):
    """
    Index de recherche SQLModel.

    Cache derive des enregistrements canoniques, reconstructible a tout moment.
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise l'index avec une session SQLModel.

        Args :
            session : Session SQLModel active sur la base de recherche
        """
        self._session = session

    @staticmethod
    def _to_model(entry: SearchIndexEntry) -> SearchEntryModel:
        return SearchEntryModel(
            id=entry.id,
            title=entry.title,
            actors=entry.actors,
            director=entry.director,
            synopsis=entry.synopsis,
        )

    def clear(self) -> None:
        """Vide l'index."""
        try:
            for model in self._session.exec(select(SearchEntryModel)).all():
                self._session.delete(model)
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise

    def insert_many(self, entries: list[SearchIndexEntry]) -> int:
        """Insere un lot d'entrees en un seul commit."""
        if not entries:
            return 0
        try:
            for entry in entries:
                self._session.merge(self._to_model(entry))
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise
        return len(entries)

    def upsert(self, entry: SearchIndexEntry) -> None:
        """Insere ou remplace une entree."""
        try:
            self._session.merge(self._to_model(entry))
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise

    def query(self, text: str, limit: int = 20) -> list[str]:
        """
        Recherche par sous-chaine sur le titre, les acteurs et le realisateur.

        Les correspondances sur le titre passent avant les autres.
        """
        title_match = SearchEntryModel.title.contains(text)
        statement = (
            select(SearchEntryModel.id)
            .where(
                or_(
                    title_match,
                    SearchEntryModel.actors.contains(text),
                    SearchEntryModel.director.contains(text),
                )
            )
            .order_by(case((title_match, 0), else_=1), SearchEntryModel.id)
            .limit(limit)
        )
        return list(self._session.exec(statement).all())

    def count(self) -> int:
        """Nombre d'entrees dans l'index."""
        statement = select(func.count()).select_from(SearchEntryModel)
        return self._session.exec(statement).one()
