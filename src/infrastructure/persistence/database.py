"""
Configuration des bases de donnees SQLite pour VodAgg.

Ce module fournit :
- Engine du stockage principal (enregistrements canoniques)
- Engine du stockage de recherche (base separee)
- Session factories avec context manager
- Fonction d'initialisation des tables

Les bases sont configurees via VODAGG_DATABASE_URL (defaut: sqlite:///data/vodagg.db)
et VODAGG_SEARCH_DATABASE_URL (defaut: sqlite:///data/vodagg_search.db).
Les deux stockages ne partagent jamais de transaction.
"""

from collections.abc import Generator
from pathlib import Path
from typing import Optional

from sqlalchemy import Engine, text
from sqlmodel import Session, SQLModel, create_engine

# Engines globaux - initialises lors du premier appel
_engine: Optional[Engine] = None
_search_engine: Optional[Engine] = None


def create_sqlite_engine(db_url: str) -> Engine:
    """
    Cree un engine SQLite.

    Cree le repertoire parent si l'URL designe un fichier.
    """
    if db_url.startswith("sqlite:///") and not db_url.startswith("sqlite:///:memory:"):
        db_path = Path(db_url.replace("sqlite:///", ""))
        db_path.parent.mkdir(exist_ok=True, parents=True)

    return create_engine(
        db_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )


def get_engine() -> Engine:
    """
    Retourne l'engine du stockage principal, en le creant si necessaire.

    Utilise la configuration de l'application pour le chemin de la BDD.
    """
    global _engine
    if _engine is None:
        from src.config import Settings
        _engine = create_sqlite_engine(Settings().database_url)
    return _engine


def get_search_engine() -> Engine:
    """Retourne l'engine du stockage de recherche, en le creant si necessaire."""
    global _search_engine
    if _search_engine is None:
        from src.config import Settings
        _search_engine = create_sqlite_engine(Settings().search_database_url)
    return _search_engine


def get_session() -> Generator[Session, None, None]:
    """
    Generateur de session sur le stockage principal.

    Utilisation avec next() :
        session = next(get_session())

    Yields:
        Session SQLModel connectee a l'engine principal
    """
    with Session(get_engine()) as session:
        yield session


def get_search_session() -> Generator[Session, None, None]:
    """Generateur de session sur le stockage de recherche."""
    with Session(get_search_engine()) as session:
        yield session


def create_record_tables(engine: Engine) -> None:
    """Cree les tables du stockage principal sur un engine donne."""
    from src.infrastructure.persistence.models import RecordModel

    SQLModel.metadata.create_all(engine, tables=[RecordModel.__table__])
    migrate_record_tables(engine)


def migrate_record_tables(engine: Engine) -> None:
    """
    Ajoute les colonnes manquantes aux tables existantes.

    create_all() ne modifie pas une table deja presente.
    """
    with engine.connect() as conn:
        result = conn.execute(text("PRAGMA table_info(records)"))
        columns = [row[1] for row in result.fetchall()]

        if "last_checked_at" not in columns:
            conn.execute(text("ALTER TABLE records ADD COLUMN last_checked_at DATETIME"))
            conn.execute(
                text(
                    "CREATE INDEX IF NOT EXISTS ix_records_last_checked_at "
                    "ON records (last_checked_at)"
                )
            )
            conn.commit()


def create_search_tables(engine: Engine) -> None:
    """Cree les tables du stockage de recherche sur un engine donne."""
    from src.infrastructure.persistence.models import SearchEntryModel

    SQLModel.metadata.create_all(engine, tables=[SearchEntryModel.__table__])


def init_db() -> None:
    """
    Initialise les deux bases de donnees en creant leurs tables.

    Chaque table n'est creee que dans sa propre base.
    Doit etre appelee une fois au demarrage de l'application.
    """
    create_record_tables(get_engine())
    create_search_tables(get_search_engine())
