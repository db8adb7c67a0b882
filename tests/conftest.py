"""
Fixtures pytest partagees pour les tests VodAgg.

Ce module contient les fixtures communes utilisees dans les tests:
- Bases SQLite en memoire (stockage principal et index de recherche)
- Repositories SQLModel branches sur ces bases
- Fabrique d'enregistrements canoniques
- Settings de test avec chemins temporaires
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator

import pytest
from sqlmodel import Session, create_engine

from src.config import ProviderSettings, Settings
from src.core.entities.record import CanonicalRecord
from src.core.value_objects.aggregation_config import AggregationConfig
from src.core.value_objects.playback import Episode
from src.infrastructure.persistence.database import (
    create_record_tables,
    create_search_tables,
)
from src.infrastructure.persistence.repositories import (
    SQLModelRecordRepository,
    SQLModelSearchIndex,
)
from src.services.quality_scorer import score_record
from src.utils.constants import DEFAULT_CATEGORIES


@pytest.fixture
def record_session() -> Iterator[Session]:
    """Session sur un stockage principal SQLite en memoire."""
    engine = create_engine("sqlite:///:memory:")
    create_record_tables(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture
def search_session() -> Iterator[Session]:
    """Session sur un index de recherche SQLite en memoire (base distincte)."""
    engine = create_engine("sqlite:///:memory:")
    create_search_tables(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture
def record_repo(record_session: Session) -> SQLModelRecordRepository:
    return SQLModelRecordRepository(record_session)


@pytest.fixture
def search_index(search_session: Session) -> SQLModelSearchIndex:
    return SQLModelSearchIndex(search_session)


@pytest.fixture
def aggregation_config() -> AggregationConfig:
    """Configuration avec deux stations de priorites differentes."""
    return AggregationConfig(
        categories=dict(DEFAULT_CATEGORIES),
        provider_priorities={"station_a": 80, "station_b": 40},
    )


@pytest.fixture
def make_record() -> Callable[..., CanonicalRecord]:
    """
    Fabrique d'enregistrements canoniques.

    Par defaut l'enregistrement obtient 100 points (pas de bonus de resume) ; passer des champs
    vides pour degrader le score.
    """

    def _make(
        id: str = "r1",
        title: str = "流浪地球",
        release_year: int | None = 2019,
        play_sources: dict | None = None,
        providers: set[str] | None = None,
        **overrides,
    ) -> CanonicalRecord:
        values = dict(
            id=id,
            title=title,
            release_year=release_year,
            area="中国大陆",
            actors="吴京,屈楚萧",
            director="郭帆",
            writer="龚格尔",
            synopsis="太阳即将毁灭，人类在地球表面建造出巨大的推进器，寻找新的家园。" * 2,
            cover_image_url="https://img.example.com/cover.jpg",
            category="电影",
            play_sources=(
                play_sources
                if play_sources is not None
                else {"station_a": [Episode("HD", "https://a.example.com/1.m3u8")]}
            ),
            contributing_providers=providers if providers is not None else {"station_a"},
            provider_priority=50,
            created_at=datetime(2024, 1, 1),
            updated_at=datetime(2024, 1, 1),
        )
        values.update(overrides)
        record = CanonicalRecord(**values)
        if "quality_score" not in overrides:
            record.quality_score = score_record(record)
        return record

    return _make


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec bases et logs temporaires.

    Utilise tmp_path de pytest pour isoler chaque test.
    """
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'vodagg.db'}",
        search_database_url=f"sqlite:///{tmp_path / 'vodagg_search.db'}",
        log_file=tmp_path / "logs" / "vodagg.log",
        providers=[
            ProviderSettings(name="station_a", api_url="https://a.example.com/api.php/provide/vod/", priority=80),
            ProviderSettings(name="station_b", api_url="https://b.example.com/api.php/provide/vod/", priority=40, enabled=False),
        ],
    )
