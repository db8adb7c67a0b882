"""
Tests unitaires pour SQLModelRecordRepository.

Utilise un stockage SQLite en memoire (fixture record_repo).
"""

import json
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from src.core.value_objects.playback import Episode
from src.infrastructure.persistence.models import RecordModel


class TestSaveAndRead:
    """Tests de sauvegarde et relecture."""

    def test_save_and_get(self, record_repo, make_record) -> None:
        saved = record_repo.save(make_record(id="a", providers={"station_b", "station_a"}))

        loaded = record_repo.get_by_id("a")
        assert loaded is not None
        assert loaded.title == saved.title
        assert loaded.contributing_providers == {"station_a", "station_b"}
        assert loaded.play_sources == {
            "station_a": [Episode("HD", "https://a.example.com/1.m3u8")]
        }

    def test_save_without_id_generates_one(self, record_repo, make_record) -> None:
        saved = record_repo.save(make_record(id=None))
        assert saved.id
        assert record_repo.get_by_id(saved.id) is not None

    def test_save_updates_existing(self, record_repo, make_record) -> None:
        record_repo.save(make_record(id="a"))
        record_repo.save(make_record(id="a", director="张艺谋"))
        assert len(record_repo.list_all()) == 1
        assert record_repo.get_by_id("a").director == "张艺谋"

    def test_created_at_is_preserved(self, record_repo, make_record) -> None:
        first = record_repo.save(make_record(id="a"))
        second = record_repo.save(make_record(id="a", title="Autre"))
        assert second.created_at == first.created_at

    def test_get_missing(self, record_repo) -> None:
        assert record_repo.get_by_id("absent") is None

    def test_get_many_keeps_requested_order(self, record_repo, make_record) -> None:
        for rid in ("a", "b", "c"):
            record_repo.save(make_record(id=rid))
        assert [r.id for r in record_repo.get_many(["c", "absent", "a"])] == ["c", "a"]
        assert record_repo.get_many([]) == []

    def test_legacy_raw_playback_is_converted(self, record_repo, record_session) -> None:
        """Un champ historique "ep$url" est relu sous forme structuree."""
        record_session.add(
            RecordModel(
                id="old",
                title="Ancien",
                title_key="ancien",
                play_sources_json=json.dumps({"station_a": "1$http://a.com/1#2$ftp://bad"}),
            )
        )
        record_session.commit()

        record = record_repo.get_by_id("old")

        assert record.play_sources == {"station_a": [Episode("1", "https://a.com/1")]}


class TestIdentityQueries:
    """Tests des recherches par cle d'identite."""

    def test_find_by_identity(self, record_repo, make_record) -> None:
        record_repo.save(make_record(id="low", actors=""))
        record_repo.save(make_record(id="high"))
        found = record_repo.find_by_identity("流浪地球", 2019)
        assert found.id == "high"

    def test_find_by_identity_unknown_year(self, record_repo, make_record) -> None:
        record_repo.save(make_record(id="dated"))
        assert record_repo.find_by_identity("流浪地球", None) is None
        record_repo.save(make_record(id="undated", release_year=None))
        assert record_repo.find_by_identity("流浪地球", None).id == "undated"

    def test_find_without_year(self, record_repo, make_record) -> None:
        record_repo.save(make_record(id="dated"))
        assert record_repo.find_without_year("流浪地球") is None
        record_repo.save(make_record(id="undated", release_year=None))
        assert record_repo.find_without_year("流浪地球").id == "undated"

    def test_list_valid(self, record_repo, make_record) -> None:
        record_repo.save(make_record(id="a"))
        record_repo.save(make_record(id="b", is_valid=False))
        assert [r.id for r in record_repo.list_valid()] == ["a"]

    def test_search_by_title(self, record_repo, make_record) -> None:
        record_repo.save(make_record(id="a", title="流浪地球"))
        record_repo.save(make_record(id="b", title="流浪地球2", actors=""))
        record_repo.save(make_record(id="c", title="流浪地球3", is_valid=False))
        assert [r.id for r in record_repo.search_by_title("流浪")] == ["a", "b"]
        assert len(record_repo.search_by_title("流浪", limit=1)) == 1


class TestMergeAndDelete:
    """Tests de apply_merge et delete_many."""

    def test_apply_merge(self, record_repo, make_record) -> None:
        for rid in ("a", "b", "c"):
            record_repo.save(make_record(id=rid))
        survivor = make_record(id="a", providers={"station_a", "station_b"})

        deleted = record_repo.apply_merge(survivor, ["b", "c", "a"])

        assert deleted == 2
        remaining = record_repo.list_all()
        assert [r.id for r in remaining] == ["a"]
        assert remaining[0].contributing_providers == {"station_a", "station_b"}

    def test_apply_merge_rolls_back_on_error(self, record_repo, record_session, make_record) -> None:
        """Une erreur au commit n'applique ni la mise a jour ni les suppressions."""
        record_repo.save(make_record(id="a"))
        record_repo.save(make_record(id="b"))

        with patch.object(
            record_session,
            "commit",
            side_effect=OperationalError("COMMIT", {}, Exception("locked")),
        ):
            with pytest.raises(OperationalError):
                record_repo.apply_merge(make_record(id="a", director="X"), ["b"])

        assert {r.id for r in record_repo.list_all()} == {"a", "b"}
        assert record_repo.get_by_id("a").director == "郭帆"

    def test_delete_many(self, record_repo, make_record) -> None:
        record_repo.save(make_record(id="a"))
        record_repo.save(make_record(id="b"))
        assert record_repo.delete_many(["a", "absent"]) == 1
        assert record_repo.delete_many([]) == 0
        assert [r.id for r in record_repo.list_all()] == ["b"]


class TestLinkCheckQueries:
    """Tests de list_for_check et mark_checked."""

    NOW = datetime(2024, 6, 15, 12, 0, 0)

    def test_list_for_check_oldest_first(self, record_repo, make_record) -> None:
        record_repo.save(make_record(id="recent", last_checked_at=self.NOW - timedelta(days=1)))
        record_repo.save(make_record(id="old", last_checked_at=self.NOW - timedelta(days=10)))
        record_repo.save(make_record(id="older", last_checked_at=self.NOW - timedelta(days=30)))
        record_repo.save(make_record(id="never"))
        record_repo.save(make_record(id="dead", is_valid=False))

        records = record_repo.list_for_check(self.NOW - timedelta(days=7), limit=10)

        assert [r.id for r in records] == ["never", "older", "old"]
        assert [r.id for r in record_repo.list_for_check(self.NOW, limit=1)] == ["never"]

    def test_mark_checked_keeps_updated_at(self, record_repo, make_record) -> None:
        saved = record_repo.save(make_record(id="a"))

        assert record_repo.mark_checked("a", False, self.NOW)

        record = record_repo.get_by_id("a")
        assert record.is_valid is False
        assert record.last_checked_at == self.NOW
        assert record.updated_at == saved.updated_at

    def test_mark_checked_unknown_id(self, record_repo) -> None:
        assert record_repo.mark_checked("absent", True, self.NOW) is False

    def test_save_keeps_last_check(self, record_repo, make_record) -> None:
        """Une sauvegarde sans date de verification ne l'efface pas."""
        record_repo.save(make_record(id="a"))
        record_repo.mark_checked("a", True, self.NOW)

        record_repo.save(make_record(id="a", director="X"))

        assert record_repo.get_by_id("a").last_checked_at == self.NOW
