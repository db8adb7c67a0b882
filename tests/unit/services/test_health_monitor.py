"""
Tests unitaires pour le moniteur de sante.
"""

from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from src.core.ports.repositories import IRecordRepository
from src.services.health_monitor import (
    HealthMonitor,
    HealthStatus,
    HealthThresholds,
    MetricsSnapshot,
    build_snapshot,
    check_health,
    format_report,
)

NOW = datetime(2024, 6, 15, 12, 0, 0)


class TestBuildSnapshot:
    """Tests pour build_snapshot."""

    def test_volumes_and_buckets(self, make_record) -> None:
        records = [
            make_record(id="a", quality_score=95),
            make_record(id="b", quality_score=70),
            make_record(id="c", quality_score=45, is_valid=False),
            make_record(id="d", quality_score=10),
        ]
        snapshot = build_snapshot(records, now=NOW)

        assert (snapshot.total, snapshot.valid, snapshot.invalid) == (4, 3, 1)
        assert (snapshot.excellent, snapshot.good, snapshot.fair, snapshot.poor) == (1, 1, 1, 1)
        assert snapshot.average_score == 55
        assert snapshot.valid_rate == 75.0

    def test_freshness_counters(self, make_record) -> None:
        records = [
            make_record(id="new", created_at=NOW - timedelta(hours=2), updated_at=NOW),
            make_record(
                id="touched",
                created_at=NOW - timedelta(days=30),
                updated_at=NOW - timedelta(hours=3),
            ),
            make_record(id="week", created_at=NOW - timedelta(days=3), updated_at=NOW - timedelta(days=3)),
            make_record(id="old", created_at=NOW - timedelta(days=90), updated_at=NOW - timedelta(days=90)),
        ]
        snapshot = build_snapshot(records, now=NOW)

        assert snapshot.new_in_period == 1
        # Un enregistrement cree dans la periode n'est pas aussi compte comme mis a jour
        assert snapshot.updated_in_period == 1
        assert snapshot.new_this_week == 2

    def test_distributions(self, make_record) -> None:
        records = [
            make_record(id="a", providers={"station_a", "station_b"}),
            make_record(id="b", providers={"station_a"}, category="电视剧"),
            make_record(id="c", providers={"station_b"}, category=""),
        ]
        snapshot = build_snapshot(records, now=NOW)

        assert snapshot.by_provider == {"station_a": 2, "station_b": 2}
        assert snapshot.by_category["电影"] == 1
        assert snapshot.by_category["电视剧"] == 1
        assert snapshot.by_category["inconnue"] == 1

    def test_empty_store(self) -> None:
        snapshot = build_snapshot([], now=NOW)
        assert snapshot.total == 0
        assert snapshot.average_score == 0
        assert snapshot.valid_rate == 0.0

    def test_to_dict_is_serializable(self, make_record) -> None:
        data = build_snapshot([make_record()], now=NOW).to_dict()
        assert data["generated_at"] == NOW.isoformat()
        assert data["valid_rate"] == 100.0


class TestCheckHealth:
    """Tests pour check_health."""

    def _snapshot(self, **values) -> MetricsSnapshot:
        defaults = dict(total=100, valid=95, invalid=5, average_score=85, new_in_period=10)
        defaults.update(values)
        return MetricsSnapshot(**defaults)

    def test_healthy(self) -> None:
        report = check_health(self._snapshot())
        assert report.status == HealthStatus.HEALTHY
        assert report.is_healthy
        assert report.issues == []

    @pytest.mark.parametrize(
        "valid, expected",
        [(79, HealthStatus.WARNING), (59, HealthStatus.CRITICAL), (80, HealthStatus.HEALTHY)],
    )
    def test_valid_rate_thresholds(self, valid: int, expected: HealthStatus) -> None:
        report = check_health(self._snapshot(valid=valid, invalid=100 - valid))
        assert report.status == expected

    @pytest.mark.parametrize(
        "score, expected",
        [(59, HealthStatus.WARNING), (39, HealthStatus.CRITICAL), (60, HealthStatus.HEALTHY)],
    )
    def test_score_thresholds(self, score: int, expected: HealthStatus) -> None:
        report = check_health(self._snapshot(average_score=score))
        assert report.status == expected

    def test_stale_collection_is_warning(self) -> None:
        report = check_health(self._snapshot(new_in_period=0))
        assert report.status == HealthStatus.WARNING
        assert len(report.issues) == 1

    def test_critical_is_never_downgraded(self) -> None:
        """Un critere warning evalue apres un critere critique ne baisse pas le statut."""
        report = check_health(self._snapshot(valid=50, invalid=50, average_score=55, new_in_period=0))
        assert report.status == HealthStatus.CRITICAL
        assert len(report.issues) == 3

    def test_empty_store_is_critical(self) -> None:
        report = check_health(MetricsSnapshot())
        assert report.status == HealthStatus.CRITICAL
        assert report.issues

    def test_custom_thresholds(self) -> None:
        thresholds = HealthThresholds(score_warning=90, score_critical=50)
        report = check_health(self._snapshot(average_score=85), thresholds)
        assert report.status == HealthStatus.WARNING


class TestFormatReport:
    """Tests pour le rapport texte."""

    def test_contains_sections(self, make_record) -> None:
        text = format_report(build_snapshot([make_record()], now=NOW))
        assert "Volumes" in text
        assert "Score moyen : 100/110" in text
        assert "station_a : 1" in text
        assert "2024-06-15 12:00:00" in text


class TestHealthMonitor:
    """Tests pour HealthMonitor."""

    def test_check_reads_store(self, record_repo, make_record) -> None:
        record_repo.save(make_record(id="a", created_at=NOW - timedelta(hours=1)))
        report = HealthMonitor(record_repo).check(now=NOW)
        assert report.snapshot.total == 1
        assert report.status == HealthStatus.HEALTHY

    def test_store_errors_propagate(self) -> None:
        repo = MagicMock(spec=IRecordRepository)
        repo.list_all.side_effect = RuntimeError("db down")
        with pytest.raises(RuntimeError):
            HealthMonitor(repo).check(now=NOW)
