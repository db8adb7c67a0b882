"""
Tests pour AlertNotifier - envoi des alertes de sante.
"""

import json
from datetime import datetime

import httpx
import pytest
import respx

from src.adapters.api.alert_notifier import AlertNotifier, build_alert_message
from src.services.health_monitor import HealthReport, HealthStatus, MetricsSnapshot

WEBHOOK = "https://oapi.example.com/robot/send?access_token=test"


def _report(status: HealthStatus, issues: list[str] | None = None) -> HealthReport:
    snapshot = MetricsSnapshot(
        total=100, valid=50, invalid=50, average_score=35, generated_at=datetime(2024, 6, 15, 12)
    )
    return HealthReport(status, issues or ["Taux de validite trop bas"], snapshot)


class TestBuildAlertMessage:
    """Tests pour build_alert_message."""

    def test_markdown_payload(self) -> None:
        message = build_alert_message(_report(HealthStatus.CRITICAL))
        assert message["msgtype"] == "markdown"
        assert "critique" in message["markdown"]["title"]
        text = message["markdown"]["text"]
        assert "- Taux de validite trop bas" in text
        assert "50.0%" in text
        assert "35/110" in text
        assert "2024-06-15 12:00:00" in text

    def test_warning_title(self) -> None:
        message = build_alert_message(_report(HealthStatus.WARNING))
        assert "critique" not in message["markdown"]["title"]


class TestAlertNotifier:
    """Tests pour AlertNotifier.notify."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_when_unhealthy(self) -> None:
        route = respx.post(WEBHOOK).mock(return_value=httpx.Response(200, json={"errcode": 0}))

        sent = await AlertNotifier(WEBHOOK).notify(_report(HealthStatus.WARNING))

        assert sent is True
        body = json.loads(route.calls.last.request.content)
        assert body["msgtype"] == "markdown"

    @pytest.mark.asyncio
    @respx.mock
    async def test_healthy_is_not_sent(self) -> None:
        route = respx.post(WEBHOOK).mock(return_value=httpx.Response(200))
        sent = await AlertNotifier(WEBHOOK).notify(_report(HealthStatus.HEALTHY, issues=[]))
        assert sent is False
        assert not route.called

    @pytest.mark.asyncio
    async def test_disabled_without_url(self) -> None:
        notifier = AlertNotifier(None)
        assert not notifier.enabled
        assert await notifier.notify(_report(HealthStatus.CRITICAL)) is False

    @pytest.mark.asyncio
    @respx.mock
    async def test_webhook_failure_is_logged_not_raised(self) -> None:
        respx.post(WEBHOOK).mock(return_value=httpx.Response(500))
        assert await AlertNotifier(WEBHOOK).notify(_report(HealthStatus.CRITICAL)) is False
