"""
Envoi des alertes de sante vers un webhook (format markdown type DingTalk).

Une alerte n'est envoyee que si le statut n'est pas healthy et qu'un
webhook est configure. Un echec d'envoi est journalise, jamais propage.
"""

from typing import Optional

import httpx
from loguru import logger

from src.services.health_monitor import HealthReport, HealthStatus
from src.utils.constants import MAX_QUALITY_SCORE


def build_alert_message(report: HealthReport) -> dict:
    """Construit le message markdown d'une alerte."""
    critical = report.status == HealthStatus.CRITICAL
    title = "VodAgg : alerte critique" if critical else "VodAgg : alerte"
    snapshot = report.snapshot
    issues = "\n".join(f"- {issue}" for issue in report.issues)
    text = (
        f"### {title}\n\n"
        f"**Problemes :**\n{issues}\n\n"
        f"**Indicateurs :**\n"
        f"- Total : {snapshot.total}\n"
        f"- Taux de validite : {snapshot.valid_rate:.1f}%\n"
        f"- Score moyen : {snapshot.average_score}/{MAX_QUALITY_SCORE}\n"
    )
    if snapshot.generated_at:
        text += f"\n**Date :** {snapshot.generated_at:%Y-%m-%d %H:%M:%S} UTC"
    return {"msgtype": "markdown", "markdown": {"title": title, "text": text}}


class AlertNotifier:
    """Client du webhook d'alerte."""

    def __init__(self, webhook_url: Optional[str], timeout: float = 10.0) -> None:
        self._webhook_url = webhook_url
        self._timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self._webhook_url)

    async def notify(self, report: HealthReport) -> bool:
        """
        Envoie l'alerte correspondant a un bilan de sante.

        Returns:
            True si une alerte a ete envoyee avec succes
        """
        if not self._webhook_url or report.is_healthy:
            return False

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    self._webhook_url, json=build_alert_message(report)
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Envoi de l'alerte echoue", error=str(e))
            return False

        logger.info("Alerte envoyee", status=report.status.value)
        return True
