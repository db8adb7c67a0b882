"""Commande CLI health : bilan de sante du stockage principal."""

import asyncio
from typing import Annotated

import typer
from rich.panel import Panel

from src.adapters.cli.helpers import console, print_json, with_container
from src.services.health_monitor import HealthStatus, format_report

_STATUS_STYLES = {
    HealthStatus.HEALTHY: "green",
    HealthStatus.WARNING: "yellow",
    HealthStatus.CRITICAL: "red",
}


def health(
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Sortie JSON (metriques et statut)"),
    ] = False,
    notify: Annotated[
        bool,
        typer.Option("--notify", help="Envoie une alerte au webhook si non healthy"),
    ] = False,
) -> None:
    """
    Calcule les metriques et le statut de sante.

    Code de sortie 1 si le statut est critique.
    """
    asyncio.run(_health_async(as_json, notify))


@with_container()
async def _health_async(container, as_json: bool, notify: bool) -> None:
    """Implementation async de la commande health."""
    report = container.health_monitor().check()

    if as_json:
        print_json(report.to_dict())
    else:
        console.print(format_report(report.snapshot))
        style = _STATUS_STYLES[report.status]
        body = "\n".join(f"- {issue}" for issue in report.issues) or "Aucun probleme"
        console.print(
            Panel(
                body,
                title=f"[bold {style}]{report.status.value.upper()}[/bold {style}]",
                border_style=style,
            )
        )

    if notify:
        await container.alert_notifier().notify(report)

    if report.status == HealthStatus.CRITICAL:
        raise typer.Exit(1)
