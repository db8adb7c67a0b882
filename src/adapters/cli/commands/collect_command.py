"""Commande CLI collect : collecte des stations de ressources."""

import asyncio
from typing import Annotated, Optional

import typer
from rich.table import Table

from src.adapters.cli.helpers import console, with_container
from src.services.ingestion import IngestResult


def collect(
    provider: Annotated[
        Optional[str],
        typer.Option("--provider", "-p", help="Station a collecter (defaut: toutes)"),
    ] = None,
    pages: Annotated[
        Optional[int],
        typer.Option("--pages", help="Nombre maximum de pages par station", min=1),
    ] = None,
    category: Annotated[
        Optional[int],
        typer.Option("--category", "-t", help="ID de categorie amont"),
    ] = None,
) -> None:
    """
    Collecte les titres des stations configurees.

    Exemples:
      vodagg collect                       # Toutes les stations actives
      vodagg collect -p station_a --pages 3
    """
    asyncio.run(_collect_async(provider, pages, category))


@with_container()
async def _collect_async(
    container,
    provider: Optional[str],
    pages: Optional[int],
    category: Optional[int],
) -> None:
    """Implementation async de la commande collect."""
    config = container.config()

    if provider:
        selected = config.get_provider(provider)
        if selected is None:
            console.print(f"[red]Station inconnue: {provider}[/red]")
            raise typer.Exit(1)
        stations = [selected]
    else:
        stations = config.enabled_providers()

    if not stations:
        console.print("[yellow]Aucune station configuree (VODAGG_PROVIDERS).[/yellow]")
        raise typer.Exit(0)

    ingestion = container.ingestion_service()

    table = Table(title="Collecte")
    table.add_column("Station", style="cyan")
    table.add_column("Nouveaux", justify="right", style="green")
    table.add_column("Mis a jour", justify="right")
    table.add_column("Ignores", justify="right", style="dim")
    table.add_column("Erreurs", justify="right", style="red")

    total = IngestResult()
    for station in stations:
        client = container.provider_client(
            name=station.name,
            api_url=station.api_url,
            response_format=station.response_format,
        )
        console.print(f"[bold cyan]Collecte:[/bold cyan] {station.name}")
        try:
            result = await ingestion.collect(client, max_pages=pages, category_id=category)
        finally:
            await client.close()

        total.add(result)
        table.add_row(
            station.name,
            str(result.new),
            str(result.updated),
            str(result.skipped),
            str(result.errors),
        )

    console.print(table)
    console.print(
        f"[bold]Total:[/bold] {total.new} nouveaux, {total.updated} mis a jour, "
        f"{total.errors} erreurs"
    )
