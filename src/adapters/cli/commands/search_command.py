"""Commande CLI search : recherche de titres."""

import asyncio
from typing import Annotated

import typer
from rich.table import Table

from src.adapters.cli.helpers import console, with_container


def search(
    keyword: Annotated[str, typer.Argument(help="Titre, acteur ou realisateur")],
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", help="Nombre maximum de resultats", min=1),
    ] = 20,
) -> None:
    """Recherche des titres dans l'index (repli sur le stockage principal)."""
    asyncio.run(_search_async(keyword, limit))


@with_container()
async def _search_async(container, keyword: str, limit: int) -> None:
    """Implementation async de la commande search."""
    service = container.search_service()
    records = service.search(keyword, limit)

    if not records:
        console.print(f"[yellow]Aucun resultat pour '{keyword}'.[/yellow]")
        return

    table = Table(title=f"Resultats pour '{keyword}'")
    table.add_column("ID", style="dim")
    table.add_column("Titre", style="cyan")
    table.add_column("Annee", justify="right")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Sources", justify="right")
    for record in records:
        table.add_row(
            record.id or "",
            record.title,
            str(record.release_year) if record.release_year else "-",
            str(record.quality_score),
            str(len(record.play_sources)),
        )
    console.print(table)
