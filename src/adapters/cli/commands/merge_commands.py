"""
Commandes CLI de deduplication (merge, duplicates, rebuild-index).
"""

import asyncio
from typing import Annotated, Optional

import typer
from loguru import logger
from rich.table import Table

from src.adapters.cli.helpers import console, with_container
from src.services.batch_runner import StoreUnavailableError


def merge(
    window: Annotated[
        Optional[int],
        typer.Option("--window", "-w", help="Nombre maximum de groupes a fusionner", min=1),
    ] = None,
    no_reindex: Annotated[
        bool,
        typer.Option("--no-reindex", help="Ne pas reconstruire l'index apres fusion"),
    ] = False,
) -> None:
    """Fusionne un lot de groupes de doublons."""
    asyncio.run(_merge_async(window, no_reindex))


@with_container()
async def _merge_async(container, window: Optional[int], no_reindex: bool) -> None:
    """Implementation async de la commande merge."""
    config = container.config()
    if no_reindex or not config.rebuild_index_after_merge:
        runner = container.merge_batch_runner(synchronizer=None)
    else:
        runner = container.merge_batch_runner()

    try:
        summary = runner.run(window)
    except StoreUnavailableError as e:
        logger.error("Lot de fusion abandonne", error=str(e))
        console.print(f"[red]Stockage principal indisponible: {e}[/red]")
        raise typer.Exit(1)

    if summary.total == 0 and summary.errors == 0:
        console.print("[green]Aucun doublon a fusionner.[/green]")
        return

    table = Table(title="Lot de fusion")
    table.add_column("Indicateur", style="cyan")
    table.add_column("Valeur", justify="right")
    table.add_row("Enregistrements vus", str(summary.total))
    table.add_row("Groupes fusionnes", str(summary.merged))
    table.add_row("Supprimes", str(summary.deleted))
    table.add_row("Erreurs", f"[red]{summary.errors}[/red]" if summary.errors else "0")
    table.add_row("Groupes restants", str(summary.pending))
    console.print(table)

    if summary.stopped:
        console.print("[yellow]Lot interrompu avant la fin.[/yellow]")
    if summary.sync is not None:
        if summary.sync.ok:
            console.print(f"[dim]Index reconstruit: {summary.sync.indexed} entrees[/dim]")
        else:
            console.print(f"[yellow]Reconstruction de l'index echouee: {summary.sync.error}[/yellow]")


def duplicates(
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", help="Nombre maximum de groupes affiches", min=1),
    ] = 20,
) -> None:
    """Liste les groupes de doublons en attente (sans rien modifier)."""
    asyncio.run(_duplicates_async(limit))


@with_container()
async def _duplicates_async(container, limit: int) -> None:
    """Implementation async de la commande duplicates."""
    grouper = container.duplicate_grouper()
    summaries = grouper.report(limit)

    if not summaries:
        console.print("[green]Aucun doublon detecte.[/green]")
        return

    table = Table(title=f"Doublons ({len(summaries)} groupes)")
    table.add_column("Titre", style="cyan")
    table.add_column("Annee", justify="right")
    table.add_column("Nb", justify="right", style="bold")
    table.add_column("Stations")
    for summary in summaries:
        table.add_row(
            summary.title,
            str(summary.release_year) if summary.release_year else "-",
            str(summary.count),
            ", ".join(summary.providers),
        )
    console.print(table)


def rebuild_index(
    batch_size: Annotated[
        Optional[int],
        typer.Option("--batch-size", help="Taille des lots d'insertion", min=1),
    ] = None,
) -> None:
    """Reconstruit entierement l'index de recherche."""
    asyncio.run(_rebuild_index_async(batch_size))


@with_container()
async def _rebuild_index_async(container, batch_size: Optional[int]) -> None:
    """Implementation async de la commande rebuild-index."""
    synchronizer = container.search_synchronizer()
    result = synchronizer.rebuild(batch_size)

    if not result.ok:
        console.print(f"[red]Reconstruction echouee: {result.error}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[green]Index reconstruit:[/green] {result.indexed} entrees "
        f"en {result.batches} lots"
    )
