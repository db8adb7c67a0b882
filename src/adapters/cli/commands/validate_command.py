"""Commande CLI validate : detection des liens de lecture morts."""

import asyncio
from typing import Annotated, Optional

import typer
from rich.table import Table

from src.adapters.cli.helpers import console, with_container


def validate(
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", help="Nombre maximum d'enregistrements verifies", min=1),
    ] = None,
) -> None:
    """
    Verifie les liens de lecture des enregistrements les moins recemment controles.

    Les enregistrements dont le lien ne repond pas sont marques invalides.
    """
    asyncio.run(_validate_async(limit))


@with_container()
async def _validate_async(container, limit: Optional[int]) -> None:
    """Implementation async de la commande validate."""
    config = container.config()
    checker = container.link_checker()
    validator = container.link_validator(checker=checker)

    console.print("[bold cyan]Verification des liens de lecture...[/bold cyan]")
    try:
        result = await validator.validate(limit or config.link_check_limit)
    finally:
        await checker.close()

    table = Table(title="Verification des liens")
    table.add_column("Verifies", justify="right")
    table.add_column("Morts", justify="right", style="red")
    table.add_column("Sans URL", justify="right", style="dim")
    table.add_column("Erreurs", justify="right", style="red")
    table.add_row(
        str(result.checked),
        str(result.invalid),
        str(result.skipped),
        str(result.errors),
    )
    console.print(table)

    if result.invalid:
        console.print(
            "[yellow]Lancez 'vodagg rebuild-index' pour retirer les titres invalides de l'index.[/yellow]"
        )
