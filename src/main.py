"""
Point d'entrée CLI de VodAgg.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

import sys
from typing import Annotated

import typer
from loguru import logger

from .adapters.cli.commands import (
    collect,
    duplicates,
    health,
    merge,
    rebuild_index,
    search,
    validate,
)
from .config import Settings
from .container import Container
from .logging_config import configure_logging

__version__ = "0.1.0"

app = typer.Typer(
    name="vodagg",
    help="Moteur d'agregation de catalogues video",
)
container = Container()

# Etat global pour les options de verbosite
state = {"verbose": 0, "quiet": False}


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Augmenter la verbosite (-v, -vv)"
        ),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Mode silencieux (erreurs uniquement)"),
    ] = False,
) -> None:
    """VodAgg - Agregation, deduplication et indexation de catalogues video."""
    if quiet:
        state["quiet"] = True
    else:
        state["verbose"] = verbose

    if quiet or verbose:
        settings = get_config()
        configure_logging(
            log_level=_log_level(settings),
            log_file=settings.log_file,
            rotation_size=settings.log_rotation_size,
            retention_count=settings.log_retention_count,
            job=ctx.invoked_subcommand or "cli",
        )


app.command()(collect)
app.command()(merge)
app.command()(duplicates)
app.command(name="rebuild-index")(rebuild_index)
app.command()(search)
app.command()(health)
app.command()(validate)


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    logger.info("Configuration VodAgg")
    typer.echo(f"Base principale : {config.database_url}")
    typer.echo(f"Base de recherche : {config.search_database_url}")
    typer.echo(f"Stations : {len(config.enabled_providers())} actives / {len(config.providers)}")
    for provider in config.providers:
        typer.echo(f"  - {provider.name} (priorite {provider.priority}, {provider.response_format})")
    typer.echo(f"Fenetre de fusion : {config.merge_window} groupes")
    typer.echo(f"Verification des liens : {config.link_check_limit} titres, tous les {config.link_recheck_days} jours")
    typer.echo(f"Alertes : {'activées' if config.alerts_enabled else 'désactivées'}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"VodAgg v{__version__}")


def _log_level(settings: Settings) -> str:
    if state["quiet"]:
        return "ERROR"
    if state["verbose"]:
        return "DEBUG"
    return settings.log_level


def main() -> None:
    """Point d'entrée de l'application."""
    settings = container.config()
    job = sys.argv[1] if len(sys.argv) > 1 and not sys.argv[1].startswith("-") else "cli"
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
        job=job,
    )

    logger.info("Démarrage de VodAgg", version=__version__)

    app()


if __name__ == "__main__":
    main()
