"""
Configuration du logging de l'application via loguru.

Fournit un logging structuré avec :
- Sortie console : lisible par l'humain, colorée, préfixée par le nom du job
- Sortie fichier : sérialisée en JSON, avec rotation, pour l'analyse historique

Le contexte structuré (station, groupe, compteurs) est passé en kwargs
des appels logger.* et se retrouve dans le champ "extra" du JSON.
"""

import sys
from pathlib import Path

from loguru import logger

DEFAULT_JOB = "vodagg"


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/vodagg.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
    job: str = DEFAULT_JOB,
) -> None:
    """Configure le logging de l'application.

    Args :
        log_level : Niveau de log minimum pour la sortie console (DEBUG, INFO, WARNING, ERROR)
        log_file : Chemin vers le fichier de log
        rotation_size : Taille maximale du fichier avant rotation (ex: "10 MB", "1 GB")
        retention_count : Nombre de fichiers rotatifs à conserver
        job : Nom du job lancé (collect, merge, health...) ajouté à chaque entrée
    """
    logger.remove()
    logger.configure(extra={"job": job})

    # Console
    logger.add(
        sys.stderr,
        level=log_level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<magenta>{extra[job]}</magenta> | "
            "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    # Fichier JSON
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
    )

    logger.debug("Logging configuré", log_file=str(log_file), job=job)
