"""Sous-package CLI commands - re-exporte les commandes publiques."""

from src.adapters.cli.commands.collect_command import collect
from src.adapters.cli.commands.health_command import health
from src.adapters.cli.commands.merge_commands import (
    duplicates,
    merge,
    rebuild_index,
)
from src.adapters.cli.commands.search_command import search
from src.adapters.cli.commands.validate_command import validate

__all__ = [
    "collect",
    "duplicates",
    "health",
    "merge",
    "rebuild_index",
    "search",
    "validate",
]
