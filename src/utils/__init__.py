"""
Utilitaires et constantes pour VodAgg.

Ce module contient les constantes et fonctions utilitaires partagees.
"""

from src.utils.constants import (
    DEFAULT_CATEGORIES,
    DEFAULT_PROVIDER_PRIORITY,
    MAX_QUALITY_SCORE,
)

__all__ = [
    "DEFAULT_CATEGORIES",
    "DEFAULT_PROVIDER_PRIORITY",
    "MAX_QUALITY_SCORE",
]
