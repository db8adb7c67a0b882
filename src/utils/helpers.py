"""
Fonctions utilitaires partagees dans le projet VodAgg.

Ce module centralise les fonctions reutilisees a travers le codebase :
- strip_invisible_chars : suppression des caracteres de controle
- clean_title : nettoyage d'un titre recu d'une station
- parse_year : conversion d'une annee brute en entier
- first_name : premier nom d'une liste separee par des virgules
- chunked : decoupage d'une liste en lots bornes
"""

import re
import unicodedata
from collections.abc import Iterator
from typing import Optional, TypeVar

T = TypeVar("T")

_YEAR_RE = re.compile(r"(18|19|20)\d{2}")
_NAME_SEPARATORS_RE = re.compile(r"[,，/、]")


def strip_invisible_chars(text: str) -> str:
    """
    Retire les caractères Unicode invisibles d'une chaîne.

    Supprime les caractères de contrôle et les marques directionnelles
    qui peuvent provenir des APIs (LRM, RLM, BOM, etc.).
    """
    result = []
    for char in text:
        category = unicodedata.category(char)
        if category in ("Cf", "Cc"):
            continue
        result.append(char)
    return "".join(result)


def clean_title(title: str) -> str:
    """Nettoie un titre : retire les caractères invisibles et les espaces superflus."""
    if not title:
        return ""
    return strip_invisible_chars(title).strip()


def parse_year(raw: object) -> Optional[int]:
    """
    Extrait une annee de sortie d'une valeur brute.

    Les stations renvoient l'annee en chaine ("2023"), en entier,
    vide ou avec du bruit ("2023年"). Retourne None si aucune annee plausible.
    """
    if raw is None:
        return None
    match = _YEAR_RE.search(str(raw))
    if not match:
        return None
    return int(match.group(0))


def first_name(names: str) -> str:
    """Premier nom d'une liste ("A,B" -> "A"), utilise pour la stabilite des IDs."""
    if not names:
        return ""
    return _NAME_SEPARATORS_RE.split(names)[0].strip()


def chunked(items: list[T], size: int) -> Iterator[list[T]]:
    """Decoupe une liste en lots de taille au plus `size`."""
    if size < 1:
        raise ValueError("La taille de lot doit etre >= 1")
    for start in range(0, len(items), size):
        yield items[start:start + size]
