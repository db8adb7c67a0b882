"""
Configuration explicite de l'agregation.

Regroupe les tables de categories et de priorites des fournisseurs,
passees en parametre aux services au lieu d'etre lues globalement.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class AggregationConfig:
    """
    Tables de reference pour l'ingestion et la fusion.

    Attributs :
        categories : ID de categorie fournisseur -> nom de categorie
        provider_priorities : Nom du fournisseur -> priorite (plus haut = prefere)
    """

    categories: dict[int, str] = field(default_factory=dict)
    provider_priorities: dict[str, int] = field(default_factory=dict)

    def category_name(self, type_id: Optional[int], fallback: str = "") -> str:
        """Resout le nom de categorie, avec repli sur le nom fourni par l'amont."""
        if type_id is not None and type_id in self.categories:
            return self.categories[type_id]
        return fallback.strip()

    def priority_of(self, provider: str, default: int = 0) -> int:
        """Priorite configuree d'un fournisseur."""
        return self.provider_priorities.get(provider, default)
