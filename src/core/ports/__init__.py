"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Ports repository : Contrats de persistance des données
- IRecordRepository : Stockage principal des enregistrements canoniques
- ISearchIndex : Stockage secondaire de recherche

Ports client API : Contrats pour les stations de ressources amont
- IProviderClient : Interface d'une station
- ProviderItem : Titre rapporté par une station
- ProviderPage : Page de liste d'une station
- ILinkChecker : Verification des URL de lecture
"""

from src.core.ports.repositories import (
    IRecordRepository,
    ISearchIndex,
)
from src.core.ports.api_clients import (
    ILinkChecker,
    IProviderClient,
    ProviderItem,
    ProviderPage,
)

__all__ = [
    # Repositories
    "IRecordRepository",
    "ISearchIndex",
    # Clients API
    "ILinkChecker",
    "IProviderClient",
    "ProviderItem",
    "ProviderPage",
]
