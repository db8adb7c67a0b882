"""
Interfaces ports pour les clients API.

Interfaces abstraites (ports) définissant le contrat des stations de ressources
amont. Chaque station expose des points d'accès liste/détail similaires mais
pas identiques ; l'adaptateur normalise leurs réponses en ProviderItem.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class ProviderItem:
    """
    Titre tel que rapporté par une station de ressources.

    Tous les champs descriptifs sont optionnels : un champ absent vaut "".

    Attributs :
        vod_id : ID du titre chez le fournisseur
        name : Titre
        year : Année (chaîne brute, peut être vide ou invalide)
        area : Pays / région
        actor : Acteurs
        director : Réalisateur(s)
        writer : Scénariste(s)
        content : Résumé (peut contenir du HTML)
        pic : URL de l'affiche
        play_from : Libellés des lignes de lecture ("a$$$b")
        play_url : Chaîne de lecture brute ("ep$url#ep$url$$$...")
        type_id : ID de catégorie chez le fournisseur
        type_name : Nom de catégorie chez le fournisseur
        remarks : Remarque (ex: "更新至10集")
    """

    vod_id: str
    name: str
    year: str = ""
    area: str = ""
    actor: str = ""
    director: str = ""
    writer: str = ""
    content: str = ""
    pic: str = ""
    play_from: str = ""
    play_url: str = ""
    type_id: Optional[int] = None
    type_name: str = ""
    remarks: str = ""


@dataclass
class ProviderPage:
    """
    Page de liste renvoyée par une station.

    Attributs :
        page : Numéro de page
        page_count : Nombre total de pages (0 si inconnu, page en echec)
        total : Nombre total de titres
        items : Titres de la page
    """

    page: int = 1
    page_count: int = 1
    total: int = 0
    items: list[ProviderItem] = field(default_factory=list)


class IProviderClient(ABC):
    """
    Interface d'une station de ressources amont.

    Un délai d'attente ou une réponse non-200 est un saut pour l'élément
    concerné : les implémentations retournent une page/liste vide plutôt
    que de lever.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Nom de la station (utilisé comme attribution de provenance)."""
        ...

    @abstractmethod
    async def fetch_page(
        self, page: int, category_id: Optional[int] = None
    ) -> ProviderPage:
        """Récupère une page de la liste des titres."""
        ...

    @abstractmethod
    async def fetch_details(self, vod_ids: list[str]) -> list[ProviderItem]:
        """Récupère le détail d'un ensemble de titres."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Ferme les connexions HTTP."""
        ...


class ILinkChecker(ABC):
    """
    Interface de vérification d'une URL de lecture.

    Une URL injoignable (délai, erreur réseau, statut non-2xx) est morte ;
    les implémentations retournent False plutôt que de lever.
    """

    @abstractmethod
    async def is_alive(self, url: str) -> bool:
        """Vérifie qu'une URL de lecture répond."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Ferme les connexions HTTP."""
        ...
