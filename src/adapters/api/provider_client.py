"""
Client HTTP des stations de ressources (API de type CMS).

Implemente l'interface IProviderClient :
- liste paginee : ?ac=list&pg=N[&t=categorie]
- detail : ?ac=detail&ids=1,2,3
- retry automatique sur erreurs transitoires (429, 5xx, reseau)
- delai fixe entre deux requetes

Une requete qui echoue apres les tentatives est un saut : page vide ou
liste vide, l'erreur est journalisee.

Usage:
    client = ProviderClient(name="station_a", api_url="https://a.example/api.php/provide/vod/")
    page = await client.fetch_page(1)
    details = await client.fetch_details(["42"])
    await client.close()
"""

import asyncio
import time
from typing import Optional

import httpx
from loguru import logger

from src.adapters.api.response_parser import (
    FORMAT_AUTO,
    ResponseParseError,
    parse_response,
)
from src.adapters.api.retry import RETRYABLE_ERRORS, request_with_retry
from src.core.ports.api_clients import IProviderClient, ProviderItem, ProviderPage

# Nombre maximum d'IDs par appel de detail
DETAIL_BATCH_SIZE = 20


class ProviderClient(IProviderClient):
    """
    Client d'une station de ressources.

    Attributes:
        USER_AGENT: En-tete User-Agent envoye aux stations
    """

    USER_AGENT = "Mozilla/5.0 (compatible; VodAgg/1.0)"

    def __init__(
        self,
        name: str,
        api_url: str,
        response_format: str = FORMAT_AUTO,
        request_delay_ms: int = 500,
        timeout: float = 15.0,
        max_retries: int = 3,
        retry_min_wait: float = 1,
    ) -> None:
        """
        Initialise le client.

        Args:
            name: Nom de la station (attribution de provenance)
            api_url: URL de base de l'API
            response_format: "json", "xml" ou "auto"
            request_delay_ms: Delai minimum entre deux requetes
            timeout: Timeout HTTP en secondes
            max_retries: Nombre maximum de tentatives par requete
            retry_min_wait: Delai minimum entre deux tentatives
        """
        self._name = name
        self._api_url = api_url
        self._response_format = response_format
        self._delay = request_delay_ms / 1000
        self._timeout = timeout
        self._max_retries = max_retries
        self._retry_min_wait = retry_min_wait
        self._client: Optional[httpx.AsyncClient] = None
        self._last_request: Optional[float] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, le cree si necessaire (lazy init)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": self.USER_AGENT},
                timeout=self._timeout,
                follow_redirects=True,
            )
        return self._client

    @property
    def name(self) -> str:
        """Nom de la station."""
        return self._name

    async def _throttle(self) -> None:
        """Respecte le delai fixe depuis la requete precedente."""
        if self._last_request is not None and self._delay > 0:
            elapsed = time.monotonic() - self._last_request
            if elapsed < self._delay:
                await asyncio.sleep(self._delay - elapsed)
        self._last_request = time.monotonic()

    async def _get(self, params: dict) -> Optional[ProviderPage]:
        """
        Execute une requete et analyse la reponse.

        Returns:
            ProviderPage, ou None si la requete ou l'analyse a echoue
        """
        await self._throttle()
        try:
            response = await request_with_retry(
                self._get_client(),
                "GET",
                self._api_url,
                max_attempts=self._max_retries,
                min_wait=self._retry_min_wait,
                params=params,
            )
        except (httpx.HTTPError, *RETRYABLE_ERRORS) as e:
            logger.warning(
                "Requete station echouee",
                provider=self._name,
                params=params,
                error=str(e),
            )
            return None

        try:
            return parse_response(response.text, self._response_format)
        except ResponseParseError as e:
            logger.warning(
                "Reponse station illisible",
                provider=self._name,
                params=params,
                error=str(e),
            )
            return None

    async def fetch_page(
        self, page: int, category_id: Optional[int] = None
    ) -> ProviderPage:
        """
        Recupere une page de la liste.

        Args:
            page: Numero de page (a partir de 1)
            category_id: Restreint a une categorie amont

        Returns:
            ProviderPage (vide, page_count=0 en cas d'echec)
        """
        params: dict = {"ac": "list", "pg": page}
        if category_id is not None:
            params["t"] = category_id
        result = await self._get(params)
        if result is None:
            return ProviderPage(page=page, page_count=0, total=0, items=[])
        return result

    async def fetch_details(self, vod_ids: list[str]) -> list[ProviderItem]:
        """
        Recupere le detail d'un ensemble de titres, par lots.

        Un lot en echec est saute.
        """
        items: list[ProviderItem] = []
        for start in range(0, len(vod_ids), DETAIL_BATCH_SIZE):
            batch = vod_ids[start:start + DETAIL_BATCH_SIZE]
            result = await self._get({"ac": "detail", "ids": ",".join(batch)})
            if result is not None:
                items.extend(result.items)
        return items

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None
