"""
Verification des URL de lecture par requete HEAD.

Une URL est vivante si elle repond en 2xx (redirections suivies) dans le
delai imparti. Toute erreur reseau compte comme un lien mort.
"""

from typing import Optional

import httpx
from loguru import logger

from src.core.ports.api_clients import ILinkChecker


class HttpLinkChecker(ILinkChecker):
    """Verificateur de liens base sur httpx."""

    USER_AGENT = "Mozilla/5.0 (compatible; VodAgg/1.0)"

    def __init__(self, timeout: float = 5.0) -> None:
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, le cree si necessaire (lazy init)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": self.USER_AGENT},
                timeout=self._timeout,
                follow_redirects=True,
            )
        return self._client

    async def is_alive(self, url: str) -> bool:
        try:
            response = await self._get_client().head(url)
        except httpx.HTTPError as e:
            logger.debug("Lien injoignable", url=url, error=str(e))
            return False
        return response.is_success

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None
