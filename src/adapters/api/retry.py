"""
Mecanisme de retry avec backoff exponentiel pour les stations.

Relance automatiquement les requetes sur les erreurs transitoires :
429 (rate limiting), 5xx et erreurs de transport (timeout, connexion),
avec un delai croissant et du jitter aleatoire.

Usage:
    # Avec le decorateur
    @with_retry(max_attempts=3, max_wait=10)
    async def my_api_call():
        ...

    # Avec la fonction helper
    response = await request_with_retry(client, "GET", url)
"""

from typing import Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)


class TransientHTTPError(Exception):
    """
    Exception levee sur une reponse HTTP qui merite une nouvelle tentative.

    Attributes:
        status_code: Code HTTP recu
    """

    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        super().__init__(message or f"Transient HTTP error: {status_code}")


class RateLimitError(TransientHTTPError):
    """
    Exception levee quand la station retourne 429 Too Many Requests.

    Attributes:
        retry_after: Nombre de secondes a attendre (depuis le header Retry-After),
                     ou None si non specifie.
    """

    def __init__(self, retry_after: Optional[int] = None) -> None:
        """
        Initialise l'erreur avec la valeur Retry-After optionnelle.

        Args:
            retry_after: Secondes a attendre avant de relancer (optionnel)
        """
        self.retry_after = retry_after
        super().__init__(429, f"Rate limited. Retry after: {retry_after}s")


# Erreurs donnant lieu a une nouvelle tentative
RETRYABLE_ERRORS = (TransientHTTPError, httpx.TransportError)


def with_retry(max_attempts: int = 3, max_wait: int = 10, min_wait: float = 1):
    """
    Decorateur pour relancer sur erreur transitoire avec backoff exponentiel.

    Args:
        max_attempts: Nombre maximum de tentatives (defaut: 3)
        max_wait: Delai maximum entre les tentatives en secondes (defaut: 10)
        min_wait: Delai minimum entre les tentatives en secondes (defaut: 1)

    Returns:
        Decorateur a appliquer sur une fonction async
    """
    return retry(
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        wait=wait_random_exponential(multiplier=1, min=min_wait, max=max_wait),
        stop=stop_after_attempt(max_attempts),
        reraise=True,
    )


def _raise_for_transient(response: httpx.Response) -> None:
    if response.status_code == 429:
        retry_after_header = response.headers.get("Retry-After")
        retry_after = (
            int(retry_after_header)
            if retry_after_header and retry_after_header.isdigit()
            else None
        )
        raise RateLimitError(retry_after)
    if response.status_code >= 500:
        raise TransientHTTPError(response.status_code)


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 3,
    max_wait: int = 10,
    min_wait: float = 1,
    **kwargs,
) -> httpx.Response:
    """
    Execute une requete HTTP avec retry automatique sur erreur transitoire.

    Les reponses 429 et 5xx sont converties en exceptions et relancees.
    Les autres erreurs HTTP (4xx) sont propagees immediatement sans retry.

    Args:
        client: Client httpx async a utiliser
        method: Methode HTTP (GET, POST, etc.)
        url: URL a appeler
        max_attempts: Nombre maximum de tentatives
        max_wait: Delai maximum entre tentatives (secondes)
        min_wait: Delai minimum entre tentatives (secondes)
        **kwargs: Arguments supplementaires passes a client.request()

    Returns:
        httpx.Response en cas de succes

    Raises:
        TransientHTTPError: Si 429/5xx apres epuisement des tentatives
        httpx.TransportError: Si erreur reseau apres epuisement des tentatives
        httpx.HTTPStatusError: Pour les autres erreurs HTTP
    """

    @with_retry(max_attempts=max_attempts, max_wait=max_wait, min_wait=min_wait)
    async def _do_request() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        _raise_for_transient(response)
        response.raise_for_status()
        return response

    return await _do_request()
