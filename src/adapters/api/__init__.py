"""
Clients HTTP des services externes.

Ce module fournit les adaptateurs pour communiquer avec:
- les stations de ressources (liste et detail des titres, JSON ou XML)
- le webhook d'alerte de sante
- la verification des URL de lecture (HEAD)

Infrastructure partagee:
- RateLimitError / TransientHTTPError: Exceptions des erreurs transitoires
- with_retry: Decorateur avec backoff exponentiel

Les clients de station implementent IProviderClient defini dans core/ports/api_clients.py.
"""

from src.adapters.api.alert_notifier import AlertNotifier
from src.adapters.api.link_checker import HttpLinkChecker
from src.adapters.api.provider_client import ProviderClient
from src.adapters.api.response_parser import ResponseParseError, parse_response
from src.adapters.api.retry import (
    RateLimitError,
    TransientHTTPError,
    request_with_retry,
    with_retry,
)

__all__ = [
    "AlertNotifier",
    "HttpLinkChecker",
    "ProviderClient",
    "RateLimitError",
    "ResponseParseError",
    "TransientHTTPError",
    "parse_response",
    "request_with_retry",
    "with_retry",
]
