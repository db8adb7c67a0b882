"""
Tests pour HttpLinkChecker - verification des URL de lecture.
"""

import httpx
import pytest
import respx

from src.adapters.api.link_checker import HttpLinkChecker
from src.core.ports.api_clients import ILinkChecker

URL = "https://cdn.example.com/vod/1/index.m3u8"


@pytest.fixture
def checker() -> HttpLinkChecker:
    return HttpLinkChecker(timeout=1.0)


class TestHttpLinkChecker:
    """Tests pour HttpLinkChecker.is_alive."""

    def test_implements_interface(self, checker: HttpLinkChecker):
        assert isinstance(checker, ILinkChecker)

    @pytest.mark.asyncio
    @respx.mock
    async def test_success_is_alive(self, checker: HttpLinkChecker):
        route = respx.head(URL).mock(return_value=httpx.Response(200))

        assert await checker.is_alive(URL) is True
        assert route.called
        await checker.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_redirect_is_followed(self, checker: HttpLinkChecker):
        target = "https://cdn2.example.com/vod/1/index.m3u8"
        respx.head(URL).mock(return_value=httpx.Response(302, headers={"Location": target}))
        respx.head(target).mock(return_value=httpx.Response(200))

        assert await checker.is_alive(URL) is True
        await checker.close()

    @pytest.mark.asyncio
    @respx.mock
    @pytest.mark.parametrize("status", [403, 404, 500])
    async def test_error_status_is_dead(self, checker: HttpLinkChecker, status: int):
        respx.head(URL).mock(return_value=httpx.Response(status))
        assert await checker.is_alive(URL) is False
        await checker.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_timeout_is_dead(self, checker: HttpLinkChecker):
        respx.head(URL).mock(side_effect=httpx.ConnectTimeout("timeout"))
        assert await checker.is_alive(URL) is False
        await checker.close()

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, checker: HttpLinkChecker):
        await checker.close()
        await checker.close()
