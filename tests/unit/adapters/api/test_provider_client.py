"""
Tests pour ProviderClient - client des stations de ressources.

Utilise respx pour simuler les appels httpx et verifie:
- les parametres des appels liste et detail
- l'analyse JSON et XML des reponses
- le saut (page vide) en cas d'erreur apres les tentatives
- le decoupage des appels de detail par lots
"""

import json

import httpx
import pytest
import respx

from src.adapters.api.provider_client import DETAIL_BATCH_SIZE, ProviderClient
from src.core.ports.api_clients import IProviderClient

API_URL = "https://a.example.com/api.php/provide/vod/"


def _list_payload(page: int = 1, pagecount: int = 3, ids: tuple[int, ...] = (1, 2)) -> dict:
    return {
        "page": page,
        "pagecount": pagecount,
        "total": 60,
        "list": [
            {
                "vod_id": vod_id,
                "vod_name": f"Titre {vod_id}",
                "type_id": 1,
                "vod_play_url": f"HD$https://a.example.com/{vod_id}.m3u8",
            }
            for vod_id in ids
        ],
    }


@pytest.fixture
def provider_client() -> ProviderClient:
    """ProviderClient sans delai ni attente entre tentatives."""
    return ProviderClient(
        name="station_a",
        api_url=API_URL,
        request_delay_ms=0,
        max_retries=2,
        retry_min_wait=0,
    )


class TestProviderClientInterface:
    """Tests de conformite a l'interface."""

    def test_implements_interface(self, provider_client: ProviderClient):
        assert isinstance(provider_client, IProviderClient)
        assert provider_client.name == "station_a"


class TestFetchPage:
    """Tests pour fetch_page."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_page_sends_list_params(self, provider_client: ProviderClient):
        route = respx.get(API_URL).mock(
            return_value=httpx.Response(200, json=_list_payload(page=2))
        )

        page = await provider_client.fetch_page(2, category_id=5)

        assert route.called
        params = route.calls.last.request.url.params
        assert params["ac"] == "list"
        assert params["pg"] == "2"
        assert params["t"] == "5"
        assert page.page == 2
        assert page.page_count == 3
        assert [item.vod_id for item in page.items] == ["1", "2"]
        await provider_client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_page_xml(self):
        xml = (
            '<rss><list page="1" pagecount="1" recordcount="1">'
            "<video><id>9</id><name>三体</name><tid>2</tid></video>"
            "</list></rss>"
        )
        respx.get(API_URL).mock(return_value=httpx.Response(200, text=xml))
        client = ProviderClient("station_x", API_URL, response_format="xml", request_delay_ms=0)

        page = await client.fetch_page(1)

        assert page.items[0].name == "三体"
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_returns_empty_page(self, provider_client: ProviderClient):
        route = respx.get(API_URL).mock(return_value=httpx.Response(503))

        page = await provider_client.fetch_page(4)

        assert route.call_count == 2
        assert page.items == []
        assert page.page_count == 0

    @pytest.mark.asyncio
    @respx.mock
    async def test_timeout_returns_empty_page(self, provider_client: ProviderClient):
        respx.get(API_URL).mock(side_effect=httpx.ReadTimeout("timeout"))
        page = await provider_client.fetch_page(1)
        assert page.items == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_not_found_is_skipped(self, provider_client: ProviderClient):
        route = respx.get(API_URL).mock(return_value=httpx.Response(404))
        page = await provider_client.fetch_page(1)
        assert route.call_count == 1
        assert page.items == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_unreadable_body_is_skipped(self, provider_client: ProviderClient):
        respx.get(API_URL).mock(return_value=httpx.Response(200, text="<html><body>"))
        page = await provider_client.fetch_page(1)
        assert page.items == []


class TestFetchDetails:
    """Tests pour fetch_details."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_details_are_batched(self, provider_client: ProviderClient):
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            ids = request.url.params["ids"].split(",")
            requested.append(request.url.params["ids"])
            assert request.url.params["ac"] == "detail"
            payload = _list_payload(ids=tuple(int(i) for i in ids))
            return httpx.Response(200, text=json.dumps(payload))

        respx.get(API_URL).mock(side_effect=handler)
        vod_ids = [str(i) for i in range(1, DETAIL_BATCH_SIZE + 6)]

        items = await provider_client.fetch_details(vod_ids)

        assert len(requested) == 2
        assert len(items) == DETAIL_BATCH_SIZE + 5

    @pytest.mark.asyncio
    @respx.mock
    async def test_failed_batch_is_skipped(self, provider_client: ProviderClient):
        respx.get(API_URL).mock(return_value=httpx.Response(502))
        assert await provider_client.fetch_details(["1"]) == []

    @pytest.mark.asyncio
    async def test_no_ids(self, provider_client: ProviderClient):
        assert await provider_client.fetch_details([]) == []


class TestClose:
    """Tests pour close."""

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, provider_client: ProviderClient):
        provider_client._get_client()
        await provider_client.close()
        await provider_client.close()
        assert provider_client._client is None
