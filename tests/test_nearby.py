"""
Tests for the nearby places fetcher, using a mocked geosearch endpoint.

Run with: python -m pytest tests/test_nearby.py
"""

import httpx
import pytest

from bucketlist import config
from bucketlist.location import Coordinate
from bucketlist.nearby import (
    FAILED,
    LOADING,
    LoadingState,
    LoadingStatus,
    NearbyPage,
    NearbyPlacesFetcher,
    build_params,
)

POINT = Coordinate(51.501, -0.141)

THREE_PAGES = {
    "batchcomplete": "",
    "query": {
        "pages": {
            "2001": {"pageid": 2001, "ns": 0, "title": "Wellington Arch",
                     "terms": {"description": ["triumphal arch in London"]}},
            "1001": {"pageid": 1001, "ns": 0, "title": "Buckingham Palace",
                     "terms": {"description": ["royal residence in London"]}},
            "3001": {"pageid": 3001, "ns": 0, "title": "Green Park"},
        }
    },
}


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def json_handler(payload, status_code=200):
    def handler(request):
        return httpx.Response(status_code, json=payload)

    return handler


def record_states(fetcher):
    states = []
    fetcher.subscribe(lambda attribute: states.append(fetcher.loading_state.status))
    return states


def test_initial_state_is_loading():
    assert NearbyPlacesFetcher().loading_state == LOADING


def test_page_description():
    page = NearbyPage(pageid=1, title="A", terms={"description": ["a place"]})
    assert page.description == "a place"
    assert NearbyPage(pageid=2, title="B").description == "No further information"
    assert NearbyPage(pageid=3, title="C", terms={"alias": ["c"]}).description == "No further information"


def test_build_params():
    params = build_params(POINT)
    assert params["ggscoord"] == "51.501|-0.141"
    assert params["generator"] == "geosearch"
    assert params["ggsradius"] == config.search_radius
    assert params["ggslimit"] == config.search_limit
    assert params["format"] == "json"


@pytest.mark.asyncio
async def test_three_pages_load_sorted_by_title():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=THREE_PAGES)

    async with mock_client(handler) as client:
        fetcher = NearbyPlacesFetcher(client=client)
        states = record_states(fetcher)
        await fetcher.fetch_nearby(POINT)

    assert states == [LoadingStatus.LOADING, LoadingStatus.LOADED]
    assert fetcher.loading_state.status is LoadingStatus.LOADED
    pages = fetcher.loading_state.pages
    assert len(pages) == 3
    assert [page.title for page in pages] == ["Buckingham Palace", "Green Park", "Wellington Arch"]
    assert pages[0].pageid == 1001
    assert pages[0].description == "royal residence in London"

    assert len(requests) == 1
    assert requests[0].method == "GET"
    assert requests[0].url.params["ggscoord"] == "51.501|-0.141"
    assert requests[0].url.params["ggsradius"] == "10000"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"batchcomplete": ""}, {"query": {}}, {}])
async def test_missing_query_or_pages_fails(payload):
    async with mock_client(json_handler(payload)) as client:
        fetcher = NearbyPlacesFetcher(client=client)
        await fetcher.fetch_nearby(POINT)

    assert fetcher.loading_state == FAILED


@pytest.mark.asyncio
async def test_empty_pages_loads_empty_list():
    async with mock_client(json_handler({"query": {"pages": {}}})) as client:
        fetcher = NearbyPlacesFetcher(client=client)
        await fetcher.fetch_nearby(POINT)

    assert fetcher.loading_state == LoadingState.loaded([])


@pytest.mark.asyncio
async def test_malformed_json_fails():
    def handler(request):
        return httpx.Response(200, content=b"{\"query\": {\"pages\": ")

    async with mock_client(handler) as client:
        fetcher = NearbyPlacesFetcher(client=client)
        states = record_states(fetcher)
        await fetcher.fetch_nearby(POINT)

    assert states == [LoadingStatus.LOADING, LoadingStatus.FAILED]
    assert fetcher.loading_state == FAILED


@pytest.mark.asyncio
async def test_unexpected_shape_fails():
    payload = {"query": {"pages": [{"title": "no id"}]}}
    async with mock_client(json_handler(payload)) as client:
        fetcher = NearbyPlacesFetcher(client=client)
        await fetcher.fetch_nearby(POINT)

    assert fetcher.loading_state == FAILED


@pytest.mark.asyncio
async def test_server_error_fails():
    async with mock_client(json_handler(THREE_PAGES, status_code=503)) as client:
        fetcher = NearbyPlacesFetcher(client=client)
        await fetcher.fetch_nearby(POINT)

    assert fetcher.loading_state == FAILED


@pytest.mark.asyncio
async def test_timeout_fails_without_retry():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectTimeout("timed out", request=request)

    async with mock_client(handler) as client:
        fetcher = NearbyPlacesFetcher(client=client)
        states = record_states(fetcher)
        await fetcher.fetch_nearby(POINT)

    assert states == [LoadingStatus.LOADING, LoadingStatus.FAILED]
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_fetch_runs_once_per_fetcher():
    async with mock_client(json_handler(THREE_PAGES)) as client:
        fetcher = NearbyPlacesFetcher(client=client)
        await fetcher.fetch_nearby(POINT)
        with pytest.raises(RuntimeError):
            await fetcher.fetch_nearby(POINT)

    assert len(fetcher.loading_state.pages) == 3


@pytest.mark.asyncio
async def test_results_are_applied_through_dispatch():
    queued = []
    async with mock_client(json_handler(THREE_PAGES)) as client:
        fetcher = NearbyPlacesFetcher(dispatch=queued.append, client=client)
        await fetcher.fetch_nearby(POINT)

    assert fetcher.loading_state == LOADING
    for apply in queued:
        apply()
    assert fetcher.loading_state.status is LoadingStatus.LOADED
