"""
Tests for the per-location edit session.

Run with: python -m pytest tests/test_edit_session.py
"""

import httpx
import pytest

from bucketlist.edit_session import EditSession
from bucketlist.location import EXAMPLE_LOCATION
from bucketlist.nearby import LOADING, LoadingStatus

PAYLOAD = {
    "query": {
        "pages": {
            "7": {"pageid": 7, "title": "The Mall", "terms": {"description": ["road in London"]}},
        }
    }
}


def test_starts_from_location_values():
    session = EditSession(EXAMPLE_LOCATION, on_save=lambda location: None)
    assert session.name == EXAMPLE_LOCATION.name
    assert session.description == EXAMPLE_LOCATION.description
    assert session.loading_state == LOADING


def test_save_keeps_identity_and_coordinates():
    saved = []
    session = EditSession(EXAMPLE_LOCATION, on_save=saved.append)
    session.name = "The Palace"
    session.description = "Changing of the guard at 11"

    edited = session.save()

    assert saved == [edited]
    assert edited.id == EXAMPLE_LOCATION.id
    assert edited.coordinate == EXAMPLE_LOCATION.coordinate
    assert edited.name == "The Palace"
    assert edited.description == "Changing of the guard at 11"
    assert EXAMPLE_LOCATION.name == "Buckingham Palace"


@pytest.mark.asyncio
async def test_load_nearby_for_location():
    seen = []

    def handler(request):
        seen.append(request.url.params["ggscoord"])
        return httpx.Response(200, json=PAYLOAD)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        session = EditSession(EXAMPLE_LOCATION, on_save=lambda location: None, client=client)
        changes = []
        session.subscribe(changes.append)
        await session.load_nearby()

    assert seen == ["51.501|-0.141"]
    assert session.loading_state.status is LoadingStatus.LOADED
    assert [page.title for page in session.loading_state.pages] == ["The Mall"]
    assert changes == ["loading_state", "loading_state"]
