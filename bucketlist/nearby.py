"""Nearby places lookup against the Wikipedia geosearch API."""

from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from . import config
from .location import Coordinate
from .observable import Dispatch, Observable


class NearbyPage(BaseModel):
    """One geosearch hit."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    pageid: int
    title: str
    terms: Optional[Dict[str, List[str]]] = None

    @property
    def description(self) -> str:
        descriptions = (self.terms or {}).get("description")
        return descriptions[0] if descriptions else "No further information"


class GeoSearchQuery(BaseModel):
    pages: Dict[int, NearbyPage]


class GeoSearchResult(BaseModel):
    query: GeoSearchQuery


class LoadingStatus(Enum):
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class LoadingState(NamedTuple):
    status: LoadingStatus
    pages: Tuple[NearbyPage, ...] = ()

    @classmethod
    def loaded(cls, pages: Sequence[NearbyPage]) -> "LoadingState":
        return cls(LoadingStatus.LOADED, tuple(pages))


LOADING = LoadingState(LoadingStatus.LOADING)
FAILED = LoadingState(LoadingStatus.FAILED)


def build_params(point: Coordinate) -> dict:
    """Query parameters for a geosearch around ``point``."""
    latitude, longitude = point
    return {
        "ggscoord": f"{latitude}|{longitude}",
        "action": "query",
        "prop": "coordinates|pageimages|pageterms",
        "colimit": config.search_limit,
        "piprop": "thumbnail",
        "pithumbsize": 500,
        "pilimit": config.search_limit,
        "wbptterms": "description",
        "generator": "geosearch",
        "ggsradius": config.search_radius,
        "ggslimit": config.search_limit,
        "format": "json",
    }


class NearbyPlacesFetcher(Observable):
    """Fetch the pages near one coordinate, exposing a three-state status.

    Each fetcher runs a single request; open a new one for every edit session.
    """

    def __init__(self, dispatch: Optional[Dispatch] = None,
                 client: Optional[httpx.AsyncClient] = None):
        super().__init__(dispatch)
        self.loading_state: LoadingState = LOADING
        self._client = client
        self._started = False

    async def fetch_nearby(self, point: Coordinate) -> None:
        if self._started:
            raise RuntimeError("fetch_nearby can only run once per fetcher")
        self._started = True
        self._publish(loading_state=LOADING)

        try:
            response = await self._get(build_params(point))
            response.raise_for_status()
            result = GeoSearchResult.model_validate_json(response.content)
        except (httpx.HTTPError, ValidationError) as e:
            print(f"Error fetching nearby places: {e}")
            self._publish(loading_state=FAILED)
            return

        pages = sorted(result.query.pages.values(), key=lambda page: page.title)
        self._publish(loading_state=LoadingState.loaded(pages))

    async def _get(self, params: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(config.geosearch_url, params=params)
        async with httpx.AsyncClient(
            timeout=config.request_timeout,
            headers={"User-Agent": config.user_agent},
            follow_redirects=True,
        ) as client:
            return await client.get(config.geosearch_url, params=params)
