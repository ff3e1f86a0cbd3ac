"""Per-location state for the edit dialog."""

from typing import Callable, Optional

import httpx

from .location import Location
from .nearby import LoadingState, NearbyPlacesFetcher
from .observable import Dispatch, Observable


class EditSession(Observable):
    """Editable copy of one location plus the places around it.

    A session is created each time the edit dialog opens and fetches nearby
    places at most once.
    """

    def __init__(self, location: Location, on_save: Callable[[Location], None],
                 dispatch: Optional[Dispatch] = None,
                 client: Optional[httpx.AsyncClient] = None):
        super().__init__(dispatch)
        self.location = location
        self.on_save = on_save
        self.name = location.name
        self.description = location.description
        self.fetcher = NearbyPlacesFetcher(dispatch=dispatch, client=client)
        self.fetcher.subscribe(self._notify)

    @property
    def loading_state(self) -> LoadingState:
        return self.fetcher.loading_state

    async def load_nearby(self) -> None:
        await self.fetcher.fetch_nearby(self.location.coordinate)

    def save(self) -> Location:
        """Hand the edited location to ``on_save`` and return it."""
        edited = self.location.model_copy(
            update={"name": self.name, "description": self.description}
        )
        self.on_save(edited)
        return edited
