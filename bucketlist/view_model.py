"""State behind the main map screen."""

from typing import Optional, Tuple

import httpx

from . import config
from .auth import Alert, AuthenticationGate, Authenticator
from .config import MapStyle
from .edit_session import EditSession
from .location import Coordinate, Location
from .observable import Dispatch, Observable
from .storage import LocationStore


class MapViewModel(Observable):
    """Tie the store and the authentication gate to what the map shows."""

    def __init__(self, authenticator: Authenticator, store: Optional[LocationStore] = None,
                 dispatch: Optional[Dispatch] = None):
        super().__init__(dispatch)
        self.store = store or LocationStore()
        self.gate = AuthenticationGate(authenticator, dispatch=dispatch)
        self.selected_place: Optional[Location] = None
        self.map_style: MapStyle = config.map_style
        self.store.subscribe(self._notify)
        self.gate.subscribe(self._notify)

    @property
    def locations(self) -> Tuple[Location, ...]:
        return self.store.locations

    @property
    def is_unlocked(self) -> bool:
        return self.gate.is_unlocked

    @property
    def pending_alert(self) -> Optional[Alert]:
        return self.gate.pending_alert

    async def authenticate(self) -> None:
        await self.gate.authenticate()

    def dismiss_alert(self) -> None:
        self.gate.dismiss_alert()

    def add_location(self, point: Coordinate) -> Location:
        return self.store.add(point)

    def select(self, location: Optional[Location]) -> None:
        self.selected_place = location
        self._notify("selected_place")

    def update(self, location: Location) -> bool:
        """Replace the selected location with its edited value."""
        if self.selected_place is None:
            return False
        replaced = self.store.update(location, self.selected_place)
        self.select(None)
        return replaced

    def toggle_map_style(self) -> MapStyle:
        if self.map_style is MapStyle.STANDARD:
            self.map_style = MapStyle.HYBRID
        else:
            self.map_style = MapStyle.STANDARD
        self._notify("map_style")
        return self.map_style

    def edit_session(self, location: Location,
                     client: Optional[httpx.AsyncClient] = None) -> EditSession:
        """Select ``location`` and open an edit session that saves back here."""
        self.select(location)
        return EditSession(location, on_save=self.update, dispatch=self._dispatch,
                           client=client)
