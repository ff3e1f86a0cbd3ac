"""Storage handler for saved locations."""

import os
import threading
from pathlib import Path
from typing import List, Optional, Tuple

from . import config
from .location import Coordinate, Location, LocationCollection
from .observable import Observable

# Owner read/write only, the closest desktop equivalent of file protection
SAVE_FILE_MODE = 0o600


def _atomic_write_bytes(out_path: Path, data: bytes) -> None:
    """Atomically write bytes to file to avoid corruption."""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = out_path.with_name(out_path.name + ".tmp")
    try:
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, SAVE_FILE_MODE)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, SAVE_FILE_MODE)
        os.replace(tmp_path, out_path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


class LocationStore(Observable):
    """Own the saved locations and keep the save file in step with them."""

    def __init__(self, save_path: Optional[Path] = None):
        """Initialize the store and load whatever was saved before.

        Args:
            save_path: File to persist to (default: config.save_path())
        """
        super().__init__()
        self.save_path = Path(save_path) if save_path else config.save_path()
        self._locations: List[Location] = []
        self._write_lock = threading.Lock()
        self.load()

    @property
    def locations(self) -> Tuple[Location, ...]:
        return tuple(self._locations)

    def load(self) -> None:
        """Load locations from the save file, starting empty if that fails."""
        try:
            self._locations = LocationCollection.validate_json(self.save_path.read_bytes())
            print(f"Loaded {len(self._locations)} locations from {self.save_path}")
        except FileNotFoundError:
            self._locations = []
        except Exception as e:
            print(f"Could not read saved locations, starting empty: {e}")
            self._locations = []
        self._notify("locations")

    def save(self) -> bool:
        """Write the whole collection to disk.

        Returns:
            True if the file was written, False otherwise
        """
        with self._write_lock:
            try:
                data = LocationCollection.dump_json(self._locations, indent=2)
                _atomic_write_bytes(self.save_path, data)
                return True
            except Exception as e:
                print(f"Unable to save data to {self.save_path}: {e}")
                return False

    def add(self, point: Coordinate) -> Location:
        """Append a new location at the given coordinate and persist it.

        Args:
            point: Where the user tapped on the map

        Returns:
            The newly created location
        """
        latitude, longitude = point
        location = Location(
            name=config.placeholder_name,
            description="",
            latitude=latitude,
            longitude=longitude,
        )
        self._locations.append(location)
        self._notify("locations")
        self.save()
        return location

    def update(self, location: Location, selected: Location) -> bool:
        """Replace the first location equal to ``selected`` with ``location``.

        Args:
            location: The edited value
            selected: The value that was selected when editing began

        Returns:
            True if a location was replaced, False if nothing matched
        """
        for index, existing in enumerate(self._locations):
            if existing == selected:
                self._locations[index] = location
                self._notify("locations")
                self.save()
                return True
        return False
