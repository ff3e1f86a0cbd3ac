"""Global configuration and defaults for BucketList."""

from enum import Enum
from pathlib import Path
from typing import Optional


class MapStyle(Enum):
    """Map imagery shown behind the pins."""
    STANDARD = "standard"
    HYBRID = "hybrid"


# Tile servers for each map style
TILE_SERVERS: dict = {
    MapStyle.STANDARD: "https://a.tile.openstreetmap.org/{z}/{x}/{y}.png",
    MapStyle.HYBRID: "https://mt0.google.com/vt/lyrs=y&hl=en&x={x}&y={y}&z={z}&s=Ga",
}

# Storage settings
data_dir: Path = Path.home() / ".bucketlist"
save_filename: str = "SavedPlaces"

# New location defaults
placeholder_name: str = "New location"

# Authentication settings
auth_reason: str = "Please authenticate yourself to unlock your places."
passcode_sha256: Optional[str] = None
max_passcode_attempts: int = 5

# Nearby places (Wikipedia geosearch)
geosearch_url: str = "https://en.wikipedia.org/w/api.php"
search_radius: int = 10000
search_limit: int = 50
request_timeout: float = 10.0
user_agent: str = "BucketList/1.0"

# Map settings
map_style: MapStyle = MapStyle.STANDARD
start_position: tuple = (56.0, -3.0)
start_zoom: int = 6


def save_path() -> Path:
    """Full path of the saved-locations file."""
    return data_dir / save_filename
