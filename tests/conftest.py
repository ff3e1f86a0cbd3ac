import pytest

from bucketlist import config

_SETTINGS = [
    "data_dir",
    "save_filename",
    "placeholder_name",
    "auth_reason",
    "passcode_sha256",
    "max_passcode_attempts",
    "geosearch_url",
    "search_radius",
    "search_limit",
    "request_timeout",
    "map_style",
]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Restore config after each test and keep saved places under tmp_path."""
    for name in _SETTINGS:
        monkeypatch.setattr(config, name, getattr(config, name))
    monkeypatch.setattr(config, "data_dir", tmp_path / "data")
    monkeypatch.delenv("BUCKETLIST_PASSCODE", raising=False)
    return config
