"""Canned server responses for running the client without a server."""

from typing import Any, Dict, Optional

from .client import SubsonicClient, build_url
from .models import SubsonicConfig
from .transport import FixtureTransport

MOCK_URL = "https://mock.subsonic.invalid"

# (operation, extra query parameters, response body)
FIXTURES = [
    ("ping", {}, b"""{"subsonic-response": {
        "status": "ok",
        "xmlns": "http://subsonic.org/restapi",
        "version": "1.9.0"
    }}"""),
    ("getLicense", {}, b"""{"subsonic-response": {
        "status": "ok",
        "xmlns": "http://subsonic.org/restapi",
        "license": {
            "valid": true,
            "email": "mock@example.com",
            "date": "2014-01-01T00:00:00",
            "key": "abcdef0123456789abcdef0123456789"
        },
        "version": "1.9.0"
    }}"""),
    ("getMusicFolders", {}, b"""{"subsonic-response": {
        "status": "ok",
        "xmlns": "http://subsonic.org/restapi",
        "musicFolders": {"musicFolder": {
            "id": 0,
            "name": "Music"
        }},
        "version": "1.9.0"
    }}"""),
    ("getIndexes", {}, b"""{"subsonic-response": {
        "status": "ok",
        "indexes": {
            "index": [{
                "name": "A",
                "artist": {
                    "id": 1,
                    "name": "Adventure"
                }
            },
            {
                "name": "B",
                "artist": {
                    "id": 2,
                    "name": "Boston"
                }
            }],
            "lastModified": 1395014311154
        },
        "xmlns": "http://subsonic.org/restapi",
        "version": "1.9.0"
    }}"""),
    ("getMusicDirectory", {"id": 1}, b"""{"subsonic-response": {
        "status": "ok",
        "directory": {
            "child": {
                "id": 405,
                "title": "2008 - Adventure",
                "created": "2013-08-12T00:12:24",
                "album": "Adventure",
                "parent": 1,
                "isDir": true,
                "artist": "Adventure",
                "coverArt": 405
            },
            "id": 3,
            "name": "Adventure"
        },
        "xmlns": "http://subsonic.org/restapi",
        "version": "1.9.0"
    }}"""),
    ("getNowPlaying", {}, b"""{"subsonic-response": {
        "status": "ok",
        "xmlns": "http://subsonic.org/restapi",
        "nowPlaying": "",
        "version": "1.9.0"
    }}"""),
]


def build_fixture_transport(
    config: SubsonicConfig, extra: Optional[Dict[str, Any]] = None
) -> FixtureTransport:
    """Build a FixtureTransport keyed by this config's request URLs.

    Args:
        config: Config whose URL and credentials shape the keys
        extra: Additional responses keyed by URL, overriding the defaults
    """
    responses = {
        build_url(config, operation, **params): body for operation, params, body in FIXTURES
    }
    responses.update(extra or {})
    return FixtureTransport(responses)


def mock_config() -> SubsonicConfig:
    return SubsonicConfig(url=MOCK_URL, username="mock", password="mock")


def create_mock_client(config: Optional[SubsonicConfig] = None) -> SubsonicClient:
    """Create a client answering from FIXTURES instead of a server."""
    config = config or mock_config()
    return SubsonicClient(config, transport=build_fixture_transport(config))
