"""Shared fixtures for Subsonic client tests."""

from typing import Any, Dict

import pytest

from subsonic_client.models import SubsonicConfig


@pytest.fixture
def config() -> SubsonicConfig:
    return SubsonicConfig(
        url="https://music.example.com",
        username="admin",
        password="secret",
    )


@pytest.fixture
def song() -> Dict[str, Any]:
    """A getMusicDirectory audio child as Subsonic emits it."""
    return {
        "id": "1001",
        "parent": "405",
        "title": "Wonderwall",
        "album": "(What's the Story) Morning Glory?",
        "artist": "Oasis",
        "isDir": False,
        "coverArt": "405",
        "created": "2013-08-12T00:12:24Z",
        "duration": 258,
        "bitRate": 320,
        "track": 3,
        "discNumber": 1,
        "year": 1995,
        "genre": "Rock",
        "size": 10336256,
        "suffix": "mp3",
        "contentType": "audio/mpeg",
        "isVideo": False,
        "path": "Oasis/Morning Glory/03 Wonderwall.mp3",
        "albumId": 55,
        "artistId": "12",
        "type": "music",
    }


@pytest.fixture
def video() -> Dict[str, Any]:
    return {
        "id": 2002,
        "parent": 405,
        "title": "Live at Knebworth",
        "isDir": False,
        "isVideo": True,
        "created": "2013-08-12T00:12:24",
        "duration": 3600,
        "bitRate": 1500,
        "size": 734003200,
        "suffix": "mp4",
        "contentType": "video/mp4",
        "transcodedSuffix": "flv",
        "transcodedContentType": "video/x-flv",
    }
