"""Subsonic API client with typed, normalized responses."""

__version__ = "0.1.0"

from .client import SubsonicClient, build_url
from .exceptions import (
    BuildError,
    ClientVersionTooOldError,
    CoercionError,
    ParseError,
    RemoteError,
    ServerVersionTooOldError,
    ShapeError,
    SubsonicAuthenticationError,
    SubsonicAuthorizationError,
    SubsonicError,
    SubsonicNotFoundError,
    SubsonicParameterError,
    SubsonicTrialError,
    SubsonicVersionError,
    TokenAuthenticationNotSupportedError,
    TransportError,
)
from .models import (
    Album,
    Artist,
    Directory,
    DirectoryListing,
    IndexArtist,
    IndexGroup,
    License,
    MediaItem,
    MediaKind,
    MusicFolder,
    NowPlayingEntry,
    Status,
    StreamOptions,
    SubsonicConfig,
)
from .transport import FixtureTransport, HTTPTransport, MediaStream

__all__ = [
    # Client
    "SubsonicClient",
    "build_url",
    # Transports
    "HTTPTransport",
    "FixtureTransport",
    "MediaStream",
    # Models
    "SubsonicConfig",
    "StreamOptions",
    "Status",
    "License",
    "MusicFolder",
    "IndexGroup",
    "IndexArtist",
    "Directory",
    "DirectoryListing",
    "MediaItem",
    "MediaKind",
    "NowPlayingEntry",
    "Artist",
    "Album",
    # Exceptions
    "SubsonicError",
    "TransportError",
    "ParseError",
    "ShapeError",
    "CoercionError",
    "BuildError",
    "RemoteError",
    "SubsonicAuthenticationError",
    "TokenAuthenticationNotSupportedError",
    "ClientVersionTooOldError",
    "ServerVersionTooOldError",
    "SubsonicAuthorizationError",
    "SubsonicNotFoundError",
    "SubsonicParameterError",
    "SubsonicTrialError",
    "SubsonicVersionError",
]
