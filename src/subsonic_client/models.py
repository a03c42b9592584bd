"""Data models for Subsonic API integration."""

import os
import warnings
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class SubsonicConfig:
    """Configuration for connecting to a Subsonic-compatible server.

    Attributes:
        url: Base server URL (e.g., "http://music.example.com:4040")
        username: Subsonic username
        password: Subsonic password, sent as the ``p`` query parameter
        client_name: Client identifier for API requests
        api_version: Subsonic REST protocol version
        timeout: Connect/write timeout in seconds
        read_timeout: Read timeout in seconds
        include_video: Keep video items in directory listings
    """

    url: str
    username: str
    password: str = ""
    client_name: str = "subsonic-client"
    api_version: str = "1.8.0"
    timeout: float = 30.0
    read_timeout: float = 60.0
    include_video: bool = True

    def __post_init__(self):
        """Validate configuration on initialization."""
        if not self.url or not self.url.startswith(("http://", "https://")):
            raise ValueError("url must be a valid HTTP/HTTPS URL")
        if not self.username:
            raise ValueError("username is required")
        if self.timeout <= 0 or self.read_timeout <= 0:
            raise ValueError("timeouts must be positive")

        # Warn about insecure HTTP connections
        if not self.url.startswith("https://"):
            warnings.warn(
                "Using HTTP instead of HTTPS for Subsonic connection. "
                "Credentials will be transmitted insecurely.",
                UserWarning,
                stacklevel=3,
            )

    @classmethod
    def from_environment(cls) -> "SubsonicConfig":
        """Load configuration from environment variables.

        Returns:
            SubsonicConfig: Loaded configuration object

        Raises:
            EnvironmentError: If required environment variables are missing
        """
        required = {
            "SUBSONIC_URL": os.getenv("SUBSONIC_URL"),
            "SUBSONIC_USER": os.getenv("SUBSONIC_USER"),
            "SUBSONIC_PASSWORD": os.getenv("SUBSONIC_PASSWORD"),
        }
        missing = [var for var, value in required.items() if not value]
        if missing:
            raise EnvironmentError(
                f"Required environment variables missing: {', '.join(missing)}\n"
                f"Example: export SUBSONIC_URL='https://your-server.com'"
            )

        return cls(
            url=required["SUBSONIC_URL"],
            username=required["SUBSONIC_USER"],
            password=required["SUBSONIC_PASSWORD"],
            client_name=os.getenv("SUBSONIC_CLIENT_NAME", "subsonic-client"),
            api_version=os.getenv("SUBSONIC_API_VERSION", "1.8.0"),
            timeout=float(os.getenv("SUBSONIC_TIMEOUT", "30")),
            read_timeout=float(os.getenv("SUBSONIC_READ_TIMEOUT", "60")),
            include_video=os.getenv("SUBSONIC_INCLUDE_VIDEO", "true").lower()
            in ("1", "true", "yes"),
        )


class EnvelopeStatus(Enum):
    """Value of the envelope's ``status`` field."""

    OK = "ok"
    FAILED = "failed"


class MediaKind(Enum):
    """Kind of a media item, from its ``isVideo`` flag."""

    AUDIO = "audio"
    VIDEO = "video"


@dataclass(frozen=True)
class APIError:
    """Error object embedded in a failed response."""

    code: int
    message: str


@dataclass(frozen=True)
class Envelope:
    """Header of a ``subsonic-response`` document.

    ``error`` is set if and only if ``status`` is FAILED.
    """

    status: EnvelopeStatus
    server_version: str
    xmlns: str = ""
    error: Optional[APIError] = None
    open_subsonic: bool = False


@dataclass(frozen=True)
class Status:
    """Result of ping."""

    status: str
    server_version: str
    xmlns: str
    open_subsonic: bool = False


@dataclass(frozen=True)
class License:
    """Server license details from getLicense."""

    valid: bool
    email: str
    key: str
    issued: datetime


@dataclass(frozen=True)
class MusicFolder:
    """Top-level music folder."""

    id: int
    name: str


@dataclass(frozen=True)
class IndexArtist:
    """Artist entry inside an index group.

    ``album_count`` and ``cover_art_id`` are only reported by getArtists.
    """

    id: int
    name: str
    album_count: Optional[int] = None
    cover_art_id: Optional[int] = None


@dataclass(frozen=True)
class IndexGroup:
    """One alphabetic bucket of artists."""

    name: str
    artists: Tuple[IndexArtist, ...] = ()


@dataclass(frozen=True)
class Directory:
    """A child of a music directory that is itself a directory."""

    id: int
    parent: int
    title: str
    album: str
    artist: str
    created: datetime
    cover_art_id: Optional[int] = None


@dataclass(frozen=True)
class MediaItem:
    """An audio or video file.

    Attributes:
        id: Media file ID
        parent: ID of the containing directory
        title: Title (song or video name)
        album: Album name, empty when not reported
        artist: Artist name, None when not reported
        content_type: MIME type of the stored file
        suffix: File extension of the stored file
        size: File size in bytes
        duration: Playing time
        bit_rate: Bitrate in kbps
        created: When the file was added to the library (UTC)
        kind: AUDIO or VIDEO
        path: Path relative to the music folder
        media_type: Server-side type ("music", "podcast", ...)
        transcoded_content_type: MIME type after transcoding, if transcoded
        transcoded_suffix: Extension after transcoding, if transcoded
        track: Track number
        disc_number: Disc number
        year: Release year
        genre: Genre
        album_id: ID3 album ID
        artist_id: ID3 artist ID
        cover_art_id: Cover art ID
    """

    id: int
    parent: int
    title: str
    album: str
    artist: Optional[str]
    content_type: str
    suffix: str
    size: int
    duration: timedelta
    bit_rate: int
    created: datetime
    kind: MediaKind = MediaKind.AUDIO
    path: Optional[str] = None
    media_type: Optional[str] = None
    transcoded_content_type: Optional[str] = None
    transcoded_suffix: Optional[str] = None
    track: Optional[int] = None
    disc_number: Optional[int] = None
    year: Optional[int] = None
    genre: Optional[str] = None
    album_id: Optional[int] = None
    artist_id: Optional[int] = None
    cover_art_id: Optional[int] = None

    @property
    def is_video(self) -> bool:
        return self.kind is MediaKind.VIDEO


@dataclass(frozen=True)
class DirectoryListing:
    """Contents of one music directory."""

    id: int
    name: str
    parent: Optional[int] = None
    directories: Tuple[Directory, ...] = ()
    media: Tuple[MediaItem, ...] = ()

    @property
    def audio(self) -> Tuple[MediaItem, ...]:
        return tuple(item for item in self.media if item.kind is MediaKind.AUDIO)

    @property
    def videos(self) -> Tuple[MediaItem, ...]:
        return tuple(item for item in self.media if item.kind is MediaKind.VIDEO)

    @property
    def is_empty(self) -> bool:
        return not self.directories and not self.media


@dataclass(frozen=True)
class NowPlayingEntry:
    """A media item currently being played by some user."""

    media: MediaItem
    minutes_ago: int
    player_id: int
    username: Optional[str] = None
    player_name: Optional[str] = None


@dataclass(frozen=True)
class Album:
    """Album metadata from ID3 browsing (getArtist)."""

    id: int
    name: str
    song_count: int
    duration: timedelta
    created: datetime
    artist: Optional[str] = None
    artist_id: Optional[int] = None
    cover_art_id: Optional[int] = None
    year: Optional[int] = None
    genre: Optional[str] = None


@dataclass(frozen=True)
class Artist:
    """Artist with albums from getArtist."""

    id: int
    name: str
    album_count: int
    cover_art_id: Optional[int] = None
    albums: Tuple[Album, ...] = ()


@dataclass(frozen=True)
class StreamOptions:
    """Optional transcoding parameters for stream.

    Attributes:
        max_bit_rate: Limit bitrate to this value in kbps
        format: Target format, e.g. "mp3" or "flv" ("raw" disables transcoding)
        time_offset: Start video streaming at this offset in seconds
        size: Requested video size as WxH, e.g. "640x480"
        estimate_content_length: Ask the server to set Content-Length for transcodes
    """

    max_bit_rate: Optional[int] = None
    format: Optional[str] = None
    time_offset: Optional[int] = None
    size: Optional[str] = None
    estimate_content_length: bool = False

    def to_params(self) -> Dict[str, str]:
        """Return query parameters for the options that are set."""
        params = {}
        if self.max_bit_rate is not None:
            params["maxBitRate"] = str(self.max_bit_rate)
        if self.format:
            params["format"] = self.format
        if self.time_offset is not None:
            params["timeOffset"] = str(self.time_offset)
        if self.size:
            params["size"] = self.size
        if self.estimate_content_length:
            params["estimateContentLength"] = "true"
        return params
