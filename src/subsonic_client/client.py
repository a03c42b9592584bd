"""HTTP client for the Subsonic REST API (JSON responses)."""

import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from .builders import (
    build_artist,
    build_directory_listing,
    build_index_groups,
    build_license,
    build_music_folder,
    build_now_playing,
    build_status,
    section,
)
from .envelope import decode, raise_for_error
from .exceptions import ShapeError
from .logger import redact_url
from .models import (
    Artist,
    DirectoryListing,
    Envelope,
    IndexGroup,
    License,
    MusicFolder,
    NowPlayingEntry,
    Status,
    StreamOptions,
    SubsonicConfig,
)
from .normalize import normalize_list
from .transport import HTTPTransport, MediaStream, Transport

logger = logging.getLogger(__name__)

ERROR_CONTENT_TYPES = ("application/json", "text/xml")


def build_url(config: SubsonicConfig, operation: str, **params: Any) -> str:
    """Build the request URL for an API operation.

    Credentials, client name, protocol version and ``f=json`` are always
    sent. Parameters whose value is None are omitted entirely; booleans are
    sent as "true"/"false".

    Args:
        config: Client configuration
        operation: API operation name (e.g., "ping", "getMusicDirectory")
        **params: Operation-specific query parameters

    Returns:
        Full URL, e.g. ``http://host/rest/ping.view?u=..&p=..&c=..&v=..&f=json``

    Example:
        >>> build_url(config, "getMusicDirectory", id=1)
        'http://music.example.com/rest/getMusicDirectory.view?u=admin&p=secret&c=subsonic-client&v=1.8.0&f=json&id=1'
    """
    query = {
        "u": config.username,
        "p": config.password,
        "c": config.client_name,
        "v": config.api_version,
        "f": "json",
    }
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        query[key] = str(value)

    base = config.url.rstrip("/")
    return str(httpx.URL(f"{base}/rest/{operation}.view", params=query))


def _positive_or_none(value: Optional[int]) -> Optional[int]:
    # negative values are "not set"
    if value is None or value < 0:
        return None
    return value


class SubsonicClient:
    """Synchronous client for the Subsonic REST API.

    Every operation is a single request/response round trip. The client
    holds no per-call state, so one instance can be shared between threads.

    Attributes:
        config: SubsonicConfig with server connection details
        transport: Transport used to fetch response bodies

    Example:
        >>> config = SubsonicConfig(
        ...     url="http://music.example.com:4040",
        ...     username="john",
        ...     password="secret"
        ... )
        >>> with SubsonicClient(config) as client:
        ...     for folder in client.get_music_folders():
        ...         print(folder.id, folder.name)
    """

    def __init__(
        self,
        config: SubsonicConfig,
        transport: Optional[Transport] = None,
        check: bool = True,
    ):
        """Initialize Subsonic API client.

        Args:
            config: SubsonicConfig with server URL and credentials
            transport: Transport to use (default: HTTPTransport from config).
                A transport passed in is not closed if the check fails.
            check: Ping the server once before returning

        Raises:
            SubsonicError: If the connectivity check fails
        """
        self.config = config
        self._owns_transport = transport is None
        self.transport = transport or HTTPTransport(
            timeout=config.timeout, read_timeout=config.read_timeout
        )
        logger.info(f"Initialized Subsonic client for {config.url}")

        if check:
            try:
                self.ping()
            except Exception:
                # a caller-supplied transport stays open for the caller
                if self._owns_transport:
                    self.close()
                raise

    def _build_url(self, operation: str, **params: Any) -> str:
        return build_url(self.config, operation, **params)

    def _request(self, operation: str, **params: Any) -> Tuple[Envelope, Dict[str, Any]]:
        """Fetch and decode an operation, raising on error envelopes.

        Returns:
            Tuple of (Envelope, payload)

        Raises:
            TransportError: For network/HTTP errors
            ParseError: If the body is not JSON
            RemoteError: If the server reported a failure
        """
        url = self._build_url(operation, **params)
        logger.debug(f"Requesting {redact_url(url)}")
        response = self.transport.fetch(url)
        envelope, payload = decode(response.content, redact_url(url))
        raise_for_error(envelope)
        return envelope, payload

    def _open_binary(self, operation: str, **params: Any) -> MediaStream:
        """Open a binary endpoint, surfacing error envelopes.

        The server reports errors on binary endpoints as a JSON body with a
        200 status, so the content type is checked before handing the stream
        to the caller.
        """
        url = self._build_url(operation, **params)
        logger.debug(f"Opening stream {redact_url(url)}")
        stream = self.transport.open_stream(url)

        content_type = stream.content_type.lower()
        if not content_type.startswith(ERROR_CONTENT_TYPES):
            return stream

        logger.warning(f"Expected binary response but got {content_type}")
        try:
            body = stream.read()
        finally:
            stream.close()
        envelope, _ = decode(body, redact_url(url))
        raise_for_error(envelope)
        raise ShapeError("content-type", operation, f"{content_type} without error")

    # -- System --

    def ping(self) -> Status:
        """Test server connectivity and authentication.

        Returns:
            Status with status, server version and xmlns

        Raises:
            SubsonicAuthenticationError: If credentials are invalid
            TransportError: For network/HTTP errors
        """
        envelope, _ = self._request("ping")
        status = build_status(envelope)
        if status.open_subsonic:
            logger.info("OpenSubsonic server detected")
        logger.info(f"Subsonic ping successful (version {status.server_version})")
        return status

    def get_license(self) -> License:
        """Get details about the server license."""
        _, payload = self._request("getLicense")
        license_ = build_license(section(payload, "license", "getLicense"))
        logger.info(f"License valid: {license_.valid}")
        return license_

    # -- Browsing --

    def get_music_folders(self) -> List[MusicFolder]:
        """Get all configured top-level music folders.

        Returns:
            List of MusicFolder in server order

        Example:
            >>> for folder in client.get_music_folders():
            ...     print(f"Folder: {folder.name} (ID: {folder.id})")
        """
        _, payload = self._request("getMusicFolders")
        container = section(payload, "musicFolders", "getMusicFolders", allow_blank=True)
        items = normalize_list(container.get("musicFolder"), "musicFolder", "getMusicFolders")
        folders = [build_music_folder(item) for item in items]
        logger.info(f"Retrieved {len(folders)} music folders")
        return folders

    def get_indexes(
        self,
        music_folder_id: Optional[int] = None,
        if_modified_since: Optional[int] = None,
    ) -> List[IndexGroup]:
        """Get an indexed structure of all artists.

        Args:
            music_folder_id: Only return artists in this music folder
            if_modified_since: Only return a result if the index changed after
                this time (milliseconds since the epoch)

        Negative values are treated the same as None.

        Returns:
            List of IndexGroup in server order
        """
        _, payload = self._request(
            "getIndexes",
            musicFolderId=_positive_or_none(music_folder_id),
            ifModifiedSince=_positive_or_none(if_modified_since),
        )
        container = section(payload, "indexes", "getIndexes", allow_blank=True)
        groups = build_index_groups(container, "getIndexes")
        logger.info(f"Retrieved {len(groups)} index groups")
        return groups

    def get_music_directory(self, directory_id: int) -> DirectoryListing:
        """List all files and directories in a music directory.

        Video items are included as MediaKind.VIDEO unless the config sets
        include_video to False.

        Args:
            directory_id: Directory ID from get_indexes or a parent listing

        Returns:
            DirectoryListing with directories and media items

        Raises:
            SubsonicNotFoundError: If directory_id does not exist
        """
        _, payload = self._request("getMusicDirectory", id=directory_id)
        listing = build_directory_listing(
            section(payload, "directory", "getMusicDirectory"),
            "getMusicDirectory",
            include_video=self.config.include_video,
        )
        logger.info(
            f"Retrieved directory {directory_id}: {len(listing.directories)} directories, "
            f"{len(listing.media)} media items"
        )
        return listing

    def get_artists(self, music_folder_id: Optional[int] = None) -> List[IndexGroup]:
        """Get all artists using ID3 tags (getArtists endpoint)."""
        _, payload = self._request("getArtists", musicFolderId=_positive_or_none(music_folder_id))
        container = section(payload, "artists", "getArtists", allow_blank=True)
        groups = build_index_groups(container, "getArtists")
        logger.info(f"Retrieved {sum(len(g.artists) for g in groups)} artists")
        return groups

    def get_artist(self, artist_id: int) -> Artist:
        """Get an artist with albums using ID3 tags (getArtist endpoint).

        Raises:
            SubsonicNotFoundError: If artist_id does not exist
        """
        _, payload = self._request("getArtist", id=artist_id)
        artist = build_artist(section(payload, "artist", "getArtist"), "getArtist")
        logger.info(f"Retrieved artist {artist_id} with {len(artist.albums)} albums")
        return artist

    # -- Album/song lists --

    def get_now_playing(self) -> List[NowPlayingEntry]:
        """Get what all users are currently playing.

        Returns:
            List of NowPlayingEntry, empty when nothing is playing
        """
        _, payload = self._request("getNowPlaying")
        entries = build_now_playing(payload.get("nowPlaying"), "getNowPlaying")
        logger.info(f"Retrieved {len(entries)} now playing entries")
        return entries

    # -- Media retrieval --

    def stream(self, media_id: int, options: Optional[StreamOptions] = None) -> MediaStream:
        """Open a (possibly transcoded) media stream.

        Args:
            media_id: Media file ID
            options: Optional transcoding parameters; unset options are not sent

        Returns:
            MediaStream owned by the caller

        Raises:
            SubsonicNotFoundError: If media_id does not exist
            TransportError: For network/HTTP errors
        """
        params = options.to_params() if options else {}
        logger.debug(f"Streaming media: {media_id}")
        return self._open_binary("stream", id=media_id, **params)

    def get_stream_url(self, media_id: int, options: Optional[StreamOptions] = None) -> str:
        """Get the stream URL for a media file without opening it.

        The URL carries the credentials, so treat it as a secret.
        """
        params = options.to_params() if options else {}
        return self._build_url("stream", id=media_id, **params)

    def download(self, media_id: int) -> MediaStream:
        """Open the original, non-transcoded media file."""
        logger.debug(f"Downloading media: {media_id}")
        return self._open_binary("download", id=media_id)

    def get_cover_art(self, cover_art_id: int, size: Optional[int] = None) -> MediaStream:
        """Open a cover art image, optionally scaled to size pixels."""
        size = size if size is not None and size > 0 else None
        logger.debug(f"Fetching cover art: {cover_art_id} (size={size})")
        return self._open_binary("getCoverArt", id=cover_art_id, size=size)

    # -- Media annotation --

    def scrobble(
        self, media_id: int, time: Optional[int] = None, submission: bool = True
    ) -> bool:
        """Register playback of a media file.

        Args:
            media_id: ID of the media file that was played
            time: When playback started, in milliseconds since the epoch;
                omitted when None
            submission: True for a submission, False for a "now playing"
                notification

        Returns:
            True if the server accepted the request
        """
        action = "Scrobbling" if submission else "Updating now playing for"
        logger.debug(f"{action} media: {media_id}")
        self._request(
            "scrobble",
            id=media_id,
            time=_positive_or_none(time),
            submission=submission,
        )
        logger.info(f"Successfully {action.lower()} media {media_id}")
        return True

    def close(self):
        """Close the transport and release connections."""
        self.transport.close()
        logger.debug("Closed Subsonic client")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
