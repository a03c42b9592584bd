"""Build typed records from normalized Subsonic payloads.

Every builder is a pure function of the decoded JSON. Required fields that
are absent raise BuildError, required fields of the wrong type raise
CoercionError, and optional fields resolve to None instead of failing.
"""

import logging
from typing import Any, Dict, List, Mapping, Union

from .exceptions import CoercionError, ShapeError
from .models import (
    Album,
    Artist,
    Directory,
    DirectoryListing,
    Envelope,
    IndexArtist,
    IndexGroup,
    License,
    MediaItem,
    MediaKind,
    MusicFolder,
    NowPlayingEntry,
    Status,
)
from .normalize import (
    coerce_to_bool,
    coerce_to_int,
    coerce_to_string,
    normalize_list,
    optional_int,
    optional_str,
    parse_duration,
    parse_timestamp,
    require,
)

logger = logging.getLogger(__name__)


def _required_int(item: Mapping[str, Any], field: str, entity: str) -> int:
    return coerce_to_int(require(item, field, entity), field)


def _required_str(item: Mapping[str, Any], field: str, entity: str) -> str:
    return coerce_to_string(require(item, field, entity), field)


def _flag(item: Mapping[str, Any], field: str) -> bool:
    # isDir / isVideo default to false when absent or unreadable
    value = item.get(field)
    if value is None:
        return False
    try:
        return coerce_to_bool(value, field)
    except CoercionError:
        logger.debug(f"Treating unreadable flag {field!r}={value!r} as false")
        return False


def section(
    payload: Mapping[str, Any], key: str, operation: str, allow_blank: bool = False
) -> Dict[str, Any]:
    """Return an operation's payload section (e.g. "musicFolders").

    Args:
        payload: Decoded ``subsonic-response`` object
        key: Section name
        operation: API operation, used in error messages
        allow_blank: Treat an empty-string section as an empty object

    Raises:
        ShapeError: If the section is absent or not an object
    """
    value = payload.get(key)
    if isinstance(value, dict):
        return value
    if allow_blank and isinstance(value, str) and not value.strip():
        return {}
    raise ShapeError(key, operation, "missing" if value is None else type(value).__name__)


def build_status(envelope: Envelope) -> Status:
    return Status(
        status=envelope.status.value,
        server_version=envelope.server_version,
        xmlns=envelope.xmlns,
        open_subsonic=envelope.open_subsonic,
    )


def build_license(item: Mapping[str, Any]) -> License:
    """Build License from the ``license`` section of getLicense."""
    return License(
        valid=coerce_to_bool(require(item, "valid", "License"), "valid"),
        email=coerce_to_string(item.get("email"), "email"),
        key=coerce_to_string(item.get("key"), "key"),
        issued=parse_timestamp(require(item, "date", "License"), "date"),
    )


def build_music_folder(item: Mapping[str, Any]) -> MusicFolder:
    return MusicFolder(
        id=_required_int(item, "id", "MusicFolder"),
        name=_required_str(item, "name", "MusicFolder"),
    )


def build_index_artist(item: Mapping[str, Any]) -> IndexArtist:
    return IndexArtist(
        id=_required_int(item, "id", "IndexArtist"),
        name=_required_str(item, "name", "IndexArtist"),
        album_count=optional_int(item, "albumCount"),
        cover_art_id=optional_int(item, "coverArt"),
    )


def build_index_group(item: Mapping[str, Any], operation: str) -> IndexGroup:
    """Build one alphabetic bucket, normalizing its ``artist`` field."""
    artists = normalize_list(item.get("artist"), "artist", operation)
    return IndexGroup(
        name=_required_str(item, "name", "IndexGroup"),
        artists=tuple(build_index_artist(artist) for artist in artists),
    )


def build_index_groups(container: Mapping[str, Any], operation: str) -> List[IndexGroup]:
    """Build all index groups of an ``indexes`` or ``artists`` section."""
    items = normalize_list(container.get("index"), "index", operation)
    return [build_index_group(item, operation) for item in items]


def build_directory(item: Mapping[str, Any]) -> Directory:
    return Directory(
        id=_required_int(item, "id", "Directory"),
        parent=_required_int(item, "parent", "Directory"),
        title=_required_str(item, "title", "Directory"),
        album=coerce_to_string(item.get("album"), "album"),
        artist=coerce_to_string(item.get("artist"), "artist"),
        created=parse_timestamp(require(item, "created", "Directory"), "created"),
        cover_art_id=optional_int(item, "coverArt"),
    )


def build_media_item(item: Mapping[str, Any], entity: str = "MediaItem") -> MediaItem:
    """Build an audio or video item.

    Args:
        item: Child or entry mapping
        entity: Entity name reported in BuildError (now-playing entries
            reuse this builder)

    Returns:
        MediaItem whose kind follows the ``isVideo`` flag
    """
    return MediaItem(
        id=_required_int(item, "id", entity),
        parent=_required_int(item, "parent", entity),
        title=_required_str(item, "title", entity),
        album=coerce_to_string(item.get("album"), "album"),
        artist=optional_str(item, "artist"),
        content_type=_required_str(item, "contentType", entity),
        suffix=_required_str(item, "suffix", entity),
        size=_required_int(item, "size", entity),
        duration=parse_duration(require(item, "duration", entity), "duration"),
        bit_rate=_required_int(item, "bitRate", entity),
        created=parse_timestamp(require(item, "created", entity), "created"),
        kind=MediaKind.VIDEO if _flag(item, "isVideo") else MediaKind.AUDIO,
        path=optional_str(item, "path"),
        media_type=optional_str(item, "type"),
        transcoded_content_type=optional_str(item, "transcodedContentType"),
        transcoded_suffix=optional_str(item, "transcodedSuffix"),
        track=optional_int(item, "track"),
        disc_number=optional_int(item, "discNumber"),
        year=optional_int(item, "year"),
        genre=optional_str(item, "genre"),
        album_id=optional_int(item, "albumId"),
        artist_id=optional_int(item, "artistId"),
        cover_art_id=optional_int(item, "coverArt"),
    )


def build_child(item: Mapping[str, Any]) -> Union[Directory, MediaItem]:
    """Branch a directory child on its ``isDir`` flag."""
    if _flag(item, "isDir"):
        return build_directory(item)
    return build_media_item(item)


def build_directory_listing(
    container: Mapping[str, Any], operation: str, include_video: bool = True
) -> DirectoryListing:
    """Build a DirectoryListing from the ``directory`` section.

    A section without a ``child`` field is a directory with no children,
    not an error. Video items are kept as MediaKind.VIDEO unless
    include_video is False, in which case they are dropped.
    """
    directories = []
    media = []
    for item in normalize_list(container.get("child"), "child", operation):
        child = build_child(item)
        if isinstance(child, Directory):
            directories.append(child)
        elif child.is_video and not include_video:
            logger.debug(f"Skipping video: {child.title}")
        else:
            media.append(child)

    return DirectoryListing(
        id=_required_int(container, "id", "DirectoryListing"),
        name=coerce_to_string(container.get("name"), "name"),
        parent=optional_int(container, "parent"),
        directories=tuple(directories),
        media=tuple(media),
    )


def build_now_playing_entry(item: Mapping[str, Any]) -> NowPlayingEntry:
    return NowPlayingEntry(
        media=build_media_item(item, entity="NowPlayingEntry"),
        minutes_ago=_required_int(item, "minutesAgo", "NowPlayingEntry"),
        player_id=_required_int(item, "playerId", "NowPlayingEntry"),
        username=optional_str(item, "username"),
        player_name=optional_str(item, "playerName"),
    )


def build_now_playing(value: Any, operation: str) -> List[NowPlayingEntry]:
    """Build entries from the raw ``nowPlaying`` value.

    When nothing is playing the server emits an empty string, either for
    ``nowPlaying`` itself or for its ``entry`` field. Both mean zero entries.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return []
    if not isinstance(value, dict):
        raise ShapeError("nowPlaying", operation, type(value).__name__)
    entries = normalize_list(value.get("entry"), "entry", operation, allow_blank=True)
    return [build_now_playing_entry(entry) for entry in entries]


def build_album(item: Mapping[str, Any]) -> Album:
    return Album(
        id=_required_int(item, "id", "Album"),
        name=_required_str(item, "name", "Album"),
        song_count=_required_int(item, "songCount", "Album"),
        duration=parse_duration(require(item, "duration", "Album"), "duration"),
        created=parse_timestamp(require(item, "created", "Album"), "created"),
        artist=optional_str(item, "artist"),
        artist_id=optional_int(item, "artistId"),
        cover_art_id=optional_int(item, "coverArt"),
        year=optional_int(item, "year"),
        genre=optional_str(item, "genre"),
    )


def build_artist(container: Mapping[str, Any], operation: str) -> Artist:
    albums = normalize_list(container.get("album"), "album", operation)
    return Artist(
        id=_required_int(container, "id", "Artist"),
        name=_required_str(container, "name", "Artist"),
        album_count=_required_int(container, "albumCount", "Artist"),
        cover_art_id=optional_int(container, "coverArt"),
        albums=tuple(build_album(album) for album in albums),
    )
