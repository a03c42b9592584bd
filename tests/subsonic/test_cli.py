"""Tests for the subsonic-client command line."""

from datetime import datetime, timedelta, timezone

import pytest
from pytest_mock import MockerFixture

from subsonic_client import __version__
from subsonic_client.cli import create_parser, main, run_command
from subsonic_client.client import SubsonicClient
from subsonic_client.models import (
    Directory,
    DirectoryListing,
    MediaItem,
    MediaKind,
    NowPlayingEntry,
)

CREATED = datetime(2013, 8, 12, 0, 12, 24, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def no_logging_setup(mocker: MockerFixture):
    return mocker.patch("subsonic_client.cli.setup_logging")


def media(id: int, title: str, kind: MediaKind = MediaKind.AUDIO) -> MediaItem:
    return MediaItem(
        id=id,
        parent=405,
        title=title,
        album="Adventure",
        artist="Adventure",
        content_type="audio/mpeg",
        suffix="mp3",
        size=4096,
        duration=timedelta(seconds=258),
        bit_rate=320,
        created=CREATED,
        kind=kind,
    )


class TestParser:

    def test_command_required(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args([])

    def test_indexes_options(self):
        args = create_parser().parse_args(["indexes", "--folder", "0", "--since", "1395014311154"])

        assert args.folder == 0
        assert args.since == 1395014311154

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--version"])

        assert __version__ in capsys.readouterr().out


class TestMockCommands:
    """Commands answered by the built-in fixtures."""

    def test_ping(self, capsys):
        assert main(["--mock", "ping"]) == 0

        assert capsys.readouterr().out == "ok (server version 1.9.0)\n"

    def test_license(self, capsys):
        assert main(["--mock", "license"]) == 0

        out = capsys.readouterr().out
        assert "valid=True" in out
        assert "issued=2014-01-01T00:00:00+00:00" in out

    def test_folders(self, capsys):
        assert main(["--mock", "folders"]) == 0

        assert capsys.readouterr().out == "0\tMusic\n"

    def test_indexes(self, capsys):
        assert main(["--mock", "indexes"]) == 0

        assert capsys.readouterr().out.splitlines() == ["A\t1\tAdventure", "B\t2\tBoston"]

    def test_directory(self, capsys):
        assert main(["--mock", "directory", "1"]) == 0

        assert capsys.readouterr().out == "405\t[dir]\t2008 - Adventure\n"

    def test_now_playing_empty(self, capsys):
        assert main(["--mock", "now-playing"]) == 0

        assert capsys.readouterr().out == ""

    def test_unknown_directory_fails(self, capsys):
        assert main(["--mock", "directory", "7"]) == 1

        assert "No mock data" in capsys.readouterr().err

    def test_verbose_sets_debug(self, no_logging_setup):
        main(["--mock", "-v", "ping"])

        no_logging_setup.assert_called_once_with("DEBUG")


class TestEnvironment:

    def test_missing_configuration(self, monkeypatch, capsys):
        for var in ("SUBSONIC_URL", "SUBSONIC_USER", "SUBSONIC_PASSWORD"):
            monkeypatch.delenv(var, raising=False)

        assert main(["ping"]) == 1

        assert "SUBSONIC_URL" in capsys.readouterr().err


class TestRunCommand:
    """Output formatting for results the fixtures do not cover."""

    def test_directory_with_media(self, mocker: MockerFixture, capsys):
        client = mocker.MagicMock(spec=SubsonicClient)
        client.get_music_directory.return_value = DirectoryListing(
            id=405,
            name="Adventure",
            directories=(
                Directory(
                    id=406,
                    parent=405,
                    title="Bonus",
                    album="Adventure",
                    artist="Adventure",
                    created=CREATED,
                ),
            ),
            media=(media(1001, "Hypnotic"), media(2002, "Live", MediaKind.VIDEO)),
        )

        run_command(client, create_parser().parse_args(["directory", "405"]))

        assert capsys.readouterr().out.splitlines() == [
            "406\t[dir]\tBonus",
            "1001\t[audio]\tHypnotic\t0:04:18",
            "2002\t[video]\tLive\t0:04:18",
        ]

    def test_now_playing(self, mocker: MockerFixture, capsys):
        client = mocker.MagicMock(spec=SubsonicClient)
        client.get_now_playing.return_value = [
            NowPlayingEntry(media=media(1001, "Hypnotic"), minutes_ago=2, player_id=1, username="admin")
        ]

        run_command(client, create_parser().parse_args(["now-playing"]))

        assert capsys.readouterr().out == "admin\t2m ago\tAdventure - Hypnotic\n"

    def test_indexes_passes_filters(self, mocker: MockerFixture):
        client = mocker.MagicMock(spec=SubsonicClient)
        client.get_indexes.return_value = []

        run_command(client, create_parser().parse_args(["indexes", "--folder", "3"]))

        client.get_indexes.assert_called_once_with(3, None)
