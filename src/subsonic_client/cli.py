"""
Subsonic client CLI - browse a server from the command line.

Configuration is read from the environment (SUBSONIC_URL, SUBSONIC_USER,
SUBSONIC_PASSWORD); --mock answers from built-in fixtures instead.
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .client import SubsonicClient
from .exceptions import SubsonicError
from .logger import setup_logging
from .mock import create_mock_client
from .models import SubsonicConfig

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """
    Create argument parser for CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="subsonic-client",
        description="Query a Subsonic server",
        epilog="Example: subsonic-client directory 405",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use built-in fixture responses instead of a server",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("ping", help="Check connectivity")
    commands.add_parser("license", help="Show license details")
    commands.add_parser("folders", help="List music folders")

    indexes = commands.add_parser("indexes", help="List artist indexes")
    indexes.add_argument("--folder", type=int, metavar="ID", help="Music folder ID")
    indexes.add_argument("--since", type=int, metavar="MS", help="Only if modified since")

    directory = commands.add_parser("directory", help="List a music directory")
    directory.add_argument("id", type=int, help="Directory ID")

    commands.add_parser("now-playing", help="List what is currently playing")
    commands.add_parser("artists", help="List artists (ID3)")

    return parser


def run_command(client: SubsonicClient, args: argparse.Namespace) -> None:
    """Run one subcommand and print its result, one line per item."""
    if args.command == "ping":
        status = client.ping()
        print(f"{status.status} (server version {status.server_version})")

    elif args.command == "license":
        license_ = client.get_license()
        print(f"valid={license_.valid} email={license_.email} issued={license_.issued.isoformat()}")

    elif args.command == "folders":
        for folder in client.get_music_folders():
            print(f"{folder.id}\t{folder.name}")

    elif args.command in ("indexes", "artists"):
        if args.command == "indexes":
            groups = client.get_indexes(args.folder, args.since)
        else:
            groups = client.get_artists()
        for group in groups:
            for artist in group.artists:
                print(f"{group.name}\t{artist.id}\t{artist.name}")

    elif args.command == "directory":
        listing = client.get_music_directory(args.id)
        for child in listing.directories:
            print(f"{child.id}\t[dir]\t{child.title}")
        for item in listing.media:
            print(f"{item.id}\t[{item.kind.value}]\t{item.title}\t{item.duration}")

    elif args.command == "now-playing":
        for entry in client.get_now_playing():
            user = entry.username or "?"
            print(f"{user}\t{entry.minutes_ago}m ago\t{entry.media.artist or ''} - {entry.media.title}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else None)

    try:
        if args.mock:
            client = create_mock_client()
        else:
            client = SubsonicClient(SubsonicConfig.from_environment())
        with client:
            run_command(client, args)
    except (SubsonicError, EnvironmentError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            logger.exception("Detailed error traceback:")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
