"""Module defining the command-line arguments and providing a parser for them."""

from __future__ import annotations

import argparse
from typing import List, Optional

from filemirror.constants import VERSION

DESCRIPTION = """
Mirror local file changes to a remote host. By keeping a persistent TCP connection open
between the local and remote machines, latency is reduced versus more naive solutions,
like combining inotify and rsync. Note that this tool does not perform an initial file
copy, if needed you should do an explicit scp -r before using this tool.
"""


class Arguments(argparse.Namespace):
    """Parsed command-line arguments."""

    mode: str

    host: str
    port: int
    directory: str

    bind: Optional[str]
    once: bool

    config: str
    debug: bool

    @classmethod
    def parse(cls, args: Optional[List[str]] = None) -> Arguments:
        """
        Parse command-line arguments from the given list of strings.

        Defaults to sys.argv if none are specified.
        """
        return cls._get_parser().parse_args(args, namespace=cls())

    @classmethod
    def _get_parser(cls) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="filemirror",
            description=DESCRIPTION,
        )

        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {VERSION}",
            help="show the program version",
        )

        # Path to (optional) config file
        parser.add_argument(
            "--config",
            type=str,
            help="path to config file (default is ~/.filemirror/config)",
            default="~/.filemirror/config",
        )

        # Enable debug output for development
        parser.add_argument(
            "--debug", action="store_true", help="enable debug information"
        )

        subparsers = parser.add_subparsers(dest="mode", metavar="command")
        subparsers.required = True

        # Receiving side
        remote = subparsers.add_parser("remote", help="receive file changes")
        remote.add_argument("port", type=cls._parse_port, help="port to listen on")
        remote.add_argument(
            "directory", type=str, help="root directory to write files to"
        )
        remote.add_argument(
            "--bind",
            type=str,
            help="address to listen on (default is all interfaces)",
        )
        remote.add_argument(
            "--once",
            action="store_true",
            help="exit after the first connection closes",
        )

        # Sending side
        local = subparsers.add_parser("local", help="send file changes")
        local.add_argument("host", type=str, help="remote host to connect to")
        local.add_argument("port", type=cls._parse_port, help="port to connect to")
        local.add_argument("directory", type=str, help="root directory to watch")

        return parser

    @staticmethod
    def _parse_port(arg: str) -> int:
        try:
            val = int(arg)
            assert 0 < val < 65536
            return val
        except (ValueError, AssertionError):
            raise argparse.ArgumentTypeError("expected port number between 1 and 65535")
