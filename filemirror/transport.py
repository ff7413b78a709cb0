"""Module with the TCP connections that carry the file records."""

from __future__ import annotations

import socket
from typing import Any, BinaryIO, Optional, Tuple

from filemirror.constants import DEFAULT_CHUNK_SIZE
from filemirror.logger import log
from filemirror.protocol import InputStream


class Connection:
    """
    Connected TCP socket exposed as an input stream and a buffered output.

    Closing the connection closes the output (flushing it), and then the socket.
    """

    def __init__(
        self,
        sock: socket.socket,
        peer: Optional[Tuple[Any, ...]] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        """Take ownership of the given connected socket."""
        self.sock = sock
        self.peer = peer

        self.input = InputStream(sock.recv, chunk_size)
        self.output: BinaryIO = sock.makefile("wb", buffering=chunk_size)

    def close(self) -> None:
        """Flush any pending output and close the socket."""
        try:
            self.output.close()
        finally:
            self.sock.close()

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def connect(
    host: str,
    port: int,
    timeout: Optional[float] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Connection:
    """Connect to a receiving filemirror instance."""
    log.debug(f"connecting to {host}:{port}")

    sock = socket.create_connection((host, port), timeout=timeout)

    # The timeout only applies to establishing the connection, after that the sender
    # may be idle indefinitely while waiting for changes.
    sock.settimeout(None)

    return Connection(sock, sock.getpeername(), chunk_size)


def listen(address: str, port: int, backlog: int = 1) -> socket.socket:
    """Open a listening socket for senders to connect to."""
    server = socket.create_server((address, port), backlog=backlog)

    log.debug(f"listening on {server.getsockname()}")

    return server


def accept(server: socket.socket, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Connection:
    """Wait for the next sender to connect."""
    sock, peer = server.accept()

    log.info(f"accepted connection from {peer}")

    return Connection(sock, peer, chunk_size)
