"""Module that implements the remote logic of filemirror: receiving and applying."""

import contextlib
import os

from filemirror.logger import log
from filemirror.pipeline import receive_files
from filemirror.protocol import FramingError
import filemirror.transport as transport
from .common import Operations


class RemoteOperations(Operations):
    """Class that encapsulates all work on the remote side."""

    def _run(self, stack: contextlib.ExitStack) -> int:
        """Accept senders one at a time and apply their changes to the directory."""
        root = self._args.directory
        os.makedirs(root, exist_ok=True)

        address = self._args.bind
        if address is None:
            address = self._config.network.bind_address

        server = transport.listen(
            address, self._args.port, self._config.network.backlog
        )
        stack.callback(server.close)

        log.info(f"mirroring changes into {root}")

        while True:
            with transport.accept(
                server, self._config.transfer.chunk_size
            ) as connection:
                try:
                    count = receive_files(connection.input, root)
                except (FramingError, OSError) as e:
                    if self._args.once:
                        raise

                    # A broken connection only ends that session, the sender can
                    # simply reconnect.
                    log.error(f"connection from {connection.peer} failed: {e}")
                else:
                    log.info(
                        f"connection from {connection.peer} closed after {count} files"
                    )

            if self._args.once:
                return 0
