"""Module that implements the local logic of filemirror: watching and sending."""

import contextlib
import os.path
from typing import Optional

from filemirror.changes import ChangeSource
from filemirror.logger import log
from filemirror.pipeline import send_changes
import filemirror.transport as transport
from .common import Operations


class LocalOperations(Operations):
    """Class that encapsulates all work on the local side."""

    _changes: Optional[ChangeSource] = None

    def _run(self, stack: contextlib.ExitStack) -> int:
        """Send every change within the directory until stopped."""
        if not os.path.isdir(self._args.directory):
            raise RuntimeError(f"{self._args.directory} is not a directory")

        host, port = self._args.host, self._args.port

        try:
            connection = transport.connect(
                host,
                port,
                self._config.network.connect_timeout,
                self._config.transfer.chunk_size,
            )
        except OSError as e:
            raise RuntimeError(f"failed to connect to {host}:{port}: {e}")

        # Closed after the watcher has been stopped (exit callbacks run in reverse)
        stack.callback(connection.close)

        changes = ChangeSource(self._args.directory)
        self._changes = stack.enter_context(changes)

        log.info(f"mirroring {changes.root} to {host}:{port}")

        count = send_changes(
            changes, changes.root, connection.output, self._config.transfer.chunk_size
        )

        log.info(f"stopped after sending {count} changes")

        return 0

    def stop(self) -> None:
        """
        Stop watching for changes, which ends the run once queued changes are sent.

        Can be called from any thread.
        """
        if self._changes is not None:
            self._changes.stop()
