"""Thread-safe queue of changed paths that also carries failures and shutdown."""

from __future__ import annotations

import queue
from typing import Optional, Tuple, Union


class ChangeQueue:
    """
    Unbounded first-in first-out queue of relative paths.

    Any number of threads can post paths, exceptions, or the end of the sequence, while
    a single consumer retrieves them in order.
    """

    def __init__(self) -> None:
        """Instantiate a new ChangeQueue."""
        self._queue: queue.Queue[Tuple[Optional[str], Optional[Exception]]] = (
            queue.Queue()
        )

    def put(self, path: str) -> None:
        """Post a changed path to the queue."""
        self._queue.put((path, None))

    def exception(self, exception: Union[Exception, str]) -> None:
        """Post an exception that will be raised by the consumer."""
        if isinstance(exception, Exception):
            self._queue.put((None, exception))
        else:
            self._queue.put((None, RuntimeError(exception)))

    def close(self) -> None:
        """Signal the end of the sequence after all paths posted so far."""
        self._queue.put((None, None))

    def get(self) -> Optional[str]:
        """
        Wait for the next path in the queue.

        Returns None once the queue has been closed and raises any exception that was
        posted before the next path.
        """
        path, exception = self._queue.get()

        if exception is not None:
            raise exception

        if path is None:
            # Keep the queue closed for any subsequent calls
            self.close()

        return path
