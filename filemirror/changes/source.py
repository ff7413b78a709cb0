"""Module that watches a directory tree and yields the paths of changed files."""

from __future__ import annotations

import os
import os.path
from typing import Any, Callable, Iterator, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler, FileSystemMovedEvent
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from filemirror.logger import log
from .events import ChangeQueue


class PathOutsideRoot(RuntimeError):
    """Exception raised when a change is reported for a path outside the watched root."""

    def __init__(self, root: str, path: str) -> None:
        """Instantiate the exception for the given root and reported path."""
        super().__init__(f"change reported outside of {root}: {path}")

        self.root = root
        self.path = path


class _ChangeHandler(FileSystemEventHandler):
    """Watchdog handler that posts the relative path of every changed file."""

    def __init__(self, root: str, changes: ChangeQueue) -> None:
        super().__init__()

        self._root = root
        self._prefix = os.path.join(root, "")
        self._changes = changes

    def on_created(self, event: FileSystemEvent) -> None:
        self._post(event)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._post(event)

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._post(event)

    def on_moved(self, event: FileSystemMovedEvent) -> None:
        # Mirrored as a deletion of the old path and a creation of the new one
        self._post(event)
        self._post(event, event.dest_path)

    def _post(self, event: FileSystemEvent, path: Any = None) -> None:
        if event.is_directory:
            return

        try:
            rel_path = self.relative(os.fsdecode(path or event.src_path))
        except PathOutsideRoot as e:
            log.error(str(e))
            self._changes.exception(e)
            return

        if rel_path is not None:
            self._changes.put(rel_path)

    def relative(self, path: str) -> Optional[str]:
        """Strip the root from a reported path, returning None for the root itself."""
        if path == self._root or path == self._prefix:
            return None

        if not path.startswith(self._prefix):
            raise PathOutsideRoot(self._root, path)

        return path[len(self._prefix) :]


class ChangeSource:
    """
    Ordered sequence of relative paths of files changed within a directory tree.

    Iterating blocks until the next change and only ends after the source has been
    stopped and all changes reported before that have been yielded.

    Example:
    ```
    with ChangeSource("/some/dir") as changes:
        for path in changes:
            print(path)
    ```
    """

    def __init__(
        self, root: str, observer_factory: Callable[[], BaseObserver] = Observer
    ):
        """Prepare to watch the given root with observers created by the factory."""
        self._root = root
        self._observer_factory = observer_factory

        self._observer: Optional[BaseObserver] = None
        self._changes: Optional[ChangeQueue] = None

    @property
    def root(self) -> str:
        """Return the root directory, which is canonicalized once watching starts."""
        return self._root

    @property
    def watching(self) -> bool:
        """Check if the directory is currently being watched."""
        return self._observer is not None

    def start(self) -> None:
        """Start watching the root directory tree."""
        if self._observer is not None:
            raise RuntimeError(f"already watching {self._root}")

        self._root = os.path.realpath(self._root)
        self._changes = ChangeQueue()

        handler = _ChangeHandler(self._root, self._changes)

        observer = self._observer_factory()
        observer.schedule(handler, self._root, recursive=True)
        observer.start()

        self._observer = observer

        log.info(f"watching {self._root}")

    def stop(self) -> None:
        """Stop watching and end the sequence after the changes reported so far."""
        if self._observer is None:
            return

        observer = self._observer
        self._observer = None

        try:
            observer.stop()
            observer.join()
        finally:
            assert self._changes is not None
            self._changes.close()

        log.info(f"stopped watching {self._root}")

    def __enter__(self) -> ChangeSource:
        """Start watching for the duration of a with block."""
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        """Stop watching, also when the with block is left through an exception."""
        self.stop()

    def __iter__(self) -> Iterator[str]:
        """Yield changed paths, relative to the root, in the order they were reported."""
        if self._changes is None:
            raise RuntimeError("changes are only available after starting")

        while True:
            path = self._changes.get()

            if path is None:
                return

            yield path
