"""
File records: one relative path together with the contents or deletion of that file.

The sender streams file contents straight from disk into the output and the receiver
streams them straight from the connection into the destination file, so neither side
ever holds a complete file in memory.
"""

from dataclasses import dataclass
import os
import os.path
import stat
from pathlib import PurePath, PurePosixPath
from typing import BinaryIO, Optional

from filemirror.constants import DEFAULT_CHUNK_SIZE, TOMBSTONE
from filemirror.logger import log, summarize
from .framing import (
    decode_blob,
    decode_integer,
    encode_blob,
    encode_integer,
    FramingError,
    TruncatedFrame,
)
from .stream import InputStream


class UnsafePath(FramingError):
    """Exception raised when a received path does not stay within the destination."""


@dataclass
class Transfer:
    """Summary of a single file record that was sent or received."""

    path: str
    # None for a deletion.
    size: Optional[int]

    @property
    def deleted(self) -> bool:
        """Check if the record represents a deleted file."""
        return self.size is None


def send_file(
    root: str, rel_path: str, out: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Optional[Transfer]:
    """
    Write the file record for root/rel_path to the output.

    A file that can't be opened is sent as deleted. This covers the common race of a
    file being removed between the change notification and this call. Anything other
    than a regular file, like a directory or a FIFO, is sent as deleted as well.

    Returns None without writing anything if the path can't be represented as UTF-8.
    """
    wire_path = PurePath(rel_path).as_posix()
    full_path = os.path.join(root, rel_path)

    try:
        encoded_path = wire_path.encode("utf-8")
    except UnicodeEncodeError:
        log.warning(f"skipping {wire_path!r}, its name is not valid UTF-8")
        return None

    out.write(encode_blob(encoded_path))

    f = _open_regular(full_path)

    if f is None:
        log.debug(f"sending deletion of {summarize(wire_path)}")
        out.write(encode_integer(TOMBSTONE))
        return Transfer(wire_path, None)

    with f:
        size = os.fstat(f.fileno()).st_size
        out.write(encode_integer(size))

        remaining = size

        while remaining > 0:
            chunk = f.read(min(chunk_size, remaining))

            if len(chunk) == 0:
                break

            out.write(chunk)
            remaining -= len(chunk)

    if remaining > 0:
        # The declared length has already been sent, so the frame has to be completed.
        # The truncation causes another change notification that will correct this.
        log.warning(f"{wire_path} shrank while being sent, padding {remaining} bytes")

        while remaining > 0:
            n = min(chunk_size, remaining)
            out.write(bytes(n))
            remaining -= n

    log.debug(f"sending {summarize(wire_path)} ({size} bytes)")

    return Transfer(wire_path, size)


def recv_file(stream: InputStream, root: str) -> Transfer:
    """Read one file record from the stream and apply it to the root directory."""
    raw_path = decode_blob(stream)

    try:
        wire_path = raw_path.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FramingError(f"path is not valid UTF-8: {e}") from e

    full_path = _resolve(root, wire_path)
    size = decode_integer(stream)

    if size == TOMBSTONE:
        _remove(full_path)
        log.debug(f"deleted {summarize(wire_path)}")
        return Transfer(wire_path, None)
    elif size < 0:
        raise FramingError(f"invalid file length {size} for {wire_path}")

    if os.path.isdir(full_path) and not _remove_empty_dir(full_path):
        # Still consume the contents to stay aligned with the record boundaries.
        log.warning(f"not overwriting directory {full_path} with a file")
        _expect_length(size, sum(len(chunk) for chunk in stream.iter_exactly(size)))
        return Transfer(wire_path, size)

    os.makedirs(os.path.dirname(full_path), exist_ok=True)

    received = 0

    with open(full_path, "wb") as f:
        for chunk in stream.iter_exactly(size):
            f.write(chunk)
            received += len(chunk)

    _expect_length(size, received)

    log.debug(f"received {summarize(wire_path)} ({size} bytes)")

    return Transfer(wire_path, size)


def _expect_length(expected: int, received: int) -> None:
    if received != expected:
        raise TruncatedFrame(expected, received)


def _resolve(root: str, wire_path: str) -> str:
    """Turn a received relative path into a path within the root directory."""
    path = PurePosixPath(wire_path)

    if "\x00" in wire_path:
        raise UnsafePath(f"refusing path with null byte: {wire_path!r}")

    if path.is_absolute() or len(path.parts) == 0 or ".." in path.parts:
        raise UnsafePath(f"refusing path outside of destination: {wire_path!r}")

    return os.path.join(root, *path.parts)


def _remove(path: str) -> None:
    if os.path.isdir(path):
        log.warning(f"not deleting directory {path}")
        return

    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


def _remove_empty_dir(path: str) -> bool:
    """Remove a directory that a file replaces, which only succeeds if it's empty."""
    try:
        os.rmdir(path)
    except OSError:
        return False

    log.debug(f"removed directory {path} to make room for a file")

    return True


def _open_regular(path: str) -> Optional[BinaryIO]:
    """Open a regular file for reading, or return None if that's not possible."""
    try:
        # Non-blocking so that opening a FIFO doesn't wait for a writer
        fd = os.open(path, os.O_RDONLY | getattr(os, "O_NONBLOCK", 0))
    except OSError as e:
        log.debug(f"failed to open {path}: {e}")
        return None

    try:
        if not stat.S_ISREG(os.fstat(fd).st_mode):
            log.debug(f"{path} is not a regular file")
            os.close(fd)
            return None
    except OSError:
        os.close(fd)
        raise

    return os.fdopen(fd, "rb")
