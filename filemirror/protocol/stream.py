"""Buffered reading from a byte stream that is consumed frame by frame."""

from typing import Callable, Iterator, Optional

from filemirror.constants import DEFAULT_CHUNK_SIZE


class InputStream:
    """
    Byte stream with lookahead on top of a read(max) function.

    The read function follows the convention of socket.recv() and io.RawIOBase.read():
    it returns at most the requested number of bytes, and an empty result signals the
    end of the stream.
    """

    def __init__(
        self, read: Callable[[int], bytes], chunk_size: int = DEFAULT_CHUNK_SIZE
    ):
        """Wrap the read function, requesting up to chunk_size bytes at a time."""
        self._read = read
        self._chunk_size = chunk_size

        self._buffer = b""
        self._offset = 0
        self._eof = False

    def _available(self) -> int:
        return len(self._buffer) - self._offset

    def _fill(self) -> bool:
        """Read more data into the buffer and return False at the end of the stream."""
        if self._eof:
            return False

        chunk = self._read(self._chunk_size)

        if len(chunk) == 0:
            self._eof = True
            return False

        # Only the unconsumed tail of the previous chunk is carried over
        self._buffer = self._buffer[self._offset :] + chunk
        self._offset = 0

        return True

    def at_eof(self) -> bool:
        """Check if the stream has ended, blocking until that can be determined."""
        return self.peek() is None

    def peek(self) -> Optional[int]:
        """Return the next byte without consuming it, or None at the end of stream."""
        while self._available() == 0:
            if not self._fill():
                return None

        return self._buffer[self._offset]

    def read_byte(self) -> Optional[int]:
        """Consume and return the next byte, or None at the end of the stream."""
        b = self.peek()

        if b is not None:
            self._offset += 1

        return b

    def iter_exactly(self, size: int) -> Iterator[bytes]:
        """
        Consume exactly size bytes and yield them in chunks.

        Yields fewer bytes in total if the stream ends early. The caller is expected to
        check the total, which allows it to report the error in its own terms.
        """
        remaining = size

        while remaining > 0:
            if self._available() == 0 and not self._fill():
                return

            n = min(remaining, self._available())
            chunk = self._buffer[self._offset : self._offset + n]
            self._offset += n
            remaining -= n

            yield chunk

    def read_exactly(self, size: int) -> bytes:
        """Consume up to size bytes, returning less only if the stream ends early."""
        return b"".join(self.iter_exactly(size))
