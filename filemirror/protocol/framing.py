"""Encoding and decoding of the two primitive frames: integers and byte blobs."""

from typing import Optional

from filemirror.constants import DELIMITER
from .stream import InputStream

_DELIMITER = DELIMITER[0]
_MINUS = ord("-")
_ZERO = ord("0")
_NINE = ord("9")


class FramingError(ValueError):
    """Base class for errors caused by a malformed or incomplete stream."""


class InvalidByte(FramingError):
    """Exception raised when an integer frame contains a byte that is not a digit."""

    def __init__(self, byte: int) -> None:
        """Instantiate the exception for the offending byte."""
        super().__init__(f"invalid byte {byte!r} in integer frame")

        self.byte = byte


class MissingColon(FramingError):
    """Exception raised when an integer frame is not terminated by the delimiter."""

    def __init__(self, byte: Optional[int]) -> None:
        """Instantiate the exception for the byte found instead, None for end of stream."""
        if byte is None:
            super().__init__("stream ended before integer delimiter")
        else:
            super().__init__(f"expected integer delimiter, got {byte!r}")

        self.byte = byte


class EndOfStream(FramingError):
    """Exception raised when the stream ends before a frame has started."""

    def __init__(self) -> None:
        """Instantiate the exception."""
        super().__init__("unexpected end of stream")


class TruncatedFrame(FramingError):
    """Exception raised when the stream ends in the middle of a length-prefixed blob."""

    def __init__(self, expected: int, received: int) -> None:
        """Instantiate the exception with the declared and the actual length."""
        super().__init__(f"stream ended after {received} of {expected} bytes")

        self.expected = expected
        self.received = received


def encode_integer(i: int) -> bytes:
    """Render an integer as decimal ASCII followed by the delimiter."""
    return str(i).encode("ascii") + DELIMITER


def decode_integer(stream: InputStream) -> int:
    """Read an integer frame from the stream."""
    first = stream.peek()

    if first is None:
        raise EndOfStream()

    negative = first == _MINUS

    if negative:
        stream.read_byte()

    total = 0

    while True:
        b = stream.peek()

        if b is None or b == _DELIMITER:
            break
        elif _ZERO <= b <= _NINE:
            total = total * 10 + (b - _ZERO)
            stream.read_byte()
        else:
            raise InvalidByte(b)

    terminator = stream.read_byte()

    if terminator != _DELIMITER:
        raise MissingColon(terminator)

    return -total if negative else total


def encode_blob(data: bytes) -> bytes:
    """Prefix a byte string with its length."""
    return encode_integer(len(data)) + data


def decode_blob(stream: InputStream) -> bytes:
    """Read a length-prefixed byte string from the stream."""
    size = decode_integer(stream)

    if size < 0:
        raise FramingError(f"negative blob length {size}")

    data = stream.read_exactly(size)

    if len(data) != size:
        raise TruncatedFrame(size, len(data))

    return data
