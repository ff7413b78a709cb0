"""
Wire format used to mirror file changes over a single byte stream.

A connection is nothing more than a sequence of file records, with no envelope, version
tag or checksum around them. Each record is made up of two frames:

    FileRecord   := PathBlob ContentFrame
    PathBlob     := Integer RawBytes[len]     (UTF-8 relative path)
    ContentFrame := Integer                   (length L)
                    RawBytes[L] if L != -1    (raw file contents)

Integers are ASCII decimal with an optional leading '-' and are terminated by a single
':' byte, so the record for a file "a.txt" containing "hi" reads "5:a.txt2:hi" and the
record for its deletion reads "5:a.txt-1:".

Decimal lengths cost a few bytes compared to fixed width binary integers, but they are
independent of the host and trivial to inspect with a hex dump. The length -1 doubles as
a tombstone, which avoids the need for a separate message type.

Since there is no synchronization marker, any malformed frame leaves the rest of the
stream unreadable. Decoding errors are therefore fatal to the connection.
"""

from .framing import (
    decode_blob,
    decode_integer,
    encode_blob,
    encode_integer,
    EndOfStream,
    FramingError,
    InvalidByte,
    MissingColon,
    TruncatedFrame,
)
from .records import recv_file, send_file, Transfer, UnsafePath
from .stream import InputStream

__all__ = [
    "decode_blob",
    "decode_integer",
    "encode_blob",
    "encode_integer",
    "EndOfStream",
    "FramingError",
    "InvalidByte",
    "MissingColon",
    "TruncatedFrame",
    "recv_file",
    "send_file",
    "Transfer",
    "UnsafePath",
    "InputStream",
]
