"""Module defining various global constants."""

# filemirror version
VERSION = "1.0.0"

# Special exit code for when filemirror itself fails.
FILEMIRROR_ERROR_CODE = 254

# Byte that terminates every integer frame on the wire.
DELIMITER = b":"

# Content length that signals that the file no longer exists.
TOMBSTONE = -1

# Default number of bytes moved between disk and socket at once.
DEFAULT_CHUNK_SIZE = 64 * 1024
