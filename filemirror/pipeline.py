"""Module that connects change notifications, file records and the connection."""

from typing import BinaryIO, Iterable

from filemirror.constants import DEFAULT_CHUNK_SIZE
from filemirror.logger import log
from filemirror.protocol import InputStream, recv_file, send_file


def send_changes(
    changes: Iterable[str],
    root: str,
    out: BinaryIO,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """
    Send a file record for every changed path, relative to the root.

    Runs until the changes run out, which for a ChangeSource only happens after it has
    been stopped. Paths that can't be sent are skipped. Returns the number of records
    sent.
    """
    count = 0

    for rel_path in changes:
        transfer = send_file(root, rel_path, out, chunk_size)

        if transfer is None:
            continue

        # Changes should arrive as soon as possible rather than when a buffer fills up
        out.flush()

        count += 1

        if transfer.deleted:
            log.info(f"sent deletion of {transfer.path}")
        else:
            log.info(f"sent {transfer.path} ({transfer.size} bytes)")

    return count


def receive_files(stream: InputStream, root: str) -> int:
    """
    Apply file records from the stream to the root until the stream ends.

    The stream may only end between records, otherwise the framing error describing the
    incomplete record is raised. Returns the number of records applied.
    """
    count = 0

    while not stream.at_eof():
        transfer = recv_file(stream, root)
        count += 1

        if transfer.deleted:
            log.info(f"received deletion of {transfer.path}")
        else:
            log.info(f"received {transfer.path} ({transfer.size} bytes)")

    return count
