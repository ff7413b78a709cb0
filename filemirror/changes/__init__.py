"""
Modules that turn file system notifications into an ordered sequence of paths.

The notifications come from watchdog, which invokes its handlers on observer threads
outside of our control. The handler does nothing more than translate each absolute path
into a path relative to the watched root and post it to a queue. The thread that
mirrors the changes pulls paths from that queue one by one, which makes the queue the
only point where the threads meet.

Paths are delivered in the order in which they were reported and repeated changes to
the same file are not merged. Every change results in the file being sent again, which
is wasteful for rapidly changing files but never leaves a stale copy behind.
"""

from .events import ChangeQueue
from .source import ChangeSource, PathOutsideRoot

__all__ = [
    "ChangeQueue",
    "ChangeSource",
    "PathOutsideRoot",
]
