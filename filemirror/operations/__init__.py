"""Modules that implement the sending (local) and receiving (remote) sides."""

from .common import Operations
from .local import LocalOperations
from .remote import RemoteOperations

__all__ = [
    "Operations",
    "LocalOperations",
    "RemoteOperations",
]
