"""
Module implementing the command-line interface and invoking the main logic of filemirror.

filemirror is started on both machines. The remote instance listens for a connection
and writes every file it receives into its directory. The local instance watches its
directory, connects to the remote instance and sends the contents of every file that
changes, or a deletion marker if the file no longer exists.
"""

import logging
import signal
import sys
from typing import List, NoReturn, Optional

import filemirror.constants as constants
from filemirror.logger import log
import filemirror.operations as operations
from .args import Arguments


def main(arguments: Optional[List[str]] = None) -> NoReturn:
    """
    Run either the local or remote side of filemirror with the given arguments.

    Defaults to parsing command-line arguments from sys.argv if none are specified.
    """
    # Parse command-line arguments.
    args = Arguments.parse(arguments)

    # Configure debug logging.
    if args.debug:
        log.setLevel(logging.DEBUG)
    else:
        log.setLevel(logging.ERROR)

    # Run operations of the local or remote side.
    ops: operations.Operations

    if args.mode == "remote":
        ops = operations.RemoteOperations(args)
    else:
        ops = operations.LocalOperations(args)

    try:
        exit_code = ops.run()
    except KeyboardInterrupt:
        exit_code = 128 + signal.SIGINT
    except Exception as e:
        log.error(f"failed to run {args.mode} side: {e}")
        exit_code = constants.FILEMIRROR_ERROR_CODE

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
