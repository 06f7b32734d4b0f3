"""
Constants and shared process state for the print-to-file daemon
Contains the fixed configuration defaults and the LifecycleState object that
both the accept-serve loop and the termination path operate on
"""

import logging
import socket
import threading
from typing import Optional, BinaryIO

from .exceptions import HandleStateError

# endpoint constants
LISTEN_ADDR = "127.0.0.1"
LISTEN_PORT = 12345
BACKLOG = 4  # number of pending connections to queue

# transfer constants
BUFSIZE = 512  # bytes read from the client per chunk
POLL_INTERVAL = 0.5  # seconds between shutdown checks while blocked

# output file constants
OUTPUT_DIR = "/usb/tcp_fileprinter"
TIMESTAMP_FORMAT = "%d.%m.%Y-%H:%M:%S"
RANDOM_NAME_PREFIX = "file-"
RAND_MAX = 2**31 - 1
MAX_NAME_ATTEMPTS = 100
OUTPUT_FILE_MODE = 0o600  # owner read/write only

# syslog has a notice severity that the logging module lacks
NOTICE = 25
logging.addLevelName(NOTICE, "NOTICE")


class LifecycleState:
    """
    Process-wide handles shared between the serve loop and the shutdown path

    Each handle has an open flag. Opening stores the handle and raises the flag
    in one step; closing closes the handle and clears the flag in one step, so
    whichever path runs second finds the flag cleared and does nothing.
    The lock is re-entrant because a signal handler runs on the main thread
    and may interrupt the loop while it holds the lock.
    """

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger(__name__)
        self.lock = threading.RLock()

        self.listener: Optional[socket.socket] = None
        self.client: Optional[socket.socket] = None
        self.output: Optional[BinaryIO] = None

        self.listener_open = False
        self.client_open = False
        self.output_open = False

        # polled by the serve loop between accept, open and copy
        self.shutdown_requested = False

    def set_listener(self, sock: socket.socket):
        with self.lock:
            self.listener = sock
            self.listener_open = True

    def open_client(self, conn: socket.socket):
        with self.lock:
            if self.client_open:
                raise HandleStateError("client")
            self.client = conn
            self.client_open = True

    def open_output(self, output: BinaryIO):
        with self.lock:
            if self.output_open:
                raise HandleStateError("output")
            self.output = output
            self.output_open = True

    def close_client(self):
        with self.lock:
            if not self.client_open:
                return
            try:
                # wakes a recv blocked on another thread before the close
                self.client.shutdown(socket.SHUT_RDWR)
            except OSError as e:
                # peer already gone (ENOTCONN)
                self.logger.debug(f"client socket shutdown: {e}")
            try:
                self.client.close()
            except OSError as e:
                self.logger.warning(f"error closing client socket: {e}")
            finally:
                self.client_open = False
                self.client = None

    def close_output(self):
        with self.lock:
            if not self.output_open:
                return
            try:
                self.output.close()
            except OSError as e:
                self.logger.warning(f"error closing output file: {e}")
            finally:
                self.output_open = False
                self.output = None

    def close_listener(self):
        with self.lock:
            if not self.listener_open:
                return
            try:
                self.listener.close()
            except OSError as e:
                self.logger.warning(f"error closing listening socket: {e}")
            finally:
                self.listener_open = False

    def open_handles(self) -> int:
        """Number of per-job handles (client socket, output file) currently open"""
        with self.lock:
            return int(self.client_open) + int(self.output_open)
