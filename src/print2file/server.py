"""
Accept-serve loop
Accepts one print client at a time and copies its byte stream verbatim into
a freshly named output file
"""

import logging
import os
import socket
import time
from typing import Optional, Tuple

from .base import BUFSIZE, POLL_INTERVAL, OUTPUT_DIR, OUTPUT_FILE_MODE, LifecycleState
from .exceptions import FilenameExhaustedError
from .naming import FilenamePolicy


class PrintServer:
    """
    Sequential print-to-file server

    A second client waits in the listen backlog until the current job's
    output file and socket are closed.
    """

    def __init__(
        self,
        state: LifecycleState,
        output_dir: str = OUTPUT_DIR,
        logger=None,
        policy: Optional[FilenamePolicy] = None,
        read_timeout: Optional[float] = None,
    ):
        self.state = state
        self.output_dir = output_dir
        self.logger = logger or logging.getLogger(__name__)
        self.policy = policy or FilenamePolicy(output_dir, logger=self.logger)
        self.read_timeout = read_timeout
        self.jobs_printed = 0

    def serve_forever(self):
        """Accept and serve clients until shutdown is requested"""
        listener = self.state.listener
        if self.state.shutdown_requested or not self.state.listener_open:
            return
        # the timeout only lets the loop notice a shutdown request
        listener.settimeout(POLL_INTERVAL)

        while not self.state.shutdown_requested:
            try:
                conn, addr = listener.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self.state.shutdown_requested or not self.state.listener_open:
                    break
                self.logger.warning(f"error on accept(): {e}")
                continue

            self.serve_client(conn, addr)

        self.logger.debug("Serve loop stopped")

    def serve_client(self, conn: socket.socket, addr: Tuple[str, int]) -> Optional[int]:
        """
        Print one job

        Returns:
            int: bytes written to the output file, or None if the job was
            abandoned before an output file could be opened
        """
        self.state.open_client(conn)
        self.logger.info(f"accepted new print client {addr}")
        if self.state.shutdown_requested:
            self.state.close_client()
            return None

        try:
            path = self.policy.next_path()
        except FilenameExhaustedError as e:
            self.logger.warning(f"abandoning print client {addr}: {e}")
            self.state.close_client()
            return None

        self.logger.info(f"start printing to {path}")
        with self.state.lock:
            # no new file once teardown has run
            if self.state.shutdown_requested:
                self.state.close_client()
                return None
            try:
                fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, OUTPUT_FILE_MODE)
            except OSError as e:
                self.logger.warning(f"error opening printfile {path}: {e}")
                self.state.close_client()
                return None
            self.state.open_output(os.fdopen(fd, "wb", buffering=0))

        try:
            written = self._copy(conn)
        finally:
            self.state.close_output()
            self.state.close_client()

        self.jobs_printed += 1
        self.logger.info(f"done printing to {path} ({written} bytes)")
        return written

    def _copy(self, conn: socket.socket) -> int:
        """Copy BUFSIZE chunks from the client to the output until EOF or error"""
        try:
            conn.settimeout(POLL_INTERVAL)
        except OSError as e:
            # closed by a concurrent shutdown, same as EOF
            self.logger.debug(f"client socket unusable: {e}")
            return 0
        buffer = bytearray(BUFSIZE)
        written = 0
        last_read = time.monotonic()

        try:
            with memoryview(buffer) as view:
                while not self.state.shutdown_requested:
                    try:
                        nbytes = conn.recv_into(buffer)
                    except socket.timeout:
                        if (
                            self.read_timeout is not None
                            and time.monotonic() - last_read >= self.read_timeout
                        ):
                            self.logger.warning(
                                f"client idle for {self.read_timeout}s, ending transfer"
                            )
                            break
                        continue
                    except OSError as e:
                        # a read error ends the job just like EOF
                        self.logger.debug(f"error reading from client: {e}")
                        break

                    if nbytes == 0:
                        break
                    last_read = time.monotonic()

                    with self.state.lock:
                        if not self.state.output_open:
                            break
                        try:
                            self.state.output.write(view[:nbytes])
                        except OSError as e:
                            self.logger.warning(f"error writing printfile: {e}")
                            break
                    written += nbytes
        finally:
            # do not keep job data around in memory
            buffer[:] = bytes(BUFSIZE)

        return written
