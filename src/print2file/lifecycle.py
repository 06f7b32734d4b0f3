import logging
import os
import signal
import sys

from .base import NOTICE, LifecycleState
from .exceptions import SignalSetupError

# signals that end the daemon
TERMINATING_SIGNALS = (signal.SIGHUP, signal.SIGINT, signal.SIGTERM)
# terminal job control the daemon must survive
IGNORED_SIGNALS = (signal.SIGTSTP, signal.SIGTTIN, signal.SIGTTOU)


class LifecycleManager:
    """Closes every open handle and exits on SIGHUP, SIGINT and SIGTERM"""

    def __init__(self, state: LifecycleState, logger=None):
        self.state = state
        self.logger = logger or logging.getLogger(__name__)

    def install(self):
        """
        Install the signal dispositions. Must run on the main thread, before
        the listening socket is created.

        Raises:
            SignalSetupError: if a disposition cannot be installed
        """
        for signum in TERMINATING_SIGNALS:
            self._set_disposition(signum, self._handle_signal)
        for signum in IGNORED_SIGNALS:
            self._set_disposition(signum, signal.SIG_IGN)

    @staticmethod
    def _set_disposition(signum, handler):
        try:
            signal.signal(signum, handler)
        except (OSError, ValueError) as e:
            raise SignalSetupError(signum, e) from e

    def _handle_signal(self, signum, frame):
        # fire once; a second signal gets the default action
        for s in TERMINATING_SIGNALS:
            signal.signal(s, signal.SIG_DFL)

        self.logger.log(
            NOTICE,
            f"received signal {signum}, will close all open file descriptors and exit",
        )
        self.shutdown(f"signal {signum}")
        sys.exit(0)

    def shutdown(self, reason: str = "shutdown requested"):
        """
        Flush filesystem buffers, then close client socket, output file and
        listening socket in that order. Each handle is closed at most once, so
        this is safe to call from a signal handler or another thread.
        """
        with self.state.lock:
            if self.state.shutdown_requested:
                return
            self.state.shutdown_requested = True

            self.logger.debug(f"Shutting down: {reason}")
            os.sync()
            self.state.close_client()
            self.state.close_output()
            self.state.close_listener()
