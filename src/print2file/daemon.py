import os
import sys

from .exceptions import DaemonizeError


def _fork(step: str):
    try:
        pid = os.fork()
    except OSError as e:
        raise DaemonizeError(step, e) from e
    if pid > 0:
        # parent
        os._exit(0)


def daemonize(logger):
    """
    Detach from the controlling terminal with the usual double fork

    Raises:
        DaemonizeError: if fork() or setsid() fails
    """
    _fork("fork")

    try:
        os.setsid()
    except OSError as e:
        raise DaemonizeError("setsid", e) from e

    # the session leader exits so the daemon can never reacquire a terminal
    _fork("fork")

    sys.stdout.flush()
    sys.stderr.flush()
    devnull = os.open(os.devnull, os.O_RDWR)
    for fd in (0, 1, 2):
        os.dup2(devnull, fd)
    if devnull > 2:
        os.close(devnull)

    try:
        os.chdir("/")
    except OSError as e:
        logger.warning(f"error on chdir(): {e}")
    os.umask(0)

    logger.debug(f"Daemonized with pid {os.getpid()}")
