import logging

import pytest

from print2file import daemon
from print2file.exceptions import DaemonizeError


def test_fork_failure_is_fatal(monkeypatch):
    def no_fork():
        raise OSError("Resource temporarily unavailable")

    monkeypatch.setattr(daemon.os, "fork", no_fork)
    with pytest.raises(DaemonizeError) as exc:
        daemon.daemonize(logging.getLogger("print2file.test"))
    assert exc.value.step == "fork"


def test_setsid_failure_is_fatal(monkeypatch):
    def no_setsid():
        raise OSError("Operation not permitted")

    # pretend to be the child of the first fork
    monkeypatch.setattr(daemon.os, "fork", lambda: 0)
    monkeypatch.setattr(daemon.os, "setsid", no_setsid)
    with pytest.raises(DaemonizeError) as exc:
        daemon.daemonize(logging.getLogger("print2file.test"))
    assert exc.value.step == "setsid"
