import signal
import socket

import pytest

from print2file import LifecycleState, LifecycleManager, NOTICE, create_listener
from print2file import lifecycle
from print2file.exceptions import SignalSetupError


@pytest.fixture
def dispositions(monkeypatch):
    installed = {}

    def fake_signal(signum, handler):
        installed[signum] = handler

    monkeypatch.setattr(lifecycle.signal, "signal", fake_signal)
    return installed


class RecordingHandle:
    def __init__(self, name, calls):
        self.name = name
        self.calls = calls

    def shutdown(self, how):
        pass

    def close(self):
        self.calls.append(self.name)


def test_install_registers_terminating_and_ignored_signals(dispositions):
    manager = LifecycleManager(LifecycleState())
    manager.install()

    for signum in (signal.SIGHUP, signal.SIGINT, signal.SIGTERM):
        assert dispositions[signum] == manager._handle_signal
    for signum in (signal.SIGTSTP, signal.SIGTTIN, signal.SIGTTOU):
        assert dispositions[signum] is signal.SIG_IGN


def test_install_failure_is_fatal(monkeypatch):
    def refuse(signum, handler):
        raise ValueError("signal only works in main thread")

    monkeypatch.setattr(lifecycle.signal, "signal", refuse)
    with pytest.raises(SignalSetupError):
        LifecycleManager(LifecycleState()).install()


def test_shutdown_syncs_then_closes_client_output_listener(monkeypatch):
    calls = []
    monkeypatch.setattr(lifecycle.os, "sync", lambda: calls.append("sync"))
    state = LifecycleState()
    state.set_listener(RecordingHandle("listener", calls))
    state.open_client(RecordingHandle("client", calls))
    state.open_output(RecordingHandle("output", calls))

    LifecycleManager(state).shutdown()

    assert calls == ["sync", "client", "output", "listener"]
    assert state.shutdown_requested
    assert state.open_handles() == 0
    assert not state.listener_open


def test_shutdown_runs_once(monkeypatch):
    calls = []
    monkeypatch.setattr(lifecycle.os, "sync", lambda: calls.append("sync"))
    state = LifecycleState()
    state.set_listener(RecordingHandle("listener", calls))
    manager = LifecycleManager(state)

    manager.shutdown()
    manager.shutdown()

    assert calls == ["sync", "listener"]


def test_shutdown_between_jobs_only_closes_listener(monkeypatch):
    monkeypatch.setattr(lifecycle.os, "sync", lambda: None)
    state = LifecycleState()
    state.set_listener(create_listener("127.0.0.1", 0))

    LifecycleManager(state).shutdown()

    assert not state.listener_open
    assert state.listener.fileno() == -1


def test_signal_handler_closes_everything_and_exits_zero(dispositions, monkeypatch, caplog):
    caplog.set_level(NOTICE)
    monkeypatch.setattr(lifecycle.os, "sync", lambda: None)
    state = LifecycleState()
    state.set_listener(create_listener("127.0.0.1", 0))
    a, b = socket.socketpair()
    state.open_client(a)
    manager = LifecycleManager(state)

    with pytest.raises(SystemExit) as exc:
        manager._handle_signal(int(signal.SIGTERM), None)

    b.close()
    assert exc.value.code == 0
    assert state.open_handles() == 0
    assert not state.listener_open
    assert f"received signal {int(signal.SIGTERM)}" in caplog.text
    # not re-armed
    for signum in (signal.SIGHUP, signal.SIGINT, signal.SIGTERM):
        assert dispositions[signum] is signal.SIG_DFL
