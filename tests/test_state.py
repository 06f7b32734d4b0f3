import logging
import socket

import pytest

from print2file import LifecycleState
from print2file.exceptions import HandleStateError


class FailingHandle:
    def __init__(self):
        self.close_calls = 0

    def shutdown(self, how):
        pass

    def close(self):
        self.close_calls += 1
        raise OSError("bad file descriptor")


def test_second_client_cannot_be_opened():
    state = LifecycleState()
    a, b = socket.socketpair()
    try:
        state.open_client(a)
        with pytest.raises(HandleStateError):
            state.open_client(b)
    finally:
        state.close_client()
        b.close()


def test_second_output_cannot_be_opened(tmp_path):
    state = LifecycleState()
    with open(tmp_path / "a", "wb") as a, open(tmp_path / "b", "wb") as b:
        state.open_output(a)
        with pytest.raises(HandleStateError):
            state.open_output(b)
        state.close_output()


def test_close_is_idempotent():
    state = LifecycleState()
    handle = FailingHandle()
    state.open_client(handle)

    state.close_client()
    state.close_client()

    assert handle.close_calls == 1
    assert not state.client_open


def test_close_errors_are_logged_not_raised(caplog):
    caplog.set_level(logging.WARNING)
    state = LifecycleState(logging.getLogger("print2file.test"))
    state.open_output(FailingHandle())

    state.close_output()

    assert not state.output_open
    assert "error closing output file" in caplog.text


def test_closing_never_opened_handles_is_a_no_op():
    state = LifecycleState()
    state.close_client()
    state.close_output()
    state.close_listener()
    assert state.open_handles() == 0
