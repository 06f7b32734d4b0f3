import logging
import threading
import time

import pytest

from print2file import LifecycleState, LifecycleManager, PrintServer, create_listener


def wait_for(predicate, timeout=5.0, interval=0.02):
    """Poll until predicate() is true, fail the test on timeout"""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return
        time.sleep(interval)
    pytest.fail("condition not met within timeout")


class RunningServer:
    def __init__(self, output_dir):
        self.logger = logging.getLogger("print2file.test")
        self.state = LifecycleState(self.logger)
        self.manager = LifecycleManager(self.state, self.logger)
        self.state.set_listener(create_listener("127.0.0.1", 0, logger=self.logger))
        self.port = self.state.listener.getsockname()[1]
        self.output_dir = output_dir
        self.server = PrintServer(self.state, str(output_dir), self.logger)
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)

    def start(self):
        self.thread.start()
        return self

    def stop(self):
        self.manager.shutdown("test finished")
        self.thread.join(timeout=5)

    def wait_for_jobs(self, count):
        wait_for(lambda: self.server.jobs_printed >= count)

    def files(self):
        return sorted(p for p in self.output_dir.iterdir() if p.is_file())


@pytest.fixture
def running_server(tmp_path):
    srv = RunningServer(tmp_path).start()
    yield srv
    srv.stop()
