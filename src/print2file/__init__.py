"""
print2file
Dummy network printer: every TCP connection on the print endpoint becomes
one file in the output directory

Usage:
    from print2file import LifecycleState, LifecycleManager, PrintServer, create_listener

    state = LifecycleState()
    LifecycleManager(state).install()
    state.set_listener(create_listener("127.0.0.1", 12345))
    PrintServer(state, "/var/spool/print2file").serve_forever()
"""

from .base import (
    LifecycleState,
    LISTEN_ADDR,
    LISTEN_PORT,
    BACKLOG,
    BUFSIZE,
    OUTPUT_DIR,
    NOTICE,
)
from .naming import FilenamePolicy
from .endpoint import create_listener
from .server import PrintServer
from .lifecycle import LifecycleManager
from .client import send_job

__all__ = [
    'LifecycleState',
    'LifecycleManager',
    'PrintServer',
    'FilenamePolicy',
    'create_listener',
    'send_job',

    # Constants
    'LISTEN_ADDR',
    'LISTEN_PORT',
    'BACKLOG',
    'BUFSIZE',
    'OUTPUT_DIR',
    'NOTICE',
]
