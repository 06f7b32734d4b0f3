from .startup_exceptions import (
    StartupError,
    EndpointSetupError,
    SignalSetupError,
    DaemonizeError,
)
from .naming_exceptions import ClockReadError, FilenameExhaustedError
from .state_exceptions import HandleStateError

__all__ = [
    'StartupError',
    'EndpointSetupError',
    'SignalSetupError',
    'DaemonizeError',
    'ClockReadError',
    'FilenameExhaustedError',
    'HandleStateError',
]
