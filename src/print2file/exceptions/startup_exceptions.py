class StartupError(Exception):
    """Base class for unrecoverable errors raised before the server is listening."""
    def __init__(self, message="The print server could not be started."):
        super().__init__(message)

class EndpointSetupError(StartupError):
    """Raised when the listening socket cannot be resolved, created, bound or put in listen mode."""
    def __init__(self, step: str, address, cause=None):
        self.step = step
        message = f"error on {step}() for {address}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)

class SignalSetupError(StartupError):
    """Raised when a signal disposition cannot be installed."""
    def __init__(self, signum, cause=None):
        self.signum = signum
        super().__init__(f"error installing signal handler for signal {signum}: {cause}")

class DaemonizeError(StartupError):
    """Raised when fork() or setsid() fails while detaching from the terminal."""
    def __init__(self, step: str, cause=None):
        self.step = step
        super().__init__(f"error on {step}(): {cause}")
