class ClockReadError(Exception):
    """Raised when the wall clock cannot be read or formatted into a filename."""
    def __init__(self, message="error getting current time"):
        super().__init__(message)

class FilenameExhaustedError(Exception):
    """Raised when no unused output filename is found within the attempt cap."""
    def __init__(self, directory: str, attempts: int):
        self.directory = directory
        self.attempts = attempts
        super().__init__(f"no unused filename found in {directory} after {attempts} attempts")
