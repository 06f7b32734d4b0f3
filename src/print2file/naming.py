"""
Output filename selection
Jobs are named after the wall-clock time they started. When the clock cannot
be read a random name is probed until one is found that does not exist yet.
"""

import logging
import os
import random
from datetime import datetime
from typing import Callable, Optional

from .base import (
    TIMESTAMP_FORMAT,
    RANDOM_NAME_PREFIX,
    RAND_MAX,
    MAX_NAME_ATTEMPTS,
)
from .exceptions import ClockReadError, FilenameExhaustedError


class FilenamePolicy:
    """Derives a fresh output path for every print job"""

    def __init__(
        self,
        output_dir: str,
        clock: Callable[[], datetime] = datetime.now,
        rng: Optional[random.Random] = None,
        logger=None,
        max_attempts: int = MAX_NAME_ATTEMPTS,
    ):
        self.output_dir = output_dir
        self.clock = clock
        self.rng = rng or random.Random()
        self.logger = logger or logging.getLogger(__name__)
        self.max_attempts = max_attempts

    def timestamp_name(self) -> str:
        """Current local time as DD.MM.YYYY-HH:MM:SS"""
        try:
            return self.clock().strftime(TIMESTAMP_FORMAT)
        except (OSError, ValueError, OverflowError) as e:
            raise ClockReadError(f"error getting current time: {e}") from e

    def random_name(self) -> str:
        """
        Probe file-<n> names until one does not exist

        Returns:
            str: full path of an unused file

        Raises:
            FilenameExhaustedError: if every attempt collided
        """
        for _ in range(self.max_attempts):
            name = f"{RANDOM_NAME_PREFIX}{self.rng.randint(0, RAND_MAX)}"
            path = os.path.join(self.output_dir, name)
            if not os.path.lexists(path):
                return path
        raise FilenameExhaustedError(self.output_dir, self.max_attempts)

    def next_path(self) -> str:
        try:
            name = self.timestamp_name()
        except ClockReadError as e:
            self.logger.warning(str(e))
            return self.random_name()

        path = os.path.join(self.output_dir, name)
        if not os.path.lexists(path):
            return path

        # another job already started within the same second
        for n in range(1, self.max_attempts + 1):
            candidate = f"{path}.{n}"
            if not os.path.lexists(candidate):
                return candidate
        raise FilenameExhaustedError(self.output_dir, self.max_attempts)
