"""
Politeness Throttle - Bounds the request rate to the origin server.

After every `requests_per_pause` fetch-equivalent calls the throttle blocks for
one fixed interval, then starts counting again from zero.
"""

import logging
import time
from typing import Callable
from dataclasses import dataclass


@dataclass
class PolitenessConfig:
    """Configuration for the politeness throttle."""
    requests_per_pause: int = 10
    pause_seconds: float = 1.0


class PolitenessThrottle:
    """
    Request counter with a blocking pause.

    One instance belongs to one crawl run; nothing is shared between runs.
    """

    def __init__(self, config: PolitenessConfig,
                 sleep: Callable[[float], None] = time.sleep):
        self.config = config
        self._sleep = sleep
        self.logger = logging.getLogger(self.__class__.__name__)

        # Requests since the last pause
        self.counter = 0

        # Statistics
        self.total_requests = 0
        self.pauses = 0
        self.total_wait_time = 0.0

    def throttle(self) -> bool:
        """
        Count one fetch-equivalent unit, pausing when the window is full.

        Returns:
            True if this call paused
        """
        self.counter += 1
        self.total_requests += 1

        if self.counter < self.config.requests_per_pause:
            return False

        self.logger.info(
            f"Sleeping for {self.config.pause_seconds}s to obey politeness policy"
        )
        start_time = time.time()
        self._sleep(self.config.pause_seconds)
        self.total_wait_time += time.time() - start_time

        self.counter = 0
        self.pauses += 1
        return True

    def reset(self):
        """Reset the counter without pausing."""
        self.counter = 0

    def get_stats(self) -> dict:
        return {
            'total_requests': self.total_requests,
            'pauses': self.pauses,
            'counter': self.counter,
            'total_wait_time': round(self.total_wait_time, 3),
        }
