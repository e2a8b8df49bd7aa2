"""
Minimum interval between accepted human moves
"""
from typing import Optional


class RateLimiter:
    def __init__(self, min_interval: float = 0.5):
        self.min_interval = min_interval
        self.last_accepted: Optional[float] = None

    def allow(self, now: float) -> bool:
        """Accept `now` if at least min_interval passed since the last accepted call"""
        if self.last_accepted is not None and now - self.last_accepted < self.min_interval:
            return False
        self.last_accepted = now
        return True

    def reset(self):
        self.last_accepted = None
