"""
Rolling, time-windowed buffer of arm direction samples.
"""
import math
from typing import List, Optional

from loguru import logger

from .types import Sample


class SampleHistory:
    """
    Chronological samples no older than `max_age_ms`.

    Sensors are bursty, so there is no cap on the count; only the age
    window bounds the buffer. Pruning happens on every insert.
    """

    def __init__(self, max_age_ms: float = 200.0):
        self.max_age_ms = max_age_ms
        self._samples: List[Sample] = []

    def record(self, dx: float, dy: float, now: float) -> bool:
        """
        Append a sample taken at `now` (ms) and drop everything too old.

        Returns False (and records nothing) for non-finite input.
        """
        if not (math.isfinite(dx) and math.isfinite(dy)):
            logger.warning(f"Dropping malformed arm direction sample dx={dx!r} dy={dy!r}")
            return False

        self._samples.append(Sample(dx=dx, dy=dy, timestamp_ms=now))
        self._samples = [s for s in self._samples if now - s.timestamp_ms <= self.max_age_ms]
        return True

    def query(self, start_ms: float, end_ms: float) -> List[Sample]:
        """Samples with start_ms <= timestamp <= end_ms, oldest first."""
        return [s for s in self._samples if start_ms <= s.timestamp_ms <= end_ms]

    def latest(self) -> Optional[Sample]:
        return self._samples[-1] if self._samples else None

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self):
        return iter(list(self._samples))
