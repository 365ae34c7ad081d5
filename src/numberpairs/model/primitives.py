"""
Value types for the 1-D track.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

# Slack for floating point comparisons of positions.
TOLERANCE: float = 1e-9


@dataclass(frozen=True)
class TrackRange:
    """A closed interval [min, max] on the track."""
    min: float
    max: float

    def __post_init__(self) -> None:
        if self.max < self.min:
            raise ValueError(f"Invalid range [{self.min}, {self.max}]")

    @property
    def length(self) -> float:
        return self.max - self.min

    def contains(self, x: float) -> bool:
        return self.min <= x <= self.max

    def clamp(self, x: float) -> float:
        return float(np.clip(x, self.min, self.max))

    def shrunk(self, low: float = 0.0, high: float = 0.0) -> TrackRange:
        """Range with `low` added to min and `high` removed from max."""
        return TrackRange(self.min + low, self.max - high)
