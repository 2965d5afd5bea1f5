from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class ConfidenceStats:
    avg: float
    min: float
    max: float


EMPTY_STATS = ConfidenceStats(avg=0.0, min=0.0, max=0.0)


def confidence_stats(scores: Sequence[float]) -> ConfidenceStats:
    """Average/min/max of a score list; 0 for all three when it is empty."""
    if not scores:
        return EMPTY_STATS
    values = [float(s) for s in scores]
    return ConfidenceStats(avg=sum(values) / len(values), min=min(values), max=max(values))
