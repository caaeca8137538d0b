from __future__ import annotations

import math

MAX_ERROR_PENALTY = 30
PENALTY_PER_DIAGNOSTIC = 2


def fill_rate(filled_slots: int, total_slots: int) -> float:
    if total_slots <= 0:
        return 0.0
    return filled_slots / total_slots


def compute_score(filled_slots: int, total_slots: int, diagnostic_count: int) -> int:
    """Quality score in [0, 100]: fill rate minus a capped per-diagnostic penalty.

    Halves round up (12.5 -> 13), not to the nearest even integer.
    """

    penalty = min(PENALTY_PER_DIAGNOSTIC * max(diagnostic_count, 0), MAX_ERROR_PENALTY)
    raw = math.floor(fill_rate(filled_slots, total_slots) * 100 - penalty + 0.5)
    return max(0, min(100, int(raw)))
