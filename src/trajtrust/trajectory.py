"""
Trajectory similarity between two agents' motion records.

    SIM  = 1 − DISS
    DISS = ψ1·speed_diff + ψ2·location_diff + ψ3·direction_diff

Location is compared with a longest common subsequence where two samples
match when their normalised positions are closer than LOCATION_THRESHOLD.
The match is order-preserving but not time-aligned.
"""

from __future__ import annotations

import math
from typing import Sequence

from .config import ReputationConfig
from .models import Vector

LOCATION_THRESHOLD = 0.05


def lcs_length(seq_a: Sequence[float], seq_b: Sequence[float],
               threshold: float = LOCATION_THRESHOLD) -> int:
    """Length of the longest common subsequence under |a − b| < threshold."""
    m, n = len(seq_a), len(seq_b)
    if m == 0 or n == 0:
        return 0
    # two rolling rows of the classic (m+1)×(n+1) table
    prev = [0] * (n + 1)
    for i in range(1, m + 1):
        row = [0] * (n + 1)
        a = seq_a[i - 1]
        for j in range(1, n + 1):
            if abs(a - seq_b[j - 1]) < threshold:
                row[j] = prev[j - 1] + 1
            else:
                row[j] = max(prev[j], row[j - 1])
        prev = row
    return prev[n]


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def speed_difference(traj_a: Sequence[Vector], traj_b: Sequence[Vector]) -> float:
    """|v̄a − v̄b| / max(v̄a, v̄b); 0 when the larger mean speed is 0."""
    if not traj_a or not traj_b:
        return 0.0
    mean_a = _mean([v.speed for v in traj_a])
    mean_b = _mean([v.speed for v in traj_b])
    top = max(mean_a, mean_b)
    if top == 0:
        return 0.0
    return abs(mean_a - mean_b) / top


def location_difference(traj_a: Sequence[Vector], traj_b: Sequence[Vector]) -> float:
    """(max_len − LCS) / max_len over position sequences; 0 when both are empty."""
    loc_a = [v.location for v in traj_a]
    loc_b = [v.location for v in traj_b]
    longest = max(len(loc_a), len(loc_b))
    if longest == 0:
        return 0.0
    return (longest - lcs_length(loc_a, loc_b)) / longest


def direction_difference(traj_a: Sequence[Vector], traj_b: Sequence[Vector]) -> float:
    """
    Piecewise function of the angle φ between mean headings, φ ∈ [0, π].

        φ <= π/4:  sin φ
        otherwise: 0.5 + |sin(φ + π/4)| / 2

    The two branches do not meet at π/4 (≈0.707 vs ≈1.0); kept as is.
    """
    if not traj_a or not traj_b:
        return 0.0
    phi = abs(_mean([v.direction for v in traj_a]) - _mean([v.direction for v in traj_b]))
    if phi > math.pi:
        phi = 2 * math.pi - phi
    if phi <= math.pi / 4:
        return math.sin(phi)
    return 0.5 + abs(math.sin(phi + math.pi / 4)) / 2


class TrajectorySimilarity:
    """Blends the three axis differences with the configured ψ weights."""

    def __init__(self, config: ReputationConfig):
        self.config = config

    def dissimilarity(self, traj_a: Sequence[Vector], traj_b: Sequence[Vector]) -> float:
        cfg = self.config
        return (cfg.psi1 * speed_difference(traj_a, traj_b)
                + cfg.psi2 * location_difference(traj_a, traj_b)
                + cfg.psi3 * direction_difference(traj_a, traj_b))

    def similarity(self, traj_a: Sequence[Vector], traj_b: Sequence[Vector]) -> float:
        """1 − DISS, or 0 when either trajectory is empty."""
        if not traj_a or not traj_b:
            return 0.0
        return 1.0 - self.dissimilarity(traj_a, traj_b)

    def breakdown(self, traj_a: Sequence[Vector], traj_b: Sequence[Vector]) -> dict:
        """Per-axis differences alongside the blended similarity."""
        return {
            "speed_difference": speed_difference(traj_a, traj_b),
            "location_difference": location_difference(traj_a, traj_b),
            "direction_difference": direction_difference(traj_a, traj_b),
            "similarity": self.similarity(traj_a, traj_b),
        }
