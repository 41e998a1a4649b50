"""
Opinion layer: evidence mass → (b, d, u), opinion fusion, opinion → scalar.

    u0 = 1 − s                          s = communication quality
    b  = (1 − u0) · α/(α+β) · tanh(α/30)
    d  = (1 − u0) · β/(α+β) · tanh(β/50)
    u  = 1 − b − d
    T  = b + γ·u

Negative evidence saturates on a shorter curve than positive evidence, so
misbehaviour is penalised faster than good behaviour is rewarded.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

from .models import Opinion

POSITIVE_SATURATION = 30.0
NEGATIVE_SATURATION = 50.0


def local_opinion(pos_mass: float, neg_mass: float, comm_quality: float) -> Opinion:
    """Derive an opinion from decayed evidence mass and link quality."""
    total = pos_mass + neg_mass
    if total == 0:
        return Opinion.vacuous()

    u0 = 1.0 - comm_quality
    certainty = 1.0 - u0
    scale_pos = math.tanh(pos_mass / POSITIVE_SATURATION)
    scale_neg = math.tanh(neg_mass / NEGATIVE_SATURATION)

    belief = certainty * (pos_mass / total) * scale_pos
    disbelief = certainty * (neg_mass / total) * scale_neg
    # residual, left unclamped
    return Opinion(belief=belief, disbelief=disbelief, uncertainty=1.0 - belief - disbelief)


def opinion_to_reputation(opinion: Opinion, gamma: float) -> float:
    """T = b + γ·u. Not clamped."""
    return opinion.belief + gamma * opinion.uncertainty


# ─── Fusion strategies ─────────────────────────────────────────────

class OpinionCombiner(ABC):
    """Merges a local opinion with the neighbors' recommended opinion."""

    name: str = "abstract"

    @abstractmethod
    def combine(self, local: Opinion, recommended: Opinion) -> Opinion:
        ...


class LocalOnlyCombiner(OpinionCombiner):
    """
    Keep the local opinion and discard the recommendation.

    Negative evidence the observer collected itself is never diluted by
    neighbors that have not seen the misbehaviour.
    """

    name = "local-only"

    def combine(self, local: Opinion, recommended: Opinion) -> Opinion:
        return local


class WeightedAverageCombiner(OpinionCombiner):
    """Component-wise blend: w·local + (1 − w)·recommended."""

    name = "weighted-average"

    def __init__(self, local_weight: float = 0.5):
        if not 0.0 <= local_weight <= 1.0:
            raise ValueError(f"local_weight must be in [0, 1], got {local_weight}")
        self.local_weight = local_weight

    def combine(self, local: Opinion, recommended: Opinion) -> Opinion:
        w = self.local_weight
        return Opinion(
            belief=w * local.belief + (1 - w) * recommended.belief,
            disbelief=w * local.disbelief + (1 - w) * recommended.disbelief,
            uncertainty=w * local.uncertainty + (1 - w) * recommended.uncertainty,
        )


COMBINERS: dict[str, type[OpinionCombiner]] = {
    LocalOnlyCombiner.name: LocalOnlyCombiner,
    WeightedAverageCombiner.name: WeightedAverageCombiner,
}


def get_combiner(name: str) -> OpinionCombiner:
    """Instantiate a registered combiner by name (default arguments)."""
    try:
        return COMBINERS[name]()
    except KeyError:
        raise ValueError(f"unknown combiner '{name}', choose from {sorted(COMBINERS)}") from None
