"""Recency split and decay of interaction evidence."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .config import ReputationConfig
from .models import Interaction


@dataclass
class EvidenceMass:
    """Decayed positive / negative evidence."""
    pos: float = 0.0
    neg: float = 0.0

    @property
    def total(self) -> float:
        return self.pos + self.neg

    def __add__(self, other: "EvidenceMass") -> "EvidenceMass":
        return EvidenceMass(self.pos + other.pos, self.neg + other.neg)


class TemporalWeighter:
    """
    Weighs an interaction by how recent it is relative to a caller-supplied now.

    Recent (now − t <= t_recent):  α += ζ·θ·pos,  β += ζ·τ·neg
    Past:                          α += σ·θ·pos,  β += σ·τ·neg
    """

    def __init__(self, config: ReputationConfig):
        self.config = config

    def is_recent(self, record: Interaction, now: float) -> bool:
        return now - record.timestamp <= self.config.t_recent

    def weigh(self, record: Interaction, now: float) -> EvidenceMass:
        cfg = self.config
        recency = cfg.zeta if self.is_recent(record, now) else cfg.sigma
        return EvidenceMass(
            pos=recency * cfg.theta * record.pos_events,
            neg=recency * cfg.tau * record.neg_events,
        )

    def accumulate(self, records: Iterable[Interaction], now: float) -> EvidenceMass:
        """Sum of the weighted mass of every record."""
        mass = EvidenceMass()
        for record in records:
            mass = mass + self.weigh(record, now)
        return mass
