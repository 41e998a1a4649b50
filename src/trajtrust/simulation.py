"""
Round-based reputation simulation over a vehicle trajectory set.

Every round, each requester interacts once with every other vehicle acting
as provider and rates it: honest providers earn (pos=1, neg=0), malicious
ones (pos=0, neg=2). The record goes into the requester's log, stamped with
the round number as logical time and with both vehicles' trajectory sample
for that round. After the round, each provider's reputation is averaged
over all other observers.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from .config import DEFAULT_CONFIG, ReputationConfig
from .models import Interaction, Vector
from .opinion import OpinionCombiner
from .registry import AgentRegistry

logger = logging.getLogger(__name__)

HONEST_EVENTS = (1, 0)
MALICIOUS_EVENTS = (0, 2)


def comm_quality_for_round(round_index: int) -> float:
    """0.8 + 0.1·sin(r), clamped to [0.5, 1]."""
    return min(1.0, max(0.5, 0.8 + 0.1 * math.sin(round_index)))


@dataclass
class RoundResult:
    round: int
    interactions: int
    reputations: dict[str, float]
    honest_average: float
    malicious_average: Optional[float]

    @property
    def gap(self) -> Optional[float]:
        if self.malicious_average is None:
            return None
        return self.honest_average - self.malicious_average

    @property
    def min_reputation(self) -> float:
        return min(self.reputations.values(), default=0.0)

    @property
    def max_reputation(self) -> float:
        return max(self.reputations.values(), default=0.0)

    @property
    def mean_reputation(self) -> float:
        if not self.reputations:
            return 0.0
        return sum(self.reputations.values()) / len(self.reputations)

    @property
    def spread(self) -> float:
        return self.max_reputation - self.min_reputation

    @property
    def honest_lead_percent(self) -> Optional[float]:
        """(honest / malicious − 1)·100; None without a nonzero malicious average."""
        if not self.malicious_average:
            return None
        return (self.honest_average / self.malicious_average - 1) * 100

    def to_dict(self) -> dict:
        return {
            "round": self.round,
            "interactions": self.interactions,
            "reputations": dict(self.reputations),
            "min": self.min_reputation,
            "max": self.max_reputation,
            "mean": self.mean_reputation,
            "spread": self.spread,
            "honest_average": self.honest_average,
            "malicious_average": self.malicious_average,
            "gap": self.gap,
            "honest_lead_percent": self.honest_lead_percent,
        }


@dataclass
class SimulationReport:
    agents: list[str]
    malicious: list[str]
    rounds: list[RoundResult] = field(default_factory=list)

    @property
    def total_interactions(self) -> int:
        return sum(r.interactions for r in self.rounds)

    @property
    def final_ranking(self) -> list[tuple[str, float]]:
        if not self.rounds:
            return []
        final = self.rounds[-1].reputations
        return sorted(final.items(), key=lambda kv: kv[1], reverse=True)

    @property
    def honest_lead_percent(self) -> Optional[float]:
        if not self.rounds:
            return None
        return self.rounds[-1].honest_lead_percent

    def to_dict(self) -> dict:
        return {
            "agents": list(self.agents),
            "malicious": list(self.malicious),
            "total_interactions": self.total_interactions,
            "rounds": [r.to_dict() for r in self.rounds],
            "final_ranking": [{"agent_id": a, "reputation": s} for a, s in self.final_ranking],
            "honest_lead_percent": self.honest_lead_percent,
        }

    def render(self) -> str:
        """Plain-text report, one block per round plus a final ranking."""
        bad = set(self.malicious)
        lines = [
            f"Agents: {len(self.agents)} (honest: {len(self.agents) - len(bad)}, malicious: {len(bad)})",
            "",
        ]
        previous: dict[str, float] = {}
        for r in self.rounds:
            lines.append(f"Round {r.round + 1}: {r.interactions} interactions")
            for agent_id in self.agents:
                rep = r.reputations[agent_id]
                mark = "malicious" if agent_id in bad else "honest"
                change = ""
                if agent_id in previous:
                    change = f", change={rep - previous[agent_id]:+.6f}"
                lines.append(f"  {agent_id} [{mark}]: {rep:.6f}{change}")
            lines.append(f"  min: {r.min_reputation:.6f}  max: {r.max_reputation:.6f}  "
                         f"mean: {r.mean_reputation:.6f}  range: {r.spread:.6f}")
            lines.append(f"  honest average: {r.honest_average:.6f}")
            if r.malicious_average is not None:
                lines.append(f"  malicious average: {r.malicious_average:.6f} (gap {r.gap:.6f})")
            lines.append("")
            previous = r.reputations

        lines.append("Final ranking:")
        for i, (agent_id, rep) in enumerate(self.final_ranking, start=1):
            mark = "malicious" if agent_id in bad else "honest"
            lines.append(f"  {i}. {agent_id} [{mark}] {rep:.6f}")
        lead = self.honest_lead_percent
        if lead is not None:
            lines.append(f"Honest agents lead malicious ones by {lead:.2f}%")
        return "\n".join(lines)


class Simulation:
    """Drives rounds of interactions through a registry of managers."""

    def __init__(self, trajectories: dict[str, Sequence[Vector]],
                 config: Optional[ReputationConfig] = None,
                 malicious: Iterable[str] = (),
                 combiner: Optional[OpinionCombiner] = None):
        self.config = config or DEFAULT_CONFIG
        self.trajectories = trajectories
        self.malicious = set(malicious)
        self.registry = AgentRegistry()
        for agent_id in sorted(trajectories):
            self.registry.create(agent_id, self.config, combiner=combiner)
        self.registry.connect_all()

    @property
    def agents(self) -> list[str]:
        return self.registry.ids()

    @property
    def max_rounds(self) -> int:
        if not self.trajectories:
            return 0
        return min(len(t) for t in self.trajectories.values())

    def _events_for(self, provider: str) -> tuple[int, int]:
        return MALICIOUS_EVENTS if provider in self.malicious else HONEST_EVENTS

    def play_round(self, r: int) -> int:
        """Log one round of interactions; returns how many were added."""
        count = 0
        quality = comm_quality_for_round(r)
        for requester in self.agents:
            manager = self.registry.get(requester)
            for provider in self.agents:
                if provider == requester:
                    continue
                pos, neg = self._events_for(provider)
                manager.add_interaction(Interaction(
                    sender=requester,
                    recipient=provider,
                    pos_events=pos,
                    neg_events=neg,
                    timestamp=float(r),
                    comm_quality=quality,
                    sender_trajectory=tuple(self.trajectories[requester][r:r + 1]),
                    recipient_trajectory=tuple(self.trajectories[provider][r:r + 1]),
                ))
                count += 1
        return count

    def reputation_of(self, provider: str, now: float) -> float:
        """Mean reputation of `provider` over every other observer."""
        scores = []
        for observer in self.agents:
            if observer == provider:
                continue
            manager = self.registry.get(observer)
            scores.append(manager.compute_reputation(observer, provider, manager.neighbors, now))
        return sum(scores) / len(scores) if scores else 0.0

    def run(self, rounds: Optional[int] = None) -> SimulationReport:
        total = self.max_rounds if rounds is None else min(rounds, self.max_rounds)
        report = SimulationReport(agents=self.agents, malicious=sorted(self.malicious & set(self.agents)))
        logger.info("simulating %d rounds over %d agents (%d malicious)",
                    total, len(self.agents), len(report.malicious))

        for r in range(total):
            added = self.play_round(r)
            reputations = {a: self.reputation_of(a, float(r)) for a in self.agents}
            honest = [v for a, v in reputations.items() if a not in self.malicious]
            bad = [v for a, v in reputations.items() if a in self.malicious]
            result = RoundResult(
                round=r,
                interactions=added,
                reputations=reputations,
                honest_average=sum(honest) / len(honest) if honest else 0.0,
                malicious_average=sum(bad) / len(bad) if bad else None,
            )
            report.rounds.append(result)
            logger.info("round %d: honest=%.6f malicious=%s", r + 1,
                        result.honest_average, result.malicious_average)
        return report
