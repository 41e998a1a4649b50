"""
ReputationManager — per-agent reputation engine.

Pipeline for one query (observer → target, logical time `now`):

    1. local opinion        own log, records whose recipient is the target
    2. recommended opinion  one-hop neighbors' local opinions, weighted by
                            δ = ρ1·IF + ρ2·SIM on each neighbor's own log
    3. final opinion        pluggable OpinionCombiner
    4. reputation           T = b + γ·u

Nothing is cached; every query recomputes from the logs. The engine never
reads a clock, so results are reproducible for a fixed log state.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence

from .config import DEFAULT_CONFIG, ReputationConfig
from .frequency import interaction_frequency
from .models import Interaction, Opinion, Vector
from .opinion import LocalOnlyCombiner, OpinionCombiner, local_opinion, opinion_to_reputation
from .registry import AgentRegistry
from .temporal import TemporalWeighter
from .trajectory import TrajectorySimilarity

logger = logging.getLogger(__name__)

DEFAULT_COMM_QUALITY = 0.5


@dataclass(frozen=True)
class ReputationBreakdown:
    """Score plus the intermediate opinions it was derived from."""
    score: float
    local: Opinion
    recommended: Opinion
    final: Opinion

    def __iter__(self) -> Iterator:
        return iter((self.score, self.local, self.recommended, self.final))

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "local": self.local.to_dict(),
            "recommended": self.recommended.to_dict(),
            "final": self.final.to_dict(),
        }


class ReputationManager:
    """Owns one agent's append-only interaction log and answers reputation queries."""

    def __init__(self, config: Optional[ReputationConfig] = None,
                 combiner: Optional[OpinionCombiner] = None,
                 registry: Optional[AgentRegistry] = None,
                 agent_id: str = ""):
        self.config = config or DEFAULT_CONFIG
        self.combiner = combiner or LocalOnlyCombiner()
        self.registry = registry if registry is not None else AgentRegistry()
        self.agent_id = agent_id
        self.weighter = TemporalWeighter(self.config)
        self.trajectories = TrajectorySimilarity(self.config)
        self._interactions: list[Interaction] = []
        self._neighbors: set[str] = set()
        self._lock = threading.Lock()

    # ── Collaborator surface ──

    def add_interaction(self, record: Interaction) -> None:
        """Append a record to the log. No validation."""
        with self._lock:
            self._interactions.append(record)

    def add_peer(self, peer_id: str, peer: "ReputationManager") -> None:
        """Register a one-hop neighbor for recommendation traversal."""
        if self.registry.get(peer_id) is not peer:
            self.registry.register(peer_id, peer)
        self._neighbors.add(peer_id)

    def resolve_peer(self, peer_id: str) -> Optional["ReputationManager"]:
        if peer_id not in self._neighbors:
            return None
        return self.registry.get(peer_id)

    @property
    def interactions(self) -> tuple[Interaction, ...]:
        """Consistent snapshot of the log."""
        with self._lock:
            return tuple(self._interactions)

    @property
    def neighbors(self) -> list[str]:
        return sorted(self._neighbors)

    # ── Opinions ──
    #
    # Record-reading helpers take an optional `records` snapshot so one query
    # reads each log exactly once; None means "snapshot now".

    def _records(self, records: Optional[Sequence[Interaction]]) -> Sequence[Interaction]:
        return self.interactions if records is None else records

    def direct_opinion(self, target: str, now: float,
                       records: Optional[Sequence[Interaction]] = None) -> Opinion:
        """Local opinion of `target` from this agent's own records about it."""
        matched = [r for r in self._records(records) if r.recipient == target]
        mass = self.weighter.accumulate(matched, now)
        if matched:
            comm_quality = sum(r.comm_quality for r in matched) / len(matched)
        else:
            comm_quality = DEFAULT_COMM_QUALITY
        return local_opinion(mass.pos, mass.neg, comm_quality)

    def interaction_frequency(self, sender: str, recipient: str, now: float,
                              records: Optional[Sequence[Interaction]] = None) -> float:
        return interaction_frequency(self._records(records), self.weighter, sender, recipient, now)

    def integration_weight(self, sender: str, recipient: str,
                           traj_sender: Sequence[Vector], traj_recipient: Sequence[Vector],
                           now: float, records: Optional[Sequence[Interaction]] = None) -> float:
        """δ = ρ1·IF(sender→recipient) + ρ2·SIM(traj_sender, traj_recipient)."""
        frequency = self.interaction_frequency(sender, recipient, now, records)
        similarity = self.trajectories.similarity(traj_sender, traj_recipient)
        return self.config.rho1 * frequency + self.config.rho2 * similarity

    def edge_trajectories(self, sender: str, recipient: str,
                          records: Optional[Sequence[Interaction]] = None
                          ) -> tuple[tuple[Vector, ...], tuple[Vector, ...]]:
        """Trajectory pair of the first (sender → recipient) record in this log."""
        for record in self._records(records):
            if record.sender == sender and record.recipient == recipient:
                return record.sender_trajectory, record.recipient_trajectory
        return (), ()

    def recommended_opinion(self, target: str, neighbor_ids: Iterable[str], now: float) -> Opinion:
        """
        Weighted average of the neighbors' direct opinions of `target`.

        One hop only: a neighbor's own recommended opinion is never asked
        for. Ids that are not registered neighbors are skipped. Each
        neighbor's log is snapshotted once, so its opinion and its weight
        see the same records. Returns the vacuous opinion when the total
        weight is 0.
        """
        b_sum = d_sum = u_sum = weight_sum = 0.0

        for neighbor_id in neighbor_ids:
            peer = self.resolve_peer(neighbor_id)
            if peer is None:
                logger.debug("skipping unknown neighbor %s", neighbor_id)
                continue

            records = peer.interactions
            opinion = peer.direct_opinion(target, now, records)
            traj_neighbor, traj_target = peer.edge_trajectories(neighbor_id, target, records)
            weight = peer.integration_weight(neighbor_id, target, traj_neighbor, traj_target,
                                             now, records)

            b_sum += weight * opinion.belief
            d_sum += weight * opinion.disbelief
            u_sum += weight * opinion.uncertainty
            weight_sum += weight

        if weight_sum == 0:
            return Opinion.vacuous()
        return Opinion(
            belief=b_sum / weight_sum,
            disbelief=d_sum / weight_sum,
            uncertainty=u_sum / weight_sum,
        )

    # ── Reputation ──

    def compute_reputation_debug(self, self_id: str, target: str,
                                 neighbor_ids: Iterable[str], now: float) -> ReputationBreakdown:
        local = self.direct_opinion(target, now, self.interactions)
        recommended = self.recommended_opinion(target, neighbor_ids, now)
        final = self.combiner.combine(local, recommended)
        score = opinion_to_reputation(final, self.config.gamma)
        logger.debug(
            "reputation %s→%s at %s: score=%.6f local=%s recommended=%s",
            self_id, target, now, score, tuple(local), tuple(recommended),
        )
        return ReputationBreakdown(score=score, local=local, recommended=recommended, final=final)

    def compute_reputation(self, self_id: str, target: str,
                           neighbor_ids: Iterable[str], now: float) -> float:
        return self.compute_reputation_debug(self_id, target, neighbor_ids, now).score

    # ── Provider selection ──

    def rank_providers(self, self_id: str, candidates: Sequence[str],
                       neighbor_ids: Iterable[str], now: float) -> list[tuple[str, float]]:
        """
        Candidates with their scores, best first.

        The sort is stable, so equal scores keep their input order and the
        earliest candidate wins a tie.
        """
        neighbor_ids = list(neighbor_ids)
        scored = [(c, self.compute_reputation(self_id, c, neighbor_ids, now)) for c in candidates]
        return sorted(scored, key=lambda pair: pair[1], reverse=True)

    def select_optimal_provider(self, self_id: str, candidates: Sequence[str],
                                neighbor_ids: Iterable[str], now: float) -> Optional[str]:
        """Highest-reputation candidate, or None when there are no candidates."""
        ranking = self.rank_providers(self_id, candidates, neighbor_ids, now)
        if not ranking:
            return None
        return ranking[0][0]

    def __repr__(self):
        return f"ReputationManager(agent_id={self.agent_id!r}, interactions={len(self._interactions)})"
