"""Records shared by every layer: trajectory samples, interactions, opinions."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Iterator


# ─── Trajectory ────────────────────────────────────────────────────

@dataclass(frozen=True)
class Vector:
    """One trajectory sample."""
    speed: float
    location: float  # normalised position [0, 1]
    direction: float  # radians

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Vector":
        return cls(
            speed=float(data.get("speed", 0.0)),
            location=float(data.get("location", 0.0)),
            direction=float(data.get("direction", 0.0)),
        )


# ─── Evidence ──────────────────────────────────────────────────────

def _event_count(data: dict, key: str) -> int:
    value = data.get(key, 0)
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{key} must be a whole number, got {value}")
    return int(value)


@dataclass(frozen=True)
class Interaction:
    """
    One evidence record: the sender's rating of the recipient.

    Counts and timestamps are taken as given; nothing is validated.
    """
    sender: str
    recipient: str
    pos_events: int = 0
    neg_events: int = 0
    timestamp: float = 0.0
    comm_quality: float = 0.5
    sender_trajectory: tuple[Vector, ...] = field(default_factory=tuple)
    recipient_trajectory: tuple[Vector, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "sender": self.sender,
            "recipient": self.recipient,
            "pos_events": self.pos_events,
            "neg_events": self.neg_events,
            "timestamp": self.timestamp,
            "comm_quality": self.comm_quality,
            "sender_trajectory": [v.to_dict() for v in self.sender_trajectory],
            "recipient_trajectory": [v.to_dict() for v in self.recipient_trajectory],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Interaction":
        return cls(
            sender=str(data["sender"]),
            recipient=str(data["recipient"]),
            pos_events=_event_count(data, "pos_events"),
            neg_events=_event_count(data, "neg_events"),
            timestamp=float(data.get("timestamp", 0.0)),
            comm_quality=float(data.get("comm_quality", 0.5)),
            sender_trajectory=tuple(Vector.from_dict(v) for v in data.get("sender_trajectory", [])),
            recipient_trajectory=tuple(Vector.from_dict(v) for v in data.get("recipient_trajectory", [])),
        )


# ─── Subjective opinion ────────────────────────────────────────────

@dataclass(frozen=True)
class Opinion:
    """(belief, disbelief, uncertainty) triple. Components may leave [0, 1]."""
    belief: float = 0.0
    disbelief: float = 0.0
    uncertainty: float = 1.0

    @classmethod
    def vacuous(cls) -> "Opinion":
        """Opinion about a peer nothing is known of."""
        return cls(belief=0.0, disbelief=0.0, uncertainty=1.0)

    def __iter__(self) -> Iterator[float]:
        return iter((self.belief, self.disbelief, self.uncertainty))

    def to_dict(self) -> dict:
        return asdict(self)
