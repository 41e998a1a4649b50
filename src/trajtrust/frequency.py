"""Interaction frequency IF(i→j) = N(i→j) / N̄(i)."""

from __future__ import annotations

from typing import Sequence

from .models import Interaction
from .temporal import TemporalWeighter


def interaction_frequency(records: Sequence[Interaction], weighter: TemporalWeighter,
                          sender: str, recipient: str, now: float) -> float:
    """
    How much attention `sender` paid to `recipient` relative to its average target.

    N(i→j) is the decayed pos+neg mass of records with exactly (sender,
    recipient). N̄(i) averages the same mass over every distinct recipient
    the sender has records toward; it is 1.0 when there are none. Returns 0
    when N̄(i) is 0. The ratio is invariant under scaling every event count
    by a positive constant.
    """
    pair_mass = weighter.accumulate(
        (r for r in records if r.sender == sender and r.recipient == recipient), now
    ).total

    per_recipient: dict[str, float] = {}
    for record in records:
        if record.sender != sender:
            continue
        mass = weighter.weigh(record, now)
        per_recipient[record.recipient] = per_recipient.get(record.recipient, 0.0) + mass.total

    average = 1.0
    if per_recipient:
        average = sum(per_recipient.values()) / len(per_recipient)
    if average == 0:
        return 0.0
    return pair_mass / average
