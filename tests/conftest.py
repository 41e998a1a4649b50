"""Shared fixtures for the trajtrust test suite."""
import os
import sys

import pytest

# Ensure src is on path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from trajtrust.config import ReputationConfig
from trajtrust.models import Interaction


T0 = 1_000.0


@pytest.fixture
def config():
    return ReputationConfig()


@pytest.fixture
def make_record():
    """Factory for interaction records with sensible defaults."""
    def _make(sender="1", recipient="2", pos=1, neg=0, t=T0, quality=0.9,
              sender_traj=(), recipient_traj=()):
        return Interaction(
            sender=sender,
            recipient=recipient,
            pos_events=pos,
            neg_events=neg,
            timestamp=t,
            comm_quality=quality,
            sender_trajectory=tuple(sender_traj),
            recipient_trajectory=tuple(recipient_traj),
        )
    return _make
