"""Tests for recency weighting and interaction frequency."""

import pytest

from trajtrust.config import ReputationConfig
from trajtrust.frequency import interaction_frequency
from trajtrust.models import Interaction
from trajtrust.temporal import EvidenceMass, TemporalWeighter


NOW = 1_000.0


@pytest.fixture
def weighter():
    cfg = ReputationConfig(zeta=0.7, sigma=0.3, theta=0.9, tau=1.2, t_recent=10.0)
    return TemporalWeighter(cfg)


# ─── TemporalWeighter ──────────────────────────────────────────────


class TestTemporalWeighter:
    def test_recent_at_threshold(self, weighter, make_record):
        assert weighter.is_recent(make_record(t=NOW - 10.0), NOW)

    def test_past_beyond_threshold(self, weighter, make_record):
        assert not weighter.is_recent(make_record(t=NOW - 10.5), NOW)

    def test_recent_weights(self, weighter, make_record):
        mass = weighter.weigh(make_record(pos=2, neg=3, t=NOW), NOW)
        assert mass.pos == pytest.approx(0.7 * 0.9 * 2)
        assert mass.neg == pytest.approx(0.7 * 1.2 * 3)

    def test_past_weights(self, weighter, make_record):
        mass = weighter.weigh(make_record(pos=2, neg=3, t=NOW - 100), NOW)
        assert mass.pos == pytest.approx(0.3 * 0.9 * 2)
        assert mass.neg == pytest.approx(0.3 * 1.2 * 3)

    def test_accumulate_mixes_buckets(self, weighter, make_record):
        records = [make_record(pos=1, t=NOW), make_record(pos=1, t=NOW - 50)]
        mass = weighter.accumulate(records, NOW)
        assert mass.pos == pytest.approx((0.7 + 0.3) * 0.9)
        assert mass.neg == 0.0

    def test_accumulate_empty(self, weighter):
        assert weighter.accumulate([], NOW) == EvidenceMass(0.0, 0.0)

    def test_future_records_count_as_recent(self, weighter, make_record):
        assert weighter.is_recent(make_record(t=NOW + 5), NOW)


# ─── Interaction frequency ─────────────────────────────────────────


def _log(make_record, scale=1):
    return [
        make_record(sender="n", recipient="t", pos=3 * scale, t=NOW),
        make_record(sender="n", recipient="x", pos=1 * scale, t=NOW),
        make_record(sender="n", recipient="y", pos=1 * scale, neg=1 * scale, t=NOW - 50),
        make_record(sender="other", recipient="t", pos=9 * scale, t=NOW),
    ]


class TestInteractionFrequency:
    def test_above_average_attention(self, config, make_record):
        w = TemporalWeighter(config)
        records = [
            make_record(sender="n", recipient="t", pos=3, t=NOW),
            make_record(sender="n", recipient="x", pos=1, t=NOW),
        ]
        # N = 2.1, N̄ = (2.1 + 0.7) / 2 = 1.4
        assert interaction_frequency(records, w, "n", "t", NOW) == pytest.approx(1.5)
        assert interaction_frequency(records, w, "n", "x", NOW) == pytest.approx(0.5)

    def test_scale_invariant(self, config, make_record):
        w = TemporalWeighter(config)
        base = interaction_frequency(_log(make_record), w, "n", "t", NOW)
        for k in (2, 5, 17):
            scaled = interaction_frequency(_log(make_record, scale=k), w, "n", "t", NOW)
            assert scaled == pytest.approx(base)

    def test_ignores_other_senders(self, config, make_record):
        w = TemporalWeighter(config)
        only_n = [r for r in _log(make_record) if r.sender == "n"]
        assert interaction_frequency(_log(make_record), w, "n", "t", NOW) == pytest.approx(
            interaction_frequency(only_n, w, "n", "t", NOW))

    def test_unknown_sender_is_zero(self, config, make_record):
        w = TemporalWeighter(config)
        assert interaction_frequency(_log(make_record), w, "ghost", "t", NOW) == 0.0

    def test_zero_average_mass_is_zero(self, config, make_record):
        w = TemporalWeighter(config)
        records = [make_record(sender="n", recipient="t", pos=0, neg=0)]
        assert interaction_frequency(records, w, "n", "t", NOW) == 0.0

    def test_no_pair_records(self, config, make_record):
        w = TemporalWeighter(config)
        records = [make_record(sender="n", recipient="x", pos=4, t=NOW)]
        assert interaction_frequency(records, w, "n", "t", NOW) == 0.0

    def test_empty_log(self, config):
        assert interaction_frequency([], TemporalWeighter(config), "n", "t", NOW) == 0.0

    def test_accepts_interaction_tuple(self, config):
        records = (Interaction(sender="n", recipient="t", pos_events=2, timestamp=NOW),)
        assert interaction_frequency(records, TemporalWeighter(config), "n", "t", NOW) == pytest.approx(1.0)
