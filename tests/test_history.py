import math
import random

import pytest

from src.toss.history import SampleHistory


def test_record_prunes_old_samples():
    history = SampleHistory(max_age_ms=200)
    history.record(1.0, 0.0, 0)
    history.record(0.0, 1.0, 150)
    history.record(1.0, 1.0, 250)

    timestamps = [s.timestamp_ms for s in history]
    assert timestamps == [150, 250]


def test_sample_exactly_at_max_age_is_kept():
    history = SampleHistory(max_age_ms=200)
    history.record(1.0, 0.0, 0)
    history.record(1.0, 0.0, 200)
    assert len(history) == 2


def test_query_is_inclusive_and_chronological():
    history = SampleHistory(max_age_ms=1000)
    for t in (10, 20, 30, 40):
        history.record(t, 0.0, t)

    result = history.query(20, 40)
    assert [s.timestamp_ms for s in result] == [20, 30, 40]
    assert history.query(41, 100) == []


@pytest.mark.parametrize("dx,dy", [(math.nan, 0.0), (0.0, math.inf), (-math.inf, 1.0)])
def test_non_finite_samples_are_dropped(dx, dy):
    history = SampleHistory()
    history.record(1.0, 0.0, 0)
    assert history.record(dx, dy, 10) is False
    assert len(history) == 1
    assert history.latest().dx == 1.0


def test_random_sequences_respect_age_window():
    rng = random.Random(7)
    history = SampleHistory(max_age_ms=200)
    now = 0.0
    for _ in range(500):
        now += rng.uniform(0, 40)
        history.record(rng.uniform(-1, 1), rng.uniform(-1, 1), now)
        for sample in history.query(-1e9, 1e9):
            assert now - sample.timestamp_ms <= 200


def test_bursts_are_not_capped():
    history = SampleHistory(max_age_ms=200)
    for i in range(1000):
        history.record(1.0, 0.0, 100)
    assert len(history) == 1000
