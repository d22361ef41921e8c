"""Tests for curveball path planning."""

import math

import pytest

from src.toss.planner import TrajectoryPlanner
from src.toss.types import Sample


def _sample(angle_deg, t, mag=1.0):
    a = math.radians(angle_deg)
    return Sample(dx=mag * math.cos(a), dy=mag * math.sin(a), timestamp_ms=t)


def test_collinear_samples_have_no_spin():
    planner = TrajectoryPlanner()
    samples = [Sample(2.0, 1.0, 0), Sample(4.0, 2.0, 10), Sample(1.0, 0.5, 25)]
    plan = planner.plan(samples)
    assert len(plan.segments) == 3
    assert plan.ending_angular_velocity == pytest.approx(0.0)


def test_segments_are_unit_length_with_gap_durations():
    planner = TrajectoryPlanner()
    samples = [Sample(3.0, 4.0, 0), Sample(0.0, 2.0, 30), Sample(-5.0, 0.0, 40)]
    segments = planner.build_segments(samples)

    for seg in segments:
        assert math.hypot(seg.dx, seg.dy) == pytest.approx(1.0)
    assert (segments[0].dx, segments[0].dy) == pytest.approx((0.6, 0.8))
    # 30ms gap, 10ms gap floored to 20ms, fixed terminal duration
    assert [s.duration for s in segments] == pytest.approx([0.03, 0.02, 0.2])


def test_samples_are_sorted_before_planning():
    planner = TrajectoryPlanner()
    samples = [Sample(0.0, 1.0, 50), Sample(1.0, 0.0, 0)]
    segments = planner.build_segments(samples)
    assert (segments[0].dx, segments[0].dy) == pytest.approx((1.0, 0.0))
    assert segments[0].duration == pytest.approx(0.05)


def test_near_zero_samples_are_skipped():
    planner = TrajectoryPlanner()
    samples = [Sample(1.0, 0.0, 0), Sample(0.0, 0.0005, 10), Sample(0.0, 1.0, 60)]
    segments = planner.build_segments(samples)
    assert len(segments) == 2
    # The first segment still ends when the next (rejected) sample arrived
    assert segments[0].duration == pytest.approx(0.02)


def test_all_zero_samples_give_empty_plan():
    plan = TrajectoryPlanner().plan([Sample(0.0, 0.0, 0), Sample(0.0, 0.0, 10)])
    assert plan.segments == []
    assert plan.exhausted
    assert plan.ending_angular_velocity == 0.0


def test_single_segment_has_no_spin():
    plan = TrajectoryPlanner().plan([Sample(1.0, 1.0, 0)])
    assert len(plan.segments) == 1
    assert plan.ending_angular_velocity == 0.0


def test_quarter_turn_spin():
    planner = TrajectoryPlanner()
    plan = planner.plan([_sample(0, 0), _sample(90, 100)])
    # pi/2 over the second segment's 0.2s terminal duration
    assert plan.ending_angular_velocity == pytest.approx((math.pi / 2) / 0.2)


def test_later_pairs_weigh_more():
    planner = TrajectoryPlanner()
    plan = planner.plan([_sample(0, 0), _sample(90, 100), _sample(180, 200)])
    rate_first = (math.pi / 2) / 0.1
    rate_second = (math.pi / 2) / 0.2
    expected = (rate_first * 1 + rate_second * 2) / 3
    assert plan.ending_angular_velocity == pytest.approx(expected)


def test_angle_difference_wraps_across_pi():
    planner = TrajectoryPlanner()
    plan = planner.plan([_sample(170, 0), _sample(-170, 100)])
    assert plan.ending_angular_velocity == pytest.approx(math.radians(20) / 0.2)


def test_clockwise_turn_is_negative():
    planner = TrajectoryPlanner()
    plan = planner.plan([_sample(90, 0), _sample(0, 100)])
    assert plan.ending_angular_velocity < 0
