"""
Curveball path planning.

Replays the arm direction samples captured around a throw as a sequence of
short directional segments, then estimates how fast the wrist was still
turning at release so the flight can keep curving after the plan runs out.
"""
from typing import List, Sequence

import numpy as np
from loguru import logger

from .config import PlannerConfig
from .types import PathPlan, PathSegment, Sample


class TrajectoryPlanner:
    """Builds a PathPlan from the samples in a throw's commit window."""

    def __init__(self, config: PlannerConfig = None):
        self._config = config or PlannerConfig()

    def build_segments(self, samples: Sequence[Sample]) -> List[PathSegment]:
        """
        One unit-direction segment per sample with a usable magnitude.

        Each segment lasts until the next sample arrives (at least
        `min_segment_duration`); the last one gets `final_segment_duration`.
        """
        cfg = self._config
        ordered = sorted(samples, key=lambda s: s.timestamp_ms)
        segments: List[PathSegment] = []

        for i, sample in enumerate(ordered):
            mag = float(np.hypot(sample.dx, sample.dy))
            if mag <= cfg.min_sample_magnitude:
                continue

            if i < len(ordered) - 1:
                gap_s = (ordered[i + 1].timestamp_ms - sample.timestamp_ms) / 1000.0
                duration = max(cfg.min_segment_duration, gap_s)
            else:
                duration = cfg.final_segment_duration

            segments.append(PathSegment(dx=sample.dx / mag, dy=sample.dy / mag, duration=duration))

        return segments

    def ending_angular_velocity(self, segments: Sequence[PathSegment]) -> float:
        """
        Weighted average turn rate (rad/s) across adjacent segment pairs.

        Pair i gets weight i+1, so the motion just before release dominates.
        """
        if len(segments) < max(2, self._config.min_segments_for_spin):
            return 0.0

        dx = np.array([s.dx for s in segments])
        dy = np.array([s.dy for s in segments])
        durations = np.array([s.duration for s in segments[1:]])

        deltas = np.diff(np.arctan2(dy, dx))
        # Wrap into [-pi, pi]
        deltas = np.arctan2(np.sin(deltas), np.cos(deltas))

        durations = np.where(durations > 0.001, durations, self._config.min_segment_duration)
        rates = deltas / durations
        weights = np.arange(1, len(rates) + 1, dtype=float)

        return float(np.average(rates, weights=weights))

    def plan(self, samples: Sequence[Sample]) -> PathPlan:
        """Return a fresh plan; an empty one if no sample had a usable direction."""
        segments = self.build_segments(samples)
        if not segments:
            logger.debug("Curveball plan empty (no samples with usable magnitude)")
            return PathPlan()

        spin = self.ending_angular_velocity(segments)
        logger.debug(f"Curveball plan: {len(segments)} segments, ending angular velocity {spin:.4f} rad/s")
        return PathPlan(segments=segments, ending_angular_velocity=spin)
