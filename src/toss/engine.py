"""
Throw decision engine: turns taps, flicks and arm direction samples into
throws and catches, and drives the physics integrator every frame.
"""
import math
import time
from functools import partial
from typing import Callable, List, Optional, Tuple

from loguru import logger

from .config import Config
from .gestures import FlickClassifier, GestureDebouncer
from .history import SampleHistory
from .physics import PhysicsIntegrator
from .planner import TrajectoryPlanner
from .types import PathPlan, SimulationState, ThrowSnapshot, ThrowState, Vec2

# schedule(delay_ms, callback): fire callback once, later, on the same thread
Scheduler = Callable[[float, Callable[[], None]], None]

DEBUG_LINE_VISUAL_SCALE = 0.1


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class ThrowDecisionEngine:
    """
    Owns the Idle / Pending / Flying state machine.

    All handlers run to completion on one thread. The lookahead commit is a
    one-shot callback that cannot be revoked once scheduled, so it re-checks
    the pending flag and its token when it fires; a catch in between always
    wins over the deferred throw.
    """

    def __init__(
        self,
        config: Config,
        schedule: Scheduler,
        clock: Callable[[], float] = monotonic_ms,
        width: Optional[float] = None,
        height: Optional[float] = None,
    ):
        """
        Args:
            config: Full application config; only the throw, flick, physics
                and planner sections are read here.
            schedule: Deferred-call primitive used for the lookahead commit.
            clock: Milliseconds, monotonic. Shared by samples and taps.
            width, height: Play-area size in pixels (defaults from config.ui).
        """
        self._config = config
        self._schedule = schedule
        self._clock = clock

        self._history = SampleHistory(config.throw.max_history_age_ms)
        self._debouncer = GestureDebouncer(config.flick.debounce_ms)
        self._classifier = FlickClassifier(
            exponent=config.flick.exponent,
            quadratic_a=config.flick.quadratic_a,
            quadratic_b=config.flick.quadratic_b,
        )
        self._planner = TrajectoryPlanner(config.planner)
        self._integrator = PhysicsIntegrator(config.physics)

        self.state = SimulationState(
            width=float(width if width is not None else config.ui.width),
            height=float(height if height is not None else config.ui.height),
        )
        self.state.kinematics.position = Vec2(self.state.width / 2, self.state.height / 2)

    @property
    def config(self) -> Config:
        return self._config

    @property
    def history(self) -> SampleHistory:
        return self._history

    @property
    def throw_state(self) -> ThrowState:
        return self.state.throw_state

    # ------------------------------------------------------------------
    # Inbound sensor events
    # ------------------------------------------------------------------

    def on_arm_direction(self, dx: float, dy: float) -> bool:
        """Record a direction sample and cache it as the latest reading."""
        if not self._history.record(dx, dy, self._clock()):
            return False
        self.state.last_direction = Vec2(dx, dy)
        return True

    def on_flick_probability(self, tap_probability: float) -> bool:
        """Per-frame tap probability; acts like a tap when it clears the threshold."""
        if self._classifier.classify(tap_probability, self._config.flick.sensitivity):
            return self.on_tap()
        return False

    def on_tap(self) -> bool:
        """
        Throw or catch, subject to the shared debounce.

        Returns True if the action was accepted (not debounced or ignored).
        """
        now = self._clock()
        if not self._debouncer.try_act(now):
            return False

        if self.state.throw_pending:
            logger.debug("Tap ignored, throw already pending from lookahead")
            return False

        if self.state.thrown:
            self.catch()
            return True

        lookahead = self._config.throw.lookahead_delay_ms
        if lookahead > 0:
            self.state.throw_pending = True
            self.state.pending_tap_ms = now
            self.state.pending_token += 1
            logger.debug(f"Scheduling throw after {lookahead}ms lookahead (tap at {now:.1f})")
            self._schedule(lookahead, partial(self._on_lookahead_elapsed, self.state.pending_token))
        else:
            self.commit_throw(now)
        return True

    def catch(self):
        """Stop the cursor where it is and drop any curve or pending throw."""
        state = self.state
        state.thrown = False
        state.kinematics.velocity = Vec2(0.0, 0.0)
        state.path_plan = PathPlan()
        state.spin = 0.0
        if state.throw_pending:
            logger.debug("Catch while a throw was pending; clearing pending state")
        state.throw_pending = False
        state.pending_tap_ms = None
        logger.debug("Cursor caught")

    def _on_lookahead_elapsed(self, token: int):
        state = self.state
        if not state.throw_pending or token != state.pending_token:
            logger.debug("Lookahead elapsed for a cancelled throw; nothing to do")
            return
        tap_ms = state.pending_tap_ms
        try:
            self.commit_throw(tap_ms)
        finally:
            state.throw_pending = False
            state.pending_tap_ms = None

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    def _base_direction(self, samples) -> Optional[Vec2]:
        if samples:
            n = len(samples)
            return Vec2(sum(s.dx for s in samples) / n, sum(s.dy for s in samples) / n)
        if self.state.last_direction is not None:
            return self.state.last_direction.copy()
        return None

    def commit_throw(self, tap_ms: float) -> bool:
        """
        Finalize a throw for a tap at `tap_ms`.

        Averages the samples in [tap - throw_window, tap + lookahead], falls
        back to the latest instantaneous direction, and in curveball mode
        replaces the direction with the first planned segment.
        """
        state = self.state
        throw_cfg = self._config.throw

        if state.thrown:
            logger.debug("Already thrown (caught during lookahead?); aborting commit")
            return False

        start_ms = tap_ms - throw_cfg.throw_window_ms
        end_ms = tap_ms + throw_cfg.lookahead_delay_ms
        samples = self._history.query(start_ms, end_ms)
        logger.debug(f"Commit window {start_ms:.1f}..{end_ms:.1f}ms holds {len(samples)} samples")

        direction = self._base_direction(samples)
        if direction is None:
            logger.debug("No arm direction data, cannot throw")
            state.kinematics.velocity = Vec2(0.0, 0.0)
            return False

        plan = PathPlan()
        if throw_cfg.curveball_enabled and samples:
            plan = self._planner.plan(samples)
            if plan.segments:
                first = plan.segments[0]
                direction = Vec2(first.dx, first.dy)
            else:
                logger.debug("Curveball plan failed, using straight base direction")

        if direction.is_zero():
            logger.debug("Throw direction is zero, staying idle")
            state.kinematics.velocity = Vec2(0.0, 0.0)
            return False

        state.path_plan = plan
        state.spin = plan.ending_angular_velocity
        state.kinematics.velocity = direction * throw_cfg.throw_strength
        state.thrown = True
        logger.debug(
            f"Thrown! velocity=({state.kinematics.velocity.x:.2f}, {state.kinematics.velocity.y:.2f})"
        )
        return True

    # ------------------------------------------------------------------
    # Render loop
    # ------------------------------------------------------------------

    def tick(self, dt: float) -> ThrowSnapshot:
        """Advance the simulation by `dt` seconds and return the new snapshot."""
        if not math.isfinite(dt) or dt <= 0:
            return self.snapshot()
        self._integrator.step(self.state, dt, self._config.throw.curveball_enabled)
        return self.snapshot()

    def resize_play_area(self, width: float, height: float):
        """New play-area size; an idle cursor is re-centred."""
        self.state.width = float(width)
        self.state.height = float(height)
        if not self.state.thrown:
            self.state.kinematics.position = Vec2(self.state.width / 2, self.state.height / 2)

    def snapshot(self) -> ThrowSnapshot:
        state = self.state
        return ThrowSnapshot(
            position=state.kinematics.position.as_tuple(),
            velocity=state.kinematics.velocity.as_tuple(),
            throw_state=state.throw_state,
            spin=state.spin,
            plan_index=state.path_plan.current_index,
            plan_length=len(state.path_plan.segments),
        )

    def preview_throw_path(self, now_ms: Optional[float] = None) -> List[Tuple[float, float]]:
        """
        Polyline of where a tap right now would send the cursor.

        Chains the samples in the current throw window, each scaled down so
        the line stays on screen; falls back to the latest direction. Empty
        while flying.
        """
        if self.state.thrown:
            return []
        if now_ms is None:
            now_ms = self._clock()

        throw_cfg = self._config.throw
        start = self.state.kinematics.position
        points = [start.as_tuple()]
        strength = throw_cfg.throw_strength

        samples = self._history.query(
            now_ms - throw_cfg.throw_window_ms,
            now_ms + throw_cfg.lookahead_delay_ms,
        )
        if samples:
            scale = DEBUG_LINE_VISUAL_SCALE / (math.sqrt(len(samples)) if len(samples) > 1 else 1.0)
            x, y = start.x, start.y
            for sample in sorted(samples, key=lambda s: s.timestamp_ms):
                x += sample.dx * strength * scale
                y += sample.dy * strength * scale
                points.append((x, y))
        else:
            direction = self.state.last_direction or Vec2(0.0, 0.0)
            end = start + direction * (strength * DEBUG_LINE_VISUAL_SCALE)
            points.append(end.as_tuple())
        return points
