"""
Per-tick physics for the flying cursor: path playback, residual spin,
speed-dependent friction, natural stop and wall clamping.
"""
from loguru import logger

from .config import PhysicsConfig
from .types import SimulationState, Vec2


class PhysicsIntegrator:
    """Advances a SimulationState by one render frame."""

    def __init__(self, config: PhysicsConfig = None):
        self._config = config or PhysicsConfig()

    def friction_coefficient(self, speed: float) -> float:
        """
        Linear blend from strong (slow) to weak (fast) deceleration.

        At or below min_throw_speed the low-speed value applies, at or above
        friction_transition_speed the high-speed value.
        """
        cfg = self._config
        if speed <= cfg.min_throw_speed:
            return cfg.friction_low_speed
        if speed >= cfg.friction_transition_speed:
            return cfg.friction_high_speed
        ratio = (speed - cfg.min_throw_speed) / (cfg.friction_transition_speed - cfg.min_throw_speed)
        return cfg.friction_low_speed + (cfg.friction_high_speed - cfg.friction_low_speed) * ratio

    def step(self, state: SimulationState, dt: float, curveball_enabled: bool = False) -> None:
        """Integrate one tick of `dt` seconds in place. No-op unless thrown."""
        if not state.thrown:
            return

        cfg = self._config
        kin = state.kinematics
        plan = state.path_plan

        kin.position = kin.position + kin.velocity * dt
        velocity = kin.velocity
        speed = velocity.magnitude()

        if curveball_enabled and not plan.exhausted:
            segment = plan.current_segment
            if speed > cfg.redirect_min_speed:
                velocity = Vec2(segment.dx * speed, segment.dy * speed)
            plan.advance(dt)
            if plan.exhausted:
                logger.debug(f"Path plan completed, handing over to spin {state.spin:.4f} rad/s")

        if curveball_enabled and plan.exhausted and speed > cfg.min_throw_speed and state.spin != 0.0:
            velocity = velocity.rotated(state.spin * dt)
            spin = state.spin * (1.0 - cfg.angular_friction * dt)
            if abs(spin) < cfg.min_angular_velocity:
                spin = 0.0
            state.spin = spin

        # A long frame must stop the cursor, never reverse it
        velocity = velocity * max(0.0, 1.0 - self.friction_coefficient(speed) * dt)

        if velocity.magnitude() < cfg.min_throw_speed:
            velocity = Vec2(0.0, 0.0)
            state.thrown = False
            logger.debug("Cursor came to rest")

        kin.velocity = velocity
        self._clamp_to_play_area(state)

    def _clamp_to_play_area(self, state: SimulationState):
        """Inelastic walls: clamp the position and kill the velocity on that axis."""
        pad = self._config.boundary_padding
        kin = state.kinematics
        pos = kin.position
        vel = kin.velocity

        max_x = max(pad, state.width - pad)
        max_y = max(pad, state.height - pad)

        if pos.x < pad:
            pos.x, vel.x = pad, 0.0
        elif pos.x > max_x:
            pos.x, vel.x = max_x, 0.0

        if pos.y < pad:
            pos.y, vel.y = pad, 0.0
        elif pos.y > max_y:
            pos.y, vel.y = max_y, 0.0
