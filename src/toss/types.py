"""
Core data types for the throw simulation.
"""
import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple


class ThrowState(Enum):
    """Lifecycle of the thrown cursor."""
    IDLE = auto()      # At rest, waiting for a tap or flick
    PENDING = auto()   # Lookahead-delayed throw scheduled, not yet committed
    FLYING = auto()    # Moving under simulated physics


@dataclass
class Vec2:
    """2D vector in play-area pixels (y grows downwards)."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __mul__(self, scalar: float) -> "Vec2":
        return Vec2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> "Vec2":
        return self.__mul__(scalar)

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def is_zero(self) -> bool:
        return self.x == 0.0 and self.y == 0.0

    def rotated(self, angle: float) -> "Vec2":
        """Rotate counter-clockwise (in math convention) by `angle` radians."""
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        return Vec2(self.x * cos_a - self.y * sin_a, self.x * sin_a + self.y * cos_a)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def copy(self) -> "Vec2":
        return Vec2(self.x, self.y)


@dataclass(frozen=True)
class Sample:
    """One timestamped arm direction reading."""
    dx: float
    dy: float
    timestamp_ms: float


@dataclass
class Kinematics:
    position: Vec2 = field(default_factory=Vec2)
    velocity: Vec2 = field(default_factory=Vec2)

    def speed(self) -> float:
        return self.velocity.magnitude()


@dataclass(frozen=True)
class PathSegment:
    """Unit direction replayed for `duration` seconds of flight."""
    dx: float
    dy: float
    duration: float


@dataclass
class PathPlan:
    """
    Curved flight path built at commit time.

    Segments are consumed strictly forward; once `current_index` walks past
    the last segment the plan is exhausted and only the residual spin
    (`ending_angular_velocity`) keeps bending the flight.
    """
    segments: List[PathSegment] = field(default_factory=list)
    current_index: int = 0
    active_time_in_segment: float = 0.0
    ending_angular_velocity: float = 0.0

    @property
    def exhausted(self) -> bool:
        return self.current_index >= len(self.segments)

    @property
    def current_segment(self) -> Optional[PathSegment]:
        if self.exhausted:
            return None
        return self.segments[self.current_index]

    def advance(self, dt: float) -> None:
        """Spend `dt` seconds in the current segment, moving on when it is used up."""
        segment = self.current_segment
        if segment is None:
            return
        self.active_time_in_segment += dt
        if self.active_time_in_segment >= segment.duration:
            self.current_index += 1
            self.active_time_in_segment = 0.0


@dataclass
class SimulationState:
    """
    Everything the simulation mutates, in one place.

    `thrown` and `throw_pending` are tracked separately so a catch can clear
    a pending commit while the deferred callback is still queued.
    """
    kinematics: Kinematics = field(default_factory=Kinematics)
    thrown: bool = False
    throw_pending: bool = False
    pending_tap_ms: Optional[float] = None
    pending_token: int = 0
    path_plan: PathPlan = field(default_factory=PathPlan)
    spin: float = 0.0  # Continuing angular velocity (rad/s) after the plan ends
    last_direction: Optional[Vec2] = None
    width: float = 1280.0
    height: float = 720.0

    @property
    def throw_state(self) -> ThrowState:
        if self.thrown:
            return ThrowState.FLYING
        if self.throw_pending:
            return ThrowState.PENDING
        return ThrowState.IDLE


@dataclass(frozen=True)
class ThrowSnapshot:
    """Read-only view handed to the renderer after every event or tick."""
    position: Tuple[float, float]
    velocity: Tuple[float, float]
    throw_state: ThrowState
    spin: float = 0.0
    plan_index: int = 0
    plan_length: int = 0

    @property
    def speed(self) -> float:
        return math.hypot(*self.velocity)
