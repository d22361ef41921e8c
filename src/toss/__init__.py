"""
WristToss Core

Gesture-to-throw decision engine and 2D cursor physics.
"""
from .config import Config, load_config, validate_config
from .types import ThrowState, ThrowSnapshot, Sample, PathPlan, PathSegment, Vec2
from .history import SampleHistory
from .gestures import GestureDebouncer, FlickClassifier
from .planner import TrajectoryPlanner
from .physics import PhysicsIntegrator
from .engine import ThrowDecisionEngine

__all__ = [
    'Config',
    'load_config',
    'validate_config',
    'ThrowState',
    'ThrowSnapshot',
    'Sample',
    'PathPlan',
    'PathSegment',
    'Vec2',
    'SampleHistory',
    'GestureDebouncer',
    'FlickClassifier',
    'TrajectoryPlanner',
    'PhysicsIntegrator',
    'ThrowDecisionEngine',
]
