"""
Config loader for WristToss.
Loads YAML configuration with dataclass validation.
"""
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional
import yaml


@dataclass
class ThrowConfig:
    throw_window_ms: float = 50.0      # History span before the tap used for the direction
    lookahead_delay_ms: float = 30.0   # Extra span after the tap before committing
    throw_strength: float = 900.0      # Pixels/s per unit of arm direction
    curveball_enabled: bool = False
    max_history_age_ms: float = 200.0


@dataclass
class FlickConfig:
    sensitivity: float = 0.0   # UI value, 0 = flicks disabled, 1 = hair trigger
    exponent: float = 3.0      # Sharpens the threshold curve at high sensitivity
    quadratic_a: float = -1.8  # UI -> internal sensitivity: a*s^2 + b*s
    quadratic_b: float = 2.8
    debounce_ms: float = 100.0


@dataclass
class PhysicsConfig:
    min_throw_speed: float = 5.0             # Below this the cursor is caught by friction
    friction_low_speed: float = 6.0          # Strong deceleration near rest
    friction_high_speed: float = 1.4         # Weak deceleration at full speed
    friction_transition_speed: float = 300.0
    angular_friction: float = 0.8            # Decay rate of the residual spin
    min_angular_velocity: float = 0.02       # Spin snaps to zero below this
    boundary_padding: float = 50.0
    redirect_min_speed: float = 0.01         # Path playback leaves near-still cursors alone


@dataclass
class PlannerConfig:
    min_sample_magnitude: float = 0.001
    min_segment_duration: float = 0.02
    final_segment_duration: float = 0.2
    min_segments_for_spin: int = 2


@dataclass
class InputConfig:
    mode: str = "mouse"            # "mouse" or "controller"
    deadzone: float = 0.15
    flick_trigger_axis: bool = True  # Right trigger doubles as flick probability


@dataclass
class UIConfig:
    width: int = 1280
    height: int = 720
    fps: int = 60
    show_debug_line: bool = False
    cursor_radius: int = 10


@dataclass
class Config:
    throw: ThrowConfig = field(default_factory=ThrowConfig)
    flick: FlickConfig = field(default_factory=FlickConfig)
    physics: PhysicsConfig = field(default_factory=PhysicsConfig)
    planner: PlannerConfig = field(default_factory=PlannerConfig)
    input: InputConfig = field(default_factory=InputConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def _dict_to_dataclass(cls, data: dict):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    field_names = {f.name for f in fields(cls)}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


def validate_config(config: Config) -> Config:
    """
    Check range constraints, raising ValueError on the first bad field.

    Returns the same config so it can be chained after loading.
    """
    non_negative = {
        'throw.throw_window_ms': config.throw.throw_window_ms,
        'throw.lookahead_delay_ms': config.throw.lookahead_delay_ms,
        'throw.max_history_age_ms': config.throw.max_history_age_ms,
        'flick.debounce_ms': config.flick.debounce_ms,
        'physics.min_throw_speed': config.physics.min_throw_speed,
        'physics.friction_low_speed': config.physics.friction_low_speed,
        'physics.friction_high_speed': config.physics.friction_high_speed,
        'physics.angular_friction': config.physics.angular_friction,
        'physics.min_angular_velocity': config.physics.min_angular_velocity,
        'physics.boundary_padding': config.physics.boundary_padding,
        'planner.min_segment_duration': config.planner.min_segment_duration,
        'planner.final_segment_duration': config.planner.final_segment_duration,
    }
    for name, value in non_negative.items():
        if value < 0:
            raise ValueError(f"{name} must be >= 0, got {value}")

    if config.throw.throw_strength <= 0:
        raise ValueError(f"throw.throw_strength must be > 0, got {config.throw.throw_strength}")
    if not 0.0 <= config.flick.sensitivity <= 1.0:
        raise ValueError(f"flick.sensitivity must be within [0, 1], got {config.flick.sensitivity}")
    if config.flick.exponent <= 1.0:
        raise ValueError(f"flick.exponent must be > 1, got {config.flick.exponent}")
    if config.physics.friction_transition_speed <= config.physics.min_throw_speed:
        raise ValueError("physics.friction_transition_speed must exceed physics.min_throw_speed")
    if config.input.mode not in ("mouse", "controller"):
        raise ValueError(f"input.mode must be 'mouse' or 'controller', got {config.input.mode!r}")
    if config.ui.fps <= 0:
        raise ValueError(f"ui.fps must be > 0, got {config.ui.fps}")
    return config


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.
    
    Args:
        config_path: Path to config file. If None, uses default config.yaml
                    in project root.
    
    Returns:
        Validated Config dataclass with all settings.
    """
    if config_path is None:
        # Default to config.yaml in project root
        config_path = Path(__file__).parent.parent.parent / "config.yaml"
    
    config_path = Path(config_path)
    
    if not config_path.exists():
        # Return defaults if no config file
        return Config()
    
    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}
    
    config = Config(
        throw=_dict_to_dataclass(ThrowConfig, data.get('throw')),
        flick=_dict_to_dataclass(FlickConfig, data.get('flick')),
        physics=_dict_to_dataclass(PhysicsConfig, data.get('physics')),
        planner=_dict_to_dataclass(PlannerConfig, data.get('planner')),
        input=_dict_to_dataclass(InputConfig, data.get('input')),
        ui=_dict_to_dataclass(UIConfig, data.get('ui')),
    )
    return validate_config(config)
