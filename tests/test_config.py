import pytest

from src.toss.config import Config, load_config, validate_config


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "nope.yaml")
    assert config.throw.throw_window_ms == 50
    assert config.throw.lookahead_delay_ms == 30
    assert config.throw.throw_strength == 900
    assert config.flick.sensitivity == 0.0
    assert config.physics.friction_low_speed == 6.0
    assert config.physics.boundary_padding == 50


def test_yaml_overrides_and_unknown_keys(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "throw:\n"
        "  throw_strength: 500\n"
        "  curveball_enabled: true\n"
        "  not_a_field: 3\n"
        "flick:\n"
        "  sensitivity: 0.4\n"
        "bogus_section:\n"
        "  x: 1\n"
    )
    config = load_config(path)
    assert config.throw.throw_strength == 500
    assert config.throw.curveball_enabled is True
    assert config.throw.throw_window_ms == 50
    assert config.flick.sensitivity == 0.4
    assert config.ui.fps == 60


def test_empty_yaml_is_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == Config()


@pytest.mark.parametrize("section,name,value", [
    ("throw", "throw_strength", 0),
    ("throw", "lookahead_delay_ms", -1),
    ("throw", "throw_window_ms", -5),
    ("flick", "sensitivity", 1.5),
    ("flick", "exponent", 1.0),
    ("physics", "friction_low_speed", -0.1),
    ("input", "mode", "webcam"),
])
def test_invalid_values_rejected(section, name, value):
    config = Config()
    setattr(getattr(config, section), name, value)
    with pytest.raises(ValueError, match=name):
        validate_config(config)


def test_invalid_yaml_value_rejected_on_load(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("throw:\n  throw_strength: -10\n")
    with pytest.raises(ValueError):
        load_config(path)
