import pytest

from config import (
    CONFIG_ENV_VAR,
    DifficultyConfig,
    default_config_path,
    load_config,
    make_difficulty_config,
)


def test_defaults():
    config = DifficultyConfig()
    assert config.weights == {
        "first_pass": 0.35,
        "iterations": 0.25,
        "forced": 0.25,
        "possibilities": 0.15,
    }
    assert config.thresholds == (0.15, 0.30, 0.50, 0.70)
    assert config.expected_rounds_factor == 0.5
    assert config.possibility_log_divisor == 3.0


def test_partial_weights_are_merged():
    config = DifficultyConfig(weights={"forced": 0.5})
    assert config.weights["forced"] == 0.5
    assert config.weights["first_pass"] == 0.35


@pytest.mark.parametrize(
    "kwargs",
    [
        {"weights": {"speed": 1.0}},
        {"weights": {"forced": -0.1}},
        {"thresholds": (0.3, 0.2, 0.5, 0.7)},
        {"thresholds": (0.1, 0.2)},
        {"expected_rounds_factor": 0},
        {"possibility_log_divisor": -1},
    ],
)
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        DifficultyConfig(**kwargs)


def test_load_from_yaml(tmp_path):
    path = tmp_path / "difficulty.yaml"
    path.write_text(
        "weights:\n"
        "  first_pass: 0.4\n"
        "thresholds: [0.1, 0.2, 0.4, 0.6]\n"
        "comment: ignored\n"
    )
    assert load_config(str(path))["weights"] == {"first_pass": 0.4}
    config = make_difficulty_config(str(path))
    assert config.weights["first_pass"] == 0.4
    assert config.thresholds == (0.1, 0.2, 0.4, 0.6)


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert make_difficulty_config(str(path)) == DifficultyConfig()


def test_overrides_win_over_yaml(tmp_path):
    path = tmp_path / "difficulty.yaml"
    path.write_text("expected_rounds_factor: 2.0\n")
    config = make_difficulty_config(str(path), expected_rounds_factor=1.0, bogus=3)
    assert config.expected_rounds_factor == 1.0


def test_default_config_path(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    assert default_config_path() is None
    monkeypatch.setenv(CONFIG_ENV_VAR, "/tmp/difficulty.yaml")
    assert default_config_path() == "/tmp/difficulty.yaml"
