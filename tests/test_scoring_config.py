"""Tests for TOML-based scoring config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from domain.ratings.calculator import ScoringParameters
from domain.ratings.config import (
    DEFAULT_CONFIG_DIR,
    load_scoring_config,
    load_scoring_configs,
    select_scoring_parameters,
)


def test_load_scoring_configs_from_directory(tmp_path: Path) -> None:
    config_path = tmp_path / "league.toml"
    config_path.write_text(
        """
[system]
name = "league"
description = "Stricter league scoring"

[scoring]
initial_rating = 1200.0
base_points = 40.0
rating_gap_divisor = 25.0

[multipliers]
shutout_multiplier = 1.5
""".strip()
    )

    configs = load_scoring_configs(tmp_path)
    assert len(configs) == 1

    system = configs[0]
    assert system.name == "league"
    assert system.description == "Stricter league scoring"
    assert system.parameters.initial_rating == pytest.approx(1200.0)
    assert system.parameters.base_points == pytest.approx(40.0)
    assert system.parameters.rating_gap_divisor == pytest.approx(25.0)
    assert system.parameters.shutout_multiplier == pytest.approx(1.5)
    assert system.parameters.narrow_multiplier == pytest.approx(0.9)


def test_shipped_default_config_matches_builtin_parameters() -> None:
    configs = load_scoring_configs(DEFAULT_CONFIG_DIR)
    names = [config.name for config in configs]
    assert "babyfoot_default" in names

    default = next(config for config in configs if config.name == "babyfoot_default")
    assert default.parameters.initial_rating == pytest.approx(1000.0)
    assert default.parameters.shutout_margin == 10
    assert default.parameters.dominant_margin == 8
    assert default.parameters.narrow_margin == 2


def test_duplicate_system_names_raise(tmp_path: Path) -> None:
    for file_name in ("a.toml", "b.toml"):
        (tmp_path / file_name).write_text('[system]\nname = "same"\n')

    with pytest.raises(ValueError, match="Duplicate scoring system names"):
        load_scoring_configs(tmp_path)


def test_missing_system_name_raises(tmp_path: Path) -> None:
    config_path = tmp_path / "nameless.toml"
    config_path.write_text("[scoring]\nbase_points = 50.0\n")

    with pytest.raises(ValueError, match=r"\[system\]\.name is required"):
        load_scoring_config(config_path)


def test_missing_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_scoring_config(tmp_path / "missing.toml")


def test_empty_config_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="No .toml config files"):
        load_scoring_configs(tmp_path)


@pytest.mark.parametrize(
    ("section", "body", "message"),
    [
        ("scoring", "rating_gap_divisor = 0.0", "rating_gap_divisor must be > 0"),
        ("scoring", "min_points = 60.0\nmax_points = 50.0", "max_points must be >= min_points"),
        ("scoring", "initial_rating = -1.0", "initial_rating must be >= 0"),
        ("multipliers", "dominant_margin = 2", "dominant_margin must be > narrow_margin"),
        ("multipliers", "narrow_multiplier = 0.0", "narrow_multiplier must be > 0"),
    ],
)
def test_invalid_parameters_raise(tmp_path: Path, section: str, body: str, message: str) -> None:
    config_path = tmp_path / "invalid.toml"
    config_path.write_text(f'[system]\nname = "invalid"\n\n[{section}]\n{body}\n')

    with pytest.raises(ValueError, match=message):
        load_scoring_config(config_path)


def _write_system(config_dir: Path, file_name: str, name: str, initial_rating: float) -> Path:
    config_path = config_dir / file_name
    config_path.write_text(
        f'[system]\nname = "{name}"\n\n[scoring]\ninitial_rating = {initial_rating}\n'
    )
    return config_path


def test_select_parameters_defaults_without_file_or_name() -> None:
    assert select_scoring_parameters() == ScoringParameters()


def test_select_parameters_from_file(tmp_path: Path) -> None:
    config_path = _write_system(tmp_path, "league.toml", "league", 1200.0)

    params = select_scoring_parameters(config_file=config_path)
    assert params.initial_rating == pytest.approx(1200.0)


def test_select_parameters_by_system_name(tmp_path: Path) -> None:
    _write_system(tmp_path, "a.toml", "casual", 1000.0)
    _write_system(tmp_path, "b.toml", "league", 1500.0)

    params = select_scoring_parameters(system_name="league", config_dir=tmp_path)
    assert params.initial_rating == pytest.approx(1500.0)


def test_select_parameters_finds_shipped_default_by_name() -> None:
    params = select_scoring_parameters(system_name="babyfoot_default")
    assert params == ScoringParameters()


def test_select_parameters_rejects_unknown_system_name(tmp_path: Path) -> None:
    _write_system(tmp_path, "a.toml", "casual", 1000.0)

    with pytest.raises(ValueError, match="No scoring system named 'league'"):
        select_scoring_parameters(system_name="league", config_dir=tmp_path)


def test_select_parameters_rejects_file_with_other_name(tmp_path: Path) -> None:
    config_path = _write_system(tmp_path, "casual.toml", "casual", 1000.0)

    with pytest.raises(ValueError, match="expected 'league'"):
        select_scoring_parameters(config_file=config_path, system_name="league")
