"""Load scoring system definitions from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from domain.config_base import (
    BaseSystemConfig,
    load_system_config,
    load_system_configs,
    parse_system_header,
)
from domain.ratings.calculator import ScoringParameters

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parents[3] / "configs" / "scoring"


@dataclass(frozen=True)
class ScoringSystemConfig(BaseSystemConfig):
    """Configuration for one scoring system."""

    parameters: ScoringParameters


def load_scoring_configs(config_dir: Path = DEFAULT_CONFIG_DIR) -> list[ScoringSystemConfig]:
    """Load and validate all scoring TOML config files in a directory."""
    return load_system_configs(
        config_dir,
        _parse_scoring_system_config,
        duplicate_name_label="scoring",
    )


def load_scoring_config(file_path: Path) -> ScoringSystemConfig:
    """Load and validate one scoring TOML config file."""
    return load_system_config(file_path, _parse_scoring_system_config)


def select_scoring_parameters(
    *,
    config_file: Path | None = None,
    system_name: str | None = None,
    config_dir: Path = DEFAULT_CONFIG_DIR,
) -> ScoringParameters:
    """Resolve the parameters every ledger and stats reader should share.

    ``config_file`` wins over ``system_name``; with neither, the built-in
    defaults are used. A name is looked up among the systems in ``config_dir``.
    """
    if config_file is not None:
        system = load_scoring_config(config_file)
        if system_name is not None and system.name != system_name:
            raise ValueError(
                f"{config_file}: [system].name is {system.name!r}, expected {system_name!r}"
            )
        return system.parameters

    if system_name is None:
        return ScoringParameters()

    systems = load_scoring_configs(config_dir)
    for system in systems:
        if system.name == system_name:
            return system.parameters
    raise ValueError(
        f"No scoring system named {system_name!r} in {config_dir}; "
        f"available: {[system.name for system in systems]}"
    )


def _parse_scoring_system_config(raw: dict[str, Any], file_path: Path) -> ScoringSystemConfig:
    name, description = parse_system_header(raw, file_path)
    scoring_raw = raw.get("scoring", {})
    multipliers_raw = raw.get("multipliers", {})
    defaults = ScoringParameters()

    parameters = ScoringParameters(
        initial_rating=float(scoring_raw.get("initial_rating", defaults.initial_rating)),
        rating_floor=float(scoring_raw.get("rating_floor", defaults.rating_floor)),
        min_manual_rating=float(scoring_raw.get("min_manual_rating", defaults.min_manual_rating)),
        base_points=float(scoring_raw.get("base_points", defaults.base_points)),
        rating_gap_divisor=float(scoring_raw.get("rating_gap_divisor", defaults.rating_gap_divisor)),
        min_points=float(scoring_raw.get("min_points", defaults.min_points)),
        max_points=float(scoring_raw.get("max_points", defaults.max_points)),
        shutout_margin=int(multipliers_raw.get("shutout_margin", defaults.shutout_margin)),
        shutout_multiplier=float(
            multipliers_raw.get("shutout_multiplier", defaults.shutout_multiplier)
        ),
        dominant_margin=int(multipliers_raw.get("dominant_margin", defaults.dominant_margin)),
        dominant_multiplier=float(
            multipliers_raw.get("dominant_multiplier", defaults.dominant_multiplier)
        ),
        narrow_margin=int(multipliers_raw.get("narrow_margin", defaults.narrow_margin)),
        narrow_multiplier=float(
            multipliers_raw.get("narrow_multiplier", defaults.narrow_multiplier)
        ),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)

    return ScoringSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=parameters,
    )


def _validate_parameters(*, file_path: Path, parameters: ScoringParameters) -> None:
    if parameters.initial_rating < 0.0:
        raise ValueError(f"{file_path}: [scoring].initial_rating must be >= 0")
    if parameters.rating_floor < 0.0:
        raise ValueError(f"{file_path}: [scoring].rating_floor must be >= 0")
    if parameters.initial_rating < parameters.rating_floor:
        raise ValueError(f"{file_path}: [scoring].initial_rating must be >= rating_floor")
    if parameters.min_manual_rating < parameters.rating_floor:
        raise ValueError(f"{file_path}: [scoring].min_manual_rating must be >= rating_floor")
    if parameters.rating_gap_divisor <= 0.0:
        raise ValueError(f"{file_path}: [scoring].rating_gap_divisor must be > 0")
    if parameters.min_points <= 0.0:
        raise ValueError(f"{file_path}: [scoring].min_points must be > 0")
    if parameters.max_points < parameters.min_points:
        raise ValueError(f"{file_path}: [scoring].max_points must be >= min_points")
    if parameters.shutout_margin <= 0:
        raise ValueError(f"{file_path}: [multipliers].shutout_margin must be > 0")
    if parameters.dominant_margin <= parameters.narrow_margin:
        raise ValueError(f"{file_path}: [multipliers].dominant_margin must be > narrow_margin")
    if parameters.narrow_margin < 1:
        raise ValueError(f"{file_path}: [multipliers].narrow_margin must be >= 1")
    for field_name in ("shutout_multiplier", "dominant_multiplier", "narrow_multiplier"):
        if getattr(parameters, field_name) <= 0.0:
            raise ValueError(f"{file_path}: [multipliers].{field_name} must be > 0")
