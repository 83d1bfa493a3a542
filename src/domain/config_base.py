"""Shared config-loading utilities for scoring systems."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, TypeVar
import tomllib


@dataclass(frozen=True)
class BaseSystemConfig:
    """Minimal metadata shared across all scoring configs."""

    name: str
    description: str | None
    file_path: Path


T = TypeVar("T", bound=BaseSystemConfig)


def load_system_config(file_path: Path, parser: Callable[[dict[str, Any], Path], T]) -> T:
    """Load and parse a single TOML config file."""
    if not file_path.is_file():
        raise FileNotFoundError(f"Config file not found: {file_path}")
    with file_path.open("rb") as file:
        raw = tomllib.load(file)
    return parser(raw, file_path)


def load_system_configs(
    config_dir: Path,
    parser: Callable[[dict[str, Any], Path], T],
    *,
    duplicate_name_label: str = "scoring",
) -> list[T]:
    """Load all TOML files in a directory with duplicate-name validation."""
    if not config_dir.exists():
        raise FileNotFoundError(f"Config directory not found: {config_dir}")
    if not config_dir.is_dir():
        raise NotADirectoryError(f"Config path is not a directory: {config_dir}")

    config_files = sorted(config_dir.glob("*.toml"))
    if not config_files:
        raise ValueError(f"No .toml config files found in: {config_dir}")

    systems = [load_system_config(file_path, parser) for file_path in config_files]

    names = [system.name for system in systems]
    if len(names) != len(set(names)):
        raise ValueError(
            f"Duplicate {duplicate_name_label} system names found in {config_dir}: {names}"
        )

    return systems


def parse_system_header(raw: dict[str, Any], file_path: Path) -> tuple[str, str | None]:
    """Read ``[system].name`` and ``[system].description``."""
    system_raw = raw.get("system", {})

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [system].name is required")

    description_value = system_raw.get("description")
    description = None if description_value is None else str(description_value)
    return name, description


__all__ = [
    "BaseSystemConfig",
    "load_system_config",
    "load_system_configs",
    "parse_system_header",
]
