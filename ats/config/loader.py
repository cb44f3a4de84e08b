"""Loads application settings from YAML and credentials from the environment."""

from pathlib import Path
from typing import Any, List, Optional

import yaml
from pydantic import ValidationError

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import AppConfig
from .validators import check_for_warnings, emit_warnings

DEFAULT_CONFIG_LOCATIONS = (
    Path("config.yaml"),
    Path("config") / "config.yaml",
)

_LAYOUT_HINT = "Compare your file with config.example.yaml"


def load_config(config_path: Optional[Path] = None) -> tuple[AppConfig, EnvironmentConfig]:
    """
    Load both configuration layers.

    The YAML file is looked up as follows:
    1. ``config_path`` when given (it must exist)
    2. ``config.yaml`` in the working directory
    3. ``config/config.yaml``
    4. Built-in defaults when neither file exists

    Args:
        config_path: Optional explicit path to the YAML file

    Returns:
        Tuple of (AppConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: On unreadable or invalid YAML, a missing explicit
            file, or malformed environment values
    """
    return load_app_config(config_path), load_environment_config()


def load_app_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load the YAML application settings, or defaults when no file is found."""
    config_file = _find_config_file(config_path)
    if config_file is None:
        return AppConfig()

    raw = _read_yaml(config_file)
    # Empty file: all defaults
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"{config_file} must contain a mapping of sections at the top level",
            suggestions=[_LAYOUT_HINT],
        )

    warnings = check_for_warnings(raw)
    if warnings:
        emit_warnings(warnings)

    try:
        return AppConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid settings in {config_file}",
            errors=_describe_validation_errors(e),
            suggestions=[_LAYOUT_HINT, "Check that each value has the expected type"],
        ) from e


def _read_yaml(config_file: Path) -> Any:
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Could not parse {config_file} as YAML: {e}",
            suggestions=["Indent with spaces, not tabs", "Quote values containing ':'"],
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Could not read {config_file}: {e}",
            suggestions=[f"Check the permissions of {config_file}"],
        ) from e


def _describe_validation_errors(exc: ValidationError) -> List[str]:
    described = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "<root>"
        if error["type"].endswith(("_parsing", "_type")):
            described.append(f"{field}: {error['msg']} (got {error.get('input')!r})")
        else:
            described.append(f"{field}: {error['msg']}")
    return described


def _find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """
    Resolve which YAML file to load.

    Returns:
        Path to the file, or None when no default location exists

    Raises:
        ConfigurationError: If an explicit path was given and does not exist
    """
    if config_path:
        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                suggestions=["Omit --config to fall back to config.yaml or built-in defaults"],
            )
        return config_path

    return next((path for path in DEFAULT_CONFIG_LOCATIONS if path.exists()), None)
