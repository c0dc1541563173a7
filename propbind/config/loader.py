"""Configuration loader: optional YAML files + environment overrides.

`load_config_from_files` only reads and deep-merges YAML (base file plus an
optional environment overlay). Environment variable overrides and validation
happen in `get_config()`.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigurationError, ErrorCode
from .schemas import PropBindConfig


ENV_PREFIX = "PROPBIND"
DEFAULT_CONFIG_DIR = Path("config")
BASE_FILE_NAME = "propbind.yaml"


def _deep_merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


def _convert_env_value(value: str) -> Any:
    """Convert environment variable string to appropriate type."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    return value


def _apply_env_overrides(config_dict: dict[str, Any], prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """Apply environment variable overrides to configuration dictionary.

    Example:
      PROPBIND__RESOURCES__ENCODING=latin-1 -> config_dict["resources"]["encoding"] = "latin-1"
    """
    result = config_dict.copy()

    for env_key, env_value in os.environ.items():
        if not env_key.startswith(f"{prefix}__"):
            continue

        config_path = env_key[len(f"{prefix}__") :].lower().split("__")

        current = result
        for path_part in config_path[:-1]:
            if path_part not in current or not isinstance(current[path_part], dict):
                current[path_part] = {}
            else:
                current[path_part] = dict(current[path_part])
            current = current[path_part]

        current[config_path[-1]] = _convert_env_value(env_value)

    return result


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse config file {path}: {e}",
            operation="load_config_from_files",
            details={"file_path": str(path)},
            status_code=ErrorCode.CONFIG_LOAD_FAILED,
            cause=e,
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {path} must contain a mapping",
            operation="load_config_from_files",
            details={"file_path": str(path)},
            status_code=ErrorCode.CONFIG_LOAD_FAILED,
        )
    return data


def load_config_from_files(
    config_dir: Path | None = None, environment: str | None = None
) -> dict[str, Any]:
    """Load `propbind.yaml` and merge an optional `propbind.<environment>.yaml`.

    The default directory (`./config`) may lack the base file, in which case an
    empty dict is returned. An explicitly given directory must contain it.
    """
    explicit = config_dir is not None
    config_dir = Path(config_dir) if explicit else DEFAULT_CONFIG_DIR

    base_file = config_dir / BASE_FILE_NAME
    if not base_file.exists():
        if explicit:
            raise ConfigurationError(
                f"Base configuration file not found: {base_file}",
                operation="load_config_from_files",
                details={"file_path": str(base_file), "config_dir": str(config_dir)},
                status_code=ErrorCode.CONFIG_LOAD_FAILED,
            )
        return {}

    config = _read_yaml(base_file)

    if environment:
        env_file = config_dir / f"propbind.{environment}.yaml"
        if env_file.exists():
            config = _deep_merge_dicts(config, _read_yaml(env_file))

    return config


@lru_cache(maxsize=1)
def get_config(
    environment: str | None = None,
    config_dir: Path | None = None,
    apply_env_overrides_flag: bool = True,
) -> PropBindConfig:
    """Get validated configuration with caching.

    - Load merged file config via `load_config_from_files`
    - Apply `PROPBIND__...` environment overrides (if requested)
    - Validate and return a PropBindConfig instance
    """
    if environment is None:
        environment = os.getenv(f"{ENV_PREFIX}_ENVIRONMENT")
    if config_dir is None and os.getenv(f"{ENV_PREFIX}_CONFIG_DIR"):
        config_dir = Path(os.environ[f"{ENV_PREFIX}_CONFIG_DIR"])

    config_dict = load_config_from_files(config_dir=config_dir, environment=environment)

    if apply_env_overrides_flag:
        config_dict = _apply_env_overrides(config_dict)

    try:
        return PropBindConfig(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed: {e}",
            operation="get_config",
            details={"environment": environment},
            cause=e,
        ) from e


def reload_config() -> None:
    """Clear configuration cache to force reload on next access."""
    get_config.cache_clear()
