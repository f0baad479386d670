"""Configuration loading from files and environment.

Supports:
- TOML config files, with optional [profiles.<name>] sections
- Environment variables (SMLT_* prefix) and .env files
- ${VAR} / ${VAR:-default} placeholders in connection locations and
  credentials, so read passwords stay out of the config file
"""

import os
import re
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from smlt.config.schema import AppConfig
from smlt.errors import ConfigError
from smlt.observability.logging import get_logger

logger = get_logger(__name__)

CONFIG_PATH_ENV = "SMLT_CONFIG"

# Connection keys that may reference the environment
PLACEHOLDER_FIELDS = ("base_uri", "host", "core", "username", "password")

_PLACEHOLDER = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}")


def expand_placeholders(value: str, where: str) -> str:
    """Replace ``${VAR}`` and ``${VAR:-default}`` in ``value``.

    Args:
        value: Raw config value
        where: Location used in the error message, e.g. "connections[0].password"

    Raises:
        ConfigError: If a variable without default is not set
    """

    def replace(match: re.Match) -> str:
        name = match.group("name")
        resolved = os.getenv(name)
        if resolved is not None:
            return resolved
        if match.group("default") is not None:
            return match.group("default")
        raise ConfigError(message=f"Environment variable {name} referenced by {where} is not set")

    return _PLACEHOLDER.sub(replace, value)


def _expand_connections(connections: Any) -> Any:
    if not isinstance(connections, list):
        return connections

    expanded = []
    for index, connection in enumerate(connections):
        if isinstance(connection, dict):
            connection = dict(connection)
            for key in PLACEHOLDER_FIELDS:
                if isinstance(connection.get(key), str):
                    connection[key] = expand_placeholders(connection[key], f"connections[{index}].{key}")
        expanded.append(connection)
    return expanded


def _apply_profile(data: dict[str, Any], profile: str, config_path: Path) -> dict[str, Any]:
    profiles = data.pop("profiles", {})
    if profile not in profiles:
        logger.warning("profile_not_found", profile=profile, path=str(config_path))
        return data

    logger.info("applied_profile", profile=profile)
    # Whole sections are replaced, not merged key by key
    return {**data, **profiles[profile]}


def _read_toml(config_path: Path) -> dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(message=f"Invalid TOML in {config_path}: {e}", original_error=e)

    logger.info("loaded_config_file", path=str(config_path))
    return data


def load_config(
    config_path: Optional[Path] = None,
    profile: Optional[str] = None,
    env_file: Optional[Path] = None,
) -> AppConfig:
    """Load application configuration.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (profile section overrides the base)
    3. Defaults

    Args:
        config_path: Path to TOML config file; a missing file means defaults
        profile: Config profile to use (e.g., "staging")
        env_file: Path to .env file, loaded before placeholders are expanded

    Returns:
        Loaded and validated configuration

    Raises:
        ConfigError: If the file cannot be parsed, references an unset
            variable or fails validation
    """
    if env_file and env_file.exists():
        load_dotenv(env_file)
        logger.info("loaded_env_file", path=str(env_file))

    config_data: dict[str, Any] = {}
    if config_path and config_path.exists():
        config_data = _read_toml(config_path)
        if profile:
            config_data = _apply_profile(config_data, profile, config_path)
        config_data.pop("profiles", None)

        if "connections" in config_data:
            config_data["connections"] = _expand_connections(config_data["connections"])

    try:
        config = AppConfig(**config_data)
    except ValidationError as e:
        raise ConfigError(message=f"Invalid configuration: {e}", original_error=e)

    logger.info(
        "config_loaded",
        log_level=config.logging.level,
        resolver=config.resolver.resolver_type,
        connection_count=len(config.connections),
    )

    return config


def get_default_config_path() -> Path:
    """Pick the config file to use when none is given.

    ``$SMLT_CONFIG`` wins when set. Otherwise the first existing file of
    ./smlt.toml, ~/.smlt/config.toml and /etc/smlt/config.toml, falling
    back to ./smlt.toml (which then loads as defaults).
    """
    explicit = os.getenv(CONFIG_PATH_ENV)
    if explicit:
        return Path(explicit).expanduser()

    candidates = (
        Path.cwd() / "smlt.toml",
        Path.home() / ".smlt" / "config.toml",
        Path("/etc/smlt/config.toml"),
    )
    return next((path for path in candidates if path.exists()), candidates[0])
