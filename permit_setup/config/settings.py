"""
Configuration management for Permit Setup.

Builds a single immutable configuration value at process start from, in
increasing precedence: built-in defaults, an optional YAML file, and
environment variables (a nearby ``.env`` file is loaded first and never
overrides variables that are already set).

YAML string values support ``${ENV_VAR}`` and ``${ENV_VAR:default}``
substitution.
"""

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

from permit_setup.exceptions import InvalidConfigurationError, MissingCredentialError
from permit_setup.logging_config import get_logger

logger = get_logger(__name__)


DEFAULT_API_URL = "https://api.permit.io/v2"
DEFAULT_PDP_URL = "http://localhost:7766"
DEFAULT_PROJECT_ID = "default"
DEFAULT_ENV_ID = "dev"
DEFAULT_TIMEOUT_S = 30.0
DEFAULT_HEALTH_TIMEOUT_S = 5.0

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_LOG_FORMATS = ["console", "json"]

# Environment variable -> (section, field)
ENV_OVERRIDES = {
    "PERMIT_API_URL": (None, "api_url"),
    "PERMIT_PDP_URL": (None, "pdp_url"),
    "PERMIT_API_KEY": (None, "api_key"),
    "PERMIT_PROJECT_ID": (None, "project_id"),
    "PERMIT_ENV_ID": (None, "env_id"),
    "PERMIT_TIMEOUT": (None, "timeout"),
    "PERMIT_HEALTH_TIMEOUT": (None, "health_timeout"),
    "PERMIT_LOG_LEVEL": ("logging", "level"),
    "PERMIT_LOG_FILE": ("logging", "file"),
    "PERMIT_LOG_FORMAT": ("logging", "format"),
}


def _expand_env_vars(value: Any, environ: Mapping[str, str]) -> Any:
    """
    Recursively expand environment variables in configuration values.

    Supports ${ENV_VAR} syntax with optional default values: ${ENV_VAR:default}

    Args:
        value: Configuration value (string, dict, list, or other)
        environ: Environment mapping to read from

    Returns:
        Value with environment variables expanded
    """
    if isinstance(value, str):
        pattern = r'\$\{([^}:]+)(?::([^}]*))?\}'

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v, environ) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item, environ) for item in value]
    else:
        return value


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    format: str = "console"  # "console" or "json"


@dataclass(frozen=True)
class PermitConfig:
    """Connection and scope settings for the policy-administration service."""

    api_url: str = DEFAULT_API_URL
    pdp_url: str = DEFAULT_PDP_URL
    api_key: str = ""
    project_id: str = DEFAULT_PROJECT_ID
    env_id: str = DEFAULT_ENV_ID
    timeout: float = DEFAULT_TIMEOUT_S
    health_timeout: float = DEFAULT_HEALTH_TIMEOUT_S
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> None:
        """
        Check the preconditions every operation depends on.

        Raises:
            MissingCredentialError: If no API key is configured
        """
        if not self.api_key:
            raise MissingCredentialError(
                "PERMIT_API_KEY environment variable is not set.\n"
                "Please set it with: export PERMIT_API_KEY=\"your-api-key\"\n"
                "Or add it to the .env file in the project root."
            )

    def schema_path(self, *parts: str) -> str:
        """Path under ``/schema/{project}/{env}``."""
        return "/".join(["", "schema", self.project_id, self.env_id, *parts])

    def facts_path(self, *parts: str) -> str:
        """Path under ``/facts/{project}/{env}``."""
        return "/".join(["", "facts", self.project_id, self.env_id, *parts])

    def redacted(self) -> Dict[str, str]:
        """Display-safe view of the configuration."""
        if len(self.api_key) > 8:
            masked = f"{self.api_key[:4]}...{self.api_key[-4:]}"
        else:
            masked = "***" if self.api_key else "(not set)"
        return {
            "project": self.project_id,
            "environment": self.env_id,
            "api_url": self.api_url,
            "pdp_url": self.pdp_url,
            "api_key": masked,
        }


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    return os.path.expanduser("~/.permit-setup/config.yaml")


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> PermitConfig:
    """
    Load configuration from defaults, an optional YAML file and the environment.

    A missing config file is not an error; the credential is not checked
    here (see ``PermitConfig.validate``).

    Args:
        config_path: Path to a YAML configuration file. If None, the default
            path is used when it exists.
        environ: Environment mapping. If None, ``.env`` is loaded and
            ``os.environ`` is used.

    Returns:
        PermitConfig: Loaded and validated configuration

    Raises:
        InvalidConfigurationError: If the file or any value is malformed
    """
    if environ is None:
        load_dotenv(find_dotenv(usecwd=True), override=False)
        environ = os.environ

    explicit = config_path is not None
    if config_path is None:
        config_path = get_default_config_path()
    config_path = os.path.expanduser(config_path)

    file_data: Dict[str, Any] = {}
    if os.path.exists(config_path):
        file_data = _read_yaml(config_path)
    elif explicit:
        logger.info(f"Configuration file not found at {config_path}, using defaults")

    data = _expand_env_vars(file_data, environ)

    for var_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(var_name)
        if value is None or value == "":
            continue
        if section is None:
            data[key] = value
        else:
            if not isinstance(data.get(section), dict):
                data[section] = {}
            data[section][key] = value

    config = _build_config_from_dict(data)
    _validate_config(config)
    return config


def _read_yaml(config_path: str) -> Dict[str, Any]:
    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
        logger.debug(f"Loaded configuration from {config_path}")
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration file '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Failed to parse YAML configuration file '{config_path}': {e}"
        )
    except OSError as e:
        raise InvalidConfigurationError(
            f"Failed to read configuration file '{config_path}': {e}"
        )

    if config_data is None:
        return {}
    if not isinstance(config_data, dict):
        raise InvalidConfigurationError(
            f"Configuration file '{config_path}' must contain a mapping"
        )
    return config_data


def _to_float(value: Any, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(f"{name} must be a number, got {value!r}")


def _build_config_from_dict(config_data: Dict[str, Any]) -> PermitConfig:
    """
    Build PermitConfig from a merged dictionary, filling in defaults.

    Args:
        config_data: Flat connection settings plus an optional ``logging`` section

    Returns:
        PermitConfig: Configuration object
    """
    logging_data = config_data.get('logging') or {}
    logging_config = LoggingConfig(
        level=str(logging_data.get('level', LoggingConfig.level)).upper(),
        file=str(logging_data.get('file', LoggingConfig.file) or ""),
        format=str(logging_data.get('format', LoggingConfig.format)).lower(),
    )

    return PermitConfig(
        api_url=str(config_data.get('api_url') or DEFAULT_API_URL).rstrip('/'),
        pdp_url=str(config_data.get('pdp_url') or DEFAULT_PDP_URL).rstrip('/'),
        api_key=str(config_data.get('api_key') or ""),
        project_id=str(config_data.get('project_id') or DEFAULT_PROJECT_ID),
        env_id=str(config_data.get('env_id') or DEFAULT_ENV_ID),
        timeout=_to_float(config_data.get('timeout', DEFAULT_TIMEOUT_S), "timeout"),
        health_timeout=_to_float(
            config_data.get('health_timeout', DEFAULT_HEALTH_TIMEOUT_S), "health_timeout"
        ),
        logging=logging_config,
    )


def _validate_config(config: PermitConfig) -> None:
    """
    Validate configuration values.

    Args:
        config: Configuration to validate

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    if config.timeout <= 0:
        raise InvalidConfigurationError(f"timeout must be positive, got {config.timeout}")
    if config.health_timeout <= 0:
        raise InvalidConfigurationError(
            f"health_timeout must be positive, got {config.health_timeout}"
        )

    if config.logging.level not in VALID_LOG_LEVELS:
        raise InvalidConfigurationError(
            f"logging level must be one of {VALID_LOG_LEVELS}, "
            f"got '{config.logging.level}'"
        )
    if config.logging.format not in VALID_LOG_FORMATS:
        raise InvalidConfigurationError(
            f"logging format must be one of {VALID_LOG_FORMATS}, "
            f"got '{config.logging.format}'"
        )

    for name in ("api_url", "pdp_url"):
        url = getattr(config, name)
        if not url.startswith(("http://", "https://")):
            raise InvalidConfigurationError(f"{name} must be an http(s) URL, got '{url}'")
