"""
Configuration management for the cloudstore package.

This module handles loading configuration from YAML files and environment
variables, and turning the ``logging`` section into handlers.
"""

import logging
import os
from typing import Any, Optional

import yaml

from cloudstore.exceptions import ConfigurationError
from cloudstore.logtools import Blacklist, LogInfo
from cloudstore.validators import validate_logging

# Environment variable prefix for cloudstore configuration
ENV_PREFIX = "CLOUDSTORE_"

# Mapping of environment variables to config paths
# Format: ENV_VAR_NAME -> (config_section, config_key)
ENV_MAPPING = {
    # Storage
    "CLOUDSTORE_PROVIDER": ("storage", "provider"),
    "CLOUDSTORE_CONTAINER": ("storage", "container"),
    "CLOUDSTORE_KEY": ("storage", "key"),
    "CLOUDSTORE_KEY_ID": ("storage", "key_id"),
    "CLOUDSTORE_REGION": ("storage", "region"),
    "CLOUDSTORE_ENDPOINT": ("storage", "endpoint"),
    "CLOUDSTORE_ENDPOINT_URI": ("storage", "endpoint_uri"),
    "CLOUDSTORE_MAX_WORKERS": ("storage", "max_workers"),
    # Logging
    "CLOUDSTORE_LOG_LEVEL": ("logging", "loglevel"),
    "CLOUDSTORE_LOG_FILE": ("logging", "logfile"),
    "CLOUDSTORE_LOG_FORMAT": ("logging", "logformat"),
}


def _deep_set(config: dict, path: tuple, value) -> None:
    """
    Set a value in a nested dictionary using a path tuple.

    Args:
        config: The dictionary to modify
        path: Tuple of keys representing the path (e.g., ("storage", "container"))
        value: The value to set
    """
    current = config
    for key in path[:-1]:
        if not isinstance(current.get(key), dict):
            current[key] = {}
        current = current[key]
    current[path[-1]] = value


def _parse_env_value(value: str, key: str) -> Any:
    """
    Parse an environment variable value, converting types as needed.

    Args:
        value: The string value from the environment
        key: The config key name (used to determine type)

    Returns:
        The parsed value with appropriate type
    """
    if key == "max_workers":
        try:
            return int(value)
        except ValueError:
            return value
    return value


def load_config(config_path: Optional[str] = None) -> dict:
    """
    Load configuration from a YAML file and environment variables.

    Environment variables take precedence over file configuration.

    ```yaml
    storage:
      provider: amazon
      container: my-bucket
      key: SECRET
      key_id: AKIA...
      region: eu-west-1
      headers:
        x-amz-acl: public-read

    logging:
      loglevel: INFO
      logfile: /path/to/log
      logformat: default
    ```

    Args:
        config_path: Optional path to YAML configuration file.
                     If not provided, only environment variables are used.

    Returns:
        dict: Merged configuration dictionary

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    loggit = logging.getLogger("cloudstore.config")
    config = {}

    if config_path:
        loggit.debug("Loading configuration from: %s", config_path)
        try:
            with open(config_path) as f:
                file_config = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Configuration file not found: {config_path}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Error reading configuration file: {e}") from e

        if not file_config:
            loggit.warning("Configuration file is empty: %s", config_path)
        elif not isinstance(file_config, dict):
            raise ConfigurationError(
                f"Configuration file must hold a mapping: {config_path}"
            )
        else:
            config = file_config

    for env_var, config_path_tuple in ENV_MAPPING.items():
        value = os.environ.get(env_var)
        if value is not None:
            loggit.debug("Applying environment override: %s", env_var)
            parsed_value = _parse_env_value(value, config_path_tuple[-1])
            _deep_set(config, config_path_tuple, parsed_value)

    return config


def get_storage_config(config: dict) -> dict:
    """
    Extract the storage configuration from the full config.

    Args:
        config: Full configuration dictionary

    Returns:
        dict: A copy of the ``storage`` section

    Raises:
        ConfigurationError: If no storage configuration is found
    """
    storage_config = config.get("storage")
    if not storage_config:
        raise ConfigurationError(
            "No storage configuration found. "
            "Configuration must include a 'storage' section with container and credentials."
        )
    if not isinstance(storage_config, dict):
        raise ConfigurationError("The 'storage' section must be a mapping")
    return dict(storage_config)


def get_logging_config(config: dict) -> dict:
    """
    Extract the logging configuration from the full config.

    Args:
        config: Full configuration dictionary

    Returns:
        dict: Logging configuration with defaults applied
    """
    return validate_logging(config.get("logging") or {})


def configure_logging(config: dict) -> None:
    """
    Configure logging based on the configuration.

    Args:
        config: Full configuration dictionary (will extract logging section)
    """
    log_config = get_logging_config(config)
    loginfo = LogInfo(log_config)

    root = logging.getLogger()
    root.setLevel(loginfo.numeric_log_level)
    root.handlers = [loginfo.handler]

    blacklist = log_config.get("blacklist") or []
    if loginfo.numeric_log_level > logging.DEBUG and blacklist:
        loginfo.handler.addFilter(Blacklist(*blacklist))
