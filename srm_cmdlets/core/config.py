"""
SRM Cmdlets - Configuration Management

This module manages configuration options for SRM Cmdlets operations.
"""

from dataclasses import dataclass, fields
from typing import Optional

import yaml

from srm_cmdlets.core.exceptions import ValidationError

# Version for usage tracking
VERSION = '1.0.0'

OUTPUT_FORMATS = ('json', 'yaml', 'table', 'csv')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class SrmConfig:
    """
    Configuration for SRM operations.

    This stores all options that can be customized for a command.
    Makes it easy to pass configuration around without many parameters.

    Example:
        config = SrmConfig(
            task_timeout=1800,
            confirm=False
        )
    """

    # Task settings
    task_poll_interval: float = 1.0  # Seconds between IsComplete() checks
    task_timeout: Optional[float] = None  # None waits until the task completes

    # Behavior settings
    confirm: bool = True  # Ask before starting or stopping a recovery plan
    show_progress: bool = True

    # Logging settings
    log_level: str = 'INFO'
    log_file: Optional[str] = None

    # Output settings
    output_format: str = 'table'

    # Binding settings (module:callable returning an SRM service instance)
    connector: Optional[str] = None


# Default configuration
DEFAULT_CONFIG = SrmConfig()


def create_config(**kwargs) -> SrmConfig:
    """
    Create a configuration with custom options.

    Args:
        **kwargs: Configuration options (any field from SrmConfig)

    Returns:
        SrmConfig: Validated configuration object

    Example:
        config = create_config(
            task_timeout=600,
            log_level='DEBUG'
        )
    """
    known = {f.name for f in fields(SrmConfig)}
    unknown = sorted(set(kwargs) - known)
    if unknown:
        raise ValidationError(
            "Configuration",
            f"Unknown option(s): {', '.join(unknown)}",
            fix=f"Valid options: {', '.join(sorted(known))}"
        )

    config = SrmConfig(**kwargs)
    validate_config(config)
    return config


def validate_config(config: SrmConfig):
    """Raise ValidationError if any option has an unusable value."""

    if config.task_poll_interval is None or config.task_poll_interval < 0:
        raise ValidationError("Configuration", "task_poll_interval must be zero or positive")

    if config.task_timeout is not None and config.task_timeout <= 0:
        raise ValidationError(
            "Configuration",
            "task_timeout must be positive",
            fix="Leave task_timeout unset to wait without a deadline"
        )

    if config.log_level.upper() not in LOG_LEVELS:
        raise ValidationError(
            "Configuration",
            f"Invalid log_level: {config.log_level}",
            fix=f"Use one of: {', '.join(LOG_LEVELS)}"
        )

    if config.output_format not in OUTPUT_FORMATS:
        raise ValidationError(
            "Configuration",
            f"Invalid output_format: {config.output_format}",
            fix=f"Use one of: {', '.join(OUTPUT_FORMATS)}"
        )

    if config.connector is not None and ':' not in config.connector:
        raise ValidationError(
            "Configuration",
            f"Invalid connector: {config.connector}",
            fix="Use the form 'package.module:callable'"
        )


def load_config(path: str) -> SrmConfig:
    """
    Load a configuration from a YAML file.

    The file holds a mapping of SrmConfig fields, e.g.:

        task_timeout: 1800
        confirm: false
        connector: my_bindings.srm:connect

    Args:
        path: Path to the YAML file

    Returns:
        SrmConfig: Configuration object

    Raises:
        ValidationError: If the file cannot be read or holds invalid options
    """
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ValidationError("Configuration", f"Cannot read config file {path}: {e}")
    except yaml.YAMLError as e:
        raise ValidationError("Configuration", f"Invalid YAML in {path}: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError(
            "Configuration",
            f"Config file {path} must contain a mapping, got {type(data).__name__}"
        )

    return create_config(**data)
