"""
Configuration loader from environment variables and .env files.

Main entry point for loading ClientConfig.
"""

from dataclasses import replace
from typing import Optional

from pydantic import ValidationError

from ..config import ClientConfig
from ..exceptions import InvalidConfigurationError
from ..logging.config import LoggingConfig, LogLevel, LogFormat
from .validator import ClientSettings


def load_from_env(
    env_file: Optional[str] = None,
    **overrides
) -> ClientConfig:
    """
    Load ClientConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters
    2. Environment variables (FLUENT_HTTP_*)
    3. .env file (if given)
    4. Defaults

    Args:
        env_file: Custom .env file path
        **overrides: Explicit config overrides (ClientConfig field names)

    Returns:
        ClientConfig instance

    Raises:
        InvalidConfigurationError: If an environment value fails validation

    Example:
        >>> # FLUENT_HTTP_DEBUG=1
        >>> config = load_from_env()
        >>> config.debug
        True

        >>> config = load_from_env(timeout=10)
    """
    try:
        settings = ClientSettings(_env_file=env_file)
    except ValidationError as e:
        raise InvalidConfigurationError(f"Invalid environment configuration: {e}") from e

    debug = overrides.get('debug', settings.debug)

    # Build logging config (if enabled)
    logging_config = None
    if settings.logging_enabled:
        logging_config = LoggingConfig(
            level=LogLevel(settings.log_level),
            format=LogFormat(settings.log_format),
            enable_console=settings.log_enable_console,
            enable_file=settings.log_enable_file,
            file_path=settings.log_file_path,
            max_bytes=settings.log_max_bytes,
            backup_count=settings.log_backup_count,
            enable_correlation_id=settings.log_enable_correlation_id,
        )
    elif debug:
        # FLUENT_HTTP_DEBUG alone prints the dumps to the console
        logging_config = LoggingConfig(level=LogLevel.DEBUG, enable_console=True)

    # Dumps are DEBUG records
    if debug and logging_config.level != LogLevel.DEBUG:
        logging_config = replace(logging_config, level=LogLevel.DEBUG)

    return ClientConfig(
        base_url=overrides.get('base_url', settings.base_url or None),
        timeout=overrides.get('timeout', settings.timeout),
        tls_handshake_timeout=overrides.get('tls_handshake_timeout', settings.tls_handshake_timeout),
        retries=overrides.get('retries', settings.retries),
        proxy=overrides.get('proxy', settings.proxy),
        debug=debug,
        headers=overrides.get('headers', {}),
        logging=overrides.get('logging', logging_config),
    )
