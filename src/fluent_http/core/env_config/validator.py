"""
Pydantic validators for environment configuration.

Provides the validated settings model read from FLUENT_HTTP_* variables.
"""

from typing import Any, Optional, Literal
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """
    Client defaults from environment variables.

    Reads from:
    1. Environment variables (FLUENT_HTTP_*)
    2. .env file (only when passed explicitly)
    3. Defaults

    Example .env file:
        FLUENT_HTTP_BASE_URL=https://api.example.com
        FLUENT_HTTP_DEBUG=1
        FLUENT_HTTP_TIMEOUT=10
        FLUENT_HTTP_RETRIES=3
        FLUENT_HTTP_LOG_LEVEL=DEBUG
        FLUENT_HTTP_LOG_ENABLE_CONSOLE=true

    Usage:
        >>> settings = ClientSettings()
        >>> print(settings.debug)
        False
    """

    model_config = SettingsConfigDict(
        env_prefix='FLUENT_HTTP_',
        env_file=None,
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    base_url: str = Field(default="", description="Base URL for all requests")
    debug: bool = Field(default=False, description="Dump requests and responses to the log")
    timeout: float = Field(default=3.0, ge=0, description="Per-attempt timeout in seconds, 0 = none")
    tls_handshake_timeout: Optional[float] = Field(default=None, gt=0)
    retries: int = Field(default=0, ge=0, description="Attempts on transport errors")
    proxy: Optional[str] = Field(default=None, description="Proxy URL")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text", "colored"] = Field(default="text")
    log_enable_console: bool = Field(default=False)
    log_enable_file: bool = Field(default=False)
    log_file_path: Optional[str] = None
    log_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    log_backup_count: int = Field(default=5, ge=0)
    log_enable_correlation_id: bool = Field(default=True)

    @field_validator('debug', mode='before')
    @classmethod
    def parse_debug_toggle(cls, v: Any) -> bool:
        """"1" or "true" turns debug on; any other value turns it off."""
        if isinstance(v, bool):
            return v
        return str(v).strip().lower() in ("1", "true")

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        """Accept lowercase level names."""
        return v.upper() if isinstance(v, str) else v

    @field_validator('log_file_path')
    @classmethod
    def validate_file_path(cls, v: Optional[str], info) -> Optional[str]:
        """Validate file_path is required when log_enable_file=True."""
        if info.data.get('log_enable_file') and not v:
            raise ValueError("log_file_path is required when log_enable_file=True")
        return v

    @property
    def logging_enabled(self) -> bool:
        """Whether any log handler was requested."""
        return self.log_enable_console or self.log_enable_file
