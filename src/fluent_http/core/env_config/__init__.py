"""
Environment configuration for fluent-http.

Load client defaults from FLUENT_HTTP_* environment variables and .env files.

Example:
    >>> from fluent_http.core.env_config import load_from_env
    >>>
    >>> config = load_from_env()
    >>> config = load_from_env(env_file=".env.local", retries=3)
"""

from .loader import load_from_env
from .validator import ClientSettings

__all__ = [
    "load_from_env",
    "ClientSettings",
]
