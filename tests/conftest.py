"""
Pytest configuration and fixtures for fluent-http tests.
"""

import logging
import os

import pytest
import responses as responses_lib

from fluent_http import api
from fluent_http.core.client import HTTPClient
from fluent_http.core.config import ClientConfig
from fluent_http.core.logging.config import LoggingConfig
from fluent_http.core.logging.filters import clear_correlation_id


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove FLUENT_HTTP_* variables so tests do not depend on the shell."""
    for key in list(os.environ):
        if key.upper().startswith("FLUENT_HTTP_"):
            monkeypatch.delenv(key, raising=False)
    yield
    clear_correlation_id()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """HTTPLogger with a config takes over the package logger; restore it."""
    logger = logging.getLogger("fluent_http")
    yield
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def reset_default_client():
    """Shortcut functions share one builder; start every test without it."""
    api.set_default_client(None)
    yield
    api.set_default_client(None)


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def client(base_url):
    """Builder seeded with the test base URL."""
    client = HTTPClient(ClientConfig(base_url=base_url, timeout=10))
    yield client
    client.close()


@pytest.fixture
def client_no_base():
    """Builder without base URL."""
    client = HTTPClient(ClientConfig(timeout=10))
    yield client
    client.close()


@pytest.fixture
def logging_config():
    """Console logging at DEBUG."""
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=True,
        enable_file=False
    )


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig fixture with file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    log_file = tmp_path / "test.log"
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file)
    )
