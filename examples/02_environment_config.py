"""
Configuration from environment variables.

    FLUENT_HTTP_BASE_URL=https://httpbin.org
    FLUENT_HTTP_DEBUG=1
    FLUENT_HTTP_TIMEOUT=5
    FLUENT_HTTP_RETRIES=3
    FLUENT_HTTP_LOG_ENABLE_CONSOLE=true
    FLUENT_HTTP_LOG_LEVEL=DEBUG
"""

import os

from fluent_http import ClientConfig, HTTPClient


def from_environment():
    print("\n=== Config from environment ===")

    os.environ.setdefault("FLUENT_HTTP_BASE_URL", "https://httpbin.org")
    os.environ.setdefault("FLUENT_HTTP_RETRIES", "3")

    # Окружение читается один раз, здесь
    config = ClientConfig.from_env()
    print(f"base_url={config.base_url} timeout={config.timeout} retries={config.retries} debug={config.debug}")

    with HTTPClient(config) as client:
        response = client.path("get").query("source", "env").get()
        print(f"Status: {response.status_code}")


def from_env_file():
    print("\n=== Config from .env file ===")

    # Явные значения перекрывают окружение и .env
    config = ClientConfig.from_env(env_file=".env", timeout=2.0)
    print(f"timeout={config.timeout}")


if __name__ == "__main__":
    from_environment()
    from_env_file()
