"""
Retries, timeouts and debug dumps.
"""

from fluent_http import ClientConfig, HTTPClient, LoggingConfig, TransportError


def retry_on_transport_error():
    """Unreachable host: every attempt fails, the last error is raised."""
    print("\n=== Retries ===")

    client = HTTPClient(ClientConfig()).url("http://127.0.0.1:9").retries(3).timeout(0.5)
    try:
        client.get()
    except TransportError as e:
        print(f"Failed after {e.attempts} attempts: {e}")


def status_is_not_an_error():
    """5xx is an ordinary response and is never retried."""
    print("\n=== HTTP status ===")

    response = HTTPClient(ClientConfig()).url("https://httpbin.org/status/503").retries(3).get()
    print(f"Status: {response.status_code}")


def debug_dumps():
    """Full request/response dumps at DEBUG, sensitive headers masked."""
    print("\n=== Debug dumps ===")

    config = ClientConfig(logging=LoggingConfig.create(level="DEBUG", format="colored"))
    response = (
        HTTPClient(config)
        .url("https://httpbin.org")
        .path("anything")
        .basic_auth("user", "secret")
        .json('{"hello": "world"}')
        .debug(True)
        .post()
    )
    # Body is still readable after the dump
    print(response.as_json()["json"])


if __name__ == "__main__":
    retry_on_transport_error()
    status_is_not_an_error()
    debug_dumps()
