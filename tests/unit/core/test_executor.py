"""
Tests for Executor retry loop, timeouts and debug dumps.
"""

import logging
import time
from unittest.mock import Mock

import pytest
import requests

from fluent_http.core.client import HTTPClient
from fluent_http.core.config import ClientConfig
from fluent_http.core.exceptions import (
    ConnectionError,
    InvalidConfigurationError,
    ProxyError,
    SSLError,
    TimeoutError,
    TransportError,
)
from fluent_http.core.executor import Executor, build_timeout, proxies_for
from fluent_http.core.logging.filters import get_correlation_id

URL = "https://api.example.com/flaky"


def _prepared(method="GET", url=URL):
    return requests.Request(method, url).prepare()


class TestBuildTimeout:
    """Builder timeouts -> requests (connect, read) tuple."""

    def test_single_timeout(self):
        assert build_timeout(3.0) == (3.0, 3.0)

    def test_tls_handshake_replaces_connect(self):
        assert build_timeout(10, tls_handshake_timeout=2) == (2, 10)

    @pytest.mark.parametrize("timeout", [0, None])
    def test_no_limit(self, timeout):
        assert build_timeout(timeout) is None

    def test_only_tls_handshake(self):
        assert build_timeout(None, tls_handshake_timeout=2) == (2, None)


class TestProxiesFor:

    def test_empty(self):
        assert proxies_for(None) == {}
        assert proxies_for("") == {}

    def test_both_schemes(self):
        assert proxies_for("http://127.0.0.1:3128") == {
            "http": "http://127.0.0.1:3128",
            "https": "http://127.0.0.1:3128",
        }


class TestRetryLoop:
    """Only transport errors are retried; no backoff."""

    def test_retries_3_makes_exactly_3_attempts(self, mock_responses):
        mock_responses.add("GET", URL, body=requests.exceptions.ConnectionError("refused"))

        executor = Executor(requests.Session())
        with pytest.raises(ConnectionError) as exc_info:
            executor.execute(_prepared(), retries=3)

        assert len(mock_responses.calls) == 3
        assert exc_info.value.attempts == 3
        assert "after 3 attempt(s)" in str(exc_info.value)

    @pytest.mark.parametrize("retries", [0, 1])
    def test_retries_at_most_1_makes_one_attempt(self, mock_responses, retries):
        mock_responses.add("GET", URL, body=requests.exceptions.ConnectionError("refused"))

        executor = Executor(requests.Session())
        with pytest.raises(TransportError) as exc_info:
            executor.execute(_prepared(), retries=retries)

        assert len(mock_responses.calls) == 1
        assert exc_info.value.attempts == 1

    def test_stops_at_first_success(self, mock_responses):
        mock_responses.add("GET", URL, body=requests.exceptions.ConnectTimeout("slow"))
        mock_responses.add("GET", URL, json={"ok": True})

        response = Executor(requests.Session()).execute(_prepared(), retries=5)

        assert response.status_code == 200
        assert response.as_json() == {"ok": True}
        assert len(mock_responses.calls) == 2

    def test_http_error_status_is_not_retried(self, mock_responses):
        mock_responses.add("GET", URL, status=503)

        response = Executor(requests.Session()).execute(_prepared(), retries=3)

        assert response.status_code == 503
        assert len(mock_responses.calls) == 1

    def test_post_is_retried_too(self, mock_responses):
        mock_responses.add("POST", URL, body=requests.exceptions.ConnectionError("reset"))

        with pytest.raises(ConnectionError):
            Executor(requests.Session()).execute(_prepared("POST"), retries=2)

        assert len(mock_responses.calls) == 2

    def test_last_error_is_surfaced(self, mock_responses):
        mock_responses.add("GET", URL, body=requests.exceptions.ConnectionError("refused"))
        mock_responses.add("GET", URL, body=requests.exceptions.ReadTimeout("slow"))

        with pytest.raises(TimeoutError) as exc_info:
            Executor(requests.Session()).execute(_prepared(), retries=2, timeout=1.5)

        assert exc_info.value.timeout_type == "read"
        assert exc_info.value.timeout == 1.5
        assert exc_info.value.attempts == 2

    def test_invalid_request_is_not_retried(self):
        session = Mock(spec=requests.Session)
        session.merge_environment_settings.return_value = {}
        session.send.side_effect = requests.exceptions.InvalidURL("bad")

        with pytest.raises(InvalidConfigurationError):
            Executor(session).execute(_prepared(), retries=3)

        assert session.send.call_count == 1


class TestTransportErrorClassification:

    @pytest.mark.parametrize("raised,expected", [
        (requests.exceptions.ConnectTimeout(), TimeoutError),
        (requests.exceptions.ReadTimeout(), TimeoutError),
        (requests.exceptions.ProxyError(), ProxyError),
        (requests.exceptions.SSLError(), SSLError),
        (requests.exceptions.ConnectionError(), ConnectionError),
        (requests.exceptions.TooManyRedirects(), TransportError),
    ])
    def test_mapped(self, mock_responses, raised, expected):
        mock_responses.add("GET", URL, body=raised)

        with pytest.raises(expected) as exc_info:
            Executor(requests.Session()).execute(_prepared())

        assert exc_info.value.retryable is True
        assert exc_info.value.__cause__ is raised


class TestSendArguments:
    """What the executor hands to requests."""

    def _session(self):
        session = Mock(spec=requests.Session)
        session.merge_environment_settings.side_effect = (
            lambda url, proxies, stream, verify, cert: {
                "proxies": proxies, "stream": stream, "verify": True, "cert": None,
            }
        )
        raw = Mock(spec=requests.Response)
        raw.status_code = 200
        session.send.return_value = raw
        return session

    def test_timeout_and_proxy(self):
        session = self._session()

        Executor(session).execute(
            _prepared(), timeout=5, tls_handshake_timeout=1, proxy="http://127.0.0.1:3128"
        )

        kwargs = session.send.call_args.kwargs
        assert kwargs["timeout"] == (1, 5)
        assert kwargs["proxies"] == {"http": "http://127.0.0.1:3128", "https": "http://127.0.0.1:3128"}
        assert kwargs["stream"] is True

    def test_no_timeout(self):
        session = self._session()
        Executor(session).execute(_prepared(), timeout=0)
        assert session.send.call_args.kwargs["timeout"] is None


class TestAttemptDeadline:
    """timeout bounds the whole exchange, body included."""

    def _slow_session(self, delay):
        raw = Mock(spec=requests.Response)
        raw.status_code = 200
        raw.content = b"late"

        def send(request, **kwargs):
            time.sleep(delay)
            return raw

        session = Mock(spec=requests.Session)
        session.merge_environment_settings.return_value = {}
        session.send.side_effect = send
        return session, raw

    def test_slow_exchange_times_out(self):
        session, _ = self._slow_session(1.0)
        start = time.time()

        with pytest.raises(TimeoutError) as exc_info:
            Executor(session).execute(_prepared(), timeout=0.2)

        assert time.time() - start < 0.9
        assert exc_info.value.timeout_type == "total"
        assert exc_info.value.timeout == 0.2

    def test_deadline_applies_per_attempt(self):
        session, _ = self._slow_session(1.0)

        with pytest.raises(TimeoutError) as exc_info:
            Executor(session).execute(_prepared(), timeout=0.2, retries=2)

        assert exc_info.value.attempts == 2
        assert session.send.call_count == 2

    def test_late_response_is_closed(self):
        session, raw = self._slow_session(0.4)

        with pytest.raises(TimeoutError):
            Executor(session).execute(_prepared(), timeout=0.1)

        time.sleep(0.6)
        raw.close.assert_called_once()

    def test_body_buffered_within_deadline(self):
        session, _ = self._slow_session(0)

        response = Executor(session).execute(_prepared(), timeout=1)

        assert response.as_bytes() == b"late"

    def test_transport_error_from_exchange_thread(self, mock_responses):
        mock_responses.add("GET", URL, body=requests.exceptions.ChunkedEncodingError("cut"))

        with pytest.raises(TransportError):
            Executor(requests.Session()).execute(_prepared(), timeout=1)


class TestDebugDumps:
    """Debug mode logs request and response dumps."""

    def test_dumps_logged(self, mock_responses, caplog):
        caplog.set_level(logging.DEBUG, logger="fluent_http")
        mock_responses.add("POST", "https://api.example.com/users", json={"id": 1}, status=201)

        client = HTTPClient(ClientConfig(base_url="https://api.example.com")).debug(True)
        response = client.path("users").basic_auth("user", "secret").json('{"name": "cizixs"}').post()

        dumps = {record.getMessage(): record.dump for record in caplog.records if hasattr(record, "dump")}
        assert dumps["Request dump"].startswith("POST /users HTTP/1.1\r\n")
        assert '{"name": "cizixs"}' in dumps["Request dump"]
        assert "dXNlcjpzZWNyZXQ=" not in dumps["Request dump"]
        assert dumps["Response dump"].startswith("HTTP/1.1 201")
        assert '{"id": 1}' in dumps["Response dump"]

        # The dump did not consume the body
        assert response.as_json() == {"id": 1}
        assert response.as_bytes() == b'{"id": 1}'

    def test_no_dumps_without_debug(self, mock_responses, caplog):
        caplog.set_level(logging.DEBUG, logger="fluent_http")
        mock_responses.add("GET", "https://api.example.com/", status=200)

        HTTPClient(ClientConfig(base_url="https://api.example.com")).get()

        assert not [record for record in caplog.records if hasattr(record, "dump")]

    def test_retry_warnings_and_final_error(self, mock_responses, caplog):
        caplog.set_level(logging.DEBUG, logger="fluent_http")
        mock_responses.add("GET", URL, body=requests.exceptions.ConnectionError("refused"))

        with pytest.raises(ConnectionError):
            Executor(requests.Session()).execute(_prepared(), retries=3)

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert [r.attempt for r in warnings] == [1, 2]
        assert len(errors) == 1
        assert errors[0].attempt == 3

    def test_env_toggle_alone_prints_dumps(self, mock_responses, monkeypatch, capsys):
        monkeypatch.setenv("FLUENT_HTTP_DEBUG", "1")
        mock_responses.add("POST", "https://api.example.com/echo", json={"a": 1})

        HTTPClient().url("https://api.example.com").path("echo").json('{"a":1}').post()

        out = capsys.readouterr().out
        assert "Request dump" in out
        assert "POST /echo HTTP/1.1" in out
        assert "Response dump" in out

    def test_dumps_skipped_when_debug_not_enabled(self, mock_responses, monkeypatch):
        mock_responses.add("GET", URL, status=200)
        monkeypatch.setattr("fluent_http.core.executor.dump_request", Mock(side_effect=AssertionError))
        monkeypatch.setattr("fluent_http.core.executor.dump_response", Mock(side_effect=AssertionError))
        logging.getLogger("fluent_http").setLevel(logging.INFO)

        response = Executor(requests.Session()).execute(_prepared(), debug=True)

        assert response.status_code == 200

    def test_correlation_id_cleared_after_call(self, mock_responses):
        mock_responses.add("GET", URL, status=200)

        Executor(requests.Session()).execute(_prepared())

        assert get_correlation_id() is None
