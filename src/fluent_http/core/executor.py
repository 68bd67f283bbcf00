"""
Executor: sends one prepared request with bounded retry.

Retry policy:
- Only transport errors (connect, DNS, TLS, timeout) are retried.
- An HTTP status, even 5xx, is a successful exchange and is never retried.
- ``retries <= 1`` means a single attempt.
- No backoff: the next attempt starts immediately.

Timeout: ``timeout`` is a deadline for a whole attempt, from connect to
the last byte of the body. A server that trickles its response cannot
hold an attempt open past it.
"""

import contextvars
import logging
import threading
import time
import uuid
from concurrent.futures import Future, TimeoutError as FutureTimeoutError
from typing import Dict, Optional, Tuple, Union

import requests

from .exceptions import TimeoutError, TransportError, classify_requests_exception
from .logging import HTTPLogger
from .logging.filters import set_correlation_id, clear_correlation_id
from .response import Response
from ..utils.dump import dump_request, dump_response
from ..utils.sanitizer import mask_url

# (connect, read) as understood by requests, or None for no limit
TimeoutValue = Optional[Union[float, Tuple[Optional[float], Optional[float]]]]


def build_timeout(
    timeout: Optional[float],
    tls_handshake_timeout: Optional[float] = None
) -> TimeoutValue:
    """
    Convert the builder's timeouts into the socket limits requests expects.

    Every socket operation of an attempt is bounded by ``timeout`` as well,
    so a dead peer is noticed without waiting for the attempt deadline.
    The TLS handshake happens inside the connect phase, so
    ``tls_handshake_timeout`` replaces the connect component when set.
    Zero or None means no limit.

    Examples:
        >>> build_timeout(3.0)
        (3.0, 3.0)
        >>> build_timeout(10, tls_handshake_timeout=2)
        (2, 10)
        >>> build_timeout(0) is None
        True
    """
    read = timeout or None
    connect = tls_handshake_timeout or read
    if connect is None and read is None:
        return None
    return (connect, read)


def proxies_for(proxy: Optional[str]) -> Dict[str, str]:
    """Route both schemes through one proxy; empty dict keeps environment proxies."""
    if not proxy:
        return {}
    return {"http": proxy, "https": proxy}


class Executor:
    """
    Sends a prepared request through a shared ``requests.Session``.

    The session is the transport: connection pooling, TLS, redirects and
    proxy negotiation all happen there. It is safe to share one Executor
    (and session) between builders.

    Example:
        >>> executor = Executor(requests.Session())
        >>> response = executor.execute(prepared, retries=3, timeout=5.0)
    """

    def __init__(self, session: requests.Session, logger: Optional[HTTPLogger] = None):
        self.session = session
        self.logger = logger or HTTPLogger()

    def execute(
        self,
        request: requests.PreparedRequest,
        *,
        retries: int = 0,
        timeout: Optional[float] = None,
        tls_handshake_timeout: Optional[float] = None,
        proxy: Optional[str] = None,
        debug: bool = False
    ) -> Response:
        """
        Send ``request``, retrying on transport errors.

        Args:
            request: Resolved request
            retries: Max attempts; <= 1 sends once
            timeout: Deadline of one attempt in seconds, body read included
            tls_handshake_timeout: Connect/TLS limit in seconds
            proxy: Proxy URL, already validated
            debug: Log full request and response dumps

        Returns:
            Response wrapper

        Raises:
            TransportError: last transport error, ``attempts`` filled in
        """
        correlation_id = str(uuid.uuid4())
        set_correlation_id(correlation_id)
        try:
            return self._execute(
                request,
                retries=retries,
                deadline=timeout or None,
                timeout=build_timeout(timeout, tls_handshake_timeout),
                proxy=proxy,
                debug=debug,
            )
        finally:
            clear_correlation_id()

    def _execute(
        self,
        request: requests.PreparedRequest,
        *,
        retries: int,
        deadline: Optional[float],
        timeout: TimeoutValue,
        proxy: Optional[str],
        debug: bool
    ) -> Response:
        url = mask_url(request.url or "")
        dumps = debug and self.logger.is_enabled_for(logging.DEBUG)

        if dumps:
            self.logger.debug(
                "Request dump",
                method=request.method,
                url=url,
                dump=dump_request(request),
            )

        # Proxy from the builder wins; otherwise HTTP(S)_PROXY / NO_PROXY apply
        settings = self.session.merge_environment_settings(
            request.url, proxies_for(proxy), True, None, None
        )

        max_attempts = max(retries, 1)
        attempt = 0
        start_time = time.time()

        while True:
            attempt += 1
            try:
                raw = self._attempt(request, timeout, settings, deadline, url)
                break
            except requests.exceptions.RequestException as e:
                cause = e
                error = classify_requests_exception(
                    e, url, timeout=_read_timeout(timeout), proxy=proxy
                )
                if not isinstance(error, TransportError):
                    raise error from e
            except TimeoutError as e:
                cause = None
                error = e

            duration_ms = round((time.time() - start_time) * 1000, 2)
            if attempt >= max_attempts:
                error.with_attempts(attempt)
                self.logger.error(
                    "Request failed",
                    method=request.method,
                    url=url,
                    error=str(error),
                    error_type=type(error).__name__,
                    attempt=attempt,
                    max_attempts=max_attempts,
                    duration_ms=duration_ms,
                )
                raise error from cause

            self.logger.warning(
                "Request error (will retry)",
                method=request.method,
                url=url,
                error=str(error),
                error_type=type(error).__name__,
                attempt=attempt,
                max_attempts=max_attempts,
                duration_ms=duration_ms,
            )

        self.logger.debug(
            "Request completed",
            method=request.method,
            url=url,
            status_code=raw.status_code,
            attempt=attempt,
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )

        if dumps:
            # dump_response buffers the body inside ``raw``, so the
            # wrapper's extraction methods read the same bytes afterwards
            self.logger.debug(
                "Response dump",
                status_code=raw.status_code,
                url=url,
                dump=dump_response(raw),
            )

        return Response(raw)

    def _attempt(
        self,
        request: requests.PreparedRequest,
        timeout: TimeoutValue,
        settings: dict,
        deadline: Optional[float],
        url: str
    ) -> requests.Response:
        """
        One exchange: send and, under a deadline, read the whole body.

        With a deadline the exchange runs on a daemon thread and the caller
        waits at most ``deadline`` seconds for it. A late response is closed
        by the worker once it finally arrives.
        """
        if deadline is None:
            return self.session.send(request, timeout=timeout, **settings)

        future: Future = Future()

        def exchange() -> None:
            try:
                raw = self.session.send(request, timeout=timeout, **settings)
                # Buffer the body inside the deadline; ReadError propagates
                Response(raw).as_bytes()
            except BaseException as e:
                future.set_exception(e)
            else:
                future.set_result(raw)

        future.set_running_or_notify_cancel()
        context = contextvars.copy_context()
        threading.Thread(
            target=context.run,
            args=(exchange,),
            name="fluent-http-exchange",
            daemon=True,
        ).start()

        try:
            return future.result(timeout=deadline)
        except FutureTimeoutError:
            # On 3.11+ this also catches a builtin TimeoutError from the worker
            if future.done():
                raise
            future.add_done_callback(_close_late_response)
            raise TimeoutError("Request timeout", url, deadline, "total") from None


def _close_late_response(future: Future) -> None:
    if future.exception() is None:
        future.result().close()


def _read_timeout(timeout: TimeoutValue) -> Optional[float]:
    if isinstance(timeout, tuple):
        return timeout[1]
    return timeout
