"""
Local HTTP server for integration tests.
"""

import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest


class Handler(BaseHTTPRequestHandler):
    """
    Routes:
        /echo   - responds with the request body and Content-Type
        /slow   - sleeps 1s before responding
        /flaky  - drops the connection for the first ``server.fail_count`` hits
        /status - responds with 503
        /drip   - announces 10 bytes, then sends one every 0.3s
    """

    def _body(self) -> bytes:
        length = int(self.headers.get("Content-Length") or 0)
        return self.rfile.read(length) if length else b""

    def _reply(self, status: int, body: bytes = b"", content_type: str = "text/plain") -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _handle(self) -> None:
        self.server.hits += 1
        path = self.path.split("?")[0]

        if path == "/echo":
            body = self._body()
            self._reply(200, body, self.headers.get("Content-Type", "application/octet-stream"))
        elif path == "/slow":
            time.sleep(1.0)
            self._reply(200, b"late")
        elif path == "/flaky":
            if self.server.hits <= self.server.fail_count:
                self.close_connection = True
                return
            self._reply(200, b"ok")
        elif path == "/drip":
            self.send_response(200)
            self.send_header("Content-Length", "10")
            self.end_headers()
            try:
                for _ in range(10):
                    self.wfile.write(b"x")
                    self.wfile.flush()
                    time.sleep(0.3)
            except OSError:
                # Client gave up
                self.close_connection = True
        elif path == "/status":
            self._reply(503, b"unavailable")
        else:
            self._reply(404, b"not found")

    do_GET = _handle
    do_POST = _handle
    do_PUT = _handle

    def log_message(self, format, *args):
        pass


@pytest.fixture
def server():
    """Threaded HTTP server on a free localhost port."""
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    httpd.daemon_threads = True
    httpd.hits = 0
    httpd.fail_count = 0
    # Handler errors from dropped /slow and /drip clients are expected
    httpd.handle_error = lambda request, client_address: None

    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        yield httpd
    finally:
        httpd.shutdown()
        httpd.server_close()


@pytest.fixture
def server_url(server):
    host, port = server.server_address[:2]
    return f"http://{host}:{port}"
