"""
HTTP front end for CsrService.

Routes (any method):
  /generate-csr        → CsrService.generate_csr()
  /issue-certificate   → CsrService.issue_certificate(session)

The session id for /issue-certificate is read from the ``session`` query
parameter or the ``X-CSR-Session`` header; without one the current CSR is
used.  Every other path returns 404.

Each request runs on its own thread (ThreadingHTTPServer); shared state is
confined to the service's CsrStore.
"""
from __future__ import annotations

import logging
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional
from urllib.parse import parse_qs, urlsplit

from server.service import SESSION_HEADER, CsrService, ServiceResponse

logger = logging.getLogger(__name__)


class _CsrRequestHandler(BaseHTTPRequestHandler):
    server: "CsrHttpServer"

    def _dispatch(self) -> None:
        url = urlsplit(self.path)
        service = self.server.service

        if url.path == "/generate-csr":
            response = service.generate_csr()
        elif url.path == "/issue-certificate":
            response = service.issue_certificate(self._session_id(url.query))
        else:
            response = ServiceResponse.text(404, "404 page not found")
        self._write(response)

    def __getattr__(self, name: str):
        # handle_one_request looks up do_<METHOD>; every method routes the same way
        if name.startswith("do_"):
            return self._dispatch
        raise AttributeError(name)

    def _session_id(self, query: str) -> Optional[str]:
        values = parse_qs(query).get("session")
        if values:
            return values[0]
        return self.headers.get(SESSION_HEADER)

    def _write(self, response: ServiceResponse) -> None:
        self.send_response(response.status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(response.body)))
        for name, value in response.headers.items():
            self.send_header(name, value)
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(response.body)

    def log_message(self, fmt: str, *args: object) -> None:
        logger.debug("%s - %s", self.address_string(), fmt % args)


class CsrHttpServer(ThreadingHTTPServer):
    """
    Threaded HTTP server bound to one CsrService.

    Usage:
        srv = CsrHttpServer(("0.0.0.0", 8080), service)
        srv.serve_forever()

    or, in tests, ``srv.start()`` / ``srv.stop()`` to run it on a background
    thread.
    """

    daemon_threads = True

    def __init__(self, address: tuple[str, int], service: CsrService) -> None:
        self.service = service
        self._thread: Optional[threading.Thread] = None
        super().__init__(address, _CsrRequestHandler)

    @property
    def port(self) -> int:
        return self.server_address[1]

    def start(self) -> None:
        """Serve in a background thread."""
        if self._thread is not None:
            raise RuntimeError("Server is already running")
        self._thread = threading.Thread(target=self.serve_forever, daemon=True)
        self._thread.start()
        logger.info("Serving on port %d", self.port)

    def stop(self) -> None:
        """Shut down the background thread and close the socket."""
        if self._thread:
            self.shutdown()
            self._thread.join(timeout=5)
            self._thread = None
        self.server_close()

    def __enter__(self) -> "CsrHttpServer":
        return self

    def __exit__(self, *_: object) -> None:
        self.stop()
