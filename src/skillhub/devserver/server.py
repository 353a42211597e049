"""Development server: static assets plus forwarding to the registry backend.

During development the web assets are served locally while the backend
runs elsewhere (``http://localhost:8080`` by default). :class:`DevServer`
stands in front of both:

* requests whose path matches a :class:`~skillhub.models.ProxyRule`
  (``/api/*``, ``/skill.md`` and ``/skill/*.md`` by default) are forwarded
  unmodified -- method, path, query string, body and headers -- to the
  rule's target. With ``change_origin`` the ``Host`` header is rewritten
  to the target's host;
* everything else is served from the static directory, falling back to
  ``index.html`` so that client URLs such as ``/skill/pdf`` load the app.

The server is a :class:`http.server.ThreadingHTTPServer`; forwarding uses
one shared :class:`httpx.Client`.
"""

from __future__ import annotations

import logging
import mimetypes
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Optional, Sequence
from urllib.parse import unquote, urlsplit

import httpx

from skillhub.models import DevServerConfig, ProxyRule

logger = logging.getLogger(__name__)

# RFC 7230 section 6.1.
_HOP_BY_HOP = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailers",
        "transfer-encoding",
        "upgrade",
    }
)
# Recomputed for the decoded body, or written by send_response itself.
_NOT_COPIED = frozenset({"content-length", "content-encoding", "date", "server"})


def find_rule(rules: Sequence[ProxyRule], path: str) -> Optional[ProxyRule]:
    """Return the first rule forwarding *path* (query string excluded), or ``None``."""
    for rule in rules:
        if rule.matches(path):
            return rule
    return None


class _Handler(BaseHTTPRequestHandler):
    server: _Server
    protocol_version = "HTTP/1.1"

    def do_GET(self) -> None:
        self._dispatch()

    def do_HEAD(self) -> None:
        self._dispatch()

    def do_POST(self) -> None:
        self._dispatch()

    def do_PUT(self) -> None:
        self._dispatch()

    def do_PATCH(self) -> None:
        self._dispatch()

    def do_DELETE(self) -> None:
        self._dispatch()

    def do_OPTIONS(self) -> None:
        self._dispatch()

    def log_message(self, format: str, *args: object) -> None:
        logger.info("%s %s", self.address_string(), format % args)

    # ------------------------------------------------------------------ #

    def _dispatch(self) -> None:
        path = urlsplit(self.path).path
        rule = find_rule(self.server.rules, path)
        if rule is not None:
            self._forward(rule)
        else:
            self._serve_static(path)

    def _read_body(self) -> Optional[bytes]:
        """Read the request body, or answer 400/411 and return ``None``.

        Chunked uploads are refused: the body is forwarded in one piece and
        needs a known length.
        """
        if "chunked" in (self.headers.get("Transfer-Encoding") or "").lower():
            self.close_connection = True
            self._send_text(411, "Length required\n")
            return None
        raw = self.headers.get("Content-Length") or "0"
        try:
            length = int(raw)
        except ValueError:
            length = -1
        if length < 0:
            self.close_connection = True
            self._send_text(400, f"Bad Content-Length: {raw}\n")
            return None
        return self.rfile.read(length) if length > 0 else b""

    def _forward(self, rule: ProxyRule) -> None:
        body = self._read_body()
        if body is None:
            return
        headers = {
            k: v
            for k, v in self.headers.items()
            if k.lower() not in _HOP_BY_HOP and k.lower() != "content-length"
        }
        if rule.change_origin:
            headers = {k: v for k, v in headers.items() if k.lower() != "host"}
            headers["Host"] = rule.target_host

        # Absolute-form targets (RFC 7230 5.3.2) carry their own origin.
        parts = urlsplit(self.path)
        target = parts.path + ("?" + parts.query if parts.query else "")
        url = rule.target.rstrip("/") + target
        logger.debug("proxy %s %s -> %s", self.command, self.path, url)
        try:
            upstream = self.server.upstream.request(
                self.command, url, headers=headers, content=body or None
            )
        except httpx.InvalidURL as exc:
            logger.warning("cannot forward %s: %s", self.path, exc)
            self._send_text(400, "Bad request\n")
            return
        except httpx.TransportError as exc:
            logger.warning("proxy error for %s: %s", url, exc)
            self._send_text(502, f"Bad gateway: cannot reach {rule.target}\n")
            return

        self.send_response(upstream.status_code)
        for key, value in upstream.headers.multi_items():
            lowered = key.lower()
            if lowered in _HOP_BY_HOP or lowered in _NOT_COPIED:
                continue
            self.send_header(key, value)
        content = upstream.content
        self.send_header("Content-Length", str(len(content)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(content)

    def _serve_static(self, path: str) -> None:
        root = self.server.static_dir
        if self.command not in ("GET", "HEAD") or root is None or not root.is_dir():
            self._send_text(404, "Not found\n")
            return

        root = root.resolve()
        candidate = (root / unquote(path).lstrip("/")).resolve()
        if not candidate.is_relative_to(root):
            self._send_text(400, "Bad request\n")
            return

        if not candidate.is_file():
            # Single-page fallback: the app resolves the route itself.
            candidate = root / "index.html"
            if not candidate.is_file():
                self._send_text(404, "Not found\n")
                return

        content_type = mimetypes.guess_type(candidate.name)[0] or "application/octet-stream"
        if content_type.startswith("text/"):
            content_type += "; charset=utf-8"
        data = candidate.read_bytes()
        self.send_response(200)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(data)

    def _send_text(self, status: int, text: str) -> None:
        data = text.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(data)


class _Server(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(
        self,
        address: tuple[str, int],
        rules: Sequence[ProxyRule],
        static_dir: Optional[Path],
        upstream: httpx.Client,
    ) -> None:
        super().__init__(address, _Handler)
        self.rules = list(rules)
        self.static_dir = static_dir
        self.upstream = upstream


class DevServer:
    """Local development server with backend forwarding.

    Args:
        config: Host, port and proxy rules. Port ``0`` binds a free port.
        static_dir: Directory of built assets to serve; ``None`` serves
            nothing but forwarded paths.
        upstream: :class:`httpx.Client` used for forwarding. Created (and
            closed on :meth:`shutdown`) when omitted.

    Example::

        with DevServer(config.dev, static_dir=Path("web_dist")) as server:
            server.serve_forever()
    """

    def __init__(
        self,
        config: DevServerConfig,
        static_dir: Optional[Path] = None,
        upstream: Optional[httpx.Client] = None,
    ) -> None:
        self._owns_upstream = upstream is None
        self._upstream = upstream or httpx.Client(follow_redirects=False, timeout=None)
        self._config = config
        self._httpd = _Server((config.host, config.port), config.proxy, static_dir, self._upstream)
        self._started = False

    @property
    def server_address(self) -> tuple[str, int]:
        host, port = self._httpd.server_address[:2]
        return str(host), int(port)

    @property
    def url(self) -> str:
        host, port = self.server_address
        return f"http://{host}:{port}"

    def serve_forever(self) -> None:
        """Serve until :meth:`shutdown` is called from another thread."""
        for rule in self._config.proxy:
            logger.info("forwarding %s -> %s", rule.pattern, rule.target)
        logger.info("dev server listening on %s", self.url)
        self._started = True
        self._httpd.serve_forever()

    def start_background(self) -> threading.Thread:
        """Run :meth:`serve_forever` in a daemon thread and return it."""
        self._started = True
        thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)
        thread.start()
        return thread

    def shutdown(self) -> None:
        """Stop serving and release the socket."""
        if self._started:
            self._httpd.shutdown()
        self._httpd.server_close()
        if self._owns_upstream:
            self._upstream.close()

    def __enter__(self) -> DevServer:
        return self

    def __exit__(self, *args: object) -> None:
        self.shutdown()
