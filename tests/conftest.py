import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from sitescan.config import Config
from sitescan.errors import BadStatus


def make_config(**overrides) -> Config:
    """Offline-friendly config: no delay, no files, no console noise."""
    base = Config().with_overrides(rate_ms=0, output_path=None, log_path=None, verbose=False)
    return base.with_overrides(**overrides)


class FakeFetcher:
    """In-memory stand-in for Fetcher: url -> body text, or url -> exception instance."""

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.calls = []

    def fetch(self, url):
        self.calls.append(url)
        result = self.pages.get(url)
        if result is None:
            raise BadStatus(url, 404)
        if isinstance(result, Exception):
            raise result
        return result


# ------------------------------ local web server ------------------------------

class _Handler(BaseHTTPRequestHandler):
    routes = {}

    def do_GET(self):
        route = self.routes.get(self.path.split("?")[0])
        if route is None:
            self._send(404, "not found", "text/html")
            return
        route(self)

    def _send(self, status, body="", content_type=None, headers=None):
        data = body.encode("utf-8")
        self.send_response(status)
        if content_type:
            self.send_header("Content-Type", content_type)
        for k, v in (headers or {}).items():
            self.send_header(k, v)
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        try:
            self.wfile.write(data)
        except OSError:
            pass

    def log_message(self, format, *args):
        pass


def _html(body):
    return lambda h: h._send(200, body, "text/html; charset=utf-8")


def _redirect(location, status=302):
    return lambda h: h._send(status, "", "text/html", {"Location": location})


def _echo_headers(h):
    body = f"UA={h.headers.get('User-Agent')}\nCOOKIE={h.headers.get('Cookie')}"
    h._send(200, body, "text/plain")


def _slow(h):
    time.sleep(1.5)
    h._send(200, "late", "text/html")


ROUTES = {
    "/ok": _html("<p>hello</p>"),
    "/plain": lambda h: h._send(200, "just text", "text/plain"),
    "/no-type": lambda h: h._send(200, "untyped"),
    "/json": lambda h: h._send(200, "{}", "application/json"),
    "/missing": lambda h: h._send(404, "gone", "text/html"),
    "/boom": lambda h: h._send(500, "oops", "text/html"),
    "/to-ok": _redirect("/ok"),
    "/dir/to-sibling": _redirect("../ok", status=301),
    "/hop1": _redirect("/hop2"),
    "/hop2": _redirect("/ok"),
    "/loop": _redirect("/loop"),
    "/to-file": _redirect("file:///etc/hostname"),
    "/to-ftp": _redirect("ftp://127.0.0.1/ok", status=301),
    "/redirect-no-location": lambda h: h._send(302, "", "text/html"),
    "/headers": _echo_headers,
    "/slow": _slow,
    "/utf8": lambda h: h._send(200, "café ✓", "text/html; charset=utf-8"),
    "/caf%C3%A9": _html("<p>accented path</p>"),
    "/a%20b": lambda h: h._send(200, h.path, "text/plain"),
    "/robots.txt": lambda h: h._send(200, "User-agent: *\nDisallow: /private\n", "text/plain"),
    "/": _html('<a href="/page">page</a> example.com <a href="/private/x">p</a>'),
    "/page": _html("<p>mention of Example.com here</p>"),
}


@pytest.fixture(scope="session")
def http_server():
    """Base URL of a throwaway local server serving ROUTES."""
    handler = type("Handler", (_Handler,), {"routes": ROUTES})
    server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address
    yield f"http://{host}:{port}"
    server.shutdown()
    server.server_close()
