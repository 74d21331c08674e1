# sitescan/fetcher.py
"""
One logical page fetch, standard library only (urllib).

    Fetcher(cfg).fetch(url) -> str      # or raises a FetchError subclass

What happens:
• GET with our User-Agent (and the Cookie header when configured)
• Redirects are followed here, not by urllib, so we can cap them (cfg.max_redirects)
  and resolve relative Location headers against the URL that sent them
• Only http and https are ever opened; a redirect to file:, ftp: etc. is a NetworkError
• Paths and queries are percent-encoded before the request (non-ASCII, spaces)
• 2xx is success; a 3xx without Location and anything else is BadStatus
• A non-empty Content-Type must mention text/html or text/plain
• The timeout covers each socket operation and the body read as a whole
  (checked between 64 KB chunks); on timeout the response is closed
• The body comes back decoded as UTF-8, bad bytes replaced
"""

from __future__ import annotations

import http.client
import socket
import time
from urllib.error import HTTPError, URLError
from urllib.parse import urljoin, urlsplit
from urllib.request import HTTPRedirectHandler, Request, build_opener

from .config import Config
from .errors import (
    BadStatus,
    FetchTimeout,
    NetworkError,
    TooManyRedirects,
    UnsupportedContentType,
)
from .links import quote_url

ACCEPTED_TYPES = ("text/html", "text/plain")
ALLOWED_SCHEMES = ("http", "https")
CHUNK_SIZE = 65536  # 64 KB


class _NoRedirect(HTTPRedirectHandler):
    """Hand every 3xx back to us as an HTTPError instead of following it."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        return None


class Fetcher:
    def __init__(self, cfg: Config):
        self.cfg = cfg
        self._opener = build_opener(_NoRedirect)

    def _headers(self) -> dict:
        headers = {"User-Agent": self.cfg.user_agent}
        if self.cfg.cookie:
            headers["Cookie"] = self.cfg.cookie
        return headers

    def fetch(self, url: str) -> str:
        current = url
        for _ in range(self.cfg.max_redirects + 1):
            location = self._fetch_once(current)
            if isinstance(location, _Redirect):
                current = urljoin(current, location.target)
                continue
            return location
        raise TooManyRedirects(url, self.cfg.max_redirects)

    def _fetch_once(self, url: str):
        """
        A single request/response. Returns the decoded body, or a _Redirect
        the caller should follow.
        """
        _check_scheme(url)
        timeout = self.cfg.timeout_sec
        t0 = time.time()
        try:
            req = Request(quote_url(url), headers=self._headers())
            with self._opener.open(req, timeout=timeout) as resp:
                status = resp.getcode() or 200
                if not 200 <= status < 300:
                    raise BadStatus(url, status)
                _check_content_type(url, resp.headers.get("Content-Type"))

                # Read the body in chunks so the deadline also covers slow trickles.
                chunks = []
                while True:
                    if time.time() - t0 > timeout:
                        raise FetchTimeout(url, f"Request timeout after {timeout}s")
                    chunk = resp.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    chunks.append(chunk)
                return b"".join(chunks).decode("utf-8", errors="replace")

        except HTTPError as e:
            # urllib raises for every non-2xx once redirects are disabled.
            try:
                location = e.headers.get("Location") if e.headers else None
                if 300 <= e.code < 400 and location:
                    return _Redirect(location)
                raise BadStatus(url, e.code) from None
            finally:
                e.close()
        except URLError as e:
            if isinstance(e.reason, socket.timeout):
                raise FetchTimeout(url, "Request timeout") from e
            raise NetworkError(url, str(e.reason)) from e
        except socket.timeout as e:
            raise FetchTimeout(url, "Request timeout") from e
        except (OSError, http.client.HTTPException, ValueError) as e:
            # ValueError: urllib rejects the URL itself ("unknown url type").
            raise NetworkError(url, str(e) or type(e).__name__) from e


class _Redirect:
    __slots__ = ("target",)

    def __init__(self, target: str):
        self.target = target


def _check_scheme(url: str) -> None:
    try:
        scheme = urlsplit(url).scheme.lower()
    except ValueError as e:
        raise NetworkError(url, str(e)) from e
    if scheme not in ALLOWED_SCHEMES:
        raise NetworkError(url, f"Unsupported URL scheme {scheme!r}")


def _check_content_type(url: str, content_type) -> None:
    ct = (content_type or "").lower()
    if ct and not any(t in ct for t in ACCEPTED_TYPES):
        raise UnsupportedContentType(url, content_type)
