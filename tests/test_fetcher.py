import pytest

from conftest import make_config

from sitescan.errors import (
    BadStatus,
    FetchTimeout,
    NetworkError,
    TooManyRedirects,
    UnsupportedContentType,
)
from sitescan.fetcher import Fetcher


@pytest.fixture
def fetcher():
    return Fetcher(make_config(timeout_sec=5))


def test_html_body(http_server, fetcher):
    assert fetcher.fetch(http_server + "/ok") == "<p>hello</p>"


def test_plain_text_and_missing_content_type_are_accepted(http_server, fetcher):
    assert fetcher.fetch(http_server + "/plain") == "just text"
    assert fetcher.fetch(http_server + "/no-type") == "untyped"


def test_body_is_utf8(http_server, fetcher):
    assert fetcher.fetch(http_server + "/utf8") == "café ✓"


def test_other_content_types_are_rejected(http_server, fetcher):
    with pytest.raises(UnsupportedContentType) as info:
        fetcher.fetch(http_server + "/json")
    assert info.value.content_type == "application/json"


@pytest.mark.parametrize("path,status", [("/missing", 404), ("/boom", 500), ("/redirect-no-location", 302)])
def test_bad_status(http_server, fetcher, path, status):
    with pytest.raises(BadStatus) as info:
        fetcher.fetch(http_server + path)
    assert info.value.status == status


def test_follows_redirects(http_server, fetcher):
    assert fetcher.fetch(http_server + "/to-ok") == "<p>hello</p>"
    assert fetcher.fetch(http_server + "/hop1") == "<p>hello</p>"


def test_relative_location_resolves_against_current_url(http_server, fetcher):
    assert fetcher.fetch(http_server + "/dir/to-sibling") == "<p>hello</p>"


def test_redirect_loop_is_capped(http_server):
    with pytest.raises(TooManyRedirects) as info:
        Fetcher(make_config(max_redirects=3)).fetch(http_server + "/loop")
    assert info.value.limit == 3


def test_redirect_cap_counts_hops(http_server):
    # /hop1 -> /hop2 -> /ok is two hops
    assert Fetcher(make_config(max_redirects=2)).fetch(http_server + "/hop1") == "<p>hello</p>"
    with pytest.raises(TooManyRedirects):
        Fetcher(make_config(max_redirects=1)).fetch(http_server + "/hop1")


def test_sends_user_agent_and_cookie(http_server):
    f = Fetcher(make_config(user_agent="sitescan-test/2.0", cookie="session=abc"))
    assert f.fetch(http_server + "/headers") == "UA=sitescan-test/2.0\nCOOKIE=session=abc"


def test_no_cookie_header_by_default(http_server, fetcher):
    assert "COOKIE=None" in fetcher.fetch(http_server + "/headers")


def test_timeout(http_server):
    with pytest.raises(FetchTimeout):
        Fetcher(make_config(timeout_sec=0.3)).fetch(http_server + "/slow")


def test_connection_refused_is_network_error():
    # Port 9 (discard) on localhost is essentially never listening.
    with pytest.raises(NetworkError):
        Fetcher(make_config(timeout_sec=2)).fetch("http://127.0.0.1:9/")


def test_unsupported_scheme_is_network_error(fetcher):
    with pytest.raises(NetworkError):
        fetcher.fetch("mailto:someone@example.com")


@pytest.mark.parametrize("path", ["/to-file", "/to-ftp"])
def test_redirect_off_http_is_refused(http_server, fetcher, path):
    with pytest.raises(NetworkError) as info:
        fetcher.fetch(http_server + path)
    assert "scheme" in str(info.value)
    assert not info.value.url.startswith("http")


def test_non_ascii_path_is_percent_encoded(http_server, fetcher):
    assert fetcher.fetch(http_server + "/café") == "<p>accented path</p>"
    assert fetcher.fetch(http_server + "/caf%C3%A9") == "<p>accented path</p>"


def test_spaces_in_path_and_query_are_percent_encoded(http_server, fetcher):
    assert fetcher.fetch(http_server + "/a b?q=x y") == "/a%20b?q=x%20y"
