import pytest

from framescope.core.errors import InvalidRedirectError
from framescope.layers.action.navigator import absolute_url, is_absolute_url, resolve_url, url_path

BASE = "https://host:8080/app"


@pytest.mark.parametrize("url, expected", [
    ("", "https://host:8080/app"),
    (None, "https://host:8080/app"),
    ("   ", "https://host:8080/app"),
    ("//other.example/x", "https://other.example/x"),
    ("/foo", "https://host:8080/foo"),
    ("bar", "https://host:8080/app/bar"),
    ("https://full.example/z", "https://full.example/z"),
])
def test_resolution_table(url, expected):
    assert resolve_url(url, BASE, current_url="https://somewhere.example/page") == expected


def test_protocol_relative_uses_current_page_scheme():
    assert resolve_url("//cdn.example/x", BASE, current_url="http://host:8080/app") == "http://cdn.example/x"


def test_protocol_relative_without_current_page_uses_base_scheme():
    assert resolve_url("//cdn.example/x", BASE) == "https://cdn.example/x"


@pytest.mark.parametrize("base, url, expected", [
    ("https://host:8080/app/", "bar", "https://host:8080/app/bar"),
    ("https://host:8080/app//", "bar/", "https://host:8080/app/bar/"),
    ("https://host:8080", "bar", "https://host:8080/bar"),
    ("https://host:8080/", "/bar", "https://host:8080/bar"),
])
def test_single_separating_slash(base, url, expected):
    assert resolve_url(url, base) == expected


def test_root_relative_drops_base_path_and_query():
    assert resolve_url("/login?next=1", "http://localhost:5000/deep/path?x=1") == "http://localhost:5000/login?next=1"


def test_relative_drops_base_query():
    assert resolve_url("page.html", "http://localhost:5000/site/?lang=en") == "http://localhost:5000/site/page.html"


def test_blank_url_without_base_is_invalid():
    with pytest.raises(InvalidRedirectError):
        resolve_url("", "")


def test_relative_url_without_base_is_invalid():
    with pytest.raises(InvalidRedirectError):
        resolve_url("bar", None)


def test_absolute_url_needs_no_base():
    assert resolve_url("http://example.com", "") == "http://example.com"


@pytest.mark.parametrize("url, absolute", [
    ("https://example.com", True),
    ("file:///tmp/page.html", True),
    ("about:blank", True),
    ("data:text/html,<p>hi</p>", True),
    ("localhost:8080/x", False),
    ("page.html", False),
    ("/page.html", False),
    ("//example.com", False),
])
def test_is_absolute_url(url, absolute):
    assert is_absolute_url(url) is absolute


def test_absolute_url_keeps_port():
    assert absolute_url("/foo", BASE) == "https://host:8080/foo"
    assert absolute_url("foo", "http://host/app") == "http://host:80/foo"


def test_url_path_strips_query_and_fragment():
    assert url_path("https://host/app/page?x=1#top") == "https://host/app/page"


def test_protocol_relative_ignores_blank_page_scheme():
    assert resolve_url("//cdn.example/x", BASE, current_url="about:blank") == "https://cdn.example/x"
