"""
Navigator - Resolve user supplied URLs against the configured base URL.

Resolution order:

1. blank        -> the base URL itself
2. absolute     -> unchanged
3. ``//host/x`` -> scheme of the *current page* + input
4. ``/path``    -> scheme and host of the base URL + path
5. ``path``     -> base URL + ``/`` + path

Root- and path-relative inputs use the configured base, not the host of
the page that is currently open.
"""

import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from framescope.core.errors import InvalidRedirectError

_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):(.*)$", re.DOTALL)

# Schemes that are absolute without an authority part.
OPAQUE_SCHEMES = ("about", "blob", "data", "file", "javascript", "mailto", "tel")


def is_absolute_url(url: str) -> bool:
    """
    True for ``scheme://...`` and opaque URLs like ``about:blank``.

    ``localhost:8080/x`` is treated as relative (host and port, no scheme).
    """
    match = _SCHEME_RE.match(url.strip())
    if not match:
        return False
    scheme, rest = match.group(1).lower(), match.group(2)
    if rest.startswith("//"):
        return True
    return scheme in OPAQUE_SCHEMES


def resolve_url(url: Optional[str], base_url: Optional[str], current_url: Optional[str] = None) -> str:
    """
    Turn ``url`` into the address the browser should open.

    Args:
        url: Absolute, protocol-relative, root-relative or relative URL.
        base_url: Base URL from the run configuration.
        current_url: URL of the page currently open; its scheme is reused
            for protocol-relative input.

    Raises:
        InvalidRedirectError: if both ``url`` and ``base_url`` are blank, or
            a relative ``url`` is given without a base URL.

    Example:
        >>> resolve_url("bar", "https://host:8080/app")
        'https://host:8080/app/bar'
    """
    url = (url or "").strip()
    base_url = (base_url or "").strip()

    if not url:
        if not base_url:
            raise InvalidRedirectError()
        return base_url

    if is_absolute_url(url):
        return url

    if url.startswith("//"):
        scheme = urlsplit(current_url).scheme if current_url else ""
        if scheme not in ("http", "https"):
            scheme = urlsplit(base_url).scheme or "http"
        return f"{scheme}:{url}"

    if not base_url:
        raise InvalidRedirectError(f"Cannot navigate to relative URL '{url}' without a base URL.")

    base = urlsplit(base_url)

    if url.startswith("/"):
        root = urlunsplit((base.scheme, base.netloc, "", "", ""))
        return root.rstrip("/") + "/" + url.lstrip("/")

    prefix = urlunsplit((base.scheme, base.netloc, base.path, "", ""))
    return prefix.rstrip("/") + "/" + url.lstrip("/")


def absolute_url(relative_url: str, base_url: str) -> str:
    """Join ``relative_url`` to the scheme, host and port of ``base_url``."""
    base = urlsplit(base_url)
    port = base.port or {"http": 80, "https": 443}.get(base.scheme)
    host = base.hostname or ""
    authority = f"{host}:{port}" if port else host
    if relative_url.startswith("/"):
        return f"{base.scheme}://{authority}{relative_url}"
    return f"{base.scheme}://{authority}/{relative_url}"


def url_path(url: str) -> str:
    """``url`` without query string and fragment."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
