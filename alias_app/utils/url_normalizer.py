"""
URL normalization utilities.

Canonical URLs are compared byte for byte, so everything that makes two URLs
point at the same resource has to be folded here:
- Missing scheme gets https://
- Scheme and host are lowercased (path case is kept)
- Duplicate and trailing slashes are removed, root path is "/"
- Query parameters are sorted by key, empty keys dropped
- Credentials are percent-encoded, fragments kept as-is
"""

import logging
import re
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
_LOCALHOST_RE = re.compile(r"^localhost", re.IGNORECASE)
_INVALID_HOST_CHARS = set(" \t\r\n<>\"{}|\\^`")
_PATH_SAFE = "/%:@!$&'()*+,;=-._~"
_DEFAULT_PORTS = {"http": 80, "https": 443}


def _looks_like_url(url: str) -> bool:
    """Cheap heuristic: explicit scheme, a dot, or localhost."""
    if _SCHEME_RE.match(url):
        return True
    return "." in url or bool(_LOCALHOST_RE.match(url))


def _normalize_host(hostname: str) -> str:
    if any(char in _INVALID_HOST_CHARS for char in hostname):
        raise ValueError(f"Invalid host: {hostname!r}")
    host = hostname.lower()
    if not host.isascii():
        host = host.encode("idna").decode("ascii")
    if ":" in host:
        # IPv6 literal, urlsplit strips the brackets
        host = f"[{host}]"
    return host


def _normalize_path(path: str) -> str:
    path = re.sub(r"/+", "/", path)
    path = path.rstrip("/")
    if not path:
        return "/"
    return quote(path, safe=_PATH_SAFE)


def _normalize_query(query: str) -> str:
    pairs = [
        (key, value)
        for key, value in parse_qsl(query, keep_blank_values=True)
        if key
    ]
    if not pairs:
        return ""
    # sorted() is stable, so repeated keys keep their original order
    pairs.sort(key=lambda pair: pair[0])
    return "?" + urlencode(pairs)


def _normalize_userinfo(username, password) -> str:
    if not username:
        return ""
    userinfo = quote(unquote(username), safe="")
    if password:
        userinfo += ":" + quote(unquote(password), safe="")
    return userinfo + "@"


def normalize(url: str) -> str:
    """
    Normalize a URL into its canonical form.

    Strings that do not look like URLs, and anything that fails to parse,
    are returned unchanged. The result is idempotent:
    normalize(normalize(url)) == normalize(url).

    Args:
        url: Raw URL as typed by the user

    Returns:
        Canonical URL, or the input itself when it is not a URL
    """
    if not url:
        return ""

    try:
        if not _looks_like_url(url):
            return url

        candidate = url if _SCHEME_RE.match(url) else f"https://{url}"
        parts = urlsplit(candidate)

        scheme = parts.scheme.lower()
        if not parts.hostname:
            raise ValueError("URL has no host")
        host = _normalize_host(parts.hostname)

        port = parts.port  # raises ValueError for out-of-range ports
        port_part = ""
        if port is not None and _DEFAULT_PORTS.get(scheme) != port:
            port_part = f":{port}"

        result = (
            f"{scheme}://"
            f"{_normalize_userinfo(parts.username, parts.password)}"
            f"{host}{port_part}"
            f"{_normalize_path(parts.path)}"
            f"{_normalize_query(parts.query)}"
        )
        if parts.fragment:
            result += f"#{parts.fragment}"
        return result

    except (ValueError, UnicodeError) as e:
        logger.debug(f"Leaving URL unnormalized {url!r}: {e}")
        return url


def are_equivalent(url1: str, url2: str) -> bool:
    """Check whether two URLs normalize to the same canonical form"""
    return normalize(url1) == normalize(url2)


def is_absolute_http_url(url: str) -> bool:
    """True for absolute http(s) URLs with a host"""
    try:
        parts = urlsplit(url)
        return parts.scheme in ("http", "https") and bool(parts.hostname)
    except ValueError:
        return False
