from typing import Optional
from urllib.parse import urldefrag, urljoin, urlsplit

from linkweaver.exceptions import LinkParseError

# Schemes that cannot be fetched over HTTP; links using them are ignored.
# Unknown schemes are still fetched so that typos (e.g. "httq") get reported.
NON_FETCHABLE_SCHEMES = frozenset(("mailto", "tel", "sms", "javascript", "data", "about", "file"))


def resolve_link(href: str, base_url: Optional[str] = None) -> str:
    """Resolve `href` against `base_url` and return an absolute URL without fragment.

    Raises LinkParseError when the result is not a usable URL.
    """
    link = href.strip()
    try:
        joined = urljoin(base_url, link) if base_url else link
        joined, _ = urldefrag(joined)
        parsed = urlsplit(joined)
        # .port validates the port component lazily
        parsed.port
    except ValueError as e:
        raise LinkParseError(href, str(e)) from e

    if parsed.scheme in ("http", "https"):
        if any(ch.isspace() for ch in parsed.netloc):
            raise LinkParseError(href, 'invalid character " " in host name')
        if not parsed.hostname:
            raise LinkParseError(href, "missing host")
    return joined


def parse_seed(seed: str) -> str:
    """Validate the seed URL and normalize it to end with a path separator."""
    url = resolve_link(seed)
    parsed = urlsplit(url)
    if not parsed.scheme or not parsed.netloc:
        raise LinkParseError(seed, "seed must be an absolute URL with a scheme")
    if not url.endswith("/"):
        url += "/"
    return url


def is_fetchable(url: str) -> bool:
    scheme = urlsplit(url).scheme.lower()
    return scheme not in NON_FETCHABLE_SCHEMES


def host_of(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    try:
        return urlsplit(url).hostname
    except ValueError:
        return None


def same_host(base: str, other: str) -> bool:
    b = host_of(base)
    o = host_of(other)
    return b is not None and b == o
