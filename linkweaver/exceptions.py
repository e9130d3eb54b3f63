"""Custom exceptions for linkweaver."""


class ConfigNotFoundError(Exception):
    """Raised when a requested config file is missing or cannot be parsed."""

    def __init__(self, config_path: str, reason: str = "not found"):
        self.config_path = config_path
        self.reason = reason
        super().__init__(f"Config '{config_path}' {reason}")


class HttpFetchError(Exception):
    """Raised when an HTTP fetch fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"HTTP fetch failed for {url}: {original}")


class TlsVerificationError(HttpFetchError):
    """Raised when the server certificate could not be verified.

    Kept apart from other transport failures because an expired or
    self-signed certificate usually still serves the page.
    """


class LinkParseError(Exception):
    """Raised when a seed or discovered link is not a usable URL."""

    def __init__(self, link: str, reason: str):
        self.link = link
        self.reason = reason
        super().__init__(f'parse "{link}": {reason}')
