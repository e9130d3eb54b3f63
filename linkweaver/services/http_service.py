import ssl
from typing import Callable

import requests

from linkweaver.domain.http_response import HttpResponse
from linkweaver.exceptions import HttpFetchError, TlsVerificationError


def is_certificate_error(exc: BaseException) -> bool:
    """True if a certificate verification failure is anywhere in the cause chain.

    requests wraps the ssl error a few levels deep (SSLError -> MaxRetryError
    -> urllib3 SSLError -> ssl.SSLCertVerificationError), so follow `args`,
    `reason`, `__cause__` and `__context__`.
    """
    pending = [exc]
    seen = set()
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, ssl.SSLCertVerificationError):
            return True
        linked = list(current.args) + [getattr(current, "reason", None), current.__cause__, current.__context__]
        pending.extend(e for e in linked if isinstance(e, BaseException))
    return False


class HttpService:
    """
    HTTP client wrapper for fetching links.

    Requires http_client callable for dependency injection (e.g. `requests.get`
    or a `requests.Session().get`). This enables easy testing without patching
    and keeps timeout/TLS settings in one place.
    """

    def __init__(self, user_agent: str, http_client: Callable, timeout: float = 5, verify: bool = True):
        self.user_agent = user_agent
        self.timeout = timeout
        self.verify = verify
        self.http_client = http_client

    def fetch(self, url: str) -> HttpResponse:
        """Fetch URL and return status, reason, final URL, Content-Type and body text.

        Raises TlsVerificationError for certificate verification failures and
        HttpFetchError for any other transport failure, other TLS errors included.
        """
        headers = {"User-Agent": self.user_agent}
        try:
            resp = self.http_client(url, headers=headers, timeout=self.timeout, verify=self.verify)
        except requests.exceptions.SSLError as e:
            if is_certificate_error(e):
                raise TlsVerificationError(url, e) from e
            raise HttpFetchError(url, e) from e
        except requests.exceptions.RequestException as e:
            raise HttpFetchError(url, e) from e

        # Let real exceptions from the response object bubble up.
        ct = None
        if hasattr(resp, 'headers'):
            ct = resp.headers.get('Content-Type')

        response = HttpResponse(
            status_code=resp.status_code,
            text="",
            content_type=ct,
            reason=resp.reason or "",
            url=resp.url or url,
        )
        if response.is_html:
            # Only decode bodies we are going to parse for links.
            response = response._replace(text=resp.text)
        return response
