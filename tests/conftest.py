import io
from types import SimpleNamespace

import pytest
import requests

from linkweaver.services.http_service import HttpService
from linkweaver.services.link_checker import LinkChecker
from linkweaver.services.rate_limiter import AdaptiveRateLimiter


def make_response(url, status_code=200, reason="OK", text="", content_type="text/html; charset=utf-8"):
    headers = {"Content-Type": content_type} if content_type else {}
    return SimpleNamespace(status_code=status_code, reason=reason, text=text, url=url, headers=headers)


def html(*hrefs):
    anchors = "".join(f'<a href="{h}">link</a>' for h in hrefs)
    return f"<html><body>{anchors}</body></html>"


class FakeSite:
    """Callable standing in for `requests.get`.

    `pages` maps URL -> response entry (dict of make_response kwargs), an
    exception instance to raise, or a list of either to serve in turn.
    Unknown http(s) URLs answer 404; other schemes raise InvalidSchema
    like requests does.
    """

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.calls = []

    def __call__(self, url, headers=None, timeout=None, verify=True):
        self.calls.append(url)
        entry = self.pages.get(url)
        if isinstance(entry, list):
            entry = entry.pop(0) if len(entry) > 1 else entry[0]
        if entry is None:
            if not url.startswith(("http://", "https://")):
                raise requests.exceptions.InvalidSchema(f"No connection adapters were found for '{url}'")
            return make_response(url, 404, "Not Found", "404 page not found", "text/plain; charset=utf-8")
        if isinstance(entry, Exception):
            raise entry
        entry = dict(entry)
        final_url = entry.pop("url", url)
        return make_response(final_url, **entry)

    def count(self, url):
        return self.calls.count(url)


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now
        self.sleeps = []

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def make_checker():
    """Build a LinkChecker over a FakeSite with a fake clock, so nothing sleeps for real."""

    def _make(pages=None, verbose=False, max_rate=5.0, max_throttle_retries=10, real_clock=False, **kwargs):
        site = FakeSite(pages)
        clock = FakeClock()
        if real_clock:
            # stop_event.wait() sleeps for real, so the bucket must see real time
            limiter = AdaptiveRateLimiter(max_rate=max_rate, cooldown_seconds=10)
        else:
            limiter = AdaptiveRateLimiter(max_rate=max_rate, cooldown_seconds=10, clock=clock, sleep=clock.sleep)
        output = io.StringIO()
        checker = LinkChecker(
            http_service=HttpService("TestAgent", http_client=site),
            rate_limiter=limiter,
            output=output,
            verbose=verbose,
            max_throttle_retries=max_throttle_retries,
            **kwargs,
        )
        return SimpleNamespace(checker=checker, site=site, clock=clock, limiter=limiter, output=output)

    return _make
