import logging
import sys
import threading
from typing import Iterator, List, Optional, TextIO, Tuple

import requests

from linkweaver import config
from linkweaver.domain.result import START, Result
from linkweaver.domain.result_log import ResultLog
from linkweaver.domain.visited_tracker import VisitedTracker
from linkweaver.exceptions import HttpFetchError, LinkParseError
from linkweaver.services.http_service import HttpService
from linkweaver.services.link_extractor import LinkExtractor
from linkweaver.services.rate_limiter import AdaptiveRateLimiter
from linkweaver.services.result_classifier import ResultClassifier
from linkweaver.utils.urls import is_fetchable, parse_seed, resolve_link, same_host

logger = logging.getLogger(__name__)


class LinkChecker:
    """Checks every link reachable from a seed page on the same site.

    One instance covers one run: it owns the visited set, the rate limiter
    and the result log, and none of them are shared with other runs.

    Traversal is depth-first in document order, like a recursive crawl, but
    driven by an explicit stack of per-page link iterators so deep sites do
    not exhaust the Python call stack. Off-site pages are fetched and
    classified but never parsed.
    """

    def __init__(
        self,
        *,
        http_service: Optional[HttpService] = None,
        classifier: Optional[ResultClassifier] = None,
        link_extractor: Optional[LinkExtractor] = None,
        rate_limiter: Optional[AdaptiveRateLimiter] = None,
        output: Optional[TextIO] = None,
        verbose: bool = False,
        max_rate: float = config.MAX_RATE,
        max_throttle_retries: int = config.MAX_THROTTLE_RETRIES,
    ):
        self.http_service = http_service or HttpService(
            config.USER_AGENT,
            http_client=requests.get,
            timeout=config.HTTP_TIMEOUT,
            verify=config.VERIFY_TLS,
        )
        self.classifier = classifier or ResultClassifier()
        self.link_extractor = link_extractor or LinkExtractor()
        self.rate_limiter = rate_limiter or AdaptiveRateLimiter(
            max_rate=max_rate,
            cooldown_seconds=config.RATE_COOLDOWN_SECONDS,
        )
        self.output = output if output is not None else sys.stdout
        self.verbose = verbose
        self.max_throttle_retries = max(0, int(max_throttle_retries))

        self.base_url: Optional[str] = None
        self.visited = VisitedTracker()
        self.result_log = ResultLog()
        self.stopped = False

    def _is_stopped(self, stop_event: Optional[threading.Event]) -> bool:
        return stop_event is not None and getattr(stop_event, "is_set", lambda: False)()

    def check(self, seed: str, stop_event: Optional[threading.Event] = None) -> ResultLog:
        """Check `seed` and everything reachable from it on the same host.

        Returns the result log, which is partial if `stop_event` was set.
        """
        try:
            base = parse_seed(seed)
        except LinkParseError as e:
            logger.warning("Invalid seed URL %s: %s", seed, e)
            self.record(self.classifier.classify(seed, START, error=e))
            return self.result_log

        self.base_url = base
        self.visited.mark(base)
        logger.info("Starting check of %s", base)
        self.crawl(base, START, stop_event)
        logger.info("Finished check of %s: %d results (stopped=%s)", base, len(self.result_log), self.stopped)
        return self.result_log

    def crawl(self, page: str, referrer: str, stop_event: Optional[threading.Event] = None) -> bool:
        """Check `page` and, depth-first, every unvisited link found below it.

        The caller is responsible for marking `page` visited. Returns False
        if the crawl was cancelled.
        """
        hrefs, stopped = self.visit(page, referrer, stop_event)
        if stopped:
            return self._stop()

        stack: List[Tuple[str, Iterator[str]]] = [(page, iter(hrefs))]
        while stack:
            current, remaining = stack[-1]
            href = next(remaining, None)
            if href is None:
                stack.pop()
                continue

            link = self._claim_link(href, current)
            if link is None:
                continue

            hrefs, stopped = self.visit(link, current, stop_event)
            if stopped:
                return self._stop()
            stack.append((link, iter(hrefs)))
        return True

    def _stop(self) -> bool:
        self.stopped = True
        logger.info("Check cancelled; %d results recorded", len(self.result_log))
        return False

    def _claim_link(self, href: str, page: str) -> Optional[str]:
        """Resolve `href` found on `page` and claim it in the visited set.

        Returns the absolute URL to visit, or None when there is nothing to do.
        A link that does not parse is recorded and the rest of the page is
        still processed.
        """
        try:
            link = resolve_link(href, page)
        except LinkParseError as e:
            self.record(self.classifier.classify(href, page, error=e))
            return None

        if not is_fetchable(link):
            logger.debug("Skipping (not fetchable) %s", link)
            return None
        if not self.visited.add_if_new(link):
            logger.debug("Skipping (visited) %s", link)
            return None
        return link

    def visit(self, page: str, referrer: str, stop_event: Optional[threading.Event] = None) -> Tuple[List[str], bool]:
        """Fetch, classify and record one page.

        Returns (hrefs, stopped): the raw link targets to follow, empty for
        failed or off-site pages, and whether cancellation was observed.
        """
        retries = 0
        while True:
            if not self.rate_limiter.wait(stop_event) or self._is_stopped(stop_event):
                logger.info("Fetch cancelled for %s", page)
                return [], True
            try:
                response = self.http_service.fetch(page)
            except HttpFetchError as e:
                logger.warning("Fetch failed for %s: %s", page, e)
                self.record(self.classifier.classify(page, referrer, error=e))
                return [], False

            if response.status_code != 429:
                break
            if retries >= self.max_throttle_retries:
                logger.warning("Giving up on %s after %d throttled retries", page, retries)
                self.record(self.classifier.classify_throttled(page, referrer, response, retries))
                return [], False
            retries += 1
            self.reduce_rate_limit()

        new_rate = self.rate_limiter.maybe_ramp_up()
        if new_rate is not None:
            self._info(f"increasing rate limit to {new_rate:.2f}r/s")

        self.record(self.classifier.classify(page, referrer, response=response))

        if self.base_url is None or not same_host(self.base_url, response.url or page):
            logger.debug("Not parsing (external) %s", page)
            return [], False
        if not response.is_html:
            logger.debug("Not parsing (content type %s) %s", response.content_type, page)
            return [], False
        return self.link_extractor.extract_links(response.text), False

    def record(self, result: Result) -> None:
        self.result_log.append(result)
        if result.is_problem or self.verbose:
            print(result, file=self.output)

    def _info(self, message: str) -> None:
        if self.verbose:
            print(f"[INFO] {message}", file=self.output)

    def results(self) -> List[Result]:
        return self.result_log.results()

    def set_rate_limit(self, rate: float) -> None:
        self.rate_limiter.set_rate(rate)

    def rate_limit(self) -> float:
        return self.rate_limiter.rate

    def reduce_rate_limit(self) -> float:
        new_rate = self.rate_limiter.throttle_down()
        self._info(f"reducing rate limit to {new_rate:.2f}r/s")
        return new_rate
