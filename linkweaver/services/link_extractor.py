import logging
from typing import Callable, Optional

from bs4 import BeautifulSoup, SoupStrainer
from bs4.builder import ParserRejectedMarkup

logger = logging.getLogger(__name__)

ANCHOR_STRAINER = SoupStrainer("a", href=True)


class LinkExtractor:
    """Pull anchor targets out of an HTML page.

    Returns the raw `href` values in document order; resolving them is the
    caller's job, since a bad href still has to be reported as written.
    """

    def __init__(
        self,
        soup_factory: Optional[Callable[[str], BeautifulSoup]] = None,
    ):
        self._soup_factory = soup_factory or (
            lambda html: BeautifulSoup(html, "html.parser", parse_only=ANCHOR_STRAINER)
        )

    def extract_links(self, html: Optional[str]) -> list[str]:
        if not html:
            return []
        try:
            soup = self._soup_factory(html)
        except ParserRejectedMarkup:
            # Malformed markup is not a broken link; just stop here.
            logger.debug("Markup rejected by parser; no links extracted")
            return []
        return [a.get("href") for a in soup.find_all("a", href=True)]
