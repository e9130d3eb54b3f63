import threading
from typing import Set


class VisitedTracker:
    """
    Tracks which URLs have been enqueued or fetched during one check run.

    Kept separate from the crawl engine so that:
    - the atomic test-and-insert can be tested on its own
    - a parallel fetcher can share one tracker between workers

    The tracker is unbounded. Evicting entries would let a URL be
    fetched (and reported) twice in the same run.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._visited: Set[str] = set()

    def add_if_new(self, url: str) -> bool:
        """Mark `url` visited; return True only if it was not visited before."""
        with self._lock:
            if url in self._visited:
                return False
            self._visited.add(url)
            return True

    def mark(self, url: str) -> None:
        """Mark a URL as visited."""
        with self._lock:
            self._visited.add(url)

    def is_visited(self, url: str) -> bool:
        """Check if a URL has been visited."""
        with self._lock:
            return url in self._visited

    def __len__(self) -> int:
        with self._lock:
            return len(self._visited)
