import threading
from typing import Iterator, List

from linkweaver.domain.crawl_summary import CrawlSummary
from linkweaver.domain.result import Result, Status


class ResultLog:
    """Append-only, ordered record of every checked link in a run.

    Appends are serialized with a lock; with a single crawl thread the
    order is discovery order.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._results: List[Result] = []

    def append(self, result: Result) -> None:
        with self._lock:
            self._results.append(result)

    def results(self) -> List[Result]:
        """Return a snapshot copy of the recorded results."""
        with self._lock:
            return list(self._results)

    def __iter__(self) -> Iterator[Result]:
        return iter(self.results())

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def summary(self, elapsed_seconds: float = 0.0, stopped: bool = False) -> CrawlSummary:
        results = self.results()
        counts = {status: 0 for status in Status}
        for r in results:
            counts[r.status] += 1
        return CrawlSummary(
            total=len(results),
            ok=counts[Status.OK],
            skipped=counts[Status.SKIPPED],
            errors=counts[Status.ERROR],
            warnings=counts[Status.WARNING],
            elapsed_seconds=elapsed_seconds,
            stopped=stopped,
        )
