"""Crawl summary data model."""
from typing import NamedTuple


class CrawlSummary(NamedTuple):
    """Counts of a finished (or cancelled) run, for reporting.

    Lets callers distinguish a completed run from one stopped early.
    """
    total: int
    ok: int
    skipped: int
    errors: int
    warnings: int
    elapsed_seconds: float = 0.0
    stopped: bool = False

    def __str__(self) -> str:
        return (
            f"Links: {self.total} ({self.ok} OK, {self.skipped} skipped, "
            f"{self.errors} errors, {self.warnings} warnings) [{self.elapsed_seconds:.1f}s]"
        )
