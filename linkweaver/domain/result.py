"""Crawl result data model."""
from enum import Enum
from typing import NamedTuple

START = "START"
"""Referrer recorded for the seed page."""


class Status(str, Enum):
    OK = "OK"
    ERROR = "ERROR"
    WARNING = "WARNING"
    SKIPPED = "SKIPPED"

    def __str__(self) -> str:
        return self.value


class Result(NamedTuple):
    """Outcome of checking a single link."""
    link: str
    status: Status
    message: str
    referrer: str

    @property
    def is_problem(self) -> bool:
        """True for results that are always reported (errors and warnings)."""
        return self.status in (Status.ERROR, Status.WARNING)

    def __str__(self) -> str:
        return f"[{self.status}] {self.message} {self.link} (referrer: {self.referrer})"
