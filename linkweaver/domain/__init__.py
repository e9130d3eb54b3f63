"""Domain objects for linkweaver - explicit re-exports to satisfy linters."""
from .result import Result as Result
from .result import Status as Status
from .result import START as START
from .http_response import HttpResponse as HttpResponse
from .crawl_summary import CrawlSummary as CrawlSummary
from .result_log import ResultLog as ResultLog
from .visited_tracker import VisitedTracker as VisitedTracker

__all__ = ["Result", "Status", "START", "HttpResponse", "CrawlSummary", "ResultLog", "VisitedTracker"]
