import logging
from typing import Optional, Sequence

from linkweaver.domain.http_response import HttpResponse
from linkweaver.domain.result import Result, Status
from linkweaver.exceptions import TlsVerificationError
from linkweaver.services.host_rules import DEFAULT_HOST_RULES, HostRule, find_rule
from linkweaver.utils.urls import host_of

logger = logging.getLogger(__name__)

# Statuses that mean the target is genuinely gone or unreachable.
DEAD_STATUSES = frozenset((400, 401, 403, 404, 406, 410))


class ResultClassifier:
    """Turns a fetch outcome into a Result.

    Priority: certificate errors warn, other errors fail, 200 is OK, dead
    statuses fail, anything else warns. A matching host rule downgrades a
    failing or warning status to SKIPPED, exhausted 429 retries included.
    """

    def __init__(self, host_rules: Optional[Sequence[HostRule]] = None):
        self.host_rules = tuple(DEFAULT_HOST_RULES if host_rules is None else host_rules)

    def classify(
        self,
        link: str,
        referrer: str,
        error: Optional[Exception] = None,
        response: Optional[HttpResponse] = None,
    ) -> Result:
        if error is not None:
            status = Status.WARNING if isinstance(error, TlsVerificationError) else Status.ERROR
            return Result(link=link, status=status, message=str(error), referrer=referrer)

        if response is None:
            raise ValueError("either error or response is required")

        code = response.status_code
        if code == 200:
            return Result(link=link, status=Status.OK, message=response.status_line, referrer=referrer)

        rule = find_rule(self.host_rules, host_of(link), code)
        if rule is not None:
            logger.debug("Host rule matched %s (%s)", link, code)
            return Result(link=link, status=Status.SKIPPED, message=rule.message, referrer=referrer)

        status = Status.ERROR if code in DEAD_STATUSES else Status.WARNING
        return Result(link=link, status=status, message=response.status_line, referrer=referrer)

    def classify_throttled(self, link: str, referrer: str, response: HttpResponse, attempts: int) -> Result:
        """Result for a link that kept answering 429 after `attempts` retries."""
        rule = find_rule(self.host_rules, host_of(link), response.status_code)
        if rule is not None:
            logger.debug("Host rule matched %s (%s)", link, response.status_code)
            return Result(link=link, status=Status.SKIPPED, message=rule.message, referrer=referrer)
        return Result(
            link=link,
            status=Status.WARNING,
            message=f"{response.status_line} (gave up after {attempts} retries)",
            referrer=referrer,
        )
