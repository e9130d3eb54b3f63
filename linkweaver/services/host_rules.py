import logging
import os
from dataclasses import dataclass
from typing import Iterable, Optional

import yaml

from linkweaver.exceptions import ConfigNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HostRule:
    """A known, expected non-success answer from a specific host.

    Matching responses are reported as skipped with `message` instead of
    being counted as broken links.
    """

    hosts: frozenset
    statuses: frozenset
    message: str

    def matches(self, host: Optional[str], status_code: int) -> bool:
        return host is not None and host in self.hosts and status_code in self.statuses


FORBIDDING_HOSTS = frozenset((
    "www.npmjs.com",
    "www.fiverr.com",
    "www.researchgate.net",
    "www.udemy.com",
    "medium.com",
))

DEFAULT_HOST_RULES: tuple = (
    HostRule(
        hosts=frozenset(("www.reuters.com",)),
        statuses=frozenset((401,)),
        message="This site always returns 'unauthorized' to bots",
    ),
    HostRule(
        hosts=frozenset(("twitter.com",)),
        statuses=frozenset((400,)),
        message="This site always returns 'bad request' to bots",
    ),
    HostRule(
        hosts=FORBIDDING_HOSTS,
        statuses=frozenset((403,)),
        message="This site always returns 'forbidden' to bots",
    ),
    HostRule(
        hosts=frozenset(("www.linkedin.com",)),
        statuses=frozenset((999,)),
        message="This site always returns code 999 to bots",
    ),
)


class HostRulesParser:
    """Parse a YAML dict into an ordered tuple of HostRule.

    Responsibility: schema/validation for host rule files.
    It does NOT perform filesystem IO.
    """

    def parse(self, data: dict) -> tuple:
        if not isinstance(data, dict):
            raise ValueError("host rules document must be a mapping")
        entries = data.get("host_rules")
        if not isinstance(entries, list):
            raise ValueError("'host_rules' must be a list")

        rules = tuple(self._parse_rule(i, entry) for i, entry in enumerate(entries))
        if data.get("include_defaults", False):
            rules = rules + DEFAULT_HOST_RULES
        return rules

    def _parse_rule(self, index: int, entry) -> HostRule:
        if not isinstance(entry, dict):
            raise ValueError(f"host_rules[{index}] must be a mapping")
        hosts = self._as_list(entry.get("hosts", entry.get("host")))
        statuses = self._as_list(entry.get("statuses", entry.get("status")))
        message = entry.get("message")
        if not hosts:
            raise ValueError(f"host_rules[{index}] has no hosts")
        if not statuses:
            raise ValueError(f"host_rules[{index}] has no statuses")
        if not message or not isinstance(message, str):
            raise ValueError(f"host_rules[{index}] has no message")
        try:
            codes = frozenset(int(s) for s in statuses)
        except (TypeError, ValueError):
            raise ValueError(f"host_rules[{index}] has a non-numeric status") from None
        return HostRule(
            hosts=frozenset(str(h).strip().lower() for h in hosts),
            statuses=codes,
            message=message,
        )

    @staticmethod
    def _as_list(value) -> list:
        if value is None:
            return []
        if isinstance(value, (list, tuple, set)):
            return list(value)
        return [value]


def load_host_rules(path: Optional[str], parser: Optional[HostRulesParser] = None) -> tuple:
    """Load host rules from a YAML file, or return the defaults when `path` is unset."""
    if not path:
        return DEFAULT_HOST_RULES
    if not os.path.isfile(path):
        raise ConfigNotFoundError(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigNotFoundError(path, f"could not be read: {e}") from e

    try:
        rules = (parser or HostRulesParser()).parse(data)
    except ValueError as e:
        raise ConfigNotFoundError(path, f"is invalid: {e}") from e
    logger.info("Loaded %d host rules from %s", len(rules), path)
    return rules


def find_rule(rules: Iterable[HostRule], host: Optional[str], status_code: int) -> Optional[HostRule]:
    for rule in rules:
        if rule.matches(host, status_code):
            return rule
    return None
