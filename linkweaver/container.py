"""Dependency injection container for the application."""
from dependency_injector import containers, providers
import requests

from linkweaver import config as env
from linkweaver.services.host_rules import load_host_rules
from linkweaver.services.http_service import HttpService
from linkweaver.services.link_checker import LinkChecker
from linkweaver.services.link_extractor import LinkExtractor
from linkweaver.services.rate_limiter import AdaptiveRateLimiter
from linkweaver.services.result_classifier import ResultClassifier


# Environment variables used by the container (read via `linkweaver.config` helpers).
#
# USER_AGENT (str, default: a desktop browser User-Agent)
#   Sent with every request; some servers refuse unidentified clients.
#
# HTTP_TIMEOUT (float seconds, default: 5)
#   Per-request timeout.
#
# LINKWEAVER_VERIFY_TLS (bool, default: true)
#   Verify server certificates. Failures are reported as warnings.
#
# LINKWEAVER_MAX_RATE (float requests/second, default: 5.0)
#   Rate ceiling; the limiter starts here and never ramps above it.
#
# LINKWEAVER_RATE_COOLDOWN_SECONDS (float seconds, default: 10)
#   Minimum time since the last rate change before ramping back up.
#
# LINKWEAVER_MAX_THROTTLE_RETRIES (int, default: 10)
#   Retries of a link answering 429 before it is reported as a warning.
#
# LINKWEAVER_HOST_RULES_PATH (str | optional)
#   YAML file of per-host exceptions. Unset means the built-in rules.
ENV = {
    "USER_AGENT": env.USER_AGENT,
    "HTTP_TIMEOUT": env.HTTP_TIMEOUT,
    "VERIFY_TLS": env.VERIFY_TLS,
    "MAX_RATE": env.MAX_RATE,
    "RATE_COOLDOWN_SECONDS": env.RATE_COOLDOWN_SECONDS,
    "MAX_THROTTLE_RETRIES": env.MAX_THROTTLE_RETRIES,
    "HOST_RULES_PATH": env.HOST_RULES_PATH,
    "VERBOSE": False,
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for linkweaver."""

    # Configuration
    config = providers.Configuration(default=ENV)

    # One pooled session per process; a check run may hit the same host many times
    http_session = providers.Singleton(requests.Session)

    http_service = providers.Singleton(
        HttpService,
        user_agent=config.USER_AGENT.as_(str),
        http_client=http_session.provided.get,
        timeout=config.HTTP_TIMEOUT.as_(float),
        verify=config.VERIFY_TLS.as_(bool),
    )

    host_rules = providers.Singleton(
        load_host_rules,
        path=config.HOST_RULES_PATH,
    )

    result_classifier = providers.Singleton(
        ResultClassifier,
        host_rules=host_rules,
    )

    link_extractor = providers.Singleton(
        LinkExtractor
    )

    # Per-run state: a fresh limiter and checker for every check
    rate_limiter = providers.Factory(
        AdaptiveRateLimiter,
        max_rate=config.MAX_RATE.as_(float),
        cooldown_seconds=config.RATE_COOLDOWN_SECONDS.as_(float),
    )

    link_checker = providers.Factory(
        LinkChecker,
        http_service=http_service,
        classifier=result_classifier,
        link_extractor=link_extractor,
        rate_limiter=rate_limiter,
        verbose=config.VERBOSE.as_(bool),
        max_throttle_retries=config.MAX_THROTTLE_RETRIES.as_(int),
    )
