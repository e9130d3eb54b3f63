"""
Tests for the CLI entry point and container wiring.
Injecting the container lets the whole run be exercised against a fake site.
"""
import io
from types import SimpleNamespace

import pytest

from linkweaver.cli import build_parser, main, print_report
from linkweaver.container import Container
from linkweaver.domain.result import START, Result, Status
from linkweaver.domain.result_log import ResultLog
from linkweaver.services.http_service import HttpService
from linkweaver.services.link_checker import LinkChecker
from linkweaver.services.rate_limiter import AdaptiveRateLimiter

SEED = "https://example.com/"


def _site(url, headers=None, timeout=None, verify=True):
    pages = {
        SEED: (200, "OK", '<a href="/gone">gone</a><a href="/fine">fine</a>'),
        SEED + "fine": (200, "OK", "<p>fine</p>"),
    }
    code, reason, text = pages.get(url, (410, "Gone", ""))
    return SimpleNamespace(status_code=code, reason=reason, text=text, url=url, headers={"Content-Type": "text/html"})


@pytest.fixture
def container():
    c = Container()
    c.config.MAX_RATE.from_value(1000.0)
    c.http_service.override(HttpService("TestBot/1.0", http_client=_site))
    yield c
    c.http_service.reset_override()


def test_container_creates_services():
    container = Container()
    container.config.USER_AGENT.from_value("TestBot/1.0")
    container.config.HTTP_TIMEOUT.from_value(3)

    http_service = container.http_service()
    assert http_service.user_agent == "TestBot/1.0"
    assert http_service.timeout == 3
    assert container.result_classifier() is container.result_classifier()
    assert container.link_extractor() is not None


def test_container_builds_fresh_checker_per_run(container):
    first = container.link_checker()
    second = container.link_checker()

    assert isinstance(first, LinkChecker)
    assert first is not second
    assert first.rate_limiter is not second.rate_limiter
    assert first.visited is not second.visited
    assert isinstance(first.rate_limiter, AdaptiveRateLimiter)
    assert first.rate_limit() == 1000.0


def test_container_loads_host_rules_from_file(tmp_path):
    path = tmp_path / "rules.yml"
    path.write_text("host_rules:\n  - hosts: [example.com]\n    statuses: [410]\n    message: retired on purpose\n")
    container = Container()
    container.config.HOST_RULES_PATH.from_value(str(path))

    classifier = container.result_classifier()
    assert [r.message for r in classifier.host_rules] == ["retired on purpose"]


def test_main_reports_problems_and_summary(container):
    out = io.StringIO()
    code = main([SEED], container=container, out=out)

    text = out.getvalue()
    assert code == 0
    assert f"[ERROR] 410 Gone {SEED}gone (referrer: {SEED})" in text
    assert "Links: 3 (2 OK, 0 skipped, 1 errors, 0 warnings)" in text


def test_main_verbose_prints_ok_results(container):
    out = io.StringIO()
    main(["-v", SEED], container=container, out=out)
    assert f"[OK] 200 OK {SEED}fine (referrer: {SEED})" in out.getvalue()


def test_main_applies_flag_overrides(container):
    args = build_parser().parse_args(["--max-rate", "2", "--timeout", "1.5", "--insecure", SEED])
    assert args.max_rate == 2.0
    assert args.timeout == 1.5
    assert args.insecure

    main(["--max-rate", "2", SEED], container=container, out=io.StringIO())
    assert container.link_checker().rate_limiter.max_rate == 2.0


def test_main_fails_on_missing_host_rules(container, tmp_path, capsys):
    code = main(["--host-rules", str(tmp_path / "missing.yml"), SEED], container=container, out=io.StringIO())
    assert code == 1
    assert "missing.yml" in capsys.readouterr().err


def test_print_report_marks_interrupted_runs():
    log = ResultLog()
    log.append(Result(SEED, Status.WARNING, "503 Service Unavailable", START))
    out = io.StringIO()
    print_report(log, log.summary(elapsed_seconds=0.5, stopped=True), out)

    text = out.getvalue()
    assert "[WARNING] 503 Service Unavailable" in text
    assert "Check interrupted" in text
    assert text.rstrip().endswith("Links: 1 (0 OK, 0 skipped, 0 errors, 1 warnings) [0.5s]")
