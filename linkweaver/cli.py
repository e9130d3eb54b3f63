"""
Command-line interface for the link checker.
"""
from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
import time
from typing import Optional, TextIO

from linkweaver import config
from linkweaver.container import Container
from linkweaver.domain.crawl_summary import CrawlSummary
from linkweaver.domain.result_log import ResultLog
from linkweaver.exceptions import ConfigNotFoundError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkweaver",
        description="Check every link reachable from a page on your site and report the broken ones.",
    )
    parser.add_argument("url", help="Start URL (e.g. https://example.com)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Report every link, not just problems")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging on stderr")
    parser.add_argument("--max-rate", type=float, help="Maximum requests per second")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument("--host-rules", help="YAML file of per-host exceptions")
    parser.add_argument("--insecure", action="store_true", help="Do not verify TLS certificates")
    return parser


def setup_logging(debug: bool = False) -> None:
    level = logging.DEBUG if debug else getattr(logging, config.log_level(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def apply_overrides(container: Container, args: argparse.Namespace) -> None:
    container.config.VERBOSE.from_value(bool(args.verbose))
    if args.max_rate is not None:
        container.config.MAX_RATE.from_value(args.max_rate)
    if args.timeout is not None:
        container.config.HTTP_TIMEOUT.from_value(args.timeout)
    if args.host_rules:
        container.config.HOST_RULES_PATH.from_value(args.host_rules)
    if args.insecure:
        container.config.VERIFY_TLS.from_value(False)


def print_report(log: ResultLog, summary: CrawlSummary, out: TextIO) -> None:
    """Repeat the problems found, then the summary line."""
    problems = [r for r in log if r.is_problem]
    if problems:
        out.write("\n")
        for result in problems:
            out.write(f"{result}\n")
    if summary.stopped:
        out.write("\nCheck interrupted; results are partial.\n")
    out.write(f"\n{summary}\n")


def main(argv: Optional[list[str]] = None, container: Optional[Container] = None, out: Optional[TextIO] = None) -> int:
    """Main entry point for the link checker CLI."""
    args = build_parser().parse_args(argv)
    setup_logging(args.debug)
    out = out or sys.stdout

    container = container or Container()
    apply_overrides(container, args)

    try:
        checker = container.link_checker(output=out)
    except ConfigNotFoundError as e:
        logger.error("%s", e)
        sys.stderr.write(f"error: {e}\n")
        return 1

    stop_event = threading.Event()

    def _on_interrupt(signum, frame):
        logger.info("Interrupt received; stopping check")
        stop_event.set()

    previous = None
    if threading.current_thread() is threading.main_thread():
        previous = signal.signal(signal.SIGINT, _on_interrupt)

    start = time.monotonic()
    try:
        log = checker.check(args.url, stop_event=stop_event)
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)

    summary = log.summary(elapsed_seconds=time.monotonic() - start, stopped=checker.stopped)
    print_report(log, summary, out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
