from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from pagewatch.checks.results import NOT_MEASURED, PollResult
from pagewatch.config import settings
from pagewatch.errors import FatalFetchError, InvalidArgument, PlanError, TimeoutExceeded
from pagewatch.models import PollRequest
from pagewatch.poller import poll
from pagewatch.registry import load_plan
from pagewatch.runner import run_plan, summarize

EXIT_OK = 0
EXIT_TIMEOUT = 1
EXIT_USAGE = 2


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pagewatch",
        description="Wait until a web page contains a string",
    )
    parser.add_argument("url", nargs="?", help="Page to poll")
    parser.add_argument("target", nargs="?", help="Literal text that must appear on the page")
    parser.add_argument("--timeout", type=int, default=60, help="Seconds to keep polling")
    parser.add_argument(
        "--measure",
        action="store_true",
        help="Poll tightly and report milliseconds until the text appeared",
    )
    parser.add_argument("--interval", type=float, default=None, help="Seconds between attempts")
    parser.add_argument(
        "--connect-timeout", type=float, default=None, help="Per-attempt connect timeout"
    )
    parser.add_argument("--plan", type=Path, default=None, help="YAML wait plan")
    args = parser.parse_args(argv)

    if args.plan is None and (not args.url or not args.target):
        parser.error("url and target are required unless --plan is given")
    return args


def _describe(name: str, res: PollResult) -> str:
    if res.error:
        return f"{name}: ERROR {res.error}"
    if not res.found:
        return f"{name}: MISSING after {res.attempts} attempts"
    if res.elapsed_ms == NOT_MEASURED:
        return f"{name}: FOUND"
    return f"{name}: FOUND in {res.elapsed_ms} ms"


def _run_single(args: argparse.Namespace) -> int:
    request = PollRequest.create(
        url=args.url,
        timeout_s=args.timeout,
        target=args.target,
        measure_latency=args.measure,
        poll_interval_s=args.interval,
        connect_timeout_s=args.connect_timeout,
    )
    try:
        res = poll(request)
    except TimeoutExceeded as exc:
        print(exc, file=sys.stderr)
        return EXIT_TIMEOUT
    print(_describe(str(request.url), res))
    return EXIT_OK


def _run_plan(path: Path) -> int:
    results = run_plan(load_plan(path))
    for page_id, res in results.items():
        print(_describe(page_id, res))
    return EXIT_OK if summarize(results)["ok"] else EXIT_TIMEOUT


def _log_level(name: str) -> int:
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise InvalidArgument(f"Unknown log level: {name}")
    return level


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    try:
        logging.basicConfig(
            level=_log_level(settings.LOG_LEVEL),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        if args.plan is not None:
            return _run_plan(args.plan)
        return _run_single(args)
    except (InvalidArgument, PlanError, FatalFetchError) as exc:
        print(exc, file=sys.stderr)
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
