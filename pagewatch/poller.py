from __future__ import annotations

import logging
import time
from typing import Any

from pagewatch.checks.page_fetch import fetch_page
from pagewatch.checks.results import NOT_MEASURED, PollResult
from pagewatch.config import settings
from pagewatch.errors import TimeoutExceeded, TransientFetchError, failure_message
from pagewatch.models import PollRequest

logger = logging.getLogger(__name__)


def _now_ms() -> float:
    return time.perf_counter() * 1000


def poll_interval(request: PollRequest) -> float:
    if request.poll_interval_s is not None:
        return request.poll_interval_s
    if request.measure_latency:
        return settings.MEASURE_INTERVAL_SECONDS
    return settings.POLL_INTERVAL_SECONDS


def poll(request: PollRequest, *, raise_on_timeout: bool = True) -> PollResult:
    """Fetch ``request.url`` until ``request.target`` shows up in the body.

    Transient fetch failures count as "not there yet". When the timeout runs
    out a ``TimeoutExceeded`` is raised, unless ``raise_on_timeout`` is off,
    in which case a result with ``found=False`` comes back instead.
    ``elapsed_ms`` is only measured in latency mode.
    """
    url = str(request.url)
    interval_s = poll_interval(request)
    connect_timeout_s = request.connect_timeout_s or settings.CONNECT_TIMEOUT_SECONDS
    read_timeout_s = request.read_timeout_s or settings.READ_TIMEOUT_SECONDS
    window_ms = request.timeout_s * 1000

    logger.info(
        "Starting to test web page at %s for string `%s` with timeout of %s seconds.",
        url,
        request.target,
        request.timeout_s,
    )

    start = _now_ms()
    now = start
    body = ""
    attempts = 0
    found = False
    found_at: float | None = None

    while now - start < window_ms:
        attempts += 1
        logger.debug("Attempting to connect to %s", url)
        try:
            body = fetch_page(url, connect_timeout_s, read_timeout_s)
        except TransientFetchError as exc:
            logger.debug(
                "Waiting `%s' to appear on %s Exception : %s",
                request.target,
                url,
                exc,
            )
        else:
            if request.target in body:
                found = True
                if request.measure_latency:
                    found_at = _now_ms()
                logger.info("String: %s found on the page.", request.target)
                break
            logger.debug("String not found on the page. Retrying...")

        time.sleep(interval_s)
        now = _now_ms()

    if found:
        elapsed_ms = int(found_at - start) if found_at is not None else NOT_MEASURED
        return PollResult(found=True, elapsed_ms=elapsed_ms, attempts=attempts, last_body=body)

    logger.info(failure_message(url, request.timeout_s, request.target, body))
    if raise_on_timeout:
        raise TimeoutExceeded(url, request.timeout_s, request.target, body)
    return PollResult(found=False, attempts=attempts, last_body=body)


def wait_for_page(
    url: str,
    timeout_s: int,
    target: str,
    measure_latency: bool = False,
    **overrides: Any,
) -> int:
    """Block until ``target`` appears at ``url``; return the elapsed milliseconds.

    The return value is ``-1`` unless ``measure_latency`` is set.
    """
    request = PollRequest.create(
        url=url,
        timeout_s=timeout_s,
        target=target,
        measure_latency=measure_latency,
        **overrides,
    )
    return poll(request).elapsed_ms
