from __future__ import annotations

import logging
from typing import Any

from pagewatch.checks.results import PollResult
from pagewatch.errors import FatalFetchError
from pagewatch.models import WaitPlan
from pagewatch.poller import poll
from pagewatch.registry import apply_defaults

logger = logging.getLogger(__name__)


def run_plan(plan: WaitPlan) -> dict[str, PollResult]:
    results: dict[str, PollResult] = {}
    for page_id, request in apply_defaults(plan).items():
        logger.debug("Waiting for page %s", page_id)
        try:
            results[page_id] = poll(request, raise_on_timeout=False)
        except FatalFetchError as exc:
            # Record it and carry on with the remaining pages.
            logger.warning("Giving up on page %s: %s", page_id, exc)
            results[page_id] = PollResult(found=False, attempts=1, error=str(exc))
    return results


def summarize(results: dict[str, PollResult]) -> dict[str, Any]:
    found = [page_id for page_id, res in results.items() if res.found]
    missing = [page_id for page_id, res in results.items() if not res.found]
    return {"ok": not missing, "found": found, "missing": missing}
