from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from pagewatch.errors import PlanError
from pagewatch.models import PollRequest, WaitPlan

OVERRIDABLE = (
    "timeout_s",
    "measure_latency",
    "poll_interval_s",
    "connect_timeout_s",
    "read_timeout_s",
)


def load_plan(path: Path) -> WaitPlan:
    if not path.exists():
        raise PlanError(f"Missing wait plan at {path}")

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        raise PlanError(f"Cannot parse wait plan {path}: {exc}") from exc

    try:
        plan = WaitPlan.model_validate(data)
    except ValidationError as exc:
        raise PlanError(f"Invalid wait plan {path}: {exc}") from exc

    # Ensure unique IDs
    seen = set()
    for page in plan.pages:
        if page.id in seen:
            raise PlanError(f"Duplicate page id: {page.id}")
        seen.add(page.id)

    return plan


def apply_defaults(plan: WaitPlan) -> dict[str, PollRequest]:
    """
    Produce one poll request per page id, page values winning over defaults.
    Insertion order follows the plan file.
    """
    out: dict[str, PollRequest] = {}
    d = plan.defaults.model_dump()

    for page in plan.pages:
        pd = page.model_dump()
        fields = {"url": str(page.url), "target": pd["target"]}
        for key in OVERRIDABLE:
            fields[key] = pd[key] if pd[key] is not None else d[key]
        out[page.id] = PollRequest.create(**fields)

    return out
