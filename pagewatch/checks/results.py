from __future__ import annotations

from dataclasses import dataclass

NOT_MEASURED = -1


@dataclass
class PollResult:
    found: bool
    elapsed_ms: int = NOT_MEASURED
    attempts: int = 0
    last_body: str = ""
    error: str | None = None
