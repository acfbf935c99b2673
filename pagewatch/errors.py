from __future__ import annotations


class InvalidArgument(ValueError):
    pass


class TransientFetchError(RuntimeError):
    pass


class FatalFetchError(RuntimeError):
    pass


class PlanError(ValueError):
    pass


class TimeoutExceeded(AssertionError):
    """Raised when the target never showed up on the page before the timeout."""

    def __init__(self, url: str, timeout_s: int, target: str, last_body: str) -> None:
        self.url = url
        self.timeout_s = timeout_s
        self.target = target
        self.last_body = last_body
        super().__init__(failure_message(url, timeout_s, target, last_body))


def failure_message(url: str, timeout_s: int, target: str, last_body: str) -> str:
    if last_body.strip():
        seen = f"{last_body} must contain string: "
    else:
        seen = "Empty webpage does not contain string: "
    return f"Timeout {timeout_s}s was reached for {url}. {seen}`{target}'"
