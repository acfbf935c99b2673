from __future__ import annotations

from typing import Literal

import requests

from pagewatch.errors import FatalFetchError, TransientFetchError

ErrorKind = Literal["retryable", "fatal"]

ACCEPT_HEADERS = {"Accept": "*/*"}

# Permanent problems with the request itself; retrying cannot fix them.
FATAL_ERRORS = (
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
    requests.exceptions.InvalidHeader,
)

RETRYABLE_ERRORS = (
    requests.ConnectionError,
    requests.Timeout,
    requests.HTTPError,
    requests.exceptions.ChunkedEncodingError,
    requests.exceptions.ContentDecodingError,
    requests.TooManyRedirects,
)


def classify_error(exc: BaseException) -> ErrorKind:
    if isinstance(exc, TransientFetchError):
        return "retryable"
    if isinstance(exc, FATAL_ERRORS):
        return "fatal"
    if isinstance(exc, RETRYABLE_ERRORS):
        return "retryable"
    # Any other transport hiccup from requests is treated like a dropped connection.
    if isinstance(exc, requests.RequestException):
        return "retryable"
    return "fatal"


def fetch_page(url: str, connect_timeout_s: float, read_timeout_s: float) -> str:
    """Fetch ``url`` once and return the whole body decoded as UTF-8.

    Raises ``TransientFetchError`` for failures worth another attempt and
    ``FatalFetchError`` for ones that will never succeed.
    """
    try:
        resp = requests.get(
            url,
            headers=ACCEPT_HEADERS,
            timeout=(connect_timeout_s, read_timeout_s),
        )
        try:
            resp.raise_for_status()
            return resp.content.decode("utf-8", errors="replace")
        finally:
            resp.close()
    except requests.RequestException as exc:
        detail = f"{exc.__class__.__name__}: {exc}"
        if classify_error(exc) == "fatal":
            raise FatalFetchError(f"Cannot fetch {url}: {detail}") from exc
        raise TransientFetchError(detail) from exc
