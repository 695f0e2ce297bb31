"""
HTTP helpers.

The country dataset is the only thing this package downloads; weather, news and
timezone services belong to downstream consumers.

Design goals:
- Small surface area (GET JSON).
- Deterministic defaults (timeout + User-Agent).
- Raise on non-2xx so callers decide how to fail.
"""

from __future__ import annotations

from typing import Any

import httpx


DEFAULT_USER_AGENT = "globepick/0.1.0 (+https://local)"


def get_json(
    url: str,
    *,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout_seconds: float = 15,
) -> Any:
    """GET `url` and return the decoded JSON response.

    Raises:
        httpx.HTTPError: On transport errors or non-2xx status codes.
        ValueError: If the response body is not valid JSON.
    """
    request_headers = {"User-Agent": DEFAULT_USER_AGENT}
    if headers:
        request_headers.update(headers)

    with httpx.Client(timeout=timeout_seconds, follow_redirects=True) as client:
        resp = client.get(url, params=params, headers=request_headers)
        resp.raise_for_status()
        return resp.json()
