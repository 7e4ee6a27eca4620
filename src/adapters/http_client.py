"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and redirect policy for every request.
- Eases testing: a mock transport can be injected.
"""

from __future__ import annotations

from typing import Any

import httpx

from core.config import AppSettings


def build_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    **kwargs: Any,
) -> httpx.Client:
    """Create an `httpx.Client` with safe defaults.

    Redirects are never followed: an AASA file must be served directly from
    the domain it describes.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json, application/pkcs7-mime;q=0.9, */*;q=0.8",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=False,
        headers=headers,
        **kwargs,
    )
