"""HTTP helpers shared by the remote and GitHub sources (stdlib urllib)."""
from __future__ import annotations

import json
import logging
import socket
from typing import Any, Dict, Mapping, Optional, Type
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from zcc.core.exceptions import (
    FetchError,
    InvalidJsonError,
    PackNotFoundError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def _is_rate_limited(exc: HTTPError) -> bool:
    if exc.code == 429:
        return True
    if exc.code == 403:
        headers = exc.headers or {}
        return str(headers.get("X-RateLimit-Remaining", "")).strip() == "0"
    return False


def fetch_text(
    url: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT,
    not_found: Type[PackNotFoundError] = PackNotFoundError,
    not_found_message: Optional[str] = None,
) -> str:
    """GET ``url`` and return the decoded body.

    No retries. Errors map onto the zcc taxonomy:

    - 404 -> ``not_found`` (``PackNotFoundError`` or a subclass)
    - 429, or 403 with ``X-RateLimit-Remaining: 0`` -> ``RateLimitError``
    - any other HTTP error, connection error or timeout -> ``FetchError``
    """
    req = Request(url, headers=dict(headers or {}), method="GET")
    logger.debug("GET %s", url)
    try:
        with urlopen(req, timeout=timeout) as resp:
            raw = resp.read()
    except HTTPError as exc:
        if exc.code == 404:
            raise not_found(not_found_message or f"Not found: {url}", context={"url": url}) from exc
        if _is_rate_limited(exc):
            raise RateLimitError(
                f"Rate limit exceeded fetching {url}", url=url, status=exc.code
            ) from exc
        raise FetchError(
            f"HTTP {exc.code} fetching {url}: {exc.reason}", url=url, status=exc.code
        ) from exc
    except (URLError, socket.timeout, TimeoutError) as exc:
        reason = getattr(exc, "reason", exc)
        raise FetchError(f"Failed to fetch {url}: {reason}", url=url) from exc
    return raw.decode("utf-8")


def parse_json_text(text: str, *, url: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidJsonError(
            f"Invalid JSON from {url}: {exc.msg}", context={"url": url}
        ) from exc


def build_headers(*, user_agent: str, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    headers = {"User-Agent": user_agent}
    if extra:
        headers.update(extra)
    return headers


__all__ = ["DEFAULT_TIMEOUT", "fetch_text", "parse_json_text", "build_headers"]
