"""Stand-in for ``urllib.request.urlopen`` used by the network sources."""
from __future__ import annotations

import base64
import io
import json
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from urllib.error import HTTPError, URLError

Body = Union[str, bytes, Exception]


class FakeResponse:
    def __init__(self, body: bytes) -> None:
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc: Any) -> None:
        return None


class FakeUrlopen:
    """Serve canned responses by exact URL; unknown URLs answer 404."""

    def __init__(self) -> None:
        self.routes: Dict[str, Tuple[int, Body, Dict[str, str]]] = {}
        self.requests: List[Any] = []

    def add(self, url: str, body: Body, *, status: int = 200, headers: Optional[Mapping[str, str]] = None) -> None:
        self.routes[url] = (status, body, dict(headers or {}))

    def add_json(self, url: str, data: Any, **kwargs: Any) -> None:
        self.add(url, json.dumps(data), **kwargs)

    def urls(self) -> List[str]:
        return [r.full_url for r in self.requests]

    def __call__(self, req: Any, timeout: Optional[float] = None) -> FakeResponse:
        self.requests.append(req)
        url = req.full_url
        if url not in self.routes:
            raise HTTPError(url, 404, "Not Found", {}, io.BytesIO(b""))
        status, body, headers = self.routes[url]
        if isinstance(body, Exception):
            raise body
        if status >= 400:
            raise HTTPError(url, status, "Error", headers, io.BytesIO(b""))
        return FakeResponse(body.encode("utf-8") if isinstance(body, str) else body)


def github_file(text: str) -> Dict[str, Any]:
    """A contents-API file object."""
    return {
        "type": "file",
        "encoding": "base64",
        "content": base64.b64encode(text.encode("utf-8")).decode("ascii"),
    }


def connection_refused() -> URLError:
    return URLError("Connection refused")
