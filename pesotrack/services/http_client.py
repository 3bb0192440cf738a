from __future__ import annotations

"""Lightweight JSON-over-HTTP client with retry.

Uses stdlib urllib; the identity adapter is the only caller. Transport
failures (DNS, refused connection, timeout, 5xx) are retried with
exponential backoff. A 4xx answer is a definitive rejection and is raised
immediately with its decoded body so callers can read the error code.
"""
import json
import time
import urllib.request
import urllib.error
from typing import Any, Dict, Optional


class HttpError(Exception):
    pass


class HttpStatusError(HttpError):
    def __init__(self, status: int, body: Dict[str, Any]):
        self.status = status
        self.body = body
        super().__init__(f"HTTP {status}")


def _decode(raw: bytes) -> Dict[str, Any]:
    data = json.loads(raw.decode("utf-8")) if raw else {}
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    return data


def post_json(
    url: str,
    payload: Dict[str, Any],
    *,
    timeout: float = 5.0,
    retries: int = 2,
    backoff: float = 0.5,
) -> Dict[str, Any]:
    body = json.dumps(payload).encode("utf-8")
    last_err: Optional[Exception] = None
    for attempt in range(retries + 1):
        req = urllib.request.Request(
            url,
            data=body,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp:  # nosec B310
                return _decode(resp.read())
        except urllib.error.HTTPError as e:
            if e.code < 500:
                try:
                    detail = _decode(e.read())
                except ValueError:
                    detail = {}
                raise HttpStatusError(e.code, detail) from e
            last_err = e
        except (
            urllib.error.URLError,
            TimeoutError,
            ValueError,
        ) as e:  # ValueError for JSON decode
            last_err = e
        if attempt == retries:
            break
        time.sleep(backoff * (2**attempt))
    raise HttpError(f"Failed to POST JSON to {url}: {last_err}")
