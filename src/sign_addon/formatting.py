from __future__ import annotations

import json
import posixpath
from typing import Any
from urllib.parse import urlsplit

REDACTED = "<REDACTED>"
SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "set-cookie"})


def format_response(response: Any, max_length: int = 500) -> str:
    """Render a response body for logs and error messages."""
    pretty = response
    if isinstance(pretty, (dict, list)):
        try:
            pretty = json.dumps(pretty)
        except (TypeError, ValueError):
            pretty = repr(pretty)
    if isinstance(pretty, bytes):
        pretty = pretty.decode("utf-8", errors="replace")
    pretty = str(pretty)
    if len(pretty) > max_length:
        pretty = pretty[:max_length] + "..."
    return pretty


def get_url_basename(url: str) -> str:
    """Return the file name a URL points at, without its query string."""
    path = urlsplit(url).path
    return posixpath.basename(path).split("?")[0]


def _redact_headers(headers: dict[Any, Any]) -> dict[Any, Any]:
    return {
        key: REDACTED if str(key).lower() in SENSITIVE_HEADERS else redact(value)
        for key, value in headers.items()
    }


def redact(obj: Any) -> Any:
    """Return a copy of ``obj`` with credential headers masked at any depth."""
    if isinstance(obj, dict):
        cleaned = {}
        for key, value in obj.items():
            if key == "headers" and isinstance(value, dict):
                cleaned[key] = _redact_headers(value)
            else:
                cleaned[key] = redact(value)
        return cleaned
    if isinstance(obj, list):
        return [redact(item) for item in obj]
    if isinstance(obj, tuple):
        return tuple(redact(item) for item in obj)
    return obj
