from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx

from ..config import Settings
from ..errors import BadResponseError
from ..formatting import redact
from .auth import issue_token

logger = logging.getLogger(__name__)

_ABSOLUTE_URL = re.compile(r"^http", re.IGNORECASE)


class AmoHttpClient:
    """Authenticated HTTP access to the add-ons API.

    Every request carries a freshly issued JWT and asks for JSON. The
    underlying ``httpx.AsyncClient`` is created on first use unless one is
    passed in.
    """

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        token_issuer: Callable[[str, str, int], str] = issue_token,
    ) -> None:
        self.settings = settings
        self._client = client
        self._owns_client = client is None
        self._issue_token = token_issuer

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(proxy=self.settings.proxy_server)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "AmoHttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def absolute_url(self, url: str) -> str:
        """Prefix relative API paths with the configured API URL prefix."""
        if not _ABSOLUTE_URL.match(url):
            url = self.settings.api_url_prefix + url
        return url

    def configure_request(self, method: str, url: str, **request_kwargs: Any) -> dict[str, Any]:
        """Build ``httpx`` request arguments with auth headers and timeout applied."""
        conf: dict[str, Any] = {**self.settings.request_config, **request_kwargs}
        if not url:
            raise ValueError("request URL was not specified")
        conf["method"] = method.upper()
        conf["url"] = self.absolute_url(str(url))

        token = self._issue_token(
            self.settings.api_key,
            self.settings.api_secret,
            self.settings.api_jwt_expires_in,
        )
        conf["timeout"] = self.settings.request_timeout
        conf["headers"] = {
            "Authorization": f"JWT {token}",
            "Accept": "application/json",
            **(conf.get("headers") or {}),
        }
        return conf

    async def request(
        self,
        method: str,
        url: str,
        *,
        throw_on_bad_response: bool = True,
        **request_kwargs: Any,
    ) -> tuple[httpx.Response, Any]:
        """Send an API request and return the response with its decoded body."""
        conf = self.configure_request(method, url, **request_kwargs)
        self.debug(f"[API] {conf['method']} request:", _loggable(conf))

        response = await self.client.request(conf.pop("method"), conf.pop("url"), **conf)
        body: Any = response.text

        if throw_on_bad_response and not 200 <= response.status_code < 300:
            raise BadResponseError(
                str(response.request.url), response.status_code, body, dict(response.headers)
            )

        content_type = response.headers.get("content-type", "")
        if content_type.split(";")[0].strip() == "application/json":
            try:
                body = json.loads(body) if body else None
            except ValueError as e:
                logger.warning(f"Failed to parse JSON response from server: {e}")

        self.debug(
            f"[API] {method.upper()} response:",
            {
                "status": response.status_code,
                "headers": dict(response.headers),
                "response": body,
            },
        )
        return response, body

    async def get(self, url: str, **kwargs: Any) -> tuple[httpx.Response, Any]:
        return await self.request("get", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> tuple[httpx.Response, Any]:
        return await self.request("post", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> tuple[httpx.Response, Any]:
        return await self.request("put", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> tuple[httpx.Response, Any]:
        return await self.request("patch", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> tuple[httpx.Response, Any]:
        return await self.request("delete", url, **kwargs)

    @asynccontextmanager
    async def stream(self, method: str, url: str, **kwargs: Any) -> AsyncIterator[httpx.Response]:
        """Open a streaming response; the body is read by the caller."""
        conf = self.configure_request(method, url, **kwargs)
        self.debug(f"[API] {conf['method']} stream:", _loggable(conf))
        async with self.client.stream(conf.pop("method"), conf.pop("url"), **conf) as response:
            yield response

    def debug(self, message: str, *details: Any) -> None:
        """Log request details with credentials masked, if debug logging is on."""
        if not self.settings.debug_logging:
            return
        shown = " ".join(repr(redact(d)) for d in details)
        logger.debug(f"[sign-addon] {message} {shown}")


def _loggable(conf: dict[str, Any]) -> dict[str, Any]:
    shown = {k: v for k, v in conf.items() if k not in ("files", "content")}
    if "files" in conf:
        shown["files"] = sorted(conf["files"])
    return shown
